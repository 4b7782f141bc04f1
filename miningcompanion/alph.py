"""Fixed-point ALPH amounts counted in the smallest coin unit."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass

COINS_PER_ALPH = 10**18
COINS_PER_NANO_ALPH = 10**9
NANO_PER_ALPH = 10**9
SYMBOL = "ALPH"

_DECIMALS = 18
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")
_BASE0_RE = re.compile(r"[+-]?[0-9a-fA-FxXoObB_]+")


def _parse_decimal(text: str) -> int:
    if not _DECIMAL_RE.fullmatch(text):
        raise ValueError(f"{text!r} is not a valid decimal integer")
    return int(text)


def _parse_any_base(text: str) -> int:
    """Parse an integer with an optional 0x, 0o, 0b or leading-zero octal prefix."""
    if not _BASE0_RE.fullmatch(text):
        raise ValueError(f"cannot unmarshal {text!r} into an amount")
    sign = ""
    body = text
    if body[:1] in "+-":
        sign, body = body[0], body[1:]
    try:
        if len(body) > 1 and body[0] == "0" and body[1] not in "xXoObB":
            value = int(body, 8)
        else:
            value = int(body, 0)
    except ValueError:
        raise ValueError(f"cannot unmarshal {text!r} into an amount") from None
    return -value if sign == "-" else value


def _euclid_div(dividend: int, divisor: int) -> int:
    """Euclidean division: the remainder is never negative."""
    if divisor > 0:
        return dividend // divisor
    return -(dividend // -divisor)


@dataclass(frozen=True, order=True)
class Alph:
    """An amount of ALPH held as an integer number of coins (1 ALPH = 10**18 coins)."""

    amount: int = 0

    def __add__(self, other: Alph) -> Alph:
        if not isinstance(other, Alph):
            return NotImplemented
        return Alph(self.amount + other.amount)

    def __sub__(self, other: Alph) -> Alph:
        if not isinstance(other, Alph):
            return NotImplemented
        return Alph(self.amount - other.amount)

    def __mul__(self, multiplier: int) -> Alph:
        if not isinstance(multiplier, int):
            return NotImplemented
        return Alph(self.amount * multiplier)

    def __floordiv__(self, divider: int) -> Alph:
        if not isinstance(divider, int):
            return NotImplemented
        return Alph(_euclid_div(self.amount, divider))

    def __str__(self) -> str:
        return str(self.amount)

    def pretty(self) -> str:
        """Human form: whole ALPH above one nano ALPH, raw coins otherwise."""
        if self.amount > COINS_PER_NANO_ALPH:
            text = f"{self.float_alph():.9f}".rstrip("0").rstrip(".")
            return f"{text}{SYMBOL}"
        return str(self.amount)

    def float_alph(self) -> float:
        """The amount in ALPH, truncated to nano-ALPH precision."""
        nano = _euclid_div(self.amount, COINS_PER_NANO_ALPH)
        return float(nano) / float(NANO_PER_ALPH)

    def to_json(self) -> str:
        """JSON form: the coin amount as a quoted string."""
        return f'"{self.amount}"'


def from_alph_string(amount: str) -> Alph:
    """Parse an amount written in ALPH, with up to 18 decimals."""
    parts = amount.split(".")
    if len(parts) == 1:
        return Alph(_parse_decimal(amount) * COINS_PER_ALPH)
    if len(parts) == 2:
        whole, decimals = parts
        return Alph(_parse_decimal(whole + decimals.ljust(_DECIMALS, "0")))
    raise ValueError(f"{amount!r} is not a valid ALPH amount")


def from_coin_string(amount: str) -> Alph:
    """Parse an amount written in coins."""
    return Alph(_parse_decimal(amount))


def from_json(text: str) -> Alph:
    """Parse the JSON form written by Alph.to_json."""
    if len(text) < 2:
        raise ValueError("NaN")
    inner = text[1:-1]
    if inner == "null":
        return Alph()
    return Alph(_parse_any_base(inner))


def random_alph_amount(upper_limit: int) -> Alph:
    """A random amount below upper_limit ALPH with random decimals."""
    unit = random.randrange(upper_limit)
    decimals = random.randrange(NANO_PER_ALPH)
    return from_alph_string(f"{unit}.{decimals}")


def random_nano_alph_amount(upper_limit: int) -> Alph:
    """A random whole number of nano ALPH below upper_limit."""
    nano = random.randrange(upper_limit)
    return Alph(nano * COINS_PER_NANO_ALPH)


def to_nano_alph(alph: Alph) -> int:
    """The amount in whole nano ALPH."""
    return _euclid_div(alph.amount, COINS_PER_NANO_ALPH)