"""Counters and gauges of the companion, rendered in the Prometheus text format."""

from __future__ import annotations

import math
import threading
from decimal import Decimal


def _fq_name(namespace: str, subsystem: str, name: str) -> str:
    if not name:
        return ""
    return "_".join(part for part in (namespace, subsystem, name) if part)


def _format_value(value: float) -> str:
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    number = Decimal(repr(value)).normalize()
    sign, digits, exponent = number.as_tuple()
    prefix = "-" if sign else ""
    point = exponent + len(digits) - 1
    if point < -4 or point >= 6:
        rest = "".join(str(d) for d in digits[1:])
        mantissa = str(digits[0]) + (f".{rest}" if rest else "")
        exp_sign = "-" if point < 0 else "+"
        return f"{prefix}{mantissa}e{exp_sign}{abs(point):02d}"
    return prefix + format(abs(number), "f")


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _escape_label(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class Counter:
    """A monotonically increasing value."""

    def __init__(self, name: str, help: str) -> None:
        self.name = name
        self.help = help
        self._value = 0.0
        self._lock = threading.Lock()

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    def inc(self, amount: float = 1.0) -> None:
        if amount < 0:
            raise ValueError("counter cannot decrease in value")
        with self._lock:
            self._value += amount

    def _lines(self) -> list[str]:
        return [
            f"# HELP {self.name} {_escape_help(self.help)}",
            f"# TYPE {self.name} counter",
            f"{self.name} {_format_value(self.value)}",
        ]


class GaugeVec:
    """A family of gauges keyed by the value of a single label."""

    def __init__(self, name: str, help: str, label_name: str) -> None:
        self.name = name
        self.help = help
        self.label_name = label_name
        self._values: dict[str, float] = {}
        self._lock = threading.Lock()

    def set(self, label_value: str, value: float) -> None:
        with self._lock:
            self._values[label_value] = float(value)

    def get(self, label_value: str) -> float:
        """The gauge for label_value; an unset gauge reads 0."""
        with self._lock:
            return self._values.get(label_value, 0.0)

    def _lines(self) -> list[str]:
        with self._lock:
            samples = sorted(self._values.items())
        if not samples:
            return []
        lines = [
            f"# HELP {self.name} {_escape_help(self.help)}",
            f"# TYPE {self.name} gauge",
        ]
        lines.extend(
            f'{self.name}{{{self.label_name}="{_escape_label(label)}"}} {_format_value(value)}'
            for label, value in samples
        )
        return lines


class Metrics:
    """All metrics exported by the companion."""

    def __init__(self, namespace: str = "", subsystem: str = "") -> None:
        def name(base: str) -> str:
            return _fq_name(namespace, subsystem, base)

        self.transfer_run = Counter(name("transfer_runs_count"), "Number of transfer runs")
        self.tx_amount = Counter(name("transfer_amount_total"), "Amount transferred")
        self.address_total_balance = GaugeVec(
            name("total_balance"), "Total balance of the address", "address"
        )
        self.address_locked_balance = GaugeVec(
            name("locked_balance"), "Locked balance of the address", "address"
        )
        self.address_utxos = GaugeVec(
            name("utxos"), "Number of UTXOs of the address", "address"
        )

    def render(self) -> str:
        """The metrics in the Prometheus text exposition format, sorted by name."""
        families = sorted(
            (
                self.transfer_run,
                self.tx_amount,
                self.address_total_balance,
                self.address_locked_balance,
                self.address_utxos,
            ),
            key=lambda family: family.name,
        )
        lines = [line for family in families for line in family._lines()]
        return "".join(f"{line}\n" for line in lines)