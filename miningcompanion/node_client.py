"""A small client for the parts of the node REST API the companion uses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

DEFAULT_TIMEOUT = 30.0


class NodeApiError(Exception):
    """A request to the node failed or was refused."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class WalletStatus:
    """Name and lock state of a wallet."""

    wallet_name: str
    locked: bool


@dataclass(frozen=True)
class AddressBalance:
    """Balance of an address as reported by the node, amounts in coins."""

    balance: str
    locked_balance: str
    utxo_num: int


@dataclass(frozen=True)
class SweepTx:
    """A transaction submitted by a sweep."""

    tx_id: str
    from_group: int
    to_group: int


def _segment(value: str) -> str:
    return quote(value, safe="")


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    return f"{response.status_code} {response.reason or ''}".strip()


class NodeClient:
    """Calls the wallet, miner, info, transaction and address endpoints of a node."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = self._session.request(
                method,
                self.base_url + path,
                json=body,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NodeApiError(str(exc)) from exc
        if not response.ok:
            raise NodeApiError(_error_message(response), response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise NodeApiError(
                f"invalid JSON in response to {method} {path}", response.status_code
            ) from exc

    def wallet_exists(self, wallet_name: str) -> bool:
        """Whether the node knows the wallet; only a 404 means it does not."""
        try:
            self._request("GET", f"/wallets/{_segment(wallet_name)}")
        except NodeApiError as exc:
            if exc.status_code == 404:
                return False
            raise
        return True

    def restore_wallet(
        self,
        wallet_name: str,
        password: str,
        mnemonic: str,
        mnemonic_passphrase: str = "",
        is_miner: bool = True,
    ) -> str:
        """Restore a wallet from its mnemonic and return its name."""
        body: dict[str, Any] = {
            "password": password,
            "mnemonic": mnemonic,
            "walletName": wallet_name,
            "isMiner": is_miner,
        }
        if mnemonic_passphrase:
            body["mnemonicPassphrase"] = mnemonic_passphrase
        result = self._request("PUT", "/wallets", body)
        return result["walletName"]

    def create_wallet(
        self,
        wallet_name: str,
        password: str,
        mnemonic_passphrase: str = "",
        is_miner: bool = True,
    ) -> tuple[str, str]:
        """Create a wallet and return its name and its new mnemonic."""
        body: dict[str, Any] = {
            "password": password,
            "walletName": wallet_name,
            "isMiner": is_miner,
        }
        if mnemonic_passphrase:
            body["mnemonicPassphrase"] = mnemonic_passphrase
        result = self._request("POST", "/wallets", body)
        return result["walletName"], result["mnemonic"]

    def unlock_wallet(
        self, wallet_name: str, password: str, mnemonic_passphrase: str = ""
    ) -> None:
        body: dict[str, Any] = {"password": password}
        if mnemonic_passphrase:
            body["mnemonicPassphrase"] = mnemonic_passphrase
        self._request("POST", f"/wallets/{_segment(wallet_name)}/unlock", body)

    def wallet_status(self, wallet_name: str) -> WalletStatus:
        result = self._request("GET", f"/wallets/{_segment(wallet_name)}")
        return WalletStatus(wallet_name=result["walletName"], locked=bool(result["locked"]))

    def wallet_addresses(self, wallet_name: str) -> list[str]:
        result = self._request("GET", f"/wallets/{_segment(wallet_name)}/addresses")
        return [info["address"] for info in result.get("addresses", [])]

    def miner_addresses(self) -> list[str]:
        result = self._request("GET", "/miners/addresses")
        return list(result.get("addresses", []))

    def update_miner_addresses(self, addresses: list[str]) -> None:
        self._request("PUT", "/miners/addresses", {"addresses": list(addresses)})

    def inter_clique_peer_info(self) -> list[dict[str, Any]]:
        result = self._request("GET", "/infos/inter-clique-peer-info")
        return list(result or [])

    def sweep_all(self, wallet_name: str, to_address: str) -> list[SweepTx]:
        """Sweep every address of the wallet to to_address."""
        result = self._request(
            "POST",
            f"/wallets/{_segment(wallet_name)}/sweep-all-addresses",
            {"toAddress": to_address},
        )
        return [
            SweepTx(tx_id=tx["txId"], from_group=tx["fromGroup"], to_group=tx["toGroup"])
            for tx in result.get("results", [])
        ]

    def transaction_confirmed_block(
        self, tx_id: str, from_group: int, to_group: int
    ) -> str | None:
        """The hash of the block holding the transaction, or None if unconfirmed."""
        result = self._request(
            "GET",
            "/transactions/status",
            params={"txId": tx_id, "fromGroup": from_group, "toGroup": to_group},
        )
        if result.get("type") == "Confirmed":
            return result["blockHash"]
        return None

    def address_balance(self, address: str) -> AddressBalance:
        result = self._request("GET", f"/addresses/{_segment(address)}/balance")
        return AddressBalance(
            balance=result["balance"],
            locked_balance=result["lockedBalance"],
            utxo_num=int(result["utxoNum"]),
        )