"""Keeps a mining wallet in place and the node's miner addresses pointing at it."""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable

from miningcompanion.node_client import NodeApiError, NodeClient, WalletStatus

logger = logging.getLogger(__name__)

MINER_ADDRESSES_NOT_SET = "Miner addresses are not set up"
DEFAULT_MINING_CHECK_INTERVAL = 5 * 60.0


def has_same_addresses(miner_addresses: list[str], wallet_addresses: list[str]) -> bool:
    """Whether the miner uses exactly the wallet's addresses (and more than one)."""
    if len(miner_addresses) <= 1 or len(miner_addresses) != len(wallet_addresses):
        return False
    known = set(wallet_addresses)
    return all(address in known for address in miner_addresses)


def is_synced_with_at_least_one_peer(peers: Iterable[dict[str, Any]]) -> bool:
    """True when some peer clique is synced, or when there are no peers at all."""
    peers = list(peers)
    return not peers or any(peer.get("isSynced") for peer in peers)


def is_synced(client: NodeClient) -> bool:
    return is_synced_with_at_least_one_peer(client.inter_clique_peer_info())


def wait_until_synced(
    client: NodeClient,
    sleep_time: float,
    stop_event: threading.Event | None = None,
) -> bool:
    """Poll until the node is synced; False if stop_event was set first."""
    stop_event = stop_event or threading.Event()
    while not stop_event.is_set():
        if is_synced(client):
            return True
        logger.debug("Not synced yet, sleeping %ss", sleep_time)
        if stop_event.wait(sleep_time):
            break
    return False


class MiningHandler:
    """Creates or restores the mining wallet and keeps the miners using it."""

    sync_poll_interval = 30.0

    def __init__(
        self,
        client: NodeClient,
        wallet_name: str,
        wallet_password: str,
        wallet_mnemonic: str = "",
        wallet_mnemonic_passphrase: str = "",
        print_mnemonic: bool = False,
    ) -> None:
        self.client = client
        self.wallet_name = wallet_name
        self.wallet_password = wallet_password
        self.wallet_mnemonic = wallet_mnemonic
        self.wallet_mnemonic_passphrase = wallet_mnemonic_passphrase
        self.print_mnemonic = print_mnemonic

    def create_and_unlock_wallet(self) -> WalletStatus:
        """Make sure the mining wallet exists and is unlocked; return its status."""
        if self.client.wallet_exists(self.wallet_name):
            wallet = self.client.wallet_status(self.wallet_name)
        else:
            logger.info(
                "Wallet %s not found, creating or restoring it now.", self.wallet_name
            )
            if self.wallet_mnemonic:
                name = self.client.restore_wallet(
                    self.wallet_name,
                    self.wallet_password,
                    self.wallet_mnemonic,
                    self.wallet_mnemonic_passphrase,
                    True,
                )
            else:
                name, mnemonic = self.client.create_wallet(
                    self.wallet_name,
                    self.wallet_password,
                    self.wallet_mnemonic_passphrase,
                    True,
                )
                if self.print_mnemonic:
                    logger.info(
                        "[SENSITIVE] The mnemonic of the newly created wallet is [ %s ]. "
                        "This mnemonic will never be printed again, make sure you write "
                        "them down somewhere!",
                        mnemonic,
                    )
            wallet = self.client.wallet_status(name)

        if wallet.locked:
            self.client.unlock_wallet(
                self.wallet_name, self.wallet_password, self.wallet_mnemonic_passphrase
            )
        return wallet

    def update_miners_addresses(self) -> None:
        """Point the miners at the wallet's addresses when they differ."""
        try:
            miner_addresses = self.client.miner_addresses()
        except NodeApiError as exc:
            if not str(exc).startswith(MINER_ADDRESSES_NOT_SET):
                raise
            miner_addresses = []

        wallet_addresses = self.client.wallet_addresses(self.wallet_name)
        if not has_same_addresses(miner_addresses, wallet_addresses):
            logger.debug("Current miner addresses %s", miner_addresses)
            logger.debug("Mining wallet addresses %s", wallet_addresses)
            self.client.update_miner_addresses(wallet_addresses)

    def wait_for_node_in_sync(self, stop_event: threading.Event | None = None) -> bool:
        return wait_until_synced(self.client, self.sync_poll_interval, stop_event)

    def ensure_mining(
        self,
        stop_event: threading.Event | None = None,
        interval: float = DEFAULT_MINING_CHECK_INTERVAL,
    ) -> None:
        """Every interval, refresh miner addresses and wait for sync, until stopped."""
        stop_event = stop_event or threading.Event()
        while not stop_event.wait(interval):
            self.update_miners_addresses()
            self.wait_for_node_in_sync(stop_event)