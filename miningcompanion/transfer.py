"""Periodically sweeps the mining wallet to a target address."""

from __future__ import annotations

import logging
import threading
import time

from miningcompanion.alph import Alph, from_coin_string
from miningcompanion.metrics import Metrics
from miningcompanion.node_client import NodeClient, SweepTx

logger = logging.getLogger(__name__)


class TransferHandler:
    """Sweeps every address of a wallet to one address and waits for confirmation."""

    confirmation_poll_interval = 5.0

    def __init__(
        self,
        client: NodeClient,
        wallet_name: str,
        wallet_password: str,
        mnemonic_passphrase: str,
        transfer_address: str,
        transfer_min_amount: str,
        transfer_frequency: float,
        immediate: bool,
        metrics: Metrics,
    ) -> None:
        try:
            min_amount = from_coin_string(transfer_min_amount)
        except ValueError:
            raise ValueError(
                f"transferMinAmount {transfer_min_amount} is not a valid ALPH transfer amount"
            ) from None
        self.client = client
        self.wallet_name = wallet_name
        self.wallet_password = wallet_password
        self.mnemonic_passphrase = mnemonic_passphrase
        self.transfer_address = transfer_address
        self.transfer_min_amount: Alph = min_amount
        self.transfer_frequency = transfer_frequency
        self.immediate = immediate
        self.metrics = metrics
        self._lock = threading.Lock()

    def transfer(self) -> list[tuple[SweepTx, str]]:
        """Sweep the wallet once; return each submitted tx with its block hash.

        Returns an empty list without doing anything when another transfer
        is still running.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Another transfer process is still running...")
            return []
        try:
            return self._transfer()
        finally:
            self._lock.release()

    def _transfer(self) -> list[tuple[SweepTx, str]]:
        self.metrics.transfer_run.inc()

        wallet = self.client.wallet_status(self.wallet_name)
        if wallet.locked:
            self.client.unlock_wallet(
                wallet.wallet_name, self.wallet_password, self.mnemonic_passphrase
            )

        confirmed = []
        for tx in self.client.sweep_all(wallet.wallet_name, self.transfer_address):
            logger.info(
                "New tx %s,%d->%d just submitted", tx.tx_id, tx.from_group, tx.to_group
            )
            block_hash = None
            while block_hash is None:
                block_hash = self.client.transaction_confirmed_block(
                    tx.tx_id, tx.from_group, tx.to_group
                )
                time.sleep(self.confirmation_poll_interval)
            logger.info(
                "New tx %s,%d->%d is now included in block %s!",
                tx.tx_id,
                tx.from_group,
                tx.to_group,
                block_hash,
            )
            confirmed.append((tx, block_hash))
        return confirmed

    def handle(self, stop_event: threading.Event | None = None) -> None:
        """Transfer now if immediate, then every transfer_frequency seconds until stopped."""
        stop_event = stop_event or threading.Event()
        if self.immediate:
            self.transfer()
        while not stop_event.wait(self.transfer_frequency):
            self.transfer()