"""Publishes the balances of a set of addresses as gauges."""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from miningcompanion.alph import from_coin_string
from miningcompanion.metrics import Metrics
from miningcompanion.node_client import NodeClient

logger = logging.getLogger(__name__)

DEFAULT_STATS_INTERVAL = 60.0


class AddressBalanceStats:
    """Reads address balances from the node and records them in the metrics."""

    def __init__(self, client: NodeClient, addresses: Iterable[str], metrics: Metrics) -> None:
        self.client = client
        self.addresses = list(addresses)
        self.metrics = metrics

    def collect(self) -> None:
        """Fetch and record the balance of every address once."""
        for address in self.addresses:
            balance = self.client.address_balance(address)
            try:
                total = from_coin_string(balance.balance)
            except ValueError:
                logger.debug("Unparsable balance %r for %s", balance.balance, address)
            else:
                self.metrics.address_total_balance.set(address, total.float_alph())
            try:
                locked = from_coin_string(balance.locked_balance)
            except ValueError:
                logger.debug(
                    "Unparsable locked balance %r for %s", balance.locked_balance, address
                )
            else:
                self.metrics.address_locked_balance.set(address, locked.float_alph())
            self.metrics.address_utxos.set(address, float(balance.utxo_num))

    def run(
        self,
        stop_event: threading.Event | None = None,
        interval: float = DEFAULT_STATS_INTERVAL,
    ) -> None:
        """Collect now, then every interval seconds until stop_event is set."""
        stop_event = stop_event or threading.Event()
        self.collect()
        while not stop_event.wait(interval):
            self.collect()