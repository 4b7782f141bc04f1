"""Wallet setup, miner addresses, fund sweeping and balance metrics for an Alephium mining node."""

__version__ = "7.1.2"