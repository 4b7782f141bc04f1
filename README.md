# miningcompanion

A small library that looks after an Alephium full node used for mining.
It talks to the node's REST API and takes care of the chores around mining:

- creating or restoring the mining wallet and unlocking it;
- keeping the node's miner addresses in line with the wallet's addresses;
- waiting until the node is in sync with at least one peer;
- sweeping mined funds from the mining wallet to another address at a fixed
  frequency, waiting for each transaction to be confirmed;
- tracking balances, locked balances and UTXO counts of chosen addresses as
  metrics in the Prometheus text format.

## Installation

```
pip install miningcompanion
```

## Amounts

`miningcompanion.alph` handles ALPH amounts exactly, as integer counts of the
smallest coin unit (10^18 per ALPH). `Alph` supports `+` and `-` with other
amounts, `*` and `//` with integers, and ordering comparisons.

```python
from miningcompanion.alph import from_alph_string, from_coin_string

amount = from_alph_string("10.1") + from_alph_string("2.02")
print(amount)           # 12120000000000000000
print(amount.pretty())  # 12.12ALPH
print(amount.float_alph())

small = from_coin_string("12")
print(small.pretty())   # 12
```

Invalid amount strings raise `ValueError`. Amounts convert to and from their
JSON form (a quoted integer string) with `Alph.to_json` and `from_json`.
`to_nano_alph`, `random_alph_amount` and `random_nano_alph_amount` are also
available.

## Talking to the node

```python
from miningcompanion.node_client import NodeClient
from miningcompanion.mining import MiningHandler

client = NodeClient("http://localhost:12973", timeout=30)
handler = MiningHandler(
    client,
    wallet_name="miner",
    wallet_password="password",
    wallet_mnemonic="",
    wallet_mnemonic_passphrase="",
    print_mnemonic=True,
)
handler.create_and_unlock_wallet()
handler.update_miners_addresses()
handler.wait_for_node_in_sync()
```

Failed API calls raise `NodeApiError`, whose `status_code` holds the HTTP
status when the node answered. With `print_mnemonic=True`, the mnemonic of a
newly created wallet is written to the log at INFO level.

`MiningHandler.ensure_mining(stop_event, interval)` repeats the miner address
update and the sync wait every `interval` seconds (five minutes by default).

## Sweeping and metrics

```python
import threading
from miningcompanion.metrics import Metrics
from miningcompanion.transfer import TransferHandler
from miningcompanion.balance_stats import AddressBalanceStats

metrics = Metrics(namespace="alephium", subsystem="companion")
stop = threading.Event()

transfer = TransferHandler(
    client, "miner", "password", "", "target-address",
    "1000000000000000000", 3600, True, metrics,
)
stats = AddressBalanceStats(client, ["target-address"], metrics)

threading.Thread(target=transfer.handle, args=(stop,), daemon=True).start()
threading.Thread(target=stats.run, args=(stop, 60), daemon=True).start()

print(metrics.render())
```

`TransferHandler.transfer()` sweeps once and returns each submitted
transaction with the hash of the block that confirmed it; if another sweep is
still running it returns an empty list straight away. The minimum amount is
given in coins and a non-numeric value raises `ValueError`.

`Metrics.render()` returns the current values in the Prometheus text
exposition format. Setting the event passed as `stop_event` ends the
long-running loops.

## What it does not do

This is a library only. It has no command to start it, reads no configuration
from the environment, and runs no HTTP server: serving `Metrics.render()` or a
health check over HTTP, and running the loops together, is left to the
application that uses it.

## Running the tests

```
pip install "miningcompanion[test]"
pytest
```