import threading

import pytest

from miningcompanion.mining import (
    MiningHandler,
    has_same_addresses,
    is_synced,
    is_synced_with_at_least_one_peer,
    wait_until_synced,
)
from miningcompanion.node_client import NodeApiError, WalletStatus


class FakeClient:
    def __init__(
        self,
        exists=True,
        locked=False,
        miner_addresses=None,
        miner_error=None,
        wallet_addresses=None,
        peer_answers=None,
    ):
        self.exists = exists
        self.locked = locked
        self._miner_addresses = miner_addresses or []
        self.miner_error = miner_error
        self._wallet_addresses = wallet_addresses or []
        self.peer_answers = list(peer_answers or [[]])
        self.calls = []

    def wallet_exists(self, wallet_name):
        self.calls.append(("exists", wallet_name))
        return self.exists

    def wallet_status(self, wallet_name):
        self.calls.append(("status", wallet_name))
        return WalletStatus(wallet_name, self.locked)

    def restore_wallet(self, wallet_name, password, mnemonic, mnemonic_passphrase, is_miner):
        self.calls.append(("restore", wallet_name, mnemonic, is_miner))
        return wallet_name

    def create_wallet(self, wallet_name, password, mnemonic_passphrase, is_miner):
        self.calls.append(("create", wallet_name, is_miner))
        return wallet_name, "some words"

    def unlock_wallet(self, wallet_name, password, mnemonic_passphrase):
        self.calls.append(("unlock", wallet_name))

    def miner_addresses(self):
        if self.miner_error:
            raise self.miner_error
        return self._miner_addresses

    def wallet_addresses(self, wallet_name):
        return self._wallet_addresses

    def update_miner_addresses(self, addresses):
        self.calls.append(("update", list(addresses)))

    def inter_clique_peer_info(self):
        if len(self.peer_answers) > 1:
            return self.peer_answers.pop(0)
        return self.peer_answers[0]


def _handler(client, mnemonic=""):
    password = "password"
    return MiningHandler(client, "miner", password, mnemonic, "", False)


def _kinds(client):
    return [call[0] for call in client.calls]


def test_has_same_addresses():
    assert has_same_addresses(["a", "b"], ["b", "a"]) is True
    assert has_same_addresses(["a"], ["a"]) is False
    assert has_same_addresses(["a", "b"], ["a", "b", "c"]) is False
    assert has_same_addresses(["a", "x"], ["a", "b"]) is False
    assert has_same_addresses([], []) is False


def test_synced_with_peers():
    assert is_synced_with_at_least_one_peer([]) is True
    assert is_synced_with_at_least_one_peer([{"isSynced": False}]) is False
    assert is_synced_with_at_least_one_peer([{"isSynced": False}, {"isSynced": True}]) is True


def test_is_synced_uses_client():
    assert is_synced(FakeClient(peer_answers=[[{"isSynced": False}]])) is False
    assert is_synced(FakeClient(peer_answers=[[{"isSynced": True}]])) is True


def test_wait_until_synced_polls_until_synced():
    client = FakeClient(peer_answers=[[{"isSynced": False}], [{"isSynced": False}], [{"isSynced": True}]])
    assert wait_until_synced(client, 0, threading.Event()) is True
    assert client.peer_answers == [[{"isSynced": True}]]


def test_wait_until_synced_stops_on_event():
    event = threading.Event()
    event.set()
    client = FakeClient(peer_answers=[[{"isSynced": False}]])
    assert wait_until_synced(client, 0, event) is False


def test_existing_unlocked_wallet():
    client = FakeClient(exists=True, locked=False)
    wallet = _handler(client).create_and_unlock_wallet()
    assert wallet == WalletStatus("miner", False)
    assert _kinds(client) == ["exists", "status"]


def test_existing_locked_wallet_is_unlocked():
    client = FakeClient(exists=True, locked=True)
    _handler(client).create_and_unlock_wallet()
    assert _kinds(client) == ["exists", "status", "unlock"]


def test_missing_wallet_restored_from_mnemonic():
    client = FakeClient(exists=False)
    _handler(client, mnemonic="word list").create_and_unlock_wallet()
    assert ("restore", "miner", "word list", True) in client.calls
    assert "create" not in _kinds(client)


def test_missing_wallet_created_without_mnemonic():
    client = FakeClient(exists=False)
    _handler(client).create_and_unlock_wallet()
    assert ("create", "miner", True) in client.calls
    assert "restore" not in _kinds(client)


def test_update_when_addresses_differ():
    client = FakeClient(miner_addresses=["a"], wallet_addresses=["a", "b"])
    _handler(client).update_miners_addresses()
    assert client.calls == [("update", ["a", "b"])]


def test_no_update_when_addresses_match():
    client = FakeClient(miner_addresses=["a", "b"], wallet_addresses=["b", "a"])
    _handler(client).update_miners_addresses()
    assert client.calls == []


def test_unset_miner_addresses_are_tolerated():
    client = FakeClient(
        miner_error=NodeApiError("Miner addresses are not set up", 400),
        wallet_addresses=["a", "b"],
    )
    _handler(client).update_miners_addresses()
    assert client.calls == [("update", ["a", "b"])]


def test_other_miner_errors_propagate():
    client = FakeClient(miner_error=NodeApiError("boom", 500))
    with pytest.raises(NodeApiError):
        _handler(client).update_miners_addresses()


def test_ensure_mining_does_nothing_when_stopped():
    client = FakeClient(miner_addresses=["a"], wallet_addresses=["a", "b"])
    event = threading.Event()
    event.set()
    _handler(client).ensure_mining(event, 0)
    assert client.calls == []


def test_ensure_mining_propagates_errors():
    client = FakeClient(miner_error=NodeApiError("boom", 500))
    with pytest.raises(NodeApiError):
        _handler(client).ensure_mining(threading.Event(), 0)