"""Tests for the key-value stores and ledger persistence."""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from expense_manager.ledger import LedgerState
from expense_manager.models import TransactionType
from expense_manager.services.storage import (
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueLedgerStorage,
    StorageError,
)

from tests.conftest import make_transaction


def _state() -> LedgerState:
    return LedgerState(
        transactions=(
            make_transaction(
                2, TransactionType.SAVING, "0.005", "Added to savings",
                denominations={Decimal("0.005"): 1},
            ),
            make_transaction(
                1, TransactionType.HOUSE, "10.5", "Rent",
                denominations={Decimal("10"): 1, Decimal("0.5"): 1},
            ),
        ),
        savings_balance=Decimal("2"),
    )


class TestInMemoryStore:
    """Tests for the dictionary-backed store."""

    def test_get_set(self):
        """Test basic get/set and missing keys."""
        store = InMemoryKeyValueStore({"a": "1"})
        assert store.get("a") == "1"
        assert store.get("b") is None
        store.set("b", "2")
        assert store.snapshot() == {"a": "1", "b": "2"}

    def test_set_many(self):
        """Test writing several keys at once."""
        store = InMemoryKeyValueStore()
        store.set_many({"x": "1", "y": "2"})
        assert store.snapshot() == {"x": "1", "y": "2"}

    def test_snapshot_is_a_copy(self):
        """Test callers cannot mutate the store through a snapshot."""
        store = InMemoryKeyValueStore()
        store.snapshot()["x"] = "1"
        assert store.get("x") is None


class TestJsonFileStore:
    """Tests for the JSON-file-backed store."""

    def test_missing_file_reads_empty(self, tmp_path):
        """Test a fresh path behaves like an empty store."""
        store = JsonFileKeyValueStore(tmp_path / "storage.json")
        assert store.get("expenses") is None

    def test_persists_across_instances(self, tmp_path):
        """Test data written by one store is seen by the next."""
        path = tmp_path / "nested" / "storage.json"
        JsonFileKeyValueStore(path).set_many({"expenses": "[]", "savings": "1.000"})

        reopened = JsonFileKeyValueStore(path)
        assert reopened.get("savings") == "1.000"
        assert reopened.get("expenses") == "[]"

    def test_no_temporary_file_left(self, tmp_path):
        """Test the atomic write cleans up after itself."""
        path = tmp_path / "storage.json"
        JsonFileKeyValueStore(path).set("savings", "0.000")
        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]

    def test_set_keeps_other_keys(self, tmp_path):
        """Test writing one key leaves the rest alone."""
        store = JsonFileKeyValueStore(tmp_path / "storage.json")
        store.set("a", "1")
        store.set("b", "2")
        assert json.loads(store.path.read_text(encoding="utf-8")) == {"a": "1", "b": "2"}

    def test_invalid_json(self, tmp_path):
        """Test a garbled file is reported as corrupt."""
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptDataError):
            JsonFileKeyValueStore(path).get("expenses")

    @pytest.mark.parametrize("content", ['["a", "b"]', '{"savings": 2}'])
    def test_wrong_shape(self, tmp_path, content):
        """Test files that are not an object of strings are corrupt."""
        path = tmp_path / "storage.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(CorruptDataError):
            JsonFileKeyValueStore(path).get("savings")

    def test_corrupt_is_a_storage_error(self):
        """Test callers can catch every storage failure with one class."""
        assert issubclass(CorruptDataError, StorageError)


class TestLedgerStorage:
    """Tests for encoding the ledger into the key-value store."""

    def test_round_trip(self, storage):
        """Test save then load reproduces the state exactly."""
        state = _state()
        storage.save(state)
        assert storage.load() == state

    def test_round_trip_through_file(self, tmp_path):
        """Test the same through the JSON file backend."""
        storage = KeyValueLedgerStorage(JsonFileKeyValueStore(tmp_path / "storage.json"))
        state = _state()
        storage.save(state)

        reloaded = KeyValueLedgerStorage(JsonFileKeyValueStore(tmp_path / "storage.json")).load()
        assert reloaded == state
        assert reloaded.transactions[0].amount == Decimal("0.005")

    def test_raw_layout(self, storage, store):
        """Test the two keys and the string encoding of amounts."""
        storage.save(_state())
        raw = store.snapshot()

        assert set(raw) == {"expenses", "savings"}
        assert raw["savings"] == "2.000"

        records = json.loads(raw["expenses"])
        assert [r["id"] for r in records] == [2, 1]
        assert records[1]["amount"] == "10.500"
        assert records[1]["type"] == "house"
        assert records[0]["type"] == "saving"

    def test_custom_keys(self, store):
        """Test the key names are configurable."""
        storage = KeyValueLedgerStorage(store, transactions_key="txns", savings_key="bal")
        storage.save(_state())
        assert set(store.snapshot()) == {"txns", "bal"}
        assert storage.load() == _state()

    def test_empty_store_loads_empty_state(self, storage):
        """Test a first run starts from nothing."""
        state = storage.load()
        assert state.transactions == ()
        assert state.savings_balance == Decimal("0")

    def test_blank_values_load_empty_state(self, store, storage):
        """Test empty strings are treated as absent."""
        store.set_many({"expenses": "", "savings": "  "})
        assert storage.load() == LedgerState()

    def test_loads_browser_data(self, store, storage):
        """Test data written with plain JS numbers still loads."""
        store.set_many({
            "expenses": json.dumps([
                {
                    "id": 1741996800000,
                    "date": "2025-03-15T00:00:00.000Z",
                    "type": "from-saving",
                    "amount": 3.25,
                    "description": "Taxi",
                },
            ]),
            "savings": "1.75",
        })

        state = storage.load()

        txn = state.transactions[0]
        assert txn.id == 1741996800000
        assert txn.type is TransactionType.FROM_SAVING
        assert txn.amount == Decimal("3.250")
        assert txn.date == datetime(2025, 3, 15, tzinfo=timezone.utc)
        assert txn.denominations == {}
        assert state.savings_balance == Decimal("1.750")

    @pytest.mark.parametrize("expenses, savings", [
        ("{not json", "0"),
        ('{"id": 1}', "0"),
        ('[{"id": 1}]', "0"),
        ('[{"id": 1, "date": "2025-03-15T00:00:00Z", "type": "holiday", '
         '"amount": "1", "description": "x"}]', "0"),
        ("[]", "lots"),
        ("[]", "-1"),
        ("[]", "NaN"),
        ("[]", "Infinity"),
        ('[{"id": 1, "date": "2025-03-15T00:00:00Z", "type": "house", '
         '"amount": "1e30", "description": "x"}]', "0"),
        ('[{"id": 1, "date": "2025-03-15T00:00:00Z", "type": "house", '
         '"amount": 1e30, "description": "x"}]', "0"),
        ("[]", "1e30"),
    ])
    def test_corrupt_data(self, store, storage, expenses, savings):
        """Test every kind of bad stored value is reported as corrupt."""
        store.set_many({"expenses": expenses, "savings": savings})
        with pytest.raises(CorruptDataError):
            storage.load()

    def test_duplicate_ids_are_corrupt(self, store, storage):
        """Test two records sharing an id are rejected."""
        record = {
            "id": 7,
            "date": "2025-03-15T00:00:00Z",
            "type": "house",
            "amount": "1",
            "description": "x",
        }
        store.set_many({"expenses": json.dumps([record, record]), "savings": "0"})
        with pytest.raises(CorruptDataError, match="Duplicate"):
            storage.load()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
