"""Tests for CartStore."""

import copy
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import NetworkTimeout

from src.errors import NotFoundError, StoreUnavailableError
from src.services.cart_store import CartStore

KEYCHAIN_ID = ObjectId("5c1a1e6f2d7b3a0d4c8e9f01")
SOAP_ID = ObjectId("5c1a1e6f2d7b3a0d4c8e9f04")
DELETED_ID = ObjectId("5c1a1e6f2d7b3a0d4c8e9f99")


def _get(doc, path):
    for part in path.split("."):
        if not isinstance(doc, dict):
            return None
        doc = doc.get(part)
    return doc


def run_pipeline(docs, pipeline, collections):
    """Evaluate the stages the cart sum pipeline uses, with MongoDB's null handling."""
    rows = copy.deepcopy(docs)
    for stage in pipeline:
        ((op, args),) = stage.items()
        if op == "$match":
            rows = [row for row in rows if all(row.get(k) == v for k, v in args.items())]
        elif op == "$unwind":
            field = args["path"].lstrip("$")
            unwound = []
            for row in rows:
                values = row.get(field) or []
                if not values and args.get("preserveNullAndEmptyArrays"):
                    unwound.append({k: v for k, v in row.items() if k != field})
                unwound.extend({**row, field: value} for value in values)
            rows = unwound
        elif op == "$lookup":
            foreign = collections[args["from"]]
            for row in rows:
                local = _get(row, args["localField"])
                row[args["as"]] = [d for d in foreign if local is not None and d[args["foreignField"]] == local]
        elif op == "$group":
            key = args["_id"].lstrip("$")
            factors = [f.lstrip("$") for f in args["cost"]["$sum"]["$multiply"]]
            totals = {}
            for row in rows:
                totals.setdefault(row.get(key), 0)
                values = [_get(row, f) for f in factors]
                if None not in values:
                    totals[row.get(key)] += values[0] * values[1]
            rows = [{"_id": k, "cost": v} for k, v in totals.items()]
        else:
            raise AssertionError(f"unexpected stage {op}")
    return rows


class TestCartStore:
    @pytest.fixture
    def souvenirs(self):
        return [
            {"_id": KEYCHAIN_ID, "name": "Eiffel Keychain", "price": 5},
            {"_id": SOAP_ID, "name": "Lavender Soap", "price": 6.5},
        ]

    @pytest.fixture
    def carts(self):
        return [
            {"_id": ObjectId(), "login": "alice", "items": [{"souvenirId": KEYCHAIN_ID, "amount": 2}]},
            {
                "_id": ObjectId(),
                "login": "bob",
                "items": [{"souvenirId": KEYCHAIN_ID, "amount": 1}, {"souvenirId": SOAP_ID, "amount": 2}],
            },
            {
                "_id": ObjectId(),
                "login": "carol",
                "items": [{"souvenirId": DELETED_ID, "amount": 4}, {"souvenirId": SOAP_ID, "amount": 1}],
            },
            {"_id": ObjectId(), "login": "dave", "items": []},
        ]

    @pytest.fixture
    def collection(self, carts, souvenirs):
        collection = MagicMock()
        collection.aggregate.side_effect = lambda pipeline: iter(
            run_pipeline(carts, pipeline, {"souvenirs": souvenirs})
        )
        return collection

    @pytest.fixture
    def store(self, collection):
        return CartStore(collection, "souvenirs")

    def test_single_item(self, store):
        """Test price times amount for one line item."""
        assert store.get_cart_sum("alice") == 10

    def test_several_items(self, store):
        """Test line items are summed."""
        assert store.get_cart_sum("bob") == 18

    def test_dangling_item_contributes_nothing(self, store):
        """Test an item pointing at a deleted souvenir is skipped, not an error."""
        assert store.get_cart_sum("carol") == 6.5

    def test_empty_cart_is_zero(self, store):
        """Test a cart without items sums to 0."""
        assert store.get_cart_sum("dave") == 0

    def test_missing_cart_not_found(self, store):
        """Test a login without a cart raises NotFoundError."""
        with pytest.raises(NotFoundError):
            store.get_cart_sum("mallory")

    def test_single_round_trip(self, store, collection):
        """Test the sum is one aggregation on the carts collection."""
        store.get_cart_sum("alice")

        collection.aggregate.assert_called_once()
        pipeline = collection.aggregate.call_args.args[0]
        assert pipeline[0] == {"$match": {"login": "alice"}}
        assert pipeline[2]["$lookup"]["from"] == "souvenirs"

    def test_store_unavailable(self, collection, store):
        """Test transport failures surface as StoreUnavailableError."""
        collection.aggregate.side_effect = NetworkTimeout("timed out")

        with pytest.raises(StoreUnavailableError):
            store.get_cart_sum("alice")
