from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

import pytest

from errors import NotFoundError
from store import ReceiptStore


@pytest.fixture
def store():
    return ReceiptStore()


def test_put_then_get(store):
    store.put("abc", 31)
    for _ in range(5):
        assert store.get("abc") == 31
    assert "abc" in store
    assert len(store) == 1


def test_put_overwrites(store):
    store.put("abc", 31)
    store.put("abc", 28)
    assert store.get("abc") == 28
    assert len(store) == 1


def test_get_unknown_id(store):
    with pytest.raises(NotFoundError) as exc_info:
        store.get("missing")
    assert exc_info.value.message == "Error: receipt id not found (missing)"
    assert exc_info.value.status_code == 404
    assert "missing" not in store


def test_zero_points_are_not_missing(store):
    store.put("empty", 0)
    assert store.get("empty") == 0


def test_concurrent_puts(store):
    receipt_ids = [str(uuid4()) for _ in range(2000)]

    def put(index):
        store.put(receipt_ids[index], index)

    with ThreadPoolExecutor(max_workers=50) as pool:
        list(pool.map(put, range(len(receipt_ids))))

    assert len(store) == len(receipt_ids)
    for index, receipt_id in enumerate(receipt_ids):
        assert store.get(receipt_id) == index
