import tempfile

from evspool.config import StoreConfig
from evspool.diskstore import BoundedEventStore
from evspool.metrics import InstrumentedEventStore
from evspool.model import Event
from evspool.storeapi import StoreIdentity
from evspool.store import create_store


def test_create_store():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = create_store(StoreConfig(data_dir=tmpdir, capacity=2))

        assert isinstance(store, InstrumentedEventStore)
        assert store.store.locator.root_dir == tmpdir
        assert store.store.capacity == 2

        store.persist(StoreIdentity.PRIMARY, [Event('a'), Event('b'), Event('c')])
        assert store.count(StoreIdentity.PRIMARY) == 2
        # file_r of the existing collection, then file_w
        assert store.count(StoreIdentity.MONITOR) == 2
        assert store.dropped_total == 1


def test_create_store_not_instrumented():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = create_store(StoreConfig(data_dir=tmpdir, instrument=False, verify_delete=True,
                                         capacities={'monitor': 10}))

        assert isinstance(store, BoundedEventStore)
        assert store.verify_delete is True
        assert store.capacity_for(StoreIdentity.MONITOR) == 10
        assert store.capacity_for(StoreIdentity.PRIMARY) == 500
        assert store.capacities == {StoreIdentity.PRIMARY: 500, StoreIdentity.MONITOR: 10}
