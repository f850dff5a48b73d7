"""
-------------
evspool.store
-------------

Creates the event store of the process: the bounded on-disk store for both identities, instrumented with the
primary store metrics.
"""
from logging import getLogger

from evspool.config import StoreConfig
from evspool.diskstore import BoundedEventStore
from evspool.metrics import InstrumentedEventStore
from evspool.paths import FileLocator
from evspool.storeapi import StoreIdentity


log = getLogger(__name__)


def create_store(config=None, notifier=None, error_reporter=None, clock=None):
    """Creates new event store.

    Create the store once per process and share it with its collaborators.

    :param config: :class:`evspool.config.StoreConfig`, the store configuration. Defaults are used if not given.
    :param notifier: :class:`evspool.observers.Notifier` for the store notifications.
    :param error_reporter: :class:`evspool.errors.ErrorReporter`, sink for the recovered errors.
    :param clock: ``function`` returning the current time in milliseconds, used for the metrics.

    Returns :class:`evspool.metrics.InstrumentedEventStore`, or a plain :class:`evspool.diskstore.BoundedEventStore`
    if ``config.instrument`` is ``False``.
    """
    config = config or StoreConfig()
    locator = FileLocator(config.data_dir, prefix=config.file_prefix)
    store = BoundedEventStore(locator,
                              capacity=config.capacity,
                              capacities={identity: config.capacity_for(identity) for identity in StoreIdentity},
                              notifier=notifier,
                              error_reporter=error_reporter,
                              verify_delete=config.verify_delete,
                              clock=clock)
    log.info('Event store at %s, capacity %d', locator.root_dir, config.capacity)
    if config.instrument:
        return InstrumentedEventStore(store)
    return store
