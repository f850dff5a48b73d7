"""
---------------
evspool.metrics
---------------

Read/write instrumentation of the primary store.

Every read (that was not skipped) and every successful write of the primary store is recorded as a synthetic
``monitor`` event, persisted into the monitor store:

.. code-block:: python

    Event(name='MonitorEvent', type='monitor', properties={
        'monitor_type': 'metric',
        'monitor_name': 'file_r',  # or 'file_w'
        'meta': {'ts': 1528631988123, 'latency': 2, 'size': 17},
    })

The monitor store itself is never instrumented.
"""
from logging import getLogger

from evspool.model import Event, now_millis
from evspool.storeapi import EventStore, StoreIdentity


log = getLogger(__name__)

MONITOR_EVENT_NAME = 'MonitorEvent'
FILE_READ = 'file_r'
FILE_WRITE = 'file_w'


def monitor_event(monitor_name, start, end, size):
    """Builds a synthetic metric event.

    :param monitor_name: ``str``, ``'file_r'`` or ``'file_w'``.
    :param start: ``int``, timestamp (ms) before the operation.
    :param end: ``int``, timestamp (ms) after the operation.
    :param size: ``int``, size of the collection after the operation.
    """
    return Event(name=MONITOR_EVENT_NAME, type='monitor', timestamp=end, properties={
        'monitor_type': 'metric',
        'monitor_name': monitor_name,
        'meta': {'ts': end, 'latency': end - start, 'size': size},
    })


class InstrumentedEventStore(EventStore):
    """Wraps a :class:`evspool.diskstore.BoundedEventStore` and records metrics of its primary collection.

    A ``file_r`` metric is recorded for every read of the primary data file, including the read of the existing
    collection done by ``persist``. The wrapped store decides under its lock whether the read was skipped. A
    ``file_w`` metric is recorded for every successful write.

    :param store: :class:`evspool.diskstore.BoundedEventStore`, the wrapped store.
    :param clock: ``function``, returns the current time in milliseconds. Defaults to the clock of the wrapped store.
    """
    def __init__(self, store, clock=None):
        self.store = store
        self.clock = clock or getattr(store, 'clock', None) or now_millis

    @property
    def dropped_total(self):
        return self.store.dropped_total

    def can_skip(self, identity):
        return self.store.can_skip(identity)

    def clear(self, identity):
        self.store.clear(identity)

    def count(self, identity):
        return self.store.count(identity)

    def retrieve(self, identity):
        if identity is not StoreIdentity.PRIMARY:
            return self.store.retrieve(identity)

        reads = []
        events = self.store.retrieve(identity, on_read=lambda *read: reads.append(read))
        for start, end, size in reads:
            self._emit(FILE_READ, start, end, size)
        return events

    def persist(self, identity, events):
        if identity is not StoreIdentity.PRIMARY:
            return self.store.persist(identity, events)

        reads = []
        start = self.clock()
        result = self.store.persist(identity, events, on_read=lambda *read: reads.append(read))
        end = self.clock()
        for read_start, read_end, size in reads:
            self._emit(FILE_READ, read_start, read_end, size)
        if result.success:
            self._emit(FILE_WRITE, start, end, result.size)
        return result

    def _emit(self, monitor_name, start, end, size):
        log.debug('%s: latency=%dms size=%d', monitor_name, end - start, size)
        # failures are reported by the monitor store itself
        self.store.persist(StoreIdentity.MONITOR, [monitor_event(monitor_name, start, end, size)])
