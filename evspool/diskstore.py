"""
-----------------
evspool.diskstore
-----------------

Bounded implementation of the :class:`evspool.storeapi.EventStore`.

Each store identity owns exactly one data file. Every write reads the existing collection, appends the new events,
drops the oldest events above the capacity bound and writes the whole collection back. The files are written
atomically, so a reader never sees a partially written collection.

The store keeps two pieces of process-lifetime state:

* a skip flag per identity (:class:`SkipCheckCache`), set when the data file is known to be absent, so reads can
  return an empty collection without touching the disk;
* the total number of evicted events (:class:`EvictionCounter`), published to the ``events-dumped`` observers.

Example:

.. code-block:: python

    from evspool.diskstore import BoundedEventStore
    from evspool.paths import FileLocator
    from evspool.storeapi import StoreIdentity
    from evspool.model import Event

    store = BoundedEventStore(FileLocator('./data'), capacity=3)
    store.persist(StoreIdentity.PRIMARY, [Event('a'), Event('b')])
    store.persist(StoreIdentity.PRIMARY, [Event('c'), Event('d')])

    print([e.name for e in store.retrieve(StoreIdentity.PRIMARY)])  # ['b', 'c', 'd']
    print(store.dropped_total)  # 1
"""
import os
from os.path import basename, dirname, exists
from shutil import move
from tempfile import NamedTemporaryFile
from threading import Lock, RLock
from logging import getLogger

from evspool.config import DEFAULT_CAPACITY
from evspool.errors import ErrorReporter
from evspool.model import EventSerializer, EventParser, now_millis
from evspool.observers import Notifier, COLLECTION_UPDATED, EVENTS_DUMPED
from evspool.storeapi import (EventStore,
                              StoreIdentity,
                              ErrorKind,
                              ReadResult,
                              WriteResult,
                              EventReadException,
                              EventWriteException)


log = getLogger(__name__)


class SkipCheckCache:
    """Per-identity flags marking the data files known to be absent.

    All flags start as ``False``: a disk check is needed until proven otherwise.
    """
    def __init__(self):
        self.flags = {identity: False for identity in StoreIdentity}
        self.lock = Lock()

    def can_skip(self, identity):
        with self.lock:
            return self.flags[identity]

    def mark_empty(self, identity):
        with self.lock:
            self.flags[identity] = True

    def mark_dirty(self, identity):
        with self.lock:
            self.flags[identity] = False


class EvictionCounter:
    """Cumulative number of events dropped because of the capacity bound, across all identities."""

    def __init__(self):
        self.total = 0
        self.lock = Lock()

    def add(self, count):
        """Adds ``count`` evicted events. Returns the new cumulative total."""
        with self.lock:
            self.total += count
            return self.total


def atomic_write(path, data):
    """Writes ``data`` to ``path`` atomically.

    The data is first written to a temporary file in the same directory and synced to disk, then the temporary file
    is renamed as the target file. On failure the temporary file is removed and the error is raised.

    :param path: ``str``, the target file path.
    :param data: ``bytes``, the data to write.
    """
    tmpf = NamedTemporaryFile(dir=dirname(path), prefix='.%s.' % basename(path), delete=False)
    try:
        tmpf.write(data)
        tmpf.flush()
        os.fsync(tmpf.fileno())
        tmpf.close()
        move(tmpf.name, path)
    except Exception:
        tmpf.close()
        if exists(tmpf.name):
            os.remove(tmpf.name)
        raise


class BoundedEventStore(EventStore):
    """Event store that keeps at most ``capacity`` events per identity, evicting the oldest first.

    The operations on one identity are serialized with a per-identity lock. Operations on different identities
    never block each other.

    No operation raises. Failures are reported to the ``error_reporter`` and the operation degrades to a safe
    default: an empty collection, a zero count or not persisting the events.

    :param locator: :class:`evspool.paths.FileLocator`, resolves the data file of each identity.
    :param capacity: ``int``, maximum number of retained events, shared by both identities.
    :param capacities: ``dict``, optional per-identity capacity overrides.
    :param serializer: :class:`evspool.model.EventSerializer` used to encode the collections.
    :param parser: :class:`evspool.model.EventParser` used to decode the collections.
    :param notifier: :class:`evspool.observers.Notifier` receiving ``collection-updated`` and ``events-dumped``.
    :param error_reporter: :class:`evspool.errors.ErrorReporter`, the sink for recovered errors.
    :param verify_delete: ``bool``, when ``True`` the skip flag is set on clear only if the data file is confirmed to
        be gone. By default the flag is set even if the delete failed, so a following read may miss a file that
        still exists.
    :param clock: ``function``, returns the current time in milliseconds. Used to time the reads reported to
        ``on_read`` hooks.

    Notifications are published after the identity's lock is released, so subscribers may call back into the store.
    """
    def __init__(self, locator, capacity=DEFAULT_CAPACITY, capacities=None, serializer=None, parser=None,
                 notifier=None, error_reporter=None, verify_delete=False, clock=None):
        self.locator = locator
        self.capacity = capacity
        self.capacities = dict(capacities or {})
        self.serializer = serializer or EventSerializer()
        self.parser = parser or EventParser()
        self.notifier = notifier or Notifier()
        self.error_reporter = error_reporter or ErrorReporter()
        self.verify_delete = verify_delete
        self.clock = clock or now_millis
        self.skip_cache = SkipCheckCache()
        self.evictions = EvictionCounter()
        self.locks = {identity: RLock() for identity in StoreIdentity}

    @property
    def dropped_total(self):
        return self.evictions.total

    def capacity_for(self, identity):
        return self.capacities.get(identity, self.capacity)

    def can_skip(self, identity):
        """``True`` if the data file of ``identity`` is known to be absent."""
        return self.skip_cache.can_skip(identity)

    def clear(self, identity):
        notices = []
        with self.locks[identity]:
            self._clear(identity, notices)
        self._publish(notices)

    def persist(self, identity, events, on_read=None):
        """See :meth:`evspool.storeapi.EventStore.persist`.

        :param on_read: ``function``, optional hook called as ``on_read(start, end, size)`` if the existing collection
            was read from disk (the skip flag was not set).
        """
        events = list(events)
        if not events:
            return WriteResult(success=False, size=0, error=None)

        notices = []
        with self.locks[identity]:
            result = self._persist(identity, events, on_read, notices)
        self._publish(notices)
        return result

    def retrieve(self, identity, on_read=None):
        """See :meth:`evspool.storeapi.EventStore.retrieve`.

        :param on_read: ``function``, optional hook called as ``on_read(start, end, size)`` if the collection was read
            from disk (the skip flag was not set).
        """
        notices = []
        with self.locks[identity]:
            result = self._read(identity, on_read=on_read)
            if result.error is ErrorKind.SERIALIZATION_FAILURE:
                self._clear(identity, notices)
        self._publish(notices)
        return result.events

    def count(self, identity):
        with self.locks[identity]:
            return len(self._read(identity, honor_skip=False).events)

    def _persist(self, identity, events, on_read, notices):
        path = self.locator.path_for(identity)
        existing = self._read(identity, on_read=on_read)
        merged = self._trim(identity, existing.events + events, notices)

        try:
            data = self.serializer.serialize_events(merged)
        except EventWriteException as e:
            return self._write_failed(identity, e)

        self._clear(identity, notices)
        try:
            self.locator.ensure_dir()
            atomic_write(path, data)
        except OSError as e:
            return self._write_failed(identity, e)

        self.skip_cache.mark_dirty(identity)
        log.debug('Persisted %d %s events (%d new) to %s', len(merged), identity.value, len(events), path)
        return WriteResult(success=True, size=len(merged), error=None)

    def _read(self, identity, honor_skip=True, on_read=None):
        if honor_skip and self.skip_cache.can_skip(identity):
            return ReadResult(events=[], error=None)

        start = self.clock() if on_read else None
        result = self._read_path(self.locator.path_for(identity))
        if on_read:
            on_read(start, self.clock(), len(result.events))
        return result

    def _read_path(self, path):
        try:
            events = self._read_file(path)
        except FileNotFoundError:
            return ReadResult(events=[], error=ErrorKind.FILE_ABSENT)
        except (OSError, EventReadException) as e:
            self._report('Failed to read from disk: %s' % path, e)
            return ReadResult(events=[], error=ErrorKind.SERIALIZATION_FAILURE)
        return ReadResult(events=events, error=None)

    def _read_file(self, path):
        with open(path, 'rb') as stream:
            return self.parser.parse_events(stream)

    def _clear(self, identity, notices):
        path = self.locator.path_for(identity)
        error = None
        try:
            os.remove(path)
            log.debug('Removed %s', path)
        except FileNotFoundError:
            pass
        except OSError as e:
            error = ErrorKind.DELETE_FAILURE
            self._report('Failed to delete %s' % path, e)

        if not self.verify_delete or not exists(path):
            self.skip_cache.mark_empty(identity)
        else:
            log.warning('%s still exists after clear, disk checks stay enabled for %s events.', path,
                        identity.value)
        notices.append((COLLECTION_UPDATED, {'identity': identity}))
        return error

    def _trim(self, identity, events, notices):
        capacity = self.capacity_for(identity)
        if len(events) <= capacity:
            return events
        difference = len(events) - capacity
        total = self.evictions.add(difference)
        log.warning('Dropping %d %s events over the capacity of %d. Dropped so far: %d', difference,
                    identity.value, capacity, total)
        notices.append((EVENTS_DUMPED, {'dropped_total': total}))
        return events[difference:]

    def _publish(self, notices):
        for topic, payload in notices:
            self.notifier.publish(topic, **payload)

    def _write_failed(self, identity, err):
        self.skip_cache.mark_dirty(identity)
        self._report('Failed to persist to disk', err)
        return WriteResult(success=False, size=0, error=ErrorKind.WRITE_FAILURE)

    def _report(self, message, err=None):
        self.error_reporter.report(self.__class__.__name__, message, err)
