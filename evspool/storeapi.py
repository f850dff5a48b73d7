"""
----------------
evspool.storeapi
----------------

Event Store API
^^^^^^^^^^^^^^^

Defines the store identities, the result values and the exceptions used when implementing a bounded event store.
"""
from abc import abstractmethod
from collections import namedtuple
from enum import Enum


class StoreIdentity(Enum):
    """The two independent event collections kept on disk."""

    PRIMARY = 'primary'
    """App events, produced by the host application."""

    MONITOR = 'monitor'
    """Internal monitoring events, produced by the SDK itself."""


class ErrorKind(Enum):
    """Kinds of failures a store operation may recover from."""

    FILE_ABSENT = 'file_absent'
    SERIALIZATION_FAILURE = 'serialization_failure'
    WRITE_FAILURE = 'write_failure'
    DELETE_FAILURE = 'delete_failure'


ReadResult = namedtuple('ReadResult', ['events', 'error'])
"""Outcome of reading a persisted collection.
"""

ReadResult.events.__doc__ = """
    ``list`` of :class:`evspool.model.Event`, the decoded events, oldest first. Empty on failure.
"""

ReadResult.error.__doc__ = """
    :class:`ErrorKind` or ``None``. ``FILE_ABSENT`` is informational and still yields an empty collection.
"""

WriteResult = namedtuple('WriteResult', ['success', 'size', 'error'])
"""Outcome of a ``persist`` call.
"""

WriteResult.success.__doc__ = """
    ``bool``, ``True`` if the collection was written to disk.
"""

WriteResult.size.__doc__ = """
    ``int``, number of events in the persisted collection after the write (0 if nothing was written).
"""

WriteResult.error.__doc__ = """
    :class:`ErrorKind` or ``None``.
"""


class EventStore:
    """EventStore is the basic interface for interaction with the persisted events.

    Every operation takes a :class:`StoreIdentity` and never touches the collection of the other identity.
    None of the operations raise: failures are reported and the operation degrades to a safe default.
    An instance of this class is thread-safe.
    """
    @abstractmethod
    def clear(self, identity):
        """Removes the persisted collection for ``identity``. A missing file is not an error.

        This method does not return any value.
        """
        pass

    @abstractmethod
    def persist(self, identity, events):
        """Appends ``events`` to the persisted collection, evicting the oldest events above the capacity bound.

        :param identity: :class:`StoreIdentity`, the target collection.
        :param events: ``list`` of :class:`evspool.model.Event`, the events to append, oldest first.

        Returns a :class:`WriteResult`.
        """
        pass

    @abstractmethod
    def retrieve(self, identity):
        """Reads the persisted collection.

        Returns a ``list`` of :class:`evspool.model.Event`, oldest first. Empty if there are no persisted events or
        the data could not be read.
        """
        pass

    @abstractmethod
    def count(self, identity):
        """Returns the number of persisted events, always checking the disk.
        """
        pass


class EventStoreException(Exception):
    """General store error.
    """
    pass


class EventWriteException(EventStoreException):
    """Represents an error while writing events to the underlying storage.
    """
    pass


class EventEncodeException(EventWriteException):
    """Raised when an event cannot be encoded.
    """
    pass


class EventReadException(EventStoreException):
    """Represents an error while reading events from the underlying storage.
    """
    pass


class EventDecodeException(EventReadException):
    """Raised when the persisted data is corrupted and cannot be decoded.
    """
    pass
