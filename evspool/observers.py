"""
-----------------
evspool.observers
-----------------

Synchronous notification channel for the collaborators of the stores.
"""
from logging import getLogger
from threading import Lock


log = getLogger(__name__)

COLLECTION_UPDATED = 'collection-updated'
"""Published when a persisted collection is cleared. Payload: ``identity``."""

EVENTS_DUMPED = 'events-dumped'
"""Published when events are evicted. Payload: ``dropped_total``, the cumulative number of evicted events."""


class Notifier:
    """Delivers notifications to subscribed callbacks, synchronously and in subscription order.

    Errors raised by callbacks are logged and do not affect the publisher.
    """
    def __init__(self):
        self.subscribers = {}
        self.lock = Lock()

    def subscribe(self, topic, callback):
        """Subscribes ``callback`` to ``topic``. The callback receives the payload as keyword arguments."""
        with self.lock:
            self.subscribers.setdefault(topic, []).append(callback)

    def unsubscribe(self, topic, callback):
        with self.lock:
            callbacks = self.subscribers.get(topic, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def publish(self, topic, **payload):
        with self.lock:
            callbacks = list(self.subscribers.get(topic, []))
        for callback in callbacks:
            try:
                callback(**payload)
            except Exception as e:
                log.warning('Error in %s subscriber %s: %s', topic, callback, e)
