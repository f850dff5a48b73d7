from unittest import mock

from evspool.observers import Notifier, COLLECTION_UPDATED, EVENTS_DUMPED


def test_publish_in_subscription_order():
    notifier = Notifier()
    calls = []
    notifier.subscribe(EVENTS_DUMPED, lambda dropped_total: calls.append(('first', dropped_total)))
    notifier.subscribe(EVENTS_DUMPED, lambda dropped_total: calls.append(('second', dropped_total)))

    notifier.publish(EVENTS_DUMPED, dropped_total=4)

    assert calls == [('first', 4), ('second', 4)]


def test_publish_only_to_topic():
    notifier = Notifier()
    callback = mock.MagicMock()
    notifier.subscribe(COLLECTION_UPDATED, callback)

    notifier.publish(EVENTS_DUMPED, dropped_total=1)
    notifier.publish('unknown')

    assert callback.call_count == 0


def test_unsubscribe():
    notifier = Notifier()
    callback = mock.MagicMock()
    notifier.subscribe(COLLECTION_UPDATED, callback)
    notifier.unsubscribe(COLLECTION_UPDATED, callback)
    notifier.unsubscribe(EVENTS_DUMPED, callback)

    notifier.publish(COLLECTION_UPDATED, identity='primary')

    assert callback.call_count == 0


def test_failing_callback_does_not_stop_delivery():
    notifier = Notifier()
    failing = mock.MagicMock(side_effect=Exception('boom'))
    callback = mock.MagicMock()
    notifier.subscribe(COLLECTION_UPDATED, failing)
    notifier.subscribe(COLLECTION_UPDATED, callback)

    notifier.publish(COLLECTION_UPDATED, identity='primary')

    callback.assert_called_once_with(identity='primary')
