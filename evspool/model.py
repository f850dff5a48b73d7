"""
-------------
evspool.model
-------------

Event record and the plain-text codec used to persist collections of events.

A persisted collection looks like this::

    events: 2
    event: 74 54 20
    name:Purchase
    type:event
    timestamp:1491580705978
    {"currency": "USD"}
    event: ...

The collection preamble carries the number of events. Each event has its own
preamble with the total, header and content sizes in bytes, followed by the
header lines and the JSON-encoded properties.
"""
import json
from time import time
from collections import namedtuple
from io import StringIO, BytesIO

from evspool.storeapi import EventDecodeException, EventEncodeException


EventPreamble = namedtuple('EventPreamble', ['total', 'header', 'content'])


def now_millis():
    """Current time as integer milliseconds since the epoch."""
    return int(time() * 1000)


class Header:

    def __init__(self, name=None, type=None, timestamp=None):
        self.name = name
        self.type = type
        self.timestamp = timestamp


class Event:
    """A single telemetry event.

    The store treats events as opaque values, it only sequences and bounds them.

    :param name: ``str``, the event name.
    :param properties: ``dict``, JSON-serializable properties of the event.
    :param type: ``str``, type tag, ``'event'`` for app events and ``'monitor'`` for internal monitoring events.
    :param timestamp: ``int``, milliseconds since the epoch. Defaults to now.
    """
    def __init__(self, name, properties=None, type='event', timestamp=None):
        self.name = name
        self.properties = properties or {}
        self.type = type
        self.timestamp = timestamp if timestamp is not None else now_millis()

    def __eq__(self, obj):
        if not isinstance(obj, Event):
            return False
        return (self.name == obj.name and self.type == obj.type and
                self.timestamp == obj.timestamp and self.properties == obj.properties)

    def __hash__(self):
        return hash((self.name, self.type, self.timestamp))

    def __repr__(self):
        return 'Event<%s:%s @ %s>' % (self.type, self.name, self.timestamp)


class EventSerializer:

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def serialize(self, event):
        """Serializes a single event to ``str``."""
        hdr = self._serialize_header(event)
        try:
            content = json.dumps(event.properties)
        except (TypeError, ValueError) as e:
            raise EventEncodeException('Properties of %s are not serializable: %s' % (event.name, e)) from e
        hdr_size = len(hdr.encode(self.encoding))
        cnt_size = len(content.encode(self.encoding))
        event_str = 'event: %d %d %d\n' % (hdr_size + cnt_size, hdr_size, cnt_size)
        event_str += hdr
        event_str += content
        return event_str

    def serialize_events(self, events):
        """Serializes an ordered collection of events.

        :param events: ``list`` of :class:`Event`.

        Returns the encoded ``bytes``. Raises :class:`evspool.storeapi.EventEncodeException` if any of the events
        cannot be encoded.
        """
        out = BytesIO()
        out.write(('events: %d\n' % len(events)).encode(self.encoding))
        for event in events:
            out.write(self.serialize(event).encode(self.encoding))
            out.write(b'\n')
        return out.getvalue()

    def _serialize_header(self, event):
        for value in (event.name, event.type):
            if '\n' in str(value):
                raise EventEncodeException('Header values cannot contain new lines: %r' % value)
        hdr = ''
        hdr += 'name:' + str(event.name) + '\n'
        hdr += 'type:' + str(event.type) + '\n'
        try:
            hdr += 'timestamp:%d' % event.timestamp + '\n'
        except (TypeError, ValueError, OverflowError) as e:
            raise EventEncodeException('Invalid timestamp of %s: %r' % (event.name, event.timestamp)) from e
        return hdr


class EventParser:

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def _decode(self, data):
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise EventDecodeException('Invalid encoding: %s' % e) from e

    def parse_header(self, hdr_size, stream):
        data = stream.read(hdr_size)
        if len(data) != hdr_size:
            raise EventDecodeException('Invalid read size from buffer. The stream is either unreadable or corrupted. '
                                       '%d read, expected %d' % (len(data), hdr_size))
        header = Header()
        sio = StringIO(self._decode(data))

        ln = sio.readline()
        while ln:
            ln = ln.rstrip('\n')
            if ':' not in ln:
                raise EventDecodeException('Invalid header')
            idx = ln.index(':')
            prop = ln[0:idx]
            value = ln[idx+1:]
            if prop == 'name':
                header.name = value
            elif prop == 'type':
                header.type = value
            elif prop == 'timestamp':
                try:
                    header.timestamp = int(value)
                except ValueError as e:
                    raise EventDecodeException('Invalid timestamp %s' % value) from e
            else:
                raise EventDecodeException('Unknown property in header %s' % prop)
            ln = sio.readline()
        sio.close()
        if header.name is None or header.type is None or header.timestamp is None:
            raise EventDecodeException('Incomplete header')
        return header

    def _parse_sizes(self, line, prefix, expected):
        if not line:
            raise EventDecodeException('Unexpected end of stream')
        line = self._decode(line).strip()
        if not line.startswith(prefix):
            raise EventDecodeException('Invalid preamble line')
        values = line[len(prefix):].split()
        if len(values) != expected:
            raise EventDecodeException('Invalid preamble values')
        try:
            sizes = [int(v) for v in values]
        except ValueError as e:
            raise EventDecodeException('Invalid preamble values') from e
        if any(size < 0 for size in sizes):
            raise EventDecodeException('Negative size in preamble')
        return sizes

    def parse_preamble(self, stream):
        total, header, content = self._parse_sizes(stream.readline(), 'event:', 3)
        if total != header + content:
            raise EventDecodeException('Inconsistent preamble sizes')
        return EventPreamble(total=total, header=header, content=content)

    def parse_event(self, stream):
        preamble = self.parse_preamble(stream)
        header = self.parse_header(preamble.header, stream)
        content = stream.read(preamble.content)
        if len(content) != preamble.content:
            raise EventDecodeException('Invalid content size. The stream is either unreadable or corrupted.')
        try:
            properties = json.loads(self._decode(content))
        except ValueError as e:
            raise EventDecodeException('Invalid event properties: %s' % e) from e
        if not isinstance(properties, dict):
            raise EventDecodeException('Event properties must be a mapping')
        if stream.read(1) != b'\n':
            raise EventDecodeException('Missing event terminator')

        return Event(name=header.name, properties=properties, type=header.type, timestamp=header.timestamp)

    def parse_events(self, stream):
        """Parses a whole collection of events from a binary stream.

        :param stream: binary stream (:class:`io.BytesIO` or a file opened in ``'rb'`` mode).

        Returns a ``list`` of :class:`Event` in the order they were written. Raises
        :class:`evspool.storeapi.EventDecodeException` if the data is corrupted.
        """
        count, = self._parse_sizes(stream.readline(), 'events:', 1)
        events = [self.parse_event(stream) for _ in range(count)]
        if stream.read(1):
            raise EventDecodeException('Unexpected data after the last event')
        return events
