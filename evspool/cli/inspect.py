"""
-------------------
evspool.cli.inspect
-------------------

Commands for inspecting and clearing the persisted events: ``count``, ``dump`` and ``clear``.
"""
import json
from logging import getLogger

from evspool.config import load_config
from evspool.store import create_store
from evspool.storeapi import StoreIdentity


log = getLogger(__name__)


def get_parsers(subparsers):
    """Configures the subparsers for the ``count``, ``dump`` and ``clear`` commands.

    :param argparse.ArgumentParser subparsers: subparsers for commands.

    Returns a ``dict`` of command name to the configured :class:`argparse.ArgumentParser`.
    """
    parsers = {}

    parser = subparsers.add_parser('count', help='Print the number of persisted events')
    parser.add_argument('-m', '--monitor', action='store_true', help='Use the monitor events store')
    parsers['count'] = parser

    parser = subparsers.add_parser('dump', help='Print the persisted events')
    parser.add_argument('-m', '--monitor', action='store_true', help='Use the monitor events store')
    parsers['dump'] = parser

    parser = subparsers.add_parser('clear', help='Remove the persisted events')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-m', '--monitor', action='store_true', help='Clear the monitor events store')
    group.add_argument('-a', '--all', dest='all', action='store_true', help='Clear both stores')
    parsers['clear'] = parser

    return parsers


def get_store(args):
    """Creates the (not instrumented) store configured by the CLI arguments.

    :param argparse.Namespace args: parsed CLI arguments.
    """
    config = load_config(args.config)
    if args.data_dir:
        config.data_dir = args.data_dir
    config.instrument = False
    return create_store(config)


def _identity(args):
    return StoreIdentity.MONITOR if args.monitor else StoreIdentity.PRIMARY


def format_event(event):
    """Formats an event as a single line of text.

    :param evspool.model.Event event: the event to format.
    """
    return '%d %s %s %s' % (event.timestamp, event.type, event.name, json.dumps(event.properties, sort_keys=True))


def run_count(args, out):
    store = get_store(args)
    print(store.count(_identity(args)), file=out)


def run_dump(args, out):
    store = get_store(args)
    for event in store.retrieve(_identity(args)):
        print(format_event(event), file=out)


def run_clear(args, out):
    store = get_store(args)
    if args.all:
        identities = list(StoreIdentity)
    else:
        identities = [_identity(args)]
    for identity in identities:
        store.clear(identity)
        log.info('Cleared %s events', identity.value)
        print('cleared', identity.value, file=out)
