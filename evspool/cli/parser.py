"""
------------------
evspool.cli.parser
------------------


evspool CLI main :mod:`argparse` parser.
"""
import argparse


def get_parent_parser(name, desc=''):
    """Creates the main (parent) :class:`argparse.ArgumentParser` for the evspool CLI.

    Defines the main argument options such as the configuration file, the data directory, verbosity level etc.

    :param str name: the name of the program.
    :param str desc: program description.

    Returns the configured :class:`argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(prog=name, description=desc)

    parser.add_argument('-v', '--version',
                        help='Print program version and exit', action='store_true')
    parser.add_argument('-c', '--config', dest='config', help='Path to YAML configuration file', default=None)
    parser.add_argument('-d', '--data-dir', dest='data_dir', help='Directory holding the persisted events',
                        default=None)

    parser.add_argument('--verbose', dest='verbose', action='store_true',
                        help='Verbose output.')

    return parser
