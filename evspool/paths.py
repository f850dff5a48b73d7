"""
-------------
evspool.paths
-------------

Resolves the location of the persisted collections on disk.
"""
import os
from os.path import join as join_paths, expanduser
from logging import getLogger

from evspool.storeapi import StoreIdentity


log = getLogger(__name__)

DEFAULT_PREFIX = 'com-evspool-sdk'

FILE_SUFFIXES = {
    StoreIdentity.PRIMARY: 'AppEventsPersistedEvents.dat',
    StoreIdentity.MONITOR: 'MonitorEventsPersistedEvents.dat',
}


def default_data_dir():
    """Returns the default private directory for the persisted events.

    Looks up ``EVSPOOL_DATA_DIR`` first, then ``$XDG_DATA_HOME/evspool`` and falls back to
    ``~/.local/share/evspool``.
    """
    env_dir = os.getenv('EVSPOOL_DATA_DIR')
    if env_dir:
        return expanduser(env_dir)
    xdg_dir = os.getenv('XDG_DATA_HOME')
    if xdg_dir:
        return join_paths(expanduser(xdg_dir), 'evspool')
    return join_paths(expanduser('~'), '.local', 'share', 'evspool')


class FileLocator:
    """Maps a :class:`evspool.storeapi.StoreIdentity` to the absolute path of its data file.

    :param root_dir: ``str``, directory holding the data files. Defaults to :func:`default_data_dir`.
    :param prefix: ``str``, prefix of the data file names.
    """
    def __init__(self, root_dir=None, prefix=DEFAULT_PREFIX):
        self.root_dir = os.path.abspath(root_dir or default_data_dir())
        self.prefix = prefix

    def path_for(self, identity):
        """Returns the absolute path (``str``) of the data file for ``identity``."""
        return join_paths(self.root_dir, '%s-%s' % (self.prefix, FILE_SUFFIXES[identity]))

    def ensure_dir(self):
        """Creates the data directory if it does not exist."""
        if not os.path.isdir(self.root_dir):
            log.info('Creating data directory %s', self.root_dir)
            os.makedirs(self.root_dir, exist_ok=True)
