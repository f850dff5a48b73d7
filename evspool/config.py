"""
--------------
evspool.config
--------------

Store configuration, loaded from a YAML file with environment overrides.

Example configuration file:

.. code-block:: yaml

    store:
      data_dir: /var/lib/myapp/events
      capacity: 500
      capacities:
        monitor: 200
      verify_delete: false
"""
import os
from logging import getLogger

import yaml

from evspool.paths import DEFAULT_PREFIX
from evspool.storeapi import StoreIdentity


log = getLogger(__name__)

DEFAULT_CAPACITY = 500

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


class StoreConfig:
    """Configuration of the bounded event stores.

    :param data_dir: ``str``, directory for the data files. ``None`` selects the default private directory.
    :param capacity: ``int``, maximum number of retained events, shared by both stores.
    :param capacities: ``dict``, optional per-identity overrides, keyed by :class:`evspool.storeapi.StoreIdentity`
        or its value (``'primary'``, ``'monitor'``).
    :param file_prefix: ``str``, prefix of the data file names.
    :param verify_delete: ``bool``, mark a store as empty only after confirming its file was removed.
    :param instrument: ``bool``, record read/write metrics of the primary store into the monitor store.
    """
    def __init__(self, data_dir=None, capacity=DEFAULT_CAPACITY, capacities=None, file_prefix=DEFAULT_PREFIX,
                 verify_delete=False, instrument=True):
        self.data_dir = data_dir
        self.capacity = _check_capacity(capacity)
        self.capacities = {StoreIdentity(k): _check_capacity(v) for k, v in (capacities or {}).items()}
        self.file_prefix = file_prefix
        self.verify_delete = verify_delete
        self.instrument = instrument

    def capacity_for(self, identity):
        return self.capacities.get(identity, self.capacity)


def _check_capacity(value):
    try:
        value = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError('Invalid capacity: %r' % (value,)) from e
    if value < 1:
        raise ValueError('Capacity must be at least 1, got %d' % value)
    return value


def _load_yaml(path):
    if not os.path.exists(path):
        raise FileNotFoundError('Config not found: %s' % path)
    with open(path, 'r', encoding='utf-8') as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError('Config must be a mapping: %s' % path)
    return data


def load_config(path=None):
    """Loads the store configuration.

    :param path: ``str``, path to a YAML configuration file. Optional.

    Values from the environment (``EVSPOOL_DATA_DIR``, ``EVSPOOL_CAPACITY``, ``EVSPOOL_VERIFY_DELETE``) override the
    values read from the file.

    Returns a :class:`StoreConfig`.
    """
    raw = {}
    if path:
        raw = _load_yaml(path)
        if isinstance(raw.get('store'), dict):
            raw = raw['store']
        log.debug('Loaded configuration from %s', path)

    settings = {k: raw[k] for k in ('data_dir', 'capacity', 'capacities', 'file_prefix', 'verify_delete',
                                    'instrument') if k in raw}

    env_dir = os.getenv('EVSPOOL_DATA_DIR')
    if env_dir:
        settings['data_dir'] = env_dir
    env_capacity = os.getenv('EVSPOOL_CAPACITY')
    if env_capacity:
        settings['capacity'] = env_capacity
    env_verify = os.getenv('EVSPOOL_VERIFY_DELETE')
    if env_verify:
        settings['verify_delete'] = env_verify.strip().lower() in _TRUE_VALUES

    return StoreConfig(**settings)
