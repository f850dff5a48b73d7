import os

from evspool.paths import FileLocator, default_data_dir
from evspool.storeapi import StoreIdentity


def test_default_data_dir(monkeypatch):
    monkeypatch.setenv('EVSPOOL_DATA_DIR', '/tmp/evspool-data')
    assert default_data_dir() == '/tmp/evspool-data'

    monkeypatch.delenv('EVSPOOL_DATA_DIR')
    monkeypatch.setenv('XDG_DATA_HOME', '/tmp/xdg')
    assert default_data_dir() == os.path.join('/tmp/xdg', 'evspool')

    monkeypatch.delenv('XDG_DATA_HOME')
    assert default_data_dir() == os.path.join(os.path.expanduser('~'), '.local', 'share', 'evspool')


def test_path_for(tmp_path):
    locator = FileLocator(str(tmp_path))

    primary = locator.path_for(StoreIdentity.PRIMARY)
    monitor = locator.path_for(StoreIdentity.MONITOR)

    assert primary != monitor
    assert os.path.isabs(primary)
    assert os.path.dirname(primary) == str(tmp_path)
    assert primary.endswith('com-evspool-sdk-AppEventsPersistedEvents.dat')
    assert monitor.endswith('com-evspool-sdk-MonitorEventsPersistedEvents.dat')


def test_custom_prefix(tmp_path):
    locator = FileLocator(str(tmp_path), prefix='myapp')

    assert os.path.basename(locator.path_for(StoreIdentity.PRIMARY)) == 'myapp-AppEventsPersistedEvents.dat'


def test_ensure_dir(tmp_path):
    locator = FileLocator(str(tmp_path / 'a' / 'b'))

    locator.ensure_dir()
    locator.ensure_dir()

    assert os.path.isdir(str(tmp_path / 'a' / 'b'))
