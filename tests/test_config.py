import pytest

from evspool.config import StoreConfig, load_config, DEFAULT_CAPACITY
from evspool.storeapi import StoreIdentity


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('EVSPOOL_DATA_DIR', 'EVSPOOL_CAPACITY', 'EVSPOOL_VERIFY_DELETE'):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = load_config()

    assert config.data_dir is None
    assert config.capacity == DEFAULT_CAPACITY == 500
    assert config.capacity_for(StoreIdentity.PRIMARY) == 500
    assert config.capacity_for(StoreIdentity.MONITOR) == 500
    assert config.verify_delete is False
    assert config.instrument is True


def test_load_yaml(tmp_path):
    path = tmp_path / 'evspool.yaml'
    path.write_text('\n'.join([
        'store:',
        '  data_dir: /var/lib/events',
        '  capacity: 100',
        '  capacities:',
        '    monitor: 20',
        '  verify_delete: true',
    ]))

    config = load_config(str(path))

    assert config.data_dir == '/var/lib/events'
    assert config.capacity_for(StoreIdentity.PRIMARY) == 100
    assert config.capacity_for(StoreIdentity.MONITOR) == 20
    assert config.verify_delete is True


def test_load_yaml_without_section(tmp_path):
    path = tmp_path / 'evspool.yaml'
    path.write_text('capacity: 42\n')

    assert load_config(str(path)).capacity == 42


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / 'evspool.yaml'
    path.write_text('store:\n  capacity: 100\n  data_dir: /from/file\n')
    monkeypatch.setenv('EVSPOOL_DATA_DIR', '/from/env')
    monkeypatch.setenv('EVSPOOL_CAPACITY', '7')
    monkeypatch.setenv('EVSPOOL_VERIFY_DELETE', 'yes')

    config = load_config(str(path))

    assert config.data_dir == '/from/env'
    assert config.capacity == 7
    assert config.verify_delete is True


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / 'missing.yaml'))


def test_not_a_mapping(tmp_path):
    path = tmp_path / 'evspool.yaml'
    path.write_text('- a\n- b\n')

    with pytest.raises(ValueError):
        load_config(str(path))


def test_invalid_capacity():
    with pytest.raises(ValueError):
        StoreConfig(capacity=0)
    with pytest.raises(ValueError):
        StoreConfig(capacity='many')
    with pytest.raises(ValueError):
        StoreConfig(capacities={'monitor': -1})
    with pytest.raises(ValueError):
        StoreConfig(capacities={'unknown': 10})
