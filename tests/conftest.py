"""
Shared fixtures for the fly test suite
"""

from pathlib import Path

import pytest

from fly.fly_core.config import ConfigManager
from fly.fly_core.directory_store import SQLiteDirectoryStore
from fly.fly_core.memory_store import InMemoryDirectoryStore


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.config and ~/.local/share"""
    monkeypatch.setenv('FLY_CONFIG_DIR', str(tmp_path / 'fly-config'))
    monkeypatch.setenv('FLY_DATA_DIR', str(tmp_path / 'fly-data'))
    for name in ('FLY_LOG_LEVEL', 'LOG_LEVEL', 'FLY_LOG_FORMAT', 'FLY_LOG_FILE'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def memory_store():
    return InMemoryDirectoryStore()


@pytest.fixture
def sqlite_store(tmp_path):
    store = SQLiteDirectoryStore(tmp_path / 'fly-data' / 'index.sqlite')
    yield store
    store.close()


@pytest.fixture(params=['memory', 'sqlite'])
def store(request, tmp_path):
    """Run a test against both store implementations"""
    if request.param == 'memory':
        yield InMemoryDirectoryStore()
    else:
        sqlite = SQLiteDirectoryStore(tmp_path / 'fly-data' / 'index.sqlite')
        yield sqlite
        sqlite.close()


@pytest.fixture
def config(tmp_path):
    manager = ConfigManager(config_dir=tmp_path / 'fly-config', data_dir=tmp_path / 'fly-data')
    manager.ensure_layout()
    return manager


@pytest.fixture
def make_tree(tmp_path):
    """Create directories (slash-separated, relative) under a fresh root"""
    def _make(*relative_dirs, name='tree') -> Path:
        root = tmp_path / name
        root.mkdir(exist_ok=True)
        for rel in relative_dirs:
            (root / rel).mkdir(parents=True, exist_ok=True)
        return root
    return _make
