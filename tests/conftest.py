"""
Shared pytest fixtures and configuration for dbregistry tests.

This module puts the workspace ``src/`` first on the import path and
provides storage directories, stores and managers backed by ``tmp_path``.
"""

import os
import sys
from pathlib import Path

import pytest

# Put `src/` first so `import dbregistry` uses workspace code.
_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))
# Put repo root early so `import tests.*` resolves locally.
sys.path.insert(1, str(_REPO_ROOT))

from dbregistry.core.config.store import DbConfigStore  # noqa: E402
from dbregistry.core.manager import DbManager  # noqa: E402
from dbregistry.core.utils.logger import reset_logging  # noqa: E402
from dbregistry.core.utils.settings import RegistrySettings  # noqa: E402


# ============================================================================
# Registry Fixtures
# ============================================================================

@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    """Empty storage directory for a config file."""
    path = tmp_path / "storage"
    path.mkdir()
    return path


@pytest.fixture
def store(storage_dir: Path):
    """Initialized store without a file watcher."""
    db_config_store = DbConfigStore(storage_dir, watch=False)
    db_config_store.initialize()
    yield db_config_store
    db_config_store.dispose()


@pytest.fixture
def manager(store: DbConfigStore, storage_dir: Path):
    """Manager over the ``store`` fixture."""
    db_manager = DbManager(store, RegistrySettings(storage_dir=storage_dir, watch_config=False))
    yield db_manager
    db_manager.dispose()


# ============================================================================
# CLI Fixtures
# ============================================================================

@pytest.fixture
def typer_test_client():
    """Typer test client for CLI testing."""
    from typer.testing import CliRunner
    return CliRunner()


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def clean_environment():
    """Drop DBREGISTRY_* variables for the test and restore the environment after."""
    original_env = os.environ.copy()
    for key in [key for key in os.environ if key.startswith("DBREGISTRY_")]:
        del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def fresh_logging():
    """Start every test from an unconfigured logger."""
    reset_logging()
    yield
    reset_logging()
