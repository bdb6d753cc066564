import logging
import os
from pathlib import Path

# Project root (src/dbregistry/core/utils -> repository root)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent.parent
# Allow override for installed packages: data dir outside site-packages (e.g. DBREGISTRY_DATA_DIR=/data)
_data_dir_env = os.getenv("DBREGISTRY_DATA_DIR")
DATA_DIR = Path(_data_dir_env).resolve() if _data_dir_env else (PROJECT_ROOT / "data")

DB_CONFIG_FILE_NAME = "workspace-databases.json"

_log = logging.getLogger(__name__)


def ensure_storage_dir(storage_dir: Path) -> bool:
    """Create the storage directory if it does not exist.

    On permission errors logs a warning and returns False so read-only
    callers (e.g. `dbregistry validate`) can still run.
    """
    try:
        storage_dir.mkdir(parents=True, exist_ok=True)
        return True
    except (PermissionError, OSError) as e:
        _log.warning(
            "Could not create storage directory %s: %s (continuing; writes will fail)",
            storage_dir,
            e,
        )
        return False


def get_db_config_path(storage_dir: Path) -> Path:
    return Path(storage_dir) / DB_CONFIG_FILE_NAME
