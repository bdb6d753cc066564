"""Config file persistence utilities."""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict

from dbregistry.core.utils.file_lock import FileLock
from dbregistry.core.utils.logger import log_file_operation

LOCK_TIMEOUT_SECONDS = 10


def serialize_config(payload: Dict[str, Any]) -> str:
    """Render a config document the way it is stored: 2-space JSON plus newline."""
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def save_config_atomic(payload: Dict[str, Any], target_path: Path) -> None:
    """
    Write ``payload`` to ``target_path`` all-or-nothing.

    The document is written to a sibling temp file, flushed, and moved over
    the target, so readers (including the file watcher) only ever see the
    old or the new content. I/O errors propagate to the caller.
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = target_path.with_suffix(".tmp")
    text = serialize_config(payload)
    with FileLock(target_path, timeout=LOCK_TIMEOUT_SECONDS):
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(target_path)
        except OSError as e:
            log_file_operation("write", str(target_path), False, str(e))
            if temp_path.exists():
                temp_path.unlink()
            raise
    log_file_operation("write", str(target_path), True)


def read_config_text(config_path: Path) -> str:
    """
    Read the raw config text under the config file lock.

    Raises OSError when the file is unreadable and UnicodeDecodeError when
    it is not UTF-8.
    """
    with FileLock(config_path, timeout=LOCK_TIMEOUT_SECONDS):
        text = Path(config_path).read_text(encoding="utf-8")
    log_file_operation("read", str(config_path), True)
    return text


def decode_config_text(text: str) -> Any:
    """Decode config text. Raises ``json.JSONDecodeError`` on malformed content."""
    return json.loads(text)


def compute_config_hash(payload: Dict[str, Any]) -> str:
    """Stable hash of a document's content, independent of key order and layout."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    return f"sha256:{hashlib.sha256(canonical.encode('utf-8')).hexdigest()}"
