"""Filesystem watcher for the database config file."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from watchdog.events import (
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from dbregistry.core.utils.logger import log_debug


def _to_path(src_path: bytes | str) -> Path:
    """Convert watchdog src_path to Path, handling bytes case."""
    if isinstance(src_path, bytes):
        return Path(src_path.decode())
    return Path(src_path)


class ConfigFileWatcher(FileSystemEventHandler):
    """
    Calls ``on_change`` whenever the watched file is written or replaced.

    The parent directory is watched (not the file) so atomic saves, which
    replace the file through a rename, are still seen.
    """

    def __init__(self, config_path: Path, on_change: Callable[[], None]):
        self.config_path = Path(config_path).resolve()
        self.on_change = on_change

    def _is_config(self, src_path: bytes | str) -> bool:
        return _to_path(src_path).resolve() == self.config_path

    def _notify(self, event: FileSystemEvent) -> None:
        log_debug("WATCHER", f"{event.event_type}: {self.config_path}")
        self.on_change()

    def on_created(self, event: FileCreatedEvent) -> None:
        if not event.is_directory and self._is_config(event.src_path):
            self._notify(event)

    def on_modified(self, event: FileModifiedEvent) -> None:
        if not event.is_directory and self._is_config(event.src_path):
            self._notify(event)

    def on_moved(self, event: FileMovedEvent) -> None:
        if not event.is_directory and self._is_config(event.dest_path):
            self._notify(event)


def start_watcher(config_path: Path, on_change: Callable[[], None]) -> BaseObserver:
    """Start watching ``config_path``. Returns observer (caller must stop on dispose)."""
    config_path = Path(config_path)
    observer = Observer()
    handler = ConfigFileWatcher(config_path, on_change)
    observer.schedule(handler, str(config_path.parent), recursive=False)
    observer.daemon = True
    observer.start()
    return observer


def stop_watcher(observer: BaseObserver, timeout: float = 2.0) -> None:
    observer.stop()
    observer.join(timeout)
