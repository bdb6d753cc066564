"""
Database config store.

Owns the config file and the in-memory copy of its document. The file is
created on first use, re-read whenever it changes on disk (watchdog), and
rewritten atomically by every mutation. While the file is invalid the store
holds no config at all, only the validation errors.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from pydantic import ValidationError as ModelValidationError
from watchdog.observers.api import BaseObserver

from dbregistry.core.config.db_config import (
    DbConfig,
    ExpandedDbItem,
    LocalDatabase,
    SelectedDbItem,
    clone_db_config,
    create_empty_db_config,
)
from dbregistry.core.config.persistence import (
    compute_config_hash,
    decode_config_text,
    read_config_text,
    save_config_atomic,
)
from dbregistry.core.config.validation import validate_db_config
from dbregistry.core.config.watcher import start_watcher, stop_watcher
from dbregistry.core.errors import (
    ConfigNotLoadedError,
    DbConfigValidationError,
    DbConfigValidationErrorKind,
    InvalidConfigUpdateError,
    ItemNotFoundError,
)
from dbregistry.core.events import EventEmitter
from dbregistry.core.items import config_updates
from dbregistry.core.items.db_item import (
    DbItem,
    LocalDatabaseDbItem,
    LocalListDbItem,
    RemoteUserDefinedListDbItem,
)
from dbregistry.core.items.selection import does_selected_db_item_exist
from dbregistry.core.result import ValueResult
from dbregistry.core.utils.logger import log_debug, log_error, log_info, log_warning
from dbregistry.core.utils.paths import ensure_storage_dir, get_db_config_path

CONFIG_ERROR_CONTEXT_KEY = "dbRegistry.configError"

StatusSink = Callable[[str, bool], None]
DbConfigResult = ValueResult[DbConfig, DbConfigValidationError]


class DbConfigStore:
    """
    Load, validate, watch and update the database config file.

    Reads and writes are synchronous. Watcher reloads run on watchdog's
    observer thread and are serialized with mutations through a reentrant
    lock; the in-memory document is only ever replaced wholesale.
    """

    def __init__(
        self,
        storage_dir: Path,
        watch: bool = True,
        status_sink: Optional[StatusSink] = None,
    ):
        """
        Args:
            storage_dir: Directory holding the config file
            watch: Reload the file when it changes on disk
            status_sink: Receives ``(CONFIG_ERROR_CONTEXT_KEY, has_error)``
                after every load
        """
        self.storage_dir = Path(storage_dir)
        self.config_path = get_db_config_path(self.storage_dir)
        self.watch = watch
        self._status_sink = status_sink

        self._lock = threading.RLock()
        self._config: Optional[DbConfig] = None
        self._config_errors: List[DbConfigValidationError] = []
        # Hash of the document last loaded or written; None while invalid.
        self._observed_hash: Optional[str] = None
        self._observer: Optional[BaseObserver] = None

        self._change_emitter: EventEmitter[None] = EventEmitter("db config change")
        self.on_did_change_config = self._change_emitter.subscribe

    # Lifecycle

    def initialize(self) -> None:
        """Create the config file if needed, load it and start watching."""
        with self._lock:
            if not self.config_path.exists():
                ensure_storage_dir(self.storage_dir)
                save_config_atomic(create_empty_db_config().to_dict(), self.config_path)
                log_info("STORE", f"Created empty database config at {self.config_path}")
            self.read_config()

            if self.watch and self._observer is None:
                self._observer = start_watcher(self.config_path, self._on_config_file_changed)
                log_debug("STORE", f"Watching {self.config_path}")

    def dispose(self) -> None:
        with self._lock:
            observer, self._observer = self._observer, None
        if observer is not None:
            stop_watcher(observer)
        self._change_emitter.dispose()

    def get_config_path(self) -> Path:
        return self.config_path

    # Reading

    def read_config(self) -> None:
        """Re-read the file and replace the in-memory state with what it holds."""
        with self._lock:
            document, errors = self._read_document()
            config: Optional[DbConfig] = None
            if not errors:
                try:
                    config = DbConfig.from_dict(document)
                except ModelValidationError as e:
                    errors = [
                        DbConfigValidationError(
                            DbConfigValidationErrorKind.INVALID_CONFIG, str(e)
                        )
                    ]

            if config is None:
                changed = self._observed_hash is not None or self._config_errors != errors
                self._config = None
                self._config_errors = errors
                self._observed_hash = None
                log_warning(
                    "STORE",
                    f"Database config at {self.config_path} is invalid: "
                    + "; ".join(error.message for error in errors),
                )
            else:
                config_hash = compute_config_hash(config.to_dict())
                changed = config_hash != self._observed_hash
                self._config = config
                self._config_errors = []
                self._observed_hash = config_hash
                log_debug("STORE", f"Loaded database config from {self.config_path}")

            self._report_status(has_error=config is None)

        if changed:
            self._change_emitter.fire()

    def get_config(self) -> DbConfigResult:
        """
        Return a copy of the loaded config, or the errors that prevent loading.

        The copy is independent of the store: modifying it changes nothing.
        """
        with self._lock:
            if self._config is None:
                errors = self._config_errors or [
                    DbConfigValidationError(
                        DbConfigValidationErrorKind.INVALID_CONFIG,
                        "Database config has not been loaded",
                    )
                ]
                return ValueResult.fail(errors)
            return ValueResult.ok(clone_db_config(self._config))

    def _read_document(self) -> Tuple[Any, List[DbConfigValidationError]]:
        try:
            text = read_config_text(self.config_path)
        except (OSError, UnicodeDecodeError) as e:
            return None, [
                DbConfigValidationError(
                    DbConfigValidationErrorKind.INVALID_CONFIG,
                    f"Failed to read config file {self.config_path}: {e}",
                )
            ]
        try:
            document = decode_config_text(text)
        except ValueError as e:
            return None, [
                DbConfigValidationError(
                    DbConfigValidationErrorKind.INVALID_CONFIG,
                    f"Failed to parse config file {self.config_path}: {e}",
                )
            ]
        return document, validate_db_config(document)

    def _report_status(self, has_error: bool) -> None:
        if self._status_sink is not None:
            self._status_sink(CONFIG_ERROR_CONTEXT_KEY, has_error)

    def _on_config_file_changed(self) -> None:
        try:
            self.read_config()
        except Exception as e:
            log_error("STORE", f"Reloading {self.config_path} failed: {e}", exception=e)

    # Mutations

    def _update(self, description: str, compute: Callable[[DbConfig], DbConfig]) -> None:
        with self._lock:
            if self._config is None:
                raise ConfigNotLoadedError()

            next_config = compute(self._config)
            payload = next_config.to_dict()
            errors = validate_db_config(payload)
            if errors:
                raise InvalidConfigUpdateError(errors)

            save_config_atomic(payload, self.config_path)
            self._config = next_config
            self._observed_hash = compute_config_hash(payload)
            log_info("STORE", description)

        self._change_emitter.fire()

    def set_selected_db_item(self, selected: Optional[SelectedDbItem]) -> None:
        """Select the item ``selected`` names; ``None`` clears the selection."""

        def compute(config: DbConfig) -> DbConfig:
            if selected is not None and not does_selected_db_item_exist(config, selected):
                raise ItemNotFoundError(f"Cannot select a db item that does not exist: {selected!r}")
            return config_updates.set_selected(config, selected)

        self._update(f"Selected {selected.kind if selected else 'nothing'}", compute)

    def update_expanded_state(self, expanded: Sequence[ExpandedDbItem]) -> None:
        self._update(
            "Updated expanded state",
            lambda config: config_updates.set_expanded(config, expanded),
        )

    def add_remote_repo(self, nwo: str, parent_list: Optional[str] = None) -> None:
        self._update(
            f"Added remote repository {nwo}" + (f" to list {parent_list}" if parent_list else ""),
            lambda config: config_updates.add_remote_repo(config, nwo, parent_list),
        )

    def add_remote_repos_to_list(self, nwos: Sequence[str], parent_list: str) -> None:
        self._update(
            f"Added {len(nwos)} remote repositories to list {parent_list}",
            lambda config: config_updates.add_remote_repos_to_list(config, nwos, parent_list),
        )

    def add_remote_owner(self, owner: str) -> None:
        self._update(
            f"Added remote owner {owner}",
            lambda config: config_updates.add_remote_owner(config, owner),
        )

    def add_remote_list(self, list_name: str) -> None:
        self._update(
            f"Added remote list {list_name}",
            lambda config: config_updates.add_remote_list(config, list_name),
        )

    def add_local_list(self, list_name: str) -> None:
        self._update(
            f"Added local list {list_name}",
            lambda config: config_updates.add_local_list(config, list_name),
        )

    def add_local_database(
        self, database: LocalDatabase, parent_list: Optional[str] = None
    ) -> None:
        self._update(
            f"Added local database {database.name}"
            + (f" to list {parent_list}" if parent_list else ""),
            lambda config: config_updates.add_local_database(config, database, parent_list),
        )

    def rename_remote_list(self, item: RemoteUserDefinedListDbItem, new_name: str) -> None:
        self._update(
            f"Renamed remote list {item.list_name} to {new_name}",
            lambda config: config_updates.rename_remote_list(config, item.list_name, new_name),
        )

    def rename_local_list(self, item: LocalListDbItem, new_name: str) -> None:
        self._update(
            f"Renamed local list {item.list_name} to {new_name}",
            lambda config: config_updates.rename_local_list(config, item.list_name, new_name),
        )

    def rename_local_db(self, item: LocalDatabaseDbItem, new_name: str) -> None:
        self._update(
            f"Renamed local database {item.database_name} to {new_name}",
            lambda config: config_updates.rename_local_db(
                config, item.database_name, new_name, item.parent_list_name
            ),
        )

    def remove_db_item(self, item: DbItem) -> None:
        self._update(
            f"Removed {item.kind.value} item",
            lambda config: config_updates.remove_db_item(config, item),
        )

    # Queries

    def _loaded_config(self) -> DbConfig:
        if self._config is None:
            raise ConfigNotLoadedError()
        return self._config

    def does_remote_list_exist(self, list_name: str) -> bool:
        with self._lock:
            config = self._loaded_config()
            return any(rl.name == list_name for rl in config.remote.repository_lists)

    def does_local_list_exist(self, list_name: str) -> bool:
        with self._lock:
            config = self._loaded_config()
            return any(ll.name == list_name for ll in config.local.lists)

    def does_remote_owner_exist(self, owner: str) -> bool:
        with self._lock:
            return owner in self._loaded_config().remote.owners

    def does_remote_db_exist(self, nwo: str, list_name: Optional[str] = None) -> bool:
        with self._lock:
            config = self._loaded_config()
            if list_name:
                return any(
                    nwo in rl.repositories
                    for rl in config.remote.repository_lists
                    if rl.name == list_name
                )
            return nwo in config.remote.repositories

    def does_local_db_exist(self, name: str, list_name: Optional[str] = None) -> bool:
        with self._lock:
            config = self._loaded_config()
            if list_name:
                return any(
                    db.name == name
                    for ll in config.local.lists
                    if ll.name == list_name
                    for db in ll.databases
                )
            return any(db.name == name for db in config.local.databases)
