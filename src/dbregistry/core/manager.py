"""
Database registry manager.

Front door for anything that shows or edits the registry. It turns db items
handed back by callers into the name paths the store understands and
rebuilds the item tree from the store's current config on every read.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from dbregistry.core.config.db_config import DbConfig, LocalDatabase
from dbregistry.core.config.store import DbConfigStore
from dbregistry.core.errors import DbConfigValidationError, UnsupportedOperationError
from dbregistry.core.events import EventEmitter
from dbregistry.core.items.db_item import (
    DbItem,
    DbItemKind,
    DbListKind,
    LocalDatabaseDbItem,
    flatten_db_items,
    is_local_list_db_item,
    is_remote_user_defined_list_db_item,
    is_root_db_item,
)
from dbregistry.core.items.expansion import (
    clean_non_existent_expanded_items,
    update_item_in_expanded_state,
)
from dbregistry.core.items.naming import get_db_item_name
from dbregistry.core.items.selection import (
    get_selected_db_item,
    map_db_item_to_selected_db_item,
)
from dbregistry.core.items.tree import create_local_tree, create_remote_tree
from dbregistry.core.result import ValueResult
from dbregistry.core.utils.logger import log_warning
from dbregistry.core.utils.settings import RegistrySettings

DbItemsResult = ValueResult[List[DbItem], DbConfigValidationError]


class DbManager:
    """Registry facade over a :class:`DbConfigStore`."""

    def __init__(self, store: DbConfigStore, settings: Optional[RegistrySettings] = None):
        self.store = store
        self.settings = settings or RegistrySettings()
        self._items_changed = EventEmitter("db items change")
        self.on_db_items_changed = self._items_changed.subscribe
        self._unsubscribe_store = store.on_did_change_config(
            lambda _: self._items_changed.fire()
        )

    def dispose(self) -> None:
        self._unsubscribe_store()
        self._items_changed.dispose()

    # Reading

    def _build_db_items(self, config: DbConfig) -> List[DbItem]:
        return [
            create_remote_tree(
                config, config.expanded, self.settings.show_system_defined_lists
            ),
            create_local_tree(config, config.expanded),
        ]

    def get_db_items(self) -> DbItemsResult:
        """The remote and local roots, or the errors that make the config unusable."""
        config_result = self.store.get_config()
        if config_result.is_failure:
            return ValueResult.fail(config_result.errors)
        return ValueResult.ok(self._build_db_items(config_result.value))

    def get_selected_db_item(self) -> Optional[DbItem]:
        items_result = self.get_db_items()
        if items_result.is_failure:
            return None
        return get_selected_db_item(items_result.value)

    def find_db_item(
        self,
        kind: DbItemKind,
        name: Optional[str] = None,
        parent_list_name: Optional[str] = None,
    ) -> Optional[DbItem]:
        """
        Look an item up by kind and name.

        Args:
            kind: Kind of item to find
            name: Leaf name (ignored for roots)
            parent_list_name: Owning list, for repositories and databases in a list

        Returns:
            The matching item, or None if absent or the config is invalid
        """
        items_result = self.get_db_items()
        if items_result.is_failure:
            return None
        for item in flatten_db_items(items_result.value):
            if item.kind != kind:
                continue
            if is_root_db_item(item):
                return item
            if get_db_item_name(item) != name:
                continue
            if getattr(item, "parent_list_name", None) == parent_list_name:
                return item
        return None

    def get_config_path(self) -> Path:
        return self.store.get_config_path()

    # Adding

    def add_new_remote_repo(self, nwo: str, parent_list: Optional[str] = None) -> None:
        self.store.add_remote_repo(nwo, parent_list)

    def add_new_remote_repos_to_list(self, nwos: Sequence[str], parent_list: str) -> None:
        self.store.add_remote_repos_to_list(nwos, parent_list)

    def add_new_remote_owner(self, owner: str) -> None:
        self.store.add_remote_owner(owner)

    def add_new_list(self, kind: DbListKind, list_name: str) -> None:
        if DbListKind(kind) == DbListKind.LOCAL:
            self.store.add_local_list(list_name)
        else:
            self.store.add_remote_list(list_name)

    def add_new_local_database(
        self, database: LocalDatabase, parent_list: Optional[str] = None
    ) -> None:
        self.store.add_local_database(database, parent_list)

    # Renaming and removing

    def rename_list(self, item: DbItem, new_name: str) -> None:
        """Rename a local or remote user-defined list; selection and expansion follow."""
        if is_local_list_db_item(item):
            self.store.rename_local_list(item, new_name)  # type: ignore[arg-type]
        elif is_remote_user_defined_list_db_item(item):
            self.store.rename_remote_list(item, new_name)  # type: ignore[arg-type]
        else:
            raise UnsupportedOperationError(f"Cannot rename {item.kind.value} as a list")

    def rename_local_db(self, item: LocalDatabaseDbItem, new_name: str) -> None:
        self.store.rename_local_db(item, new_name)

    def remove_db_item(self, item: DbItem) -> None:
        self.store.remove_db_item(item)

    # Selection and expansion

    def set_selected_db_item(self, item: DbItem) -> None:
        selected = map_db_item_to_selected_db_item(item)
        if selected is None:
            raise UnsupportedOperationError(f"Cannot select {item.kind.value} items")
        self.store.set_selected_db_item(selected)

    def update_expanded_state(self, item: DbItem, is_expanded: bool) -> None:
        """
        Record ``item`` as expanded or collapsed.

        Entries for containers that no longer exist are dropped at the same
        time. If the tree cannot be built the entries are kept as they are.
        """
        config_result = self.store.get_config()
        if config_result.is_failure:
            log_warning(
                "MANAGER",
                "Could not read db items when calculating expanded state: "
                + "; ".join(error.message for error in config_result.errors),
            )
            return
        config = config_result.value
        expanded = update_item_in_expanded_state(config.expanded, item, is_expanded)
        expanded = clean_non_existent_expanded_items(expanded, self._build_db_items(config))
        self.store.update_expanded_state(expanded)

    # Existence checks

    def does_list_exist(self, kind: DbListKind, list_name: str) -> bool:
        if DbListKind(kind) == DbListKind.LOCAL:
            return self.store.does_local_list_exist(list_name)
        return self.store.does_remote_list_exist(list_name)

    def does_remote_owner_exist(self, owner: str) -> bool:
        return self.store.does_remote_owner_exist(owner)

    def does_remote_repo_exist(self, nwo: str, list_name: Optional[str] = None) -> bool:
        return self.store.does_remote_db_exist(nwo, list_name)

    def does_local_db_exist(self, name: str, list_name: Optional[str] = None) -> bool:
        return self.store.does_local_db_exist(name, list_name)
