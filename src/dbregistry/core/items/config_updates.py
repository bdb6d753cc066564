"""
Pure config document updates.

Each function takes the current ``DbConfig`` and returns a new one; the
input is never modified and the output shares no nested value with it.
Name checks happen before anything is built, so a rejected update produces
no document at all. ``selected`` and ``expanded`` are rewritten in the same
step as the rename or removal they depend on.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from dbregistry.core.config.db_config import (
    DbConfig,
    ExpandedDbItem,
    ExpandedDbItemKind,
    LocalDatabase,
    LocalList,
    RemoteRepositoryList,
    SelectedDbItem,
    SelectedDbItemKind,
    clone_db_config,
)
from dbregistry.core.errors import (
    DuplicateNameError,
    EmptyNameError,
    ItemNotFoundError,
    UnsupportedOperationError,
)
from dbregistry.core.items.db_item import (
    DbItem,
    LocalListDbItem,
    RemoteUserDefinedListDbItem,
    is_local_database_db_item,
    is_local_list_db_item,
    is_remote_owner_db_item,
    is_remote_repo_db_item,
    is_remote_user_defined_list_db_item,
)
from dbregistry.core.items.expansion import replace_expanded_item


def _require_name(name: str, what: str) -> str:
    if not name or not name.strip():
        raise EmptyNameError(f"{what} name cannot be empty")
    return name


def _find_remote_list(config: DbConfig, list_name: str) -> RemoteRepositoryList:
    for repository_list in config.remote.repository_lists:
        if repository_list.name == list_name:
            return repository_list
    raise ItemNotFoundError(f"Cannot find remote list '{list_name}'")


def _find_local_list(config: DbConfig, list_name: str) -> LocalList:
    for local_list in config.local.lists:
        if local_list.name == list_name:
            return local_list
    raise ItemNotFoundError(f"Cannot find local list '{list_name}'")


def _selected_is(config: DbConfig, *kinds: SelectedDbItemKind) -> bool:
    return config.selected is not None and config.selected.kind in {k.value for k in kinds}


def _drop_expanded_list(
    expanded: Iterable[ExpandedDbItem], kind: ExpandedDbItemKind, list_name: str
) -> List[ExpandedDbItem]:
    return [
        entry
        for entry in expanded
        if not (entry.kind == kind.value and getattr(entry, "list_name", None) == list_name)
    ]


# Add


def add_remote_list(config: DbConfig, list_name: str) -> DbConfig:
    _require_name(list_name, "List")
    if any(rl.name == list_name for rl in config.remote.repository_lists):
        raise DuplicateNameError(f"A remote list with the name '{list_name}' already exists")
    updated = clone_db_config(config)
    updated.remote.repository_lists.append(RemoteRepositoryList(name=list_name, repositories=[]))
    return updated


def add_local_list(config: DbConfig, list_name: str) -> DbConfig:
    _require_name(list_name, "List")
    if any(ll.name == list_name for ll in config.local.lists):
        raise DuplicateNameError(f"A local list with the name '{list_name}' already exists")
    updated = clone_db_config(config)
    updated.local.lists.append(LocalList(name=list_name, databases=[]))
    return updated


def add_remote_repo(config: DbConfig, nwo: str, parent_list: Optional[str] = None) -> DbConfig:
    _require_name(nwo, "Repository")
    updated = clone_db_config(config)
    if parent_list:
        repositories = _find_remote_list(updated, parent_list).repositories
        scope = f"the {parent_list} list"
    else:
        repositories = updated.remote.repositories
        scope = "remote repositories"
    if nwo in repositories:
        raise DuplicateNameError(f"The repository '{nwo}' already exists in {scope}")
    repositories.append(nwo)
    return updated


def add_remote_repos_to_list(config: DbConfig, nwos: Sequence[str], parent_list: str) -> DbConfig:
    """Append the repositories not yet in ``parent_list``, keeping input order."""
    for nwo in nwos:
        _require_name(nwo, "Repository")
    updated = clone_db_config(config)
    repositories = _find_remote_list(updated, parent_list).repositories
    for nwo in nwos:
        if nwo not in repositories:
            repositories.append(nwo)
    return updated


def add_remote_owner(config: DbConfig, owner: str) -> DbConfig:
    _require_name(owner, "Owner")
    if owner in config.remote.owners:
        raise DuplicateNameError(f"The owner '{owner}' already exists")
    updated = clone_db_config(config)
    updated.remote.owners.append(owner)
    return updated


def add_local_database(
    config: DbConfig, database: LocalDatabase, parent_list: Optional[str] = None
) -> DbConfig:
    _require_name(database.name, "Database")
    updated = clone_db_config(config)
    if parent_list:
        databases = _find_local_list(updated, parent_list).databases
        scope = f"the {parent_list} list"
    else:
        databases = updated.local.databases
        scope = "local databases"
    if any(db.name == database.name for db in databases):
        raise DuplicateNameError(f"The database '{database.name}' already exists in {scope}")
    databases.append(database.model_copy(deep=True))
    return updated


# Rename


def rename_remote_list(config: DbConfig, current_list_name: str, new_list_name: str) -> DbConfig:
    _require_name(new_list_name, "List")
    _find_remote_list(config, current_list_name)
    if new_list_name != current_list_name and any(
        rl.name == new_list_name for rl in config.remote.repository_lists
    ):
        raise DuplicateNameError(f"A remote list with the name '{new_list_name}' already exists")

    updated = clone_db_config(config)
    _find_remote_list(updated, current_list_name).name = new_list_name

    if _selected_is(
        updated,
        SelectedDbItemKind.REMOTE_USER_DEFINED_LIST,
        SelectedDbItemKind.REMOTE_REPOSITORY,
    ) and updated.selected.list_name == current_list_name:
        updated.selected.list_name = new_list_name

    updated.expanded = replace_expanded_item(
        updated.expanded,
        RemoteUserDefinedListDbItem(current_list_name),
        RemoteUserDefinedListDbItem(new_list_name),
    )
    return updated


def rename_local_list(config: DbConfig, current_list_name: str, new_list_name: str) -> DbConfig:
    _require_name(new_list_name, "List")
    _find_local_list(config, current_list_name)
    if new_list_name != current_list_name and any(
        ll.name == new_list_name for ll in config.local.lists
    ):
        raise DuplicateNameError(f"A local list with the name '{new_list_name}' already exists")

    updated = clone_db_config(config)
    _find_local_list(updated, current_list_name).name = new_list_name

    if _selected_is(
        updated,
        SelectedDbItemKind.LOCAL_USER_DEFINED_LIST,
        SelectedDbItemKind.LOCAL_DATABASE,
    ) and updated.selected.list_name == current_list_name:
        updated.selected.list_name = new_list_name

    updated.expanded = replace_expanded_item(
        updated.expanded,
        LocalListDbItem(current_list_name),
        LocalListDbItem(new_list_name),
    )
    return updated


def rename_local_db(
    config: DbConfig,
    current_db_name: str,
    new_db_name: str,
    parent_list_name: Optional[str] = None,
) -> DbConfig:
    _require_name(new_db_name, "Database")
    updated = clone_db_config(config)
    if parent_list_name:
        databases = _find_local_list(updated, parent_list_name).databases
        scope = f"list '{parent_list_name}'"
    else:
        databases = updated.local.databases
        scope = "local databases"

    target = next((db for db in databases if db.name == current_db_name), None)
    if target is None:
        raise ItemNotFoundError(f"Cannot find database '{current_db_name}' in {scope}")
    if new_db_name != current_db_name and any(db.name == new_db_name for db in databases):
        raise DuplicateNameError(f"The database '{new_db_name}' already exists in {scope}")
    target.name = new_db_name

    selected = updated.selected
    if (
        _selected_is(updated, SelectedDbItemKind.LOCAL_DATABASE)
        and selected.database_name == current_db_name
        and selected.list_name == parent_list_name
    ):
        selected.database_name = new_db_name
    return updated


# Remove


def remove_remote_list(config: DbConfig, list_name: str) -> DbConfig:
    updated = clone_db_config(config)
    updated.remote.repository_lists = [
        rl for rl in updated.remote.repository_lists if rl.name != list_name
    ]
    if _selected_is(
        updated,
        SelectedDbItemKind.REMOTE_USER_DEFINED_LIST,
        SelectedDbItemKind.REMOTE_REPOSITORY,
    ) and updated.selected.list_name == list_name:
        updated.selected = None
    updated.expanded = _drop_expanded_list(
        updated.expanded, ExpandedDbItemKind.REMOTE_USER_DEFINED_LIST, list_name
    )
    return updated


def remove_local_list(config: DbConfig, list_name: str) -> DbConfig:
    updated = clone_db_config(config)
    updated.local.lists = [ll for ll in updated.local.lists if ll.name != list_name]
    if _selected_is(
        updated,
        SelectedDbItemKind.LOCAL_USER_DEFINED_LIST,
        SelectedDbItemKind.LOCAL_DATABASE,
    ) and updated.selected.list_name == list_name:
        updated.selected = None
    updated.expanded = _drop_expanded_list(
        updated.expanded, ExpandedDbItemKind.LOCAL_USER_DEFINED_LIST, list_name
    )
    return updated


def remove_local_db(
    config: DbConfig, database_name: str, parent_list_name: Optional[str] = None
) -> DbConfig:
    updated = clone_db_config(config)
    if parent_list_name:
        local_list = _find_local_list(updated, parent_list_name)
        local_list.databases = [db for db in local_list.databases if db.name != database_name]
    else:
        updated.local.databases = [
            db for db in updated.local.databases if db.name != database_name
        ]
    selected = updated.selected
    if (
        _selected_is(updated, SelectedDbItemKind.LOCAL_DATABASE)
        and selected.database_name == database_name
        and selected.list_name == parent_list_name
    ):
        updated.selected = None
    return updated


def remove_remote_repo(
    config: DbConfig, repo_full_name: str, parent_list_name: Optional[str] = None
) -> DbConfig:
    updated = clone_db_config(config)
    if parent_list_name:
        repository_list = _find_remote_list(updated, parent_list_name)
        repository_list.repositories = [
            repo for repo in repository_list.repositories if repo != repo_full_name
        ]
    else:
        updated.remote.repositories = [
            repo for repo in updated.remote.repositories if repo != repo_full_name
        ]
    selected = updated.selected
    if (
        _selected_is(updated, SelectedDbItemKind.REMOTE_REPOSITORY)
        and selected.repository_name == repo_full_name
        and selected.list_name == parent_list_name
    ):
        updated.selected = None
    return updated


def remove_remote_owner(config: DbConfig, owner_name: str) -> DbConfig:
    updated = clone_db_config(config)
    updated.remote.owners = [owner for owner in updated.remote.owners if owner != owner_name]
    if (
        _selected_is(updated, SelectedDbItemKind.REMOTE_OWNER)
        and updated.selected.owner_name == owner_name
    ):
        updated.selected = None
    return updated


def remove_db_item(config: DbConfig, item: DbItem) -> DbConfig:
    """Remove whatever ``item`` names, dispatching on its kind."""
    if is_local_list_db_item(item):
        return remove_local_list(config, item.list_name)
    if is_remote_user_defined_list_db_item(item):
        return remove_remote_list(config, item.list_name)
    if is_local_database_db_item(item):
        return remove_local_db(config, item.database_name, item.parent_list_name)
    if is_remote_repo_db_item(item):
        return remove_remote_repo(config, item.repo_full_name, item.parent_list_name)
    if is_remote_owner_db_item(item):
        return remove_remote_owner(config, item.owner_name)
    raise UnsupportedOperationError(f"Removing {item.kind.value} items is not supported")


# Selection and expansion


def set_selected(config: DbConfig, selected: Optional[SelectedDbItem]) -> DbConfig:
    updated = clone_db_config(config)
    updated.selected = selected.model_copy(deep=True) if selected is not None else None
    return updated


def set_expanded(config: DbConfig, expanded: Sequence[ExpandedDbItem]) -> DbConfig:
    """Replace the expanded list, dropping repeated entries."""
    updated = clone_db_config(config)
    unique: List[ExpandedDbItem] = []
    for entry in expanded:
        if entry not in unique:
            unique.append(entry.model_copy(deep=True))
    updated.expanded = unique
    return updated
