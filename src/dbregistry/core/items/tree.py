"""
Tree creation: turn a config document into db items.

Every node's ``selected`` flag is resolved by comparing the node's name path
with ``config.selected``; every container's ``expanded`` flag by looking the
same kind of name path up in the expanded list.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from dbregistry.core.config.db_config import (
    DbConfig,
    ExpandedDbItem,
    ExpandedDbItemKind,
    LocalDatabase,
    LocalList,
    RemoteRepositoryList,
    SelectedDbItemKind,
)
from dbregistry.core.items.db_item import (
    LocalDatabaseDbItem,
    LocalDbItem,
    LocalListDbItem,
    RemoteDbItem,
    RemoteOwnerDbItem,
    RemoteRepoDbItem,
    RemoteSystemDefinedListDbItem,
    RemoteUserDefinedListDbItem,
    RootLocalDbItem,
    RootRemoteDbItem,
)

# (name, display name, description), in display order.
SYSTEM_DEFINED_LISTS = (
    ("top_10", "Top 10 repositories", "Top 10 repositories of a language"),
    ("top_100", "Top 100 repositories", "Top 100 repositories of a language"),
    ("top_1000", "Top 1000 repositories", "Top 1000 repositories of a language"),
)


def _is_expanded(
    expanded: Sequence[ExpandedDbItem],
    kind: ExpandedDbItemKind,
    list_name: Optional[str] = None,
) -> bool:
    for entry in expanded:
        if entry.kind != kind.value:
            continue
        if list_name is None or getattr(entry, "list_name", None) == list_name:
            return True
    return False


def _selected_kind(config: DbConfig) -> Optional[str]:
    return config.selected.kind if config.selected is not None else None


def _is_selected(config: DbConfig, kind: SelectedDbItemKind, **name_path: Optional[str]) -> bool:
    if _selected_kind(config) != kind.value:
        return False
    return all(getattr(config.selected, key, None) == value for key, value in name_path.items())


def create_system_defined_list_db_item(
    config: DbConfig, list_name: str, display_name: str, description: str
) -> RemoteSystemDefinedListDbItem:
    return RemoteSystemDefinedListDbItem(
        list_name=list_name,
        list_display_name=display_name,
        list_description=description,
        selected=_is_selected(
            config, SelectedDbItemKind.REMOTE_SYSTEM_DEFINED_LIST, list_name=list_name
        ),
    )


def create_remote_repo_db_item(
    config: DbConfig, repo_full_name: str, parent_list_name: Optional[str] = None
) -> RemoteRepoDbItem:
    return RemoteRepoDbItem(
        repo_full_name=repo_full_name,
        parent_list_name=parent_list_name,
        selected=_is_selected(
            config,
            SelectedDbItemKind.REMOTE_REPOSITORY,
            repository_name=repo_full_name,
            list_name=parent_list_name,
        ),
    )


def create_remote_owner_db_item(config: DbConfig, owner_name: str) -> RemoteOwnerDbItem:
    return RemoteOwnerDbItem(
        owner_name=owner_name,
        selected=_is_selected(config, SelectedDbItemKind.REMOTE_OWNER, owner_name=owner_name),
    )


def create_remote_user_defined_list_db_item(
    config: DbConfig, repository_list: RemoteRepositoryList, expanded: Sequence[ExpandedDbItem]
) -> RemoteUserDefinedListDbItem:
    return RemoteUserDefinedListDbItem(
        list_name=repository_list.name,
        repos=tuple(
            create_remote_repo_db_item(config, repo, repository_list.name)
            for repo in repository_list.repositories
        ),
        expanded=_is_expanded(
            expanded, ExpandedDbItemKind.REMOTE_USER_DEFINED_LIST, repository_list.name
        ),
        selected=_is_selected(
            config, SelectedDbItemKind.REMOTE_USER_DEFINED_LIST, list_name=repository_list.name
        ),
    )


def create_local_database_db_item(
    config: DbConfig, database: LocalDatabase, parent_list_name: Optional[str] = None
) -> LocalDatabaseDbItem:
    return LocalDatabaseDbItem(
        database_name=database.name,
        date_added=database.date_added,
        language=database.language,
        storage_path=database.storage_path,
        parent_list_name=parent_list_name,
        selected=_is_selected(
            config,
            SelectedDbItemKind.LOCAL_DATABASE,
            database_name=database.name,
            list_name=parent_list_name,
        ),
    )


def create_local_list_db_item(
    config: DbConfig, local_list: LocalList, expanded: Sequence[ExpandedDbItem]
) -> LocalListDbItem:
    return LocalListDbItem(
        list_name=local_list.name,
        databases=tuple(
            create_local_database_db_item(config, database, local_list.name)
            for database in local_list.databases
        ),
        expanded=_is_expanded(
            expanded, ExpandedDbItemKind.LOCAL_USER_DEFINED_LIST, local_list.name
        ),
        selected=_is_selected(
            config, SelectedDbItemKind.LOCAL_USER_DEFINED_LIST, list_name=local_list.name
        ),
    )


def create_remote_tree(
    config: DbConfig,
    expanded: Sequence[ExpandedDbItem],
    show_system_defined_lists: bool = True,
) -> RootRemoteDbItem:
    """
    Build the remote root.

    Children are ordered: system-defined lists, owners, user-defined lists,
    then repositories that are not in any list.
    """
    children: List[RemoteDbItem] = []
    if show_system_defined_lists:
        children.extend(
            create_system_defined_list_db_item(config, name, display_name, description)
            for name, display_name, description in SYSTEM_DEFINED_LISTS
        )
    children.extend(create_remote_owner_db_item(config, owner) for owner in config.remote.owners)
    children.extend(
        create_remote_user_defined_list_db_item(config, repository_list, expanded)
        for repository_list in config.remote.repository_lists
    )
    children.extend(create_remote_repo_db_item(config, repo) for repo in config.remote.repositories)

    return RootRemoteDbItem(
        children=tuple(children),
        expanded=_is_expanded(expanded, ExpandedDbItemKind.ROOT_REMOTE),
    )


def create_local_tree(config: DbConfig, expanded: Sequence[ExpandedDbItem]) -> RootLocalDbItem:
    """Build the local root: user-defined lists, then databases not in any list."""
    children: List[LocalDbItem] = []
    children.extend(
        create_local_list_db_item(config, local_list, expanded)
        for local_list in config.local.lists
    )
    children.extend(create_local_database_db_item(config, db) for db in config.local.databases)

    return RootLocalDbItem(
        children=tuple(children),
        expanded=_is_expanded(expanded, ExpandedDbItemKind.ROOT_LOCAL),
    )
