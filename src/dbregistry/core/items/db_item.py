"""
Db items: the in-memory tree derived from a config document.

Items are frozen dataclasses, one per kind, and are rebuilt from the config
on every read. Nothing here is persisted; persisted references to items are
name paths (see ``SelectedDbItem`` and ``ExpandedDbItem``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union


class DbItemKind(str, Enum):
    ROOT_LOCAL = "RootLocal"
    LOCAL_LIST = "LocalList"
    LOCAL_DATABASE = "LocalDatabase"
    ROOT_REMOTE = "RootRemote"
    REMOTE_SYSTEM_DEFINED_LIST = "RemoteSystemDefinedList"
    REMOTE_USER_DEFINED_LIST = "RemoteUserDefinedList"
    REMOTE_OWNER = "RemoteOwner"
    REMOTE_REPO = "RemoteRepo"


class DbListKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class LocalDatabaseDbItem:
    database_name: str
    date_added: int
    language: str
    storage_path: str
    selected: bool = False
    parent_list_name: Optional[str] = None
    kind: DbItemKind = field(default=DbItemKind.LOCAL_DATABASE, init=False)


@dataclass(frozen=True)
class LocalListDbItem:
    list_name: str
    databases: Tuple[LocalDatabaseDbItem, ...] = ()
    expanded: bool = False
    selected: bool = False
    kind: DbItemKind = field(default=DbItemKind.LOCAL_LIST, init=False)


@dataclass(frozen=True)
class RootLocalDbItem:
    children: Tuple["LocalDbItem", ...] = ()
    expanded: bool = False
    kind: DbItemKind = field(default=DbItemKind.ROOT_LOCAL, init=False)


@dataclass(frozen=True)
class RemoteRepoDbItem:
    repo_full_name: str
    selected: bool = False
    parent_list_name: Optional[str] = None
    kind: DbItemKind = field(default=DbItemKind.REMOTE_REPO, init=False)


@dataclass(frozen=True)
class RemoteOwnerDbItem:
    owner_name: str
    selected: bool = False
    kind: DbItemKind = field(default=DbItemKind.REMOTE_OWNER, init=False)


@dataclass(frozen=True)
class RemoteSystemDefinedListDbItem:
    list_name: str
    list_display_name: str
    list_description: str
    selected: bool = False
    kind: DbItemKind = field(default=DbItemKind.REMOTE_SYSTEM_DEFINED_LIST, init=False)


@dataclass(frozen=True)
class RemoteUserDefinedListDbItem:
    list_name: str
    repos: Tuple[RemoteRepoDbItem, ...] = ()
    expanded: bool = False
    selected: bool = False
    kind: DbItemKind = field(default=DbItemKind.REMOTE_USER_DEFINED_LIST, init=False)


@dataclass(frozen=True)
class RootRemoteDbItem:
    children: Tuple["RemoteDbItem", ...] = ()
    expanded: bool = False
    kind: DbItemKind = field(default=DbItemKind.ROOT_REMOTE, init=False)


LocalDbItem = Union[LocalListDbItem, LocalDatabaseDbItem]

RemoteDbItem = Union[
    RemoteSystemDefinedListDbItem,
    RemoteUserDefinedListDbItem,
    RemoteOwnerDbItem,
    RemoteRepoDbItem,
]

DbItem = Union[RootLocalDbItem, RootRemoteDbItem, LocalDbItem, RemoteDbItem]

DbListItem = Union[LocalListDbItem, RemoteUserDefinedListDbItem]

SelectableDbItem = Union[LocalDbItem, RemoteDbItem]

ExpandableDbItem = Union[
    RootLocalDbItem, RootRemoteDbItem, LocalListDbItem, RemoteUserDefinedListDbItem
]


def is_root_db_item(item: DbItem) -> bool:
    return item.kind in (DbItemKind.ROOT_LOCAL, DbItemKind.ROOT_REMOTE)


def is_local_list_db_item(item: DbItem) -> bool:
    return item.kind == DbItemKind.LOCAL_LIST


def is_local_database_db_item(item: DbItem) -> bool:
    return item.kind == DbItemKind.LOCAL_DATABASE


def is_remote_system_defined_list_db_item(item: DbItem) -> bool:
    return item.kind == DbItemKind.REMOTE_SYSTEM_DEFINED_LIST


def is_remote_user_defined_list_db_item(item: DbItem) -> bool:
    return item.kind == DbItemKind.REMOTE_USER_DEFINED_LIST


def is_remote_owner_db_item(item: DbItem) -> bool:
    return item.kind == DbItemKind.REMOTE_OWNER


def is_remote_repo_db_item(item: DbItem) -> bool:
    return item.kind == DbItemKind.REMOTE_REPO


def is_list_db_item(item: DbItem) -> bool:
    return item.kind in (DbItemKind.LOCAL_LIST, DbItemKind.REMOTE_USER_DEFINED_LIST)


def get_children(item: DbItem) -> Tuple[DbItem, ...]:
    """Direct children of a container item; leaves have none."""
    if item.kind in (DbItemKind.ROOT_LOCAL, DbItemKind.ROOT_REMOTE):
        return item.children  # type: ignore[union-attr]
    if item.kind == DbItemKind.LOCAL_LIST:
        return item.databases  # type: ignore[union-attr]
    if item.kind == DbItemKind.REMOTE_USER_DEFINED_LIST:
        return item.repos  # type: ignore[union-attr]
    return ()


def flatten_db_items(items: Iterable[DbItem]) -> List[DbItem]:
    """Every item in ``items`` and below, pre-order (container before its children)."""
    flattened: List[DbItem] = []
    for item in items:
        flattened.append(item)
        flattened.extend(flatten_db_items(get_children(item)))
    return flattened
