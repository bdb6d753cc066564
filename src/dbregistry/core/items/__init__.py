"""Db item model: tree creation, selection, expansion and config updates."""

from dbregistry.core.items.db_item import (
    DbItem,
    DbItemKind,
    DbListKind,
    LocalDatabaseDbItem,
    LocalListDbItem,
    RemoteOwnerDbItem,
    RemoteRepoDbItem,
    RemoteSystemDefinedListDbItem,
    RemoteUserDefinedListDbItem,
    RootLocalDbItem,
    RootRemoteDbItem,
    flatten_db_items,
)
from dbregistry.core.items.naming import get_db_item_label, get_db_item_name
from dbregistry.core.items.selection import get_selected_db_item, map_db_item_to_selected_db_item
from dbregistry.core.items.tree import SYSTEM_DEFINED_LISTS, create_local_tree, create_remote_tree

__all__ = [
    "DbItem",
    "DbItemKind",
    "DbListKind",
    "LocalDatabaseDbItem",
    "LocalListDbItem",
    "RemoteOwnerDbItem",
    "RemoteRepoDbItem",
    "RemoteSystemDefinedListDbItem",
    "RemoteUserDefinedListDbItem",
    "RootLocalDbItem",
    "RootRemoteDbItem",
    "SYSTEM_DEFINED_LISTS",
    "create_local_tree",
    "create_remote_tree",
    "flatten_db_items",
    "get_db_item_label",
    "get_db_item_name",
    "get_selected_db_item",
    "map_db_item_to_selected_db_item",
]
