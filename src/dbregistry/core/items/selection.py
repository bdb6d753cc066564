"""Selection: find the selected db item and map db items to selection entries."""

from __future__ import annotations

from typing import Optional, Sequence

from dbregistry.core.config.db_config import (
    DbConfig,
    SelectedDbItem,
    SelectedLocalDatabase,
    SelectedLocalUserDefinedList,
    SelectedRemoteOwner,
    SelectedRemoteRepository,
    SelectedRemoteSystemDefinedList,
    SelectedRemoteUserDefinedList,
)
from dbregistry.core.items.db_item import (
    DbItem,
    DbItemKind,
    flatten_db_items,
    get_children,
    is_list_db_item,
    is_root_db_item,
)
from dbregistry.core.items.tree import create_local_tree, create_remote_tree


def get_selected_db_item(items: Sequence[DbItem]) -> Optional[DbItem]:
    """
    Return the selected item below the given roots, if any.

    Only the first two levels under a root can be selected: the root's
    children themselves and, for lists, the leaves they contain. A selected
    leaf is returned in preference to its list.
    """
    for root in items:
        if not is_root_db_item(root):
            continue
        for child in get_children(root):
            if is_list_db_item(child):
                for leaf in get_children(child):
                    if leaf.selected:  # type: ignore[union-attr]
                        return leaf
            if child.selected:  # type: ignore[union-attr]
                return child
    return None


def does_selected_db_item_exist(config: DbConfig, selected: SelectedDbItem) -> bool:
    """Whether ``selected`` names an item in ``config`` (system lists always exist)."""
    roots = [create_remote_tree(config, [], True), create_local_tree(config, [])]
    return any(
        map_db_item_to_selected_db_item(item) == selected
        for item in flatten_db_items(roots)
        if not is_root_db_item(item)
    )


def map_db_item_to_selected_db_item(item: DbItem) -> Optional[SelectedDbItem]:
    """The persisted name path for ``item``; roots cannot be selected."""
    kind = item.kind
    if kind in (DbItemKind.ROOT_LOCAL, DbItemKind.ROOT_REMOTE):
        return None
    if kind == DbItemKind.LOCAL_LIST:
        return SelectedLocalUserDefinedList(list_name=item.list_name)
    if kind == DbItemKind.LOCAL_DATABASE:
        return SelectedLocalDatabase(
            database_name=item.database_name, list_name=item.parent_list_name
        )
    if kind == DbItemKind.REMOTE_SYSTEM_DEFINED_LIST:
        return SelectedRemoteSystemDefinedList(list_name=item.list_name)
    if kind == DbItemKind.REMOTE_USER_DEFINED_LIST:
        return SelectedRemoteUserDefinedList(list_name=item.list_name)
    if kind == DbItemKind.REMOTE_OWNER:
        return SelectedRemoteOwner(owner_name=item.owner_name)
    if kind == DbItemKind.REMOTE_REPO:
        return SelectedRemoteRepository(
            repository_name=item.repo_full_name, list_name=item.parent_list_name
        )
    raise ValueError(f"Unknown db item kind: {kind}")
