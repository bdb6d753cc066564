"""
Expansion state of container items.

Entries are compared by name path (kind plus list name), never by identity,
since items are rebuilt on every read.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from dbregistry.core.config.db_config import (
    ExpandedDbItem,
    LocalUserDefinedListExpandedDbItem,
    RemoteUserDefinedListExpandedDbItem,
    RootLocalExpandedDbItem,
    RootRemoteExpandedDbItem,
)
from dbregistry.core.items.db_item import DbItem, DbItemKind, flatten_db_items


def map_db_item_to_expanded_db_item(item: DbItem) -> Optional[ExpandedDbItem]:
    """The persisted name path for a container; leaves cannot expand."""
    kind = item.kind
    if kind == DbItemKind.ROOT_LOCAL:
        return RootLocalExpandedDbItem()
    if kind == DbItemKind.ROOT_REMOTE:
        return RootRemoteExpandedDbItem()
    if kind == DbItemKind.LOCAL_LIST:
        return LocalUserDefinedListExpandedDbItem(list_name=item.list_name)
    if kind == DbItemKind.REMOTE_USER_DEFINED_LIST:
        return RemoteUserDefinedListExpandedDbItem(list_name=item.list_name)
    return None


def update_item_in_expanded_state(
    current: Sequence[ExpandedDbItem], item: DbItem, is_expanded: bool
) -> List[ExpandedDbItem]:
    """
    Return a new expanded list with ``item`` added or removed.

    Expanding an item already present and collapsing one that is absent both
    return an unchanged copy. Leaves are ignored.
    """
    entry = map_db_item_to_expanded_db_item(item)
    remaining = [existing for existing in current if existing != entry]
    if entry is None:
        return list(current)
    if is_expanded:
        return list(current) if len(remaining) != len(current) else remaining + [entry]
    return remaining


def replace_expanded_item(
    current: Sequence[ExpandedDbItem], current_item: DbItem, new_item: DbItem
) -> List[ExpandedDbItem]:
    """
    Swap the entry for ``current_item`` (if present) for one naming ``new_item``.

    Entries are copied, and an entry that the swap would repeat is kept once.
    """
    old_entry = map_db_item_to_expanded_db_item(current_item)
    new_entry = map_db_item_to_expanded_db_item(new_item)
    result: List[ExpandedDbItem] = []
    for entry in current:
        if old_entry is not None and new_entry is not None and entry == old_entry:
            entry = new_entry
        if entry not in result:
            result.append(entry.model_copy(deep=True))
    return result


def clean_non_existent_expanded_items(
    current: Sequence[ExpandedDbItem], items: Sequence[DbItem]
) -> List[ExpandedDbItem]:
    """Drop entries whose container is not in the tree rooted at ``items``."""
    existing = [
        entry
        for entry in (map_db_item_to_expanded_db_item(item) for item in flatten_db_items(items))
        if entry is not None
    ]
    return [entry for entry in current if entry in existing]
