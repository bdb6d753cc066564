"""Display names for db items."""

from __future__ import annotations

from typing import Optional

from dbregistry.core.items.db_item import (
    DbItem,
    DbItemKind,
    is_remote_system_defined_list_db_item,
)


def get_db_item_name(item: DbItem) -> Optional[str]:
    """The leaf segment of an item's name path; ``None`` for roots."""
    kind = item.kind
    if kind in (DbItemKind.ROOT_LOCAL, DbItemKind.ROOT_REMOTE):
        return None
    if kind in (
        DbItemKind.LOCAL_LIST,
        DbItemKind.REMOTE_SYSTEM_DEFINED_LIST,
        DbItemKind.REMOTE_USER_DEFINED_LIST,
    ):
        return item.list_name  # type: ignore[union-attr]
    if kind == DbItemKind.LOCAL_DATABASE:
        return item.database_name  # type: ignore[union-attr]
    if kind == DbItemKind.REMOTE_OWNER:
        return item.owner_name  # type: ignore[union-attr]
    if kind == DbItemKind.REMOTE_REPO:
        return item.repo_full_name  # type: ignore[union-attr]
    raise ValueError(f"Unknown db item kind: {kind}")


def get_db_item_label(item: DbItem) -> str:
    """Human-readable label, as a tree view would show it."""
    kind = item.kind
    if kind == DbItemKind.ROOT_LOCAL:
        return "Local databases"
    if kind == DbItemKind.ROOT_REMOTE:
        return "Remote repositories"
    if is_remote_system_defined_list_db_item(item):
        return item.list_display_name  # type: ignore[union-attr]
    return get_db_item_name(item) or ""
