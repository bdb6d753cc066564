"""
Main CLI entry point for dbregistry.

Each command opens the registry in the configured storage directory, runs a
single operation through :class:`DbManager` and exits with one of the codes
from :mod:`dbregistry.cli.exit_codes`.
"""

import time
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from dbregistry.core.config.db_config import LocalDatabase
from dbregistry.core.config.store import DbConfigStore
from dbregistry.core.errors import ConfigNotLoadedError, DbRegistryError
from dbregistry.core.items.db_item import DbItem, DbItemKind, DbListKind, get_children
from dbregistry.core.items.naming import get_db_item_label
from dbregistry.core.manager import DbManager
from dbregistry.core.utils.logger import setup_logging
from dbregistry.core.utils.settings import RegistrySettings

from .exit_codes import CliExit

console = Console()

app = typer.Typer(
    name="dbregistry",
    help="Manage the local and remote database registry",
    add_completion=False,
    no_args_is_help=True,
)


class ItemKind(str, Enum):
    """Item kinds as typed on the command line."""

    ROOT_LOCAL = "root-local"
    ROOT_REMOTE = "root-remote"
    LOCAL_LIST = "local-list"
    LOCAL_DB = "local-db"
    SYSTEM_LIST = "system-list"
    REMOTE_LIST = "remote-list"
    OWNER = "owner"
    REPO = "repo"


_ITEM_KINDS = {
    ItemKind.ROOT_LOCAL: DbItemKind.ROOT_LOCAL,
    ItemKind.ROOT_REMOTE: DbItemKind.ROOT_REMOTE,
    ItemKind.LOCAL_LIST: DbItemKind.LOCAL_LIST,
    ItemKind.LOCAL_DB: DbItemKind.LOCAL_DATABASE,
    ItemKind.SYSTEM_LIST: DbItemKind.REMOTE_SYSTEM_DEFINED_LIST,
    ItemKind.REMOTE_LIST: DbItemKind.REMOTE_USER_DEFINED_LIST,
    ItemKind.OWNER: DbItemKind.REMOTE_OWNER,
    ItemKind.REPO: DbItemKind.REMOTE_REPO,
}


@app.callback()
def callback(
    ctx: typer.Context,
    storage_dir: Optional[Path] = typer.Option(
        None,
        "--storage-dir",
        "-d",
        help="Directory holding workspace-databases.json",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Manage the local and remote database registry."""
    # One-shot commands never need the file watcher.
    settings = RegistrySettings.from_env(
        storage_dir=storage_dir, log_level=log_level, watch_config=False
    )
    setup_logging(level=settings.log_level)
    ctx.obj = settings


@contextmanager
def _open_manager(ctx: typer.Context) -> Iterator[DbManager]:
    settings: RegistrySettings = ctx.obj or RegistrySettings.from_env(watch_config=False)
    store = DbConfigStore(settings.storage_dir, watch=settings.watch_config)
    try:
        store.initialize()
    except OSError as e:
        raise CliExit.error(f"Could not open database config in {settings.storage_dir}: {e}")
    manager = DbManager(store, settings)
    try:
        yield manager
    except ConfigNotLoadedError:
        errors = store.get_config().errors
        raise CliExit.config_error(
            "Database config is invalid:\n" + "\n".join(f"  - {e.message}" for e in errors)
        )
    except DbRegistryError as e:
        raise CliExit.error(str(e))
    except OSError as e:
        raise CliExit.error(f"Could not write {store.get_config_path()}: {e}")
    finally:
        manager.dispose()
        store.dispose()


def _find(
    manager: DbManager, kind: ItemKind, name: Optional[str], list_name: Optional[str]
) -> DbItem:
    if manager.get_db_items().is_failure:
        raise ConfigNotLoadedError()
    item = manager.find_db_item(_ITEM_KINDS[kind], name, list_name)
    if item is None:
        location = f" in list {list_name}" if list_name else ""
        raise CliExit.error(f"No {kind.value} named '{name}'{location}")
    return item


def _label(item: DbItem) -> str:
    label = escape(get_db_item_label(item))
    if item.kind == DbItemKind.LOCAL_DATABASE:
        label += f" [dim]({item.language})[/dim]"
    if getattr(item, "selected", False):
        label = f"[bold green]{label} (selected)[/bold green]"
    return label


def _add_branch(parent: Tree, item: DbItem, show_all: bool) -> None:
    expanded = show_all or getattr(item, "expanded", True)
    branch = parent.add(_label(item), expanded=expanded)
    for child in get_children(item):
        _add_branch(branch, child, show_all)


@app.command("show")
def show(
    ctx: typer.Context,
    show_all: bool = typer.Option(
        False, "--all", "-a", help="Show children of collapsed lists too"
    ),
):
    """Show the registry as a tree."""
    with _open_manager(ctx) as manager:
        result = manager.get_db_items()
        tree = Tree(f"[bold]{manager.get_config_path()}[/bold]")
        if result.is_failure:
            for error in result.errors:
                tree.add(f"[red]Error: {escape(error.message)}[/red]")
            console.print(tree)
            raise CliExit.config_error()
        for root in result.value:
            _add_branch(tree, root, show_all)
        console.print(tree)


@app.command("validate")
def validate(ctx: typer.Context):
    """Validate the config file."""
    with _open_manager(ctx) as manager:
        result = manager.store.get_config()
        if result.is_failure:
            for error in result.errors:
                console.print(f"[red]✗[/red] {error.kind.value}: {escape(error.message)}")
            raise CliExit.config_error()
        console.print(f"[green]✓[/green] {manager.get_config_path()} is valid")


@app.command("path")
def path(ctx: typer.Context):
    """Print the path of the config file."""
    with _open_manager(ctx) as manager:
        typer.echo(str(manager.get_config_path()))


@app.command("add-list")
def add_list(ctx: typer.Context, kind: DbListKind, name: str):
    """Add a user-defined list."""
    with _open_manager(ctx) as manager:
        manager.add_new_list(kind, name)
        console.print(f"Added {kind.value} list [bold]{name}[/bold]")


@app.command("add-repo")
def add_repo(
    ctx: typer.Context,
    nwo: str = typer.Argument(..., help="Repository as owner/name"),
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Remote list to add to"),
):
    """Add a remote repository."""
    with _open_manager(ctx) as manager:
        manager.add_new_remote_repo(nwo, list_name)
        console.print(f"Added repository [bold]{nwo}[/bold]")


@app.command("add-owner")
def add_owner(ctx: typer.Context, owner: str):
    """Add a remote owner."""
    with _open_manager(ctx) as manager:
        manager.add_new_remote_owner(owner)
        console.print(f"Added owner [bold]{owner}[/bold]")


@app.command("add-db")
def add_db(
    ctx: typer.Context,
    name: str,
    language: str = typer.Option(..., "--language", help="Database language"),
    storage_path: str = typer.Option(..., "--storage-path", help="Database location on disk"),
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Local list to add to"),
):
    """Add a local database."""
    database = LocalDatabase(
        name=name,
        date_added=int(time.time() * 1000),
        language=language,
        storage_path=storage_path,
    )
    with _open_manager(ctx) as manager:
        manager.add_new_local_database(database, list_name)
        console.print(f"Added database [bold]{name}[/bold]")


@app.command("select")
def select(
    ctx: typer.Context,
    kind: ItemKind,
    name: str,
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Owning list"),
):
    """Select a database, repository, owner or list."""
    with _open_manager(ctx) as manager:
        manager.set_selected_db_item(_find(manager, kind, name, list_name))
        console.print(f"Selected {kind.value} [bold]{name}[/bold]")


@app.command("rename-list")
def rename_list(ctx: typer.Context, kind: DbListKind, old_name: str, new_name: str):
    """Rename a user-defined list."""
    item_kind = ItemKind.LOCAL_LIST if kind == DbListKind.LOCAL else ItemKind.REMOTE_LIST
    with _open_manager(ctx) as manager:
        manager.rename_list(_find(manager, item_kind, old_name, None), new_name)
        console.print(f"Renamed {kind.value} list {old_name} to [bold]{new_name}[/bold]")


@app.command("rename-db")
def rename_db(
    ctx: typer.Context,
    old_name: str,
    new_name: str,
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Owning local list"),
):
    """Rename a local database."""
    with _open_manager(ctx) as manager:
        manager.rename_local_db(_find(manager, ItemKind.LOCAL_DB, old_name, list_name), new_name)
        console.print(f"Renamed database {old_name} to [bold]{new_name}[/bold]")


@app.command("remove")
def remove(
    ctx: typer.Context,
    kind: ItemKind,
    name: str,
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Owning list"),
):
    """Remove a list, database, repository or owner."""
    with _open_manager(ctx) as manager:
        manager.remove_db_item(_find(manager, kind, name, list_name))
        console.print(f"Removed {kind.value} [bold]{name}[/bold]")


def _set_expanded(ctx: typer.Context, kind: ItemKind, name: Optional[str], expanded: bool) -> None:
    with _open_manager(ctx) as manager:
        manager.update_expanded_state(_find(manager, kind, name, None), expanded)


@app.command("expand")
def expand(ctx: typer.Context, kind: ItemKind, name: Optional[str] = typer.Argument(None)):
    """Mark a root or list as expanded."""
    _set_expanded(ctx, kind, name, True)


@app.command("collapse")
def collapse(ctx: typer.Context, kind: ItemKind, name: Optional[str] = typer.Argument(None)):
    """Mark a root or list as collapsed."""
    _set_expanded(ctx, kind, name, False)


if __name__ == "__main__":
    app()
