"""
Tests for the registry manager.

Runs against a real store in a temporary directory so every call goes
through validation and the config file.
"""

import json
from unittest.mock import MagicMock

import pytest

from dbregistry.core.config.db_config import RemoteUserDefinedListExpandedDbItem
from dbregistry.core.errors import DuplicateNameError, UnsupportedOperationError
from dbregistry.core.items.db_item import DbItemKind
from dbregistry.core.manager import DbListKind, DbManager
from dbregistry.core.utils.settings import RegistrySettings
from tests.factories import create_local_database


def _read_file(manager):
    return json.loads(manager.get_config_path().read_text(encoding="utf-8"))


def test_end_to_end_scenario(manager):
    manager.add_new_list(DbListKind.REMOTE, "my-list-1")

    assert _read_file(manager)["databases"]["remote"]["repositoryLists"] == [
        {"name": "my-list-1", "repositories": []}
    ]

    manager.add_new_remote_repo("owner1/repo1", "my-list-1")

    assert _read_file(manager)["databases"]["remote"]["repositoryLists"] == [
        {"name": "my-list-1", "repositories": ["owner1/repo1"]}
    ]

    result = manager.get_db_items()
    assert result.is_success
    remote_root, local_root = result.value
    assert remote_root.kind == DbItemKind.ROOT_REMOTE
    assert local_root.kind == DbItemKind.ROOT_LOCAL
    user_lists = [c for c in remote_root.children if c.kind == DbItemKind.REMOTE_USER_DEFINED_LIST]
    assert len(user_lists) == 1
    assert user_lists[0].list_name == "my-list-1"
    assert [repo.repo_full_name for repo in user_lists[0].repos] == ["owner1/repo1"]
    assert user_lists[0].repos[0].kind == DbItemKind.REMOTE_REPO


class TestReading:
    def test_get_db_items_on_invalid_config(self, manager, store):
        store.get_config_path().write_text("{", encoding="utf-8")
        store.read_config()

        result = manager.get_db_items()

        assert result.is_failure
        assert manager.get_selected_db_item() is None
        assert manager.find_db_item(DbItemKind.ROOT_LOCAL) is None

    def test_tree_is_rebuilt_after_each_mutation(self, manager):
        before = manager.get_db_items().value

        manager.add_new_remote_owner("github")

        after = manager.get_db_items().value
        assert before != after
        assert [c.owner_name for c in after[0].children if c.kind == DbItemKind.REMOTE_OWNER] == ["github"]

    def test_system_lists_follow_settings(self, store, storage_dir):
        hidden = DbManager(store, RegistrySettings(storage_dir=storage_dir, show_system_defined_lists=False))

        assert hidden.get_db_items().value[0].children == ()
        hidden.dispose()

    def test_find_db_item_distinguishes_scopes(self, manager):
        manager.add_new_list(DbListKind.REMOTE, "list1")
        manager.add_new_remote_repo("owner/repo", "list1")
        manager.add_new_remote_repo("owner/repo")

        in_list = manager.find_db_item(DbItemKind.REMOTE_REPO, "owner/repo", "list1")
        top_level = manager.find_db_item(DbItemKind.REMOTE_REPO, "owner/repo")

        assert in_list.parent_list_name == "list1"
        assert top_level.parent_list_name is None
        assert manager.find_db_item(DbItemKind.REMOTE_REPO, "owner/other") is None


class TestSelection:
    def test_select_and_get(self, manager):
        manager.add_new_list(DbListKind.LOCAL, "local1")
        manager.add_new_local_database(create_local_database("db1"), "local1")

        manager.set_selected_db_item(manager.find_db_item(DbItemKind.LOCAL_DATABASE, "db1", "local1"))

        selected = manager.get_selected_db_item()
        assert selected.kind == DbItemKind.LOCAL_DATABASE
        assert selected.database_name == "db1"
        assert selected.parent_list_name == "local1"
        assert _read_file(manager)["selected"] == {
            "kind": "localDatabase",
            "databaseName": "db1",
            "listName": "local1",
        }

    def test_selection_survives_rename(self, manager):
        manager.add_new_list(DbListKind.REMOTE, "A")
        manager.set_selected_db_item(manager.find_db_item(DbItemKind.REMOTE_USER_DEFINED_LIST, "A"))

        manager.rename_list(manager.find_db_item(DbItemKind.REMOTE_USER_DEFINED_LIST, "A"), "B")

        selected = manager.get_selected_db_item()
        assert selected.kind == DbItemKind.REMOTE_USER_DEFINED_LIST
        assert selected.list_name == "B"

    def test_roots_cannot_be_selected(self, manager):
        with pytest.raises(UnsupportedOperationError):
            manager.set_selected_db_item(manager.find_db_item(DbItemKind.ROOT_REMOTE))


class TestRenameAndRemove:
    def test_rename_collision_leaves_file_unchanged(self, manager):
        manager.add_new_list(DbListKind.REMOTE, "A")
        manager.add_new_list(DbListKind.REMOTE, "B")
        before = manager.get_config_path().read_text(encoding="utf-8")

        with pytest.raises(DuplicateNameError):
            manager.rename_list(manager.find_db_item(DbItemKind.REMOTE_USER_DEFINED_LIST, "A"), "B")

        assert manager.get_config_path().read_text(encoding="utf-8") == before

    def test_rename_local_list_and_db(self, manager):
        manager.add_new_list(DbListKind.LOCAL, "local1")
        manager.add_new_local_database(create_local_database("db1"), "local1")

        manager.rename_list(manager.find_db_item(DbItemKind.LOCAL_LIST, "local1"), "local2")
        manager.rename_local_db(manager.find_db_item(DbItemKind.LOCAL_DATABASE, "db1", "local2"), "db2")

        assert manager.does_local_db_exist("db2", "local2")
        assert not manager.does_list_exist(DbListKind.LOCAL, "local1")

    def test_rename_non_list_is_unsupported(self, manager):
        manager.add_new_remote_owner("owner")

        with pytest.raises(UnsupportedOperationError):
            manager.rename_list(manager.find_db_item(DbItemKind.REMOTE_OWNER, "owner"), "other")

    def test_remove_list_drops_its_expanded_entry(self, manager):
        manager.add_new_list(DbListKind.REMOTE, "list1")
        user_list = manager.find_db_item(DbItemKind.REMOTE_USER_DEFINED_LIST, "list1")
        manager.update_expanded_state(user_list, True)

        manager.remove_db_item(user_list)

        assert not manager.does_list_exist(DbListKind.REMOTE, "list1")
        assert _read_file(manager)["expanded"] == []


class TestExpansion:
    def test_expand_and_collapse(self, manager):
        manager.add_new_list(DbListKind.REMOTE, "list1")

        manager.update_expanded_state(manager.find_db_item(DbItemKind.ROOT_REMOTE), True)
        manager.update_expanded_state(
            manager.find_db_item(DbItemKind.REMOTE_USER_DEFINED_LIST, "list1"), True
        )

        remote_root = manager.get_db_items().value[0]
        assert remote_root.expanded is True
        assert manager.find_db_item(DbItemKind.REMOTE_USER_DEFINED_LIST, "list1").expanded is True

        manager.update_expanded_state(manager.find_db_item(DbItemKind.ROOT_REMOTE), False)

        assert _read_file(manager)["expanded"] == [
            {"kind": "remoteUserDefinedList", "listName": "list1"}
        ]

    def test_stale_entries_are_cleaned(self, manager, store):
        manager.add_new_list(DbListKind.LOCAL, "local1")
        store.update_expanded_state([RemoteUserDefinedListExpandedDbItem(list_name="gone")])

        manager.update_expanded_state(manager.find_db_item(DbItemKind.LOCAL_LIST, "local1"), True)

        assert _read_file(manager)["expanded"] == [
            {"kind": "localUserDefinedList", "listName": "local1"}
        ]


class TestNotifications:
    def test_items_changed_fires_on_store_change(self, manager):
        listener = MagicMock()
        manager.on_db_items_changed(listener)

        manager.add_new_remote_owner("owner")

        listener.assert_called_once()

    def test_dispose_unsubscribes(self, store, storage_dir):
        db_manager = DbManager(store, RegistrySettings(storage_dir=storage_dir))
        listener = MagicMock()
        db_manager.on_db_items_changed(listener)
        db_manager.dispose()

        store.add_remote_owner("owner")

        listener.assert_not_called()


def test_existence_checks(manager):
    manager.add_new_remote_owner("owner")
    manager.add_new_list(DbListKind.REMOTE, "list1")
    manager.add_new_remote_repos_to_list(["owner/a", "owner/b"], "list1")

    assert manager.does_remote_owner_exist("owner")
    assert manager.does_list_exist(DbListKind.REMOTE, "list1")
    assert manager.does_remote_repo_exist("owner/b", "list1")
    assert not manager.does_remote_repo_exist("owner/b")
