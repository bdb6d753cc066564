"""
Tests for the database config store.

Covers file creation, loading and reload, the copy-on-read contract,
mutations and their persistence, and recovery from an invalid file.
"""

import json
import time
from unittest.mock import MagicMock, patch

import pytest

from dbregistry.core.config.db_config import (
    DbConfig,
    LocalUserDefinedListExpandedDbItem,
    RootRemoteExpandedDbItem,
    SelectedRemoteSystemDefinedList,
    SelectedRemoteUserDefinedList,
)
from dbregistry.core.config.store import CONFIG_ERROR_CONTEXT_KEY, DbConfigStore
from dbregistry.core.errors import (
    ConfigNotLoadedError,
    DbConfigValidationErrorKind,
    DuplicateNameError,
    EmptyNameError,
    InvalidConfigUpdateError,
    ItemNotFoundError,
    UnsupportedOperationError,
)
from tests.factories import (
    create_local_database,
    create_local_database_db_item,
    create_local_list_db_item,
    create_remote_system_defined_list_db_item,
    create_remote_user_defined_list_db_item,
    raw_db_config,
)


def _read_file(store):
    return json.loads(store.get_config_path().read_text(encoding="utf-8"))


def _write_file(store, document):
    store.get_config_path().write_text(json.dumps(document, indent=2), encoding="utf-8")


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return predicate()


class TestInitialize:
    def test_creates_empty_config_file(self, storage_dir):
        store = DbConfigStore(storage_dir, watch=False)
        store.initialize()

        document = _read_file(store)
        assert document["version"] == 1
        assert document["databases"]["remote"] == {
            "repositoryLists": [],
            "owners": [],
            "repositories": [],
        }
        assert "selected" not in document
        assert store.get_config().is_success
        store.dispose()

    def test_creates_missing_storage_dir(self, tmp_path):
        store = DbConfigStore(tmp_path / "a" / "b", watch=False)
        store.initialize()

        assert store.get_config_path().exists()
        store.dispose()

    def test_loads_existing_file(self, storage_dir):
        document = raw_db_config(owners=["github"])
        (storage_dir / "workspace-databases.json").write_text(json.dumps(document))

        store = DbConfigStore(storage_dir, watch=False)
        store.initialize()

        assert store.get_config().value.remote.owners == ["github"]
        store.dispose()

    def test_reports_status_after_load(self, storage_dir):
        sink = MagicMock()
        store = DbConfigStore(storage_dir, watch=False, status_sink=sink)
        store.initialize()

        sink.assert_called_once_with(CONFIG_ERROR_CONTEXT_KEY, False)
        store.dispose()

    def test_get_config_before_initialize_fails(self, storage_dir):
        result = DbConfigStore(storage_dir, watch=False).get_config()

        assert result.is_failure
        assert result.errors[0].kind == DbConfigValidationErrorKind.INVALID_CONFIG


class TestReading:
    def test_returned_config_is_a_copy(self, store):
        config = store.get_config().value
        config.remote.owners.append("intruder")
        config.local.lists.clear()

        assert store.get_config().value.remote.owners == []

    def test_reload_without_changes_is_idempotent(self, store):
        first = store.get_config().value
        store.read_config()
        second = store.get_config().value

        assert first == second

    def test_invalid_json_makes_config_unavailable(self, store):
        store.get_config_path().write_text("{ not json", encoding="utf-8")

        store.read_config()
        result = store.get_config()

        assert result.is_failure
        assert len(result.errors) == 1
        assert "Failed to parse config file" in result.errors[0].message

    def test_non_utf8_file_is_invalid_on_initialize(self, storage_dir):
        store = DbConfigStore(storage_dir, watch=False)
        store.get_config_path().write_bytes(b'{"version": 1, "x": "\xff\xfe"}')

        store.initialize()
        result = store.get_config()

        assert result.is_failure
        assert result.errors[0].kind == DbConfigValidationErrorKind.INVALID_CONFIG
        assert "Failed to read config file" in result.errors[0].message
        store.dispose()

    def test_non_utf8_file_discards_previous_config_on_reload(self, store):
        assert store.get_config().is_success
        store.get_config_path().write_bytes(b"\xff\xfe garbage")

        store._on_config_file_changed()

        assert store.get_config().is_failure

    def test_invalid_document_reports_all_errors(self, store):
        document = raw_db_config(owners=["a", "a"])
        del document["databases"]["local"]["lists"]
        _write_file(store, document)

        store.read_config()
        result = store.get_config()

        assert [error.kind for error in result.errors] == [
            DbConfigValidationErrorKind.INVALID_CONFIG,
            DbConfigValidationErrorKind.DUPLICATE_NAMES,
        ]

    def test_invalid_load_reports_error_status(self, storage_dir):
        sink = MagicMock()
        store = DbConfigStore(storage_dir, watch=False, status_sink=sink)
        store.initialize()
        store.get_config_path().write_text("[]", encoding="utf-8")

        store.read_config()

        assert sink.call_args_list[-1].args == (CONFIG_ERROR_CONTEXT_KEY, True)
        store.dispose()

    def test_missing_file_after_load_is_reported(self, store):
        store.get_config_path().unlink()

        store.read_config()

        result = store.get_config()
        assert result.is_failure
        assert "Failed to read config file" in result.errors[0].message

    def test_fixing_file_restores_config(self, store):
        store.get_config_path().write_text("{", encoding="utf-8")
        store.read_config()
        _write_file(store, raw_db_config(owners=["fixed"]))

        store.read_config()

        assert store.get_config().value.remote.owners == ["fixed"]


class TestChangeNotifications:
    def test_fires_on_mutation(self, store):
        listener = MagicMock()
        store.on_did_change_config(listener)

        store.add_remote_owner("github")

        listener.assert_called_once()

    def test_reload_of_unchanged_file_does_not_fire(self, store):
        listener = MagicMock()
        store.on_did_change_config(listener)

        store.read_config()

        listener.assert_not_called()

    def test_reload_after_self_write_does_not_fire_twice(self, store):
        listener = MagicMock()
        store.on_did_change_config(listener)

        store.add_remote_list("list1")
        store.read_config()

        assert listener.call_count == 1

    def test_external_edit_fires(self, store):
        listener = MagicMock()
        store.on_did_change_config(listener)

        _write_file(store, raw_db_config(owners=["external"]))
        store.read_config()

        listener.assert_called_once()

    def test_unsubscribe(self, store):
        listener = MagicMock()
        unsubscribe = store.on_did_change_config(listener)
        unsubscribe()

        store.add_remote_owner("github")

        listener.assert_not_called()


class TestMutations:
    def test_add_remote_list_persists(self, store):
        store.add_remote_list("my-list-1")

        assert _read_file(store)["databases"]["remote"]["repositoryLists"] == [
            {"name": "my-list-1", "repositories": []}
        ]
        assert store.get_config().value.remote.repository_lists[0].name == "my-list-1"

    def test_add_remote_repo_to_list(self, store):
        store.add_remote_list("my-list-1")
        store.add_remote_repo("owner1/repo1", "my-list-1")

        assert _read_file(store)["databases"]["remote"]["repositoryLists"] == [
            {"name": "my-list-1", "repositories": ["owner1/repo1"]}
        ]

    def test_add_remote_repo_to_missing_list(self, store):
        with pytest.raises(ItemNotFoundError):
            store.add_remote_repo("owner1/repo1", "nope")

    def test_add_remote_repos_to_list_only_adds_new_ones(self, store):
        store.add_remote_list("list1")
        store.add_remote_repo("owner/repo1", "list1")

        store.add_remote_repos_to_list(["owner/repo2", "owner/repo1", "owner/repo2"], "list1")

        config = store.get_config().value
        assert config.remote.repository_lists[0].repositories == ["owner/repo1", "owner/repo2"]

    def test_add_local_database(self, store):
        store.add_local_list("local1")
        store.add_local_database(create_local_database("db1"), "local1")
        store.add_local_database(create_local_database("db2"))

        document = _read_file(store)
        assert document["databases"]["local"]["lists"][0]["databases"][0]["name"] == "db1"
        assert document["databases"]["local"]["databases"][0]["dateAdded"] == 1668428293677

    def test_duplicate_list_is_rejected_and_file_untouched(self, store):
        store.add_remote_list("A")
        before = store.get_config_path().read_text(encoding="utf-8")

        with pytest.raises(DuplicateNameError, match="A remote list with the name 'A' already exists"):
            store.add_remote_list("A")

        assert store.get_config_path().read_text(encoding="utf-8") == before

    def test_empty_names_are_rejected(self, store):
        with pytest.raises(EmptyNameError, match="List name cannot be empty"):
            store.add_local_list("")
        with pytest.raises(EmptyNameError, match="Owner name cannot be empty"):
            store.add_remote_owner("  ")

    def test_invalid_update_is_not_written(self, store):
        before = store.get_config_path().read_text(encoding="utf-8")

        with pytest.raises(InvalidConfigUpdateError) as excinfo:
            store.add_remote_repo("not a repo")

        assert "must match pattern" in str(excinfo.value)
        assert store.get_config_path().read_text(encoding="utf-8") == before
        assert store.get_config().value.remote.repositories == []

    def test_write_failure_leaves_memory_unchanged(self, store):
        with patch(
            "dbregistry.core.config.store.save_config_atomic", side_effect=OSError("read-only")
        ):
            with pytest.raises(OSError, match="read-only"):
                store.add_remote_owner("github")

        assert store.get_config().value.remote.owners == []

    def test_mutation_requires_loaded_config(self, store):
        store.get_config_path().write_text("{", encoding="utf-8")
        store.read_config()

        with pytest.raises(ConfigNotLoadedError):
            store.add_remote_list("list1")

    def test_rename_remote_list_rewrites_selection(self, store):
        store.add_remote_list("A")
        store.set_selected_db_item(SelectedRemoteUserDefinedList(list_name="A"))

        store.rename_remote_list(create_remote_user_defined_list_db_item("A"), "B")

        config = store.get_config().value
        assert config.selected == SelectedRemoteUserDefinedList(list_name="B")
        assert [rl.name for rl in config.remote.repository_lists] == ["B"]
        assert _read_file(store)["selected"] == {"kind": "remoteUserDefinedList", "listName": "B"}

    def test_rename_to_existing_name_is_rejected(self, store):
        store.add_remote_list("A")
        store.add_remote_list("B")
        before = store.get_config_path().read_text(encoding="utf-8")

        with pytest.raises(DuplicateNameError):
            store.rename_remote_list(create_remote_user_defined_list_db_item("A"), "B")

        assert store.get_config_path().read_text(encoding="utf-8") == before

    def test_rename_local_list_and_db(self, store):
        store.add_local_list("local1")
        store.add_local_database(create_local_database("db1"), "local1")
        store.update_expanded_state([LocalUserDefinedListExpandedDbItem(list_name="local1")])

        store.rename_local_list(create_local_list_db_item("local1"), "local2")
        store.rename_local_db(create_local_database_db_item("db1", parent_list_name="local2"), "db2")

        config = store.get_config().value
        assert config.local.lists[0].name == "local2"
        assert config.local.lists[0].databases[0].name == "db2"
        assert config.expanded == [LocalUserDefinedListExpandedDbItem(list_name="local2")]

    def test_remove_db_item(self, store):
        store.add_remote_list("list1")
        store.set_selected_db_item(SelectedRemoteUserDefinedList(list_name="list1"))

        store.remove_db_item(create_remote_user_defined_list_db_item("list1"))

        config = store.get_config().value
        assert config.remote.repository_lists == []
        assert config.selected is None

    def test_remove_system_defined_list_is_unsupported(self, store):
        with pytest.raises(UnsupportedOperationError):
            store.remove_db_item(create_remote_system_defined_list_db_item())

    def test_select_missing_item_is_rejected(self, store):
        with pytest.raises(ItemNotFoundError):
            store.set_selected_db_item(SelectedRemoteUserDefinedList(list_name="nope"))

    def test_select_system_defined_list(self, store):
        store.set_selected_db_item(SelectedRemoteSystemDefinedList(list_name="top_100"))

        assert store.get_config().value.selected.list_name == "top_100"

    def test_update_expanded_state_dedupes(self, store):
        store.update_expanded_state([RootRemoteExpandedDbItem(), RootRemoteExpandedDbItem()])

        assert _read_file(store)["expanded"] == [{"kind": "rootRemote"}]

    def test_round_trip_through_disk(self, store, storage_dir):
        store.add_remote_list("list1")
        store.add_remote_repo("owner/repo", "list1")
        store.add_remote_owner("owner")
        store.add_local_database(create_local_database("db1"))

        other = DbConfigStore(storage_dir, watch=False)
        other.initialize()

        assert other.get_config().value == store.get_config().value
        other.dispose()


class TestExistenceChecks:
    def test_existence_checks(self, store):
        store.add_remote_list("list1")
        store.add_remote_repo("owner/repo", "list1")
        store.add_remote_owner("owner")
        store.add_local_list("local1")
        store.add_local_database(create_local_database("db1"), "local1")

        assert store.does_remote_list_exist("list1")
        assert not store.does_remote_list_exist("local1")
        assert store.does_local_list_exist("local1")
        assert store.does_remote_owner_exist("owner")
        assert store.does_remote_db_exist("owner/repo", "list1")
        assert not store.does_remote_db_exist("owner/repo")
        assert store.does_local_db_exist("db1", "local1")
        assert not store.does_local_db_exist("db1")

    def test_existence_checks_require_loaded_config(self, storage_dir):
        with pytest.raises(ConfigNotLoadedError):
            DbConfigStore(storage_dir, watch=False).does_remote_list_exist("x")


class TestWatcher:
    def test_invalid_file_recovery(self, storage_dir):
        store = DbConfigStore(storage_dir, watch=True)
        store.initialize()
        try:
            store.get_config_path().write_text("{ this is not json", encoding="utf-8")
            assert _wait_for(lambda: store.get_config().is_failure)
            assert store.get_config().errors

            _write_file(store, raw_db_config(owners=["recovered"]))
            assert _wait_for(
                lambda: store.get_config().is_success
                and store.get_config().value.remote.owners == ["recovered"]
            )
        finally:
            store.dispose()

    def test_external_edit_notifies_listener(self, storage_dir):
        store = DbConfigStore(storage_dir, watch=True)
        store.initialize()
        listener = MagicMock()
        store.on_did_change_config(listener)
        try:
            _write_file(store, raw_db_config(owners=["external"]))

            assert _wait_for(lambda: listener.called)
            assert isinstance(store.get_config().value, DbConfig)
        finally:
            store.dispose()
