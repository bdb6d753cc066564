"""JSON schema (draft-07) for workspace-databases.json."""

from __future__ import annotations

from typing import Any, Dict

OWNER_NAME_PATTERN = r"^[a-zA-Z0-9_.-]+$"
REPOSITORY_NAME_PATTERN = r"^[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+$"


def _object(properties: Dict[str, Any], required: list[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


def _kind(value: str) -> Dict[str, Any]:
    return {"type": "string", "const": value}


_STRING = {"type": "string"}
_OWNER = {"type": "string", "pattern": OWNER_NAME_PATTERN}
_REPOSITORY = {"type": "string", "pattern": REPOSITORY_NAME_PATTERN}

_LOCAL_DATABASE = _object(
    {
        "name": _STRING,
        "dateAdded": {"type": "integer"},
        "language": _STRING,
        "storagePath": _STRING,
    },
    ["name", "dateAdded", "language", "storagePath"],
)

_SELECTED_VARIANTS = [
    _object(
        {"kind": _kind("localUserDefinedList"), "listName": _STRING},
        ["kind", "listName"],
    ),
    _object(
        {"kind": _kind("localDatabase"), "databaseName": _STRING, "listName": _STRING},
        ["kind", "databaseName"],
    ),
    _object(
        {"kind": _kind("remoteSystemDefinedList"), "listName": _STRING},
        ["kind", "listName"],
    ),
    _object(
        {"kind": _kind("remoteUserDefinedList"), "listName": _STRING},
        ["kind", "listName"],
    ),
    _object(
        {"kind": _kind("remoteOwner"), "ownerName": _OWNER},
        ["kind", "ownerName"],
    ),
    _object(
        {"kind": _kind("remoteRepository"), "repositoryName": _REPOSITORY, "listName": _STRING},
        ["kind", "repositoryName"],
    ),
]

_EXPANDED_VARIANTS = [
    _object({"kind": _kind("rootLocal")}, ["kind"]),
    _object({"kind": _kind("rootRemote")}, ["kind"]),
    _object({"kind": _kind("localUserDefinedList"), "listName": _STRING}, ["kind", "listName"]),
    _object({"kind": _kind("remoteUserDefinedList"), "listName": _STRING}, ["kind", "listName"]),
]

DB_CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Database registry configuration",
    **_object(
        {
            "version": {"type": "integer"},
            "databases": _object(
                {
                    "remote": _object(
                        {
                            "repositoryLists": {
                                "type": "array",
                                "items": _object(
                                    {
                                        "name": {"type": "string", "minLength": 1},
                                        "repositories": {"type": "array", "items": _REPOSITORY},
                                    },
                                    ["name", "repositories"],
                                ),
                            },
                            "owners": {"type": "array", "items": _OWNER},
                            "repositories": {"type": "array", "items": _REPOSITORY},
                        },
                        ["repositoryLists", "owners", "repositories"],
                    ),
                    "local": _object(
                        {
                            "lists": {
                                "type": "array",
                                "items": _object(
                                    {
                                        "name": {"type": "string", "minLength": 1},
                                        "databases": {"type": "array", "items": _LOCAL_DATABASE},
                                    },
                                    ["name", "databases"],
                                ),
                            },
                            "databases": {"type": "array", "items": _LOCAL_DATABASE},
                        },
                        ["lists", "databases"],
                    ),
                },
                ["remote", "local"],
            ),
            "selected": {"oneOf": _SELECTED_VARIANTS},
            "expanded": {
                "type": "array",
                "uniqueItems": True,
                "items": {"oneOf": _EXPANDED_VARIANTS},
            },
        },
        ["version", "databases"],
    ),
}
