"""Validation of raw (decoded JSON) database config documents."""

from __future__ import annotations

import re
from collections import Counter
from functools import lru_cache
from typing import Any, Dict, Iterable, List

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as SchemaError

from dbregistry.core.config.schema import DB_CONFIG_SCHEMA
from dbregistry.core.errors import DbConfigValidationError, DbConfigValidationErrorKind

_REQUIRED_RE = re.compile(r"^'(?P<name>.+)' is a required property$")


@lru_cache(maxsize=1)
def _schema_validator() -> Draft7Validator:
    Draft7Validator.check_schema(DB_CONFIG_SCHEMA)
    return Draft7Validator(DB_CONFIG_SCHEMA)


def _instance_path(error: SchemaError) -> str:
    parts = [str(part) for part in error.absolute_path]
    return "/" + "/".join(parts) if parts else ""


def _describe(error: SchemaError) -> str:
    validator = error.validator
    expected = error.validator_value
    if validator == "required":
        match = _REQUIRED_RE.match(error.message)
        if match:
            return f"must have required property '{match.group('name')}'"
    elif validator == "additionalProperties" and isinstance(error.instance, dict):
        allowed = set(error.schema.get("properties", {}))
        extra = sorted(key for key in error.instance if key not in allowed)
        return f"must NOT have additional properties ({', '.join(extra)})"
    elif validator == "type":
        return f"must be {expected}"
    elif validator == "pattern":
        return f'must match pattern "{expected}"'
    elif validator == "oneOf":
        return "must match exactly one schema in oneOf"
    elif validator == "uniqueItems":
        return "must NOT have duplicate items"
    elif validator == "minLength":
        return f"must NOT have fewer than {expected} characters"
    elif validator == "const":
        return f"must be equal to constant '{expected}'"
    return error.message


def validate_structure(document: Any) -> List[DbConfigValidationError]:
    """Check ``document`` against the JSON schema, reporting every violation."""
    errors = sorted(
        _schema_validator().iter_errors(document),
        key=lambda e: (_instance_path(e), e.validator or ""),
    )
    return [
        DbConfigValidationError(
            DbConfigValidationErrorKind.INVALID_CONFIG,
            f"{_instance_path(error)} {_describe(error)}".strip(),
        )
        for error in errors
    ]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _names(items: Iterable[Any]) -> List[str]:
    return [
        item["name"]
        for item in items
        if isinstance(item, dict) and isinstance(item.get("name"), str)
    ]


def _strings(items: Iterable[Any]) -> List[str]:
    return [item for item in items if isinstance(item, str)]


def find_duplicates(values: Iterable[str]) -> List[str]:
    """Values occurring more than once, each reported once, in first-seen order."""
    counts = Counter(values)
    return [value for value in counts if counts[value] > 1]


def _duplicate_error(message: str, duplicates: List[str]) -> DbConfigValidationError:
    return DbConfigValidationError(
        DbConfigValidationErrorKind.DUPLICATE_NAMES,
        f"{message}: {', '.join(duplicates)}",
    )


def validate_unique_names(document: Any) -> List[DbConfigValidationError]:
    """
    Check name uniqueness within each scope.

    Works on whatever shape it is given: parts of the document that are
    missing or of the wrong type are skipped, since the structural pass
    already reports them.
    """
    databases = _as_dict(_as_dict(document).get("databases"))
    remote = _as_dict(databases.get("remote"))
    local = _as_dict(databases.get("local"))
    remote_lists = _as_list(remote.get("repositoryLists"))
    local_lists = _as_list(local.get("lists"))

    errors: List[DbConfigValidationError] = []

    duplicates = find_duplicates(_names(remote_lists))
    if duplicates:
        errors.append(_duplicate_error("There are remote lists with the same name", duplicates))

    duplicates = find_duplicates(_names(local_lists))
    if duplicates:
        errors.append(_duplicate_error("There are local lists with the same name", duplicates))

    duplicates = find_duplicates(_strings(_as_list(remote.get("repositories"))))
    if duplicates:
        errors.append(_duplicate_error("There are repositories with the same name", duplicates))

    duplicates = find_duplicates(_strings(_as_list(remote.get("owners"))))
    if duplicates:
        errors.append(_duplicate_error("There are owners with the same name", duplicates))

    duplicates = find_duplicates(_names(_as_list(local.get("databases"))))
    if duplicates:
        errors.append(_duplicate_error("There are databases with the same name", duplicates))

    for remote_list in remote_lists:
        if not isinstance(remote_list, dict):
            continue
        duplicates = find_duplicates(_strings(_as_list(remote_list.get("repositories"))))
        if duplicates:
            errors.append(
                _duplicate_error(
                    f"There are repositories with the same name in the {remote_list.get('name')} list",
                    duplicates,
                )
            )

    for local_list in local_lists:
        if not isinstance(local_list, dict):
            continue
        duplicates = find_duplicates(_names(_as_list(local_list.get("databases"))))
        if duplicates:
            errors.append(
                _duplicate_error(
                    f"There are databases with the same name in the {local_list.get('name')} list",
                    duplicates,
                )
            )

    return errors


def validate_db_config(document: Any) -> List[DbConfigValidationError]:
    """
    Validate a decoded config document.

    Both the structural and the uniqueness pass always run and their errors
    are concatenated. Nothing is raised: an empty list means the document
    is valid.
    """
    if not isinstance(document, dict):
        return [
            DbConfigValidationError(
                DbConfigValidationErrorKind.INVALID_CONFIG,
                f"must be object (got {type(document).__name__})",
            )
        ]
    return validate_structure(document) + validate_unique_names(document)
