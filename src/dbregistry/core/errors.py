"""
Error types for the database registry.

Two families live here. Validation problems with the config document are
plain values (``DbConfigValidationError``) that get returned, shown and
logged; they never propagate as exceptions. Everything else derives from
``DbRegistryError`` and is raised: these signal a caller bug (mutating an
unloaded store, renaming onto a taken name, removing a synthesized item)
or an update the store refused to persist.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence


class DbConfigValidationErrorKind(str, Enum):
    """Kinds of problems found in a config document."""

    INVALID_CONFIG = "InvalidConfig"
    DUPLICATE_NAMES = "DuplicateNames"


@dataclass(frozen=True)
class DbConfigValidationError:
    kind: DbConfigValidationErrorKind
    message: str


class DbRegistryError(Exception):
    """Base class for errors raised by the registry."""


class ConfigNotLoadedError(DbRegistryError):
    """A mutation was attempted while the store holds no valid config."""

    def __init__(self, message: str = "Cannot update the database config: config is not loaded"):
        super().__init__(message)


class EmptyNameError(DbRegistryError, ValueError):
    """A name passed to an add or rename operation was empty."""


class DuplicateNameError(DbRegistryError, ValueError):
    """An add or rename would produce two items with the same name in one scope."""


class ItemNotFoundError(DbRegistryError, LookupError):
    """A name path did not resolve to an item in the config."""


class UnsupportedOperationError(DbRegistryError):
    """The operation does not apply to this kind of db item."""


class InvalidConfigUpdateError(DbRegistryError, ValueError):
    """The next config document failed validation and was not written."""

    def __init__(self, errors: Sequence[DbConfigValidationError]):
        self.errors: List[DbConfigValidationError] = list(errors)
        details = "; ".join(error.message for error in self.errors)
        super().__init__(f"Refusing to write an invalid database config: {details}")
