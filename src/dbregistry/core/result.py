"""Value-or-errors result envelope."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class ValueResult(Generic[T, E]):
    """
    Either a value or a non-empty list of errors.

    Used where a failure is an expected runtime condition (an invalid config
    file) rather than a bug, so callers branch on ``is_failure`` instead of
    catching exceptions.
    """

    _value: Optional[T] = None
    errors: List[E] = field(default_factory=list)

    @classmethod
    def ok(cls, value: T) -> "ValueResult[T, E]":
        return cls(_value=value, errors=[])

    @classmethod
    def fail(cls, errors: Sequence[E]) -> "ValueResult[T, E]":
        if not errors:
            raise ValueError("Failed results must have at least one error")
        return cls(_value=None, errors=list(errors))

    @property
    def is_success(self) -> bool:
        return not self.errors

    @property
    def is_failure(self) -> bool:
        return bool(self.errors)

    @property
    def value(self) -> T:
        if self.errors:
            raise RuntimeError("Cannot get value for unsuccessful result")
        return self._value  # type: ignore[return-value]
