"""Evaluate ``field__operator`` predicate records against payloads and objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .operators import DEFAULT_OPERATOR, get_operator, split_operator

_MISSING = object()

FilterRecord = Mapping[str, Any]


def read_field(candidate: Any, field: str) -> Any:
    """Read ``field`` from a raw payload or a constructed object.

    Objects are read by attribute first; unknown names fall back to the raw
    payload kept on the object so camelCase payload keys keep working.
    """

    if isinstance(candidate, Mapping):
        return candidate.get(field)
    value = getattr(candidate, field, _MISSING)
    if value is not _MISSING:
        return value
    raw = getattr(candidate, "_data", None)
    if isinstance(raw, Mapping):
        return raw.get(field)
    return None


@dataclass(frozen=True, slots=True)
class Predicate:
    """A single parsed filter clause."""

    field: str
    operator: str
    value: Any

    @classmethod
    def parse(cls, key: str, value: Any) -> "Predicate":
        field, operator = split_operator(key)
        return cls(field=field, operator=operator, value=value)

    @property
    def key(self) -> str:
        """Return the ``field__operator`` encoding of this clause."""

        if self.operator == DEFAULT_OPERATOR:
            return self.field
        return f"{self.field}__{self.operator}"

    def matches(self, candidate: Any) -> bool:
        operator = get_operator(self.operator)
        return operator(read_field(candidate, self.field), self.value)


def parse_predicates(record: FilterRecord | None) -> list[Predicate]:
    """Parse a predicate record into a list of clauses, preserving order."""

    if not record:
        return []
    return [Predicate.parse(key, value) for key, value in record.items()]


def check_attrs(candidate: Any, record: FilterRecord | None = None) -> bool:
    """Return ``True`` when every clause in ``record`` holds for ``candidate``."""

    return all(predicate.matches(candidate) for predicate in parse_predicates(record))
