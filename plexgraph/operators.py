"""Named binary predicates used by ``field__operator`` filters."""

from __future__ import annotations

from typing import Any, Callable

Operator = Callable[[Any, Any], bool]

DEFAULT_OPERATOR = "exact"


def _lower(value: Any) -> str:
    return value.lower()


def _safe(func: Operator) -> Operator:
    """Wrap an operator so a mismatched value type evaluates to ``False``."""

    def wrapper(value: Any, query: Any) -> bool:
        try:
            return bool(func(value, query))
        except (TypeError, AttributeError, ValueError):
            return False

    return wrapper


# The query value is the haystack for ``contains``: ``v`` must appear inside ``q``.
OPERATORS: dict[str, Operator] = {
    "exact": _safe(lambda v, q: v == q),
    "iexact": _safe(lambda v, q: _lower(v) == _lower(q)),
    "contains": _safe(lambda v, q: v in q),
    "icontains": _safe(lambda v, q: _lower(v) in _lower(q)),
    "ne": _safe(lambda v, q: v != q),
    "in": _safe(lambda v, q: v in q),
    "gt": _safe(lambda v, q: v > q),
    "gte": _safe(lambda v, q: v >= q),
    "lt": _safe(lambda v, q: v < q),
    "lte": _safe(lambda v, q: v <= q),
    "startswith": _safe(lambda v, q: v.startswith(q)),
    "istartswith": _safe(lambda v, q: _lower(v).startswith(_lower(q))),
    "endswith": _safe(lambda v, q: v.endswith(q)),
    "iendswith": _safe(lambda v, q: _lower(v).endswith(_lower(q))),
}


def get_operator(name: str) -> Operator:
    """Return the operator registered under ``name``."""

    try:
        return OPERATORS[name]
    except KeyError:
        raise KeyError(f"Unknown filter operator: {name}") from None


def split_operator(key: str) -> tuple[str, str]:
    """Split a predicate key into ``(field, operator)``.

    ``"year__gte"`` becomes ``("year", "gte")``. A key without a known
    operator suffix is treated as a plain field compared with ``exact``.
    """

    field, sep, suffix = key.rpartition("__")
    if sep and field and suffix in OPERATORS:
        return field, suffix
    return key, DEFAULT_OPERATOR
