"""
Pure helpers for drafts and loaded collections.

None of these mutate their inputs: each returns a new dict or list and
shares untouched elements with the original.
"""

import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence


def get_path(record: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Read a dotted path (`location.city`) from nested mappings."""
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def merge_field(draft: Mapping[str, Any], name: str, value: Any) -> Dict[str, Any]:
    """Copy of `draft` with one (possibly dotted) field replaced."""
    head, _, rest = name.partition(".")
    merged = dict(draft)
    if not rest:
        merged[head] = value
        return merged
    child = draft.get(head)
    merged[head] = merge_field(child if isinstance(child, Mapping) else {}, rest, value)
    return merged


def append_item(items: Sequence[Any], template: Any) -> List[Any]:
    return [*items, copy.deepcopy(template)]


def update_at(items: Sequence[Dict[str, Any]], index: int, key: str, value: Any) -> List[Dict[str, Any]]:
    """Replace `key` of element `index`; every other element is kept as is."""
    if not 0 <= index < len(items):
        raise IndexError(f"No element at index {index}")
    return [merge_field(item, key, value) if i == index else item for i, item in enumerate(items)]


def remove_at(items: Sequence[Any], index: int) -> List[Any]:
    if not 0 <= index < len(items):
        raise IndexError(f"No element at index {index}")
    return [item for i, item in enumerate(items) if i != index]


def renumber(items: Sequence[Dict[str, Any]], key: str, start: int = 1) -> List[Dict[str, Any]]:
    """Rewrite `key` so the sequence reads start, start+1, ..."""
    return [
        item if item.get(key) == number else {**item, key: number}
        for number, item in enumerate(items, start=start)
    ]


def add_unique(values: Sequence[str], value: str) -> List[str]:
    value = (value or "").strip()
    if not value or value in values:
        return list(values)
    return [*values, value]


def remove_value(values: Sequence[str], value: str) -> List[str]:
    return [v for v in values if v != value]


def matches_term(record: Mapping[str, Any], term: str, fields: Iterable[str]) -> bool:
    needle = term.lower()
    for field in fields:
        value = get_path(record, field)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


def filter_records(
    records: Sequence[Mapping[str, Any]],
    term: str,
    fields: Iterable[str],
    exact: Optional[Mapping[str, Any]] = None,
) -> List[Mapping[str, Any]]:
    """
    Subsequence of `records` matching the search term and exact filters.

    A record matches the term when any of `fields` contains it,
    case-insensitively. Empty term and empty filter values match everything.
    Order is preserved.
    """
    fields = list(fields)
    active = {k: v for k, v in (exact or {}).items() if v not in (None, "")}
    result = []
    for record in records:
        if term and not matches_term(record, term, fields):
            continue
        if any(get_path(record, k) != v for k, v in active.items()):
            continue
        result.append(record)
    return result
