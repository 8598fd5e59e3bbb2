"""Filter and sort engine working over arbitrary model objects."""

from __future__ import annotations

import functools
import numbers
import warnings
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from content_loader.domain.errors import ConfigurationError
from content_loader.domain.property_access import PropertyAccessor

__all__ = [
    "FilterSpec",
    "SortSpec",
    "filter_contents",
    "get_filter_function",
    "get_sort_function",
    "loose_equals",
    "sort_contents",
]

FilterSpec = str | Mapping[str, Any] | Callable[[Any], bool] | None
SortSpec = str | Mapping[str, Any] | Callable[[Any, Any], int] | None

_default_accessor = PropertyAccessor()


def loose_equals(value: Any, expected: Any) -> bool:
    """Compare the way content filters expect: booleans by truthiness, numbers across strings."""

    if isinstance(expected, bool) or isinstance(value, bool):
        return bool(value) == bool(expected)
    if isinstance(value, numbers.Number) and isinstance(expected, str):
        return _numeric_equals(value, expected)
    if isinstance(expected, numbers.Number) and isinstance(value, str):
        return _numeric_equals(expected, value)
    return value == expected


def _numeric_equals(number: Any, text: str) -> bool:
    try:
        return number == float(text)
    except ValueError:
        return False


def get_filter_function(
    filter_by: FilterSpec, accessor: PropertyAccessor | None = None
) -> Callable[[Any], bool] | None:
    if not filter_by:
        return None

    if isinstance(filter_by, str):
        return get_filter_function({filter_by: True}, accessor)

    if isinstance(filter_by, Mapping):
        accessor = accessor or _default_accessor
        criteria = dict(filter_by)

        def matches(item: Any) -> bool:
            for key, expected in criteria.items():
                if not loose_equals(accessor.get_value(item, key), expected):
                    return False
            return True

        return matches

    if callable(filter_by):
        return filter_by

    raise ConfigurationError(f'Unknown filter "{filter_by!r}"')


def get_sort_function(
    sort_by: SortSpec, accessor: PropertyAccessor | None = None
) -> Callable[[Any, Any], int] | None:
    if not sort_by:
        return None

    if isinstance(sort_by, str):
        return get_sort_function({sort_by: True}, accessor)

    if isinstance(sort_by, Mapping):
        accessor = accessor or _default_accessor
        keys = [(key, 1 if ascending else -1) for key, ascending in sort_by.items()]

        def compare(a: Any, b: Any) -> int:
            for key, direction in keys:
                value_a = accessor.get_value(a, key)
                value_b = accessor.get_value(b, key)
                if value_a == value_b:
                    continue
                # None sorts before any value.
                if value_a is None or value_b is None:
                    return (-1 if value_a is None else 1) * direction
                return ((value_a > value_b) - (value_a < value_b)) * direction
            return 0

        return compare

    if callable(sort_by):
        return sort_by

    raise ConfigurationError(f'Unknown sorter "{sort_by!r}"')


def filter_contents(
    contents: Iterable[Any], filter_by: FilterSpec = None, accessor: PropertyAccessor | None = None
) -> list[Any]:
    matches = get_filter_function(filter_by, accessor)
    if matches is None:
        return list(contents)
    return [item for item in contents if matches(item)]


def sort_contents(
    contents: Iterable[Any], sort_by: SortSpec = None, accessor: PropertyAccessor | None = None
) -> list[Any]:
    """Return ``contents`` sorted by ``sort_by``; equal items keep their order.

    Warnings emitted by comparisons are raised as errors so a broken
    comparison cannot silently produce a partial ordering.
    """

    compare = get_sort_function(sort_by, accessor)
    if compare is None:
        return list(contents)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        return sorted(contents, key=functools.cmp_to_key(compare))
