"""Reflective read access to object properties by dotted path.

This is the one place where the library resolves attributes by name, so the
filter and sort engine can work over any model type.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from content_loader.domain.errors import PropertyAccessError

__all__ = ["PropertyAccessor"]

_MISSING = object()


class PropertyAccessor:
    """Reads values such as ``author.name`` or ``tags.0`` from objects."""

    def get_value(self, obj: Any, path: str) -> Any:
        if not path:
            raise PropertyAccessError(path, "Property path must not be empty.")

        value = obj
        for segment in path.split("."):
            value = self._read(value, segment)
            if value is _MISSING:
                raise PropertyAccessError(
                    path,
                    f'Cannot read property "{segment}" of path "{path}" on {type(obj).__name__}.',
                )
        return value

    @staticmethod
    def _read(value: Any, segment: str) -> Any:
        if isinstance(value, Mapping):
            return value.get(segment, _MISSING)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            try:
                return value[int(segment)]
            except (ValueError, IndexError):
                return _MISSING
        if segment.startswith("_"):
            return _MISSING
        return getattr(value, segment, _MISSING)
