"""Exception hierarchy shared by the content loading pipeline."""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConfigurationError",
    "ContentError",
    "ContentNotFoundError",
    "DecodeError",
    "DenormalizationError",
    "FilterError",
    "ProcessingError",
    "PropertyAccessError",
    "ProviderError",
    "QueryError",
    "SortError",
    "UnsupportedTypeError",
    "type_name",
]


def type_name(type_: Any) -> str:
    """Return the fully-qualified name of a model type for error messages."""

    if isinstance(type_, type):
        return f"{type_.__module__}.{type_.__qualname__}"
    return str(type_)


class ContentError(Exception):
    """Base class for every error raised by content_loader."""


class ConfigurationError(ContentError):
    """Raised when providers, factories, filters or sorters are misconfigured."""


class UnsupportedTypeError(ConfigurationError):
    """Raised when providers exist but none of them supports the requested type."""

    def __init__(self, type_: Any) -> None:
        self.type = type_
        super().__init__(f'No provider found for type "{type_name(type_)}"')


class ContentNotFoundError(ContentError, LookupError):
    """Raised when no provider yields content for a given id."""

    def __init__(self, type_: Any, id: str) -> None:
        self.type = type_
        self.id = id
        super().__init__(f'Content not found for type "{type_name(type_)}" and id "{id}".')


class DecodeError(ContentError, ValueError):
    """Raised when raw content cannot be decoded."""

    def __init__(self, message: str, format: str | None = None) -> None:
        self.format = format
        super().__init__(message)


class DenormalizationError(ContentError):
    """Raised when decoded data cannot be turned into a model instance."""


class ProcessingError(ContentError):
    """Raised by processors when decoded data is invalid."""


class PropertyAccessError(ContentError, AttributeError):
    """Raised when a property path cannot be resolved on an object."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class ProviderError(ContentError):
    """Raised when a provider cannot reach its backing source."""


class QueryError(ContentError, RuntimeError):
    """Raised when filtering or sorting a content list fails."""

    stage = "querying"

    def __init__(self, type_: Any) -> None:
        self.type = type_
        super().__init__(f"There was a problem {self.stage} {type_name(type_)}.")


class FilterError(QueryError):
    stage = "filtering"


class SortError(QueryError):
    stage = "sorting"
