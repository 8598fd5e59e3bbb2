"""Processors mutating decoded data before it is denormalized."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, tzinfo
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from dateutil import parser as date_parser

from content_loader.domain.content import Content
from content_loader.domain.errors import ConfigurationError, ProcessingError

if TYPE_CHECKING:
    from content_loader.domain.manager import ContentManager

__all__ = [
    "ContentManagerAware",
    "DateProcessor",
    "LastModifiedProcessor",
    "Processor",
    "ReferenceProcessor",
    "SlugProcessor",
    "default_processors",
]

logger = logging.getLogger(__name__)


class Processor(Protocol):
    def __call__(self, data: dict[str, Any], type_: type, content: Content) -> None: ...


@runtime_checkable
class ContentManagerAware(Protocol):
    """Processors needing the manager, e.g. to resolve links between contents."""

    def attach(self, manager: ContentManager) -> None: ...


class SlugProcessor:
    """Sets the slug property from the content record when the data has none."""

    def __init__(self, property: str = "slug") -> None:
        self.property = property

    def __call__(self, data: dict[str, Any], type_: type, content: Content) -> None:
        data.setdefault(self.property, content.slug)


class LastModifiedProcessor:
    def __init__(self, property: str = "last_modified") -> None:
        self.property = property

    def __call__(self, data: dict[str, Any], type_: type, content: Content) -> None:
        if self.property not in data and content.last_modified is not None:
            data[self.property] = content.last_modified


class DateProcessor:
    """Parses date strings of the given properties into datetimes.

    When ``default_timezone`` is set, naive results are assumed to be in that
    zone, so they compare with the timezone-aware ``last_modified`` values.
    """

    def __init__(self, properties: Iterable[str] = ("date",), default_timezone: tzinfo | None = None) -> None:
        self.properties = tuple(properties)
        self.default_timezone = default_timezone

    def __call__(self, data: dict[str, Any], type_: type, content: Content) -> None:
        for name in self.properties:
            value = data.get(name)
            if isinstance(value, datetime):
                parsed = value
            elif isinstance(value, date):
                parsed = datetime(value.year, value.month, value.day)
            elif isinstance(value, str):
                try:
                    parsed = date_parser.parse(value)
                except (ValueError, OverflowError) as exc:
                    raise ProcessingError(
                        f'Invalid date "{value}" for property "{name}" of content "{content.slug}".'
                    ) from exc
            else:
                continue
            if parsed.tzinfo is None and self.default_timezone is not None:
                parsed = parsed.replace(tzinfo=self.default_timezone)
            data[name] = parsed


class ReferenceProcessor:
    """Replaces slugs stored in a property with the referenced content objects."""

    def __init__(self, property: str, target_type: type) -> None:
        self.property = property
        self.target_type = target_type
        self._manager: ContentManager | None = None

    def attach(self, manager: ContentManager) -> None:
        self._manager = manager

    def __call__(self, data: dict[str, Any], type_: type, content: Content) -> None:
        if self._manager is None:
            raise ConfigurationError(
                f'{type(self).__name__} for property "{self.property}" is not attached to a content manager.'
            )
        value = data.get(self.property)
        if isinstance(value, str):
            data[self.property] = self._manager.get_content(self.target_type, value)
        elif isinstance(value, list):
            data[self.property] = [
                self._manager.get_content(self.target_type, item) if isinstance(item, str) else item
                for item in value
            ]
        else:
            return
        logger.debug(
            "Resolved content reference",
            extra={"slug": content.slug, "property": self.property},
        )


def default_processors() -> list[Processor]:
    return [SlugProcessor(), LastModifiedProcessor(), DateProcessor()]
