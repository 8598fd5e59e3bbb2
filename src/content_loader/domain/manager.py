"""Content manager: loads, caches and queries typed content objects."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from typing import Any, TypeVar

from content_loader.domain.content import Content
from content_loader.domain.decoders import Decoder
from content_loader.domain.denormalizers import Denormalizer
from content_loader.domain.errors import (
    ConfigurationError,
    ContentNotFoundError,
    FilterError,
    SortError,
    UnsupportedTypeError,
    type_name,
)
from content_loader.domain.processors import ContentManagerAware, Processor
from content_loader.domain.property_access import PropertyAccessor
from content_loader.domain.providers import ContentProvider
from content_loader.domain.query import FilterSpec, SortSpec, filter_contents, sort_contents

__all__ = ["ContentManager"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContentManager:
    """Resolves providers, decodes, processes and denormalizes content on demand.

    Loaded objects are cached by slug for the lifetime of the manager, so a
    given slug is denormalized at most once, whatever type requested it.
    The manager is not thread-safe.
    """

    def __init__(
        self,
        decoder: Decoder,
        denormalizer: Denormalizer,
        providers: Iterable[ContentProvider],
        processors: Iterable[Processor] = (),
        property_accessor: PropertyAccessor | None = None,
    ) -> None:
        self._decoder = decoder
        self._denormalizer = denormalizer
        self._providers = list(providers)
        self._processors = list(processors)
        self._property_accessor = property_accessor or PropertyAccessor()
        self._cache: dict[str, Any] = {}

        for processor in self._processors:
            if isinstance(processor, ContentManagerAware):
                processor.attach(self)

    # ------------------------------------------------------------------ Public API

    def get_contents(
        self,
        type_: type[T],
        sort_by: SortSpec = None,
        filter_by: FilterSpec = None,
    ) -> list[T]:
        """List all content of the given type, optionally filtered then sorted."""

        started = time.perf_counter()
        contents = [
            self._load(type_, content)
            for provider in self._get_providers(type_)
            for content in provider.list_contents()
        ]

        try:
            contents = self.filter_by(contents, filter_by)
        except Exception as exc:
            raise FilterError(type_) from exc

        try:
            contents = self.sort_by(contents, sort_by)
        except Exception as exc:
            raise SortError(type_) from exc

        logger.debug(
            "Contents listed",
            extra={
                "type": type_name(type_),
                "count": len(contents),
                "duration_ms": round((time.perf_counter() - started) * 1000, 3),
            },
        )
        return contents

    def get_content(self, type_: type[T], id: str) -> T:
        """Fetch one content by slug from the first provider that has it."""

        started = time.perf_counter()
        for provider in self._get_providers(type_):
            content = provider.get_content(id)
            if content is not None:
                loaded = self._load(type_, content)
                logger.debug(
                    "Content fetched",
                    extra={
                        "type": type_name(type_),
                        "id": id,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                    },
                )
                return loaded

        raise ContentNotFoundError(type_, id)

    def filter_by(self, contents: Iterable[Any], filter_by: FilterSpec = None) -> list[Any]:
        return filter_contents(contents, filter_by, self._property_accessor)

    def sort_by(self, contents: Iterable[Any], sort_by: SortSpec = None) -> list[Any]:
        return sort_contents(contents, sort_by, self._property_accessor)

    def supports(self, type_: type) -> bool:
        return any(provider.supports(type_) for provider in self._providers)

    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------ Internal helpers

    def _get_providers(self, type_: type) -> Iterator[ContentProvider]:
        if not self._providers:
            raise ConfigurationError(
                f"No content providers were configured. Did you forget to instantiate "
                f'"{type(self).__name__}" with the "providers" argument, or to declare '
                f"providers in the content configuration file?"
            )

        supporting = [provider for provider in self._providers if provider.supports(type_)]
        if not supporting:
            raise UnsupportedTypeError(type_)
        return iter(supporting)

    def _load(self, type_: type[T], content: Content) -> T:
        key = content.slug
        if key in self._cache:
            return self._cache[key]

        data = self._decoder.decode(content.raw_content, content.format)

        for processor in self._processors:
            processor(data, type_, content)

        loaded = self._denormalizer.denormalize(data, type_, content.format, skip_instantiated=True)
        self._cache[key] = loaded
        logger.debug("Content loaded", extra={"type": type_name(type_), "slug": key})
        return loaded
