"""Load directories of structured text files into typed, queryable objects."""

from __future__ import annotations

from content_loader.config import configure_logging, create_content_manager, load_providers_config
from content_loader.domain.content import Content
from content_loader.domain.decoders import ContentDecoder
from content_loader.domain.denormalizers import default_denormalizer
from content_loader.domain.errors import (
    ConfigurationError,
    ContentError,
    ContentNotFoundError,
    DecodeError,
    FilterError,
    SortError,
    UnsupportedTypeError,
)
from content_loader.domain.manager import ContentManager
from content_loader.domain.processors import (
    DateProcessor,
    LastModifiedProcessor,
    ReferenceProcessor,
    SlugProcessor,
    default_processors,
)
from content_loader.domain.provider_factory import build_providers, default_provider_factory
from content_loader.domain.providers import HttpProvider, LocalFilesystemProvider

__all__ = [
    "ConfigurationError",
    "Content",
    "ContentDecoder",
    "ContentError",
    "ContentManager",
    "ContentNotFoundError",
    "DateProcessor",
    "DecodeError",
    "FilterError",
    "HttpProvider",
    "LastModifiedProcessor",
    "LocalFilesystemProvider",
    "ReferenceProcessor",
    "SlugProcessor",
    "SortError",
    "UnsupportedTypeError",
    "build_providers",
    "configure_logging",
    "create_content_manager",
    "default_denormalizer",
    "default_processors",
    "default_provider_factory",
    "load_providers_config",
]
