"""Factories building content providers from declarative configuration."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from content_loader.domain.errors import ConfigurationError, type_name
from content_loader.domain.providers import ContentProvider, HttpProvider, LocalFilesystemProvider

__all__ = [
    "ContentProviderFactory",
    "HttpProviderFactory",
    "LocalFilesystemProviderFactory",
    "ProviderFactory",
    "build_providers",
    "default_provider_factory",
    "resolve_type",
]

logger = logging.getLogger(__name__)


class ProviderFactory(Protocol):
    def supports(self, type_: type, config: Mapping[str, Any]) -> bool: ...

    def create(self, type_: type, config: Mapping[str, Any]) -> ContentProvider: ...


class ContentProviderFactory:
    """Chooses the first factory matching the type and config."""

    def __init__(self, factories: Iterable[ProviderFactory]) -> None:
        self._factories = list(factories)

    def supports(self, type_: type, config: Mapping[str, Any]) -> bool:
        return True

    def create(self, type_: type, config: Mapping[str, Any]) -> ContentProvider:
        for factory in self._factories:
            if factory.supports(type_, config):
                return factory.create(type_, config)
        raise ConfigurationError(f'No content provider factory found for type "{type_name(type_)}"')


class LocalFilesystemProviderFactory:
    KIND = "files"

    def supports(self, type_: type, config: Mapping[str, Any]) -> bool:
        return config.get("provider", self.KIND) == self.KIND

    def create(self, type_: type, config: Mapping[str, Any]) -> LocalFilesystemProvider:
        if not config.get("path"):
            raise ConfigurationError(f'Missing "path" for the files provider of type "{type_name(type_)}"')
        return LocalFilesystemProvider(
            type_,
            config["path"],
            depth=config.get("depth"),
            excludes=config.get("excludes") or (),
            patterns=config.get("patterns") or ("*",),
        )


class HttpProviderFactory:
    KIND = "http"

    def supports(self, type_: type, config: Mapping[str, Any]) -> bool:
        return config.get("provider") == self.KIND

    def create(self, type_: type, config: Mapping[str, Any]) -> HttpProvider:
        if not config.get("base_url"):
            raise ConfigurationError(f'Missing "base_url" for the http provider of type "{type_name(type_)}"')
        options = {
            key: config[key]
            for key in ("index", "format", "extension", "timeout")
            if config.get(key) is not None
        }
        return HttpProvider(type_, config["base_url"], **options)


def default_provider_factory() -> ContentProviderFactory:
    return ContentProviderFactory([LocalFilesystemProviderFactory(), HttpProviderFactory()])


def resolve_type(name: str) -> type:
    """Import a model class from its fully-qualified name, e.g. ``app.models.Article``."""

    module_name, _, class_name = name.rpartition(".")
    if not module_name:
        raise ConfigurationError(f'Model type "{name}" must be a fully-qualified class name.')
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f'Cannot import module "{module_name}" for model type "{name}".') from exc
    resolved = getattr(module, class_name, None)
    if not isinstance(resolved, type):
        raise ConfigurationError(f'Model type "{name}" is not a class.')
    return resolved


def build_providers(
    providers_config: Mapping[str | type, Any],
    factory: ProviderFactory | None = None,
) -> list[ContentProvider]:
    """Create the provider registry from a ``{type: path or config}`` mapping."""

    factory = factory or default_provider_factory()
    providers: list[ContentProvider] = []
    for type_ref, config in providers_config.items():
        type_ = resolve_type(type_ref) if isinstance(type_ref, str) else type_ref
        for entry in config if isinstance(config, list) else [config]:
            options = {"path": entry} if isinstance(entry, str) else dict(entry)
            providers.append(factory.create(type_, options))
            logger.info(
                "Content provider registered for %s (%s)",
                type_name(type_),
                options.get("provider", LocalFilesystemProviderFactory.KIND),
            )
    return providers
