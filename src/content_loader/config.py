"""Configuration for content_loader.

Settings come from ``CONTENT_*`` environment variables (a local ``.env`` file
is honoured). Providers are declared in a YAML file mapping fully-qualified
model class names to their source::

    providers:
      app.models.Article: content/articles
      app.models.Author:
        provider: files
        path: content/authors
        patterns: ["*.md", "*.yaml"]
      app.models.Page:
        provider: http
        base_url: https://cdn.example.com/pages
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_loader.domain.decoders import ContentDecoder, Decoder
from content_loader.domain.denormalizers import Denormalizer, default_denormalizer
from content_loader.domain.errors import ConfigurationError
from content_loader.domain.manager import ContentManager
from content_loader.domain.processors import Processor, default_processors
from content_loader.domain.provider_factory import ProviderFactory, build_providers

__all__ = [
    "ContentSettings",
    "ProviderConfig",
    "configure_logging",
    "create_content_manager",
    "load_providers_config",
    "load_settings",
]

logger = logging.getLogger(__name__)


class ContentSettings(BaseSettings):
    """Environment-driven settings."""

    model_config = SettingsConfigDict(env_prefix="CONTENT_", extra="ignore")

    config_path: Path = Field(default=Path("content.yaml"), description="YAML providers file")
    log_level: str = Field(default="INFO", description="Logging level for configure_logging()")


class ProviderConfig(BaseModel):
    """One provider declaration for a model type."""

    model_config = ConfigDict(extra="allow")

    provider: str = "files"
    path: str | None = None
    depth: int | None = None
    excludes: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=lambda: ["*"])
    base_url: str | None = None
    index: str | None = None
    format: str | None = None
    extension: str | None = None
    timeout: float | None = None


def load_settings() -> ContentSettings:
    load_dotenv()
    return ContentSettings()


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging from ``level``, then ``LOG_LEVEL``, then ``CONTENT_LOG_LEVEL``."""

    logging.basicConfig(level=level or os.getenv("LOG_LEVEL") or load_settings().log_level)


def load_providers_config(path: str | Path) -> dict[str, list[ProviderConfig]]:
    """Read the ``providers`` section of a YAML configuration file."""

    config_path = Path(path)
    try:
        document = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to load content configuration from {config_path}: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("providers", {}), dict):
        raise ConfigurationError(f'"providers" in {config_path} must be a mapping of type names to sources.')

    providers: dict[str, list[ProviderConfig]] = {}
    for type_name, entries in (document.get("providers") or {}).items():
        providers[type_name] = [
            _parse_provider_entry(entry, config_path, type_name)
            for entry in (entries if isinstance(entries, list) else [entries])
        ]
    logger.info("Loaded %s provider declarations from %s", len(providers), config_path)
    return providers


def _parse_provider_entry(entry: Any, config_path: Path, type_name: str) -> ProviderConfig:
    if isinstance(entry, str):
        entry = {"path": entry}
    try:
        config = ProviderConfig.model_validate(entry)
    except ValidationError as exc:
        raise ConfigurationError(f'Invalid provider configuration for "{type_name}": {exc}') from exc
    if config.path is not None and not Path(config.path).is_absolute():
        config.path = str(config_path.parent / config.path)
    return config


def create_content_manager(
    config_path: str | Path | None = None,
    *,
    processors: Iterable[Processor] | None = None,
    decoder: Decoder | None = None,
    denormalizer: Denormalizer | None = None,
    provider_factory: ProviderFactory | None = None,
) -> ContentManager:
    """Build a ContentManager with the default pipeline from a providers file."""

    path = Path(config_path) if config_path is not None else load_settings().config_path
    declarations = load_providers_config(path)
    providers = build_providers(
        {
            type_name: [config.model_dump(exclude_none=True) for config in configs]
            for type_name, configs in declarations.items()
        },
        provider_factory,
    )
    return ContentManager(
        decoder or ContentDecoder(),
        denormalizer or default_denormalizer(),
        providers,
        default_processors() if processors is None else processors,
    )
