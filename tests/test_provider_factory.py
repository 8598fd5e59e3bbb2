"""Tests for provider factories and registry building."""

from __future__ import annotations

from pathlib import Path

import pytest

from content_loader.domain.errors import ConfigurationError
from content_loader.domain.provider_factory import (
    ContentProviderFactory,
    HttpProviderFactory,
    LocalFilesystemProviderFactory,
    build_providers,
    default_provider_factory,
    resolve_type,
)
from content_loader.domain.providers import HttpProvider, LocalFilesystemProvider
from tests.models import Article, Author


def test_first_supporting_factory_wins(tmp_path: Path) -> None:
    factory = default_provider_factory()

    files = factory.create(Article, {"path": str(tmp_path)})
    http = factory.create(Article, {"provider": "http", "base_url": "https://example.com"})

    assert isinstance(files, LocalFilesystemProvider)
    assert files.path == tmp_path
    assert isinstance(http, HttpProvider)


def test_unclaimed_config_is_a_configuration_error() -> None:
    factory = ContentProviderFactory([LocalFilesystemProviderFactory()])

    with pytest.raises(ConfigurationError, match='No content provider factory found for type "tests.models.Article"'):
        factory.create(Article, {"provider": "s3"})


def test_top_level_factory_always_supports() -> None:
    assert ContentProviderFactory([]).supports(Article, {})


def test_factories_validate_required_options() -> None:
    with pytest.raises(ConfigurationError, match='Missing "path"'):
        LocalFilesystemProviderFactory().create(Article, {})
    with pytest.raises(ConfigurationError, match='Missing "base_url"'):
        HttpProviderFactory().create(Article, {"provider": "http"})


def test_resolve_type() -> None:
    assert resolve_type("tests.models.Article") is Article

    for name in ("Article", "tests.missing_module.Article", "tests.models.Missing", "tests.models.field"):
        with pytest.raises(ConfigurationError):
            resolve_type(name)


def test_build_providers_from_declarations(tmp_path: Path) -> None:
    """Shorthand paths, full configs and lists of sources are all accepted."""

    providers = build_providers(
        {
            "tests.models.Article": [str(tmp_path / "a"), {"path": str(tmp_path / "b"), "patterns": ["*.md"]}],
            Author: {"provider": "http", "base_url": "https://example.com/authors"},
        }
    )

    assert [type(provider) for provider in providers] == [LocalFilesystemProvider, LocalFilesystemProvider, HttpProvider]
    assert providers[0].supports(Article)
    assert providers[2].supports(Author)
