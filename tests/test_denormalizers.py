"""Tests for the denormalizer chain."""

from __future__ import annotations

import pytest

from content_loader.domain.denormalizers import (
    ChainDenormalizer,
    PydanticDenormalizer,
    default_denormalizer,
)
from content_loader.domain.errors import DenormalizationError
from tests.models import Article, Author, Event, Location


def test_pydantic_models_are_validated() -> None:
    article = default_denormalizer().denormalize(
        {"slug": "a", "title": "A", "author": {"slug": "j", "name": "Jane"}, "unknown": 1},
        Article,
        "yaml",
    )

    assert isinstance(article, Article)
    assert article.author == Author(slug="j", name="Jane")


def test_pydantic_validation_error_is_wrapped() -> None:
    with pytest.raises(DenormalizationError, match="Invalid data for tests.models.Article"):
        default_denormalizer().denormalize({"slug": "a"}, Article)


def test_dataclass_nested_values_are_denormalized() -> None:
    event = default_denormalizer().denormalize(
        {"slug": "e", "title": "E", "location": {"city": "Lyon", "country": "FR"}, "extra": True},
        Event,
    )

    assert event == Event(slug="e", title="E", location=Location(city="Lyon", country="FR"))


def test_instantiated_values_are_skipped_when_requested() -> None:
    """Pre-built nested objects pass through untouched."""

    location = Location(city="Lyon", country="FR")
    event = default_denormalizer().denormalize(
        {"slug": "e", "title": "E", "location": location},
        Event,
        skip_instantiated=True,
    )

    assert event.location is location


def test_instantiated_values_fail_without_skip_flag() -> None:
    with pytest.raises(DenormalizationError, match="a mapping is required"):
        default_denormalizer().denormalize(
            {"slug": "e", "title": "E", "location": Location(city="Lyon", country="FR")},
            Event,
        )


def test_top_level_instance_is_returned_as_is() -> None:
    author = Author(slug="j", name="Jane")

    assert default_denormalizer().denormalize(author, Author, skip_instantiated=True) is author


def test_missing_dataclass_field_is_wrapped() -> None:
    with pytest.raises(DenormalizationError, match="tests.models.Event"):
        default_denormalizer().denormalize({"slug": "e"}, Event)


def test_first_supporting_denormalizer_wins() -> None:
    class Recording:
        def __init__(self) -> None:
            self.calls = 0

        def supports(self, data, target_type, *, skip_instantiated=False) -> bool:
            return target_type is Author

        def denormalize(self, data, target_type, format=None, *, skip_instantiated=False):
            self.calls += 1
            return "recorded"

    recording = Recording()
    chain = ChainDenormalizer([recording, PydanticDenormalizer()])

    assert chain.denormalize({"slug": "j", "name": "J"}, Author) == "recorded"
    assert isinstance(chain.denormalize({"slug": "a", "title": "A"}, Article), Article)
    assert recording.calls == 1


def test_unsupported_type_raises() -> None:
    chain = ChainDenormalizer([PydanticDenormalizer()])

    assert not chain.supports({}, Event)
    with pytest.raises(DenormalizationError, match="No denormalizer supports"):
        chain.denormalize({}, Event)
