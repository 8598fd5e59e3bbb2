"""Tests for the built-in processors."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from content_loader.domain.content import Content
from content_loader.domain.errors import ConfigurationError, ProcessingError
from content_loader.domain.processors import (
    DateProcessor,
    LastModifiedProcessor,
    ReferenceProcessor,
    SlugProcessor,
)
from tests.models import Article, Author

MODIFIED = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_content(slug: str = "posts/hello") -> Content:
    return Content(slug=slug, type=Article, raw_content="", format="yaml", last_modified=MODIFIED)


def test_slug_processor_only_fills_missing_slug() -> None:
    data: dict = {}
    SlugProcessor()(data, Article, make_content())
    assert data["slug"] == "posts/hello"

    data = {"slug": "custom"}
    SlugProcessor()(data, Article, make_content())
    assert data["slug"] == "custom"


def test_slug_processor_custom_property() -> None:
    data: dict = {}
    SlugProcessor("id")(data, Article, make_content())

    assert data == {"id": "posts/hello"}


def test_last_modified_processor() -> None:
    data: dict = {}
    LastModifiedProcessor()(data, Article, make_content())
    assert data["last_modified"] == MODIFIED

    data = {}
    LastModifiedProcessor()(data, Article, Content("x", Article, "", "yaml"))
    assert "last_modified" not in data


def test_date_processor_parses_strings_and_dates() -> None:
    data = {"date": "2021-06-15T08:30:00", "published": date(2020, 1, 2), "other": "2020"}
    DateProcessor(["date", "published"])(data, Article, make_content())

    assert data["date"] == datetime(2021, 6, 15, 8, 30)
    assert data["published"] == datetime(2020, 1, 2)
    assert data["other"] == "2020"


def test_date_processor_default_timezone_makes_dates_aware() -> None:
    """Naive dates get the default zone; explicit offsets are kept."""

    data = {"date": "2021-06-15T08:30:00", "start": date(2020, 1, 2), "end": "2021-06-15T08:30:00+02:00"}
    DateProcessor(["date", "start", "end"], default_timezone=timezone.utc)(data, Article, make_content())

    assert data["date"] == datetime(2021, 6, 15, 8, 30, tzinfo=timezone.utc)
    assert data["start"] == datetime(2020, 1, 2, tzinfo=timezone.utc)
    assert data["end"].utcoffset().total_seconds() == 7200
    assert sorted([data["date"], MODIFIED, data["start"]]) == [data["start"], data["date"], MODIFIED]


def test_date_processor_rejects_invalid_dates() -> None:
    with pytest.raises(ProcessingError, match='Invalid date "soon"'):
        DateProcessor()({"date": "soon"}, Article, make_content())


def test_reference_processor_requires_attachment() -> None:
    with pytest.raises(ConfigurationError, match="not attached"):
        ReferenceProcessor("author", Author)({"author": "jane"}, Article, make_content())


def test_reference_processor_resolves_slugs() -> None:
    class FakeManager:
        def get_content(self, type_, id):
            return Author(slug=id, name=id.title())

    processor = ReferenceProcessor("authors", Author)
    processor.attach(FakeManager())
    existing = Author(slug="kept", name="Kept")
    data = {"authors": ["jane", existing]}

    processor(data, Article, make_content())

    assert data["authors"][0] == Author(slug="jane", name="Jane")
    assert data["authors"][1] is existing
