"""Shared fixtures: content directories and a ready-to-use manager."""

from __future__ import annotations

from pathlib import Path

import pytest

from content_loader.domain.decoders import ContentDecoder
from content_loader.domain.denormalizers import default_denormalizer
from content_loader.domain.manager import ContentManager
from content_loader.domain.processors import ReferenceProcessor, default_processors
from content_loader.domain.providers import LocalFilesystemProvider
from tests.models import Article, Author


def write_file(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create a small content tree with articles and authors."""

    root = tmp_path / "content"
    write_file(
        root / "articles" / "zebra.md",
        "---\ntitle: Zebra\ndate: 2020-05-01\npublished: true\nauthor: jane\n---\n\nStripes.\n",
    )
    write_file(
        root / "articles" / "apple.md",
        "---\ntitle: Apple\ndate: 2020-05-01\npublished: false\ntags: [fruit]\n---\n\nRed.\n",
    )
    write_file(
        root / "articles" / "mango.yaml",
        "title: Mango\ndate: 2021-02-03\npublished: true\ncontent: Yellow.\n",
    )
    write_file(root / "authors" / "jane.json", '{"name": "Jane Doe"}')
    write_file(root / "authors" / "john.yaml", "name: John Roe\n")
    return root


@pytest.fixture
def manager(content_dir: Path) -> ContentManager:
    """Manager over the article and author directories with default pipeline."""

    return ContentManager(
        ContentDecoder(),
        default_denormalizer(),
        [
            LocalFilesystemProvider(Article, content_dir / "articles"),
            LocalFilesystemProvider(Author, content_dir / "authors"),
        ],
        [*default_processors(), ReferenceProcessor("author", Author)],
    )
