"""Model types used across the test suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field


class Author(BaseModel):
    slug: str
    name: str


class Article(BaseModel):
    slug: str
    title: str
    content: str = ""
    date: datetime | None = None
    published: bool = False
    tags: list[str] = Field(default_factory=list)
    author: Author | None = None
    last_modified: datetime | None = None


@dataclass
class Location:
    city: str
    country: str


@dataclass
class Event:
    slug: str
    title: str
    location: Location | None = None
    speakers: list[str] = field(default_factory=list)
