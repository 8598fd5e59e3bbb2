"""The Content record: one file-backed item before decoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Content:
    """Raw content item produced by a provider for a given model type."""

    slug: str
    type: type
    raw_content: str
    format: str
    last_modified: datetime | None = None
    created_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
