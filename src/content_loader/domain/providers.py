"""Content providers enumerating raw content from a backing source."""

from __future__ import annotations

import fnmatch
import glob
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path, PurePosixPath
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urljoin

import httpx

from content_loader.domain.content import Content
from content_loader.domain.errors import ProviderError

__all__ = [
    "ContentProvider",
    "HttpProvider",
    "LocalFilesystemProvider",
    "format_from_extension",
]

logger = logging.getLogger(__name__)

_FORMATS = {
    "md": "markdown",
    "markdown": "markdown",
    "yml": "yaml",
    "yaml": "yaml",
    "json": "json",
}
_EXTENSIONS = {"markdown": "md", "yaml": "yaml", "json": "json"}


def format_from_extension(extension: str) -> str:
    """Map a file extension (with or without the dot) to a format tag."""

    extension = extension.lstrip(".").lower()
    return _FORMATS.get(extension, extension)


@runtime_checkable
class ContentProvider(Protocol):
    """Enumerates and fetches Content records for one model type."""

    def supports(self, type_: type) -> bool: ...

    def list_contents(self) -> Iterator[Content]: ...

    def get_content(self, slug: str) -> Content | None: ...


class LocalFilesystemProvider:
    """Serves every matching file below a directory as a Content record."""

    def __init__(
        self,
        supported_type: type,
        path: str | Path,
        *,
        depth: int | None = None,
        excludes: Iterable[str] = (),
        patterns: Iterable[str] = ("*",),
    ) -> None:
        self._supported_type = supported_type
        self._path = Path(path)
        self._depth = depth
        self._excludes = tuple(excludes)
        self._patterns = tuple(patterns) or ("*",)

    @property
    def path(self) -> Path:
        return self._path

    def supports(self, type_: type) -> bool:
        return type_ is self._supported_type

    def list_contents(self) -> Iterator[Content]:
        """Yield a Content per matching file, in sorted path order."""

        count = 0
        for file_path in self._files():
            count += 1
            yield self._from_file(file_path)
        logger.debug(
            "Listed local contents",
            extra={"path": str(self._path), "type": self._supported_type.__name__, "count": count},
        )

    def get_content(self, slug: str) -> Content | None:
        """Look up ``<path>/<slug>`` or ``<path>/<slug>.*`` directly, without scanning the tree."""

        relative = PurePosixPath(slug)
        if not slug or relative.is_absolute() or ".." in relative.parts:
            return None

        directory = self._path.joinpath(*relative.parts[:-1])
        if not directory.is_dir():
            return None

        candidates = [directory / relative.name, *directory.glob(f"{glob.escape(relative.name)}.*")]
        for candidate in sorted(candidates):
            if candidate.with_suffix("").name != relative.name or not candidate.is_file():
                continue
            if self._accepts(candidate.relative_to(self._path)):
                return self._from_file(candidate)
        return None

    def _files(self) -> Iterator[Path]:
        if not self._path.is_dir():
            raise ProviderError(f"Content directory not found at {self._path}")
        for file_path in sorted(self._path.rglob("*")):
            if file_path.is_file() and self._accepts(file_path.relative_to(self._path)):
                yield file_path

    def _accepts(self, relative: Path) -> bool:
        # Dot files and anything below a hidden directory are never content.
        if any(part.startswith(".") for part in relative.parts):
            return False
        if self._depth is not None and len(relative.parts) - 1 > self._depth:
            return False
        if not any(fnmatch.fnmatch(relative.name, pattern) for pattern in self._patterns):
            return False
        relative_posix = relative.as_posix()
        for exclude in self._excludes:
            if fnmatch.fnmatch(relative_posix, exclude):
                return False
            if any(fnmatch.fnmatch(part, exclude) for part in relative.parts[:-1]):
                return False
        return True

    def _from_file(self, file_path: Path) -> Content:
        relative = file_path.relative_to(self._path)
        stat = file_path.stat()
        return Content(
            slug=relative.with_suffix("").as_posix(),
            type=self._supported_type,
            raw_content=file_path.read_text(encoding="utf-8"),
            format=format_from_extension(file_path.suffix),
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            created_at=datetime.fromtimestamp(stat.st_ctime, tz=timezone.utc),
            metadata={"path": str(file_path), "provider": "files"},
        )


class HttpProvider:
    """Serves content published over HTTP next to a JSON index document."""

    def __init__(
        self,
        supported_type: type,
        base_url: str,
        *,
        index: str = "index.json",
        format: str = "markdown",
        extension: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._supported_type = supported_type
        self._base_url = base_url.rstrip("/") + "/"
        self._index = index
        self._format = format
        self._extension = extension or _EXTENSIONS.get(format, format)
        self._timeout = timeout
        self._client = client

    def supports(self, type_: type) -> bool:
        return type_ is self._supported_type

    def list_contents(self) -> Iterator[Content]:
        """Yield a Content per entry of the index document."""

        response = self._send_request(self._index)
        try:
            entries = response.json()
        except ValueError as exc:
            raise ProviderError(f"Content index at {response.url} is not valid JSON.") from exc
        if not isinstance(entries, list):
            raise ProviderError(f"Content index at {response.url} must be a JSON list.")

        for entry in entries:
            slug, format = self._parse_entry(entry)
            content = self._fetch(slug, format)
            if content is None:
                raise ProviderError(f'Content "{slug}" is listed in the index but was not found.')
            yield content

    def get_content(self, slug: str) -> Content | None:
        if not slug:
            return None
        return self._fetch(slug, self._format)

    def _parse_entry(self, entry: Any) -> tuple[str, str]:
        if isinstance(entry, str):
            return entry, self._format
        if isinstance(entry, dict) and isinstance(entry.get("slug"), str):
            return entry["slug"], str(entry.get("format") or self._format)
        raise ProviderError(f"Invalid content index entry: {entry!r}")

    def _fetch(self, slug: str, format: str) -> Content | None:
        extension = self._extension if format == self._format else _EXTENSIONS.get(format, format)
        path = f"{slug.lstrip('/')}.{extension}"
        response = self._send_request(path, allow_missing=True)
        if response is None:
            return None
        last_modified = _parse_http_date(response.headers.get("Last-Modified"))
        return Content(
            slug=slug,
            type=self._supported_type,
            raw_content=response.text,
            format=format,
            last_modified=last_modified,
            metadata={"url": str(response.url), "provider": "http"},
        )

    def _send_request(self, path: str, *, allow_missing: bool = False) -> httpx.Response | None:
        url = urljoin(self._base_url, path)
        try:
            if self._client is not None:
                response = self._client.get(url, timeout=self._timeout)
            else:
                with httpx.Client(timeout=self._timeout) as session:
                    response = session.get(url)
        except httpx.RequestError as exc:
            raise ProviderError(f"Failed to fetch {url}: {exc!s}") from exc

        if allow_missing and response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise ProviderError(f"Content source error {response.status_code} for {url}")
        return response


def _parse_http_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
