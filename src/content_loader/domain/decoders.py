"""Decoders turning raw content text into plain mappings."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, Protocol

import yaml

from content_loader.domain.errors import DecodeError

__all__ = [
    "ContentDecoder",
    "Decoder",
    "decode_json",
    "decode_markdown",
    "decode_yaml",
]

FRONT_MATTER_DELIMITER = "---"


class Decoder(Protocol):
    def decode(self, raw: str, format: str) -> dict[str, Any]: ...


def decode_yaml(raw: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise DecodeError(f"Invalid YAML content: {exc}", "yaml") from exc
    return _ensure_mapping(data, "yaml")


def decode_json(raw: str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid JSON content: {exc}", "json") from exc
    return _ensure_mapping(data, "json")


def decode_markdown(raw: str) -> dict[str, Any]:
    """Split optional YAML front matter from the markdown body.

    The body is stored under the ``content`` key and is not rendered.
    """

    lines = raw.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {"content": raw}

    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            data = decode_yaml("\n".join(lines[1:index]))
            data["content"] = "\n".join(lines[index + 1 :]).strip("\n")
            return data
    raise DecodeError("Closing front matter delimiter '---' missing.", "markdown")


def _ensure_mapping(data: Any, format: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DecodeError(
            f"Root of {format} content must be a mapping, got {type(data).__name__}.", format
        )
    return data


class ContentDecoder:
    """Dispatches decoding to the function registered for a format."""

    def __init__(self, decoders: dict[str, Callable[[str], dict[str, Any]]] | None = None) -> None:
        self._decoders: dict[str, Callable[[str], dict[str, Any]]] = {
            "yaml": decode_yaml,
            "json": decode_json,
            "markdown": decode_markdown,
        }
        if decoders:
            self._decoders.update(decoders)

    def supports(self, format: str) -> bool:
        return format in self._decoders

    def decode(self, raw: str, format: str) -> dict[str, Any]:
        decoder = self._decoders.get(format)
        if decoder is None:
            raise DecodeError(f'Unsupported content format "{format}".', format)
        return decoder(raw)
