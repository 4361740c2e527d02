"""Frontmatter parser for rule and agent documents.

Only a narrow subset of YAML is understood: one ``key: value`` pair per
line, where the value is a plain string, ``true``/``false``, or a
single-line array (``["a", "b"]`` or the unquoted ``[a, b]`` form).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

DELIMITER = "---"

# Decoded header value: plain string, boolean flag or list of strings.
MetadataValue = str | bool | list[str]
Metadata = dict[str, MetadataValue]


def parse_frontmatter(text: str) -> tuple[Metadata, str]:
    """Split *text* into ``(metadata, body)``.

    Without a complete ``---`` delimited header the metadata is empty
    and *text* is returned untouched as the body.
    """
    lines = text.split("\n")
    if lines[0] != DELIMITER:
        return {}, text

    try:
        end = lines.index(DELIMITER, 1)
    except ValueError:
        return {}, text

    metadata: Metadata = {}
    for line in lines[1:end]:
        key, sep, raw = line.partition(":")
        if not sep:
            continue
        metadata[key.strip()] = decode_value(raw.strip())

    body = "\n".join(lines[end + 1 :]).strip()
    return metadata, body


def decode_value(raw: str) -> MetadataValue:
    """Decode a single trimmed header value."""
    if raw.startswith("[") and raw.endswith("]"):
        return decode_array(raw)
    if raw == "true":
        return True
    if raw == "false":
        return False
    return raw


def decode_array(raw: str) -> list[str]:
    """Decode a bracketed array, trying each decoder in order."""
    for decoder in _ARRAY_DECODERS:
        items = decoder(raw)
        if items is not None:
            return items
    return []


def _decode_json_array(raw: str) -> list[str] | None:
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, RecursionError):
        return None
    if not isinstance(value, list):
        value = [value]
    return [item if isinstance(item, str) else json.dumps(item) for item in value]


def _strip_quote(item: str) -> str:
    if item[:1] in ("'", '"'):
        item = item[1:]
    if item[-1:] in ("'", '"'):
        item = item[:-1]
    return item


def _decode_loose_array(raw: str) -> list[str] | None:
    pieces = (_strip_quote(piece.strip()) for piece in raw[1:-1].split(","))
    return [piece for piece in pieces if piece]


_ARRAY_DECODERS: tuple[Callable[[str], list[str] | None], ...] = (
    _decode_json_array,
    _decode_loose_array,
)
