"""Glob pattern matching for rule ``globs``.

Follows the minimatch conventions editors use for Cursor rules:

- ``*`` matches any run of characters within one path segment
- ``?`` matches a single character within one path segment
- ``**`` as a whole segment matches zero or more directories
- ``[abc]`` / ``[!abc]`` character classes
- ``{a,b}`` alternation
"""

from __future__ import annotations

import functools
import re

# Zero or more directory segments, never `.` or `..`.
_SEGMENTS = r"(?:(?!\.\.?/)[^/]*/)*"
_LAST_SEGMENT = r"(?!\.\.?$)[^/]*"


def glob_match(pattern: str, path: str) -> bool:
    """Return ``True`` if ``/``-separated *path* matches *pattern*."""
    return compile_glob(pattern).fullmatch(path) is not None


@functools.lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern into a regular expression."""
    return re.compile(_translate(pattern))


def _translate(pattern: str) -> str:
    parts: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i) and _is_segment_start(pattern, i):
                end = i + 2
                if end == n:
                    parts.append(_SEGMENTS + _LAST_SEGMENT)
                    i = end
                    continue
                if pattern[end] == "/":
                    parts.append(_SEGMENTS)
                    i = end + 1
                    continue
            # Collapse runs of stars that are not a whole segment.
            while i < n and pattern[i] == "*":
                i += 1
            parts.append("[^/]*")
            continue
        if c == "?":
            parts.append("[^/]")
        elif c == "[":
            cls, i = _translate_class(pattern, i)
            parts.append(cls)
            continue
        elif c == "{":
            alt, i = _translate_braces(pattern, i)
            parts.append(alt)
            continue
        else:
            parts.append(re.escape(c))
        i += 1
    return "".join(parts)


def _is_segment_start(pattern: str, i: int) -> bool:
    return i == 0 or pattern[i - 1] == "/"


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate ``[...]`` at *start*; an unclosed or invalid class is literal."""
    end = pattern.find("]", start + 2)
    if end == -1:
        return re.escape("["), start + 1
    body = pattern[start + 1 : end]
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    body = body.replace("\\", "\\\\")
    prefix = "^/" if negate else ""
    cls = f"[{prefix}{body}]"
    try:
        re.compile(cls)
    except re.error:
        return re.escape("["), start + 1
    return cls, end + 1


def _translate_braces(pattern: str, start: int) -> tuple[str, int]:
    """Translate ``{a,b}`` at *start*; unbalanced braces are literal."""
    depth = 0
    for end in range(start, len(pattern)):
        if pattern[end] == "{":
            depth += 1
        elif pattern[end] == "}":
            depth -= 1
            if depth == 0:
                break
    else:
        return re.escape("{"), start + 1

    options = _split_top_level(pattern[start + 1 : end])
    if len(options) < 2:
        return re.escape("{"), start + 1
    return "(?:" + "|".join(_translate(opt) for opt in options) + ")", end + 1


def _split_top_level(body: str) -> list[str]:
    options: list[str] = []
    depth = 0
    current: list[str] = []
    for c in body:
        if c == "," and depth == 0:
            options.append("".join(current))
            current = []
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        current.append(c)
    options.append("".join(current))
    return options
