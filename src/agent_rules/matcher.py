"""Select the rules that apply to a file."""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import TYPE_CHECKING

from agent_rules.globs import glob_match

if TYPE_CHECKING:
    from collections.abc import Iterable

    from agent_rules.models import CursorRule


def relative_to_root(file_path: str, root: str) -> str:
    """Return *file_path* relative to *root* in ``/``-separated form.

    Relative inputs are resolved against the working directory first.
    """
    rel = os.path.relpath(os.path.abspath(file_path), os.path.abspath(root))
    return PurePath(rel).as_posix()


def rule_applies(rule: CursorRule, relative_path: str, basename: str) -> bool:
    """Check a single rule against both path candidates."""
    if rule.always_apply:
        return True
    return any(
        glob_match(pattern, relative_path) or glob_match(pattern, basename)
        for pattern in rule.globs
    )


def match_rules(
    file_path: str,
    rules: Iterable[CursorRule],
    root: str,
) -> list[CursorRule]:
    """Return the rules applying to *file_path*, in input order.

    A rule applies when ``always_apply`` is set or one of its globs
    matches either the root-relative path or the file's base name.
    """
    relative_path = relative_to_root(file_path, root)
    basename = os.path.basename(file_path)
    return [rule for rule in rules if rule_applies(rule, relative_path, basename)]
