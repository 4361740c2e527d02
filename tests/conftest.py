"""Shared test fixtures for agent-rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


TS_RULE = """---
description: TypeScript rules
globs: ["*.ts", "*.tsx"]
alwaysApply: false
---
TypeScript specific rules
"""

GLOBAL_RULE = """---
description: Global rules
alwaysApply: true
---
Always apply these rules
"""

REACT_RULE = """---
description: React rules
globs: ["**/components/**/*.tsx", "**/pages/**/*.tsx"]
---
React component rules
"""


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def rules_dir(tmp_path: Path) -> Path:
    """Create an empty ``.cursor/rules`` directory."""
    path = tmp_path / ".cursor" / "rules"
    path.mkdir(parents=True)
    return path


@pytest.fixture()
def tmp_project(tmp_path: Path, rules_dir: Path) -> Path:
    """Project with a TypeScript, a global and a React rule."""
    (rules_dir / "global.mdc").write_text(GLOBAL_RULE, encoding="utf-8")
    (rules_dir / "react.mdc").write_text(REACT_RULE, encoding="utf-8")
    (rules_dir / "typescript.mdc").write_text(TS_RULE, encoding="utf-8")
    (rules_dir / "notes.txt").write_text("not a rule", encoding="utf-8")
    return tmp_path
