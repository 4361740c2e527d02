"""Server configuration read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PROJECT_ROOT: Final[str] = "AGENT_RULES_PROJECT_ROOT"
ENV_LOG_LEVEL: Final[str] = "AGENT_RULES_LOG_LEVEL"

RULES_DIR_PARTS: Final[tuple[str, ...]] = (".cursor", "rules")
RULE_SUFFIX: Final[str] = ".mdc"
AGENTS_FILENAME: Final[str] = "AGENTS.md"


@dataclass(frozen=True)
class ServerConfig:
    """Locations of rule documents and process-level settings."""

    project_root: str | None = None
    rules_dir_parts: tuple[str, ...] = RULES_DIR_PARTS
    rule_suffix: str = RULE_SUFFIX
    agents_filename: str = AGENTS_FILENAME
    log_level: int = logging.WARNING

    def resolve_root(self, root: str | None = None) -> str:
        """Pick the project root for a call.

        An explicit *root* wins, then the configured default, then the
        working directory. ``os.getcwd`` raises if the directory is gone.
        """
        if root:
            return root
        if self.project_root:
            return self.project_root
        return os.getcwd()

    def rules_dir(self, root: str) -> Path:
        return Path(root).joinpath(*self.rules_dir_parts)

    def agents_path(self, root: str) -> Path:
        return Path(root) / self.agents_filename


def parse_log_level(value: str | None, default: int = logging.WARNING) -> int:
    """Map a level name like ``"debug"`` to its ``logging`` constant."""
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    return default


def load_config(
    env: Mapping[str, str] | None = None,
    *,
    project_root: str | None = None,
    log_level: int | None = None,
) -> ServerConfig:
    """Build a :class:`ServerConfig` from environment variables.

    Explicit keyword arguments (typically CLI options) override the
    environment.
    """
    environ = os.environ if env is None else env
    root = project_root or environ.get(ENV_PROJECT_ROOT) or None
    level = log_level if log_level is not None else parse_log_level(environ.get(ENV_LOG_LEVEL))
    return ServerConfig(project_root=root, log_level=level)
