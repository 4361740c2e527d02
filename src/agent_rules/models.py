"""Data models for rule and agent documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from agent_rules.frontmatter import MetadataValue

DEFAULT_RULE_DESCRIPTION = "No description"
DEFAULT_AGENT_DESCRIPTION = "Agent rules and guidelines"


@dataclass(frozen=True)
class CursorRule:
    """A parsed ``.mdc`` rule document."""

    file: str
    description: str
    globs: tuple[str, ...]
    always_apply: bool
    content: str


@dataclass(frozen=True)
class AgentDocument:
    """The parsed ``AGENTS.md`` of a project."""

    file: str
    description: str
    content: str
    metadata: Mapping[str, MetadataValue] = field(
        default_factory=lambda: MappingProxyType({}),
    )


@dataclass(frozen=True)
class RulesResult:
    """Outcome of a rule load or lookup."""

    rules: tuple[CursorRule, ...]
    message: str
    error: bool = False
    file_errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class AgentResult:
    """Outcome of an AGENTS.md load or lookup."""

    document: AgentDocument | None
    message: str
    error: bool = False
