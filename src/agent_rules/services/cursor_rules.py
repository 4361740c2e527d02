"""Load ``.cursor/rules/*.mdc`` documents and match them against files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import anyio

from agent_rules.cache import ProjectCache
from agent_rules.config import ServerConfig
from agent_rules.frontmatter import parse_frontmatter
from agent_rules.matcher import match_rules, relative_to_root
from agent_rules.models import DEFAULT_RULE_DESCRIPTION, CursorRule, RulesResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from agent_rules.frontmatter import Metadata

logger = logging.getLogger(__name__)

NOT_LOADED_MESSAGE = "No Cursor rules found. Run load_cursor_rules first."


def build_rule(file: str, text: str) -> CursorRule:
    """Parse one rule document into a :class:`CursorRule`."""
    metadata, content = parse_frontmatter(text)
    return CursorRule(
        file=file,
        description=_description(metadata),
        globs=_globs(metadata),
        always_apply=metadata.get("alwaysApply") is True,
        content=content,
    )


def _description(metadata: Metadata) -> str:
    value = metadata.get("description")
    if isinstance(value, str) and value:
        return value
    return DEFAULT_RULE_DESCRIPTION


def _globs(metadata: Metadata) -> tuple[str, ...]:
    value = metadata.get("globs")
    if isinstance(value, list):
        return tuple(value)
    if isinstance(value, bool):
        return ()
    if isinstance(value, str) and value:
        return (value,)
    return ()


def _flag(value: bool) -> str:
    return "true" if value else "false"


def format_rule_summary(rule: CursorRule) -> str:
    return (
        f"• {rule.file}: {rule.description}\n"
        f"  Globs: {', '.join(rule.globs)}\n"
        f"  Always apply: {_flag(rule.always_apply)}"
    )


def format_rule_listing(rules: Sequence[CursorRule]) -> str:
    """Render cached rules for ``list_cursor_rules``."""
    if not rules:
        return NOT_LOADED_MESSAGE
    blocks = [
        f"**{rule.file}**\n{rule.description}\n"
        f"Globs: {', '.join(rule.globs)}\n"
        f"Always apply: {_flag(rule.always_apply)}"
        for rule in rules
    ]
    return "Available Cursor Rules:\n\n" + "\n\n".join(blocks)


def format_applicable_rule(rule: CursorRule) -> str:
    header = f"{rule.description} ({rule.file})"
    scope = "Always applies" if rule.always_apply else f"Applies to: {', '.join(rule.globs)}"
    return f"## {header}\n*{scope}*\n\n{rule.content}"


class CursorRulesService:
    """Loads Cursor rules per project root and caches the parsed result."""

    def __init__(
        self,
        config: ServerConfig | None = None,
        cache: ProjectCache[tuple[CursorRule, ...]] | None = None,
    ) -> None:
        self._config = config or ServerConfig()
        self._cache: ProjectCache[tuple[CursorRule, ...]] = (
            cache if cache is not None else ProjectCache()
        )

    @property
    def cache(self) -> ProjectCache[tuple[CursorRule, ...]]:
        return self._cache

    async def load_rules(self, project_root: str | None = None) -> RulesResult:
        """Read every ``.mdc`` file under the rules directory.

        A missing or unlistable directory fails the whole call and keeps
        the cache as it was. Files that cannot be read are reported in
        ``file_errors`` and skipped; whatever was parsed replaces the
        cache entry for the root, even when that is nothing.
        """
        try:
            root = self._config.resolve_root(project_root)
            return await self._load(root)
        except Exception as exc:
            logger.exception("Unexpected failure while loading cursor rules")
            return RulesResult(
                rules=(), message=f"Error loading cursor rules: {exc}", error=True
            )

    async def _load(self, root: str) -> RulesResult:
        rules_dir = anyio.Path(self._config.rules_dir(root))
        try:
            entries = sorted(
                [entry async for entry in rules_dir.iterdir()], key=lambda e: e.name
            )
        except OSError as exc:
            logger.debug("Cannot list %s: %s", rules_dir, exc)
            return RulesResult(
                rules=(),
                message=f"No .cursor/rules directory found at {rules_dir}",
                error=True,
            )

        rules: list[CursorRule] = []
        file_errors: list[str] = []
        for entry in entries:
            if entry.suffix != self._config.rule_suffix:
                continue
            try:
                text = await entry.read_text(encoding="utf-8")
                rules.append(build_rule(entry.name, text))
            except (OSError, ValueError, RecursionError) as exc:
                logger.warning("Skipping rule file %s: %s", entry, exc)
                file_errors.append(f"Error reading rule file {entry.name}: {exc}")

        loaded = tuple(rules)
        self._cache.set(root, loaded)
        logger.debug("Cached %d cursor rules for %s", len(loaded), root)

        message = f"Loaded {len(loaded)} rule files from {rules_dir}:\n\n" + "\n\n".join(
            format_rule_summary(rule) for rule in loaded
        )
        if file_errors:
            message += "\n\nWarnings:\n" + "\n".join(f"• {err}" for err in file_errors)
        return RulesResult(rules=loaded, message=message, file_errors=tuple(file_errors))

    async def get_rules_for_file(
        self,
        file_path: str,
        project_root: str | None = None,
    ) -> RulesResult:
        """Return the cached rules that apply to *file_path*.

        Loads the rules first when the root has no cache entry yet.
        """
        try:
            root = self._config.resolve_root(project_root)
            if not self._cache.contains(root):
                await self.load_rules(root)

            rules = self._cache.get(root) or ()
            if not rules:
                return RulesResult(rules=(), message=NOT_LOADED_MESSAGE, error=True)

            applicable = tuple(match_rules(file_path, rules, root))
            if not applicable:
                relative_path = relative_to_root(file_path, root)
                return RulesResult(
                    rules=(),
                    message=f"No Cursor rules apply to {file_path} ({relative_path})",
                )

            rules_text = "\n\n---\n\n".join(format_applicable_rule(r) for r in applicable)
            return RulesResult(
                rules=applicable,
                message=f"Applicable Cursor rules for {file_path}:\n\n{rules_text}",
            )
        except Exception as exc:
            logger.exception("Unexpected failure while matching cursor rules")
            return RulesResult(
                rules=(), message=f"Error getting cursor rules: {exc}", error=True
            )

    def get_cached_rules(self, project_root: str | None = None) -> tuple[CursorRule, ...]:
        """Return cached rules for the root without touching the disk."""
        try:
            root = self._config.resolve_root(project_root)
        except OSError:
            logger.exception("Cannot determine project root")
            return ()
        return self._cache.get(root) or ()

    def clear_cache(self, project_root: str | None = None) -> None:
        """Forget one root's rules, or all of them when no root is given."""
        self._cache.clear(project_root or None)
