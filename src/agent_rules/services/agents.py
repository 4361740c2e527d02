"""Load the project's ``AGENTS.md`` guidance document."""

from __future__ import annotations

import logging
from types import MappingProxyType

import anyio

from agent_rules.cache import ProjectCache
from agent_rules.config import ServerConfig
from agent_rules.frontmatter import parse_frontmatter
from agent_rules.models import DEFAULT_AGENT_DESCRIPTION, AgentDocument, AgentResult

logger = logging.getLogger(__name__)


def build_agent_document(file: str, text: str) -> AgentDocument:
    """Parse ``AGENTS.md`` text; metadata is kept verbatim."""
    metadata, content = parse_frontmatter(text)
    description = metadata.get("description")
    if not (isinstance(description, str) and description):
        description = DEFAULT_AGENT_DESCRIPTION
    return AgentDocument(
        file=file,
        description=description,
        content=content,
        metadata=MappingProxyType(metadata),
    )


def format_agent_document(document: AgentDocument) -> str:
    return f"## {document.description}\n\n{document.content}"


class AgentsService:
    """Loads one ``AGENTS.md`` per project root and caches it."""

    def __init__(
        self,
        config: ServerConfig | None = None,
        cache: ProjectCache[AgentDocument] | None = None,
    ) -> None:
        self._config = config or ServerConfig()
        self._cache: ProjectCache[AgentDocument] = (
            cache if cache is not None else ProjectCache()
        )

    @property
    def cache(self) -> ProjectCache[AgentDocument]:
        return self._cache

    async def load_agents(self, project_root: str | None = None) -> AgentResult:
        """Read and cache ``AGENTS.md``; on failure the cache is left alone."""
        try:
            root = self._config.resolve_root(project_root)
            path = anyio.Path(self._config.agents_path(root))
            try:
                text = await path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return AgentResult(
                    document=None,
                    message=f"No {self._config.agents_filename} file found at {path}",
                    error=True,
                )

            document = build_agent_document(self._config.agents_filename, text)
            self._cache.set(root, document)
            logger.debug("Cached %s for %s", document.file, root)
            return AgentResult(
                document=document,
                message=f"Loaded {document.file} from {path}:\n\n• {document.description}",
            )
        except Exception as exc:
            logger.warning("Failed to load %s: %s", self._config.agents_filename, exc)
            return AgentResult(
                document=None,
                message=f"Error loading {self._config.agents_filename}: {exc}",
                error=True,
            )

    async def get_agents(self, project_root: str | None = None) -> AgentResult:
        """Return the cached document, loading it first when needed."""
        try:
            root = self._config.resolve_root(project_root)
            if not self._cache.contains(root):
                result = await self.load_agents(root)
                if result.error:
                    return AgentResult(document=None, message=result.message, error=True)

            document = self._cache.get(root)
            if document is None:
                return AgentResult(
                    document=None,
                    message=f"No {self._config.agents_filename} found. Run load_agents first.",
                    error=True,
                )

            return AgentResult(
                document=document,
                message=f"{document.file} content:\n\n{format_agent_document(document)}",
            )
        except Exception as exc:
            logger.exception("Unexpected failure while reading %s", self._config.agents_filename)
            return AgentResult(
                document=None,
                message=f"Error getting {self._config.agents_filename}: {exc}",
                error=True,
            )

    def get_cached_agents(self, project_root: str | None = None) -> AgentDocument | None:
        try:
            root = self._config.resolve_root(project_root)
        except OSError:
            logger.exception("Cannot determine project root")
            return None
        return self._cache.get(root)

    def clear_cache(self, project_root: str | None = None) -> None:
        """Forget one root's document, or all of them when no root is given."""
        self._cache.clear(project_root or None)
