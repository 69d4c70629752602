# src/analyzer/services/document_resolver_service.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional

from analyzer.model import DocumentNode, MetadataAggregate
from analyzer.services.script_metadata_service import ScriptMetadataService
from loader.services.file_loader import FileLoader
from loader.utils.url_utils import UrlUtils
from parser.errors import ParseError
from parser.services.document_parse_service import DocumentParseService

logger = logging.getLogger(__name__)


def _resolved(value: Any) -> asyncio.Future:
    future = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future


class DocumentResolverService:
    """
    Resolves documents into DocumentNodes and follows their HTML imports.

    `documents` is the analyzer's href -> DocumentNode table; a document is
    parsed once and every later request for the same href gets the node that
    already exists.
    """

    def __init__(
            self,
            documents: Dict[str, DocumentNode],
            document_parser: DocumentParseService,
            script_service: ScriptMetadataService,
            loader: Optional[FileLoader] = None,
    ):
        self.documents = documents
        self.document_parser = document_parser
        self.script_service = script_service
        self.loader = loader

    def resolve(self, href: str, html: str) -> DocumentNode:
        """
        Parses `html` (the text of `href`) and schedules its script and import
        processing. Must be called while an event loop is running.

        Raises:
            ParseError: If the markup cannot be parsed.
        """
        if href in self.documents:
            return self.documents[href]

        try:
            parsed = self.document_parser.parse(html)
        except ParseError:
            logger.error("Error parsing document %s", href, exc_info=True)
            raise

        if parsed.script:
            metadata_loaded = asyncio.ensure_future(
                self.script_service.process_scripts(parsed.script, href)
            )
        else:
            metadata_loaded = _resolved(MetadataAggregate())

        dep_hrefs: List[str] = []
        pending: List[Awaitable] = [metadata_loaded]

        # Without a loader only the document itself is analyzed.
        if self.loader is not None:
            for link in parsed.import_:
                link_href = link.get("href")
                if link_href:
                    resolved_url = UrlUtils.resolve_url(href, link_href)
                    dep_hrefs.append(resolved_url)
                    pending.append(self._load_dependency(resolved_url))

        node = DocumentNode(
            href=href,
            html_loaded=_resolved(parsed),
            metadata_loaded=metadata_loaded,
            deps_loaded=asyncio.ensure_future(self._gather_dependencies(pending, dep_hrefs)),
        )
        self.documents[href] = node
        logger.debug("Resolved %s: %d script(s), %d import(s).", href, len(parsed.script), len(dep_hrefs))
        return node

    async def _load_dependency(self, href: str) -> None:
        content = await self.loader.request(href)
        known = href in self.documents
        node = self.resolve(href, content)
        # A node created elsewhere is awaited by its creator; waiting on it
        # here would deadlock on import cycles.
        if not known:
            await node.deps_loaded

    @staticmethod
    async def _gather_dependencies(pending: List[Awaitable], dep_hrefs: List[str]) -> List[str]:
        await asyncio.gather(*pending)
        return dep_hrefs
