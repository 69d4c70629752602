# src/analyzer/controllers/import_analyzer_controller.py
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from analyzer.errors import AnalyzerError
from analyzer.model import DocumentNode, MetadataTree
from analyzer.registry import DefinitionRegistry
from analyzer.services.document_resolver_service import DocumentResolverService
from analyzer.services.metadata_tree_service import MetadataTreeService
from analyzer.services.script_metadata_service import ScriptMetadataService
from loader.services.file_loader import FileLoader
from parser.model import ElementRecord, ModuleRecord
from parser.services.document_parse_service import DocumentParseService
from parser.services.script_parse_service import ScriptParseService

logger = logging.getLogger(__name__)


class ImportAnalyzerController:
    """
    A database of the elements and modules defined by an HTML document and
    everything it imports.

    Construction parses the root document right away and schedules the rest
    of the work on the running event loop, so the controller must be created
    from inside a coroutine. Each instance owns its document table and its
    element/module registries for its whole lifetime.

    Args:
        html (str): Raw text of the root document.
        attach_ast (bool): If True, records keep their script syntax nodes.
        href (str): Absolute URL of the root document.
        loader (FileLoader, optional): Used to fetch imports and external
            scripts. Without one, only the root document's inline scripts
            are analyzed.

    Raises:
        AnalyzerError: If no event loop is running.
        ParseError: If the root document cannot be parsed.
    """

    def __init__(
            self,
            html: str,
            attach_ast: bool,
            href: str,
            loader: Optional[FileLoader] = None,
            *,
            document_parser: Optional[DocumentParseService] = None,
            script_parser: Optional[ScriptParseService] = None,
    ):
        try:
            asyncio.get_running_loop()
        except RuntimeError as e:
            raise AnalyzerError(
                "ImportAnalyzerController must be created inside a running event loop."
            ) from e

        self.attach_ast = attach_ast
        self.href = href
        self.loader = loader

        self.elements: DefinitionRegistry[ElementRecord] = DefinitionRegistry("element")
        self.modules: DefinitionRegistry[ModuleRecord] = DefinitionRegistry("module")
        self.documents: Dict[str, DocumentNode] = {}

        self.script_service = ScriptMetadataService(
            script_parser or ScriptParseService(),
            self.elements,
            self.modules,
            attach_ast=attach_ast,
            loader=loader,
        )
        self.resolver = DocumentResolverService(
            self.documents,
            document_parser or DocumentParseService(),
            self.script_service,
            loader=loader,
        )

        logger.debug("Analyzing %s (loader: %s)", href, type(loader).__name__ if loader else "none")
        self.root = self.resolver.resolve(href, html)

    def resolve(self, href: str, html: str) -> DocumentNode:
        """Resolves one more document into this analyzer's document table."""
        return self.resolver.resolve(href, html)

    async def metadata_tree(self) -> MetadataTree:
        """Resolves to the merged metadata tree rooted at the root document."""
        return await MetadataTreeService(self.documents).build(self.root)
