# src/analyzer/services/script_metadata_service.py
from __future__ import annotations

import asyncio
import copy
import logging
from functools import reduce
from typing import List, Optional

from bs4 import Tag

from analyzer.model import MetadataAggregate, merge_metadata
from analyzer.registry import DefinitionRegistry
from loader.services.file_loader import FileLoader
from loader.utils.url_utils import UrlUtils
from parser.errors import ParseError
from parser.model import ElementRecord, ModuleRecord
from parser.services.script_parse_service import ScriptParseService

logger = logging.getLogger(__name__)


class ScriptMetadataService:
    """
    Turns the script tags of one document into a single MetadataAggregate.

    Inline bodies go through the script parser and every declaration is
    registered with the analyzer-wide registries. External scripts are
    fetched through the loader when there is one and are otherwise ignored.
    """

    def __init__(
            self,
            script_parser: ScriptParseService,
            elements: DefinitionRegistry[ElementRecord],
            modules: DefinitionRegistry[ModuleRecord],
            attach_ast: bool = False,
            loader: Optional[FileLoader] = None,
    ):
        self.script_parser = script_parser
        self.elements = elements
        self.modules = modules
        self.attach_ast = attach_ast
        self.loader = loader

    async def process_scripts(self, scripts: List[Tag], href: str) -> MetadataAggregate:
        """Processes all scripts of the document at `href`; results keep script order."""
        results = await asyncio.gather(*(self.process_script(script, href) for script in scripts))
        return reduce(merge_metadata, results, MetadataAggregate())

    async def process_script(self, script: Tag, href: str) -> MetadataAggregate:
        src = script.get("src")
        if not src:
            return self._process_inline(script.string or "", href)

        if self.loader is None:
            return MetadataAggregate()

        resolved_src = UrlUtils.resolve_url(href, src)
        content = await self.loader.request(resolved_src)

        # Same tag, but carrying the fetched body inline.
        inline = copy.copy(script)
        del inline["src"]
        inline.string = content
        return await self.process_script(inline, href)

    def _process_inline(self, body: str, href: str) -> MetadataAggregate:
        if not body.strip():
            return MetadataAggregate()

        try:
            parsed = self.script_parser.parse(body, self.attach_ast)
        except ParseError as e:
            logger.error("Error parsing script in %s: %s", href, e, exc_info=True)
            raise

        for element in parsed.elements:
            self.elements.register(element)
        for module in parsed.modules:
            self.modules.register(module)

        return MetadataAggregate(elements=parsed.elements, modules=parsed.modules)
