# tests/core/conftest.py
import asyncio
from typing import Dict, List, Optional

import pytest

from analyzer.controllers.import_analyzer_controller import ImportAnalyzerController
from loader.resolvers.resolver_base import ResolverBase
from loader.services.file_loader import FileLoader
from parser.services.script_parse_service import ScriptParseService


class DictResolver(ResolverBase):
    """In-memory resolver; optional per-URL delays reorder fetch completion."""

    def __init__(self, files: Dict[str, str], delays: Optional[Dict[str, float]] = None):
        self.files = files
        self.delays = delays or {}
        self.loads: List[str] = []

    def accept(self, url: str) -> bool:
        return url in self.files

    async def load(self, url: str) -> str:
        self.loads.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        return self.files[url]


@pytest.fixture(scope="session")
def script_parser():
    """Eén gedeelde tree-sitter parser voor alle tests."""
    return ScriptParseService()


@pytest.fixture
def make_loader():
    def _make(files: Dict[str, str], delays: Optional[Dict[str, float]] = None):
        resolver = DictResolver(files, delays)
        loader = FileLoader()
        loader.add_resolver(resolver)
        return loader, resolver
    return _make


@pytest.fixture
def analyze(script_parser):
    """
    Bouwt een analyzer binnen een draaiende event loop en geeft
    (controller, tree) terug.
    """
    def _analyze(html: str, href: str, loader=None, attach_ast: bool = False):
        async def scenario():
            controller = ImportAnalyzerController(
                html, attach_ast, href, loader, script_parser=script_parser
            )
            return controller, await controller.metadata_tree()
        return asyncio.run(scenario())
    return _analyze
