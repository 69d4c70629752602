# src/analyzer/services/metadata_tree_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set, Union

from analyzer.model import DocumentNode, MetadataTree
from analyzer.utils.template_binding import attach_dom_module

logger = logging.getLogger(__name__)


class MetadataTreeService:
    """Composes resolved documents into one MetadataTree following the imports."""

    def __init__(self, documents: Dict[str, DocumentNode]):
        self.documents = documents

    async def build(self, root: DocumentNode) -> MetadataTree:
        visited: Set[str] = {root.href}
        return await self._build(root, visited)

    async def _build(self, node: DocumentNode, visited: Set[str]) -> MetadataTree:
        # deps_loaded already waits on metadata_loaded, so a failed script
        # surfaces here and both futures have their exception retrieved.
        hrefs = await node.deps_loaded
        metadata = await node.metadata_loaded

        # Claim every new address before descending, so deeper documents
        # leave imports declared here to this level.
        scheduled: List[Optional[str]] = []
        for href in hrefs:
            if href in visited:
                scheduled.append(None)
            else:
                visited.add(href)
                scheduled.append(href)

        imports: List[Union[MetadataTree, Dict[str, Any]]] = []
        for href in scheduled:
            if href is None:
                imports.append({})
            else:
                imports.append(await self._build(self.documents[href], visited))

        parsed = await node.html_loaded
        for element in metadata.elements:
            attach_dom_module(parsed, element)

        logger.debug("Built tree node %s with %d import(s).", node.href, len(imports))
        return MetadataTree(
            elements=metadata.elements,
            modules=metadata.modules,
            href=node.href,
            html=parsed,
            imports=imports,
        )
