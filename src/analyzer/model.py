# src/analyzer/model.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from parser.model import ElementRecord, ModuleRecord, ParsedDocument


class MetadataAggregate(BaseModel):
    """The elements and modules defined by the scripts of one document."""
    elements: List[ElementRecord] = Field(default_factory=list)
    modules: List[ModuleRecord] = Field(default_factory=list)


def merge_metadata(m1: MetadataAggregate, m2: MetadataAggregate) -> MetadataAggregate:
    """Concatenates two aggregates, keeping order. No de-duplication happens here."""
    return MetadataAggregate(
        elements=m1.elements + m2.elements,
        modules=m1.modules + m2.modules,
    )


class MetadataTree(MetadataAggregate):
    """
    One document of the import tree.

    `imports` mirrors the document's `<link rel="import">` order. An entry is
    an empty dict when that address was already expanded elsewhere in the
    same tree.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    href: str
    html: Optional[ParsedDocument] = Field(default=None, exclude=True)
    imports: List[Union[MetadataTree, Dict[str, Any]]] = Field(default_factory=list)


MetadataTree.model_rebuild()


@dataclass
class DocumentNode:
    """
    Handle for one resolved document. All three results are futures so any
    number of consumers can await them.

    Attributes:
        href: Absolute address of the document.
        html_loaded: Resolves to the ParsedDocument.
        metadata_loaded: Resolves to the document's MetadataAggregate.
        deps_loaded: Resolves to the document's own import addresses, in
            document order, once every import below it has been resolved.
    """
    href: str
    html_loaded: asyncio.Future
    metadata_loaded: asyncio.Future
    deps_loaded: asyncio.Future
