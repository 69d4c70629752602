# ============================================
# file: src/parser/model.py
# ============================================
from __future__ import annotations

from typing import Any, List, Optional

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel, ConfigDict, Field


class PropertyRecord(BaseModel):
    name: str
    type: Optional[str] = None


class ElementRecord(BaseModel):
    """
    Metadata for a single component declared with `Polymer({is: ...})`.

    `dom_module` is a reference into the owning document's markup and is
    bound late, once the document's templates are known.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    is_: str = Field(alias="is")
    extends: Optional[str] = None
    description: str = ""
    properties: List[PropertyRecord] = Field(default_factory=list)
    behaviors: List[str] = Field(default_factory=list)
    ast: Optional[Any] = Field(default=None, exclude=True)
    dom_module: Optional[Tag] = Field(default=None, exclude=True)


class ModuleRecord(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    is_: str = Field(alias="is")
    dependencies: List[str] = Field(default_factory=list)
    ast: Optional[Any] = Field(default=None, exclude=True)


class ScriptMetadata(BaseModel):
    """What the script parser found in one script body."""
    elements: List[ElementRecord] = Field(default_factory=list)
    modules: List[ModuleRecord] = Field(default_factory=list)


class ParsedDocument(BaseModel):
    """
    The structural representation of one HTML document.

    The tag lists keep document order: `script` holds JavaScript script tags,
    `import_` the `<link rel="import">` tags and `dom_module` the
    `<dom-module>` templates.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    ast: BeautifulSoup
    script: List[Tag] = Field(default_factory=list)
    import_: List[Tag] = Field(default_factory=list, alias="import")
    dom_module: List[Tag] = Field(default_factory=list)
