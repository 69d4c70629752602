from __future__ import annotations

import logging
from typing import List

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from parser.errors import ParseError
from parser.model import ParsedDocument

logger = logging.getLogger(__name__)

# Script types that carry JavaScript; anything else (JSON-LD, templates) is data.
JAVASCRIPT_TYPES = {
    "",
    "text/javascript",
    "application/javascript",
    "text/ecmascript",
    "application/ecmascript",
    "module",
}


class DocumentParseService:
    """
    Splits an HTML document into the parts the analyzer cares about:
    script tags, HTML import links and `<dom-module>` templates.
    Stateless; one instance can be shared by every document of a run.
    """

    def parse(self, html: str) -> ParsedDocument:
        """
        Parses raw HTML text into a ParsedDocument.

        Raises:
            ParseError: If the input is not text or the markup is rejected.
        """
        if not isinstance(html, str):
            raise ParseError(f"Expected HTML text, got {type(html).__name__}.")

        try:
            soup = BeautifulSoup(html.replace('\ufeff', ''), "html.parser")
        except ParserRejectedMarkup as e:
            raise ParseError(f"Markup rejected by html.parser: {e}", source=html) from e

        return ParsedDocument(
            ast=soup,
            script=self._find_scripts(soup),
            import_=self._find_imports(soup),
            dom_module=list(soup.find_all("dom-module")),
        )

    @staticmethod
    def _find_scripts(soup: BeautifulSoup) -> List[Tag]:
        out: List[Tag] = []
        for script in soup.find_all("script"):
            script_type = (script.get("type") or "").strip().lower()
            if script_type in JAVASCRIPT_TYPES:
                out.append(script)
        return out

    @staticmethod
    def _find_imports(soup: BeautifulSoup) -> List[Tag]:
        """Returns `<link rel="import">` tags; `rel` is multi-valued in bs4."""
        return list(soup.find_all("link", rel="import"))
