# src/analyzer/utils/template_binding.py
from parser.model import ElementRecord, ParsedDocument


def attach_dom_module(parsed: ParsedDocument, element: ElementRecord) -> None:
    """Binds the first `<dom-module>` whose id equals the element name, if any."""
    for dom_module in parsed.dom_module:
        if dom_module.get("id") == element.is_:
            element.dom_module = dom_module
            return
