import json
from typing import Any, Dict, Optional

from analyzer.model import MetadataTree
from parser.model import ElementRecord, ParsedDocument


def to_json(data: Any, indent: int = 2, ensure_ascii: bool = False) -> str:
    """
    Convert Python object to JSON string.

    Args:
        data: Python object (dict, list, etc.)
        indent: Indentation level for pretty-printing (default: 2)
        ensure_ascii: If True, escape non-ASCII chars (default: False)

    Returns:
        str: JSON string
    """
    return json.dumps(data, ensure_ascii=ensure_ascii, indent=indent)


def tree_to_dict(tree: MetadataTree) -> Dict[str, Any]:
    """
    Converts a MetadataTree into plain data. Syntax nodes are dropped, bound
    templates are written as their id and the markup as a short summary.
    """
    return {
        "href": tree.href,
        "elements": [_element_to_dict(e) for e in tree.elements],
        "modules": [m.model_dump(by_alias=True) for m in tree.modules],
        "html": _summarize(tree.html),
        "imports": [tree_to_dict(i) if isinstance(i, MetadataTree) else {} for i in tree.imports],
    }


def _element_to_dict(element: ElementRecord) -> Dict[str, Any]:
    data = element.model_dump(by_alias=True)
    data["dom_module"] = element.dom_module.get("id") if element.dom_module is not None else None
    return data


def _summarize(parsed: Optional[ParsedDocument]) -> Optional[Dict[str, int]]:
    if parsed is None:
        return None
    return {
        "scripts": len(parsed.script),
        "imports": len(parsed.import_),
        "dom_modules": len(parsed.dom_module),
    }
