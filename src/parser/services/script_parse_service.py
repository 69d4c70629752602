from __future__ import annotations

import logging
import re
from typing import Iterator, List, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from parser.errors import ParseError
from parser.model import ElementRecord, ModuleRecord, PropertyRecord, ScriptMetadata

logger = logging.getLogger(__name__)

# Callees that declare a named module: modulate('name', [deps], factory)
MODULE_CALLEES = ("modulate", "define")
STRING_NODES = ("string", "template_string")


class ScriptParseService:
    """
    Extracts element and module declarations from a JavaScript body using
    the tree-sitter JavaScript grammar. Nothing is executed; only literal
    declarations are recognized.
    """

    def __init__(self):
        self._parser = Parser(get_language("javascript"))

    def parse(self, source: str, attach_ast: bool = False) -> ScriptMetadata:
        """
        Parses one script body.

        Args:
            source (str): The JavaScript source text.
            attach_ast (bool): If True, each record keeps its tree-sitter node.

        Returns:
            ScriptMetadata: The elements and modules declared in the script.

        Raises:
            ParseError: If the script contains syntax errors.
        """
        tree = self._parser.parse(source.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            line = self._first_error_line(root)
            raise ParseError(f"JavaScript syntax error near line {line}.", source=source)

        metadata = ScriptMetadata()
        for call in self._iter_calls(root):
            callee = call.child_by_field_name("function")
            args = self._arguments(call)
            if callee is None or callee.type != "identifier":
                continue
            name = _text(callee)

            if name == "Polymer" and args and args[0].type == "object":
                element = self._element_from_object(args[0], call)
                if element is not None:
                    element.ast = call if attach_ast else None
                    metadata.elements.append(element)
            elif name in MODULE_CALLEES and args and args[0].type in STRING_NODES:
                module = ModuleRecord(is_=_string_value(args[0]))
                if len(args) > 1 and args[1].type == "array":
                    module.dependencies = [
                        _string_value(dep) for dep in args[1].named_children if dep.type in STRING_NODES
                    ]
                module.ast = call if attach_ast else None
                metadata.modules.append(module)

        logger.debug(
            "Script parsed: %d element(s), %d module(s).",
            len(metadata.elements), len(metadata.modules)
        )
        return metadata

    # -------- Tree walking --------

    @staticmethod
    def _iter_calls(root: Node) -> Iterator[Node]:
        """Yields call expressions in source order (pre-order walk)."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "call_expression":
                yield node
            stack.extend(reversed(node.named_children))

    @staticmethod
    def _arguments(call: Node) -> List[Node]:
        args = call.child_by_field_name("arguments")
        if args is None:
            return []
        return [a for a in args.named_children if a.type != "comment"]

    @staticmethod
    def _first_error_line(root: Node) -> int:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node.start_point[0] + 1
            stack.extend(reversed(node.children))
        return root.start_point[0] + 1

    # -------- Element extraction --------

    def _element_from_object(self, obj: Node, call: Node) -> Optional[ElementRecord]:
        pairs = _object_pairs(obj)
        is_node = pairs.get("is")
        if is_node is None or is_node.type not in STRING_NODES:
            logger.debug("Polymer() call without a literal 'is' at line %d; skipped.", call.start_point[0] + 1)
            return None

        element = ElementRecord(is_=_string_value(is_node), description=self._description(call))

        extends = pairs.get("extends")
        if extends is not None and extends.type in STRING_NODES:
            element.extends = _string_value(extends)

        properties = pairs.get("properties")
        if properties is not None and properties.type == "object":
            for prop_name, value in _object_pairs(properties).items():
                element.properties.append(PropertyRecord(name=prop_name, type=self._property_type(value)))

        behaviors = pairs.get("behaviors")
        if behaviors is not None and behaviors.type == "array":
            element.behaviors = [_text(b) for b in behaviors.named_children if b.type != "comment"]

        return element

    @staticmethod
    def _property_type(value: Node) -> Optional[str]:
        """`foo: String` or `foo: {type: String, ...}`."""
        if value.type == "identifier":
            return _text(value)
        if value.type == "object":
            type_node = _object_pairs(value).get("type")
            if type_node is not None and type_node.type == "identifier":
                return _text(type_node)
        return None

    @staticmethod
    def _description(call: Node) -> str:
        """Returns the cleaned JSDoc block directly preceding the declaring statement."""
        statement = call.parent
        while statement is not None and statement.type != "expression_statement":
            statement = statement.parent
        if statement is None:
            return ""
        comment = statement.prev_named_sibling
        if comment is None or comment.type != "comment":
            return ""
        text = _text(comment)
        if not text.startswith("/**"):
            return ""
        body = text[3:-2] if text.endswith("*/") else text[3:]
        lines = [re.sub(r"^\s*\*?\s?", "", line) for line in body.splitlines()]
        return "\n".join(lines).strip()


def _text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def _string_value(node: Node) -> str:
    """Strips the quotes off a string or template literal."""
    return _text(node)[1:-1]


def _object_pairs(obj: Node) -> dict:
    """Maps the keys of an object literal to their value nodes, in source order."""
    out = {}
    for child in obj.named_children:
        if child.type != "pair":
            continue
        key = child.child_by_field_name("key")
        value = child.child_by_field_name("value")
        if key is None or value is None:
            continue
        key_text = _string_value(key) if key.type in STRING_NODES else _text(key)
        out[key_text] = value
    return out
