"""Tree-sitter backed expression snippet parser.

Parses a snippet with the tree-sitter JavaScript grammar and lowers the
single expression statement it contains into the resolver's AST
(``qxlens.analysis.expressions``). Snippets that contain syntax errors,
more than one statement, or an expression kind the resolver has no rule
for (literals, subscripts, binary operators, ...) parse to None.
"""

from __future__ import annotations

import threading
from typing import Any

import structlog
import tree_sitter
import tree_sitter_javascript

from qxlens.analysis.expressions import (
    Call,
    ExpressionNode,
    Identifier,
    MemberAccess,
    New,
    SuperKeyword,
    ThisKeyword,
)

logger = structlog.get_logger()


def _text(node: Any) -> str:
    return node.text.decode("utf-8")


def _is_optional(node: Any) -> bool:
    return any(child.type == "optional_chain" for child in node.children)


class TreeSitterExpressionParser:
    """``ExpressionParser`` implementation using tree-sitter-javascript.

    One parser instance is shared; tree-sitter parsers are not re-entrant, so
    parsing is serialised with a lock.

    Usage::

        parser = TreeSitterExpressionParser()
        node = parser.parse("new qx.ui.form.Button('OK')")
        # New(text=..., class_name='qx.ui.form.Button', arguments=("'OK'",))
    """

    def __init__(self) -> None:
        self._language = tree_sitter.Language(tree_sitter_javascript.language())
        self._parser = tree_sitter.Parser(self._language)
        self._lock = threading.Lock()

    def parse(self, text: str) -> ExpressionNode | None:
        if not text.strip():
            return None
        with self._lock:
            tree = self._parser.parse(text.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            logger.debug("expression_parse_failed", expression=text, reason="syntax_error")
            return None

        statements = [child for child in root.named_children if child.type != "comment"]
        if len(statements) != 1 or statements[0].type != "expression_statement":
            logger.debug("expression_parse_failed", expression=text, reason="not_one_expression")
            return None
        expression = statements[0].named_children[0] if statements[0].named_children else None
        if expression is None:
            return None

        lowered = self._lower(expression)
        if lowered is None:
            logger.debug(
                "expression_parse_failed",
                expression=text,
                reason="unsupported_node",
                node_type=expression.type,
            )
        return lowered

    def _lower(self, node: Any) -> ExpressionNode | None:
        kind = node.type
        if kind == "identifier":
            return Identifier(_text(node))
        if kind == "this":
            return ThisKeyword()
        if kind == "super":
            return SuperKeyword()
        if kind == "parenthesized_expression":
            inner = node.named_children
            return self._lower(inner[0]) if len(inner) == 1 else None
        if kind == "member_expression":
            obj = node.child_by_field_name("object")
            prop = node.child_by_field_name("property")
            if obj is None or prop is None:
                return None
            lowered_obj = self._lower(obj)
            if lowered_obj is None:
                return None
            return MemberAccess(
                text=_text(node),
                object=lowered_obj,
                property=_text(prop),
                optional=_is_optional(node),
            )
        if kind == "call_expression":
            function = node.child_by_field_name("function")
            if function is None:
                return None
            callee = self._lower(function)
            if callee is None:
                return None
            return Call(
                text=_text(node),
                callee=callee,
                arguments=self._arguments(node),
                optional=_is_optional(node),
            )
        if kind == "new_expression":
            constructor = node.child_by_field_name("constructor")
            if constructor is None:
                return None
            return New(
                text=_text(node),
                class_name=_text(constructor),
                arguments=self._arguments(node),
            )
        return None

    @staticmethod
    def _arguments(node: Any) -> tuple[str, ...]:
        arguments = node.child_by_field_name("arguments")
        if arguments is None or arguments.type != "arguments":
            return ()
        return tuple(
            _text(child) for child in arguments.named_children if child.type != "comment"
        )
