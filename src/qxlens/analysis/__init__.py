"""Analysis module - backward expression scanning and type inference.

The resolver is imported from ``qxlens.analysis.resolver`` directly; it
depends on ``qxlens.namespace``, which uses the text utilities here.
"""

from qxlens.analysis.expressions import (
    Call,
    ExpressionNode,
    ExpressionParser,
    Identifier,
    MemberAccess,
    New,
    SuperKeyword,
    ThisKeyword,
)
from qxlens.analysis.scanner import ExpressionSpan, scan
from qxlens.analysis.treesitter import TreeSitterExpressionParser
from qxlens.analysis.types import TypeCategory, TypeInfo

__all__ = [
    # Scanner
    "ExpressionSpan",
    "scan",
    # Expression AST
    "Call",
    "ExpressionNode",
    "ExpressionParser",
    "Identifier",
    "MemberAccess",
    "New",
    "SuperKeyword",
    "ThisKeyword",
    "TreeSitterExpressionParser",
    # Types
    "TypeCategory",
    "TypeInfo",
]
