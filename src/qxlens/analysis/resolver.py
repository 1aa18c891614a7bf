"""Expression type resolver.

Infers what a JavaScript expression denotes (a package, a class, an
instance of a class, or a method) from the raw source, the namespace
database and documented types, without a compiler front end.

Rules, first applicable wins:

1. ``super``        -> instance of the declared superclass
2. ``this``         -> instance of the enclosing class
3. namespace hit    -> the package or class an identifier chain names
4. call             -> ``obj.set(...)`` returns ``obj``; otherwise the
                       documented return type of the callee
5. ``new C(...)``   -> instance of C
6. ``obj.prop``     -> documented type of a member of obj's class
7. identifier       -> nearest preceding ``name = expr;``, else a
                       documented parameter of the enclosing method

Scoping is textual: the assignment search takes the nearest preceding
occurrence in the file regardless of blocks or functions, and only the
first class definition of a file is recognised.
"""

from __future__ import annotations

import re

import structlog

from qxlens.analysis.expressions import (
    Call,
    ExpressionNode,
    ExpressionParser,
    Identifier,
    MemberAccess,
    New,
    SuperKeyword,
    ThisKeyword,
    dotted_name,
)
from qxlens.analysis.rfind import rfind
from qxlens.analysis.text import find_class_definition, strip_template_args
from qxlens.analysis.types import TypeCategory, TypeInfo
from qxlens.namespace.database import ClassInfo, NamespaceDatabase, PackageInfo
from qxlens.namespace.models import ClassRecord, MemberRecord

logger = structlog.get_logger()


def assignment_pattern(name: str) -> re.Pattern[str]:
    """``name = expr;`` on one line; not ``obj.name =``, ``name ==`` or ``name =>``."""
    return re.compile(rf"(?<![\w$.]){re.escape(name)}\s*=(?![=>])\s*(.*?);")


class ExpressionResolver:
    """Resolves expression text to a ``TypeInfo``.

    Stateless between calls; every lookup goes to the database, so results
    follow the latest ingested records.

    Usage::

        resolver = ExpressionResolver(database, TreeSitterExpressionParser())
        resolver.resolve(source, cursor, "this.getChildControl('x')")
    """

    def __init__(self, database: NamespaceDatabase, parser: ExpressionParser) -> None:
        self._db = database
        self._parser = parser

    def resolve(self, source: str, offset: int, expression: str) -> TypeInfo | None:
        """Type of *expression*; backward searches start at *offset*.

        Returns:
            The inferred type, or None if the expression does not parse or
            nothing is known about it.
        """
        node = self._parser.parse(expression.strip())
        if node is None:
            return None
        result = self.resolve_node(source, offset, node)
        if result is None:
            logger.debug("expression_unresolved", expression=expression, offset=offset)
        return result

    def resolve_node(self, source: str, offset: int, node: ExpressionNode) -> TypeInfo | None:
        """Type of an already parsed expression."""
        if isinstance(node, SuperKeyword):
            return self._super(source)
        if isinstance(node, ThisKeyword):
            return self._this(source)

        hit = self._namespace_hit(node)
        if hit is not None:
            return hit

        if isinstance(node, Call):
            return self._call(source, offset, node)
        if isinstance(node, New):
            return self._new(node)
        if isinstance(node, MemberAccess):
            return self._member_access(source, offset, node)
        if isinstance(node, Identifier):
            return self._identifier(source, offset, node)
        return None

    def member_type(self, owner: TypeInfo, member_name: str) -> TypeInfo | None:
        """Type of ``<owner>.<member_name>`` from the owner's documentation."""
        if not owner.is_class_like:
            return None
        view = self._db.full_class_view(owner.type_name)
        if view is None:
            return None
        member = {**view.members, **view.statics}.get(member_name)
        if member is None or member.jsdoc is None:
            return None

        if member.is_variable:
            type_name = member.jsdoc.variable_type
            return TypeInfo.instance(type_name) if type_name else None
        if member.is_function:
            return_type = member.jsdoc.return_type
            if not return_type:
                return None
            return TypeInfo.function(
                f"{owner.type_name}.{member_name}", TypeInfo.instance(return_type)
            )
        return None

    # Rules

    def _super(self, source: str) -> TypeInfo | None:
        definition = find_class_definition(source)
        if definition is None or definition.super_class is None:
            return None
        return TypeInfo.instance(definition.super_class)

    def _this(self, source: str) -> TypeInfo | None:
        definition = find_class_definition(source)
        if definition is None:
            return None
        return TypeInfo.instance(definition.name)

    def _namespace_hit(self, node: ExpressionNode) -> TypeInfo | None:
        if not isinstance(node, (Identifier, MemberAccess)):
            return None
        for name in dict.fromkeys((node.text, dotted_name(node))):
            if not name:
                continue
            info = self._db.lookup(name)
            if isinstance(info, ClassInfo):
                return TypeInfo.klass(name)
            if isinstance(info, PackageInfo):
                return TypeInfo.package(name)
        return None

    def _call(self, source: str, offset: int, node: Call) -> TypeInfo | None:
        callee = node.callee
        if isinstance(callee, MemberAccess):
            owner = self.resolve_node(source, offset, callee.object)
            if owner is None:
                return None
            # fluent setter: obj.set({...}) returns obj
            if (
                callee.property == "set"
                and not callee.optional
                and owner.category is TypeCategory.INSTANCE
            ):
                return owner
            function = self.member_type(owner, callee.property)
        else:
            function = self.resolve_node(source, offset, callee)

        if function is None or function.category is not TypeCategory.FUNCTION:
            return None
        return function.return_type

    def _new(self, node: New) -> TypeInfo | None:
        class_name = node.class_name.strip()
        if not self._db.exists(class_name):
            return None
        return TypeInfo.instance(class_name)

    def _member_access(self, source: str, offset: int, node: MemberAccess) -> TypeInfo | None:
        owner = self.resolve_node(source, offset, node.object)
        if owner is None:
            return None
        return self.member_type(owner, node.property)

    def _identifier(self, source: str, offset: int, node: Identifier) -> TypeInfo | None:
        match = rfind(source, offset, assignment_pattern(node.name))
        if match is not None:
            # the match ends before offset, so recursion moves strictly backward
            assigned = self.resolve(source, match.start(), match.group(1))
            if assigned is not None:
                return assigned
        return self._parameter(source, offset, node.name)

    def _parameter(self, source: str, offset: int, name: str) -> TypeInfo | None:
        definition = find_class_definition(source)
        if definition is None:
            return None
        view = self._db.full_class_view(definition.name)
        if view is None:
            return None

        located = _enclosing_method(view, offset)
        if located is None:
            return None
        method_name, method = located

        visited: set[str] = set()
        while True:
            if method.jsdoc is not None:
                param = method.jsdoc.param(name)
                if param is not None and param.type:
                    return TypeInfo.instance(strip_template_args(param.type))
            ancestor = method.overridden_from
            if ancestor is None or ancestor in visited:
                return None
            visited.add(ancestor)
            ancestor_view = self._db.full_class_view(ancestor)
            if ancestor_view is None:
                return None
            next_method = ancestor_view.member(method_name)
            if next_method is None:
                return None
            method = next_method


def _enclosing_method(view: ClassRecord, offset: int) -> tuple[str, MemberRecord] | None:
    """The method of the class itself whose source span contains *offset*."""
    candidates: list[tuple[str, MemberRecord | None]] = [("construct", view.constructor)]
    candidates.extend({**view.members, **view.statics}.items())
    for member_name, member in candidates:
        if member is None or member.inherited_from is not None or member.mixin is not None:
            continue
        if member.location is not None and member.location.contains(offset):
            return member_name, member
    return None
