"""Go-to-definition for class names and members."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from qxlens.analysis.expressions import MemberAccess
from qxlens.analysis.scanner import scan
from qxlens.analysis.text import is_identifier_char
from qxlens.context import ProjectContext
from qxlens.core.logging import with_request_id
from qxlens.namespace.database import ClassInfo, PackageInfo, property_for_accessor
from qxlens.namespace.models import SourceSpan

_NEW_PREFIX_RE = re.compile(r"^new\s+")


@dataclass(frozen=True)
class DefinitionLocation:
    """Where a symbol is defined.

    ``path`` is the class's source file when it can be found under one of
    the configured source directories.
    """

    class_name: str
    span: SourceSpan
    path: Path | None = None


@with_request_id
def find_definition(
    source: str, offset: int, ctx: ProjectContext
) -> list[DefinitionLocation] | None:
    """Definition of the class name or ``obj.member`` under the cursor."""
    end = offset
    while end < len(source) and is_identifier_char(source[end]):
        end += 1

    span = scan(source, end)
    if span is None:
        return None
    text = _NEW_PREFIX_RE.sub("", span.text, count=1)

    info = ctx.database.lookup(text)
    if isinstance(info, ClassInfo):
        if info.record.location is None:
            return None
        return [_location(ctx, info.name, info.record.location)]
    if isinstance(info, PackageInfo):
        return None

    node = ctx.parser.parse(text)
    if not isinstance(node, MemberAccess):
        return None
    owner = ctx.resolver.resolve_node(source, offset, node.object)
    if owner is None or not owner.is_class_like:
        return None
    view = ctx.database.full_class_view(owner.type_name)
    if view is None:
        return None

    member = view.members.get(node.property) or view.statics.get(node.property)
    if member is not None and member.location is not None:
        defining = member.mixin or member.inherited_from or owner.type_name
        return [_location(ctx, defining, member.location)]

    # accessors without a location of their own point at their property
    prop = view.properties.get(property_for_accessor(node.property) or node.property)
    if prop is not None and prop.location is not None:
        return [_location(ctx, prop.inherited_from or owner.type_name, prop.location)]
    return None


def _location(ctx: ProjectContext, class_name: str, span: SourceSpan) -> DefinitionLocation:
    return DefinitionLocation(
        class_name=class_name,
        span=span,
        path=ctx.source_path_for_class(class_name),
    )
