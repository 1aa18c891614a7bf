"""Tests for go-to-definition."""

from __future__ import annotations

from qxlens.context import ProjectContext
from qxlens.features.definition import DefinitionLocation, find_definition


def _single(result: list[DefinitionLocation] | None) -> DefinitionLocation:
    assert result is not None
    assert len(result) == 1
    return result[0]


class TestClassDefinition:
    def test_class_name_after_new(
        self, qx_context: ProjectContext, widget_source: str
    ) -> None:
        # Given: cursor inside "OtherWidget" of `new my.OtherWidget("x")`
        offset = widget_source.index("OtherWidget(") + 3

        # When
        location = _single(find_definition(widget_source, offset, qx_context))

        # Then
        assert location.class_name == "my.OtherWidget"
        assert location.span.start.index == 0
        assert location.path == qx_context.root / "source" / "class" / "my" / "OtherWidget.js"

    def test_superclass_reference(self, qx_context: ProjectContext, widget_source: str) -> None:
        offset = widget_source.index("my.Base") + len("my.Ba")

        location = _single(find_definition(widget_source, offset, qx_context))

        assert location.class_name == "my.Base"
        assert location.path is not None and location.path.name == "Base.js"

    def test_package_has_no_definition(
        self, qx_context: ProjectContext, widget_source: str
    ) -> None:
        offset = widget_source.index("my.OtherWidget(") + 1

        assert find_definition(widget_source, offset, qx_context) is None

    def test_class_without_location(self, qx_context: ProjectContext) -> None:
        source = "my.Registry"

        assert find_definition(source, 5, qx_context) is None


class TestMemberDefinition:
    """``obj.member`` definitions, following inheritance."""

    def test_own_method(
        self, qx_context: ProjectContext, widget_source: str, other_widget_source: str
    ) -> None:
        offset = widget_source.index("w.bar(") + len("w.b")

        location = _single(find_definition(widget_source, offset, qx_context))

        assert location.class_name == "my.OtherWidget"
        assert location.span.start.index == other_widget_source.index("bar(count)")
        assert location.path is not None and location.path.name == "OtherWidget.js"

    def test_accessor_points_at_property(
        self, qx_context: ProjectContext, widget_source: str, base_source: str
    ) -> None:
        offset = widget_source.index("getLabel") + 2

        location = _single(find_definition(widget_source, offset, qx_context))

        assert location.class_name == "my.Base"
        assert location.span.start.index == base_source.index("label:")
        assert location.path is not None and location.path.name == "Base.js"

    def test_property_name(self, qx_context: ProjectContext, base_source: str) -> None:
        source = "var w = new my.OtherWidget();\nw.label"

        location = _single(find_definition(source, len(source), qx_context))

        assert location.class_name == "my.Base"
        assert location.span.start.index == base_source.index("label:")

    def test_inherited_from_framework_class(self, qx_context: ProjectContext) -> None:
        source = "var w = new my.OtherWidget();\nw.toString();"

        location = _single(find_definition(source, source.index("toString"), qx_context))

        assert location.class_name == "qx.core.Object"
        assert location.span.start.index == 900
        assert location.path is None

    def test_static_member(
        self, qx_context: ProjectContext, other_widget_source: str
    ) -> None:
        source = "var made = my.OtherWidget.create();"

        location = _single(find_definition(source, source.index("create") + 1, qx_context))

        assert location.class_name == "my.OtherWidget"
        assert location.span.start.index == other_widget_source.index("create()")

    def test_this_member(self, qx_context: ProjectContext, widget_source: str) -> None:
        source = widget_source.replace("w.ba\n", "this.configure\n")

        location = _single(find_definition(source, source.index("this.configure") + 6, qx_context))

        assert location.class_name == "my.Widget"
        assert location.path is not None and location.path.name == "Widget.js"

    def test_unknown_member(self, qx_context: ProjectContext) -> None:
        source = "var w = new my.OtherWidget();\nw.nothing"

        assert find_definition(source, len(source), qx_context) is None

    def test_unresolvable_receiver(self, qx_context: ProjectContext) -> None:
        source = "nobody.bar"

        assert find_definition(source, len(source), qx_context) is None

    def test_no_expression_at_cursor(self, qx_context: ProjectContext) -> None:
        assert find_definition("a = 1;   ", 8, qx_context) is None
