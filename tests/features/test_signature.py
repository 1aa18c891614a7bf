"""Tests for signature help."""

from __future__ import annotations

import pytest

from qxlens.context import ProjectContext
from qxlens.features.signature import (
    ParameterInfo,
    SignatureHelp,
    SignatureInfo,
    find_method,
    find_open_call,
    signature_help,
)

WIDGET_HEADER = (
    'qx.Class.define("my.Widget", {\n'
    "  extend: my.Base,\n"
    "  members: {\n"
    "    f() {\n"
)
W = "var w = new my.OtherWidget();\n"


class TestFindOpenCall:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("f(", (1, 0)),
            ("f(a, b", (1, 1)),
            ("f(g(1, 2), ", (1, 1)),
            ("f(a, [1, 2", (1, 1)),
            ("f(a, {x: 1, y", (1, 1)),
            ("f([1, 2", (1, 0)),
            ("f(a)(b, ", (4, 1)),
            ("f(a);\ng", None),
            ("f(a)", None),
            ("abc", None),
        ],
    )
    def test_open_call(self, source: str, expected: tuple[int, int] | None) -> None:
        assert find_open_call(source, len(source)) == expected


class TestMethodSignatures:
    def test_method_with_active_parameter(
        self, qx_context: ProjectContext, widget_source: str
    ) -> None:
        # Given: cursor after "w.bar(1, "
        offset = widget_source.index("w.bar(1, ") + len("w.bar(1, ")

        # When
        help_ = signature_help(widget_source, offset, qx_context)

        # Then
        assert help_ == SignatureHelp(
            signatures=[
                SignatureInfo(
                    label="bar(count: Number)",
                    documentation="Does bar.",
                    parameters=[ParameterInfo("count: Number", "the count")],
                )
            ],
            active_signature=0,
            active_parameter=1,
        )

    def test_override_uses_documented_ancestor(self, qx_context: ProjectContext) -> None:
        source = WIDGET_HEADER + "      this.configure({}, "

        help_ = signature_help(source, len(source), qx_context)

        assert help_ is not None
        [signature] = help_.signatures
        assert signature.label == "configure(options: Map, target: my.OtherWidget)"
        assert signature.documentation == "Applies options to a target widget."
        assert help_.active_parameter == 1

    def test_property_setter(self, qx_context: ProjectContext) -> None:
        source = W + "w.setLabel("

        help_ = signature_help(source, len(source), qx_context)

        assert help_ is not None
        assert help_.signatures[0].label == "setLabel(value: String)"
        assert help_.signatures[0].documentation == "Text shown on the widget."

    def test_nested_array_argument(self, qx_context: ProjectContext) -> None:
        source = W + "w.bar([1, 2"

        help_ = signature_help(source, len(source), qx_context)

        assert help_ is not None
        assert help_.active_parameter == 0

    @pytest.mark.parametrize(
        "call",
        [
            "w.getLabel(",
            "w.nope(",
            "my.OtherWidget.create(",
            "nobody.bar(",
            "bar(",
            "w.bar(1);",
        ],
    )
    def test_no_signature(self, qx_context: ProjectContext, call: str) -> None:
        source = W + call

        assert signature_help(source, len(source), qx_context) is None


class TestConstructorSignatures:
    def test_constructor(self, qx_context: ProjectContext, widget_source: str) -> None:
        offset = widget_source.index('OtherWidget("x"') + len('OtherWidget("x"')

        help_ = signature_help(widget_source, offset, qx_context)

        assert help_ is not None
        assert help_.signatures[0].label == "my.OtherWidget(name: String)"
        assert help_.signatures[0].parameters == [ParameterInfo("name: String", "the name")]
        assert help_.active_parameter == 0

    @pytest.mark.parametrize("call", ["new my.Registry(", "new my.Nope("])
    def test_missing_constructor(self, qx_context: ProjectContext, call: str) -> None:
        assert signature_help(call, len(call), qx_context) is None


class TestFindMethod:
    def test_follows_override_chain(self, qx_context: ProjectContext) -> None:
        method = find_method(qx_context.database, "my.Widget", "configure")

        assert method is not None
        assert method.jsdoc is not None
        assert [p.param_name for p in method.jsdoc.params] == ["options", "target"]

    def test_inherited_method(self, qx_context: ProjectContext) -> None:
        method = find_method(qx_context.database, "my.OtherWidget", "toString")

        assert method is not None
        assert method.inherited_from == "qx.core.Object"

    def test_unknown(self, qx_context: ProjectContext) -> None:
        assert find_method(qx_context.database, "my.Widget", "nope") is None
        assert find_method(qx_context.database, "my.Nope", "bar") is None
