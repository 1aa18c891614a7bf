"""Metadata record models.

One ``ClassRecord`` per class, parsed from the JSON files the qooxdoo
compiler writes under ``compiled/<target>/transpiled/``. Keys follow the
compiler's camelCase spelling; unknown keys are ignored so newer compiler
output keeps loading.

Example record (abridged)::

    {
      "className": "my.Widget",
      "superClass": "qx.ui.core.Widget",
      "isSingleton": false,
      "members": {
        "bar": {
          "type": "function",
          "access": "public",
          "location": {"start": {"line": 10, "column": 4, "index": 210},
                       "end": {"line": 14, "column": 5, "index": 320}},
          "jsdoc": {"@param": [{"paramName": "x", "type": "String"}],
                    "@return": [{"type": "my.Other"}]}
        }
      },
      "properties": {"label": {"json": {"check": "String"}}}
    }
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from qxlens.analysis.text import braced_type, strip_template_args


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class MemberKind(str, Enum):
    FUNCTION = "function"
    VARIABLE = "variable"


class Accessibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class SourcePosition(_Record):
    line: int
    column: int
    index: int


class SourceSpan(_Record):
    start: SourcePosition
    end: SourcePosition

    def contains(self, offset: int) -> bool:
        return self.start.index <= offset <= self.end.index


class ParamDoc(_Record):
    """One ``@param`` entry."""

    param_name: str = Field(default="", alias="paramName")
    type: str | None = None
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_desc(cls, data: Any) -> Any:
        # older compiler versions wrote "desc"
        if isinstance(data, dict) and "description" not in data and "desc" in data:
            data = {**data, "description": data["desc"]}
        return data


class ReturnDoc(_Record):
    """One ``@return`` entry."""

    type: str | None = None
    description: str | None = None


class BodyDoc(_Record):
    """A free-text tag entry (``@description``, ``@type``)."""

    body: str = ""


class JsDoc(_Record):
    """Pre-structured documentation comment."""

    params: list[ParamDoc] = Field(default_factory=list, alias="@param")
    returns: list[ReturnDoc] = Field(default_factory=list, alias="@return")
    descriptions: list[BodyDoc] = Field(default_factory=list, alias="@description")
    types: list[BodyDoc] = Field(default_factory=list, alias="@type")

    @property
    def description(self) -> str | None:
        return self.descriptions[0].body if self.descriptions else None

    @property
    def return_type(self) -> str | None:
        """Documented return type without generic decoration."""
        for entry in self.returns:
            if entry.type:
                return strip_template_args(entry.type)
        return None

    @property
    def variable_type(self) -> str | None:
        """Type from an ``@type {Type}`` tag, without generic decoration."""
        for entry in self.types:
            type_name = braced_type(entry.body)
            if type_name:
                return strip_template_args(type_name)
        return None

    def param(self, name: str) -> ParamDoc | None:
        for entry in self.params:
            if entry.param_name == name:
                return entry
        return None


class MemberRecord(_Record):
    """A method or variable of a class (member or static)."""

    type: MemberKind | None = None
    access: Accessibility = Accessibility.PUBLIC
    location: SourceSpan | None = None
    jsdoc: JsDoc | None = None
    overridden_from: str | None = Field(default=None, alias="overriddenFrom")
    inherited_from: str | None = Field(default=None, alias="inheritedFrom")
    mixin: str | None = None

    @property
    def is_function(self) -> bool:
        return self.type is MemberKind.FUNCTION

    @property
    def is_variable(self) -> bool:
        return self.type is MemberKind.VARIABLE


class PropertyRecord(_Record):
    """A qooxdoo property; accessors are synthesised in the full class view."""

    name: str | None = None
    check: str | None = None
    event: str | None = None
    nullable: bool = False
    location: SourceSpan | None = None
    jsdoc: JsDoc | None = None
    inherited_from: str | None = Field(default=None, alias="inheritedFrom")

    @model_validator(mode="before")
    @classmethod
    def _lift_definition(cls, data: Any) -> Any:
        # the compiler nests the property definition map under "json"
        if isinstance(data, dict) and isinstance(data.get("json"), dict):
            definition = data["json"]
            lifted = {k: definition[k] for k in ("check", "event", "nullable") if k in definition}
            data = {**lifted, **{k: v for k, v in data.items() if k != "json"}}
        return data

    @field_validator("check", mode="before")
    @classmethod
    def _only_named_checks(cls, v: Any) -> Any:
        # array checks (enumerations) and inline functions carry no type name
        return v if isinstance(v, str) else None

    @property
    def documented_type(self) -> str | None:
        if self.check:
            return strip_template_args(self.check)
        return None


class ClassRecord(_Record):
    """Compiled metadata of one class."""

    class_name: str = Field(alias="className")
    super_class: str | None = Field(default=None, alias="superClass")
    mixins: list[str] = Field(default_factory=list)
    is_singleton: bool = Field(default=False, alias="isSingleton")
    constructor: MemberRecord | None = Field(default=None, alias="construct")
    members: dict[str, MemberRecord] = Field(default_factory=dict)
    statics: dict[str, MemberRecord] = Field(default_factory=dict)
    properties: dict[str, PropertyRecord] = Field(default_factory=dict)
    location: SourceSpan | None = None

    @field_validator("mixins", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return v or []

    @field_validator("members", "statics", "properties", mode="before")
    @classmethod
    def _none_as_empty_map(cls, v: Any) -> Any:
        return v or {}

    def member(self, name: str) -> MemberRecord | None:
        """Look a name up in members and statics (statics win on clashes)."""
        return self.statics.get(name) or self.members.get(name)
