"""Symbolic types produced by the resolver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TypeCategory(Enum):
    """What an expression denotes."""

    PACKAGE = "package"  # the namespace entry of a package: qx.ui
    CLASS = "class"  # the namespace entry of a class: qx.ui.form.Button
    INSTANCE = "instance"  # an object of a class: this, new qx.ui.form.Button()
    FUNCTION = "function"  # a method; see return_type


@dataclass(frozen=True)
class TypeInfo:
    """Type of an expression.

    ``type_name`` is the qualified class/package name. For functions it is
    ``<class>.<member>`` and ``return_type`` carries the documented result.
    """

    category: TypeCategory
    type_name: str
    return_type: TypeInfo | None = None

    @classmethod
    def package(cls, name: str) -> TypeInfo:
        return cls(TypeCategory.PACKAGE, name)

    @classmethod
    def klass(cls, name: str) -> TypeInfo:
        return cls(TypeCategory.CLASS, name)

    @classmethod
    def instance(cls, name: str) -> TypeInfo:
        return cls(TypeCategory.INSTANCE, name)

    @classmethod
    def function(cls, name: str, return_type: TypeInfo | None) -> TypeInfo:
        return cls(TypeCategory.FUNCTION, name, return_type)

    @property
    def is_class_like(self) -> bool:
        """True for categories whose members can be looked up."""
        return self.category in (TypeCategory.CLASS, TypeCategory.INSTANCE)
