"""Namespace database: class lookup and inheritance-merged class views.

The database owns the namespace trie and the class records hanging off
it. Records arrive one at a time, in any order (a class may be ingested
before its superclass); merging happens lazily when a full class view is
requested and the result is cached until the next mutation.

Mutations are serialised with a lock. Readers take no lock and accept
last-write-wins consistency.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from qxlens.analysis.text import first_down, first_up
from qxlens.core.errors import CyclicHierarchyError
from qxlens.namespace.models import (
    Accessibility,
    ClassRecord,
    JsDoc,
    MemberKind,
    MemberRecord,
    ParamDoc,
    PropertyRecord,
    ReturnDoc,
)
from qxlens.namespace.trie import NamespaceTrie, NodeKind

logger = structlog.get_logger()

DEFAULT_IMPLICIT_ROOTS = ("Object",)
ACCESSOR_PREFIXES = ("get", "set", "reset")


@dataclass(frozen=True)
class PackageChild:
    name: str
    kind: NodeKind


@dataclass(frozen=True)
class PackageInfo:
    """A package and its direct children, sorted by name."""

    name: str
    children: list[PackageChild]


@dataclass(frozen=True)
class ClassInfo:
    """A registered class and its raw (unmerged) record."""

    name: str
    record: ClassRecord


def property_for_accessor(member_name: str) -> str | None:
    """Property name behind an accessor name (``setLabel -> label``)."""
    for prefix in ACCESSOR_PREFIXES:
        if member_name.startswith(prefix) and len(member_name) > len(prefix):
            rest = member_name[len(prefix) :]
            if rest[0].isupper():
                return first_down(rest)
    return None


def _accessors(property_name: str, prop: PropertyRecord) -> dict[str, MemberRecord]:
    documented = prop.documented_type
    checked = [ReturnDoc(type=documented)] if documented else []
    descriptions = prop.jsdoc.descriptions if prop.jsdoc else []
    suffix = first_up(property_name)

    def accessor(params: list[ParamDoc], returns: list[ReturnDoc]) -> MemberRecord:
        return MemberRecord(
            type=MemberKind.FUNCTION,
            access=Accessibility.PUBLIC,
            location=prop.location,
            jsdoc=JsDoc(params=params, returns=returns, descriptions=descriptions),
        )

    return {
        f"get{suffix}": accessor([], checked),
        f"set{suffix}": accessor([ParamDoc(param_name="value", type=documented)], checked),
        f"reset{suffix}": accessor([], []),
    }


def _singleton_accessor(class_name: str) -> MemberRecord:
    return MemberRecord(
        type=MemberKind.FUNCTION,
        access=Accessibility.PUBLIC,
        jsdoc=JsDoc(returns=[ReturnDoc(type=class_name)]),
    )


class NamespaceDatabase:
    """Hierarchical database of qooxdoo packages and classes.

    Usage::

        db = NamespaceDatabase()
        db.ingest(ClassRecord.model_validate(json.loads(text)))
        db.contains_path("qx.ui")          # True
        view = db.full_class_view("qx.ui.form.Button")
        view.members["getLabel"]           # synthesised property accessor
    """

    def __init__(self, implicit_root_classes: Iterable[str] = DEFAULT_IMPLICIT_ROOTS) -> None:
        self._implicit_roots = frozenset(implicit_root_classes)
        self._trie = NamespaceTrie()
        self._class_names: set[str] = set()
        self._views: dict[str, ClassRecord] = {}
        self._generation = 0
        self._lock = threading.Lock()

    # Queries

    def exists(self, name: str) -> bool:
        """True if *name* is a registered class."""
        node = self._trie.find(name)
        return node is not None and node.is_class

    def contains_path(self, name: str) -> bool:
        """True if *name* is a registered class or a package prefix of one."""
        return self._trie.contains(name)

    def lookup(self, name: str) -> PackageInfo | ClassInfo | None:
        node = self._trie.find(name)
        if node is None:
            return None
        if node.is_class and node.record is not None:
            return ClassInfo(name=name, record=node.record)
        children = [
            PackageChild(name=child.name, kind=child.kind)
            for child in sorted(node.children.values(), key=lambda c: c.name)
        ]
        return PackageInfo(name=name, children=children)

    def record(self, name: str) -> ClassRecord | None:
        """Raw record of a registered class."""
        node = self._trie.find(name)
        return node.record if node is not None else None

    @property
    def class_names(self) -> list[str]:
        return sorted(self._class_names)

    def __len__(self) -> int:
        return len(self._class_names)

    # Mutations

    def ingest(self, record: ClassRecord) -> None:
        """Register *record*, replacing any previous record of that class."""
        with self._lock:
            replaced = record.class_name in self._class_names
            self._trie.register(record)
            self._class_names.add(record.class_name)
            self._invalidate()
        logger.debug("class_ingested", class_name=record.class_name, replaced=replaced)

    def remove(self, name: str) -> bool:
        """Unregister class *name*. Returns False if it was not registered."""
        with self._lock:
            removed = self._trie.unregister(name)
            if removed:
                self._class_names.discard(name)
                self._invalidate()
        if removed:
            logger.debug("class_removed", class_name=name)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._trie.clear()
            self._class_names.clear()
            self._invalidate()

    def _invalidate(self) -> None:
        # caller holds the lock
        self._generation += 1
        self._views.clear()

    # Full class view

    def full_class_view(self, name: str) -> ClassRecord | None:
        """Record of *name* with accessors, mixins and ancestors merged in.

        Merge order, each step never overwriting what is already present:

        1. the class's own members, statics and properties;
        2. ``get/set/reset<Name>`` accessors for each property;
        3. members and properties of registered mixins (tagged ``mixin``);
        4. the superclass's full view, unless it is an implicit root;
           copied entries carry ``inherited_from`` naming the class that
           actually defines them.

        Singletons finally get a ``getInstance`` returning the class itself.

        Returns:
            The merged record, or None if the class is not registered or its
            superclass chain is cyclic.
        """
        generation = self._generation
        try:
            return self._full_view(name, (), generation)
        except CyclicHierarchyError as e:
            logger.warning("cyclic_hierarchy", class_name=name, chain=e.details["chain"])
            return None

    def _full_view(
        self, name: str, chain: tuple[str, ...], generation: int
    ) -> ClassRecord | None:
        if name in chain:
            raise CyclicHierarchyError.from_chain([*chain, name])

        cached = self._views.get(name)
        if cached is not None:
            return cached

        record = self.record(name)
        if record is None:
            return None

        members = dict(record.members)
        statics = dict(record.statics)
        properties = dict(record.properties)
        self._add_accessors(members, record.properties)

        for mixin_name in record.mixins:
            mixin = self.record(mixin_name)
            if mixin is None:
                continue
            for key, member in mixin.members.items():
                if key not in members:
                    members[key] = member.model_copy(update={"mixin": mixin_name})
            mixin_properties = {k: v for k, v in mixin.properties.items() if k not in properties}
            properties.update(mixin_properties)
            self._add_accessors(members, mixin_properties, mixin=mixin_name)

        super_class = record.super_class
        if super_class and super_class not in self._implicit_roots:
            parent = self._full_view(super_class, (*chain, name), generation)
            if parent is not None:
                _inherit(members, parent.members, super_class)
                _inherit(statics, parent.statics, super_class)
                _inherit(properties, parent.properties, super_class)

        if record.is_singleton:
            if "getInstance" not in record.members:
                members["getInstance"] = _singleton_accessor(name)
            if "getInstance" not in record.statics:
                statics["getInstance"] = _singleton_accessor(name)

        view = record.model_copy(
            update={"members": members, "statics": statics, "properties": properties}
        )
        with self._lock:
            # a view built across a mutation may mix old and new records
            if self._generation == generation:
                self._views[name] = view
        return view

    @staticmethod
    def _add_accessors(
        members: dict[str, MemberRecord],
        properties: dict[str, PropertyRecord],
        mixin: str | None = None,
    ) -> None:
        for property_name, prop in properties.items():
            for accessor_name, accessor in _accessors(property_name, prop).items():
                if accessor_name in members:
                    continue
                if mixin is not None:
                    accessor = accessor.model_copy(update={"mixin": mixin})
                members[accessor_name] = accessor


def _inherit(
    target: dict[str, MemberRecord] | dict[str, PropertyRecord],
    source: dict[str, MemberRecord] | dict[str, PropertyRecord],
    super_class: str,
) -> None:
    for key, entry in source.items():
        if key in target:
            continue
        target[key] = entry.model_copy(
            update={"inherited_from": entry.inherited_from or super_class}
        )
