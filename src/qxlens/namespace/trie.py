"""Namespace trie of packages and classes.

Qualified names are split on ``.``; each segment is one node. Nodes that
only appear as a prefix of a registered name are packages, nodes whose
exact name was registered are classes and own their ``ClassRecord``.
A class may also have children (``qx.ui.form.Button`` and
``qx.ui.form.Button.Inner`` can both exist), so both node kinds carry a
child map.

The trie itself is not thread-safe; ``NamespaceDatabase`` serialises
mutations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from qxlens.namespace.models import ClassRecord


class NodeKind(str, Enum):
    ROOT = "root"
    PACKAGE = "package"
    CLASS = "class"


@dataclass
class NamespaceNode:
    """One segment of a qualified name."""

    name: str
    kind: NodeKind
    children: dict[str, NamespaceNode] = field(default_factory=dict)
    record: ClassRecord | None = None

    @property
    def is_class(self) -> bool:
        return self.kind is NodeKind.CLASS


def split_name(name: str) -> list[str] | None:
    """Split a qualified name into segments; None for empty segments."""
    segments = name.split(".")
    if not all(segments):
        return None
    return segments


class NamespaceTrie:
    """Tree of ``NamespaceNode`` keyed by qualified-name segments."""

    def __init__(self) -> None:
        self.root = NamespaceNode(name="", kind=NodeKind.ROOT)

    def find(self, name: str) -> NamespaceNode | None:
        """Return the node addressed by *name*, or None."""
        segments = split_name(name)
        if segments is None:
            return None
        node = self.root
        for segment in segments:
            child = node.children.get(segment)
            if child is None:
                return None
            node = child
        return node

    def contains(self, name: str) -> bool:
        return self.find(name) is not None

    def register(self, record: ClassRecord) -> NamespaceNode:
        """Create or promote the class node for *record*.

        Missing intermediate packages are created on the way down. A
        package node already standing at the class name is promoted in
        place, keeping its children.
        """
        segments = split_name(record.class_name)
        if segments is None:
            raise ValueError(f"Invalid qualified name: {record.class_name!r}")

        node = self.root
        for segment in segments:
            child = node.children.get(segment)
            if child is None:
                child = NamespaceNode(name=segment, kind=NodeKind.PACKAGE)
                node.children[segment] = child
            node = child

        node.kind = NodeKind.CLASS
        node.record = record
        return node

    def unregister(self, name: str) -> bool:
        """Remove the class *name*; prune packages left without descendants.

        A class with children is demoted to a package so the children stay
        reachable.

        Returns:
            True if a class was registered under *name*.
        """
        segments = split_name(name)
        if segments is None:
            return False

        path = [self.root]
        for segment in segments:
            child = path[-1].children.get(segment)
            if child is None:
                return False
            path.append(child)

        target = path[-1]
        if not target.is_class:
            return False
        target.kind = NodeKind.PACKAGE
        target.record = None

        # walk back up, dropping package nodes with nothing below them
        for parent, node in zip(reversed(path[:-1]), reversed(path[1:]), strict=True):
            if node.is_class or node.children:
                break
            del parent.children[node.name]
        return True

    def clear(self) -> None:
        self.root = NamespaceNode(name="", kind=NodeKind.ROOT)
