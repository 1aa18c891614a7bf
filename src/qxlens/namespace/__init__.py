"""Namespace module - class/package database built from compiled metadata."""

from qxlens.namespace.database import (
    ClassInfo,
    NamespaceDatabase,
    PackageChild,
    PackageInfo,
)
from qxlens.namespace.models import (
    ClassRecord,
    JsDoc,
    MemberKind,
    MemberRecord,
    PropertyRecord,
    SourceSpan,
)
from qxlens.namespace.store import MetadataStore
from qxlens.namespace.trie import NodeKind
from qxlens.namespace.watcher import MetadataWatcher

__all__ = [
    "ClassInfo",
    "ClassRecord",
    "JsDoc",
    "MemberKind",
    "MemberRecord",
    "MetadataStore",
    "MetadataWatcher",
    "NamespaceDatabase",
    "NodeKind",
    "PackageChild",
    "PackageInfo",
    "PropertyRecord",
    "SourceSpan",
]
