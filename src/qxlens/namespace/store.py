"""Metadata store: discovers and reads compiled class records.

The qooxdoo compiler writes one JSON file per class under
``compiled/<target>/transpiled/``. The store finds those files, parses
them into ``ClassRecord`` objects and remembers which class each file
described, so a deleted file can be mapped back to the class to drop.

Read failures never propagate: an unreadable or invalid file is logged
as a ``MetadataError`` and skipped, leaving the rest of the project
usable.
"""

from __future__ import annotations

import asyncio
import fnmatch
import json
import threading
from pathlib import Path

import structlog
from pydantic import ValidationError

from qxlens.config.models import MetadataConfig
from qxlens.core.errors import MetadataError
from qxlens.namespace.models import ClassRecord

logger = structlog.get_logger()


def glob_matches(pattern: str, relative: str) -> bool:
    """True if posix path *relative* matches *pattern*.

    ``*`` and ``?`` stay within one path segment; a ``**`` segment matches
    any number of segments, none included.
    """
    return _match_segments(pattern.split("/"), relative.split("/"))


def _match_segments(segments: list[str], parts: list[str]) -> bool:
    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head == "**":
        return any(_match_segments(rest, parts[i:]) for i in range(len(parts) + 1))
    return bool(parts) and fnmatch.fnmatch(parts[0], head) and _match_segments(rest, parts[1:])


class MetadataStore:
    """Reads class records from a project's compiled metadata files.

    Usage::

        store = MetadataStore(Path("/work/app"), config.metadata)
        for path in store.discover():
            record = await store.aload(path)
            if record is not None:
                database.ingest(record)
    """

    def __init__(self, root: Path, config: MetadataConfig | None = None) -> None:
        self.root = root
        self.config = config or MetadataConfig()
        self._classes_by_path: dict[Path, str] = {}
        self._lock = threading.Lock()

    def discover(self) -> list[Path]:
        """All metadata files currently on disk, sorted."""
        return sorted(p for p in self.root.glob(self.config.compiled_glob) if p.is_file())

    def matches(self, path: Path) -> bool:
        """True if *path* is (or would be) a metadata file of this project."""
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return False
        return glob_matches(self.config.compiled_glob, relative.as_posix())

    def load(self, path: Path) -> ClassRecord | None:
        """Read and validate one metadata file.

        Returns:
            The record, or None if the file could not be read or is not a
            valid class record.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            self._report(MetadataError.io_failure(str(path), str(e)))
            return None

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            self._report(MetadataError.invalid_record(str(path), f"Invalid JSON: {e}"))
            return None

        if not isinstance(data, dict) or not data.get("className"):
            self._report(MetadataError.invalid_record(str(path), "Missing className"))
            return None

        try:
            record = ClassRecord.model_validate(data)
        except ValidationError as e:
            reason = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            self._report(MetadataError.invalid_record(str(path), reason))
            return None

        with self._lock:
            self._classes_by_path[path] = record.class_name
        logger.debug("metadata_loaded", path=str(path), class_name=record.class_name)
        return record

    async def aload(self, path: Path) -> ClassRecord | None:
        """``load`` on a worker thread; the only suspension point of a load."""
        return await asyncio.to_thread(self.load, path)

    def class_for_path(self, path: Path) -> str | None:
        return self._classes_by_path.get(path)

    def forget(self, path: Path) -> str | None:
        """Drop the path -> class mapping; returns the class it described."""
        with self._lock:
            return self._classes_by_path.pop(path, None)

    def reset(self) -> None:
        with self._lock:
            self._classes_by_path.clear()

    @staticmethod
    def _report(error: MetadataError) -> None:
        logger.warning(
            "metadata_load_failed",
            code=int(error.code),
            path=error.details.get("path"),
            reason=error.details.get("reason"),
            retryable=error.retryable,
        )
