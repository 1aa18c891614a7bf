"""Project context: one qooxdoo project root and everything built from it.

The context owns the namespace database, the metadata store, the
expression parser and the resolver for a single project. Callers create
one per project root and pass it to the feature functions; several
contexts can live side by side (multi-root workspaces, test fixtures).

Lifecycle::

    async with ProjectContext(root) as ctx:   # initialize + start watching
        items = complete(source, offset, ctx)
    # disposed: watcher stopped, database cleared
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from types import TracebackType
from typing import Any

import structlog

from qxlens.analysis.expressions import ExpressionParser
from qxlens.analysis.resolver import ExpressionResolver
from qxlens.analysis.scanner import ExpressionSpan, scan
from qxlens.analysis.treesitter import TreeSitterExpressionParser
from qxlens.analysis.types import TypeInfo
from qxlens.config.loader import load_config
from qxlens.config.models import QxLensConfig
from qxlens.core.logging import configure_logging
from qxlens.namespace.database import NamespaceDatabase
from qxlens.namespace.store import MetadataStore
from qxlens.namespace.watcher import MetadataWatcher

logger = structlog.get_logger()


class ProjectContext:
    """Analysis state of one project root."""

    def __init__(
        self,
        root: Path | str,
        config: QxLensConfig | None = None,
        parser: ExpressionParser | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.config = config or QxLensConfig()
        self.database = NamespaceDatabase(self.config.metadata.implicit_root_classes)
        self.store = MetadataStore(self.root, self.config.metadata)
        self.parser: ExpressionParser = parser or TreeSitterExpressionParser()
        self.resolver = ExpressionResolver(self.database, self.parser)
        self._watcher: MetadataWatcher | None = None
        self._initialized = False

    @classmethod
    def load(cls, root: Path | str, **overrides: Any) -> ProjectContext:
        """Context configured from the global and project config files.

        Also applies the configured logging outputs process-wide.

        Raises:
            ConfigError: On invalid YAML or invalid values.
        """
        config = load_config(Path(root), **overrides)
        configure_logging(config=config.logging)
        return cls(root, config)

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def watching(self) -> bool:
        return self._watcher is not None and self._watcher.running

    # Lifecycle

    async def initialize(self) -> int:
        """Load every metadata record of the project.

        Returns:
            Number of classes in the database afterwards.
        """
        paths = self.store.discover()
        loaded = 0
        for path in paths:
            record = await self.store.aload(path)
            if record is None:
                continue
            self.database.ingest(record)
            loaded += 1
        self._initialized = True
        logger.info(
            "project_initialized",
            root=str(self.root),
            files=len(paths),
            loaded=loaded,
            classes=len(self.database),
        )
        return len(self.database)

    async def reinitialize(self) -> int:
        """Drop everything and load the project again."""
        self.database.clear()
        self.store.reset()
        self._initialized = False
        return await self.initialize()

    async def dispose(self) -> None:
        await self.stop_watching()
        self.database.clear()
        self.store.reset()
        self._initialized = False
        logger.info("project_disposed", root=str(self.root))

    async def apply_changes(self, paths: Iterable[Path]) -> None:
        """Bring the database in line with changed metadata files.

        Existing files are (re)read; files that vanished take their class
        with them. A file that now describes a different class replaces
        the class it described before.
        """
        for changed in paths:
            path = Path(changed)
            if not self.store.matches(path):
                continue
            previous = self.store.class_for_path(path)

            if not path.exists():
                self.store.forget(path)
                if previous is not None:
                    self.database.remove(previous)
                continue

            record = await self.store.aload(path)
            if record is None:
                continue
            if previous is not None and previous != record.class_name:
                self.database.remove(previous)
            self.database.ingest(record)

    async def start_watching(self) -> None:
        if self._watcher is not None:
            return
        self._watcher = MetadataWatcher(
            root=self.root,
            on_change=self.apply_changes,
            is_metadata=self.store.matches,
            debounce_ms=self.config.watch.debounce_ms,
        )
        await self._watcher.start()

    async def stop_watching(self) -> None:
        if self._watcher is None:
            return
        await self._watcher.stop()
        self._watcher = None

    async def __aenter__(self) -> ProjectContext:
        await self.initialize()
        if self.config.watch.enabled:
            await self.start_watching()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    # Analysis helpers

    def scan(self, source: str, pos: int) -> ExpressionSpan | None:
        return scan(source, pos)

    def resolve(self, source: str, offset: int, expression: str) -> TypeInfo | None:
        return self.resolver.resolve(source, offset, expression)

    def source_path_for_class(self, class_name: str) -> Path | None:
        """Source file of *class_name* (``a/b/C.js`` under a source dir), if present."""
        relative = Path(*class_name.split(".")).with_suffix(".js")
        for source_dir in self.config.metadata.source_dirs:
            candidate = self.root / source_dir / relative
            if candidate.is_file():
                return candidate
        return None
