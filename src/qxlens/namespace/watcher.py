"""Metadata watcher using watchfiles for async filesystem monitoring.

Watches the project root recursively and reports batches of changed
metadata files. Batching is left to watchfiles' own debounce window;
non-metadata paths are filtered out before they reach the callback.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

logger = structlog.get_logger()


@dataclass
class MetadataWatcher:
    """Async watcher notifying *on_change* with changed metadata paths.

    *is_metadata* decides which paths are of interest; deleted files are
    reported too so the caller can drop their classes.
    """

    root: Path
    on_change: Callable[[list[Path]], Awaitable[None]]
    is_metadata: Callable[[Path], bool]
    debounce_ms: int = 300

    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)

    @property
    def running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        """Start watching for metadata changes."""
        if self._watch_task is not None:
            return
        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info("metadata_watcher_started", root=str(self.root), debounce_ms=self.debounce_ms)

    async def stop(self) -> None:
        """Stop watching."""
        self._stop_event.set()
        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None
        logger.info("metadata_watcher_stopped")

    def _accepts(self, _change: Change, path: str) -> bool:
        return self.is_metadata(Path(path))

    async def _watch_loop(self) -> None:
        try:
            async for changes in awatch(
                self.root,
                watch_filter=self._accepts,
                debounce=self.debounce_ms,
                stop_event=self._stop_event,
                ignore_permission_denied=True,
            ):
                paths = sorted({Path(path) for _change, path in changes})
                if not paths:
                    continue
                logger.info("metadata_changes_detected", count=len(paths))
                await self._notify(paths)
        except asyncio.CancelledError:
            pass

    async def _notify(self, paths: list[Path]) -> None:
        try:
            await self.on_change(paths)
        except Exception as e:
            # a failing batch must not end the watch
            logger.error("metadata_change_failed", error=str(e), count=len(paths))
