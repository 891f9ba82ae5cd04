"""Coalesce filesystem change events into a single page reload.

A change event sets one pending flag and schedules a refresh on the next loop
iteration. Further events are ignored until that refresh has finished, so a
burst of saves produces one rebuild and one reload. There is no timer: the
coalescing window is whatever arrives before the scheduled refresh completes.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class ReloadDebouncer:
    def __init__(
        self,
        on_change: Callable[[], Any],
        page_provider: Callable[[], Any],
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.on_change = on_change
        self.page_provider = page_provider
        self.loop = loop
        self.pending = False
        self.task: Optional[asyncio.Task] = None

    def _loop(self) -> asyncio.AbstractEventLoop:
        return self.loop or asyncio.get_running_loop()

    def notify(self) -> None:
        """Handle one change event. Must run on the event loop thread."""
        if self.pending:
            return
        self.pending = True
        self._loop().call_soon(self._start_refresh)

    def _start_refresh(self) -> None:
        self.task = self._loop().create_task(self.refresh())
        self.task.add_done_callback(_log_refresh_failure)

    async def refresh(self) -> None:
        try:
            result = self.on_change()
            if inspect.isawaitable(result):
                await result

            page = self.page_provider()
            if page is not None:
                await page.bring_to_front()
                await page.reload()
                logger.info("[ Reload ]  %s", page.url)
        finally:
            self.pending = False


def _log_refresh_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("refresh failed: %s", exc, exc_info=exc)


class ChangeHandler(FileSystemEventHandler):
    """Forward file modifications from the observer thread to the loop."""

    def __init__(self, debouncer: ReloadDebouncer, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__()
        self.debouncer = debouncer
        self.loop = loop

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        logger.debug("changed: %s", event.src_path)
        self.loop.call_soon_threadsafe(self.debouncer.notify)


@dataclass
class FileWatch:
    path: Path
    debouncer: ReloadDebouncer
    observer: Any = field(repr=False)

    def stop(self) -> None:
        self.observer.stop()
        self.observer.join()


def watch(
    path: Union[str, Path],
    on_change: Callable[[], Any],
    page_provider: Callable[[], Any],
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> FileWatch:
    """Watch ``path`` recursively; reload the provided page after ``on_change``."""
    loop = loop or asyncio.get_running_loop()
    watch_path = Path(path).expanduser().resolve()
    debouncer = ReloadDebouncer(on_change, page_provider, loop)

    observer = Observer()
    observer.schedule(ChangeHandler(debouncer, loop), str(watch_path), recursive=True)
    observer.start()
    logger.info("Watching %s", watch_path)
    return FileWatch(path=watch_path, debouncer=debouncer, observer=observer)
