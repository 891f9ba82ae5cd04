from __future__ import annotations

import asyncio
import importlib
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set, Union

from . import config
from .driver import PLAYWRIGHT_ATTR
from .handles import LazyHandle
from .manifest import DEFAULT_MANIFEST, lib_directory, load_manifest
from .qr import render_qr
from .server import StaticServer, start_server
from .watcher import FileWatch, watch as start_watch

logger = logging.getLogger(__name__)

ServerFactory = Callable[..., Awaitable[StaticServer]]


class LiveBrowser:
    """One static server, one browser and one page for the whole process."""

    def __init__(
        self,
        *,
        env: Optional[Mapping[str, str]] = None,
        manifest_path: Optional[Union[str, Path]] = DEFAULT_MANIFEST,
        host: str = "0.0.0.0",
        port: int = 0,
        server_factory: ServerFactory = start_server,
    ) -> None:
        self.env = env
        self.manifest_path = Path(manifest_path) if manifest_path is not None else None
        self.host = host
        self.port = port
        self.server_factory = server_factory

        self.server: LazyHandle[StaticServer] = LazyHandle("server")
        self.browser: LazyHandle[Any] = LazyHandle("browser")
        self.page: LazyHandle[Any] = LazyHandle("page")
        self.watches: List[FileWatch] = []
        self._playwrights: List[Any] = []
        self._stopping: Set[asyncio.Task] = set()
        self._manifest: Optional[Dict[str, Any]] = None

    @property
    def manifest(self) -> Dict[str, Any]:
        if self._manifest is None:
            if self.manifest_path is None:
                self._manifest = {}
            else:
                self._manifest = load_manifest(self.manifest_path)
        return self._manifest

    async def get_server(self, root: Optional[Union[str, Path]] = None) -> StaticServer:
        return await self.server.get_or_create(
            lambda: self.server_factory(root or ".", host=self.host, port=self.port)
        )

    async def launch(self, **options: Any) -> Any:
        module = importlib.import_module(config.module_name(self.env))
        if not hasattr(module, "launch"):
            raise AttributeError(f"driver has no launch(**options): {module.__name__}")
        return await module.launch(**options)

    async def get_browser(self, visible: Optional[bool] = None) -> Any:
        if self.browser.present:
            return self.browser.value

        headless = config.resolve_headless(visible, config.lifecycle_command(self.env))
        logger.debug(
            "launching %s (headless=%s)", config.browser_name(self.env), headless
        )
        browser = await self.launch(
            executable_path=config.executable_path(self.env),
            headless=headless,
        )
        self.browser.set(browser)
        playwright = getattr(browser, PLAYWRIGHT_ATTR, None)
        if playwright is not None:
            self._playwrights.append(playwright)
        browser.on("disconnected", self._on_disconnected)
        return browser

    def _on_disconnected(self, browser: Any) -> None:
        logger.info("browser disconnected")
        self.browser.clear()
        self.page.clear()

        playwright = getattr(browser, PLAYWRIGHT_ATTR, None)
        if playwright in self._playwrights:
            self._playwrights.remove(playwright)
            task = asyncio.get_running_loop().create_task(playwright.stop())
            self._stopping.add(task)
            task.add_done_callback(self._on_stopped)

    def _on_stopped(self, task: asyncio.Task) -> None:
        self._stopping.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("stopping playwright failed: %s", exc, exc_info=exc)

    def _on_page_closed(self, page: Any) -> None:
        self.page.discard(page)

    async def get_page(
        self,
        root: Optional[Union[str, Path]] = None,
        path: Optional[str] = None,
        file_change: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """Open ``path`` in the shared page, starting server and browser as needed.

        With ``file_change`` the browser is visible, a QR code of the URL is
        logged, and the manifest's lib directory (or ``root``) is watched:
        every change runs ``file_change`` then reloads the page.
        """
        if self.page.present:
            return self.page.value

        path = path or "."
        file_change = file_change if callable(file_change) else None

        url = path
        if not config.is_absolute_url(path):
            server = await self.get_server(root)
            url = server.resolve(path)

        if file_change:
            logger.info("%s\n%s", url, render_qr(url))

        browser = await self.get_browser(True if file_change else None)
        page = self.page.set(await browser.new_page())
        page.on("close", self._on_page_closed)
        await page.goto(url)

        if file_change:
            self.watch(lib_directory(self.manifest) or root or ".", file_change)
        return page

    def watch(self, path: Union[str, Path], on_change: Callable[[], Any]) -> FileWatch:
        file_watch = start_watch(path, on_change, lambda: self.page.value)
        self.watches.append(file_watch)
        return file_watch

    async def shutdown(self) -> None:
        for file_watch in self.watches:
            file_watch.stop()
        self.watches.clear()

        browser = self.browser.value
        if browser is not None:
            await browser.close()
        for playwright in self._playwrights:
            await playwright.stop()
        self._playwrights.clear()
        if self._stopping:
            await asyncio.gather(*self._stopping, return_exceptions=True)
        self.browser.clear()
        self.page.clear()

        if self.server.value is not None:
            self.server.value.close()
        self.server.clear()


default_session = LiveBrowser()


async def get_server(root: Optional[Union[str, Path]] = None) -> StaticServer:
    return await default_session.get_server(root)


async def get_browser(visible: Optional[bool] = None) -> Any:
    return await default_session.get_browser(visible)


async def get_page(
    root: Optional[Union[str, Path]] = None,
    path: Optional[str] = None,
    file_change: Optional[Callable[[], Any]] = None,
) -> Any:
    return await default_session.get_page(root, path, file_change)


def watch(path: Union[str, Path], on_change: Callable[[], Any]) -> FileWatch:
    return default_session.watch(path, on_change)
