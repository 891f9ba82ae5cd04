from __future__ import annotations

import sys
import types
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from live_browser.driver import PLAYWRIGHT_ATTR
from live_browser.server import StaticServer

DRIVER_MODULES = ("live_browser.driver", "live_browser.driver_firefox", "live_browser.driver_webkit")


class _Emitter:
    def __init__(self) -> None:
        self.handlers: Dict[str, List[Callable[[Any], None]]] = {}

    def on(self, event: str, handler: Callable[[Any], None]) -> "_Emitter":
        self.handlers.setdefault(event, []).append(handler)
        return self

    def emit(self, event: str) -> None:
        for handler in list(self.handlers.get(event, [])):
            handler(self)


class FakePage(_Emitter):
    def __init__(self) -> None:
        super().__init__()
        self.url = "about:blank"
        self.calls: List[tuple] = []

    async def goto(self, url: str) -> None:
        self.url = url
        self.calls.append(("goto", url))

    async def bring_to_front(self) -> None:
        self.calls.append(("bring_to_front",))

    async def reload(self) -> None:
        self.calls.append(("reload",))


class FakeBrowser(_Emitter):
    def __init__(self, options: Dict[str, Any]) -> None:
        super().__init__()
        self.options = options
        self.pages: List[FakePage] = []
        self.closed = False

    async def new_page(self) -> FakePage:
        page = FakePage()
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class FakePlaywright:
    def __init__(self) -> None:
        self.stopped = False

    async def stop(self) -> None:
        self.stopped = True


class FakeDriver:
    def __init__(self) -> None:
        self.browsers: List[FakeBrowser] = []

    async def launch(self, **options: Any) -> FakeBrowser:
        browser = FakeBrowser(options)
        setattr(browser, PLAYWRIGHT_ATTR, FakePlaywright())
        self.browsers.append(browser)
        return browser


@pytest.fixture
def fake_driver(monkeypatch) -> FakeDriver:
    driver = FakeDriver()
    for name in DRIVER_MODULES:
        module = types.ModuleType(name)
        module.launch = driver.launch
        module.PLAYWRIGHT_ATTR = PLAYWRIGHT_ATTR
        monkeypatch.setitem(sys.modules, name, module)
    return driver


class FakeServerFactory:
    def __init__(self, address: str = "192.168.1.20", port: int = 8080) -> None:
        self.address = address
        self.port = port
        self.roots: List[str] = []

    async def __call__(self, root: str = ".", host: str = "0.0.0.0", port: int = 0) -> StaticServer:
        self.roots.append(str(root))
        return StaticServer(root=Path(root), address=self.address, port=self.port)


@pytest.fixture
def fake_server() -> FakeServerFactory:
    return FakeServerFactory()
