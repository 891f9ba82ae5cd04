from __future__ import annotations

from typing import Any

from playwright.async_api import Browser

from .driver import launch_browser_type


async def launch(**options: Any) -> Browser:
    return await launch_browser_type("firefox", **options)
