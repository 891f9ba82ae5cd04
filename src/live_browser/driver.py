"""Chromium driver. Sibling ``driver_*`` modules reuse ``launch_browser_type``."""
from __future__ import annotations

from typing import Any

from playwright.async_api import Browser, async_playwright

# Attribute on a launched browser holding the Playwright instance that owns it.
PLAYWRIGHT_ATTR = "_live_browser_playwright"


async def launch_browser_type(type_name: str, **options: Any) -> Browser:
    playwright = await async_playwright().start()
    browser = await getattr(playwright, type_name).launch(**options)
    setattr(browser, PLAYWRIGHT_ATTR, playwright)
    return browser


async def launch(**options: Any) -> Browser:
    return await launch_browser_type("chromium", **options)
