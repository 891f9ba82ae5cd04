from __future__ import annotations

import os
from typing import Mapping, Optional

LIFECYCLE_ENV = "npm_lifecycle_script"
BROWSER_NAME_ENV = "npm_config_live_browser"
EXECUTABLE_ENV_PREFIX = "npm_config_"

DEFAULT_BROWSER = "chrome"
DRIVER_MODULE = "live_browser.driver"
DRIVER_SUFFIXES = {
    "chrome": "",
    "firefox": "_firefox",
    "webkit": "_webkit",
}
INSPECT_FLAG = "--inspect"


def _env(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if env is None else env


def browser_name(env: Optional[Mapping[str, str]] = None) -> str:
    return (_env(env).get(BROWSER_NAME_ENV) or DEFAULT_BROWSER).strip()


def module_name(env: Optional[Mapping[str, str]] = None) -> str:
    return DRIVER_MODULE + DRIVER_SUFFIXES.get(browser_name(env), "")


def executable_path(env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    value = _env(env).get(EXECUTABLE_ENV_PREFIX + browser_name(env), "").strip()
    return value or None


def lifecycle_command(env: Optional[Mapping[str, str]] = None) -> str:
    return _env(env).get(LIFECYCLE_ENV, "")


def resolve_headless(visible: Optional[bool], command: str = "") -> bool:
    """Explicit visibility wins; otherwise stay headless unless run under an inspector."""
    if visible is not None:
        return not visible
    return INSPECT_FLAG not in command


def is_absolute_url(path: str) -> bool:
    return path.startswith("http")
