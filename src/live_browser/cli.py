from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from . import config
from .manifest import DEFAULT_MANIFEST, lib_directory, load_manifest
from .session import LiveBrowser

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Open a browser, watch files, reload")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log server requests and file events")
    sub = parser.add_subparsers(dest="command", required=True)

    p_open = sub.add_parser("open", help="Serve a directory and open it in a browser")
    p_open.add_argument("--root", default=".", help="Directory served by the static server")
    p_open.add_argument("--path", default=".", help="Page path relative to the server, or an absolute URL")
    p_open.add_argument("--exec", dest="exec_command", help="Shell command to run before every reload")
    p_open.add_argument("--no-watch", action="store_true", help="Open the page without watching files (browser stays visible unless --headless)")
    p_open.add_argument("--manifest", help="Project manifest (default: package.json when present)")
    p_open.add_argument("--host", default="0.0.0.0", help="Interface to bind the static server to")
    p_open.add_argument("--port", type=int, default=0, help="Port to bind (default: any free port)")
    visibility = p_open.add_mutually_exclusive_group()
    visibility.add_argument("--visible", dest="visible", action="store_true", default=None)
    visibility.add_argument("--headless", dest="visible", action="store_false", default=None)

    p_doctor = sub.add_parser("doctor", help="Show the resolved browser configuration")
    p_doctor.add_argument("--manifest", help="Project manifest (default: package.json when present)")
    p_doctor.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON output",
    )

    return parser.parse_args(argv)


def pretty_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, sort_keys=True)


def _manifest_path(raw: Optional[str]) -> Optional[Path]:
    if raw:
        return Path(raw)
    return DEFAULT_MANIFEST if DEFAULT_MANIFEST.exists() else None


def _doctor(manifest_path: Optional[Path]) -> Dict[str, Any]:
    lib = lib_directory(load_manifest(manifest_path)) if manifest_path else None
    return {
        "browser": config.browser_name(),
        "driver_module": config.module_name(),
        "executable_path": config.executable_path(),
        "headless_default": config.resolve_headless(None, config.lifecycle_command()),
        "manifest": str(manifest_path) if manifest_path else None,
        "watch_root": lib,
    }


def shell_callback(command: str) -> Callable[[], Any]:
    async def run() -> None:
        proc = await asyncio.create_subprocess_shell(command)
        code = await proc.wait()
        if code != 0:
            logger.warning("%r exited with %d", command, code)

    return run


async def _noop() -> None:
    return None


async def _open(args: argparse.Namespace) -> None:
    session = LiveBrowser(
        manifest_path=_manifest_path(args.manifest),
        host=args.host,
        port=args.port,
    )
    file_change = None
    if not args.no_watch:
        file_change = shell_callback(args.exec_command) if args.exec_command else _noop

    visible = args.visible
    if visible is None and args.no_watch:
        # --no-watch has no callback to request a window.
        visible = True

    try:
        if visible is not None:
            await session.get_browser(visible)
        await session.get_page(args.root, args.path, file_change)
        closed = asyncio.Event()
        session.browser.value.on("disconnected", lambda _: closed.set())
        await closed.wait()
    finally:
        await session.shutdown()


def main(argv: Optional[list] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "doctor":
        result = _doctor(_manifest_path(args.manifest))
        if args.json:
            print(pretty_json(result))
            return
        for key, value in sorted(result.items()):
            print(f"{key}: {value}")
        return

    if args.command == "open":
        try:
            asyncio.run(_open(args))
        except KeyboardInterrupt:
            print("Stopped.", file=sys.stderr)
        return


if __name__ == "__main__":
    main()
