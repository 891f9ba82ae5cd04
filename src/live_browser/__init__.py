"""Live-reload browser helper: static server, Playwright page, file watcher."""

__all__ = [
    "cli",
    "config",
    "driver",
    "handles",
    "manifest",
    "qr",
    "server",
    "session",
    "watcher",
]
