from __future__ import annotations

import http.server
import logging
import socket
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urljoin

logger = logging.getLogger(__name__)

WILDCARD_HOSTS = {"", "0.0.0.0", "::"}


class QuietHandler(http.server.SimpleHTTPRequestHandler):
    def log_message(self, format, *args):  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


def _lan_address() -> str:
    # Connecting a UDP socket sends nothing but picks the outbound interface.
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("10.255.255.255", 1))
        return sock.getsockname()[0]
    except OSError:
        return "127.0.0.1"
    finally:
        sock.close()


@dataclass
class StaticServer:
    root: Path
    address: str
    port: int
    httpd: Optional[http.server.ThreadingHTTPServer] = field(default=None, repr=False)
    thread: Optional[threading.Thread] = field(default=None, repr=False)

    @property
    def origin(self) -> str:
        return f"http://{self.address}:{self.port}/"

    def resolve(self, path: str) -> str:
        return urljoin(self.origin, path)

    def close(self) -> None:
        if self.httpd is None:
            return
        self.httpd.shutdown()
        self.httpd.server_close()
        if self.thread is not None:
            self.thread.join()
        self.httpd = None


async def start_server(
    root: Union[str, Path] = ".",
    host: str = "0.0.0.0",
    port: int = 0,
) -> StaticServer:
    directory = Path(root).expanduser().resolve()
    handler = lambda *h_args, **h_kwargs: QuietHandler(  # noqa: E731
        *h_args, directory=str(directory), **h_kwargs
    )
    httpd = http.server.ThreadingHTTPServer((host, port), handler)
    httpd.daemon_threads = True
    thread = threading.Thread(target=httpd.serve_forever, name="live-browser-server", daemon=True)
    thread.start()

    bound_port = httpd.server_address[1]
    address = _lan_address() if host in WILDCARD_HOSTS else host
    logger.info("Serving %s at http://%s:%d/", directory, address, bound_port)
    return StaticServer(root=directory, address=address, port=bound_port, httpd=httpd, thread=thread)
