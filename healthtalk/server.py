"""
Relay entry point: bind the first free port at or above the preferred one,
publish it in the port file, then serve the FastAPI app with uvicorn.
"""
from __future__ import annotations

import errno
import json
import socket
from pathlib import Path

import uvicorn

from .config import get_settings
from .logging_config import get_logger

logger = get_logger(__name__)


MAX_PORT = 65535
WRAP_PORT = 1024


def next_port(port: int) -> int:
    """The port after ``port``, wrapping from 65535 back to 1024."""
    return port + 1 if port < MAX_PORT else WRAP_PORT


def bind_first_free_port(host: str, preferred: int) -> socket.socket:
    """
    Return a socket bound to ``preferred`` or, if that port is taken, to the
    next higher free one, wrapping past 65535 to 1024.

    Raises ``RuntimeError`` only when every port from 1024 up is taken.
    """
    if not 0 < preferred <= MAX_PORT:
        raise ValueError(f"Preferred port {preferred} is outside 1-{MAX_PORT}")
    port = preferred
    while True:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            if exc.errno != errno.EADDRINUSE:
                raise
            following = next_port(port)
            if following == preferred:
                raise RuntimeError(f"No free port on {host}: every port from {WRAP_PORT} to {MAX_PORT} is in use")
            logger.warning("Port %s is in use, trying %s", port, following)
            port = following
            continue
        logger.info("Bound %s:%s", host, port)
        return sock


def write_port_file(port: int, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"port": port}))
    logger.info("Wrote port %s to %s", port, path)


def read_port_file(path: Path) -> int | None:
    try:
        return int(json.loads(path.read_text())["port"])
    except (OSError, ValueError, KeyError, TypeError):
        return None


def run() -> None:
    settings = get_settings()
    sock = bind_first_free_port(settings.host, settings.port)
    port = sock.getsockname()[1]
    write_port_file(port, settings.port_file)

    config = uvicorn.Config("healthtalk.main:app", log_level=settings.log_level.lower())
    server = uvicorn.Server(config)
    logger.info("Starting HealthTalk relay on port %s", port)
    server.run(sockets=[sock])


if __name__ == "__main__":
    run()
