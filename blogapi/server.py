"""
Blog API — Server Lifecycle
=============================

What:  Start and stop the HTTP server from Python code, and the console
       entry point.
How:   run_server() connects the store, builds the app around that
       connection, and starts uvicorn as a background task. It returns a
       ServerHandle; close_server() takes that handle back, stops the
       listener, and disconnects the store. Nothing is kept at module level.

Usage:
    handle = await run_server("sqlite+aiosqlite:///./blog.db", port=0)
    ...  # handle.base_url is http://127.0.0.1:<port>
    await close_server(handle)
"""

import asyncio
import logging
import socket
from dataclasses import dataclass
from typing import Optional

import uvicorn

from blogapi.config import Settings, settings as default_settings
from blogapi.database import Database, connect_database
from blogapi.main import create_app, setup_logging

logger = logging.getLogger(__name__)

# How long run_server() waits for uvicorn to bind before giving up
STARTUP_TIMEOUT_SECONDS = 10.0


def bind_listener(host: str, port: int) -> socket.socket:
    """
    Bind the listening socket before uvicorn starts.

    uvicorn exits the process when its own bind fails, so the socket is
    bound here where an OSError can still be caught.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    return sock


@dataclass
class ServerHandle:
    """Everything close_server() needs to shut a running server down."""
    server: uvicorn.Server
    task: "asyncio.Task[None]"
    database: Database

    @property
    def port(self) -> int:
        """The bound port (useful when started with port 0)."""
        for listener in self.server.servers:
            for sock in listener.sockets:
                return sock.getsockname()[1]
        return self.server.config.port

    @property
    def base_url(self) -> str:
        return f"http://{self.server.config.host}:{self.port}"


async def run_server(
    database_url: Optional[str] = None,
    port: Optional[int] = None,
    host: str = "127.0.0.1",
    settings: Optional[Settings] = None,
) -> ServerHandle:
    """
    Connect to the store, then start listening.

    Raises:
        DatabaseError: The store could not be reached (nothing is started).
        RuntimeError: The listener failed to start; the store is
            disconnected before raising.
    """
    settings = settings or default_settings
    port = settings.port if port is None else port

    database = await connect_database(database_url, settings=settings)

    try:
        sock = bind_listener(host, port)
    except OSError as e:
        logger.error("Could not bind %s:%s: %s", host, port, e)
        await database.disconnect()
        raise RuntimeError(f"Server failed to start on {host}:{port}") from e

    app = create_app(settings=settings, database=database)
    config = uvicorn.Config(app, host=host, port=port, log_config=None, access_log=False)
    server = uvicorn.Server(config)
    task = asyncio.create_task(server.serve(sockets=[sock]))

    loop = asyncio.get_running_loop()
    deadline = loop.time() + STARTUP_TIMEOUT_SECONDS
    while not server.started and not task.done() and loop.time() < deadline:
        await asyncio.sleep(0.05)

    if not server.started:
        server.should_exit = True
        if not task.done():
            await asyncio.wait([task], timeout=STARTUP_TIMEOUT_SECONDS)
        if task.done() and not task.cancelled() and task.exception() is not None:
            logger.error("Server task failed during startup", exc_info=task.exception())
        sock.close()
        await database.disconnect()
        raise RuntimeError(f"Server failed to start on {host}:{port}")

    handle = ServerHandle(server=server, task=task, database=database)
    logger.info("Your app is listening on %s", handle.base_url)
    return handle


async def close_server(handle: ServerHandle) -> None:
    """Stop the listener started by run_server() and disconnect its store."""
    logger.info("Closing server")
    handle.server.should_exit = True
    try:
        await handle.task
    finally:
        await handle.database.disconnect()


def main() -> None:
    """Console entry point: serve blogapi.main:app with the configured settings."""
    settings = default_settings
    setup_logging(settings.log_level)
    logger.info("Starting Uvicorn on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        "blogapi.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
