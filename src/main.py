"""Entry point for the token scanner service."""

import asyncio
import signal

from loguru import logger

from config.settings import settings
from src.api.server import build_server
from src.utils.logger import setup_logger


async def main() -> None:
    setup_logger(json_logs=settings.log_json, level=settings.log_level, log_dir=settings.log_dir)
    logger.info("Starting token scanner...")

    # Graceful shutdown on SIGINT/SIGTERM
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    # Scanner lifecycle (stop scan, close DB/Redis) runs in the app lifespan
    server = build_server()
    server_task = asyncio.create_task(server.serve(), name="api_server")
    logger.info(f"API listening on http://{settings.api_host}:{settings.api_port}")

    done, pending = await asyncio.wait(
        [server_task, asyncio.create_task(shutdown_event.wait())],
        return_when=asyncio.FIRST_COMPLETED,
    )

    if server_task in pending:
        server.should_exit = True
        await server_task
    for task in pending:
        if task is not server_task:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    logger.info("Shutdown complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
