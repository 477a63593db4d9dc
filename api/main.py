"""
Indexer main entry point.

Starts the API and health servers, then the cold start and the recurring
sync loop. Runs until SIGINT/SIGTERM.
"""

import asyncio
import signal
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.initialization.logging import setup_logging  # noqa: E402
from api.initialization.services import initialize_all_services  # noqa: E402
from api.initialization.shutdown import shutdown_handler  # noqa: E402
from api.server import start_api_server, stop_site  # noqa: E402
from helpnet.config.settings import settings  # noqa: E402
from jobs.health import set_synchronizer, start_health_server  # noqa: E402
from jobs.scheduler import start_sync_loop  # noqa: E402


def _handle_sync_loop_error(task: asyncio.Task) -> None:
    """Log errors from the sync loop task."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc:
        logger.error(f"Sync loop task failed: {exc}")


async def main() -> None:
    """Initialize and run the indexer."""
    setup_logging()

    services, redis_client = await initialize_all_services()
    set_synchronizer(services.synchronizer)

    api_runner = await start_api_server(services, settings.api_host, settings.api_port)
    health_runner = await start_health_server(port=settings.health_check_port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows
            pass

    sync_task = asyncio.create_task(
        start_sync_loop(services.synchronizer, settings.sync_poll_interval_seconds)
    )
    sync_task.add_done_callback(_handle_sync_loop_error)

    try:
        await stop_event.wait()
    finally:
        if not sync_task.done():
            sync_task.cancel()
        await stop_site(api_runner, "API")
        await stop_site(health_runner, "Health check")
        await shutdown_handler(redis_client)


def run() -> None:
    """Console entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Indexer stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"Indexer crashed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
