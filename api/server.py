"""
API server.
"""

import asyncio

from aiohttp import web
from loguru import logger

from api.container import SERVICES_KEY, Services
from api.middlewares import error_middleware
from api.routes import setup_routes


def create_app(services: Services) -> web.Application:
    """
    Build the API application.

    Args:
        services: Service container

    Returns:
        aiohttp Application
    """
    app = web.Application(middlewares=[error_middleware])
    app[SERVICES_KEY] = services
    setup_routes(app)
    return app


async def start_site(app: web.Application, host: str, port: int) -> web.AppRunner:
    """
    Serve an application on host:port.

    Returns:
        AppRunner to pass to stop_site
    """
    runner = web.AppRunner(app)
    await runner.setup()
    await web.TCPSite(runner, host, port).start()
    return runner


async def stop_site(runner: web.AppRunner, name: str, timeout: int = 5) -> None:
    """Stop a served application, giving up after timeout seconds."""
    logger.info(f"Stopping {name} server...")
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info(f"{name} server stopped")
    except TimeoutError:
        logger.warning(f"{name} server cleanup timed out after {timeout}s")


async def start_api_server(
    services: Services,
    host: str = "0.0.0.0",
    port: int = 3001,
) -> web.AppRunner:
    """Start the REST API under /api."""
    runner = await start_site(create_app(services), host, port)
    logger.info(f"[API] Application is running on http://{host}:{port}/api")
    return runner
