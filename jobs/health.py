"""
Health check server for sync monitoring.

Provides HTTP endpoints reporting scheduler and synchronizer state.
"""

from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from api.server import start_site
from helpnet.services.sync.synchronizer import Synchronizer

# Global references for health checks
_scheduler: AsyncIOScheduler | None = None
_synchronizer: Synchronizer | None = None


def set_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    """
    Set the scheduler instance for health checks.

    Args:
        scheduler: AsyncIOScheduler instance to monitor
    """
    global _scheduler
    _scheduler = scheduler
    if scheduler is not None:
        logger.info("Scheduler registered for health checks")


def set_synchronizer(synchronizer: Synchronizer | None) -> None:
    """
    Set the synchronizer instance for health checks.

    Args:
        synchronizer: Synchronizer to monitor
    """
    global _synchronizer
    _synchronizer = synchronizer


async def health_handler(request: web.Request) -> web.Response:
    """
    Health check endpoint.

    Returns:
        JSON response with scheduler and sync status
    """
    if _synchronizer is None:
        return web.json_response(
            {
                "status": "unhealthy",
                "error": "Synchronizer not initialized",
            },
            status=503,
        )

    sync_status = _synchronizer.status()

    if _scheduler is None:
        # Cold start still running
        return web.json_response(
            {
                "status": "starting",
                "scheduler_running": False,
                "sync": sync_status,
            }
        )

    is_running = _scheduler.running
    job_info = [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
        }
        for job in _scheduler.get_jobs()
    ]

    return web.json_response(
        {
            "status": "healthy" if is_running else "stopped",
            "scheduler_running": is_running,
            "jobs": job_info,
            "sync": sync_status,
        },
        status=200 if is_running else 503,
    )


async def readiness_handler(request: web.Request) -> web.Response:
    """
    Readiness check endpoint.

    Ready once the cold start has completed and the scheduler runs.
    """
    ready = (
        _scheduler is not None
        and _scheduler.running
        and _synchronizer is not None
        and _synchronizer.cold_start_done
    )
    if not ready:
        return web.json_response(
            {
                "status": "not_ready",
                "ready": False,
            },
            status=503,
        )

    return web.json_response(
        {
            "status": "ready",
            "ready": True,
        }
    )


async def liveness_handler(request: web.Request) -> web.Response:
    """
    Liveness check endpoint.

    Returns:
        JSON response indicating if the process is alive
    """
    return web.json_response(
        {
            "status": "alive",
            "alive": True,
        }
    )


def create_health_app() -> web.Application:
    """Build the health check application."""
    app = web.Application()
    app.router.add_get("/health", health_handler)
    app.router.add_get("/readiness", readiness_handler)
    app.router.add_get("/liveness", liveness_handler)
    return app


async def start_health_server(host: str = "0.0.0.0", port: int = 8081) -> web.AppRunner:
    """Serve /health, /readiness and /liveness."""
    runner = await start_site(create_health_app(), host, port)
    logger.info(f"Health check server started on http://{host}:{port}/health")
    return runner
