"""Integration tests for the health check server and scheduled sync task."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from aiohttp import test_utils

from jobs import health
from jobs.scheduler import SYNC_JOB_ID, create_scheduler
from jobs.tasks.blockchain_sync_task import run_sync_pass


@pytest.fixture
def synchronizer():
    sync = MagicMock()
    sync.is_syncing = False
    sync.last_synced_block = 100
    sync.cold_start_done = True
    sync.status = MagicMock(return_value={"state": "idle", "lastSyncedBlock": 100})
    sync.run_scheduled_sync = AsyncMock(return_value=True)
    return sync


@pytest_asyncio.fixture
async def health_client():
    async with test_utils.TestClient(test_utils.TestServer(health.create_health_app())) as client:
        yield client
    health.set_scheduler(None)
    health.set_synchronizer(None)


@pytest.mark.integration
class TestHealthEndpoints:
    """/health, /readiness and /liveness."""

    @pytest.mark.asyncio
    async def test_unhealthy_without_synchronizer(self, health_client):
        resp = await health_client.get("/health")

        assert resp.status == 503

    @pytest.mark.asyncio
    async def test_starting_during_cold_start(self, health_client, synchronizer):
        synchronizer.cold_start_done = False
        health.set_synchronizer(synchronizer)

        resp = await health_client.get("/health")
        ready = await health_client.get("/readiness")

        assert resp.status == 200
        assert (await resp.json())["status"] == "starting"
        assert ready.status == 503

    @pytest.mark.asyncio
    async def test_healthy_with_running_scheduler(self, health_client, synchronizer):
        scheduler = MagicMock()
        scheduler.running = True
        scheduler.get_jobs = MagicMock(return_value=[])
        health.set_synchronizer(synchronizer)
        health.set_scheduler(scheduler)

        resp = await health_client.get("/health")
        ready = await health_client.get("/readiness")

        body = await resp.json()
        assert resp.status == 200
        assert body["status"] == "healthy"
        assert body["sync"]["lastSyncedBlock"] == 100
        assert ready.status == 200

    @pytest.mark.asyncio
    async def test_liveness(self, health_client):
        resp = await health_client.get("/liveness")

        assert await resp.json() == {"status": "alive", "alive": True}


class TestSyncTask:
    """Scheduled sync job."""

    @pytest.mark.asyncio
    async def test_runs_pass(self, synchronizer):
        result = await run_sync_pass(synchronizer)

        assert result == {"success": True, "skipped": False, "last_synced_block": 100}
        synchronizer.run_scheduled_sync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_skips_while_syncing(self, synchronizer):
        synchronizer.is_syncing = True

        result = await run_sync_pass(synchronizer)

        assert result["skipped"] is True
        synchronizer.run_scheduled_sync.assert_not_awaited()

    def test_scheduler_job_never_overlaps(self, synchronizer):
        scheduler = create_scheduler(synchronizer, interval_seconds=50)

        job = scheduler.get_job(SYNC_JOB_ID)
        assert job.max_instances == 1
        assert job.coalesce is True
        assert job.args == (synchronizer,)
