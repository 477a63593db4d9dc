"""Integration tests for the HTTP API: routing, parsing and error mapping."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from aiohttp import test_utils

from api.container import Services
from api.server import create_app
from helpnet.utils.exceptions import (
    AuthorizationError,
    EndpointUnavailable,
    InvalidInputError,
    SyncInProgress,
)

OWNER = "0x" + "0a" * 20


@pytest.fixture
def services():
    users = MagicMock()
    users.get_user_info = AsyncMock(return_value={"address": OWNER})
    users.list_user_addresses = AsyncMock(return_value=[OWNER])

    transactions = MagicMock()
    transactions.all_transactions = AsyncMock(return_value=[])
    transactions.transactions_for = AsyncMock(return_value=[])
    transactions.user_donations = AsyncMock(return_value=[])

    stats = MagicMock()
    stats.owner = MagicMock(return_value={"owner": OWNER})
    stats.help_price = AsyncMock(return_value={"price": 0.25})
    stats.get_contract_stats = AsyncMock(return_value={"totalUsers": 1})

    admin = MagicMock()
    admin.inject_funds = AsyncMock(return_value={"transactionHash": "0xabc"})
    admin.withdraw_from_reserve = AsyncMock(return_value={"transactionHash": "0xdef"})

    synchronizer = MagicMock()
    synchronizer.status = MagicMock(return_value={"state": "idle"})
    synchronizer.sync_manually = AsyncMock(
        return_value={"message": "ok", "lastSyncedBlock": 10}
    )

    return Services(
        users=users,
        transactions=transactions,
        stats=stats,
        admin=admin,
        synchronizer=synchronizer,
    )


@pytest_asyncio.fixture
async def client(services):
    async with test_utils.TestClient(test_utils.TestServer(create_app(services))) as test_client:
        yield test_client


@pytest.mark.integration
class TestReadRoutes:
    """GET endpoints."""

    @pytest.mark.asyncio
    async def test_owner(self, client):
        resp = await client.get("/api/owner")

        assert resp.status == 200
        assert await resp.json() == {"owner": OWNER}

    @pytest.mark.asyncio
    async def test_user_info_passes_address(self, client, services):
        resp = await client.get("/api/user-info", params={"address": OWNER})

        assert resp.status == 200
        services.users.get_user_info.assert_awaited_once_with(OWNER)

    @pytest.mark.asyncio
    async def test_transactions_by_address_and_filters(self, client, services):
        resp = await client.get(
            "/api/transactions",
            params={"address": OWNER, "token": "usdt", "method": "Withdrawal"},
        )

        assert resp.status == 200
        services.transactions.transactions_for.assert_awaited_once_with(
            OWNER, token="USDT", method="Withdrawal"
        )

    @pytest.mark.asyncio
    async def test_transactions_without_address(self, client, services):
        resp = await client.get("/api/transactions")

        assert resp.status == 200
        services.transactions.all_transactions.assert_awaited_once_with(
            token=None, method=None
        )

    @pytest.mark.asyncio
    async def test_unknown_token_is_bad_request(self, client, services):
        resp = await client.get("/api/transactions", params={"token": "DAI"})

        assert resp.status == 400
        assert await resp.json() == {"error": "Unknown token: DAI", "status_code": 400}
        services.transactions.all_transactions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_contract_stats_uses_requester_header(self, client, services):
        resp = await client.get("/api/contract-stats", headers={"x-requester": OWNER})

        assert resp.status == 200
        services.stats.get_contract_stats.assert_awaited_once_with(OWNER)

    @pytest.mark.asyncio
    async def test_contract_stats_requester_query_param(self, client, services):
        await client.get("/api/contract-stats", params={"requester": OWNER})

        services.stats.get_contract_stats.assert_awaited_once_with(OWNER)

    @pytest.mark.asyncio
    async def test_sync_status(self, client):
        resp = await client.get("/api/sync-status")

        assert await resp.json() == {"state": "idle"}


@pytest.mark.integration
class TestErrorMapping:
    """Domain errors become structured JSON responses."""

    @pytest.mark.asyncio
    async def test_invalid_input_is_400(self, client, services):
        services.users.get_user_info.side_effect = InvalidInputError("Invalid address")

        resp = await client.get("/api/user-info", params={"address": "nope"})

        assert resp.status == 400
        assert (await resp.json())["error"] == "Invalid address"

    @pytest.mark.asyncio
    async def test_authorization_is_403(self, client, services):
        services.admin.inject_funds.side_effect = AuthorizationError(
            "Only the owner can inject funds"
        )

        resp = await client.post("/api/inject-funds", json={"amount": "10"})

        assert resp.status == 403
        assert await resp.json() == {
            "error": "Only the owner can inject funds",
            "status_code": 403,
        }

    @pytest.mark.asyncio
    async def test_sync_in_progress_is_409(self, client, services):
        services.synchronizer.sync_manually.side_effect = SyncInProgress()

        resp = await client.post("/api/sync", headers={"x-requester": OWNER})

        assert resp.status == 409
        assert (await resp.json())["error"] == "Synchronization already in progress"

    @pytest.mark.asyncio
    async def test_connectivity_is_503(self, client, services):
        services.stats.help_price.side_effect = EndpointUnavailable("both down")

        resp = await client.get("/api/help-price")

        assert resp.status == 503

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500(self, client, services):
        services.users.list_user_addresses.side_effect = RuntimeError("boom")

        resp = await client.get("/api/users")

        assert resp.status == 500
        assert await resp.json() == {"error": "Internal server error", "status_code": 500}

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, client):
        resp = await client.post(
            "/api/inject-funds",
            data="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status == 400

    @pytest.mark.asyncio
    async def test_unknown_route_is_404(self, client):
        resp = await client.get("/api/nope")

        assert resp.status == 404


@pytest.mark.integration
class TestOwnerRoutes:
    """POST endpoints forward body fields and the requester."""

    @pytest.mark.asyncio
    async def test_withdraw_from_reserve(self, client, services):
        resp = await client.post(
            "/api/withdraw-from-reserve",
            json={"to": OWNER, "amount": "5"},
            headers={"x-requester": OWNER},
        )

        assert resp.status == 200
        assert await resp.json() == {"transactionHash": "0xdef"}
        services.admin.withdraw_from_reserve.assert_awaited_once_with(OWNER, "5", OWNER)

    @pytest.mark.asyncio
    async def test_manual_sync(self, client, services):
        resp = await client.post("/api/sync", headers={"x-requester": OWNER})

        assert await resp.json() == {"message": "ok", "lastSyncedBlock": 10}
        services.synchronizer.sync_manually.assert_awaited_once_with(OWNER)
