"""
API route handlers.

Thin glue between HTTP requests and the read/admin services.
"""

from typing import Any

from aiohttp import web

from api.container import SERVICES_KEY, Services
from helpnet.config.constants import REQUESTER_HEADER
from helpnet.utils.exceptions import InvalidInputError
from helpnet.validators.common import parse_method, parse_token


def _services(request: web.Request) -> Services:
    return request.app[SERVICES_KEY]


def _requester(request: web.Request) -> str | None:
    """Requester address from the x-requester header or ?requester=."""
    return request.headers.get(REQUESTER_HEADER) or request.query.get("requester")


async def _json_body(request: web.Request) -> dict[str, Any]:
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidInputError("Request body must be valid JSON") from e
    if not isinstance(body, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return body


# ----------------------------------------------------------------------
# Read endpoints
# ----------------------------------------------------------------------


async def user_info(request: web.Request) -> web.Response:
    address = request.query.get("address") or request.headers.get(REQUESTER_HEADER)
    return web.json_response(await _services(request).users.get_user_info(address))


async def users(request: web.Request) -> web.Response:
    return web.json_response(await _services(request).users.list_user_addresses())


async def help_price(request: web.Request) -> web.Response:
    return web.json_response(await _services(request).stats.help_price())


async def owner(request: web.Request) -> web.Response:
    return web.json_response(_services(request).stats.owner())


async def level_amount(request: web.Request) -> web.Response:
    level = request.query.get("level")
    return web.json_response(await _services(request).stats.level_amount(level))


async def transactions(request: web.Request) -> web.Response:
    token = parse_token(request.query.get("token"))
    method = parse_method(request.query.get("method"))
    address = request.query.get("address")
    queries = _services(request).transactions
    if address:
        data = await queries.transactions_for(address, token=token, method=method)
    else:
        data = await queries.all_transactions(token=token, method=method)
    return web.json_response(data)


async def all_contract_transactions(request: web.Request) -> web.Response:
    return web.json_response(await _services(request).transactions.all_transactions())


async def user_donations(request: web.Request) -> web.Response:
    address = request.query.get("address")
    return web.json_response(await _services(request).transactions.user_donations(address))


async def help_transactions(request: web.Request) -> web.Response:
    address = request.query.get("address")
    return web.json_response(await _services(request).transactions.help_transactions(address))


async def voluntary_donations(request: web.Request) -> web.Response:
    address = request.query.get("address")
    return web.json_response(
        await _services(request).transactions.voluntary_donations(address)
    )


async def contract_stats(request: web.Request) -> web.Response:
    stats = await _services(request).stats.get_contract_stats(_requester(request))
    return web.json_response(stats)


async def sync_status(request: web.Request) -> web.Response:
    return web.json_response(_services(request).synchronizer.status())


# ----------------------------------------------------------------------
# Owner endpoints
# ----------------------------------------------------------------------


async def inject_funds(request: web.Request) -> web.Response:
    body = await _json_body(request)
    result = await _services(request).admin.inject_funds(
        body.get("amount"), _requester(request)
    )
    return web.json_response(result)


async def inject_help(request: web.Request) -> web.Response:
    body = await _json_body(request)
    result = await _services(request).admin.inject_help(
        body.get("amount"), _requester(request)
    )
    return web.json_response(result)


async def reset_queue(request: web.Request) -> web.Response:
    result = await _services(request).admin.reset_queue(_requester(request))
    return web.json_response(result)


async def withdraw_from_reserve(request: web.Request) -> web.Response:
    body = await _json_body(request)
    result = await _services(request).admin.withdraw_from_reserve(
        body.get("to"), body.get("amount"), _requester(request)
    )
    return web.json_response(result)


async def recover_tokens(request: web.Request) -> web.Response:
    body = await _json_body(request)
    result = await _services(request).admin.recover_tokens(
        body.get("tokenAddress"), body.get("amount"), _requester(request)
    )
    return web.json_response(result)


async def update_help_price(request: web.Request) -> web.Response:
    body = await _json_body(request)
    result = await _services(request).admin.update_help_price(
        body.get("price"), _requester(request)
    )
    return web.json_response(result)


async def manual_sync(request: web.Request) -> web.Response:
    result = await _services(request).synchronizer.sync_manually(_requester(request))
    return web.json_response(result)


def setup_routes(app: web.Application, prefix: str = "/api") -> None:
    """Register all API routes."""
    app.router.add_get(f"{prefix}/user-info", user_info)
    app.router.add_get(f"{prefix}/users", users)
    app.router.add_get(f"{prefix}/help-price", help_price)
    app.router.add_get(f"{prefix}/owner", owner)
    app.router.add_get(f"{prefix}/level-amount", level_amount)
    app.router.add_get(f"{prefix}/transactions", transactions)
    app.router.add_get(f"{prefix}/all-contract-transactions", all_contract_transactions)
    app.router.add_get(f"{prefix}/user-donations", user_donations)
    app.router.add_get(f"{prefix}/help-transactions", help_transactions)
    app.router.add_get(f"{prefix}/voluntary-donations", voluntary_donations)
    app.router.add_get(f"{prefix}/contract-stats", contract_stats)
    app.router.add_get(f"{prefix}/sync-status", sync_status)

    app.router.add_post(f"{prefix}/inject-funds", inject_funds)
    app.router.add_post(f"{prefix}/inject-help", inject_help)
    app.router.add_post(f"{prefix}/reset-queue", reset_queue)
    app.router.add_post(f"{prefix}/withdraw-from-reserve", withdraw_from_reserve)
    app.router.add_post(f"{prefix}/recover-tokens", recover_tokens)
    app.router.add_post(f"{prefix}/update-help-price", update_help_price)
    app.router.add_post(f"{prefix}/sync", manual_sync)
