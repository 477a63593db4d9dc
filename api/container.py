"""
Service container shared by the API handlers.
"""

from dataclasses import dataclass

from aiohttp import web

from helpnet.services.blockchain.admin_operations import AdminOperations
from helpnet.services.queries import (
    ContractStatsService,
    TransactionQueryService,
    UserInfoService,
)
from helpnet.services.sync.synchronizer import Synchronizer


@dataclass
class Services:
    """Services used by request handlers."""

    users: UserInfoService
    transactions: TransactionQueryService
    stats: ContractStatsService
    admin: AdminOperations
    synchronizer: Synchronizer


SERVICES_KEY = web.AppKey("services", Services)
