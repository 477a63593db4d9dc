"""
Read models exposed by the HTTP API.
"""

from .contract_stats_service import ContractStatsService
from .transaction_query_service import TransactionQueryService
from .user_info_service import UserInfoService

__all__ = [
    "ContractStatsService",
    "TransactionQueryService",
    "UserInfoService",
]
