"""
Contract-level read models: aggregate stats, price, owner, level amounts.
"""

from typing import Any

from web3 import AsyncWeb3

from helpnet.services.blockchain.contract_reader import ContractReader
from helpnet.services.sync.synchronizer import Synchronizer
from helpnet.utils.security import ensure_owner
from helpnet.validators.common import require_level


class ContractStatsService:
    """Contract aggregate views."""

    def __init__(
        self,
        reader: ContractReader,
        synchronizer: Synchronizer,
        owner_address: str,
    ) -> None:
        self.reader = reader
        self.synchronizer = synchronizer
        self.owner_address = owner_address.lower()

    async def get_contract_stats(self, requester: str | None) -> dict[str, Any]:
        """
        Aggregate counters and contract token balances (owner only).

        Raises:
            InvalidInputError: requester is malformed
            AuthorizationError: requester is not the owner
        """
        ensure_owner(requester, self.owner_address, "view contract stats")

        usdt_balance, help_balance = await self.reader.contract_balances()
        return {
            **self.synchronizer.counters.to_dict(),
            "contractBalanceUsdt": float(usdt_balance),
            "contractBalanceHelp": float(help_balance),
        }

    async def help_price(self) -> dict[str, float]:
        """HELP price from the oracle."""
        return {"price": float(await self.reader.help_price())}

    def owner(self) -> dict[str, str]:
        """Owner wallet address (checksummed)."""
        return {"owner": AsyncWeb3.to_checksum_address(self.owner_address)}

    async def level_amount(self, level: str | int | None) -> dict[str, Any]:
        """Donation amount of a level."""
        level = require_level(level)
        amount = await self.reader.level_amount(level)
        return {"level": level, "amount": float(amount)}
