"""
Read-only access to the HelpNet contract and its tokens.

Every call acquires a connection through the RpcEndpointSelector, so the
chain id is verified and failover applies transparently.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from loguru import logger
from web3 import AsyncWeb3
from web3.contract import AsyncContract
from web3.exceptions import BlockNotFound

from helpnet.config.constants import (
    HELP_DECIMALS,
    HELP_PRICE_DECIMALS,
    USDT_DECIMALS,
)
from helpnet.services.blockchain.abi import ERC20_ABI, EVENT_NAMES, HELPNET_ABI
from helpnet.services.blockchain.rpc_endpoint_selector import (
    ENDPOINT_ERRORS,
    RpcEndpointSelector,
)
from helpnet.utils.exceptions import ConfigurationError
from helpnet.utils.security import mask_address
from helpnet.utils.token_units import from_units


@dataclass(frozen=True)
class QueueInfo:
    """Queue and incentive state of an address as reported by the contract."""

    is_in_queue: bool
    queue_position: int
    locked_amount: Decimal
    unlock_timestamp: int


@dataclass(frozen=True)
class TokenAddresses:
    """Token contracts referenced by the HelpNet contract."""

    usdt: str
    help: str


class ContractReader:
    """
    View calls and log fetches against the HelpNet contract.

    Token addresses are read from the contract (usdt(), helpToken()) on
    first use and cached.
    """

    def __init__(self, selector: RpcEndpointSelector, contract_address: str) -> None:
        """
        Initialize reader.

        Args:
            selector: RPC endpoint selector
            contract_address: HelpNet contract address
        """
        self.selector = selector
        self.contract_address = contract_address.lower()
        self._checksum_address = AsyncWeb3.to_checksum_address(contract_address)
        self._token_addresses: TokenAddresses | None = None

    async def connection(self) -> AsyncWeb3:
        """Verified AsyncWeb3 connection."""
        return await self.selector.acquire_connection()

    def contract_for(self, w3: AsyncWeb3) -> AsyncContract:
        """HelpNet contract bound to a connection."""
        return w3.eth.contract(address=self._checksum_address, abi=HELPNET_ABI)

    def token_for(self, w3: AsyncWeb3, token_address: str) -> AsyncContract:
        """ERC20 contract bound to a connection."""
        return w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token_address), abi=ERC20_ABI
        )

    async def _contract(self) -> AsyncContract:
        return self.contract_for(await self.connection())

    # ------------------------------------------------------------------
    # Chain
    # ------------------------------------------------------------------

    async def block_number(self) -> int:
        """Current chain height."""
        w3 = await self.connection()
        return await w3.eth.block_number

    async def get_block_timestamp(self, block_number: int) -> int | None:
        """
        Get block timestamp.

        Args:
            block_number: Block number

        Returns:
            Unix timestamp, or None if the block is not visible to the
            endpoint (or could not be fetched)
        """
        w3 = await self.connection()
        try:
            block = await w3.eth.get_block(block_number)
        except BlockNotFound:
            logger.warning(f"[Reader] Block {block_number} not found")
            return None
        except ENDPOINT_ERRORS as e:
            logger.error(f"[Reader] Failed to get block {block_number}: {e}")
            return None

        if not block:
            logger.warning(f"[Reader] Block {block_number} not found")
            return None
        return int(block["timestamp"])

    async def get_event_logs(
        self, event_name: str, from_block: int, to_block: int
    ) -> list[Any]:
        """
        Fetch decoded logs of one event in an inclusive block range.

        Args:
            event_name: Contract event name
            from_block: First block (inclusive)
            to_block: Last block (inclusive)

        Returns:
            List of web3 EventData
        """
        if event_name not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {event_name}")

        contract = await self._contract()
        event = getattr(contract.events, event_name)
        logs = await event.get_logs(from_block=from_block, to_block=to_block)
        return list(logs)

    # ------------------------------------------------------------------
    # Contract views
    # ------------------------------------------------------------------

    async def entry_fee(self) -> Decimal:
        """Registration fee in USDT."""
        contract = await self._contract()
        raw = await contract.functions.ENTRY_FEE().call()
        return from_units(raw, USDT_DECIMALS)

    async def help_price(self) -> Decimal:
        """HELP price from the contract oracle."""
        contract = await self._contract()
        raw = await contract.functions.getHelpPrice().call()
        return from_units(raw, HELP_PRICE_DECIMALS)

    async def level_amount(self, level: int) -> Decimal:
        """Donation amount required for a level, in USDT."""
        contract = await self._contract()
        raw = await contract.functions.levelAmounts(level).call()
        return from_units(raw, USDT_DECIMALS)

    async def queue_and_incentive_info(self, address: str) -> QueueInfo:
        """
        Queue and incentive info of an address.

        Args:
            address: Wallet address

        Returns:
            QueueInfo
        """
        contract = await self._contract()
        is_in_queue, position, locked, unlock = await contract.functions.getUserQueueAndIncentiveInfo(
            AsyncWeb3.to_checksum_address(address)
        ).call()
        return QueueInfo(
            is_in_queue=bool(is_in_queue),
            queue_position=int(position),
            locked_amount=from_units(locked, HELP_DECIMALS),
            unlock_timestamp=int(unlock),
        )

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def token_addresses(self) -> TokenAddresses:
        """USDT and HELP token addresses (cached after first read)."""
        if self._token_addresses is None:
            contract = await self._contract()
            usdt = await contract.functions.usdt().call()
            help_token = await contract.functions.helpToken().call()
            if not AsyncWeb3.is_address(usdt) or not AsyncWeb3.is_address(help_token):
                raise ConfigurationError("Invalid USDT or HELP token address")
            self._token_addresses = TokenAddresses(
                usdt=usdt.lower(), help=help_token.lower()
            )
            logger.info(
                f"[Reader] Tokens resolved: USDT={mask_address(usdt)}, "
                f"HELP={mask_address(help_token)}"
            )
        return self._token_addresses

    async def help_balance(self, address: str) -> Decimal:
        """
        HELP balance of an address.

        Returns:
            Balance, or 0 when the query fails (logged)
        """
        try:
            tokens = await self.token_addresses()
            w3 = await self.connection()
            raw = await self.token_for(w3, tokens.help).functions.balanceOf(
                AsyncWeb3.to_checksum_address(address)
            ).call()
        except (*ENDPOINT_ERRORS, ConfigurationError) as e:
            logger.error(
                f"[Reader] Failed to get HELP balance for {mask_address(address)}: {e}"
            )
            return Decimal("0")
        return from_units(raw, HELP_DECIMALS)

    async def contract_balances(self) -> tuple[Decimal, Decimal]:
        """
        Token balances held by the contract.

        Returns:
            Tuple of (usdt_balance, help_balance)
        """
        tokens = await self.token_addresses()
        w3 = await self.connection()
        usdt_raw = await self.token_for(w3, tokens.usdt).functions.balanceOf(
            self._checksum_address
        ).call()
        help_raw = await self.token_for(w3, tokens.help).functions.balanceOf(
            self._checksum_address
        ).call()
        return from_units(usdt_raw, USDT_DECIMALS), from_units(help_raw, HELP_DECIMALS)
