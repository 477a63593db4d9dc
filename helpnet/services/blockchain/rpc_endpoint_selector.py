"""
RPC endpoint selection with single-switch failover.

Holds a primary and a fallback JSON-RPC endpoint. Every acquisition checks
the chain id; a failure on the primary switches to the fallback for the
rest of the process lifetime. There is no switch-back.
"""

import asyncio
from collections.abc import Callable

import aiohttp
from loguru import logger
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception

from helpnet.config.constants import BLOCKCHAIN_RPC_TIMEOUT
from helpnet.utils.exceptions import (
    ConnectivityError,
    EndpointUnavailable,
    WrongChainError,
)

# Errors treated as "endpoint unusable"
ENDPOINT_ERRORS = (
    ConnectivityError,
    Web3Exception,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
    ValueError,
)


def create_async_web3(rpc_url: str) -> AsyncWeb3:
    """
    Create AsyncWeb3 over HTTP with the standard RPC timeout.

    Args:
        rpc_url: JSON-RPC endpoint URL

    Returns:
        AsyncWeb3 instance
    """
    return AsyncWeb3(
        AsyncWeb3.AsyncHTTPProvider(
            rpc_url,
            request_kwargs={
                "timeout": aiohttp.ClientTimeout(total=BLOCKCHAIN_RPC_TIMEOUT)
            },
        )
    )


class RpcEndpointSelector:
    """
    Primary/fallback AsyncWeb3 selector.

    Usage:
        selector = RpcEndpointSelector(primary, fallback, 11155111)
        w3 = await selector.acquire_connection()
        height = await w3.eth.block_number
    """

    def __init__(
        self,
        primary_url: str,
        fallback_url: str,
        expected_chain_id: int,
        web3_factory: Callable[[str], AsyncWeb3] | None = None,
    ) -> None:
        """
        Initialize selector on the primary endpoint.

        Args:
            primary_url: Primary RPC URL
            fallback_url: Fallback RPC URL
            expected_chain_id: Chain id every endpoint must report
            web3_factory: Builds an AsyncWeb3 for a URL (injectable for tests)
        """
        self.primary_url = primary_url
        self.fallback_url = fallback_url
        self.expected_chain_id = expected_chain_id
        self._web3_factory = web3_factory or create_async_web3

        self._using_fallback = False
        self._web3 = self._web3_factory(primary_url)

        logger.info(
            f"[RPC] Initialized on primary endpoint "
            f"(expected chainId {expected_chain_id})"
        )

    @property
    def using_fallback(self) -> bool:
        """True once the selector has switched to the fallback endpoint."""
        return self._using_fallback

    async def acquire_connection(self) -> AsyncWeb3:
        """
        Return a connection to an endpoint on the expected chain.

        Tries the current endpoint; on any error switches to the fallback
        once and retries there.

        Returns:
            Verified AsyncWeb3 instance

        Raises:
            EndpointUnavailable: Fallback is also unreachable or on the
                wrong chain
        """
        try:
            await self._verify_chain(self._web3)
            return self._web3
        except ENDPOINT_ERRORS as e:
            if self._using_fallback:
                logger.error(f"[RPC] Fallback endpoint failed: {e}")
                raise EndpointUnavailable(
                    f"Both primary and alternative RPCs failed: {e}"
                ) from e

            logger.error(f"[RPC] Primary endpoint failed: {e}")
            logger.warning("[RPC] Switching to alternative RPC endpoint")
            self._web3 = self._web3_factory(self.fallback_url)
            self._using_fallback = True

        try:
            await self._verify_chain(self._web3)
        except ENDPOINT_ERRORS as e:
            logger.error(f"[RPC] Alternative endpoint failed: {e}")
            raise EndpointUnavailable(
                f"Both primary and alternative RPCs failed: {e}"
            ) from e

        logger.info("[RPC] Connected via alternative endpoint")
        return self._web3

    async def _verify_chain(self, w3: AsyncWeb3) -> None:
        """Raise WrongChainError unless w3 reports the expected chain id."""
        chain_id = await w3.eth.chain_id
        if chain_id != self.expected_chain_id:
            raise WrongChainError(self.expected_chain_id, chain_id)
