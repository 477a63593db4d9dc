"""
Owner transactions.

Privileged contract calls signed with the owner key. Each operation checks
the requester against the owner address and validates input before any
network call.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from eth_account import Account
from loguru import logger
from web3 import AsyncWeb3
from web3.contract.async_contract import AsyncContractFunction
from web3.exceptions import ContractLogicError, TimeExhausted

from helpnet.config.constants import (
    HELP_DECIMALS,
    HELP_PRICE_DECIMALS,
    TX_RECEIPT_TIMEOUT,
    TX_SEND_TIMEOUT,
    USDT_DECIMALS,
)
from helpnet.repositories.user_repository import UserRepository
from helpnet.services.blockchain.contract_reader import ContractReader
from helpnet.utils.exceptions import AdminOperationFailed
from helpnet.utils.security import ensure_owner, mask_address
from helpnet.utils.token_units import to_units
from helpnet.validators.common import require_address, require_amount


class AdminOperations:
    """
    Owner-only writes against the HelpNet contract.

    Every method returns {"transactionHash": "0x..."} of the main
    transaction once it is mined with status 1.
    """

    def __init__(
        self,
        reader: ContractReader,
        owner_private_key: str,
        session_factory: Callable[[], Any],
    ) -> None:
        """
        Initialize admin operations.

        Args:
            reader: Contract reader (connections, token addresses)
            owner_private_key: Owner wallet private key
            session_factory: Async session factory (queue reset bookkeeping)
        """
        self.reader = reader
        self._account = Account.from_key(owner_private_key)
        self.owner_address = self._account.address.lower()
        self.session_factory = session_factory

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def inject_funds(self, amount: str, requester: str | None) -> dict[str, str]:
        """Inject USDT into the contract (approves first if needed)."""
        ensure_owner(requester, self.owner_address, "inject funds")
        raw = to_units(require_amount(amount), USDT_DECIMALS)

        tokens = await self.reader.token_addresses()
        w3 = await self.reader.connection()
        await self._ensure_allowance(w3, tokens.usdt, raw)
        contract = self.reader.contract_for(w3)
        tx_hash = await self._transact(w3, contract.functions.injectFunds(raw), "injectFunds")
        return {"transactionHash": tx_hash}

    async def inject_help(self, amount: str, requester: str | None) -> dict[str, str]:
        """Inject HELP into the contract (approves first if needed)."""
        ensure_owner(requester, self.owner_address, "inject HELP")
        raw = to_units(require_amount(amount), HELP_DECIMALS)

        tokens = await self.reader.token_addresses()
        w3 = await self.reader.connection()
        await self._ensure_allowance(w3, tokens.help, raw)
        contract = self.reader.contract_for(w3)
        tx_hash = await self._transact(w3, contract.functions.injectHelp(raw), "injectHelp")
        return {"transactionHash": tx_hash}

    async def reset_queue(self, requester: str | None) -> dict[str, str]:
        """Reset the contract queue and clear queue flags of stored users."""
        ensure_owner(requester, self.owner_address, "reset the queue")

        w3 = await self.reader.connection()
        contract = self.reader.contract_for(w3)
        tx_hash = await self._transact(w3, contract.functions.resetQueue(), "resetQueue")

        async with self.session_factory() as session:
            updated = await UserRepository(session).reset_queue_flags()
            await session.commit()
        logger.info(f"[Admin] Queue flags cleared for {updated} users")

        return {"transactionHash": tx_hash}

    async def withdraw_from_reserve(
        self, to: str | None, amount: str, requester: str | None
    ) -> dict[str, str]:
        """Withdraw USDT from the reserve pool to an address."""
        recipient = require_address(to, field="to address")
        ensure_owner(requester, self.owner_address, "withdraw from reserve")
        raw = to_units(require_amount(amount), USDT_DECIMALS)

        w3 = await self.reader.connection()
        contract = self.reader.contract_for(w3)
        tx_hash = await self._transact(
            w3,
            contract.functions.withdrawFromReserve(
                AsyncWeb3.to_checksum_address(recipient), raw
            ),
            "withdrawFromReserve",
        )
        return {"transactionHash": tx_hash}

    async def recover_tokens(
        self, token_address: str | None, amount: str, requester: str | None
    ) -> dict[str, str]:
        """Recover an ERC20 token held by the contract (amount in token units)."""
        token = require_address(token_address, field="token address")
        ensure_owner(requester, self.owner_address, "recover tokens")
        amount = require_amount(amount)

        w3 = await self.reader.connection()
        decimals = await self.reader.token_for(w3, token).functions.decimals().call()
        raw = to_units(amount, int(decimals))

        contract = self.reader.contract_for(w3)
        tx_hash = await self._transact(
            w3,
            contract.functions.recoverTokens(AsyncWeb3.to_checksum_address(token), raw),
            "recoverTokens",
        )
        return {"transactionHash": tx_hash}

    async def update_help_price(self, price: str, requester: str | None) -> dict[str, str]:
        """Set the HELP price oracle value."""
        ensure_owner(requester, self.owner_address, "update HELP price")
        raw = to_units(require_amount(price), HELP_PRICE_DECIMALS)

        w3 = await self.reader.connection()
        contract = self.reader.contract_for(w3)
        tx_hash = await self._transact(
            w3, contract.functions.updateHelpPrice(raw), "updateHelpPrice"
        )
        return {"transactionHash": tx_hash}

    # ------------------------------------------------------------------
    # Transaction plumbing
    # ------------------------------------------------------------------

    async def _ensure_allowance(self, w3: AsyncWeb3, token_address: str, amount: int) -> None:
        """Approve the contract for amount when the current allowance is lower."""
        token = self.reader.token_for(w3, token_address)
        spender = AsyncWeb3.to_checksum_address(self.reader.contract_address)
        allowance = await token.functions.allowance(self._account.address, spender).call()
        if allowance >= amount:
            return

        logger.info(
            f"[Admin] Allowance {allowance} < {amount} for token "
            f"{mask_address(token_address)}, approving"
        )
        await self._transact(w3, token.functions.approve(spender, amount), "approve")

    async def _transact(
        self, w3: AsyncWeb3, function: AsyncContractFunction, label: str
    ) -> str:
        """
        Build, sign, send and await a contract call.

        Args:
            w3: Connection
            function: Bound contract function
            label: Name for logs and errors

        Returns:
            0x-prefixed transaction hash

        Raises:
            AdminOperationFailed: Reverted, rejected or not mined in time
        """
        sender = self._account.address
        try:
            nonce = await w3.eth.get_transaction_count(sender, "pending")
            gas_price = await w3.eth.gas_price
            try:
                gas_estimate = await function.estimate_gas({"from": sender})
                gas_limit = int(gas_estimate * 1.2)
            except ContractLogicError as e:
                raise AdminOperationFailed(f"{label} would revert: {e}") from e

            tx = await function.build_transaction(
                {
                    "from": sender,
                    "nonce": nonce,
                    "gas": gas_limit,
                    "gasPrice": gas_price,
                    "chainId": await w3.eth.chain_id,
                }
            )
            signed = self._account.sign_transaction(tx)
            tx_hash = await asyncio.wait_for(
                w3.eth.send_raw_transaction(signed.raw_transaction),
                timeout=TX_SEND_TIMEOUT,
            )
            tx_hash_hex = AsyncWeb3.to_hex(tx_hash)
            logger.info(f"[Admin] {label} sent: {tx_hash_hex}")

            receipt = await asyncio.wait_for(
                w3.eth.wait_for_transaction_receipt(tx_hash),
                timeout=TX_RECEIPT_TIMEOUT,
            )
        except (TimeoutError, TimeExhausted) as e:
            raise AdminOperationFailed(f"{label} was not confirmed in time") from e

        if receipt["status"] != 1:
            raise AdminOperationFailed(f"{label} reverted: {tx_hash_hex}")

        logger.success(f"[Admin] {label} confirmed in block {receipt['blockNumber']}")
        return tx_hash_hex
