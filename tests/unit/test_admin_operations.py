"""Unit tests for owner-only contract operations."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from hexbytes import HexBytes
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError

from helpnet.services.blockchain import admin_operations as admin_module
from helpnet.services.blockchain.admin_operations import AdminOperations
from helpnet.services.blockchain.contract_reader import TokenAddresses
from helpnet.utils.exceptions import (
    AdminOperationFailed,
    AuthorizationError,
    InvalidInputError,
)

OWNER_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
USDT = "0x" + "11" * 20
HELP = "0x" + "22" * 20


@pytest.fixture
def w3():
    return MagicMock()


@pytest.fixture
def admin(mock_reader, session_factory, w3):
    mock_reader.connection = AsyncMock(return_value=w3)
    mock_reader.token_addresses = AsyncMock(return_value=TokenAddresses(usdt=USDT, help=HELP))
    ops = AdminOperations(mock_reader, OWNER_KEY, session_factory)
    ops._transact = AsyncMock(return_value="0x" + "ab" * 32)
    return ops


def token_with_allowance(mock_reader, allowance):
    token = MagicMock()
    token.functions.allowance.return_value.call = AsyncMock(return_value=allowance)
    mock_reader.token_for = MagicMock(return_value=token)
    return token


class TestOwnerGuard:
    """Every operation rejects non-owners before touching the chain."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "call",
        [
            lambda ops, who: ops.inject_funds("10", who),
            lambda ops, who: ops.inject_help("10", who),
            lambda ops, who: ops.reset_queue(who),
            lambda ops, who: ops.withdraw_from_reserve("0x" + "33" * 20, "10", who),
            lambda ops, who: ops.recover_tokens(USDT, "10", who),
            lambda ops, who: ops.update_help_price("0.5", who),
        ],
    )
    async def test_non_owner_rejected(self, admin, mock_reader, user_address, call):
        with pytest.raises(AuthorizationError):
            await call(admin, user_address)
        mock_reader.connection.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_amount_rejected(self, admin, mock_reader):
        with pytest.raises(InvalidInputError):
            await admin.inject_funds("-1", admin.owner_address)
        mock_reader.connection.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_recipient_rejected(self, admin):
        with pytest.raises(InvalidInputError, match="to address"):
            await admin.withdraw_from_reserve("bob", "1", admin.owner_address)


class TestOperations:
    """Owner operations with the transaction plumbing mocked out."""

    @pytest.mark.asyncio
    async def test_inject_funds_approves_when_allowance_low(self, admin, mock_reader):
        """Allowance below the amount triggers approve, then injectFunds."""
        token_with_allowance(mock_reader, 0)

        result = await admin.inject_funds("12.5", admin.owner_address)

        assert result == {"transactionHash": "0x" + "ab" * 32}
        labels = [call.args[2] for call in admin._transact.await_args_list]
        assert labels == ["approve", "injectFunds"]
        contract = mock_reader.contract_for.return_value
        contract.functions.injectFunds.assert_called_once_with(12_500_000)

    @pytest.mark.asyncio
    async def test_inject_help_skips_approve_with_allowance(self, admin, mock_reader):
        """Sufficient allowance sends only injectHelp."""
        token_with_allowance(mock_reader, 10**30)

        await admin.inject_help("2", admin.owner_address)

        labels = [call.args[2] for call in admin._transact.await_args_list]
        assert labels == ["injectHelp"]
        mock_reader.token_for.assert_called_once()
        assert mock_reader.token_for.call_args.args[1] == HELP

    @pytest.mark.asyncio
    async def test_update_help_price_uses_oracle_decimals(self, admin, mock_reader):
        await admin.update_help_price("0.25", admin.owner_address)

        contract = mock_reader.contract_for.return_value
        contract.functions.updateHelpPrice.assert_called_once_with(25_000_000)

    @pytest.mark.asyncio
    async def test_recover_tokens_uses_token_decimals(self, admin, mock_reader):
        token = MagicMock()
        token.functions.decimals.return_value.call = AsyncMock(return_value=6)
        mock_reader.token_for = MagicMock(return_value=token)

        await admin.recover_tokens(USDT, "3", admin.owner_address)

        contract = mock_reader.contract_for.return_value
        contract.functions.recoverTokens.assert_called_once_with(
            AsyncWeb3.to_checksum_address(USDT), 3_000_000
        )

    @pytest.mark.asyncio
    async def test_reset_queue_clears_stored_flags(
        self, admin, mock_session, monkeypatch
    ):
        """After the contract call, stored users leave the queue."""
        repo = MagicMock()
        repo.reset_queue_flags = AsyncMock(return_value=4)
        monkeypatch.setattr(admin_module, "UserRepository", lambda session: repo)

        await admin.reset_queue(admin.owner_address)

        repo.reset_queue_flags.assert_awaited_once()
        mock_session.commit.assert_awaited()


async def _value(value):
    return value


class TestTransact:
    """Build, sign, send and await."""

    @pytest.fixture
    def ops(self, mock_reader, session_factory):
        return AdminOperations(mock_reader, OWNER_KEY, session_factory)

    @pytest.fixture
    def chain(self, w3, contract_address):
        w3.eth.get_transaction_count = AsyncMock(return_value=7)
        w3.eth.gas_price = _value(10**9)
        w3.eth.chain_id = _value(11155111)
        w3.eth.send_raw_transaction = AsyncMock(return_value=HexBytes("0x" + "11" * 32))
        w3.eth.wait_for_transaction_receipt = AsyncMock(
            return_value={"status": 1, "blockNumber": 123}
        )

        function = MagicMock()
        function.estimate_gas = AsyncMock(return_value=100_000)
        function.build_transaction = AsyncMock(
            return_value={
                "to": AsyncWeb3.to_checksum_address(contract_address),
                "value": 0,
                "data": "0x",
                "gas": 120_000,
                "gasPrice": 10**9,
                "nonce": 7,
                "chainId": 11155111,
            }
        )
        return function

    @pytest.mark.asyncio
    async def test_confirmed_transaction_returns_hash(self, ops, w3, chain):
        tx_hash = await ops._transact(w3, chain, "resetQueue")

        assert tx_hash == "0x" + "11" * 32
        params = chain.build_transaction.await_args.args[0]
        assert params["gas"] == 120_000
        assert params["nonce"] == 7
        assert params["chainId"] == 11155111
        w3.eth.send_raw_transaction.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reverted_receipt_fails(self, ops, w3, chain):
        w3.eth.wait_for_transaction_receipt = AsyncMock(
            return_value={"status": 0, "blockNumber": 123}
        )

        with pytest.raises(AdminOperationFailed, match="reverted"):
            await ops._transact(w3, chain, "resetQueue")

    @pytest.mark.asyncio
    async def test_estimate_revert_fails_before_sending(self, ops, w3, chain):
        chain.estimate_gas = AsyncMock(side_effect=ContractLogicError("execution reverted"))

        with pytest.raises(AdminOperationFailed, match="would revert"):
            await ops._transact(w3, chain, "resetQueue")
        w3.eth.send_raw_transaction.assert_not_awaited()
