"""
Synchronizer.

Orchestrates the cold start replay, scheduled polling passes and manual
sync. The syncing flag is the only mutual exclusion: an overlapping
scheduled pass is skipped, an overlapping manual request is rejected.
"""

from collections.abc import Callable
from enum import StrEnum
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from helpnet.config.constants import COUNTER_LOOKBACK_BLOCKS
from helpnet.services.blockchain.abi import EVENT_NAMES
from helpnet.services.blockchain.contract_reader import ContractReader
from helpnet.services.sync.counter_cache import CounterCache
from helpnet.services.sync.counters import COUNTED_EVENTS, AggregateCounters
from helpnet.services.sync.reconciler import EventReconciler, ReconcileOutcome
from helpnet.services.sync.scanner import BlockRangeScanner
from helpnet.utils.exceptions import SyncInProgress, must_log
from helpnet.utils.security import ensure_owner


class SyncState(StrEnum):
    """Synchronizer state."""

    IDLE = "idle"
    SYNCING = "syncing"


class Synchronizer:
    """
    Block-range event synchronizer.

    Holds the aggregate counters and the last synced block for the process.
    lastSyncedBlock is the next block to scan and only moves forward after
    a pass fully succeeds.
    """

    def __init__(
        self,
        reader: ContractReader,
        scanner: BlockRangeScanner,
        counter_cache: CounterCache,
        session_factory: async_sessionmaker[AsyncSession] | Callable[[], Any],
        deployment_block: int,
        owner_address: str,
        counter_lookback_blocks: int = COUNTER_LOOKBACK_BLOCKS,
        reconciler_factory: Callable[[AsyncSession], EventReconciler] | None = None,
    ) -> None:
        """
        Initialize synchronizer.

        Args:
            reader: Contract reader
            scanner: Block range scanner
            counter_cache: Counter cache
            session_factory: Async session factory
            deployment_block: Contract deployment block
            owner_address: Address allowed to trigger manual sync
            counter_lookback_blocks: Cold start counter replay cap
            reconciler_factory: Builds a reconciler for a session
        """
        self.reader = reader
        self.scanner = scanner
        self.counter_cache = counter_cache
        self.session_factory = session_factory
        self.deployment_block = deployment_block
        self.owner_address = owner_address.lower()
        self.counter_lookback_blocks = counter_lookback_blocks
        self.reconciler_factory = reconciler_factory or (
            lambda session: EventReconciler(
                session, reader, reader.contract_address
            )
        )

        self.counters = AggregateCounters()
        self._last_synced_block = 0
        self._state = SyncState.IDLE
        self._cold_start_done = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_syncing(self) -> bool:
        return self._state == SyncState.SYNCING

    @property
    def last_synced_block(self) -> int:
        return self._last_synced_block

    @property
    def cold_start_done(self) -> bool:
        return self._cold_start_done

    def status(self) -> dict[str, Any]:
        """Snapshot for health checks and the API."""
        return {
            "state": self._state.value,
            "lastSyncedBlock": self._last_synced_block,
            "coldStartDone": self._cold_start_done,
            "usingFallbackRpc": self.reader.selector.using_fallback,
            **self.counters.to_dict(),
        }

    def _advance(self, next_block: int) -> None:
        if next_block > self._last_synced_block:
            self._last_synced_block = next_block

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def cold_start(self) -> None:
        """
        First pass after launch.

        Raises:
            SyncInProgress: Another pass is running
        """
        if self.is_syncing:
            raise SyncInProgress()

        self._state = SyncState.SYNCING
        try:
            await self._cold_start_pass()
        finally:
            self._state = SyncState.IDLE

    async def run_scheduled_sync(self) -> bool:
        """
        Recurring timer callback.

        Never raises: failures are logged and retried on the next tick.

        Returns:
            True if a pass completed
        """
        if self.is_syncing:
            logger.info("[Sync] Previous synchronization still running, skipping")
            return False

        self._state = SyncState.SYNCING
        try:
            await self._pass()
            return True
        except Exception as e:
            if must_log(e):
                logger.error(f"[Sync] Scheduled synchronization failed: {e}")
            else:
                logger.exception(f"[Sync] Scheduled synchronization failed: {e}")
            return False
        finally:
            self._state = SyncState.IDLE

    async def sync_manually(self, requester: str | None) -> dict[str, Any]:
        """
        Owner-triggered synchronous pass.

        Args:
            requester: Address of the caller

        Returns:
            Dict with message and lastSyncedBlock

        Raises:
            InvalidInputError: requester is not an address
            AuthorizationError: requester is not the owner
            SyncInProgress: A pass is already running
        """
        ensure_owner(requester, self.owner_address, "trigger manual sync")

        if self.is_syncing:
            raise SyncInProgress()

        self._state = SyncState.SYNCING
        try:
            await self._pass()
        except Exception as e:
            logger.error(f"[Sync] Error during manual sync: {e}")
            raise
        finally:
            self._state = SyncState.IDLE

        return {
            "message": (
                "Manual sync completed successfully. "
                f"Blocks synchronized: {self._last_synced_block}"
            ),
            "lastSyncedBlock": self._last_synced_block,
        }

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    async def _pass(self) -> None:
        if not self._cold_start_done:
            logger.info("[Sync] Cold start not completed yet, retrying it")
            await self._cold_start_pass()
        else:
            await self._incremental_pass()

    async def _cold_start_pass(self) -> None:
        height = await self.reader.block_number()
        logger.info(f"[Sync] Cold start at chain height {height}")

        cached = await self.counter_cache.load()
        if cached is not None:
            self.counters = cached
            logger.info(f"[Sync] Restored counters from cache: {cached.to_dict()}")
        else:
            start = max(self.deployment_block, height - self.counter_lookback_blocks)
            counters = AggregateCounters()
            # Any counted filter failure aborts so partial totals are never cached
            async for _, event in self.scanner.scan(
                start, height, COUNTED_EVENTS, strict=True
            ):
                counters.apply(event)
            await self.counter_cache.store(counters)
            self.counters = counters
            logger.info(
                f"[Sync] Counters initialized from blocks {start}-{height}: "
                f"{counters.to_dict()}"
            )

        # Row reconciliation always replays from deployment
        await self._reconcile_range(self.deployment_block, height, delta=None)

        self._advance(height + 1)
        self._cold_start_done = True
        logger.success(
            f"[Sync] Cold start complete, lastSyncedBlock={self._last_synced_block}"
        )

    async def _incremental_pass(self) -> None:
        height = await self.reader.block_number()
        from_block = self._last_synced_block or self.deployment_block

        if from_block > height:
            logger.info(
                f"[Sync] No new blocks (lastSyncedBlock: {self._last_synced_block}, "
                f"latestBlock: {height})"
            )
            return

        logger.info(f"[Sync] Polling: syncing from block {from_block} to {height}")
        delta = AggregateCounters()
        await self._reconcile_range(from_block, height, delta=delta)

        counters = self.counters.merged(delta)
        await self.counter_cache.store(counters)
        self.counters = counters
        self._advance(height + 1)

        logger.info(f"[Sync] Stats updated: {counters.to_dict()}")

    async def _reconcile_range(
        self, from_block: int, to_block: int, delta: AggregateCounters | None
    ) -> dict[ReconcileOutcome, int]:
        """
        Scan a range for every event and reconcile each.

        Args:
            from_block: First block (inclusive)
            to_block: Last block (inclusive)
            delta: Counters to accumulate into, or None

        Returns:
            Outcome counts
        """
        outcomes = {outcome: 0 for outcome in ReconcileOutcome}

        async with self.session_factory() as session:
            reconciler = self.reconciler_factory(session)
            async for _, event in self.scanner.scan(from_block, to_block, EVENT_NAMES):
                outcome = await reconciler.reconcile(event)
                outcomes[outcome] += 1
                if delta is not None:
                    delta.apply(event)

        logger.info(
            f"[Sync] Reconciled blocks {from_block}-{to_block}: "
            + ", ".join(f"{k.value}={v}" for k, v in outcomes.items())
        )
        return outcomes
