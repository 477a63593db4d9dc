"""
Block range scanner.

Walks an inclusive block interval in bounded windows and yields decoded
events. Within a window the filters are fetched concurrently; windows are
processed strictly in increasing order so that downstream overwrites keep
chain order.
"""

import asyncio
from collections.abc import AsyncIterator, Collection, Sequence
from typing import Literal

from loguru import logger

from helpnet.config.constants import FATAL_EVENT_FILTERS, MAX_BLOCK_RANGE
from helpnet.services.blockchain.contract_reader import ContractReader
from helpnet.services.sync.events import ContractEvent, decode_event
from helpnet.services.sync.range_partition import partition_range
from helpnet.utils.exceptions import ScanError

LATEST = "latest"


class BlockRangeScanner:
    """
    Chunked event log scanner.

    A fetch failure for a fatal filter (UserRegistered by default) aborts
    the scan with ScanError. Failures of other filters are logged and that
    filter's window is skipped, unless the scan runs with strict=True.
    """

    def __init__(
        self,
        reader: ContractReader,
        max_block_range: int = MAX_BLOCK_RANGE,
        fatal_filters: Collection[str] = FATAL_EVENT_FILTERS,
    ) -> None:
        """
        Initialize scanner.

        Args:
            reader: Contract reader used for log fetches
            max_block_range: Max blocks per window
            fatal_filters: Filters whose fetch failure aborts the scan
        """
        if max_block_range <= 0:
            raise ValueError("max_block_range must be positive")
        self.reader = reader
        self.max_block_range = max_block_range
        self.fatal_filters = frozenset(fatal_filters)

    async def resolve_to_block(self, to_block: int | Literal["latest"]) -> int:
        """Resolve the 'latest' sentinel to the current chain height."""
        if to_block == LATEST:
            return await self.reader.block_number()
        return int(to_block)

    async def scan(
        self,
        from_block: int,
        to_block: int | Literal["latest"],
        filters: Sequence[str],
        strict: bool = False,
    ) -> AsyncIterator[tuple[str, ContractEvent]]:
        """
        Yield (filter_name, event) pairs for the interval.

        The 'latest' sentinel is resolved once, before the first window.

        Args:
            from_block: First block (inclusive)
            to_block: Last block (inclusive) or "latest"
            filters: Event names to fetch
            strict: Treat every filter as fatal

        Yields:
            (filter_name, event) in chain order within each window

        Raises:
            ScanError: A fatal filter could not be fetched
        """
        end_block = await self.resolve_to_block(to_block)
        windows = partition_range(from_block, end_block, self.max_block_range)

        logger.info(
            f"[Scanner] Scanning {', '.join(filters)} from block {from_block} "
            f"to {end_block} ({len(windows)} windows)"
        )

        for window_from, window_to in windows:
            batch = await self.fetch_window(
                window_from, window_to, filters, strict=strict
            )
            for item in batch:
                yield item

    async def fetch_window(
        self,
        from_block: int,
        to_block: int,
        filters: Sequence[str],
        strict: bool = False,
    ) -> list[tuple[str, ContractEvent]]:
        """
        Fetch every filter for one window.

        Args:
            from_block: Window start (inclusive)
            to_block: Window end (inclusive)
            filters: Event names to fetch
            strict: Treat every filter as fatal

        Returns:
            Decoded (filter_name, event) pairs sorted by (block, logIndex)
        """
        results = await asyncio.gather(
            *(
                self.reader.get_event_logs(name, from_block, to_block)
                for name in filters
            ),
            return_exceptions=True,
        )

        batch: list[tuple[str, ContractEvent]] = []
        for name, result in zip(filters, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                if strict or name in self.fatal_filters:
                    logger.error(
                        f"[Scanner] Failed to query {name} events "
                        f"[{from_block}, {to_block}]: {result}"
                    )
                    raise ScanError(name, from_block, to_block, result) from result
                logger.warning(
                    f"[Scanner] Skipping {name} events [{from_block}, {to_block}] "
                    f"after fetch failure: {result}"
                )
                continue

            if result:
                logger.debug(
                    f"[Scanner] Found {len(result)} {name} events in "
                    f"[{from_block}, {to_block}]"
                )
            batch.extend((name, decode_event(name, log)) for log in result)

        batch.sort(key=lambda item: item[1].sort_key)
        return batch
