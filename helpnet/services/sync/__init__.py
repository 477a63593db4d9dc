"""
Event synchronization.

Chunked log scanning, idempotent reconciliation into PostgreSQL and
Redis-backed aggregate counters.
"""

from .counter_cache import CounterCache
from .counters import AggregateCounters
from .events import ContractEvent, decode_event
from .range_partition import partition_range
from .reconciler import EventReconciler, ReconcileOutcome
from .scanner import BlockRangeScanner
from .synchronizer import Synchronizer, SyncState

__all__ = [
    "AggregateCounters",
    "BlockRangeScanner",
    "ContractEvent",
    "CounterCache",
    "EventReconciler",
    "ReconcileOutcome",
    "SyncState",
    "Synchronizer",
    "decode_event",
    "partition_range",
]
