"""
Blockchain Sync Background Task.

Runs one scheduled synchronization pass: new blocks since lastSyncedBlock
are scanned, reconciled and folded into the cached counters. The first
successful pass after a failed cold start performs the cold start instead.
"""

from loguru import logger

from helpnet.services.sync.synchronizer import Synchronizer


async def run_sync_pass(synchronizer: Synchronizer) -> dict:
    """
    Scheduled sync task.

    Args:
        synchronizer: Process-wide synchronizer

    Returns:
        Dict with pass results
    """
    results = {
        "success": False,
        "skipped": synchronizer.is_syncing,
        "last_synced_block": synchronizer.last_synced_block,
    }

    if results["skipped"]:
        logger.info("[Sync Task] Synchronization in progress, skipping tick")
        return results

    completed = await synchronizer.run_scheduled_sync()
    results["success"] = completed
    results["last_synced_block"] = synchronizer.last_synced_block

    if completed:
        logger.debug(
            f"[Sync Task] Pass complete, lastSyncedBlock={synchronizer.last_synced_block}"
        )
    return results
