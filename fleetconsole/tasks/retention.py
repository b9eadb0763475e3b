"""Retention cleanup background task."""

import asyncio
import logging
from typing import Dict

from ..models import db_manager
from ..services.cache import query_cache

logger = logging.getLogger("fleetconsole.tasks")


def run_cleanup(metrics_days: int, audit_days: int, sessions=None) -> Dict[str, int]:
    """Delete expired metric samples and audit rows, and drop idle console sessions."""
    removed = db_manager.cleanup_old_data(metrics_days, audit_days)
    if removed.get("server_metrics"):
        query_cache.invalidate("server-metrics")
    if sessions is not None:
        removed["console_sessions"] = sessions.expire_idle()
    if any(removed.values()):
        logger.info(f"retention: removed {removed}")
    return removed


async def retention_loop(interval_seconds: int, metrics_days: int, audit_days: int, sessions=None):
    """Background task that periodically applies the retention windows."""
    logger.info(f"retention: interval {interval_seconds}s (metrics {metrics_days}d, audit {audit_days}d)")
    loop = asyncio.get_running_loop()

    while True:
        try:
            await loop.run_in_executor(None, run_cleanup, metrics_days, audit_days, sessions)
        except Exception as e:
            logger.error(f"retention: loop error: {e}")

        await asyncio.sleep(interval_seconds)
