"""Synthetic metric sampler background task."""

import asyncio
import logging
import random
from typing import Any, Dict, List, Optional

from ..models import Server
from ..services import servers as server_service

logger = logging.getLogger("fleetconsole.tasks")

CPU_STEP = 10.0
MEMORY_STEP_MB = 512.0
DISK_STEP_GB = 0.5
NETWORK_MAX_MB = 50.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def next_sample(server: Server, previous: Optional[Dict[str, Any]], rng: random.Random) -> Dict[str, Any]:
    """
    Random walk around the previous sample, bounded by server capacity.

    Without a previous sample the walk starts at mid-range values.
    """
    memory_total = float((server.ram_gb or 16) * 1024)
    disk_total = float(server.storage_gb or 1000)
    prev = previous or {}

    cpu = prev.get("cpu_usage")
    cpu = 30.0 if cpu is None else cpu
    memory = prev.get("memory_usage_mb")
    memory = memory_total / 2 if memory is None else memory
    disk = prev.get("disk_usage_gb")
    disk = disk_total / 2 if disk is None else disk
    uptime = prev.get("uptime_seconds") or 0

    cpu = round(_clamp(cpu + rng.uniform(-CPU_STEP, CPU_STEP), 0.0, 100.0), 1)
    return {
        "cpu_usage": cpu,
        "memory_usage_mb": round(_clamp(memory + rng.uniform(-MEMORY_STEP_MB, MEMORY_STEP_MB), 0.0, memory_total), 1),
        "memory_total_mb": memory_total,
        "disk_usage_gb": round(_clamp(disk + rng.uniform(-DISK_STEP_GB, DISK_STEP_GB), 0.0, disk_total), 2),
        "disk_total_gb": disk_total,
        "network_in_mb": round(rng.uniform(0.0, NETWORK_MAX_MB), 2),
        "network_out_mb": round(rng.uniform(0.0, NETWORK_MAX_MB), 2),
        "uptime_seconds": uptime,
        "load_average": round(cpu / 100 * (server.cpu_cores or 1), 2),
    }


def sample_online_servers(rng: Optional[random.Random] = None, interval_seconds: int = 0) -> List[str]:
    """
    Record one synthetic sample per online server.
    This function runs synchronously and is called from async context via executor.
    """
    rng = rng or random.Random()
    sampled = []
    for server in Server.select().where(Server.status == "online"):
        latest = server_service.get_latest_metric(server.id)
        previous = latest.to_dict() if latest else None
        sample = next_sample(server, previous, rng)
        sample["uptime_seconds"] += interval_seconds
        server_service.record_metric(server.id, sample)
        sampled.append(server.id)
    logger.debug(f"metric sampler: recorded {len(sampled)} samples")
    return sampled


async def metric_sampler_loop(interval_seconds: int = 60):
    """
    Background task that periodically samples metrics for online servers.

    Args:
        interval_seconds: Seconds between sampling runs
    """
    logger.info(f"metric sampler: interval {interval_seconds}s")
    loop = asyncio.get_running_loop()

    while True:
        try:
            # Run blocking DB work in executor to avoid blocking event loop
            await loop.run_in_executor(None, sample_online_servers, None, interval_seconds)
        except Exception as e:
            logger.error(f"metric sampler: loop error: {e}")

        await asyncio.sleep(interval_seconds)
