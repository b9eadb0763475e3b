"""Simulated process queries/mutations and process-manager view helpers."""

import time
import random
import logging
from typing import Any, Dict, List, Optional, Tuple

from ..models import Process
from .cache import query_cache
from .notifications import notifier
from .mutation import mutation

logger = logging.getLogger("fleetconsole.services")

SORT_FIELDS = {
    "pid": lambda p: p.pid,
    "name": lambda p: p.name.lower(),
    "cpu": lambda p: p.cpu_percent or 0.0,
    "memory": lambda p: p.memory_mb or 0.0,
}
SORT_DIRECTIONS = ("asc", "desc")

CPU_JITTER = 5.0      # refresh moves cpu by up to ±2.5
MEMORY_JITTER = 10.0  # and memory by up to ±5 MB


def list_processes(server_id: Optional[str] = None) -> List[Process]:
    """Processes (optionally of one server), most recently recorded first."""
    def load():
        query = Process.select().order_by(Process.recorded_at.desc(), Process.pid.asc())
        if server_id:
            query = query.where(Process.server == server_id)
        return list(query)

    return query_cache.fetch(("processes", server_id), load)


def terminate_process(process_id: str) -> Process:
    with mutation("processes", "Failed to terminate process"):
        proc = Process.get_by_id(process_id)
        proc.delete_instance()
    logger.info(f"process terminated: {proc.name} (pid {proc.pid})")
    notifier.notify(
        "Process terminated",
        f"{proc.name} (PID: {proc.pid}) has been terminated successfully",
    )
    return proc


def _jitter(value: Optional[float], spread: float, rng: random.Random) -> float:
    return round(max(0.0, (value or 0.0) + (rng.random() - 0.5) * spread), 1)


def refresh_processes(server_id: Optional[str] = None, rng: Optional[random.Random] = None) -> List[Process]:
    """Re-sample cpu/memory of every listed process with a small random drift."""
    rng = rng or random.Random()
    now = int(time.time())
    with mutation("processes", "Failed to refresh processes"):
        query = Process.select()
        if server_id:
            query = query.where(Process.server == server_id)
        with Process._meta.database.atomic():
            for proc in query:
                proc.cpu_percent = _jitter(proc.cpu_percent, CPU_JITTER, rng)
                proc.memory_mb = _jitter(proc.memory_mb, MEMORY_JITTER, rng)
                proc.recorded_at = now
                proc.save()
    notifier.notify("Process list refreshed", "All process information has been updated")
    return list_processes(server_id)


# ---- view helpers ----

def filter_processes(processes: List[Process], search: Optional[str]) -> List[Process]:
    """Match on name (case-insensitive) or pid substring."""
    if not search:
        return list(processes)
    needle = search.lower()
    return [p for p in processes if needle in p.name.lower() or search in str(p.pid)]


def sort_processes(processes: List[Process], field: str = "pid", direction: str = "asc") -> List[Process]:
    if field not in SORT_FIELDS:
        raise ValueError(f"Invalid sort field. Must be one of: {list(SORT_FIELDS)}")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Invalid sort direction. Must be one of: {list(SORT_DIRECTIONS)}")
    return sorted(processes, key=SORT_FIELDS[field], reverse=(direction == "desc"))


def toggle_sort(current_field: str, current_direction: str, field: str) -> Tuple[str, str]:
    """Clicking the active column flips direction; a new column starts ascending."""
    if field == current_field:
        return field, "desc" if current_direction == "asc" else "asc"
    return field, "asc"


def process_totals(processes: List[Process]) -> Dict[str, Any]:
    total_cpu = sum(p.cpu_percent or 0.0 for p in processes)
    total_mem = sum(p.memory_mb or 0.0 for p in processes)
    return {
        "count": len(processes),
        "cpu_percent": round(total_cpu, 1),
        "memory_gb": round(total_mem / 1024, 1),
    }
