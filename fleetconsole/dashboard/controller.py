"""
Dashboard Controller

Prepares the data for every page (dashboard, file manager, process manager,
console). All methods return plain Python structures so the templates stay
dumb and the logic stays testable.
"""

import time
import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from ..services import servers as server_service
from ..services import files as file_service
from ..services import processes as process_service
from ..services.notifications import notifier
from ..web.template_helpers import format_bytes
from .config import (
    get_metric_status, server_status_badge, process_status_badge,
    ACTIVITY_WINDOW_HOURS, DEFAULT_RAM_TOTAL_GB, DEFAULT_DISK_TOTAL_GB,
)

logger = logging.getLogger("fleetconsole.dashboard")


class DashboardController:
    """Page data preparation for the admin dashboard."""

    def __init__(self, clock=time.time):
        self.clock = clock

    # ---- dashboard ----

    def get_main_dashboard_data(self) -> Dict[str, Any]:
        """
        Get complete dashboard data structure.

        Sections: server status overview, CPU / RAM / disk cards and the
        system activity chart (hourly mean CPU across servers).
        """
        logger.debug("Generating main dashboard data")

        try:
            servers = self.get_server_status_data()
            latest = [s["latest_metric"] for s in servers if s["latest_metric"]]
            activity = self.get_activity_series()
            return {
                "page_title": "Dashboard",
                "timestamp": int(self.clock()),
                "servers": servers,
                "total_servers": len(servers),
                "status_counts": self._status_counts(servers),
                "cpu_card": self._cpu_card(latest, activity),
                "ram_card": self._ram_card(latest),
                "disk_card": self._disk_card(latest),
                "activity": activity,
            }
        except Exception as e:
            logger.error(f"Error generating dashboard data: {e}", exc_info=True)
            return {
                "page_title": "Dashboard - Error",
                "timestamp": int(self.clock()),
                "error": str(e),
                "servers": [],
                "status_counts": {},
                "activity": [],
            }

    def get_server_status_data(self) -> List[Dict[str, Any]]:
        """Server rows for the status overview table."""
        rows = []
        for server in server_service.list_servers():
            metric = server_service.get_latest_metric(server.id)
            row = server.to_dict()
            row["badge"] = server_status_badge(server.status)
            row["latest_metric"] = metric.to_dict() if metric else None
            row["cpu_status"] = get_metric_status("cpu_usage", metric.cpu_usage) if metric else "no_data"
            rows.append(row)
        return rows

    @staticmethod
    def _status_counts(servers: List[Dict[str, Any]]) -> Dict[str, int]:
        counts = {"online": 0, "offline": 0, "maintenance": 0, "error": 0}
        for s in servers:
            counts[s["status"]] = counts.get(s["status"], 0) + 1
        return counts

    def get_activity_series(self, hours: int = ACTIVITY_WINDOW_HOURS) -> List[Dict[str, Any]]:
        """Hourly mean CPU usage across all servers for the last `hours` hours."""
        since = int(self.clock()) - hours * 3600
        rows = server_service.metric_history(since=since)
        df = pd.DataFrame(rows)
        if df.empty or "cpu_usage" not in df:
            return []

        df = df.dropna(subset=["cpu_usage"])
        if df.empty:
            return []
        df["hour"] = pd.to_datetime(df["recorded_at"], unit="s").dt.floor("h")
        hourly = df.groupby("hour")["cpu_usage"].mean().reset_index()
        return [
            {"time": ts.strftime("%H:%M"), "usage": round(float(usage), 1)}
            for ts, usage in zip(hourly["hour"], hourly["cpu_usage"])
        ]

    @staticmethod
    def _cpu_card(latest: List[Dict[str, Any]], activity: List[Dict[str, Any]]) -> Dict[str, Any]:
        values = [m["cpu_usage"] for m in latest if m.get("cpu_usage") is not None]
        usage = round(sum(values) / len(values), 1) if values else None
        change = None
        if len(activity) >= 2:
            change = round(activity[-1]["usage"] - activity[-2]["usage"], 1)
        return {
            "usage": usage,
            "status": get_metric_status("cpu_usage", usage),
            "change_from_last_hour": change,
            "series": activity,
        }

    @staticmethod
    def _ram_card(latest: List[Dict[str, Any]]) -> Dict[str, Any]:
        used = sum(m["memory_usage_mb"] or 0 for m in latest)
        total = sum(m["memory_total_mb"] or 0 for m in latest)
        if not total:
            total = DEFAULT_RAM_TOTAL_GB * 1024
        percent = round(used / total * 100, 1)
        return {
            "used_gb": round(used / 1024, 1),
            "total_gb": round(total / 1024, 1),
            "percent": percent,
            "status": get_metric_status("memory_usage_percent", percent),
        }

    @staticmethod
    def _disk_card(latest: List[Dict[str, Any]]) -> Dict[str, Any]:
        used = sum(m["disk_usage_gb"] or 0 for m in latest)
        total = sum(m["disk_total_gb"] or 0 for m in latest) or DEFAULT_DISK_TOTAL_GB
        percent = round(used / total * 100, 1)
        return {
            "used_gb": round(used, 1),
            "free_gb": round(max(total - used, 0), 1),
            "total_gb": round(total, 1),
            "percent": percent,
            "status": get_metric_status("disk_usage_percent", percent),
        }

    # ---- file manager ----

    def get_file_manager_data(self, server_id: Optional[str], path: Optional[str], search: Optional[str]) -> Dict[str, Any]:
        servers = server_service.list_servers()
        if not server_id and servers:
            server_id = servers[0].id
        current = file_service.normalize_path(path)

        entries = file_service.filter_files(file_service.list_directory(server_id, current), search)
        rows = []
        for item in entries:
            row = item.to_dict()
            row["size_human"] = "-" if item.type == "directory" else format_bytes(item.size_bytes)
            row["items"] = file_service.count_children(server_id, item.path) if item.type == "directory" else None
            rows.append(row)

        return {
            "page_title": "File Manager",
            "timestamp": int(self.clock()),
            "servers": [s.to_dict() for s in servers],
            "server_id": server_id,
            "path": current,
            "breadcrumbs": file_service.breadcrumbs(current),
            "search": search or "",
            "files": rows,
        }

    # ---- process manager ----

    def get_process_manager_data(
        self,
        server_id: Optional[str] = None,
        search: Optional[str] = None,
        sort: str = "pid",
        direction: str = "asc",
    ) -> Dict[str, Any]:
        processes = process_service.list_processes(server_id)
        visible = process_service.sort_processes(
            process_service.filter_processes(processes, search), sort, direction
        )
        rows = []
        for proc in visible:
            row = proc.to_dict()
            row["badge"] = process_status_badge(proc.status)
            rows.append(row)
        return {
            "page_title": "Process Manager",
            "timestamp": int(self.clock()),
            "servers": [s.to_dict() for s in server_service.list_servers()],
            "server_id": server_id,
            "search": search or "",
            "sort": sort,
            "direction": direction,
            "totals": process_service.process_totals(processes),
            "processes": rows,
        }

    # ---- console ----

    def get_console_data(self, session) -> Dict[str, Any]:
        return {
            "page_title": "Console",
            "timestamp": int(self.clock()),
            "servers": [s.to_dict() for s in server_service.list_servers()],
            "session": session.to_dict(),
            "commands": session.terminal.commands(),
        }

    @staticmethod
    def pending_notifications() -> List[Dict[str, Any]]:
        return [n.to_dict() for n in notifier.drain()]
