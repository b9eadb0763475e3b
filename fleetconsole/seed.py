"""
Demo inventory for a fresh database.

Four servers, a small home directory, a process table and the last eight
hours of CPU samples, so every page has something to show.
"""

import logging
import time
from calendar import timegm
from typing import Dict, Optional

from .models import Server, ServerMetric, FileItem, Process
from .services.cache import query_cache
from .services.files import DEFAULT_PATH

logger = logging.getLogger("fleetconsole.models")

DEMO_SERVERS = [
    {"name": "Web Server 01", "hostname": "web-01", "ip_address": "192.168.1.10", "status": "online",
     "cpu_cores": 8, "ram_gb": 16, "storage_gb": 1000, "os": "Ubuntu 22.04 LTS",
     "description": "Primary nginx frontend"},
    {"name": "Database Server", "hostname": "db-01", "ip_address": "192.168.1.20", "status": "online",
     "cpu_cores": 16, "ram_gb": 64, "storage_gb": 2000, "os": "Ubuntu 22.04 LTS",
     "description": "MySQL and PostgreSQL primaries"},
    {"name": "Cache Server", "hostname": "cache-01", "ip_address": "192.168.1.30", "status": "maintenance",
     "cpu_cores": 4, "ram_gb": 32, "storage_gb": 250, "os": "Debian 12"},
    {"name": "Backup Server", "hostname": "backup-01", "ip_address": "192.168.1.40", "status": "offline",
     "cpu_cores": 4, "ram_gb": 8, "storage_gb": 8000, "os": "Rocky Linux 9"},
]

# (name, type, size in bytes, modified date)
DEMO_FILES = [
    ("Documents", "directory", 0, "2024-01-15"),
    ("Applications", "directory", 0, "2024-01-14"),
    ("system.log", "file", int(2.4 * 1024 ** 2), "2024-01-16"),
    ("config.json", "file", int(1.2 * 1024), "2024-01-16"),
    ("backup.tar.gz", "file", 256 * 1024 ** 2, "2024-01-15"),
    ("database.sql", "file", int(45.6 * 1024 ** 2), "2024-01-14"),
    ("Scripts", "directory", 0, "2024-01-13"),
    ("nginx.conf", "file", int(3.2 * 1024), "2024-01-16"),
]

# (pid, name, command, cpu %, memory MB)
DEMO_PROCESSES = [
    (1234, "nginx", "nginx: master process /usr/sbin/nginx", 15.2, 45.6),
    (1235, "mysql", "/usr/sbin/mysqld", 8.7, 128.4),
    (1236, "node", "node /opt/app/server.js", 22.1, 87.2),
    (1237, "apache2", "/usr/sbin/apache2 -k start", 5.3, 32.1),
    (1238, "redis-server", "/usr/bin/redis-server 127.0.0.1:6379", 3.4, 18.7),
    (1239, "postgres", "/usr/lib/postgresql/15/bin/postgres", 12.8, 156.3),
    (1240, "docker", "/usr/bin/dockerd -H fd://", 6.9, 67.8),
    (1241, "systemd", "/sbin/init", 0.8, 12.4),
    (1242, "ssh", "sshd: /usr/sbin/sshd -D", 0.2, 4.2),
    (1243, "fail2ban", "/usr/bin/python3 /usr/bin/fail2ban-server -xf start", 1.1, 8.9),
]

DEMO_CPU_SAMPLES = [23, 45, 32, 67, 89, 56, 34, 78]


def _date_ts(day: str) -> int:
    return timegm(time.strptime(day, "%Y-%m-%d"))


def seed_demo_data(now: Optional[int] = None) -> Dict[str, int]:
    """
    Insert the demo inventory. Does nothing when servers already exist.

    Returns the number of rows inserted per table.
    """
    counts = {"servers": 0, "files": 0, "processes": 0, "server_metrics": 0}
    if Server.select().exists():
        logger.info("demo seed skipped: servers already present")
        return counts

    now = now or int(time.time())
    with Server._meta.database.atomic():
        # staggered so the listing (newest first) keeps the order above
        servers = [
            Server.create(created_by="seed", created_at=now - i, updated_at=now, **data)
            for i, data in enumerate(DEMO_SERVERS)
        ]
        counts["servers"] = len(servers)
        primary = servers[0]

        for name, kind, size, day in DEMO_FILES:
            FileItem.create(
                server=primary, path=f"{DEFAULT_PATH}/{name}", name=name, type=kind,
                size_bytes=size, permissions="drwxr-xr-x" if kind == "directory" else "-rw-r--r--",
                owner="root", group_name="root", modified_at=_date_ts(day),
            )
            counts["files"] += 1

        for pid, name, command, cpu, memory in DEMO_PROCESSES:
            Process.create(
                server=primary, pid=pid, name=name, command=command,
                cpu_percent=cpu, memory_mb=memory, status="running",
                started_at=now - 86400, recorded_at=now,
            )
            counts["processes"] += 1

        # hourly samples ending at the current hour
        for i, cpu in enumerate(DEMO_CPU_SAMPLES):
            hours_ago = len(DEMO_CPU_SAMPLES) - 1 - i
            ServerMetric.create(
                server=primary, cpu_usage=float(cpu),
                memory_usage_mb=8.2 * 1024, memory_total_mb=16 * 1024.0,
                disk_usage_gb=456.0, disk_total_gb=1000.0,
                uptime_seconds=86400 - hours_ago * 3600, load_average=round(cpu / 100 * 8, 2),
                recorded_at=now - hours_ago * 3600,
            )
            counts["server_metrics"] += 1

    query_cache.clear()
    logger.info(f"demo seed inserted: {counts}")
    return counts
