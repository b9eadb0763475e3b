"""Pytest configuration and shared fixtures"""
import time

import pytest
from peewee import SqliteDatabase

from fleetconsole.models import (
    ALL_MODELS, database, Server, ServerMetric, FileItem, Process,
)
from fleetconsole.services.cache import query_cache
from fleetconsole.services.notifications import notifier


@pytest.fixture(autouse=True)
def clean_state():
    """Query cache and pending toasts are process-global; reset around every test"""
    query_cache.clear()
    notifier.drain()
    yield
    query_cache.clear()
    notifier.drain()


@pytest.fixture
def test_db():
    """Create an in-memory test database"""
    test_database = SqliteDatabase(':memory:', pragmas={'foreign_keys': 1})

    # Bind all models to test database
    test_database.bind(ALL_MODELS, bind_refs=False, bind_backrefs=False)
    test_database.connect()
    test_database.create_tables(ALL_MODELS)

    yield test_database

    # Cleanup
    test_database.drop_tables(ALL_MODELS)
    test_database.close()
    database.bind(ALL_MODELS, bind_refs=False, bind_backrefs=False)


@pytest.fixture
def sample_server(test_db):
    """Create a sample server for testing"""
    now = int(time.time())
    return Server.create(
        name="Web Server 01",
        hostname="web-01",
        ip_address="192.168.1.10",
        status="online",
        cpu_cores=8,
        ram_gb=16,
        storage_gb=500,
        os="Ubuntu 22.04 LTS",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def sample_servers(test_db):
    """Create multiple sample servers with staggered creation times"""
    now = int(time.time())
    servers = []
    for i, status in enumerate(["online", "online", "maintenance", "offline"]):
        servers.append(Server.create(
            name=f"server-{i:02d}",
            hostname=f"host-{i:02d}",
            ip_address=f"10.0.0.{i + 1}",
            status=status,
            ram_gb=16,
            storage_gb=1000,
            created_at=now - (i * 100),  # server-00 is the newest
            updated_at=now,
        ))
    return servers


@pytest.fixture
def sample_files(test_db, sample_server):
    """A small tree under /home/server"""
    entries = [
        ("/home/server/Documents", "Documents", "directory", 0),
        ("/home/server/Documents/report.pdf", "report.pdf", "file", 2048),
        ("/home/server/Documents/notes.txt", "notes.txt", "file", 120),
        ("/home/server/system.log", "system.log", "file", 2516582),
        ("/home/server/config.json", "config.json", "file", 1228),
        ("/home/server/Scripts", "Scripts", "directory", 0),
        ("/var/log/syslog", "syslog", "file", 4096),
    ]
    return [
        FileItem.create(server=sample_server, path=path, name=name, type=kind, size_bytes=size)
        for path, name, kind, size in entries
    ]


@pytest.fixture
def sample_processes(test_db, sample_server):
    """Process table for the sample server"""
    rows = [
        (1234, "nginx", 15.2, 45.6),
        (1235, "mysql", 8.7, 128.4),
        (1236, "node", 22.1, 87.2),
        (1238, "redis-server", 3.4, 18.7),
        (1241, "systemd", 0.8, 12.4),
    ]
    now = int(time.time())
    return [
        Process.create(server=sample_server, pid=pid, name=name, cpu_percent=cpu,
                       memory_mb=mem, status="running", recorded_at=now)
        for pid, name, cpu, mem in rows
    ]


@pytest.fixture
def sample_metrics(test_db, sample_server):
    """Eight hourly CPU samples ending now, oldest first"""
    now = int(time.time())
    samples = []
    for i, cpu in enumerate([23, 45, 32, 67, 89, 56, 34, 78]):
        samples.append(ServerMetric.create(
            server=sample_server,
            cpu_usage=float(cpu),
            memory_usage_mb=8192.0,
            memory_total_mb=16384.0,
            disk_usage_gb=456.0,
            disk_total_gb=1000.0,
            recorded_at=now - (7 - i) * 3600,
        ))
    return samples
