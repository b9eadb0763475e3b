#!/usr/bin/env python3
"""
fleetconsole Database Models - Peewee with UUID primary keys

Paradigm: Server inventory ↔ per-server resources
- Canonical identity: <model>.id (UUID string, generated on insert)
- Scoped rows: ServerMetric, FileItem, Process belong to one Server (CASCADE)
- Users: Profile (one per admin username), AuditLog (activity trail)

Notes:
- SQLite FK enforcement is turned ON at connect(), so deleting a server drops its rows.
- Enum-like columns (status, type) carry CHECK constraints; request validation
  happens in api/schemas.py.
"""

import time
import uuid
import logging
from pathlib import Path
from typing import List, Optional, Dict, Any

import peewee
from peewee import (
    Model, SqliteDatabase, CharField, IntegerField, FloatField, TextField,
    ForeignKeyField, Check
)
from playhouse.sqlite_ext import JSONField

logger = logging.getLogger("fleetconsole.models")

SERVER_STATUSES = ("online", "offline", "maintenance", "error")
PROCESS_STATUSES = ("running", "stopped", "sleeping", "zombie")
FILE_TYPES = ("file", "directory")

# Global DB handle (initialized in DatabaseManager.connect)
database = SqliteDatabase(None)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> int:
    return int(time.time())


def _in_check(column: str, values) -> Check:
    quoted = ", ".join(f"'{v}'" for v in values)
    return Check(f"{column} IN ({quoted})")


class BaseModel(Model):
    id = CharField(primary_key=True, default=_new_id)

    class Meta:
        database = database
        legacy_table_names = False


class Server(BaseModel):
    """Managed server inventory row."""
    name = CharField()
    hostname = CharField()
    ip_address = CharField()
    port = IntegerField(default=22)
    description = TextField(null=True)
    status = CharField(default="offline", constraints=[_in_check("status", SERVER_STATUSES)])

    # Capacity
    cpu_cores = IntegerField(null=True)
    ram_gb = IntegerField(null=True)
    storage_gb = IntegerField(null=True)
    os = CharField(null=True)

    created_by = CharField(null=True)
    created_at = IntegerField(default=_now)
    updated_at = IntegerField(default=_now)

    class Meta:
        table_name = "servers"
        indexes = (
            (("created_at",), False),
        )

    def touch(self) -> None:
        self.updated_at = _now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "hostname": self.hostname,
            "ip_address": self.ip_address,
            "port": self.port,
            "description": self.description,
            "status": self.status,
            "cpu_cores": self.cpu_cores,
            "ram_gb": self.ram_gb,
            "storage_gb": self.storage_gb,
            "os": self.os,
            "created_by": self.created_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class ServerMetric(BaseModel):
    """Point-in-time resource usage sample for one server."""
    server = ForeignKeyField(Server, backref="metrics", on_delete="CASCADE", index=True)
    cpu_usage = FloatField(null=True)        # percent
    memory_usage_mb = FloatField(null=True)
    memory_total_mb = FloatField(null=True)
    disk_usage_gb = FloatField(null=True)
    disk_total_gb = FloatField(null=True)
    network_in_mb = FloatField(null=True)
    network_out_mb = FloatField(null=True)
    uptime_seconds = IntegerField(null=True)
    load_average = FloatField(null=True)
    recorded_at = IntegerField(default=_now)

    class Meta:
        table_name = "server_metrics"
        indexes = (
            (("server", "recorded_at"), False),
            (("recorded_at",), False),  # For cleanup queries
        )

    @classmethod
    def latest_for(cls, server_id: str) -> Optional["ServerMetric"]:
        return (cls.select()
                .where(cls.server == server_id)
                .order_by(cls.recorded_at.desc())
                .first())

    @classmethod
    def cleanup_old_data(cls, days_to_keep: int = 7) -> int:
        cutoff = _now() - days_to_keep * 24 * 3600
        deleted = cls.delete().where(cls.recorded_at < cutoff).execute()
        logger.info(f"metrics cleanup: removed {deleted} rows (< {days_to_keep}d)")
        return deleted

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "server_id": self.server_id,
            "cpu_usage": self.cpu_usage,
            "memory_usage_mb": self.memory_usage_mb,
            "memory_total_mb": self.memory_total_mb,
            "disk_usage_gb": self.disk_usage_gb,
            "disk_total_gb": self.disk_total_gb,
            "network_in_mb": self.network_in_mb,
            "network_out_mb": self.network_out_mb,
            "uptime_seconds": self.uptime_seconds,
            "load_average": self.load_average,
            "recorded_at": self.recorded_at,
        }


class FileItem(BaseModel):
    """Simulated filesystem entry scoped to a server."""
    server = ForeignKeyField(Server, backref="files", on_delete="CASCADE", index=True)
    path = CharField()          # full path of the entry, e.g. /home/server/config.json
    name = CharField()
    type = CharField(default="file", constraints=[_in_check("type", FILE_TYPES)])
    size_bytes = IntegerField(null=True)
    permissions = CharField(null=True)
    owner = CharField(null=True)
    group_name = CharField(null=True)
    modified_at = IntegerField(null=True)
    created_at = IntegerField(default=_now)

    class Meta:
        table_name = "files"
        indexes = (
            (("server", "path"), False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "server_id": self.server_id,
            "path": self.path,
            "name": self.name,
            "type": self.type,
            "size_bytes": self.size_bytes,
            "permissions": self.permissions,
            "owner": self.owner,
            "group_name": self.group_name,
            "modified_at": self.modified_at,
            "created_at": self.created_at,
        }


class Process(BaseModel):
    """Simulated process snapshot scoped to a server."""
    server = ForeignKeyField(Server, backref="processes", on_delete="CASCADE", index=True)
    pid = IntegerField()
    name = CharField()
    command = TextField(null=True)
    cpu_percent = FloatField(null=True)
    memory_mb = FloatField(null=True)
    status = CharField(default="running", constraints=[_in_check("status", PROCESS_STATUSES)])
    started_at = IntegerField(null=True)
    recorded_at = IntegerField(default=_now)

    class Meta:
        table_name = "processes"
        indexes = (
            (("server", "pid"), False),
            (("recorded_at",), False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "server_id": self.server_id,
            "pid": self.pid,
            "name": self.name,
            "command": self.command,
            "cpu_percent": self.cpu_percent,
            "memory_mb": self.memory_mb,
            "status": self.status,
            "started_at": self.started_at,
            "recorded_at": self.recorded_at,
        }


class Profile(BaseModel):
    """Admin user profile, created on first successful login."""
    username = CharField(unique=True)
    full_name = CharField(null=True)
    role = CharField(default="admin")
    created_at = IntegerField(default=_now)
    updated_at = IntegerField(default=_now)

    class Meta:
        table_name = "profiles"

    @classmethod
    def get_by_username(cls, username: str) -> Optional["Profile"]:
        try:
            return cls.get(cls.username == username)
        except cls.DoesNotExist:
            return None

    @classmethod
    def ensure(cls, username: str) -> "Profile":
        """Return the profile for `username`, creating it on first login."""
        try:
            profile, created = cls.get_or_create(username=username)
        except peewee.IntegrityError:
            # Another request won the insert for the same first login
            return cls.get(cls.username == username)
        if created:
            logger.info(f"profile created for {username}")
        return profile

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "role": self.role,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class AuditLog(BaseModel):
    """Persisted activity trail for admin actions."""
    user = ForeignKeyField(Profile, backref="audit_logs", null=True, on_delete="SET NULL")
    server = ForeignKeyField(Server, backref="audit_logs", null=True, on_delete="SET NULL")
    action = CharField()
    resource_type = CharField()
    resource_id = CharField(null=True)
    details = JSONField(null=True)
    ip_address = CharField(null=True)
    user_agent = CharField(null=True)
    created_at = IntegerField(default=_now)

    class Meta:
        table_name = "audit_logs"
        indexes = (
            (("created_at",), False),
            (("resource_type", "resource_id"), False),
        )

    @classmethod
    def cleanup_old_logs(cls, days_to_keep: int = 30) -> int:
        cutoff = _now() - days_to_keep * 24 * 3600
        deleted = cls.delete().where(cls.created_at < cutoff).execute()
        logger.info(f"audit cleanup: removed {deleted} entries (< {days_to_keep}d)")
        return deleted

    @classmethod
    def recent(cls, limit: int = 100, resource_type: Optional[str] = None) -> List["AuditLog"]:
        query = cls.select()
        if resource_type:
            query = query.where(cls.resource_type == resource_type)
        return list(query.order_by(cls.created_at.desc()).limit(limit))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "server_id": self.server_id,
            "action": self.action,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "details": self.details,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": self.created_at,
        }


ALL_MODELS = [Server, ServerMetric, FileItem, Process, Profile, AuditLog]


class DatabaseManager:
    """DB lifecycle + minimal convenience ops."""

    def __init__(self, db_path: str = "/var/lib/fleetconsole/fleetconsole.db") -> None:
        self.db_path = Path(db_path)
        self.connected = False

    def connect(self) -> bool:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # SQLite pragmas for reliability/perf, applied to every (per-thread) connection
            database.init(str(self.db_path), pragmas={
                "foreign_keys": 1,
                "journal_mode": "wal",
                "synchronous": "normal",
                "temp_store": "memory",
            })
            database.connect(reuse_if_open=True)

            database.create_tables(ALL_MODELS, safe=True)
            self.connected = True
            logger.info(f"database initialized: {self.db_path}")
            return True
        except Exception as e:
            logger.error(f"database init failed: {e}")
            return False

    def close(self) -> None:
        if self.connected:
            database.close()
            self.connected = False
            logger.info("database connection closed")

    def get_stats(self) -> Dict[str, Any]:
        try:
            return {
                "servers_total": Server.select().count(),
                "servers_online": Server.select().where(Server.status == "online").count(),
                "server_metrics": ServerMetric.select().count(),
                "files": FileItem.select().count(),
                "processes": Process.select().count(),
                "profiles": Profile.select().count(),
                "audit_logs": AuditLog.select().count(),
                "database_size_mb": round(self.db_path.stat().st_size / 1024 / 1024, 2)
                if self.db_path.exists() else 0,
            }
        except peewee.PeeweeException as e:
            logger.error(f"get_stats failed: {e}")
            return {}

    @staticmethod
    def cleanup_old_data(metrics_days: int, audit_days: int) -> Dict[str, int]:
        return {
            "server_metrics": ServerMetric.cleanup_old_data(metrics_days),
            "audit_logs": AuditLog.cleanup_old_logs(audit_days),
        }


# Global manager accessor
db_manager = DatabaseManager()


def get_db() -> DatabaseManager:
    return db_manager
