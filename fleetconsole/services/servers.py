"""Server inventory and metric queries/mutations."""

import time
import logging
from typing import Any, Dict, List, Optional

from ..models import Server, ServerMetric
from .cache import query_cache
from .notifications import notifier
from .mutation import mutation

logger = logging.getLogger("fleetconsole.services")


def list_servers() -> List[Server]:
    """All servers, newest first."""
    return query_cache.fetch(
        ("servers",),
        lambda: list(Server.select().order_by(Server.created_at.desc(), Server.name.asc())),
    )


def get_server(server_id: str) -> Server:
    """Raises Server.DoesNotExist for unknown ids."""
    return Server.get_by_id(server_id)


def get_latest_metric(server_id: Optional[str]) -> Optional[ServerMetric]:
    """Newest metric sample for a server; None when there is none yet."""
    if not server_id:
        return None
    return query_cache.fetch(
        ("server-metrics", server_id),
        lambda: ServerMetric.latest_for(server_id),
    )


def create_server(data: Dict[str, Any]) -> Server:
    with mutation("servers", "Failed to add server"):
        server = Server.create(**data)
    logger.info(f"server added: {server.name} ({server.hostname})")
    notifier.notify("Server added", "New server has been added successfully.")
    return server


def update_server_status(server_id: str, status: str) -> Server:
    with mutation("servers", "Failed to update server"):
        server = Server.get_by_id(server_id)
        server.status = status
        server.touch()
        server.save()
    logger.info(f"server {server.name} status -> {status}")
    notifier.notify("Server status updated", "Server status has been updated successfully.")
    return server


def delete_server(server_id: str) -> Server:
    with mutation("servers", "Failed to remove server"):
        server = Server.get_by_id(server_id)
        server.delete_instance()
    # Cascaded rows are gone too
    for bucket in ("server-metrics", "files", "processes"):
        query_cache.invalidate(bucket)
    logger.info(f"server removed: {server.name}")
    notifier.notify("Server removed", "Server has been removed successfully.")
    return server


def record_metric(server_id: str, sample: Dict[str, Any]) -> ServerMetric:
    """Store one metric sample. Used by the sampler and the metrics API."""
    sample = dict(sample)
    with mutation("server-metrics", "Failed to record metrics"):
        metric = ServerMetric.create(
            server=server_id,
            recorded_at=sample.pop("recorded_at", None) or int(time.time()),
            **sample
        )
    return metric


def metric_history(server_ids: Optional[List[str]] = None, since: Optional[int] = None) -> List[Dict[str, Any]]:
    """Raw metric rows as dicts, oldest first."""
    query = ServerMetric.select()
    if server_ids:
        query = query.where(ServerMetric.server.in_(server_ids))
    if since:
        query = query.where(ServerMetric.recorded_at >= since)
    return list(query.order_by(ServerMetric.recorded_at.asc()).dicts())
