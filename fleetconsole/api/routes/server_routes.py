#!/usr/bin/env python3
"""
Server Routes - Inventory CRUD and Metric Samples
"""

import logging
from fastapi import APIRouter, Depends, Request

from ...models import Profile
from ...services import servers as server_service
from ..dependencies import AuthDependencies
from ..errors import backend_errors
from ..schemas import ServerCreate, ServerStatusUpdate, ServerMetricCreate
from ...core.audit import audit_logger

logger = logging.getLogger("fleetconsole.server")


def create_server_routes(auth_deps: AuthDependencies) -> APIRouter:
    """Create server inventory routes."""
    router = APIRouter()

    @router.get("/api/servers", dependencies=[Depends(auth_deps.require_admin_auth)])
    def list_servers():
        """All servers, newest first."""
        items = [s.to_dict() for s in server_service.list_servers()]
        return {"servers": items, "count": len(items)}

    @router.post("/api/servers", status_code=201)
    def create_server(
        body: ServerCreate,
        request: Request,
        profile: Profile = Depends(auth_deps.require_admin_auth),
    ):
        with backend_errors("server"):
            server = server_service.create_server({**body.model_dump(), "created_by": profile.username})

        audit_logger.admin_action(
            action="server_create",
            details={"name": server.name, "hostname": server.hostname},
            request=request,
            resource_type="server",
            resource_id=server.id,
            server_id=server.id,
            user=profile,
        )
        return server.to_dict()

    @router.get("/api/servers/{server_id}", dependencies=[Depends(auth_deps.require_admin_auth)])
    def get_server(server_id: str):
        with backend_errors("server"):
            server = server_service.get_server(server_id)
        return server.to_dict()

    @router.patch("/api/servers/{server_id}/status")
    def update_server_status(
        server_id: str,
        body: ServerStatusUpdate,
        request: Request,
        profile: Profile = Depends(auth_deps.require_admin_auth),
    ):
        with backend_errors("server"):
            server = server_service.update_server_status(server_id, body.status)

        audit_logger.admin_action(
            action="server_status_update",
            details={"status": body.status},
            request=request,
            resource_type="server",
            resource_id=server_id,
            server_id=server_id,
            user=profile,
        )
        return server.to_dict()

    @router.delete("/api/servers/{server_id}")
    def delete_server(
        server_id: str,
        request: Request,
        profile: Profile = Depends(auth_deps.require_admin_auth),
    ):
        with backend_errors("server"):
            server = server_service.delete_server(server_id)

        # Row is gone, so the audit entry only keeps the id
        audit_logger.admin_action(
            action="server_delete",
            details={"name": server.name},
            request=request,
            resource_type="server",
            resource_id=server_id,
            user=profile,
        )
        return {"status": "deleted", "id": server_id}

    @router.get("/api/servers/{server_id}/metrics", dependencies=[Depends(auth_deps.require_admin_auth)])
    def get_latest_metric(server_id: str):
        """Latest metric sample; `metric` is null when the server has none."""
        with backend_errors("server"):
            server_service.get_server(server_id)
            metric = server_service.get_latest_metric(server_id)
        return {"server_id": server_id, "metric": metric.to_dict() if metric else None}

    @router.post("/api/servers/{server_id}/metrics", status_code=201, dependencies=[Depends(auth_deps.require_admin_auth)])
    def record_metric(server_id: str, body: ServerMetricCreate):
        with backend_errors("server"):
            server_service.get_server(server_id)
            metric = server_service.record_metric(server_id, body.model_dump(exclude_none=True))
        return metric.to_dict()

    return router
