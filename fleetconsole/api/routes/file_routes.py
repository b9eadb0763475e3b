#!/usr/bin/env python3
"""
File Routes - Simulated Filesystem Browsing
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from ...models import Profile
from ...services import servers as server_service
from ...services import files as file_service
from ..dependencies import AuthDependencies
from ..errors import backend_errors
from ..schemas import FileCreate
from ...core.audit import audit_logger

logger = logging.getLogger("fleetconsole.server")


def create_file_routes(auth_deps: AuthDependencies) -> APIRouter:
    """Create file manager routes."""
    router = APIRouter()

    @router.get("/api/servers/{server_id}/files", dependencies=[Depends(auth_deps.require_admin_auth)])
    def list_files(server_id: str, path: Optional[str] = None, search: Optional[str] = None):
        """Files under `path` (prefix match), directories first, optionally filtered by name."""
        with backend_errors("server"):
            server_service.get_server(server_id)
            files = file_service.filter_files(file_service.list_files(server_id, path), search)
        return {"files": [f.to_dict() for f in files], "count": len(files)}

    @router.post("/api/servers/{server_id}/files", status_code=201)
    def create_file(
        server_id: str,
        body: FileCreate,
        request: Request,
        profile: Profile = Depends(auth_deps.require_admin_auth),
    ):
        data = body.model_dump()
        with backend_errors("server"):
            server_service.get_server(server_id)
            item = file_service.create_file({**data, "server": server_id})

        audit_logger.admin_action(
            action="file_create",
            details={"path": item.path, "type": item.type},
            request=request,
            resource_type="file",
            resource_id=item.id,
            server_id=server_id,
            user=profile,
        )
        return item.to_dict()

    @router.delete("/api/files/{file_id}")
    def delete_file(
        file_id: str,
        request: Request,
        profile: Profile = Depends(auth_deps.require_admin_auth),
    ):
        with backend_errors("file"):
            item = file_service.delete_file(file_id)

        audit_logger.admin_action(
            action="file_delete",
            details={"path": item.path},
            request=request,
            resource_type="file",
            resource_id=file_id,
            server_id=item.server_id,
            user=profile,
        )
        return {"status": "deleted", "id": file_id}

    return router
