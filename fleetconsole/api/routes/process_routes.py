#!/usr/bin/env python3
"""
Process Routes - Listing, Refresh and Termination
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from ...models import Profile
from ...services import processes as process_service
from ..dependencies import AuthDependencies
from ..errors import backend_errors
from ...core.audit import audit_logger

logger = logging.getLogger("fleetconsole.server")


def create_process_routes(auth_deps: AuthDependencies) -> APIRouter:
    """Create process manager routes."""
    router = APIRouter()

    @router.get("/api/processes", dependencies=[Depends(auth_deps.require_admin_auth)])
    def list_processes(
        server_id: Optional[str] = None,
        search: Optional[str] = None,
        sort: str = "pid",
        direction: str = "asc",
    ):
        processes = process_service.list_processes(server_id)
        try:
            visible = process_service.sort_processes(
                process_service.filter_processes(processes, search), sort, direction
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {
            "processes": [p.to_dict() for p in visible],
            "count": len(visible),
            "totals": process_service.process_totals(processes),
        }

    @router.delete("/api/processes/{process_id}")
    def terminate_process(
        process_id: str,
        request: Request,
        profile: Profile = Depends(auth_deps.require_admin_auth),
    ):
        with backend_errors("process"):
            proc = process_service.terminate_process(process_id)

        audit_logger.admin_action(
            action="process_terminate",
            details={"pid": proc.pid, "name": proc.name},
            request=request,
            resource_type="process",
            resource_id=process_id,
            server_id=proc.server_id,
            user=profile,
        )
        return {"status": "terminated", "id": process_id, "pid": proc.pid, "name": proc.name}

    @router.post("/api/processes/refresh")
    def refresh_processes(
        request: Request,
        server_id: Optional[str] = None,
        profile: Profile = Depends(auth_deps.require_admin_auth),
    ):
        with backend_errors("process"):
            processes = process_service.refresh_processes(server_id)

        audit_logger.admin_action(
            action="process_refresh",
            details={"count": len(processes)},
            request=request,
            resource_type="process",
            server_id=server_id,
            user=profile,
        )
        return {"processes": [p.to_dict() for p in processes], "count": len(processes)}

    return router
