#!/usr/bin/env python3
"""
Console Routes - Mock Terminal Sessions

Sessions live in memory (ConsoleSessionManager); every command is audited.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from ...console import ConsoleSession, ConsoleSessionManager, NoServerSelected
from ...services import servers as server_service
from ...services.notifications import notifier
from ..dependencies import AuthDependencies
from ..errors import backend_errors
from ..schemas import ConsoleConnect, ConsoleCommand
from ...core.audit import audit_logger

logger = logging.getLogger("fleetconsole.server")


def create_console_routes(auth_deps: AuthDependencies, sessions: ConsoleSessionManager) -> APIRouter:
    """Create mock terminal routes."""
    router = APIRouter(dependencies=[Depends(auth_deps.require_admin_auth)])

    def get_session(session_id: str) -> ConsoleSession:
        session = sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="console session not found")
        return session

    @router.post("/api/console/sessions", status_code=201)
    def open_session():
        session = sessions.create()
        return session.to_dict()

    @router.get("/api/console/sessions/{session_id}")
    def get_session_state(session_id: str):
        return get_session(session_id).to_dict()

    @router.post("/api/console/sessions/{session_id}/connect")
    def connect(session_id: str, body: ConsoleConnect, request: Request):
        session = get_session(session_id)
        with backend_errors("server"):
            server = server_service.get_server(body.server_id)
        session.connect(server)
        notifier.notify("Connected to server", f"Successfully connected to {server.name}")

        audit_logger.admin_action(
            action="console_connect",
            details={"session": session.id[:8]},
            request=request,
            resource_type="console",
            resource_id=server.id,
            server_id=server.id,
            user=getattr(request.state, "profile", None),
        )
        return session.to_dict()

    @router.post("/api/console/sessions/{session_id}/commands")
    async def run_command(session_id: str, body: ConsoleCommand, request: Request):
        session = get_session(session_id)
        server_id = getattr(session.server, "id", None)
        try:
            result = await session.submit(body.command)
        except NoServerSelected as e:
            notifier.notify("No server selected", str(e), variant="destructive")
            raise HTTPException(status_code=409, detail=str(e))

        if result is not None:
            audit_logger.admin_action(
                action="console_command",
                details={"command": body.command, "result_type": result.type},
                request=request,
                resource_type="console",
                resource_id=server_id,
                server_id=server_id,
                user=getattr(request.state, "profile", None),
            )
        response = session.to_dict()
        response["result"] = None if result is None else {
            "output": result.output, "type": result.type, "action": result.action,
        }
        return response

    @router.post("/api/console/sessions/{session_id}/clear")
    def clear(session_id: str):
        session = get_session(session_id)
        session.clear()
        return session.to_dict()

    @router.post("/api/console/sessions/{session_id}/disconnect")
    def disconnect(session_id: str):
        session = get_session(session_id)
        session.disconnect()
        return session.to_dict()

    @router.get("/api/console/sessions/{session_id}/history/previous")
    def history_previous(session_id: str):
        return {"command": get_session(session_id).history_previous()}

    @router.get("/api/console/sessions/{session_id}/history/next")
    def history_next(session_id: str):
        return {"command": get_session(session_id).history_next()}

    @router.delete("/api/console/sessions/{session_id}")
    def close_session(session_id: str):
        if not sessions.drop(session_id):
            raise HTTPException(status_code=404, detail="console session not found")
        return {"status": "closed"}

    return router
