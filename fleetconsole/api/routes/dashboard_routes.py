#!/usr/bin/env python3
"""
Dashboard Routes - Web UI and Template Rendering
"""

import time
import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Request
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse, RedirectResponse

from ...console import ConsoleSessionManager
from ...dashboard import DashboardController
from ..dependencies import AuthDependencies
from ...web.template_helpers import setup_template_filters
from ...core.audit import audit_logger

logger = logging.getLogger("fleetconsole.server")

UI_DIR = Path(__file__).resolve().parents[2] / "ui"
CONSOLE_COOKIE = "console_session"

NAV_ITEMS = [
    {"title": "Dashboard", "url": "/dashboard"},
    {"title": "File Manager", "url": "/files"},
    {"title": "Process Manager", "url": "/processes"},
    {"title": "Console", "url": "/console"},
]


def create_templates() -> Jinja2Templates:
    templates = Jinja2Templates(directory=[str(UI_DIR / "pages"), str(UI_DIR / "components"), str(UI_DIR)])
    setup_template_filters(templates)
    templates.env.globals["nav_items"] = NAV_ITEMS
    return templates


def create_dashboard_routes(auth_deps: AuthDependencies, sessions: ConsoleSessionManager) -> APIRouter:
    """Create dashboard and web UI routes."""
    router = APIRouter()

    dashboard_controller = DashboardController()
    templates = create_templates()

    def render(request: Request, template: str, data: dict):
        if "notifications" not in data:
            data["notifications"] = dashboard_controller.pending_notifications()
        data["profile"] = getattr(request.state, "profile", None)
        data["current_path"] = request.url.path
        return templates.TemplateResponse(request, template, data)

    @router.get("/", dependencies=[Depends(auth_deps.require_admin_auth)])
    def login_entry():
        """Authentication entry point: the Basic Auth prompt, then the dashboard."""
        return RedirectResponse(url="/dashboard", status_code=303)

    @router.get("/logout")
    def logout():
        """Answer 401 so the browser drops the cached Basic credentials."""
        raise auth_deps.challenge("Logged out")

    @router.get("/dashboard", response_class=HTMLResponse, dependencies=[Depends(auth_deps.require_admin_auth)])
    def dashboard_main(request: Request):
        """Main dashboard page - server status overview and resource cards."""
        logger.debug("Rendering main dashboard")

        audit_logger.admin_action(
            action="dashboard_access",
            details={"page": "main"},
            request=request,
            user=request.state.profile,
        )
        return render(request, "dashboard.html", dashboard_controller.get_main_dashboard_data())

    @router.get("/dashboard/refresh/servers", response_class=HTMLResponse, dependencies=[Depends(auth_deps.require_admin_auth)])
    def dashboard_refresh_servers(request: Request):
        """Refresh server status table via htmx."""
        try:
            servers = dashboard_controller.get_server_status_data()
            return render(request, "servers_table.html", {"servers": servers, "timestamp": int(time.time()), "notifications": []})
        except Exception as e:
            logger.error(f"Server refresh error: {e}")
            return render(request, "servers_table.html", {
                "servers": [], "error": str(e), "timestamp": int(time.time()), "notifications": [],
            })

    @router.get("/files", response_class=HTMLResponse, dependencies=[Depends(auth_deps.require_admin_auth)])
    def file_manager(
        request: Request,
        server_id: Optional[str] = None,
        path: Optional[str] = None,
        search: Optional[str] = None,
    ):
        try:
            data = dashboard_controller.get_file_manager_data(server_id, path, search)
        except Exception as e:
            logger.error(f"File manager error: {e}")
            data = {"page_title": "File Manager - Error", "error": str(e), "files": [], "servers": [],
                    "breadcrumbs": [], "search": search or "", "path": path, "server_id": server_id}
        return render(request, "files.html", data)

    @router.get("/processes", response_class=HTMLResponse, dependencies=[Depends(auth_deps.require_admin_auth)])
    def process_manager(
        request: Request,
        server_id: Optional[str] = None,
        search: Optional[str] = None,
        sort: str = "pid",
        direction: str = "asc",
    ):
        try:
            data = dashboard_controller.get_process_manager_data(server_id, search, sort, direction)
        except Exception as e:
            logger.error(f"Process manager error: {e}")
            data = {"page_title": "Process Manager - Error", "error": str(e), "processes": [], "servers": [],
                    "totals": {"count": 0, "cpu_percent": 0.0, "memory_gb": 0.0},
                    "search": search or "", "sort": "pid", "direction": "asc", "server_id": server_id}
        return render(request, "processes.html", data)

    @router.get("/console", response_class=HTMLResponse, dependencies=[Depends(auth_deps.require_admin_auth)])
    def console_page(request: Request, console_session: Optional[str] = Cookie(None)):
        session = sessions.get_or_create(console_session)
        response = render(request, "console.html", dashboard_controller.get_console_data(session))
        response.set_cookie(CONSOLE_COOKIE, session.id, httponly=True, samesite="strict")
        return response

    return router
