#!/usr/bin/env python3
"""
Admin Routes - Stats, Health, Audit Trail, Notifications and Profile
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from ...models import db_manager, Server, AuditLog, Profile
from ...services.notifications import notifier
from ..dependencies import AuthDependencies
from ...core.audit import audit_logger

logger = logging.getLogger("fleetconsole.server")


def create_admin_routes(auth_deps: AuthDependencies) -> APIRouter:
    """Create admin-only routes."""
    router = APIRouter()

    @router.get("/api/stats", dependencies=[Depends(auth_deps.require_admin_auth)])
    def get_stats(request: Request):
        """Get server statistics (admin only)."""
        stats = db_manager.get_stats()

        audit_logger.admin_action(
            action="get_stats",
            details={"stats_requested": list(stats.keys()) if stats else []},
            request=request,
            resource_type="stats",
            user=getattr(request.state, "profile", None),
        )
        return stats

    @router.get("/health", dependencies=[Depends(auth_deps.require_admin_auth)])
    def health():
        """Health check endpoint (admin only)."""
        try:
            Server.select().limit(1).execute()
            db_ok = True
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            db_ok = False
        return {"status": "ok" if db_ok else "degraded", "db": "connected" if db_ok else "down"}

    @router.get("/api/audit-logs", dependencies=[Depends(auth_deps.require_admin_auth)])
    def list_audit_logs(limit: int = 100, resource_type: Optional[str] = None):
        limit = max(1, min(limit, 1000))
        entries = [e.to_dict() for e in AuditLog.recent(limit=limit, resource_type=resource_type)]
        return {"audit_logs": entries, "count": len(entries)}

    @router.get("/api/notifications", dependencies=[Depends(auth_deps.require_admin_auth)])
    def drain_notifications():
        """Pending toasts; reading them clears the queue."""
        return {"notifications": [n.to_dict() for n in notifier.drain()]}

    @router.get("/api/profile")
    def get_profile(profile: Profile = Depends(auth_deps.require_admin_auth)):
        return profile.to_dict()

    return router
