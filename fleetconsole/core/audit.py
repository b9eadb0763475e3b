#!/usr/bin/env python3
"""
fleetconsole Security Audit Logger

Provides structured logging for authentication attempts and admin actions.
Admin actions are additionally persisted as AuditLog rows.
"""

import json
import logging
import time
from typing import Dict, Any, Optional

import peewee
from fastapi import Request

from ..models import AuditLog, Profile

logger = logging.getLogger("fleetconsole.server")


class AuditLogger:
    """Centralized audit logging for security events."""

    def __init__(self):
        self.logger = logging.getLogger("fleetconsole.audit")

    @staticmethod
    def _request_context(request: Optional[Request]) -> Dict[str, Any]:
        if request is None:
            return {}
        return {
            "client_ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", "unknown"),
            "method": request.method,
            "url": str(request.url),
        }

    def _log_event(self, event_type: str, details: Dict[str, Any], request: Optional[Request] = None):
        """Log a structured audit event."""
        audit_record = {
            "timestamp": int(time.time()),
            "event_type": event_type,
            "details": details,
        }
        audit_record.update(self._request_context(request))

        # Log as JSON for structured parsing
        self.logger.info(json.dumps(audit_record, default=str))

    def auth_attempt(self, success: bool, auth_type: str, details: Dict[str, Any], request: Optional[Request] = None):
        """Log authentication attempt."""
        self._log_event(
            event_type="auth_attempt",
            details={
                "success": success,
                "auth_type": auth_type,  # "admin_basic"
                **details
            },
            request=request
        )

    def admin_action(
        self,
        action: str,
        details: Dict[str, Any],
        request: Optional[Request] = None,
        *,
        resource_type: str = "dashboard",
        resource_id: Optional[str] = None,
        server_id: Optional[str] = None,
        user: Optional[Profile] = None,
    ) -> None:
        """Log admin action and persist it to the audit trail."""
        self._log_event(
            event_type="admin_action",
            details={
                "action": action,  # "server_create", "process_terminate", "console_command", etc.
                "resource_type": resource_type,
                "resource_id": resource_id,
                **details
            },
            request=request
        )

        ctx = self._request_context(request)
        try:
            AuditLog.create(
                user=user,
                server=server_id,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details or None,
                ip_address=ctx.get("client_ip"),
                user_agent=ctx.get("user_agent"),
            )
        except peewee.PeeweeException as e:
            # Audit persistence must not break the action it records
            logger.error(f"failed to persist audit entry '{action}': {e}")


# Global audit logger instance
audit_logger = AuditLogger()
