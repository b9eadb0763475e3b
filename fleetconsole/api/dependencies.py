#!/usr/bin/env python3
"""
fleetconsole API Dependencies - Authentication and Dependency Injection
"""

import logging

import peewee
from fastapi import HTTPException, Request, status

from ..auth import AuthService
from ..models import Profile
from ..core.audit import audit_logger
from ..core.config import DEV_ADMIN_TOKEN

logger = logging.getLogger("fleetconsole.server")


class AuthDependencies:
    """Container for authentication dependencies with admin token."""

    def __init__(self, admin_token: str, test_mode: bool = False):
        self.auth_service = AuthService(admin_token)
        self.test_mode = test_mode

    @property
    def realm(self) -> str:
        if self.test_mode:
            return f"fleetconsole Admin (test mode: use any username + {DEV_ADMIN_TOKEN})"
        return "fleetconsole Admin"

    def challenge(self, detail: str = "Authentication required") -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": f"Basic realm=\"{self.realm}\""}
        )

    def require_admin_auth(self, request: Request) -> Profile:
        """
        Basic Auth for both test and production modes: any username plus the
        admin token as password. Returns the (upserted) Profile of the user.
        """
        username = self.auth_service.authenticate(request.headers.get("authorization", ""))

        if username is None:
            audit_logger.auth_attempt(
                success=False,
                auth_type="admin_basic",
                details={"reason": "invalid_credentials", "test_mode": self.test_mode},
                request=request
            )
            logger.warning("Admin authentication failed")
            raise self.challenge()

        try:
            profile = Profile.ensure(username)
        except peewee.PeeweeException as e:
            logger.error(f"profile lookup failed for {username}: {e}")
            raise HTTPException(status_code=503, detail="Service unavailable")

        if logger.isEnabledFor(logging.DEBUG):
            audit_logger.auth_attempt(
                success=True,
                auth_type="admin_basic",
                details={"username": username, "test_mode": self.test_mode},
                request=request
            )
        request.state.profile = profile
        return profile
