#!/usr/bin/env python3
"""
fleetconsole AuthService (server-side authentication helpers)

Responsibilities (authN only):
- Parse HTTP Basic credentials
- Check the password against the admin token in constant time
- Issue opaque admin tokens (installer helper)

Notes:
- Does NOT do authorization or profile bookkeeping; keep that in the FastAPI layer.
"""

import base64
import binascii
import secrets
import logging
from typing import Optional, Tuple

logger = logging.getLogger("fleetconsole.server.auth")


class AuthService:
    def __init__(self, admin_token: Optional[str]) -> None:
        self.admin_token = admin_token

    # ---------- Token issuance ----------

    @staticmethod
    def generate_admin_token() -> str:
        """Opaque admin token (use in installer)."""
        return f"fleet_admin_{secrets.token_urlsafe(32)}"

    # ---------- Credential checks ----------

    @staticmethod
    def parse_basic_auth(header: str) -> Optional[Tuple[str, str]]:
        """Return (username, password) from an 'Authorization: Basic ...' header."""
        if not header or not header.startswith("Basic "):
            return None
        try:
            decoded = base64.b64decode(header[6:], validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            logger.debug(f"Basic Auth parsing failed: {e}")
            return None
        if ":" not in decoded:
            return None
        username, password = decoded.split(":", 1)
        return username, password

    def check_password(self, password: str) -> bool:
        if not self.admin_token:
            return False
        return secrets.compare_digest(password.encode("utf-8"), self.admin_token.encode("utf-8"))

    def authenticate(self, header: str) -> Optional[str]:
        """Return the username for valid admin credentials, else None."""
        creds = self.parse_basic_auth(header)
        if creds is None:
            return None
        username, password = creds
        if not username or not self.check_password(password):
            return None
        return username


if __name__ == "__main__":
    # Utility: print an admin token for installer use
    print(AuthService.generate_admin_token())
