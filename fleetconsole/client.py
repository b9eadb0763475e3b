"""
HTTP client for the fleetconsole JSON API.

Wraps the admin endpoints with Basic auth, SSL context handling and JSON
serialization. HTTP errors surface as urllib.error.HTTPError.
"""

import base64
import json
import ssl
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode
from urllib.request import Request, urlopen


class FleetConsoleClient:
    """HTTP client for communicating with a fleetconsole server."""

    def __init__(self, server_base: str, admin_token: str, username: str = "admin", timeout: int = 10):
        """
        Initialize HTTP client.

        Args:
            server_base: Base URL of the fleetconsole server (e.g., https://server:8000)
            admin_token: Admin token, sent as the Basic auth password
            username: Basic auth username (stored as the acting profile)
            timeout: Request timeout in seconds
        """
        self.server_base = server_base.rstrip("/")
        self.timeout = timeout
        credentials = base64.b64encode(f"{username}:{admin_token}".encode("utf-8")).decode("ascii")
        self._auth_header = f"Basic {credentials}"
        self._ssl_context = self._create_ssl_context()

    def _create_ssl_context(self) -> ssl.SSLContext:
        """Create SSL context for HTTPS that auto-trusts server certificates."""
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        return ssl_context

    def request_json(self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None,
                     params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make an authenticated request, optionally with a JSON body.

        Raises:
            HTTPError: On HTTP errors
            URLError: On connection errors
        """
        url = f"{self.server_base}{endpoint}"
        if params:
            query = {k: v for k, v in params.items() if v is not None}
            if query:
                url = f"{url}?{urlencode(query)}"
        headers = {"Authorization": self._auth_header}
        body = None
        if data is not None:
            body = json.dumps(data).encode("utf-8")
            headers["Content-Type"] = "application/json"
        req = Request(url, data=body, headers=headers, method=method)

        # Use SSL context for HTTPS URLs
        ssl_context = self._ssl_context if url.startswith("https://") else None

        with urlopen(req, timeout=self.timeout, context=ssl_context) as resp:
            raw = resp.read().decode("utf-8")
            return json.loads(raw) if raw else {}

    # ---- servers ----

    def list_servers(self) -> List[Dict[str, Any]]:
        return self.request_json("GET", "/api/servers")["servers"]

    def create_server(self, name: str, hostname: str, ip_address: str, **fields) -> Dict[str, Any]:
        data = {"name": name, "hostname": hostname, "ip_address": ip_address}
        data.update(fields)
        return self.request_json("POST", "/api/servers", data)

    def update_server_status(self, server_id: str, status: str) -> Dict[str, Any]:
        return self.request_json("PATCH", f"/api/servers/{server_id}/status", {"status": status})

    def delete_server(self, server_id: str) -> Dict[str, Any]:
        return self.request_json("DELETE", f"/api/servers/{server_id}")

    # ---- processes ----

    def list_processes(self, server_id: Optional[str] = None, search: Optional[str] = None,
                       sort: str = "pid", direction: str = "asc") -> List[Dict[str, Any]]:
        params = {"server_id": server_id, "search": search, "sort": sort, "direction": direction}
        return self.request_json("GET", "/api/processes", params=params)["processes"]

    def terminate_process(self, process_id: str) -> Dict[str, Any]:
        return self.request_json("DELETE", f"/api/processes/{process_id}")

    # ---- console ----

    def open_console(self, server_id: Optional[str] = None) -> Dict[str, Any]:
        """Open a console session; connect it to `server_id` when given."""
        session = self.request_json("POST", "/api/console/sessions", {})
        if server_id:
            session = self.request_json(
                "POST", f"/api/console/sessions/{session['session_id']}/connect", {"server_id": server_id}
            )
        return session

    def run_command(self, session_id: str, command: str) -> Dict[str, Any]:
        """Run one command; returns the session state with the command `result`."""
        return self.request_json("POST", f"/api/console/sessions/{session_id}/commands", {"command": command})
