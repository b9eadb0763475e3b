"""
Console sessions: output log, command history and the selected server.

A session is plain in-memory state owned by one browser (cookie) or API
caller; the manager expires sessions that have been idle too long.
"""

import time
import uuid
import secrets
import logging
import threading
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from .interpreter import MockTerminal, CommandResult

logger = logging.getLogger("fleetconsole.console")

WELCOME = "Server Management Console v2.1.0 - Select a server to begin"


class NoServerSelected(Exception):
    """Command submitted before a server was selected."""


@dataclass
class ConsoleLine:
    type: str        # "input", "output", "error" or "system"
    content: str
    server: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConsoleSession:
    def __init__(self, terminal: MockTerminal, session_id: Optional[str] = None):
        self.id = session_id or secrets.token_urlsafe(16)
        self.terminal = terminal
        self.output: List[ConsoleLine] = [ConsoleLine("system", WELCOME)]
        self.history: List[str] = []
        self.history_index = -1
        self.server: Any = None
        self.connected = False
        self.last_active = time.time()

    # ---- helpers ----

    @property
    def hostname(self) -> Optional[str]:
        return getattr(self.server, "hostname", None)

    @property
    def prompt(self) -> str:
        return f"{self.hostname}:~$ "

    def add_output(self, content: str, type: str = "output") -> ConsoleLine:
        line = ConsoleLine(type, content, server=self.hostname)
        self.output.append(line)
        return line

    def _touch(self) -> None:
        self.last_active = time.time()

    # ---- operations ----

    def connect(self, server: Any) -> None:
        self._touch()
        self.server = server
        self.connected = True
        self.add_output(f"Connected to {server.name} ({server.hostname})", "system")
        self.add_output(self.prompt, "input")
        logger.info(f"console {self.id[:8]} connected to {server.name}")

    async def submit(self, command: str) -> Optional[CommandResult]:
        """Run one command. Blank input is ignored and returns None."""
        self._touch()
        if self.server is None:
            raise NoServerSelected("Please select a server first")
        if not command.strip():
            return None

        self.add_output(f"{self.prompt}{command}", "input")
        self.history.append(command)
        self.history_index = -1

        result = await self.terminal.execute(command, self.server)
        if result.action == "clear":
            self.output = []
        elif result.action == "exit":
            self.server = None
            self.connected = False
            self.add_output("Connection closed.", "system")
        if result.output:
            self.add_output(result.output, result.type)
        return result

    def clear(self) -> None:
        self._touch()
        self.output = []
        self.add_output("Terminal cleared", "system")

    def disconnect(self) -> None:
        self._touch()
        self.server = None
        self.connected = False
        self.add_output("Disconnected from server", "system")

    def history_previous(self) -> Optional[str]:
        """Arrow-up: step back to an older command. None when already at the oldest."""
        if self.history and self.history_index < len(self.history) - 1:
            self.history_index += 1
            return self.history[len(self.history) - 1 - self.history_index]
        return None

    def history_next(self) -> Optional[str]:
        """Arrow-down: step forward; past the newest command yields an empty string."""
        if self.history_index > 0:
            self.history_index -= 1
            return self.history[len(self.history) - 1 - self.history_index]
        if self.history_index == 0:
            self.history_index = -1
            return ""
        return None

    def recent_history(self, limit: int = 10) -> List[str]:
        return list(reversed(self.history[-limit:]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.id,
            "connected": self.connected,
            "server": self.server.to_dict() if self.server is not None else None,
            "prompt": self.prompt if self.server is not None else None,
            "output": [line.to_dict() for line in self.output],
            "history": self.recent_history(),
        }


class ConsoleSessionManager:
    def __init__(self, terminal: MockTerminal, ttl_seconds: int = 3600):
        self.terminal = terminal
        self.ttl_seconds = ttl_seconds
        self._sessions: Dict[str, ConsoleSession] = {}
        self._lock = threading.Lock()

    def create(self) -> ConsoleSession:
        self.expire_idle()
        session = ConsoleSession(self.terminal)
        with self._lock:
            self._sessions[session.id] = session
        logger.debug(f"console session created: {session.id[:8]}")
        return session

    def get(self, session_id: Optional[str]) -> Optional[ConsoleSession]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def get_or_create(self, session_id: Optional[str]) -> ConsoleSession:
        return self.get(session_id) or self.create()

    def drop(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def expire_idle(self) -> int:
        cutoff = time.time() - self.ttl_seconds
        with self._lock:
            stale = [sid for sid, s in self._sessions.items() if s.last_active < cutoff]
            for sid in stale:
                del self._sessions[sid]
        if stale:
            logger.info(f"expired {len(stale)} idle console sessions")
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
