"""
Mock terminal interpreter.

Matches a trimmed, lower-cased command against a fixed table of literal
strings and returns canned text after a randomized delay. It holds no
session state; `clear` and `exit` are reported back as actions for the
session to apply.
"""

import math
import asyncio
import random
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger("fleetconsole.console")

DEFAULT_STORAGE_GB = 500
DEFAULT_RAM_GB = 16

LS_OUTPUT = """total 48
drwxr-xr-x  8 root root 4096 Jan 16 10:30 .
drwxr-xr-x  3 root root 4096 Jan 15 09:15 ..
-rw-r--r--  1 root root  220 Jan 15 09:15 .bash_logout
-rw-r--r--  1 root root 3771 Jan 15 09:15 .bashrc
drwx------  2 root root 4096 Jan 16 08:45 .cache
drwxr-xr-x  3 root root 4096 Jan 16 09:30 .config
-rw-r--r--  1 root root  807 Jan 15 09:15 .profile
drwxr-xr-x  2 root root 4096 Jan 16 10:30 logs
drwxr-xr-x  3 root root 4096 Jan 16 09:45 scripts
-rwxr-xr-x  1 root root 1024 Jan 16 10:15 start.sh"""

PS_OUTPUT = """  PID TTY          TIME CMD
 1234 pts/0    00:00:02 nginx
 1235 pts/0    00:00:45 mysql
 1236 pts/0    00:00:12 node
 1237 pts/0    00:00:03 apache2
 1238 pts/0    00:00:01 redis-server"""

HELP_OUTPUT = """Available commands:
  ls, ls -la    - List directory contents
  pwd          - Print working directory
  whoami       - Print current user
  date         - Display current date and time
  ps           - Show running processes
  df -h        - Display disk usage
  free -h      - Display memory usage
  uptime       - Show system uptime
  clear        - Clear terminal
  exit         - Disconnect from server
  help         - Show this help message"""


@dataclass
class CommandResult:
    output: str
    type: str = "output"            # "output" or "error"
    action: Optional[str] = None    # "clear" or "exit"


def _attr(server: Any, name: str, default: Any = None) -> Any:
    if server is None:
        return default
    if isinstance(server, dict):
        value = server.get(name)
    else:
        value = getattr(server, name, None)
    return value if value else default


class MockTerminal:
    """Canned-response command interpreter with simulated latency."""

    def __init__(
        self,
        delay_min: float = 0.5,
        delay_max: float = 1.5,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.delay_min = delay_min
        self.delay_max = delay_max
        self.rng = rng or random.Random()
        self.clock = clock

    async def execute(self, command: str, server: Any = None) -> CommandResult:
        delay = self.rng.uniform(self.delay_min, self.delay_max)
        if delay > 0:
            await asyncio.sleep(delay)
        result = self.interpret(command, server)
        logger.debug(f"command {command!r} -> {result.type}{' (' + result.action + ')' if result.action else ''}")
        return result

    def interpret(self, command: str, server: Any = None) -> CommandResult:
        """Synchronous lookup; `execute` adds the latency."""
        cmd = command.lower().strip()

        if cmd in ("ls", "ls -la"):
            return CommandResult(LS_OUTPUT)
        if cmd == "pwd":
            return CommandResult(f"/home/{_attr(server, 'hostname', 'server')}")
        if cmd == "whoami":
            return CommandResult("root")
        if cmd == "date":
            return CommandResult(self.clock().strftime("%a %b %d %Y %H:%M:%S"))
        if cmd.startswith("ps"):
            return CommandResult(PS_OUTPUT)
        if cmd == "df -h":
            return CommandResult(self._disk_usage(server))
        if cmd == "free -h":
            return CommandResult(self._memory_usage(server))
        if cmd == "uptime":
            return CommandResult(self._uptime())
        if cmd == "help":
            return CommandResult(HELP_OUTPUT)
        if cmd == "clear":
            return CommandResult("", action="clear")
        if cmd == "exit":
            return CommandResult("", action="exit")
        if cmd == "":
            return CommandResult("")
        return CommandResult(f"bash: {command}: command not found", type="error")

    @staticmethod
    def _disk_usage(server: Any) -> str:
        storage = _attr(server, "storage_gb", DEFAULT_STORAGE_GB)
        ram = _attr(server, "ram_gb", DEFAULT_RAM_GB)
        return (
            "Filesystem      Size  Used Avail Use% Mounted on\n"
            f"/dev/sda1        {storage}G  {math.floor(storage * 0.6)}G  {math.floor(storage * 0.4)}G  60% /\n"
            f"tmpfs           {math.floor(ram / 2)}G     0  {math.floor(ram / 2)}G   0% /dev/shm"
        )

    @staticmethod
    def _memory_usage(server: Any) -> str:
        ram = _attr(server, "ram_gb", DEFAULT_RAM_GB)
        return (
            "              total        used        free      shared  buff/cache   available\n"
            f"Mem:           {ram}Gi       {math.floor(ram * 0.7)}Gi       {math.floor(ram * 0.2)}Gi"
            f"       256Mi       {math.floor(ram * 0.1)}Gi       {math.floor(ram * 0.25)}Gi\n"
            "Swap:          2.0Gi          0B       2.0Gi"
        )

    def _uptime(self) -> str:
        days = math.floor(self.rng.random() * 30 + 1)
        hours = math.floor(self.rng.random() * 24)
        minutes = math.floor(self.rng.random() * 60)
        return (
            f" {self.clock().strftime('%H:%M:%S')} up {days} days, {hours} hours, {minutes} minutes,"
            " 1 user, load average: 1.45, 1.23, 0.98"
        )

    @staticmethod
    def commands() -> Dict[str, str]:
        """Runnable command -> description, as listed by `help`."""
        entries = {}
        for line in HELP_OUTPUT.splitlines()[1:]:
            names, _, desc = line.strip().partition(" - ")
            for name in names.split(","):
                entries[name.strip()] = desc.strip()
        return entries
