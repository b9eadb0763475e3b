"""Mock terminal console: canned-response interpreter plus per-user sessions."""

from .interpreter import MockTerminal, CommandResult
from .session import ConsoleSession, ConsoleSessionManager, NoServerSelected

__all__ = ["MockTerminal", "CommandResult", "ConsoleSession", "ConsoleSessionManager", "NoServerSelected"]
