"""Unit tests for the mock terminal interpreter

Covers the fixed command table, server-derived output and the
unknown-command error path.
"""
import asyncio
import random
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from fleetconsole.console.interpreter import (
    MockTerminal, CommandResult, LS_OUTPUT, PS_OUTPUT, HELP_OUTPUT,
)


@pytest.fixture
def terminal():
    return MockTerminal(delay_min=0, delay_max=0, rng=random.Random(42),
                        clock=lambda: datetime(2024, 1, 16, 10, 30, 0))


@pytest.fixture
def server():
    return SimpleNamespace(name="Web Server 01", hostname="web-01", storage_gb=500, ram_gb=16)


class TestKnownCommands:
    """Literal matches return canned output"""

    @pytest.mark.parametrize("command", ["ls", "ls -la", "  LS  ", "LS -LA"])
    def test_ls_variants(self, terminal, command):
        assert terminal.interpret(command).output == LS_OUTPUT

    def test_pwd_uses_hostname(self, terminal, server):
        assert terminal.interpret("pwd", server).output == "/home/web-01"

    def test_pwd_without_server_falls_back(self, terminal):
        assert terminal.interpret("pwd").output == "/home/server"

    def test_whoami(self, terminal):
        assert terminal.interpret("whoami").output == "root"

    def test_date_uses_clock(self, terminal):
        assert terminal.interpret("date").output == "Tue Jan 16 2024 10:30:00"

    @pytest.mark.parametrize("command", ["ps", "ps aux", "ps -ef"])
    def test_anything_starting_with_ps(self, terminal, command):
        assert terminal.interpret(command).output == PS_OUTPUT

    def test_help_lists_commands(self, terminal):
        result = terminal.interpret("help")
        assert result.output == HELP_OUTPUT
        assert result.type == "output"

    def test_commands_parsed_from_help(self, terminal):
        commands = terminal.commands()
        assert commands["pwd"] == "Print working directory"
        assert commands["ls"] == commands["ls -la"] == "List directory contents"
        assert "ls, ls -la" not in commands
        assert len(commands) == 12

    def test_every_quick_command_runs(self, terminal, server):
        for name in terminal.commands():
            result = terminal.interpret(name, server)
            assert result.type == "output", name


class TestServerDerivedOutput:
    """df/free scale with the server's capacity"""

    def test_df_uses_storage(self, terminal, server):
        output = terminal.interpret("df -h", server).output
        assert "/dev/sda1        500G  300G  200G  60% /" in output
        assert "tmpfs           8G     0  8G   0% /dev/shm" in output

    def test_df_defaults_without_server(self, terminal):
        assert "500G" in terminal.interpret("df -h").output

    def test_free_uses_ram(self, terminal):
        big = SimpleNamespace(hostname="db-01", ram_gb=64, storage_gb=2000)
        output = terminal.interpret("free -h", big).output
        assert output.splitlines()[1].startswith("Mem:           64Gi       44Gi       12Gi")

    def test_uptime_format(self, terminal):
        output = terminal.interpret("uptime").output
        assert output.startswith(" 10:30:00 up ")
        assert output.endswith("load average: 1.45, 1.23, 0.98")


class TestActionsAndErrors:
    """clear/exit report actions; unknown input is an error"""

    def test_clear_action(self, terminal):
        assert terminal.interpret("clear") == CommandResult("", action="clear")

    def test_exit_action(self, terminal):
        assert terminal.interpret("exit") == CommandResult("", action="exit")

    def test_empty_command(self, terminal):
        assert terminal.interpret("   ") == CommandResult("")

    def test_unknown_command(self, terminal):
        result = terminal.interpret("rm -rf /")
        assert result.type == "error"
        assert result.output == "bash: rm -rf /: command not found"

    def test_unknown_command_keeps_original_case(self, terminal):
        assert terminal.interpret("Vim").output == "bash: Vim: command not found"


class TestExecute:
    """execute() adds the randomized delay before interpreting"""

    def test_execute_returns_interpreted_result(self, terminal, server):
        result = asyncio.run(terminal.execute("whoami", server))
        assert result.output == "root"

    def test_delay_drawn_from_configured_range(self):
        terminal = MockTerminal(delay_min=0.5, delay_max=1.5, rng=random.Random(1))

        with patch("fleetconsole.console.interpreter.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            asyncio.run(terminal.execute("pwd"))

        mock_sleep.assert_awaited_once()
        assert 0.5 <= mock_sleep.await_args.args[0] <= 1.5
