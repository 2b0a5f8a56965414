"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
Dates are passed explicitly so results do not depend on the current day.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(command: str, timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        command: The command to run (after 'python -m src.cli.recall_cli')
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    full_command = f"{sys.executable} -m src.cli.recall_cli {command}"

    result = subprocess.run(
        full_command,
        shell=True,
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "next-review" in stdout
        assert "plan" in stdout

    @pytest.mark.parametrize("command", ["next-review", "plan", "retention", "config"])
    def test_command_help(self, command):
        code, stdout, stderr = run_cli_command(f"{command} --help")

        assert code == 0, f"{command} help failed: {stderr}"


class TestScheduling:
    def test_next_review(self):
        code, stdout, stderr = run_cli_command("next-review --score 80 --count 2 --last 2024-01-01")

        assert code == 0, f"next-review failed: {stderr}"
        assert "2024-01-10" in stdout

    def test_plan(self):
        code, stdout, stderr = run_cli_command(
            "plan --target 2024-03-18 --score 30 --today 2024-03-15"
        )

        assert code == 0, f"plan failed: {stderr}"
        for day in ("2024-03-16", "2024-03-17", "2024-03-18"):
            assert day in stdout

    def test_plan_past_deadline(self):
        code, stdout, stderr = run_cli_command(
            "plan --target 2024-03-01 --score 30 --today 2024-03-15"
        )

        assert code == 0, f"plan failed: {stderr}"
        assert "2024-03-15" in stdout
        assert "Deadline reached" in stdout

    def test_bad_date_rejected(self):
        code, stdout, stderr = run_cli_command("next-review --score 80 --last not-a-date")

        assert code != 0

    def test_score_out_of_range_rejected(self):
        code, stdout, stderr = run_cli_command("next-review --score 150")

        assert code != 0


class TestInfo:
    def test_retention(self):
        code, stdout, stderr = run_cli_command("retention --score 70 --count 2")

        assert code == 0, f"retention failed: {stderr}"
        assert "66%" in stdout

    def test_config(self):
        code, stdout, stderr = run_cli_command("config")

        assert code == 0, f"config failed: {stderr}"
        assert "interval_table" in stdout
