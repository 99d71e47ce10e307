"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work end to end
against a throwaway SQLite file.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def cli(tmp_path):
    """Return a runner bound to a fresh database file."""
    env = dict(os.environ)
    env.update(
        {
            "WORDMEMO_DATABASE_URL": f"sqlite:///{tmp_path / 'wordmemo.db'}",
            "WORDMEMO_LOG_LEVEL": "WARNING",
            "COLUMNS": "200",
        }
    )

    def run_cli_command(*args: str, input: str | None = None, timeout: int = 30):
        """
        Run a CLI command and return exit code, stdout, stderr.

        Args:
            args: Arguments after 'python -m wordmemo'
            input: Text piped to stdin (for interactive prompts)
            timeout: Maximum time to wait

        Returns:
            Tuple of (exit_code, stdout, stderr)
        """
        result = subprocess.run(
            [sys.executable, "-m", "wordmemo", *args],
            cwd=PROJECT_ROOT,
            env=env,
            input=input,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return result.returncode, result.stdout, result.stderr

    return run_cli_command


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, cli):
        code, stdout, stderr = cli("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "Commands" in stdout
        assert "study" in stdout

    def test_study_help(self, cli):
        code, stdout, stderr = cli("study", "--help")

        assert code == 0, f"Study help failed: {stderr}"
        assert "run" in stdout


class TestCLILists:
    """Test list management commands."""

    def test_first_run_seeds_default_list(self, cli):
        code, stdout, stderr = cli("lists")

        assert code == 0, f"lists failed: {stderr}"
        assert "Default list" in stdout

    def test_create_rename_delete(self, cli):
        assert cli("new-list", "Verbs")[0] == 0
        assert cli("rename-list", "verbs", "Irregular verbs")[0] == 0

        code, stdout, _ = cli("lists")
        assert "Irregular verbs" in stdout

        code, stdout, stderr = cli("delete-list", "Irregular verbs", "--yes")
        assert code == 0, f"delete-list failed: {stderr}"
        assert "Irregular verbs" not in cli("lists")[1]

    def test_blank_rename_fails(self, cli):
        code, stdout, _ = cli("rename-list", "Default list", "  ")
        assert code == 1
        assert "Error" in stdout

    def test_unknown_list_fails(self, cli):
        code, stdout, _ = cli("words", "Nope")
        assert code == 1
        assert "List not found" in stdout


class TestCLIWords:
    """Test word editing commands."""

    def test_add_with_lemma_and_show(self, cli):
        code, stdout, stderr = cli(
            "add",
            "Default list",
            "serendipitous",
            "--pos",
            "adj.",
            "--definition",
            "occurring by chance",
            "--lemma",
            "serendipity",
        )
        assert code == 0, f"add failed: {stderr}"
        assert "Added" in stdout

        code, stdout, _ = cli("words", "Default list", "--sort", "alphabetical")
        assert code == 0
        assert "serendipitous" in stdout
        assert "occurring by chance" in stdout

    def test_update_existing_word(self, cli):
        code, stdout, _ = cli("add", "Default list", "Synergy", "--proficiency", "50")
        assert code == 0
        assert "Updated" in stdout

        code, stdout, _ = cli("words", "Default list", "--sort", "proficiency")
        assert "50%" in stdout

    def test_cycle_rejected(self, cli):
        assert cli("add", "Default list", "synergy", "--lemma", "contemplate")[0] == 0

        code, stdout, _ = cli("add", "Default list", "contemplate", "--lemma", "synergy")
        assert code == 1
        assert "cycle" in stdout

    def test_remove_word(self, cli):
        code, stdout, _ = cli("remove", "Default list", "ubiquitous")
        assert code == 0
        assert "ubiquitous" not in cli("words", "Default list")[1]

        assert cli("remove", "Default list", "ubiquitous")[0] == 1


class TestCLIStudy:
    """Test study commands."""

    def test_today(self, cli):
        code, stdout, stderr = cli("study", "today", "Default list")

        assert code == 0, f"today failed: {stderr}"
        assert "4/4" in stdout

    def test_quit_immediately(self, cli):
        code, stdout, stderr = cli("study", "run", "Default list", "--seed", "3", input=":q\n")

        assert code == 0, f"study run failed: {stderr}"
        assert "stopped early" in stdout

    def test_skip_through_session(self, cli):
        code, stdout, stderr = cli(
            "study", "run", "Default list", "--seed", "3", input=":s\n" * 4
        )

        assert code == 0, f"study run failed: {stderr}"
        assert "Session complete" in stdout
        assert "Reviewed: 4" in stdout

    def test_mastered_list(self, cli):
        assert cli("new-list", "Done")[0] == 0
        assert cli("add", "Done", "finished", "--proficiency", "95")[0] == 0

        code, stdout, _ = cli("study", "run", "Done")
        assert code == 0
        assert "mastery threshold" in stdout
