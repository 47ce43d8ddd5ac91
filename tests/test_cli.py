"""Tests for the command-line interface."""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from budgetbuddy.cli import main
from budgetbuddy.session import TOKEN_KEY, USER_KEY, JsonFileStorage

from conftest import BASE_URL, TEST_USER, FakeBackend


@pytest.fixture
def signed_in(isolated_config: Path) -> Path:
    """Write a persisted session where the CLI looks for it."""
    path = isolated_config / "budgetbuddy" / "session.json"
    storage = JsonFileStorage(path)
    storage.set(TOKEN_KEY, "cli-token")
    storage.set(USER_KEY, json.dumps(TEST_USER))
    return path


class TestMain:
    """Tests for the CLI entry point."""

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 1
        assert "usage:" in capsys.readouterr().out

    def test_show_config(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--base-url", "http://cli/api", "show-config"]) == 0
        out = capsys.readouterr().out
        assert "API base URL: http://cli/api" in out
        assert "API timeout:  30s" in out

    def test_requires_login(
        self, backend: FakeBackend, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["--base-url", BASE_URL, "summary"]) == 1
        assert "Not signed in" in capsys.readouterr().err
        assert backend.calls == []

    def test_whoami(self, signed_in: Path, backend: FakeBackend, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["whoami"]) == 0
        assert "Test User <test@example.com>" in capsys.readouterr().out

    def test_logout(self, signed_in: Path, backend: FakeBackend) -> None:
        assert main(["logout"]) == 0
        assert JsonFileStorage(signed_in).get(TOKEN_KEY) is None

    def test_login(self, backend: FakeBackend, capsys: pytest.CaptureFixture[str]) -> None:
        backend.add("POST", "users/login", payload={"token": "t", "user": TEST_USER})

        with patch("budgetbuddy.cli.getpass.getpass", return_value="secret"):
            assert main(["--base-url", BASE_URL, "login", "test@example.com"]) == 0

        assert "Signed in as Test User" in capsys.readouterr().out
        assert backend.calls[0][2]["json"] == {"email": "test@example.com", "password": "secret"}

    def test_summary(
        self, signed_in: Path, backend: FakeBackend, capsys: pytest.CaptureFixture[str]
    ) -> None:
        backend.add("GET", "transactions/42", payload=[
            {"id": 1, "date": "2025-03-01", "amount": 1000, "type": "income"},
            {"id": 2, "date": "2025-03-02", "amount": 400, "type": "expense", "category": "Food"},
        ])
        backend.add("GET", "accounts/42", payload=[{"id": 1, "type": "Bank", "balance": 5000}])
        backend.add("GET", "categories/42", payload=[])
        backend.add("GET", "budgets", payload=[])

        assert main(["--base-url", BASE_URL, "summary"]) == 0

        out = capsys.readouterr().out
        assert "Income:       1,000.00" in out
        assert "Food" in out

    def test_add_transaction_validation(
        self, signed_in: Path, backend: FakeBackend, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = main([
            "--base-url", BASE_URL, "add-transaction",
            "--type", "expense", "--amount", "0", "--category-id", "1", "--account-id", "2",
        ])
        assert code == 1
        assert "amount must be greater than zero" in capsys.readouterr().err
        assert backend.calls == []

    def test_insights_empty_state(
        self, signed_in: Path, backend: FakeBackend, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["--base-url", BASE_URL, "insights"]) == 0
        assert "No insights yet" in capsys.readouterr().out

    def test_verbose_logs_info(self) -> None:
        with patch("budgetbuddy.cli.logging.basicConfig") as basic_config:
            main(["-v", "show-config"])
        assert basic_config.call_args.kwargs["level"] == logging.INFO

    def test_quiet_by_default(self) -> None:
        with patch("budgetbuddy.cli.logging.basicConfig") as basic_config:
            main(["show-config"])
        assert basic_config.call_args.kwargs["level"] == logging.WARNING


class TestInitConfig:
    """Tests for writing the default config."""

    def test_writes_default_config(
        self, isolated_config: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["--base-url", "http://cli/api/", "init-config"]) == 0

        path = isolated_config / "budgetbuddy" / "config.json"
        assert json.loads(path.read_text())["api"]["base_url"] == "http://cli/api"
        assert "SETUP COMPLETE" in capsys.readouterr().out

    def test_existing_config_left_alone(
        self, isolated_config: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = isolated_config / "budgetbuddy" / "config.json"
        path.parent.mkdir(parents=True)
        path.write_text('{"api": {"base_url": "http://mine"}}')

        assert main(["init-config"]) == 1

        assert json.loads(path.read_text()) == {"api": {"base_url": "http://mine"}}
        assert "Config already exists" in capsys.readouterr().err
