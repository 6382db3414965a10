"""Functional test: a new user sets up Canvelete without touching the network.

Every step invokes the CLI the way a shell would: no container is injected,
so state only carries over through the JSON files in ``CANVELETE_CONFIG_DIR``.
"""

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from canvelete.entrypoints.cli.main import canvelete

WORK_KEY = "cvt_work_1111222233334444"
PERSONAL_KEY = "cvt_home_5555666677778888"


@pytest.fixture
def cli():
    runner = CliRunner()

    def _run(*args, input=None):  # pylint: disable=redefined-builtin
        return runner.invoke(canvelete, list(args), input=input)

    return _run


def test_first_day_with_canvelete(cli, monkeypatch):
    """Login, settings and profiles persist between separate invocations."""
    config_dir = Path(os.environ["CANVELETE_CONFIG_DIR"])

    # The user has just installed the CLI and checks whether they are logged in.
    result = cli("auth", "status")
    assert result.exit_code == 0
    assert "Not authenticated." in result.stderr

    # Trying to list designs tells them how to log in; nothing is sent.
    result = cli("designs", "list")
    assert result.exit_code == 1
    assert "canvelete auth login" in result.stderr

    # They log in with the key from the dashboard (offline, without verification).
    result = cli("auth", "login", "-k", WORK_KEY, "--no-verify")
    assert result.exit_code == 0, result.output
    assert json.loads((config_dir / "config.json").read_text())["api_key"] == WORK_KEY

    # The next invocation reads the key back from the config file.
    result = cli("auth", "status", "--no-check")
    assert "Source:  config file" in result.stdout
    assert WORK_KEY not in result.output

    # They prefer JPEG renders and set it once.
    assert cli("config", "set", "defaultFormat", "JPG").exit_code == 0
    assert cli("config", "get", "default_format").stdout.strip() == "jpg"

    # They keep a personal account next to the work one.
    result = cli("profiles", "add", "personal", "-k", PERSONAL_KEY, "--switch")
    assert result.exit_code == 0, result.output
    whoami = json.loads(cli("whoami", "--json").stdout)
    assert whoami["profile"] == "personal"
    assert whoami["source"] == "profile 'personal'"

    # In CI the key comes from the environment and wins over everything else.
    monkeypatch.setenv("CANVELETE_API_KEY", "cvt_ci_999999999999")
    whoami = json.loads(cli("whoami", "--json").stdout)
    assert whoami["source"] == "environment (CANVELETE_API_KEY)"
    monkeypatch.delenv("CANVELETE_API_KEY")

    # Removing the active profile falls back to the default profile.
    result = cli("profiles", "remove", "personal", "-f")
    assert 'Switched to "default"' in result.stderr
    assert json.loads((config_dir / "profiles.json").read_text())["activeProfile"] == "default"


def test_corrupt_config_file_is_reported(cli):
    """A hand-edited config file that is not JSON fails with a clear message."""
    config_dir = Path(os.environ["CANVELETE_CONFIG_DIR"])
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.json").write_text("{not json", encoding="utf-8")

    result = cli("config", "list")

    assert result.exit_code == 1
    assert "Invalid JSON in" in result.stderr
    assert "config.json" in result.stderr


def test_project_setup_in_a_fresh_directory(cli, tmp_path, monkeypatch):
    """`init` followed by `validate` succeeds in an empty directory."""
    monkeypatch.chdir(tmp_path)

    assert cli("init", "-y", "--template", "ci").exit_code == 0
    result = cli("validate")

    assert result.exit_code == 0
    assert "Config file is valid" in result.stderr
    assert json.loads((tmp_path / "canvelete.config.json").read_text())["ci"]["failOnError"] is True
