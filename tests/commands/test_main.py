"""Tests for the top-level app wiring."""

from typer.testing import CliRunner

from taskboard_cli import __version__
from taskboard_cli.main import app

runner = CliRunner()


def test_no_args_shows_help():
    result = runner.invoke(app, [])
    assert "Usage" in result.output
    assert "board" in result.output


def test_version_shows_active_context(config_service):
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output
    assert "Context: local (local)" in result.output


def test_subcommand_groups_registered():
    for group in ("auth", "tasks", "contexts"):
        result = runner.invoke(app, [group, "--help"])
        assert result.exit_code == 0, group


def test_whoami_shortcut_requires_login(config_service):
    result = runner.invoke(app, ["whoami"])
    assert result.exit_code == 3


def test_signup_then_whoami(config_service):
    result = runner.invoke(
        app,
        ["signup", "--name", "Ada", "--email", "ada@example.com", "--password", "secret1"],
    )
    assert result.exit_code == 0, result.output
    assert "Signed up as ada@example.com" in result.output

    result = runner.invoke(app, ["whoami"])
    assert result.exit_code == 0
    assert "Ada" in result.output

    result = runner.invoke(app, ["logout"])
    assert "Logged out" in result.output
    assert runner.invoke(app, ["whoami"]).exit_code == 3


def test_login_with_wrong_password(config_service):
    runner.invoke(
        app,
        ["signup", "--name", "Ada", "--email", "ada@example.com", "--password", "secret1"],
    )
    runner.invoke(app, ["logout"])
    result = runner.invoke(
        app, ["login", "--email", "ada@example.com", "--password", "wrong-one"]
    )
    assert result.exit_code == 3
