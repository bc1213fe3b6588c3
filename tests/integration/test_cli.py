"""
Integration tests for the pundit CLI.

Tests cover:
- pundit --version
- pundit inspect (table and JSON output)
- pundit doctor over a policy map
"""

import json
from pathlib import Path
from typing import Callable

from typer.testing import CliRunner

from pundit import __version__
from pundit.cli import app

runner = CliRunner()

WriteModule = Callable[[str, str], Path]

MODELS = """
from pundit.policy import DefaultPolicy

class Post:
    class Policy(DefaultPolicy):
        def show(self, post, user):
            return True

        def scope(self, query, user):
            return query

class Comment:
    pass

class Tag:
    pass
"""

POLICIES = """
class TagPolicy:
    def show(self, tag, user):
        return True
"""


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestInspectCommand:
    """Tests for `pundit inspect`."""

    def test_inspect_nested_policy(self, module_dir: WriteModule) -> None:
        module_dir("cli_models_a", MODELS)
        result = runner.invoke(app, ["inspect", "cli_models_a.Post"])
        assert result.exit_code == 0
        assert "cli_models_a.Post.Policy" in result.stdout
        assert "overridden" in result.stdout
        assert "default deny" in result.stdout

    def test_inspect_json(self, module_dir: WriteModule) -> None:
        module_dir("cli_models_b", MODELS)
        result = runner.invoke(app, ["inspect", "cli_models_b.Post", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["overridden"] == ["show"]
        assert data["scope"] is True

    def test_inspect_missing_policy(self, module_dir: WriteModule) -> None:
        module_dir("cli_models_c", MODELS)
        result = runner.invoke(app, ["inspect", "cli_models_c.Comment"])
        assert result.exit_code == 1
        assert "not defined" in result.stdout

    def test_inspect_unknown_subject(self) -> None:
        result = runner.invoke(app, ["inspect", "no_such_module_anywhere.Post"])
        assert result.exit_code == 1
        assert "Cannot import subject" in result.stdout


class TestDoctorCommand:
    """Tests for `pundit doctor`."""

    def test_doctor_all_ok(self, module_dir: WriteModule, temp_dir: Path) -> None:
        module_dir("cli_models_d", MODELS)
        config = temp_dir / "policies.yaml"
        config.write_text("policies:\n  cli_models_d.Comment: pundit.policy.DefaultPolicy\n")

        result = runner.invoke(app, ["doctor", "--config", str(config)])
        assert result.exit_code == 0
        assert "All checks passed" in result.stdout

    def test_doctor_reports_incomplete_policy(
        self, module_dir: WriteModule, temp_dir: Path
    ) -> None:
        module_dir("cli_models_e", MODELS)
        module_dir("cli_policies_e", POLICIES)
        config = temp_dir / "policies.yaml"
        config.write_text(
            "policies:\n"
            "  cli_models_e.Tag: cli_policies_e:TagPolicy\n"
            "  cli_models_e.Comment: cli_policies_e:Missing\n"
        )

        result = runner.invoke(app, ["doctor", "--config", str(config), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["ok"] is False
        by_subject = {check["subject"]: check for check in data["checks"]}
        assert "index" in by_subject["cli_models_e.Tag"]["missing"]
        assert "show" not in by_subject["cli_models_e.Tag"]["missing"]
        assert "not defined" in by_subject["cli_models_e.Comment"]["message"]

    def test_doctor_invalid_config(self, temp_dir: Path) -> None:
        config = temp_dir / "policies.yaml"
        config.write_text("roles: [admin]\n")
        result = runner.invoke(app, ["doctor", "--config", str(config)])
        assert result.exit_code == 1
        assert "Error" in result.stdout
