"""
Unit tests for schema models.

Tests cover:
- Action enum
- AuthorizationResult
- PunditConfig and YAML loading
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pundit.errors import ConfigError
from pundit.schema import (
    Action,
    AuthorizationResult,
    PunditConfig,
    action_name,
    load_config,
    load_config_from_string,
)


class TestAction:
    def test_members(self) -> None:
        assert [a.value for a in Action] == [
            "index", "show", "create", "new", "update", "edit", "delete",
        ]

    def test_str_enum(self) -> None:
        """Members compare equal to their names."""
        assert Action.EDIT == "edit"
        assert str(Action.EDIT) == "edit"

    def test_action_name(self) -> None:
        assert action_name(Action.SHOW) == "show"
        assert action_name("publish") == "publish"


class TestAuthorizationResult:
    def test_ok(self) -> None:
        result = AuthorizationResult.ok()
        assert result.allowed is True
        assert result.message is None
        assert bool(result) is True

    def test_fail(self) -> None:
        result = AuthorizationResult.fail("User x cannot edit y")
        assert result.allowed is False
        assert result.message == "User x cannot edit y"
        assert bool(result) is False

    def test_frozen(self) -> None:
        result = AuthorizationResult.ok()
        with pytest.raises(ValidationError):
            result.allowed = False  # type: ignore[misc]


class TestPunditConfig:
    def test_defaults(self) -> None:
        config = PunditConfig()
        assert config.suffix == "Policy"
        assert config.policies == {}

    def test_invalid_suffix(self) -> None:
        with pytest.raises(ValidationError):
            PunditConfig(suffix="not an identifier")

    def test_extra_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PunditConfig.model_validate({"roles": []})

    def test_load_from_string(self, sample_config_yaml: str) -> None:
        config = load_config_from_string(sample_config_yaml)
        assert config.policies["app.models.Post"] == "app.policies.PostPolicy"
        assert config.policies["app.models:Comment"] == "app.policies:CommentPolicy"

    def test_empty_document(self) -> None:
        assert load_config_from_string("") == PunditConfig()

    def test_load_from_file(self, temp_dir: Path, sample_config_yaml: str) -> None:
        path = temp_dir / "policies.yaml"
        path.write_text(sample_config_yaml)
        config = load_config(path)
        assert len(config.policies) == 2

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(temp_dir / "nope.yaml")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ConfigError):
            load_config_from_string("policies: [unclosed")

    def test_invalid_entries(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_string("policies:\n  app.models.Post: ''\n")
        assert "<string>" in exc_info.value.message
