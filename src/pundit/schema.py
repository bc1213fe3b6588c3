"""
Schema definitions for pundit.

This module defines the Pydantic models used throughout pundit:
- Action: The seven standard permission checks
- AuthorizationResult: The outcome of authorize()
- PunditConfig: The policy map loaded from YAML

Design Decisions:
    - Models are immutable (frozen=True)
    - Unknown keys in the policy map are rejected (extra="forbid")
    - Action is a str enum so members compare equal to plain names
"""

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pundit.errors import ConfigError


# =============================================================================
# Enums
# =============================================================================


class Action(str, Enum):
    """
    The standard permission checks every policy answers.

    Named after the actions of a typical resource controller. Any other
    action name can still be passed to Dispatcher.can().
    """

    INDEX = "index"
    SHOW = "show"
    CREATE = "create"
    NEW = "new"
    UPDATE = "update"
    EDIT = "edit"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


SCOPE = "scope"


def action_name(action: "Action | str") -> str:
    """Return the plain method name for an action."""
    if isinstance(action, Action):
        return action.value
    return str(action)


# =============================================================================
# Authorization Result
# =============================================================================


class AuthorizationResult(BaseModel):
    """
    Result of asking whether a user may perform an action on a subject.

    Attributes:
        allowed: Whether the action is permitted
        message: Why it was denied (None when allowed)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allowed: bool = Field(
        ...,
        description="Whether the action is permitted",
    )
    message: str | None = Field(
        default=None,
        description="Human-readable denial message",
    )

    @classmethod
    def ok(cls) -> "AuthorizationResult":
        """Create a success result."""
        return cls(allowed=True)

    @classmethod
    def fail(cls, message: str) -> "AuthorizationResult":
        """Create a failure result."""
        return cls(allowed=False, message=message)

    def __bool__(self) -> bool:
        return self.allowed


# =============================================================================
# Configuration
# =============================================================================


class PunditConfig(BaseModel):
    """
    Policy map configuration.

    Maps importable subject types to importable policies. Entries are
    resolved lazily, on the first authorization check that needs them.

    Example YAML:
        suffix: Policy
        policies:
          app.models.Post: app.policies.PostPolicy
          app.models:Comment: app.policies:CommentPolicy

    Attributes:
        suffix: Name of the nested policy class looked up by convention
        policies: Subject import path -> policy import path
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    suffix: str = Field(
        default="Policy",
        description="Nested policy attribute name used by convention",
        min_length=1,
    )
    policies: dict[str, str] = Field(
        default_factory=dict,
        description="Subject import path -> policy import path",
    )

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        """The suffix must be a valid attribute name."""
        if not v.isidentifier():
            msg = f"Invalid policy suffix: {v}"
            raise ValueError(msg)
        return v

    @field_validator("policies")
    @classmethod
    def validate_paths(cls, v: dict[str, str]) -> dict[str, str]:
        """Both sides of every entry must be non-empty import paths."""
        for subject, policy in v.items():
            if not subject.strip() or not policy.strip():
                msg = f"Empty import path in policy map entry: {subject!r}: {policy!r}"
                raise ValueError(msg)
        return v


def _validate_config(data: Any, source: str) -> PunditConfig:
    if data is None:
        data = {}
    try:
        return PunditConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(path=source, underlying_error=str(e)) from e


def load_config(path: Path | str) -> PunditConfig:
    """
    Load a policy map from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated PunditConfig

    Raises:
        ConfigError: If the file can't be read, parsed or validated
    """
    path = Path(path)
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(path=str(path), underlying_error=str(e)) from e

    return _validate_config(data, str(path))


def load_config_from_string(content: str) -> PunditConfig:
    """Load a policy map from a YAML string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(path="<string>", underlying_error=str(e)) from e
    return _validate_config(data, "<string>")
