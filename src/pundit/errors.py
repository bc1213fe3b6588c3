"""
Exception hierarchy for pundit.

All pundit exceptions inherit from PunditError, allowing callers to catch
every library error with a single except clause.

Exception Categories:
    - InvalidSubjectError: The subject is neither a class nor an instance
    - NotDefinedError: No policy, or no such action on the policy
    - NotAuthorizedError: The policy denied the action (enforce only)
    - ConfigError: The policy map could not be loaded

A denial is not an error for can() and authorize(). Only enforce()
turns a denial into NotAuthorizedError.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Subject errors: 1xxx
ERROR_INVALID_SUBJECT = 1001

# Definition errors: 2xxx
ERROR_NOT_DEFINED = 2001
ERROR_SCOPE_NOT_DEFINED = 2002

# Authorization errors: 3xxx
ERROR_NOT_AUTHORIZED = 3001

# Configuration errors: 4xxx
ERROR_CONFIG_INVALID = 4001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class PunditError(Exception):
    """
    Base exception for all pundit errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Subject Errors
# =============================================================================


@dataclass
class InvalidSubjectError(PunditError, TypeError):
    """
    Raised when the subject is neither a class nor an instance of one.

    Raised before any policy lookup. None and instances of builtin
    types (dict, str, int, ...) fall in this category.

    Attributes:
        subject: repr() of the rejected value
    """

    subject: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = "The first parameter should be a class or an instance of one"
        if self.code == 0:
            self.code = ERROR_INVALID_SUBJECT
        self.context["subject"] = self.subject


# =============================================================================
# Definition Errors
# =============================================================================


@dataclass
class NotDefinedError(PunditError):
    """
    Raised when a policy or one of its actions cannot be found.

    This signals a missing integration: the subject type has no policy,
    the policy could not be imported, or it does not implement the
    action with a (subject, user) signature.

    Attributes:
        policy: The policy identifier that was looked up
        action: The action that was requested
    """

    policy: str = ""
    action: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"{self.policy}.{self.action} is not defined."
        if self.code == 0:
            self.code = ERROR_NOT_DEFINED
        if not self.suggestion:
            self.suggestion = (
                "Define a nested Policy class on the subject type or register one"
            )
        self.context.update({
            "policy": self.policy,
            "action": self.action,
        })


@dataclass
class ScopeNotDefinedError(NotDefinedError):
    """Raised when a policy has no scope(query, user) method."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.action:
            self.action = "scope"
        if not self.message:
            self.message = f"Function scope/2 not defined on {self.policy}"
        if self.code == 0:
            self.code = ERROR_SCOPE_NOT_DEFINED
        if not self.suggestion:
            self.suggestion = "Add a scope(self, query, user) method to the policy"
        super().__post_init__()


# =============================================================================
# Authorization Errors
# =============================================================================


@dataclass
class NotAuthorizedError(PunditError):
    """
    Raised by enforce() when the user may not perform the action.

    The message is the same one authorize() puts in its failure result.

    Attributes:
        action: The action that was denied
    """

    action: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = "The user is not authorized to perform the given action."
        if self.code == 0:
            self.code = ERROR_NOT_AUTHORIZED
        self.context["action"] = self.action


# =============================================================================
# Configuration Errors
# =============================================================================


@dataclass
class ConfigError(PunditError):
    """Raised when a policy map file is unreadable or invalid."""

    path: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid policy map {self.path}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_CONFIG_INVALID
        self.context.update({
            "path": self.path,
            "underlying_error": self.underlying_error,
        })
