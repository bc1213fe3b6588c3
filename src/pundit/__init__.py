"""
pundit - Convention-based authorization helpers.

Each subject type gets a policy: a nested class named Policy (or one
registered explicitly) whose methods answer the standard permission
checks. Policies subclass DefaultPolicy so every check is denied until
overridden:

    class Post:
        class Policy(DefaultPolicy):
            def edit(self, post, user):
                return user.name == post.author

    pundit.edit(post, author)            # Post.Policy().edit(post, author)
    pundit.enforce(post, author, "edit") # raises NotAuthorizedError on denial
    pundit.scope(Post, author)           # Post.Policy().scope(Post, author)

Example usage:
    $ pundit inspect app.models.Post
    $ pundit doctor --config policies.yaml
"""

from typing import Any

from pundit.dispatcher import Dispatcher, query_entity, subject_type
from pundit.errors import (
    ConfigError,
    InvalidSubjectError,
    NotAuthorizedError,
    NotDefinedError,
    PunditError,
    ScopeNotDefinedError,
)
from pundit.policy import PERMISSION_ACTIONS, DefaultPolicy, is_well_formed
from pundit.registry import (
    PolicyRegistry,
    default_registry,
    policy_for,
    register_policy,
)
from pundit.schema import Action, AuthorizationResult, PunditConfig, load_config

__version__ = "1.0.0"
__author__ = "pundit Contributors"

default_dispatcher = Dispatcher(default_registry)


def can(subject: Any, user: Any, action: Action | str) -> Any:
    """Determine if a user can perform an action on a subject."""
    return default_dispatcher.can(subject, user, action)


def index(subject: Any, user: Any) -> bool:
    """True only if the user may see a list of the given things."""
    return default_dispatcher.index(subject, user)


def show(subject: Any, user: Any) -> bool:
    """True only if the user may see the given thing."""
    return default_dispatcher.show(subject, user)


def create(subject: Any, user: Any) -> bool:
    """True only if the user may create a new kind of thing."""
    return default_dispatcher.create(subject, user)


def new(subject: Any, user: Any) -> bool:
    """True only if the user may see a form to create a new thing."""
    return default_dispatcher.new(subject, user)


def update(subject: Any, user: Any) -> bool:
    """True only if the user may update the attributes of a thing."""
    return default_dispatcher.update(subject, user)


def edit(subject: Any, user: Any) -> bool:
    """True only if the user may see a form for updating the thing."""
    return default_dispatcher.edit(subject, user)


def delete(subject: Any, user: Any) -> bool:
    """True only if the user may delete the thing."""
    return default_dispatcher.delete(subject, user)


def authorize(subject: Any, user: Any, action: Action | str) -> AuthorizationResult:
    """Return an AuthorizationResult for the action."""
    return default_dispatcher.authorize(subject, user, action)


def enforce(subject: Any, user: Any, action: Action | str) -> bool:
    """Raise NotAuthorizedError unless the user can perform the action."""
    return default_dispatcher.enforce(subject, user, action)


def scope(query: Any, user: Any) -> Any:
    """Narrow a query or model class to what the user may see."""
    return default_dispatcher.scope(query, user)


__all__ = [
    "__version__",
    "__author__",
    "Action",
    "AuthorizationResult",
    "ConfigError",
    "DefaultPolicy",
    "Dispatcher",
    "InvalidSubjectError",
    "NotAuthorizedError",
    "NotDefinedError",
    "PERMISSION_ACTIONS",
    "PolicyRegistry",
    "PunditConfig",
    "PunditError",
    "ScopeNotDefinedError",
    "authorize",
    "can",
    "create",
    "default_dispatcher",
    "default_registry",
    "delete",
    "edit",
    "enforce",
    "index",
    "is_well_formed",
    "load_config",
    "new",
    "policy_for",
    "query_entity",
    "register_policy",
    "scope",
    "show",
    "subject_type",
    "update",
]
