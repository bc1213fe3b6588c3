"""
Default Policy Template for pundit.

A policy is any object that answers the seven standard permission
checks, each called as method(subject, user) and returning a bool.
Subclass DefaultPolicy to start with everything denied and override
only the checks that should ever say yes:

    class Post:
        class Policy(DefaultPolicy):
            def edit(self, post, user):
                return user.name == post.author

A policy that does not subclass DefaultPolicy is still accepted as long
as it implements all seven checks. scope() is not part of the template:
define it on the policy when the subject type supports collection
scoping.
"""

import inspect
from typing import Any, Callable

from pundit.schema import Action

PERMISSION_ACTIONS: tuple[str, ...] = tuple(action.value for action in Action)


class DefaultPolicy:
    """
    Deny-by-default base for policies.

    Every check returns False until a subclass overrides it.
    """

    def index(self, subject: Any, user: Any) -> bool:
        """Whether the user may list things of this kind."""
        return False

    def show(self, subject: Any, user: Any) -> bool:
        """Whether the user may see the subject."""
        return False

    def create(self, subject: Any, user: Any) -> bool:
        """Whether the user may create a new thing of this kind."""
        return False

    def new(self, subject: Any, user: Any) -> bool:
        """Whether the user may see the form for creating a new thing."""
        return False

    def update(self, subject: Any, user: Any) -> bool:
        """Whether the user may update the subject's attributes."""
        return False

    def edit(self, subject: Any, user: Any) -> bool:
        """Whether the user may see the form for updating the subject."""
        return False

    def delete(self, subject: Any, user: Any) -> bool:
        """Whether the user may delete the subject."""
        return False

    def __repr__(self) -> str:
        return f"<{self.__class__.__qualname__}>"


def accepts_subject_and_user(fn: Callable[..., Any]) -> bool:
    """
    Check that fn can be called as fn(subject, user).

    Callables whose signature can't be introspected (some builtins and
    C extensions) are assumed to accept the call.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return True
    try:
        signature.bind(None, None)
    except TypeError:
        return False
    return True


def missing_actions(policy: Any) -> list[str]:
    """Return the standard checks the policy does not implement."""
    missing = []
    for name in PERMISSION_ACTIONS:
        fn = getattr(policy, name, None)
        if fn is None or not callable(fn):
            missing.append(name)
        elif not inspect.isclass(policy) and not accepts_subject_and_user(fn):
            missing.append(name)
    return missing


def is_well_formed(policy: Any) -> bool:
    """True if the policy implements all seven standard checks."""
    return not missing_actions(policy)


def overridden_actions(policy: Any) -> list[str]:
    """
    Return the standard checks a policy defines itself.

    For a DefaultPolicy subclass these are the checks that differ from
    the deny-all default. For any other policy every implemented check
    counts as its own.
    """
    policy_cls = policy if inspect.isclass(policy) else type(policy)
    overridden = []
    for name in PERMISSION_ACTIONS:
        impl = getattr(policy_cls, name, None)
        if impl is None:
            continue
        if impl is not getattr(DefaultPolicy, name):
            overridden.append(name)
    return overridden


def has_scope(policy: Any) -> bool:
    """True if the policy defines scope(query, user)."""
    fn = getattr(policy, "scope", None)
    return fn is not None and callable(fn) and accepts_subject_and_user(fn)
