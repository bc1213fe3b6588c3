"""
Authorization dispatcher for pundit.

The dispatcher answers "may this user do this to that?" by finding the
policy for the subject's type and calling the method named after the
action:

    dispatcher.can(post, user, "edit")

is the same as:

    Post.Policy().edit(post, user)

The subject may be an instance or the class itself. Three outcomes are
kept apart:
    - InvalidSubjectError: the subject is not a class or an instance
    - NotDefinedError: there is no policy, or it has no such action
    - False / a failed AuthorizationResult: the policy said no

Exceptions raised inside a policy method are not caught.
"""

import inspect
import logging
from typing import Any

from pundit.errors import (
    InvalidSubjectError,
    NotAuthorizedError,
    NotDefinedError,
    ScopeNotDefinedError,
)
from pundit.policy import accepts_subject_and_user
from pundit.registry import PolicyRegistry, default_registry
from pundit.schema import SCOPE, Action, AuthorizationResult, action_name

logger = logging.getLogger(__name__)


def subject_type(subject: Any) -> type:
    """
    Return the type whose policy governs a subject.

    Classes are used as-is. Instances of non-builtin classes map to their
    class. Anything else (None, dicts, strings, numbers) is rejected.

    Raises:
        InvalidSubjectError: If the subject is neither form
    """
    if inspect.isclass(subject):
        return subject

    cls = type(subject)
    if subject is not None and cls.__module__ != "builtins":
        return cls

    raise InvalidSubjectError(subject=repr(subject))


def query_entity(query: Any) -> type | None:
    """
    Return the entity class a query selects from, if it can be told.

    Understands SQLAlchemy Select/Query objects (the entity of the first
    column description) and any object with an ``__entity__`` class.
    """
    entity = getattr(query, "__entity__", None)
    if inspect.isclass(entity):
        return entity

    try:
        descriptions = query.column_descriptions
    except AttributeError:
        return None
    if not descriptions:
        return None
    entity = descriptions[0].get("entity")
    return entity if inspect.isclass(entity) else None


class Dispatcher:
    """
    Looks up and invokes policies.

    Usage:
        dispatcher = Dispatcher()
        if dispatcher.edit(post, user):
            ...
        dispatcher.enforce(post, user, "delete")
        visible = dispatcher.scope(select(Post), user)

    Attributes:
        registry: The PolicyRegistry consulted for every lookup
    """

    def __init__(self, registry: PolicyRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry

    # =========================================================================
    # Resolution
    # =========================================================================

    def policy_identifier(self, subject: Any) -> str:
        """The identifier of the policy governing a subject."""
        return self.registry.identifier(subject_type(subject))

    def policy(self, subject: Any) -> Any:
        """
        Return the policy for a subject.

        Raises:
            InvalidSubjectError: If the subject is malformed
            NotDefinedError: If no policy can be loaded
        """
        cls = subject_type(subject)
        policy = self.registry.resolve(cls)
        if policy is None:
            raise NotDefinedError(
                policy=self.registry.identifier(cls),
                message=f"{self.registry.identifier(cls)} is not defined.",
            )
        return policy

    def can(self, subject: Any, user: Any, action: Action | str) -> Any:
        """
        Determine if a user can perform an action on a subject.

        Calls the method named after the action on the subject's policy
        and returns its result unchanged.

        Args:
            subject: An instance, or the class itself
            user: The acting user, passed through untouched
            action: An Action or any method name on the policy

        Raises:
            InvalidSubjectError: If the subject is malformed
            NotDefinedError: If the policy or the action is missing
        """
        name = action_name(action)
        cls = subject_type(subject)
        identifier = self.registry.identifier(cls)

        policy = self.registry.resolve(cls)
        check = None
        if policy is not None and name and not name.startswith("_"):
            check = getattr(policy, name, None)

        if check is None or not callable(check) or not accepts_subject_and_user(check):
            raise NotDefinedError(policy=identifier, action=name)

        logger.debug("Dispatching %s.%s", identifier, name)
        return check(subject, user)

    # =========================================================================
    # Standard Actions
    # =========================================================================

    def index(self, subject: Any, user: Any) -> bool:
        """True only if the user may see a list of the given things."""
        return self.can(subject, user, Action.INDEX)

    def show(self, subject: Any, user: Any) -> bool:
        """True only if the user may see the given thing."""
        return self.can(subject, user, Action.SHOW)

    def create(self, subject: Any, user: Any) -> bool:
        """True only if the user may create a new kind of thing."""
        return self.can(subject, user, Action.CREATE)

    def new(self, subject: Any, user: Any) -> bool:
        """True only if the user may see a form to create a new thing."""
        return self.can(subject, user, Action.NEW)

    def update(self, subject: Any, user: Any) -> bool:
        """True only if the user may update the attributes of a thing."""
        return self.can(subject, user, Action.UPDATE)

    def edit(self, subject: Any, user: Any) -> bool:
        """True only if the user may see a form for updating the thing."""
        return self.can(subject, user, Action.EDIT)

    def delete(self, subject: Any, user: Any) -> bool:
        """True only if the user may delete the thing."""
        return self.can(subject, user, Action.DELETE)

    # =========================================================================
    # Authorization
    # =========================================================================

    def authorize(
        self,
        subject: Any,
        user: Any,
        action: Action | str,
    ) -> AuthorizationResult:
        """
        Return whether a user can perform the action as a result object.

        A denial is a failed result, not an exception. Only malformed
        subjects and missing policies raise.
        """
        if self.can(subject, user, action):
            return AuthorizationResult.ok()

        name = action_name(action)
        return AuthorizationResult.fail(f"User {user!r} cannot {name} {subject!r}")

    def enforce(self, subject: Any, user: Any, action: Action | str) -> bool:
        """
        Raise NotAuthorizedError unless the user can perform the action.

        Returns:
            True when the action is permitted
        """
        result = self.authorize(subject, user, action)
        if not result.allowed:
            raise NotAuthorizedError(
                message=result.message or "",
                action=action_name(action),
            )
        return True

    # =========================================================================
    # Scope
    # =========================================================================

    def scope(self, query: Any, user: Any) -> Any:
        """
        Narrow a query or a model class to what the user may see.

        For a query, the policy of the entity it selects from is used and
        receives the query. For a class, its own policy receives the class.
        The policy's return value is passed back unchanged.

        Raises:
            InvalidSubjectError: If the argument is neither form
            ScopeNotDefinedError: If the policy has no scope method
        """
        if inspect.isclass(query):
            cls = query
        else:
            cls = query_entity(query)
            if cls is None:
                raise InvalidSubjectError(
                    subject=repr(query),
                    message="scope() takes a model class or a query over one",
                )

        identifier = self.registry.identifier(cls)
        policy = self.registry.resolve(cls)
        fn = getattr(policy, SCOPE, None) if policy is not None else None
        if fn is None or not callable(fn) or not accepts_subject_and_user(fn):
            raise ScopeNotDefinedError(policy=identifier)

        logger.debug("Scoping %r through %s", query, identifier)
        return fn(query, user)
