"""
Policy registry for pundit.

The registry maps subject types to their policies. A policy is found,
in order:
    1. In an explicit registration for the subject type
    2. As the nested class named by the suffix ("Policy" by default),
       defined directly on the subject type
    3. The same nested class after force-importing the subject's module

Registrations and nested attributes may be import path strings. They are
imported on first lookup, so policy modules can load lazily and avoid
circular imports with the models they guard. Any import failure counts as
"no policy", never as a separate error.

Usage:
    from pundit.registry import default_registry, policy_for

    @policy_for(Post)
    class PostPolicy(DefaultPolicy):
        def show(self, post, user):
            return post.published

    default_registry.register("app.models.Comment", "app.policies:CommentPolicy")
"""

import importlib
import inspect
import logging
from typing import Any, Callable, Iterator, TypeVar

from pundit.schema import PunditConfig

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = "Policy"

T = TypeVar("T")


def type_path(subject_type: type) -> str:
    """Dotted module.qualname path of a class."""
    return f"{subject_type.__module__}.{subject_type.__qualname__}"


def normalize_path(path: str) -> str:
    """Turn "pkg.mod:Outer.Inner" into "pkg.mod.Outer.Inner"."""
    return path.strip().replace(":", ".")


def _walk(obj: Any, qualname: str) -> Any:
    for attr in qualname.split("."):
        obj = getattr(obj, attr)
    return obj


def import_object(path: str) -> Any:
    """
    Import the object named by a dotted or "module:qualname" path.

    Without a colon the longest importable module prefix is used and the
    rest is looked up as attributes.

    Raises:
        ImportError: If no prefix of the path can be imported
        AttributeError: If the attribute chain doesn't exist
    """
    path = path.strip()
    if ":" in path:
        module_name, _, qualname = path.partition(":")
        module = importlib.import_module(module_name)
        return _walk(module, qualname) if qualname else module

    parts = path.split(".")
    last_error: ImportError | None = None
    for i in range(len(parts), 0, -1):
        module_name = ".".join(parts[:i])
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            last_error = e
            continue
        rest = ".".join(parts[i:])
        return _walk(module, rest) if rest else module

    msg = f"Cannot import {path}"
    raise ImportError(msg) from last_error


class PolicyRegistry:
    """
    Registry for looking up policies by subject type.

    Attributes:
        suffix: Name of the nested policy class looked up by convention
        _policies: Subject path -> policy class, instance or import path
    """

    def __init__(self, suffix: str = DEFAULT_SUFFIX) -> None:
        """Initialize an empty registry."""
        self.suffix = suffix
        self._policies: dict[str, Any] = {}

    @classmethod
    def from_config(cls, config: PunditConfig) -> "PolicyRegistry":
        """Build a registry with the lazy entries of a policy map."""
        registry = cls(suffix=config.suffix)
        for subject, policy in config.policies.items():
            registry.register(subject, policy)
        return registry

    def _key(self, subject_type: type | str) -> str:
        if isinstance(subject_type, str):
            if not subject_type.strip():
                msg = "Subject import path must not be empty"
                raise ValueError(msg)
            return normalize_path(subject_type)
        if not inspect.isclass(subject_type):
            msg = f"Policies are registered for classes, got {subject_type!r}"
            raise ValueError(msg)
        return type_path(subject_type)

    def register(self, subject_type: type | str, policy: Any) -> None:
        """
        Register a policy for a subject type.

        Re-registering a subject type replaces its policy.

        Args:
            subject_type: The class, or its import path
            policy: A policy class, a policy instance, or an import path

        Raises:
            ValueError: If the policy is None or a path is empty
        """
        if policy is None:
            msg = "Cannot register None as a policy"
            raise ValueError(msg)
        if isinstance(policy, str) and not policy.strip():
            msg = "Policy import path must not be empty"
            raise ValueError(msg)

        key = self._key(subject_type)
        if key in self._policies:
            logger.debug("Replacing policy registered for %s", key)
        self._policies[key] = policy

    def policy_for(self, subject_type: type | str) -> Callable[[T], T]:
        """Decorator form of register()."""

        def decorator(policy: T) -> T:
            self.register(subject_type, policy)
            return policy

        return decorator

    def unregister(self, subject_type: type | str) -> bool:
        """
        Remove the explicit registration for a subject type.

        Returns:
            True if a policy was removed, False if none was registered
        """
        key = self._key(subject_type)
        if key in self._policies:
            del self._policies[key]
            return True
        return False

    def has(self, subject_type: type | str) -> bool:
        """Check if a subject type has an explicit registration."""
        return self._key(subject_type) in self._policies

    def clear(self) -> None:
        """Remove all explicit registrations."""
        self._policies.clear()

    def list_policies(self) -> list[str]:
        """Subject paths with an explicit registration, sorted."""
        return sorted(self._policies.keys())

    def identifier(self, subject_type: type) -> str:
        """
        The policy identifier for a subject type.

        This is the path of the explicitly registered policy when there is
        one, otherwise the conventional nested class path.
        """
        key = type_path(subject_type)
        if key in self._policies:
            policy = self._policies[key]
            if isinstance(policy, str):
                return normalize_path(policy)
            policy_cls = policy if inspect.isclass(policy) else type(policy)
            return type_path(policy_cls)
        return f"{key}.{self.suffix}"

    def resolve(self, subject_type: type) -> Any | None:
        """
        Find and load the policy for a subject type.

        Args:
            subject_type: The class being authorized

        Returns:
            A policy instance, or None if no policy can be loaded
        """
        key = type_path(subject_type)

        if key in self._policies:
            policy = self._load(self._policies[key], key)
            if policy is not None:
                logger.debug("Resolved registered policy for %s", key)
            return policy

        policy = subject_type.__dict__.get(self.suffix)
        if policy is not None:
            logger.debug("Resolved %s.%s by convention", key, self.suffix)
            return self._load(policy, key)

        return self._force_load(subject_type)

    def _force_load(self, subject_type: type) -> Any | None:
        """
        Import the subject's module and look for the nested policy again.

        The class object we were handed may predate a reload of its module,
        so the lookup goes through the freshly imported module instead of
        trusting the existing class.
        """
        key = type_path(subject_type)
        try:
            module = importlib.import_module(subject_type.__module__)
            current = _walk(module, subject_type.__qualname__)
        except (ImportError, AttributeError):
            return None
        except Exception as e:
            logger.warning("Could not reload %s while looking for its policy: %s", key, e)
            return None

        policy = getattr(current, "__dict__", {}).get(self.suffix)
        if not inspect.isclass(current) or policy is None:
            return None
        logger.debug("Resolved %s.%s after loading %s", key, self.suffix, module.__name__)
        return self._load(policy, key)

    def _load(self, policy: Any, key: str) -> Any | None:
        """
        Import a policy path if needed and instantiate policy classes.

        Any failure while importing the policy module (including syntax
        errors and exceptions raised by its body) or while instantiating
        the policy class means "no policy".
        """
        if isinstance(policy, str):
            try:
                policy = import_object(policy)
            except Exception as e:
                logger.warning("Could not load policy %s for %s: %s", policy, key, e)
                return None
        if inspect.isclass(policy):
            try:
                return policy()
            except Exception as e:
                logger.warning("Could not instantiate policy %s for %s: %s", policy, key, e)
                return None
        return policy

    def __len__(self) -> int:
        """Return the number of explicit registrations."""
        return len(self._policies)

    def __iter__(self) -> Iterator[str]:
        """Iterate over registered subject paths."""
        return iter(self.list_policies())

    def __contains__(self, subject_type: object) -> bool:
        """Check for an explicit registration using 'in' operator."""
        if not isinstance(subject_type, str) and not inspect.isclass(subject_type):
            return False
        return self.has(subject_type)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        """String representation of the registry."""
        policies = ", ".join(self.list_policies())
        return f"<PolicyRegistry: [{policies}]>"


# Global default registry instance
# This is the registry used by the module-level API
default_registry = PolicyRegistry()


def register_policy(subject_type: type | str, policy: Any) -> None:
    """Register a policy in the default registry."""
    default_registry.register(subject_type, policy)


def policy_for(subject_type: type | str) -> Callable[[T], T]:
    """Decorator registering a policy in the default registry."""
    return default_registry.policy_for(subject_type)
