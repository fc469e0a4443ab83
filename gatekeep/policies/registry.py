"""
Policy registry for Gatekeep.

The registry is the explicit type table policy names are resolved against.
Applications populate it at startup, either by decorating policy classes or
by registering them directly; the finder then looks names up here instead of
scanning global namespaces.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from gatekeep.naming import class_path

logger = logging.getLogger(__name__)


class PolicyRegistry:
    """
    Registry mapping qualified names to policy (and namespace) classes.

    Names are qualified with a separator, "." by default, so a policy for
    ``Admin.Post`` is registered as ``"Admin.PostPolicy"``. Lookups that
    miss an exact key fall back to the longest registered prefix and walk
    the remainder with attribute access, which is how nested scopes
    (``"PostPolicy.Scope"``) and namespace holder classes resolve.

    Example:
        >>> registry = PolicyRegistry()
        >>>
        >>> @registry.policy()
        ... class PostPolicy(Policy):
        ...     def show(self) -> bool:
        ...         return True
        ...
        ...     class Scope(Scope):
        ...         def resolve(self):
        ...             return [p for p in self.scope if p.published]
        >>>
        >>> registry.lookup("PostPolicy") is PostPolicy
        True
        >>> registry.lookup("PostPolicy.Scope") is PostPolicy.Scope
        True

    Thread Safety:
        All operations are thread-safe via internal locking.
    """

    def __init__(self, separator: str = ".") -> None:
        """
        Initialize the registry.

        Args:
            separator: Joins namespace segments in registered names.
        """
        self.separator = separator
        self._policies: dict[str, Any] = {}
        self._lock = threading.RLock()

    def policy(self, name: str | type | None = None) -> Any:
        """
        Decorator for registering a policy class.

        Without a name the key is derived from the class itself
        (see register_by_convention). Usable bare or called.

        Example:
            >>> @registry.policy("Admin.PostPolicy")
            ... class AdminPostPolicy(Policy):
            ...     def destroy(self) -> bool:
            ...         return self.user.admin
        """
        if isinstance(name, type):
            self.register_by_convention(name)
            return name

        def decorator(policy_class: type) -> type:
            if name is None:
                self.register_by_convention(policy_class)
            else:
                self.register(name, policy_class)
            return policy_class
        return decorator

    def register(self, name: str, policy_class: Any) -> None:
        """
        Register a class under a qualified name.

        Registering a name twice replaces the earlier class.

        Args:
            name: Qualified name, e.g. "Admin.PostPolicy".
            policy_class: The class (or namespace holder) to register.
        """
        with self._lock:
            if name in self._policies:
                existing = getattr(self._policies[name], "__name__", repr(self._policies[name]))
                logger.warning(
                    f"Overwriting policy for '{name}': "
                    f"{existing} -> {getattr(policy_class, '__name__', policy_class)!s}"
                )

            self._policies[name] = policy_class

            logger.debug(f"Registered '{name}'")

    def register_by_convention(self, policy_class: type) -> str:
        """
        Register a class under the name derived from its qualified name.

        Returns:
            The name the class was registered under.

        Example:
            >>> class Admin:
            ...     class PostPolicy(Policy):
            ...         pass
            >>> registry.register_by_convention(Admin.PostPolicy)
            'Admin.PostPolicy'
        """
        name = class_path(policy_class).join(self.separator)
        self.register(name, policy_class)
        return name

    def lookup(self, name: str) -> Any | None:
        """
        Resolve a qualified name to a registered class.

        Never raises: any failure while resolving, including a partially
        resolvable namespace, is reported as None.

        Args:
            name: Qualified name, e.g. "Admin.PostPolicy.Scope".

        Returns:
            The resolved class, or None.
        """
        try:
            return self._lookup(name)
        except Exception as e:
            logger.debug(f"Lookup of '{name}' failed: {e}")
            return None

    def _lookup(self, name: str) -> Any | None:
        with self._lock:
            if name in self._policies:
                return self._policies[name]

            parts = name.split(self.separator)
            for index in range(len(parts) - 1, 0, -1):
                prefix = self.separator.join(parts[:index])
                if prefix not in self._policies:
                    continue
                target = self._policies[prefix]
                for attribute in parts[index:]:
                    target = getattr(target, attribute, None)
                    if target is None:
                        break
                if target is not None and callable(target):
                    return target

        logger.debug(f"No class registered for '{name}'")
        return None

    def has_policy(self, name: str) -> bool:
        """Check whether a name resolves."""
        return self.lookup(name) is not None

    def list_policies(self) -> dict[str, str]:
        """
        List all registered names.

        Returns:
            Dictionary mapping registered names to class names.

        Example:
            >>> registry.list_policies()
            {'PostPolicy': 'PostPolicy', 'Admin.PostPolicy': 'PostPolicy'}
        """
        with self._lock:
            return {
                name: getattr(policy, "__name__", repr(policy))
                for name, policy in self._policies.items()
            }

    def unregister(self, name: str) -> bool:
        """
        Unregister a name.

        Returns:
            True if something was unregistered, False otherwise.
        """
        with self._lock:
            if name in self._policies:
                del self._policies[name]
                logger.debug(f"Unregistered '{name}'")
                return True
            return False

    def clear(self) -> None:
        """Clear all registered classes."""
        with self._lock:
            self._policies.clear()
            logger.debug("Cleared all registered policies")

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_policy(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._policies)


# Global registry instance for convenience
_global_registry: PolicyRegistry | None = None
_global_registry_lock = threading.Lock()


def get_global_registry() -> PolicyRegistry:
    """
    Get the global policy registry instance.

    Creates one if it doesn't exist.

    Example:
        >>> from gatekeep.policies.registry import get_global_registry
        >>> @get_global_registry().policy()
        ... class PostPolicy(Policy):
        ...     pass
    """
    global _global_registry
    if _global_registry is not None:
        return _global_registry
    with _global_registry_lock:
        if _global_registry is None:
            _global_registry = PolicyRegistry()
        return _global_registry


def reset_global_registry() -> None:
    """
    Reset the global registry.

    Primarily useful for testing.
    """
    global _global_registry
    with _global_registry_lock:
        if _global_registry is not None:
            _global_registry.clear()
        _global_registry = None


def register_policy(name: str | type | None = None) -> Callable[..., Any] | type:
    """Register a policy class in the global registry."""
    return get_global_registry().policy(name)
