"""
Policy resolution and authorization.

The Resolver ties the finder to policy instances: it locates the policy or
scope class for a record, constructs it with ``(user, record)``, and either
asks it a question (``authorize``) or resolves the scope
(``policy_scope``). Nothing is cached; every call re-resolves and
constructs fresh instances.
"""

from __future__ import annotations

import logging
from typing import Any

from gatekeep.config import DEFAULT_CONFIG, ResolverConfig
from gatekeep.exceptions import NotAuthorizedError, UndefinedQueryError
from gatekeep.finder import PolicyFinder
from gatekeep.policies.base import call_predicate
from gatekeep.policies.registry import PolicyRegistry, get_global_registry

logger = logging.getLogger(__name__)


class Resolver:
    """
    Authorization entry points over a policy registry.

    Example:
        >>> resolver = Resolver(registry)
        >>> post = resolver.authorize(user, post, "update?")
        >>> visible = resolver.policy_scope(user, all_posts)
    """

    def __init__(
        self,
        registry: PolicyRegistry | None = None,
        config: ResolverConfig | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            registry: Registry to resolve names against. The global
                registry is used when omitted, looked up on each call.
            config: Naming and dispatch conventions.
        """
        self._registry = registry
        self.config = config or DEFAULT_CONFIG

    @property
    def registry(self) -> PolicyRegistry:
        if self._registry is not None:
            return self._registry
        return get_global_registry()

    def authorize(
        self,
        user: Any,
        record: Any,
        query: str,
        *,
        policy_class: Any = None,
    ) -> Any:
        """
        Check that the user may perform ``query`` on the record.

        Args:
            user: The actor.
            record: The subject being checked.
            query: Name of the predicate to ask, e.g. "show?".
            policy_class: Use this policy class instead of looking one up.

        Returns:
            The record, unchanged.

        Raises:
            NotDefinedError: If no policy class is registered for the record.
            NotAuthorizedError: If the predicate returned a falsy answer.
            UndefinedQueryError: If the policy has no such predicate.

        Example:
            >>> post = resolver.authorize(user, post, "update?")
        """
        if policy_class is not None:
            policy = policy_class(user, record)
        else:
            policy = self.policy_or_raise(user, record)

        if not call_predicate(policy, query, self.config):
            logger.debug(f"{type(policy).__name__} denied '{query}' for user {user!r}")
            raise NotAuthorizedError(query=query, record=record, policy=policy)

        return record

    def policy(self, user: Any, record: Any) -> Any | None:
        """
        The policy instance for a record, or None if no policy is registered.
        """
        policy_class = self.policy_finder(record).policy()
        if policy_class is None:
            return None
        return policy_class(user, record)

    def policy_or_raise(self, user: Any, record: Any) -> Any:
        """
        The policy instance for a record.

        Raises:
            NotDefinedError: If no policy is registered.
        """
        return self.policy_finder(record).policy_or_raise()(user, record)

    def policy_scope(self, user: Any, scope: Any) -> Any | None:
        """
        Resolve the policy scope for a collection.

        Returns:
            Whatever the scope's ``resolve()`` returns, or None if no scope
            class is registered.
        """
        scope_class = self.policy_finder(scope).scope()
        if scope_class is None:
            return None
        return scope_class(user, scope).resolve()

    def policy_scope_or_raise(self, user: Any, scope: Any) -> Any:
        """
        Resolve the policy scope for a collection.

        Raises:
            NotDefinedError: If no scope class is registered.
        """
        return self.policy_finder(scope).scope_or_raise()(user, scope).resolve()

    def permitted_attributes(
        self,
        user: Any,
        record: Any,
        action: str | None = None,
    ) -> Any:
        """
        Attributes the user may assign on the record.

        Asks the policy for ``permitted_attributes_for_<action>`` when an
        action is given and the policy defines it, otherwise for
        ``permitted_attributes``.

        Raises:
            NotDefinedError: If no policy is registered.
            UndefinedQueryError: If the policy defines neither.

        Example:
            >>> resolver.permitted_attributes(user, post, "update")
            ['title', 'body']
        """
        policy = self.policy_or_raise(user, record)

        candidates = []
        if action:
            candidates.append(f"permitted_attributes_for_{action}")
        candidates.append("permitted_attributes")

        for name in candidates:
            attribute = getattr(policy, name, None)
            if attribute is not None:
                return attribute() if callable(attribute) else attribute

        raise UndefinedQueryError(
            query=candidates[-1],
            policy=policy,
            candidates=candidates,
        )

    def policy_finder(self, subject: Any) -> PolicyFinder:
        """Finder for a subject; override to customise lookup."""
        return PolicyFinder(subject, self.registry, self.config)


_default_resolver = Resolver()


def authorize(user: Any, record: Any, query: str, *, policy_class: Any = None) -> Any:
    """Authorize against the global registry. See Resolver.authorize."""
    return _default_resolver.authorize(user, record, query, policy_class=policy_class)


def policy(user: Any, record: Any) -> Any | None:
    """Policy instance from the global registry, or None."""
    return _default_resolver.policy(user, record)


def policy_or_raise(user: Any, record: Any) -> Any:
    """Policy instance from the global registry."""
    return _default_resolver.policy_or_raise(user, record)


def policy_scope(user: Any, scope: Any) -> Any | None:
    """Resolved scope from the global registry, or None."""
    return _default_resolver.policy_scope(user, scope)


def policy_scope_or_raise(user: Any, scope: Any) -> Any:
    """Resolved scope from the global registry."""
    return _default_resolver.policy_scope_or_raise(user, scope)
