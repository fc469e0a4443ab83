"""
Policy base classes for Gatekeep.

Policies are plain classes constructed from ``(user, record)`` that answer
named predicates; scopes are constructed from ``(user, scope)`` and expose
``resolve()``. Nothing in the resolver requires inheriting from these
classes. They provide a secure-by-default starting point and the
predicate dispatch shared with the resolver.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Generic, TypeVar

from gatekeep.config import DEFAULT_CONFIG, ResolverConfig
from gatekeep.exceptions import UndefinedQueryError

logger = logging.getLogger(__name__)

# Type variable for the record being authorized
T = TypeVar("T")


def _definition_depth(policy: Any, name: str) -> int:
    """
    How far up the class hierarchy ``name`` is defined.

    Instance attributes sit at -1 and the policy's own class at 0. Names
    that only resolve through ``__getattr__`` sort after every class.
    """
    if name in getattr(policy, "__dict__", {}):
        return -1
    mro = type(policy).__mro__
    for depth, klass in enumerate(mro):
        if name in vars(klass):
            return depth
    return len(mro)


def call_predicate(
    policy: Any,
    query: str,
    config: ResolverConfig | None = None,
) -> Any:
    """
    Ask a policy a named question.

    The query is a name, not a callable. A trailing "?" is dropped and each
    configured prefix yields a candidate ("show?" -> ``show``, then
    ``can_show``). The candidate defined closest to the policy's own class
    wins, so a subclass's ``can_show`` beats the ``show`` it inherits from
    Policy; within one class the prefix order decides. Methods are called
    with no arguments; plain attributes and properties are used as values.

    Args:
        policy: The policy instance.
        query: The predicate name, e.g. "show?".
        config: Naming conventions; defaults to ResolverConfig().

    Returns:
        Whatever the predicate returned (callers test truthiness).

    Raises:
        UndefinedQueryError: If the policy answers none of the candidates.
    """
    config = config or DEFAULT_CONFIG
    candidates = config.predicate_candidates(query)
    public = [name for name in candidates if not name.startswith("_")]
    ordered = sorted(public, key=lambda name: _definition_depth(policy, name))

    for name in ordered:
        try:
            predicate = getattr(policy, name)
        except AttributeError:
            continue
        return predicate() if callable(predicate) else predicate

    raise UndefinedQueryError(query=str(query), policy=policy, candidates=candidates)


class Policy(Generic[T]):
    """
    Base class for policies.

    Every standard predicate denies by default; subclasses open up what
    they need. ``new`` follows ``create`` and ``edit`` follows ``update``.

    Attributes:
        user: The actor being authorized.
        record: The subject being accessed. May be an instance, a class,
            a symbol-like string, or the full namespaced sequence.

    Example:
        >>> class PostPolicy(Policy):
        ...     def show(self) -> bool:
        ...         return self.record.published or self.owns_record()
        ...
        ...     def update(self) -> bool:
        ...         return self.owns_record()
        ...
        ...     def owns_record(self) -> bool:
        ...         return self.record.author_id == self.user.id
    """

    def __init__(self, user: Any, record: T | None = None) -> None:
        self.user = user
        self.record = record

    def index(self) -> bool:
        return False

    def show(self) -> bool:
        return False

    def create(self) -> bool:
        return False

    def new(self) -> bool:
        return self.create()

    def update(self) -> bool:
        return False

    def edit(self) -> bool:
        return self.update()

    def destroy(self) -> bool:
        return False

    def can(self, query: str) -> bool:
        """
        Answer a query by name.

        Example:
            >>> PostPolicy(user, post).can("update?")
            False
        """
        return bool(call_predicate(self, query))

    @classmethod
    def queries(cls) -> list[str]:
        """
        Public predicate names answered by this policy.

        Example:
            >>> class ReportPolicy(Policy):
            ...     def export(self) -> bool:
            ...         return True
            >>> "export" in ReportPolicy.queries()
            True
        """
        hidden = {"can", "queries"}
        names = []
        for name, _ in inspect.getmembers(cls, inspect.isfunction):
            if name.startswith("_") or name in hidden:
                continue
            if name.startswith("permitted_attributes"):
                continue
            names.append(name)
        return sorted(names)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(user={self.user!r}, record={self.record!r})"


class Scope(Generic[T]):
    """
    Base class for filtering collections a user may see.

    Nest a Scope subclass inside a policy to have it found by
    ``policy_scope``.

    Example:
        >>> class PostPolicy(Policy):
        ...     class Scope(Scope):
        ...         def resolve(self):
        ...             if self.user.admin:
        ...                 return self.scope
        ...             return [post for post in self.scope if post.published]
    """

    def __init__(self, user: Any, scope: Any) -> None:
        self.user = user
        self.scope = scope

    def resolve(self) -> Any:
        """
        Filter the scope to what the user may see.

        Subclasses override this; the default exposes nothing.
        """
        logger.debug(f"{type(self).__name__}.resolve not overridden, returning empty list")
        return []
