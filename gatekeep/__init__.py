"""
Gatekeep: convention-based policy resolution for Python applications.

Gatekeep locates the policy class responsible for a record's type, asks it
a named question, and either returns the record or raises. It also
resolves the scope class nested in a policy to filter collections.

Basic Usage:
    >>> from gatekeep import Policy, PolicyRegistry, Resolver, Scope
    >>>
    >>> registry = PolicyRegistry()
    >>>
    >>> @registry.policy()
    ... class PostPolicy(Policy):
    ...     def update(self) -> bool:
    ...         return self.record.author_id == self.user.id
    ...
    ...     class Scope(Scope):
    ...         def resolve(self):
    ...             return [post for post in self.scope if post.published]
    >>>
    >>> resolver = Resolver(registry)
    >>> resolver.authorize(user, post, "update?")
    >>> resolver.policy_scope(user, posts)
"""

__version__ = "0.1.0"

from gatekeep.config import ResolverConfig
from gatekeep.exceptions import (
    ConfigurationError,
    GatekeepError,
    NotAuthorizedError,
    NotDefinedError,
    UndefinedQueryError,
)
from gatekeep.finder import PolicyFinder
from gatekeep.policies import (
    AllowAllPolicy,
    DenyAllPolicy,
    OwnershipPolicy,
    Policy,
    PolicyRegistry,
    Scope,
    get_global_registry,
    register_policy,
    reset_global_registry,
)
from gatekeep.resolver import (
    Resolver,
    authorize,
    policy,
    policy_or_raise,
    policy_scope,
    policy_scope_or_raise,
)
from gatekeep.types import Subject, SubjectKind, TypePath

__all__ = [
    # Version
    "__version__",
    # Resolution
    "Resolver",
    "PolicyFinder",
    "ResolverConfig",
    "authorize",
    "policy",
    "policy_or_raise",
    "policy_scope",
    "policy_scope_or_raise",
    # Policies
    "Policy",
    "Scope",
    "PolicyRegistry",
    "get_global_registry",
    "reset_global_registry",
    "register_policy",
    "AllowAllPolicy",
    "DenyAllPolicy",
    "OwnershipPolicy",
    # Types
    "Subject",
    "SubjectKind",
    "TypePath",
    # Exceptions
    "GatekeepError",
    "NotAuthorizedError",
    "NotDefinedError",
    "UndefinedQueryError",
    "ConfigurationError",
]
