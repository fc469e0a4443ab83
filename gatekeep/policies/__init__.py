"""
Policy system for Gatekeep.

Policies are classes that answer named questions about what a user may do
with a record. The registry is the explicit table policy names are looked
up in.

Quick Start:
    >>> from gatekeep.policies import Policy, PolicyRegistry, Scope
    >>>
    >>> registry = PolicyRegistry()
    >>>
    >>> @registry.policy()
    ... class PostPolicy(Policy):
    ...     def show(self) -> bool:
    ...         return True
    ...
    ...     class Scope(Scope):
    ...         def resolve(self):
    ...             return [post for post in self.scope if post.published]
"""

from gatekeep.policies.base import (
    Policy,
    Scope,
    call_predicate,
)
from gatekeep.policies.builtin import (
    AllowAllPolicy,
    DenyAllPolicy,
    OwnershipPolicy,
)
from gatekeep.policies.registry import (
    PolicyRegistry,
    get_global_registry,
    register_policy,
    reset_global_registry,
)

__all__ = [
    # Base classes
    "Policy",
    "Scope",
    "call_predicate",
    # Registry
    "PolicyRegistry",
    "get_global_registry",
    "reset_global_registry",
    "register_policy",
    # Built-in policies
    "DenyAllPolicy",
    "AllowAllPolicy",
    "OwnershipPolicy",
]
