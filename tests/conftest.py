"""
Pytest fixtures for Gatekeep tests.

Provides common fixtures used across all test modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generator

import pytest

from gatekeep import Policy, PolicyRegistry, Resolver, Scope
from gatekeep.policies.registry import reset_global_registry


# ============================================================================
# Domain Models
# ============================================================================


@dataclass
class User:
    id: int
    admin: bool = False
    roles: list[str] = field(default_factory=list)


@dataclass
class Post:
    id: int
    author_id: int
    published: bool = True
    title: str = ""


class Collection:
    """Query-set stand-in: the records of one model."""

    def __init__(self, model: type, records: Any) -> None:
        self.model = model
        self.records = list(records)

    def __iter__(self):
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def policy_model(self) -> type:
        return self.model

    def filter(self, predicate: Any) -> Collection:
        return Collection(self.model, [record for record in self.records if predicate(record)])


class PostPolicy(Policy):
    """Authors edit their own posts; everyone sees published ones."""

    def show(self) -> bool:
        return self.record.published or self.record.author_id == self.user.id

    def update(self) -> bool:
        return self.record.author_id == self.user.id

    def destroy(self) -> bool:
        return self.user.admin

    def permitted_attributes(self) -> list[str]:
        return ["title"]

    def permitted_attributes_for_publish(self) -> list[str]:
        return ["published"]

    class Scope(Scope):
        def resolve(self) -> Collection:
            if self.user.admin:
                return self.scope
            return self.scope.filter(lambda post: post.published)


# ============================================================================
# User Fixtures
# ============================================================================


@pytest.fixture
def basic_user() -> User:
    """Create a basic user for testing."""
    return User(id=1, roles=["user"])


@pytest.fixture
def admin_user() -> User:
    """Create an admin user for testing."""
    return User(id=99, admin=True, roles=["admin", "user"])


# ============================================================================
# Record Fixtures
# ============================================================================


@pytest.fixture
def own_post(basic_user: User) -> Post:
    return Post(id=10, author_id=basic_user.id, title="Mine")


@pytest.fixture
def other_post() -> Post:
    return Post(id=11, author_id=2, title="Theirs")


@pytest.fixture
def draft_post() -> Post:
    return Post(id=12, author_id=2, published=False, title="Draft")


@pytest.fixture
def posts(own_post: Post, other_post: Post, draft_post: Post) -> Collection:
    return Collection(Post, [own_post, other_post, draft_post])


# ============================================================================
# Registry Fixtures
# ============================================================================


@pytest.fixture
def policy_registry() -> PolicyRegistry:
    """Create a fresh, empty registry."""
    return PolicyRegistry()


@pytest.fixture
def post_registry(policy_registry: PolicyRegistry) -> PolicyRegistry:
    """Registry with PostPolicy registered by convention."""
    policy_registry.register_by_convention(PostPolicy)
    return policy_registry


@pytest.fixture
def resolver(post_registry: PolicyRegistry) -> Resolver:
    return Resolver(post_registry)


@pytest.fixture(autouse=True)
def clean_global_registry() -> Generator[None, None, None]:
    """Make sure no test leaks registrations into the global registry."""
    reset_global_registry()
    yield
    reset_global_registry()
