"""
Built-in policies for Gatekeep.

Commonly used policy implementations that can be registered directly or
extended for custom authorization logic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from gatekeep.policies.base import Policy

logger = logging.getLogger(__name__)


class DenyAllPolicy(Policy[Any]):
    """
    Policy that denies every query, including ones it does not define.

    Example:
        >>> registry.register("LegacyReportPolicy", DenyAllPolicy)
    """

    def __getattr__(self, name: str) -> Callable[[], bool]:
        if name.startswith("_"):
            raise AttributeError(name)

        def deny() -> bool:
            logger.debug(f"DenyAllPolicy: Denying '{name}' for user {self.user!r}")
            return False
        return deny


class AllowAllPolicy(Policy[Any]):
    """
    Policy that allows every query.

    WARNING: This policy should ONLY be used for testing or in
    development environments. A warning is logged every time it is
    instantiated to help catch accidental production usage.
    """

    def __init__(self, user: Any, record: Any = None) -> None:
        super().__init__(user, record)
        logger.warning(
            f"AllowAllPolicy instantiated for user {user!r}. "
            "This policy allows ALL queries and should NOT be used in production!"
        )

    def index(self) -> bool:
        return True

    def show(self) -> bool:
        return True

    def create(self) -> bool:
        return True

    def update(self) -> bool:
        return True

    def destroy(self) -> bool:
        return True

    def __getattr__(self, name: str) -> Callable[[], bool]:
        if name.startswith("_"):
            raise AttributeError(name)
        return lambda: True


class OwnershipPolicy(Policy[Any]):
    """
    Policy that allows changes only to the record's owner.

    Attributes:
        owner_field: Attribute on the record holding the owner's id.
        user_id_field: Attribute on the user holding their id.
        allow_non_owner_queries: Queries anyone may perform.

    Example:
        >>> class DocumentPolicy(OwnershipPolicy):
        ...     owner_field = "created_by"
        ...     allow_non_owner_queries = ["index", "show"]
    """

    owner_field: str = "owner_id"
    user_id_field: str = "id"
    allow_non_owner_queries: list[str] = []

    def is_owner(self) -> bool:
        """Check if the user owns the record."""
        if self.record is None or self.user is None:
            return False

        owner_id = getattr(self.record, self.owner_field, None)
        if owner_id is None:
            owner_id = getattr(self.record, "user_id", None)

        user_id = getattr(self.user, self.user_id_field, None)
        return owner_id is not None and owner_id == user_id

    def _permits(self, query: str) -> bool:
        if query in self.allow_non_owner_queries:
            logger.debug(f"OwnershipPolicy: '{query}' allowed for non-owners")
            return True

        is_owner = self.is_owner()
        logger.debug(
            f"OwnershipPolicy: user {self.user!r} is "
            f"{'owner' if is_owner else 'not owner'}, "
            f"{'allowing' if is_owner else 'denying'} '{query}'"
        )
        return is_owner

    def index(self) -> bool:
        return self._permits("index")

    def show(self) -> bool:
        return self._permits("show")

    def create(self) -> bool:
        return self._permits("create")

    def update(self) -> bool:
        return self._permits("update")

    def destroy(self) -> bool:
        return self._permits("destroy")
