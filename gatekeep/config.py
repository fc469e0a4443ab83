"""
Resolver configuration for Gatekeep.

The naming conventions used to locate policies are collected in a single
ResolverConfig so an application can adjust them in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from gatekeep.exceptions import ConfigurationError


@dataclass(frozen=True)
class ResolverConfig:
    """
    Naming and dispatch conventions for policy resolution.

    Attributes:
        policy_suffix: Appended to a subject's base name to form the policy
            name ("Post" -> "PostPolicy").
        scope_attribute: Name of the scope class nested in a policy
            ("PostPolicy" -> "PostPolicy.Scope").
        separator: Joins namespace segments in registry keys.
        predicate_prefixes: Prefixes tried, in order, when looking up a
            predicate on a policy. The empty prefix tries the bare name.
        strip_query_suffix: Trailing marker removed from query names
            before lookup ("show?" -> "show").

    Example:
        >>> config = ResolverConfig(policy_suffix="Permissions")
        >>> resolver = Resolver(registry, config=config)
    """

    policy_suffix: str = "Policy"
    scope_attribute: str = "Scope"
    separator: str = "."
    predicate_prefixes: tuple[str, ...] = ("", "can_")
    strip_query_suffix: str = "?"

    def __post_init__(self) -> None:
        """Validate naming settings."""
        for key in ("policy_suffix", "scope_attribute", "separator"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(
                    config_key=key,
                    expected="a non-empty string",
                    received=value,
                )
        if not self.predicate_prefixes:
            raise ConfigurationError(
                config_key="predicate_prefixes",
                expected="at least one prefix",
                received=self.predicate_prefixes,
            )
        if isinstance(self.predicate_prefixes, str):
            raise ConfigurationError(
                config_key="predicate_prefixes",
                expected="a tuple of strings",
                received=self.predicate_prefixes,
            )

    def predicate_candidates(self, query: str) -> list[str]:
        """
        Attribute names to try for a query, in lookup order.

        Example:
            >>> ResolverConfig().predicate_candidates("show?")
            ['show', 'can_show']
        """
        name = str(query)
        if self.strip_query_suffix and name.endswith(self.strip_query_suffix):
            name = name[: -len(self.strip_query_suffix)]
        candidates: list[str] = []
        for prefix in self.predicate_prefixes:
            candidate = f"{prefix}{name}"
            if candidate not in candidates:
                candidates.append(candidate)
        return candidates

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "policy_suffix": self.policy_suffix,
            "scope_attribute": self.scope_attribute,
            "separator": self.separator,
            "predicate_prefixes": list(self.predicate_prefixes),
            "strip_query_suffix": self.strip_query_suffix,
        }


DEFAULT_CONFIG = ResolverConfig()
