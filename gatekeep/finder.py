"""
Policy and scope finder.

Maps a subject to the policy class and scope class that govern it. The
lenient lookups return None when nothing is registered; the ``_or_raise``
variants raise NotDefinedError carrying the name that was attempted.
"""

from __future__ import annotations

import logging
from typing import Any

from gatekeep.config import DEFAULT_CONFIG, ResolverConfig
from gatekeep.exceptions import ConfigurationError, NotDefinedError
from gatekeep.naming import class_path, sequence_namespace, type_path
from gatekeep.policies.registry import PolicyRegistry, get_global_registry
from gatekeep.types import Subject, SubjectKind, TypePath

logger = logging.getLogger(__name__)

POLICY_CLASS_ATTRIBUTE = "policy_class"


class PolicyFinder:
    """
    Finds the policy and scope classes for a subject.

    Name derivation:
        - a sequence is named after its last element, with the leading
          elements as namespaces: ``[Admin, post]`` -> ``Admin.PostPolicy``
        - a class is named after itself: ``Post`` -> ``PostPolicy``
        - None or a string is camelized: ``"dashboard"`` -> ``DashboardPolicy``
        - anything else is named after its type, or after the class in its
          ``policy_model`` attribute when it declares one
        - a ``policy_class`` attribute on the subject or its type overrides
          all of the above; a policy name given there keeps the namespace
          of the enclosing sequence

    The scope name is the policy name with the scope attribute appended:
    ``PostPolicy.Scope``.

    Example:
        >>> finder = PolicyFinder(post, registry)
        >>> finder.policy_name
        'PostPolicy'
        >>> finder.policy() is PostPolicy
        True
    """

    def __init__(
        self,
        subject: Any,
        registry: PolicyRegistry | None = None,
        config: ResolverConfig | None = None,
    ) -> None:
        self.subject = subject
        self.registry = registry if registry is not None else get_global_registry()
        self.config = config or DEFAULT_CONFIG
        self._classified = Subject.classify(subject)

    def _override(self) -> Any:
        """
        A ``policy_class`` declared by the subject or its type, if any.

        A callable that is not a class (such as a classmethod) is called
        and its result used.

        Raises:
            ConfigurationError: If the declaration is neither a class nor
                a policy name.
        """
        target = self._classified.identity
        if target.kind is SubjectKind.SYMBOL:
            return None
        override = getattr(target.value, POLICY_CLASS_ATTRIBUTE, None)
        if override is None and target.kind is SubjectKind.INSTANCE:
            override = getattr(type(target.value), POLICY_CLASS_ATTRIBUTE, None)
        if callable(override) and not isinstance(override, type):
            override = override()
        if override is not None and not isinstance(override, (str, type)):
            raise ConfigurationError(
                config_key=POLICY_CLASS_ATTRIBUTE,
                expected="a policy class or a policy name",
                received=override,
            )
        return override

    def _policy_path(self) -> TypePath | None:
        override = self._override()
        if isinstance(override, type):
            return class_path(override)
        if isinstance(override, str):
            path = TypePath.parse(override, self.config.separator)
            if not path.name:
                return None
            return path.within(sequence_namespace(self._classified))
        base = type_path(self._classified)
        if not base.name:
            return None
        return base.with_suffix(self.config.policy_suffix)

    @property
    def policy_name(self) -> str | None:
        """Qualified name of the policy class for this subject."""
        path = self._policy_path()
        if path is None:
            return None
        return path.join(self.config.separator)

    @property
    def scope_name(self) -> str | None:
        """Qualified name of the scope class for this subject."""
        path = self._policy_path()
        if path is None:
            return None
        return path.child(self.config.scope_attribute).join(self.config.separator)

    def policy(self) -> Any | None:
        """
        The policy class for the subject, or None if none is registered.
        """
        override = self._override()
        if isinstance(override, type):
            return override

        name = self.policy_name
        if name is None:
            return None
        policy_class = self.registry.lookup(name)
        if policy_class is None:
            logger.debug(f"No policy '{name}' for {type(self.subject).__name__} subject")
        return policy_class

    def policy_or_raise(self) -> Any:
        """
        The policy class for the subject.

        Raises:
            NotDefinedError: If no policy class is registered.
        """
        policy_class = self.policy()
        if policy_class is None:
            raise NotDefinedError(record=self.subject, policy_name=self.policy_name)
        return policy_class

    def scope(self) -> Any | None:
        """
        The scope class for the subject, or None if none is registered.

        A declared policy class is searched for its nested scope first.
        """
        override = self._override()
        if isinstance(override, type):
            return getattr(override, self.config.scope_attribute, None)

        name = self.scope_name
        if name is None:
            return None
        scope_class = self.registry.lookup(name)
        if scope_class is None:
            logger.debug(f"No scope '{name}' for {type(self.subject).__name__} subject")
        return scope_class

    def scope_or_raise(self) -> Any:
        """
        The scope class for the subject.

        Raises:
            NotDefinedError: If no scope class is registered.
        """
        scope_class = self.scope()
        if scope_class is None:
            raise NotDefinedError(record=self.subject, policy_name=self.scope_name)
        return scope_class
