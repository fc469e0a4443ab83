"""
Core type definitions for Gatekeep.

Subjects arrive as arbitrary Python values. Before a policy name can be
derived they are classified into a small tagged variant (Subject), and type
identity is modelled as a structured path (TypePath) rather than a single
dotted string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SubjectKind(str, Enum):
    """How a subject value participates in policy naming."""

    INSTANCE = "instance"
    TYPE_REF = "type_ref"
    SEQUENCE = "sequence"
    SYMBOL = "symbol"


@dataclass(frozen=True)
class Subject:
    """
    A classified subject.

    Attributes:
        kind: Which naming rule applies.
        value: The original value, untouched.

    Example:
        >>> Subject.classify(Post).kind
        <SubjectKind.TYPE_REF: 'type_ref'>
        >>> Subject.classify(["admin", post]).identity.value is post
        True
    """

    kind: SubjectKind
    value: Any

    @classmethod
    def classify(cls, value: Any) -> Subject:
        """Classify a raw value."""
        if isinstance(value, (list, tuple)):
            return cls(SubjectKind.SEQUENCE, value)
        if isinstance(value, type):
            return cls(SubjectKind.TYPE_REF, value)
        if value is None or isinstance(value, str):
            return cls(SubjectKind.SYMBOL, value)
        return cls(SubjectKind.INSTANCE, value)

    @property
    def identity(self) -> Subject:
        """
        The subject that decides policy identity.

        For sequences this is the last element (recursively); an empty
        sequence behaves like an absent subject.
        """
        if self.kind is not SubjectKind.SEQUENCE:
            return self
        if not self.value:
            return Subject(SubjectKind.SYMBOL, None)
        return Subject.classify(self.value[-1]).identity

    @property
    def context(self) -> tuple[Any, ...]:
        """Leading elements of a sequence, used as namespaces."""
        if self.kind is not SubjectKind.SEQUENCE:
            return ()
        return tuple(self.value[:-1])


@dataclass(frozen=True)
class TypePath:
    """
    Structured type identity: namespace segments plus a simple name.

    Example:
        >>> TypePath(("Admin",), "Post").with_suffix("Policy").join(".")
        'Admin.PostPolicy'
    """

    namespace: tuple[str, ...]
    name: str

    @classmethod
    def parse(cls, text: str, separator: str) -> TypePath:
        """
        Split a qualified name into a path.

        Example:
            >>> TypePath.parse("Legacy.PostPolicy", ".")
            TypePath(namespace=('Legacy',), name='PostPolicy')
        """
        parts = [part for part in text.split(separator) if part]
        if not parts:
            return cls((), "")
        return cls(tuple(parts[:-1]), parts[-1])

    @property
    def segments(self) -> tuple[str, ...]:
        return (*self.namespace, self.name)

    def join(self, separator: str) -> str:
        """Render as a registry key."""
        return separator.join(self.segments)

    def with_suffix(self, suffix: str) -> TypePath:
        return TypePath(self.namespace, f"{self.name}{suffix}")

    def child(self, name: str) -> TypePath:
        """Path of a name nested under this one."""
        return TypePath(self.segments, name)

    def within(self, namespace: tuple[str, ...]) -> TypePath:
        """Prefix additional namespace segments."""
        return TypePath((*namespace, *self.namespace), self.name)
