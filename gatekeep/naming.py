"""
Name derivation helpers.

Every function here is pure: given a subject it computes the structured
type path a policy name is derived from, without touching any registry.
"""

from __future__ import annotations

import re
from types import ModuleType
from typing import Any

from gatekeep.types import Subject, SubjectKind, TypePath

_WORD_BOUNDARY = re.compile(r"[_\-\s]+")
_SYMBOL_NAMESPACE = re.compile(r"/|::")
_LOCALS_MARKER = "<locals>"

# Opt-in hook for collections that are authorized as the model they hold
MODEL_ATTRIBUTE = "policy_model"


def camelize(text: str) -> str:
    """
    Convert a snake_case or kebab-case word to CamelCase.

    Existing capitals are preserved.

    Example:
        >>> camelize("admin_dashboard")
        'AdminDashboard'
        >>> camelize("Post")
        'Post'
    """
    return "".join(part[:1].upper() + part[1:] for part in _WORD_BOUNDARY.split(text) if part)


def symbol_to_default_name(value: str | None) -> TypePath:
    """
    Default type path for symbol-shaped subjects.

    Used for "headless" policies that guard something other than a
    model, e.g. ``"dashboard"`` -> ``DashboardPolicy``. A ``/`` (or
    ``::``) separates namespace segments. None is named by its string
    form.

    Example:
        >>> symbol_to_default_name("admin/dashboard")
        TypePath(namespace=('Admin',), name='Dashboard')
    """
    text = "None" if value is None else str(value)
    segments = [camelize(part) for part in _SYMBOL_NAMESPACE.split(text)]
    segments = [segment for segment in segments if segment]
    if not segments:
        return TypePath((), "")
    return TypePath(tuple(segments[:-1]), segments[-1])


def class_path(cls: type) -> TypePath:
    """
    Type path of a class from its qualified name.

    Nested classes keep their enclosing classes as namespace segments.
    Classes defined inside a function drop the ``<locals>`` prefix, and
    the defining module is never part of the path.

    Example:
        >>> class Admin:
        ...     class Post:
        ...         pass
        >>> class_path(Admin.Post)
        TypePath(namespace=('Admin',), name='Post')
    """
    parts = getattr(cls, "__qualname__", cls.__name__).split(".")
    if _LOCALS_MARKER in parts:
        last_marker = len(parts) - 1 - parts[::-1].index(_LOCALS_MARKER)
        parts = parts[last_marker + 1:]
    return TypePath(tuple(parts[:-1]), parts[-1])


def namespace_segments(value: Any) -> tuple[str, ...]:
    """Namespace segments contributed by a leading sequence element."""
    if isinstance(value, ModuleType):
        return (camelize(value.__name__.rsplit(".", 1)[-1]),)
    if isinstance(value, (list, tuple)):
        return tuple(segment for item in value for segment in namespace_segments(item))
    if value is None:
        return ()
    return type_path(Subject.classify(value)).segments


def sequence_namespace(subject: Subject) -> tuple[str, ...]:
    """
    Namespace segments a sequence contributes ahead of its last element.

    Nested sequences in last position add their own leading elements, so
    ``["admin", ["reports", post]]`` contributes ``("Admin", "Reports")``.
    Anything that is not a sequence contributes nothing.
    """
    if subject.kind is not SubjectKind.SEQUENCE or not subject.value:
        return ()
    prefix = tuple(
        segment for item in subject.context for segment in namespace_segments(item)
    )
    return (*prefix, *sequence_namespace(Subject.classify(subject.value[-1])))


def type_path(subject: Subject) -> TypePath:
    """
    Base type path for a classified subject.

    Sequences take their identity from the last element and their
    namespace from the leading ones, so ``[Admin, post]`` yields
    ``Admin.Post``. An instance is named after its runtime type unless it
    names a model class in its ``policy_model`` attribute.
    """
    if subject.kind is SubjectKind.SEQUENCE:
        if not subject.value:
            return symbol_to_default_name(None)
        return type_path(subject.identity).within(sequence_namespace(subject))
    if subject.kind is SubjectKind.TYPE_REF:
        return class_path(subject.value)
    if subject.kind is SubjectKind.SYMBOL:
        return symbol_to_default_name(subject.value)
    model = getattr(subject.value, MODEL_ATTRIBUTE, None)
    if isinstance(model, type):
        return class_path(model)
    return class_path(type(subject.value))
