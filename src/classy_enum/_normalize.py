"""Normalization of values assigned to enum attributes.

Assigned values are reduced to the raw scalar that is stored. The work is split
into independent steps: nil handling, identifier extraction and default
resolution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._errors import DefaultResolutionError
from ._member import ClassyEnum, is_member_class

if TYPE_CHECKING:
    from ._protocols import EnumClass


def is_blank(value: object) -> bool:
    """Check whether a raw value counts as blank (None, empty or whitespace)."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def coerce_nil(value: Any, default: Any, *, nil_or_blank_allowed: bool) -> Any:
    """Replace None with `default` unless nil or blank values are allowed."""
    if value is None and not nil_or_blank_allowed:
        return default
    return value


def extract_option(value: Any) -> Any:
    """Reduce a member instance or member class to its identifier.

    Any other value is returned unchanged; legality is decided by validation.
    """
    if isinstance(value, ClassyEnum):
        return value.id
    if is_member_class(value):
        return value.option
    return value


def normalize_value(value: Any, default: Any = None, *, nil_or_blank_allowed: bool = False) -> Any:
    """Normalize an assigned value to the raw scalar to store."""
    return extract_option(coerce_nil(value, default, nil_or_blank_allowed=nil_or_blank_allowed))


def normalize_default(value: Any, enum_cls: EnumClass) -> Any:
    """Resolve the configured default of a binding to a raw scalar.

    Callables are invoked with the enum class first. A blank result means no
    default is configured and yields None.

    Raises:
        DefaultResolutionError: If the default is not a legal member.

    """
    if callable(value) and not isinstance(value, type):
        value = value(enum_cls)
    option = extract_option(value)
    if is_blank(option):
        return None
    if not enum_cls.contains_value(option):
        msg = f"Default {option!r} must be a valid member of {getattr(enum_cls, '__name__', enum_cls)}."
        raise DefaultResolutionError(msg)
    return option
