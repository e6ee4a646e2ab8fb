"""Exceptions raised by classy_enum."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._document import Document


class ClassyEnumError(Exception):
    """Base class for all classy_enum errors."""


class BindingError(ClassyEnumError):
    """An enum attribute could not be bound to a model class."""


class ResolutionError(BindingError):
    """The enum class of a binding could not be resolved."""


class DefaultResolutionError(BindingError):
    """The default of a binding is not a legal member of its enum."""


class ValidationFailure(ClassyEnumError):  # noqa: N818
    """A document failed validation on a strict save."""

    def __init__(self, document: Document, errors: dict[str, list[str]]) -> None:
        self.document = document
        self.errors = errors
        details = "; ".join(f"{name} {message}" for name, messages in errors.items() for message in messages)
        super().__init__(f"Validation of {type(document).__name__} failed: {details}")
