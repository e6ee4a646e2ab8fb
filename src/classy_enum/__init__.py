"""Class-based enum attributes for document models."""

__all__ = [
    "AttributeStore",
    "BindOptions",
    "BindingError",
    "ClassyEnum",
    "ClassyEnumError",
    "DefaultResolutionError",
    "Document",
    "EnumAttribute",
    "EnumBinding",
    "EnumClass",
    "InclusionRule",
    "ModelClass",
    "ResolutionError",
    "ValidationFailure",
    "bind",
    "bindings",
    "enum_attr",
    "lookup_enum",
    "normalize_value",
    "register_enum",
    "resolve_enum",
]

from ._binder import BindOptions, EnumAttribute, EnumBinding, bind, bindings, enum_attr, resolve_enum
from ._document import Document, InclusionRule
from ._errors import BindingError, ClassyEnumError, DefaultResolutionError, ResolutionError, ValidationFailure
from ._member import ClassyEnum, lookup_enum, register_enum
from ._normalize import normalize_value
from ._protocols import AttributeStore, EnumClass, ModelClass
