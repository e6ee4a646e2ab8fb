"""Bind enum-like attributes to model classes.

`bind` associates a model attribute with an enum class. It registers an
inclusion rule with the model's validation, installs a descriptor whose getter
materializes the stored scalar into a member and whose setter normalizes
assigned values back to a scalar, and optionally seeds a default on new records.

Example:
    class Alarm(Document):
        priority = enum_attr(default="low")

    # Equivalent to
    bind(Alarm, "priority", default="low")

"""

from __future__ import annotations

import importlib
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from ._errors import BindingError, ResolutionError
from ._member import ClassyEnum, lookup_enum
from ._normalize import is_blank, normalize_default, normalize_value
from ._protocols import EnumClass

if TYPE_CHECKING:
    from ._protocols import AttributeStore, ModelClass

logger = logging.getLogger(__name__)

_BINDINGS_ATTR = "__classy_enum_bindings__"


class BindOptions(BaseModel):
    """Options accepted by `bind`."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    enum: str | type | None = None
    class_name: str | None = None
    allow_blank: StrictBool = False
    allow_nil: StrictBool = False
    serialize_as_json: StrictBool = False
    default: Any = None


@dataclass(slots=True, frozen=True)
class EnumBinding:
    """Configuration of one enum attribute on one model class."""

    name: str
    enum_cls: EnumClass
    allow_blank: bool = False
    allow_nil: bool = False
    serialize_as_json: bool = False
    default: Any = None

    @property
    def nil_or_blank_allowed(self) -> bool:
        return self.allow_blank or self.allow_nil

    def read(self, instance: AttributeStore) -> Any:
        """Materialize the stored scalar of `instance` into a member."""
        return self.enum_cls.build(
            instance.read_attribute(self.name),
            owner=instance,
            serialize_as_json=self.serialize_as_json,
            allow_blank=self.nil_or_blank_allowed,
        )

    def write(self, instance: AttributeStore, value: Any) -> None:
        """Store the normalized form of `value` on `instance`."""
        raw = normalize_value(value, self.default, nil_or_blank_allowed=self.nil_or_blank_allowed)
        instance.write_attribute(self.name, raw)

    def seed_default(self, instance: AttributeStore) -> None:
        """Write the default to a new record whose stored value is not allowed."""
        if not getattr(instance, "new_record", True):
            return
        # A subclass that rebinds the attribute owns its default.
        if bindings(type(instance)).get(self.name) is not self:
            return
        raw = instance.read_attribute(self.name)
        if (is_blank(raw) and not self.nil_or_blank_allowed) or (raw is None and not self.allow_nil):
            logger.debug(f"Seeding default {self.default!r} for '{self.name}' on {type(instance).__name__}")
            self.write(instance, self.default)


class EnumAttribute:
    """Descriptor exposing a bound attribute as enum members.

    Created unbound by `enum_attr` inside a class body, in which case the
    attribute is bound when the owning class is created.
    """

    def __init__(self, binding: EnumBinding | None = None, **options: Any) -> None:
        self.binding = binding
        self._options = options

    def __set_name__(self, owner: type, name: str) -> None:
        if self.binding is None:
            bind(owner, name, **self._options)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        if self.binding is None:
            msg = "Enum attribute is not bound to a model class."
            raise AttributeError(msg)
        return self.binding.read(instance)

    def __set__(self, instance: Any, value: Any) -> None:
        if self.binding is None:
            msg = "Enum attribute is not bound to a model class."
            raise AttributeError(msg)
        self.binding.write(instance, value)


def enum_attr(**options: Any) -> Any:
    """Declare an enum attribute in a class body.

    Accepts the same options as `bind`.
    """
    return EnumAttribute(**options)


def camelize(name: str) -> str:
    """Convert a snake_case identifier to CamelCase, keeping inner capitals."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


def singularize(name: str) -> str:
    """Return a naive singular form of an English plural identifier."""
    if name.endswith("ies") and len(name) > 3:
        return name[:-3] + "y"
    if re.search(r"(ss|sh|ch|x|z|us)es$", name):
        return name[:-2]
    if name.endswith("s") and not name.endswith("ss"):
        return name[:-1]
    return name


def _import_enum(identifier: str) -> Any:
    module_name, _, attr_path = identifier.partition(":")
    if not attr_path:
        module_name, _, attr_path = identifier.rpartition(".")
    try:
        obj: Any = importlib.import_module(module_name)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        msg = f"Cannot resolve enum '{identifier}': {e}"
        raise ResolutionError(msg) from e
    return obj


def resolve_enum(attribute: str, enum: str | type | None = None, class_name: str | None = None) -> EnumClass:
    """Resolve the enum class backing `attribute`.

    An enum class is used as is. A dotted path (`package.module:Enum` or
    `package.module.Enum`) is imported. Any other identifier, or the attribute
    name when none is given, is camelized and looked up in the enum registry;
    names derived from the attribute are retried in singular form.

    Raises:
        ResolutionError: If no enum class can be found.

    """
    identifier = enum if enum is not None else class_name
    if isinstance(identifier, type):
        candidate: Any = identifier
    elif identifier is not None and ("." in identifier or ":" in identifier):
        candidate = _import_enum(identifier)
    else:
        names = [camelize(identifier)] if identifier is not None else [camelize(attribute)]
        if identifier is None and singularize(attribute) != attribute:
            names.append(camelize(singularize(attribute)))
        candidate = next((found for name in names if (found := lookup_enum(name)) is not None), None)
        if candidate is None:
            msg = f"Cannot resolve enum for attribute '{attribute}': no enum registered as {' or '.join(names)}."
            raise ResolutionError(msg)

    if not isinstance(candidate, EnumClass) or (
        isinstance(candidate, type) and issubclass(candidate, ClassyEnum) and not hasattr(candidate, "_enum_cls")
    ):
        msg = f"{candidate!r} resolved for attribute '{attribute}' is not an enum class."
        raise ResolutionError(msg)
    logger.debug(f"Resolved enum for '{attribute}': {candidate!r}")
    return candidate


def bindings(model_cls: type) -> dict[str, EnumBinding]:
    """Return the enum bindings of `model_cls`, including inherited ones."""
    result: dict[str, EnumBinding] = {}
    for klass in reversed(model_cls.__mro__):
        result.update(klass.__dict__.get(_BINDINGS_ATTR, {}))
    return result


def bind(model_cls: type[ModelClass], attribute: str, **options: Any) -> EnumBinding:
    """Bind an enum to an attribute of a model class.

    Args:
        model_cls: The model class. It must provide `validates_inclusion_of`
            and `after_initialize`, and its instances `read_attribute` and
            `write_attribute`.
        attribute: Name of the attribute to wrap.
        **options: See `BindOptions`. `enum` or `class_name` names the enum;
            `allow_blank`, `allow_nil` and `serialize_as_json` are flags;
            `default` is an identifier, member, member class or a callable
            taking the enum class.

    Returns:
        The created binding.

    Raises:
        BindingError: If the options are invalid or the attribute is already bound.
        ResolutionError: If the enum class cannot be resolved.
        DefaultResolutionError: If the default is not a legal member.

    """
    if not attribute.isidentifier():
        msg = f"Attribute name must be a non-empty identifier, got {attribute!r}."
        raise BindingError(msg)
    try:
        opts = BindOptions(**options)
    except ValidationError as e:
        msg = f"Invalid options for enum attribute '{attribute}' of {model_cls.__name__}: {e}"
        raise BindingError(msg) from e

    own_bindings: dict[str, EnumBinding] = model_cls.__dict__.get(_BINDINGS_ATTR, {})
    if attribute in own_bindings:
        msg = f"Attribute '{attribute}' of {model_cls.__name__} is already bound to an enum."
        raise BindingError(msg)

    enum_cls = resolve_enum(attribute, opts.enum, opts.class_name)
    binding = EnumBinding(
        name=attribute,
        enum_cls=enum_cls,
        allow_blank=opts.allow_blank,
        allow_nil=opts.allow_nil,
        serialize_as_json=opts.serialize_as_json,
        default=normalize_default(opts.default, enum_cls),
    )

    model_cls.validates_inclusion_of(
        attribute,
        enum_cls,
        allow_blank=binding.allow_blank,
        allow_nil=binding.allow_nil,
    )
    setattr(model_cls, attribute, EnumAttribute(binding))
    if binding.default is not None:
        model_cls.after_initialize(binding.seed_default)

    setattr(model_cls, _BINDINGS_ATTR, {**own_bindings, attribute: binding})
    logger.debug(f"Bound enum attribute '{attribute}' of {model_cls.__name__}: {binding}")
    return binding
