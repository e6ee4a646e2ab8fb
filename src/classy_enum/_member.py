"""Module providing the base class for class-based enum members.

An enum is a direct subclass of `ClassyEnum`; each of its own subclasses is one
legal member. Members are value objects: they carry behavior, compare equal to
their identifier and keep a reference to the model instance they were read from.

Example:
    >>> class Priority(ClassyEnum):
    ...     pass
    >>> class Low(Priority):
    ...     pass
    >>> class VeryHigh(Priority):
    ...     pass
    >>> [m.id for m in Priority]
    ['low', 'very_high']
    >>> Priority.build("very_high").text
    'Very high'

"""

from __future__ import annotations

import logging
import re
from functools import total_ordering
from typing import TYPE_CHECKING, Any, ClassVar, Self

from pydantic_core import core_schema

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pydantic import GetCoreSchemaHandler
    from pydantic_core import CoreSchema

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

# Explicit name -> enum class registry used to resolve enums by identifier.
_registry: dict[str, type[ClassyEnum]] = {}


def snake_case(name: str) -> str:
    """Convert a CamelCase class name to snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def lookup_enum(name: str) -> type[ClassyEnum] | None:
    """Return the enum registered under `name`, or None."""
    return _registry.get(name)


def register_enum(enum_cls: type[ClassyEnum], name: str | None = None) -> None:
    """Register an enum class so it can be resolved by identifier.

    Enums are registered under their class name automatically. Registering a
    different class under a taken name replaces the previous entry.
    """
    key = name if name is not None else enum_cls.__name__
    previous = _registry.get(key)
    if previous is not None and previous is not enum_cls:
        logger.debug(f"Replacing registered enum '{key}': {previous!r} -> {enum_cls!r}")
    _registry[key] = enum_cls


def is_member_class(value: object) -> bool:
    """Check whether `value` is a member class (not the enum class itself)."""
    return isinstance(value, type) and issubclass(value, ClassyEnum) and value.option is not None


class ClassyEnumMeta(type):
    """Metaclass exposing the legal set of an enum as a collection."""

    _member_classes: list[type[ClassyEnum]]

    def __iter__(cls) -> Iterator[Any]:
        return (member() for member in cls._member_classes)

    def __len__(cls) -> int:
        return len(cls._member_classes)

    def __contains__(cls, value: object) -> bool:
        return cls.contains_value(value)  # type: ignore[attr-defined]

    def __bool__(cls) -> bool:
        return True


@total_ordering
class ClassyEnum(metaclass=ClassyEnumMeta):
    """Base class for enums whose members are classes."""

    option: ClassVar[str | None] = None
    _enum_cls: ClassVar[type[ClassyEnum]]
    _member_classes: ClassVar[list[type[ClassyEnum]]]
    _index: ClassVar[int | None] = None

    def __init_subclass__(cls, option: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if ClassyEnum in cls.__bases__:
            if option is not None:
                msg = f"Enum class {cls.__name__} cannot declare an option; only its members can."
                raise TypeError(msg)
            cls._enum_cls = cls
            cls._member_classes = []
            register_enum(cls)
            return

        enum_cls = cls._enum_cls
        if enum_cls not in cls.__bases__:
            msg = f"Member {cls.__name__} must subclass its enum {enum_cls.__name__} directly."
            raise TypeError(msg)

        if option is None:
            option = snake_case(cls.__name__)
            prefix = snake_case(enum_cls.__name__) + "_"
            if option.startswith(prefix) and option != prefix:
                option = option.removeprefix(prefix)

        if enum_cls.find(option) is not None:
            msg = f"Enum {enum_cls.__name__} already has a member with option '{option}'."
            raise TypeError(msg)

        cls.option = option
        cls._index = len(enum_cls._member_classes)
        enum_cls._member_classes.append(cls)
        logger.debug(f"Registered member '{option}' of enum {enum_cls.__name__}")

    def __init__(
        self,
        owner: object | None = None,
        *,
        serialize_as_json: bool = False,
        allow_blank: bool = False,
    ) -> None:
        self._option: Any = type(self).option
        self.owner = owner
        self.serialize_as_json = serialize_as_json
        self.allow_blank = allow_blank

    @classmethod
    def find(cls, value: object) -> type[Self] | None:
        """Return the member class matching `value`, or None.

        `value` may be an identifier, a member instance or a member class.
        Only string identifiers match; other raw scalars are never members.
        """
        if value is None:
            return None
        if isinstance(value, ClassyEnum):
            value = value.id
        elif isinstance(value, type) and issubclass(value, ClassyEnum):
            value = value.option
        if not isinstance(value, str):
            return None
        return next((m for m in cls._enum_cls._member_classes if m.option == value), None)  # type: ignore[return-value]

    @classmethod
    def contains_value(cls, value: object) -> bool:
        """Check whether `value` identifies one of the legal members."""
        return cls.find(value) is not None

    @classmethod
    def build(
        cls,
        value: object,
        *,
        owner: object | None = None,
        serialize_as_json: bool = False,
        allow_blank: bool = False,
    ) -> Self:
        """Materialize a raw scalar into a member instance.

        Values that are not legal members (including None and blank strings)
        are wrapped in an instance of the enum class itself, so the result is
        always a `ClassyEnum`.
        """
        member_cls = cls.find(value)
        if member_cls is not None:
            return member_cls(owner, serialize_as_json=serialize_as_json, allow_blank=allow_blank)
        obj = cls._enum_cls(owner, serialize_as_json=serialize_as_json, allow_blank=allow_blank)
        obj._option = value
        return obj  # type: ignore[return-value]

    @classmethod
    def select_options(cls) -> list[tuple[str, str]]:
        """Return `(text, id)` pairs for every member, in declaration order."""
        return [(member.text, member.id) for member in cls]

    @property
    def id(self) -> Any:
        """The canonical identifier, or the raw value for non-members."""
        return self._option

    @property
    def index(self) -> int | None:
        """Declaration position within the enum, None for non-members."""
        return type(self)._index

    @property
    def text(self) -> str:
        if self._option is None:
            return ""
        return str(self._option).replace("_", " ").capitalize()

    @property
    def is_blank(self) -> bool:
        return self._option is None or (isinstance(self._option, str) and not self._option.strip())

    def as_json(self) -> Any:
        """Render for serialization.

        Returns the identifier, or with `serialize_as_json` a mapping of the
        identifier and the public instance attributes.
        """
        if not self.serialize_as_json:
            return self._option
        data = {"id": self._option}
        data.update(
            (name, value)
            for name, value in vars(self).items()
            if not name.startswith("_") and name not in {"owner", "serialize_as_json", "allow_blank"}
        )
        return data

    def __bool__(self) -> bool:
        return not self.is_blank

    def __str__(self) -> str:
        return "" if self._option is None else str(self._option)

    def __repr__(self) -> str:
        enum_name = self._enum_cls.__name__
        if self.index is None:
            return f"<{enum_name}: {self._option!r}>"
        return f"<{enum_name}.{self._option}>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ClassyEnum):
            return other._enum_cls is self._enum_cls and other.id == self.id
        if isinstance(other, type) and issubclass(other, ClassyEnum):
            return other._enum_cls is self._enum_cls and other.option == self.id
        if isinstance(other, str):
            return self.id == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, ClassyEnum) and other._enum_cls is not self._enum_cls:
            return NotImplemented
        other_cls = self._enum_cls.find(other)
        if other_cls is None or self.index is None:
            return NotImplemented
        return self.index < other_cls._index  # type: ignore[operator]

    def __hash__(self) -> int:
        return hash(self._option)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Generate Pydantic core schema accepting member identifiers."""
        if not hasattr(cls, "_enum_cls"):
            msg = "ClassyEnum itself cannot be used as a field type; use a concrete enum."
            raise TypeError(msg)
        enum_cls = cls._enum_cls
        options = [member.option for member in enum_cls._member_classes]
        if not options:
            msg = f"Enum {enum_cls.__name__} has no members to validate against."
            raise TypeError(msg)

        def to_option(value: object) -> object:
            if isinstance(value, ClassyEnum):
                return value.id
            if isinstance(value, type) and issubclass(value, ClassyEnum):
                return value.option
            return value

        return core_schema.no_info_before_validator_function(
            to_option,
            core_schema.no_info_after_validator_function(
                enum_cls.build,
                core_schema.literal_schema(options),
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(lambda member: member.as_json()),
        )
