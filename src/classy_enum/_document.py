"""A minimal in-memory document model that enum attributes can be bound to.

`Document` provides the three host capabilities the binder relies on: raw
attribute storage, inclusion validation collected into an `errors` mapping, and
after-initialize hooks. It does not persist anything; `save` only validates and
marks the record as no longer new.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

from ._binder import bindings
from ._errors import ValidationFailure
from ._normalize import is_blank

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from ._protocols import EnumClass

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class InclusionRule:
    """Validation rule restricting an attribute to the members of an enum."""

    name: str
    in_: EnumClass
    allow_blank: bool = False
    allow_nil: bool = False

    message = "is not included in the list"

    def check(self, value: Any) -> str | None:
        """Return an error message if `value` violates the rule, None otherwise."""
        if value is None and self.allow_nil:
            return None
        if is_blank(value) and self.allow_blank:
            return None
        if self.in_.contains_value(value):
            return None
        return self.message


class Document:
    """In-memory document with raw attribute storage, validation and hooks."""

    def __init__(self, **attributes: Any) -> None:
        self._attributes: dict[str, Any] = {}
        self.new_record = True
        self.errors: dict[str, list[str]] = {}
        for name, value in attributes.items():
            if name in bindings(type(self)):
                setattr(self, name, value)
            else:
                self.write_attribute(name, value)
        self._run_after_initialize()

    @classmethod
    def instantiate(cls, attributes: Mapping[str, Any]) -> Self:
        """Create a loaded (not new) document from raw stored attributes."""
        obj = cls.__new__(cls)
        obj._attributes = dict(attributes)
        obj.new_record = False
        obj.errors = {}
        obj._run_after_initialize()
        return obj

    @classmethod
    def _own_list(cls, attr: str) -> list[Any]:
        if attr not in cls.__dict__:
            setattr(cls, attr, [])
        return cls.__dict__[attr]

    @classmethod
    def _inherited(cls, attr: str) -> Iterator[Any]:
        for klass in reversed(cls.__mro__):
            yield from klass.__dict__.get(attr, [])

    @classmethod
    def validates_inclusion_of(
        cls,
        name: str,
        in_: EnumClass,
        *,
        allow_blank: bool = False,
        allow_nil: bool = False,
    ) -> None:
        # One rule per attribute; a subclass rule replaces the inherited one.
        if "_inclusion_rules" not in cls.__dict__:
            cls._inclusion_rules = {}
        cls._inclusion_rules[name] = InclusionRule(name=name, in_=in_, allow_blank=allow_blank, allow_nil=allow_nil)

    @classmethod
    def after_initialize(cls, callback: Callable[[Self], None]) -> None:
        cls._own_list("_after_initialize_callbacks").append(callback)

    def _run_after_initialize(self) -> None:
        for callback in self._inherited("_after_initialize_callbacks"):
            callback(self)

    def read_attribute(self, name: str) -> Any:
        return self._attributes.get(name)

    def write_attribute(self, name: str, value: Any) -> None:
        self._attributes[name] = value

    @property
    def attributes(self) -> dict[str, Any]:
        """A copy of the raw stored attributes."""
        return dict(self._attributes)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names without a class-level attribute.
        stored = self.__dict__.get("_attributes", {})
        if name in stored:
            return stored[name]
        msg = f"{type(self).__name__!r} object has no attribute {name!r}"
        raise AttributeError(msg)

    def validate(self) -> bool:
        """Run all inclusion rules, collecting failures into `errors`."""
        self.errors = {}
        rules: dict[str, InclusionRule] = {}
        for klass in reversed(type(self).__mro__):
            rules.update(klass.__dict__.get("_inclusion_rules", {}))
        for rule in rules.values():
            message = rule.check(self.read_attribute(rule.name))
            if message is not None:
                self.errors.setdefault(rule.name, []).append(message)
        return not self.errors

    def is_valid(self) -> bool:
        return self.validate()

    def save(self, *, strict: bool = False) -> bool:
        """Validate and mark the document as persisted.

        Returns:
            True if the document was valid, False otherwise.

        Raises:
            ValidationFailure: If `strict` is set and the document is invalid.

        """
        if not self.validate():
            logger.debug(f"Not saving {self!r}: {self.errors}")
            if strict:
                raise ValidationFailure(self, self.errors)
            return False
        self.new_record = False
        return True

    def as_json(self) -> dict[str, Any]:
        """Raw attributes, with enum attributes rendered through their members."""
        data = self.attributes
        for name in bindings(type(self)):
            data[name] = getattr(self, name).as_json()
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._attributes!r})"
