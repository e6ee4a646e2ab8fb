"""Collaborator contracts the attribute binder relies on.

The binder never depends on a concrete host. Any model class providing raw
attribute storage, inclusion validation and after-initialize hooks can be bound,
and any enum class providing `build` and `contains_value` can back an attribute.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@runtime_checkable
class AttributeStore(Protocol):
    """Raw scalar storage on a model instance."""

    def read_attribute(self, name: str) -> Any: ...

    def write_attribute(self, name: str, value: Any) -> None: ...


@runtime_checkable
class EnumClass(Protocol):
    """A closed set of members that can be materialized from raw scalars."""

    def __iter__(self) -> Iterator[Any]: ...

    def build(
        self,
        value: Any,
        *,
        owner: object | None = None,
        serialize_as_json: bool = False,
        allow_blank: bool = False,
    ) -> Any: ...

    def contains_value(self, value: Any) -> bool: ...


class ModelClass(Protocol):
    """Class-side capabilities of a host model."""

    @classmethod
    def validates_inclusion_of(
        cls,
        name: str,
        in_: EnumClass,
        *,
        allow_blank: bool = False,
        allow_nil: bool = False,
    ) -> None: ...

    @classmethod
    def after_initialize(cls, callback: Callable[[Self], None]) -> None: ...
