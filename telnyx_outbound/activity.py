# telnyx_outbound/activity.py
"""
Activity Base Classes

Shared plumbing for Telnyx workflow activities: designer metadata, deferred
property bindings and the fluent builder used to configure an activity before
the workflow runs.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from .bindings import Bindable, Binding, resolve_bindings
from .context import ExecutionContext

CATEGORY = "Telnyx"


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    Designer metadata for one activity property.

    Attributes:
        name: Attribute name on the resolved parameters.
        label: Display label.
        hint: Help text shown to workflow authors.
        category: Property group; None for the default group.
        options: Allowed values for dropdown properties.
    """

    name: str
    label: str
    hint: str
    category: str | None = None
    options: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ActivityDescriptor:
    """Designer metadata for an activity type."""

    type_name: str
    display_name: str
    description: str
    category: str = CATEGORY
    outcomes: tuple[str, ...] = ("Done",)
    properties: tuple[PropertyDescriptor, ...] = ()

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.properties)


class Activity(ABC):
    """
    Base class for activities whose properties are deferred bindings.

    Subclasses declare a `descriptor` and implement `execute`.
    """

    descriptor: ClassVar[ActivityDescriptor]

    def __init__(self, bindings: Mapping[str, Binding[Any]] | None = None):
        self.bindings: dict[str, Binding[Any]] = dict(bindings or {})

    @classmethod
    def describe(cls) -> ActivityDescriptor:
        return cls.descriptor

    async def resolve_properties(self, context: ExecutionContext) -> dict[str, Any]:
        """Resolve every configured property against the running context."""
        return await resolve_bindings(self.bindings, context)

    @abstractmethod
    async def execute(self, context: ExecutionContext) -> Any:
        ...


A = TypeVar("A", bound=Activity)


class ActivityBuilder(ABC, Generic[A]):
    """Fluent configuration surface for an activity."""

    def __init__(self, descriptor: ActivityDescriptor):
        self._descriptor = descriptor
        self._bindings: dict[str, Binding[Any]] = {}

    def set(self, name: str, value: Bindable[Any]) -> "ActivityBuilder[A]":
        """
        Bind property `name` to a literal or a deferred value.

        Args:
            name: Property name as listed in the activity descriptor.
            value: A literal, fn(), async fn(), fn(context), async fn(context) or a Binding.

        Returns:
            The builder, for chaining.
        """
        if name not in self._descriptor.property_names:
            raise ValueError(f"{self._descriptor.type_name} has no property named '{name}'")
        self._bindings[name] = Binding.of(value)
        return self

    @property
    def bindings(self) -> dict[str, Binding[Any]]:
        return dict(self._bindings)

    @abstractmethod
    def build(self) -> A:
        ...
