"""Resource ABC, attribute schema, and resource type registration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from .context import Context
from .models import ResourceState

SCHEMA_VERSION = 1

_resource_registry: dict[str, type[Resource]] = {}


def resource(name: str):
    """Register a Resource class as an HCL block decoder."""

    def decorator(cls):
        cls.type_name = name
        _resource_registry[name] = cls
        return cls

    return decorator


@dataclass(frozen=True)
class Attribute:
    """A single declared resource attribute."""

    name: str
    type: str
    required: bool = False
    sensitive: bool = False


@dataclass(frozen=True)
class ResourceSchema:
    """Attribute declarations for a resource type."""

    name: str
    attributes: tuple[Attribute, ...] = ()
    version: int = SCHEMA_VERSION

    def __getitem__(self, name: str) -> Attribute:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        raise KeyError(name)

    @property
    def sensitive(self) -> frozenset[str]:
        return frozenset(a.name for a in self.attributes if a.sensitive)


class Resource[P](ABC):
    """Base class for all managed resources."""

    type_name: ClassVar[str] = "resource"

    def __init__(self, label: str) -> None:
        self.label = label

    @property
    def address(self) -> str:
        return f"{self.type_name}.{self.label}"

    @classmethod
    def schema(cls) -> ResourceSchema:
        return ResourceSchema(name=cls.type_name)

    def state(self, ctx: Context[P]) -> ResourceState:
        return ctx.states.state(self.address)

    def changed(self, ctx: Context[P]) -> bool:
        """Declared attributes differ from what was last applied."""
        return True

    @abstractmethod
    def create(self, ctx: Context[P]) -> None:
        """Create the remote object and record its identity."""

    @abstractmethod
    def read(self, ctx: Context[P]) -> None:
        """Refresh the tracked identity from the remote object."""

    @abstractmethod
    def update(self, ctx: Context[P]) -> None:
        """Push declared attributes to an existing remote object."""

    @abstractmethod
    def delete(self, ctx: Context[P]) -> None:
        """Destroy the remote object and clear its identity."""
