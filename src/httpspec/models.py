"""Resource attributes, tracked state, and dispatch enums."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class Variant(StrEnum):
    """Response classification policy selected when a resource is declared."""

    LEGACY = "legacy"
    NEGOTIATED = "negotiated"


class ResourceSpec(BaseModel):
    """Declared attributes of an HTTP-managed resource."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    request_headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""


@dataclass
class ResourceState:
    """Identity and last observed headers of a remote object."""

    id: str = ""
    response_headers: dict[str, str] = field(default_factory=dict)

    @property
    def exists(self) -> bool:
        return bool(self.id)
