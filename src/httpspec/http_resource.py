"""The http_resource type: a remote object managed through four HTTP calls."""

from __future__ import annotations

import logging
from typing import Any

from .context import Context
from .dispatch import DEFAULT_TIMEOUT, Dispatcher
from .models import ResourceSpec, Variant
from .policy import get_policy
from .spec import Attribute, Resource, ResourceSchema, resource

logger = logging.getLogger(__name__)

_MASK = "(sensitive)"


@resource("http_resource")
class HttpResource(Resource[Any]):
    """Create with POST, read with GET, update with PUT and delete with DELETE."""

    def __init__(
        self,
        label: str,
        *,
        url: str,
        request_headers: dict[str, str] | None = None,
        body: str = "",
        variant: Variant | str = Variant.LEGACY,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(label)
        self.spec = ResourceSpec(url=url, request_headers=request_headers or {}, body=body)
        self.dispatcher = Dispatcher(variant, timeout=timeout)

    @classmethod
    def schema(cls, variant: Variant | str = Variant.LEGACY) -> ResourceSchema:
        sensitive = get_policy(variant).sensitive
        return ResourceSchema(
            name=cls.type_name,
            attributes=(
                Attribute("url", "string", required=True, sensitive=sensitive),
                Attribute("request_headers", "map(string)", sensitive=sensitive),
                Attribute("body", "string", sensitive=sensitive),
            ),
        )

    @property
    def variant(self) -> Variant:
        return self.dispatcher.variant

    @property
    def sensitive(self) -> bool:
        return self.dispatcher.policy.sensitive

    def changed(self, ctx: Context[Any]) -> bool:
        return ctx.states.applied(self.address) != self.spec

    def create(self, ctx: Context[Any]) -> None:
        logger.debug("Dispatching create for %s", self.address)
        self.dispatcher.create(self.spec, self.state(ctx))
        ctx.states.record(self.address, self.spec)

    def read(self, ctx: Context[Any]) -> None:
        logger.debug("Dispatching read for %s", self.address)
        self.dispatcher.read(self.spec, self.state(ctx))

    def update(self, ctx: Context[Any]) -> None:
        logger.debug("Dispatching update for %s", self.address)
        self.dispatcher.update(self.spec, self.state(ctx))
        ctx.states.record(self.address, self.spec)

    def delete(self, ctx: Context[Any]) -> None:
        logger.debug("Dispatching delete for %s", self.address)
        self.dispatcher.delete(self.spec, self.state(ctx))
        ctx.states.forget(self.address)

    def __repr__(self) -> str:
        url = _MASK if self.sensitive else self.spec.url
        return f"HttpResource({self.label!r}, url={url!r}, variant={self.variant.value!r})"
