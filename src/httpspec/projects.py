"""Project base model — the top-level build target."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, model_validator

from .blueprints import Blueprint
from .context import Context
from .specop import Absent, SpecOp
from .state import StateStore

logger = logging.getLogger(__name__)


class Project(BaseModel):
    """Base model that apps subclass with domain-specific fields."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    description: str = ""
    blueprints: list[Blueprint] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_addresses(self) -> Project:
        seen: set[str] = set()
        for blueprint in self.blueprints:
            for address in blueprint.addresses:
                if address in seen:
                    raise ValueError(f"Duplicate resource '{address}' in project '{self.name}'")
                seen.add(address)
        return self

    @property
    def ops(self) -> list[SpecOp[Any]]:
        return [op for blueprint in self.blueprints for op in blueprint]

    def build(self, **kwargs) -> StateStore:
        """Build all blueprints. kwargs are passed to Context."""
        ctx = Context(target=self, **kwargs)
        logger.info("Building project '%s'", self.name)
        for blueprint in self.blueprints:
            blueprint.build(ctx)
        return ctx.states

    def destroy(self, **kwargs) -> StateStore:
        """Remove every resource in reverse declaration order."""
        ctx = Context(target=self, **kwargs)
        if not any(state.exists for state in ctx.states.values()):
            logger.warning("Project '%s' has no tracked resources; pass states= to destroy", self.name)
        logger.info("Destroying project '%s'", self.name)
        for op in reversed(self.ops):
            Absent(op.resource)(ctx)
        return ctx.states
