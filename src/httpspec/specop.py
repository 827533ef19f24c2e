"""Reconcile strategies that decide which lifecycle calls to make."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .context import Context
from .spec import Resource

logger = logging.getLogger(__name__)


class SpecOp[P](ABC):
    """Wraps a Resource with conditional execution logic."""

    def __init__(self, resource: Resource[P]) -> None:
        self.resource = resource

    @property
    def address(self) -> str:
        return self.resource.address

    def refresh(self, ctx: Context[P]) -> bool:
        """Re-read a tracked resource and report whether it still exists."""
        if self.resource.state(ctx).exists:
            self.resource.read(ctx)
        return self.resource.state(ctx).exists

    @abstractmethod
    def __call__(self, ctx: Context[P]) -> None: ...


class Present[P](SpecOp[P]):
    """Create only if the resource doesn't exist."""

    def __call__(self, ctx: Context[P]) -> None:
        if self.refresh(ctx):
            logger.debug("Skipping %s; already exists", self.address)
        elif ctx.dry_run:
            logger.info("[DRY RUN] Would create %s", self.address)
        else:
            logger.info("Creating %s", self.address)
            self.resource.create(ctx)


class Ensure[P](SpecOp[P]):
    """Create if missing, update if the declared attributes changed."""

    def __call__(self, ctx: Context[P]) -> None:
        if not self.refresh(ctx):
            if ctx.dry_run:
                logger.info("[DRY RUN] Would create %s", self.address)
            else:
                logger.info("Creating %s", self.address)
                self.resource.create(ctx)
        elif not self.resource.changed(ctx):
            logger.debug("Skipping %s; up to date", self.address)
        elif ctx.dry_run:
            logger.info("[DRY RUN] Would update %s", self.address)
        else:
            logger.info("Updating %s", self.address)
            self.resource.update(ctx)


class Absent[P](SpecOp[P]):
    """Delete if the resource exists."""

    def __call__(self, ctx: Context[P]) -> None:
        if self.refresh(ctx):
            if ctx.dry_run:
                logger.info("[DRY RUN] Would remove %s", self.address)
            else:
                logger.info("Removing %s", self.address)
                self.resource.delete(ctx)
        else:
            logger.debug("Skipping removal of %s; not present", self.address)
