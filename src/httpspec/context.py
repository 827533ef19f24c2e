"""Runtime execution context for the build pipeline."""

from __future__ import annotations

from .state import StateStore


class Context[P]:
    """Runtime state passed through the build chain."""

    def __init__(
        self,
        target: P,
        *,
        states: StateStore | None = None,
        dry_run: bool = False,
    ) -> None:
        self.target = target
        self.states = states if states is not None else StateStore()
        self.dry_run = dry_run
