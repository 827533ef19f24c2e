"""In-memory store of tracked resource state, keyed by address."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from .models import ResourceSpec, ResourceState

logger = logging.getLogger(__name__)


class StateStore(Mapping[str, ResourceState]):
    """Tracked identity and last applied attributes for each resource.

    State lives only as long as the store; nothing is written to disk.
    """

    def __init__(self) -> None:
        self._states: dict[str, ResourceState] = {}
        self._applied: dict[str, ResourceSpec] = {}

    def state(self, address: str) -> ResourceState:
        """Return the state for an address, starting empty if untracked."""
        if address not in self._states:
            logger.debug("Tracking new resource '%s'", address)
            self._states[address] = ResourceState()
        return self._states[address]

    def applied(self, address: str) -> ResourceSpec | None:
        """Return the attributes last sent by create or update."""
        return self._applied.get(address)

    def record(self, address: str, spec: ResourceSpec) -> None:
        self._applied[address] = spec

    def forget(self, address: str) -> None:
        self._applied.pop(address, None)

    def __getitem__(self, address: str) -> ResourceState:
        return self._states[address]

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        present = sum(1 for s in self._states.values() if s.exists)
        return f"StateStore(tracked={len(self._states)}, present={present})"
