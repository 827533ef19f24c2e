"""Workspace — a typed collection of projects declared in HCL files."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, overload

from . import hcl
from .blueprints import Blueprint
from .projects import Project
from .resolve import Resolver, default_context
from .spec import _resource_registry
from .specop import Absent, Ensure, Present, SpecOp

logger = logging.getLogger(__name__)

_STRATEGY_MAP: dict[str, type[SpecOp]] = {
    "present": Present,
    "ensure": Ensure,
    "absent": Absent,
}

_STRUCTURAL_KEYS = {"use", "include"} | set(_STRATEGY_MAP)


@dataclass
class WorkspaceRef(ABC):
    """Base class for all workspace references."""

    name: str

    @abstractmethod
    def resolve(self, workspace: Workspace) -> Any:
        """Return a ready-to-use instance using the workspace as context."""


@dataclass
class OperationRef(WorkspaceRef):
    """A declared resource — type, label, strategy and raw attributes."""

    label: str
    strategy: str
    attrs: dict[str, Any] = field(default_factory=dict)

    @property
    def address(self) -> str:
        return f"{self.name}.{self.label}"

    def resolve(self, workspace: Workspace) -> SpecOp:
        if self.name not in _resource_registry:
            raise ValueError(f"Unknown resource type: '{self.name}'")
        resource_cls = _resource_registry[self.name]
        attrs = workspace.resolver.resolve(self.attrs)
        logger.debug("Decoding %s -> %s", self.address, resource_cls.__name__)
        try:
            instance = resource_cls(self.label, **attrs)
        except TypeError as exc:
            raise ValueError(f"Invalid attributes for '{self.address}': {exc}") from exc
        return _STRATEGY_MAP[self.strategy](instance)


@dataclass
class BlueprintRef(WorkspaceRef):
    """A blueprint reference — operations plus optional includes."""

    includes: list[str] = field(default_factory=list)
    ops: list[OperationRef] = field(default_factory=list)
    description: str = ""

    def resolve(
        self,
        workspace: Workspace,
        _resolving: set[str] | None = None,
    ) -> Blueprint:
        resolving = _resolving if _resolving is not None else set()
        if self.name in resolving:
            raise ValueError(f"Circular include detected: '{self.name}'")
        resolving.add(self.name)

        all_ops: list[SpecOp] = []
        for inc_name in self.includes:
            if inc_name not in workspace.blueprints:
                raise ValueError(f"Blueprint '{self.name}' includes unknown blueprint: '{inc_name}'")
            logger.debug("Blueprint '%s' includes '%s'", self.name, inc_name)
            included = workspace.blueprints[inc_name].resolve(workspace, resolving)
            all_ops.extend(included.ops)

        all_ops.extend(op.resolve(workspace) for op in self.ops)

        resolving.discard(self.name)
        return Blueprint(name=self.name, description=self.description, ops=all_ops)


@dataclass
class ProjectRef(WorkspaceRef):
    """A project reference — used blueprints, inline operations and extra fields."""

    uses: list[str] = field(default_factory=list)
    ops: list[OperationRef] = field(default_factory=list)
    fields: dict[str, Any] = field(default_factory=dict)

    def resolve(self, workspace: Workspace) -> Project:
        blueprints: list[Blueprint] = []
        for bp_name in self.uses:
            if bp_name not in workspace.blueprints:
                raise ValueError(f"Project '{self.name}' references unknown blueprint: '{bp_name}'")
            blueprints.append(workspace.blueprints[bp_name].resolve(workspace))

        inline_ops = [op.resolve(workspace) for op in self.ops]
        if inline_ops:
            blueprints.append(Blueprint(name=f"{self.name}:inline", ops=inline_ops))

        logger.debug("Building project '%s' as %s", self.name, workspace.project_type.__name__)
        return workspace.project_type(name=self.name, blueprints=blueprints, **self.fields)


def _parse_ops(block: dict[str, Any]) -> list[OperationRef]:
    """Parse strategy blocks (present/ensure/absent) from a blueprint or project block.

    HCL2 structure for strategy blocks:
        {"ensure": [{"http_resource": {"widget": {"url": "..."}}}], ...}
    """
    refs: list[OperationRef] = []
    for strategy in _STRATEGY_MAP:
        for type_block in block.get(strategy, []):
            for type_name, labelled in type_block.items():
                for label, attrs in labelled.items():
                    refs.append(OperationRef(type_name, label, strategy, dict(attrs)))
    return refs


class Workspace[P: Project](Mapping[str, P]):
    """Accumulates parsed HCL declarations and resolves projects on access."""

    def __init__(
        self,
        project_type: type[P] = Project,  # type: ignore[assignment]
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.project_type = project_type
        self.context: dict[str, Any] = default_context()
        if context:
            self.context.update(context)
        self.resolver = Resolver(self.context)
        self._blueprint_refs: dict[str, BlueprintRef] = {}
        self._project_refs: dict[str, ProjectRef] = {}

    @property
    def blueprints(self) -> dict[str, BlueprintRef]:
        """Return the blueprint ref registry."""
        return self._blueprint_refs

    def add(self, ref: WorkspaceRef) -> None:
        """Register a blueprint or project reference.

        Raises ValueError if the name is already registered.
        """
        if isinstance(ref, BlueprintRef):
            registry: dict[str, Any] = self._blueprint_refs
            kind = "blueprint"
        elif isinstance(ref, ProjectRef):
            registry = self._project_refs
            kind = "project"
        else:
            raise TypeError(f"Unsupported workspace reference: {type(ref).__name__}")

        if ref.name in registry:
            raise ValueError(f"Duplicate {kind}: '{ref.name}'")
        logger.debug("Found %s '%s'", kind, ref.name)
        registry[ref.name] = ref

    def extend(self, data: dict[str, Any]) -> None:
        """Register blueprint and project blocks from a parsed HCL dict."""
        for bp_block in data.get("blueprint", []):
            for bp_name, bp_data in bp_block.items():
                self.add(
                    BlueprintRef(
                        bp_name,
                        includes=list(bp_data.get("include", [])),
                        ops=_parse_ops(bp_data),
                        description=bp_data.get("description", ""),
                    )
                )

        for proj_block in data.get("project", []):
            for proj_name, proj_data in proj_block.items():
                extra = {k: v for k, v in proj_data.items() if k not in _STRUCTURAL_KEYS}
                self.add(
                    ProjectRef(
                        proj_name,
                        uses=list(proj_data.get("use", [])),
                        ops=_parse_ops(proj_data),
                        fields=extra,
                    )
                )

    def load(self, file: str | Path) -> None:
        """Parse a single HCL file into the workspace."""
        path = Path(file)
        logger.debug("Loading %s", path)
        self.extend(hcl.load(path, context=self.context))

    def scan(self, path: str | Path, *, recurse: bool = True) -> None:
        """Load every .hcl file under a directory, in sorted order."""
        root = Path(path)
        if not root.is_dir():
            logger.warning("Directory '%s' does not exist; nothing to scan", root)
            return
        pattern = "**/*.hcl" if recurse else "*.hcl"
        for file in sorted(root.glob(pattern)):
            self.load(file)

    def __getitem__(self, name: str) -> P:
        return self._project_refs[name].resolve(self)  # type: ignore[return-value]

    def __contains__(self, name: object) -> bool:
        return name in self._project_refs

    def __iter__(self) -> Iterator[str]:
        return iter(self._project_refs)

    def __len__(self) -> int:
        return len(self._project_refs)

    @overload
    def get(self, name: str) -> P | None: ...
    @overload
    def get(self, name: str, default: P) -> P: ...
    @overload
    def get(self, name: str, default: None) -> P | None: ...
    def get(self, name: str, default: Any = None) -> P | None:
        if name not in self._project_refs:
            return default
        return self[name]

    def filter(self, names: Iterable[str]) -> list[P]:
        """Return projects matching the given names, preserving input order."""
        return [self[n] for n in names if n in self._project_refs]

    def __repr__(self) -> str:
        type_name = self.project_type.__name__
        bp_count = len(self._blueprint_refs)
        proj_count = len(self._project_refs)
        return f"Workspace(project_type={type_name}, blueprints={bp_count}, projects={proj_count})"
