"""Resolver — walk parsed attributes and resolve ${...} references."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

_REF_PATTERN = re.compile(r"\$\$\{|\$\{\s*([^{}]+?)\s*\}")
_WHOLE_REF = re.compile(r"\$\{\s*([^{}]+?)\s*\}")


def default_context() -> dict[str, Any]:
    """Names available to every workspace: the process environment and cwd."""
    return {"env": dict(os.environ), "cwd": os.getcwd}


class Resolver:
    """Resolve ${...} references in attribute values against a context dict.

    A value that is exactly one reference keeps the referenced object's type.
    References embedded in longer strings are stringified. Use $${ for a
    literal ${.
    """

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        self._context = dict(context) if context is not None else {}

    def lookup(self, ref: str) -> Any:
        """Resolve a dotted reference (e.g., 'env.TOKEN') against the context."""
        current: Any = self._context
        for part in ref.split("."):
            if isinstance(current, Mapping) and part in current:
                current = current[part]
            elif not isinstance(current, Mapping) and hasattr(current, part):
                current = getattr(current, part)
            else:
                raise ValueError(f"undefined variable '{ref}'")

        if callable(current) and not isinstance(current, type):
            current = current()
        return current

    def _substitute(self, match: re.Match[str]) -> str:
        if match.group(0) == "$${":
            return "${"
        return str(self.lookup(match.group(1)))

    def resolve_value(self, value: str) -> Any:
        if "${" not in value:
            return value
        whole = _WHOLE_REF.fullmatch(value)
        if whole:
            return self.lookup(whole.group(1))
        return _REF_PATTERN.sub(self._substitute, value)

    def resolve(self, data: Any) -> Any:
        """Recursively resolve references in dicts, lists and strings."""
        if isinstance(data, dict):
            return {key: self.resolve(item) for key, item in data.items()}
        if isinstance(data, list):
            return [self.resolve(item) for item in data]
        if isinstance(data, str):
            return self.resolve_value(data)
        return data
