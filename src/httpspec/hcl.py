"""HCL loading engine — render and parse .hcl files into plain dicts."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .workspace import Workspace

import hcl2
import jinja2

from .projects import Project

logger = logging.getLogger(__name__)

_ESCAPE_PATTERN = re.compile(r'\\(u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|["\\nrt])')

_SIMPLE_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r", "t": "\t"}


def _unescape(value: str) -> str:
    """Decode HCL string escapes (python-hcl2 4.x leaves them encoded)."""
    if "\\" not in value:
        return value

    def _replace(m: re.Match[str]) -> str:
        code = m.group(1)
        if code[0] in "uU":
            return chr(int(code[1:], 16))
        return _SIMPLE_ESCAPES[code]

    return _ESCAPE_PATTERN.sub(_replace, value)


def _decode_strings(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {_decode_strings(k): _decode_strings(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decode_strings(item) for item in obj]
    if isinstance(obj, str):
        return _unescape(obj)
    return obj


def scan[P: Project](
    path: str | Path,
    *,
    project_type: type[P] = Project,  # type: ignore[assignment]
    recurse: bool = True,
    context: Mapping[str, Any] | None = None,
) -> Workspace[P]:
    """Scan a directory for .hcl files and return a ready Workspace."""
    from .workspace import Workspace

    ws = Workspace(project_type=project_type, context=context)
    ws.scan(path, recurse=recurse)
    return ws


def load(
    file: Path,
    *,
    context: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Load and parse a single HCL file, rendering Jinja2 templates with context."""
    text = file.read_text()
    ctx = dict(context) if context is not None else {}
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        text = env.from_string(text).render(ctx)
    except jinja2.TemplateError as exc:
        raise ValueError(f"{file}: {exc}") from exc

    return _decode_strings(hcl2.loads(text))
