"""File I/O utilities: atomic writes, YAML and JSON handling."""

from __future__ import annotations

import io
import json
import tempfile
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

_yaml = YAML()
_yaml.default_flow_style = False


def write_atomic(path: Path | str, data: Any) -> None:
    """Write text or JSON-serializable data to a file atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        suffix=path.suffix,
        delete=False,
        encoding="utf-8",
    ) as tmp:
        if isinstance(data, str):
            tmp.write(data)
        else:
            json.dump(data, tmp, indent=2, ensure_ascii=False, default=str)
        tmp_path = Path(tmp.name)

    tmp_path.replace(path)


def write_json(path: Path | str, data: Any) -> None:
    write_atomic(path, data)


def read_yaml(path: Path | str) -> dict:
    """Read a YAML file and return its top level as a plain dict."""
    with open(path, encoding="utf-8") as f:
        data = _yaml.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}")
    return json.loads(json.dumps(data, default=str))


def dump_yaml(data: dict) -> str:
    """Render a dict as block-style YAML text."""
    buf = io.StringIO()
    _yaml.dump(data, buf)
    return buf.getvalue()
