from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from enum import Enum
from typing import Any

import yaml

FORMATS = ("yaml", "json")


def to_plain(obj: Any) -> Any:
    """Convert model dataclasses into JSON/YAML friendly builtins."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_plain(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, (list, tuple)):
        return [to_plain(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): to_plain(v) for k, v in obj.items()}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def render(obj: Any, fmt: str) -> str:
    """Render a response object as ``yaml`` or ``json`` text."""
    plain = to_plain(obj)
    if fmt == "yaml":
        return yaml.safe_dump(plain, sort_keys=False, allow_unicode=True)
    if fmt == "json":
        return json.dumps(plain, indent=2, ensure_ascii=False) + "\n"
    raise ValueError(f"unrecognized format {fmt!r} (valid values are {', '.join(FORMATS)})")
