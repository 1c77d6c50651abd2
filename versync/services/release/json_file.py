"""JSON descriptor I/O shared by package.json and lock file handling.

npm writes these files with two-space indentation, insertion-ordered keys,
raw non-ASCII characters and a trailing newline; `dump_json` reproduces that
so a version rewrite only changes the version lines.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from versync.core.result import Err, Ok, Result
from versync.core.structured import StrDict, as_str_dict


@dataclass(frozen=True, slots=True)
class JsonDocument:
    path: Path
    text: str
    data: StrDict


def load_json_object(path: Path) -> Result[JsonDocument, str]:
    """Read path and parse it as a JSON object; Err carries the reason."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err("file not found")
    except OSError as e:
        return Err(f"cannot read file: {e}")

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(f"invalid JSON: {e}")

    data = as_str_dict(obj)
    if data is None:
        return Err("JSON root is not an object")
    return Ok(JsonDocument(path=path, text=text, data=data))


def dump_json(data: StrDict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
