from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jokebox.errors import ParseError


_MISSING = object()


def read_json(path: str | Path, default: Any = _MISSING) -> Any:
    """
    Read and decode a JSON file.

    - Missing file -> `default` if given, else FileNotFoundError
    - Malformed content (including an empty file) -> ParseError

    No partial recovery: a file that doesn't decode is an error, never guessed at.
    """
    p = Path(path)
    if not p.exists():
        if default is _MISSING:
            raise FileNotFoundError(str(p))
        return default

    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"Error parsing file {p}: {exc}") from exc


def write_json(path: str | Path, value: Any) -> None:
    """Overwrite `path` with `value` as indented JSON, creating parent dirs."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(value, indent=2) + "\n", encoding="utf-8")
