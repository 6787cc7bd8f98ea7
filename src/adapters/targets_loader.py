"""Loading of the target list (JSON).

Expected format:
    [{"location": "bar.com"}, {"location": "https://other.com/path"}]

Extra keys per record are ignored. Anything else (unreadable file, invalid
JSON, not a list of records with a string `location`) raises `InputError`.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from core.domain.errors import InputError
from core.domain.models import Target

_TARGETS = TypeAdapter(list[Target])


def parse_targets(raw: str | bytes) -> list[Target]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InputError(f"error parsing JSON: {exc}") from exc

    try:
        return _TARGETS.validate_python(data)
    except ValidationError as exc:
        raise InputError(f"invalid target list: {exc.error_count()} error(s)\n{exc}") from exc


def load_targets(path: Path) -> list[Target]:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise InputError(f"error reading file {path}: {exc}") from exc
    return parse_targets(raw)
