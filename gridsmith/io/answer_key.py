"""Reading answer keys and template grids from disk."""

from __future__ import annotations

import codecs
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from ..core.exceptions import InputError
from ..core.models import GridConstructorInput


def rot13(text: str) -> str:
    """Stored answer keys keep their answers ROT13-obfuscated."""

    return codecs.encode(text, "rot13")


def answer_key_from_dict(payload: Mapping[str, Any], encoded: bool = False) -> GridConstructorInput:
    """Build solver input from a JSON answer key.

    ``width``/``height`` may be omitted when the payload carries a ``grid``
    string, in which case they are taken from that grid.
    """

    data: Dict[str, Any] = dict(payload)
    if ("width" not in data or "height" not in data) and data.get("grid"):
        rows = [row.split() for row in str(data["grid"]).strip().split("\n")]
        data.setdefault("height", len(rows))
        data.setdefault("width", len(rows[0]) if rows else 0)
    if "width" not in data or "height" not in data:
        raise InputError("Answer key needs width and height (or a grid to derive them from)")

    try:
        if encoded:
            for direction in ("across", "down"):
                data[direction] = [
                    {**entry, "answer": rot13(entry["answer"])} if entry.get("answer") else dict(entry)
                    for entry in data.get(direction) or []
                ]
        return GridConstructorInput.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InputError(f"Malformed answer key: {exc}") from exc


def load_answer_key_payload(path: Path | str) -> Dict[str, Any]:
    """Read the raw JSON answer key; invalid JSON raises :class:`InputError`."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InputError(f"Answer key is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise InputError("Answer key must be a JSON object")
    return payload


def load_answer_key(path: Path | str, encoded: bool = False) -> GridConstructorInput:
    return answer_key_from_dict(load_answer_key_payload(path), encoded=encoded)


def load_template_file(path: Path | str) -> List[str]:
    """Read grid strings separated by blank lines. Lines starting with # are skipped."""

    templates: List[str] = []
    current: List[str] = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith("#"):
            continue
        if not stripped:
            if current:
                templates.append("\n".join(current))
                current = []
            continue
        current.append(stripped)
    if current:
        templates.append("\n".join(current))
    return templates


__all__ = [
    "answer_key_from_dict",
    "load_answer_key",
    "load_answer_key_payload",
    "load_template_file",
    "rot13",
]
