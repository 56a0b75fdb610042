"""Validation utilities for PaintForge timeline data."""

from __future__ import annotations

import json
from pathlib import Path

import jsonschema

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "timeline.schema.json"


def load_schema() -> dict[str, object]:
    return json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))


def validate_timeline_json(data: dict[str, object] | list[object]) -> None:
    """Validate raw timeline JSON against timeline.schema.json.

    Accepts either ``{"scenes": [...]}`` or a bare list of scene records.
    This checks shape only; interval ordering is enforced when the data is
    loaded into :class:`~paintforge.models.scene.Timeline`.

    Raises
    ------
    jsonschema.ValidationError
        If the data does not conform to the schema.
    """
    jsonschema.validate(data, load_schema())
