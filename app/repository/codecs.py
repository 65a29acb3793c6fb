"""Voyage CMS - Structured Field Codecs.

A codec turns a structured wire value (itinerary, FAQ list, gallery) into its
storage form and back. Every codec must round-trip:
``decode(encode(x)) == x`` for any value the field allows, the empty list
included. ``decode`` also accepts values that are already native, so a
backend with real JSON columns and one that only stores text both work.
"""

import json
from typing import Any, List

from app.core.errors import IntegrityError, ValidationError


class JSONListCodec:
    """Ordered list stored as JSON text. Absent values become ``[]``."""

    name = "json_list"

    def encode(self, value: Any, field: str = "") -> str:
        if value is None:
            return "[]"
        if isinstance(value, tuple):
            value = list(value)
        if not isinstance(value, list):
            raise ValidationError(f"Field '{field}' must be a list", fields=[field])
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Field '{field}' is not JSON serializable: {e}", fields=[field]
            ) from e

    def decode(self, stored: Any, field: str = "") -> List[Any]:
        if stored is None or stored == "":
            return []
        if isinstance(stored, list):
            return stored
        if isinstance(stored, (bytes, bytearray)):
            stored = stored.decode("utf-8")
        if not isinstance(stored, str):
            raise IntegrityError(
                f"Column '{field}' holds {type(stored).__name__}, expected a list"
            )
        try:
            value = json.loads(stored)
        except json.JSONDecodeError as e:
            raise IntegrityError(f"Column '{field}' holds invalid JSON: {e}") from e
        if not isinstance(value, list):
            raise IntegrityError(
                f"Column '{field}' decoded to {type(value).__name__}, expected a list"
            )
        return value


JSON_LIST = JSONListCodec()
