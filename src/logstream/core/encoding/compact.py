"""Compact encoder: one JSON object per log line."""

import dataclasses
import json
from typing import Any

from logstream.core.models import LogRecord


def record_to_dict(record: LogRecord) -> dict[str, Any]:
    """Map a record onto the compact wire keys.

    Key order is fixed: ``t``, ``l``, ``s``, ``n``, then ``e`` for errors or
    ``d`` for payloads. ``d`` is left out when there is no payload.
    """
    obj: dict[str, Any] = {
        "t": record.timestamp,
        "l": int(record.level),
        "s": record.scope,
        "n": record.name,
    }
    if record.error is not None:
        error = dataclasses.asdict(record.error)
        if error["stack"] is None:
            del error["stack"]
        obj["e"] = error
    elif record.payload is not None:
        obj["d"] = record.payload
    return obj


def encode_record(record: LogRecord) -> str:
    """Encode a record as a single compact JSON line, without terminator."""
    return json.dumps(record_to_dict(record), separators=(",", ":"), ensure_ascii=False)

