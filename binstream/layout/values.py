"""Convert between decoded values and JSON-friendly data.

bytes travel as hex strings, times as ISO 8601, durations as seconds,
identifiers as canonical UUID strings and enum members by name.
"""

import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from binstream.proto import SerializationError

from .codecs import LayoutCodecs
from .types import LayoutType


def to_json(codecs: LayoutCodecs, t: LayoutType, value: Any) -> Any:
    """Convert a decoded value of layout type `t` to JSON data."""
    if value is None:
        return None

    if t.element is not None:
        return [to_json(codecs, t.element, item) for item in value]

    record = codecs.layout.find_record(t.name)
    if record is not None:
        return {f.name: to_json(codecs, f.type, value[f.name]) for f in record.fields}

    if isinstance(value, Enum):
        return value.name
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


def from_json(codecs: LayoutCodecs, t: LayoutType, data: Any) -> Any:
    """Convert JSON data to a value encodable as layout type `t`."""
    if data is None:
        return None

    try:
        if t.element is not None:
            return [from_json(codecs, t.element, item) for item in data]

        record = codecs.layout.find_record(t.name)
        if record is not None:
            return {f.name: from_json(codecs, f.type, data[f.name]) for f in record.fields}

        if t.name in codecs.enums:
            return codecs.enums[t.name][data]
        if t.name in ("bytes", "zbytes"):
            return bytes.fromhex(data)
        if t.name in ("instant", "offset_instant"):
            return datetime.fromisoformat(data)
        if t.name == "duration":
            return timedelta(seconds=data)
        if t.name == "uuid":
            return uuid.UUID(data)
    except (KeyError, ValueError, TypeError, AttributeError) as exc:
        raise SerializationError(f"{data!r} is not a valid {t}: {exc}") from exc

    return data
