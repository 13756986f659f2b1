"""JSON codec for document columns: datetimes survive a round trip.

Document payloads carry ``datetime`` values (the store's timestamp type). They
are written as ``{"$date": "<iso-8601>"}`` and turned back into aware
datetimes on read.
"""

import json
from datetime import datetime, timezone
from typing import Any

DATE_KEY = "$date"


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return {DATE_KEY: value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _object_hook(obj: dict[str, Any]) -> Any:
    if len(obj) == 1 and DATE_KEY in obj and isinstance(obj[DATE_KEY], str):
        try:
            return datetime.fromisoformat(obj[DATE_KEY])
        except ValueError:
            return obj
    return obj


def dumps(value: Any) -> str:
    return json.dumps(value, default=_default)


def loads(raw: str | bytes) -> Any:
    return json.loads(raw, object_hook=_object_hook)
