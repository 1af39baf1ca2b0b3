from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import orjson


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def dumps_json(value: Any, pretty: bool = False) -> bytes:
    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(value, option=option)


def loads_json(value: bytes | str | None) -> Any:
    if not value:
        return None
    return orjson.loads(value)
