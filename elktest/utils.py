import json
import time
from typing import Any


def pretty_json(data: Any) -> str:
    try:
        return json.dumps(data, ensure_ascii=False)
    except (TypeError, ValueError):
        return json.dumps({"unserializable": str(data)})


def now_millis() -> int:
    return time.time_ns() // 1_000_000
