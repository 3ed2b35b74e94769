import json, os
from datetime import datetime, timezone
from typing import Any


def _now_ts_str() -> str:
    return datetime.now(timezone.utc).strftime("%Y_%m_%d_%H:%M:%S")


def _write_json_doc(path: str, obj: Any) -> str:
    """One JSON document plus newline; tmp file then atomic replace."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp = path + ".tmp"
    with open(tmp, "w") as f:
        json.dump(obj, f)
        f.write("\n")
    os.replace(tmp, path)
    return path
