import json
from pathlib import Path
from typing import Any, Dict, List, Optional

HISTORY_PATH = Path.home() / ".base_encoding_history.jsonl"


def log_event(action: str, payload: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Append one JSON line describing an encode/decode operation.

    Only sizes and options are recorded, never the data itself.
    """
    record = {"action": action, **payload}
    target = path or HISTORY_PATH
    try:
        with target.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, ensure_ascii=False) + "\n")
    except OSError:
        # History failures should not break core functionality.
        pass


def read_history(path: Optional[Path] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Return the most recent records, oldest first. Unreadable lines are skipped."""
    target = path or HISTORY_PATH
    if not target.exists():
        return []
    records = []
    with target.open("r", encoding="utf-8", errors="replace") as fh:
        for line in fh:
            try:
                record = json.loads(line)
            except ValueError:
                continue
            if isinstance(record, dict) and "action" in record:
                records.append(record)
    if limit is not None:
        records = records[-limit:] if limit > 0 else []
    return records


def format_record(record: Dict[str, Any]) -> str:
    details = " ".join(
        f"{key}={value}" for key, value in record.items() if key != "action" and value is not None
    )
    return f"{record['action']:<10} {details}".rstrip()
