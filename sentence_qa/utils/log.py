import datetime
import json
from pathlib import Path


class Logger:
    """Append-only JSON-lines log; each record gets a `ts` stamp unless it has one."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, obj: dict):
        record = {"ts": datetime.datetime.now().isoformat(timespec="seconds")} | obj
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
