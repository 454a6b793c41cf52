from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tbwriter.config import Paths


@dataclass(frozen=True)
class RunLogger:
    """
    JSONL side log for one run directory. TensorBoard ignores it (no "tfevents" in the name).
    """

    run: str
    log_path: Path

    @classmethod
    def for_run(cls, paths: Paths, run: str) -> "RunLogger":
        log_path = paths.run_log(run)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(run=run, log_path=log_path)

    def log_event(self, event: str, payload: dict[str, Any]) -> None:
        rec = {"ts": time.time(), "run": self.run, "event": event, **payload}
        with self.log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec) + "\n")

    def log_summary(self, step: int, summary: Any) -> None:
        values = [{"tag": v.tag, "kind": v.WhichOneof("value")} for v in summary.value]
        self.log_event("summary_written", {"step": int(step), "values": values})
