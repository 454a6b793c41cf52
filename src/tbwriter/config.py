from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Paths:
    root: Path

    def run_dir(self, run: str) -> Path:
        return self.root / validate_run_name(run)

    def run_log(self, run: str) -> Path:
        return self.run_dir(run) / "tbwriter.jsonl"


def validate_run_name(run: str) -> str:
    run = run.strip()
    if not run:
        raise ConfigError("--run must be a non-empty string")
    if run in {".", ".."}:
        raise ConfigError("--run is not allowed")
    # Nested runs ("exp1/train") are fine; absolute paths and parent refs are not.
    parts = Path(run).parts
    if Path(run).is_absolute() or "\\" in run or ".." in parts:
        raise ConfigError(f"--run must be a relative path without '..': {run!r}")
    return run


def get_paths(logdir: str | None) -> Paths:
    """
    Resolve the log root that run directories live under.

    Order: explicit --logdir, then $TBWRITER_LOGDIR. There is no implicit default.
    """

    root = logdir or os.environ.get("TBWRITER_LOGDIR")
    if not root:
        raise ConfigError("Missing log directory. Set TBWRITER_LOGDIR or pass --logdir.")
    return Paths(root=Path(root).expanduser().resolve())
