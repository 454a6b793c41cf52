from __future__ import annotations

import math
import os
import socket
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO

from tbwriter.proto import Event, SourceMetadata, encode
from tbwriter.record import TfRecord

FILE_VERSION = "brain.Event:2"
WRITER_ID = "tbwriter"

WallTime = datetime | float | int


class ClockError(OSError):
    pass


class UidCounter:
    """Process-wide fetch-and-add counter; no two calls return the same value."""

    def __init__(self, start: int = 0) -> None:
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
        return value


GLOBAL_UID = UidCounter()


def _hostname() -> str:
    # Diagnostic only; never fail file creation over it.
    try:
        return socket.gethostname()
    except OSError:
        return ""


def event_file_name(counter: UidCounter | None = None) -> str:
    """
    Unique event file name. TensorBoard only picks up files containing "tfevents".
    """

    now = int(time.time())
    uid = (counter or GLOBAL_UID).next()
    return f"events.out.tfevents.{now:010d}.{_hostname()}.{os.getpid()}.{uid}"


def wall_time_seconds(wall_time: WallTime) -> float:
    if isinstance(wall_time, datetime):
        if wall_time.tzinfo is None:
            # Naive datetimes are local time, as in `datetime.timestamp`.
            try:
                wall_time = wall_time.astimezone()
            except (OverflowError, ValueError) as e:
                raise ClockError(f"Wall time is not representable: {wall_time!r}") from e
        delta = wall_time - datetime(1970, 1, 1, tzinfo=timezone.utc)
        secs = delta.total_seconds()
    else:
        try:
            secs = float(wall_time)
        except OverflowError as e:
            raise ClockError(f"Wall time is not representable: {wall_time!r}") from e
    if not math.isfinite(secs):
        raise ClockError(f"Wall time is not finite: {wall_time!r}")
    if secs < 0:
        raise ClockError(f"Wall time predates the Unix epoch: {wall_time!r}")
    return secs


class EventWriter:
    """
    Writes TensorBoard events to a binary sink, one framed record per call.

    The writer does no buffering of its own; wrap the sink in a buffered stream and
    `flush()` when results should become visible. Not thread-safe.
    """

    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink

    @classmethod
    def create(cls, run_dir: Path, *, counter: UidCounter | None = None) -> "EventWriter":
        run_dir = Path(run_dir)
        run_dir.mkdir(parents=True, exist_ok=True)
        path = run_dir / event_file_name(counter)
        # "x" fails if the name is somehow already taken.
        return cls(path.open("xb"))

    @property
    def sink(self) -> BinaryIO:
        return self._sink

    @property
    def path(self) -> Path | None:
        name = getattr(self._sink, "name", None)
        return Path(name) if isinstance(name, str) else None

    def flush(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        self._sink.close()

    def __enter__(self) -> "EventWriter":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def write_record(self, record: TfRecord) -> None:
        record.write(self._sink)

    def write_event(self, event: Any) -> None:
        self.write_record(TfRecord.from_data(encode(event)))

    def write_file_version(self) -> None:
        event = Event(
            wall_time=wall_time_seconds(time.time()),
            file_version=FILE_VERSION,
            source_metadata=SourceMetadata(writer=WRITER_ID),
        )
        self.write_event(event)

    def write_summary(self, wall_time: WallTime, step: int, summary: Any) -> None:
        event = Event(wall_time=wall_time_seconds(wall_time), step=int(step), summary=summary)
        self.write_event(event)
