from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Iterator

from tbwriter.proto import decode_event
from tbwriter.record import iter_records


def iter_events(source: BinaryIO) -> Iterator[Any]:
    for data in iter_records(source):
        yield decode_event(data)


def read_event_file(path: Path) -> list[Any]:
    with Path(path).open("rb") as f:
        return list(iter_events(f))


def describe_event(event: Any) -> str:
    """One-line human readable rendering, used by `inspect`."""

    what = event.WhichOneof("what")
    head = f"step={event.step} wall_time={event.wall_time:.3f}"
    if what == "file_version":
        writer = event.source_metadata.writer if event.HasField("source_metadata") else ""
        return f"{head} file_version={event.file_version!r} writer={writer!r}"
    if what != "summary":
        return f"{head} (empty)"

    parts: list[str] = []
    for v in event.summary.value:
        kind = v.WhichOneof("value")
        if kind == "simple_value":
            parts.append(f"{v.tag}=scalar({v.simple_value:.6g})")
        elif kind == "histo":
            parts.append(f"{v.tag}=histogram(n={v.histo.num:.0f}, bins={len(v.histo.bucket)})")
        elif kind == "tensor":
            texts = [s.decode("utf-8", errors="replace") for s in v.tensor.string_val]
            parts.append(f"{v.tag}=text({texts!r})")
        else:
            parts.append(f"{v.tag}=?")
    return f"{head} " + " ".join(parts)
