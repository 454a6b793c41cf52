from __future__ import annotations

import argparse
from pathlib import Path

from tbwriter.proto import EncodingError
from tbwriter.reader import describe_event, iter_events
from tbwriter.record import RecordError


def add_inspect_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("inspect", help="Verify an event file and print one line per event.")
    p.add_argument("path", type=str, help="Event file (events.out.tfevents.*).")
    p.add_argument("--max-events", type=int, default=0, help="Stop after N events (0 = all).")
    p.set_defaults(func=cmd_inspect)


def cmd_inspect(args: argparse.Namespace) -> None:
    path = Path(str(args.path))
    if not path.is_file():
        raise SystemExit(f"Not a file: {path}")
    count = 0
    with path.open("rb") as f:
        try:
            for event in iter_events(f):
                print(describe_event(event))
                count += 1
                if args.max_events and count >= int(args.max_events):
                    break
        except (RecordError, EncodingError) as e:
            raise SystemExit(f"Corrupt event file {path} after {count} events: {e}") from e
    print(f"{count} events OK")
