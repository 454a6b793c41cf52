from __future__ import annotations

import argparse

from tbwriter.cli.common import add_logdir_arg
from tbwriter.config import get_paths
from tbwriter.demo import write_demo_run


def add_demo_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("demo", help="Write a synthetic run (loss scalar + weight histograms).")
    add_logdir_arg(p)
    p.add_argument("--run", type=str, default="demo", help="Run name under the log directory (may be nested).")
    p.add_argument("--steps", type=int, default=50, help="Number of steps to write.")
    p.add_argument("--bins", type=int, default=30, help="Histogram bins per weight summary.")
    p.add_argument("--samples", type=int, default=10_000, help="Samples per histogram.")
    p.add_argument("--seed", type=int, default=0)
    p.set_defaults(func=cmd_demo)


def cmd_demo(args: argparse.Namespace) -> None:
    paths = get_paths(args.logdir)
    payload = write_demo_run(
        paths,
        run=args.run,
        steps=int(args.steps),
        bins=int(args.bins),
        samples=int(args.samples),
        seed=int(args.seed),
    )
    print(f"Wrote event file with {payload['steps']} steps: {payload['event_file']}")
