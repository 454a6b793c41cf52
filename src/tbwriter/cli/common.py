from __future__ import annotations

import argparse


def add_logdir_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--logdir",
        type=str,
        default=None,
        help="Root directory holding run directories (defaults to $TBWRITER_LOGDIR).",
    )
