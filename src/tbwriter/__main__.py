from __future__ import annotations

import argparse

from tbwriter.cli.demo import add_demo_parser
from tbwriter.cli.inspect import add_inspect_parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m tbwriter",
        description="Write and verify TensorBoard event files.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_demo_parser(subparsers)
    add_inspect_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
