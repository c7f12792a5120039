import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import TextIO

from epoch.config import LOG_FORMAT, LOG_LEVEL, Options
from epoch.errors import EpochError, InputArityError
from epoch.formatting import FORMAT_NAMES
from epoch.run import run
from epoch.units import GUESS


def _version() -> str:
    try:
        return version("epoch")
    except PackageNotFoundError:
        return "undefined"


def make_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="epoch",
        description="Convert epoch timestamps to human readable dates and back.",
    )
    p.add_argument(
        "input",
        nargs="*",
        help="timestamp (1595087205, 1595087205ms, ...) or formatted date; "
        "read from stdin when omitted, now when stdin is a terminal",
    )
    p.add_argument(
        "--unit",
        default=GUESS,
        choices=["s", "ms", "us", "ns", GUESS],
        help="unit for timestamps (default: guess)",
    )
    p.add_argument(
        "--format",
        default="",
        help="output format: "
        + ", ".join(FORMAT_NAMES)
        + ", or a custom format such as '{YYYY}-{MM}-{DD} {HH}:{mm}:{ss}'",
    )
    p.add_argument(
        "--tz",
        default="",
        help="timezone: 'Local' (default), 'UTC', or an IANA name "
        "such as 'America/New_York'",
    )
    p.add_argument(
        "--quiet", action="store_true", help="don't report guessed units"
    )
    p.add_argument(
        "--calc",
        default="",
        help="time calculations, e.g. '+30m -5h +3M -10Y'",
    )
    p.add_argument("--version", action="version", version=_version())
    return p


def attach_calc(argv: list[str]) -> list[str]:
    """Glue "--calc VALUE" into "--calc=VALUE".

    On its own argparse reads a value such as "-5h" as an unknown option.
    """
    joined: list[str] = []
    args = iter(argv)
    for arg in args:
        if arg == "--":
            joined.append(arg)
            joined.extend(args)
            break
        if arg == "--calc":
            value = next(args, None)
            if value is not None:
                joined.append(f"--calc={value}")
                continue
        joined.append(arg)
    return joined


def configure_logging(quiet: bool = False) -> None:
    """Send log records to stderr, installing the handler once per process."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(stream=sys.stderr, format=LOG_FORMAT)
    logging.getLogger("epoch").setLevel("WARNING" if quiet else LOG_LEVEL)


def read_input(args: list[str], stdin: TextIO | None = None) -> str:
    """Pick the input from the positional arguments or a pipe.

    Raises:
        InputArityError: If more than one positional argument was given
    """
    if len(args) > 1:
        raise InputArityError(len(args))
    if args:
        return args[0]

    stdin = stdin if stdin is not None else sys.stdin
    if stdin is None or stdin.isatty():
        return ""
    return stdin.readline().strip()


def main(argv: list[str] | None = None) -> int:
    parser = make_parser()
    ns = parser.parse_args(attach_calc(sys.argv[1:] if argv is None else argv))
    configure_logging(quiet=ns.quiet)

    options = Options(
        unit=ns.unit, format=ns.format, tz=ns.tz, quiet=ns.quiet, calc=ns.calc
    )
    try:
        print(run(read_input(ns.input), options))
    except EpochError as e:
        parser.exit(1, f"epoch: {e}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
