"""Polylang CLI: parse, check and run polynomial programs."""

from __future__ import annotations

import sys

from . import SYNTAX_ERROR, ParseError, TokenizeError, parse, run
from .check import check
from .serialize import context_to_dict, to_json

PHASES: list[str] = ["parse", "check"]

USAGE: str = """\
polylang [OPTIONS] [FILE]

Run a Polylang program read from FILE, or from stdin when FILE is omitted.

Options:
  --stop-at PHASE   Stop after phase: parse, check
  --help            Show this help message
"""


def read_source(input_file: str | None) -> tuple[str, int]:
    """Read source from file or stdin. Returns (source, exit_code) where exit_code 0 means OK."""
    if input_file is not None:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            print("polylang: " + input_file + ": No such file or directory", file=sys.stderr)
            return ("", 1)
        except OSError as e:
            print("polylang: " + input_file + ": " + str(e), file=sys.stderr)
            return ("", 1)
    else:
        raw = sys.stdin.buffer.read()
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("polylang: invalid utf-8 in input", file=sys.stderr)
        return ("", 1)
    return (source, 0)


def run_until(source: str, stop_at: str) -> tuple[int, str]:
    """Run the pipeline up to and including a phase. Returns (exit_code, output)."""
    try:
        ctx = parse(source)
    except (TokenizeError, ParseError):
        return (1, SYNTAX_ERROR + "\n")
    if stop_at == "parse":
        return (0, to_json(context_to_dict(ctx)) + "\n")
    errors = check(ctx)
    if len(errors) > 0:
        return (0, errors[0].report() + "\n")
    return (0, "")


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str | None = None
    stop_at: str | None = None
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--stop-at":
            if i + 1 >= len(args):
                print("polylang: --stop-at requires an argument", file=sys.stderr)
                return 2
            stop_at = args[i + 1]
            i += 2
        elif arg.startswith("-") and arg != "-":
            print("polylang: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath is None:
            filepath = arg
            i += 1
        else:
            print("polylang: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2
    if stop_at is not None and stop_at not in PHASES:
        print("polylang: unknown phase '" + stop_at + "'", file=sys.stderr)
        return 2
    if filepath == "-":
        filepath = None

    source, err = read_source(filepath)
    if err != 0:
        return err

    if stop_at is not None:
        exit_code, output = run_until(source, stop_at)
        sys.stdout.write(output)
        return exit_code
    result = run(source)
    sys.stdout.write(result.stdout)
    sys.stderr.write(result.stderr)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
