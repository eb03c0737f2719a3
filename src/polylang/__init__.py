"""Polylang parser, checker and interpreter: public API."""

from __future__ import annotations

from .analysis import (
    WARN_UNINITIALIZED,
    WARN_USELESS,
    poly_degrees,
    uninitialized_uses,
    useless_assignments,
    warning_line,
)
from .check import SemanticError as SemanticError, check as check_context
from .context import (
    TASK_DEGREES,
    TASK_EXECUTE,
    TASK_UNINITIALIZED,
    TASK_USELESS,
    Context,
)
from .parse import ParseError as ParseError, Parser
from .runtime import RunResult, Runtime, RuntimeFault
from .tokens import TokenizeError as TokenizeError, tokenize

SYNTAX_ERROR: str = "SYNTAX ERROR !!!!!&%!!"


def parse(source: str) -> Context:
    """Parse Polylang source into a compilation context."""
    parser = Parser(tokenize(source))
    return parser.parse_program()


def check(source: str) -> list[SemanticError]:
    """Parse and check Polylang source. Returns error classes (empty = ok)."""
    return check_context(parse(source))


def _text(lines: list[str]) -> str:
    if len(lines) == 0:
        return ""
    return "\n".join(lines) + "\n"


def run_tasks(ctx: Context) -> RunResult:
    """Run every selected task, in task-number order, on a checked context."""
    lines: list[str] = []
    if ctx.selected(TASK_EXECUTE):
        rt = Runtime(ctx)
        try:
            rt.run()
        except RuntimeFault as e:
            lines.extend(rt.output)
            return RunResult(1, _text(lines), "polylang: runtime error: " + e.msg + "\n")
        lines.extend(rt.output)
    if ctx.selected(TASK_UNINITIALIZED):
        uninit = uninitialized_uses(ctx)
        if len(uninit) > 0:
            lines.append(warning_line(WARN_UNINITIALIZED, uninit))
    if ctx.selected(TASK_USELESS):
        useless = useless_assignments(ctx)
        if len(useless) > 0:
            lines.append(warning_line(WARN_USELESS, useless))
    if ctx.selected(TASK_DEGREES):
        for name, deg in poly_degrees(ctx):
            lines.append(name + ": " + str(deg))
    return RunResult(0, _text(lines), "")


def run(source: str) -> RunResult:
    """Parse, check and run a program, producing exactly what the CLI prints."""
    try:
        ctx = parse(source)
    except (TokenizeError, ParseError):
        return RunResult(1, SYNTAX_ERROR + "\n", "")
    errors = check_context(ctx)
    if len(errors) > 0:
        return RunResult(0, errors[0].report() + "\n", "")
    return run_tasks(ctx)
