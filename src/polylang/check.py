"""Polylang semantic gate: turns parse-time findings into reportable errors."""

from __future__ import annotations

from .context import Context

CODE_DUPLICATE_DECL = 1
CODE_INVALID_MONOMIAL = 2
CODE_UNDECLARED_POLY = 3
CODE_ARITY_MISMATCH = 4


class SemanticError(Exception):
    """One class of semantic error with the sorted lines it occurred on."""

    def __init__(self, code: int, lines: list[int]):
        self.code: int = code
        self.lines: list[int] = lines
        super().__init__(self.report())

    def report(self) -> str:
        out = "Semantic Error Code " + str(self.code) + ":"
        for line in self.lines:
            out += " " + str(line)
        return out


def _class_error(code: int, lines: list[int]) -> SemanticError | None:
    if len(lines) == 0:
        return None
    return SemanticError(code, sorted(set(lines)))


def check(ctx: Context) -> list[SemanticError]:
    """Return every non-empty error class, highest priority first (empty = ok).

    Only the first entry is ever reported.
    """
    errors: list[SemanticError] = []
    for code, lines in [
        (CODE_DUPLICATE_DECL, ctx.duplicate_lines),
        (CODE_INVALID_MONOMIAL, ctx.invalid_monomial_lines),
        (CODE_UNDECLARED_POLY, ctx.undeclared_call_lines),
        (CODE_ARITY_MISMATCH, ctx.arity_mismatch_lines),
    ]:
        err = _class_error(code, lines)
        if err is not None:
            errors.append(err)
    return errors
