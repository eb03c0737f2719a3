"""Polylang parser: recursive descent, one method per grammar production.

Semantic findings (duplicate declarations, undeclared parameters, bad calls)
are recorded on the Context while parsing; only syntax errors stop the parse.
"""

from __future__ import annotations

from typing import Callable

from .ast import (
    Add,
    AssignStmt,
    Call,
    Const,
    Expr,
    InputStmt,
    Mul,
    OutputStmt,
    PolyHeader,
    Pow,
    Stmt,
    Sub,
    Var,
    wrap_int,
)
from .context import Context
from .tokens import TK_EOF, TK_ID, TK_NUM, Token

DEFAULT_PARAM = "x"


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class Parser:
    """Recursive descent parser for Polylang programs."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0
        self.ctx: Context = Context()
        # Parameters of the polynomial whose body is being parsed
        self.params: tuple[str, ...] = ()

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.peek(0)

    def peek(self, offset: int) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[len(self.tokens) - 1]
        return self.tokens[idx]

    def advance(self) -> Token:
        tok = self.current()
        if self.pos < len(self.tokens):
            self.pos += 1
        return tok

    def at(self, value: str) -> bool:
        return self.current().value == value

    def at_type(self, type_: str) -> bool:
        return self.current().type == type_

    def expect(self, value: str) -> Token:
        tok = self.current()
        if tok.value != value:
            raise self.error("expected '" + value + "', got '" + tok.value + "'")
        return self.advance()

    def expect_type(self, type_: str) -> Token:
        tok = self.current()
        if tok.type != type_:
            raise self.error("expected " + type_ + ", got '" + tok.value + "'")
        return self.advance()

    def error(self, msg: str) -> ParseError:
        tok = self.current()
        return ParseError(msg, tok.line, tok.col)

    def _starts_factor(self) -> bool:
        return self.at_type(TK_ID) or self.at("(")

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> Context:
        """Program = Tasks Poly Execute Inputs EOF"""
        self.parse_tasks_section()
        self.parse_poly_section()
        self.parse_execute_section()
        self.parse_inputs_section()
        if not self.at_type(TK_EOF):
            raise self.error("expected end of input, got '" + self.current().value + "'")
        return self.ctx

    def parse_tasks_section(self) -> None:
        """Tasks = 'TASKS' NUM+"""
        self.expect("TASKS")
        self.ctx.tasks.add(int(self.expect_type(TK_NUM).value))
        while self.at_type(TK_NUM):
            self.ctx.tasks.add(int(self.advance().value))

    # ── Polynomial Declarations ──────────────────────────────

    def parse_poly_section(self) -> None:
        """Poly = 'POLY' PolyDecl+"""
        self.expect("POLY")
        self.parse_poly_decl()
        while self.at_type(TK_ID):
            self.parse_poly_decl()

    def parse_poly_decl(self) -> None:
        """PolyDecl = PolyHeader '=' PolyBody ';'"""
        header = self.parse_poly_header()
        self.expect("=")
        self.params = header.params
        body = self.parse_poly_body()
        self.params = ()
        self.expect(";")
        self.ctx.declare(header, body)

    def parse_poly_header(self) -> PolyHeader:
        """PolyHeader = ID ( '(' IdList ')' )?"""
        name_tok = self.expect_type(TK_ID)
        if not self.at("("):
            return PolyHeader(name_tok.value, name_tok.line, (DEFAULT_PARAM,))
        self.advance()
        params = self.parse_id_list()
        self.expect(")")
        return PolyHeader(name_tok.value, name_tok.line, tuple(params))

    def parse_id_list(self) -> list[str]:
        ids: list[str] = [self.expect_type(TK_ID).value]
        while self.at(","):
            self.advance()
            ids.append(self.expect_type(TK_ID).value)
        return ids

    def parse_poly_body(self) -> Expr:
        """PolyBody = PolyTerm ( '+' PolyTerm )* ( '-' PolyBody )?"""
        return self._parse_difference(self.parse_poly_term)

    def parse_poly_term(self) -> Expr:
        """PolyTerm = PolyFactor PolyFactor*"""
        left = self.parse_poly_factor()
        while self._starts_factor():
            left = Mul(left, self.parse_poly_factor())
        return left

    def parse_poly_factor(self) -> Expr:
        """PolyFactor = ( NUM | ID | '(' PolyBody ')' ) ( '^' NUM )?"""
        tok = self.current()
        was_paren = False
        expr: Expr
        if tok.type == TK_NUM:
            self.advance()
            expr = Const(wrap_int(int(tok.value)))
        elif tok.type == TK_ID:
            self.advance()
            if tok.value not in self.params:
                self.ctx.invalid_monomial_lines.append(tok.line)
            expr = Var(tok.value, tok.line)
        elif tok.value == "(":
            self.advance()
            expr = self.parse_poly_body()
            self.expect(")")
            was_paren = True
        else:
            raise self.error("expected monomial, got '" + tok.value + "'")
        if self.at("^"):
            return self.parse_exponent(expr)
        if was_paren and self.at_type(TK_NUM):
            raise self.error("numeral after parenthesized factor")
        return expr

    def parse_exponent(self, base: Expr) -> Pow:
        self.expect("^")
        return Pow(base, int(self.expect_type(TK_NUM).value))

    # ── Execution Script ─────────────────────────────────────

    def parse_execute_section(self) -> None:
        """Execute = 'EXECUTE' Stmt+"""
        self.expect("EXECUTE")
        self.ctx.stmts.append(self.parse_stmt())
        while self.at("INPUT") or self.at("OUTPUT") or self.at_type(TK_ID):
            self.ctx.stmts.append(self.parse_stmt())

    def parse_stmt(self) -> Stmt:
        if self.at("INPUT"):
            self.advance()
            name_tok = self.expect_type(TK_ID)
            self.expect(";")
            return InputStmt(name_tok.value)
        if self.at("OUTPUT"):
            self.advance()
            name_tok = self.expect_type(TK_ID)
            self.expect(";")
            return OutputStmt(name_tok.value)
        if self.at_type(TK_ID):
            return self.parse_assign_stmt()
        raise self.error("expected statement, got '" + self.current().value + "'")

    def parse_assign_stmt(self) -> AssignStmt:
        name_tok = self.expect_type(TK_ID)
        self.expect("=")
        value = self.parse_expr()
        self.expect(";")
        return AssignStmt(name_tok.value, name_tok.line, value)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        """Expr = Term ( '+' Term )* ( '-' Expr )?"""
        return self._parse_difference(self.parse_term)

    def _parse_difference(self, parse_term: Callable[[], Expr]) -> Expr:
        """Sum ( '-' Sum )*, folded so that a - b - c is a - (b - c)."""
        sums: list[Expr] = [self._parse_sum(parse_term)]
        while self.at("-"):
            self.advance()
            sums.append(self._parse_sum(parse_term))
        result = sums[len(sums) - 1]
        for left in reversed(sums[: len(sums) - 1]):
            result = Sub(left, result)
        return result

    def _parse_sum(self, parse_term: Callable[[], Expr]) -> Expr:
        left = parse_term()
        while self.at("+"):
            self.advance()
            left = Add(left, parse_term())
        return left

    def parse_term(self) -> Expr:
        """Term = Factor Factor*, stopping after a call."""
        left = self.parse_factor()
        while self._starts_factor() and not isinstance(left, Call):
            left = Mul(left, self.parse_factor())
        return left

    def parse_factor(self) -> Expr:
        """Factor = ( NUM | Call | ID | '(' Expr ')' ) ( '^' NUM )?"""
        tok = self.current()
        expr: Expr
        if tok.type == TK_NUM:
            self.advance()
            expr = Const(wrap_int(int(tok.value)))
        elif tok.type == TK_ID:
            if self.peek(1).value == "(":
                expr = self.parse_call()
            else:
                self.advance()
                expr = Var(tok.value, tok.line)
        elif tok.value == "(":
            self.advance()
            expr = self.parse_expr()
            self.expect(")")
        else:
            raise self.error("expected expression, got '" + tok.value + "'")
        if self.at("^"):
            return self.parse_exponent(expr)
        return expr

    def parse_call(self) -> Call:
        """Call = ID '(' Expr ( ',' Expr )* ')'"""
        name_tok = self.expect_type(TK_ID)
        self.expect("(")
        args: list[Expr] = [self.parse_expr()]
        while self.at(","):
            self.advance()
            args.append(self.parse_expr())
        self.expect(")")
        decl = self.ctx.lookup(name_tok.value)
        if decl is None:
            self.ctx.undeclared_call_lines.append(name_tok.line)
        elif len(args) != len(decl.params):
            self.ctx.arity_mismatch_lines.append(name_tok.line)
        return Call(name_tok.value, tuple(args), name_tok.line)

    # ── Inputs ───────────────────────────────────────────────

    def parse_inputs_section(self) -> None:
        """Inputs = 'INPUTS' NUM+"""
        self.expect("INPUTS")
        self.ctx.inputs.append(wrap_int(int(self.expect_type(TK_NUM).value)))
        while self.at_type(TK_NUM):
            self.ctx.inputs.append(wrap_int(int(self.advance().value)))
