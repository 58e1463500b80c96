from __future__ import annotations

import math
from typing import Callable, TextIO

from sprig import Value
from sprig.config import UnknownOperatorPolicy
from sprig.debug_utils.pprint import to_source
from sprig.errors import (
    EvalError,
    SprigArityError,
    SprigNameError,
    SprigOverflowError,
    SprigTypeError,
    SprigZeroDivisionError,
)
from sprig.evaluation.outcome import BuiltinOutcome
from sprig.types.ast import Ast
from sprig.types.token import Token

BuiltinFn = Callable[[list[Value], TextIO], BuiltinOutcome]


# -------------------------------
# Helpers
# -------------------------------
def literal_text(node: Value) -> str:
    """Text a value prints as: strings unquoted, lists as <a b c>."""
    return to_source(node, quote_strings=False)


def _numbers(name: str, args: list[Value]) -> list[Token]:
    tokens = []
    for arg in args:
        if not arg.is_number():
            raise SprigTypeError(f"All arguments to {name} must be numbers, got {to_source(arg)}")
        tokens.append(arg.token)
    return tokens


def _value(token: Token, promote: bool = False) -> int | float:
    try:
        if promote or token.is_float:
            return float(token.lexeme)
        return int(token.lexeme)
    except ValueError as e:
        raise SprigOverflowError(f"Number literal of {len(token.lexeme)} characters is out of range") from e


def _result(name: str, value: int | float) -> BuiltinOutcome:
    if isinstance(value, float) and not math.isfinite(value):
        raise SprigOverflowError(f"{name} overflowed to {value}")
    try:
        return BuiltinOutcome.push(Ast.number(value))
    except ValueError as e:
        raise SprigOverflowError(f"{name} result is too large to represent") from e


def _truncating_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


# -------------------------------
# Output
# -------------------------------
def print_builtin(args: list[Value], out: TextIO) -> BuiltinOutcome:
    for arg in args:
        out.write(literal_text(arg))
    return BuiltinOutcome.ignore()

def println_builtin(args: list[Value], out: TextIO) -> BuiltinOutcome:
    for arg in args:
        out.write(literal_text(arg))
        out.write("\n")
    return BuiltinOutcome.ignore()

# -------------------------------
# Arithmetic
# -------------------------------
def add(args: list[Value], out: TextIO) -> BuiltinOutcome:
    tokens = _numbers("add", args)
    promote = any(t.is_float for t in tokens)
    return _result("add", sum((_value(t, promote) for t in tokens), 0.0 if promote else 0))

def mult(args: list[Value], out: TextIO) -> BuiltinOutcome:
    tokens = _numbers("mult", args)
    promote = any(t.is_float for t in tokens)
    result: int | float = 1.0 if promote else 1
    for t in tokens:
        result *= _value(t, promote)
    return _result("mult", result)

def sub(args: list[Value], out: TextIO) -> BuiltinOutcome:
    tokens = _numbers("sub", args)
    if not tokens:
        raise SprigArityError("sub requires at least 1 argument")
    result = _value(tokens[0])
    for t in tokens[1:]:
        result -= _value(t)
    return _result("sub", result)

def div(args: list[Value], out: TextIO) -> BuiltinOutcome:
    tokens = _numbers("div", args)
    if not tokens:
        raise SprigArityError("div requires at least 1 argument")
    result = _value(tokens[0])
    for t in tokens[1:]:
        divisor = _value(t)
        if divisor == 0:
            raise SprigZeroDivisionError("division by zero")
        # a float operand promotes the accumulator for the rest of the fold
        if isinstance(result, float) or isinstance(divisor, float):
            result = float(result) / divisor
        else:
            result = _truncating_div(result, divisor)
    return _result("div", result)

# -------------------------------
# Registration / dispatch
# -------------------------------
BUILTINS: dict[str, BuiltinFn] = {
    "print": print_builtin,
    "println": println_builtin,
    "add": add,
    "mult": mult,
    "sub": sub,
    "div": div,
}


def dispatch_builtin(
    operator: str,
    args: list[Value],
    out: TextIO,
    unknown_operators: UnknownOperatorPolicy = "ignore",
) -> BuiltinOutcome:
    """Run a fully expanded call. Language errors come back as ERROR outcomes."""
    fn = BUILTINS.get(operator)
    if fn is None:
        if unknown_operators == "error":
            return BuiltinOutcome.fail(SprigNameError(f"Unknown operator {operator}"))
        return BuiltinOutcome.ignore()
    try:
        return fn(args, out)
    except EvalError as e:
        return BuiltinOutcome.fail(e)
    except OverflowError as e:
        return BuiltinOutcome.fail(SprigOverflowError(f"{operator}: {e}"))
