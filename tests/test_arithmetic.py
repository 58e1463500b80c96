from io import StringIO

import pytest
from hypothesis import given, strategies as st

from sprig.errors import SprigArityError, SprigOverflowError, SprigTypeError, SprigZeroDivisionError
from sprig.interpreter import Interpreter


def _value(run, expr):
    return run(f"(print {expr})")


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(add 1 2 3)", "6"),
        ("(add 1.5 2)", "3.5"),
        ("(sub 10 2 3)", "5"),
        ("(mult 2 3 4)", "24"),
        ("(div 12 3)", "4"),
        ("(add)", "0"),
        ("(mult)", "1"),
        ("(sub 7)", "7"),
        ("(add -1 5 -3)", "1"),
        ("(sub -10 -5)", "-5"),
        ("(mult -2 3)", "-6"),
        ("(add 1 2.0)", "3.0"),
        ("(mult 2 .5)", "1.0"),
        ("(div 7 2)", "3"),
        ("(div -7 2)", "-3"),
        ("(div 7 2.0)", "3.5"),
        ("(div 7.0 2 2)", "1.75"),
        ("(div 9 2.0 2)", "2.25"),
        ("(sub 5.5 0.5)", "5.0"),
        ("(add 1 (mult 2 (add 3 4) (sub 10 6)))", "57"),
        ("(div (mult (add 8 2) 5) (sub 20 10))", "5"),
        ("(add (add 1 2) (add 3 4))", "10"),
        ("(mult 0.5 0.0000001)", "0.00000005"),
        ("(mult 0.001 0.0001)", "0.00000010000000000000001"),
    ]
)
def test_arithmetic(run, source, expected):
    assert _value(run, source) == expected


@pytest.mark.parametrize(
    "source,error",
    [
        ('(add 1 "2")', SprigTypeError),
        ("(mult 2 <3>)", SprigTypeError),
        ("(sub 1 x)", SprigTypeError),
        ("(sub)", SprigArityError),
        ("(div)", SprigArityError),
        ("(div 1 0)", SprigZeroDivisionError),
        ("(div 1.5 0.0)", SprigZeroDivisionError),
        ("(div 10 2 0)", SprigZeroDivisionError),
    ]
)
def test_arithmetic_errors(interp, source, error):
    with pytest.raises(error):
        interp.eval(source)


def test_division_by_zero_message(interp):
    with pytest.raises(SprigZeroDivisionError, match="division by zero"):
        interp.eval("(div 4 0)")


def test_tiny_result_is_not_truncated_to_zero(run):
    assert run("(println (sub (mult 0.5 0.0000001) 0.00000005))") == "0.0\n"


def test_tiny_result_divides(run):
    assert float(run("(print (div 1 (mult 0.5 0.0000001)))")) == pytest.approx(2e7)


BIG_FLOAT = "1" + "0" * 300 + ".0"


@pytest.mark.parametrize(
    "source",
    [
        "(println (mult " + " ".join(["99999999999999999999"] * 250) + "))",
        "(println (add " + "9" * 5000 + "))",
        "(println (mult " + BIG_FLOAT + " " + BIG_FLOAT + "))",
    ]
)
def test_out_of_range_numbers_abort_cleanly(interp, source):
    with pytest.raises(SprigOverflowError):
        interp.eval(source)
    assert interp.scopes.depth() == 1


# -------------------------------
# Hypothesis tests
# -------------------------------
int_literal = st.integers(min_value=-10_000, max_value=10_000).map(str)
float_literal = st.decimals(
    min_value=-1000, max_value=1000, places=2, allow_nan=False, allow_infinity=False
).map(lambda d: format(d, "f"))
literal_lists = st.lists(st.one_of(int_literal, float_literal), min_size=1, max_size=6)


def _eval_to_text(op, literals):
    out = StringIO()
    Interpreter(out=out).eval(f"(print ({op} {' '.join(literals)}))")
    return out.getvalue()


@pytest.mark.parametrize("op", ["add", "mult"])
@given(literals=literal_lists, data=st.data())
def test_add_mult_commutative(op, literals, data):
    shuffled = data.draw(st.permutations(literals))
    first = _eval_to_text(op, literals)
    second = _eval_to_text(op, shuffled)
    if "." in first:
        assert float(first) == pytest.approx(float(second))
    else:
        assert first == second


@pytest.mark.parametrize("op", ["add", "mult"])
@given(literals=literal_lists)
def test_add_mult_promote_to_float_iff_decimal_point(op, literals):
    text = _eval_to_text(op, literals)
    assert ("." in text) == any("." in lit for lit in literals)
