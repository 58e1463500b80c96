import pytest

from sprig.config import get_indent_unit, get_trace_enabled, get_unknown_operator_policy
from sprig.errors import ConfigError
from sprig.interpreter import Interpreter


def test_defaults():
    assert get_unknown_operator_policy() == "ignore"
    assert get_trace_enabled() is False
    assert get_indent_unit() == "\t"


@pytest.mark.parametrize("raw,expected", [("error", "error"), (" Ignore ", "ignore"), ("", "ignore")])
def test_unknown_operator_policy_from_env(monkeypatch, raw, expected):
    monkeypatch.setenv("SPRIG_UNKNOWN_OPERATORS", raw)
    assert get_unknown_operator_policy() == expected


def test_override_wins_over_env(monkeypatch):
    monkeypatch.setenv("SPRIG_UNKNOWN_OPERATORS", "error")
    monkeypatch.setenv("SPRIG_TRACE", "on")
    monkeypatch.setenv("SPRIG_INDENT", "8")
    assert get_unknown_operator_policy("ignore") == "ignore"
    assert get_trace_enabled(False) is False
    assert get_indent_unit("--") == "--"


@pytest.mark.parametrize("raw,expected", [("1", True), ("TRUE", True), ("off", False), ("0", False)])
def test_trace_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("SPRIG_TRACE", raw)
    assert get_trace_enabled() is expected


@pytest.mark.parametrize("raw,expected", [("tab", "\t"), ("4", "    "), ("0", "")])
def test_indent_unit(monkeypatch, raw, expected):
    monkeypatch.setenv("SPRIG_INDENT", raw)
    assert get_indent_unit() == expected


@pytest.mark.parametrize(
    "var,raw,getter",
    [
        ("SPRIG_UNKNOWN_OPERATORS", "explode", get_unknown_operator_policy),
        ("SPRIG_TRACE", "maybe", get_trace_enabled),
        ("SPRIG_INDENT", "-1", get_indent_unit),
    ]
)
def test_invalid_settings(monkeypatch, var, raw, getter):
    monkeypatch.setenv(var, raw)
    with pytest.raises(ConfigError):
        getter()


def test_invalid_policy_rejected_by_interpreter():
    with pytest.raises(ConfigError):
        Interpreter(unknown_operators="sometimes")
