from __future__ import annotations
import os
from typing import Literal

from sprig.errors import ConfigError


UnknownOperatorPolicy = Literal['ignore', 'error']

_UNKNOWN_OPERATOR_POLICIES = ('ignore', 'error')
_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('', '0', 'false', 'no', 'off')

# Defaults
_DEFAULT_UNKNOWN_OPERATORS: UnknownOperatorPolicy = 'ignore'
_DEFAULT_INDENT = '\t'


def _raw(var: str) -> str | None:
    raw = os.environ.get(var)
    if raw is None:
        return None
    return raw.strip()


def get_unknown_operator_policy(override: str | None = None) -> UnknownOperatorPolicy:
    """Policy applied to calls that match neither a builtin nor a definition.

    'ignore' drops the call silently, 'error' halts evaluation.
    """
    raw = override if override is not None else _raw('SPRIG_UNKNOWN_OPERATORS')
    if not raw:
        return _DEFAULT_UNKNOWN_OPERATORS
    policy = raw.lower()
    if policy not in _UNKNOWN_OPERATOR_POLICIES:
        raise ConfigError(
            f"SPRIG_UNKNOWN_OPERATORS must be one of {_UNKNOWN_OPERATOR_POLICIES}, got {raw!r}"
        )
    return policy  # type: ignore[return-value]


def get_trace_enabled(override: bool | None = None) -> bool:
    if override is not None:
        return override
    raw = (_raw('SPRIG_TRACE') or '').lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigError(f"SPRIG_TRACE must be a boolean flag, got {raw!r}")


def get_indent_unit(override: str | None = None) -> str:
    """Indent unit for the pretty printer: a tab, or SPRIG_INDENT spaces."""
    if override is not None:
        return override
    raw = _raw('SPRIG_INDENT')
    if not raw or raw.lower() == 'tab':
        return _DEFAULT_INDENT
    if raw.isdigit():
        return ' ' * int(raw)
    raise ConfigError(f"SPRIG_INDENT must be 'tab' or a number of spaces, got {raw!r}")
