"""Tagged outcomes of the dispatch protocol.

Two pipelines run over a call node. The definition pipeline answers
"is this a set/let form, or part of one?"; the builtin pipeline executes a
fully expanded call. The evaluator branches on `needs_processing`: SKIP and
INSERT leave the node on the work stack, every other variant finishes it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sprig.errors import EvalError
from sprig.types.ast import Ast


class DefinitionResult(Enum):
    SKIP = "skip"  # definition recognised, children still to be captured
    REMOVE = "remove"  # marker captured or definition installed; strip the node
    OTHER = "other"  # not a definition form
    ERROR = "error"


class BuiltinResult(Enum):
    PUSH = "push"  # replace the call with `node`
    INSERT = "insert"  # call rewritten in place, re-process it
    IGNORE = "ignore"  # side effect only, drop the call
    ERROR = "error"


@dataclass(frozen=True)
class MarkerCapture:
    """Contents of a name/params/body marker, moved out of the tree."""

    role: str
    node: Ast


@dataclass(frozen=True)
class DefinitionOutcome:
    result: DefinitionResult
    capture: Optional[MarkerCapture] = None
    error: Optional[EvalError] = None

    @property
    def needs_processing(self) -> bool:
        return self.result is DefinitionResult.SKIP

    @classmethod
    def skip(cls) -> DefinitionOutcome:
        return cls(DefinitionResult.SKIP)

    @classmethod
    def remove(cls, capture: Optional[MarkerCapture] = None) -> DefinitionOutcome:
        return cls(DefinitionResult.REMOVE, capture=capture)

    @classmethod
    def other(cls) -> DefinitionOutcome:
        return cls(DefinitionResult.OTHER)

    @classmethod
    def fail(cls, error: EvalError) -> DefinitionOutcome:
        return cls(DefinitionResult.ERROR, error=error)


@dataclass(frozen=True)
class BuiltinOutcome:
    result: BuiltinResult
    node: Optional[Ast] = None
    error: Optional[EvalError] = None

    @property
    def needs_processing(self) -> bool:
        return self.result is BuiltinResult.INSERT

    @classmethod
    def push(cls, node: Ast) -> BuiltinOutcome:
        return cls(BuiltinResult.PUSH, node=node)

    @classmethod
    def insert(cls, node: Ast) -> BuiltinOutcome:
        return cls(BuiltinResult.INSERT, node=node)

    @classmethod
    def ignore(cls) -> BuiltinOutcome:
        return cls(BuiltinResult.IGNORE)

    @classmethod
    def fail(cls, error: EvalError) -> BuiltinOutcome:
        return cls(BuiltinResult.ERROR, error=error)
