"""Explicit-stack evaluator for Sprig.

Evaluation is a depth-first, left-to-right walk that rewrites the tree in
place: finished calls are replaced by their result or removed, and finished
top-level forms are dropped from the root until nothing is left. The walk
never recurses; its whole suspended state is the `stack` of frames plus the
scope arena, so it can be single-stepped and inspected between steps.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO

from sprig.config import get_trace_enabled, get_unknown_operator_policy
from sprig.debug_utils.pprint import pretty_print, to_source
from sprig.errors import EvalError
from sprig.evaluation.builtins import dispatch_builtin
from sprig.evaluation.definitions import PendingDefinition, capture_marker, install, recognize
from sprig.evaluation.expansion import expand_call
from sprig.evaluation.outcome import BuiltinOutcome, BuiltinResult, DefinitionOutcome, DefinitionResult
from sprig.types.ast import Ast
from sprig.types.scope import FunctionEntry, ScopeArena
from sprig.types.token import Token

logger = logging.getLogger(__name__)


class Mode(Enum):
    GROUP = "group"  # plain group, collapses to its last child
    LIST = "list"  # list literal, stays as a value
    CALL = "call"  # builtin call, dispatched once its arguments are done
    FUNCTION = "function"  # user function call, expanded once its arguments are done
    DEFINITION = "definition"  # set/let capturing its marker sub-forms


@dataclass
class Frame:
    """One suspended node on the work stack."""

    node: Ast
    slot: int  # index of `node` in its parent's children
    scope: int
    mode: Mode = Mode.GROUP
    cursor: int = 0  # next child to process
    operator: Optional[Ast] = None  # detached operator leaf of a call
    entry: Optional[FunctionEntry] = None
    definition: Optional[PendingDefinition] = None

    @property
    def operator_name(self) -> Optional[str]:
        return self.operator.token.lexeme if self.operator is not None else None

    def describe(self) -> str:
        head = f"{self.mode.value}"
        if self.operator is not None:
            head += f" {self.operator_name}"
        return f"<{head} @{self.slot} scope={self.scope} cursor={self.cursor} {to_source(self.node)}>"


class Evaluator:
    """Consumes one rooted tree, producing output and an `evaluated` flag."""

    def __init__(
        self,
        ast: Ast,
        *,
        scopes: ScopeArena | None = None,
        out: TextIO | None = None,
        unknown_operators: str | None = None,
        trace: bool | None = None,
    ):
        self.ast = ast
        self.stack: list[Frame] = []
        self.scopes = scopes if scopes is not None else ScopeArena()
        self.out = out
        self.unknown_operators = get_unknown_operator_policy(unknown_operators)
        self.trace = get_trace_enabled(trace)
        self.evaluated = False
        self.steps = 0

    @property
    def current_scope(self) -> int:
        return self.stack[-1].scope if self.stack else ScopeArena.ROOT

    def is_evaluated(self) -> bool:
        return self.evaluated

    def eval(self) -> bool:
        while not self.evaluated:
            self.step()
        return self.evaluated

    def step(self) -> None:
        """Advance the walk by one node visit."""
        if self.evaluated:
            return
        self.steps += 1
        if self.trace:
            logger.debug(
                "step %d: depth=%d scope=%d top=%s",
                self.steps,
                len(self.stack),
                self.current_scope,
                self.stack[-1].describe() if self.stack else "<root>",
            )
        try:
            self._step()
        except EvalError:
            raise
        except Exception:
            # a failure outside the dispatch protocol still ends the run
            self._unwind()
            raise
        if not self.stack and not self.ast.children:
            self.evaluated = True

    def pretty_print(self, indent: str | None = None) -> str:
        """Render what is left of the tree."""
        return pretty_print(self.ast, indent)

    # --- Walk ---
    def _step(self) -> None:
        if not self.stack:
            if not self.ast.children:
                return
            child = self.ast.children[0]
            if child.is_leaf():
                del self.ast.children[0]
            else:
                self._enter(child, 0, ScopeArena.ROOT)
            return

        frame = self.stack[-1]
        node = frame.node
        if frame.cursor >= len(node.children):
            self._complete(frame)
            return

        child = node.children[frame.cursor]
        if frame.mode is Mode.DEFINITION:
            outcome = capture_marker(child, frame.definition)
            self._check_definition(outcome)
            frame.definition.record(outcome.capture)
            del node.children[frame.cursor]
            return

        if child.is_leaf():
            if child.is_operator():
                entry = self.scopes.find(frame.scope, child.token.lexeme)
                if entry is not None:
                    # a bare name bound to a function is a call with no arguments
                    call = Ast.group()
                    node.children[frame.cursor] = call
                    self._push(call, frame.cursor, frame.scope, Mode.FUNCTION, child, entry)
                    return
                # unresolved: it is a value now, and stays one when passed on
                node.children[frame.cursor] = Ast(Token.symbol(child.token.lexeme))
            frame.cursor += 1
            return

        self._enter(child, frame.cursor, frame.scope)

    def _enter(self, node: Ast, slot: int, parent_scope: int) -> None:
        if node.is_list():
            self._push(node, slot, parent_scope, Mode.LIST)
            return
        if not node.starts_call():
            self._push(node, slot, parent_scope, Mode.GROUP)
            return

        operator = node.get_child(0)
        frame = self._push(node, slot, parent_scope, Mode.CALL, operator)
        name = frame.operator_name
        entry = self.scopes.find(frame.scope, name)
        if entry is not None:
            frame.mode = Mode.FUNCTION
            frame.entry = entry
            return
        outcome = recognize(name)
        self._check_definition(outcome)
        if outcome.needs_processing:
            frame.mode = Mode.DEFINITION
            frame.definition = PendingDefinition(name)

    def _push(
        self,
        node: Ast,
        slot: int,
        parent_scope: int,
        mode: Mode,
        operator: Optional[Ast] = None,
        entry: Optional[FunctionEntry] = None,
    ) -> Frame:
        frame = Frame(node, slot, self.scopes.push(parent_scope), mode, operator=operator, entry=entry)
        self.stack.append(frame)
        return frame

    def _complete(self, frame: Frame) -> None:
        """Handle a frame whose children are all processed."""
        match frame.mode:
            case Mode.FUNCTION:
                self._apply(frame, expand_call(frame.node, frame.entry))
            case Mode.CALL:
                out = self.out if self.out is not None else sys.stdout
                outcome = dispatch_builtin(
                    frame.operator_name, frame.node.children, out, self.unknown_operators
                )
                self._apply(frame, outcome)
            case Mode.DEFINITION:
                target = self.scopes.parent_of(frame.scope)
                self._check_definition(install(frame.definition, self.scopes, target))
                self._finish(frame, None)
            case Mode.LIST:
                self._finish(frame, frame.node)
            case Mode.GROUP:
                children = frame.node.children
                self._finish(frame, children[-1] if children else None)

    def _apply(self, frame: Frame, outcome: BuiltinOutcome) -> None:
        if outcome.needs_processing:
            # re-process the rewritten node as an ordinary group in a fresh scope
            parent_scope = self.scopes.parent_of(frame.scope)
            self.scopes.pop(frame.scope)
            frame.scope = self.scopes.push(parent_scope)
            frame.node = outcome.node
            frame.mode = Mode.GROUP
            frame.cursor = 0
            frame.operator = None
            frame.entry = None
            return
        match outcome.result:
            case BuiltinResult.PUSH:
                self._finish(frame, outcome.node)
            case BuiltinResult.IGNORE:
                self._finish(frame, None)
            case BuiltinResult.ERROR:
                self._abort(outcome.error)

    def _finish(self, frame: Frame, replacement: Optional[Ast]) -> None:
        """Pop `frame` and put `replacement` (or nothing) in its parent slot."""
        self.stack.pop()
        self.scopes.pop(frame.scope)
        if not self.stack:
            # top-level forms are consumed once evaluated
            del self.ast.children[frame.slot]
            return
        parent = self.stack[-1]
        if replacement is None:
            del parent.node.children[frame.slot]
            parent.cursor = frame.slot
        else:
            parent.node.children[frame.slot] = replacement
            parent.cursor = frame.slot + 1

    # --- Errors ---
    def _check_definition(self, outcome: DefinitionOutcome) -> None:
        if outcome.result is DefinitionResult.ERROR:
            self._abort(outcome.error)

    def _abort(self, error: EvalError) -> None:
        """Discard the remaining work and raise. Earlier output is kept."""
        logger.debug("evaluation aborted after %d steps: %s", self.steps, error)
        self._unwind()
        raise error

    def _unwind(self) -> None:
        for frame in reversed(self.stack):
            self.scopes.pop(frame.scope)
        self.stack.clear()
        self.evaluated = True
