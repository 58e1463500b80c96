"""Definition pipeline: set, let and their name/params/body markers.

    (set (name f) (params a b) (body (add a b)))
    (let (name y) (body 5))

Marker contents are captured as written and never evaluated. `set` rebinds
the nearest visible definition in place, or defines the name in the scope the
form is written in. `let` always defines in that scope, with no parameters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sprig.errors import SprigDefinitionError
from sprig.evaluation.outcome import DefinitionOutcome, MarkerCapture
from sprig.types.ast import Ast
from sprig.types.scope import FunctionEntry, ScopeArena

logger = logging.getLogger(__name__)

SET = "set"
LET = "let"
DEFINITION_FORMS = frozenset({SET, LET})

NAME = "name"
PARAMS = "params"
BODY = "body"
MARKERS = frozenset({NAME, PARAMS, BODY})


@dataclass
class PendingDefinition:
    """Markers captured so far for one set/let form."""

    form: str
    captured: dict[str, Ast] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        node = self.captured.get(NAME)
        return node.token.lexeme if node is not None else None

    def record(self, capture: MarkerCapture) -> None:
        self.captured[capture.role] = capture.node


def recognize(operator: str) -> DefinitionOutcome:
    """Classify a call by its operator name before its children are processed."""
    if operator in DEFINITION_FORMS:
        return DefinitionOutcome.skip()
    if operator in MARKERS:
        return DefinitionOutcome.fail(
            SprigDefinitionError(f"'{operator}' is only valid inside set or let")
        )
    return DefinitionOutcome.other()


def capture_marker(node: Ast, pending: PendingDefinition) -> DefinitionOutcome:
    """Validate one marker sub-form against `pending` and move its contents out."""
    form = pending.form
    if not node.starts_call():
        return DefinitionOutcome.fail(
            SprigDefinitionError(f"{form} expects (name ...), (params ...) or (body ...) forms")
        )
    role = node.children[0].token.lexeme
    args = node.children[1:]
    if role not in MARKERS:
        return DefinitionOutcome.fail(
            SprigDefinitionError(f"{form} does not accept a '{role}' form")
        )
    if role in pending.captured:
        return DefinitionOutcome.fail(SprigDefinitionError(f"{form} has more than one '{role}' form"))

    match role:
        case "name":
            if len(args) != 1 or not args[0].is_operator():
                return DefinitionOutcome.fail(
                    SprigDefinitionError(f"{form} name must be a single symbol")
                )
            captured = args[0]
        case "params":
            if form == LET:
                return DefinitionOutcome.fail(SprigDefinitionError("let does not take params"))
            if not all(arg.is_operator() for arg in args):
                return DefinitionOutcome.fail(SprigDefinitionError("params must all be symbols"))
            names = [arg.token.lexeme for arg in args]
            if len(set(names)) != len(names):
                return DefinitionOutcome.fail(SprigDefinitionError(f"duplicate params in {names}"))
            captured = Ast.group(*args)
        case _:
            captured = Ast.group(*args)

    node.children = []
    return DefinitionOutcome.remove(MarkerCapture(role, captured))


def install(pending: PendingDefinition, scopes: ScopeArena, scope_id: int) -> DefinitionOutcome:
    """Install a fully captured definition into the scope `scope_id`."""
    name = pending.name
    if name is None:
        return DefinitionOutcome.fail(SprigDefinitionError(f"{pending.form} requires a (name ...) form"))
    body = pending.captured.get(BODY)
    if body is None:
        return DefinitionOutcome.fail(SprigDefinitionError(f"{pending.form} {name} requires a (body ...) form"))
    params = pending.captured.get(PARAMS) or Ast.group()

    if pending.form == SET:
        entry = scopes.find(scope_id, name)
    elif scopes.find_scope(scope_id, name) == scope_id:
        entry = scopes.find(scope_id, name)
    else:
        entry = None

    if entry is not None:
        scopes.reset(entry, params, body)
        logger.debug("%s rebound %s", pending.form, name)
    else:
        scopes.insert_unconditional(scope_id, FunctionEntry(name, params, body))
        logger.debug("%s defined %s in scope %d", pending.form, name, scope_id)
    return DefinitionOutcome.remove()
