"""Function expansion by call-site substitution.

A call to a user-defined function is rewritten in place into an ordinary
group that first binds each parameter with a `let` form and then evaluates a
fresh copy of the body:

    (double 4)  ->  ((let (name x) (body 4)) (add x x))

The definition's params and body are copied on every call, so repeated and
nested calls never share nodes with the stored definition.
"""

from __future__ import annotations

from sprig.errors import SprigArityError
from sprig.evaluation.definitions import BODY, LET, NAME
from sprig.evaluation.outcome import BuiltinOutcome
from sprig.types.ast import Ast
from sprig.types.scope import FunctionEntry


def binding_form(param: Ast, argument: Ast) -> Ast:
    """(let (name param) (body argument))"""
    return Ast.group(
        Ast.operator(LET),
        Ast.group(Ast.operator(NAME), param),
        Ast.group(Ast.operator(BODY), argument),
    )


def expand_call(node: Ast, entry: FunctionEntry) -> BuiltinOutcome:
    """Rewrite the call `node` (its arguments as children) into a group."""
    params = entry.params.clone()
    if len(params.children) != len(node.children):
        return BuiltinOutcome.fail(SprigArityError(
            f"{entry.name} expects {len(params.children)} argument(s), got {len(node.children)}"
        ))
    arguments = node.dump_children()
    for param, argument in zip(params.dump_children(), arguments):
        node.push_child(binding_form(param, argument))
    node.push_child(entry.body.clone())
    return BuiltinOutcome.insert(node)
