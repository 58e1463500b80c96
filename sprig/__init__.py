# Core type aliases for Sprig's data model.
# Programs are trees of `Ast` nodes, each optionally carrying a `Token`.
# Evaluation rewrites the tree in place, so code and values share one
# representation: a computed value is just a literal leaf node.
#
# Naming guidance:
# - Form:  use in reader/parser code for syntactic nodes.
# - Value: use in evaluator/builtin code for nodes that are fully evaluated.
# Both aliases resolve to `Ast` and are interchangeable.

from sprig.types.ast import Ast
from sprig.types.token import Token, TokenType

Form = Ast
Value = Ast

__all__ = ["Ast", "Form", "Token", "TokenType", "Value"]
