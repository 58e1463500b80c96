from __future__ import annotations

import logging
from typing import TextIO

from sprig.config import UnknownOperatorPolicy, get_trace_enabled, get_unknown_operator_policy
from sprig.evaluation.evaluator import Evaluator
from sprig.reader.lexer import tokenize
from sprig.reader.parser import parse
from sprig.types.ast import Ast
from sprig.types.scope import ScopeArena

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Orchestrates lexing, parsing and evaluating Sprig code.
    Keeps the root function table across calls, so definitions made by one
    `eval` are visible to the next.
    """

    def __init__(
        self,
        *,
        out: TextIO | None = None,
        unknown_operators: UnknownOperatorPolicy | None = None,
        trace: bool | None = None,
    ):
        self.out = out
        self.unknown_operators: UnknownOperatorPolicy = get_unknown_operator_policy(unknown_operators)
        self.trace = get_trace_enabled(trace)
        self.scopes = ScopeArena()

    def read(self, code: str) -> Ast:
        """Lex the whole source, then parse it into one rooted tree."""
        tokens = tokenize(code)
        logger.debug("lexed %d tokens", len(tokens))
        tree = parse(tokens)
        logger.debug("parsed %d top-level form(s)", tree.child_count())
        return tree

    def evaluator(self, tree: Ast) -> Evaluator:
        return Evaluator(
            tree,
            scopes=self.scopes,
            out=self.out,
            unknown_operators=self.unknown_operators,
            trace=self.trace,
        )

    def eval(self, code: str) -> bool:
        """Feed code to the interpreter and evaluate it to completion."""
        evaluator = self.evaluator(self.read(code))
        evaluated = evaluator.eval()
        logger.debug("evaluated in %d steps", evaluator.steps)
        return evaluated
