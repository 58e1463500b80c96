"""
  Sprig Parser

Shift-reduce parser fed one token at a time. The stack starts with a
token-less root node; opening brackets push a node, closing brackets pop it
into its parent once the bracket kinds match, and literals are appended to
the innermost open node. Parsing is complete when the stack has collapsed
back to the single root node.
"""

from __future__ import annotations

from typing import Iterable, Optional

from sprig.errors import ParseError
from sprig.types.ast import Ast
from sprig.types.token import Token, TokenType


class Parser:
    def __init__(self):
        self.stack: list[Ast] = [Ast()]

    def parse_token(self, token: Token) -> None:
        """Shift or reduce one token. Any failure discards the parser state."""
        try:
            match token.kind:
                case TokenType.OPEN_GROUP | TokenType.OPEN_LIST:
                    self._open(token)
                case TokenType.CLOSE_GROUP | TokenType.CLOSE_LIST:
                    self._close(token)
                case TokenType.OPERATOR_NAME | TokenType.NUMBER | TokenType.STRING:
                    self._literal(token)
                case TokenType.WHITESPACE:
                    pass
                case _:
                    raise ParseError(f"Unexpected {token.kind.name} token {token.lexeme!r}")
        except ParseError:
            self.stack.clear()
            raise

    def feed(self, tokens: Iterable[Token]) -> None:
        for token in tokens:
            self.parse_token(token)

    def is_done(self) -> bool:
        return len(self.stack) == 1

    def get_parsed_tree(self) -> Optional[Ast]:
        if self.is_done():
            return self.stack.pop()
        return None

    def _open(self, token: Token) -> None:
        if not self.stack:
            raise ParseError("Parser state was discarded after an earlier error")
        self.stack.append(Ast(token))

    def _close(self, token: Token) -> None:
        if len(self.stack) < 2:
            raise ParseError(f"Unmatched {token.lexeme!r}")
        child = self.stack.pop()
        if not child.token.kind.is_matching_close(token.kind):
            raise ParseError(f"Mismatched {token.lexeme!r} closing {child.token.lexeme!r}")
        self.stack[-1].push_child(child)

    def _literal(self, token: Token) -> None:
        if not self.stack:
            raise ParseError("Parser state was discarded after an earlier error")
        node = self.stack[-1]
        if node.is_root():
            raise ParseError(f"Literal {token.source_text()!r} outside a call context")
        node.push_child(Ast(token))


def parse(tokens: Iterable[Token]) -> Ast:
    """Parse a whole token sequence into one rooted tree."""
    parser = Parser()
    parser.feed(tokens)
    tree = parser.get_parsed_tree()
    if tree is None:
        depth = len(parser.stack) - 1
        parser.stack.clear()
        raise ParseError(f"Unexpected end of input: {depth} unclosed bracket(s)")
    return tree
