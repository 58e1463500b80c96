from __future__ import annotations

from typing import Iterator, Optional

from sprig.config import get_indent_unit
from sprig.types.ast import Ast
from sprig.types.token import CLOSING_BRACKETS

_OPEN = 0
_CLOSE = 1
_ATOM = 2


# ----------------- Pretty printer -----------------
def pretty_print(ast: Ast, indent: Optional[str] = None) -> str:
    """Render a tree one token per line, in evaluation order.

    Opening brackets go on their own line, children are indented one unit
    deeper, and the closing bracket lines up with its opener. The tree is
    only read, never consumed.
    """
    unit = get_indent_unit(indent)
    root = ast if ast.is_root() else Ast(None, [ast])
    lines: list[str] = []
    stack: list[tuple[Ast, int]] = []
    root_cursor = 0

    while True:
        if stack:
            node, cursor = stack[-1]
            if cursor < len(node.children):
                stack[-1] = (node, cursor + 1)
                child = node.children[cursor]
            else:
                stack.pop()
                if node.token.kind.is_open:
                    text = CLOSING_BRACKETS[node.token.kind]
                else:
                    text = node.token.source_text()
                lines.append(unit * len(stack) + text)
                continue
        elif root_cursor < len(root.children):
            child = root.children[root_cursor]
            root_cursor += 1
        else:
            break

        if child.token.kind.is_open:
            lines.append(unit * len(stack) + child.token.lexeme)
        stack.append((child, 0))

    return "".join(line + "\n" for line in lines)


# ----------------- Single-line rendering -----------------
def _pieces(node: Ast, quote_strings: bool) -> Iterator[tuple[int, str]]:
    stack: list[tuple[Ast, int]] = [(node, -1)]
    while stack:
        current, cursor = stack.pop()
        token = current.token
        if cursor == -1:
            if token is not None and not token.kind.is_open:
                yield _ATOM, token.source_text() if quote_strings else token.lexeme
                continue
            if token is not None:
                yield _OPEN, token.lexeme
            cursor = 0
        if cursor < len(current.children):
            stack.append((current, cursor + 1))
            stack.append((current.children[cursor], -1))
        elif token is not None:
            yield _CLOSE, CLOSING_BRACKETS[token.kind]


def to_source(node: Ast, quote_strings: bool = True) -> str:
    """Render a node on one line, e.g. `(add 1 <2 3>)`."""
    parts: list[str] = []
    previous: Optional[int] = None
    for role, text in _pieces(node, quote_strings):
        if previous is not None and previous != _OPEN and role != _CLOSE:
            parts.append(" ")
        parts.append(text)
        previous = role
    return "".join(parts)
