"""Syntax tree for Sprig.

A node optionally carries a token (only the synthetic root has none) and owns
an ordered list of children. Nodes are never shared between parents: moving
a subtree means detaching it from one parent and inserting it into another.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from sprig.types.token import Token, TokenType


class Ast:
    __slots__ = ("token", "children")

    def __init__(self, token: Optional[Token] = None, children: list[Ast] | None = None):
        self.token: Token | None = token
        self.children: list[Ast] = children if children is not None else []

    # --- Synthetic constructors ---
    @classmethod
    def group(cls, *children: Ast) -> Ast:
        return cls(Token(TokenType.OPEN_GROUP, "("), list(children))

    @classmethod
    def list_literal(cls, *children: Ast) -> Ast:
        return cls(Token(TokenType.OPEN_LIST, "<"), list(children))

    @classmethod
    def operator(cls, name: str) -> Ast:
        return cls(Token.operator(name))

    @classmethod
    def number(cls, value: int | float) -> Ast:
        return cls(Token.number(value))

    @classmethod
    def string(cls, text: str) -> Ast:
        return cls(Token.string(text))

    # --- Child manipulation ---
    def push_child(self, child: Ast) -> None:
        self.children.append(child)

    def pop_child(self) -> Optional[Ast]:
        return self.children.pop() if self.children else None

    def get_child(self, index: int) -> Optional[Ast]:
        """Detach and return the child at `index`, or None if out of range."""
        if 0 <= index < len(self.children):
            return self.children.pop(index)
        return None

    def insert_child(self, child: Ast, index: int) -> bool:
        if 0 <= index <= len(self.children):
            self.children.insert(index, child)
            return True
        return False

    def child_count(self) -> int:
        return len(self.children)

    def dump_children(self) -> list[Ast]:
        """Detach all children, leaving this node empty."""
        children, self.children = self.children, []
        return children

    def clone(self) -> Ast:
        """Deep copy without native recursion."""
        root = Ast(self.token)
        pending: list[tuple[Ast, Ast]] = [(self, root)]
        while pending:
            source, target = pending.pop()
            for child in source.children:
                copy = Ast(child.token)
                target.children.append(copy)
                pending.append((child, copy))
        return root

    # --- Predicates ---
    @property
    def kind(self) -> Optional[TokenType]:
        return self.token.kind if self.token is not None else None

    def is_root(self) -> bool:
        return self.token is None

    def is_group(self) -> bool:
        return self.kind is TokenType.OPEN_GROUP

    def is_list(self) -> bool:
        return self.kind is TokenType.OPEN_LIST

    def is_operator(self) -> bool:
        return self.kind is TokenType.OPERATOR_NAME

    def is_number(self) -> bool:
        return self.kind is TokenType.NUMBER

    def is_leaf(self) -> bool:
        return self.token is not None and self.token.kind.is_literal

    def starts_call(self) -> bool:
        """True for a group whose first child names an operator."""
        return self.is_group() and bool(self.children) and self.children[0].is_operator()

    # --- Comparison / display ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ast):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            a, b = pending.pop()
            if a.token != b.token or len(a.children) != len(b.children):
                return False
            pending.extend(zip(a.children, b.children))
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("Ast(")
            buffer.write("root" if self.token is None else repr(self.token.source_text()))
            if self.children:
                buffer.write(f", {len(self.children)} children")
            buffer.write(")")
            return buffer.getvalue()
