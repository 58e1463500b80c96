from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum


class TokenType(IntEnum):
    # Brackets
    OPEN_GROUP = 0x00  # (
    CLOSE_GROUP = 0x01  # )
    OPEN_LIST = 0x02  # <
    CLOSE_LIST = 0x03  # >

    # Atoms
    OPERATOR_NAME = 0x10  # bare symbol
    NUMBER = 0x11
    STRING = 0x12
    SYMBOL = 0x13  # bare symbol already evaluated, never resolved again

    # Skipped / rejected by the parser
    WHITESPACE = 0x20
    EMPTY = 0x21
    ERROR = 0x22

    def is_matching_close(self, other: TokenType) -> bool:
        if self is TokenType.OPEN_GROUP:
            return other is TokenType.CLOSE_GROUP
        if self is TokenType.OPEN_LIST:
            return other is TokenType.CLOSE_LIST
        return False

    @property
    def is_open(self) -> bool:
        return self in (TokenType.OPEN_GROUP, TokenType.OPEN_LIST)

    @property
    def is_close(self) -> bool:
        return self in (TokenType.CLOSE_GROUP, TokenType.CLOSE_LIST)

    @property
    def is_literal(self) -> bool:
        return self in (TokenType.OPERATOR_NAME, TokenType.NUMBER, TokenType.STRING, TokenType.SYMBOL)


CLOSING_BRACKETS = {
    TokenType.OPEN_GROUP: ")",
    TokenType.OPEN_LIST: ">",
}

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


@dataclass(frozen=True, slots=True)
class Token:
    """A finished token. For strings `lexeme` holds the decoded text."""

    kind: TokenType
    lexeme: str

    @classmethod
    def operator(cls, name: str) -> Token:
        return cls(TokenType.OPERATOR_NAME, name)

    @classmethod
    def number(cls, value: int | float) -> Token:
        if isinstance(value, float):
            if not math.isfinite(value):
                return cls(TokenType.NUMBER, repr(value))
            # positional at full precision: number literals have no exponent
            text = format(Decimal(repr(value)), "f")
            if "." not in text:
                text += ".0"
            return cls(TokenType.NUMBER, text)
        return cls(TokenType.NUMBER, str(value))

    @classmethod
    def string(cls, text: str) -> Token:
        return cls(TokenType.STRING, text)

    @classmethod
    def symbol(cls, name: str) -> Token:
        return cls(TokenType.SYMBOL, name)

    @property
    def is_float(self) -> bool:
        return self.kind is TokenType.NUMBER and "." in self.lexeme

    def source_text(self) -> str:
        """Render the token the way it has to be written in source."""
        if self.kind is TokenType.STRING:
            return '"' + "".join(_ESCAPES.get(c, c) for c in self.lexeme) + '"'
        if self.kind is TokenType.WHITESPACE:
            return self.lexeme or " "
        return self.lexeme

    def __str__(self) -> str:
        return self.source_text()
