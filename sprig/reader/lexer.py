"""
  Sprig Lexer

- Streaming: `lex` is a generator of finished `Token`s.
- Whitespace is emitted as WHITESPACE tokens; the parser skips them.
- Token shapes:

    - (  )      -> OPEN_GROUP / CLOSE_GROUP
    - <  >      -> OPEN_LIST / CLOSE_LIST
    - -12.5     -> NUMBER (optional '-', digits, at most one '.')
    - "a\\tb"   -> STRING (lexeme holds the decoded text)
    - add       -> OPERATOR_NAME (anything else up to a delimiter)

Illegal input raises LexError before any token reaches the parser, unless the
caller consumes the generator lazily.
"""

from __future__ import annotations

import re
from typing import Iterator

from sprig.errors import LexError
from sprig.types.token import Token, TokenType


TOKEN_RE = re.compile(
    r"(?P<whitespace>[ \t\r\n]+)"
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<llist><)"  # <
    r"|(?P<rlist>>)"  # >
    r'|(?P<string>")'  # string start, body handled by _read_string
    r"|(?P<number>-?(?:\d+\.?\d*|\.\d+)(?=[ \t\r\n()<>]|$))"  # numbers end at a delimiter
    r'|(?P<bad_number>[-.\d][^ \t\r\n()<>"]*)'  # digits, '.', '-' that do not form a number
    r'|(?P<symbol>[^ \t\r\n()<>"\x00]+)'  # fallback: operator names
)

SIMPLE_TOKENS: dict[str, TokenType] = {
    "whitespace": TokenType.WHITESPACE,
    "lparen": TokenType.OPEN_GROUP,
    "rparen": TokenType.CLOSE_GROUP,
    "llist": TokenType.OPEN_LIST,
    "rlist": TokenType.CLOSE_LIST,
    "number": TokenType.NUMBER,
    "symbol": TokenType.OPERATOR_NAME,
}

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
}


def _read_string(source: str, pos: int) -> tuple[str, int]:
    """Decode a string literal whose opening quote is at `pos - 1`.

    Returns the decoded text and the position after the closing quote.
    """
    n = len(source)
    start = pos - 1
    chars: list[str] = []
    while pos < n:
        c = source[pos]
        if c == '"':
            return "".join(chars), pos + 1
        if c == "\n":
            raise LexError(f"Newline inside string literal starting at {start}")
        if c == "\x00":
            raise LexError(f"NUL character at {pos}")
        if c == "\\":
            pos += 1
            if pos >= n:
                break
            escaped = source[pos]
            if escaped == "\x00":
                raise LexError(f"NUL character at {pos}")
            chars.append(ESCAPES.get(escaped, escaped))
        else:
            chars.append(c)
        pos += 1
    raise LexError(f"Unterminated string literal starting at {start}")


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Token objects in source order."""
    pos = 0
    n = len(source)
    while pos < n:
        if source[pos] == "\x00":
            raise LexError(f"NUL character at {pos}")
        match = TOKEN_RE.match(source, pos)
        if not match:
            raise LexError(f"Unexpected char at {pos}: {source[pos]!r}")
        group = match.lastgroup
        if group == "string":
            text, pos = _read_string(source, match.end())
            yield Token(TokenType.STRING, text)
            continue
        if group == "bad_number":
            raise LexError(f"Malformed number at {pos}: {match.group(group)!r}")
        yield Token(SIMPLE_TOKENS[group], match.group(group))
        pos = match.end()


def tokenize(source: str) -> list[Token]:
    """Lex the whole source eagerly, so a LexError rejects it up front."""
    return list(lex(source))
