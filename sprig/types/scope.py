"""Lexical scope chain for Sprig.

Scope frames live in an arena and are addressed by integer id; each frame
points at its parent by id. Frames are created on entering a group and
discarded when that group completes, so the arena behaves as a stack and
only the innermost frame can be popped.

Every frame keeps its function entries sorted by name, and lookups binary
search a frame before moving to its parent.
"""

from __future__ import annotations

from bisect import bisect_left
from io import StringIO
from operator import attrgetter
from typing import Optional

from sprig.types.ast import Ast


_entry_name = attrgetter("name")


class FunctionEntry:
    """A name-keyed (params, body) pair used for call-site substitution."""

    __slots__ = ("_name", "params", "body")

    def __init__(self, name: str, params: Ast, body: Ast):
        self._name = name
        self.params: Ast = params
        self.body: Ast = body

    @property
    def name(self) -> str:
        return self._name

    @property
    def formals(self) -> list[str]:
        return [p.token.lexeme for p in self.params.children if p.token is not None]

    def __repr__(self) -> str:
        return f"FunctionEntry({self._name!r}, params={self.formals})"


class ScopeFrame:
    __slots__ = ("entries", "parent")

    def __init__(self, parent: Optional[int]):
        self.entries: list[FunctionEntry] = []
        self.parent: Optional[int] = parent

    def index_of(self, name: str) -> Optional[int]:
        i = bisect_left(self.entries, name, key=_entry_name)
        if i < len(self.entries) and self.entries[i].name == name:
            return i
        return None


class ScopeArena:
    ROOT = 0

    __slots__ = ("frames",)

    def __init__(self):
        self.frames: list[ScopeFrame] = [ScopeFrame(None)]

    def push(self, parent: int) -> int:
        self._check(parent)
        self.frames.append(ScopeFrame(parent))
        return len(self.frames) - 1

    def pop(self, scope_id: int) -> None:
        if scope_id == self.ROOT or scope_id != len(self.frames) - 1:
            raise ValueError(f"Only the innermost scope can be popped, not {scope_id}")
        self.frames.pop()

    def parent_of(self, scope_id: int) -> Optional[int]:
        self._check(scope_id)
        return self.frames[scope_id].parent

    def depth(self) -> int:
        return len(self.frames)

    def size(self, scope_id: int) -> int:
        self._check(scope_id)
        return len(self.frames[scope_id].entries)

    def insert(self, scope_id: int, entry: FunctionEntry) -> bool:
        """Insert `entry` unless a visible entry already has its name."""
        if self.find(scope_id, entry.name) is not None:
            return False
        self.insert_unconditional(scope_id, entry)
        return True

    def insert_unconditional(self, scope_id: int, entry: FunctionEntry) -> None:
        self._check(scope_id)
        entries = self.frames[scope_id].entries
        entries.insert(bisect_left(entries, entry.name, key=_entry_name), entry)

    def find_scope(self, scope_id: int, name: str) -> Optional[int]:
        """Id of the nearest frame on the chain that defines `name`."""
        self._check(scope_id)
        current: Optional[int] = scope_id
        while current is not None:
            frame = self.frames[current]
            if frame.index_of(name) is not None:
                return current
            current = frame.parent
        return None

    def find(self, scope_id: int, name: str) -> Optional[FunctionEntry]:
        """Innermost entry named `name`, or None if it is unresolved."""
        found = self.find_scope(scope_id, name)
        if found is None:
            return None
        frame = self.frames[found]
        return frame.entries[frame.index_of(name)]

    @staticmethod
    def reset(entry: FunctionEntry, params: Ast, body: Ast) -> None:
        entry.params = params
        entry.body = body

    def _check(self, scope_id: int) -> None:
        if not 0 <= scope_id < len(self.frames):
            raise ValueError(f"Unknown scope id {scope_id}")

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<ScopeArena: ")
            buffer.write(" -> ".join(
                "{" + ", ".join(e.name for e in frame.entries) + "}" for frame in self.frames
            ))
            buffer.write(">")
            return buffer.getvalue()
