import pytest

from sprig.types.ast import Ast
from sprig.types.scope import FunctionEntry, ScopeArena

ROOT = ScopeArena.ROOT


def _entry(name, value=0):
    return FunctionEntry(name, Ast.group(), Ast.group(Ast.number(value)))


@pytest.fixture
def scopes():
    return ScopeArena()


def test_entries_kept_sorted(scopes):
    for name in ["mango", "apple", "zucchini", "kiwi"]:
        assert scopes.insert(ROOT, _entry(name))
    assert [e.name for e in scopes.frames[ROOT].entries] == ["apple", "kiwi", "mango", "zucchini"]


def test_find_walks_innermost_to_outermost(scopes):
    scopes.insert(ROOT, _entry("x", 1))
    inner = scopes.push(ROOT)
    innermost = scopes.push(inner)
    scopes.insert_unconditional(inner, _entry("x", 2))
    assert scopes.find(innermost, "x").body.children[0] == Ast.number(2)
    assert scopes.find(ROOT, "x").body.children[0] == Ast.number(1)
    assert scopes.find_scope(innermost, "x") == inner
    assert scopes.find(innermost, "missing") is None
    assert scopes.find_scope(innermost, "missing") is None


def test_insert_refuses_visible_name(scopes):
    scopes.insert(ROOT, _entry("f"))
    inner = scopes.push(ROOT)
    assert not scopes.insert(inner, _entry("f"))
    assert scopes.size(inner) == 0


def test_insert_unconditional_shadows(scopes):
    scopes.insert(ROOT, _entry("f"))
    inner = scopes.push(ROOT)
    scopes.insert_unconditional(inner, _entry("f"))
    assert scopes.size(inner) == 1
    assert scopes.find(inner, "f") is not scopes.find(ROOT, "f")


def test_reset_keeps_identity_and_position(scopes):
    for name in ["a", "b", "c"]:
        scopes.insert(ROOT, _entry(name))
    entry = scopes.find(ROOT, "b")
    new_body = Ast.group(Ast.number(9))
    scopes.reset(entry, Ast.group(Ast.operator("p")), new_body)
    assert scopes.frames[ROOT].entries[1] is entry
    assert entry.name == "b"
    assert entry.formals == ["p"]
    assert entry.body is new_body


def test_entry_name_is_read_only():
    entry = _entry("f")
    with pytest.raises(AttributeError):
        entry.name = "g"


def test_pop_only_innermost(scopes):
    a = scopes.push(ROOT)
    b = scopes.push(a)
    with pytest.raises(ValueError):
        scopes.pop(a)
    scopes.pop(b)
    scopes.pop(a)
    assert scopes.depth() == 1
    with pytest.raises(ValueError):
        scopes.pop(ROOT)


def test_popped_scope_bindings_disappear(scopes):
    inner = scopes.push(ROOT)
    scopes.insert(inner, _entry("tmp"))
    scopes.pop(inner)
    sibling = scopes.push(ROOT)
    assert scopes.find(sibling, "tmp") is None
    assert scopes.parent_of(sibling) == ROOT


def test_unknown_scope_id(scopes):
    with pytest.raises(ValueError):
        scopes.find(5, "x")
