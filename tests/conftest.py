import pytest

from sprig.interpreter import Interpreter

# Every test starts with the SPRIG_* environment variables cleared. Tests that
# exercise configuration set them through monkeypatch.


@pytest.fixture(autouse=True)
def _clear_sprig_env(monkeypatch):
    for var in ("SPRIG_UNKNOWN_OPERATORS", "SPRIG_TRACE", "SPRIG_INDENT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def interp():
    """Fresh interpreter writing to sys.stdout (captured by capsys)."""
    return Interpreter()


@pytest.fixture
def run(interp, capsys):
    """Evaluate source text and return everything it printed."""
    def _run(source: str) -> str:
        interp.eval(source)
        return capsys.readouterr().out
    return _run
