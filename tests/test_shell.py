import io

import pytest

from ogshell.environment import Environment
from ogshell.executor import ShellState
from ogshell.shell import USAGE_ERROR, main, repl


def _state(**env):
    out = io.StringIO()
    err = io.StringIO()
    state = ShellState(Environment(env.items()), stdout=out, stderr=err)
    return state, out, err


def _reader(lines):
    remaining = iter(lines)
    return lambda: next(remaining, None)


def test_echo_then_end_of_input():
    state, out, _ = _state()
    status = repl(state, _reader(["echo hello"]))
    assert status == 0
    assert out.getvalue() == "hello\nexit\n"


def test_exit_builtin_returns_its_status_without_message():
    state, out, _ = _state()
    status = repl(state, _reader(["exit 3", "echo never"]))
    assert status == 3
    assert out.getvalue() == ""


def test_exit_without_argument_uses_last_status():
    state, out, _ = _state()
    state.last_return = 7
    assert repl(state, _reader(["exit"])) == 7


def test_variables_persist_between_lines():
    state, out, _ = _state()
    repl(state, _reader(["export FOO=bar", "echo $FOO"]))
    assert out.getvalue() == "bar\nexit\n"
    assert state.env.get("FOO") == "bar"


def test_empty_lines_are_skipped():
    state, out, _ = _state()
    repl(state, _reader(["", "echo a", ""]))
    assert out.getvalue() == "a\nexit\n"


def test_syntax_error_sets_status():
    state, out, err = _state()
    repl(state, _reader(["|"]))
    assert state.last_return == 258
    assert "syntax error near unexpected token `|'" in err.getvalue()


def test_interrupt_while_reading_starts_new_prompt():
    state, out, _ = _state()
    events = iter([KeyboardInterrupt, "echo x", None])

    def read_line():
        event = next(events)
        if event is KeyboardInterrupt:
            raise KeyboardInterrupt
        return event

    assert repl(state, read_line) == 0
    assert out.getvalue() == "\nx\nexit\n"


def test_eof_error_ends_the_loop():
    state, out, _ = _state()

    def read_line():
        raise EOFError

    assert repl(state, read_line) == 0
    assert out.getvalue() == "exit\n"


def test_main_rejects_arguments(capsys):
    assert main(["extra"]) == 1
    assert capsys.readouterr().out == USAGE_ERROR


def test_main_reads_standard_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("echo hi\n"))
    status = main([])
    out = capsys.readouterr().out
    assert status == 0
    assert "hi\n" in out
    assert out.endswith("exit\n")


@pytest.mark.parametrize("code", ["0", "42"])
def test_main_exit_code(monkeypatch, code):
    monkeypatch.setattr("sys.stdin", io.StringIO(f"exit {code}\n"))
    assert main([]) == int(code)