"""Running parsed command lines: redirections, pipelines and programs."""

from __future__ import annotations

import contextlib
import io
import os
import subprocess
import sys
import tempfile
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import IO, TextIO

from .builtins import (
    ShellExit,
    cd,
    echo,
    env_command,
    exit_command,
    export,
    is_builtin,
    pwd,
    unset,
)
from .environment import Environment
from .expansion import expand_exit_status, expand_variables
from .lexer import ShellSyntaxError, check_syntax
from .parser import Command, parse
from .tokenizer import Token, remove_quotes, tokenize
from .wildcard import expand_wildcards

_OPEN_MODES = {"<": "rb", ">": "wb", ">>": "ab"}
_SIGNALED_STATUS = 130
_NOT_FOUND_STATUS = 127


@dataclass
class ShellState:
    """What the shell keeps between lines.

    Streams left as ``None`` stand for the process's own standard
    streams. ``stdin`` is also where heredoc lines are read from.
    """

    env: Environment
    last_return: int = 0
    stdin: TextIO | None = None
    stdout: TextIO | None = None
    stderr: TextIO | None = None


@dataclass(frozen=True)
class Redirection:
    """A redirection operator (``<``, ``<<``, ``>``, ``>>``) and its word."""

    operator: str
    target: str


def _input(state: ShellState) -> TextIO:
    return sys.stdin if state.stdin is None else state.stdin


def _output(state: ShellState) -> TextIO:
    return sys.stdout if state.stdout is None else state.stdout


def _errors(state: ShellState) -> TextIO:
    return sys.stderr if state.stderr is None else state.stderr


def _fileno(stream: object) -> int | None:
    try:
        return stream.fileno()  # type: ignore[attr-defined]
    except (AttributeError, OSError, ValueError):
        return None


def _flush(*streams: TextIO) -> None:
    for stream in streams:
        with contextlib.suppress(OSError, ValueError):
            stream.flush()


def _encode(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def _decode(data: bytes) -> str:
    return data.decode("utf-8", "surrogateescape")


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


def path_options(env: Environment) -> list[str] | None:
    """Return the non-empty entries of ``PATH``, or ``None`` when it is unset."""
    value = env.get("PATH")
    if value is None:
        return None
    return [entry for entry in value.split(":") if entry]


def read_heredoc(delimiter: str, stream: TextIO) -> str:
    """Read lines from ``stream`` up to a line equal to ``delimiter``.

    Every line read before it is returned with a trailing newline; the
    end of the stream also ends the document.
    """
    lines: list[str] = []
    for line in iter(stream.readline, ""):
        text = line[:-1] if line.endswith("\n") else line
        if text == delimiter:
            break
        lines.append(text + "\n")
    return "".join(lines)


def _operator(word: str) -> str:
    if word.startswith("<<"):
        return "<<"
    if word.startswith(">>"):
        return ">>"
    if word.startswith(">"):
        return ">"
    return "<"


def split_redirections(args: Sequence[str]) -> tuple[list[str], list[Redirection]]:
    """Separate the redirections from the words of a command.

    A word starting with ``<`` or ``>`` takes the word after it as its
    target. Both lists keep the order of the command line.
    """
    words: list[str] = []
    redirections: list[Redirection] = []
    remaining = iter(args)
    for word in remaining:
        if word and word[0] in "<>":
            target = next(remaining, None)
            if target is None:
                words.append(word)
                break
            redirections.append(Redirection(_operator(word), target))
        else:
            words.append(word)
    return words, redirections


def _apply_redirections(
    state: ShellState,
    redirections: Sequence[Redirection],
    stdin_fd: int | None,
    stdout_fd: int | None,
    opened: list[IO[bytes]],
) -> tuple[int | None, int | None]:
    """Open the redirection targets in order; a file that fails to open is skipped."""
    for redirection in redirections:
        if redirection.operator == "<<":
            document = tempfile.TemporaryFile()
            opened.append(document)
            document.write(_encode(read_heredoc(redirection.target, _input(state))))
            document.flush()
            document.seek(0)
            stdin_fd = document.fileno()
            continue
        try:
            handle = open(redirection.target, _OPEN_MODES[redirection.operator])
        except OSError:
            continue
        opened.append(handle)
        if redirection.operator == "<":
            stdin_fd = handle.fileno()
        else:
            stdout_fd = handle.fileno()
    return stdin_fd, stdout_fd


def run_builtin(
    state: ShellState,
    args: Sequence[str],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Run the builtin named by ``args[0]`` and return its status.

    ``args`` must be free of redirections. Output goes to ``stdout``,
    or to the state's output when it is ``None``. ``stdin`` is the
    builtin's input; none of the builtins reads it. ``exit`` raises
    :class:`ShellExit`.
    """
    del stdin
    out = _output(state) if stdout is None else stdout
    err = _errors(state)
    name = args[0]
    if name == "echo":
        echo(args, out)
        return 0
    if name == "cd":
        return cd(args, state.env, err)
    if name == "env":
        env_command(state.env, args, out)
        return 0
    if name == "exit":
        return exit_command(args, state.last_return, out)
    if name == "export":
        export(state.env, args, out, err)
        return 0
    if name == "pwd":
        pwd(args, out)
        return 0
    if name == "unset":
        unset(state.env, args)
        return 0
    raise ValueError(f"{name}: not a builtin")


def _run_single_builtin(state: ShellState, args: Sequence[str]) -> int:
    """Run a lone builtin in the shell itself, so its changes persist."""
    words, redirections = split_redirections(args)
    opened: list[IO[bytes]] = []
    try:
        _, stdout_fd = _apply_redirections(state, redirections, None, None, opened)
        if not words:
            return 0
        if stdout_fd is None:
            return run_builtin(state, words)
        buffer = io.StringIO()
        try:
            return run_builtin(state, words, None, buffer)
        finally:
            _write_all(stdout_fd, _encode(buffer.getvalue()))
    finally:
        for handle in opened:
            handle.close()


def _run_isolated_builtin(
    state: ShellState, args: Sequence[str], buffer: io.StringIO
) -> int:
    """Run a builtin as a pipeline stage: its changes to the shell are discarded."""
    isolated = ShellState(
        Environment(state.env.items()),
        state.last_return,
        state.stdin,
        buffer,
        state.stderr,
    )
    try:
        cwd: str | None = os.getcwd()
    except OSError:
        cwd = None
    try:
        run_builtin(isolated, args, None, buffer)
    except ShellExit as exc:
        return exc.status
    finally:
        if cwd is not None:
            with contextlib.suppress(OSError):
                os.chdir(cwd)
    return 0


def _write_in_background(fd: int, data: bytes) -> threading.Thread:
    duplicate = os.dup(fd)

    def feed() -> None:
        try:
            _write_all(duplicate, data)
        except OSError:
            pass
        finally:
            os.close(duplicate)

    thread = threading.Thread(target=feed, daemon=True)
    thread.start()
    return thread


def _builtin_stage(
    state: ShellState,
    args: Sequence[str],
    stdout_fd: int | None,
    writers: list[threading.Thread],
) -> int:
    buffer = io.StringIO()
    status = _run_isolated_builtin(state, args, buffer)
    text = buffer.getvalue()
    if stdout_fd is None:
        _output(state).write(text)
    elif text:
        writers.append(_write_in_background(stdout_fd, _encode(text)))
    return status


def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def _find_program(name: str, env: Environment) -> str | int:
    """Return the program's path, or the status to end with when there is none."""
    if name.startswith(("/", ".")):
        if _is_executable(name):
            return name
        return _NOT_FOUND_STATUS
    directories = path_options(env)
    if directories is None:
        return -_NOT_FOUND_STATUS
    for directory in directories:
        candidate = f"{directory}/{name}"
        if _is_executable(candidate):
            return candidate
    return _NOT_FOUND_STATUS


def _external_stage(
    state: ShellState,
    args: Sequence[str],
    stdin_fd: int | None,
    stdout_fd: int,
    err_fd: int,
) -> subprocess.Popen[bytes] | int:
    found = _find_program(args[0], state.env)
    if isinstance(found, int):
        if found > 0:
            _errors(state).write(f"{args[0]}: command not found\n")
        return abs(found)
    if stdin_fd is None:
        stdin_fd = _fileno(_input(state))
    environment = {key: value for key, value in state.env.items() if key}
    try:
        return subprocess.Popen(
            list(args),
            executable=found,
            stdin=subprocess.DEVNULL if stdin_fd is None else stdin_fd,
            stdout=stdout_fd,
            stderr=err_fd,
            env=environment,
        )
    except OSError:
        _errors(state).write(f"{args[0]}: command not found\n")
        return _NOT_FOUND_STATUS


def _wait(stage: subprocess.Popen[bytes] | int) -> int:
    if isinstance(stage, int):
        return stage
    code = stage.wait()
    return _SIGNALED_STATUS if code < 0 else code


def _copy_capture(handle: IO[bytes], stream: TextIO) -> None:
    handle.seek(0)
    stream.write(_decode(handle.read()))


def _close(fd: int, pending: set[int]) -> None:
    if fd in pending:
        pending.discard(fd)
        os.close(fd)


def _close_all(pending: set[int]) -> None:
    for fd in list(pending):
        _close(fd, pending)


def _run_stages(state: ShellState, commands: Sequence[Command]) -> int:
    out_stream, err_stream = _output(state), _errors(state)
    _flush(out_stream, err_stream)
    stages: list[subprocess.Popen[bytes] | int] = []
    writers: list[threading.Thread] = []
    with contextlib.ExitStack() as stack:
        pending: set[int] = set()
        stack.callback(_close_all, pending)
        err_capture: IO[bytes] | None = None
        err_fd = _fileno(err_stream)
        if err_fd is None:
            err_capture = stack.enter_context(tempfile.TemporaryFile())
            err_fd = err_capture.fileno()
        out_capture: IO[bytes] | None = None
        read_end: int | None = None
        last = len(commands) - 1
        for index, command in enumerate(commands):
            next_read = write_end = None
            if index < last:
                next_read, write_end = os.pipe()
                pending.update((next_read, write_end))
            opened: list[IO[bytes]] = []
            try:
                args, redirections = split_redirections(command.args)
                stdin_fd, stdout_fd = _apply_redirections(
                    state, redirections, read_end, write_end, opened
                )
                if not args:
                    stage: subprocess.Popen[bytes] | int = 0
                elif is_builtin(args[0]):
                    stage = _builtin_stage(state, args, stdout_fd, writers)
                else:
                    if stdout_fd is None:
                        stdout_fd = _fileno(out_stream)
                    if stdout_fd is None:
                        if out_capture is None:
                            out_capture = stack.enter_context(tempfile.TemporaryFile())
                        stdout_fd = out_capture.fileno()
                    stage = _external_stage(state, args, stdin_fd, stdout_fd, err_fd)
                stages.append(stage)
            finally:
                for handle in opened:
                    handle.close()
                for fd in (read_end, write_end):
                    if fd is not None:
                        _close(fd, pending)
            read_end = next_read
        statuses = [_wait(stage) for stage in stages]
        for writer in writers:
            writer.join()
        if out_capture is not None:
            _copy_capture(out_capture, out_stream)
        if err_capture is not None:
            _copy_capture(err_capture, err_stream)
    _flush(out_stream, err_stream)
    return statuses[-1]


def run_pipeline(state: ShellState, commands: Sequence[Command]) -> int:
    """Run the commands connected by pipes and return the last one's status.

    A single builtin runs in the shell itself and may raise
    :class:`ShellExit`; builtins inside a longer pipeline cannot change
    the shell's environment or working directory.
    """
    if not commands:
        return 0
    first = commands[0].args
    if len(commands) == 1 and first and is_builtin(first[0]):
        return _run_single_builtin(state, first)
    return _run_stages(state, commands)


def execute_line(state: ShellState, line: str) -> int:
    """Expand, tokenize, check and run one input line; return the new status."""
    if "$?" in line:
        line = expand_exit_status(line, state.last_return)
    line = expand_variables(line, state.env)
    tokens = [Token(token.id, remove_quotes(token.word)) for token in tokenize(line)]
    if not tokens:
        return state.last_return
    tokens = expand_wildcards(tokens)
    try:
        check_syntax(tokens)
    except ShellSyntaxError as exc:
        _errors(state).write(f"{exc}\n")
        state.last_return = exc.status
        return state.last_return
    state.last_return = run_pipeline(state, parse(tokens))
    return state.last_return