"""The interactive prompt loop and the command that starts it."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
import threading
from collections.abc import Callable, Iterator, Sequence
from types import FrameType
from typing import TextIO

from .builtins import ShellExit
from .environment import Environment
from .executor import ShellState, execute_line

try:
    import readline  # noqa: F401  (enables line editing and history for input())
except ImportError:  # pragma: no cover - platforms without readline
    _HAVE_READLINE = False
else:
    _HAVE_READLINE = True

_PROMPT_TEXT = "\001\033[01;38:5:208m\002Oud Getrouwd Shell : \001\033[0;0m\002"
PROMPT = _PROMPT_TEXT if _HAVE_READLINE else _PROMPT_TEXT.replace("\001", "").replace(
    "\002", ""
)
USAGE_ERROR = "Error\nDo not use arguments, a prompt will pop up.\n"


def _output(state: ShellState) -> TextIO:
    return sys.stdout if state.stdout is None else state.stdout


def repl(state: ShellState, read_line: Callable[[], str | None]) -> int:
    """Read and run lines until input ends or ``exit`` is run.

    ``read_line`` returns the next line, or ``None`` (or raises
    ``EOFError``) at the end of input. A ``KeyboardInterrupt`` while
    reading drops the line and starts a fresh prompt. At the end of
    input ``exit`` is printed and 0 returned; the ``exit`` builtin
    returns its own status instead.
    """
    while True:
        try:
            line = read_line()
        except KeyboardInterrupt:
            out = _output(state)
            out.write("\n")
            out.flush()
            continue
        except EOFError:
            line = None
        if line is None:
            break
        if not line:
            continue
        try:
            execute_line(state, line)
        except ShellExit as exc:
            return exc.status
    out = _output(state)
    out.write("exit\n")
    out.flush()
    return 0


class _Signals:
    """Signal handling for the prompt and for commands being run.

    At the prompt an interrupt abandons the line being typed; while a
    command runs it only moves to a new line. The quit signal is
    ignored by the shell but not by the programs it starts.
    """

    def __init__(self) -> None:
        self.at_prompt = False

    def on_interrupt(self, signum: int, frame: FrameType | None) -> None:
        if self.at_prompt:
            raise KeyboardInterrupt
        sys.stdout.write("\n")
        sys.stdout.flush()

    def on_quit(self, signum: int, frame: FrameType | None) -> None:
        """Ignore the quit signal while keeping the default for child programs."""

    @contextlib.contextmanager
    def installed(self) -> Iterator[None]:
        if threading.current_thread() is not threading.main_thread():
            yield
            return
        wanted = [(signal.SIGINT, self.on_interrupt)]
        quit_signal = getattr(signal, "SIGQUIT", None)
        if quit_signal is not None:
            wanted.append((quit_signal, self.on_quit))
        previous = [(signum, signal.signal(signum, handler)) for signum, handler in wanted]
        try:
            yield
        finally:
            for signum, handler in previous:
                signal.signal(signum, handler)

    def reader(self) -> Callable[[], str | None]:
        def read_line() -> str | None:
            self.at_prompt = True
            try:
                return input(PROMPT)
            except EOFError:
                return None
            finally:
                self.at_prompt = False

        return read_line


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive shell; it takes no arguments."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        sys.stdout.write(USAGE_ERROR)
        sys.stdout.flush()
        return 1
    state = ShellState(Environment.from_environ(os.environ))
    signals = _Signals()
    with signals.installed():
        return repl(state, signals.reader())


if __name__ == "__main__":
    sys.exit(main())