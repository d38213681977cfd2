"""The commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Sequence
from typing import TextIO

from .environment import Environment

BUILTINS = frozenset({"echo", "cd", "pwd", "export", "unset", "env", "exit"})

_EXIT_ARGUMENT = re.compile(r"[ \t\v\r\f\n]*(-?)([0-9]*)")
_INT_MAX = 2**31 - 1


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, code: int) -> None:
        self.code = code
        self.status = code & 0xFF
        super().__init__(f"exit {self.status}")


def parse_exit_code(text: str) -> int:
    """Read a 32-bit signed decimal for ``exit``.

    Leading blanks and one ``-`` are allowed; anything else after the
    digits, a ``+`` sign, or a value out of range raises ``ValueError``.
    An empty digit string reads as zero.
    """
    match = _EXIT_ARGUMENT.fullmatch(text)
    if match is None:
        raise ValueError(f"{text!r} is not a number")
    negative = match.group(1) == "-"
    value = int(match.group(2) or "0")
    limit = _INT_MAX + 1 if negative else _INT_MAX
    if value > limit:
        raise ValueError(f"{text!r} is out of range")
    return -value if negative else value


def is_builtin(name: str) -> bool:
    """Tell whether ``name`` is one of the shell's own commands."""
    return name in BUILTINS


def is_valid_identifier(text: str) -> bool:
    """Accept a name for ``export`` if it holds at least one ASCII letter."""
    return any(("a" <= char <= "z") or ("A" <= char <= "Z") for char in text)


def echo_flag_count(args: Sequence[str]) -> int:
    """Count the leading ``-n``, ``-nn``... options among ``args``."""
    count = 0
    for arg in args:
        if len(arg) < 2 or arg[0] != "-" or any(char != "n" for char in arg[1:]):
            break
        count += 1
    return count


def print_env(env: Environment, mode: str, out: TextIO | None = None) -> None:
    """List the variables in the style of ``env`` or of ``export``."""
    out = sys.stdout if out is None else out
    for key, value in env.items():
        if mode == "export":
            if value:
                out.write(f'declare -x {key}="{value}"\n')
            else:
                out.write(f"declare -x {key}\n")
        elif mode == "env" and value:
            out.write(f"{key}={value}\n")


def cd(args: Sequence[str], env: Environment, err: TextIO | None = None) -> int:
    """Change the working directory; return 0 on success and 1 on failure."""
    err = sys.stderr if err is None else err
    if len(args) > 2:
        err.write("OGS: cd: too many arguments\n")
        return 1
    if not args or args[0] != "cd":
        return 1
    if len(args) == 1:
        home = env.get("HOME")
        if home is None:
            err.write("OGS: cd: HOME not set\n")
            return 1
        target, label = home, None
    else:
        target = label = args[1]
    try:
        os.chdir(target)
    except OSError as exc:
        reason = exc.strerror or str(exc)
        err.write(f"{label}: {reason}\n" if label is not None else f"{reason}\n")
        return 1
    return 0


def echo(args: Sequence[str], out: TextIO | None = None) -> None:
    """Write the arguments separated by spaces; ``-n`` drops the newline."""
    out = sys.stdout if out is None else out
    if not args or args[0] != "echo":
        return
    flags = echo_flag_count(args[1:])
    out.write(" ".join(args[1 + flags :]))
    if flags == 0:
        out.write("\n")


def env_command(
    env: Environment, args: Sequence[str], out: TextIO | None = None
) -> None:
    """List the variables that have a non-empty value."""
    if not args or args[0] != "env":
        return
    print_env(env, "env", out)


def exit_command(
    args: Sequence[str], last_return: int, out: TextIO | None = None
) -> int:
    """End the shell by raising :class:`ShellExit`.

    With too many arguments nothing ends and 1 is returned. A
    non-numeric argument ends the shell with status 255.
    """
    out = sys.stdout if out is None else out
    if len(args) > 2:
        out.write("OGS: exit: too many arguments\n")
        return 1
    if len(args) < 2:
        raise ShellExit(last_return)
    try:
        code = parse_exit_code(args[1])
    except ValueError:
        out.write(f"OGS: exit: {args[1]}: numeric argument required\n")
        raise ShellExit(255) from None
    raise ShellExit(code)


def export(
    env: Environment,
    args: Sequence[str],
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> None:
    """Set variables from ``NAME=VALUE`` arguments, or list them all."""
    err = sys.stderr if err is None else err
    env.sort()
    for arg in args[1:]:
        if not is_valid_identifier(arg):
            err.write(f"{arg} : not a valid identifier\n")
            continue
        key, sign, value = arg.partition("=")
        env.change(key, value if sign else None)
    if len(args) < 2:
        print_env(env, "export", out)


def pwd(args: Sequence[str], out: TextIO | None = None) -> None:
    """Write the current working directory."""
    out = sys.stdout if out is None else out
    if not args or args[0] != "pwd":
        return
    out.write(os.getcwd() + "\n")


def unset(env: Environment, args: Sequence[str]) -> None:
    """Remove every variable named in the arguments."""
    for name in args[1:]:
        env.remove(name)