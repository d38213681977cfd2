"""Expansion of ``$VARIABLE`` and ``$?`` in an input line."""

from __future__ import annotations

import re
from typing import Protocol

_NAME_STOP = " \t\n\"'$|*<>"
_EXIT_STATUS = re.compile(r"\$\?(.?)", re.DOTALL)


class _Lookup(Protocol):
    def get(self, key: str) -> str | None: ...


def _name_length(text: str, start: int) -> int:
    """Count characters from ``start`` up to the first name-ending character."""
    end = start
    while end < len(text) and text[end] not in _NAME_STOP:
        end += 1
    return end - start


def _follows_heredoc(line: str, index: int) -> bool:
    return index >= 3 and line[index - 3] == "<" and line[index - 2] == "<"


def expand_variables(line: str, env: _Lookup) -> str:
    """Replace every ``$NAME`` outside single quotes with its value.

    Unknown names expand to nothing. A ``$`` written as a heredoc
    delimiter (``<< $NAME``) is left alone. Expanded text is scanned
    again, so a value may itself contain ``$NAME``.
    """
    quoted = False
    index = 0
    while index < len(line):
        char = line[index]
        if quoted:
            if char == "'":
                quoted = False
            index += 1
            continue
        if char == "'":
            quoted = True
        if char == "$" and not _follows_heredoc(line, index):
            length = _name_length(line, index + 1)
            name = line[index + 1 : index + 1 + length]
            value = env.get(name)
            line = line[:index] + (value or "") + line[index + 1 + length :]
            continue
        index += 1
    return line


def count_exit_status(line: str) -> int:
    """Count the ``$?`` occurrences that :func:`expand_exit_status` replaces."""
    return len(_EXIT_STATUS.findall(line))


def expand_exit_status(line: str, status: int) -> str:
    """Replace ``$?`` with ``status``.

    The character right after each replaced ``$?`` is copied as it is,
    so it never starts another replacement.
    """
    text = str(status)
    return _EXIT_STATUS.sub(lambda match: text + match.group(1), line)