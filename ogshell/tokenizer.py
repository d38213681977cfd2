"""Splitting an input line into shell tokens."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_BLANKS = " \t\n\f\r\v"
_WORD_BREAKS = " \t\n|<>"
_QUOTES = "'\""


class TokenId(enum.Enum):
    """Kind of a token."""

    PIPE = enum.auto()
    STR = enum.auto()
    HEREDOC = enum.auto()
    READ = enum.auto()
    WRITE = enum.auto()
    APPEND = enum.auto()


@dataclass(frozen=True)
class Token:
    """A word of the input line together with its kind."""

    id: TokenId
    word: str


def _word_end(line: str, index: int) -> int:
    """Return the index just past the word starting at ``index``.

    Quoted parts run to their closing quote, or to the end of the line
    when the quote is never closed.
    """
    while index < len(line):
        char = line[index]
        if char in _QUOTES:
            close = line.find(char, index + 1)
            if close == -1:
                return len(line)
            index = close + 1
        elif char in _WORD_BREAKS:
            return index
        else:
            index += 1
    return len(line)


def split_words(line: str) -> list[str]:
    """Split ``line`` into words and operators, keeping quotes in place."""
    words: list[str] = []
    index = 0
    while index < len(line):
        start = index
        while start < len(line) and line[start] in _BLANKS:
            start += 1
        if start == len(line):
            break
        char = line[start]
        if char in "<>" and line[start + 1 : start + 2] == char:
            end = start + 2
        elif char in "|<>":
            end = start + 1
        else:
            end = _word_end(line, start)
        words.append(line[start:end])
        index = end
    return words


def name_token(word: str) -> TokenId:
    """Classify a word by its leading characters."""
    if word.startswith("|"):
        return TokenId.PIPE
    if word.startswith("<<"):
        return TokenId.HEREDOC
    if word.startswith(">>"):
        return TokenId.APPEND
    if word.startswith("<"):
        return TokenId.READ
    if word.startswith(">"):
        return TokenId.WRITE
    return TokenId.STR


def remove_quotes(word: str) -> str:
    """Drop the quote characters that open and close quoted parts."""
    kept: list[str] = []
    state: str | None = None
    for char in word:
        if state is None and char in _QUOTES:
            state = char
        elif char == state:
            state = None
        else:
            kept.append(char)
    return "".join(kept)


def tokenize(line: str) -> list[Token]:
    """Split ``line`` and name each word; quotes are left in the words."""
    return [Token(name_token(word), word) for word in split_words(line)]