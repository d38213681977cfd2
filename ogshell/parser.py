"""Grouping tokens into the commands of a pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .tokenizer import Token, TokenId


@dataclass
class Command:
    """One command of a pipeline; redirections are still among its args."""

    args: list[str] = field(default_factory=list)


def _words_from(tokens: Sequence[Token], start: int) -> list[str]:
    """Collect words from ``start`` up to the next pipe, skipping a pipe at ``start``."""
    if tokens[start].id is TokenId.PIPE:
        start += 1
    words: list[str] = []
    for token in tokens[start:]:
        if token.id is TokenId.PIPE:
            break
        words.append(token.word)
    return words


def parse(tokens: Sequence[Token]) -> list[Command]:
    """Split ``tokens`` at pipes into commands."""
    if not tokens:
        return []
    commands = [Command(_words_from(tokens, 0))]
    commands.extend(
        Command(_words_from(tokens, index))
        for index, token in enumerate(tokens)
        if token.id is TokenId.PIPE
    )
    return commands