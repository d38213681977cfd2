"""Expansion of ``*`` patterns against the names in a directory."""

from __future__ import annotations

import os
from collections.abc import Iterable

from .tokenizer import Token, TokenId


def wildcard_match(name: str, pattern: str) -> bool:
    """Tell whether ``name`` matches ``pattern``.

    Only the first ``*`` is a wildcard: the text before it must start
    the name and the text after it must end the name. Names starting
    with ``.`` only match patterns starting with ``.``, and a pattern
    without ``*`` matches nothing.
    """
    if name.startswith(".") != pattern.startswith("."):
        return False
    star = pattern.find("*")
    if star == -1:
        return False
    prefix, suffix = pattern[:star], pattern[star + 1 :]
    return name.startswith(prefix) and name[star:].endswith(suffix)


def _directory_names(directory: str | os.PathLike[str]) -> list[str]:
    try:
        names = os.listdir(directory)
    except OSError:
        return []
    return sorted([".", "..", *names])


def expand_wildcards(
    tokens: Iterable[Token], directory: str | os.PathLike[str] = "."
) -> list[Token]:
    """Replace each token holding ``*`` with the matching names in ``directory``.

    Matches are given in sorted order as plain word tokens. A token
    that matches nothing is kept as it is.
    """
    result: list[Token] = []
    names: list[str] | None = None
    for token in tokens:
        if "*" not in token.word:
            result.append(token)
            continue
        if names is None:
            names = _directory_names(directory)
        matches = [name for name in names if wildcard_match(name, token.word)]
        if matches:
            result.extend(Token(TokenId.STR, name) for name in matches)
        else:
            result.append(token)
    return result