"""Syntax checking of a token list."""

from __future__ import annotations

from collections.abc import Sequence

from .tokenizer import Token, TokenId

_REDIRECT_NAMES = {
    TokenId.HEREDOC: "<<",
    TokenId.WRITE: ">",
    TokenId.READ: "<",
    TokenId.APPEND: ">>",
}


class ShellSyntaxError(Exception):
    """A token appears where the grammar does not allow it."""

    status = 258

    def __init__(self, token: str) -> None:
        super().__init__(f"syntax error near unexpected token `{token}'")
        self.token = token


def check_syntax(tokens: Sequence[Token]) -> None:
    """Raise :class:`ShellSyntaxError` if ``tokens`` do not form a valid line."""
    if not tokens:
        return
    if tokens[0].id is TokenId.PIPE:
        raise ShellSyntaxError("|")
    for current, following in zip(tokens, tokens[1:]):
        name = _REDIRECT_NAMES.get(current.id)
        if name is not None and following.id is not TokenId.STR:
            raise ShellSyntaxError(name)
        if current.id is TokenId.PIPE and following.id is TokenId.PIPE:
            raise ShellSyntaxError("|")
    if tokens[-1].id is not TokenId.STR:
        raise ShellSyntaxError("newline")