import pytest

from ogshell.lexer import ShellSyntaxError, check_syntax
from ogshell.tokenizer import tokenize


@pytest.mark.parametrize(
    "line",
    ["echo hi", "echo hi | wc -l", "cat < in > out", "cat << end >> log"],
)
def test_valid_lines(line):
    assert check_syntax(tokenize(line)) is None


def test_empty_token_list_is_accepted():
    assert check_syntax([]) is None


@pytest.mark.parametrize(
    "line, token",
    [
        ("| ls", "|"),
        ("ls | | wc", "|"),
        ("cat <", "newline"),
        ("ls |", "newline"),
        ("cat < > x", "<"),
        ("cat << | x", "<<"),
        ("echo > >> x", ">"),
        ("echo >> < x", ">>"),
    ],
)
def test_syntax_errors(line, token):
    with pytest.raises(ShellSyntaxError) as info:
        check_syntax(tokenize(line))
    assert info.value.token == token
    assert info.value.status == 258


def test_error_message():
    with pytest.raises(ShellSyntaxError, match="syntax error near unexpected token `\\|'"):
        check_syntax(tokenize("| x"))