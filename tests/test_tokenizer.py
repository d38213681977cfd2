import pytest

from ogshell.tokenizer import (
    Token,
    TokenId,
    name_token,
    remove_quotes,
    split_words,
    tokenize,
)


def test_split_plain_words():
    assert split_words("echo hello world") == ["echo", "hello", "world"]


def test_split_operators_without_spaces():
    assert split_words("cat<in|wc>>out") == ["cat", "<", "in", "|", "wc", ">>", "out"]


def test_split_keeps_quoted_spaces():
    assert split_words("echo \"a b\" 'c d'") == ["echo", '"a b"', "'c d'"]


def test_split_quotes_inside_word():
    assert split_words('a"b c"d e') == ['a"b c"d', "e"]


def test_split_unclosed_quote_runs_to_end():
    assert split_words('echo "abc def') == ["echo", '"abc def']


def test_split_only_blanks():
    assert split_words("  \t \n") == []


def test_split_leading_form_feed_is_skipped():
    assert split_words("\fa b") == ["a", "b"]


def test_split_doubled_operators():
    assert split_words("<<<") == ["<<", "<"]
    assert split_words(">>>>") == [">>", ">>"]


def test_split_words_contain_no_blanks_outside_quotes():
    line = "ls -l  |  grep x>out"
    assert all(" " not in word for word in split_words(line))
    assert "".join(split_words(line)) == line.replace(" ", "")


@pytest.mark.parametrize(
    "word, expected",
    [
        ("|", TokenId.PIPE),
        ("<<", TokenId.HEREDOC),
        (">>", TokenId.APPEND),
        ("<", TokenId.READ),
        (">", TokenId.WRITE),
        ("echo", TokenId.STR),
        ('"|"', TokenId.STR),
    ],
)
def test_name_token(word, expected):
    assert name_token(word) == expected


def test_remove_double_quotes():
    assert remove_quotes('"a b"') == "a b"


def test_remove_quotes_keeps_other_kind_inside():
    assert remove_quotes("'it\"s'") == 'it"s'


def test_remove_quotes_unclosed():
    assert remove_quotes("a\"b'c") == "ab'c"


def test_remove_quotes_without_quotes_is_identity():
    assert remove_quotes("plain") == "plain"


def test_tokenize_names_words():
    tokens = tokenize("cat << end | wc > out")
    assert [token.id for token in tokens] == [
        TokenId.STR,
        TokenId.HEREDOC,
        TokenId.STR,
        TokenId.PIPE,
        TokenId.STR,
        TokenId.WRITE,
        TokenId.STR,
    ]
    assert [token.word for token in tokens] == split_words("cat << end | wc > out")


def test_tokenize_keeps_quotes():
    assert tokenize("echo 'x'") == [
        Token(TokenId.STR, "echo"),
        Token(TokenId.STR, "'x'"),
    ]


def test_tokenize_empty_line():
    assert tokenize("   ") == []