import pytest

from slrgram.grammar import Terminal
from slrgram.tokenizer import Token, TokenizeError, Tokenizer


def terms(*values):
    return [Terminal(v) for v in values]


def values(tokenizer):
    return [token.value for token in tokenizer]


def test_longest_terminal_wins():
    tk = Tokenizer(terms("x", "y", "=", "=="), "x==y")
    assert values(tk) == ["x", "==", "y"]


def test_keyword_followed_by_letter_is_not_matched():
    tk = Tokenizer(terms("if", "i", "f"), "iff")
    assert values(tk) == ["i", "f", "f"]


def test_keyword_followed_by_space_is_matched():
    tk = Tokenizer(terms("if", "x"), "if x")
    tokens = list(tk)
    assert [t.value for t in tokens] == ["if", "x"]
    assert tokens[0].terminal == Terminal("if")


def test_comment_lines_and_newlines_removed():
    tk = Tokenizer(terms("x", "y"), "// comment\nx\n  y\n")
    assert values(tk) == ["x", "y"]
    assert tk.is_end()


def test_char_mode_matches_escape_terminal():
    tk = Tokenizer(terms("\\n", "a"), "'\\n'")
    assert values(tk) == ["'", "\\n", "'"]


def test_char_mode_unknown_char_becomes_own_terminal():
    tokens = list(Tokenizer(terms("a"), "'z'"))
    assert tokens[1] == Token("z", Terminal("z"))
    assert len(tokens) == 3


def test_char_mode_skips_long_plain_terminals():
    tk = Tokenizer(terms("ab", "a", "b"), "'ab'")
    assert values(tk) == ["'", "a", "b", "'"]


def test_unexpected_character_raises():
    tk = Tokenizer(terms("x"), "x?")
    assert tk.next_token().value == "x"
    with pytest.raises(TokenizeError) as info:
        tk.next_token()
    assert info.value.position == 1


def test_remaining_and_is_end():
    tk = Tokenizer(terms("x", "y"), "xy")
    assert tk.remaining() == "xy"
    tk.next_token()
    assert tk.remaining() == "y"
    assert not tk.is_end()
    tk.next_token()
    assert tk.is_end()
    assert tk.next_token() is None


def test_empty_input_yields_nothing():
    assert list(Tokenizer(terms("x"), "")) == []


def test_trailing_spaces_end_input():
    assert values(Tokenizer(terms("x"), "x   ")) == ["x"]


def test_token_str():
    assert str(Token("x", Terminal("x"))) == "TK('x')"