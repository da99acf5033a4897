"""Split source text into tokens using the terminals of a grammar."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from slrgram.grammar import Terminal

_QUOTE = "'"
_SKIPPED = " \n"


class TokenizeError(ValueError):
    """Raised when the input holds a character no terminal matches."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


@dataclass(frozen=True)
class Token:
    """A piece of input text together with the terminal it matched."""

    value: str
    terminal: Terminal

    def __str__(self) -> str:
        return f"TK({self.terminal})"


def _strip_comments(text: str) -> str:
    """Drop lines starting with ``//`` and join the rest without newlines."""
    return "".join(line for line in text.split("\n") if not line.startswith("//"))


def _is_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_word_char(ch: str) -> bool:
    return _is_letter(ch) or "0" <= ch <= "9" or ch == "_"


class Tokenizer:
    """Longest-match tokenizer with a character mode between single quotes."""

    def __init__(self, terminals: Iterable[Terminal], text: str) -> None:
        self.terminals: list[Terminal] = sorted(
            terminals, key=lambda terminal: len(terminal.value), reverse=True
        )
        self.text = _strip_comments(text)
        self.position = 0
        self.in_char_mode = False

    def is_end(self) -> bool:
        """Tell whether all input has been consumed."""
        return self.position >= len(self.text)

    def remaining(self) -> str:
        """The input not yet consumed."""
        return self.text[self.position:]

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next_token()) is not None:
            yield token

    def next_token(self) -> Token | None:
        """Return the next token, or ``None`` once the input is exhausted."""
        text = self.text
        while self.position < len(text) and text[self.position] in _SKIPPED:
            self.position += 1
        if self.is_end():
            return None

        ch = text[self.position]
        if ch == _QUOTE:
            self.in_char_mode = not self.in_char_mode
            self.position += 1
            return Token(_QUOTE, Terminal(_QUOTE))

        if self.in_char_mode:
            return self._next_char_token(ch)
        return self._next_normal_token(ch)

    def _next_char_token(self, ch: str) -> Token:
        for terminal in self.terminals:
            value = terminal.value
            if not value or (len(value) > 1 and value[0] != "\\"):
                continue
            if self.text.startswith(value, self.position):
                self.position += len(value)
                return Token(value, terminal)
        self.position += 1
        return Token(ch, Terminal(ch))

    def _next_normal_token(self, ch: str) -> Token:
        text = self.text
        for terminal in self.terminals:
            value = terminal.value
            if not value or not text.startswith(value, self.position):
                continue
            end = self.position + len(value)
            if (
                len(value) != 1
                and all(_is_letter(c) for c in value)
                and end < len(text)
                and _is_word_char(text[end])
            ):
                continue
            self.position = end
            return Token(value, terminal)

        position = self.position
        self.position += 1
        raise TokenizeError(
            f"Unexpected character {ch!r} at position {position}", position
        )