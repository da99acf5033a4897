"""Grammar description language: symbols, AST rules, productions and rules."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Union

logger = logging.getLogger(__name__)

SPECIAL_TERMINALS: dict[str, str] = {
    "n": "\n",
    "quot": '"',
    "squot": "'",
    "vertical": "|",
    "rarrow": "-",
    "langle": "<",
    "rangle": ">",
    "hash": "#",
    "semic": ";",
    "bquot": "`",
}

_INDEX = re.compile(r"\+?(\d+)")

_PRODUCTION_PATTERN = re.compile(
    r"""(?P<bar>\|)
      | '(?P<term>[^']*)'
      | "(?P<nt>[^"]*)"
      | <(?P<special>[^>]*)>
      | (?P<open>['"<])
      | .""",
    re.VERBOSE | re.DOTALL,
)

_UNCLOSED = {
    "'": "Terminal inside single quotes must be closed with \"'\"",
    '"': "NonTerminal inside double quotes must be closed with '\"'",
    "<": "Special terminal inside angle brackets must be closed with '>'",
}


class GrammarError(ValueError):
    """Raised when grammar text cannot be parsed."""


def match_ends(src: str, start: str, end: str) -> bool:
    """Tell whether ``src`` begins with ``start`` and ends with ``end``."""
    if not src:
        return False
    if len(src) == 1:
        return src == start and src == end
    return src[0] == start and src[-1] == end


@dataclass(frozen=True)
class Terminal:
    value: str

    @classmethod
    def parse(cls, text: str) -> Terminal:
        if not text:
            raise GrammarError("Terminal cannot be an empty string")
        if match_ends(text, "'", "'"):
            return cls(text[1:-1])
        if match_ends(text, "<", ">"):
            special = text[1:-1]
            try:
                return cls(SPECIAL_TERMINALS[special])
            except KeyError:
                raise GrammarError(f"Unknown special terminal: {special}") from None
        raise GrammarError(
            "Terminal must be enclosed in single quotes ('') or angle "
            f"brackets (<>). Given: {text}"
        )

    def __str__(self) -> str:
        shown = "\\n" if self.value == "\n" else self.value
        return f"'{shown}'"


@dataclass(frozen=True)
class NonTerminal:
    name: str

    @classmethod
    def parse(cls, text: str) -> NonTerminal:
        if not text:
            raise GrammarError("NonTerminal cannot be an empty string")
        if match_ends(text, '"', '"'):
            return cls(text[1:-1])
        raise GrammarError(
            f'NonTerminal must be enclosed in double quotes (" "). Given: {text}'
        )

    def __str__(self) -> str:
        return f'"{self.name}"'


Symbol = Union[Terminal, NonTerminal]


@dataclass(frozen=True)
class ASTRule:
    do_flatten: bool
    use_all_children: bool
    children: tuple[int, ...] = ()

    @classmethod
    def parse(cls, text: str) -> ASTRule:
        if not text:
            raise GrammarError("AST rule cannot be an empty string")
        prefix, sep, content = text.partition(";")
        if not sep:
            raise GrammarError(f"Missing ';' in AST rule: {text}")
        do_flatten = "*" in prefix
        trimmed = "".join(content.split())

        if trimmed == "-":
            return cls(do_flatten, False, ())
        if not trimmed:
            return cls(do_flatten, True, ())

        pieces = trimmed.split(",")
        if pieces[-1] == "":
            pieces.pop()
        children = []
        for piece in pieces:
            match = _INDEX.match(piece)
            if match is None:
                raise GrammarError(
                    f"Invalid child index '{piece}' in AST rule: {text}"
                )
            children.append(int(match.group(1)))
        return cls(do_flatten, False, tuple(children))

    def __str__(self) -> str:
        head = ("flatten" if self.do_flatten else "") + ";"
        if self.use_all_children:
            return head + "use_all_children"
        return head + ",".join(str(child) for child in self.children)


@dataclass(frozen=True)
class ProductionList:
    productions: tuple[tuple[Symbol, ...], ...]

    @classmethod
    def parse(cls, text: str) -> ProductionList:
        if not text:
            raise GrammarError("Production list cannot be an empty string")
        productions: list[tuple[Symbol, ...]] = []
        current: list[Symbol] = []
        for match in _PRODUCTION_PATTERN.finditer(text):
            if match.group("bar") is not None:
                productions.append(tuple(current))
                current = []
            elif match.group("term") is not None:
                current.append(Terminal.parse(f"'{match.group('term')}'"))
            elif match.group("nt") is not None:
                current.append(NonTerminal.parse(f'"{match.group("nt")}"'))
            elif match.group("special") is not None:
                current.append(Terminal.parse(f"<{match.group('special')}>"))
            elif match.group("open") is not None:
                opener = match.group("open")
                raise GrammarError(
                    f"{_UNCLOSED[opener]}. Given: {text[match.start():]}"
                )
        if current:
            productions.append(tuple(current))
        return cls(tuple(productions))

    def __str__(self) -> str:
        return " | ".join(
            "".join(str(symbol) for symbol in production)
            for production in self.productions
        )


@dataclass(frozen=True)
class GrammarRule:
    left: NonTerminal
    right: ProductionList
    ast_rule: ASTRule
    semantic_actions: str = ""

    @classmethod
    def parse(cls, text: str) -> GrammarRule:
        if not text:
            raise GrammarError("Grammar rule cannot be an empty string")
        ast_start = text.find("[")
        ast_end = text.find("]")
        if ast_start == -1 or ast_end == -1 or ast_start >= ast_end:
            raise GrammarError(
                "Grammar rule must contain AST rule enclosed in square "
                f"brackets. Invalid rule: {text}"
            )
        ast_text = text[ast_start + 1:ast_end]
        try:
            ast_rule = ASTRule.parse(ast_text)
        except GrammarError as exc:
            raise GrammarError(
                f"Invalid AST rule in grammar rule: {ast_text} ({exc})"
            ) from exc

        arrow = text.find("->")
        if arrow == -1:
            raise GrammarError(f"Grammar rule must contain '->'. Invalid rule: {text}")
        lhs = "".join(text[:arrow][ast_end + 1:].split())
        rhs = text[arrow + 2:]
        left = NonTerminal.parse(lhs)

        semantic = ""
        sem_start = rhs.find("`")
        if sem_start != -1:
            sem_end = rhs.find("`", sem_start + 1)
            if sem_end != -1:
                semantic = rhs[sem_start + 1:sem_end]
                rhs = rhs[:sem_start] + rhs[sem_end + 1:]

        right = ProductionList.parse(rhs)
        return cls(left, right, ast_rule, semantic)

    def __str__(self) -> str:
        return f"{self.ast_rule} {self.left} -> {self.right} `{self.semantic_actions}`"


def parse_grammar(text: str) -> list[GrammarRule]:
    """Parse grammar text into rules, skipping (and logging) invalid ones.

    Lines starting with ``#`` and empty lines are ignored, a trailing
    backslash joins a line with the next, and an unclosed backtick block
    carries on over the following lines.
    """
    rules: list[GrammarRule] = []
    buffer = ""
    for line in text.split("\n"):
        if not line or line.startswith("#"):
            continue
        if line.endswith("\\"):
            buffer += line[:-1]
            continue
        buffer += line
        if buffer.count("`") % 2:
            buffer += "\n"
            continue
        rule_text, buffer = buffer, ""
        try:
            rules.append(GrammarRule.parse(rule_text))
        except GrammarError as exc:
            logger.error("Invalid grammar rule: %s (%s)", rule_text, exc)
    return rules


def parse_grammar_file(path: str | Path) -> list[GrammarRule]:
    """Read a grammar file and parse it."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise GrammarError(f"Failed to open file {path}") from exc
    return parse_grammar(text)


def print_grammar(rules: Iterable[GrammarRule], file: IO[str] | None = None) -> None:
    """Write each rule on its own line."""
    out = sys.stdout if file is None else file
    for rule in rules:
        print(rule, file=out)


class Grammar:
    """Rules grouped by the name of their left-hand non-terminal."""

    def __init__(self, rules: Iterable[GrammarRule]) -> None:
        self.rule_map: dict[str, list[GrammarRule]] = {}
        for rule in rules:
            self.rule_map.setdefault(rule.left.name, []).append(rule)

    def _symbols(self) -> Iterable[Symbol]:
        for rules in self.rule_map.values():
            for rule in rules:
                for production in rule.right.productions:
                    yield from production

    def find_undefined_non_terminals(self) -> list[NonTerminal]:
        """Non-terminals used on a right-hand side but never defined."""
        undefined: dict[NonTerminal, None] = {}
        for symbol in self._symbols():
            if isinstance(symbol, NonTerminal) and symbol.name not in self.rule_map:
                undefined[symbol] = None
        return list(undefined)

    def extract_terminals(self) -> list[Terminal]:
        """Every distinct terminal appearing in the grammar."""
        terminals: dict[Terminal, None] = {}
        for symbol in self._symbols():
            if isinstance(symbol, Terminal):
                terminals[symbol] = None
        return list(terminals)