"""Symbols, productions, items, actions and syntax trees of the SLR parser."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from slrgram.grammar import NonTerminal, Symbol, Terminal


class SymbolType(Enum):
    TERMINAL = 0
    NON_TERMINAL = 1
    SPECIAL_NON_TERMINAL = 2
    SPECIAL_TERMINAL = 3


def is_terminal(kind: SymbolType) -> bool:
    return kind in (SymbolType.TERMINAL, SymbolType.SPECIAL_TERMINAL)


def is_non_terminal(kind: SymbolType) -> bool:
    return kind in (SymbolType.NON_TERMINAL, SymbolType.SPECIAL_NON_TERMINAL)


@dataclass(frozen=True)
class SLRSymbol:
    value: str
    kind: SymbolType

    @classmethod
    def from_grammar(cls, symbol: Symbol) -> SLRSymbol:
        if isinstance(symbol, Terminal):
            return cls(symbol.value, SymbolType.TERMINAL)
        if isinstance(symbol, NonTerminal):
            return cls(symbol.name, SymbolType.NON_TERMINAL)
        raise TypeError(f"Invalid symbol type: {type(symbol).__name__}")

    @classmethod
    def start(cls) -> SLRSymbol:
        return cls("S'", SymbolType.SPECIAL_NON_TERMINAL)

    @classmethod
    def eos(cls) -> SLRSymbol:
        return cls("#", SymbolType.SPECIAL_NON_TERMINAL)

    def __str__(self) -> str:
        if self.kind is SymbolType.TERMINAL:
            return f"'{self.value}'"
        if self.kind is SymbolType.NON_TERMINAL:
            return f'"{self.value}"'
        return self.value


@dataclass(frozen=True)
class Production:
    """A production of the augmented grammar; equal when left and right match."""

    left: str
    right: tuple[SLRSymbol, ...]
    ast_children: tuple[int, ...] = field(default=(), compare=False)
    do_flatten: bool = field(default=False, compare=False)
    use_all_children: bool = field(default=False, compare=False)
    semantic_actions: str = field(default="", compare=False)

    def __str__(self) -> str:
        right = " ".join(str(symbol) for symbol in self.right)
        flatten = "*" if self.do_flatten else ""
        children = ", ".join(str(child) for child in self.ast_children)
        return f"{self.left} -> {right} [ {flatten};{children} ] "


@dataclass(frozen=True)
class LR0Item:
    non_terminal: str
    production: tuple[SLRSymbol, ...]
    dot_position: int

    def __str__(self) -> str:
        parts = [
            ("." if index == self.dot_position else "") + str(symbol)
            for index, symbol in enumerate(self.production)
        ]
        body = " ".join(parts)
        if self.dot_position == len(self.production):
            body += "."
        return f"{self.non_terminal} -> {body}"


def _node_dict(symbol: SLRSymbol, children: list[Any]) -> dict[str, Any]:
    """The JSON fields shared by concrete and abstract tree nodes."""
    data: dict[str, Any] = {}
    if children:
        data["children"] = [child.to_dict() for child in children]
    data["type"] = "terminal" if is_terminal(symbol.kind) else "non-terminal"
    data["value"] = symbol.value
    return data


def _tree_str(symbol: SLRSymbol, children: list[Any]) -> str:
    if not children:
        return str(symbol)
    return f"{symbol}({', '.join(str(child) for child in children)})"


@dataclass
class ASTNode:
    symbol: SLRSymbol
    children: list[ASTNode] = field(default_factory=list)
    production: Production | None = None

    def add_child(self, child: ASTNode) -> None:
        self.children.append(child)

    def to_dict(self) -> dict[str, Any]:
        data = _node_dict(self.symbol, self.children)
        data["sematic"] = (
            self.production.semantic_actions if self.production is not None else ""
        )
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)

    def __str__(self) -> str:
        return _tree_str(self.symbol, self.children)


@dataclass
class CSTNode:
    symbol: SLRSymbol
    children: list[CSTNode] = field(default_factory=list)
    production: Production | None = None

    def add_child(self, child: CSTNode) -> None:
        self.children.append(child)

    def _flattens(self) -> bool:
        return self.production is not None and self.production.do_flatten

    def to_ast(self) -> ASTNode:
        """Build the abstract tree according to the productions' AST rules."""
        production = self.production
        if production is None:
            return ASTNode(self.symbol, [], None)
        if production.use_all_children:
            selected = self.children
        else:
            selected = [self.children[index] for index in production.ast_children]
        children: list[ASTNode] = []
        for child in selected:
            ast_child = child.to_ast()
            if child._flattens():
                children.extend(ast_child.children)
            else:
                children.append(ast_child)
        return ASTNode(self.symbol, children, production)

    def to_dict(self) -> dict[str, Any]:
        return _node_dict(self.symbol, self.children)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)

    def __str__(self) -> str:
        return _tree_str(self.symbol, self.children)


class ActionType(IntEnum):
    SHIFT = 0
    REDUCE = 1
    ACCEPT = 2
    ERROR = 3


@dataclass(frozen=True)
class Action:
    kind: ActionType = ActionType.ERROR
    value: int = -1

    def __str__(self) -> str:
        if self.kind is ActionType.SHIFT:
            return f"s{self.value}"
        if self.kind is ActionType.REDUCE:
            return f"r{self.value}"
        if self.kind is ActionType.ACCEPT:
            return "acc"
        return "err"