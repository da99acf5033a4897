"""SLR(1) table construction and shift-reduce parsing."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Sequence

from slrgram.grammar import Grammar
from slrgram.model import (
    Action,
    ActionType,
    CSTNode,
    LR0Item,
    Production,
    SLRSymbol,
    SymbolType,
    is_non_terminal,
    is_terminal,
)

logger = logging.getLogger(__name__)

ItemSet = tuple[LR0Item, ...]


class ParseError(ValueError):
    """Raised when an input sequence cannot be parsed."""

    def __init__(
        self,
        message: str,
        position: int,
        symbol: SLRSymbol | None = None,
        state: int | None = None,
        expected: Sequence[SLRSymbol] = (),
    ) -> None:
        super().__init__(message)
        self.position = position
        self.symbol = symbol
        self.state = state
        self.expected = tuple(expected)


class SLR1Parser:
    """Builds SLR(1) ACTION and GOTO tables for a grammar and parses with them."""

    def __init__(self, grammar: Grammar) -> None:
        self.grammar = grammar
        self.start_symbol = ""
        self.augmented_start_symbol = ""
        self.productions: list[Production] = []
        self.item_sets: list[ItemSet] = []
        self.goto_table: dict[int, dict[SLRSymbol, int]] = {}
        self.action_table: dict[int, dict[SLRSymbol, Action]] = {}
        self.first_sets: dict[str, set[SLRSymbol]] = {}
        self.follow_sets: dict[str, set[SLRSymbol]] = {}
        self.conflicts: list[tuple[int, SLRSymbol, Action, Action]] = []

    # ------------------------------------------------------------------
    # Table construction
    # ------------------------------------------------------------------

    def build_parse_table(self, start_symbol: str) -> None:
        """Augment the grammar with ``start_symbol`` and build all tables."""
        self.start_symbol = start_symbol
        self._augment_grammar()
        self._build_item_sets()
        self._compute_first_sets()
        self._compute_follow_sets()
        self._build_actions()

    def _augment_grammar(self) -> None:
        self.augmented_start_symbol = SLRSymbol.start().value
        start = SLRSymbol(self.start_symbol, SymbolType.NON_TERMINAL)
        self.productions = [
            Production(self.augmented_start_symbol, (start,), (0,), False, True, "")
        ]
        for rules in self.grammar.rule_map.values():
            for rule in rules:
                for body in rule.right.productions:
                    self.productions.append(
                        Production(
                            rule.left.name,
                            tuple(SLRSymbol.from_grammar(sym) for sym in body),
                            tuple(rule.ast_rule.children),
                            rule.ast_rule.do_flatten,
                            rule.ast_rule.use_all_children,
                            rule.semantic_actions,
                        )
                    )

    def _closure(self, items: Iterable[LR0Item]) -> ItemSet:
        result: dict[LR0Item, None] = dict.fromkeys(items)
        queue = deque(result)
        while queue:
            item = queue.popleft()
            if item.dot_position >= len(item.production):
                continue
            following = item.production[item.dot_position]
            if not is_non_terminal(following.kind):
                continue
            for production in self.productions:
                if production.left != following.value:
                    continue
                new_item = LR0Item(following.value, production.right, 0)
                if new_item not in result:
                    result[new_item] = None
                    queue.append(new_item)
        return tuple(result)

    def _go_to(self, items: ItemSet, symbol: SLRSymbol) -> ItemSet:
        moved = [
            LR0Item(item.non_terminal, item.production, item.dot_position + 1)
            for item in items
            if item.dot_position < len(item.production)
            and item.production[item.dot_position] == symbol
        ]
        return self._closure(moved)

    def _build_item_sets(self) -> None:
        self.item_sets = []
        self.goto_table = {}
        initial = [
            LR0Item(production.left, production.right, 0)
            for production in self.productions
            if production.left == self.augmented_start_symbol
        ][:1]
        self.item_sets.append(self._closure(initial))
        index_of: dict[frozenset[LR0Item], int] = {frozenset(self.item_sets[0]): 0}

        queue = deque([0])
        while queue:
            state = queue.popleft()
            items = self.item_sets[state]
            symbols = dict.fromkeys(
                item.production[item.dot_position]
                for item in items
                if item.dot_position < len(item.production)
            )
            for symbol in symbols:
                next_set = self._go_to(items, symbol)
                if not next_set:
                    continue
                key = frozenset(next_set)
                next_state = index_of.get(key)
                if next_state is None:
                    next_state = len(self.item_sets)
                    self.item_sets.append(next_set)
                    index_of[key] = next_state
                    queue.append(next_state)
                self.goto_table.setdefault(state, {})[symbol] = next_state

    def _first(self, symbol: SLRSymbol) -> set[SLRSymbol]:
        if is_terminal(symbol.kind):
            return {symbol}
        return self.first_sets.get(symbol.value, set())

    def _first_of_sequence(
        self, symbols: Sequence[SLRSymbol], start: int = 0
    ) -> set[SLRSymbol]:
        if start >= len(symbols):
            return set()
        return set(self._first(symbols[start]))

    def _compute_first_sets(self) -> None:
        self.first_sets = {}
        for production in self.productions:
            for symbol in production.right:
                if is_terminal(symbol.kind):
                    self.first_sets.setdefault(symbol.value, set()).add(symbol)
        for production in self.productions:
            self.first_sets.setdefault(production.left, set())

        changed = True
        while changed:
            changed = False
            for production in self.productions:
                if not production.right:
                    continue
                target = self.first_sets[production.left]
                before = len(target)
                target |= self._first_of_sequence(production.right)
                if len(target) > before:
                    changed = True

    def _compute_follow_sets(self) -> None:
        self.follow_sets = {production.left: set() for production in self.productions}
        self.follow_sets.setdefault(self.augmented_start_symbol, set()).add(
            SLRSymbol.eos()
        )

        changed = True
        while changed:
            changed = False
            for production in self.productions:
                rhs = production.right
                for position, symbol in enumerate(rhs):
                    if not is_non_terminal(symbol.kind):
                        continue
                    target = self.follow_sets.setdefault(symbol.value, set())
                    before = len(target)
                    if position + 1 < len(rhs):
                        target |= self._first_of_sequence(rhs, position + 1)
                    if position == len(rhs) - 1:
                        target |= set(self.follow_sets.get(production.left, set()))
                    if len(target) > before:
                        changed = True

    def _record_conflict(
        self, state: int, symbol: SLRSymbol, existing: Action, new: Action
    ) -> None:
        logger.warning(
            "SLR conflict in state %d on symbol %s: existing %s, new %s",
            state,
            symbol,
            existing,
            new,
        )
        self.conflicts.append((state, symbol, existing, new))

    def _add_reduce(self, state: int, item: LR0Item) -> None:
        index = next(
            (
                number
                for number, production in enumerate(self.productions)
                if production.left == item.non_terminal
                and production.right == item.production
            ),
            None,
        )
        if index is None:
            return
        actions = self.action_table.setdefault(state, {})
        new = Action(ActionType.REDUCE, index)
        for symbol in self.follow_sets.get(item.non_terminal, set()):
            existing = actions.get(symbol)
            if existing is not None and existing != new:
                self._record_conflict(state, symbol, existing, new)
            else:
                actions[symbol] = new

    def _add_shift(self, state: int, symbol: SLRSymbol, next_state: int) -> None:
        actions = self.action_table.setdefault(state, {})
        new = Action(ActionType.SHIFT, next_state)
        existing = actions.get(symbol)
        if existing is not None and existing != new:
            self._record_conflict(state, symbol, existing, new)
        else:
            actions[symbol] = new

    def _build_actions(self) -> None:
        self.action_table = {}
        self.conflicts = []
        for state, items in enumerate(self.item_sets):
            for item in items:
                at_end = item.dot_position == len(item.production)
                if at_end and item.non_terminal == self.augmented_start_symbol:
                    self.action_table.setdefault(state, {})[SLRSymbol.eos()] = Action(
                        ActionType.ACCEPT
                    )
                elif at_end:
                    self._add_reduce(state, item)
                else:
                    symbol = item.production[item.dot_position]
                    if not is_terminal(symbol.kind):
                        continue
                    next_state = self.goto_table.get(state, {}).get(symbol)
                    if next_state is not None:
                        self._add_shift(state, symbol, next_state)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self, symbols: Iterable[SLRSymbol]) -> CSTNode:
        """Parse a sequence of terminal symbols into a concrete syntax tree."""
        stream = [*symbols, SLRSymbol.eos()]
        states: list[int] = [0]
        nodes: list[CSTNode] = []
        position = 0

        while True:
            state = states[-1]
            symbol = stream[position]
            actions = self.action_table.get(state, {})
            action = actions.get(symbol)
            if action is None or action.kind is ActionType.ERROR:
                expected = list(actions)
                shown = " ".join(str(item) for item in expected)
                raise ParseError(
                    f"Syntax error at position {position}: unexpected symbol "
                    f"{symbol} in state {state}. Expected one of: {shown}",
                    position,
                    symbol,
                    state,
                    expected,
                )
            if action.kind is ActionType.SHIFT:
                states.append(action.value)
                nodes.append(CSTNode(symbol))
                position += 1
            elif action.kind is ActionType.REDUCE:
                self._reduce(action.value, states, nodes, position)
            else:
                if len(nodes) != 1:
                    raise ParseError(
                        f"Accepted with {len(nodes)} nodes on the stack", position
                    )
                return nodes[0]

    def _reduce(
        self, index: int, states: list[int], nodes: list[CSTNode], position: int
    ) -> None:
        if not 0 <= index < len(self.productions):
            raise ParseError(f"Invalid production index {index}", position)
        production = self.productions[index]
        count = len(production.right)
        if count > len(nodes) or count >= len(states):
            raise ParseError(
                f"Stack underflow while reducing by {production}", position
            )

        split = len(nodes) - count
        children = nodes[split:]
        del nodes[split:]
        del states[len(states) - count:]

        non_terminal = SLRSymbol(production.left, SymbolType.NON_TERMINAL)
        next_state = self.goto_table.get(states[-1], {}).get(non_terminal)
        if next_state is None:
            raise ParseError(
                f"No GOTO entry for {non_terminal} in state {states[-1]}",
                position,
                non_terminal,
                states[-1],
            )
        states.append(next_state)
        nodes.append(CSTNode(non_terminal, children, production))