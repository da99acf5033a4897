"""Readable and JSON views of a built SLR(1) parser."""

from __future__ import annotations

import json
from typing import Any

from slrgram.model import SLRSymbol, SymbolType, is_terminal
from slrgram.parser import SLR1Parser

_STATE_WIDTH = 5
_CELL_WIDTH = 10


def collect_symbols(parser: SLR1Parser) -> tuple[list[SLRSymbol], list[SLRSymbol]]:
    """Terminals (ending with the end-of-input symbol) and non-terminals, in order of appearance."""
    terminals: dict[SLRSymbol, None] = {}
    non_terminals: dict[SLRSymbol, None] = {}
    for production in parser.productions:
        non_terminals.setdefault(SLRSymbol(production.left, SymbolType.NON_TERMINAL), None)
        for symbol in production.right:
            if is_terminal(symbol.kind):
                terminals.setdefault(symbol, None)
    return [*terminals, SLRSymbol.eos()], list(non_terminals)


def format_parse_table(parser: SLR1Parser) -> str:
    """Render the ACTION/GOTO table followed by the numbered productions."""
    terminals, non_terminals = collect_symbols(parser)
    columns = [*terminals, *non_terminals]

    lines = ["", "===== SLR parse table ====="]
    lines.append(
        f"{'State':>{_STATE_WIDTH}}"
        + "".join(f"{symbol.value:>{_CELL_WIDTH}}" for symbol in columns)
    )
    lines.append("-" * (_STATE_WIDTH + _CELL_WIDTH * len(columns)))

    for state in range(len(parser.item_sets)):
        actions = parser.action_table.get(state, {})
        gotos = parser.goto_table.get(state, {})
        cells = [
            str(actions[terminal]) if terminal in actions else ""
            for terminal in terminals
        ]
        cells += [
            str(gotos[non_terminal]) if non_terminal in gotos else ""
            for non_terminal in non_terminals
        ]
        lines.append(
            f"{state:>{_STATE_WIDTH}}"
            + "".join(f"{cell:>{_CELL_WIDTH}}" for cell in cells)
        )

    lines.append("")
    lines.append("===== Productions =====")
    for index, production in enumerate(parser.productions):
        right = "".join(f"{symbol.value} " for symbol in production.right)
        lines.append(f"{index}: {production.left} -> {right}")
    return "\n".join(lines) + "\n"


def _symbol_dict(symbol: SLRSymbol) -> dict[str, str]:
    return {
        "value": symbol.value,
        "type": "terminal" if is_terminal(symbol.kind) else "non-terminal",
    }


def parser_to_dict(parser: SLR1Parser) -> dict[str, Any]:
    """Productions, item sets, ACTION table and GOTO table as plain data."""
    terminals, non_terminals = collect_symbols(parser)

    productions = [
        {
            "index": index,
            "left": production.left,
            "right": [_symbol_dict(symbol) for symbol in production.right],
        }
        for index, production in enumerate(parser.productions)
    ]

    item_sets = [
        {
            "state": state,
            "items": [
                {
                    "non_terminal": item.non_terminal,
                    "production": [_symbol_dict(symbol) for symbol in item.production],
                    "dot_position": item.dot_position,
                }
                for item in items
            ],
        }
        for state, items in enumerate(parser.item_sets)
    ]

    action_table = []
    goto_table = []
    for state in range(len(parser.item_sets)):
        actions = parser.action_table.get(state, {})
        action_table.append(
            {
                "state": state,
                "actions": {
                    terminal.value: {
                        "type": int(actions[terminal].kind),
                        "value": actions[terminal].value,
                        "display": str(actions[terminal]),
                    }
                    for terminal in terminals
                    if terminal in actions
                },
            }
        )
        gotos = parser.goto_table.get(state, {})
        goto_table.append(
            {
                "state": state,
                "gotos": {
                    non_terminal.value: gotos[non_terminal]
                    for non_terminal in non_terminals
                    if non_terminal in gotos
                },
            }
        )

    return {
        "productions": productions,
        "item_sets": item_sets,
        "action_table": action_table,
        "goto_table": goto_table,
    }


def parser_to_json(parser: SLR1Parser) -> str:
    """The parser's tables as indented JSON text."""
    return json.dumps(
        parser_to_dict(parser), indent=2, sort_keys=True, ensure_ascii=False
    )