import pytest

from slrgram.grammar import Grammar, parse_grammar
from slrgram.model import ActionType, SLRSymbol, SymbolType
from slrgram.parser import ParseError, SLR1Parser

EXPR_GRAMMAR = '[;] "E" -> "E" \'+\' "T" | "T"\n[;] "T" -> \'x\'\n'

LIST_GRAMMAR = '[;] "P" -> "L"\n[*;] "L" -> "L" \'a\' | \'a\'\n'

AMBIGUOUS_GRAMMAR = '[;] "E" -> "E" \'+\' "E" | \'x\'\n'


def term(value):
    return SLRSymbol(value, SymbolType.TERMINAL)


def nonterm(value):
    return SLRSymbol(value, SymbolType.NON_TERMINAL)


def build(text, start):
    parser = SLR1Parser(Grammar(parse_grammar(text)))
    parser.build_parse_table(start)
    return parser


@pytest.fixture
def expr_parser():
    return build(EXPR_GRAMMAR, "E")


def test_augmented_production_comes_first(expr_parser):
    first = expr_parser.productions[0]
    assert first.left == "S'"
    assert first.right == (nonterm("E"),)
    assert first.ast_children == (0,)
    assert first.use_all_children is True
    assert len(expr_parser.productions) == 4


def test_item_set_count(expr_parser):
    assert len(expr_parser.item_sets) == 6


def test_no_conflicts_for_expression_grammar(expr_parser):
    assert expr_parser.conflicts == []


def test_first_and_follow_sets(expr_parser):
    assert expr_parser.first_sets["E"] == {term("x")}
    assert expr_parser.first_sets["T"] == {term("x")}
    assert expr_parser.follow_sets["E"] == {term("+"), SLRSymbol.eos()}
    assert expr_parser.follow_sets["T"] == expr_parser.follow_sets["E"]


def test_initial_state_shifts_terminal(expr_parser):
    action = expr_parser.action_table[0][term("x")]
    assert action.kind is ActionType.SHIFT
    assert action.value == expr_parser.goto_table[0][term("x")]


def test_accept_after_start_symbol(expr_parser):
    state = expr_parser.goto_table[0][nonterm("E")]
    assert expr_parser.action_table[state][SLRSymbol.eos()].kind is ActionType.ACCEPT


def test_parse_builds_tree(expr_parser):
    root = expr_parser.parse([term("x"), term("+"), term("x")])
    assert str(root) == '"E"("E"("T"(\'x\')), \'+\', "T"(\'x\'))'
    assert root.production.left == "E"


def test_parse_single_terminal(expr_parser):
    root = expr_parser.parse([term("x")])
    assert root.symbol == nonterm("E")
    assert [child.symbol for child in root.children] == [nonterm("T")]


def test_parse_error_reports_position(expr_parser):
    with pytest.raises(ParseError) as info:
        expr_parser.parse([term("x"), term("x")])
    assert info.value.position == 1
    assert info.value.symbol == term("x")


def test_parse_error_on_empty_input(expr_parser):
    with pytest.raises(ParseError) as info:
        expr_parser.parse([])
    assert info.value.position == 0
    assert info.value.state == 0
    assert term("x") in info.value.expected


def test_parse_error_on_unknown_symbol(expr_parser):
    with pytest.raises(ParseError) as info:
        expr_parser.parse([term("+")])
    assert info.value.symbol == term("+")


def test_parse_before_building_fails():
    parser = SLR1Parser(Grammar(parse_grammar(EXPR_GRAMMAR)))
    with pytest.raises(ParseError):
        parser.parse([term("x")])


def test_flattened_list_in_ast():
    parser = build(LIST_GRAMMAR, "P")
    root = parser.parse([term("a")] * 3)
    ast = root.to_ast()
    assert [child.symbol for child in ast.children] == [term("a")] * 3


def test_ambiguous_grammar_reports_conflicts():
    parser = build(AMBIGUOUS_GRAMMAR, "E")
    assert parser.conflicts
    for state, symbol, existing, new in parser.conflicts:
        assert parser.action_table[state][symbol] == existing
        assert existing != new


def test_every_goto_target_is_a_state(expr_parser):
    count = len(expr_parser.item_sets)
    for row in expr_parser.goto_table.values():
        assert all(0 <= target < count for target in row.values())


def test_rebuilding_gives_same_tables(expr_parser):
    actions = {k: dict(v) for k, v in expr_parser.action_table.items()}
    expr_parser.build_parse_table("E")
    assert expr_parser.action_table == actions