import json

import pytest

from slrgram.grammar import NonTerminal, Terminal
from slrgram.model import (
    Action,
    ActionType,
    ASTNode,
    CSTNode,
    LR0Item,
    Production,
    SLRSymbol,
    SymbolType,
    is_non_terminal,
    is_terminal,
)

T = SymbolType.TERMINAL
N = SymbolType.NON_TERMINAL


def t(value):
    return SLRSymbol(value, T)


def n(value):
    return SLRSymbol(value, N)


def test_kind_predicates():
    assert is_terminal(SymbolType.SPECIAL_TERMINAL)
    assert not is_terminal(SymbolType.SPECIAL_NON_TERMINAL)
    assert is_non_terminal(SymbolType.SPECIAL_NON_TERMINAL)
    assert not is_non_terminal(T)


def test_symbol_str():
    assert str(t("a")) == "'a'"
    assert str(n("E")) == '"E"'
    assert str(SLRSymbol.eos()) == "#"
    assert str(SLRSymbol.start()) == "S'"


def test_from_grammar():
    assert SLRSymbol.from_grammar(Terminal("+")) == t("+")
    assert SLRSymbol.from_grammar(NonTerminal("E")) == n("E")
    with pytest.raises(TypeError):
        SLRSymbol.from_grammar("E")


def test_production_equality_ignores_ast_data():
    a = Production("E", (t("a"),), (0,), True, False, "x")
    b = Production("E", (t("a"),), (), False, True, "")
    assert a == b
    assert hash(a) == hash(b)
    assert a != Production("F", (t("a"),))


def test_production_str():
    prod = Production("E", (t("a"), n("B")), (0, 1), True, False, "")
    assert str(prod) == "E -> 'a' \"B\" [ *;0, 1 ] "


def test_item_str_dot_positions():
    prod = (t("a"), n("B"))
    assert str(LR0Item("E", prod, 0)) == "E -> .'a' \"B\""
    assert str(LR0Item("E", prod, 2)) == "E -> 'a' \"B\"."


def test_action_str():
    assert str(Action(ActionType.SHIFT, 3)) == "s3"
    assert str(Action(ActionType.REDUCE, 2)) == "r2"
    assert str(Action(ActionType.ACCEPT)) == "acc"
    assert str(Action()) == "err"


def _tree():
    inner = Production("L", (t("a"), t("b")), (), True, True, "")
    outer = Production("E", (n("L"), t("c")), (0,), False, False, "sem")
    leaf_a, leaf_b, leaf_c = CSTNode(t("a")), CSTNode(t("b")), CSTNode(t("c"))
    lst = CSTNode(n("L"), [leaf_a, leaf_b], inner)
    return CSTNode(n("E"), [lst, leaf_c], outer)


def test_to_ast_selects_and_flattens():
    ast = _tree().to_ast()
    assert [child.symbol for child in ast.children] == [t("a"), t("b")]
    assert ast.production.semantic_actions == "sem"


def test_to_ast_leaf_has_no_children():
    node = CSTNode(t("a"), [CSTNode(t("b"))])
    assert node.to_ast().children == []


def test_tree_str():
    assert str(_tree()) == "\"E\"(\"L\"('a', 'b'), 'c')"
    assert str(_tree().to_ast()) == "\"E\"('a', 'b')"


def test_cst_json_round_trip():
    data = json.loads(_tree().to_json())
    assert data == _tree().to_dict()
    assert data["type"] == "non-terminal"
    assert data["children"][1] == {"type": "terminal", "value": "c"}


def test_ast_json_includes_semantic():
    data = json.loads(_tree().to_ast().to_json())
    assert data["sematic"] == "sem"
    assert data["children"][0]["sematic"] == ""


def test_add_child():
    node = ASTNode(n("E"))
    node.add_child(ASTNode(t("a")))
    assert str(node) == "\"E\"('a')"