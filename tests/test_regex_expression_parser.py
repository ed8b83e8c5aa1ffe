from __future__ import annotations

from collections import Counter

import pytest

from adapters.evaluator.memo_evaluator import MemoizingEvaluator
from adapters.expression_parser.regex_parser import RegexExpressionParser
from adapters.function_registry.dict_function_registry import DictFunctionRegistry
from contracts import BinOpNode, CallNode, ConstantNode, UnaryOpNode, VariableNode
from errors import UnsupportedNodeError
from ports.expression_parser import ExpressionParser


@pytest.fixture
def calls():
    return Counter()


@pytest.fixture
def parser(calls):
    def A():
        calls["A"] += 1
        return 0

    def B(x):
        calls["B"] += 1
        return x

    def C(x, y):
        calls["C"] += 1
        return x + y

    registry = DictFunctionRegistry({"A": A, "B": B, "C": C}, include_builtins=False)
    return RegexExpressionParser(registry)


def test_regex_expression_parser_implements_port(parser):
    assert isinstance(parser, ExpressionParser)


def test_parser_respects_precedence_and_left_associativity(parser):
    parsed = parser.parse("10 - 2 - 3 * 2")

    ast = parsed.expr_ast
    assert parsed.ok
    assert isinstance(ast, BinOpNode) and ast.op == "-"
    assert ast.left == BinOpNode(op="-", left=ConstantNode(value=10), right=ConstantNode(value=2))
    assert ast.right == BinOpNode(op="*", left=ConstantNode(value=3), right=ConstantNode(value=2))


def test_parser_builds_call_nodes_from_registry(parser):
    parsed = parser.parse("C(B(A()), 5) + 4")

    assert parsed.ok
    assert parsed.functions_referenced == ["A", "B", "C"]
    outer = parsed.expr_ast.left
    assert isinstance(outer, CallNode)
    assert outer.name == "C"
    assert len(outer.arguments) == 2
    assert isinstance(outer.arguments[0], CallNode)


def test_parser_handles_unary_operators_and_symbols(parser):
    parsed = parser.parse("-C(5, 1) × +2 ÷ 3 = ?")

    ast = parsed.expr_ast
    assert parsed.ok
    assert ast.op == "/"
    assert ast.left.op == "*"
    assert isinstance(ast.left.left, UnaryOpNode)
    assert ast.left.right == UnaryOpNode(op="+", operand=ConstantNode(value=2))


@pytest.mark.parametrize("text", ["1 + 2 = ?", "1 + 2=?", "1 + 2 =", "1 + 2 ?"])
def test_parser_strips_trailing_question(parser, text):
    parsed = parser.parse(text)

    assert parsed.ok
    assert MemoizingEvaluator().evaluate(parsed.expr_ast) == 3


@pytest.mark.parametrize(
    "text",
    ["(" * 2000 + "1" + ")" * 2000, "-" * 2000 + "1", "B(" * 1000 + "1" + ")" * 1000],
)
def test_parser_rejects_excessive_nesting_without_raising(parser, text):
    parsed = parser.parse(text)

    assert not parsed.ok
    assert "zagnieżdżenie" in parsed.error


def test_parser_nesting_limit_is_configurable():
    registry = DictFunctionRegistry(include_builtins=False)
    shallow = RegexExpressionParser(registry, max_nesting=3)

    assert shallow.parse("((1))").ok
    assert not shallow.parse("(((1)))").ok


def test_parser_keeps_bare_names_as_variables(parser):
    parsed = parser.parse("a + 1")

    assert parsed.ok
    assert parsed.expr_ast.left == VariableNode(name="a")
    with pytest.raises(UnsupportedNodeError):
        MemoizingEvaluator().evaluate(parsed.expr_ast)


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        ("", "Puste"),
        ("   ", "Puste"),
        ("2 +", "koniec"),
        ("(1 + 2", "koniec"),
        ("C(1,)", "')'"),
        ("2 $ 3", "'$'"),
        ("1 2", "'2'"),
        ("D(1)", "'D'"),
    ],
)
def test_parser_encodes_errors_instead_of_raising(parser, text, fragment):
    parsed = parser.parse(text)

    assert not parsed.ok
    assert parsed.expr_ast is None
    assert fragment in parsed.error


@pytest.mark.parametrize(
    ("text", "value", "expected_calls"),
    [
        ("-5 + 2*3 - 20/4", -4, {}),
        ("C(B(A()), 5) + 4", 9, {"A": 1, "B": 1, "C": 1}),
        ("A()*A() + B(10)/B(5) - C(1,5) + C(5,1) + -10", -8, {"A": 1, "B": 2, "C": 2}),
        ("A()*A() + B(5)/B(5) - C(5,1) + -C(5,1) + -10", -21, {"A": 1, "B": 1, "C": 1}),
    ],
)
def test_parsed_scenarios_evaluate_with_memoized_calls(parser, calls, text, value, expected_calls):
    parsed = parser.parse(text)

    assert MemoizingEvaluator().evaluate(parsed.expr_ast) == value
    assert calls == expected_calls
