from __future__ import annotations

from adapters.validator.expression_validator import ExpressionValidator
from contracts import BinOpNode, ConstantNode, UnaryOpNode, VariableNode
from expr_tree import call
from ports.validator import Validator


def _two(x, y):
    return x + y


def test_validator_accepts_closed_expression():
    validator = ExpressionValidator()
    ast = BinOpNode(op="+", left=call(_two, 1, 2), right=UnaryOpNode(op="-", operand=ConstantNode(value=3)))

    assert isinstance(validator, Validator)
    assert validator.validate_expr(ast) == []


def test_validator_reports_free_variables_with_paths():
    ast = BinOpNode(
        op="*",
        left=VariableNode(name="x"),
        right=call(_two, 1, VariableNode(name="y")),
    )

    issues = ExpressionValidator().validate_expr(ast)

    assert [(i.code, i.field_path) for i in issues] == [
        ("FREE_VARIABLE", "left"),
        ("FREE_VARIABLE", "right.arguments[1]"),
    ]
    assert all(i.severity == "error" for i in issues)


def test_validator_reports_root_variable():
    issues = ExpressionValidator().validate_expr(VariableNode(name="a"))

    assert len(issues) == 1
    assert issues[0].field_path == "<root>"


def test_validator_reports_arity_mismatch():
    issues = ExpressionValidator().validate_expr(call(_two, 1, name="C"))

    assert len(issues) == 1
    assert issues[0].code == "ARITY_MISMATCH"
    assert issues[0].message.startswith("C:")


def test_validator_binds_receiver_as_first_argument():
    class Scale:
        def times(self, x):
            return 2 * x

    ok = call(Scale.times, 4, receiver=Scale())
    missing_receiver = call(Scale.times, 4)

    assert ExpressionValidator().validate_expr(ok) == []
    assert [i.code for i in ExpressionValidator().validate_expr(missing_receiver)] == ["ARITY_MISMATCH"]


def test_validator_reports_unknown_operator_and_node():
    bad_op = BinOpNode.model_construct(op="%", left=ConstantNode(value=1), right="oops")

    codes = [i.code for i in ExpressionValidator().validate_expr(bad_op)]

    assert codes == ["UNKNOWN_OPERATOR", "UNKNOWN_NODE"]


def test_validator_checks_depth_limit():
    ast = ConstantNode(value=1)
    for _ in range(9):
        ast = UnaryOpNode(op="-", operand=ast)

    validator = ExpressionValidator()

    assert validator.validate_expr(ast, max_depth=10) == []
    issues = validator.validate_expr(ast, max_depth=9)
    assert [i.code for i in issues] == ["TOO_DEEP"]
