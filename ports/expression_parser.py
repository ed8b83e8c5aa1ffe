"""
Port: ExpressionParser
Odpowiedzialność: parsowanie tekstu wyrażenia do ExprAST z rozwiązanymi wywołaniami funkcji.
"""
from typing import Protocol, runtime_checkable

from contracts import ParsedExpression


@runtime_checkable
class ExpressionParser(Protocol):
    def parse(self, text: str) -> ParsedExpression:
        """
        Parses an arithmetic expression such as "C(B(A()), 5) + 4".

        NAME(...) is resolved through the FunctionRegistry into a CallNode.
        A bare NAME becomes a VariableNode (the evaluator rejects it).

        Returns ParsedExpression(expr_ast=None, error=...) if text cannot be parsed
        or references an unknown function.
        Never raises; errors are encoded in the returned object.
        """
        ...
