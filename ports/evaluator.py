"""
Port: Evaluator
Odpowiedzialność: deterministyczne liczenie wyrażeń AST z memoizacją wywołań funkcji.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import EvalResult, ExprAST


@runtime_checkable
class Evaluator(Protocol):
    def evaluate(self, ast: Optional[ExprAST]) -> int:
        """
        Reduces an expression tree to a single int.
        Each distinct (function, receiver, argument values) call is invoked
        at most once per evaluate() call; the cache never outlives the call.
        Raises MissingExpressionError when ast is None.
        Raises UnsupportedNodeError for free variables and unknown node kinds.
        Raises ZeroDivisionError on division by zero.
        Exceptions raised by called functions propagate unchanged.
        """
        ...

    def eval_expr(self, ast: Optional[ExprAST]) -> EvalResult:
        """
        Same reduction as evaluate(), returning EvalResult with:
          - value: int
          - steps: human-readable computation steps
          - invocations: real calls per function name
          - cache_hits: calls answered from the cache
        """
        ...
