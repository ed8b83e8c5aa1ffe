"""
Port: Validator
Odpowiedzialność: wstępna walidacja drzewa wyrażenia przed ewaluacją.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import ExprAST, ValidationIssue


@runtime_checkable
class Validator(Protocol):
    def validate_expr(
        self, ast: ExprAST, max_depth: Optional[int] = None
    ) -> list[ValidationIssue]:
        """
        Checks that an expression tree can be evaluated, without calling anything:
        free variables, unsupported node kinds or operators, call arity
        and (optionally) nesting depth.
        Returns list of ValidationIssue; empty = tree is evaluable.
        """
        ...
