"""Structured error types raised by the memoizing evaluator."""

from __future__ import annotations


class EvaluationError(Exception):
    """Base class for evaluator failures."""


class MissingExpressionError(EvaluationError, ValueError):
    """No expression was passed to the evaluator."""

    def __init__(self, message: str = "expression must not be None") -> None:
        super().__init__(message)


class UnsupportedNodeError(EvaluationError, TypeError):
    """Node kind or operator the evaluator cannot reduce (e.g. a free variable)."""

    def __init__(self, message: str, node: object = None) -> None:
        super().__init__(message)
        self.node = node


class InvalidResultError(EvaluationError, TypeError):
    """A called function returned something other than an int."""

    def __init__(self, signature: str, result: object) -> None:
        super().__init__(
            f"{signature} returned {type(result).__name__}, expected int"
        )
        self.signature = signature
        self.result = result


class ExpressionTooDeepError(EvaluationError, RecursionError):
    """Expression nesting exceeds the configured depth limit."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"expression nesting exceeds max_depth={max_depth}")
        self.max_depth = max_depth
