"""
Adapter: MemoizingEvaluator
Implementuje port Evaluator - rekurencyjna redukcja ExprAST do int
z cache wywołań funkcji.

Każde evaluate() tworzy nową sesję (_EvaluationSession) z pustym cache.
Klucz cache to CallKey: funkcja + odbiorca + ZREDUKOWANE wartości argumentów,
więc B(2+3) i B(5) trafiają w ten sam wpis.

Dzielenie obcina w stronę zera (jak w C/C#), nie w dół jak '//' w Pythonie.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Callable, Optional

from contracts import (
    BinOpNode,
    CallKey,
    CallNode,
    ConstantNode,
    EvalResult,
    ExprAST,
    UnaryOpNode,
    VariableNode,
)
from errors import (
    ExpressionTooDeepError,
    InvalidResultError,
    MissingExpressionError,
    UnsupportedNodeError,
)

logger = logging.getLogger("memocalc.evaluator")

DEFAULT_MAX_DEPTH = 200


def _trunc_div(a: int, b: int) -> int:
    # b == 0 → ZeroDivisionError z samego dzielenia
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


_OP_FUNCS: dict[str, Callable[[int, int], int]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _trunc_div,
}

_UNARY_FUNCS: dict[str, Callable[[int], int]] = {
    "+": lambda x: x,
    "-": lambda x: -x,
}


class _EvaluationSession:
    """Stan jednego evaluate(): cache, licznik głębokości, statystyki."""

    def __init__(self, max_depth: int, trace: bool) -> None:
        self._cache: dict[CallKey, int] = {}
        self._max_depth = max_depth
        self._depth = 0
        self._trace = trace
        self.steps: list[str] = []
        self.invocations: Counter[str] = Counter()
        self.cache_hits = 0

    def reduce(self, node: ExprAST) -> int:
        self._depth += 1
        try:
            if self._depth > self._max_depth:
                raise ExpressionTooDeepError(self._max_depth)
            return self._reduce(node)
        finally:
            self._depth -= 1

    # -- Prywatne ----------------------------------------------------------

    def _reduce(self, node: ExprAST) -> int:
        if isinstance(node, ConstantNode):
            return node.value

        if isinstance(node, UnaryOpNode):
            fn = _UNARY_FUNCS.get(node.op)
            if fn is None:
                raise UnsupportedNodeError(f"Unsupported unary operator: {node.op!r}", node)
            return fn(self.reduce(node.operand))

        if isinstance(node, BinOpNode):
            fn = _OP_FUNCS.get(node.op)
            if fn is None:
                raise UnsupportedNodeError(f"Unsupported binary operator: {node.op!r}", node)
            left = self.reduce(node.left)
            right = self.reduce(node.right)
            result = fn(left, right)
            self._step(f"{left} {node.op} {right} = {result}")
            return result

        if isinstance(node, CallNode):
            return self._reduce_call(node)

        if isinstance(node, VariableNode):
            raise UnsupportedNodeError(f"Unbound variable: {node.name!r}", node)

        raise UnsupportedNodeError(f"Unsupported expression node: {type(node).__name__}", node)

    def _reduce_call(self, node: CallNode) -> int:
        values = tuple(self.reduce(arg) for arg in node.arguments)
        reduced = node.with_arguments(values)
        key = reduced.cache_key()

        if key in self._cache:
            value = self._cache[key]
            self.cache_hits += 1
            logger.debug("Cache hit: %s = %d", reduced.signature(), value)
            self._step(f"{reduced.signature()} = {value} (cache)")
            return value

        logger.debug("Invoking %s", reduced.signature())
        if node.receiver is not None:
            result = node.target(node.receiver, *values)
        else:
            result = node.target(*values)

        if isinstance(result, bool) or not isinstance(result, int):
            raise InvalidResultError(reduced.signature(), result)

        self._cache[key] = result
        self.invocations[node.display_name] += 1
        self._step(f"{reduced.signature()} = {result}")
        return result

    def _step(self, text: str) -> None:
        if self._trace:
            self.steps.append(text)


class MemoizingEvaluator:
    """Ewaluator wyrażeń z memoizacją wywołań; bezstanowy między wywołaniami."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth musi być >= 1, got {max_depth}")
        self._max_depth = max_depth

    # -- Evaluator protocol ------------------------------------------------

    def evaluate(self, ast: Optional[ExprAST]) -> int:
        if ast is None:
            raise MissingExpressionError()
        return _EvaluationSession(self._max_depth, trace=False).reduce(ast)

    def eval_expr(self, ast: Optional[ExprAST]) -> EvalResult:
        if ast is None:
            raise MissingExpressionError()
        session = _EvaluationSession(self._max_depth, trace=True)
        value = session.reduce(ast)
        return EvalResult(
            value=value,
            steps=session.steps,
            invocations=dict(session.invocations),
            cache_hits=session.cache_hits,
        )
