"""
Adapter: ExpressionValidator
Implementuje port Validator - strukturalna walidacja ExprAST bez wywoływania funkcji.

Kody problemów:
  FREE_VARIABLE     - niezwiązana zmienna (ewaluator rzuci UnsupportedNodeError)
  UNKNOWN_NODE      - obiekt spoza ExprAST
  UNKNOWN_OPERATOR  - operator spoza {+, -, *, /}
  ARITY_MISMATCH    - liczba argumentów nie pasuje do sygnatury funkcji
  TOO_DEEP          - zagnieżdżenie większe niż max_depth
"""
from __future__ import annotations

import inspect
from typing import Any, Optional

from contracts import (
    BinOpNode,
    CallNode,
    ConstantNode,
    ExprAST,
    UnaryOpNode,
    ValidationIssue,
    VariableNode,
)

_BINARY_OPS = {"+", "-", "*", "/"}
_UNARY_OPS = {"+", "-"}


def _arity_error(node: CallNode) -> Optional[str]:
    """Komunikat błędu bindowania argumentów lub None (także gdy brak sygnatury)."""
    try:
        sig = inspect.signature(node.target)
    except (TypeError, ValueError):
        return None
    args: list[Any] = [0] * len(node.arguments)
    if node.receiver is not None:
        args.insert(0, node.receiver)
    try:
        sig.bind(*args)
    except TypeError as exc:
        return str(exc)
    return None


class ExpressionValidator:
    """Walidacja drzewa: iteracyjnie (stos), więc działa też dla bardzo głębokich drzew."""

    # -- Validator protocol ------------------------------------

    def validate_expr(
        self, ast: ExprAST, max_depth: Optional[int] = None
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        deepest = 0
        # (węzeł, ścieżka, poziom)
        stack: list[tuple[Any, str, int]] = [(ast, "", 1)]

        while stack:
            node, path, level = stack.pop()
            deepest = max(deepest, level)
            here = path or "<root>"

            if isinstance(node, ConstantNode):
                continue

            if isinstance(node, VariableNode):
                issues.append(ValidationIssue(
                    severity="error", code="FREE_VARIABLE",
                    message=f"Zmienna {node.name!r} nie jest związana.",
                    field_path=here,
                ))
                continue

            if isinstance(node, UnaryOpNode):
                if node.op not in _UNARY_OPS:
                    issues.append(ValidationIssue(
                        severity="error", code="UNKNOWN_OPERATOR",
                        message=f"Nieobsługiwany operator unarny {node.op!r}.",
                        field_path=here,
                    ))
                stack.append((node.operand, _join(path, "operand"), level + 1))
                continue

            if isinstance(node, BinOpNode):
                if node.op not in _BINARY_OPS:
                    issues.append(ValidationIssue(
                        severity="error", code="UNKNOWN_OPERATOR",
                        message=f"Nieobsługiwany operator binarny {node.op!r}.",
                        field_path=here,
                    ))
                stack.append((node.right, _join(path, "right"), level + 1))
                stack.append((node.left, _join(path, "left"), level + 1))
                continue

            if isinstance(node, CallNode):
                err = _arity_error(node)
                if err is not None:
                    issues.append(ValidationIssue(
                        severity="error", code="ARITY_MISMATCH",
                        message=f"{node.display_name}: {err}",
                        field_path=here,
                    ))
                for i in reversed(range(len(node.arguments))):
                    stack.append((node.arguments[i], _join(path, f"arguments[{i}]"), level + 1))
                continue

            issues.append(ValidationIssue(
                severity="error", code="UNKNOWN_NODE",
                message=f"Nieznany typ węzła AST: {type(node).__name__}.",
                field_path=here,
            ))

        if max_depth is not None and deepest > max_depth:
            issues.append(ValidationIssue(
                severity="error", code="TOO_DEEP",
                message=f"Głębokość drzewa {deepest} przekracza limit {max_depth}.",
                field_path="<root>",
            ))

        return issues


def _join(path: str, part: str) -> str:
    return f"{path}.{part}" if path else part
