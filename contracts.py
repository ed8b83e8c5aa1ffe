"""
contracts.py - Jedyne źródło prawdy dla wszystkich typów danych w MemoCalc.
Wszystkie moduły importują WYŁĄCZNIE stąd. Nie modyfikować bez versioning.
"""
from __future__ import annotations

from typing import Any, Callable, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CONTRACTS_VERSION = "1.0.0"


# ─────────────────────────── Expression AST ──────────────────────────────

class ConstantNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["constant"] = "constant"
    value: int


class VariableNode(BaseModel):
    """Niezwiązany identyfikator - parser może go zbudować, ewaluator zawsze odrzuca."""
    model_config = ConfigDict(frozen=True)

    node_type: Literal["variable"] = "variable"
    name: str


class UnaryOpNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["unary"] = "unary"
    op: Literal["+", "-"]
    operand: "ExprAST"


class BinOpNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["binop"] = "binop"
    op: Literal["+", "-", "*", "/"]
    left: "ExprAST"
    right: "ExprAST"


class CallKey(NamedTuple):
    """Strukturalny klucz cache: funkcja + odbiorca + zredukowane argumenty."""
    target: Callable[..., int]
    receiver_id: Optional[int]
    arguments: tuple[int, ...]


class CallNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["call"] = "call"
    target: Callable[..., int]
    receiver: Optional[Any] = None   # instancja dla metod niezwiązanych
    arguments: tuple["ExprAST", ...] = ()
    name: Optional[str] = None       # nazwa z rejestru (do logów i kroków)

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return getattr(self.target, "__qualname__", None) or repr(self.target)

    def with_arguments(self, values: tuple[int, ...]) -> "CallNode":
        """Nowy węzeł z argumentami zastąpionymi stałymi. Oryginał bez zmian."""
        constants = tuple(ConstantNode(value=v) for v in values)
        return self.model_copy(update={"arguments": constants})

    def cache_key(self) -> CallKey:
        values: list[int] = []
        for arg in self.arguments:
            if not isinstance(arg, ConstantNode):
                raise ValueError(
                    f"Argument {arg!r} wywołania {self.display_name} nie jest zredukowany"
                )
            values.append(arg.value)
        receiver_id = id(self.receiver) if self.receiver is not None else None
        return CallKey(self.target, receiver_id, tuple(values))

    def signature(self) -> str:
        """Czytelna postać wywołania, np. 'C(5, 1)'. Tylko do logów."""
        parts = []
        for arg in self.arguments:
            parts.append(str(arg.value) if isinstance(arg, ConstantNode) else "…")
        return f"{self.display_name}({', '.join(parts)})"


ExprAST = Union[ConstantNode, VariableNode, UnaryOpNode, BinOpNode, CallNode]
UnaryOpNode.model_rebuild()
BinOpNode.model_rebuild()
CallNode.model_rebuild()


# ─────────────────────────── Parser ──────────────────────────────────────

class ParsedExpression(BaseModel):
    original_text: str
    expr_ast: Optional[ExprAST] = None
    error: Optional[str] = None       # ustawione gdy expr_ast is None
    functions_referenced: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.expr_ast is not None


# ─────────────────────────── Validator ───────────────────────────────────

class ValidationIssue(BaseModel):
    severity: Literal["error", "warning"]
    code: str                        # "FREE_VARIABLE", "UNKNOWN_OPERATOR", …
    message: str
    field_path: Optional[str] = None  # np. "left.arguments[1]"


# ─────────────────────────── Evaluator ───────────────────────────────────

class EvalResult(BaseModel):
    value: int
    steps: list[str] = Field(default_factory=list)        # czytelne kroki
    invocations: dict[str, int] = Field(default_factory=dict)  # nazwa → liczba wywołań
    cache_hits: int = 0
