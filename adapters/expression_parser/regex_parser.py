"""
Adapter: RegexExpressionParser
Implementuje port ExpressionParser.

Tokenizacja regexem, parsowanie - precedence climbing:
  expr    = term (('+'|'-') term)*
  term    = unary (('*'|'/') unary)*
  unary   = ('+'|'-') unary | primary
  primary = INT | NAME '(' [expr (',' expr)*] ')' | NAME | '(' expr ')'

NAME(...) → CallNode z funkcją z rejestru (nieznana nazwa = błąd parsowania).
Goły NAME → VariableNode; ewaluator go odrzuci.
"""
from __future__ import annotations

import logging
import re

from contracts import (
    BinOpNode,
    CallNode,
    ConstantNode,
    ExprAST,
    ParsedExpression,
    UnaryOpNode,
    VariableNode,
)
from ports.function_registry import FunctionRegistry

logger = logging.getLogger("memocalc.parser")

# ──────────────────────────────────────────────────────────────────────────────
# Tokenizer
# ──────────────────────────────────────────────────────────────────────────────

_TOKEN_RE = re.compile(
    r'\s*(?:'
    r'(?P<num>\d+)'                 # liczba całkowita
    r'|(?P<name>[A-Za-z_]\w*)'      # nazwa funkcji lub zmiennej
    r'|(?P<op>[+\-*/×÷(),])'        # operator, nawias, przecinek
    r')'
)

_OP_MAP = {"×": "*", "÷": "/"}


class ExpressionSyntaxError(SyntaxError):
    pass


def _tokenize(text: str) -> list[tuple[str, str]]:
    """Zwraca listę (rodzaj, wartość). Whitespace ignorowany."""
    # Wyczyść "= ?" na końcu (pytanie o wynik)
    text = re.sub(r'\s*[=?][=?\s]*$', '', text).strip()
    tokens: list[tuple[str, str]] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            bad = len(text) - len(text[pos:].lstrip())
            raise ExpressionSyntaxError(f"Nieoczekiwany znak {text[bad]!r} na pozycji {bad}")
        kind = m.lastgroup
        value = m.group(kind)
        tokens.append((kind, _OP_MAP.get(value, value)))
        pos = m.end()
    return tokens


# ──────────────────────────────────────────────────────────────────────────────
# Precedence climbing parser
# ──────────────────────────────────────────────────────────────────────────────

# Lewy binding power operatorów binarnych
_LEFT_BP: dict[str, int] = {"+": 10, "-": 10, "*": 20, "/": 20}

# Maks. zagnieżdżenie nawiasów / operatorów unarnych / wywołań
DEFAULT_MAX_NESTING = 200


class _Parser:
    def __init__(
        self,
        tokens: list[tuple[str, str]],
        registry: FunctionRegistry,
        max_nesting: int = DEFAULT_MAX_NESTING,
    ) -> None:
        self._tokens = tokens
        self._pos = 0
        self._registry = registry
        self._max_nesting = max_nesting
        self._nesting = 0
        self.functions: list[str] = []

    def _peek(self) -> str | None:
        return self._tokens[self._pos][1] if self._pos < len(self._tokens) else None

    def _peek_kind(self) -> str | None:
        return self._tokens[self._pos][0] if self._pos < len(self._tokens) else None

    def _consume(self) -> str:
        if self._pos >= len(self._tokens):
            raise ExpressionSyntaxError("Nieoczekiwany koniec wyrażenia")
        t = self._tokens[self._pos][1]
        self._pos += 1
        return t

    def _expect(self, tok: str) -> None:
        got = self._consume()
        if got != tok:
            raise ExpressionSyntaxError(f"Oczekiwano {tok!r}, got {got!r}")

    def parse(self) -> ExprAST:
        node = self._expr(0)
        if self._pos < len(self._tokens):
            raise ExpressionSyntaxError(f"Nieoczekiwany token: {self._peek()!r}")
        return node

    def _expr(self, min_bp: int) -> ExprAST:
        left = self._unary()
        while True:
            op = self._peek()
            if self._peek_kind() != "op" or op not in _LEFT_BP:
                break
            bp = _LEFT_BP[op]
            if bp <= min_bp:
                break
            self._consume()
            # Lewostronne wiązanie: right_bp = bp (nie bp+1) dla left-assoc
            right = self._expr(bp)
            left = BinOpNode(op=op, left=left, right=right)  # type: ignore[arg-type]
        return left

    def _unary(self) -> ExprAST:
        # każdy poziom zagnieżdżenia przechodzi przez _unary
        self._nesting += 1
        try:
            if self._nesting > self._max_nesting:
                raise ExpressionSyntaxError(
                    f"Zbyt głębokie zagnieżdżenie (limit {self._max_nesting})"
                )
            if self._peek_kind() == "op" and self._peek() in ("+", "-"):
                op = self._consume()
                operand = self._unary()
                return UnaryOpNode(op=op, operand=operand)  # type: ignore[arg-type]
            return self._primary()
        finally:
            self._nesting -= 1

    def _primary(self) -> ExprAST:
        kind = self._peek_kind()
        if kind is None:
            raise ExpressionSyntaxError("Nieoczekiwany koniec wyrażenia")
        tok = self._consume()
        if kind == "num":
            return ConstantNode(value=int(tok))
        if kind == "name":
            if self._peek() == "(":
                return self._call(tok)
            return VariableNode(name=tok)
        if tok == "(":
            node = self._expr(0)
            self._expect(")")
            return node
        raise ExpressionSyntaxError(f"Nieoczekiwany token: {tok!r}")

    def _call(self, name: str) -> CallNode:
        try:
            target = self._registry.resolve(name)
        except KeyError:
            raise ExpressionSyntaxError(f"Nieznana funkcja: {name!r}") from None
        self.functions.append(name)
        self._expect("(")
        args: list[ExprAST] = []
        if self._peek() != ")":
            args.append(self._expr(0))
            while self._peek() == ",":
                self._consume()
                args.append(self._expr(0))
        self._expect(")")
        return CallNode(target=target, arguments=tuple(args), name=name)


# ──────────────────────────────────────────────────────────────────────────────
# Adapter
# ──────────────────────────────────────────────────────────────────────────────

class RegexExpressionParser:
    """
    Parsuje tekst wyrażenia do ParsedExpression.
    Nigdy nie rzuca wyjątku - błędy enkodowane są w polu error.
    """

    def __init__(
        self, registry: FunctionRegistry, max_nesting: int = DEFAULT_MAX_NESTING
    ) -> None:
        if max_nesting < 1:
            raise ValueError(f"max_nesting musi być >= 1, got {max_nesting}")
        self._registry = registry
        self._max_nesting = max_nesting

    # -- ExpressionParser protocol ------------------------------------------

    def parse(self, text: str) -> ParsedExpression:
        text_stripped = text.strip()
        try:
            tokens = _tokenize(text_stripped)
            if not tokens:
                raise ExpressionSyntaxError("Puste wyrażenie")
            parser = _Parser(tokens, self._registry, self._max_nesting)
            ast = parser.parse()
        except ExpressionSyntaxError as exc:
            logger.debug("Parse failed for %r: %s", text_stripped, exc)
            return ParsedExpression(original_text=text_stripped, error=str(exc))
        except RecursionError:
            # limit interpretera niższy niż max_nesting
            logger.warning("Parse hit recursion limit for input of length %d", len(text_stripped))
            return ParsedExpression(
                original_text=text_stripped,
                error="Zbyt głębokie zagnieżdżenie wyrażenia",
            )

        return ParsedExpression(
            original_text=text_stripped,
            expr_ast=ast,
            functions_referenced=sorted(set(parser.functions)),
        )
