"""
Adapter: DictFunctionRegistry
Implementuje port FunctionRegistry za pomocą słownika in-memory.

Wbudowane funkcje (wszystkie int → int):
  abs, sign, min, max, pow, gcd, fact, sqrt (pierwiastek całkowity)
"""
from __future__ import annotations

import math
import re
from typing import Callable, Mapping, Optional

_NAME_RE = re.compile(r"^[A-Za-z_]\w*$")


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


def _pow(base: int, exp: int) -> int:
    if exp < 0:
        raise ValueError("pow: ujemny wykładnik nie daje wyniku całkowitego")
    return base ** exp


# ──────────────────────────────────────────────────────────────────
# Wbudowane funkcje startowe
# ──────────────────────────────────────────────────────────────────

_BUILTIN_FUNCTIONS: dict[str, Callable[..., int]] = {
    "abs":  abs,
    "sign": _sign,
    "min":  min,
    "max":  max,
    "pow":  _pow,
    "gcd":  math.gcd,
    "fact": math.factorial,
    "sqrt": math.isqrt,
}


class DictFunctionRegistry:
    """
    Prosty FunctionRegistry oparty na słowniku.
    Rejestracja nie jest thread-safe; po starcie tylko odczyt.
    """

    def __init__(
        self,
        functions: Optional[Mapping[str, Callable[..., int]]] = None,
        include_builtins: bool = True,
    ) -> None:
        self._functions: dict[str, Callable[..., int]] = {}
        if include_builtins:
            for name, fn in _BUILTIN_FUNCTIONS.items():
                self.register(name, fn)
        for name, fn in (functions or {}).items():
            self.register(name, fn)

    # -- FunctionRegistry protocol -----------------------------

    def resolve(self, name: str) -> Callable[..., int]:
        try:
            return self._functions[name]
        except KeyError:
            raise KeyError(f"Nieznana funkcja: {name!r}") from None

    def register(self, name: str, fn: Callable[..., int]) -> None:
        if not _NAME_RE.match(name):
            raise ValueError(f"Niepoprawna nazwa funkcji: {name!r}")
        if not callable(fn):
            raise TypeError(f"{name!r}: oczekiwano callable, got {type(fn).__name__}")
        self._functions[name] = fn

    def names(self) -> list[str]:
        return sorted(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions
