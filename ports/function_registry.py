"""
Port: FunctionRegistry
Odpowiedzialność: jawne mapowanie nazw na funkcje całkowitoliczbowe (bez refleksji).
"""
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class FunctionRegistry(Protocol):
    def resolve(self, name: str) -> Callable[..., int]:
        """Returns the callable registered under name. Raises KeyError if unknown."""
        ...

    def register(self, name: str, fn: Callable[..., int]) -> None:
        """Registers (or replaces) a callable under name."""
        ...

    def names(self) -> list[str]:
        """Sorted list of registered names."""
        ...
