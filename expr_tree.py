"""
expr_tree.py - Prymitywy budowania i przeglądania drzew ExprAST.

constant() / call() - budowanie węzłów (int → ConstantNode)
children() / walk() - przejście drzewa w kolejności ewaluacji
depth()             - wysokość drzewa
render()            - postać tekstowa (infiks, pełne nawiasy dla BinOp)
"""
from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Union

from contracts import (
    BinOpNode,
    CallNode,
    ConstantNode,
    ExprAST,
    UnaryOpNode,
    VariableNode,
)


def constant(value: int) -> ConstantNode:
    return ConstantNode(value=value)


def call(
    target: Callable[..., int],
    *args: Union[ExprAST, int],
    receiver: Optional[Any] = None,
    name: Optional[str] = None,
) -> CallNode:
    """Buduje CallNode; gołe inty w argumentach są opakowywane w ConstantNode."""
    arguments = tuple(
        ConstantNode(value=a) if isinstance(a, int) else a for a in args
    )
    return CallNode(target=target, receiver=receiver, arguments=arguments, name=name)


def children(node: ExprAST) -> tuple[ExprAST, ...]:
    """Bezpośrednie poddrzewa, w kolejności w jakiej liczy je ewaluator."""
    if isinstance(node, UnaryOpNode):
        return (node.operand,)
    if isinstance(node, BinOpNode):
        return (node.left, node.right)
    if isinstance(node, CallNode):
        return node.arguments
    return ()


def walk(node: ExprAST) -> Iterator[ExprAST]:
    """Pre-order po wszystkich węzłach drzewa."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def depth(node: ExprAST) -> int:
    subs = children(node)
    if not subs:
        return 1
    return 1 + max(depth(s) for s in subs)


def render(node: ExprAST) -> str:
    if isinstance(node, ConstantNode):
        return str(node.value)
    if isinstance(node, VariableNode):
        return node.name
    if isinstance(node, UnaryOpNode):
        return f"{node.op}{render(node.operand)}"
    if isinstance(node, BinOpNode):
        return f"({render(node.left)} {node.op} {render(node.right)})"
    if isinstance(node, CallNode):
        args = ", ".join(render(a) for a in node.arguments)
        return f"{node.display_name}({args})"
    raise TypeError(f"Nieznany typ węzła AST: {type(node)}")
