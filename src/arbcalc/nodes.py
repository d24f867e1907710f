# src/arbcalc/nodes.py
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from arbcalc.errors import SourceRange
from arbcalc.rational import Rational


@dataclass(eq=False)
class Node:
    """Base AST node. `parent` is filled in by the parser once the tree is complete."""
    range: SourceRange
    parent: FunctionNode | None = field(default=None, repr=False, compare=False)

    def walk(self) -> Iterator[Node]:
        yield self


@dataclass(eq=False)
class NumberNode(Node):
    value: Rational = field(default_factory=Rational)


@dataclass(eq=False)
class VariableNode(Node):
    name: str = ""


@dataclass(eq=False)
class FunctionNode(Node):
    """
    A call: `sin(x)`, an operator (`1 + 2` is add(1, 2)), or a bare
    identifier such as `pi` (bare=True, no arguments).
    """
    name: str = ""
    arguments: list[Node] = field(default_factory=list)
    name_range: SourceRange = (0, 0)
    bare: bool = False

    def walk(self) -> Iterator[Node]:
        yield self
        for arg in self.arguments:
            yield from arg.walk()


def link_parents(root: Node) -> Node:
    for node in root.walk():
        if isinstance(node, FunctionNode):
            for arg in node.arguments:
                arg.parent = node
    return root


def describe_tree(node: Node) -> str:
    """
    Compact prefix rendering, used in debug traces and tests.

    >>> from arbcalc.parser import parse
    >>> describe_tree(parse("1 + 2*3"))
    'add(1, multiply(2, 3))'
    """
    if isinstance(node, NumberNode):
        return node.value.description()
    if isinstance(node, VariableNode):
        return f"${node.name}"
    if isinstance(node, FunctionNode):
        if node.bare:
            return node.name
        return f"{node.name}({', '.join(describe_tree(a) for a in node.arguments)})"
    return repr(node)
