"""Syntax tree produced by the builder and consumed by the emitter."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NodeKind(Enum):
    NAMESPACE = "namespace"
    CLASS = "class"
    METHOD = "method"
    METHOD_ARGUMENT = "method_argument"
    LITERAL = "literal"
    EXPRESSION = "expression"
    ASSIGNMENT = "assignment"
    EQUALITY_CHECK = "equality_check"
    BRANCH = "branch"
    COMMENT = "comment"
    COLLECTION = "collection"


@dataclass(frozen=True)
class SyntaxTreeNode:
    """One node of the tree.

    Nodes are never mutated after the builder creates them; ``children`` is a
    tuple so a node owns exactly the children it was built with.

    - NAMESPACE: value is the namespace name, children are top-level
      methods and call statements.
    - METHOD: METHOD_ARGUMENT children first, then body statements.
    - ASSIGNMENT: value is the bound name and the single child is the bound
      expression; a grouped assignment has value None and two or more
      ASSIGNMENT children in source order.
    - BRANCH: value is "if" (first child is the condition) or "else".
    - COLLECTION: value is None, children are the elements.
    """
    kind: NodeKind
    value: Optional[str] = None
    children: tuple = ()

    @classmethod
    def leaf(cls, kind: NodeKind, value: Optional[str] = None) -> SyntaxTreeNode:
        return cls(kind, value, ())

    @property
    def is_grouped_assignment(self) -> bool:
        return (self.kind is NodeKind.ASSIGNMENT
                and any(child.kind is NodeKind.ASSIGNMENT for child in self.children))

    def __str__(self):
        return (f"{{type: {self.kind.name}, value: {self.value!r}, "
                f"children: {len(self.children)}}}")
