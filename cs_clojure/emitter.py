"""Emitter: renders a syntax tree as Clojure source text."""

from __future__ import annotations
import logging
from dataclasses import dataclass

from cs_clojure.errors import EmitError
from cs_clojure.tree import NodeKind, SyntaxTreeNode

logger = logging.getLogger(__name__)

NIL = "nil"


@dataclass(frozen=True)
class Fragment:
    """Rendered text plus the parentheses it leaves open for its parent.

    ``in_comment`` is set when the text ends inside a ``;;`` line comment,
    so anything written after it has to start on a new line.
    """
    text: str
    open_levels: int = 0
    in_comment: bool = False

    def close(self, levels: int) -> str:
        """The text followed by ``levels`` closing parens."""
        if not levels:
            return self.text
        if self.in_comment:
            return self.text + "\n" + ")" * levels
        return self.text + ")" * levels

    def closed(self) -> str:
        return self.close(self.open_levels)


def emit(tree: SyntaxTreeNode) -> str:
    """Render a whole tree."""
    text = ClojureEmitter().emit(tree)
    logger.debug("emitted %d characters", len(text))
    return text


class ClojureEmitter:
    """Converts syntax tree nodes into Clojure forms.

    Statement forms may stay open: a ``let`` keeps its paren open so the
    statements after it become its body, and an ``if`` keeps one level open
    so a following ``else`` becomes its third argument. The enclosing
    method closes whatever is still open once its body is written.
    """

    def emit(self, node: SyntaxTreeNode) -> str:
        """Render a node and close everything it left open."""
        return self.render(node).closed()

    def render(self, node: SyntaxTreeNode) -> Fragment:
        handler = self._node_handlers.get(node.kind)
        if handler is None:
            raise EmitError(f"emit: no rendering for {node.kind.name} node {node}")
        return handler(self, node)

    # --- Node handlers ---

    def emit_namespace(self, node: SyntaxTreeNode) -> Fragment:
        parts = [f"(ns {node.value})\n\n"]
        for child in node.children:
            parts.append(self.emit(child) + "\n\n")
        return Fragment("".join(parts))

    def emit_method(self, node: SyntaxTreeNode) -> Fragment:
        """(defn name [args] body...)"""
        arguments = [child.value for child in node.children
                     if child.kind is NodeKind.METHOD_ARGUMENT]
        body = [self.render(child) for child in node.children
                if child.kind is not NodeKind.METHOD_ARGUMENT]

        text = f"(defn {node.value} [{' '.join(arguments)}]"
        if len(body) == 1 and not body[0].in_comment:
            text += " " + body[0].text
        elif body:
            text += "\n" + "\n".join(fragment.text for fragment in body)

        open_levels = 1 + sum(fragment.open_levels for fragment in body)
        in_comment = bool(body) and body[-1].in_comment
        return Fragment(Fragment(text, open_levels, in_comment).closed())

    def emit_expression(self, node: SyntaxTreeNode) -> Fragment:
        parts = [node.value] + [self.emit(child) for child in node.children]
        return Fragment("(" + " ".join(parts) + ")")

    def emit_assignment(self, node: SyntaxTreeNode) -> Fragment:
        """(let [name value] ... left open for the statements that follow"""
        if node.is_grouped_assignment:
            bindings = "\n  ".join(self.emit_binding(child) for child in node.children)
        else:
            bindings = self.emit_binding(node)
        return Fragment(f"(let [{bindings}]", 1)

    def emit_binding(self, node: SyntaxTreeNode) -> str:
        return f"{node.value} {self.emit(node.children[0])}"

    def emit_literal(self, node: SyntaxTreeNode) -> Fragment:
        if node.value == "null":
            return Fragment(NIL)
        return Fragment(node.value)

    def emit_comment(self, node: SyntaxTreeNode) -> Fragment:
        return Fragment(";;" + node.value, in_comment=True)

    def emit_collection(self, node: SyntaxTreeNode) -> Fragment:
        items = " ".join(self.emit(child) for child in node.children)
        return Fragment(f"[{items}]")

    def emit_branch(self, node: SyntaxTreeNode) -> Fragment:
        if node.value == "if":
            condition, *statements = node.children
            head = f"(if {self.emit(condition)}\n"
            opened = 1
        else:
            statements = node.children
            head = ""
            opened = 0

        body = self.emit_block(statements)
        open_levels = opened + body.open_levels
        keep = min(open_levels, 1)
        closers = open_levels - keep
        return Fragment(head + body.close(closers), keep, body.in_comment and not closers)

    def emit_block(self, statements) -> Fragment:
        """A single statement as is, several wrapped in (do ...).

        A body with nothing but comments still yields nil as its value.
        """
        fragments = [self.render(statement) for statement in statements]
        if all(statement.kind is NodeKind.COMMENT for statement in statements):
            fragments.append(Fragment(NIL))
        if len(fragments) == 1:
            return fragments[0]
        text = "(do \n" + "\n".join(fragment.text for fragment in fragments)
        return Fragment(text, 1 + sum(fragment.open_levels for fragment in fragments),
                        fragments[-1].in_comment)

    # Node handler dispatch table
    _node_handlers = {
        NodeKind.NAMESPACE: emit_namespace,
        NodeKind.METHOD: emit_method,
        NodeKind.EXPRESSION: emit_expression,
        NodeKind.EQUALITY_CHECK: emit_expression,
        NodeKind.ASSIGNMENT: emit_assignment,
        NodeKind.LITERAL: emit_literal,
        NodeKind.COMMENT: emit_comment,
        NodeKind.COLLECTION: emit_collection,
        NodeKind.BRANCH: emit_branch,
    }
