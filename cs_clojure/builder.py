"""Tree builder: recursive-descent parsing of a token list.

There is no precedence table. ``parse_expression`` tries a fixed list of
forms and the first one that matches wins. Binary operators split at their
first occurrence outside any brackets, so ``a * b + c`` reads as
``a * (b + c)``; write the parentheses when another grouping is meant.
"""

from __future__ import annotations
import logging
from typing import Optional

from cs_clojure.errors import (
    MissingNamespace, UnparsableExpression, UnsupportedSyntax, UnterminatedScope,
)
from cs_clojure.scanner import TokenKind, render_tokens
from cs_clojure.tree import NodeKind, SyntaxTreeNode

logger = logging.getLogger(__name__)

_OPENING = {TokenKind.OPEN_PAREN, TokenKind.OPEN_COLLECTION}
_CLOSING = {TokenKind.CLOSE_PAREN, TokenKind.CLOSE_COLLECTION}

_LITERAL_KINDS = {
    TokenKind.NAME_IDENTIFIER,
    TokenKind.NUMERIC_LITERAL,
    TokenKind.BOOLEAN_LITERAL,
    TokenKind.NULL_LITERAL,
}

# Statement-level tokens that only mark a boundary
_BOUNDARY_KINDS = {TokenKind.RETURN, TokenKind.CLOSE_SCOPE, TokenKind.SEMICOLON}


# ---------------------------------------------------------------------------
# Token list helpers
# ---------------------------------------------------------------------------

def find_kind(tokens, kind: TokenKind, start: int = 0) -> Optional[int]:
    for index in range(start, len(tokens)):
        if tokens[index].kind is kind:
            return index
    return None


def kinds_at(tokens, *kinds) -> bool:
    """True when the slice starts with exactly these token kinds."""
    if len(tokens) < len(kinds):
        return False
    return all(token.kind is kind for token, kind in zip(tokens, kinds))


def find_scope_end(tokens, start: int) -> int:
    """Index of the '}' that brings the scope counter back to zero."""
    depth = 0
    for index in range(start, len(tokens)):
        kind = tokens[index].kind
        if kind is TokenKind.OPEN_SCOPE:
            depth += 1
        elif kind is TokenKind.CLOSE_SCOPE:
            depth -= 1
            if depth == 0:
                return index
    raise UnterminatedScope(render_tokens(tokens[start:start + 6]))


def check_scopes_closed(tokens):
    open_scopes = []
    for index, token in enumerate(tokens):
        if token.kind is TokenKind.OPEN_SCOPE:
            open_scopes.append(index)
        elif token.kind is TokenKind.CLOSE_SCOPE and open_scopes:
            open_scopes.pop()
    if open_scopes:
        start = open_scopes[0]
        raise UnterminatedScope(render_tokens(tokens[max(start - 2, 0):start + 4]))


def matching_close(tokens, open_index: int) -> Optional[int]:
    depth = 0
    for index in range(open_index, len(tokens)):
        kind = tokens[index].kind
        if kind in _OPENING:
            depth += 1
        elif kind in _CLOSING:
            depth -= 1
            if depth == 0:
                return index
    return None


def wraps(tokens, open_index: int) -> bool:
    """True when the bracket at open_index is closed by the slice's last token."""
    return matching_close(tokens, open_index) == len(tokens) - 1


def find_top_level(tokens, kind: TokenKind, start: int = 0) -> Optional[int]:
    """First token of the given kind at or after start that is not nested in () or []."""
    depth = 0
    for index, token in enumerate(tokens):
        if token.kind in _OPENING:
            depth += 1
        elif token.kind in _CLOSING:
            depth -= 1
        elif depth == 0 and token.kind is kind and index >= start:
            return index
    return None


def split_top_level(tokens, separator: TokenKind = TokenKind.COMMA) -> list:
    pieces = []
    current = []
    depth = 0
    for token in tokens:
        if token.kind in _OPENING:
            depth += 1
        elif token.kind in _CLOSING:
            depth -= 1
        if depth == 0 and token.kind is separator:
            pieces.append(current)
            current = []
        else:
            current.append(token)
    pieces.append(current)
    return pieces


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------

def parse(tokens) -> SyntaxTreeNode:
    """Build the syntax tree for a whole source file."""
    tokens = list(tokens)
    if not kinds_at(tokens, TokenKind.NAMESPACE, TokenKind.NAME_IDENTIFIER):
        raise MissingNamespace()
    check_scopes_closed(tokens)

    nodes = []
    index = 0
    while index < len(tokens):
        window = tokens[index:index + 3]
        if kinds_at(window, TokenKind.TYPE_DECLARATION, TokenKind.NAME_IDENTIFIER,
                    TokenKind.OPEN_PAREN):
            end = find_scope_end(tokens, index)
            nodes.append(parse_method(tokens[index:end + 1]))
            index = end + 1
        elif kinds_at(window, TokenKind.CLASS, TokenKind.NAME_IDENTIFIER):
            raise UnsupportedSyntax(f"class declaration '{window[1].text}'")
        elif kinds_at(window, TokenKind.NAME_IDENTIFIER, TokenKind.OPEN_PAREN):
            end = find_kind(tokens, TokenKind.SEMICOLON, index)
            if end is None:
                end = len(tokens) - 1
            nodes.append(parse_expression(tokens[index:end + 1]))
            index = end + 1
        else:
            index += 1

    logger.debug("parsed namespace %s with %d top-level nodes", tokens[1].text, len(nodes))
    return SyntaxTreeNode(NodeKind.NAMESPACE, tokens[1].text, tuple(nodes))


def parse_method(tokens) -> SyntaxTreeNode:
    """``<type> <name>(<args>) { <body> }``"""
    open_index = find_kind(tokens, TokenKind.OPEN_PAREN)
    close_index = find_kind(tokens, TokenKind.CLOSE_PAREN)
    if open_index is None or close_index is None or close_index < open_index:
        raise UnparsableExpression(tokens)

    arguments = [
        SyntaxTreeNode.leaf(NodeKind.METHOD_ARGUMENT, token.text)
        for token in tokens[open_index + 1:close_index]
        if token.kind is TokenKind.NAME_IDENTIFIER
    ]

    body_start = close_index + 1
    if body_start < len(tokens) and tokens[body_start].kind is TokenKind.OPEN_SCOPE:
        body_start += 1
    body = parse_statements(tokens[body_start:])

    logger.debug("parsed method %s: %d arguments, %d statements",
                 tokens[1].text, len(arguments), len(body))
    return SyntaxTreeNode(NodeKind.METHOD, tokens[1].text, tuple(arguments + body))


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

def parse_statements(tokens) -> list:
    """Parse the statements of a method or branch body."""
    nodes = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.kind in _BOUNDARY_KINDS:
            index += 1
        elif token.kind is TokenKind.COMMENT:
            nodes.append(SyntaxTreeNode.leaf(NodeKind.COMMENT, token.text))
            index += 1
        else:
            end = statement_end(tokens, index)
            nodes.append(parse_expression(tokens[index:end + 1]))
            index = end + 1
    return group_assignments(nodes)


def statement_end(tokens, start: int) -> int:
    """Statements end at ';' unless a '{' opens first; then at its '}'."""
    semicolon = find_kind(tokens, TokenKind.SEMICOLON, start)
    scope = find_kind(tokens, TokenKind.OPEN_SCOPE, start)
    if scope is not None and (semicolon is None or scope < semicolon):
        return find_scope_end(tokens, start)
    if semicolon is not None:
        return semicolon
    return len(tokens) - 1


def group_assignments(nodes) -> list:
    """Wrap each run of two or more adjacent assignments into one node."""
    grouped = []
    run = []

    def flush():
        if len(run) > 1:
            grouped.append(SyntaxTreeNode(NodeKind.ASSIGNMENT, None, tuple(run)))
        elif run:
            grouped.append(run[0])
        run.clear()

    for node in nodes:
        if node.kind is NodeKind.ASSIGNMENT:
            run.append(node)
        else:
            flush()
            grouped.append(node)
    flush()
    return grouped


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

def parse_expression(tokens) -> SyntaxTreeNode:
    tokens = list(tokens)
    if tokens and tokens[-1].kind is TokenKind.SEMICOLON:
        tokens = tokens[:-1]
    if not tokens:
        raise UnparsableExpression(tokens)

    first = tokens[0]

    if len(tokens) == 1:
        if first.kind not in _LITERAL_KINDS:
            raise UnparsableExpression(tokens)
        return SyntaxTreeNode.leaf(NodeKind.LITERAL, first.text)

    if first.kind is TokenKind.RETURN:
        return parse_expression(tokens[1:])

    if first.kind is TokenKind.OPEN_PAREN and wraps(tokens, 0):
        return parse_expression(tokens[1:-1])

    if first.kind is TokenKind.BRANCH and first.text == "if":
        return parse_if(tokens)

    if first.kind is TokenKind.BRANCH and first.text == "else":
        return parse_else(tokens)

    assignment = find_top_level(tokens, TokenKind.ASSIGNMENT_OPERATOR)
    if assignment and tokens[assignment - 1].kind is TokenKind.NAME_IDENTIFIER:
        return parse_assignment(tokens, assignment)

    if kinds_at(tokens, TokenKind.NAME_IDENTIFIER, TokenKind.OPEN_PAREN) and wraps(tokens, 1):
        return SyntaxTreeNode(NodeKind.EXPRESSION, first.text,
                              tuple(parse_collection(tokens[2:-1])))

    if first.kind is TokenKind.OPEN_COLLECTION and wraps(tokens, 0):
        return SyntaxTreeNode(NodeKind.COLLECTION, None,
                              tuple(parse_collection(tokens[1:-1])))

    operator = find_top_level(tokens, TokenKind.NUMERIC_OPERATOR)
    if operator == 0 and first.text == "-":
        # a leading minus negates only the operand right after it
        operator = find_top_level(tokens, TokenKind.NUMERIC_OPERATOR, start=2)
        if operator is None and find_top_level(tokens, TokenKind.EQUALITY_OPERATOR) is None:
            return SyntaxTreeNode(NodeKind.EXPRESSION, "-", (parse_expression(tokens[1:]),))
    if operator is not None:
        return parse_binary(NodeKind.EXPRESSION, tokens[operator].text, tokens, operator)

    equality = find_top_level(tokens, TokenKind.EQUALITY_OPERATOR)
    if equality is not None:
        return parse_binary(NodeKind.EQUALITY_CHECK, "=", tokens, equality)

    if (kinds_at(tokens, TokenKind.NAME_IDENTIFIER, TokenKind.DOT,
                 TokenKind.NAME_IDENTIFIER, TokenKind.OPEN_PAREN)
            and wraps(tokens, 3)):
        receiver = SyntaxTreeNode.leaf(NodeKind.LITERAL, first.text)
        arguments = parse_collection(tokens[4:-1])
        return SyntaxTreeNode(NodeKind.EXPRESSION, tokens[2].text, (receiver, *arguments))

    raise UnparsableExpression(tokens)


def parse_if(tokens) -> SyntaxTreeNode:
    """``if (<condition>) <body>``: condition first, then the body statements."""
    close_index = None
    if len(tokens) > 1 and tokens[1].kind is TokenKind.OPEN_PAREN:
        close_index = matching_close(tokens, 1)
    if close_index is None:
        raise UnparsableExpression(tokens)

    condition = parse_expression(tokens[2:close_index])

    body_start = close_index + 1
    if body_start < len(tokens) and tokens[body_start].kind is TokenKind.OPEN_SCOPE:
        body_start += 1
    body = parse_statements(tokens[body_start:])

    return SyntaxTreeNode(NodeKind.BRANCH, "if", (condition, *body))


def parse_else(tokens) -> SyntaxTreeNode:
    rest = tokens[1:]
    if rest and rest[0].kind is TokenKind.BRANCH and rest[0].text == "if":
        # else if: the nested branch is the only body statement
        body = [parse_expression(rest)]
    else:
        if rest and rest[0].kind is TokenKind.OPEN_SCOPE:
            rest = rest[1:]
        body = parse_statements(rest)
    return SyntaxTreeNode(NodeKind.BRANCH, "else", tuple(body))


def parse_assignment(tokens, index: int) -> SyntaxTreeNode:
    operator = tokens[index]
    if operator.text is not None:
        raise UnsupportedSyntax(f"compound assignment '{operator.text}'")

    value = parse_expression(tokens[index + 1:])
    if value.kind is NodeKind.ASSIGNMENT:
        raise UnsupportedSyntax(f"chained assignment '{render_tokens(tokens)}'")
    return SyntaxTreeNode(NodeKind.ASSIGNMENT, tokens[index - 1].text, (value,))


def parse_binary(kind: NodeKind, value: str, tokens, index: int) -> SyntaxTreeNode:
    left = parse_expression(tokens[:index])
    right = parse_expression(tokens[index + 1:])
    return SyntaxTreeNode(kind, value, (left, right))


def parse_collection(tokens) -> list:
    """Parse comma-separated call arguments or collection elements."""
    if not tokens:
        return []
    return [parse_expression(piece) for piece in split_top_level(tokens)]
