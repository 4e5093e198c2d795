"""Scanner: turns C#-like source text into a flat list of tokens."""

from __future__ import annotations
import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cs_clojure.errors import UnrecognizedCharacter

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class TokenKind(Enum):
    NAMESPACE = "namespace"
    CLASS = "class"

    TYPE_DECLARATION = "type_declaration"
    NAME_IDENTIFIER = "name_identifier"

    DOT = "dot"

    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"

    OPEN_SCOPE = "open_scope"
    CLOSE_SCOPE = "close_scope"

    OPEN_COLLECTION = "open_collection"
    CLOSE_COLLECTION = "close_collection"

    SEMICOLON = "semicolon"
    COMMA = "comma"

    RETURN = "return"

    NULL_LITERAL = "null_literal"
    NUMERIC_LITERAL = "numeric_literal"
    BOOLEAN_LITERAL = "boolean_literal"

    NUMERIC_OPERATOR = "numeric_operator"
    BOOLEAN_OPERATOR = "boolean_operator"

    ASSIGNMENT_OPERATOR = "assignment_operator"
    EQUALITY_OPERATOR = "equality_operator"

    BRANCH = "branch"

    COMMENT = "comment"


# Spelling of tokens that carry no text
_FIXED_LEXEMES = {
    TokenKind.NAMESPACE: "namespace",
    TokenKind.CLASS: "class",
    TokenKind.DOT: ".",
    TokenKind.OPEN_PAREN: "(",
    TokenKind.CLOSE_PAREN: ")",
    TokenKind.OPEN_SCOPE: "{",
    TokenKind.CLOSE_SCOPE: "}",
    TokenKind.OPEN_COLLECTION: "[",
    TokenKind.CLOSE_COLLECTION: "]",
    TokenKind.SEMICOLON: ";",
    TokenKind.COMMA: ",",
    TokenKind.ASSIGNMENT_OPERATOR: "=",
    TokenKind.EQUALITY_OPERATOR: "==",
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: Optional[str] = None

    @property
    def lexeme(self) -> str:
        """The token as it is spelled in source."""
        if self.kind is TokenKind.COMMENT:
            return "//" + (self.text or "")
        if self.text is not None:
            return self.text
        return _FIXED_LEXEMES[self.kind]

    def __str__(self):
        return f"{{type: {self.kind.name}, value: {self.text!r}}}"


def render_tokens(tokens) -> str:
    """Join token spellings with single spaces."""
    return " ".join(token.lexeme for token in tokens)


# ---------------------------------------------------------------------------
# Classification tables
# ---------------------------------------------------------------------------

_WORD_KINDS = {
    "namespace": TokenKind.NAMESPACE,
    "class": TokenKind.CLASS,
    "var": TokenKind.TYPE_DECLARATION,
    "int": TokenKind.TYPE_DECLARATION,
    "double": TokenKind.TYPE_DECLARATION,
    "string": TokenKind.TYPE_DECLARATION,
    "bool": TokenKind.TYPE_DECLARATION,
    "true": TokenKind.BOOLEAN_LITERAL,
    "false": TokenKind.BOOLEAN_LITERAL,
    "null": TokenKind.NULL_LITERAL,
    "return": TokenKind.RETURN,
    "if": TokenKind.BRANCH,
    "else": TokenKind.BRANCH,
}

# Keywords whose token keeps no text
_BARE_KEYWORDS = {TokenKind.NAMESPACE, TokenKind.CLASS}

# Checked in order against the start of a punctuation run
_MULTI_CHAR_OPERATORS = [
    ("==", TokenKind.EQUALITY_OPERATOR, False),
    ("&&", TokenKind.BOOLEAN_OPERATOR, True),
    ("||", TokenKind.BOOLEAN_OPERATOR, True),
    ("+=", TokenKind.ASSIGNMENT_OPERATOR, True),
    ("-=", TokenKind.ASSIGNMENT_OPERATOR, True),
    ("*=", TokenKind.ASSIGNMENT_OPERATOR, True),
    ("/=", TokenKind.ASSIGNMENT_OPERATOR, True),
]

# char -> (kind, keeps its text)
_SINGLE_CHAR_KINDS = {
    '=': (TokenKind.ASSIGNMENT_OPERATOR, False),
    '(': (TokenKind.OPEN_PAREN, False),
    ')': (TokenKind.CLOSE_PAREN, False),
    '{': (TokenKind.OPEN_SCOPE, False),
    '}': (TokenKind.CLOSE_SCOPE, False),
    '[': (TokenKind.OPEN_COLLECTION, False),
    ']': (TokenKind.CLOSE_COLLECTION, False),
    ';': (TokenKind.SEMICOLON, False),
    ',': (TokenKind.COMMA, False),
    '.': (TokenKind.DOT, False),
    '+': (TokenKind.NUMERIC_OPERATOR, True),
    '-': (TokenKind.NUMERIC_OPERATOR, True),
    '*': (TokenKind.NUMERIC_OPERATOR, True),
    '/': (TokenKind.NUMERIC_OPERATOR, True),
    '|': (TokenKind.BOOLEAN_OPERATOR, True),
    '&': (TokenKind.BOOLEAN_OPERATOR, True),
}


def is_generic_type(word: str) -> bool:
    """True for names like ``List<int>``: a '<' and a later '>' with something between."""
    open_bracket = word.find('<')
    if open_bracket == -1:
        return False
    close_bracket = word.find('>', open_bracket)
    return close_bracket > open_bracket + 1


def classify_word(word: str) -> Token:
    kind = _WORD_KINDS.get(word)
    if kind in _BARE_KEYWORDS:
        return Token(kind)
    if kind is not None:
        return Token(kind, word)
    if is_generic_type(word):
        return Token(TokenKind.TYPE_DECLARATION, word)
    if word[0].isdigit():
        return Token(TokenKind.NUMERIC_LITERAL, word)
    return Token(TokenKind.NAME_IDENTIFIER, word)


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------

def scan(source: str) -> list:
    """Split source text into tokens."""
    tokens = Scanner(source).scan()
    logger.debug("scanned %d tokens from %d characters", len(tokens), len(source))
    return tokens


class Scanner:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index >= len(self.text):
            return ''
        return self.text[index]

    def scan(self) -> list:
        tokens = []
        while not self.at_end():
            ch = self.peek()
            if ch.isspace():
                self.pos += 1
            elif ch == '/' and self.peek(1) == '/':
                tokens.append(self.read_comment())
            elif ch.isalnum():
                tokens.append(self.read_word())
            elif ch in string.punctuation:
                tokens.append(self.read_symbol())
            else:
                raise UnrecognizedCharacter(ch, *self.location())
        return tokens

    def read_comment(self) -> Token:
        self.pos += 2  # consume '//'
        start = self.pos
        while not self.at_end() and self.peek() not in '\r\n':
            self.pos += 1
        return Token(TokenKind.COMMENT, self.text[start:self.pos])

    def read_word(self) -> Token:
        start = self.pos
        numeric = self.peek().isdigit()
        while not self.at_end():
            ch = self.peek()
            if ch.isalnum() or ch in '<>' or (numeric and ch == '.'):
                self.pos += 1
            else:
                break
        return classify_word(self.text[start:self.pos])

    def read_symbol(self) -> Token:
        start = self.pos
        end = start
        while end < len(self.text) and self.text[end] in string.punctuation:
            end += 1
        run = self.text[start:end]

        for operator, kind, keeps_text in _MULTI_CHAR_OPERATORS:
            if run.startswith(operator):
                self.pos += len(operator)
                return Token(kind, operator if keeps_text else None)

        ch = run[0]
        if ch not in _SINGLE_CHAR_KINDS:
            raise UnrecognizedCharacter(ch, *self.location())
        kind, keeps_text = _SINGLE_CHAR_KINDS[ch]
        self.pos += 1
        return Token(kind, ch if keeps_text else None)

    def location(self):
        """1-based (line, column) of the current position."""
        line = self.text.count('\n', 0, self.pos) + 1
        column = self.pos - self.text.rfind('\n', 0, self.pos)
        return line, column
