"""Exceptions raised by the translation pipeline."""


class TranslationError(Exception):
    """Base exception for every translation failure."""
    pass


class ScanError(TranslationError):
    """Raised when source text cannot be split into tokens."""
    pass


class UnrecognizedCharacter(ScanError):
    def __init__(self, char: str, line: int, column: int):
        self.char = char
        self.line = line
        self.column = column
        super().__init__(
            f"scan: unrecognized character {char!r} at line {line}, column {column}"
        )


class ParseError(TranslationError):
    """Raised when the token stream does not form a syntax tree."""
    pass


class MissingNamespace(ParseError):
    def __init__(self):
        super().__init__("parse: source must open with 'namespace <name>'")


class UnterminatedScope(ParseError):
    def __init__(self, fragment: str = ""):
        self.fragment = fragment
        message = "parse: '{' is never closed"
        if fragment:
            message += f" in: {fragment}"
        super().__init__(message)


class UnparsableExpression(ParseError):
    def __init__(self, tokens):
        from cs_clojure.scanner import render_tokens
        self.tokens = list(tokens)
        super().__init__(
            f"parse: cannot parse expression: {render_tokens(self.tokens) or '<empty>'}"
        )


class UnsupportedSyntax(ParseError):
    """Raised for constructs that are recognized but not translated."""

    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"parse: unsupported syntax: {feature}")


class EmitError(TranslationError):
    """Raised when a tree holds a node kind that has no rendering."""
    pass
