"""cs-clojure: translates a C#-like curly-brace language into Clojure."""

import logging

from cs_clojure.builder import parse
from cs_clojure.emitter import ClojureEmitter, emit
from cs_clojure.errors import (
    EmitError, MissingNamespace, ParseError, ScanError, TranslationError,
    UnparsableExpression, UnrecognizedCharacter, UnsupportedSyntax, UnterminatedScope,
)
from cs_clojure.reindent import DEFAULT_INDENT_CHAR, DEFAULT_INDENT_WIDTH, Reindenter, reindent
from cs_clojure.scanner import Token, TokenKind, render_tokens, scan
from cs_clojure.tree import NodeKind, SyntaxTreeNode

logger = logging.getLogger(__name__)


class Translator:
    """Source-to-source translator: scan, parse, emit, reindent.

    Usage:
        t = Translator()
        print(t.translate("namespace N { int F() { return 1; } }"))
        # (ns N)
        #
        # (defn F [] 1)
    """

    def __init__(self, indent_char: str = DEFAULT_INDENT_CHAR,
                 indent_width: int = DEFAULT_INDENT_WIDTH):
        self._reindenter = Reindenter(indent_char, indent_width)

    def translate(self, source: str) -> str:
        """Translate source text; raises TranslationError on the first failure."""
        tokens = scan(source)
        tree = parse(tokens)
        return self._reindenter.reindent(emit(tree))

    def load(self, filename: str) -> str:
        """Read and translate a source file."""
        with open(filename, 'r', encoding='utf-8') as f:
            code = f.read()
        logger.debug("translating %s", filename)
        return self.translate(code)


def translate(source: str, indent_char: str = DEFAULT_INDENT_CHAR,
              indent_width: int = DEFAULT_INDENT_WIDTH) -> str:
    return Translator(indent_char, indent_width).translate(source)


__version__ = "0.1.0"

__all__ = [
    'Translator', 'translate',
    'scan', 'parse', 'emit', 'reindent',
    'Token', 'TokenKind', 'render_tokens',
    'SyntaxTreeNode', 'NodeKind',
    'ClojureEmitter', 'Reindenter',
    'TranslationError', 'ScanError', 'UnrecognizedCharacter',
    'ParseError', 'MissingNamespace', 'UnterminatedScope',
    'UnparsableExpression', 'UnsupportedSyntax', 'EmitError',
]
