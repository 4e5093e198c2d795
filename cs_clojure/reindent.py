"""Reindenter: rewrites leading whitespace from bracket nesting alone."""

from __future__ import annotations
import logging

logger = logging.getLogger(__name__)

DEFAULT_INDENT_CHAR = ' '
DEFAULT_INDENT_WIDTH = 4


class Reindenter:
    """Indents every line by its parenthesis depth.

    A line's existing leading whitespace is dropped and replaced by
    ``indent_width * depth`` indent characters. Inside an unclosed ``[`` a
    line instead lines up with the text after that bracket, which keeps the
    bindings of a grouped ``let`` under the first one at every width.
    Everything after a ``;`` up to the end of the line is a comment: its
    parens are not counted and no ``)`` is pulled up onto it. Reindenting
    an already reindented text changes nothing.

    Usage:
        r = Reindenter(' ', 2)
        r.reindent("(defn f [x]\\n(+ x 1)\\n)")  # "(defn f [x]\\n  (+ x 1))"
    """

    def __init__(self, indent_char: str = DEFAULT_INDENT_CHAR,
                 indent_width: int = DEFAULT_INDENT_WIDTH):
        if len(indent_char) != 1 or indent_char not in ' \t':
            raise ValueError(f"indent character must be a space or a tab, got {indent_char!r}")
        if indent_width < 0:
            raise ValueError(f"indent width must not be negative, got {indent_width}")
        self.indent_char = indent_char
        self.indent_width = indent_width

    def line_indent(self, depth: int, brackets: list) -> str:
        """Indentation for a line starting at this nesting."""
        if brackets and brackets[-1] is not None:
            return brackets[-1]
        return self.indent_char * (self.indent_width * depth)

    @staticmethod
    def bracket_alignment(output: list) -> str:
        """The current line blanked out, tabs kept, so text lines up after it."""
        line = []
        for piece in reversed(output):
            if piece == '\n':
                break
            line.append(piece)
        return "".join(ch if ch == '\t' else ' ' for ch in "".join(reversed(line)))

    def trim_before_close(self, output: list, after_comment: bool,
                          depth: int, brackets: list):
        """Drop the whitespace in front of a ')'.

        After a comment line the ')' keeps a line of its own, indented for
        the depth it closes back to.
        """
        if not after_comment:
            while output and output[-1].isspace():
                output.pop()
            return
        while output and output[-1].isspace() and output[-1] != '\n':
            output.pop()
        indent = self.line_indent(depth, brackets)
        if indent:
            output.append(indent)

    def reindent(self, text: str) -> str:
        output = []
        depth = 0
        brackets = []  # None for '(', the alignment string for '['
        line_start = False
        in_comment = False
        after_comment = False  # last non-blank character was in a comment

        for ch in text:
            if line_start:
                if ch in ' \t':
                    continue
                line_start = False

            if in_comment:
                in_comment = ch != '\n'
                output.append(ch)
            elif ch == ';':
                in_comment = after_comment = True
                output.append(ch)
            elif ch in ')]':
                if ch == ')':
                    depth -= 1
                if brackets:
                    brackets.pop()
                if ch == ')':
                    self.trim_before_close(output, after_comment, depth, brackets)
                output.append(ch)
                after_comment = False
            else:
                if ch == '(':
                    depth += 1
                    brackets.append(None)
                output.append(ch)
                if ch == '[':
                    brackets.append(self.bracket_alignment(output))
                if not ch.isspace():
                    after_comment = False

            if ch == '\n':
                line_start = True
                indent = self.line_indent(depth, brackets)
                if indent:
                    output.append(indent)

        if depth != 0:
            logger.debug("reindented text ends at paren depth %d", depth)
        return "".join(output)


def reindent(text: str, indent_char: str = DEFAULT_INDENT_CHAR,
             indent_width: int = DEFAULT_INDENT_WIDTH) -> str:
    return Reindenter(indent_char, indent_width).reindent(text)
