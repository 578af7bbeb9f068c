"""Package-specific exception types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .position import PositionIndex


class ParseError(ValueError):
    """Base class for parsing-related errors.

    Represents errors encountered while converting markup to HTML.
    """


class MarkupError(ParseError):
    """A malformed construct found at a known place in the source.

    Args:
        message: Human-readable description of the problem.
        offset: Zero-based offset of the offending token, or None when the
            problem is only known to happen at end of input.

    Attributes:
        kind: Short name of the error condition.
        line: One-based line of `offset`, once located.
        column: One-based column of `offset`, once located.
    """

    kind = "MarkupError"

    def __init__(self, message: str, offset: int | None = None):
        self.message = message
        self.offset = offset
        self.line: int | None = None
        self.column: int | None = None
        super().__init__(message)

    def locate(self, index: PositionIndex) -> MarkupError:
        """Resolve `offset` to a line and column and refresh the message."""
        if self.offset is not None:
            self.line, self.column = index.lookup(self.offset)
            self.args = (f"line {self.line}, column {self.column}: {self.message}",)
        else:
            self.args = (f"{self.message} at eof",)
        return self


class MixedIndentationError(MarkupError):
    """Raised when a line's indentation conflicts with its enclosing block."""

    kind = "MixedIndentation"

    def __init__(self, offset: int | None = None):
        super().__init__("mixed indentation", offset)


class UnterminatedInlineCodeError(MarkupError):
    """Raised when a backtick code span has no closing backtick."""

    kind = "UnterminatedInlineCode"

    def __init__(self, offset: int | None = None):
        super().__init__('unfinished "`"', offset)


class UnterminatedEscapeError(MarkupError):
    """Raised when a backslash is the last character of a span."""

    kind = "UnterminatedEscape"

    def __init__(self, offset: int | None = None):
        super().__init__("unfinished quote", offset)


class UnclosedBracketError(MarkupError):
    """Raised when a link or image bracket has no matching `]`."""

    kind = "UnclosedBracket"

    def __init__(self, offset: int | None = None):
        super().__init__("`]` expected", offset)


class MismatchedEmphasisError(MarkupError):
    """Raised when emphasis or strike-through markers are not properly nested.

    Args:
        marker: The marker text that could not be matched (``"**"``, ``"_"``, ...).
        reason: Description of the conflict.
        offset: Offset of the marker.
    """

    kind = "MismatchedEmphasis"

    def __init__(self, marker: str, reason: str, offset: int | None = None):
        self.marker = marker
        super().__init__(f"mismatched `{marker}`: {reason}", offset)


class TagMismatchError(MarkupError):
    """Raised when a closing tag does not match the innermost open tag.

    Args:
        expected: Name of the innermost open tag.
        found: Name of the closing tag encountered.
        offset: Offset of the closing tag.
    """

    kind = "TagMismatch"

    def __init__(self, expected: str, found: str, offset: int | None = None):
        self.expected = expected
        self.found = found
        super().__init__(f"</{found}> inside <{expected}>", offset)


class UnexpectedCloseTagError(MarkupError):
    """Raised when a closing tag appears while no tag is open."""

    kind = "UnexpectedCloseTag"

    def __init__(self, tag: str, offset: int | None = None):
        self.tag = tag
        super().__init__(f"</{tag}> when no tag is open", offset)


class UnclosedTagError(MarkupError):
    """Raised when input ends while a tag is still open."""

    kind = "UnclosedTag"

    def __init__(self, name: str, offset: int | None = None):
        self.name = name
        super().__init__(f"<{name}> tag not closed", offset)


class UnclosedRawTagError(MarkupError):
    """Raised when a ``<script>`` or ``<style>`` tag has no closing tag."""

    kind = "UnclosedRawTag"

    def __init__(self, name: str, offset: int | None = None):
        self.name = name
        super().__init__(f"<{name}> tag not closed", offset)


class UnclosedFenceError(MarkupError):
    """Raised when a fenced code block has no closing fence."""

    kind = "UnclosedFence"

    def __init__(self, fence: str, offset: int | None = None):
        self.fence = fence
        super().__init__(f"code fence {fence} not closed", offset)


class UnresolvedLinkError(MarkupError):
    """Raised in strict mode when a link label is never defined."""

    kind = "UnresolvedLink"

    def __init__(self, label: str, offset: int | None = None):
        self.label = label
        super().__init__(f"undefined link label `{label}`", offset)


class NestingTooDeepError(MarkupError):
    """Raised when HTML or embedded markdown nests deeper than allowed.

    Args:
        limit: Maximum nesting depth permitted.
        offset: Offset of the construct that exceeded the limit.
    """

    kind = "NestingTooDeep"

    def __init__(self, limit: int, offset: int | None = None):
        self.limit = limit
        super().__init__(f"nesting too deep (limit: {limit})", offset)


class PositionOutOfRangeError(IndexError):
    """Raised when a position lookup falls outside the indexed text.

    Args:
        offset: The offset that was looked up.
        length: Length of the indexed text.
    """

    def __init__(self, offset: int, length: int):
        self.offset = offset
        self.length = length
        super().__init__(f"offset {offset} outside of [0, {length}]")
