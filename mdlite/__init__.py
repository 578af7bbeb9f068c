"""
mdlite: a small markup-to-HTML converter with precise error locations.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    mdlite README.md -o README.html

Library Usage:
    from mdlite import parse_markdown

    result = parse_markdown("# Title\\n\\nSome *text*.\\n")
    html = result.html
"""

from .config import ConfigError, MdliteConfig
from .exceptions import (
    MarkupError,
    MismatchedEmphasisError,
    MixedIndentationError,
    NestingTooDeepError,
    ParseError,
    PositionOutOfRangeError,
    TagMismatchError,
    UnclosedBracketError,
    UnclosedFenceError,
    UnclosedRawTagError,
    UnclosedTagError,
    UnexpectedCloseTagError,
    UnresolvedLinkError,
    UnterminatedEscapeError,
    UnterminatedInlineCodeError,
)
from .models import ErrorRecord, ParseResult
from .parser import ParseFileError, markdown_to_html, parse_file, parse_markdown
from .position import PositionIndex, report
from .slugify import generate_slug

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_markdown",
    "markdown_to_html",
    "parse_file",
    # Data models
    "ParseResult",
    "ErrorRecord",
    "MdliteConfig",
    # Utilities
    "PositionIndex",
    "report",
    "generate_slug",
    # Exceptions
    "ConfigError",
    "ParseError",
    "ParseFileError",
    "MarkupError",
    "MixedIndentationError",
    "UnterminatedInlineCodeError",
    "UnterminatedEscapeError",
    "UnclosedBracketError",
    "MismatchedEmphasisError",
    "TagMismatchError",
    "UnexpectedCloseTagError",
    "UnclosedTagError",
    "UnclosedRawTagError",
    "UnclosedFenceError",
    "UnresolvedLinkError",
    "NestingTooDeepError",
    "PositionOutOfRangeError",
    # Version
    "__version__",
]
