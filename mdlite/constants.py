"""Constants used across the mdlite package."""

from __future__ import annotations

import re

# Inline scanning
INLINE_MARKER_PATTERN = re.compile(r"[\\_*`~!\[<]")
INLINE_TAG_PATTERN = re.compile(r"</?([A-Za-z][\w-]*)(?:\s[^<>]*)?/?>")
ENTITY_PATTERN = re.compile(r"&(?:#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")

# Block splitting
BLANK_LINE_PATTERN = re.compile(r"[\t ]*(?:\r\n|\r|\n)")
BLOCK_BREAK_PATTERN = re.compile(r"(?:\r\n|\r|\n)[\t ]*(?:\r\n|\r|\n)")
TRAILING_BLANK_PATTERN = re.compile(r"(?:\r\n|\r|\n)[\t ]*\Z")
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")
HTML_BLOCK_START_PATTERN = re.compile(r"</?[A-Za-z]")
HEADING_PATTERN = re.compile(r"(#+)[\t ]*", re.DOTALL)
QUOTE_PATTERN = re.compile(r">[\t ]*")
LINK_DEFINITION_PATTERN = re.compile(r"\[([^\]\r\n]*)\]:[\t ]*(.*)", re.DOTALL)
THEMATIC_BREAK_PATTERN = re.compile(r"-{3,}[\t ]*\Z")
CODE_FENCE_PATTERN = re.compile(r"(?P<indent>[ \t]{0,3})(?P<fence>`{3,}|~{3,})(?P<info>[^\r\n]*)")
CLOSING_FENCE_MAX_INDENT = 3
FENCE_INFO_PATTERN = re.compile(r"\{?\.?([\w+#-]+)")

# Indented blocks
INDENT_PATTERN = re.compile(r"[\t ]*")
BULLET_PATTERN = re.compile(r"([\t ]*)[*+-][\t ]+")

# HTML blocks
HTML_TAG_PATTERN = re.compile(r"<(/?)([A-Za-z][\w-]*)([^>]*)>")
HTML_COMMENT_START = "<!--"
HTML_COMMENT_END = "-->"
EMBEDDED_MARKDOWN_PATTERN = re.compile(r"[\t ]*(?:\r\n|\r|\n)[\t ]*(?:\r\n|\r|\n)")
TRAILING_INDENT_PATTERN = re.compile(r"[\t ]*\Z")

SELF_CLOSING_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
RAW_TEXT_TAGS = frozenset({"script", "style"})
# Content of these tags is never treated as embedded markdown
VERBATIM_TAGS = frozenset({"pre"})

DEFAULT_INLINE_HTML_TAGS = (
    "a",
    "abbr",
    "b",
    "br",
    "cite",
    "code",
    "del",
    "em",
    "i",
    "img",
    "ins",
    "kbd",
    "mark",
    "q",
    "s",
    "samp",
    "small",
    "span",
    "strike",
    "strong",
    "sub",
    "sup",
    "u",
    "var",
)

# Limits
DEFAULT_MAX_NESTING_DEPTH = 64
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

