"""Validating parser for HTML islands between markdown blocks."""

from __future__ import annotations

import re

from .constants import (
    EMBEDDED_MARKDOWN_PATTERN,
    HTML_COMMENT_END,
    HTML_COMMENT_START,
    HTML_TAG_PATTERN,
    RAW_TEXT_TAGS,
    SELF_CLOSING_TAGS,
    TRAILING_INDENT_PATTERN,
    VERBATIM_TAGS,
)
from .context import ParseContext
from .exceptions import (
    NestingTooDeepError,
    TagMismatchError,
    UnclosedRawTagError,
    UnclosedTagError,
    UnexpectedCloseTagError,
)


def consume_html_block(ctx: ParseContext, start: int, end: int) -> int:
    """Copy an HTML block to the output while validating tag nesting.

    The block starts at the tag found at `start` and ends as soon as every
    tag opened inside it is closed again. Text between two tags that begins
    with a blank line is parsed as embedded markdown; any other text is
    copied verbatim. ``<script>`` and ``<style>`` bodies are never parsed.

    Args:
        ctx: Parse context receiving the output.
        start: Offset of the opening ``<`` of the first tag.
        end: Offset where the enclosing text ends (exclusive).

    Returns:
        int: Offset just past the tag that closed the block.

    Raises:
        TagMismatchError: If a closing tag does not match the innermost open tag.
        UnexpectedCloseTagError: If a closing tag appears with no tag open.
        UnclosedRawTagError: If a raw text tag is never closed.
        UnclosedTagError: If the text ends with tags still open.
        NestingTooDeepError: If tags nest deeper than ``max_nesting_depth``.

    Examples:
        consume_html_block(ctx, 0, len(ctx.source))  # for "<p>x</p> tail": 8
    """
    source = ctx.source
    open_tags: list[tuple[str, int]] = []
    pos = start

    while True:
        match = _next_tag(source, pos, end)
        if match is None:
            if open_tags:
                name, offset = open_tags[-1]
                raise ctx.fail(UnclosedTagError(name, offset))
            ctx.out.append(source[pos:end])
            pos = end
            break

        closing, name, attributes = match.groups()
        name = name.lower()
        if closing:
            if not open_tags:
                raise ctx.fail(UnexpectedCloseTagError(name, match.start()))
            expected = open_tags[-1][0]
            if name != expected:
                raise ctx.fail(TagMismatchError(expected, name, match.start()))

        _emit_between(ctx, pos, match.start(), open_tags)
        ctx.out.append(match.group(0))
        pos = match.end()

        if closing:
            open_tags.pop()
        elif name in RAW_TEXT_TAGS:
            raw_end = re.compile(rf"</{name}\s*>", re.IGNORECASE).search(source, pos, end)
            if raw_end is None:
                raise ctx.fail(UnclosedRawTagError(name, match.start()))
            ctx.out.append(source[pos : raw_end.end()])
            pos = raw_end.end()
        elif name not in SELF_CLOSING_TAGS and not attributes.rstrip().endswith("/"):
            if ctx.depth + len(open_tags) >= ctx.config.max_nesting_depth:
                raise ctx.fail(NestingTooDeepError(ctx.config.max_nesting_depth, match.start()))
            open_tags.append((name, match.start()))

        if not open_tags:
            break

    ctx.out.append("\n")
    return pos


def _next_tag(source: str, pos: int, end: int) -> re.Match[str] | None:
    """Find the next tag at or after `pos`, skipping over HTML comments."""
    while True:
        match = HTML_TAG_PATTERN.search(source, pos, end)
        if match is None:
            return None
        comment = source.find(HTML_COMMENT_START, pos, match.start())
        if comment == -1:
            return match
        comment_end = source.find(HTML_COMMENT_END, comment + len(HTML_COMMENT_START), end)
        if comment_end == -1:
            return None
        pos = comment_end + len(HTML_COMMENT_END)


def _emit_between(ctx: ParseContext, start: int, end: int, open_tags: list[tuple[str, int]]) -> None:
    """Output the text between two tags, as embedded markdown when it starts with a blank line."""
    if start >= end:
        return

    source = ctx.source
    innermost = open_tags[-1][0] if open_tags else None
    if innermost in VERBATIM_TAGS or not EMBEDDED_MARKDOWN_PATTERN.match(source, start, end):
        ctx.out.append(source[start:end])
        return

    from .blocks import split_blocks

    # Indentation in front of the next tag belongs to the tag, not the markdown
    body_end = TRAILING_INDENT_PATTERN.search(source, start, end).start()
    ctx.out.append("\n")
    with ctx.nested(start):
        split_blocks(ctx, start, body_end)
    ctx.out.append(source[body_end:end])
