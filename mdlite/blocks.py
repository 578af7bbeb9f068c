"""Block splitter: blank-line separated blocks, HTML islands, and fenced code."""

from __future__ import annotations

import html
import re
from collections.abc import Callable

from .constants import (
    BLANK_LINE_PATTERN,
    BLOCK_BREAK_PATTERN,
    CLOSING_FENCE_MAX_INDENT,
    CODE_FENCE_PATTERN,
    FENCE_INFO_PATTERN,
    HEADING_PATTERN,
    HTML_BLOCK_START_PATTERN,
    HTML_COMMENT_END,
    HTML_COMMENT_START,
    HTML_TAG_PATTERN,
    INDENT_PATTERN,
    LINE_BREAK_PATTERN,
    LINK_DEFINITION_PATTERN,
    QUOTE_PATTERN,
    THEMATIC_BREAK_PATTERN,
    TRAILING_BLANK_PATTERN,
)
from .context import ParseContext
from .exceptions import MarkupError, UnclosedFenceError
from .html_block import consume_html_block
from .indent import render_indented_block
from .inline import scan_inline
from .models import FenceContext, ParserState
from .position import line_end, next_line
from .render import close_tag, escape_code, escape_text, open_tag
from .slugify import unique_slug

_TAG_PATTERN = re.compile(r"<[^>]*>")
_BLANK_REST_PATTERN = re.compile(r"[\t ]*\Z")
_FINAL_LINE_BREAK_PATTERN = re.compile(r"(?:\r\n|\r|\n)\Z")

Consumer = Callable[[ParseContext, int, int], int]


def split_blocks(ctx: ParseContext, start: int, end: int) -> None:
    """Render ``ctx.source[start:end]`` block by block.

    Blocks are separated by blank lines. A block starting with an HTML tag
    runs until the HTML block validator finds its tags balanced again; a
    fenced code block runs until its closing fence. Everything else is
    classified by its leading syntax.

    Args:
        ctx: Parse context receiving the output.
        start: Offset where the text starts.
        end: Offset where the text ends (exclusive).

    Raises:
        MarkupError: On the first malformed construct, unless the context
            collects errors.
    """
    source = ctx.source
    pos = start

    while pos < end:
        pos = _skip_blank_lines(source, pos, end)
        if _BLANK_REST_PATTERN.match(source, pos, end):
            break

        if HTML_BLOCK_START_PATTERN.match(source, pos, end) and HTML_TAG_PATTERN.match(
            source, pos, end
        ):
            pos = _run_block(ctx, pos, end, consume_html_block)
            # Text after the closing tag on the same line starts a new block
            pos = INDENT_PATTERN.match(source, pos, end).end()
            continue

        if source.startswith(HTML_COMMENT_START, pos, end):
            comment_end = source.find(HTML_COMMENT_END, pos + len(HTML_COMMENT_START), end)
            if comment_end != -1:
                comment_end += len(HTML_COMMENT_END)
                ctx.out.append(source[pos:comment_end] + "\n")
                pos = INDENT_PATTERN.match(source, comment_end, end).end()
                continue

        if _opens_fence(source, pos, end):
            pos = _run_block(ctx, pos, end, _consume_fenced_code)
            continue

        pos = _run_block(ctx, pos, end, _consume_block)


def _skip_blank_lines(source: str, pos: int, end: int) -> int:
    while True:
        match = BLANK_LINE_PATTERN.match(source, pos, end)
        if match is None:
            return pos
        pos = match.end()


def _block_bounds(source: str, pos: int, end: int) -> tuple[int, int]:
    """Return where the block containing `pos` ends and where the next one may start."""
    match = BLOCK_BREAK_PATTERN.search(source, pos, end)
    if match:
        return match.start(), match.end()
    trailing = TRAILING_BLANK_PATTERN.search(source, pos, end)
    return (trailing.start() if trailing else end), end


def _run_block(ctx: ParseContext, start: int, end: int, consume: Consumer) -> int:
    """Run one block consumer, recovering in collecting mode.

    In collecting mode a failed block's output is discarded and replaced by
    its escaped source text; parsing resumes at the next blank line after
    the error.
    """
    mark = ctx.out.mark()
    try:
        return consume(ctx, start, end)
    except MarkupError as error:
        if not ctx.config.collect_errors:
            raise
        ctx.record(error)
        ctx.out.truncate(mark)
        ctx.links.discard_from(mark)
        failed_at = end if error.offset is None else max(error.offset, start)
        block_end, resume = _block_bounds(ctx.source, failed_at, end)
        ctx.out.append(f"<p>{escape_text(ctx.source[start:block_end])}</p>\n")
        return resume


def _consume_block(ctx: ParseContext, start: int, end: int) -> int:
    block_end, resume = _block_bounds(ctx.source, start, end)
    classify_block(ctx, start, block_end)
    return resume


def classify_block(ctx: ParseContext, start: int, end: int) -> None:
    """Render one blank-line delimited block according to its leading syntax.

    ``#`` starts a heading (level = number of hashes), ``>`` a quote,
    ``[label]: url`` a link definition, a line of dashes a horizontal rule,
    and leading whitespace an indented block. Anything else is a paragraph.

    Args:
        ctx: Parse context receiving the output.
        start: Offset where the block starts.
        end: Offset where the block ends (exclusive), before its line break.
    """
    source = ctx.source

    if source[start] in " \t":
        render_indented_block(ctx, start, end)
        return

    heading = HEADING_PATTERN.match(source, start, end)
    if heading:
        _render_heading(ctx, len(heading.group(1)), heading.end(), end)
        return

    quote = QUOTE_PATTERN.match(source, start, end)
    if quote:
        ctx.out.append("<blockquote>")
        scan_inline(ctx, quote.end(), end)
        ctx.out.append("</blockquote>\n")
        return

    if _define_links(ctx, start, end):
        return

    if THEMATIC_BREAK_PATTERN.match(source, start, end):
        ctx.out.append("<hr>\n")
        return

    ctx.out.append("<p>")
    scan_inline(ctx, start, end)
    ctx.out.append("</p>\n")


def _render_heading(ctx: ParseContext, level: int, start: int, end: int) -> None:
    if ctx.config.max_heading_level is not None:
        level = min(level, ctx.config.max_heading_level)
    tag = f"h{level}"
    end = start + len(ctx.source[start:end].rstrip())

    opening = ctx.out.append(open_tag(tag))
    mark = ctx.out.mark()
    scan_inline(ctx, start, end)
    if ctx.config.heading_ids:
        title = html.unescape(_TAG_PATTERN.sub("", ctx.out.rendered_since(mark)))
        slug = unique_slug(
            title, ctx.used_slugs, ctx.slug_counters, preserve_unicode=ctx.config.preserve_unicode
        )
        ctx.out[opening] = open_tag(tag, id=slug)
    ctx.out.append(close_tag(tag) + "\n")


def _define_links(ctx: ParseContext, start: int, end: int) -> bool:
    """Record ``[label]: url`` definitions; return False when the block is not one.

    A block whose every line is a definition defines each of them; otherwise
    everything after the first ``]:`` is the destination.
    """
    source = ctx.source
    match = LINK_DEFINITION_PATTERN.match(source, start, end)
    if match is None:
        return False

    lines = LINE_BREAK_PATTERN.split(source[start:end])
    definitions = [LINK_DEFINITION_PATTERN.fullmatch(line) for line in lines]
    if len(lines) > 1 and all(definitions):
        for definition in definitions:
            ctx.links.define(definition.group(1), definition.group(2).strip())
    else:
        ctx.links.define(match.group(1), match.group(2).strip())
    return True


def _leading_whitespace_columns(line: str) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of four columns.

    Examples:
        _leading_whitespace_columns("  ```")  # 2
        _leading_whitespace_columns("\\t```")  # 4
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += 4 - (columns % 4)
            continue
        break
    return columns


def _try_open_fence(ctx: FenceContext, line: str) -> bool:
    """Detect the start of a fenced code block.

    Args:
        ctx: Fence context to update when a fence opens.
        line: Line being scanned, without its line break.

    Returns:
        bool: True when the line begins a fence and the context is updated.

    Examples:
        _try_open_fence(FenceContext(), "```python")  # True
    """
    if ctx.state is not ParserState.NORMAL:
        return False

    fence_match = CODE_FENCE_PATTERN.fullmatch(line)
    if not fence_match:
        return False

    indent_columns = _leading_whitespace_columns(fence_match.group("indent"))
    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    fence_sequence = fence_match.group("fence")
    if fence_sequence[0] == "`" and "`" in fence_match.group("info"):
        return False

    ctx.state = ParserState.IN_FENCED_CODE
    ctx.fence_char = fence_sequence[0]
    ctx.fence_length = len(fence_sequence)
    ctx.fence_indent_columns = indent_columns
    ctx.info = fence_match.group("info").strip()
    return True


def _try_close_fence(ctx: FenceContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    Args:
        ctx: Fence context describing the active fence.
        line: Line being scanned, without its line break.

    Returns:
        bool: True when the line closes the fence; otherwise False.

    Examples:
        ctx = FenceContext(state=ParserState.IN_FENCED_CODE, fence_char="`", fence_length=3)
        _try_close_fence(ctx, "```")  # True
    """
    if ctx.state is not ParserState.IN_FENCED_CODE or ctx.fence_char is None:
        return False

    indent_columns = _leading_whitespace_columns(line)
    stripped_line = line.lstrip(" \t")
    if not stripped_line or stripped_line[0] != ctx.fence_char:
        return False

    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    if stripped_line[fence_run_length:].strip():
        return False

    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    ctx.state = ParserState.NORMAL
    ctx.fence_char = None
    ctx.fence_length = 0
    ctx.fence_indent_columns = 0
    ctx.info = ""
    return True


def _opens_fence(source: str, pos: int, end: int) -> bool:
    return _try_open_fence(FenceContext(), source[pos : line_end(source, pos, end)])


def _consume_fenced_code(ctx: ParseContext, start: int, end: int) -> int:
    """Render a fenced code block starting at `start` and return the offset after it.

    Raises:
        UnclosedFenceError: If no closing fence follows.
    """
    source = ctx.source
    fence = FenceContext()
    stop = line_end(source, start, end)
    _try_open_fence(fence, source[start:stop])
    opening = fence.fence_char * fence.fence_length
    indent_columns = fence.fence_indent_columns
    language = FENCE_INFO_PATTERN.match(fence.info)

    body_start = pos = next_line(source, stop, end)
    while pos < end:
        stop = line_end(source, pos, end)
        if _try_close_fence(fence, source[pos:stop]):
            body = _FINAL_LINE_BREAK_PATTERN.sub("", source[body_start:pos])
            lines = [_dedent(line, indent_columns) for line in LINE_BREAK_PATTERN.split(body)]
            attributes = {"class": f"language-{language.group(1)}"} if language else {}
            ctx.out.append(
                open_tag("pre")
                + open_tag("code", **attributes)
                + escape_code("\n".join(lines) if body else "")
                + "</code></pre>\n"
            )
            return next_line(source, stop, end)
        pos = next_line(source, stop, end)

    raise ctx.fail(UnclosedFenceError(opening, start))


def _dedent(line: str, columns: int) -> str:
    """Remove up to `columns` leading spaces from a fenced code line."""
    removed = 0
    while removed < columns and removed < len(line) and line[removed] == " ":
        removed += 1
    return line[removed:]
