"""Inline tokenizer for emphasis, escapes, code spans, and links."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .constants import INLINE_MARKER_PATTERN, INLINE_TAG_PATTERN
from .context import ParseContext
from .exceptions import (
    MismatchedEmphasisError,
    UnclosedBracketError,
    UnterminatedEscapeError,
    UnterminatedInlineCodeError,
)
from .models import Emphasis, InlineState
from .render import close_tag, escape_code, escape_text, link, open_tag

_MARKERS = {Emphasis.BOLD: 2, Emphasis.ITALIC: 1, Emphasis.STRIKE: 2}


@dataclass(frozen=True)
class Placeholder:
    """A link or image whose destination is resolved after the whole parse.

    Attributes:
        label: Link label to look up.
        text: Display text, or alt text for images.
        image: Whether to render an image.
        offset: Source offset where the construct starts.
    """

    label: str
    text: str
    image: bool
    offset: int

    @property
    def fragment(self) -> str:
        """Markup shown when the label never gets a destination."""
        return escape_text(self.text)


def scan_inline(ctx: ParseContext, start: int, end: int) -> None:
    """Tokenize ``ctx.source[start:end]`` into the output buffer.

    Deferred links become placeholder fragments registered with the link
    table under their label.

    Args:
        ctx: Parse context receiving the fragments.
        start: Offset where the span starts.
        end: Offset where the span ends (exclusive).

    Raises:
        MarkupError: If the span contains malformed inline markup.
    """
    for item in iter_inline(ctx, start, end):
        if isinstance(item, Placeholder):
            index = ctx.out.append(item.fragment)
            ctx.links.reference(item.label, index, item.text, item.image, item.offset)
        else:
            ctx.out.append(item)


def iter_inline(ctx: ParseContext, start: int, end: int) -> Iterator[str | Placeholder]:
    """Yield HTML fragments and link placeholders for a span, left to right.

    Literal text is escaped. Emphasis toggles must close in reverse order of
    opening and must all be closed when the span ends.

    Args:
        ctx: Parse context providing the source and configuration.
        start: Offset where the span starts.
        end: Offset where the span ends (exclusive).

    Yields:
        str | Placeholder: Fragments in document order.

    Raises:
        UnterminatedInlineCodeError: If a backtick is never closed.
        UnterminatedEscapeError: If the span ends with a backslash.
        UnclosedBracketError: If a ``[`` has no matching ``]``.
        MismatchedEmphasisError: If toggles overlap or stay open.

    Examples:
        list(iter_inline(ctx, 0, len(ctx.source)))  # for "**_x_**": ["<b>", "<i>", "x", "</i>", "</b>"]
    """
    source = ctx.source
    state = InlineState()
    pos = start

    while True:
        match = INLINE_MARKER_PATTERN.search(source, pos, end)
        marker_at = match.start() if match else end
        if marker_at > pos:
            yield escape_text(source[pos:marker_at])
        if match is None:
            break

        marker = source[marker_at]
        following = source[marker_at + 1] if marker_at + 1 < end else ""

        if marker == "`":
            closing = source.find("`", marker_at + 1, end)
            if closing == -1:
                raise ctx.fail(UnterminatedInlineCodeError(marker_at))
            yield f"<code>{escape_code(source[marker_at + 1:closing])}</code>"
            pos = closing + 1
        elif marker == "\\":
            if not following:
                raise ctx.fail(UnterminatedEscapeError(marker_at))
            if following in "\r\n" and ctx.config.backslash_line_breaks:
                yield "<br>"
                pos = marker_at + 1
            else:
                yield escape_text(following)
                pos = marker_at + 2
        elif marker in "_*":
            if following == marker:
                yield _toggle(ctx, state, Emphasis.BOLD, marker_at)
                pos = marker_at + 2
            else:
                yield _toggle(ctx, state, Emphasis.ITALIC, marker_at)
                pos = marker_at + 1
        elif marker == "~":
            if following == "~":
                yield _toggle(ctx, state, Emphasis.STRIKE, marker_at)
                pos = marker_at + 2
            else:
                yield "~"
                pos = marker_at + 1
        elif marker == "!" and following != "[":
            yield "!"
            pos = marker_at + 1
        elif marker in "![":
            image = marker == "!"
            item, pos = _scan_link(ctx, marker_at + 1 if image else marker_at, end, image, marker_at)
            yield item
        else:
            tag = INLINE_TAG_PATTERN.match(source, marker_at, end)
            if tag and tag.group(1).lower() in ctx.inline_html_tags:
                yield tag.group(0)
                pos = tag.end()
            else:
                yield "&lt;"
                pos = marker_at + 1

    if state.open:
        style, offset = state.open[-1]
        raise ctx.fail(
            MismatchedEmphasisError(
                source[offset : offset + _MARKERS[style]],
                f"<{style.tag}> is never closed",
                offset,
            )
        )


def _toggle(ctx: ParseContext, state: InlineState, style: Emphasis, offset: int) -> str:
    if not state.is_open(style):
        state.open.append((style, offset))
        return open_tag(style.tag)

    innermost = state.innermost
    if innermost is not style:
        marker = ctx.source[offset : offset + _MARKERS[style]]
        raise ctx.fail(
            MismatchedEmphasisError(
                marker,
                f"closes <{style.tag}> while <{innermost.tag}> is still open",
                offset,
            )
        )
    state.open.pop()
    return close_tag(style.tag)


def _scan_link(
    ctx: ParseContext, bracket: int, end: int, image: bool, offset: int
) -> tuple[str | Placeholder, int]:
    """Scan ``[text](url)``, ``[text][label]`` or ``[label]`` at `bracket`.

    Returns:
        tuple[str | Placeholder, int]: Rendered link or a placeholder, and the
            offset just past the construct.
    """
    source = ctx.source
    closing = source.find("]", bracket + 1, end)
    if closing == -1:
        raise ctx.fail(UnclosedBracketError(bracket))
    text = source[bracket + 1 : closing]
    pos = closing + 1

    if pos < end and source[pos] == "(":
        paren = source.find(")", pos + 1, end)
        if paren != -1:
            return link(text, source[pos + 1 : paren].strip(), image), paren + 1

    if pos < end and source[pos] == "[":
        label_closing = source.find("]", pos + 1, end)
        if label_closing != -1:
            label = source[pos + 1 : label_closing] or text
            return Placeholder(label, text, image, offset), label_closing + 1

    return Placeholder(text, text, image, offset), pos
