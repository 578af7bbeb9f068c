"""Indented blocks: bullet lists and indented code.

Indentation is compared by its literal whitespace prefix, never by width
alone, so a tab and four spaces are different indentation levels.
"""

from __future__ import annotations

from .constants import BULLET_PATTERN, INDENT_PATTERN
from .context import ParseContext
from .exceptions import MixedIndentationError, NestingTooDeepError
from .inline import scan_inline
from .position import iter_lines
from .render import escape_code


class IndentStack:
    """Whitespace prefixes of the enclosing indentation levels, outermost first.

    Args:
        base: Indentation of the first line of the block.

    Examples:
        stack = IndentStack("\\t")
        stack.place("\\t\\t", offset=10)  # 1, one level deeper
        stack.place("\\t", offset=20)  # -1, back to the outer level
    """

    def __init__(self, base: str):
        self.levels = [base]

    def __len__(self) -> int:
        return len(self.levels)

    def outdented(self, indent: str) -> bool:
        """Whether `indent` is shallower than the outermost level and compatible with it."""
        base = self.levels[0]
        return len(indent) < len(base) and base.startswith(indent)

    def place(self, indent: str, offset: int) -> int:
        """Fit `indent` into the stack.

        A deeper indent must extend the innermost prefix and opens a level.
        Otherwise levels are closed until one with exactly the same prefix is
        found.

        Args:
            indent: Leading whitespace of the line.
            offset: Offset of the line, for error reporting.

        Returns:
            int: ``1`` when a level was opened, ``0`` for the same level, or
                minus the number of levels closed.

        Raises:
            MixedIndentationError: If `indent` is inconsistent with the stack.
        """
        top = self.levels[-1]
        if len(indent) > len(top):
            if not indent.startswith(top):
                raise MixedIndentationError(offset)
            self.levels.append(indent)
            return 1

        for closed, level in enumerate(reversed(self.levels)):
            if len(indent) > len(level):
                break
            if len(indent) == len(level):
                if indent != level:
                    break
                del self.levels[len(self.levels) - closed :]
                return -closed
        raise MixedIndentationError(offset)


def render_indented_block(ctx: ParseContext, start: int, end: int) -> None:
    """Render a block whose first line is indented.

    A block starting with a bullet (``*``, ``+`` or ``-``) becomes a list,
    anything else an indented code block.

    Raises:
        MixedIndentationError: If indentation mixes incompatible whitespace.
    """
    if BULLET_PATTERN.match(ctx.source, start, end):
        _render_list(ctx, start, end)
    else:
        _render_code(ctx, start, end)


def _render_list(ctx: ParseContext, start: int, end: int) -> None:
    source = ctx.source
    stack: IndentStack | None = None
    item_start = item_end = start

    for line_start, line_stop in iter_lines(source, start, end):
        bullet = BULLET_PATTERN.match(source, line_start, line_stop)
        if bullet is None:
            # Lazy continuation of the current item
            item_end = line_stop
            continue

        indent = bullet.group(1)
        if stack is None:
            stack = IndentStack(indent)
            ctx.out.append("<ul>\n<li>")
        else:
            scan_inline(ctx, item_start, item_end)
            if stack.outdented(indent):
                # A bullet left of the first one starts a new list
                ctx.out.extend(*["</li>\n</ul>\n"] * len(stack))
                ctx.out.append("<ul>\n<li>")
                stack = IndentStack(indent)
            else:
                change = stack.place(indent, line_start)
                if change > 0:
                    if ctx.depth + len(stack) > ctx.config.max_nesting_depth:
                        raise NestingTooDeepError(ctx.config.max_nesting_depth, line_start)
                    ctx.out.append("\n<ul>\n<li>")
                else:
                    ctx.out.extend(*["</li>\n</ul>\n"] * -change)
                    ctx.out.append("</li>\n<li>")
        item_start, item_end = bullet.end(), line_stop

    scan_inline(ctx, item_start, item_end)
    ctx.out.extend(*["</li>\n</ul>\n"] * len(stack))


def _render_code(ctx: ParseContext, start: int, end: int) -> None:
    source = ctx.source
    base = INDENT_PATTERN.match(source, start, end).group(0)
    lines = []

    for line_start, line_stop in iter_lines(source, start, end):
        indent_end = INDENT_PATTERN.match(source, line_start, line_stop).end()
        if indent_end == line_stop:
            lines.append("")
            continue
        indent = source[line_start:indent_end]
        if indent.startswith(base):
            lines.append(source[line_start + len(base) : line_stop])
        elif base.startswith(indent):
            lines.append(source[indent_end:line_stop])
        else:
            raise MixedIndentationError(line_start)

    code = escape_code("\n".join(lines))
    ctx.out.append(f"<pre><code>{code}</code></pre>\n")
