"""Source position lookup and located error records."""

from __future__ import annotations

from bisect import bisect_right
from typing import Iterator

from .constants import LINE_BREAK_PATTERN
from .exceptions import PositionOutOfRangeError
from .models import ErrorRecord


def line_end(text: str, pos: int, end: int) -> int:
    """Return the offset of the line break ending the line at `pos`, or `end`."""
    match = LINE_BREAK_PATTERN.search(text, pos, end)
    return match.start() if match else end


def next_line(text: str, pos: int, end: int) -> int:
    """Return the offset just past the line break at `pos`, or `end`."""
    match = LINE_BREAK_PATTERN.match(text, pos, end)
    return match.end() if match else end


def iter_lines(text: str, start: int, end: int) -> Iterator[tuple[int, int]]:
    """Yield ``(line_start, line_end)`` for each line of ``text[start:end]``.

    Line ends exclude the line break itself.
    """
    pos = start
    while pos < end:
        stop = line_end(text, pos, end)
        yield pos, stop
        if stop == end:
            break
        pos = next_line(text, stop, end)


class PositionIndex:
    """Map offsets in a text to one-based line and column numbers.

    Line starts are collected once; each lookup is a binary search over them.
    ``\\n``, ``\\r\\n`` and a lone ``\\r`` all end a line.

    Args:
        text: The text to index.

    Examples:
        PositionIndex("ab\\ncd").lookup(3)  # (2, 1)
    """

    def __init__(self, text: str):
        self.length = len(text)
        starts = [0]
        i = 0
        while i < self.length:
            character = text[i]
            if character == "\n":
                starts.append(i + 1)
            elif character == "\r":
                if i + 1 < self.length and text[i + 1] == "\n":
                    i += 1
                starts.append(i + 1)
            i += 1
        # Sentinel just past the end of text, never a line of its own
        starts.append(self.length + 1)
        self._starts = tuple(starts)

    @property
    def line_count(self) -> int:
        return len(self._starts) - 1

    def lookup(self, offset: int) -> tuple[int, int]:
        """Return the ``(line, column)`` of a zero-based offset.

        Args:
            offset: Offset in ``[0, len(text)]``; ``len(text)`` denotes end of input.

        Returns:
            tuple[int, int]: One-based line and column.

        Raises:
            PositionOutOfRangeError: If `offset` lies outside the text.
        """
        if offset < 0 or offset > self.length:
            raise PositionOutOfRangeError(offset, self.length)
        line = bisect_right(self._starts, offset, 0, len(self._starts) - 1)
        return line, offset - self._starts[line - 1] + 1


def report(
    text: str | None,
    offset: int | None,
    message: str,
    kind: str | None = None,
    index: PositionIndex | None = None,
) -> ErrorRecord:
    """Build a located error record.

    Args:
        text: Source the offset refers to, or None when unknown.
        offset: Zero-based offset of the problem, or None for end of input.
        message: Description of the problem.
        kind: Optional short name of the error condition.
        index: Position index already built for `text`, reused when given.

    Returns:
        ErrorRecord: Record with line and column when both `text` and `offset`
            are known, a message suffixed with ``"at eof"`` when only `text` is
            known, and a bare message otherwise.

    Examples:
        report("a\\nb", 2, "oops")  # ErrorRecord(message="oops", line=2, column=1)
    """
    if text is None:
        return ErrorRecord(message=message, kind=kind)
    if offset is None:
        return ErrorRecord(message=f"{message} at eof", kind=kind)
    if index is None:
        index = PositionIndex(text)
    line, column = index.lookup(offset)
    return ErrorRecord(message=message, line=line, column=column, kind=kind)
