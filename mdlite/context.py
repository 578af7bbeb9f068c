"""Per-call parsing state shared by the block and inline parsers."""

from __future__ import annotations

from contextlib import contextmanager
from functools import cached_property
from typing import Iterator

from .config import MdliteConfig
from .exceptions import MarkupError, NestingTooDeepError
from .models import ErrorRecord, LinkTable, OutputBuffer
from .position import PositionIndex, report


class ParseContext:
    """State owned by a single parse call.

    Every component receives the context explicitly; nothing here outlives
    the call, so independent parses never share state.

    Args:
        source: The complete document text. All offsets refer to it.
        config: Validated configuration.

    Attributes:
        out: Output fragments in document order.
        links: Link labels seen so far.
        errors: Errors recorded in collecting mode.
        depth: Current nesting depth of embedded markdown and HTML tags.
    """

    def __init__(self, source: str, config: MdliteConfig):
        self.source = source
        self.config = config
        self.out = OutputBuffer()
        self.links = LinkTable()
        self.errors: list[ErrorRecord] = []
        self.depth = 0
        self.inline_html_tags = frozenset(config.inline_html_tags)
        self.used_slugs: set[str] = set()
        self.slug_counters: dict[str, int] = {}

    @cached_property
    def positions(self) -> PositionIndex:
        """Position index, built on the first error only."""
        return PositionIndex(self.source)

    def fail(self, error: MarkupError) -> MarkupError:
        """Locate `error` in the source so it can be raised."""
        return error.locate(self.positions)

    def record(self, error: MarkupError) -> None:
        """Keep a located error for the collecting mode."""
        self.errors.append(
            report(self.source, error.offset, error.message, kind=error.kind, index=self.positions)
        )

    @contextmanager
    def nested(self, offset: int) -> Iterator[None]:
        """Enter one nesting level, failing beyond ``max_nesting_depth``."""
        if self.depth >= self.config.max_nesting_depth:
            raise self.fail(NestingTooDeepError(self.config.max_nesting_depth, offset))
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1
