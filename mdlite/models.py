"""Data models for mdlite."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ParserState(Enum):
    """Block splitter states used while scanning fenced code.

    Attributes:
        NORMAL: Default state for regular blocks.
        IN_FENCED_CODE: Inside a fenced code block.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()


@dataclass
class FenceContext:
    """Track an open code fence while walking lines.

    Attributes:
        state: Current parser state.
        fence_char: Fence character that opened the block, if any.
        fence_length: Number of fence characters that opened the block.
        fence_indent_columns: Indentation width preceding the opening fence.
        info: Info string following the opening fence.
    """

    state: ParserState = ParserState.NORMAL
    fence_char: str | None = None
    fence_length: int = 0
    fence_indent_columns: int = 0
    info: str = ""


class Emphasis(Enum):
    """Inline styles toggled by paired markers, with their HTML tag names."""

    ITALIC = "i"
    BOLD = "b"
    STRIKE = "strike"

    @property
    def tag(self) -> str:
        return self.value


@dataclass
class InlineState:
    """Open emphasis toggles for one inline span, innermost last.

    Attributes:
        open: Open styles paired with the offset of their opening marker.
    """

    open: list[tuple[Emphasis, int]] = field(default_factory=list)

    def is_open(self, style: Emphasis) -> bool:
        return any(open_style is style for open_style, _ in self.open)

    @property
    def innermost(self) -> Emphasis | None:
        return self.open[-1][0] if self.open else None


class OutputBuffer:
    """Append-only, index-addressable sequence of HTML fragments.

    Placeholders for deferred links are ordinary fragments whose index is
    recorded so they can be replaced in place once the destination is known.

    Examples:
        out = OutputBuffer()
        slot = out.append("text")
        out[slot] = '<a href="/">text</a>'
    """

    def __init__(self) -> None:
        self._fragments: list[str] = []

    def append(self, fragment: str) -> int:
        """Append a fragment and return its index."""
        self._fragments.append(fragment)
        return len(self._fragments) - 1

    def extend(self, *fragments: str) -> None:
        self._fragments.extend(fragments)

    def __getitem__(self, index: int) -> str:
        return self._fragments[index]

    def __setitem__(self, index: int, fragment: str) -> None:
        self._fragments[index] = fragment

    def __len__(self) -> int:
        return len(self._fragments)

    def mark(self) -> int:
        """Return a position that `truncate` can roll back to."""
        return len(self._fragments)

    def truncate(self, mark: int) -> None:
        del self._fragments[mark:]

    def rendered_since(self, mark: int) -> str:
        return "".join(self._fragments[mark:])

    def render(self) -> str:
        return "".join(self._fragments)


@dataclass
class LinkReference:
    """A deferred link or image waiting for its destination.

    Attributes:
        index: Index of the placeholder fragment in the output buffer.
        text: Display text (or alt text for images), unescaped.
        image: Whether the reference renders as an image.
        offset: Source offset of the opening bracket.
    """

    index: int
    text: str
    image: bool
    offset: int


@dataclass
class LinkEntry:
    """Everything known about one link label.

    Attributes:
        destination: URL from the label's definition, if defined.
        references: Placeholders that point at this label, in document order.
    """

    destination: str | None = None
    references: list[LinkReference] = field(default_factory=list)


class LinkTable:
    """Link labels mapped to their definitions and references.

    Labels are case-sensitive. Definitions and references may arrive in any
    order; the last definition of a label wins.
    """

    def __init__(self) -> None:
        self._entries: dict[str, LinkEntry] = {}

    def entry(self, label: str) -> LinkEntry:
        """Return the entry for `label`, creating it on first mention."""
        entry = self._entries.get(label)
        if entry is None:
            entry = self._entries[label] = LinkEntry()
        return entry

    def define(self, label: str, destination: str) -> None:
        self.entry(label).destination = destination

    def reference(self, label: str, index: int, text: str, image: bool, offset: int) -> None:
        self.entry(label).references.append(LinkReference(index, text, image, offset))

    def discard_from(self, index: int) -> None:
        """Forget references whose placeholder index is `index` or later."""
        for entry in self._entries.values():
            entry.references = [ref for ref in entry.references if ref.index < index]

    def items(self):
        return self._entries.items()

    def __contains__(self, label: object) -> bool:
        return label in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class ErrorRecord:
    """A reported problem with its location.

    Attributes:
        message: Human-readable description.
        line: One-based line, or None when the location is unknown.
        column: One-based column, or None when the location is unknown.
        kind: Short name of the error condition, when known.
    """

    message: str
    line: int | None = None
    column: int | None = None
    kind: str | None = None

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}, column {self.column}: {self.message}"


@dataclass
class ParseResult:
    """Structured result of converting a document.

    Attributes:
        html: The rendered HTML.
        errors: Errors collected in collecting mode; always empty in the
            default fail-fast mode.
    """

    html: str
    errors: list[ErrorRecord] = field(default_factory=list)
