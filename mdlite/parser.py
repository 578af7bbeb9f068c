"""Parse orchestration: run the block splitter, then resolve deferred links."""

from __future__ import annotations

import logging
from pathlib import Path

from .blocks import split_blocks
from .config import ConfigError, MdliteConfig, normalize_config, validate_config
from .context import ParseContext
from .exceptions import MarkupError, UnresolvedLinkError
from .filesystem import read_document
from .models import ParseResult
from .render import link

logger = logging.getLogger(__name__)


def parse_markdown(content: str, config: MdliteConfig | None = None) -> ParseResult:
    """Convert markup to HTML.

    Blocks are rendered in one pass; links whose label is defined later in
    the document are back-patched into their placeholders once the whole
    text has been seen.

    Args:
        content: The document text.
        config: Configuration controlling parsing behavior. Defaults to a new
            `MdliteConfig` when omitted.

    Returns:
        ParseResult: The HTML and, in collecting mode, the errors found.

    Raises:
        ConfigError: If the configuration fails validation.
        MarkupError: On the first malformed construct, located by line and
            column, unless ``config.collect_errors`` is set.

    Examples:
        parse_markdown("# Title\\n\\nSee [docs].\\n\\n[docs]: /docs\\n").html
    """
    config = normalize_config(config or MdliteConfig())
    validate_config(config)

    ctx = ParseContext(content, config)
    logger.debug("Parsing %d characters", len(content))
    try:
        split_blocks(ctx, 0, len(content))
        resolve_links(ctx)
    except MarkupError as error:
        ctx.fail(error)
        raise

    if ctx.errors:
        logger.warning("Collected %d markup error(s)", len(ctx.errors))
    logger.debug("Rendered %d fragments, %d link label(s)", len(ctx.out), len(ctx.links))
    return ParseResult(html=ctx.out.render(), errors=ctx.errors)


def markdown_to_html(content: str, config: MdliteConfig | None = None) -> str:
    """Convert markup to HTML, returning only the HTML."""
    return parse_markdown(content, config).html


def resolve_links(ctx: ParseContext) -> None:
    """Replace link placeholders whose label has a destination.

    Placeholders of undefined labels keep their plain display text, or raise
    `UnresolvedLinkError` when ``strict_links`` is set.
    """
    for label, entry in ctx.links.items():
        if not entry.references:
            continue
        if entry.destination is None:
            if ctx.config.strict_links:
                error = ctx.fail(UnresolvedLinkError(label, entry.references[0].offset))
                if not ctx.config.collect_errors:
                    raise error
                ctx.record(error)
            logger.debug("Link label %r is never defined", label)
            continue
        for reference in entry.references:
            ctx.out[reference.index] = link(reference.text, entry.destination, reference.image)


class ParseFileError(Exception):
    """Raised when converting a file fails."""


def parse_file(filepath: Path, config: MdliteConfig | None = None) -> ParseResult:
    """Read a UTF-8 file and convert it.

    Args:
        filepath: Path to the document.
        config: Configuration controlling parsing behavior; defaults to a new
            `MdliteConfig` when omitted.

    Returns:
        ParseResult: The HTML and any collected errors.

    Raises:
        ParseFileError: If configuration is invalid, the file cannot be read,
            is larger than ``config.max_file_size`` or is not UTF-8, or the
            markup is malformed. Markup errors are reported as
            ``path:line:column: message``.

    Examples:
        result = parse_file(Path("README.md"))
    """
    config = config or MdliteConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise ParseFileError(str(error)) from error

    try:
        content = read_document(filepath, config.max_file_size)
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ParseFileError(error_message) from error
    except IOError as error:
        raise ParseFileError(str(error)) from error

    try:
        return parse_markdown(content, config)
    except MarkupError as error:
        raise ParseFileError(format_error(filepath, error)) from error


def format_error(filepath: Path | str, error: MarkupError) -> str:
    """Format a located error as ``path:line:column: message``."""
    if error.line is None:
        return f"{filepath}: {error.message} at eof"
    return f"{filepath}:{error.line}:{error.column}: {error.message}"
