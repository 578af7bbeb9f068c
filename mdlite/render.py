"""HTML fragments emitted by the block and inline parsers."""

from __future__ import annotations

import html
import re

from .constants import ENTITY_PATTERN

_TEXT_SPECIALS = re.compile(r"[&<>]")


def escape_text(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` in literal text.

    Character references that are already well formed (``&amp;``, ``&#169;``)
    are kept as written.

    Examples:
        escape_text("a < b & c")  # "a &lt; b &amp; c"
        escape_text("&copy;")  # "&copy;"
    """

    def _replace(match: re.Match[str]) -> str:
        character = match.group(0)
        if character == "&" and ENTITY_PATTERN.match(text, match.start()):
            return "&"
        return {"&": "&amp;", "<": "&lt;", ">": "&gt;"}[character]

    return _TEXT_SPECIALS.sub(_replace, text)


def escape_code(text: str) -> str:
    return html.escape(text, quote=False)


def escape_attribute(value: str) -> str:
    return html.escape(value, quote=True)


def link(text: str, url: str, image: bool) -> str:
    """Render a link or an image.

    Args:
        text: Display text, or alt text for images. Unescaped.
        url: Destination. Unescaped.
        image: Render ``<img>`` instead of ``<a>``.

    Returns:
        str: The markup.

    Examples:
        link("logo", "logo.png", image=True)  # '<img src="logo.png" alt="logo">'
    """
    if image:
        return f'<img src="{escape_attribute(url)}" alt="{escape_attribute(text)}">'
    return f'<a href="{escape_attribute(url)}">{escape_text(text)}</a>'


def open_tag(name: str, **attributes: str) -> str:
    rendered = "".join(f' {key}="{escape_attribute(value)}"' for key, value in attributes.items())
    return f"<{name}{rendered}>"


def close_tag(name: str) -> str:
    return f"</{name}>"
