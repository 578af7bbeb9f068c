from __future__ import annotations

import pytest

from mdlite import (
    MdliteConfig,
    MismatchedEmphasisError,
    UnclosedBracketError,
    UnterminatedEscapeError,
    UnterminatedInlineCodeError,
    markdown_to_html,
)
from mdlite.config import normalize_config
from mdlite.context import ParseContext
from mdlite.inline import Placeholder, iter_inline


def _paragraph(body: str) -> str:
    return f"<p>{body}</p>\n"


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("plain text", "plain text"),
        ("*italic* and _also_", "<i>italic</i> and <i>also</i>"),
        ("**bold** and __also__", "<b>bold</b> and <b>also</b>"),
        ("**_x_**", "<b><i>x</i></b>"),
        ("~~gone~~", "<strike>gone</strike>"),
        ("a ~ b", "a ~ b"),
        ("wow!", "wow!"),
        ("\\*not italic\\*", "*not italic*"),
        ("a \\\\ b", "a \\ b"),
        ("use `x*y` here", "use <code>x*y</code> here"),
        ("`<tag>`", "<code>&lt;tag&gt;</code>"),
        ("a < b & c > d", "a &lt; b &amp; c &gt; d"),
        ("&copy; 2024", "&copy; 2024"),
    ],
)
def test_inline_markup(source, expected):
    assert markdown_to_html(source) == _paragraph(expected)


def test_inline_link_and_image():
    assert markdown_to_html("[home](/)") == _paragraph('<a href="/">home</a>')
    assert markdown_to_html("![logo](logo.png)") == _paragraph(
        '<img src="logo.png" alt="logo">'
    )


def test_inline_link_destination_is_escaped():
    assert markdown_to_html('[q](/?a="b")') == _paragraph('<a href="/?a=&quot;b&quot;">q</a>')


def test_emphasis_inside_link_text_is_not_parsed():
    assert markdown_to_html("[*x*](/)") == _paragraph('<a href="/">*x*</a>')


def test_allowed_inline_html_passes_through():
    assert markdown_to_html("press <kbd>Ctrl</kbd>") == _paragraph("press <kbd>Ctrl</kbd>")


def test_other_inline_html_is_escaped():
    assert markdown_to_html("x <div> y") == _paragraph("x &lt;div&gt; y")


def test_inline_html_tags_are_configurable():
    config = MdliteConfig(inline_html_tags=("div",))

    assert markdown_to_html("x <div> <kbd>", config) == _paragraph("x <div> &lt;kbd&gt;")


def test_backslash_line_break_is_opt_in():
    source = "one\\\ntwo"

    assert markdown_to_html(source) == _paragraph("one\ntwo")
    config = MdliteConfig(backslash_line_breaks=True)
    assert markdown_to_html(source, config) == _paragraph("one<br>\ntwo")


def test_unterminated_inline_code():
    with pytest.raises(UnterminatedInlineCodeError) as excinfo:
        markdown_to_html("a `b")

    assert excinfo.value.offset == 2
    assert (excinfo.value.line, excinfo.value.column) == (1, 3)
    assert str(excinfo.value) == 'line 1, column 3: unfinished "`"'


def test_unterminated_escape():
    with pytest.raises(UnterminatedEscapeError) as excinfo:
        markdown_to_html("abc\\")

    assert excinfo.value.offset == 3


def test_unterminated_escape_at_end_of_block():
    with pytest.raises(UnterminatedEscapeError) as excinfo:
        markdown_to_html("abc\\\n\nnext")

    assert (excinfo.value.line, excinfo.value.column) == (1, 4)


def test_unclosed_bracket():
    with pytest.raises(UnclosedBracketError) as excinfo:
        markdown_to_html("see [docs")

    assert excinfo.value.offset == 4


def test_overlapping_emphasis_is_rejected():
    with pytest.raises(MismatchedEmphasisError) as excinfo:
        markdown_to_html("**_x**_")

    error = excinfo.value
    assert error.offset == 4
    assert error.marker == "**"
    assert error.message == "mismatched `**`: closes <b> while <i> is still open"


def test_unclosed_emphasis_is_rejected():
    with pytest.raises(MismatchedEmphasisError) as excinfo:
        markdown_to_html("plain\n\nsome *words")

    error = excinfo.value
    assert (error.line, error.column) == (3, 6)
    assert error.message == "mismatched `*`: <i> is never closed"


def test_emphasis_does_not_span_blocks():
    with pytest.raises(MismatchedEmphasisError):
        markdown_to_html("*one\n\ntwo*")


def test_iter_inline_yields_placeholders_for_labels():
    ctx = ParseContext("[text][label] and ![alt]", normalize_config(MdliteConfig()))

    items = list(iter_inline(ctx, 0, len(ctx.source)))

    assert items == [
        Placeholder("label", "text", False, 0),
        " and ",
        Placeholder("alt", "alt", True, 18),
    ]


def test_empty_label_falls_back_to_text():
    ctx = ParseContext("[text][]", normalize_config(MdliteConfig()))

    assert list(iter_inline(ctx, 0, len(ctx.source))) == [Placeholder("text", "text", False, 0)]


def test_placeholder_fragment_is_escaped_text():
    assert Placeholder("x", "a<b", False, 0).fragment == "a&lt;b"


@pytest.mark.parametrize(("source", "offset"), [("~~**x~~**", 5), ("_~~x_~~", 4)])
def test_strike_must_nest_with_emphasis(source, offset):
    with pytest.raises(MismatchedEmphasisError) as excinfo:
        markdown_to_html(source)

    assert excinfo.value.offset == offset


def test_strike_nests_inside_bold():
    assert markdown_to_html("**~~x~~**") == _paragraph("<b><strike>x</strike></b>")
