from __future__ import annotations

import pytest

from mdlite import MdliteConfig, UnclosedFenceError, markdown_to_html
from mdlite.blocks import _leading_whitespace_columns, _try_close_fence, _try_open_fence
from mdlite.models import FenceContext, ParserState


def test_paragraph():
    assert markdown_to_html("hello world") == "<p>hello world</p>\n"


def test_blank_lines_separate_paragraphs():
    assert markdown_to_html("\n\none\ntwo\n\n\n \nthree\n") == "<p>one\ntwo</p>\n<p>three</p>\n"


def test_crlf_blank_lines_separate_blocks():
    assert markdown_to_html("one\r\n\r\ntwo") == "<p>one</p>\n<p>two</p>\n"


def test_empty_and_blank_documents():
    assert markdown_to_html("") == ""
    assert markdown_to_html(" \n\t\n  ") == ""


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("# Title", "<h1>Title</h1>\n"),
        ("### Title", "<h3>Title</h3>\n"),
        ("##No space", "<h2>No space</h2>\n"),
        ("## Trailing   ", "<h2>Trailing</h2>\n"),
        ("####### Deep", "<h7>Deep</h7>\n"),
        ("# With *style*", "<h1>With <i>style</i></h1>\n"),
    ],
)
def test_headings(source, expected):
    assert markdown_to_html(source) == expected


def test_heading_level_can_be_clamped():
    config = MdliteConfig(max_heading_level=6)

    assert markdown_to_html("####### Deep", config) == "<h6>Deep</h6>\n"
    assert markdown_to_html("## Shallow", config) == "<h2>Shallow</h2>\n"


def test_quote():
    assert markdown_to_html("> here's a __quote__") == (
        "<blockquote>here's a <b>quote</b></blockquote>\n"
    )


def test_horizontal_rule():
    assert markdown_to_html("above\n\n---\n\nbelow") == "<p>above</p>\n<hr>\n<p>below</p>\n"


def test_short_dash_run_is_a_paragraph():
    assert markdown_to_html("--") == "<p>--</p>\n"


def test_link_definition_produces_no_output():
    assert markdown_to_html("[x]: /somewhere") == ""


def test_link_definition_before_reference():
    source = "[x]: url\n\n[a][x]"

    assert markdown_to_html(source) == '<p><a href="url">a</a></p>\n'


def test_link_definition_after_reference():
    source = "[a][x]\n\n[x]: url"

    assert markdown_to_html(source) == '<p><a href="url">a</a></p>\n'


def test_every_reference_to_a_label_is_resolved():
    source = "[one][x] and [two][x]\n\n[x]: /x"

    assert markdown_to_html(source) == '<p><a href="/x">one</a> and <a href="/x">two</a></p>\n'


def test_image_reference():
    source = "![alt][pic]\n\n[pic]: img.png"

    assert markdown_to_html(source) == '<p><img src="img.png" alt="alt"></p>\n'


def test_bare_label_reference():
    assert markdown_to_html("see [docs]\n\n[docs]: /docs") == (
        '<p>see <a href="/docs">docs</a></p>\n'
    )


def test_undefined_label_renders_text():
    assert markdown_to_html("[x]") == "<p>x</p>\n"


def test_last_definition_wins():
    source = "[x]: /first\n\n[a][x]\n\n[x]: /second"

    assert markdown_to_html(source) == '<p><a href="/second">a</a></p>\n'


def test_multiple_definitions_in_one_block():
    source = "[a] [b]\n\n[a]: /a\n[b]: /b"

    assert markdown_to_html(source) == '<p><a href="/a">a</a> <a href="/b">b</a></p>\n'


def test_fenced_code_with_language():
    source = "```python\nprint(1 < 2)\n```"

    assert markdown_to_html(source) == (
        '<pre><code class="language-python">print(1 &lt; 2)</code></pre>\n'
    )


def test_fenced_code_keeps_blank_lines_and_markup():
    source = "```\na *b*\n\n# c\n```\nafter"

    assert markdown_to_html(source) == "<pre><code>a *b*\n\n# c</code></pre>\n<p>after</p>\n"


def test_tilde_fence_with_braced_info():
    assert markdown_to_html("~~~{.lua}\nx = 1\n~~~") == (
        '<pre><code class="language-lua">x = 1</code></pre>\n'
    )


def test_fence_content_is_dedented_by_fence_indent():
    source = "  ```\n    indented\n  ```"

    assert markdown_to_html(source) == "<pre><code>  indented</code></pre>\n"


def test_empty_fence():
    assert markdown_to_html("```\n```") == "<pre><code></code></pre>\n"


def test_unclosed_fence():
    with pytest.raises(UnclosedFenceError) as excinfo:
        markdown_to_html("text\n\n```\ncode")

    assert excinfo.value.offset == 6
    assert (excinfo.value.line, excinfo.value.column) == (3, 1)
    assert excinfo.value.message == "code fence ``` not closed"


def test_html_comment_is_copied():
    assert markdown_to_html("<!-- note -->\n\ntext") == "<!-- note -->\n<p>text</p>\n"


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("```", 0),
        ("  ```", 2),
        ("\t```", 4),
        (" \t```", 4),
    ],
)
def test_leading_whitespace_columns(line, expected):
    assert _leading_whitespace_columns(line) == expected


def test_open_fence_records_info():
    ctx = FenceContext()

    assert _try_open_fence(ctx, "~~~~ rust")
    assert ctx.state is ParserState.IN_FENCED_CODE
    assert (ctx.fence_char, ctx.fence_length, ctx.info) == ("~", 4, "rust")


def test_backtick_fence_rejects_backtick_in_info():
    assert not _try_open_fence(FenceContext(), "``` a`b")


def test_close_fence_needs_matching_length():
    ctx = FenceContext()
    _try_open_fence(ctx, "````")

    assert not _try_close_fence(ctx, "```")
    assert not _try_close_fence(ctx, "~~~~")
    assert _try_close_fence(ctx, "`````")
    assert ctx.state is ParserState.NORMAL


def test_link_labels_are_case_sensitive():
    source = "[a][X]\n\n[x]: /u"

    assert markdown_to_html(source) == "<p>a</p>\n"
