from __future__ import annotations

import pytest

from mdlite import MdliteConfig, parse_markdown
from mdlite.slugify import generate_slug, unique_slug


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Hello World", "hello-world"),
        ("What's New?", "whats-new"),
        ("Café", "cafe"),
        ("", "untitled"),
        ("Multiple   Spaces", "multiple-spaces"),
    ],
)
def test_generate_slug_expected_examples(title: str, expected: str):
    """Validates slug generation for representative examples."""
    assert generate_slug(title) == expected


def test_generate_slug_returns_untitled_for_whitespace_only():
    assert generate_slug("   \n\t ") == "untitled"


def test_generate_slug_preserves_unicode_when_requested():
    assert generate_slug("Café", preserve_unicode=True) == "café"


def test_unique_slug_numbers_duplicates():
    used: set[str] = set()
    counters: dict[str, int] = {}

    slugs = [unique_slug(title, used, counters) for title in ["Setup", "Setup", "Setup"]]

    assert slugs == ["setup", "setup-1", "setup-2"]


def test_unique_slug_handles_cascading_collisions():
    used: set[str] = set()
    counters: dict[str, int] = {}

    slugs = [unique_slug(title, used, counters) for title in ["Header", "Header", "Header 1"]]

    assert slugs == ["header", "header-1", "header-1-1"]


def test_heading_ids_are_unique_within_a_document():
    config = MdliteConfig(heading_ids=True)

    html = parse_markdown("# Intro\n\n## Intro\n\n### Intro 1", config).html

    assert html == (
        '<h1 id="intro">Intro</h1>\n'
        '<h2 id="intro-1">Intro</h2>\n'
        '<h3 id="intro-1-1">Intro 1</h3>\n'
    )


def test_heading_ids_use_rendered_text():
    config = MdliteConfig(heading_ids=True)

    html = parse_markdown("# The **bold** `move` &amp; more", config).html

    assert html.startswith('<h1 id="the-bold-move-more">')


def test_heading_ids_restart_for_each_document():
    config = MdliteConfig(heading_ids=True)

    first = parse_markdown("# Title", config).html
    second = parse_markdown("# Title", config).html

    assert first == second == '<h1 id="title">Title</h1>\n'
