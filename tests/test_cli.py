from __future__ import annotations

import textwrap
from pathlib import Path

from mdlite.cli import cli


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_prints_html(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "doc.md",
        """
        # Introduction

        Some *text*.
        """,
    )

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output == "<h1>Introduction</h1>\n<p>Some <i>text</i>.</p>\n"


def test_cli_writes_output_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.md", "hello\n")
    destination = tmp_path / "doc.html"

    result = cli_runner.invoke(cli, [str(target), "-o", str(destination)])

    assert result.exit_code == 0
    assert result.output == ""
    assert destination.read_text(encoding="utf-8") == "<p>hello</p>\n"


def test_cli_overwrites_output_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.md", "new\n")
    destination = tmp_path / "doc.html"
    destination.write_text("old", encoding="utf-8")
    destination.chmod(0o640)

    result = cli_runner.invoke(cli, [str(target), "--output", str(destination)])

    assert result.exit_code == 0
    assert destination.read_text(encoding="utf-8") == "<p>new</p>\n"
    assert destination.stat().st_mode & 0o777 == 0o640


def test_cli_reports_located_error(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "broken.md", "<div><span></div>\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert f"{target}:1:12: </div> inside <span>" in result.output


def test_cli_collects_errors(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "broken.md",
        """
        a `b

        good

        c [d
        """,
    )

    result = cli_runner.invoke(cli, ["--collect-errors", str(target)])

    assert result.exit_code == 1
    assert "<p>good</p>" in result.output
    assert f'{target}:1:3: unfinished "`"' in result.output
    assert f"{target}:5:3: `]` expected" in result.output
    assert f"2 error(s) in {target}" in result.output


def test_cli_heading_ids_flag(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.md", "## Getting Started\n")

    result = cli_runner.invoke(cli, ["--heading-ids", str(target)])

    assert result.exit_code == 0
    assert result.output == '<h2 id="getting-started">Getting Started</h2>\n'


def test_cli_reads_pyproject_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.mdlite]
        max_heading_level = 2
        """,
    )
    target = _write(tmp_path, "doc.md", "#### Deep\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output == "<h2>Deep</h2>\n"


def test_cli_flags_override_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.mdlite]
        heading_ids = true
        """,
    )
    target = _write(tmp_path, "doc.md", "# Title\n")

    result = cli_runner.invoke(cli, ["--no-heading-ids", str(target)])

    assert result.exit_code == 0
    assert result.output == "<h1>Title</h1>\n"


def test_cli_strict_links(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.md", "see [nowhere]\n")

    lenient = cli_runner.invoke(cli, [str(target)])
    strict = cli_runner.invoke(cli, ["--strict-links", str(target)])

    assert lenient.exit_code == 0
    assert lenient.output == "<p>see nowhere</p>\n"
    assert strict.exit_code == 1
    assert "undefined link label `nowhere`" in strict.output


def test_cli_rejects_invalid_heading_level(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.md", "# Title\n")

    result = cli_runner.invoke(cli, ["--max-heading-level", "0", str(target)])

    assert result.exit_code == 2
    assert "max_heading_level" in result.output


def test_cli_accepts_any_extension(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "notes.txt", "plain *notes*\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output == "<p>plain <i>notes</i></p>\n"


def test_cli_enforces_file_size_limit(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDLITE_MAX_FILE_SIZE", "4")
    target = _write(tmp_path, "doc.md", "longer than four bytes\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "over the limit of 4 bytes" in result.output


def test_cli_rejects_invalid_size_env(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDLITE_MAX_FILE_SIZE", "huge")
    target = _write(tmp_path, "doc.md", "x\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "MDLITE_MAX_FILE_SIZE must be a number of bytes" in result.output


def test_cli_missing_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [str(tmp_path / "missing.md")])

    assert result.exit_code == 2
