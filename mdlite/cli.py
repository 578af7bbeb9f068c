"""
Converts a markup document to HTML.
Prints the HTML to stdout, or writes it to the file given with --output.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .config import ConfigError, build_config
from .filesystem import size_limit, write_output
from .parser import ParseFileError, parse_file

__all__ = ["cli"]


@click.command()
@click.version_option(package_name="mdlite")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the HTML to this file instead of stdout",
)
@click.option(
    "--collect-errors/--fail-fast",
    default=None,
    help="Report every malformed block instead of stopping at the first",
)
@click.option("--strict-links/--lenient-links", default=None, help="Fail on undefined link labels")
@click.option("--heading-ids/--no-heading-ids", default=None, help="Add id attributes to headings")
@click.option("--max-heading-level", type=int, help="Clamp heading levels to this value")
@click.option("-v", "--verbose", is_flag=True, help="Log debug information to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def cli(
    filepath: Path,
    output: str | None = None,
    collect_errors: bool | None = None,
    strict_links: bool | None = None,
    heading_ids: bool | None = None,
    max_heading_level: int | None = None,
    verbose: bool = False,
):
    """
    Entry point for converting a document to HTML.

    Args:
        filepath: Path to the document to convert.
        output: Optional destination file; stdout when omitted.
        collect_errors: Override for the collecting error mode.
        strict_links: Override for failing on undefined link labels.
        heading_ids: Override for adding heading ``id`` attributes.
        max_heading_level: Override for clamping heading levels.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path or configuration overrides are invalid.
        click.ClickException: If reading, parsing, or writing fails, or if
            errors were collected.

    Examples:
        mdlite README.md -o README.html --heading-ids
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = filepath.resolve()
    try:
        max_file_size = size_limit()
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        config = build_config(
            path.parent,
            collect_errors=collect_errors,
            strict_links=strict_links,
            heading_ids=heading_ids,
            max_heading_level=max_heading_level,
            max_file_size=max_file_size,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        result = parse_file(path, config)
    except ParseFileError as error:
        raise click.ClickException(str(error)) from error

    if output is None:
        click.echo(result.html, nl=False)
    else:
        try:
            write_output(Path(output), result.html)
        except IOError as error:
            raise click.ClickException(str(error)) from error

    if result.errors:
        for record in result.errors:
            if record.line is None:
                click.echo(f"{path}: {record.message}", err=True)
            else:
                click.echo(f"{path}:{record.line}:{record.column}: {record.message}", err=True)
        raise click.ClickException(f"{len(result.errors)} error(s) in {path}")


if __name__ == "__main__":
    cli()
