"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_INLINE_HTML_TAGS, DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_NESTING_DEPTH


@dataclass
class MdliteConfig:
    """Configuration for converting markup to HTML.

    Attributes:
        collect_errors: Record errors and keep going block by block instead of
            raising on the first one.
        strict_links: Raise when a referenced link label is never defined
            instead of rendering its text.
        heading_ids: Add slug ``id`` attributes to headings.
        preserve_unicode: Keep Unicode characters in heading slugs.
        max_heading_level: Clamp heading levels to this value; None leaves
            them uncapped.
        backslash_line_breaks: Render a backslash before a line break as ``<br>``.
        inline_html_tags: Tag names passed through verbatim inside text;
            any other ``<`` is escaped.
        max_nesting_depth: Maximum depth of nested HTML tags and embedded
            markdown blocks.
        max_file_size: Maximum file size in bytes read by the front end.

    Examples:
        MdliteConfig(heading_ids=True, max_heading_level=6)
    """

    # Error handling
    collect_errors: bool = False
    strict_links: bool = False

    # Headings
    heading_ids: bool = False
    preserve_unicode: bool = False
    max_heading_level: int | None = None

    # Inline
    backslash_line_breaks: bool = False
    inline_html_tags: tuple[str, ...] = field(default=DEFAULT_INLINE_HTML_TAGS)

    # Limits
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_nesting_depth` must be a positive integer")
    """


def load_config(search_path: Path) -> MdliteConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.mdlite]`` table from `pyproject.toml` and the ``[mdlite]`` or
    ``[tool.mdlite]`` table from `.mdlite.toml` when present. Returns default
    values when no configuration is found. TOML files that cannot be read or
    decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        MdliteConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "mdlite")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".mdlite.toml",
            table_paths=[("mdlite",), ("tool", "mdlite")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return MdliteConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> MdliteConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> MdliteConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return MdliteConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return MdliteConfig()

    try:
        return MdliteConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: MdliteConfig) -> MdliteConfig:
    """Return `config` with inline tag names as a lower-cased tuple."""
    tags = config.inline_html_tags
    if isinstance(tags, str):
        tags = tags.replace(",", " ").split()
    if isinstance(tags, (list, tuple, set, frozenset)):
        tags = tuple(str(tag).lower() for tag in tags)
    return replace(config, inline_html_tags=tags)


def validate_config(config: MdliteConfig) -> None:
    """Validate an `MdliteConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If flags are not booleans, limits are not positive
            integers, or inline tag names are malformed.

    Examples:
        validate_config(MdliteConfig(max_heading_level=6))
    """
    config = normalize_config(config)

    _ensure_booleans(
        {
            "collect_errors": config.collect_errors,
            "strict_links": config.strict_links,
            "heading_ids": config.heading_ids,
            "preserve_unicode": config.preserve_unicode,
            "backslash_line_breaks": config.backslash_line_breaks,
        }
    )
    _ensure_integers(
        {
            "max_nesting_depth": config.max_nesting_depth,
            "max_file_size": config.max_file_size,
            **(
                {"max_heading_level": config.max_heading_level}
                if config.max_heading_level is not None
                else {}
            ),
        }
    )
    _ensure_positive(
        {
            "max_nesting_depth": config.max_nesting_depth,
            "max_file_size": config.max_file_size,
            **(
                {"max_heading_level": config.max_heading_level}
                if config.max_heading_level is not None
                else {}
            ),
        }
    )

    if not isinstance(config.inline_html_tags, tuple):
        raise ConfigError("`inline_html_tags` must be a list of tag names")
    for tag in config.inline_html_tags:
        if not tag or not tag[0].isalpha() or not all(c.isalnum() or c == "-" for c in tag):
            raise ConfigError(f"`inline_html_tags` contains an invalid tag name: {tag!r}")


def apply_overrides(config: MdliteConfig, **overrides: object) -> MdliteConfig:
    """Apply override values to an `MdliteConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        MdliteConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `MdliteConfig`.

    Examples:
        updated = apply_overrides(config, strict_links=True)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> MdliteConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        MdliteConfig: Validated configuration ready for parsing.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), heading_ids=True)
    """
    config = load_config(search_path)
    try:
        config = apply_overrides(config, **overrides)
    except TypeError as error:
        raise ConfigError(str(error)) from error
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")
