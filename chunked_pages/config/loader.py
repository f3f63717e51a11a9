"""Load converter configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import ConverterConfig, ConverterConfigError

DEFAULT_CONFIG_PATH = Path("chunked-pages.yaml")


def _as_bool(key: str, value: object) -> bool:
    """Return ``value`` when it is a boolean, raising otherwise."""
    if not isinstance(value, bool):
        msg = f"Setting '{key}' must be true or false, got {value!r}."
        raise ConverterConfigError(msg)
    return value


def _as_str_list(key: str, value: object) -> list[str]:
    """Normalize a string or list of strings into a list of non-empty strings."""
    match value:
        case str():
            return [segment for segment in value.split() if segment]
        case list():
            return [str(segment).strip() for segment in value if str(segment).strip()]
        case _:
            msg = f"Setting '{key}' must be a list of names."
            raise ConverterConfigError(msg)


def _as_levels(value: object) -> list[int]:
    """Validate heading levels, accepting integers between 1 and 6."""
    if not isinstance(value, list):
        msg = "Setting 'attribute_levels' must be a list of heading levels."
        raise ConverterConfigError(msg)
    levels: list[int] = []
    for level in value:
        if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 6:
            msg = f"Heading level {level!r} must be an integer between 1 and 6."
            raise ConverterConfigError(msg)
        levels.append(level)
    return levels


def _as_jobs(value: object) -> int:
    """Validate the worker count."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"Setting 'jobs' must be a positive integer, got {value!r}."
        raise ConverterConfigError(msg)
    return value


def build_converter_config(defaults: typ.Mapping[str, typ.Any]) -> ConverterConfig:
    """Build a ConverterConfig from a ``defaults`` mapping.

    Missing keys fall back to the dataclass defaults; unknown keys raise so
    typos do not silently change behaviour.
    """
    base = ConverterConfig()
    known = {field for field in ConverterConfig.__dataclass_fields__}
    unknown = sorted(set(defaults) - known)
    if unknown:
        msg = f"Unknown settings: {', '.join(unknown)}."
        raise ConverterConfigError(msg)

    return ConverterConfig(
        output_dir=Path(defaults.get("output_dir", base.output_dir)),
        pattern=str(defaults.get("pattern", base.pattern)),
        recursive=_as_bool("recursive", defaults.get("recursive", base.recursive)),
        strict_frontmatter=_as_bool(
            "strict_frontmatter",
            defaults.get("strict_frontmatter", base.strict_frontmatter),
        ),
        pygments_style=str(defaults.get("pygments_style", base.pygments_style)),
        extensions=_as_str_list(
            "extensions", defaults.get("extensions", base.extensions)
        ),
        attribute_levels=_as_levels(
            defaults.get("attribute_levels", base.attribute_levels)
        ),
        standalone=_as_bool("standalone", defaults.get("standalone", base.standalone)),
        write_manifest=_as_bool(
            "write_manifest", defaults.get("write_manifest", base.write_manifest)
        ),
        jobs=_as_jobs(defaults.get("jobs", base.jobs)),
    )


def load_converter_config(
    path: Path | None = None, *, required: bool = False
) -> ConverterConfig:
    """Load the YAML configuration describing converter choices.

    Parameters
    ----------
    path : Path, optional
        Filesystem path to the YAML file. Defaults to ``chunked-pages.yaml``
        in the working directory.
    required : bool, optional
        Raise when the file is missing instead of returning defaults.

    Returns
    -------
    ConverterConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If ``required`` is set and the file does not exist.
    ConverterConfigError
        If the YAML is not a mapping or a setting is invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from chunked_pages.config import load_converter_config
    >>> load_converter_config(Path("missing.yaml")).output_dir
    PosixPath('public')
    """
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        if required:
            msg = f"Configuration file '{config_path}' not found."
            raise FileNotFoundError(msg)
        return ConverterConfig()

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with config_path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConverterConfigError(msg)
    defaults = loaded.get("defaults", {}) or {}
    if not isinstance(defaults, dict):
        msg = "The 'defaults' section must be a mapping."
        raise ConverterConfigError(msg)
    return build_converter_config(defaults)


__all__ = ["DEFAULT_CONFIG_PATH", "build_converter_config", "load_converter_config"]
