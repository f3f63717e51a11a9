"""Load and validate converter configuration YAML for chunked_pages.

This subpackage parses the project's ``chunked-pages.yaml`` file, applies
defaults for every converter setting, and produces a strongly typed
:class:`ConverterConfig` that the converter and CLI consume. The primary entry
point is :func:`load_converter_config`.

Examples
--------
>>> from pathlib import Path
>>> from chunked_pages.config import load_converter_config
>>> config = load_converter_config(Path("chunked-pages.yaml"))  # doctest: +SKIP
>>> config.output_dir  # doctest: +SKIP
PosixPath('public')
"""

from .loader import DEFAULT_CONFIG_PATH, build_converter_config, load_converter_config
from .models import ConverterConfig, ConverterConfigError

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConverterConfig",
    "ConverterConfigError",
    "build_converter_config",
    "load_converter_config",
]
