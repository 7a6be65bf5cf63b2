"""Load and validate checker configuration YAML.

This subpackage parses a ``go101-pages.yaml`` file, applies defaults for the
page globs, ignored links and external schemes, resolves the corpus root
against the file's directory, and returns a :class:`CheckConfig` that the
corpus loader and link resolver consume. The primary entry point is
:func:`load_check_config`.

Examples
--------
>>> from pathlib import Path
>>> from go101_pages.config import CheckConfig
>>> CheckConfig.default(Path("pages")).include
('**/*.html',)
"""

from .loader import DEFAULT_CONFIG_NAME, load_check_config, validate_jobs
from .models import CheckConfig

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "CheckConfig",
    "load_check_config",
    "validate_jobs",
]
