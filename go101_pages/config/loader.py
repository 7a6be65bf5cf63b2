"""Load checker configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from go101_pages.errors import ConfigError

from .models import CheckConfig

DEFAULT_CONFIG_NAME = "go101-pages.yaml"


def load_check_config(path: Path) -> CheckConfig:
    """Load the YAML configuration describing how the corpus is checked.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``go101-pages.yaml``).

    Returns
    -------
    CheckConfig
        Parsed configuration. A relative ``root`` is resolved against the
        directory holding the configuration file; a missing ``root`` means
        that directory itself.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ConfigError
        If a field has the wrong type or an invalid value.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from go101_pages.config import load_check_config
    >>> config = load_check_config(Path("go101-pages.yaml"))  # doctest: +SKIP
    >>> config.include  # doctest: +SKIP
    ('**/*.html',)
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    defaults = CheckConfig.default(path.parent)

    root = Path(raw.get("root") or ".")
    if not root.is_absolute():
        root = path.parent / root

    return CheckConfig(
        root=root,
        include=_patterns(raw, "include", defaults.include),
        exclude=_patterns(raw, "exclude", defaults.exclude),
        ignore_links=_patterns(raw, "ignore_links", defaults.ignore_links),
        external_schemes=_patterns(
            raw, "external_schemes", defaults.external_schemes
        ),
        check_index=_flag(raw, "check_index", default=defaults.check_index),
        jobs=validate_jobs(raw.get("jobs", defaults.jobs)),
    )


def _patterns(
    raw: typ.Mapping[str, typ.Any], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    """Return a tuple of non-empty strings from a string or list value."""
    match raw.get(key):
        case None:
            return default
        case str() as value:
            return (value,) if value.strip() else ()
        case list() as values:
            result: list[str] = []
            for value in values:
                if not isinstance(value, str):
                    msg = f"'{key}' entries must be strings, got {value!r}."
                    raise ConfigError(msg)
                if value.strip():
                    result.append(value.strip())
            return tuple(result)
        case other:
            msg = f"'{key}' must be a string or a list of strings, got {other!r}."
            raise ConfigError(msg)


def _flag(raw: typ.Mapping[str, typ.Any], key: str, *, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        msg = f"'{key}' must be true or false, got {value!r}."
        raise ConfigError(msg)
    return value


def validate_jobs(value: object) -> int:
    """Return ``value`` when it is a positive worker count."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"'jobs' must be a positive integer, got {value!r}."
        raise ConfigError(msg)
    return value


__all__ = ["DEFAULT_CONFIG_NAME", "load_check_config", "validate_jobs"]
