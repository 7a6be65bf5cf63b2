"""Tests for loading checker configuration from YAML."""

from __future__ import annotations

import typing as typ

import pytest

from go101_pages._constants import EXTERNAL_SCHEMES
from go101_pages.config import CheckConfig, load_check_config
from go101_pages.errors import ConfigError

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write_config(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "go101-pages.yaml"
    path.write_text(body.strip() + "\n", encoding="utf-8")
    return path


def test_full_config_is_loaded(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        """
root: pages
include:
  - "*.html"
  - "article/*.html"
exclude: drafts/*
ignore_links: ["*.go"]
external_schemes: [https]
check_index: false
jobs: 3
        """,
    )
    config = load_check_config(path)
    assert config.root == tmp_path / "pages"
    assert config.include == ("*.html", "article/*.html")
    assert config.exclude == ("drafts/*",)
    assert config.ignore_links == ("*.go",)
    assert config.external_schemes == ("https",)
    assert config.check_index is False
    assert config.jobs == 3


def test_defaults_apply_to_empty_file(tmp_path: Path) -> None:
    config = load_check_config(_write_config(tmp_path, ""))
    assert config == CheckConfig.default(tmp_path)
    assert config.external_schemes == EXTERNAL_SCHEMES
    assert config.check_index is True


def test_absolute_root_is_kept(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"
    config = load_check_config(_write_config(tmp_path, f"root: {target}"))
    assert config.root == target


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_check_config(tmp_path / "absent.yaml")


def test_non_mapping_raises(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        load_check_config(_write_config(tmp_path, "- just\n- a list"))


@pytest.mark.parametrize(
    "body",
    [
        "jobs: 0",
        "jobs: many",
        "check_index: maybe",
        "include: 5",
        "ignore_links: [1, 2]",
    ],
)
def test_invalid_values_raise_config_error(tmp_path: Path, body: str) -> None:
    with pytest.raises(ConfigError):
        load_check_config(_write_config(tmp_path, body))
