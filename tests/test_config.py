"""Tests for YAML configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from metafilter.config import build_catalogs, build_pipeline, load_config
from metafilter.core.rules import InvalidPattern
from metafilter.normalize.catalogs import UnknownCatalog

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "config" / "default.yaml"


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file(self, tmp_path):
        """Test a missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        """Test an empty file gives the defaults."""
        config = load_config(write_config(tmp_path, ""))
        assert config.max_passes is None
        assert config.catalogs == {}
        assert config.pipelines == {}

    def test_invalid_max_passes(self, tmp_path):
        """Test max_passes must be positive."""
        with pytest.raises(ValidationError):
            load_config(write_config(tmp_path, "max_passes: 0\n"))

    def test_shadowing_builtin_catalog(self, tmp_path):
        """Test custom catalogs cannot replace built-in ones."""
        path = write_config(tmp_path, "catalogs:\n  remastered:\n    - pattern: 'x'\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_duplicate_catalog_names(self, tmp_path):
        """Test names differing only in case or spacing cannot both be defined."""
        path = write_config(
            tmp_path,
            "catalogs:\n  Tags:\n    - pattern: 'x'\n  tags:\n    - pattern: 'y'\n",
        )
        with pytest.raises(ValidationError):
            load_config(path)

    def test_unknown_pipeline_field(self, tmp_path):
        """Test pipelines only accept known metadata fields."""
        path = write_config(tmp_path, "pipelines:\n  p:\n    genre: [trim-whitespace]\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_default_config(self):
        """Test the shipped config loads and its pipelines build."""
        config = load_config(DEFAULT_CONFIG)
        for name in config.pipelines:
            build_pipeline(config, name)
        youtube = build_pipeline(config, "youtube")
        assert youtube.filter_field("artist", "Artist - Topic") == "Artist"
        assert youtube.max_passes == config.max_passes


class TestBuildPipeline:
    """Tests for building filters from config."""

    def test_custom_catalog(self, tmp_path):
        """Test custom catalogs run alongside built-in ones."""
        path = write_config(
            tmp_path,
            "catalogs:\n"
            "  Tags:\n"
            "    - pattern: '(?i)\\s*\\[free download\\]$'\n"
            "pipelines:\n"
            "  bc:\n"
            "    track: [tags, remastered, trim-whitespace]\n",
        )
        config = load_config(path)
        assert list(build_catalogs(config)) == ["tags"]
        metadata_filter = build_pipeline(config, "bc")
        assert metadata_filter.filter_field("track", "Song (Remastered) [Free Download]") == "Song"

    def test_back_reference_replacement(self, tmp_path):
        """Test replacements from config support back-references."""
        path = write_config(
            tmp_path,
            "catalogs:\n"
            "  swap:\n"
            "    - pattern: '^(\\w+), The$'\n"
            "      replacement: 'The $1'\n"
            "pipelines:\n"
            "  p:\n"
            "    artist: [swap]\n",
        )
        metadata_filter = build_pipeline(load_config(path), "p")
        assert metadata_filter.filter_field("artist", "Beatles, The") == "The Beatles"

    def test_invalid_custom_pattern(self, tmp_path):
        """Test a bad custom pattern is reported with the pattern text."""
        path = write_config(tmp_path, "catalogs:\n  bad:\n    - pattern: '(oops'\n")
        with pytest.raises(InvalidPattern) as excinfo:
            build_catalogs(load_config(path))
        assert excinfo.value.pattern == "(oops"

    def test_unknown_catalog_reference(self, tmp_path):
        """Test pipelines referring to missing catalogs fail."""
        path = write_config(tmp_path, "pipelines:\n  p:\n    track: [missing]\n")
        with pytest.raises(UnknownCatalog):
            build_pipeline(load_config(path), "p")

    def test_unknown_pipeline(self, tmp_path):
        """Test asking for an undefined pipeline raises KeyError."""
        with pytest.raises(KeyError):
            build_pipeline(load_config(write_config(tmp_path, "")), "p")
