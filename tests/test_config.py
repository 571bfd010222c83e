"""Tests for configuration lookup."""

import json

import pytest

from media_filter.config import Configuration, env_key, load_configuration
from media_filter.exceptions import ConfigurationError


class TestConfiguration:
    """Tests for the Configuration class."""

    def test_get_property(self):
        config = Configuration({"xpdf.path.pdftotext": "/usr/bin/pdftotext"})

        assert config.get_property("xpdf.path.pdftotext") == "/usr/bin/pdftotext"
        assert config.get_property("missing") is None
        assert config.get_property("missing", "default") == "default"

    def test_nested_keys_are_flattened(self):
        config = Configuration({"xpdf": {"path": {"pdftotext": "/opt/pdftotext"}}})

        assert config.get_property("xpdf.path.pdftotext") == "/opt/pdftotext"

    def test_contains(self):
        config = Configuration({"filter.timeout": 10})

        assert "filter.timeout" in config
        assert "filter.plugins" not in config

    def test_set_property(self):
        config = Configuration()
        config.set_property("filter.timeout", 5)

        assert config.get_property("filter.timeout") == 5

    def test_typed_lookups(self):
        config = Configuration({"thumbnail.maxwidth": "120", "filter.timeout": "2.5"})

        assert config.get_int("thumbnail.maxwidth", 80) == 120
        assert config.get_int("thumbnail.maxheight", 80) == 80
        assert config.get_float("filter.timeout", 300.0) == 2.5

    def test_invalid_typed_value_raises(self):
        config = Configuration({"filter.timeout": "soon"})

        with pytest.raises(ConfigurationError, match="filter.timeout"):
            config.get_float("filter.timeout", 300.0)

    def test_get_list(self):
        config = Configuration({"filter.plugins": " pdftotext , ,pdfthumbnail"})

        assert config.get_list("filter.plugins") == ["pdftotext", "pdfthumbnail"]
        assert config.get_list("missing", ["a"]) == ["a"]

    def test_get_list_accepts_json_arrays(self):
        config = Configuration({"filter.plugins": ["pdftotext"]})

        assert config.get_list("filter.plugins") == ["pdftotext"]


class TestEnvironment:
    """Tests for environment variable overrides."""

    def test_env_key(self):
        assert env_key("xpdf.path.pdftotext") == "MEDIA_FILTER_XPDF_PATH_PDFTOTEXT"

    def test_environment_overrides_when_enabled(self, monkeypatch):
        monkeypatch.setenv("MEDIA_FILTER_XPDF_PATH_PDFTOTEXT", "/env/pdftotext")
        config = Configuration({"xpdf.path.pdftotext": "/file/pdftotext"}, from_env=True)

        assert config.get_property("xpdf.path.pdftotext") == "/env/pdftotext"

    def test_environment_ignored_by_default(self, monkeypatch):
        monkeypatch.setenv("MEDIA_FILTER_XPDF_PATH_PDFTOTEXT", "/env/pdftotext")
        config = Configuration({"xpdf.path.pdftotext": "/file/pdftotext"})

        assert config.get_property("xpdf.path.pdftotext") == "/file/pdftotext"


class TestLoadConfiguration:
    """Tests for load_configuration()."""

    def test_loads_json_file(self, tmp_path):
        path = tmp_path / "media-filter.json"
        path.write_text(json.dumps({"xpdf.path.pdftotext": "/usr/bin/pdftotext"}))

        config = load_configuration(path, from_env=False)

        assert config.get_property("xpdf.path.pdftotext") == "/usr/bin/pdftotext"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_configuration(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "media-filter.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            load_configuration(path)

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "media-filter.json"
        path.write_text("[]")

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_configuration(path)
