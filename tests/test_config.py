"""Tests for YAML configuration loading."""

import pytest

from bundle_resolver.config import Configuration
from bundle_resolver.config import load_configuration
from bundle_resolver.errors import ConfigurationError


def test_defaults():
    config = Configuration()
    assert config.bundler_options.add_node_globals is True
    assert config.bundler_options.exclude == []
    assert config.bundler_options.resolve.alias == {}
    assert config.bundler_options.resolve.directories == ["node_modules"]
    assert config.bundler_options.resolve.extensions == [".js", ".json", ".ts", ".tsx"]


def test_load_full_configuration(tmp_path):
    config_file = tmp_path / "bundle-resolver.yaml"
    config_file.write_text(
        """
base_path: src
bundler_options:
  add_node_globals: false
  exclude: [fs, lodash]
  resolve:
    alias:
      jquery: vendor/jquery.js
    extensions: [.js]
"""
    )

    config = load_configuration(config_file)

    assert config.base_path == (tmp_path / "src").resolve()
    assert config.bundler_options.add_node_globals is False
    assert config.bundler_options.exclude == ["fs", "lodash"]
    assert config.bundler_options.resolve.alias == {"jquery": "vendor/jquery.js"}
    assert config.bundler_options.resolve.extensions == [".js"]
    assert config.bundler_options.resolve.directories == ["node_modules"]


def test_base_path_defaults_to_config_directory(tmp_path):
    config_file = tmp_path / "bundle-resolver.yaml"
    config_file.write_text("bundler_options:\n  exclude: [fs]\n")

    config = load_configuration(config_file)

    assert config.base_path == tmp_path.resolve()


def test_empty_file_uses_defaults(tmp_path):
    config_file = tmp_path / "bundle-resolver.yaml"
    config_file.write_text("")

    config = load_configuration(config_file)

    assert config.bundler_options.exclude == []


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_configuration(tmp_path / "missing.yaml")


def test_malformed_yaml(tmp_path):
    config_file = tmp_path / "bundle-resolver.yaml"
    config_file.write_text("bundler_options: [unclosed\n")

    with pytest.raises(ConfigurationError, match="Failed to read"):
        load_configuration(config_file)


def test_invalid_values(tmp_path):
    config_file = tmp_path / "bundle-resolver.yaml"
    config_file.write_text("bundler_options:\n  exclude: 42\n")

    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_configuration(config_file)


def test_non_mapping_document(tmp_path):
    config_file = tmp_path / "bundle-resolver.yaml"
    config_file.write_text("- just\n- a list\n")

    with pytest.raises(ConfigurationError, match="must be a mapping"):
        load_configuration(config_file)
