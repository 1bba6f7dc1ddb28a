"""Tests for YAML run configuration."""

from pathlib import Path

import pytest

from filealloc.runner.config import ConfigError, RunConfig, load_config


class TestLoadConfig:
    def test_full_config(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text(
            "files_path: data/files.txt\n"
            "nodes_path: data/nodes.txt\n"
            "verify_order: true\n"
            "summary: true\n"
            "log_level: DEBUG\n"
        )
        config = load_config(path)
        assert config.files_path == Path("data/files.txt")
        assert config.nodes_path == Path("data/nodes.txt")
        assert config.output_path is None
        assert config.verify_order is True
        assert config.summary is True
        assert config.log_level == "DEBUG"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == RunConfig()

    def test_defaults(self):
        config = RunConfig()
        assert config.notify is False
        assert config.log_level == "WARNING"

    @pytest.mark.parametrize("text", [
        "unknown_key: 1\n",
        "log_level: LOUD\n",
        "- just\n- a list\n",
        "files_path: [unclosed\n",
    ])
    def test_invalid_config(self, tmp_path, text):
        path = tmp_path / "bad.yaml"
        path.write_text(text)
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path / "missing.yaml")
