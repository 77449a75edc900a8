"""Tests for config loading."""

import pytest

from config import (
    DEFAULT_IGNORE_PATTERNS,
    ChunkConfig,
    Config,
    ConfigError,
    FilterConfig,
    load_config,
)


def test_defaults_without_files(tmp_path):
    config = load_config(tmp_path, environ={})
    assert config.provider == "openai"
    assert config.chunking_enabled is False
    assert config.chunk_size == 4000
    assert config.chunk_overlap == 200
    assert config.max_chunks == 10
    assert config.file_filtering_enabled is True
    assert config.max_diff_length == 8000


def test_yaml_and_custom_override(tmp_path):
    (tmp_path / "describe-config.yml").write_text(
        "provider: ollama\nmodel: llama3\nchunk_size: 3000\nignore_patterns:\n  - '*.snap'\nunknown_key: 1\n"
    )
    (tmp_path / "custom.yml").write_text("model: qwen2.5-coder\n")

    config = load_config(tmp_path, environ={})

    assert config.provider == "ollama"
    assert config.model == "qwen2.5-coder"
    assert config.chunk_size == 3000
    assert config.ignore_patterns == ["*.snap"]


def test_environment_overrides(tmp_path):
    env = {
        "ENABLE_CHUNKING": "true",
        "DIFF_CHUNK_SIZE": "2500",
        "DIFF_CHUNK_OVERLAP": "100",
        "MAX_CHUNKS": "4",
        "ENABLE_FILE_FILTERING": "FALSE",
        "IGNORE_PATTERNS": "*.min.js, docs/** ,",
        "LLM_PROMPT_MAX_DIFF": "5000",
    }
    config = load_config(tmp_path, environ=env)

    assert config.chunking_enabled is True
    assert config.chunk_size == 2500
    assert config.chunk_overlap == 100
    assert config.max_chunks == 4
    assert config.file_filtering_enabled is False
    assert config.ignore_patterns == ["*.min.js", "docs/**"]
    assert config.max_diff_length == 5000


def test_malformed_numbers_fall_back_to_defaults(tmp_path):
    config = load_config(tmp_path, environ={"DIFF_CHUNK_SIZE": "lots", "MAX_CHUNKS": ""})
    assert config.chunk_size == 4000
    assert config.max_chunks == 10


def test_non_positive_max_diff_length_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={"LLM_PROMPT_MAX_DIFF": "0"})


def test_filter_config_appends_custom_patterns():
    fc = Config(ignore_patterns=["*.snap", "yarn.lock"]).filter_config()
    assert fc.ignore_patterns[: len(DEFAULT_IGNORE_PATTERNS)] == tuple(DEFAULT_IGNORE_PATTERNS)
    assert fc.ignore_patterns[-1] == "*.snap"
    assert fc.ignore_patterns.count("yarn.lock") == 1


def test_chunk_config_validation_propagates():
    with pytest.raises(ConfigError):
        Config(chunk_size=100, chunk_overlap=100).chunk_config()


def test_component_configs_are_frozen():
    with pytest.raises(AttributeError):
        ChunkConfig().chunk_size = 1
    with pytest.raises(AttributeError):
        FilterConfig().enabled = False
