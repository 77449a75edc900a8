"""Configuration loader."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
import yaml


DEFAULT_IGNORE_PATTERNS = [
    "package-lock.json",
    "yarn.lock",
    "Gemfile.lock",
    "composer.lock",
    "Pipfile.lock",
    "go.sum",
    "go.mod",
    "*.lock",
    "node_modules/**",
    "vendor/**",
    "dist/**",
    "build/**",
    "coverage/**",
    ".DS_Store",
    "Thumbs.db",
]


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass(frozen=True)
class FilterConfig:
    """Which files to drop from a diff before it reaches the model."""

    ignore_patterns: tuple = tuple(DEFAULT_IGNORE_PATTERNS)
    enabled: bool = True

    def __post_init__(self):
        # Accept any iterable but store an immutable copy
        object.__setattr__(self, "ignore_patterns", tuple(self.ignore_patterns))


@dataclass(frozen=True)
class ChunkConfig:
    """Size limits for splitting a diff into chunks."""

    chunk_size: int = 4000
    overlap_size: int = 200
    max_chunks: int = 10
    enabled: bool = True

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ConfigError("Chunk size must be positive")
        if self.overlap_size < 0:
            raise ConfigError("Overlap size cannot be negative")
        if self.overlap_size >= self.chunk_size:
            raise ConfigError("Overlap size must be smaller than chunk size")
        if self.max_chunks <= 0:
            raise ConfigError("Maximum chunks must be positive")


@dataclass
class Config:
    """Configuration from YAML file."""

    # AI settings
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    ollama_url: str = "http://localhost:11434"
    max_tokens: int = 4000
    temperature: float = 0.2

    # Chunking
    chunking_enabled: bool = False
    chunk_size: int = 4000
    chunk_overlap: int = 200
    max_chunks: int = 10

    # File filtering
    file_filtering_enabled: bool = True
    ignore_patterns: list = field(default_factory=list)

    # Legacy truncation when chunking is off
    max_diff_length: int = 8000

    def filter_config(self) -> FilterConfig:
        """Default ignore list followed by any custom patterns."""
        patterns = list(DEFAULT_IGNORE_PATTERNS)
        patterns.extend(p for p in self.ignore_patterns if p not in patterns)
        return FilterConfig(ignore_patterns=patterns, enabled=self.file_filtering_enabled)

    def chunk_config(self) -> ChunkConfig:
        return ChunkConfig(
            chunk_size=self.chunk_size,
            overlap_size=self.chunk_overlap,
            max_chunks=self.max_chunks,
            enabled=self.chunking_enabled,
        )


def _parse_bool(value: str | None, default: bool) -> bool:
    if not value:
        return default
    return value.strip().lower() == "true"


def _parse_int(value: str | None, default: int) -> int:
    if not value:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_list(value: str | None, default: list) -> list:
    if not value:
        return default
    return [p.strip() for p in value.split(",") if p.strip()]


def apply_env_overrides(data: dict, environ=None) -> dict:
    """Overlay chunking and filtering settings from environment variables."""
    env = os.environ if environ is None else environ
    data = dict(data)

    data["chunking_enabled"] = _parse_bool(env.get("ENABLE_CHUNKING"), data.get("chunking_enabled", False))
    data["chunk_size"] = _parse_int(env.get("DIFF_CHUNK_SIZE"), data.get("chunk_size", 4000))
    data["chunk_overlap"] = _parse_int(env.get("DIFF_CHUNK_OVERLAP"), data.get("chunk_overlap", 200))
    data["max_chunks"] = _parse_int(env.get("MAX_CHUNKS"), data.get("max_chunks", 10))
    data["file_filtering_enabled"] = _parse_bool(
        env.get("ENABLE_FILE_FILTERING"), data.get("file_filtering_enabled", True)
    )
    data["ignore_patterns"] = _parse_list(env.get("IGNORE_PATTERNS"), data.get("ignore_patterns") or [])
    data["max_diff_length"] = _parse_int(env.get("LLM_PROMPT_MAX_DIFF"), data.get("max_diff_length", 8000))
    return data


def load_config(config_dir: str | Path | None = None, environ=None) -> Config:
    """Load config from YAML files, then environment overrides."""
    env = os.environ if environ is None else environ
    config_dir = Path(config_dir or env.get("CONFIG_DIR", "/app/config"))

    # Load main config
    main_file = config_dir / "describe-config.yml"
    data = {}
    if main_file.exists():
        with open(main_file) as f:
            data = yaml.safe_load(f) or {}

    # Apply custom overrides if mounted
    custom_file = config_dir / "custom.yml"
    if custom_file.exists():
        with open(custom_file) as f:
            overrides = yaml.safe_load(f) or {}
        data.update(overrides)

    data = apply_env_overrides(data, env)

    if data["max_diff_length"] <= 0:
        raise ConfigError("max_diff_length must be positive")

    known = {f.name for f in fields(Config)}
    return Config(**{k: v for k, v in data.items() if k in known})
