"""Prompt Optimizer - Filter, chunk or truncate PR data before generation."""

import logging
from dataclasses import dataclass, field, replace

from chunker import DiffChunk, DiffChunker
from config import ChunkConfig, FilterConfig
from file_filter import FileFilter

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "... (diff truncated)"


@dataclass
class PromptData:
    """PR metadata and diff, plus what the optimizer decided about them."""

    title: str = ""
    description: str = ""
    diff: str = ""
    author: str = ""
    source_branch: str = ""
    destination_branch: str = ""
    repository: str = ""
    additional_context: str = ""

    chunks: list[DiffChunk] = field(default_factory=list)
    requires_chunking: bool = False
    filtered_files: list[str] = field(default_factory=list)
    all_files_ignored: bool = False


TEXT_FIELDS = (
    "title",
    "description",
    "author",
    "source_branch",
    "destination_branch",
    "repository",
    "additional_context",
)


class PromptOptimizer:
    """Decides whether a PR goes out as one prompt or as a chunk batch."""

    def __init__(
        self,
        filter_config: FilterConfig | None = None,
        chunk_config: ChunkConfig | None = None,
        max_diff_length: int = 8000,
    ):
        self.filter_config = filter_config or FilterConfig()
        self.chunk_config = chunk_config or ChunkConfig(enabled=False)
        self.max_diff_length = max_diff_length
        self.file_filter = FileFilter(self.filter_config)
        self.chunker = DiffChunker(self.chunk_config)

    def optimize(self, prompt_data: PromptData) -> PromptData:
        cleaned = replace(
            prompt_data,
            **{name: (getattr(prompt_data, name) or "").strip() for name in TEXT_FIELDS},
            chunks=[],
            requires_chunking=False,
            filtered_files=[],
            all_files_ignored=False,
        )

        diff = prompt_data.diff or ""

        if self.filter_config.enabled and diff:
            original_files = self.file_filter.extract_modified_files(diff)
            filtered = self.file_filter.filter_diff(diff)
            remaining = set(self.file_filter.extract_modified_files(filtered))
            cleaned.filtered_files = [f for f in original_files if f not in remaining]
            cleaned.all_files_ignored = not filtered.strip() and bool(original_files)
            diff = filtered

        if self.chunk_config.enabled and diff and not cleaned.all_files_ignored:
            chunks = self.chunker.chunk(diff)
            if len(chunks) > 1:
                logger.info("Diff of %d chars split into %d chunks", len(diff), len(chunks))
                cleaned.diff = diff.strip()
                cleaned.chunks = chunks
                cleaned.requires_chunking = True
                return cleaned

        if len(diff) > self.max_diff_length:
            logger.warning(
                "PR diff is too long (%d characters). Truncating to %d characters.",
                len(diff),
                self.max_diff_length,
            )
            diff = diff[: self.max_diff_length] + TRUNCATION_MARKER

        cleaned.diff = diff.strip()
        return cleaned
