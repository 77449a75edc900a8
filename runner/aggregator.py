"""Aggregator - Merge per-chunk descriptions into one PR description."""

import re
from collections import Counter
from dataclasses import dataclass, field

from chunk_driver import ChunkResult
from chunker import DiffChunk

PARTIAL_FAILURE_NOTE = "(Note: Some changes could not be processed)"
NO_SUCCESS_ERROR = "no successful chunks"


@dataclass
class AggregatedResult:
    success: bool
    description: str = ""
    chunks_processed: int = 0
    failed_chunks: int = 0
    error: str | None = None


@dataclass
class ProcessingSummary:
    total_files: int = 0
    total_chunks: int = 0
    successful_chunks: int = 0
    failed_chunks: int = 0
    change_types: dict = field(default_factory=dict)


def normalize_description(description: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace for comparison."""
    text = re.sub(r"[^\w\s]", "", description.lower())
    return re.sub(r"\s+", " ", text).strip()


def deduplicate(descriptions: list[str]) -> list[str]:
    """Keep the first of each group of descriptions that normalize the same."""
    unique = []
    seen = set()
    for desc in descriptions:
        key = normalize_description(desc)
        if key not in seen:
            seen.add(key)
            unique.append(desc)
    return unique


class ResultAggregator:
    """Combines chunk results, tolerating failed chunks."""

    def aggregate(self, chunks: list[DiffChunk], results: list[ChunkResult]) -> AggregatedResult:
        successful = [r for r in results if r.success]
        failed = [r for r in results if not r.success]

        if not successful:
            return AggregatedResult(
                success=False,
                chunks_processed=len(results),
                failed_chunks=len(failed),
                error=NO_SUCCESS_ERROR,
            )

        if len(successful) == 1 and not failed:
            return AggregatedResult(
                success=True,
                description=successful[0].description,
                chunks_processed=len(results),
            )

        unique = deduplicate([r.description for r in successful])
        description = "\n".join(f"• {desc}" for desc in unique)
        if failed:
            description += f"\n\n{PARTIAL_FAILURE_NOTE}"

        return AggregatedResult(
            success=True,
            description=description,
            chunks_processed=len(results),
            failed_chunks=len(failed),
        )

    def summarize(self, chunks: list[DiffChunk], results: list[ChunkResult]) -> ProcessingSummary:
        """Counts of files, chunks and change types for a processed batch."""
        files = set()
        for chunk in chunks:
            files.update(chunk.context.files)

        change_types = Counter(chunk.context.change_type.value for chunk in chunks)
        successful = sum(1 for r in results if r.success)

        return ProcessingSummary(
            total_files=len(files),
            total_chunks=len(chunks),
            successful_chunks=successful,
            failed_chunks=len(results) - successful,
            change_types=dict(change_types),
        )
