"""Chunk Driver - Run generation over a chunk batch, one chunk at a time."""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterator

from ai_client import GenerationRequest, GenerationResponse
from chunker import DiffChunk

logger = logging.getLogger(__name__)

Generate = Callable[[GenerationRequest], GenerationResponse]


@dataclass
class ChunkResult:
    chunk_index: int
    description: str = ""
    success: bool = False
    error: str | None = None


def chunk_context_hint(chunk: DiffChunk, additional_context: str = "") -> str:
    return f"Processing chunk {chunk.index + 1} of {chunk.total_chunks}. {additional_context or ''}".rstrip()


class ChunkedGenerationDriver:
    """Feeds chunks to a generate callable strictly in order.

    A failing chunk is recorded and the batch moves on; nothing here
    raises once the batch has started.
    """

    def __init__(self, generate: Generate, sink: Callable[[ChunkResult], None] | None = None):
        self.generate = generate
        self.sink = sink

    def iter_results(self, chunks: list[DiffChunk], base_request: GenerationRequest) -> Iterator[ChunkResult]:
        if not chunks:
            raise ValueError("No chunks to process")
        return self._iter(chunks, base_request)

    def run(self, chunks: list[DiffChunk], base_request: GenerationRequest) -> list[ChunkResult]:
        return list(self.iter_results(chunks, base_request))

    def _iter(self, chunks: list[DiffChunk], base_request: GenerationRequest) -> Iterator[ChunkResult]:
        logger.info("Processing %d chunks", len(chunks))

        for chunk in chunks:
            request = replace(
                base_request,
                diff_text=chunk.content,
                context_hint=chunk_context_hint(chunk, base_request.context_hint),
            )
            result = self._run_one(chunk, request)

            if self.sink is not None:
                self.sink(result)
            yield result

    def _run_one(self, chunk: DiffChunk, request: GenerationRequest) -> ChunkResult:
        label = f"{chunk.index + 1}/{chunk.total_chunks}"
        try:
            response = self.generate(request)
        except Exception as e:
            logger.error("Chunk %s failed: %s", label, e)
            return ChunkResult(chunk_index=chunk.index, success=False, error=str(e) or type(e).__name__)

        logger.info("Chunk %s processed: %s", label, "success" if response.success else "failed")
        return ChunkResult(
            chunk_index=chunk.index,
            description=response.description or "",
            success=response.success,
            error=None if response.success else (response.error or "Generation failed"),
        )
