"""Chunker - Split large diffs into smaller chunks for model context limits."""

import logging
from dataclasses import dataclass, field

from config import ChunkConfig
from diff_parser import (
    ChangeType,
    DiffFile,
    determine_change_type,
    extract_files,
    header_path,
    is_file_header,
    parse_diff,
)

logger = logging.getLogger(__name__)

# Rough characters per diff line, used to turn the overlap budget into lines
AVERAGE_LINE_LENGTH = 50


@dataclass
class ChunkContext:
    files: list[str] = field(default_factory=list)
    change_type: ChangeType = ChangeType.MIXED


@dataclass
class DiffChunk:
    """A bounded slice of a diff, sent to the model on its own."""

    content: str
    index: int
    total_chunks: int
    context: ChunkContext
    has_overlap: bool = False


def analyze_context(diff_content: str) -> ChunkContext:
    return ChunkContext(
        files=extract_files(diff_content),
        change_type=determine_change_type(diff_content),
    )


def group_diff_files(diff_files: list[DiffFile], max_chars: int) -> list[list[DiffFile]]:
    """Greedily pack consecutive files into groups of at most max_chars.

    A single file larger than the budget still gets a group of its own.
    """
    groups: list[list[DiffFile]] = []
    current_group: list[DiffFile] = []
    current_chars = 0

    for diff_file in diff_files:
        # Joining newline between blocks counts against the budget
        added = len(diff_file.content) + (1 if current_group else 0)

        if current_group and current_chars + added > max_chars:
            groups.append(current_group)
            current_group = []
            current_chars = 0
            added = len(diff_file.content)

        current_group.append(diff_file)
        current_chars += added

    if current_group:
        groups.append(current_group)

    return groups


class DiffChunker:
    """Splits a diff into an ordered batch of DiffChunks.

    Tries, in order: a single chunk when the diff already fits, whole-file
    grouping, then line-based splitting that avoids cutting hunks and
    repeats a few lines between neighbouring chunks.
    """

    def __init__(self, config: ChunkConfig | None = None):
        self.config = config or ChunkConfig()

    def chunk(self, diff: str) -> list[DiffChunk]:
        if not self.config.enabled or len(diff) <= self.config.chunk_size:
            return [DiffChunk(content=diff, index=0, total_chunks=1, context=analyze_context(diff))]

        file_chunks = self.chunk_by_files(diff)
        if 1 < len(file_chunks) <= self.config.max_chunks:
            return file_chunks

        size_chunks = self.chunk_by_size(diff)
        if size_chunks:
            return size_chunks

        # Nothing but blank lines: hand the text back as one chunk
        return [DiffChunk(content=diff, index=0, total_chunks=1, context=analyze_context(diff))]

    def chunk_by_files(self, diff: str) -> list[DiffChunk]:
        diff_files = parse_diff(diff)
        if len(diff_files) <= 1:
            return []

        chunks: list[DiffChunk] = []
        for group in group_diff_files(diff_files, self.config.chunk_size):
            content = "\n".join(f.content for f in group)
            files: list[str] = []
            for f in group:
                if f.path not in files:
                    files.append(f.path)
            chunks.append(DiffChunk(
                content=content,
                index=len(chunks),
                total_chunks=0,
                context=ChunkContext(files=files, change_type=determine_change_type(content)),
            ))

        return _finalize(chunks)

    def chunk_by_size(self, diff: str) -> list[DiffChunk]:
        lines = diff.split("\n")
        owners = _line_owners(lines)
        chunk_size = self.config.chunk_size

        chunks: list[DiffChunk] = []
        line_index = 0
        inside_hunk = False
        consumed = 0

        while line_index < len(lines) and len(chunks) < self.config.max_chunks:
            start_index = line_index
            buffer: list[str] = []
            size = 0

            while line_index < len(lines) and size < chunk_size:
                line = lines[line_index]

                if line.startswith("@@"):
                    inside_hunk = True

                # Only file boundaries may cut a hunk short
                if size + len(line) + 1 > chunk_size and size > 0:
                    if not inside_hunk or is_file_header(line):
                        break

                buffer.append(line)
                size += len(line) + 1
                line_index += 1

                if inside_hunk and (is_file_header(line) or line_index == len(lines)):
                    inside_hunk = False

            content = "\n".join(buffer).strip("\n")
            if content.strip():
                files: list[str] = []
                for path in owners[start_index:line_index]:
                    if path and path not in files:
                        files.append(path)
                chunks.append(DiffChunk(
                    content=content,
                    index=len(chunks),
                    total_chunks=0,
                    context=ChunkContext(files=files, change_type=determine_change_type(content)),
                    has_overlap=len(chunks) > 0,
                ))

            consumed = line_index
            if line_index < len(lines):
                overlap_lines = min(
                    self.config.overlap_size // AVERAGE_LINE_LENGTH,
                    line_index - start_index,
                )
                line_index = max(start_index + 1, line_index - overlap_lines)

        if consumed < len(lines):
            logger.warning(
                "Reached max_chunks=%d; %d trailing diff line(s) left out",
                self.config.max_chunks,
                len(lines) - consumed,
            )

        return _finalize(chunks)


def _line_owners(lines: list[str]) -> list[str | None]:
    """Path of the file block each line belongs to (None before the first header)."""
    owners: list[str | None] = []
    current = None
    for line in lines:
        if is_file_header(line):
            current = header_path(line) or "unknown"
        owners.append(current)
    return owners


def _finalize(chunks: list[DiffChunk]) -> list[DiffChunk]:
    for chunk in chunks:
        chunk.total_chunks = len(chunks)
    return chunks
