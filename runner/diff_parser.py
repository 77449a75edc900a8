"""Diff Parser - Split unified diff text into per-file blocks."""

import re
from dataclasses import dataclass
from enum import Enum


DIFF_HEADER_PATTERN = re.compile(r"^diff --git a/(.+?) b/(.+)$")


class ChangeType(str, Enum):
    """Overall flavour of the changed lines in a piece of diff text."""

    ADD = "add"
    MODIFY = "modify"
    DELETE = "delete"
    MIXED = "mixed"


@dataclass
class DiffFile:
    """Represents a single file's block in a diff, header line included."""

    path: str
    old_path: str | None = None
    content: str = ""


def is_file_header(line: str) -> bool:
    return line.startswith("diff --git")


def header_path(line: str) -> str | None:
    """Return the post-change path named by a ``diff --git`` header line."""
    match = DIFF_HEADER_PATTERN.match(line)
    if match:
        return match.group(2)
    return None


def parse_diff(diff_content: str) -> list[DiffFile]:
    """Parse a unified diff into a list of DiffFile blocks.

    Text before the first file header belongs to no file and is dropped.
    A header that does not name its paths still opens a block, filed
    under ``unknown``.
    """
    files: list[DiffFile] = []
    current_file: DiffFile | None = None
    current_file_content: list[str] = []

    for line in diff_content.split("\n"):
        if is_file_header(line):
            if current_file is not None:
                current_file.content = "\n".join(current_file_content).strip()
                files.append(current_file)

            match = DIFF_HEADER_PATTERN.match(line)
            current_file = DiffFile(
                path=match.group(2) if match else "unknown",
                old_path=match.group(1) if match else None,
            )
            current_file_content = [line]
            continue

        if current_file is None:
            continue

        current_file_content.append(line)

    if current_file is not None:
        current_file.content = "\n".join(current_file_content).strip()
        files.append(current_file)

    return files


def extract_files(diff_content: str) -> list[str]:
    """Post-change paths of every file in the diff, in order, without repeats."""
    files: list[str] = []
    for line in diff_content.split("\n"):
        if not is_file_header(line):
            continue
        path = header_path(line)
        if path and path not in files:
            files.append(path)
    return files


def determine_change_type(diff_content: str) -> ChangeType:
    """Classify diff text by the kinds of changed lines it carries."""
    add_count = 0
    delete_count = 0

    for line in diff_content.split("\n"):
        if line.startswith("+") and not line.startswith("+++"):
            add_count += 1
        elif line.startswith("-") and not line.startswith("---"):
            delete_count += 1

    if add_count and delete_count:
        return ChangeType.MODIFY
    if add_count:
        return ChangeType.ADD
    if delete_count:
        return ChangeType.DELETE
    return ChangeType.MIXED
