"""File Filter - Drop whole files matching ignore patterns from a diff."""

import logging

from wcmatch import glob

from config import FilterConfig
from diff_parser import extract_files, header_path, is_file_header

logger = logging.getLogger(__name__)


def glob_match(path: str, pattern: str) -> bool:
    """Shell-style match where ``*`` stays in one segment and ``**`` spans many."""
    return glob.globmatch(path, pattern, flags=glob.GLOBSTAR)


class FileFilter:
    """Removes ignored files from unified diffs, one whole file block at a time."""

    def __init__(self, config: FilterConfig | None = None):
        self.config = config or FilterConfig()

    def should_ignore(self, filepath: str) -> bool:
        """Check if file matches any ignore pattern."""
        if not self.config.enabled:
            return False
        for pattern in self.config.ignore_patterns:
            if pattern == filepath or glob_match(filepath, pattern):
                logger.debug("Ignoring %s (matched %r)", filepath, pattern)
                return True
        return False

    def extract_modified_files(self, diff: str) -> list[str]:
        return extract_files(diff)

    def removed_files(self, diff: str) -> list[str]:
        """Files that filter_diff would drop from this diff."""
        if not self.config.enabled:
            return []
        return [f for f in extract_files(diff) if self.should_ignore(f)]

    def filter_diff(self, diff: str) -> str:
        """Return the diff without the blocks of ignored files."""
        to_remove = set(self.removed_files(diff))
        if not to_remove:
            return diff

        kept: list[str] = []
        skipping = False
        for line in diff.split("\n"):
            if is_file_header(line):
                skipping = header_path(line) in to_remove
            if not skipping:
                kept.append(line)

        while kept and not kept[-1].strip():
            kept.pop()

        logger.info("Filtered %d file(s) out of diff", len(to_remove))
        return "\n".join(kept)
