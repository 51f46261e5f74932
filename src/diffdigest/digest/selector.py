"""Per-file content selection under a token budget.

When a file's diff does not fit its budget, the head of the diff is kept
and the rest is mined for "important" lines: added or removed lines that
open with a declaration or import keyword. This is a language-agnostic
heuristic, not a parser.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence

from diffdigest.digest.budget import CHARS_PER_TOKEN
from diffdigest.git.models import ChangeKind, ChangeRecord

# Declaration forms (functions, classes, types) across common languages
DECLARATION_KEYWORDS: tuple[str, ...] = (
    "def", "async def", "class", "func", "function", "fn", "void",
    "export", "interface", "struct", "enum", "type", "impl", "trait",
)

# Import / include forms
IMPORT_KEYWORDS: tuple[str, ...] = (
    "import", "from", "require", "use", "using", "package", "#include",
)

IMPORTANT_KEYWORDS: tuple[str, ...] = DECLARATION_KEYWORDS + IMPORT_KEYWORDS

HEAD_LINES = 5
MAX_GAP = 4
MAX_CHUNKS = 3

TRUNCATION_MARKER = "... (diff truncated) ..."
CHUNKS_HEADING = "Important changes:"
CHUNK_SEPARATOR = "---"
DELETED_MARKER = "File was deleted."
EMPTY_MARKER = "(No diff content available)"


def _keyword_pattern(keywords: Sequence[str]) -> re.Pattern[str]:
    alternatives = "|".join(
        re.escape(k).replace(r"\ ", r"\s+") for k in sorted(keywords, key=len, reverse=True)
    )
    # "+++"/"---" file headers never match: the keyword must follow one sign
    return re.compile(rf"^[+-](?![+-])\s*(?:{alternatives})(?![\w-])")


_IMPORTANT_RE = _keyword_pattern(IMPORTANT_KEYWORDS)


def is_important(line: str) -> bool:
    """True for an added/removed line that starts with a structural keyword."""
    return _IMPORTANT_RE.match(line) is not None


def find_chunks(lines: Sequence[str], max_gap: int = MAX_GAP) -> List[List[str]]:
    """Group important lines into chunks, in diff order.

    A chunk stays open across runs of up to *max_gap* unimportant lines and
    spans from its first to its last important line. Chunks covering a
    single line are dropped.
    """
    chunks: List[List[str]] = []
    start = last = -1

    for idx, line in enumerate(lines):
        if is_important(line):
            if start == -1:
                start = idx
            last = idx
        elif start != -1 and idx - last > max_gap:
            if last > start:
                chunks.append(list(lines[start:last + 1]))
            start = last = -1

    if start != -1 and last > start:
        chunks.append(list(lines[start:last + 1]))
    return chunks


@dataclass
class Fragment:
    """Selected content for one file plus what the selection did."""

    text: str
    truncated: bool = False
    chunks: List[str] = field(default_factory=list)


class ChunkSelector:
    """Decide which part of a file's diff goes into the digest."""

    def __init__(
        self,
        *,
        head_lines: int = HEAD_LINES,
        max_gap: int = MAX_GAP,
        max_chunks: int = MAX_CHUNKS,
    ) -> None:
        self.head_lines = head_lines
        self.max_gap = max_gap
        self.max_chunks = max_chunks

    def select(self, record: ChangeRecord, per_file_budget: int) -> str:
        """Return the digest fragment for *record*."""
        return self.fragment(record, per_file_budget).text

    def fragment(self, record: ChangeRecord, per_file_budget: int) -> Fragment:
        if record.is_binary:
            return Fragment(f"(binary file, {record.kind.label.lower()}: {record.path})\n")
        if record.kind == ChangeKind.DELETED:
            return Fragment(DELETED_MARKER + "\n")

        diff = record.diff_text
        if not diff:
            return Fragment(EMPTY_MARKER + "\n")
        if len(diff) <= per_file_budget * CHARS_PER_TOKEN:
            return Fragment(diff)
        return self._truncate(diff)

    def _truncate(self, diff: str) -> Fragment:
        # Split on "\n" only: "\r", form feeds and other separators are line content
        lines = diff.split("\n")
        if lines[-1] == "":
            lines.pop()
        if len(lines) <= self.head_lines:
            # Nothing left to cut beyond the head
            return Fragment(diff)

        parts = ["\n".join(lines[:self.head_lines]), TRUNCATION_MARKER]
        kept = [
            "\n".join(chunk)
            for chunk in find_chunks(lines[self.head_lines:], self.max_gap)[:self.max_chunks]
        ]
        if kept:
            parts.append(CHUNKS_HEADING)
            for chunk in kept:
                parts.append(chunk)
                parts.append(CHUNK_SEPARATOR)
        return Fragment("\n".join(parts) + "\n", truncated=True, chunks=kept)
