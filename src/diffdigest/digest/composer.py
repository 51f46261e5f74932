"""Digest assembly — header statistics, directory grouping, per-file sections.

The pipeline is parse → allocate → select, run once per call with no
shared state. Progress is reported through an optional observer callback
instead of printing, and the numbers behind it come back as DigestStats.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from diffdigest.digest.budget import DigestBudget, estimate_tokens
from diffdigest.digest.selector import ChunkSelector
from diffdigest.git.diff_parser import DiffRecordParser
from diffdigest.git.models import ChangeKind, ChangeRecord

Observer = Callable[[str], None]

ROOT_GROUP = "root"

# Per-file estimates are only reported for the first few files
_OBSERVED_FILES = 5


@dataclass
class DigestStats:
    """What one digest build did."""

    files: int = 0
    total_budget: int = 0
    per_file_budget: int = 0
    truncated_files: int = 0
    chunks_kept: int = 0
    binary_files: int = 0
    deleted_files: int = 0
    output_chars: int = 0
    duration_ms: float = 0.0


@dataclass
class DigestResult:
    text: str
    records: List[ChangeRecord] = field(default_factory=list)
    stats: DigestStats = field(default_factory=DigestStats)


def group_by_directory(records: Sequence[ChangeRecord]) -> Dict[str, List[str]]:
    """Group paths by first path segment, in first-seen order.

    Top-level files share the ``root`` bucket; a directory literally named
    ``root`` is keyed as ``root/``.
    """
    groups: Dict[str, List[str]] = {}
    for record in records:
        head, sep, _ = record.path.partition("/")
        if not sep:
            key = ROOT_GROUP
        elif head == ROOT_GROUP:
            # A real "root/" directory stays apart from top-level files
            key = head + "/"
        else:
            key = head
        groups.setdefault(key, []).append(record.path)
    return groups


def _header(records: Sequence[ChangeRecord]) -> List[str]:
    counts = {kind: 0 for kind in ChangeKind}
    binary = 0
    for record in records:
        counts[record.kind] += 1
        if record.is_binary:
            binary += 1

    lines = [
        f"Commit includes {len(records)} files:",
        f"- Added: {counts[ChangeKind.ADDED]}",
        f"- Modified: {counts[ChangeKind.MODIFIED]}",
        f"- Deleted: {counts[ChangeKind.DELETED]}",
    ]
    if counts[ChangeKind.RENAMED]:
        lines.append(f"- Renamed: {counts[ChangeKind.RENAMED]}")
    if binary:
        lines.append(f"- Binary files: {binary}")

    groups = group_by_directory(records)
    if len(groups) > 1:
        lines.append("")
        lines.append("Changes by directory:")
        lines.extend(f"- {name}: {len(paths)} files" for name, paths in groups.items())

    lines.append("")
    lines.append("Changed files:")
    lines.extend(f"- {r.kind.label}: {r.path}" for r in records)
    return lines


def _compose(
    records: Sequence[ChangeRecord],
    total_budget: int,
    selector: ChunkSelector,
    observer: Optional[Observer],
) -> tuple[str, DigestStats]:
    stats = DigestStats(files=len(records), total_budget=total_budget)
    out = _header(records)

    if records:
        budget = DigestBudget.for_files(total_budget, len(records))
        stats.per_file_budget = budget.per_file_budget
        if observer:
            observer(
                f"Digest budget: total={total_budget} tokens, files={len(records)}, "
                f"per file={budget.per_file_budget}"
            )

        out.append("")
        out.append("Selected diff content:")
        for idx, record in enumerate(records):
            if observer and idx < _OBSERVED_FILES and record.diff_text:
                observer(
                    f"File {idx + 1}: {record.path} - est. tokens "
                    f"{estimate_tokens(record.diff_text)} (budget {budget.per_file_budget})"
                )
            frag = selector.fragment(record, budget.per_file_budget)
            if frag.truncated:
                stats.truncated_files += 1
            stats.chunks_kept += len(frag.chunks)
            if record.is_binary:
                stats.binary_files += 1
            elif record.kind == ChangeKind.DELETED:
                stats.deleted_files += 1

            out.append("")
            out.append(f"### {record.kind.label}: {record.path}")
            text = frag.text if frag.text.endswith("\n") else frag.text + "\n"
            out.append(text)

    digest = "\n".join(out)
    if not digest.endswith("\n"):
        digest += "\n"
    stats.output_chars = len(digest)
    return digest, stats


def compose(
    records: Sequence[ChangeRecord],
    total_budget: int,
    *,
    selector: Optional[ChunkSelector] = None,
    observer: Optional[Observer] = None,
) -> str:
    """Assemble the digest text for *records* under *total_budget* tokens.

    Callers are expected to short-circuit an empty change set; if *records*
    is empty anyway the result is a "0 files" header with no sections.
    """
    text, _ = _compose(records, total_budget, selector or ChunkSelector(), observer)
    return text


def build_digest(
    raw_diff: str,
    status_listing: str,
    total_budget: int,
    *,
    selector: Optional[ChunkSelector] = None,
    observer: Optional[Observer] = None,
) -> DigestResult:
    """Parse, allocate and compose in one call."""
    start = time.perf_counter()
    records = DiffRecordParser(raw_diff, status_listing).parse()
    text, stats = _compose(records, total_budget, selector or ChunkSelector(), observer)
    stats.duration_ms = (time.perf_counter() - start) * 1000
    if observer:
        observer(f"Digest complete: {stats.files} files, {stats.output_chars} characters")
    return DigestResult(text=text, records=records, stats=stats)
