"""Data models for change records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChangeKind(str, Enum):
    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    RENAMED = "Renamed"

    @classmethod
    def from_status(cls, code: str) -> "ChangeKind":
        """Map a git status code (``A``, ``M``, ``R100``...) to a ChangeKind.

        Unknown codes fall back to MODIFIED.
        """
        return _STATUS_LETTERS.get(code[:1].upper(), cls.MODIFIED)

    @property
    def label(self) -> str:
        return self.value


_STATUS_LETTERS = {
    "A": ChangeKind.ADDED,
    "M": ChangeKind.MODIFIED,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
}


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """One changed file: its classification plus its slice of the raw diff."""

    path: str
    kind: ChangeKind = ChangeKind.MODIFIED
    is_binary: bool = False
    diff_text: str = ""  # empty when no segment matched (e.g. pure rename)
