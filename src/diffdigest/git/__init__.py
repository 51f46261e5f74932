"""Git interface layer — adapter, diff segmentation, models."""

from diffdigest.git.adapter import (
    GitError,
    commit_with_message,
    get_repo_root,
    get_staged_diff,
    get_staged_status,
)
from diffdigest.git.diff_parser import DiffRecordParser
from diffdigest.git.models import ChangeKind, ChangeRecord

__all__ = [
    "ChangeKind",
    "ChangeRecord",
    "DiffRecordParser",
    "GitError",
    "commit_with_message",
    "get_repo_root",
    "get_staged_diff",
    "get_staged_status",
]
