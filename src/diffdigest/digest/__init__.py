"""Digest engine — budget allocation, chunk selection, composition."""

from diffdigest.digest.budget import DigestBudget, allocate, estimate_tokens
from diffdigest.digest.composer import (
    DigestResult,
    DigestStats,
    build_digest,
    compose,
    group_by_directory,
)
from diffdigest.digest.selector import IMPORTANT_KEYWORDS, ChunkSelector, find_chunks, is_important

__all__ = [
    "IMPORTANT_KEYWORDS",
    "ChunkSelector",
    "DigestBudget",
    "DigestResult",
    "DigestStats",
    "allocate",
    "build_digest",
    "compose",
    "estimate_tokens",
    "find_chunks",
    "group_by_directory",
    "is_important",
]
