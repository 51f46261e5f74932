"""Token budget allocation across changed files."""

from __future__ import annotations

from dataclasses import dataclass

# 1 token ~ 4 characters; no real tokenizer is used
CHARS_PER_TOKEN = 4

# Share of the total budget kept for header, statistics and grouping text,
# expressed as a fraction (numerator, denominator) so allocation stays integral
HEADER_RESERVE = (1, 5)


def allocate(total_budget: int, file_count: int) -> int:
    """Return the per-file content budget: ``floor(total * 0.8 / files)``.

    Every file gets the same share regardless of its size. A result of 0 is
    valid and forces the most aggressive truncation.
    """
    if total_budget <= 0:
        raise ValueError(f"total_budget must be positive, got {total_budget}")
    if file_count <= 0:
        raise ValueError(f"file_count must be positive, got {file_count}")
    reserve_num, reserve_den = HEADER_RESERVE
    return (total_budget * (reserve_den - reserve_num)) // (reserve_den * file_count)


@dataclass(frozen=True)
class DigestBudget:
    total_budget: int
    file_count: int
    per_file_budget: int

    @classmethod
    def for_files(cls, total_budget: int, file_count: int) -> "DigestBudget":
        return cls(
            total_budget=total_budget,
            file_count=file_count,
            per_file_budget=allocate(total_budget, file_count),
        )

    @property
    def char_budget(self) -> int:
        """Per-file budget in characters."""
        return self.per_file_budget * CHARS_PER_TOKEN


def estimate_tokens(text: str) -> int:
    """Crude token estimate: character count divided by four."""
    return len(text) // CHARS_PER_TOKEN
