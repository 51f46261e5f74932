"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["text", "json"]

OUTPUT_FORMATS = ("text", "json")


@dataclass
class DigestConfig:
    max_input_tokens: int = 4000
    smart_threshold: int = 5  # commits with more files than this get a digest
    always_digest: bool = False


@dataclass
class PromptConfig:
    template: str = "conventional"
    templates_dir: str = ".diffdigest-templates"


@dataclass
class OutputConfig:
    format: OutputFormat = "text"
    show_summary: bool = True


@dataclass
class DiffDigestConfig:
    version: str = "1.0"
    digest: DigestConfig = field(default_factory=DigestConfig)
    prompt: PromptConfig = field(default_factory=PromptConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
