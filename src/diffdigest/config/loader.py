"""Load and merge configuration from .diffdigest.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from diffdigest.config.schema import (
    OUTPUT_FORMATS,
    DiffDigestConfig,
    DigestConfig,
    OutputConfig,
    PromptConfig,
)

CONFIG_FILENAME = ".diffdigest.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _positive_int(value: str) -> Optional[int]:
    try:
        n = int(value)
    except ValueError:
        return None
    return n if n > 0 else None


def _non_negative_int(value: str) -> Optional[int]:
    try:
        n = int(value)
    except ValueError:
        return None
    return n if n >= 0 else None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _merge_env_overrides(cfg: DiffDigestConfig) -> None:
    """Apply DIFFDIGEST_* environment variable overrides. Invalid values are ignored."""
    if val := os.environ.get("DIFFDIGEST_MAX_INPUT_TOKENS"):
        if (n := _positive_int(val)) is not None:
            cfg.digest.max_input_tokens = n
    if val := os.environ.get("DIFFDIGEST_SMART_THRESHOLD"):
        if (n := _non_negative_int(val)) is not None:
            cfg.digest.smart_threshold = n
    if val := os.environ.get("DIFFDIGEST_TEMPLATE"):
        cfg.prompt.template = val.strip()
    if val := os.environ.get("DIFFDIGEST_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: DiffDigestConfig) -> None:
    if not _is_int(cfg.digest.max_input_tokens) or cfg.digest.max_input_tokens <= 0:
        raise ConfigError("digest.max_input_tokens must be a positive integer")
    if not _is_int(cfg.digest.smart_threshold) or cfg.digest.smart_threshold < 0:
        raise ConfigError("digest.smart_threshold must be a non-negative integer")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got {cfg.output.format!r}"
        )


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> DiffDigestConfig:
    """Load, validate, and return a DiffDigestConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = DiffDigestConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = DiffDigestConfig(
            version=raw.get("version", "1.0"),
            digest=_build_section(raw, DigestConfig, "digest"),
            prompt=_build_section(raw, PromptConfig, "prompt"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
