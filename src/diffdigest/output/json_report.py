"""JSON reporter for scripting and CI."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict

from diffdigest.prompt.templates import DiffContext


def to_dict(context: DiffContext, *, prompt: str | None = None) -> Dict[str, Any]:
    """Convert a DiffContext to a JSON-serialisable dict."""
    data: Dict[str, Any] = {
        "version": "1.0",
        "file_count": context.file_count,
        "digested": context.digested,
        "context": context.text,
    }
    if context.digest is not None:
        data["files"] = [
            {
                "path": r.path,
                "change": r.kind.label,
                "binary": r.is_binary,
                "diff_chars": len(r.diff_text),
            }
            for r in context.digest.records
        ]
        data["stats"] = asdict(context.digest.stats)
    if prompt is not None:
        data["prompt"] = prompt
    return data


def render(context: DiffContext, *, prompt: str | None = None) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(context, prompt=prompt), indent=2)
