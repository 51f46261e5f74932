"""Prompt templates and diff-context preparation."""

from diffdigest.prompt.templates import (
    BUILTIN_TEMPLATES,
    DiffContext,
    PromptTemplate,
    TemplateError,
    TemplateRegistry,
    build_registry,
    prepare_context,
    render_prompt,
)

__all__ = [
    "BUILTIN_TEMPLATES",
    "DiffContext",
    "PromptTemplate",
    "TemplateError",
    "TemplateRegistry",
    "build_registry",
    "prepare_context",
    "render_prompt",
]
