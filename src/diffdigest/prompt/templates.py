"""Prompt templates — built-in and custom, plus diff-context preparation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from string import Template
from typing import Dict, List, Optional

import yaml

from diffdigest.config.schema import DiffDigestConfig
from diffdigest.digest.composer import DigestResult, Observer, build_digest


class TemplateError(Exception):
    """Raised for unknown templates or malformed template files."""


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    body: str  # ${diff} is replaced by the diff context
    description: str = ""
    source: str = "builtin"

    def render(self, diff_text: str) -> str:
        return Template(self.body).safe_substitute(diff=diff_text)


CONVENTIONAL = PromptTemplate(
    name="conventional",
    description="Conventional Commits subject line plus optional body",
    body="""\
You are an expert software engineer writing a git commit message.
Write the message in the Conventional Commits format:

<type>(<optional scope>): <short summary>

<optional body explaining what changed and why>

Allowed types: feat, fix, docs, style, refactor, perf, test, build, ci, chore, revert.
Keep the summary under 72 characters, in the imperative mood, without a trailing period.
Reply with the commit message only.

Staged changes:
${diff}
""",
)

SIMPLE = PromptTemplate(
    name="simple",
    description="One short imperative sentence",
    body="""\
Write a single-line git commit message (at most 72 characters, imperative mood)
summarising the following staged changes. Reply with the message only.

${diff}
""",
)

BUILTIN_TEMPLATES: List[PromptTemplate] = [CONVENTIONAL, SIMPLE]


class TemplateRegistry:
    """Central store for prompt templates; custom files override built-ins."""

    def __init__(self) -> None:
        self._templates: Dict[str, PromptTemplate] = {}

    def register(self, template: PromptTemplate) -> None:
        self._templates[template.name] = template

    @property
    def all_templates(self) -> List[PromptTemplate]:
        return sorted(self._templates.values(), key=lambda t: t.name)

    def get(self, name: str) -> PromptTemplate:
        try:
            return self._templates[name]
        except KeyError:
            known = ", ".join(sorted(self._templates)) or "none"
            raise TemplateError(f"Unknown template '{name}' (available: {known})") from None

    # ---- custom template loading ----

    def load_custom_templates(self, directory: Path) -> int:
        """Load YAML template files from *directory*. Returns count loaded."""
        count = 0
        if not directory.is_dir():
            return 0
        for path in sorted(directory.iterdir()):
            if path.suffix in (".yaml", ".yml"):
                count += self._load_yaml_templates(path)
        return count

    def _load_yaml_templates(self, path: Path) -> int:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise TemplateError(f"Failed to parse {path}: {exc}") from exc
        if data is None:
            return 0
        if not isinstance(data, list):
            data = [data]
        count = 0
        for entry in data:
            if not isinstance(entry, dict) or "name" not in entry or "body" not in entry:
                raise TemplateError(f"{path}: each template needs 'name' and 'body'")
            self.register(
                PromptTemplate(
                    name=str(entry["name"]),
                    body=str(entry["body"]),
                    description=str(entry.get("description", "")),
                    source=str(path),
                )
            )
            count += 1
        return count


def build_registry(config: DiffDigestConfig, repo_root: Path) -> TemplateRegistry:
    """Create a registry with built-in templates and the repo's custom ones."""
    registry = TemplateRegistry()
    for template in BUILTIN_TEMPLATES:
        registry.register(template)
    registry.load_custom_templates(repo_root / config.prompt.templates_dir)
    return registry


def render_prompt(name: str, diff_text: str, registry: TemplateRegistry) -> str:
    """Render template *name* around *diff_text*."""
    return registry.get(name).render(diff_text)


@dataclass
class DiffContext:
    """The diff text handed to the prompt, and how it was produced."""

    text: str
    file_count: int
    digested: bool
    digest: Optional[DigestResult] = None


def count_status_entries(status_listing: str) -> int:
    return sum(1 for line in status_listing.splitlines() if line.strip())


def prepare_context(
    raw_diff: str,
    status_listing: str,
    config: DiffDigestConfig,
    *,
    force_digest: bool = False,
    budget: Optional[int] = None,
    observer: Optional[Observer] = None,
) -> DiffContext:
    """Use the raw diff for small commits and a digest for large ones."""
    file_count = count_status_entries(status_listing)
    use_digest = (
        force_digest
        or config.digest.always_digest
        or file_count > config.digest.smart_threshold
    )
    if not use_digest:
        return DiffContext(text=raw_diff, file_count=file_count, digested=False)

    if observer:
        observer(f"Building digest for {file_count} files")
    result = build_digest(
        raw_diff,
        status_listing,
        budget or config.digest.max_input_tokens,
        observer=observer,
    )
    return DiffContext(text=result.text, file_count=file_count, digested=True, digest=result)
