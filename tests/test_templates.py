"""Tests for prompt templates and diff-context preparation."""

from pathlib import Path

import pytest

from diffdigest.config.schema import DiffDigestConfig
from diffdigest.prompt.templates import (
    TemplateError,
    TemplateRegistry,
    build_registry,
    count_status_entries,
    prepare_context,
    render_prompt,
)


class TestRegistry:
    def test_builtins(self, tmp_path: Path):
        registry = build_registry(DiffDigestConfig(), tmp_path)
        names = [t.name for t in registry.all_templates]
        assert names == ["conventional", "simple"]

    def test_render_inserts_diff(self, tmp_path: Path):
        registry = build_registry(DiffDigestConfig(), tmp_path)
        prompt = render_prompt("conventional", "+added line", registry)
        assert "+added line" in prompt
        assert "${diff}" not in prompt
        assert "Conventional Commits" in prompt

    def test_dollar_signs_in_diff_survive(self, tmp_path: Path):
        registry = build_registry(DiffDigestConfig(), tmp_path)
        prompt = render_prompt("simple", "+echo $HOME ${PATH}", registry)
        assert "+echo $HOME ${PATH}" in prompt

    def test_unknown_template(self, tmp_path: Path):
        registry = build_registry(DiffDigestConfig(), tmp_path)
        with pytest.raises(TemplateError, match="available: conventional, simple"):
            render_prompt("missing", "diff", registry)

    def test_custom_yaml_overrides_builtin(self, tmp_path: Path):
        tpl_dir = tmp_path / ".diffdigest-templates"
        tpl_dir.mkdir()
        (tpl_dir / "team.yaml").write_text(
            "- name: simple\n"
            "  description: Team style\n"
            "  body: 'TEAM: ${diff}'\n"
            "- name: emoji\n"
            "  body: 'Use a gitmoji. ${diff}'\n"
        )
        (tpl_dir / "notes.txt").write_text("ignored")
        registry = build_registry(DiffDigestConfig(), tmp_path)
        assert render_prompt("simple", "x", registry) == "TEAM: x"
        assert registry.get("emoji").source.endswith("team.yaml")
        assert [t.name for t in registry.all_templates] == ["conventional", "emoji", "simple"]

    def test_single_mapping_file(self, tmp_path: Path):
        registry = TemplateRegistry()
        path = tmp_path / "one.yml"
        path.write_text("name: one\nbody: '${diff}!'\n")
        assert registry.load_custom_templates(tmp_path) == 1
        assert registry.get("one").render("hi") == "hi!"

    def test_malformed_entry(self, tmp_path: Path):
        (tmp_path / "bad.yaml").write_text("- description: no name or body\n")
        with pytest.raises(TemplateError):
            TemplateRegistry().load_custom_templates(tmp_path)

    def test_invalid_yaml(self, tmp_path: Path):
        (tmp_path / "broken.yaml").write_text("name: [unclosed\n")
        with pytest.raises(TemplateError):
            TemplateRegistry().load_custom_templates(tmp_path)

    def test_missing_directory(self, tmp_path: Path):
        assert TemplateRegistry().load_custom_templates(tmp_path / "nope") == 0


class TestPrepareContext:
    def _listing(self, n: int) -> tuple[str, str]:
        raw = "".join(f"diff --git a/f{i}.py b/f{i}.py\n+x = {i}\n" for i in range(n))
        status = "".join(f"M\tf{i}.py\n" for i in range(n))
        return raw, status

    def test_small_commit_uses_raw_diff(self):
        raw, status = self._listing(5)
        ctx = prepare_context(raw, status, DiffDigestConfig())
        assert ctx.digested is False
        assert ctx.text == raw
        assert ctx.file_count == 5
        assert ctx.digest is None

    def test_large_commit_uses_digest(self):
        raw, status = self._listing(6)
        messages: list[str] = []
        ctx = prepare_context(raw, status, DiffDigestConfig(), observer=messages.append)
        assert ctx.digested is True
        assert ctx.text.startswith("Commit includes 6 files:")
        assert ctx.digest is not None
        assert ctx.digest.stats.total_budget == 4000
        assert messages[0] == "Building digest for 6 files"

    def test_force_and_budget(self):
        raw, status = self._listing(1)
        ctx = prepare_context(raw, status, DiffDigestConfig(), force_digest=True, budget=100)
        assert ctx.digested is True
        assert ctx.digest.stats.per_file_budget == 80

    def test_always_digest_config(self):
        cfg = DiffDigestConfig()
        cfg.digest.always_digest = True
        raw, status = self._listing(2)
        assert prepare_context(raw, status, cfg).digested is True

    def test_count_status_entries(self):
        assert count_status_entries("M\ta\n\nA\tb\n  \n") == 2
        assert count_status_entries("") == 0
