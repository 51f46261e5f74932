"""Tests for output reporters."""

import io
import json

from rich.console import Console

from diffdigest.digest.composer import DigestStats
from diffdigest.git.models import ChangeKind, ChangeRecord
from diffdigest.output import json_report, terminal
from diffdigest.prompt.templates import DiffContext, prepare_context
from diffdigest.config.schema import DiffDigestConfig


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=120, color_system=None), buf


class TestJsonReport:
    def test_raw_context(self):
        ctx = DiffContext(text="diff --git a/x b/x\n", file_count=1, digested=False)
        data = json.loads(json_report.render(ctx))
        assert data == {
            "version": "1.0",
            "file_count": 1,
            "digested": False,
            "context": "diff --git a/x b/x\n",
        }

    def test_digest_context(self, sample_diff_multi, status_multi):
        ctx = prepare_context(sample_diff_multi, status_multi, DiffDigestConfig(), force_digest=True)
        data = json.loads(json_report.render(ctx, prompt="PROMPT"))
        assert data["digested"] is True
        assert data["prompt"] == "PROMPT"
        assert [f["path"] for f in data["files"]] == ["src/app.py", "logo.png", "docs/guide.md"]
        assert data["files"][1] == {"path": "logo.png", "change": "Added", "binary": True, "diff_chars": data["files"][1]["diff_chars"]}
        assert data["stats"]["files"] == 3
        assert data["context"].startswith("Commit includes 3 files:")


class TestTerminal:
    def test_records_table(self):
        console, buf = _console()
        terminal.render_records(
            [
                ChangeRecord("src/app.py", ChangeKind.MODIFIED, False, "diff --git a/src/app.py b/src/app.py\n"),
                ChangeRecord("logo.png", ChangeKind.ADDED, True, ""),
            ],
            console,
        )
        out = buf.getvalue()
        assert "2 staged files" in out
        assert "src/app.py" in out
        assert "Modified" in out
        assert "logo.png" in out
        assert "yes" in out

    def test_no_records(self):
        console, buf = _console()
        terminal.render_records([], console)
        assert "No staged changes" in buf.getvalue()

    def test_summary(self):
        console, buf = _console()
        terminal.render_summary(
            DigestStats(files=4, total_budget=400, per_file_budget=80, truncated_files=2, output_chars=999),
            console,
        )
        out = buf.getvalue()
        assert "80 per file" in out
        assert "999 chars" in out

    def test_markup_in_path_shown_literally(self):
        console, buf = _console()
        terminal.render_records([ChangeRecord("docs/[draft].md", ChangeKind.ADDED, False, "")], console)
        assert "docs/[draft].md" in buf.getvalue()
