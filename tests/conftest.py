"""Shared test fixtures — sample diffs, status listings, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def sample_diff_go() -> str:
    """A three-line change in foo/a.go."""
    return textwrap.dedent("""\
        diff --git a/foo/a.go b/foo/a.go
        index 1234567..abcdef0 100644
        --- a/foo/a.go
        +++ b/foo/a.go
        @@ -3 +3,2 @@
        -fmt.Println("old")
        +fmt.Println("new")
        +return nil
    """)


@pytest.fixture
def sample_diff_multi() -> str:
    """Three files; the diff order differs from the status order."""
    return textwrap.dedent("""\
        diff --git a/docs/guide.md b/docs/guide.md
        index 1111111..2222222 100644
        --- a/docs/guide.md
        +++ b/docs/guide.md
        @@ -1 +1 @@
        -Old title
        +New title
        diff --git a/logo.png b/logo.png
        new file mode 100644
        Binary files /dev/null and b/logo.png differ
        diff --git a/src/app.py b/src/app.py
        index 3333333..4444444 100644
        --- a/src/app.py
        +++ b/src/app.py
        @@ -0,0 +1,2 @@
        +import os
        +print(os.getcwd())
    """)


@pytest.fixture
def status_multi() -> str:
    return "M\tsrc/app.py\nA\tlogo.png\nM\tdocs/guide.md\n"


@pytest.fixture
def sample_diff_rename() -> str:
    """A renamed file with a content change."""
    return textwrap.dedent("""\
        diff --git a/old/x.py b/new/x.py
        similarity index 90%
        rename from old/x.py
        rename to new/x.py
        index abc1234..def5678 100644
        --- a/old/x.py
        +++ b/new/x.py
        @@ -1,0 +2 @@
        +# moved
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    return textwrap.dedent("""\
        diff --git a/legacy.py b/legacy.py
        deleted file mode 100644
        index abc1234..0000000
        --- a/legacy.py
        +++ /dev/null
        @@ -1,3 +0,0 @@
        -def legacy():
        -    return 1
        -
    """)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "commit.gpgsign", "false"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path


@pytest.fixture
def stage():
    """Return a helper that writes files into a repo and stages them."""

    def _stage(repo: Path, files: dict[str, str]) -> None:
        for name, content in files.items():
            path = repo / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        subprocess.run(["git", "add", "."], cwd=repo, capture_output=True, check=True)

    return _stage
