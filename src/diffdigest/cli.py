"""diffdigest CLI — Typer application with digest, files, templates, commit and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from diffdigest import __version__

app = typer.Typer(
    name="diffdigest",
    help="Summarise staged git changes into a bounded-size prompt context.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from diffdigest.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load_config(repo_root: Path, config: Optional[str]):
    from diffdigest.config.loader import ConfigError, load_config

    try:
        return load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _read_staged(repo_root: Path) -> tuple[str, str]:
    from diffdigest.git.adapter import GitError, get_staged_diff, get_staged_status

    try:
        return get_staged_diff(repo_root), get_staged_status(repo_root)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── digest ────────────────────────────────────────────────────────────────────


@app.command()
def digest(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffdigest.toml"),
    budget: Optional[int] = typer.Option(None, "--budget", "-b", min=1, help="Token budget for the diff context"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Prompt template name"),
    prompt: bool = typer.Option(False, "--prompt/--no-prompt", help="Wrap the context in the prompt template"),
    smart: bool = typer.Option(False, "--smart", help="Always build a digest, whatever the commit size"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: text | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write result to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Print the diff context (raw diff or digest) for the staged changes."""
    from diffdigest.output import json_report, terminal
    from diffdigest.prompt.templates import TemplateError, build_registry, prepare_context, render_prompt

    repo_root = _resolve_repo_root()
    cfg = _load_config(repo_root, config)

    if format:
        if format not in ("text", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if template:
        cfg.prompt.template = template

    raw_diff, status = _read_staged(repo_root)
    if not status.strip():
        console.print("[dim]No staged changes found. Stage changes first with 'git add'.[/dim]")
        raise typer.Exit(code=0)

    observer = (lambda msg: console.print(msg, style="dim", markup=False)) if verbose else None
    ctx = prepare_context(raw_diff, status, cfg, force_digest=smart, budget=budget, observer=observer)

    prompt_text: Optional[str] = None
    if prompt:
        try:
            registry = build_registry(cfg, repo_root)
            prompt_text = render_prompt(cfg.prompt.template, ctx.text, registry)
        except TemplateError as exc:
            console.print(f"[bold red]Template error:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc
        if verbose:
            console.print(f"[dim]Template: {cfg.prompt.template} ({len(prompt_text)} characters)[/dim]")

    if cfg.output.format == "json":
        result_text = json_report.render(ctx, prompt=prompt_text)
    else:
        result_text = prompt_text if prompt_text is not None else ctx.text

    if output:
        Path(output).write_text(result_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Written to {output}[/dim]")
    else:
        typer.echo(result_text, nl=not result_text.endswith("\n"))

    if ctx.digest is not None and cfg.output.show_summary and cfg.output.format == "text":
        terminal.render_summary(ctx.digest.stats, console)


# ── files ─────────────────────────────────────────────────────────────────────


@app.command()
def files() -> None:
    """List the staged files as parsed change records (dry run)."""
    from diffdigest.git.diff_parser import DiffRecordParser
    from diffdigest.output import terminal

    repo_root = _resolve_repo_root()
    raw_diff, status = _read_staged(repo_root)
    records = DiffRecordParser(raw_diff, status).parse()
    terminal.render_records(records, console)


# ── templates ─────────────────────────────────────────────────────────────────


@app.command()
def templates(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffdigest.toml"),
) -> None:
    """List available prompt templates."""
    from diffdigest.prompt.templates import TemplateError, build_registry

    repo_root = _resolve_repo_root()
    cfg = _load_config(repo_root, config)
    try:
        registry = build_registry(cfg, repo_root)
    except TemplateError as exc:
        console.print(f"[bold red]Template error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    for tpl in registry.all_templates:
        marker = "*" if tpl.name == cfg.prompt.template else " "
        typer.echo(f"{marker} {tpl.name:<16} {tpl.description}")


# ── commit ────────────────────────────────────────────────────────────────────


@app.command()
def commit(
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Commit message"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-F", exists=True, dir_okay=False, help="Read the commit message from a file",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Commit without confirmation"),
) -> None:
    """Commit the staged changes with a (generated) message."""
    from diffdigest.git.adapter import GitError, commit_with_message

    if (message is None) == (file is None):
        console.print("[bold red]Error:[/bold red] pass exactly one of --message or --file")
        raise typer.Exit(code=2)
    text = message if message is not None else file.read_text(encoding="utf-8")  # type: ignore[union-attr]
    if not text.strip():
        console.print("[bold red]Error:[/bold red] commit message is empty")
        raise typer.Exit(code=2)

    repo_root = _resolve_repo_root()
    if not yes:
        console.print("---")
        console.print(text.rstrip(), markup=False)
        console.print("---")
        if not typer.confirm("Commit with this message?", default=True):
            console.print("[yellow]Commit aborted.[/yellow]")
            raise typer.Exit(code=1)

    try:
        commit_with_message(repo_root, text)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    console.print("[green]✓[/green] Changes committed successfully!")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .diffdigest.toml in the repo root."""
    from diffdigest.config.defaults import DEFAULT_TOML
    from diffdigest.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"diffdigest {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """diffdigest — bounded-size summaries of staged git changes."""
