"""
Main CLI application for promptlab.

Provides a Typer-based command-line interface over the versioned prompt
store: create, edit, inspect and diff prompts kept under one data directory.
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from ..config import get_config_manager, load_config
from ..core.models import PromptMetaInput
from ..core.version_id import INITIAL_VERSION
from ..errors import NoChange, PromptLabError
from ..version.version_control import PromptRepository

# Initialize Typer app
app = typer.Typer(
    name="promptlab",
    help="Versioned prompt store with line diffs",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()

_DIFF_STYLES = {
    "equal": ("  ", "dim"),
    "delete": ("- ", "red"),
    "insert": ("+ ", "green"),
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")


def _repo(ctx: typer.Context) -> PromptRepository:
    return ctx.obj


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Turn store errors into console messages and exit codes."""
    try:
        yield
    except NoChange as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(0)
    except PromptLabError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, "r", encoding="utf-8", newline="") as f:
        return f.read()


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", "-d", help="Prompt data directory (default from config)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Manage versioned prompts stored on the local disk.
    """
    _setup_logging(verbose)
    root = data_dir if data_dir is not None else load_config().data_dir
    ctx.obj = PromptRepository(root)


@app.command("list")
def list_prompts(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """
    List all prompts, most recently updated first.
    """
    with _handle_errors():
        prompts = _repo(ctx).list_prompts()

    if as_json:
        typer.echo(json.dumps([p.to_dict() for p in prompts], indent=2, ensure_ascii=False))
        return

    if not prompts:
        console.print("[yellow]No prompts yet[/yellow]")
        console.print("Use [cyan]promptlab create <name>[/cyan] to create one.")
        return

    table = Table(title="Prompts")
    table.add_column("Name", style="cyan")
    table.add_column("Latest", style="green")
    table.add_column("Updated", style="blue")
    for prompt in prompts:
        table.add_row(prompt.name, prompt.latest, prompt.updated_at)
    console.print(table)


@app.command()
def show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Prompt name"),
    version: Optional[str] = typer.Option(None, "--version", "-V", help="Version to show (default: latest)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """
    Show a prompt's content and metadata.
    """
    with _handle_errors():
        data = _repo(ctx).get_prompt(name, version)

    if as_json:
        typer.echo(json.dumps(data.to_dict(), indent=2, ensure_ascii=False))
        return

    meta = data.meta
    info_table = Table(title=f"{meta.name} @ {data.version}", show_header=False)
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")
    info_table.add_row("Description", meta.description or "-")
    info_table.add_row("Model", meta.model or "-")
    info_table.add_row("Temperature", f"{meta.temperature:g}")
    info_table.add_row("Created", meta.created_at)
    console.print(info_table)

    console.print(Panel(
        Syntax(data.content, "markdown", theme="monokai", word_wrap=True),
        title="Content",
        border_style="blue"
    ))


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the new prompt"),
    description: Optional[str] = typer.Option(None, "--description", help="Prompt description"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model identifier"),
    temperature: Optional[float] = typer.Option(None, "--temperature", "-t", help="Sampling temperature"),
) -> None:
    """
    Create a new prompt from the default template.
    """
    config = load_config()
    meta_input = PromptMetaInput(
        description=description if description is not None else config.default_description,
        model=model if model is not None else config.default_model,
        temperature=temperature if temperature is not None else config.default_temperature,
    )

    with _handle_errors():
        _repo(ctx).create_prompt(name, meta_input)

    console.print(f"[green]Created prompt {name} at version {INITIAL_VERSION}[/green]")


@app.command()
def save(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Prompt name"),
    source: str = typer.Argument(..., help="File with the new content, or - for stdin"),
    description: Optional[str] = typer.Option(None, "--description", help="New description (default: unchanged)"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="New model (default: unchanged)"),
    temperature: Optional[float] = typer.Option(None, "--temperature", "-t", help="New temperature (default: unchanged)"),
) -> None:
    """
    Save new content for a prompt as the next version.
    """
    try:
        content = _read_input(source)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error reading {source}: {e}[/red]")
        raise typer.Exit(1)

    repo = _repo(ctx)
    with _handle_errors():
        current = repo.get_prompt(name).meta
        meta_input = PromptMetaInput(
            description=description if description is not None else current.description,
            model=model if model is not None else current.model,
            temperature=temperature if temperature is not None else current.temperature,
        )
        new_version = repo.save_prompt(name, content, meta_input)

    console.print(f"[green]Saved {name} as version {new_version}[/green]")


@app.command()
def delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Prompt name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """
    Delete a prompt and its whole version history.
    """
    if not yes and not typer.confirm(f"Delete prompt {name} and all its versions?"):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit(1)

    with _handle_errors():
        _repo(ctx).delete_prompt(name)

    console.print(f"[green]Deleted prompt {name}[/green]")


@app.command()
def versions(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Prompt name"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """
    Show the version history of a prompt.
    """
    with _handle_errors():
        infos = _repo(ctx).list_versions(name)

    if as_json:
        typer.echo(json.dumps([info.to_dict() for info in infos], indent=2, ensure_ascii=False))
        return

    history_table = Table(title=f"Versions of {name}")
    history_table.add_column("Version", style="cyan")
    history_table.add_column("Written", style="blue")
    for i, info in enumerate(infos):
        marker = "→ " if i == 0 else "  "
        history_table.add_row(f"{marker}{info.version}", info.created_at)
    console.print(history_table)


@app.command()
def diff(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Prompt name"),
    from_version: str = typer.Argument(..., help="Earlier version"),
    to_version: str = typer.Argument(..., help="Later version"),
    output_format: str = typer.Option("chunks", "--format", "-f", help="Output format: chunks, text, json"),
) -> None:
    """
    Show differences between two versions of a prompt.
    """
    if output_format not in ("chunks", "text", "json"):
        console.print(f"[red]Unknown format: {output_format}[/red]")
        raise typer.Exit(1)

    repo = _repo(ctx)
    with _handle_errors():
        result = repo.diff_prompt(name, from_version, to_version)

    if output_format == "json":
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    title = f"Diff: {from_version} → {to_version}"

    if output_format == "text":
        with _handle_errors():
            old = repo.store.read_content(name, from_version)
            new = repo.store.read_content(name, to_version)
        diff_text = repo.diff_engine.unified_diff(old, new, from_version, to_version)
        if diff_text:
            console.print(Panel(Syntax(diff_text, "diff", theme="monokai"), title=title, border_style="blue"))
        else:
            console.print("[yellow]No differences found[/yellow]")
        return

    body = Text()
    for chunk in result.chunks:
        prefix, style = _DIFF_STYLES[chunk.tag]
        for line in chunk.lines:
            body.append(prefix + line.rstrip("\r\n") + "\n", style=style)
    console.print(Panel(body, title=title, border_style="blue"))

    summary = repo.diff_engine.summarize(result.chunks)
    console.print(
        f"[green]+{summary['inserted']}[/green] [red]-{summary['deleted']}[/red] "
        f"[dim]{summary['equal']} unchanged[/dim]"
    )


@app.command()
def tag(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Prompt name"),
    key: str = typer.Argument(..., help="Tag key"),
    value: str = typer.Argument(..., help="Tag value"),
) -> None:
    """
    Set a tag on a prompt.
    """
    with _handle_errors():
        _repo(ctx).set_tag(name, key, value)
    console.print(f"[green]Tagged {name}: {key}={value}[/green]")


@app.command()
def untag(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Prompt name"),
    key: str = typer.Argument(..., help="Tag key"),
) -> None:
    """
    Remove a tag from a prompt.
    """
    with _handle_errors():
        _repo(ctx).remove_tag(name, key)
    console.print(f"[green]Removed tag {key} from {name}[/green]")


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default config file"),
    set_data_dir: Optional[Path] = typer.Option(None, "--set-data-dir", help="Set the prompt data directory"),
    set_model: Optional[str] = typer.Option(None, "--set-model", help="Set the default model for new prompts"),
) -> None:
    """
    Manage promptlab configuration.
    """
    config_manager = get_config_manager()

    if create_default:
        config_manager.save_config(load_config())
        console.print(f"[green]Created default configuration at {config_manager.config_file}[/green]")
        return

    if set_data_dir is not None or set_model:
        current_config = load_config()
        if set_data_dir is not None:
            current_config.data_dir = set_data_dir.expanduser()
            console.print(f"[green]Set data directory to {current_config.data_dir}[/green]")
        if set_model:
            current_config.default_model = set_model
            console.print(f"[green]Set default model to {set_model}[/green]")
        config_manager.save_config(current_config)
        console.print("[green]Configuration saved[/green]")
        return

    if show:
        info = config_manager.get_config_info()
        console.print(Panel(
            f"""[bold]promptlab Configuration[/bold]

• Data Directory: {info['data_dir']}
• Default Model: {info['default_model']}
• Default Temperature: {info['default_temperature']}
• Config File: {info['config_file']}
• Exists: {'Yes' if info['config_exists'] else 'No'}""",
            border_style="green"
        ))
        return

    console.print("Use [cyan]promptlab config --show[/cyan] to see full configuration")
    console.print("Use [cyan]promptlab config --create-default[/cyan] to create a default config file")


if __name__ == "__main__":
    app()
