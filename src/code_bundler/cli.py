"""
CLI entry point for code-bundler.

Provides a command-line interface for bundling the source files of the current directory.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .bundler import bundle_files, prepare_output, resolve_output_path
from .config_loader import load_config, merge_cli_with_config
from .errors import CodeBundlerError, OverwriteDeclinedError
from .response_file import (
    DEFAULT_RESPONSE_FILE,
    RspAnswers,
    build_rsp_command,
    expand_response_files,
    write_response_file,
)
from .selector import list_directory, select_files

# Initialize CLI app
app = typer.Typer(
    name="fib",
    help="Bundle the source files of the current directory into a single file.",
    add_completion=False,
)

console = Console()

LANGUAGE_HELP = (
    "Programming languages to include (csharp, java, python, javascript, typescript, "
    "php, cpp, go, ruby, html, css). Repeat the option or separate with commas. "
    "Use 'all' to include every file."
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"fib version {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    version: bool = typer.Option(
        False,
        "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Bundle code files into a single output file."""


def confirm_overwrite(path: Path) -> bool:
    """Ask the operator whether an existing output file may be replaced."""
    return typer.confirm(
        f"The file '{path}' already exists. Do you want to overwrite it?",
        default=False,
    )


@app.command()
def bundle(
    language: Optional[List[str]] = typer.Option(
        None,
        "--language", "-l",
        help=LANGUAGE_HELP,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output file path. Defaults to bundle_output.txt in the current directory.",
    ),
    note: bool = typer.Option(
        False,
        "--note", "-n",
        help="Include a comment with the source file's path.",
    ),
    sort: Optional[str] = typer.Option(
        None,
        "--sort", "-s",
        help="Sort files by 'name' or 'type'. Default is 'name'.",
    ),
    remove_empty_lines: bool = typer.Option(
        False,
        "--remove-empty-lines", "-r",
        help="Remove empty lines from source code.",
    ),
    author: Optional[str] = typer.Option(
        None,
        "--author", "-a",
        help="Author name to include as a comment before each file.",
    ),
    yes: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Overwrite an existing output file without asking.",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Config file with default options (default: fib.toml / fib.yml in the current directory).",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """
    Bundle code files of the current directory into a single output file.

    Examples:

        # Bundle all Python files
        fib bundle -l python

        # Bundle C# and JavaScript, sorted by extension, with path notes
        fib bundle -l csharp,javascript -s type -n -o all_code.txt

        # Bundle every file with an author line before each one
        fib bundle -l all -a "Jane Doe" -r
    """
    start_time = time.time()
    cwd = Path.cwd()

    try:
        project_config = load_config(cwd, config_file)
        config = merge_cli_with_config(
            project_config,
            languages=language,
            output=output,
            note=note,
            sort=sort,
            remove_empty_lines=remove_empty_lines,
            author=author,
        )

        output_path = prepare_output(
            config,
            confirm=(lambda _path: True) if yes else confirm_overwrite,
            cwd=cwd,
        )

        listing = list_directory(cwd, skip=[output_path])
        files, stats = select_files(listing, config, console=console)

        if not files:
            console.print("[yellow]Warning: No files found matching criteria.[/yellow]")

        summary = bundle_files(files, config, output_path=output_path, console=console)

    except OverwriteDeclinedError as e:
        console.print(f"[red]Error: Operation canceled. {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except CodeBundlerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    elapsed = time.time() - start_time

    console.print()
    console.print(
        f"[bold green]Bundle created successfully: {escape(str(summary.output_path))}[/bold green]"
    )
    console.print()
    console.print("[cyan]Statistics:[/cyan]")
    console.print(f"  Files scanned: {stats.files_scanned}")
    console.print(f"  Files included: {summary.files_written}")
    console.print(f"  Files skipped (directory): {stats.files_skipped_directory}")
    console.print(f"  Files skipped (extension): {stats.files_skipped_extension}")
    console.print(f"  Lines written: {summary.lines_written:,}")
    console.print(f"  Processing time: {elapsed:.2f}s")


@app.command()
def info(
    language: Optional[List[str]] = typer.Option(
        None,
        "--language", "-l",
        help=LANGUAGE_HELP,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output file path to leave out of the listing, as with 'bundle'.",
    ),
    sort: Optional[str] = typer.Option(
        None,
        "--sort", "-s",
        help="Sort files by 'name' or 'type'. Default is 'name'.",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Config file with default options.",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """
    Show which files would be bundled, in order, without writing anything.

    Uses the same selection logic as 'bundle' for consistent results.
    """
    cwd = Path.cwd()

    try:
        project_config = load_config(cwd, config_file)
        config = merge_cli_with_config(
            project_config, languages=language, output=output, sort=sort
        )
        output_path = resolve_output_path(config, cwd)
        listing = list_directory(cwd, skip=[output_path])
        files, stats = select_files(listing, config)
    except CodeBundlerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Directory: {escape(cwd.name)}[/bold]\n")

    console.print("[cyan]Files to bundle:[/cyan]")
    if not files:
        console.print("  [yellow](none)[/yellow]")
    for f in files:
        console.print(f"  {escape(f.name)}")

    if stats.languages_detected:
        console.print("\n[cyan]Languages detected:[/cyan]")
        for lang, count in stats.to_dict()["languages_detected"].items():
            console.print(f"  {lang}: {count} files")

    console.print("\n[cyan]Statistics:[/cyan]")
    console.print(f"  Total files scanned: {stats.files_scanned}")
    console.print(f"  Files included: {stats.files_included}")
    console.print(f"  Files skipped (directory): {stats.files_skipped_directory}")
    console.print(f"  Files skipped (extension): {stats.files_skipped_extension}")


@app.command("create-rsp")
def create_rsp() -> None:
    """
    Create a response file for bundling files.

    Asks a few questions and writes the equivalent 'bundle' command to command.rsp.
    """
    answers = RspAnswers(
        languages=typer.prompt(
            "Select the programming languages to include (e.g., csharp, python, or all)"
        ),
        output=typer.prompt(
            "Where should the output file be saved? (Press Enter to use the default: bundle_output.txt)",
            default="",
            show_default=False,
        ),
        note=typer.prompt(
            "Would you like to add a comment showing the file's original path? (yes/no) (Default: no)",
            default="",
            show_default=False,
        ),
        sort=typer.prompt(
            "How should the files be sorted? Choose 'name' or 'type' (Default: name)",
            default="",
            show_default=False,
        ),
        remove_empty_lines=typer.prompt(
            "Should empty lines be removed from the code? (yes/no) (Default: no)",
            default="",
            show_default=False,
        ),
        author=typer.prompt(
            "Enter the name of the author (leave blank if not applicable)",
            default="",
            show_default=False,
        ),
    )

    try:
        command = build_rsp_command(answers)
        rsp_path = write_response_file(command, Path.cwd() / DEFAULT_RESPONSE_FILE)
    except CodeBundlerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]An error occurred: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Response file created: {escape(str(rsp_path))}[/green]")
    console.print(f"Run the command using: fib @{escape(rsp_path.name)}", highlight=False)


def main() -> None:
    """Entry point for the CLI."""
    try:
        args = expand_response_files(sys.argv[1:])
    except OSError as e:
        console.print(f"[red]Error: Cannot read response file: {escape(str(e))}[/red]")
        sys.exit(1)
    app(args=args, prog_name="fib")


if __name__ == "__main__":
    main()
