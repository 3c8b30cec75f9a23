"""Command line interface for Directus TypeForge."""

import logging
import sys
from json import dumps
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from requests import RequestException
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from snapshot import download_snapshot, read_snapshot_file
from typegen import (
    GenerateOptions,
    Snapshot,
    generate_typescript,
    report_to_json,
    report_to_markdown,
)

app = App(help="Generate TypeScript types from a Directus schema")

console = Console()
err_console = Console(stderr=True)

type Host = Annotated[str | None, Parameter(env_var="DIRECTUS_HOST")]
type Token = Annotated[str | None, Parameter(env_var="DIRECTUS_TOKEN")]
type Email = Annotated[str | None, Parameter(env_var="DIRECTUS_EMAIL")]
type Password = Annotated[str | None, Parameter(env_var="DIRECTUS_PASSWORD")]


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(*, verbose: bool) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def validate_output_path(output: Path) -> None:
    """Validate output path is writable."""
    output_dir = output.parent
    if not output_dir.exists():
        print_error(f"Output directory does not exist: {output_dir}")
        sys.exit(1)
    if not output_dir.is_dir():
        print_error(f"Output path parent is not a directory: {output_dir}")
        sys.exit(1)


def write_output(text: str, output: Path | None) -> None:
    """Write text to a file, or to stdout when no file is given."""
    if output is None:
        sys.stdout.write(text)
        return
    try:
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        print_error(f"Failed to write output file: {e}")
        sys.exit(1)


def load_snapshot(
    snapshot_file: Path | None,
    host: str | None,
    token: str | None,
    email: str | None,
    password: str | None,
) -> Snapshot:
    """Read a snapshot from a file or fetch it from a live instance."""
    if snapshot_file is not None:
        if not snapshot_file.exists():
            print_error(f"Snapshot file does not exist: {snapshot_file}")
            sys.exit(1)
        print_info(f"Snapshot file: {snapshot_file}")
        try:
            return read_snapshot_file(snapshot_file)
        except (OSError, ValueError) as e:
            print_error(f"Failed to read snapshot: {e}")
            sys.exit(1)

    if not host:
        print_error("Provide a snapshot file or a --host to fetch it from")
        sys.exit(1)

    print_info(f"Host: {host}")
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        progress.add_task("Fetching schema snapshot...", total=None)
        try:
            return download_snapshot(
                host,
                token=token,
                email=email,
                password=password,
            )
        except (RequestException, ValueError) as e:
            print_error(f"Failed to fetch snapshot: {e}")
            sys.exit(1)


@app.command
def generate(  # noqa: PLR0913
    snapshot_file: Path | None = None,
    *,
    host: Host = None,
    token: Token = None,
    email: Email = None,
    password: Password = None,
    output: Path | None = None,
    report: Path | None = None,
    root_type_name: str = "ApiCollections",
    reference_unions: bool = True,
    required: bool = False,
    system_fields: bool = True,
    export_system: bool = True,
    system_relations: bool = True,
    notes: bool = False,
    type_aliases: bool = False,
    verbose: bool = False,
) -> None:
    """Generate TypeScript declarations from a schema snapshot.

    Parameters
    ----------
    snapshot_file
        Snapshot JSON file; fetched from --host when omitted.
    output
        File for the generated declarations; stdout when omitted.
    report
        File for the resolution report, Markdown or JSON by extension.
    root_type_name
        Name of the aggregate declaration listing every collection.
    reference_unions
        Type relations as an ID-or-object union.
    required
        Drop optional markers regardless of nullability.
    system_fields
        Merge the built-in field lists into system collections.
    export_system
        List system collections in the aggregate declaration.
    system_relations
        Add internal relations of system collections the snapshot omits.
    notes
        Emit field notes as documentation comments.
    type_aliases
        Emit type aliases instead of interfaces.
    """
    configure_logging(verbose=verbose)

    if output:
        validate_output_path(output)
    if report:
        validate_output_path(report)

    schema = load_snapshot(snapshot_file, host, token, email, password)
    options = GenerateOptions(
        root_type_name=root_type_name,
        use_reference_unions=reference_unions,
        make_fields_required=required,
        include_system_fields=system_fields,
        export_system_entities=export_system,
        resolve_system_fallback_relations=system_relations,
        annotate_with_notes=notes,
        use_type_aliases=type_aliases,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        progress.add_task("Generating types...", total=None)
        result = generate_typescript(schema, options)

    write_output(result.source, output)

    if report:
        title = snapshot_file.stem if snapshot_file else (host or "schema")
        if report.suffix.lower() == ".json":
            report_text = report_to_json(result.report)
        else:
            report_text = report_to_markdown(result.report, title)
        write_output(report_text, report)
        print_info(f"Report written to {report}")

    if result.report.unresolved:
        print_info(f"{len(result.report.unresolved)} alias fields left unresolved")
    print_success("Type generation completed successfully")


@app.command
def snapshot(
    *,
    host: Host = None,
    token: Token = None,
    email: Email = None,
    password: Password = None,
    output: Path | None = None,
    verbose: bool = False,
) -> None:
    """Download the schema snapshot of a live instance as JSON."""
    configure_logging(verbose=verbose)

    if output:
        validate_output_path(output)

    schema = load_snapshot(None, host, token, email, password)
    write_output(dumps(schema, indent=2), output)
    print_success("Snapshot downloaded successfully")


if __name__ == "__main__":
    app()
