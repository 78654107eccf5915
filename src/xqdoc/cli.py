"""xqdoc CLI - XQuery documentation report commands."""

import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from xqdoc import __version__
from xqdoc.config import ConfigError, ReportConfig, load_config
from xqdoc.doctor import run_doctor
from xqdoc.report import REPORT_DESCRIPTOR, XQueryDocReport

cli = typer.Typer(
    name="xqdoc",
    help="xqdoc - XQuery documentation report generator",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route xqdoc loggers to a Rich handler on stderr."""
    handler = RichHandler(console=err_console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger("xqdoc")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def _version_option_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show xqdoc version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Generate XQuery documentation with a bundled xquerydoc pipeline."""


def _resolve_config(basedir: Path | None, overrides: dict[str, Any]) -> ReportConfig:
    try:
        return load_config(basedir, overrides=overrides)
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(2) from e


@cli.command()
def generate(
    basedir: Path | None = typer.Option(None, "--basedir", help="Project base directory (default: cwd)."),
    output_directory: Path | None = typer.Option(
        None, "--output-directory", "-o", help="Report output directory."
    ),
    xquery_dir: Path | None = typer.Option(None, "--xquery-dir", help="XQuery source directory."),
    implementation_folder: Path | None = typer.Option(
        None, "--implementation-folder", help="Scratch folder for the extracted implementation."
    ),
    archive: Path | None = typer.Option(None, "--archive", help="Archive holding the bundled xquerydoc."),
    java: str | None = typer.Option(None, "--java", help="Java executable."),
    skip: bool | None = typer.Option(None, "--skip/--no-skip", help="Skip generation."),
    fail_on_error: bool = typer.Option(
        False, "--fail-on-error", help="Exit non-zero when generation fails."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log the pipeline command line."),
) -> None:
    """Generate the XQuery documentation report."""
    configure_logging(verbose)
    config = _resolve_config(
        basedir,
        {
            "output_directory": output_directory,
            "xquery_dir_entry": xquery_dir,
            "implementation_folder": implementation_folder,
            "archive": archive,
            "java_executable": java,
            "skip": skip,
        },
    )

    result = XQueryDocReport(config).execute()

    if result.skipped:
        return
    if result.succeeded:
        console.print(f"[green]✓ Report written to {result.report_path}[/green]")
        return

    console.print(f"[red]✗ XQuery doc generation failed: {result.error}[/red]")
    if fail_on_error:
        raise typer.Exit(1)


@cli.command()
def info(
    as_json: bool = typer.Option(False, "--json", help="Print as JSON."),
) -> None:
    """Describe the XQuery documentation report."""
    d = REPORT_DESCRIPTOR
    if as_json:
        typer.echo(
            json.dumps(
                {
                    "output_name": d.output_name,
                    "name": d.name,
                    "description": d.description,
                    "category": d.category,
                    "external_report": d.external_report,
                    "can_generate_report": d.can_generate_report,
                },
                indent=2,
                sort_keys=True,
            )
        )
        return

    console.print(f"[bold]{d.name}[/bold] - {d.description}")
    console.print(f"  Category: {d.category}")
    console.print(f"  Output:   {d.output_filename}")


@cli.command()
def doctor(
    basedir: Path | None = typer.Option(None, "--basedir", help="Project base directory (default: cwd)."),
    archive: Path | None = typer.Option(None, "--archive", help="Archive holding the bundled xquerydoc."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
) -> None:
    """Check that Java and the bundled xquerydoc archive are available."""
    config = _resolve_config(basedir, {"archive": archive})
    report = run_doctor(config)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        symbols = {"pass": "[green]✓[/green]", "fail": "[red]✗[/red]", "warn": "[yellow]![/yellow]"}
        for item in report.checks["items"]:
            console.print(f"{symbols[item['status']]} {item['id']}: {item['message']}")
            for step in item["remediation"]:
                console.print(f"    - {step}")
        status_color = "green" if report.status == "passed" else "red"
        console.print(f"\n[{status_color}]Status: {report.status.upper()}[/{status_color}]")

    if report.status != "passed":
        raise typer.Exit(2)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
