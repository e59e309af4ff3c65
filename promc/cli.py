"""
Command-line interface for promc.

Provides the ``generate`` and ``version-file`` commands.
"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich import box
from rich.markup import escape

from . import __version__
from .codegen import (
    ConfigError,
    GeneratorError,
    MetricConfigError,
    SchemaValidationError,
    generate_from_config,
    load_config,
)
from .codegen.core.config import GeneratorConfig
from .codegen.core.templates import TemplateError
from .codegen.languages.go import FormatError, generate_version_file, validate_go_package_name
from .logging_config import configure_logging, get_logger
from .utils import DocumentLoadError, OutputWriteError, load_document, write_text_atomic

logger = get_logger(__name__)

# Diagnostics go to stderr so stdout stays clean
console = Console(stderr=True, soft_wrap=True)

EXIT_OK = 0
EXIT_FAILURE = 1


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="promc",
        description="Generate typed Prometheus metric accessors for Go from a metric configuration.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  promc generate --config metrics.json --output metrics/metrics.go --package metrics
  promc generate -c metrics.yaml -o metrics.go -p metrics --verbose
  promc version-file --output cmd/promc/version.go
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    create_generate_subparser(subparsers)
    create_version_subparser(subparsers)
    return parser


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``generate`` subcommand parser."""
    parser = subparsers.add_parser(
        "generate",
        help="Generate Go metrics code from a configuration file",
        description="Generate Prometheus metric declarations and typed accessors for Go.",
    )

    required = parser.add_argument_group("required arguments")
    required.add_argument(
        "--config", "-c", required=True, metavar="FILE",
        help="Path to the metric configuration file (JSON, or YAML by suffix)",
    )
    required.add_argument(
        "--output", "-o", required=True, metavar="FILE",
        help="Path to the generated Go file",
    )
    required.add_argument(
        "--package", "-p", required=True, metavar="NAME",
        help="Go package name for the generated file",
    )

    parser.add_argument(
        "--settings", metavar="FILE", help="JSON file with generator settings"
    )
    parser.add_argument(
        "--no-comments", action="store_true", help="Don't emit doc comments"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show generation metadata"
    )

    parser.set_defaults(func=handle_generate)
    return parser


def create_version_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``version-file`` subcommand parser."""
    parser = subparsers.add_parser(
        "version-file",
        help="Generate a Go file recording the build's git tag and commit",
    )
    parser.add_argument(
        "--output", "-o", required=True, metavar="FILE", help="Path to the generated Go file"
    )
    parser.add_argument(
        "--package", "-p", default="main", metavar="NAME",
        help="Go package name (default: main)",
    )
    parser.add_argument(
        "--repo", metavar="DIR", help="Git checkout to describe (default: current directory)"
    )
    parser.add_argument("--settings", metavar="FILE", help="JSON file with generator settings")

    parser.set_defaults(func=handle_version_file)
    return parser


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build generator settings from the settings file and CLI flags."""
    overrides = {}
    if getattr(args, "no_comments", False):
        overrides["add_comments"] = False

    try:
        return load_config(custom_config=overrides, config_file=args.settings)
    except ConfigError as e:
        raise CLIError(f"Settings error: {e}") from e


def _check_package_name(package_name: str) -> None:
    errors, _ = validate_go_package_name(package_name)
    if errors:
        raise CLIError(f"Invalid package name '{package_name}': {'; '.join(errors)}")


def _print_violations(error: SchemaValidationError) -> None:
    console.print(f"[red]✗ Config validation failed ({len(error.violations)} problem(s)):[/red]")
    for violation in error.violations:
        console.print(
            f"  [red]•[/red] [bold]{escape(violation.path)}[/bold]: {escape(violation.message)}",
            highlight=False,
        )


def _report_failure(error: Exception) -> None:
    """Print a generation failure according to its kind."""
    if isinstance(error, SchemaValidationError):
        _print_violations(error)
    elif isinstance(error, MetricConfigError):
        console.print(
            f"[red]✗ Invalid metric configuration:[/red] {escape(str(error))}", highlight=False
        )
    elif isinstance(error, FormatError):
        console.print("[red]✗ Internal error: generated code is malformed[/red]")
        console.print(str(error), markup=False, highlight=False)
    elif isinstance(error, (GeneratorError, TemplateError)):
        console.print(
            f"[red]✗ Internal generation error:[/red] {escape(str(error))}", highlight=False
        )
    else:
        console.print(f"[red]✗ Unexpected failure:[/red] {escape(str(error))}", highlight=False)


def _print_metadata(metadata: dict) -> None:
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


def handle_generate(args: argparse.Namespace) -> int:
    """
    Handle the ``generate`` command.

    Nothing is written unless every stage succeeds.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        _check_package_name(args.package)
        config = _build_config(args)
        fmt, content = load_document(args.config)
    except (CLIError, DocumentLoadError) as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}", highlight=False)
        logger.debug("generate aborted before validation", exc_info=True)
        return EXIT_FAILURE

    try:
        result = generate_from_config(content, args.package, fmt=fmt, config=config)
    except (SchemaValidationError, MetricConfigError) as e:
        _report_failure(e)
        return EXIT_FAILURE

    if not result.success:
        _report_failure(result.exception)
        return EXIT_FAILURE

    try:
        output_path = write_text_atomic(args.output, result.code)
    except OutputWriteError as e:
        console.print(f"[red]✗ Failed to write output:[/red] {escape(str(e))}", highlight=False)
        return EXIT_FAILURE

    console.print(
        f"[green]✓[/green] Generated {result.metadata.get('metric_count', 0)} metric(s) "
        f"into [cyan]{output_path}[/cyan]"
    )

    if args.verbose and result.metadata:
        _print_metadata(result.metadata)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {escape(warning)}", highlight=False)

    return EXIT_OK


def handle_version_file(args: argparse.Namespace) -> int:
    """Handle the ``version-file`` command."""
    try:
        _check_package_name(args.package)
        config = _build_config(args)
        code = generate_version_file(args.package, repo=args.repo, config=config)
        output_path = write_text_atomic(args.output, code)
    except (CLIError, GeneratorError, OutputWriteError) as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}", highlight=False)
        return EXIT_FAILURE

    console.print(f"[green]✓[/green] Wrote build identity to [cyan]{output_path}[/cyan]")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``promc`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = args.log_level
    if getattr(args, "verbose", False) and log_level == "WARNING":
        log_level = "INFO"

    configure_logging(log_level, console=console)
    logger.debug("promc %s invoked with command %s", __version__, args.command)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
