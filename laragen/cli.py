# File: laragen/cli.py
"""
Laragen - Command-Line Interface
================================

Artisan-style subcommands built with the standard-library ``argparse``
module.

Usage examples::

    # Everything from the built-in schema into the current project
    laragen db:generate-migrations
    laragen db:generate-models
    laragen db:generate-enums
    laragen db:generate-seeders

    # Enums for two tables only, overwriting existing files
    laragen db:generate-enums --tables=orders,users --force

    # External schema, custom numbering
    laragen db:generate-migrations --schema=schema.yaml --start=20 --date=2024_06_01

    # Check a schema without writing anything
    laragen db:validate-schema --schema=schema.yaml

Exit codes:
    0 — success (skipped files and per-table warnings included)
    1 — schema validation error or foreign-key cycle
    2 — generation error
    3 — write error
    4 — input error (unreadable or malformed schema file, bad option)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

from laragen.generator import (
    EXIT_EXPORT_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    GenerationReport,
    LaragenPipeline,
)
from laragen.models import GenerationConfig
from laragen.registry import SchemaRegistry, merge_config
from laragen.utils import Timer
from laragen.validators import ValidationResult

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen")


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root laragen logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity < 0:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    formatter: logging.Formatter = logging.Formatter(fmt, datefmt=datefmt)
    handler.setFormatter(formatter)

    root_logger: logging.Logger = logging.getLogger("laragen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Prevent propagation to root logger
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _table_list(value: str) -> List[str]:
    """``--tables=a,b`` → ``['a', 'b']``."""
    return [part.strip() for part in value.split(",") if part.strip()]


def _add_common_options(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "--schema",
        type=str,
        default=None,
        metavar="PATH",
        help=(
            "External schema file (JSON or YAML). "
            "Defaults to the built-in schema."
        ),
    )
    sub.add_argument(
        "--base-path",
        type=str,
        default=None,
        metavar="DIR",
        help="Laravel project root (default: current directory).",
    )
    sub.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Render everything but don't write files to disk.",
    )

    verbosity_group = sub.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )


def _add_tables_option(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "--tables",
        type=_table_list,
        action="append",
        default=None,
        metavar="T1,T2",
        help="Only these tables (comma-separated, may be repeated).",
    )


def _add_force_option(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite files that already exist.",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from laragen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="laragen",
        description=(
            "Laragen — Laravel database layer generator.\n\n"
            "Turns one declarative schema into migrations, Eloquent models, "
            "backed enums and seeders."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s db:generate-migrations --start=14\n"
            "  %(prog)s db:generate-enums --tables=orders --force\n"
            "  %(prog)s db:generate-seeders --count=25\n"
            "  %(prog)s db:validate-schema --schema=schema.yaml\n"
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Laragen v{__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # --- db:generate-migrations ---
    migrations = subparsers.add_parser(
        "db:generate-migrations",
        help="Generate create-table migrations.",
    )
    _add_common_options(migrations)
    _add_tables_option(migrations)
    migrations.add_argument(
        "--start",
        type=int,
        default=None,
        metavar="N",
        help="First migration counter (default: 14).",
    )
    migrations.add_argument(
        "--date",
        type=str,
        default=None,
        metavar="YYYY_MM_DD",
        help="Date prefix for migration file names (default: 2024_01_01).",
    )

    # --- db:generate-models ---
    models = subparsers.add_parser(
        "db:generate-models",
        help="Generate Eloquent models (pivot tables excluded).",
    )
    _add_common_options(models)
    _add_tables_option(models)
    _add_force_option(models)

    # --- db:generate-enums ---
    enums = subparsers.add_parser(
        "db:generate-enums",
        help="Generate backed enums and add their casts to models.",
    )
    _add_common_options(enums)
    _add_tables_option(enums)
    _add_force_option(enums)

    # --- db:generate-seeders ---
    seeders = subparsers.add_parser(
        "db:generate-seeders",
        help="Generate seeders and the DatabaseSeeder.",
    )
    _add_common_options(seeders)
    _add_tables_option(seeders)
    _add_force_option(seeders)
    seeders.add_argument(
        "--count",
        type=int,
        default=None,
        metavar="N",
        help="Rows per table when the schema sets no count (default: 10).",
    )

    # --- db:validate-schema ---
    validate = subparsers.add_parser(
        "db:validate-schema",
        help="Validate the schema and print the report.",
    )
    _add_common_options(validate)

    return parser


# ---------------------------------------------------------------------------
# Schema & config loading
# ---------------------------------------------------------------------------


def _load_registry(schema: Optional[str]) -> SchemaRegistry:
    """
    Built-in registry, or the one in *schema*.

    A missing file falls back to the built-in schema with a warning.
    Parse errors propagate as ``ValueError``.
    """
    if schema is None:
        return SchemaRegistry.builtin()

    schema_path: Path = Path(schema)
    if not schema_path.exists():
        logger.warning(
            "Schema file not found: %s — using the built-in schema.", schema_path
        )
        return SchemaRegistry.builtin()
    return SchemaRegistry.from_file(schema_path)


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {
        "base_path": args.base_path,
        "migration_start": getattr(args, "start", None),
        "migration_date": getattr(args, "date", None),
        "seed_count": getattr(args, "count", None),
    }
    if getattr(args, "force", False):
        overrides["force"] = True
    if args.dry_run:
        overrides["dry_run"] = True
    return overrides


def _selected_tables(args: argparse.Namespace) -> Optional[List[str]]:
    """
    Flattened ``--tables`` values; None when the flag was not given.

    An explicit but empty filter (``--tables=``) comes back as ``[]``.
    """
    groups: Optional[List[List[str]]] = getattr(args, "tables", None)
    if groups is None:
        return None
    return [name for group in groups for name in group]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _run_validate_only(registry: SchemaRegistry, config: GenerationConfig) -> int:
    """
    Run validation only (no code generation).

    Returns the appropriate exit code.
    """
    pipeline: LaragenPipeline = LaragenPipeline(registry, config)

    with Timer("validation") as t:
        result: ValidationResult = pipeline.validate()

    source: str = registry.schema.source_file or "built-in schema"
    print(f"\n{'='*50}")
    print("  Schema Validation Report")
    print(f"{'='*50}")
    print(f"  Source:   {source}")
    print(f"  Tables:   {len(registry)}")
    print(f"  Enums:    {len(registry.enums)}")
    print(f"  Pivots:   {len(registry.schema.pivot_tables())}")
    print(f"  Time:     {t.elapsed:.3f}s")
    print(f"  Valid:    {'Yes' if result.is_valid else 'No'}")

    if result.errors:
        print(f"\n  Errors ({len(result.errors)}):")
        for err in result.errors:
            print(f"    ✗ {err}")

    if result.warnings:
        print(f"\n  Warnings ({len(result.warnings)}):")
        for warn in result.warnings:
            print(f"    ⚠ {warn}")

    if result.is_valid and not result.warnings:
        print("\n  ✅ All validations passed!")

    print(f"{'='*50}\n")

    return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATION_ERROR


def _run_generation(
    command: str,
    registry: SchemaRegistry,
    config: GenerationConfig,
    tables: Optional[List[str]],
    quiet: bool,
) -> int:
    """
    Run one generator command.

    Returns the appropriate exit code.
    """
    pipeline: LaragenPipeline = LaragenPipeline(registry, config)

    if config.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    runners = {
        "db:generate-migrations": pipeline.generate_migrations,
        "db:generate-models": pipeline.generate_models,
        "db:generate-enums": pipeline.generate_enums,
        "db:generate-seeders": pipeline.generate_seeders,
    }
    report: GenerationReport = runners[command](tables)

    if not quiet:
        print(report.summary())

    return report.exit_code


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    # --- Verbosity ---
    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    # --- Schema ---
    try:
        registry: SchemaRegistry = _load_registry(args.schema)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load schema: %s", exc)
        sys.exit(EXIT_INPUT_ERROR)

    # --- Configuration: schema file, then flags ---
    try:
        config: GenerationConfig = merge_config(
            registry.config, _build_config_overrides(args)
        )
    except ValueError as exc:
        logger.error("%s", exc)
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Command: %s", args.command)
    logger.info("Schema:  %s", registry.schema.source_file or "built-in")
    logger.info("Root:    %s", Path(config.base_path).resolve())

    if args.command == "db:validate-schema":
        sys.exit(_run_validate_only(registry, config))

    tables: Optional[List[str]] = _selected_tables(args)
    if tables is not None and not tables:
        logger.error("--tables was given without any table names.")
        sys.exit(EXIT_INPUT_ERROR)

    exit_code: int = _run_generation(
        args.command, registry, config, tables, args.quiet
    )

    if exit_code == EXIT_SUCCESS:
        logger.info("%s completed successfully.", args.command)
    else:
        logger.error("%s failed with exit code %d.", args.command, exit_code)

    sys.exit(exit_code)


def main() -> None:
    """Console-script entry point."""
    cli_main()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("laragen.cli loaded — %d public symbols.", len(__all__))
