# File: laragen/generator.py
"""
Laragen - Generation Pipeline (Orchestrator)
============================================

Connects every phase of a command::

    Schema Registry → Validation → Generation → Artifact Writer → Report

``LaragenPipeline`` backs the four ``db:generate-*`` commands.  Each run
returns a ``GenerationReport`` with step timings, the files that were
generated, patched or skipped, and every warning and error collected on
the way.

Error handling strategy:
    - Validation errors abort the command before anything is written.
    - Lookup misses (unknown ``--tables`` names, pivot tables asked for by
      name, missing model files) are warnings; the run continues.
    - Write failures are recorded per file; the rest of the batch is
      still written.
    - A foreign-key cycle aborts seeder generation.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from laragen.eloquent import ModelGenerator
from laragen.enums import EnumGenerator, EnumPlan
from laragen.exporters import ArtifactWriter, FileRecord, WriteStatus
from laragen.migrations import MigrationGenerator
from laragen.models import (
    ArtifactKind,
    DependencyCycleError,
    GeneratedArtifact,
    GenerationConfig,
    SchemaDefinition,
    TableDefinition,
)
from laragen.registry import SchemaRegistry
from laragen.seeders import SeederGenerator
from laragen.utils import Timer
from laragen.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.generator")

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by every ``LaragenPipeline`` command.

    Skips and warnings never make a run fail; validation, generation and
    write errors do, and decide the exit code in that order.
    """

    command: str = ""
    success: bool = False
    base_path: str = ""
    dry_run: bool = False

    # Metrics
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    # Sub-reports
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    generated: List[str] = field(default_factory=list)
    patched: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)

    # Written or planned file records
    records: List[FileRecord] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        if self.validation_errors:
            return EXIT_VALIDATION_ERROR
        if self.generation_errors:
            return EXIT_GENERATION_ERROR
        if self.export_errors:
            return EXIT_EXPORT_ERROR
        return EXIT_SUCCESS

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        verb: str = "Files planned:" if self.dry_run else "Files written:"
        lines.append(f"{'='*60}")
        lines.append(f"  Laragen — {self.command or 'Generation'} Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Project root:     {self.base_path}")
        if self.dry_run:
            lines.append("  Mode:             dry-run (nothing written)")
        lines.append(f"  {verb:<17s} {len(self.generated)}")
        lines.append(f"  Models patched:   {len(self.patched)}")
        lines.append(f"  Skipped:          {len(self.skipped)}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(
            f"  Total time:       {self.total_elapsed_seconds:.3f}s"
        )
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        sections = (
            ("Generated", self.generated, "✓"),
            ("Patched", self.patched, "✓"),
            ("Skipped", self.skipped, "⊘"),
            ("Warnings", self.warnings, "⚠"),
            ("Validation Errors", self.validation_errors, "✗"),
            ("Validation Warnings", self.validation_warnings, "⚠"),
            ("Generation Errors", self.generation_errors, "✗"),
            ("Export Errors", self.export_errors, "✗"),
        )
        for title, items, icon in sections:
            if not items:
                continue
            lines.append(f"{'─'*60}")
            lines.append(f"  {title} ({len(items)}):")
            for item in items:
                lines.append(f"    {icon} {item}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# LaragenPipeline — command orchestrator
# ---------------------------------------------------------------------------

_StepFn = Callable[
    [List[TableDefinition], bool, ArtifactWriter, GenerationReport], str
]


class LaragenPipeline:
    """
    Runs one generator over a schema and writes its artifacts.

    Usage::

        registry = SchemaRegistry.builtin()
        pipeline = LaragenPipeline(registry, registry.config)

        report = pipeline.generate_migrations()
        report = pipeline.generate_enums(tables=["orders"])
        print(report.summary())

    The pipeline is reusable; every command builds its own writer.
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        config: Optional[GenerationConfig] = None,
    ) -> None:
        self._registry: SchemaRegistry = registry
        self._config: GenerationConfig = config or registry.config

        logger.debug(
            "LaragenPipeline initialised: base=%s, force=%s, dry_run=%s.",
            self._config.base_path,
            self._config.force,
            self._config.dry_run,
        )

    @property
    def schema(self) -> SchemaDefinition:
        return self._registry.schema

    @property
    def config(self) -> GenerationConfig:
        return self._config

    # -----------------------------------------------------------------
    # Public: commands
    # -----------------------------------------------------------------

    def validate(self) -> ValidationResult:
        """Cross-entity validation of the schema and the configuration."""
        return validate_full(self.schema, self._config)

    def generate_migrations(
        self, tables: Optional[Sequence[str]] = None
    ) -> GenerationReport:
        return self._run("Migrations", tables, self._step_migrations)

    def generate_models(
        self, tables: Optional[Sequence[str]] = None
    ) -> GenerationReport:
        return self._run("Models", tables, self._step_models)

    def generate_enums(
        self, tables: Optional[Sequence[str]] = None
    ) -> GenerationReport:
        return self._run("Enums", tables, self._step_enums)

    def generate_seeders(
        self, tables: Optional[Sequence[str]] = None
    ) -> GenerationReport:
        return self._run("Seeders", tables, self._step_seeders)

    # -----------------------------------------------------------------
    # Internal: shared run skeleton
    # -----------------------------------------------------------------

    def _run(
        self,
        command: str,
        tables: Optional[Sequence[str]],
        step: _StepFn,
    ) -> GenerationReport:
        report: GenerationReport = GenerationReport(
            command=command,
            base_path=str(Path(self._config.base_path).resolve()),
            dry_run=self._config.dry_run,
        )
        pipeline_start: float = time.perf_counter()

        if not self._step_validate(report):
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        selected: List[TableDefinition] = self._step_resolve(tables, report)
        filtered: bool = bool(tables)

        writer: ArtifactWriter = ArtifactWriter(
            Path(self._config.base_path),
            force=self._config.force,
            dry_run=self._config.dry_run,
        )

        with Timer(command) as t:
            try:
                detail: str = step(selected, filtered, writer, report)
            except DependencyCycleError as exc:
                report.validation_errors.append(str(exc))
                logger.error("%s", exc)
                detail = "dependency cycle"
            except Exception as exc:
                error_msg: str = (
                    f"Fatal generation error: {type(exc).__name__}: {exc}"
                )
                report.generation_errors.append(error_msg)
                logger.error(error_msg, exc_info=True)
                detail = "aborted"

        report.step_metrics.append(GenerationStepMetric(
            step_name=f"Generate {command}",
            success=not (report.generation_errors or report.validation_errors),
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))

        if writer.failures:
            logger.error("%d file(s) could not be written.", len(writer.failures))

        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    def _step_validate(self, report: GenerationReport) -> bool:
        """Run the validation pipeline; False when errors were found."""
        with Timer("validation") as t:
            result: ValidationResult = self.validate()

        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)

        if result.has_errors:
            detail: str = f"{result.error_count} error(s)"
        elif result.warning_count:
            detail = f"{result.warning_count} warning(s)"
        else:
            detail = "all checks passed"

        report.step_metrics.append(GenerationStepMetric(
            step_name="Validate Schema",
            success=result.is_valid,
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))

        if result.has_errors:
            for err in result.errors:
                logger.error("  ✗ %s", err)
            return False
        for warn in result.warnings:
            logger.warning("  ⚠ %s", warn)
        return True

    def _step_resolve(
        self,
        tables: Optional[Sequence[str]],
        report: GenerationReport,
    ) -> List[TableDefinition]:
        found, missing = self._registry.resolve(tables)
        for name in missing:
            report.warnings.append(f"Table '{name}' not found in schema registry.")
        report.step_metrics.append(GenerationStepMetric(
            step_name="Resolve Tables",
            success=True,
            detail=(
                f"{len(found)} selected"
                + (f", {len(missing)} unknown" if missing else "")
            ),
        ))
        return found

    # -----------------------------------------------------------------
    # Internal: generator steps
    # -----------------------------------------------------------------

    def _step_migrations(
        self,
        selected: List[TableDefinition],
        filtered: bool,
        writer: ArtifactWriter,
        report: GenerationReport,
    ) -> str:
        generator: MigrationGenerator = MigrationGenerator(self._config)
        state = generator.scan()
        counter = generator.counter(state)

        # Registry order, whatever order --tables listed them in
        wanted = {t.name for t in selected}
        ordered: List[TableDefinition] = [t for t in self.schema.tables if t.name in wanted]

        for table in ordered:
            if state.has_table(table.name):
                existing: str = f"{self._config.migrations_path}/{state.tables[table.name]}"
                logger.info("Migration for '%s' already exists: %s.", table.name, existing)
                self._collect(
                    writer.skip(existing, ArtifactKind.MIGRATION.value, table.name, "migration exists"),
                    report,
                )
                continue

            artifact: GeneratedArtifact = generator.build(table, counter.peek())
            record: FileRecord = self._collect(writer.write(artifact), report)
            if record.status in (WriteStatus.WRITTEN, WriteStatus.PLANNED):
                counter.advance()

        return f"{len(ordered)} tables, next counter {counter.peek():06d}"

    def _step_models(
        self,
        selected: List[TableDefinition],
        filtered: bool,
        writer: ArtifactWriter,
        report: GenerationReport,
    ) -> str:
        generator: ModelGenerator = ModelGenerator(self._config)
        built: int = 0
        for table in selected:
            if table.is_pivot:
                if filtered:
                    message: str = f"Table '{table.name}' is a pivot table; no model generated."
                    logger.warning(message)
                    report.warnings.append(message)
                continue
            self._collect(writer.write(generator.build(table)), report)
            built += 1
        return f"{built} models, {len(self.schema.pivot_tables())} pivot tables excluded"

    def _step_enums(
        self,
        selected: List[TableDefinition],
        filtered: bool,
        writer: ArtifactWriter,
        report: GenerationReport,
    ) -> str:
        generator: EnumGenerator = EnumGenerator(self.schema, self._config)
        plan: EnumPlan = generator.plan(selected if filtered else None)

        for name in plan.tables_without_enums:
            message: str = f"Table '{name}' has no enum columns."
            logger.warning(message)
            report.warnings.append(message)

        for enum_def in plan.enums:
            record: FileRecord = self._collect(writer.write(generator.build(enum_def)), report)
            if record.status not in (WriteStatus.WRITTEN, WriteStatus.PLANNED):
                continue
            for table, column in plan.bindings[enum_def.name]:
                self._patch_model(generator, writer, report, table, enum_def.name, column)

        return f"{len(plan.enums)} enums, {len(report.patched)} models patched"

    def _patch_model(
        self,
        generator: EnumGenerator,
        writer: ArtifactWriter,
        report: GenerationReport,
        table: TableDefinition,
        enum_name: str,
        column: str,
    ) -> None:
        if table.is_pivot:
            logger.debug("Pivot table '%s' has no model to patch.", table.name)
            return

        path: str = generator.model_path(table)
        if not writer.exists(path):
            message: str = (
                f"Model {path} not found; cast {table.name}.{column} → "
                f"{enum_name} not added."
            )
            logger.warning(message)
            report.warnings.append(message)
            return

        try:
            source: str = writer.read(path)
            patched, changed = generator.patch(source, enum_name, column)
        except (OSError, ValueError) as exc:
            error_msg: str = f"Cannot patch {path}: {exc}"
            logger.error(error_msg)
            report.generation_errors.append(error_msg)
            return

        record: FileRecord = writer.patch(
            path, patched, ArtifactKind.MODEL.value, table.model_name, changed
        )
        if record.status in (WriteStatus.PATCHED, WriteStatus.PLANNED):
            report.patched.append(record.relative_path)
            report.records.append(record)
        elif record.status == WriteStatus.UNCHANGED:
            report.unchanged.append(record.relative_path)
        else:
            report.export_errors.append(record.message)

    def _step_seeders(
        self,
        selected: List[TableDefinition],
        filtered: bool,
        writer: ArtifactWriter,
        report: GenerationReport,
    ) -> str:
        generator: SeederGenerator = SeederGenerator(self.schema, self._config)

        # The order is needed before any seeder is written: a cycle aborts
        orchestrator: Optional[GeneratedArtifact] = None
        if not filtered:
            orchestrator = generator.build_orchestrator()

        for table in selected:
            self._collect(writer.write(generator.build(table)), report)

        if orchestrator is not None:
            self._collect(writer.write(orchestrator), report)
        else:
            logger.info("Table filter given; DatabaseSeeder left unchanged.")

        return f"{len(selected)} seeders" + ("" if filtered else " + DatabaseSeeder")

    # -----------------------------------------------------------------
    # Internal: bookkeeping
    # -----------------------------------------------------------------

    @staticmethod
    def _collect(record: FileRecord, report: GenerationReport) -> FileRecord:
        status: WriteStatus = record.status
        if status in (WriteStatus.WRITTEN, WriteStatus.PLANNED):
            report.generated.append(record.relative_path)
            report.records.append(record)
        elif status == WriteStatus.SKIPPED:
            report.skipped.append(record.relative_path)
        else:
            report.export_errors.append(record.message)
        return record

    def _finalise_report(
        self,
        report: GenerationReport,
        total_elapsed: float,
    ) -> GenerationReport:
        """Set final status, totals and timing on the report."""
        report.total_elapsed_seconds = total_elapsed
        report.total_files = len(report.records)
        report.total_bytes = sum(r.size_bytes for r in report.records)
        report.total_lines = sum(r.line_count for r in report.records)
        report.success = report.exit_code == EXIT_SUCCESS

        if report.success:
            logger.info(
                "%s: %d generated, %d patched, %d skipped in %.3fs.",
                report.command,
                len(report.generated),
                len(report.patched),
                len(report.skipped),
                total_elapsed,
            )
        else:
            logger.error(
                "%s failed with exit code %d.", report.command, report.exit_code
            )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
    "GenerationStepMetric",
    "GenerationReport",
    "LaragenPipeline",
]

logger.debug("laragen.generator loaded — %d public symbols.", len(__all__))
