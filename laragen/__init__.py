# File: laragen/__init__.py
"""
Laragen — Laravel Database Layer Generator
==========================================

An offline, source-to-source generator that turns one declarative schema
(tables, columns, enum types, model metadata, seed hints) into Laravel
migrations, Eloquent models, backed PHP enums and seeders.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────────┐
    │  CLI / Entry │────▶│ LaragenPipeline │────▶│ migrations / eloquent │
    │   (cli.py)   │     │ (generator.py)  │     │ enums / seeders       │
    └──────────────┘     └───────┬────────┘     └──────────────────────┘
                                 │
                    ┌────────────┼─────────────┬────────────┐
                    ▼            ▼             ▼            ▼
             ┌──────────┐ ┌───────────┐ ┌───────────┐ ┌──────────┐
             │validators│ │ registry  │ │ exporters │ │ typemap  │
             │  (.py)   │ │ + models  │ │  (.py)    │ │  (.py)   │
             └──────────┘ └───────────┘ └───────────┘ └──────────┘

Usage::

    # As a library
    from laragen import LaragenPipeline, SchemaRegistry
    registry = SchemaRegistry.builtin()
    report = LaragenPipeline(registry).generate_enums(tables=["orders"])

    # From the command line
    laragen db:generate-enums --tables=orders -v

Public API:
    - LaragenPipeline    — Command orchestrator
    - SchemaRegistry     — Schema loading and lookup
    - SchemaDefinition   — Canonical schema model
    - GenerationConfig   — Output paths, namespaces, numbering
    - ArtifactWriter     — File-system writer
    - validate_full      — Schema validation entry point
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from laragen.models import (
    ArtifactKind,
    ColumnDefinition,
    DependencyCycleError,
    EnumDefinition,
    GeneratedArtifact,
    GenerationConfig,
    IndexDefinition,
    ModelOptions,
    RelationshipDefinition,
    RelationshipKind,
    SchemaDefinition,
    ScopeDefinition,
    SeedOptions,
    TableDefinition,
)
from laragen.registry import SchemaRegistry, load_schema_file, parse_raw_schema
from laragen.validators import ValidationResult, validate_full
from laragen.typemap import infer_cast, infer_faker, map_type
from laragen.migrations import MigrationGenerator, render_migration
from laragen.eloquent import ModelBlueprint, ModelGenerator, render_model
from laragen.enums import EnumGenerator, patch_model_source, render_enum
from laragen.seeders import SeederGenerator
from laragen.exporters import ArtifactWriter, FileRecord, WriteStatus
from laragen.generator import GenerationReport, LaragenPipeline

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Core orchestrator
    "LaragenPipeline",
    "GenerationReport",
    # Models
    "ArtifactKind",
    "ColumnDefinition",
    "DependencyCycleError",
    "EnumDefinition",
    "GeneratedArtifact",
    "GenerationConfig",
    "IndexDefinition",
    "ModelOptions",
    "RelationshipDefinition",
    "RelationshipKind",
    "SchemaDefinition",
    "ScopeDefinition",
    "SeedOptions",
    "TableDefinition",
    # Registry
    "SchemaRegistry",
    "load_schema_file",
    "parse_raw_schema",
    # Validation
    "validate_full",
    "ValidationResult",
    # Generators
    "map_type",
    "infer_cast",
    "infer_faker",
    "MigrationGenerator",
    "render_migration",
    "ModelBlueprint",
    "ModelGenerator",
    "render_model",
    "EnumGenerator",
    "patch_model_source",
    "render_enum",
    "SeederGenerator",
    # Writer
    "ArtifactWriter",
    "FileRecord",
    "WriteStatus",
]
