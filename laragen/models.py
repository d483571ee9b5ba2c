# File: laragen/models.py
"""
Laragen - Core Data Models
==========================
Pydantic V2 models describing the canonical schema every generator reads:
tables, columns, indexes, enum types, model metadata and seed hints, plus
the generation configuration and the artifacts a run produces.

One ``SchemaDefinition`` is the single source of truth for the whole
pipeline: Schema Loading → Validation → Generation → Writing.  Migration,
model, enum and seeder generators never keep their own copy of a table's
shape.
"""

from __future__ import annotations

import heapq
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    computed_field,
    field_validator,
    model_validator,
)

from laragen.utils import count_lines, model_name_for, sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.models")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

RESERVED_TIMESTAMPS: Tuple[str, ...] = ("created_at", "updated_at", "deleted_at")

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SNAKE_NAME_RE: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9_]*$")
_STUDLY_NAME_RE: re.Pattern[str] = re.compile(r"^[A-Z][A-Za-z0-9]*$")

ScalarValue = Union[bool, int, float, str, None]

# ---------------------------------------------------------------------------
# Enums — fixed sets used across the entire project
# ---------------------------------------------------------------------------


class RelationshipKind(str, Enum):
    """Eloquent relationship methods a model accessor can call."""

    BELONGS_TO = "belongsTo"
    HAS_MANY = "hasMany"
    HAS_ONE = "hasOne"
    BELONGS_TO_MANY = "belongsToMany"
    MORPH_TO = "morphTo"


class ArtifactKind(str, Enum):
    """Kinds of file a generator can produce."""

    MIGRATION = "migration"
    MODEL = "model"
    ENUM = "enum"
    SEEDER = "seeder"
    ORCHESTRATOR = "orchestrator"


class DependencyCycleError(ValueError):
    """Raised when the foreign-key graph has no valid seeding order."""

    def __init__(self, tables: List[str]) -> None:
        self.tables: List[str] = tables
        super().__init__(
            "Circular foreign-key dependency between tables: "
            + ", ".join(tables)
        )


# ---------------------------------------------------------------------------
# Mixin: shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    frozen=False,
    extra="forbid",
)


def _named_list(value: Any, key: str = "name") -> Any:
    """
    Accept ``{name: {...}}`` mappings as well as ``[{name: ..., ...}]`` lists.

    Hand-written YAML reads better keyed by name; the models store lists so
    declaration order stays explicit.
    """
    if not isinstance(value, dict):
        return value
    items: List[Any] = []
    for name, body in value.items():
        if body is None:
            body = {}
        if isinstance(body, dict):
            items.append({key: name, **body})
        else:
            items.append(body)
    return items


# ---------------------------------------------------------------------------
# Low-level schema primitives
# ---------------------------------------------------------------------------


class ColumnDefinition(BaseModel):
    """
    One column of a table.

    ``type`` is the abstract type token (``string``, ``varchar``,
    ``foreignId``, ``enum`` ...).  The token is mapped to a Laravel schema
    builder call by :func:`laragen.typemap.map_type`.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Column name.")
    type: str = Field(..., min_length=1, description="Abstract type token.")
    nullable: bool = Field(default=False, description="Column allows NULL.")
    unique: bool = Field(default=False, description="Single-column UNIQUE constraint.")
    default: ScalarValue = Field(default=None, description="Literal default value.")
    length: Optional[int] = Field(default=None, ge=1, description="String length.")
    precision: Optional[Tuple[int, int]] = Field(
        default=None, description="(total digits, decimal places) for decimals."
    )
    references: Optional[str] = Field(
        default=None, description="Referenced table for foreignId columns."
    )
    on_delete: Optional[str] = Field(
        default=None, alias="onDelete", description="ON DELETE action."
    )
    values: Optional[List[str]] = Field(
        default=None, description="Allowed literals for enum columns."
    )
    enum: Optional[str] = Field(
        default=None, description="Name of the EnumDefinition bound to this column."
    )
    faker: Optional[str] = Field(
        default=None, description="Explicit synthetic-data directive for seeders."
    )
    comment: Optional[str] = Field(default=None, description="Column note.")

    @computed_field  # type: ignore[misc]
    @property
    def is_reserved_timestamp(self) -> bool:
        return self.name in RESERVED_TIMESTAMPS

    @computed_field  # type: ignore[misc]
    @property
    def is_foreign_key(self) -> bool:
        return self.type == "foreignId"

    @field_validator("values")
    @classmethod
    def _unique_values(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        if not v:
            raise ValueError("Enum 'values' must not be empty.")
        if len(v) != len(set(v)):
            dupes: List[str] = [x for x in v if v.count(x) > 1]
            raise ValueError(f"Duplicate enum values detected: {sorted(set(dupes))}")
        return v

    @field_validator("on_delete")
    @classmethod
    def _normalise_on_delete(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    @model_validator(mode="after")
    def _validate_enum_payload(self) -> "ColumnDefinition":
        if self.type == "enum" and self.values is None and self.enum is None:
            raise ValueError(
                f"Column '{self.name}' is of type enum but has neither "
                f"'values' nor an 'enum' binding."
            )
        if self.type != "enum" and (self.values is not None or self.enum is not None):
            raise ValueError(
                f"Column '{self.name}' declares enum values but its type is "
                f"'{self.type}'."
            )
        return self

    @model_validator(mode="after")
    def _validate_size_modifiers(self) -> "ColumnDefinition":
        if self.length is not None and self.precision is not None:
            raise ValueError(
                f"Column '{self.name}' declares both 'length' and 'precision'."
            )
        return self

    @model_validator(mode="after")
    def _validate_fk_modifiers(self) -> "ColumnDefinition":
        if not self.is_foreign_key and (self.references or self.on_delete):
            raise ValueError(
                f"Column '{self.name}' declares 'references'/'on_delete' but is "
                f"not a foreignId column."
            )
        return self

    def __repr__(self) -> str:
        null_flag: str = " NULL" if self.nullable else ""
        return f"<Column {self.name} {self.type}{null_flag}>"


class IndexDefinition(BaseModel):
    """Single or composite index, optionally unique."""

    model_config = _SHARED_CONFIG

    columns: List[str] = Field(
        ..., min_length=1, description="Ordered list of column names."
    )
    unique: bool = Field(default=False, description="UNIQUE index?")

    @field_validator("columns")
    @classmethod
    def _no_duplicate_columns(cls, v: List[str]) -> List[str]:
        if len(v) != len(set(v)):
            raise ValueError(f"Duplicate columns in index: {v}")
        return v


class EnumDefinition(BaseModel):
    """
    A backed PHP enum: ordered case identifiers mapped to string values,
    with optional display labels.

    Labels are all-or-nothing: when present they must name every case and
    nothing else (``validate_enum_definitions`` reports partial maps).
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Enum type name (StudlyCase).")
    cases: Dict[str, str] = Field(
        ..., min_length=1, description="Case identifier → backing value, in order."
    )
    labels: Dict[str, str] = Field(
        default_factory=dict, description="Case identifier → display label."
    )
    description: Optional[str] = Field(default=None, description="Free-text note.")

    @field_validator("name")
    @classmethod
    def _studly_name(cls, v: str) -> str:
        if not _STUDLY_NAME_RE.match(v):
            raise ValueError(f"Enum name '{v}' must be StudlyCase.")
        return v

    @field_validator("cases")
    @classmethod
    def _valid_cases(cls, v: Dict[str, str]) -> Dict[str, str]:
        bad: List[str] = [k for k in v if not _IDENTIFIER_RE.match(k)]
        if bad:
            raise ValueError(f"Invalid enum case identifiers: {bad}")
        values: List[str] = list(v.values())
        if len(values) != len(set(values)):
            dupes: List[str] = [x for x in values if values.count(x) > 1]
            raise ValueError(f"Duplicate enum values detected: {sorted(set(dupes))}")
        return v

    @property
    def values(self) -> List[str]:
        return list(self.cases.values())

    @property
    def has_labels(self) -> bool:
        return bool(self.labels)

    def options(self) -> List[Tuple[str, str]]:
        """(value, label) pairs in case-declaration order."""
        return [(value, self.labels.get(case, value)) for case, value in self.cases.items()]

    def __repr__(self) -> str:
        return f"<Enum {self.name} ({len(self.cases)} cases)>"


# ---------------------------------------------------------------------------
# Model metadata
# ---------------------------------------------------------------------------


class RelationshipDefinition(BaseModel):
    """A relationship accessor declared on a table's Eloquent model."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Accessor method name.")
    kind: RelationshipKind = Field(..., description="Eloquent relationship method.")
    model: Optional[str] = Field(
        default=None, description="Related model class (not used by morphTo)."
    )
    foreign_key: Optional[str] = Field(
        default=None, description="Explicit foreign key column."
    )
    local_key: Optional[str] = Field(
        default=None, description="Local key column for hasMany/hasOne."
    )
    table: Optional[str] = Field(
        default=None, description="Pivot table for belongsToMany."
    )
    condition: Optional[str] = Field(
        default=None, description="Equality filter written as 'column=value'."
    )

    @model_validator(mode="after")
    def _validate_shape(self) -> "RelationshipDefinition":
        if self.kind != RelationshipKind.MORPH_TO and not self.model:
            raise ValueError(
                f"Relationship '{self.name}' ({self.kind}) needs a target 'model'."
            )
        if self.condition is not None and "=" not in self.condition:
            raise ValueError(
                f"Relationship '{self.name}' condition '{self.condition}' "
                f"must look like 'column=value'."
            )
        return self

    @property
    def condition_pair(self) -> Optional[Tuple[str, str]]:
        """Split the condition on its first ``=``."""
        if self.condition is None:
            return None
        field: str
        value: str
        field, _, value = self.condition.partition("=")
        return field.strip(), value.strip()


class ScopeDefinition(BaseModel):
    """A named query scope: a conjunction of column equality predicates."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Scope name, e.g. 'provinces'.")
    where: Dict[str, ScalarValue] = Field(
        ..., min_length=1, description="column → value predicates."
    )


class ModelOptions(BaseModel):
    """Per-table metadata consumed by the model generator."""

    model_config = _SHARED_CONFIG

    class_name: Optional[str] = Field(
        default=None, description="Override for the derived model class name."
    )
    fillable: Optional[List[str]] = Field(
        default=None, description="Explicit mass-assignment allowlist."
    )
    hidden: List[str] = Field(default_factory=list, description="Serialisation-hidden fields.")
    casts: Dict[str, str] = Field(
        default_factory=dict, description="Explicit casts, merged over inferred ones."
    )
    traits: List[str] = Field(default_factory=list, description="Extra model traits.")
    relationships: List[RelationshipDefinition] = Field(
        default_factory=list, description="Relationship accessors, in order."
    )
    scopes: List[ScopeDefinition] = Field(
        default_factory=list, description="Declarative query scopes."
    )

    @model_validator(mode="before")
    @classmethod
    def _accept_mappings(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get("relationships"), dict):
            data["relationships"] = _named_list(data["relationships"])
        scopes: Any = data.get("scopes")
        if isinstance(scopes, dict):
            data["scopes"] = [
                body if isinstance(body, dict) and "where" in body
                else {"name": name, "where": body}
                for name, body in scopes.items()
            ]
        return data

    @field_validator("class_name")
    @classmethod
    def _studly_class(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _STUDLY_NAME_RE.match(v):
            raise ValueError(f"Model class name '{v}' must be StudlyCase.")
        return v


class SeedOptions(BaseModel):
    """Per-table seeding hints."""

    model_config = _SHARED_CONFIG

    count: Optional[int] = Field(
        default=None, ge=0, description="Rows to insert (overrides --count)."
    )


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


class TableDefinition(BaseModel):
    """
    Complete representation of one database table.

    One ``TableDefinition`` drives a migration, a model (unless the table
    is a pivot), any enum casts on its columns, and a seeder.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Table name (snake_case).")
    comment: Optional[str] = Field(default=None, description="Table comment / doc.")
    columns: List[ColumnDefinition] = Field(
        ..., min_length=1, description="Columns in physical order."
    )
    indexes: List[IndexDefinition] = Field(default_factory=list, description="Indexes.")
    primary: List[str] = Field(
        default_factory=list,
        description="Composite primary key columns (empty = implicit id).",
    )
    pivot: Optional[bool] = Field(
        default=None, description="Override for the derived pivot status."
    )
    model: ModelOptions = Field(default_factory=ModelOptions, description="Model metadata.")
    seed: SeedOptions = Field(default_factory=SeedOptions, description="Seeding hints.")

    _column_map: Dict[str, ColumnDefinition] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._column_map = {c.name: c for c in self.columns}

    # -- Validators ---------------------------------------------------------

    @field_validator("name")
    @classmethod
    def _snake_name(cls, v: str) -> str:
        if not _SNAKE_NAME_RE.match(v):
            raise ValueError(f"Table name '{v}' must be snake_case.")
        return v

    @model_validator(mode="after")
    def _validate_unique_columns(self) -> "TableDefinition":
        names: List[str] = [c.name for c in self.columns]
        if len(names) != len(set(names)):
            dupes: List[str] = [n for n in names if names.count(n) > 1]
            raise ValueError(
                f"Duplicate column names in table '{self.name}': {sorted(set(dupes))}"
            )
        return self

    @model_validator(mode="after")
    def _validate_primary_key(self) -> "TableDefinition":
        if not self.primary:
            return self
        if len(self.primary) < 2:
            raise ValueError(
                f"Table '{self.name}': an explicit primary key must list at "
                f"least two columns; single-column keys use the implicit id."
            )
        col_set: Set[str] = {c.name for c in self.columns}
        missing: List[str] = [c for c in self.primary if c not in col_set]
        if missing:
            raise ValueError(
                f"Primary key of table '{self.name}' references non-existent "
                f"columns: {missing}"
            )
        return self

    @model_validator(mode="after")
    def _validate_index_columns_exist(self) -> "TableDefinition":
        col_set: Set[str] = {c.name for c in self.columns}
        for idx in self.indexes:
            missing: List[str] = [c for c in idx.columns if c not in col_set]
            if missing:
                raise ValueError(
                    f"Index {idx.columns} on table '{self.name}' references "
                    f"non-existent columns: {missing}"
                )
        return self

    # -- Derived helpers ----------------------------------------------------

    def get_column(self, name: str) -> Optional[ColumnDefinition]:
        """O(1) column lookup by name."""
        return self._column_map.get(name)

    @computed_field  # type: ignore[misc]
    @property
    def has_composite_key(self) -> bool:
        return bool(self.primary)

    @computed_field  # type: ignore[misc]
    @property
    def has_timestamps(self) -> bool:
        return "created_at" in self._column_map or "updated_at" in self._column_map

    @computed_field  # type: ignore[misc]
    @property
    def has_soft_deletes(self) -> bool:
        return "deleted_at" in self._column_map

    @property
    def foreign_keys(self) -> List[ColumnDefinition]:
        """foreignId columns that name a referenced table."""
        return [c for c in self.columns if c.is_foreign_key and c.references]

    @property
    def dependencies(self) -> List[str]:
        """Referenced tables, excluding self references, in column order."""
        seen: List[str] = []
        for col in self.foreign_keys:
            if col.references != self.name and col.references not in seen:
                seen.append(col.references)  # type: ignore[arg-type]
        return seen

    @computed_field  # type: ignore[misc]
    @property
    def is_pivot(self) -> bool:
        """
        Explicit ``pivot`` flag, otherwise derived: a composite key of
        exactly two foreignId columns and no other non-timestamp columns.
        """
        if self.pivot is not None:
            return self.pivot
        if len(self.primary) != 2:
            return False
        key_columns: List[Optional[ColumnDefinition]] = [
            self.get_column(name) for name in self.primary
        ]
        if not all(c is not None and c.is_foreign_key for c in key_columns):
            return False
        return all(
            c.name in self.primary or c.is_reserved_timestamp for c in self.columns
        )

    @property
    def model_name(self) -> str:
        return self.model.class_name or model_name_for(self.name)

    def __repr__(self) -> str:
        return (
            f"<Table {self.name} "
            f"({len(self.columns)} cols, {len(self.foreign_keys)} FKs, "
            f"{len(self.model.relationships)} rels)>"
        )


# ---------------------------------------------------------------------------
# Schema Definition — top-level container
# ---------------------------------------------------------------------------


class SchemaDefinition(BaseModel):
    """
    The root model: every table and enum type known to the generators.

    Invariants: table and enum names are unique; every column bound to an
    enum type carries exactly that enum's values.
    """

    model_config = _SHARED_CONFIG

    tables: List[TableDefinition] = Field(
        ..., min_length=1, description="All tables, in registry order."
    )
    enums: List[EnumDefinition] = Field(
        default_factory=list, description="Enum types bound to columns."
    )
    source_file: Optional[str] = Field(
        default=None, description="Schema file path (None for the built-in schema)."
    )

    _table_map: Dict[str, TableDefinition] = PrivateAttr(default_factory=dict)
    _enum_map: Dict[str, EnumDefinition] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._table_map = {t.name: t for t in self.tables}
        self._enum_map = {e.name: e for e in self.enums}

    @model_validator(mode="before")
    @classmethod
    def _accept_mappings(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("tables", "enums"):
            if isinstance(data.get(key), dict):
                data[key] = _named_list(data[key])
        return data

    @model_validator(mode="after")
    def _validate_unique_names(self) -> "SchemaDefinition":
        for label, names in (
            ("table", [t.name for t in self.tables]),
            ("enum", [e.name for e in self.enums]),
        ):
            if len(names) != len(set(names)):
                dupes: List[str] = [n for n in names if names.count(n) > 1]
                raise ValueError(f"Duplicate {label} names: {sorted(set(dupes))}")
        return self

    @model_validator(mode="after")
    def _bind_enum_columns(self) -> "SchemaDefinition":
        enum_map: Dict[str, EnumDefinition] = {e.name: e for e in self.enums}
        for table in self.tables:
            for column in table.columns:
                if column.enum is None:
                    continue
                enum_def: Optional[EnumDefinition] = enum_map.get(column.enum)
                if enum_def is None:
                    raise ValueError(
                        f"Column '{table.name}.{column.name}' is bound to unknown "
                        f"enum '{column.enum}'."
                    )
                if column.values is None:
                    column.values = enum_def.values
                elif column.values != enum_def.values:
                    raise ValueError(
                        f"Column '{table.name}.{column.name}' values "
                        f"{column.values} differ from enum '{enum_def.name}' "
                        f"cases {enum_def.values}."
                    )
        return self

    # -- Lookups ------------------------------------------------------------

    def get_table(self, name: str) -> Optional[TableDefinition]:
        """O(1) table lookup."""
        return self._table_map.get(name)

    def get_enum(self, name: str) -> Optional[EnumDefinition]:
        """O(1) enum lookup."""
        return self._enum_map.get(name)

    @computed_field  # type: ignore[misc]
    @property
    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]

    @computed_field  # type: ignore[misc]
    @property
    def total_columns(self) -> int:
        return sum(len(t.columns) for t in self.tables)

    def enum_bindings(self) -> Dict[str, List[Tuple[str, str]]]:
        """
        Enum name → ``(table, column)`` pairs, in registry order.

        Enums no column refers to map to an empty list.
        """
        bindings: Dict[str, List[Tuple[str, str]]] = {e.name: [] for e in self.enums}
        for table in self.tables:
            for column in table.columns:
                if column.enum is not None:
                    bindings[column.enum].append((table.name, column.name))
        return bindings

    def pivot_tables(self) -> List[str]:
        return [t.name for t in self.tables if t.is_pivot]

    def seeding_order(self) -> List[str]:
        """
        Return table names so that every table follows the tables it
        references.

        Kahn's algorithm over the foreign-key graph; among tables that are
        ready at the same time, registry order wins.  Self references are
        ignored and references to unknown tables are left to validation.

        Raises:
            DependencyCycleError: when the graph contains a cycle.
        """
        position: Dict[str, int] = {t.name: i for i, t in enumerate(self.tables)}
        in_degree: Dict[str, int] = {t.name: 0 for t in self.tables}
        dependants: Dict[str, List[str]] = {t.name: [] for t in self.tables}

        for table in self.tables:
            for parent in table.dependencies:
                if parent in position:
                    dependants[parent].append(table.name)
                    in_degree[table.name] += 1

        ready: List[int] = [position[n] for n, d in in_degree.items() if d == 0]
        heapq.heapify(ready)
        result: List[str] = []

        while ready:
            name: str = self.tables[heapq.heappop(ready)].name
            result.append(name)
            for child in dependants[name]:
                in_degree[child] -= 1
                if in_degree[child] == 0:
                    heapq.heappush(ready, position[child])

        if len(result) != len(self.tables):
            done: Set[str] = set(result)
            stuck: List[str] = [t.name for t in self.tables if t.name not in done]
            raise DependencyCycleError(stuck)

        return result

    def __repr__(self) -> str:
        return (
            f"<SchemaDefinition {len(self.tables)} tables, "
            f"{self.total_columns} columns, {len(self.enums)} enums>"
        )


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Where generated files go and how generators number and size them.

    Defaults match a stock Laravel application layout.  Values can come
    from the ``config:`` section of a schema file and are then overridden
    by CLI flags.
    """

    model_config = _SHARED_CONFIG

    base_path: str = Field(default=".", description="Laravel project root.")
    migrations_path: str = Field(default="database/migrations")
    models_path: str = Field(default="app/Models")
    enums_path: str = Field(default="app/Enums")
    seeders_path: str = Field(default="database/seeders")

    models_namespace: str = Field(default="App\\Models")
    enums_namespace: str = Field(default="App\\Enums")
    seeders_namespace: str = Field(default="Database\\Seeders")

    migration_date: str = Field(
        default="2024_01_01",
        pattern=r"^\d{4}_\d{2}_\d{2}$",
        description="Date prefix for migration file names.",
    )
    migration_start: int = Field(
        default=14, ge=0, le=999999, description="First migration counter value."
    )
    seed_count: int = Field(
        default=10, ge=0, description="Rows per seeder when a table sets no count."
    )
    foreign_key_ceiling: int = Field(
        default=100, ge=1, description="Upper bound for synthesised foreign keys."
    )

    force: bool = Field(default=False, description="Overwrite existing artifacts.")
    dry_run: bool = Field(default=False, description="Render without writing.")

    def resolve(self, *parts: str) -> Path:
        """Absolute-or-relative path under ``base_path``."""
        return Path(self.base_path).joinpath(*parts)


# ---------------------------------------------------------------------------
# Generated artifact
# ---------------------------------------------------------------------------


class GeneratedArtifact(BaseModel):
    """One file produced by a generator."""

    model_config = _SHARED_CONFIG

    path: str = Field(..., min_length=1, description="Path relative to base_path.")
    content: str = Field(..., description="Full file content.")
    kind: ArtifactKind = Field(..., description="Which generator produced it.")
    entity: str = Field(..., min_length=1, description="Table, model or enum name.")
    overwrite: bool = Field(
        default=False, description="Always rewrite, regardless of force."
    )

    @computed_field  # type: ignore[misc]
    @property
    def line_count(self) -> int:
        return count_lines(self.content)

    @computed_field  # type: ignore[misc]
    @property
    def size_bytes(self) -> int:
        return len(self.content.encode("utf-8"))

    @computed_field  # type: ignore[misc]
    @property
    def checksum(self) -> str:
        return sha256_hex(self.content)

    def __repr__(self) -> str:
        return f"<GeneratedArtifact {self.kind} {self.path}>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "RESERVED_TIMESTAMPS",
    "RelationshipKind",
    "ArtifactKind",
    "DependencyCycleError",
    "ColumnDefinition",
    "IndexDefinition",
    "EnumDefinition",
    "RelationshipDefinition",
    "ScopeDefinition",
    "ModelOptions",
    "SeedOptions",
    "TableDefinition",
    "SchemaDefinition",
    "GenerationConfig",
    "GeneratedArtifact",
]

logger.debug("laragen.models loaded — %d public symbols.", len(__all__))
