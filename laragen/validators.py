# File: laragen/validators.py
"""
Laragen - Schema & Configuration Validators
===========================================
A **pure-function validation pipeline** over the pydantic models defined
in ``laragen.models``.

Pydantic validators handle per-field and per-model structural
correctness (a column cannot be both sized and precise, enum columns
carry their values, ...).  This module adds **cross-entity semantic
validation**: foreign-key targets, circular dependencies, relationship
targets, enum label coverage, model metadata that names missing columns,
and configuration sanity.

Every check is a ``validate_*(schema) -> ValidationResult`` function;
``validate_full`` runs them all and is what the generator calls before
anything is rendered.  Errors abort a command, warnings are reported and
the run continues.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Set, Tuple

from laragen.models import (
    DependencyCycleError,
    GenerationConfig,
    RelationshipKind,
    SchemaDefinition,
    TableDefinition,
)
from laragen.typemap import is_known_type
from laragen.utils import to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight issue descriptor (no pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` instances produced by the pipeline."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            prefix: str = {
                "error": "❌",
                "warning": "⚠️",
                "info": "ℹ️",
            }.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            if item.context:
                for k, v in item.context.items():
                    lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Patterns and word lists
# ---------------------------------------------------------------------------

_PHP_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_PHP_NAMESPACE_RE: re.Pattern[str] = re.compile(
    r"^[A-Z][A-Za-z0-9_]*(\\[A-Z][A-Za-z0-9_]*)*$"
)

# Words PHP refuses as class names
_PHP_RESERVED_CLASS_NAMES: FrozenSet[str] = frozenset({
    "abstract", "and", "array", "as", "break", "callable", "case", "catch",
    "class", "clone", "const", "continue", "declare", "default", "do",
    "echo", "else", "elseif", "empty", "enddeclare", "endfor",
    "endforeach", "endif", "endswitch", "endwhile", "enum", "eval", "exit",
    "extends", "final", "finally", "fn", "for", "foreach", "function",
    "global", "goto", "if", "implements", "include", "instanceof",
    "insteadof", "interface", "isset", "list", "match", "namespace", "new",
    "or", "print", "private", "protected", "public", "readonly", "require",
    "return", "static", "switch", "throw", "trait", "try", "unset", "use",
    "var", "while", "xor", "yield", "bool", "false", "float", "int",
    "iterable", "mixed", "never", "null", "object", "string", "true",
    "void", "self", "parent",
})

_ON_DELETE_ACTIONS: FrozenSet[str] = frozenset({
    "cascade", "restrict", "set null", "no action", "set default",
})


# ---------------------------------------------------------------------------
# Individual validation functions
# ---------------------------------------------------------------------------


def validate_model_names(schema: SchemaDefinition) -> ValidationResult:
    """
    Every non-pivot table needs a usable, unique model class name.

    PHP rejects reserved words as class names, which is why ``returns``
    maps to ``OrderReturn`` in the built-in schema.
    """
    result: ValidationResult = ValidationResult()
    owners: Dict[str, str] = {}

    for table in schema.tables:
        if table.is_pivot:
            continue
        name: str = table.model_name
        ctx: Dict[str, Any] = {"table": table.name, "model": name}

        if name.lower() in _PHP_RESERVED_CLASS_NAMES:
            result.add_error(
                "MODEL_NAME_PHP_RESERVED",
                f"Model name '{name}' for table '{table.name}' is a PHP "
                f"reserved word; set model.class_name.",
                ctx,
            )
        if name in owners:
            result.add_error(
                "DUPLICATE_MODEL_NAME",
                f"Tables '{owners[name]}' and '{table.name}' both map to "
                f"model '{name}'.",
                ctx,
            )
        owners.setdefault(name, table.name)

    return result


def validate_column_types(schema: SchemaDefinition) -> ValidationResult:
    """Unknown type tokens are passed through to the builder; flag them."""
    result: ValidationResult = ValidationResult()

    for table in schema.tables:
        for col in table.columns:
            if not is_known_type(col.type):
                result.add_warning(
                    "UNKNOWN_COLUMN_TYPE",
                    f"Column '{table.name}.{col.name}' has unrecognised type "
                    f"'{col.type}'; it will be emitted as $table->{col.type}().",
                    {"table": table.name, "column": col.name, "type": col.type},
                )
            if col.type == "id" and col.name != "id":
                result.add_warning(
                    "ID_COLUMN_RENAMED",
                    f"Column '{table.name}.{col.name}' uses type 'id'; "
                    f"migrations always emit $table->id().",
                    {"table": table.name, "column": col.name},
                )

    return result


def validate_foreign_keys(schema: SchemaDefinition) -> ValidationResult:
    """
    Cross-table FK validation:

    - referenced table exists,
    - ``on_delete`` is an action the database understands,
    - ``foreignId`` columns without a target are reported (they are
      seeded with bounded numbers but get no constraint).
    """
    result: ValidationResult = ValidationResult()
    table_names: Set[str] = set(schema.table_names)

    for table in schema.tables:
        for col in table.columns:
            if not col.is_foreign_key:
                continue
            ctx: Dict[str, Any] = {
                "table": table.name,
                "column": col.name,
                "references": col.references,
            }
            if col.references is None:
                result.add_info(
                    "FK_WITHOUT_TARGET",
                    f"foreignId column '{table.name}.{col.name}' names no "
                    f"referenced table; no constraint will be emitted.",
                    ctx,
                )
                continue
            if col.references not in table_names:
                result.add_error(
                    "UNKNOWN_FK_TARGET",
                    f"FK '{table.name}.{col.name}' references unknown table "
                    f"'{col.references}'.",
                    ctx,
                )
            if col.on_delete and col.on_delete not in _ON_DELETE_ACTIONS:
                result.add_warning(
                    "UNKNOWN_ON_DELETE_ACTION",
                    f"FK '{table.name}.{col.name}' uses on_delete "
                    f"'{col.on_delete}'.",
                    ctx,
                )

    return result


def validate_circular_dependencies(schema: SchemaDefinition) -> ValidationResult:
    """Seeders need a parents-first order; a FK cycle makes one impossible."""
    result: ValidationResult = ValidationResult()
    try:
        order: List[str] = schema.seeding_order()
    except DependencyCycleError as exc:
        result.add_error(
            "CIRCULAR_FK_DEPENDENCY",
            str(exc),
            {"tables": ", ".join(exc.tables)},
        )
        return result

    logger.debug("Seeding order resolved for %d tables.", len(order))
    return result


def validate_indexes(schema: SchemaDefinition) -> ValidationResult:
    """Duplicate and redundant indexes."""
    result: ValidationResult = ValidationResult()

    for table in schema.tables:
        seen: Set[Tuple[Tuple[str, ...], bool]] = set()
        for idx in table.indexes:
            key: Tuple[Tuple[str, ...], bool] = (tuple(idx.columns), idx.unique)
            ctx: Dict[str, Any] = {"table": table.name, "columns": idx.columns}
            if key in seen:
                result.add_warning(
                    "DUPLICATE_INDEX",
                    f"Table '{table.name}' declares index {idx.columns} twice.",
                    ctx,
                )
            seen.add(key)

            if len(idx.columns) == 1:
                col = table.get_column(idx.columns[0])
                if col is not None and col.unique:
                    result.add_info(
                        "REDUNDANT_INDEX",
                        f"Index on '{table.name}.{col.name}' duplicates its "
                        f"unique constraint.",
                        ctx,
                    )

    return result


def validate_enum_definitions(schema: SchemaDefinition) -> ValidationResult:
    """
    Enum types:

    - label maps are all-or-nothing,
    - case identifiers are unique ignoring case (PHP constants clash),
    - enums no column binds are reported.
    """
    result: ValidationResult = ValidationResult()
    bindings: Dict[str, List[Tuple[str, str]]] = schema.enum_bindings()

    for enum_def in schema.enums:
        ctx: Dict[str, Any] = {"enum": enum_def.name}

        if enum_def.labels:
            missing: List[str] = [k for k in enum_def.cases if k not in enum_def.labels]
            unknown: List[str] = [k for k in enum_def.labels if k not in enum_def.cases]
            if missing or unknown:
                result.add_error(
                    "PARTIAL_ENUM_LABELS",
                    f"Enum '{enum_def.name}' has a partial label map "
                    f"(missing: {missing}, unknown: {unknown}).",
                    ctx,
                )

        lowered: List[str] = [k.lower() for k in enum_def.cases]
        if len(lowered) != len(set(lowered)):
            result.add_error(
                "ENUM_CASE_COLLISION",
                f"Enum '{enum_def.name}' has case identifiers that differ "
                f"only by letter case.",
                ctx,
            )

        if not bindings.get(enum_def.name):
            result.add_info(
                "UNUSED_ENUM",
                f"Enum '{enum_def.name}' is not bound to any column.",
                ctx,
            )

    return result


def _relationship_fk_problem(
    table: TableDefinition,
    rel: Any,
    target: Optional[TableDefinition],
) -> Optional[str]:
    """Describe a foreign key Laravel would look for but cannot find."""
    kind: str = rel.kind
    if kind == RelationshipKind.BELONGS_TO:
        fk: str = rel.foreign_key or f"{to_snake_case(rel.name)}_id"
        if table.get_column(fk) is None:
            return f"column '{table.name}.{fk}' does not exist"
    elif kind in (RelationshipKind.HAS_MANY, RelationshipKind.HAS_ONE) and target:
        fk = rel.foreign_key or f"{to_snake_case(table.model_name)}_id"
        if target.get_column(fk) is None:
            return f"column '{target.name}.{fk}' does not exist"
        if rel.local_key and table.get_column(rel.local_key) is None:
            return f"local key '{table.name}.{rel.local_key}' does not exist"
    elif kind == RelationshipKind.MORPH_TO:
        for suffix in ("_type", "_id"):
            if table.get_column(f"{rel.name}{suffix}") is None:
                return f"column '{table.name}.{rel.name}{suffix}' does not exist"
    return None


def validate_model_metadata(schema: SchemaDefinition) -> ValidationResult:
    """
    Model options against the columns and models they talk about:

    - fillable/hidden/casts name existing columns,
    - relationship targets are generated models, pivot tables exist,
    - the foreign key each relationship relies on exists,
    - scopes filter on existing columns,
    - relationship and scope methods do not collide.
    """
    result: ValidationResult = ValidationResult()
    by_model: Dict[str, TableDefinition] = {
        t.model_name: t for t in schema.tables if not t.is_pivot
    }

    for table in schema.tables:
        options = table.model
        ctx: Dict[str, Any] = {"table": table.name}

        if table.is_pivot:
            if options.relationships or options.scopes:
                result.add_warning(
                    "PIVOT_MODEL_METADATA",
                    f"Pivot table '{table.name}' declares model metadata, "
                    f"but pivot tables get no model.",
                    ctx,
                )
            continue

        for label, names in (
            ("fillable", options.fillable or []),
            ("hidden", options.hidden),
            ("casts", list(options.casts)),
        ):
            for column in names:
                if table.get_column(column) is None:
                    result.add_warning(
                        "UNKNOWN_MODEL_COLUMN",
                        f"Model '{table.model_name}' lists '{column}' in "
                        f"${label} but table '{table.name}' has no such column.",
                        {**ctx, "property": label, "column": column},
                    )

        methods: List[str] = []
        for rel in options.relationships:
            rel_ctx: Dict[str, Any] = {**ctx, "relationship": rel.name}
            methods.append(rel.name)

            if not _PHP_IDENTIFIER_RE.match(rel.name):
                result.add_error(
                    "INVALID_RELATIONSHIP_NAME",
                    f"Relationship '{rel.name}' on '{table.model_name}' is "
                    f"not a valid PHP method name.",
                    rel_ctx,
                )
                continue

            target: Optional[TableDefinition] = None
            if rel.model is not None:
                target = by_model.get(rel.model)
                if target is None:
                    result.add_error(
                        "UNKNOWN_RELATIONSHIP_MODEL",
                        f"Relationship '{table.model_name}::{rel.name}' targets "
                        f"unknown model '{rel.model}'.",
                        rel_ctx,
                    )

            if rel.kind == RelationshipKind.BELONGS_TO_MANY:
                if rel.table is None:
                    result.add_info(
                        "IMPLICIT_PIVOT_TABLE",
                        f"Relationship '{table.model_name}::{rel.name}' relies "
                        f"on Laravel's default pivot table name.",
                        rel_ctx,
                    )
                elif schema.get_table(rel.table) is None:
                    result.add_error(
                        "UNKNOWN_PIVOT_TABLE",
                        f"Relationship '{table.model_name}::{rel.name}' uses "
                        f"unknown pivot table '{rel.table}'.",
                        rel_ctx,
                    )
            elif rel.table is not None:
                result.add_warning(
                    "PIVOT_ON_NON_MANY_TO_MANY",
                    f"Relationship '{table.model_name}::{rel.name}' ({rel.kind}) "
                    f"declares a pivot table; it is ignored.",
                    rel_ctx,
                )

            problem: Optional[str] = _relationship_fk_problem(table, rel, target)
            if problem:
                result.add_warning(
                    "UNRESOLVED_FOREIGN_KEY",
                    f"Relationship '{table.model_name}::{rel.name}': {problem}.",
                    rel_ctx,
                )

            pair: Optional[Tuple[str, str]] = rel.condition_pair
            if pair and target is not None and target.get_column(pair[0]) is None:
                result.add_warning(
                    "UNKNOWN_CONDITION_COLUMN",
                    f"Relationship '{table.model_name}::{rel.name}' filters on "
                    f"'{pair[0]}', which '{target.name}' does not have.",
                    rel_ctx,
                )

        for scope in options.scopes:
            methods.append(f"scope{scope.name}")
            for column in scope.where:
                if table.get_column(column) is None:
                    result.add_error(
                        "UNKNOWN_SCOPE_COLUMN",
                        f"Scope '{scope.name}' on '{table.model_name}' filters "
                        f"on unknown column '{column}'.",
                        {**ctx, "scope": scope.name, "column": column},
                    )

        lowered: List[str] = [m.lower() for m in methods]
        dupes: Set[str] = {m for m in lowered if lowered.count(m) > 1}
        if dupes:
            result.add_error(
                "DUPLICATE_MODEL_METHOD",
                f"Model '{table.model_name}' declares methods more than once: "
                f"{sorted(dupes)}.",
                ctx,
            )

    return result


def validate_seed_options(schema: SchemaDefinition) -> ValidationResult:
    """Seed counts of zero produce seeders that insert nothing."""
    result: ValidationResult = ValidationResult()
    for table in schema.tables:
        if table.seed.count == 0:
            result.add_info(
                "EMPTY_SEEDER",
                f"Table '{table.name}' has seed.count 0.",
                {"table": table.name},
            )
    return result


def validate_generation_config(config: GenerationConfig) -> ValidationResult:
    """Namespaces must be valid PHP namespaces; paths must be relative."""
    result: ValidationResult = ValidationResult()

    for field_name in ("models_namespace", "enums_namespace", "seeders_namespace"):
        value: str = getattr(config, field_name)
        if not _PHP_NAMESPACE_RE.match(value):
            result.add_error(
                "INVALID_NAMESPACE",
                f"'{field_name}' value '{value}' is not a PHP namespace.",
                {"field": field_name},
            )

    for field_name in ("migrations_path", "models_path", "enums_path", "seeders_path"):
        value = getattr(config, field_name)
        if value.startswith(("/", "\\")) or ".." in value.replace("\\", "/").split("/"):
            result.add_warning(
                "OUTPUT_PATH_OUTSIDE_PROJECT",
                f"'{field_name}' value '{value}' points outside the project root.",
                {"field": field_name},
            )

    if config.seed_count == 0:
        result.add_warning(
            "ZERO_SEED_COUNT",
            "Default seed count is 0; seeders without their own count insert nothing.",
        )

    return result


# ---------------------------------------------------------------------------
# Composite validation orchestrators
# ---------------------------------------------------------------------------

SchemaValidatorFn = Callable[[SchemaDefinition], ValidationResult]


def validate_schema(schema: SchemaDefinition) -> ValidationResult:
    """Run all schema-level validators and merge their results."""
    result: ValidationResult = ValidationResult()

    validators: List[SchemaValidatorFn] = [
        validate_model_names,
        validate_column_types,
        validate_foreign_keys,
        validate_circular_dependencies,
        validate_indexes,
        validate_enum_definitions,
        validate_model_metadata,
        validate_seed_options,
    ]

    for validator_fn in validators:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(schema))

    logger.info("Schema validation complete: %s", result.summary())
    return result


def validate_full(
    schema: SchemaDefinition,
    config: GenerationConfig,
) -> ValidationResult:
    """
    **Master validation entry point**, called by the generator and the
    ``db:validate-schema`` command before anything is rendered.
    """
    logger.info(
        "Starting full validation — %d tables, %d enums.",
        len(schema.tables),
        len(schema.enums),
    )

    result: ValidationResult = ValidationResult()
    result.merge(validate_schema(schema))
    result.merge(validate_generation_config(config))

    if result.has_errors:
        logger.error(
            "Validation FAILED with %d error(s). %s",
            result.error_count,
            result.summary(),
        )
    else:
        logger.info("Validation PASSED. %s", result.summary())

    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_model_names",
    "validate_column_types",
    "validate_foreign_keys",
    "validate_circular_dependencies",
    "validate_indexes",
    "validate_enum_definitions",
    "validate_model_metadata",
    "validate_seed_options",
    "validate_generation_config",
    "validate_schema",
    "validate_full",
]

logger.debug("laragen.validators loaded — %d public symbols.", len(__all__))
