# File: laragen/eloquent.py
"""
Laragen - Eloquent Model Generator
==================================
Builds a structured :class:`ModelBlueprint` for each non-pivot table and
renders it into ``app/Models/{Model}.php``.

Keeping the blueprint separate from the text means the decisions
(which traits, which casts win, which imports) are made once, in
:func:`build_blueprint`, and can be inspected in tests without parsing
PHP.

Cast precedence, lowest to highest:

1. casts inferred from column types (``boolean``, ``decimal:2``, ...),
2. casts declared in the table's ``model.casts``,
3. enum casts for columns bound to an enum type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from laragen.models import (
    ArtifactKind,
    GeneratedArtifact,
    GenerationConfig,
    RelationshipDefinition,
    RelationshipKind,
    ScopeDefinition,
    TableDefinition,
)
from laragen.typemap import infer_cast
from laragen.utils import (
    php_literal,
    php_string,
    to_camel_case,
    to_human_words,
    to_snake_case,
    to_studly_case,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.eloquent")

_BASE_IMPORTS: Tuple[str, ...] = (
    "Illuminate\\Database\\Eloquent\\Factories\\HasFactory",
    "Illuminate\\Database\\Eloquent\\Model",
)

# Short trait name → fully qualified name
KNOWN_TRAITS: Dict[str, str] = {
    "SoftDeletes": "Illuminate\\Database\\Eloquent\\SoftDeletes",
    "Notifiable": "Illuminate\\Notifications\\Notifiable",
    "HasApiTokens": "Laravel\\Sanctum\\HasApiTokens",
    "HasUuids": "Illuminate\\Database\\Eloquent\\Concerns\\HasUuids",
}

_EXCLUDED_FILLABLE_TYPES: Tuple[str, ...] = ("id", "rememberToken")


# ---------------------------------------------------------------------------
# Blueprint
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ModelBlueprint:
    """Everything a model file says, before it is turned into PHP."""

    class_name: str
    table: str
    namespace: str = "App\\Models"
    imports: List[str] = field(default_factory=list)
    traits: List[str] = field(default_factory=list)
    timestamps: bool = True
    fillable: List[str] = field(default_factory=list)
    hidden: List[str] = field(default_factory=list)
    casts: Dict[str, str] = field(default_factory=dict)
    relationships: List[RelationshipDefinition] = field(default_factory=list)
    scopes: List[ScopeDefinition] = field(default_factory=list)

    @property
    def enum_casts(self) -> Dict[str, str]:
        return {k: v for k, v in self.casts.items() if v.endswith("::class")}


def _trait_import(trait: str) -> Tuple[str, Optional[str]]:
    """(short name, import) for a declared trait."""
    if "\\" in trait:
        fqcn: str = trait.lstrip("\\")
        return fqcn.rsplit("\\", 1)[1], fqcn
    if trait in KNOWN_TRAITS:
        return trait, KNOWN_TRAITS[trait]
    logger.warning(
        "Unknown trait '%s'; it is used without an import.", trait
    )
    return trait, None


def default_fillable(table: TableDefinition) -> List[str]:
    """Every column except ``id``, ``rememberToken`` and reserved timestamps."""
    return [
        c.name
        for c in table.columns
        if c.type not in _EXCLUDED_FILLABLE_TYPES and not c.is_reserved_timestamp
    ]


def build_blueprint(table: TableDefinition, config: GenerationConfig) -> ModelBlueprint:
    """Decide imports, traits, properties and methods for *table*'s model."""
    options = table.model

    # -- casts: inferred, then declared, then enums --------------------------
    casts: Dict[str, str] = {}
    enum_casts: Dict[str, str] = {}
    for column in table.columns:
        cast: Optional[str] = infer_cast(column)
        if cast is None:
            continue
        if column.enum is not None:
            enum_casts[column.name] = cast
        else:
            casts[column.name] = cast
    casts.update(options.casts)
    casts.update(enum_casts)

    # -- traits and imports --------------------------------------------------
    enum_imports: List[str] = sorted(
        {f"{config.enums_namespace}\\{c.enum}" for c in table.columns if c.enum}
    )
    imports: List[str] = enum_imports + list(_BASE_IMPORTS)
    traits: List[str] = ["HasFactory"]

    declared: List[str] = list(options.traits)
    if table.has_soft_deletes and "SoftDeletes" not in declared:
        declared.insert(0, "SoftDeletes")

    for trait in declared:
        short, fqcn = _trait_import(trait)
        if short in traits:
            continue
        traits.append(short)
        if fqcn and fqcn not in imports:
            imports.append(fqcn)

    fillable: List[str] = (
        list(options.fillable) if options.fillable is not None else default_fillable(table)
    )

    return ModelBlueprint(
        class_name=table.model_name,
        table=table.name,
        namespace=config.models_namespace,
        imports=imports,
        traits=traits,
        timestamps=table.has_timestamps,
        fillable=fillable,
        hidden=list(options.hidden),
        casts=casts,
        relationships=list(options.relationships),
        scopes=list(options.scopes),
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _list_property(items: List[str]) -> str:
    if not items:
        return "[]"
    body: str = ",\n        ".join(php_string(i) for i in items)
    return f"[\n        {body},\n    ]"


def _cast_value(value: str) -> str:
    return value if value.endswith("::class") else php_string(value)


def _map_property(items: Dict[str, str]) -> str:
    if not items:
        return "[]"
    body: str = ",\n        ".join(
        f"{php_string(k)} => {_cast_value(v)}" for k, v in items.items()
    )
    return f"[\n        {body},\n    ]"


def _property_block(doc: str, var: str, declaration: str) -> List[str]:
    lines: List[str] = ["", "    /**", f"     * {doc}"]
    lines.extend(["     *", f"     * @var {var}", "     */", f"    {declaration}"])
    return lines


def render_relationship(
    rel: RelationshipDefinition,
    owner: str,
    models_namespace: str = "App\\Models",
) -> List[str]:
    """Lines of one relationship accessor, including its docblock."""
    if rel.kind == RelationshipKind.MORPH_TO:
        body: str = "        return $this->morphTo();"
    else:
        params: List[str] = [f"\\{models_namespace}\\{rel.model}::class"]
        if rel.kind == RelationshipKind.BELONGS_TO_MANY and rel.table:
            params.append(php_string(rel.table))
        foreign_key: Optional[str] = rel.foreign_key
        if rel.local_key and not foreign_key:
            foreign_key = f"{to_snake_case(owner)}_id"
        if foreign_key:
            params.append(php_string(foreign_key))
        if rel.local_key:
            params.append(php_string(rel.local_key))
        body = f"        return $this->{rel.kind}({', '.join(params)})"
        pair: Optional[Tuple[str, str]] = rel.condition_pair
        if pair is not None:
            body += f"\n            ->where({php_string(pair[0])}, {php_string(pair[1])})"
        body += ";"

    return [
        "",
        "    /**",
        f"     * Get the {rel.name} relationship.",
        "     */",
        f"    public function {to_camel_case(rel.name)}()",
        "    {",
        body,
        "    }",
    ]


def render_scope(scope: ScopeDefinition) -> List[str]:
    """Lines of one ``scope{Name}`` method built from its predicates."""
    clauses: List[str] = []
    for column, value in scope.where.items():
        if value is None:
            clauses.append(f"whereNull({php_string(column)})")
        else:
            clauses.append(f"where({php_string(column)}, {php_literal(value)})")

    body: str = "        return $query->" + "\n            ->".join(clauses) + ";"
    return [
        "",
        "    /**",
        f"     * Scope a query to only include {to_human_words(scope.name)}.",
        "     *",
        "     * @param  \\Illuminate\\Database\\Eloquent\\Builder  $query",
        "     * @return \\Illuminate\\Database\\Eloquent\\Builder",
        "     */",
        f"    public function scope{to_studly_case(scope.name)}($query)",
        "    {",
        body,
        "    }",
    ]


def render_model(blueprint: ModelBlueprint) -> str:
    """Full PHP source of an Eloquent model."""
    lines: List[str] = [
        "<?php",
        "",
        f"namespace {blueprint.namespace};",
        "",
    ]
    lines.extend(f"use {fqcn};" for fqcn in blueprint.imports)
    lines.extend([
        "",
        f"class {blueprint.class_name} extends Model",
        "{",
        f"    use {', '.join(blueprint.traits)};",
    ])

    lines.extend(_property_block(
        "The table associated with the model.",
        "string",
        f"protected $table = {php_string(blueprint.table)};",
    ))
    if not blueprint.timestamps:
        lines.extend(_property_block(
            "Indicates if the model should be timestamped.",
            "bool",
            "public $timestamps = false;",
        ))
    lines.extend(_property_block(
        "The attributes that are mass assignable.",
        "array<int, string>",
        f"protected $fillable = {_list_property(blueprint.fillable)};",
    ))
    if blueprint.hidden:
        lines.extend(_property_block(
            "The attributes that should be hidden for serialization.",
            "array<int, string>",
            f"protected $hidden = {_list_property(blueprint.hidden)};",
        ))
    if blueprint.casts:
        lines.extend(_property_block(
            "The attributes that should be cast.",
            "array<string, string>",
            f"protected $casts = {_map_property(blueprint.casts)};",
        ))

    for rel in blueprint.relationships:
        lines.extend(render_relationship(rel, blueprint.class_name, blueprint.namespace))
    for scope in blueprint.scopes:
        lines.extend(render_scope(scope))

    lines.append("}")
    lines.append("")
    return "\n".join(lines)


class ModelGenerator:
    """Turns non-pivot tables into model artifacts under ``models_path``."""

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config

    def blueprint(self, table: TableDefinition) -> ModelBlueprint:
        return build_blueprint(table, self._config)

    def build(self, table: TableDefinition) -> GeneratedArtifact:
        if table.is_pivot:
            raise ValueError(f"Table '{table.name}' is a pivot table and gets no model.")
        return GeneratedArtifact(
            path=f"{self._config.models_path}/{table.model_name}.php",
            content=render_model(self.blueprint(table)),
            kind=ArtifactKind.MODEL,
            entity=table.model_name,
        )


__all__: List[str] = [
    "KNOWN_TRAITS",
    "ModelBlueprint",
    "ModelGenerator",
    "build_blueprint",
    "default_fillable",
    "render_relationship",
    "render_scope",
    "render_model",
]

logger.debug("laragen.eloquent loaded — %d public symbols.", len(__all__))
