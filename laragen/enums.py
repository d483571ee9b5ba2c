# File: laragen/enums.py
"""
Laragen - Enum Generator
========================
Renders backed PHP enums and patches Eloquent models to cast columns to
them.

An enum file looks like::

    enum Gender: string
    {
        case MALE = 'male';
        ...
        private const LABELS = [...];
        public function label(): string { ... }
        public static function options(): array { ... }
    }

``label()``/``options()`` are only emitted when the enum has labels.

Model patching (:func:`patch_model_source`) is a text transformation on
an existing model file.  It is idempotent: patching twice with the same
enum and column gives byte-identical output.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from laragen.models import (
    ArtifactKind,
    EnumDefinition,
    GeneratedArtifact,
    GenerationConfig,
    SchemaDefinition,
    TableDefinition,
)
from laragen.utils import php_string

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.enums")

_NAMESPACE_RE: re.Pattern[str] = re.compile(r"^namespace\s+[^;]+;[ \t]*$", re.MULTILINE)
_TOP_LEVEL_USE_RE: re.Pattern[str] = re.compile(r"^use\s+[^;]+;[ \t]*$", re.MULTILINE)
_CASTS_RE: re.Pattern[str] = re.compile(
    r"(protected\s+\$casts\s*=\s*\[)(?P<body>.*?)(\];)", re.DOTALL
)
_FILLABLE_RE: re.Pattern[str] = re.compile(
    r"protected\s+\$fillable\s*=\s*\[.*?\];", re.DOTALL
)
_CLASS_OPEN_RE: re.Pattern[str] = re.compile(
    r"^class\s+\w+[^{]*\{[ \t]*$", re.MULTILINE
)

_ENTRY_INDENT: str = " " * 8


# ---------------------------------------------------------------------------
# Enum file rendering
# ---------------------------------------------------------------------------


def render_enum(enum_def: EnumDefinition, namespace: str = "App\\Enums") -> str:
    """Full PHP source of a string-backed enum."""
    lines: List[str] = [
        "<?php",
        "",
        f"namespace {namespace};",
        "",
        f"enum {enum_def.name}: string",
        "{",
    ]
    for case, value in enum_def.cases.items():
        lines.append(f"    case {case} = {php_string(value)};")

    if enum_def.has_labels:
        lines.append("")
        lines.append("    private const LABELS = [")
        for case in enum_def.cases:
            label: str = enum_def.labels.get(case, enum_def.cases[case])
            lines.append(f"        self::{case}->value => {php_string(label)},")
        lines.extend([
            "    ];",
            "",
            "    /**",
            "     * Get the label for the enum case",
            "     */",
            "    public function label(): string",
            "    {",
            "        return self::LABELS[$this->value];",
            "    }",
            "",
            "    /**",
            "     * Get all enum values with their labels",
            "     */",
            "    public static function options(): array",
            "    {",
            "        return array_map(",
            "            fn(self $enum) => ['value' => $enum->value, 'label' => $enum->label()],",
            "            self::cases()",
            "        );",
            "    }",
        ])

    lines.append("}")
    lines.append("")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Model patching
# ---------------------------------------------------------------------------


def _ensure_import(source: str, import_line: str) -> str:
    if re.search(rf"^{re.escape(import_line)}[ \t]*$", source, re.MULTILINE):
        return source

    namespace: Optional[re.Match[str]] = _NAMESPACE_RE.search(source)
    search_from: int = namespace.end() if namespace else 0
    first_use: Optional[re.Match[str]] = _TOP_LEVEL_USE_RE.search(source, search_from)

    if first_use is not None:
        return source[: first_use.start()] + import_line + "\n" + source[first_use.start():]
    if namespace is not None:
        return source[: namespace.end()] + "\n\n" + import_line + source[namespace.end():]
    # No namespace and no imports: right after the opening tag
    head, sep, tail = source.partition("<?php")
    if sep:
        return f"{head}<?php\n\n{import_line}{tail}"
    return f"{import_line}\n{source}"


def _patch_casts_body(body: str, column: str, cast: str) -> str:
    entry_re: re.Pattern[str] = re.compile(
        rf"(['\"]){re.escape(column)}\1\s*=>\s*[^,\n\]]+"
    )
    entry: str = f"'{column}' => {cast}"
    if entry_re.search(body):
        return entry_re.sub(lambda _m: entry, body, count=1)

    content: str = body.rstrip()
    if not content.strip():
        return f"\n{_ENTRY_INDENT}{entry},\n    "
    if not content.endswith(","):
        content += ","
    return f"{content}\n{_ENTRY_INDENT}{entry},\n    "


def _casts_block(column: str, cast: str) -> str:
    return (
        "\n\n    /**\n"
        "     * The attributes that should be cast.\n"
        "     *\n"
        "     * @var array<string, string>\n"
        "     */\n"
        "    protected $casts = [\n"
        f"{_ENTRY_INDENT}'{column}' => {cast},\n"
        "    ];"
    )


def patch_model_source(
    source: str,
    enum_name: str,
    column: str,
    enums_namespace: str = "App\\Enums",
) -> Tuple[str, bool]:
    """
    Import *enum_name* into a model and cast *column* to it.

    Returns ``(new_source, changed)``.  The import goes into the ``use``
    block after the namespace; an existing cast entry for the column is
    replaced, otherwise one is appended; a ``$casts`` property is created
    after ``$fillable`` (or at the top of the class) when the model has
    none.
    """
    cast: str = f"{enum_name}::class"
    patched: str = _ensure_import(source, f"use {enums_namespace}\\{enum_name};")

    casts: Optional[re.Match[str]] = _CASTS_RE.search(patched)
    if casts is not None:
        new_body: str = _patch_casts_body(casts.group("body"), column, cast)
        patched = (
            patched[: casts.start("body")] + new_body + patched[casts.end("body"):]
        )
    else:
        block: str = _casts_block(column, cast)
        anchor: Optional[re.Match[str]] = _FILLABLE_RE.search(patched)
        if anchor is None:
            anchor = _CLASS_OPEN_RE.search(patched)
            if anchor is None:
                raise ValueError("Model source has no class body to add casts to.")
            # First member of the class: no leading blank line
            block = "\n" + block.lstrip("\n") + "\n"
        patched = patched[: anchor.end()] + block + patched[anchor.end():]

    return patched, patched != source


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class EnumPlan:
    """Which enum files to write and which model columns to cast."""

    enums: List[EnumDefinition] = field(default_factory=list)
    bindings: Dict[str, List[Tuple[TableDefinition, str]]] = field(default_factory=dict)
    tables_without_enums: List[str] = field(default_factory=list)


class EnumGenerator:
    """
    Builds enum artifacts and the model patches that go with them.

    The schema's bindings decide which enums are in play: with a table
    filter, only enums bound to columns of the selected tables are
    generated, and only those tables' models are patched.
    """

    def __init__(self, schema: SchemaDefinition, config: GenerationConfig) -> None:
        self._schema: SchemaDefinition = schema
        self._config: GenerationConfig = config

    def plan(self, tables: Optional[Sequence[TableDefinition]] = None) -> EnumPlan:
        selected: Dict[str, TableDefinition] = {
            t.name: t for t in (tables if tables is not None else self._schema.tables)
        }
        plan: EnumPlan = EnumPlan()

        for enum_name, pairs in self._schema.enum_bindings().items():
            targets: List[Tuple[TableDefinition, str]] = [
                (selected[table_name], column)
                for table_name, column in pairs
                if table_name in selected
            ]
            if not targets:
                continue
            enum_def: Optional[EnumDefinition] = self._schema.get_enum(enum_name)
            if enum_def is None:
                continue
            plan.enums.append(enum_def)
            plan.bindings[enum_name] = targets

        bound_tables = {t.name for targets in plan.bindings.values() for t, _ in targets}
        if tables is not None:
            plan.tables_without_enums = [
                name for name in selected if name not in bound_tables
            ]

        logger.debug(
            "Enum plan: %d enums, %d model columns.",
            len(plan.enums),
            sum(len(v) for v in plan.bindings.values()),
        )
        return plan

    def build(self, enum_def: EnumDefinition) -> GeneratedArtifact:
        return GeneratedArtifact(
            path=f"{self._config.enums_path}/{enum_def.name}.php",
            content=render_enum(enum_def, self._config.enums_namespace),
            kind=ArtifactKind.ENUM,
            entity=enum_def.name,
        )

    def model_path(self, table: TableDefinition) -> str:
        return f"{self._config.models_path}/{table.model_name}.php"

    def patch(self, source: str, enum_name: str, column: str) -> Tuple[str, bool]:
        return patch_model_source(
            source, enum_name, column, self._config.enums_namespace
        )


__all__: List[str] = [
    "render_enum",
    "patch_model_source",
    "EnumPlan",
    "EnumGenerator",
]

logger.debug("laragen.enums loaded — %d public symbols.", len(__all__))
