# File: laragen/migrations.py
"""
Laragen - Migration Generator
=============================
Renders one ``Schema::create`` migration per table.

Layout of the ``up()`` body, in order:

1. one statement per column (``id``, ``rememberToken`` and foreign-key
   chains special-cased; reserved timestamps are folded away),
2. ``$table->primary([...])`` for composite keys,
3. ``$table->timestamps()`` / ``$table->softDeletes()``,
4. a ``// Indexes`` block.

File names are ``{date}_{counter:06d}_create_{table}_table.php``.  The
counter is shared across a run; :class:`MigrationCounter` hands out the
next value not already taken by a migration with the same date.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

from laragen.models import (
    ArtifactKind,
    ColumnDefinition,
    GeneratedArtifact,
    GenerationConfig,
    TableDefinition,
)
from laragen.typemap import map_type
from laragen.utils import php_array, php_boolean, php_literal, php_string

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.migrations")

MIGRATION_FILENAME_RE: re.Pattern[str] = re.compile(
    r"^(?P<date>\d{4}_\d{2}_\d{2})_(?P<counter>\d{6})_create_(?P<table>\w+)_table\.php$"
)

_INDENT: str = " " * 12
_CHAIN_INDENT: str = " " * 16


# ---------------------------------------------------------------------------
# Existing migrations and counter allocation
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class MigrationDirectoryState:
    """What is already on disk in the migrations directory."""

    tables: Dict[str, str] = field(default_factory=dict)
    counters: Dict[str, Set[int]] = field(default_factory=dict)

    def has_table(self, table: str) -> bool:
        return table in self.tables

    def used_counters(self, date: str) -> Set[int]:
        return self.counters.get(date, set())


def scan_migrations(directory: Path) -> MigrationDirectoryState:
    """
    Index ``*_create_{table}_table.php`` files in *directory*.

    Files that do not follow the naming scheme are ignored; a missing
    directory is an empty state.
    """
    state: MigrationDirectoryState = MigrationDirectoryState()
    if not directory.is_dir():
        return state

    for path in sorted(directory.glob("*_create_*_table.php")):
        match: Optional[re.Match[str]] = MIGRATION_FILENAME_RE.match(path.name)
        if match is None:
            # Artisan-style names (HHMMSS) still mark the table as created
            head, _, rest = path.name.partition("_create_")
            if head and rest.endswith("_table.php"):
                state.tables.setdefault(rest[: -len("_table.php")], path.name)
            continue
        state.tables.setdefault(match.group("table"), path.name)
        state.counters.setdefault(match.group("date"), set()).add(
            int(match.group("counter"))
        )

    logger.debug(
        "Scanned %s: %d existing create-table migrations.",
        directory,
        len(state.tables),
    )
    return state


class MigrationCounter:
    """
    Hands out migration counters starting at *start*, skipping values
    already used on disk for the same date.

    ``peek()`` is stable until ``advance()`` is called, so a counter is
    only consumed once its file has actually been written.
    """

    __slots__ = ("_value", "_used")

    def __init__(self, start: int, used: Optional[Set[int]] = None) -> None:
        self._value: int = start
        self._used: Set[int] = set(used or ())

    def peek(self) -> int:
        while self._value in self._used:
            self._value += 1
        return self._value

    def advance(self) -> int:
        """Mark the current value as used and return it."""
        value: int = self.peek()
        self._used.add(value)
        self._value = value + 1
        return value


def migration_filename(date: str, counter: int, table: str) -> str:
    return f"{date}_{counter:06d}_create_{table}_table.php"


# ---------------------------------------------------------------------------
# Column statements
# ---------------------------------------------------------------------------


def _render_default(value: object) -> str:
    # "true"/"false" strings are PHP booleans, not string literals
    boolean: Optional[str] = php_boolean(value)
    if boolean is not None:
        return boolean
    return php_literal(value)


def render_column(column: ColumnDefinition, composite_key: bool = False) -> Optional[str]:
    """
    Render the ``$table->...;`` statement for one column.

    Returns None for columns that produce no statement of their own:
    reserved timestamps, and the ``id`` column of a composite-key table.
    """
    name: str = column.name

    if column.is_reserved_timestamp:
        return None

    if column.type == "id":
        if composite_key:
            return None
        return f"{_INDENT}$table->id();"

    if column.type == "rememberToken":
        return f"{_INDENT}$table->rememberToken();"

    if column.is_foreign_key:
        line: str = f"{_INDENT}$table->foreignId({php_string(name)})"
        if column.nullable:
            line += f"\n{_CHAIN_INDENT}->nullable()"
        if column.references:
            line += f"\n{_CHAIN_INDENT}->constrained({php_string(column.references)})"
            if column.on_delete:
                line += f"\n{_CHAIN_INDENT}->onDelete({php_string(column.on_delete)})"
        return line + ";"

    if column.type == "enum":
        line = f"{_INDENT}$table->enum({php_string(name)}, {php_array(column.values or [])})"
    else:
        args: List[str] = [php_string(name)]
        if column.length is not None:
            args.append(str(column.length))
        elif column.precision is not None:
            args.extend(str(p) for p in column.precision)
        line = f"{_INDENT}$table->{map_type(column.type)}({', '.join(args)})"

    if column.nullable:
        line += "->nullable()"
    if column.unique:
        line += "->unique()"
    if column.default is not None:
        line += f"->default({_render_default(column.default)})"

    return line + ";"


# ---------------------------------------------------------------------------
# Migration file
# ---------------------------------------------------------------------------


def render_up_body(table: TableDefinition) -> List[str]:
    """Statements inside the ``Schema::create`` closure."""
    lines: List[str] = []
    composite: bool = table.has_composite_key

    for column in table.columns:
        statement: Optional[str] = render_column(column, composite_key=composite)
        if statement is not None:
            lines.append(statement)

    if composite:
        lines.append(f"{_INDENT}$table->primary({php_array(table.primary)});")

    if table.has_timestamps:
        lines.append(f"{_INDENT}$table->timestamps();")

    if table.has_soft_deletes:
        lines.append(f"{_INDENT}$table->softDeletes();")

    if table.indexes:
        lines.append("")
        lines.append(f"{_INDENT}// Indexes")
        for index in table.indexes:
            method: str = "unique" if index.unique else "index"
            lines.append(f"{_INDENT}$table->{method}({php_array(index.columns)});")

    return lines


def render_migration(table: TableDefinition) -> str:
    """Full PHP source of the create-table migration."""
    comment: str = table.comment or f"Table: {table.name}"
    lines: List[str] = [
        "<?php",
        "",
        "use Illuminate\\Database\\Migrations\\Migration;",
        "use Illuminate\\Database\\Schema\\Blueprint;",
        "use Illuminate\\Support\\Facades\\Schema;",
        "",
        "return new class extends Migration",
        "{",
        "    /**",
        "     * Run the migrations.",
        f"     * {comment}",
        "     */",
        "    public function up(): void",
        "    {",
        f"        Schema::create({php_string(table.name)}, function (Blueprint $table) {{",
    ]
    lines.extend(render_up_body(table))
    lines.extend([
        "        });",
        "    }",
        "",
        "    /**",
        "     * Reverse the migrations.",
        "     */",
        "    public function down(): void",
        "    {",
        f"        Schema::dropIfExists({php_string(table.name)});",
        "    }",
        "};",
        "",
    ])
    return "\n".join(lines)


class MigrationGenerator:
    """Turns tables into migration artifacts under ``migrations_path``."""

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config

    @property
    def directory(self) -> Path:
        return self._config.resolve(self._config.migrations_path)

    def scan(self) -> MigrationDirectoryState:
        return scan_migrations(self.directory)

    def counter(self, state: MigrationDirectoryState) -> MigrationCounter:
        return MigrationCounter(
            self._config.migration_start,
            state.used_counters(self._config.migration_date),
        )

    def build(self, table: TableDefinition, counter: int) -> GeneratedArtifact:
        filename: str = migration_filename(
            self._config.migration_date, counter, table.name
        )
        return GeneratedArtifact(
            path=f"{self._config.migrations_path}/{filename}",
            content=render_migration(table),
            kind=ArtifactKind.MIGRATION,
            entity=table.name,
        )


__all__: List[str] = [
    "MIGRATION_FILENAME_RE",
    "MigrationDirectoryState",
    "MigrationCounter",
    "MigrationGenerator",
    "scan_migrations",
    "migration_filename",
    "render_column",
    "render_up_body",
    "render_migration",
]

logger.debug("laragen.migrations loaded — %d public symbols.", len(__all__))
