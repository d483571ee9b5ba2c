# File: laragen/seeders.py
"""
Laragen - Seeder Generator
==========================
Renders one ``{Studly(table)}Seeder`` per table plus the
``DatabaseSeeder`` that runs them.

Each table seeder performs a bounded loop of N best-effort inserts built
from Faker expressions, counts what succeeded and what failed, and
records the result in ``DatabaseSeeder::$summary``.  ``DatabaseSeeder``
calls the seeders parents-first (see
:meth:`laragen.models.SchemaDefinition.seeding_order`) and prints the
summary as a table when it is done.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from laragen.models import (
    ArtifactKind,
    ColumnDefinition,
    GeneratedArtifact,
    GenerationConfig,
    SchemaDefinition,
    TableDefinition,
)
from laragen.typemap import faker_expression
from laragen.utils import php_string, to_studly_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.seeders")

ORCHESTRATOR_CLASS: str = "DatabaseSeeder"

_ATTR_INDENT: str = " " * 20
_SKIPPED_TYPES: tuple = ("id", "rememberToken")


def seeder_class_name(table_name: str) -> str:
    """``user_addresses`` → ``UserAddressesSeeder``."""
    return f"{to_studly_case(table_name)}Seeder"


class SeederGenerator:
    """
    Builds seeder artifacts for a schema.

    Row counts come from each table's ``seed.count``, falling back to the
    configured ``seed_count``.  Foreign keys are drawn from
    ``[1, min(foreign_key_ceiling, rows seeded into the parent)]``.
    """

    def __init__(self, schema: SchemaDefinition, config: GenerationConfig) -> None:
        self._schema: SchemaDefinition = schema
        self._config: GenerationConfig = config

    # -- Counts --------------------------------------------------------------

    def row_count(self, table: TableDefinition) -> int:
        if table.seed.count is not None:
            return table.seed.count
        return self._config.seed_count

    def foreign_key_ceiling(self, column: ColumnDefinition) -> int:
        ceiling: int = self._config.foreign_key_ceiling
        if column.references:
            parent: Optional[TableDefinition] = self._schema.get_table(column.references)
            if parent is not None:
                ceiling = min(ceiling, self.row_count(parent))
        return max(ceiling, 1)

    # -- Expressions ---------------------------------------------------------

    def expression(self, column: ColumnDefinition) -> str:
        ceiling: int = self._config.foreign_key_ceiling
        if column.is_foreign_key:
            ceiling = self.foreign_key_ceiling(column)
        return faker_expression(column, ceiling)

    def attributes(self, table: TableDefinition) -> Dict[str, str]:
        """Column → PHP expression for one inserted row, in column order."""
        attrs: Dict[str, str] = {}
        for column in table.columns:
            if column.type in _SKIPPED_TYPES or column.is_reserved_timestamp:
                continue
            attrs[column.name] = self.expression(column)
        for stamp in ("created_at", "updated_at"):
            if table.get_column(stamp) is not None:
                attrs[stamp] = "now()"
        return attrs

    # -- Rendering -----------------------------------------------------------

    def render_seeder(self, table: TableDefinition) -> str:
        """Full PHP source of one table seeder."""
        count: int = self.row_count(table)
        name: str = table.name
        quoted: str = php_string(name)

        lines: List[str] = [
            "<?php",
            "",
            f"namespace {self._config.seeders_namespace};",
            "",
            "use Illuminate\\Database\\Seeder;",
            "use Illuminate\\Support\\Facades\\DB;",
            "",
            f"class {seeder_class_name(name)} extends Seeder",
            "{",
            "    /**",
            "     * Run the database seeds.",
            "     */",
            "    public function run(): void",
            "    {",
            "        $faker = \\Faker\\Factory::create();",
            "        $inserted = 0;",
            "        $failed = 0;",
            "",
            f"        for ($i = 0; $i < {count}; $i++) {{",
            "            try {",
            f"                DB::table({quoted})->insert([",
        ]
        for column, expression in self.attributes(table).items():
            lines.append(f"{_ATTR_INDENT}{php_string(column)} => {expression},")
        lines.extend([
            "                ]);",
            "                $inserted++;",
            "            } catch (\\Exception $e) {",
            "                $failed++;",
            "            }",
            "        }",
            "",
            f'        $this->command->info("Seeded {{$inserted}}/{count} records in {name} table");',
            "        if ($failed > 0) {",
            f'            $this->command->warn("Failed to insert {{$failed}} records into {name} table");',
            "        }",
            "",
            f"        {ORCHESTRATOR_CLASS}::$summary[{quoted}] = [",
            f"            'requested' => {count},",
            "            'inserted' => $inserted,",
            "            'failed' => $failed,",
            "        ];",
            "    }",
            "}",
            "",
        ])
        return "\n".join(lines)

    def render_orchestrator(self, order: Sequence[str]) -> str:
        """``DatabaseSeeder`` calling every seeder in *order*."""
        lines: List[str] = [
            "<?php",
            "",
            f"namespace {self._config.seeders_namespace};",
            "",
            "use Illuminate\\Database\\Seeder;",
            "",
            f"class {ORCHESTRATOR_CLASS} extends Seeder",
            "{",
            "    /**",
            "     * Per-table results reported by the table seeders.",
            "     *",
            "     * @var array<string, array{requested: int, inserted: int, failed: int}>",
            "     */",
            "    public static array $summary = [];",
            "",
            "    /**",
            "     * Seed the application's database.",
            "     */",
            "    public function run(): void",
            "    {",
            "        $this->command->info('Starting database seeding...');",
            "",
        ]
        for table_name in order:
            lines.append(f"        $this->call({seeder_class_name(table_name)}::class);")
        lines.extend([
            "",
            "        $rows = [];",
            "        foreach (self::$summary as $table => $result) {",
            "            $rows[] = [$table, $result['requested'], $result['inserted'], $result['failed']];",
            "        }",
            "        $this->command->table(['Table', 'Requested', 'Inserted', 'Failed'], $rows);",
            "",
            "        $this->command->info('Database seeding completed!');",
            "    }",
            "}",
            "",
        ])
        return "\n".join(lines)

    # -- Artifacts -----------------------------------------------------------

    def build(self, table: TableDefinition) -> GeneratedArtifact:
        return GeneratedArtifact(
            path=f"{self._config.seeders_path}/{seeder_class_name(table.name)}.php",
            content=self.render_seeder(table),
            kind=ArtifactKind.SEEDER,
            entity=table.name,
        )

    def build_orchestrator(self) -> GeneratedArtifact:
        """
        The ``DatabaseSeeder`` artifact; always overwrites.

        Raises:
            DependencyCycleError: when no parents-first order exists.
        """
        order: List[str] = self._schema.seeding_order()
        logger.debug("Seeding order: %s", ", ".join(order))
        return GeneratedArtifact(
            path=f"{self._config.seeders_path}/{ORCHESTRATOR_CLASS}.php",
            content=self.render_orchestrator(order),
            kind=ArtifactKind.ORCHESTRATOR,
            entity=ORCHESTRATOR_CLASS,
            overwrite=True,
        )


__all__: List[str] = [
    "ORCHESTRATOR_CLASS",
    "SeederGenerator",
    "seeder_class_name",
]

logger.debug("laragen.seeders loaded — %d public symbols.", len(__all__))
