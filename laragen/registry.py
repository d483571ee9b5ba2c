# File: laragen/registry.py
"""
Laragen - Schema Registry
=========================
Loads the canonical schema and answers lookups against it.

The registry is the only component that knows where a schema comes from:

- the built-in marketplace schema shipped in ``laragen/data/schema.yaml``;
- an external JSON/YAML file passed with ``--schema``;
- an in-memory dictionary (tests, programmatic use).

Input layout::

    config:   {migration_date: "2024_01_01", seed_count: 10, ...}
    tables:   {countries: {columns: [...], indexes: [...], model: {...}}, ...}
    enums:    {Gender: {cases: {MALE: male, ...}, labels: {...}}, ...}

``tables`` and ``enums`` may also be given as lists of objects carrying a
``name`` key.  Everything structural is checked by the pydantic models;
the cross-entity checks live in :mod:`laragen.validators`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import yaml
from pydantic import ValidationError

from laragen.models import (
    EnumDefinition,
    GenerationConfig,
    SchemaDefinition,
    TableDefinition,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.registry")

BUILTIN_SCHEMA_PATH: Path = Path(__file__).resolve().parent / "data" / "schema.yaml"

_CONFIG_KEYS: Tuple[str, ...] = ("config", "generation_config")


# ---------------------------------------------------------------------------
# Schema file loaders
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        text: str = path.read_text(encoding="utf-8")
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        text: str = path.read_text(encoding="utf-8")
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_schema_file(path: Path) -> Dict[str, Any]:
    """
    Load a schema definition file (JSON or YAML).

    Dispatches based on file extension; unknown extensions are tried as
    JSON first, then YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Schema path is not a file: {path}")

    suffix: str = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s' — trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def parse_raw_schema(
    raw: Dict[str, Any],
    source_file: Optional[str] = None,
) -> Tuple[SchemaDefinition, GenerationConfig]:
    """
    Parse a raw dictionary (from JSON/YAML) into validated pydantic models.

    Returns:
        Tuple of (SchemaDefinition, GenerationConfig).

    Raises:
        ValueError: If required keys are missing or the models reject the
            data.
    """
    if "tables" not in raw:
        raise ValueError(
            "Cannot find schema definition in input. Expected top-level key 'tables'."
        )

    schema_data: Dict[str, Any] = {
        "tables": raw["tables"],
        "enums": raw.get("enums") or [],
        "source_file": source_file,
    }

    config_data: Optional[Dict[str, Any]] = None
    for key in _CONFIG_KEYS:
        if key in raw:
            config_data = raw[key] or {}
            break
    if config_data is None:
        logger.debug("No generation config found in input — using defaults.")
        config_data = {}

    try:
        schema: SchemaDefinition = SchemaDefinition.model_validate(schema_data)
    except ValidationError as exc:
        raise ValueError(f"Schema validation failed: {exc}") from exc

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    return schema, config


def merge_config(
    config: GenerationConfig,
    overrides: Dict[str, Any],
) -> GenerationConfig:
    """
    Apply CLI overrides on top of a loaded config.

    ``None`` values mean "flag not given" and leave the loaded value in
    place.  The merged mapping is validated again.
    """
    effective: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    if not effective:
        return config
    merged: Dict[str, Any] = config.model_dump()
    merged.update(effective)
    try:
        return GenerationConfig.model_validate(merged)
    except ValidationError as exc:
        raise ValueError(f"Invalid option value: {exc}") from exc


# ---------------------------------------------------------------------------
# SchemaRegistry
# ---------------------------------------------------------------------------


class SchemaRegistry:
    """
    Read-only facade over one ``SchemaDefinition``.

    Usage::

        registry = SchemaRegistry.builtin()
        found, missing = registry.resolve(["orders", "nope"])
        orders = registry.get("orders")
    """

    __slots__ = ("_schema", "_config")

    def __init__(
        self,
        schema: SchemaDefinition,
        config: Optional[GenerationConfig] = None,
    ) -> None:
        self._schema: SchemaDefinition = schema
        self._config: GenerationConfig = config or GenerationConfig()

    # -- Constructors -------------------------------------------------------

    @classmethod
    def from_dict(
        cls,
        raw: Dict[str, Any],
        source_file: Optional[str] = None,
    ) -> "SchemaRegistry":
        schema, config = parse_raw_schema(raw, source_file=source_file)
        logger.debug(
            "Registry built: %d tables, %d enums (source=%s).",
            len(schema.tables),
            len(schema.enums),
            source_file or "<memory>",
        )
        return cls(schema, config)

    @classmethod
    def from_file(cls, path: Path) -> "SchemaRegistry":
        """Load an external schema file. Raises FileNotFoundError/ValueError."""
        raw: Dict[str, Any] = load_schema_file(path)
        logger.info("Loaded schema file: %s (%d top-level keys).", path, len(raw))
        return cls.from_dict(raw, source_file=str(path))

    @classmethod
    def builtin(cls) -> "SchemaRegistry":
        """The marketplace schema bundled with the package."""
        raw: Dict[str, Any] = _load_yaml_file(BUILTIN_SCHEMA_PATH)
        return cls.from_dict(raw)

    # -- Accessors ----------------------------------------------------------

    @property
    def schema(self) -> SchemaDefinition:
        return self._schema

    @property
    def config(self) -> GenerationConfig:
        return self._config

    @property
    def tables(self) -> List[TableDefinition]:
        return list(self._schema.tables)

    @property
    def enums(self) -> List[EnumDefinition]:
        return list(self._schema.enums)

    def table_names(self) -> List[str]:
        """All table names, in registry order."""
        return [t.name for t in self._schema.tables]

    def get(self, name: str) -> Optional[TableDefinition]:
        """Table by name, or None."""
        return self._schema.get_table(name)

    def get_enum(self, name: str) -> Optional[EnumDefinition]:
        return self._schema.get_enum(name)

    def resolve(
        self,
        names: Optional[Sequence[str]],
    ) -> Tuple[List[TableDefinition], List[str]]:
        """
        Resolve a ``--tables`` filter.

        ``None`` or an empty selection means every table.  Unknown names
        are returned separately and logged; they never abort a run.
        Duplicates are dropped, first occurrence wins.
        """
        if not names:
            return self.tables, []

        found: List[TableDefinition] = []
        missing: List[str] = []
        seen: set = set()
        for name in names:
            if name in seen:
                continue
            seen.add(name)
            table: Optional[TableDefinition] = self.get(name)
            if table is None:
                logger.warning("Table '%s' not found in schema registry.", name)
                missing.append(name)
            else:
                found.append(table)
        return found, missing

    # -- Dunder -------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._schema.tables)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._schema.get_table(name) is not None

    def __iter__(self) -> Iterator[TableDefinition]:
        return iter(self._schema.tables)

    def __repr__(self) -> str:
        return (
            f"<SchemaRegistry {len(self._schema.tables)} tables, "
            f"{len(self._schema.enums)} enums>"
        )


__all__: List[str] = [
    "BUILTIN_SCHEMA_PATH",
    "load_schema_file",
    "parse_raw_schema",
    "merge_config",
    "SchemaRegistry",
]

logger.debug("laragen.registry loaded — %d public symbols.", len(__all__))
