"""
tests/test_validators.py
Unit tests for laragen.validators.

Tests cover:
- ValidationResult / ValidationError containers and report formatting
- Model name checks (PHP reserved words, duplicates)
- Column type and foreign key checks
- Circular dependency detection
- Index checks
- Enum definition checks (labels, case collisions, unused enums)
- Model metadata checks (columns, relationships, pivots, scopes)
- Seed option and generation config checks
- The built-in schema passes cleanly
"""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from laragen.models import GenerationConfig, SchemaDefinition
from laragen.registry import SchemaRegistry
from laragen.validators import (
    ValidationError,
    ValidationResult,
    validate_circular_dependencies,
    validate_column_types,
    validate_enum_definitions,
    validate_foreign_keys,
    validate_full,
    validate_generation_config,
    validate_indexes,
    validate_model_metadata,
    validate_model_names,
    validate_schema,
    validate_seed_options,
)


# ===========================================================================
# Helpers
# ===========================================================================


def _schema(raw: Dict[str, Any]) -> SchemaDefinition:
    return SchemaRegistry.from_dict(raw).schema


def _codes(result: ValidationResult, level: str) -> List[str]:
    return [item.code for item in result.all_items if item.level == level]


# ===========================================================================
# Result containers
# ===========================================================================


class TestValidationResult:
    """Tests for ValidationResult and ValidationError."""

    def test_empty_result_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert bool(result) is True
        assert len(result) == 0
        assert result.summary() == "Validation: 0 error(s), 0 warning(s), 0 total item(s)."

    def test_counts_and_merge(self) -> None:
        first = ValidationResult()
        first.add_error("E1", "broken")
        second = ValidationResult()
        second.add_warning("W1", "odd")
        second.add_info("I1", "fyi")
        first.merge(second)
        assert first.error_count == 1
        assert first.warning_count == 1
        assert len(first) == 3
        assert first.codes == ["E1", "W1", "I1"]
        assert not first.is_valid
        assert bool(first) is False

    def test_error_string(self) -> None:
        err = ValidationError("error", "UNKNOWN_FK_TARGET", "bad ref", {"table": "orders"})
        assert str(err) == "[ERROR] UNKNOWN_FK_TARGET: bad ref"
        assert err.is_error
        assert err.context == {"table": "orders"}

    def test_format_report_hides_info_by_default(self) -> None:
        result = ValidationResult()
        result.add_warning("W1", "odd", {"table": "orders"})
        result.add_info("I1", "fyi")
        report = result.format_report()
        assert "[W1] odd" in report
        assert "table: orders" in report
        assert "[I1]" not in report
        assert "[I1] fyi" in result.format_report(include_info=True)


# ===========================================================================
# Whole-schema validation
# ===========================================================================


class TestCleanSchemas:
    """Schemas that must validate without errors."""

    def test_compact_schema(self, compact_schema: SchemaDefinition) -> None:
        result = validate_full(compact_schema, GenerationConfig())
        assert result.is_valid, result.format_report()
        assert result.warnings == []
        assert "REDUNDANT_INDEX" in result.codes

    def test_builtin_schema(self, builtin_registry: SchemaRegistry) -> None:
        result = validate_full(builtin_registry.schema, builtin_registry.config)
        assert result.is_valid, result.format_report()

    def test_validate_schema_runs_every_check(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["transactions"]["columns"][1]["references"] = "payments"
        compact_schema_dict["enums"]["OrderStatus"]["labels"] = {"PENDING": "Chờ xử lý"}
        result = validate_schema(_schema(compact_schema_dict))
        assert "UNKNOWN_FK_TARGET" in result.codes
        assert "PARTIAL_ENUM_LABELS" in result.codes


# ===========================================================================
# Individual checks
# ===========================================================================


class TestModelNames:
    """Tests for validate_model_names."""

    def test_reserved_word(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["returns"] = {
            "columns": [
                {"name": "id", "type": "id"},
                {"name": "order_id", "type": "foreignId", "references": "orders"},
            ],
        }
        result = validate_model_names(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["MODEL_NAME_PHP_RESERVED"]

    def test_class_name_override_fixes_reserved_word(
        self, compact_schema_dict: Dict[str, Any]
    ) -> None:
        compact_schema_dict["tables"]["returns"] = {
            "columns": [{"name": "id", "type": "id"}],
            "model": {"class_name": "OrderReturn"},
        }
        assert validate_model_names(_schema(compact_schema_dict)).is_valid

    def test_duplicate_model_name(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["roles"]["model"]["class_name"] = "User"
        result = validate_model_names(_schema(compact_schema_dict))
        assert "DUPLICATE_MODEL_NAME" in _codes(result, "error")

    def test_pivots_are_ignored(self, compact_schema: SchemaDefinition) -> None:
        assert validate_model_names(compact_schema).codes == []


class TestColumnsAndKeys:
    """Tests for validate_column_types and validate_foreign_keys."""

    def test_unknown_column_type(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["roles"]["columns"].append({"name": "area", "type": "geometry"})
        result = validate_column_types(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["UNKNOWN_COLUMN_TYPE"]

    def test_renamed_id_column(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["roles"]["columns"][0]["name"] = "role_id"
        result = validate_column_types(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["ID_COLUMN_RENAMED"]

    def test_unknown_fk_target(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["transactions"]["columns"][1]["references"] = "payments"
        result = validate_foreign_keys(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["UNKNOWN_FK_TARGET"]
        assert result.errors[0].context["column"] == "order_id"

    def test_fk_without_target_is_info(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["roles"]["columns"].append(
            {"name": "legacy_id", "type": "foreignId", "nullable": True}
        )
        result = validate_foreign_keys(_schema(compact_schema_dict))
        assert result.is_valid
        assert _codes(result, "info") == ["FK_WITHOUT_TARGET"]

    def test_unknown_on_delete(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["transactions"]["columns"][1]["on_delete"] = "explode"
        result = validate_foreign_keys(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["UNKNOWN_ON_DELETE_ACTION"]

    def test_set_null_is_known(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["transactions"]["columns"][1]["on_delete"] = "SET NULL"
        assert validate_foreign_keys(_schema(compact_schema_dict)).codes == []


class TestCircularDependencies:
    """Tests for validate_circular_dependencies."""

    def test_acyclic(self, compact_schema: SchemaDefinition) -> None:
        assert validate_circular_dependencies(compact_schema).is_valid

    def test_cycle(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["users"]["columns"].append(
            {"name": "last_order_id", "type": "foreignId", "references": "orders", "nullable": True}
        )
        result = validate_circular_dependencies(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["CIRCULAR_FK_DEPENDENCY"]
        assert "users" in result.errors[0].context["tables"]


class TestIndexes:
    """Tests for validate_indexes."""

    def test_duplicate_index(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["orders"]["indexes"].append({"columns": ["customer_id"]})
        result = validate_indexes(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["DUPLICATE_INDEX"]

    def test_unique_and_plain_index_are_distinct(
        self, compact_schema_dict: Dict[str, Any]
    ) -> None:
        compact_schema_dict["tables"]["orders"]["indexes"].append(
            {"columns": ["customer_id"], "unique": True}
        )
        assert _codes(validate_indexes(_schema(compact_schema_dict)), "warning") == []

    def test_redundant_index_is_info(self, compact_schema: SchemaDefinition) -> None:
        result = validate_indexes(compact_schema)
        assert _codes(result, "info") == ["REDUNDANT_INDEX"]


class TestEnumDefinitions:
    """Tests for validate_enum_definitions."""

    def test_partial_labels(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["enums"]["OrderStatus"]["labels"] = {"PENDING": "Chờ xử lý"}
        result = validate_enum_definitions(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["PARTIAL_ENUM_LABELS"]

    def test_unknown_label_key(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["enums"]["PaymentStatus"]["labels"]["REFUNDED"] = "Đã hoàn tiền"
        result = validate_enum_definitions(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["PARTIAL_ENUM_LABELS"]

    def test_case_collision(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["enums"]["Theme"] = {"cases": {"Dark": "dark", "DARK": "dark_mode"}}
        result = validate_enum_definitions(_schema(compact_schema_dict))
        assert "ENUM_CASE_COLLISION" in _codes(result, "error")

    def test_unused_enum_is_info(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["enums"]["Theme"] = {"cases": {"LIGHT": "light", "DARK": "dark"}}
        result = validate_enum_definitions(_schema(compact_schema_dict))
        assert result.is_valid
        assert _codes(result, "info") == ["UNUSED_ENUM"]


class TestModelMetadata:
    """Tests for validate_model_metadata."""

    def test_clean(self, compact_schema: SchemaDefinition) -> None:
        result = validate_model_metadata(compact_schema)
        assert result.is_valid
        assert result.warnings == []

    def test_unknown_hidden_column(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["users"]["model"]["hidden"] = ["password"]
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["UNKNOWN_MODEL_COLUMN"]
        assert result.warnings[0].context["property"] == "hidden"

    def test_unknown_relationship_model(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["orders"]["model"]["relationships"]["coupon"] = {
            "kind": "hasOne", "model": "Coupon",
        }
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["UNKNOWN_RELATIONSHIP_MODEL"]

    def test_relationship_to_pivot_model(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["users"]["model"]["relationships"]["memberships"] = {
            "kind": "hasMany", "model": "RoleUser", "foreign_key": "user_id",
        }
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert "UNKNOWN_RELATIONSHIP_MODEL" in _codes(result, "error")

    def test_unknown_pivot_table(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["users"]["model"]["relationships"]["roles"]["table"] = "user_roles"
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["UNKNOWN_PIVOT_TABLE"]

    def test_implicit_pivot_table_is_info(self, compact_schema_dict: Dict[str, Any]) -> None:
        del compact_schema_dict["tables"]["roles"]["model"]["relationships"]["users"]["table"]
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert result.is_valid
        assert _codes(result, "info") == ["IMPLICIT_PIVOT_TABLE"]

    def test_pivot_on_has_many(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["orders"]["model"]["relationships"]["transactions"]["table"] = "x"
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["PIVOT_ON_NON_MANY_TO_MANY"]

    def test_unresolved_belongs_to_key(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["transactions"]["model"]["relationships"]["buyer"] = {
            "kind": "belongsTo", "model": "User",
        }
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["UNRESOLVED_FOREIGN_KEY"]
        assert "buyer_id" in result.warnings[0].message

    def test_unresolved_has_many_key(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["users"]["model"]["relationships"]["orders"]["foreign_key"] = "buyer_id"
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["UNRESOLVED_FOREIGN_KEY"]

    def test_unknown_condition_column(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["users"]["model"]["relationships"]["orders"]["condition"] = "state=open"
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["UNKNOWN_CONDITION_COLUMN"]

    def test_unknown_scope_column(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["orders"]["model"]["scopes"]["shipped"] = {"shipped_at": None}
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["UNKNOWN_SCOPE_COLUMN"]

    def test_duplicate_methods(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["orders"]["model"]["relationships"] = [
            {"name": "customer", "kind": "belongsTo", "model": "User", "foreign_key": "customer_id"},
            {"name": "Customer", "kind": "belongsTo", "model": "User", "foreign_key": "customer_id"},
        ]
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["DUPLICATE_MODEL_METHOD"]

    def test_scope_and_relationship_may_share_a_name(
        self, compact_schema_dict: Dict[str, Any]
    ) -> None:
        compact_schema_dict["tables"]["orders"]["model"]["scopes"]["customer"] = {"status": "confirmed"}
        assert validate_model_metadata(_schema(compact_schema_dict)).is_valid

    def test_invalid_relationship_name(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["orders"]["model"]["relationships"]["line-items"] = {
            "kind": "hasMany", "model": "Transaction", "foreign_key": "order_id",
        }
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "error") == ["INVALID_RELATIONSHIP_NAME"]

    def test_pivot_with_model_metadata(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["role_user"]["model"] = {
            "relationships": {"user": {"kind": "belongsTo", "model": "User"}},
        }
        result = validate_model_metadata(_schema(compact_schema_dict))
        assert _codes(result, "warning") == ["PIVOT_MODEL_METADATA"]


class TestSeedAndConfig:
    """Tests for validate_seed_options and validate_generation_config."""

    def test_empty_seeder_is_info(self, compact_schema_dict: Dict[str, Any]) -> None:
        compact_schema_dict["tables"]["roles"]["seed"]["count"] = 0
        result = validate_seed_options(_schema(compact_schema_dict))
        assert _codes(result, "info") == ["EMPTY_SEEDER"]

    def test_default_config_is_clean(self) -> None:
        assert validate_generation_config(GenerationConfig()).codes == []

    def test_invalid_namespace(self) -> None:
        result = validate_generation_config(GenerationConfig(models_namespace="app\\models"))
        assert _codes(result, "error") == ["INVALID_NAMESPACE"]

    @pytest.mark.parametrize("path", ["../shared/migrations", "/tmp/migrations"])
    def test_path_outside_project(self, path: str) -> None:
        result = validate_generation_config(GenerationConfig(migrations_path=path))
        assert _codes(result, "warning") == ["OUTPUT_PATH_OUTSIDE_PROJECT"]

    def test_zero_seed_count(self) -> None:
        result = validate_generation_config(GenerationConfig(seed_count=0))
        assert _codes(result, "warning") == ["ZERO_SEED_COUNT"]

    def test_full_merges_config_errors(self, compact_schema: SchemaDefinition) -> None:
        result = validate_full(compact_schema, GenerationConfig(seeders_namespace="database\\seeders"))
        assert result.has_errors
        assert "INVALID_NAMESPACE" in result.codes
