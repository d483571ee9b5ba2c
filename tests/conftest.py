"""
tests/conftest.py
Shared fixtures for the laragen test suite.

All fixtures are session-scoped or function-scoped as appropriate.
No external mocking libraries are used; real file I/O is performed
inside temporary Laravel project skeletons managed by pytest's tmp_path.
"""

from __future__ import annotations

import copy
import logging
import pathlib
from typing import Any, Dict, Iterator

import pytest
import yaml

from laragen.models import GenerationConfig, SchemaDefinition
from laragen.registry import SchemaRegistry


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_laragen_logger() -> Iterator[None]:
    """cli_main detaches the 'laragen' logger from root; undo that per test."""
    yield
    package_logger: logging.Logger = logging.getLogger("laragen")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Built-in schema
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def builtin_registry() -> SchemaRegistry:
    """The bundled marketplace schema, loaded once per session."""
    return SchemaRegistry.builtin()


# ---------------------------------------------------------------------------
# Compact schema: five tables, four enums
# ---------------------------------------------------------------------------

_COMPACT_SCHEMA: Dict[str, Any] = {
    "config": {
        "migration_date": "2024_01_01",
        "migration_start": 14,
        "seed_count": 10,
        "foreign_key_ceiling": 100,
    },
    "tables": {
        "users": {
            "comment": "User accounts",
            "columns": [
                {"name": "id", "type": "id"},
                {"name": "email", "type": "string", "unique": True},
                {"name": "full_name", "type": "string", "length": 100},
                {"name": "gender", "type": "enum", "enum": "Gender", "nullable": True},
                {"name": "is_active", "type": "boolean", "default": True},
                {"name": "remember_token", "type": "rememberToken"},
                {"name": "created_at", "type": "timestamp", "nullable": True},
                {"name": "updated_at", "type": "timestamp", "nullable": True},
            ],
            "indexes": [{"columns": ["email"]}],
            "seed": {"count": 20},
            "model": {
                "hidden": ["remember_token"],
                "traits": ["Notifiable"],
                "relationships": {
                    "orders": {"kind": "hasMany", "model": "Order", "foreign_key": "customer_id"},
                    "roles": {"kind": "belongsToMany", "model": "Role", "table": "role_user"},
                },
            },
        },
        "roles": {
            "columns": [
                {"name": "id", "type": "id"},
                {"name": "role_name", "type": "string", "length": 50, "unique": True},
                {"name": "created_at", "type": "timestamp", "nullable": True},
                {"name": "updated_at", "type": "timestamp", "nullable": True},
            ],
            "seed": {"count": 5},
            "model": {
                "relationships": {
                    "users": {"kind": "belongsToMany", "model": "User", "table": "role_user"},
                },
            },
        },
        "role_user": {
            "columns": [
                {"name": "user_id", "type": "foreignId", "references": "users", "on_delete": "cascade"},
                {"name": "role_id", "type": "foreignId", "references": "roles", "on_delete": "cascade"},
            ],
            "primary": ["user_id", "role_id"],
        },
        "orders": {
            "columns": [
                {"name": "id", "type": "id"},
                {"name": "order_number", "type": "string", "length": 50, "unique": True},
                {"name": "customer_id", "type": "foreignId", "references": "users", "on_delete": "cascade"},
                {"name": "status", "type": "enum", "enum": "OrderStatus", "default": "pending"},
                {"name": "payment_status", "type": "enum", "enum": "PaymentStatus", "default": "unpaid"},
                {"name": "payment_method", "type": "enum", "enum": "PaymentMethod"},
                {"name": "total_amount", "type": "decimal", "precision": [15, 2]},
                {"name": "note", "type": "text", "nullable": True},
                {"name": "created_at", "type": "timestamp", "nullable": True},
                {"name": "updated_at", "type": "timestamp", "nullable": True},
                {"name": "deleted_at", "type": "timestamp", "nullable": True},
            ],
            "indexes": [
                {"columns": ["customer_id"]},
                {"columns": ["status", "created_at"]},
            ],
            "seed": {"count": 50},
            "model": {
                "relationships": {
                    "customer": {"kind": "belongsTo", "model": "User", "foreign_key": "customer_id"},
                    "transactions": {"kind": "hasMany", "model": "Transaction"},
                },
                "scopes": {"pending": {"status": "pending"}},
            },
        },
        "transactions": {
            "columns": [
                {"name": "id", "type": "id"},
                {"name": "order_id", "type": "foreignId", "references": "orders", "on_delete": "cascade"},
                {"name": "payment_method", "type": "enum", "enum": "PaymentMethod"},
                {"name": "amount", "type": "decimal", "precision": [15, 2]},
                {"name": "created_at", "type": "timestamp", "nullable": True},
                {"name": "updated_at", "type": "timestamp", "nullable": True},
            ],
            "model": {
                "relationships": {
                    "order": {"kind": "belongsTo", "model": "Order"},
                },
            },
        },
    },
    "enums": {
        "Gender": {
            "cases": {"MALE": "male", "FEMALE": "female", "OTHER": "other"},
            "labels": {"MALE": "Nam", "FEMALE": "Nữ", "OTHER": "Khác"},
        },
        "OrderStatus": {
            "cases": {
                "PENDING": "pending",
                "CONFIRMED": "confirmed",
                "DELIVERED": "delivered",
                "CANCELLED": "cancelled",
            },
        },
        "PaymentStatus": {
            "cases": {"UNPAID": "unpaid", "PAID": "paid"},
            "labels": {"UNPAID": "Chưa thanh toán", "PAID": "Đã thanh toán"},
        },
        "PaymentMethod": {
            "cases": {"COD": "cod", "BANK_TRANSFER": "bank_transfer"},
            "labels": {"COD": "Thanh toán khi nhận hàng", "BANK_TRANSFER": "Chuyển khoản"},
        },
    },
}


@pytest.fixture()
def compact_schema_dict() -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(_COMPACT_SCHEMA)


@pytest.fixture()
def compact_registry(compact_schema_dict: Dict[str, Any]) -> SchemaRegistry:
    return SchemaRegistry.from_dict(compact_schema_dict)


@pytest.fixture()
def compact_schema(compact_registry: SchemaRegistry) -> SchemaDefinition:
    return compact_registry.schema


@pytest.fixture()
def compact_yaml_path(
    compact_schema_dict: Dict[str, Any], tmp_path: pathlib.Path
) -> pathlib.Path:
    """Write the compact schema to a temporary YAML file and return its path."""
    path = tmp_path / "schema.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(
            compact_schema_dict,
            fh,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
    return path


# ---------------------------------------------------------------------------
# Laravel project skeleton
# ---------------------------------------------------------------------------


@pytest.fixture()
def laravel_project(tmp_path: pathlib.Path) -> pathlib.Path:
    """An empty Laravel application layout under tmp_path."""
    root = tmp_path / "app-root"
    for rel in ("database/migrations", "database/seeders", "app/Models", "app/Enums"):
        (root / rel).mkdir(parents=True)
    return root


@pytest.fixture()
def project_config(laravel_project: pathlib.Path) -> GenerationConfig:
    """Default generation settings pointed at the project skeleton."""
    return GenerationConfig(base_path=str(laravel_project))
