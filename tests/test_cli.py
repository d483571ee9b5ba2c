"""
tests/test_cli.py
Integration tests for laragen.cli.

Tests cover:
- Argument parsing (--tables lists, repeated flags, --version)
- db:validate-schema output and exit codes
- Each db:generate-* command against a project skeleton
- Option overrides (--start, --date, --count, --force, --dry-run, --quiet)
- Input errors (malformed schema, bad option values, empty --tables) and the
  missing-schema fallback
"""

from __future__ import annotations

import argparse
import pathlib
from typing import Any, Dict, List

import pytest
import yaml

from laragen.cli import _build_parser, _selected_tables, _table_list, cli_main
from laragen.generator import (
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


def _files(project: pathlib.Path, rel: str) -> List[str]:
    return sorted(p.name for p in (project / rel).glob("*.php"))


# ===========================================================================
# Parsing
# ===========================================================================


class TestParsing:
    """Tests for the argument parser helpers."""

    def test_table_list(self) -> None:
        assert _table_list("orders, users,,roles ") == ["orders", "users", "roles"]

    def test_repeated_tables_flag(self) -> None:
        args = _build_parser().parse_args(
            ["db:generate-enums", "--tables=orders,users", "--tables", "roles"]
        )
        assert _selected_tables(args) == ["orders", "users", "roles"]

    def test_no_tables_means_all(self) -> None:
        args = _build_parser().parse_args(["db:generate-models"])
        assert _selected_tables(args) is None

    def test_empty_tables_is_not_all(self) -> None:
        assert _selected_tables(argparse.Namespace(tables=[[]])) == []
        args = _build_parser().parse_args(["db:generate-seeders", "--tables=,"])
        assert _selected_tables(args) == []

    def test_command_specific_options(self) -> None:
        args = _build_parser().parse_args(
            ["db:generate-migrations", "--start=20", "--date=2024_06_01"]
        )
        assert args.start == 20
        assert args.date == "2024_06_01"
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["db:generate-migrations", "--force"])

    def test_command_required(self) -> None:
        assert _run([]) == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == 0
        assert "Laragen v" in capsys.readouterr().out


# ===========================================================================
# db:validate-schema
# ===========================================================================


class TestValidateCommand:
    """Tests for db:validate-schema."""

    def test_builtin_schema(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["db:validate-schema"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Schema Validation Report" in out
        assert "Source:   built-in schema" in out
        assert "Tables:   54" in out
        assert "Enums:    20" in out
        assert "Valid:    Yes" in out

    def test_external_schema(
        self, compact_yaml_path: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert _run(["db:validate-schema", f"--schema={compact_yaml_path}"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Tables:   5" in out
        assert "Pivots:   1" in out

    def test_invalid_schema(
        self,
        compact_schema_dict: Dict[str, Any],
        tmp_path: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        compact_schema_dict["tables"]["transactions"]["columns"][1]["references"] = "payments"
        path = tmp_path / "broken.yaml"
        path.write_text(
            yaml.dump(compact_schema_dict, allow_unicode=True, sort_keys=False),
            encoding="utf-8",
        )
        assert _run(["db:validate-schema", "--schema", str(path)]) == EXIT_VALIDATION_ERROR
        out = capsys.readouterr().out
        assert "Valid:    No" in out
        assert "UNKNOWN_FK_TARGET" in out

    def test_malformed_schema_is_input_error(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("tables: [unclosed\n", encoding="utf-8")
        assert _run(["db:validate-schema", f"--schema={path}"]) == EXIT_INPUT_ERROR

    def test_structurally_invalid_schema_is_input_error(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("tables:\n  orders:\n    columns: []\n", encoding="utf-8")
        assert _run(["db:validate-schema", f"--schema={path}"]) == EXIT_INPUT_ERROR

    def test_missing_schema_falls_back_to_builtin(
        self, tmp_path: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(["db:validate-schema", f"--schema={tmp_path / 'nope.yaml'}"])
        assert code == EXIT_SUCCESS
        captured = capsys.readouterr()
        assert "Tables:   54" in captured.out
        assert "Schema file not found" in captured.err


# ===========================================================================
# db:generate-*
# ===========================================================================


class TestGenerateCommands:
    """Each generator command end to end."""

    def test_migrations(
        self,
        compact_yaml_path: pathlib.Path,
        laravel_project: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run([
            "db:generate-migrations",
            f"--schema={compact_yaml_path}",
            f"--base-path={laravel_project}",
            "--tables=roles,users",
            "--start=30",
            "--date=2024_06_01",
        ])
        assert code == EXIT_SUCCESS
        assert _files(laravel_project, "database/migrations") == [
            "2024_06_01_000030_create_users_table.php",
            "2024_06_01_000031_create_roles_table.php",
        ]
        out = capsys.readouterr().out
        assert "Laragen — Migrations Report" in out
        assert "✅ SUCCESS" in out

    def test_invalid_date_is_input_error(
        self, compact_yaml_path: pathlib.Path, laravel_project: pathlib.Path
    ) -> None:
        code = _run([
            "db:generate-migrations",
            f"--schema={compact_yaml_path}",
            f"--base-path={laravel_project}",
            "--date=01-06-2024",
        ])
        assert code == EXIT_INPUT_ERROR
        assert _files(laravel_project, "database/migrations") == []

    def test_models_with_unknown_table(
        self,
        compact_yaml_path: pathlib.Path,
        laravel_project: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run([
            "db:generate-models",
            f"--schema={compact_yaml_path}",
            f"--base-path={laravel_project}",
            "--tables=orders,ghosts",
        ])
        assert code == EXIT_SUCCESS
        assert _files(laravel_project, "app/Models") == ["Order.php"]
        assert "Table 'ghosts' not found in schema registry." in capsys.readouterr().out

    def test_models_force(
        self, compact_yaml_path: pathlib.Path, laravel_project: pathlib.Path
    ) -> None:
        role = laravel_project / "app/Models/Role.php"
        role.write_text("<?php // mine\n", encoding="utf-8")
        base = [
            "db:generate-models",
            f"--schema={compact_yaml_path}",
            f"--base-path={laravel_project}",
            "--tables=roles",
        ]
        assert _run(base) == EXIT_SUCCESS
        assert role.read_text(encoding="utf-8") == "<?php // mine\n"
        assert _run(base + ["--force"]) == EXIT_SUCCESS
        assert "class Role extends Model" in role.read_text(encoding="utf-8")

    def test_enums_for_orders(
        self, compact_yaml_path: pathlib.Path, laravel_project: pathlib.Path
    ) -> None:
        common = [f"--schema={compact_yaml_path}", f"--base-path={laravel_project}"]
        assert _run(["db:generate-models", *common, "--tables=orders", "-q"]) == EXIT_SUCCESS
        assert _run(["db:generate-enums", *common, "--tables=orders"]) == EXIT_SUCCESS
        assert _files(laravel_project, "app/Enums") == [
            "OrderStatus.php", "PaymentMethod.php", "PaymentStatus.php",
        ]

    def test_seeders_count(
        self, compact_yaml_path: pathlib.Path, laravel_project: pathlib.Path
    ) -> None:
        code = _run([
            "db:generate-seeders",
            f"--schema={compact_yaml_path}",
            f"--base-path={laravel_project}",
            "--count=3",
        ])
        assert code == EXIT_SUCCESS
        seeders = laravel_project / "database/seeders"
        assert "$i < 3;" in (seeders / "TransactionsSeeder.php").read_text(encoding="utf-8")
        assert "$i < 20;" in (seeders / "UsersSeeder.php").read_text(encoding="utf-8")
        assert (seeders / "DatabaseSeeder.php").is_file()

    def test_dry_run(
        self,
        compact_yaml_path: pathlib.Path,
        laravel_project: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run([
            "db:generate-seeders",
            f"--schema={compact_yaml_path}",
            f"--base-path={laravel_project}",
            "--dry-run",
        ])
        assert code == EXIT_SUCCESS
        assert _files(laravel_project, "database/seeders") == []
        out = capsys.readouterr().out
        assert "Files planned:" in out
        assert "dry-run" in out

    def test_quiet_prints_nothing(
        self,
        compact_yaml_path: pathlib.Path,
        laravel_project: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run([
            "db:generate-models",
            f"--schema={compact_yaml_path}",
            f"--base-path={laravel_project}",
            "--quiet",
        ])
        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out == ""
        assert len(_files(laravel_project, "app/Models")) == 4

    @pytest.mark.parametrize("flag", ["--tables=", "--tables=,"])
    def test_empty_table_filter_is_input_error(
        self,
        flag: str,
        compact_yaml_path: pathlib.Path,
        laravel_project: pathlib.Path,
    ) -> None:
        orchestrator = laravel_project / "database/seeders/DatabaseSeeder.php"
        orchestrator.write_text("<?php // mine\n", encoding="utf-8")
        code = _run([
            "db:generate-seeders",
            f"--schema={compact_yaml_path}",
            f"--base-path={laravel_project}",
            flag,
        ])
        assert code == EXIT_INPUT_ERROR
        assert _files(laravel_project, "database/seeders") == ["DatabaseSeeder.php"]
        assert orchestrator.read_text(encoding="utf-8") == "<?php // mine\n"

    def test_validation_error_blocks_generation(
        self,
        compact_schema_dict: Dict[str, Any],
        tmp_path: pathlib.Path,
        laravel_project: pathlib.Path,
    ) -> None:
        compact_schema_dict["tables"]["users"]["columns"].append(
            {"name": "last_order_id", "type": "foreignId", "references": "orders", "nullable": True}
        )
        path = tmp_path / "cyclic.yaml"
        path.write_text(
            yaml.dump(compact_schema_dict, allow_unicode=True, sort_keys=False),
            encoding="utf-8",
        )
        code = _run([
            "db:generate-seeders",
            f"--schema={path}",
            f"--base-path={laravel_project}",
            "-q",
        ])
        assert code == EXIT_VALIDATION_ERROR
        assert _files(laravel_project, "database/seeders") == []
