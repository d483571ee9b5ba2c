"""
tests/test_exporters.py
Unit tests for laragen.exporters.ArtifactWriter.

Tests cover:
- Writing new files and the skip-if-exists policy
- --force and the orchestration file's overwrite flag
- Dry-run planning
- Patching existing files (patched / unchanged / planned)
- Write failures recorded without aborting the batch, and exit code 3
"""

from __future__ import annotations

import pathlib

from laragen.exporters import ArtifactWriter, WriteStatus
from laragen.generator import EXIT_EXPORT_ERROR, LaragenPipeline
from laragen.models import ArtifactKind, GeneratedArtifact, GenerationConfig
from laragen.registry import SchemaRegistry


def _artifact(
    path: str = "app/Enums/Gender.php",
    content: str = "<?php\n\nenum Gender: string\n{\n}\n",
    kind: ArtifactKind = ArtifactKind.ENUM,
    overwrite: bool = False,
) -> GeneratedArtifact:
    return GeneratedArtifact(
        path=path, content=content, kind=kind, entity="Gender", overwrite=overwrite
    )


# ===========================================================================
# write()
# ===========================================================================


class TestWrite:
    """Tests for ArtifactWriter.write."""

    def test_new_file(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter(tmp_path)
        artifact = _artifact()
        record = writer.write(artifact)

        assert record.status == WriteStatus.WRITTEN
        assert record.ok
        assert record.kind == "enum"
        assert record.sha256 == artifact.checksum
        assert record.line_count == artifact.line_count
        target = tmp_path / "app/Enums/Gender.php"
        assert target.read_text(encoding="utf-8") == artifact.content
        assert not list(target.parent.glob("*.tmp"))

    def test_existing_file_skipped(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "app/Enums/Gender.php"
        target.parent.mkdir(parents=True)
        target.write_text("<?php // mine\n", encoding="utf-8")

        writer = ArtifactWriter(tmp_path)
        record = writer.write(_artifact())

        assert record.status == WriteStatus.SKIPPED
        assert record.message == "already exists"
        assert target.read_text(encoding="utf-8") == "<?php // mine\n"

    def test_force_overwrites(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "app/Enums/Gender.php"
        target.parent.mkdir(parents=True)
        target.write_text("<?php // mine\n", encoding="utf-8")

        record = ArtifactWriter(tmp_path, force=True).write(_artifact())

        assert record.status == WriteStatus.WRITTEN
        assert "enum Gender" in target.read_text(encoding="utf-8")

    def test_overwrite_flag(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "database/seeders/DatabaseSeeder.php"
        target.parent.mkdir(parents=True)
        target.write_text("<?php // mine\n", encoding="utf-8")

        artifact = _artifact(
            path="database/seeders/DatabaseSeeder.php",
            content="<?php\n\nclass DatabaseSeeder {}\n",
            kind=ArtifactKind.ORCHESTRATOR,
            overwrite=True,
        )
        record = ArtifactWriter(tmp_path).write(artifact)

        assert record.status == WriteStatus.WRITTEN
        assert target.read_text(encoding="utf-8") == artifact.content

    def test_dry_run(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter(tmp_path, dry_run=True)
        record = writer.write(_artifact())

        assert record.status == WriteStatus.PLANNED
        assert record.size_bytes > 0
        assert not (tmp_path / "app").exists()

    def test_dry_run_still_skips_existing(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "app/Enums/Gender.php"
        target.parent.mkdir(parents=True)
        target.write_text("<?php // mine\n", encoding="utf-8")

        record = ArtifactWriter(tmp_path, dry_run=True).write(_artifact())
        assert record.status == WriteStatus.SKIPPED


# ===========================================================================
# patch()
# ===========================================================================


class TestPatch:
    """Tests for ArtifactWriter.patch."""

    def test_patched(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "app/Models/User.php"
        target.parent.mkdir(parents=True)
        target.write_text("<?php // old\n", encoding="utf-8")

        writer = ArtifactWriter(tmp_path)
        assert writer.read("app/Models/User.php") == "<?php // old\n"
        record = writer.patch("app/Models/User.php", "<?php // new\n", "model", "User")

        assert record.status == WriteStatus.PATCHED
        assert target.read_text(encoding="utf-8") == "<?php // new\n"

    def test_unchanged(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "app/Models/User.php"
        target.parent.mkdir(parents=True)
        target.write_text("<?php // old\n", encoding="utf-8")

        record = ArtifactWriter(tmp_path).patch(
            "app/Models/User.php", "<?php // old\n", "model", "User", changed=False
        )
        assert record.status == WriteStatus.UNCHANGED

    def test_dry_run(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "app/Models/User.php"
        target.parent.mkdir(parents=True)
        target.write_text("<?php // old\n", encoding="utf-8")

        record = ArtifactWriter(tmp_path, dry_run=True).patch(
            "app/Models/User.php", "<?php // new\n", "model", "User"
        )
        assert record.status == WriteStatus.PLANNED
        assert target.read_text(encoding="utf-8") == "<?php // old\n"


# ===========================================================================
# Failures
# ===========================================================================


class TestFailures:
    """A failed write is recorded and the batch goes on."""

    def test_failure_recorded(self, tmp_path: pathlib.Path) -> None:
        # A regular file where the app/ directory should be
        (tmp_path / "app").write_text("", encoding="utf-8")

        writer = ArtifactWriter(tmp_path)
        failed = writer.write(_artifact())
        written = writer.write(_artifact(path="database/seeders/UsersSeeder.php"))

        assert failed.status == WriteStatus.FAILED
        assert not failed.ok
        assert failed.message.startswith("Failed to write app/Enums/Gender.php:")
        assert written.status == WriteStatus.WRITTEN
        assert writer.failures == [failed]
        assert writer.by_status(WriteStatus.WRITTEN) == [written]
        assert writer.total_bytes == written.size_bytes

    def test_pipeline_exit_code(
        self, compact_registry: SchemaRegistry, tmp_path: pathlib.Path
    ) -> None:
        base = tmp_path / "broken-app"
        base.mkdir()
        (base / "app").write_text("", encoding="utf-8")

        config = GenerationConfig(base_path=str(base))
        report = LaragenPipeline(compact_registry, config).generate_models()

        assert report.exit_code == EXIT_EXPORT_ERROR
        assert not report.success
        assert len(report.export_errors) == 4
        assert report.generated == []
