# File: laragen/exporters.py
"""
Laragen - Artifact Writer (File-System Manager)
===============================================

Responsible for:
    1. Applying the skip-if-exists policy (``--force`` and the
       orchestration file's ``overwrite`` flag lift it).
    2. Writing artifacts atomically (write-to-temp then rename).
    3. Writing patched model sources back in place.
    4. Keeping one :class:`FileRecord` per touched path for the run report.

A failed write never aborts the batch: the failure is recorded and the
remaining artifacts are still written.  With ``dry_run`` nothing touches
the disk; every would-be write is recorded as ``planned``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List

from laragen.models import GeneratedArtifact
from laragen.utils import count_lines, read_file, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.exporters")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class WriteStatus(str, Enum):
    """Outcome of one write or patch attempt."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    PLANNED = "planned"
    PATCHED = "patched"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single touched file."""

    relative_path: str
    absolute_path: str
    status: WriteStatus
    kind: str
    entity: str
    size_bytes: int = 0
    line_count: int = 0
    sha256: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status != WriteStatus.FAILED


# ---------------------------------------------------------------------------
# ArtifactWriter
# ---------------------------------------------------------------------------


class ArtifactWriter:
    """
    Writes generated artifacts under a Laravel project root.

    Usage::

        writer = ArtifactWriter(Path("."), force=False)
        record = writer.write(artifact)
        if record.status is WriteStatus.SKIPPED:
            ...

    Thread-safety: NOT thread-safe.  Use one writer per run.
    """

    def __init__(
        self,
        base_path: Path,
        *,
        force: bool = False,
        dry_run: bool = False,
    ) -> None:
        self._base_path: Path = Path(base_path)
        self._force: bool = force
        self._dry_run: bool = dry_run
        self._records: List[FileRecord] = []

        logger.debug(
            "ArtifactWriter initialised: base=%s, force=%s, dry_run=%s.",
            self._base_path,
            force,
            dry_run,
        )

    # -----------------------------------------------------------------
    # Paths
    # -----------------------------------------------------------------

    @property
    def base_path(self) -> Path:
        return self._base_path

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def target(self, relative_path: str) -> Path:
        return self._base_path / relative_path

    def exists(self, relative_path: str) -> bool:
        return self.target(relative_path).is_file()

    def read(self, relative_path: str) -> str:
        """Read an existing file under the base path. Raises OSError."""
        return read_file(self.target(relative_path))

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def write(self, artifact: GeneratedArtifact) -> FileRecord:
        """
        Write one artifact, honouring the skip-if-exists policy.

        Returns the record that was appended to :attr:`records`.
        """
        kind: str = str(artifact.kind)
        if self.exists(artifact.path) and not (self._force or artifact.overwrite):
            logger.warning(
                "%s already exists, skipping (use --force to overwrite).",
                artifact.path,
            )
            return self.skip(artifact.path, kind, artifact.entity, "already exists")

        if self._dry_run:
            logger.info("[dry-run] Would write %s.", artifact.path)
            return self._record(
                artifact.path, WriteStatus.PLANNED, kind, artifact.entity, artifact.content
            )

        try:
            write_file(self.target(artifact.path), artifact.content)
        except OSError as exc:
            return self._fail(artifact.path, kind, artifact.entity, exc)

        logger.info("Created %s.", artifact.path)
        return self._record(
            artifact.path, WriteStatus.WRITTEN, kind, artifact.entity, artifact.content
        )

    def patch(
        self,
        relative_path: str,
        content: str,
        kind: str,
        entity: str,
        changed: bool = True,
    ) -> FileRecord:
        """Write *content* back over an existing file."""
        if not changed:
            logger.debug("%s already up to date.", relative_path)
            return self._record(relative_path, WriteStatus.UNCHANGED, kind, entity, content)

        if self._dry_run:
            logger.info("[dry-run] Would patch %s.", relative_path)
            return self._record(relative_path, WriteStatus.PLANNED, kind, entity, content)

        try:
            write_file(self.target(relative_path), content)
        except OSError as exc:
            return self._fail(relative_path, kind, entity, exc)

        logger.info("Updated %s.", relative_path)
        return self._record(relative_path, WriteStatus.PATCHED, kind, entity, content)

    def skip(
        self,
        relative_path: str,
        kind: str,
        entity: str,
        reason: str = "",
    ) -> FileRecord:
        """Record a path that was deliberately left alone."""
        record: FileRecord = FileRecord(
            relative_path=relative_path,
            absolute_path=str(self.target(relative_path)),
            status=WriteStatus.SKIPPED,
            kind=kind,
            entity=entity,
            message=reason,
        )
        self._records.append(record)
        return record

    # -----------------------------------------------------------------
    # Query
    # -----------------------------------------------------------------

    @property
    def records(self) -> List[FileRecord]:
        return list(self._records)

    def by_status(self, status: WriteStatus) -> List[FileRecord]:
        return [r for r in self._records if r.status == status]

    @property
    def failures(self) -> List[FileRecord]:
        return self.by_status(WriteStatus.FAILED)

    @property
    def total_bytes(self) -> int:
        return sum(r.size_bytes for r in self._records if r.ok)

    @property
    def total_lines(self) -> int:
        return sum(r.line_count for r in self._records if r.ok)

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    def _record(
        self,
        relative_path: str,
        status: WriteStatus,
        kind: str,
        entity: str,
        content: str,
    ) -> FileRecord:
        record: FileRecord = FileRecord(
            relative_path=relative_path,
            absolute_path=str(self.target(relative_path)),
            status=status,
            kind=kind,
            entity=entity,
            size_bytes=len(content.encode("utf-8")),
            line_count=count_lines(content),
            sha256=sha256_hex(content),
        )
        self._records.append(record)
        return record

    def _fail(
        self,
        relative_path: str,
        kind: str,
        entity: str,
        exc: OSError,
    ) -> FileRecord:
        message: str = f"Failed to write {relative_path}: {type(exc).__name__}: {exc}"
        logger.error(message)
        record: FileRecord = FileRecord(
            relative_path=relative_path,
            absolute_path=str(self.target(relative_path)),
            status=WriteStatus.FAILED,
            kind=kind,
            entity=entity,
            message=message,
        )
        self._records.append(record)
        return record


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ArtifactWriter",
    "FileRecord",
    "WriteStatus",
]

logger.debug("laragen.exporters loaded — %d public symbols.", len(__all__))
