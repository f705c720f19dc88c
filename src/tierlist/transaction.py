"""Batch session: snapshot the tracked files, apply edits, then publish once.

States: Idle -> Active (begin) -> Idle (commit success, rollback, discard).
Edits made while Active are saved to disk immediately; the snapshot taken
at begin() is what makes rollback possible. Snapshots live next to each
artifact as "<file>.batch_temp".
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from tierlist.errors import RestoreError
from tierlist.publishers.base import PublishResult, VCSPublisher

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".batch_temp"


def snapshot_path(path: Path) -> Path:
    return path.with_name(path.name + SNAPSHOT_SUFFIX)


class TransactionManager:
    def __init__(self, paths: list[Path], publisher: VCSPublisher) -> None:
        self.paths = list(paths)
        self.publisher = publisher
        self._active = False
        self._pending: list[str] = []
        self._absent: set[Path] = set()  # tracked files that did not exist at begin()

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    # ── Lifecycle ────────────────────────────────────────────

    def begin(self) -> None:
        if self._active:
            raise RuntimeError("Batch session already active")
        self._absent.clear()
        for path in self.paths:
            if path.exists():
                shutil.copyfile(path, snapshot_path(path))
            else:
                self._absent.add(path)
        self._pending.clear()
        self._active = True
        logger.info("Batch session started (%d file(s) snapshotted)", len(self.paths) - len(self._absent))

    def record(self, description: str) -> None:
        if not self._active:
            raise RuntimeError("No active batch session")
        self._pending.append(description)

    def commit(self, message: str | None = None) -> PublishResult | None:
        """Publish everything at once. Returns None if nothing is pending.

        On failure the snapshot and pending list are kept so the caller can
        retry, roll back or discard.
        """
        if not self._active:
            raise RuntimeError("No active batch session")
        if not self._pending:
            return None
        message = message or f"Batch update: {len(self._pending)} changes"
        result = self.publisher.publish([p for p in self.paths if p.exists()], message)
        if result.ok:
            self._delete_snapshots()
            self._finish()
            logger.info("Batch committed: %s", message)
        else:
            logger.warning("Batch publish failed, session kept: %s", result.detail)
        return result

    def rollback(self) -> None:
        """Restore every tracked file to its state at begin().

        Raises RestoreError if any file could not be restored; snapshots
        that could not be applied are left on disk.
        """
        if not self._active:
            raise RuntimeError("No active batch session")
        failed = self._restore_snapshots()
        for path in self._absent:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                failed.append(f"{path}: {e}")
        self._finish()
        if failed:
            raise RestoreError("Could not restore: " + "; ".join(failed))
        logger.info("Batch rolled back")

    def discard(self) -> None:
        """Keep the files as they are now and end the session without publishing."""
        if not self._active:
            raise RuntimeError("No active batch session")
        self._delete_snapshots()
        self._finish()
        logger.info("Batch session closed without publishing")

    # ── Leftovers from an interrupted session ────────────────

    def stale_snapshots(self) -> list[Path]:
        if self._active:
            return []
        return [snapshot_path(p) for p in self.paths if snapshot_path(p).exists()]

    def recover(self, restore: bool) -> None:
        """Restore from or delete snapshots left by an interrupted session."""
        if restore:
            failed = self._restore_snapshots()
            if failed:
                raise RestoreError("Could not restore: " + "; ".join(failed))
            logger.info("Restored files from stale batch snapshot")
        else:
            self._delete_snapshots()
            logger.info("Deleted stale batch snapshot")

    # ── Internals ────────────────────────────────────────────

    def _restore_snapshots(self) -> list[str]:
        failed: list[str] = []
        for path in self.paths:
            snap = snapshot_path(path)
            if not snap.exists():
                continue
            tmp = path.with_name(f".{path.name}.restore")
            try:
                shutil.copyfile(snap, tmp)
                os.replace(tmp, path)
                snap.unlink()
            except OSError as e:
                logger.error("Restore of %s failed: %s", path, e)
                failed.append(f"{path}: {e}")
        return failed

    def _delete_snapshots(self) -> None:
        for path in self.paths:
            snapshot_path(path).unlink(missing_ok=True)

    def _finish(self) -> None:
        self._pending.clear()
        self._absent.clear()
        self._active = False
