"""Git-backed publisher: add, commit and push the tracked artifacts."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

from tierlist.publishers.base import PublishResult

logger = logging.getLogger(__name__)


class GitPublisher:
    """Publishes by running git in the data directory."""

    def __init__(self, cwd: Path, remote_push: bool = True) -> None:
        self.cwd = cwd
        self.remote_push = remote_push

    @property
    def name(self) -> str:
        return "git"

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            ["git", *args], cwd=self.cwd, capture_output=True, text=True, check=True
        )

    def _check_available(self) -> str | None:
        """Return an error message if git or a remote is unavailable."""
        if shutil.which("git") is None:
            return "git executable not found"
        try:
            self._git("rev-parse", "--is-inside-work-tree")
            remotes = self._git("remote").stdout.strip()
        except (subprocess.CalledProcessError, OSError) as e:
            return f"not a git work tree ({e})"
        if self.remote_push and not remotes:
            return "no git remote configured"
        return None

    def publish(self, paths: Iterable[Path], message: str) -> PublishResult:
        files = [str(p) for p in paths if Path(p).exists()]
        problem = self._check_available()
        if problem:
            logger.warning("Publish skipped: %s", problem)
            return PublishResult(ok=False, detail=problem)
        try:
            self._git("add", "--", *files)
            self._git("commit", "-m", message)
            if self.remote_push:
                self._git("push")
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or str(e)).strip()
            logger.warning("git %s failed: %s", e.cmd[1] if len(e.cmd) > 1 else "", detail)
            return PublishResult(ok=False, detail=detail)
        except OSError as e:
            logger.warning("git unavailable: %s", e)
            return PublishResult(ok=False, detail=str(e))
        logger.info("Published %d file(s): %s", len(files), message[:80])
        return PublishResult(ok=True, detail=message)


class SimulatedPublisher:
    """No-op publisher for testing; logs what it would have run."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], str]] = []

    @property
    def name(self) -> str:
        return "simulated"

    def publish(self, paths: Iterable[Path], message: str) -> PublishResult:
        files = [str(p) for p in paths]
        self.calls.append((files, message))
        logger.info("[SIM] git add %s", " ".join(files))
        logger.info('[SIM] git commit -m "%s"', message)
        logger.info("[SIM] git push")
        return PublishResult(ok=True, detail="simulated")
