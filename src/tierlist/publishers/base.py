"""Publisher protocols and shared types."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass
class PublishResult:
    """Outcome of a publish attempt."""

    ok: bool
    detail: str = ""


@runtime_checkable
class VCSPublisher(Protocol):
    """Protocol that all version-control publishers must implement."""

    @property
    def name(self) -> str: ...

    def publish(self, paths: Iterable[Path], message: str) -> PublishResult:
        """Record and push the given artifacts. Must not raise on failure."""
        ...


@runtime_checkable
class ChangeLog(Protocol):
    """Receives a human-readable description of each committed operation."""

    def append(self, description: str, date: str) -> None: ...
