"""Durable tier state: three JSON files, one per tier.

Every save rewrites all three files. Each file is written to a temporary
sibling first and moved into place with os.replace, so a crash mid-write
leaves the previous content intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from tierlist.errors import StoreError
from tierlist.models import TIER_ORDER, Item, Tier, TierState

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, content: str) -> None:
    """Write `content` to `path` via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class TierStore:
    """Load/save the Top, Mid and Overflow tiers."""

    def __init__(self, root: Path, files: dict[Tier, str]) -> None:
        self.root = root
        self._files = files

    def path(self, tier: Tier) -> Path:
        return self.root / self._files[tier]

    @property
    def paths(self) -> list[Path]:
        return [self.path(t) for t in TIER_ORDER]

    def _load_tier(self, tier: Tier) -> list[Item]:
        path = self.path(tier)
        if not path.exists():
            logger.info("Tier file %s missing, starting empty", path)
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read {path}: {e}") from e
        if not isinstance(data, list):
            raise StoreError(f"{path} must hold a JSON list, got {type(data).__name__}")
        if not all(isinstance(entry, dict) for entry in data):
            raise StoreError(f"{path} holds a non-object entry")
        return [Item.from_dict(entry) for entry in data]

    def load(self) -> TierState:
        return TierState(
            top=self._load_tier(Tier.TOP),
            mid=self._load_tier(Tier.MID),
            overflow=self._load_tier(Tier.OVERFLOW),
        )

    def save(self, state: TierState) -> None:
        for tier in TIER_ORDER:
            items = state.tier(tier)
            payload = json.dumps([item.to_dict() for item in items], indent=2, ensure_ascii=False)
            try:
                atomic_write_text(self.path(tier), payload + "\n")
            except OSError as e:
                raise StoreError(f"Cannot write {self.path(tier)}: {e}") from e
        logger.info(
            "Saved tiers (top=%d, mid=%d, overflow=%d)",
            len(state.top),
            len(state.mid),
            len(state.overflow),
        )
