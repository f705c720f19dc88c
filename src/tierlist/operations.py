"""Roster editor: the insert / move / delete / edit operations.

Each mutating operation follows the same sequence:
1. Load all three tiers from disk
2. Resolve the target item (name or global position)
3. Mutate in memory and record position history
4. Restore tier capacities (cascade, or promotion after a removal)
5. Save all three tiers
6. Append a description to the change log
7. Publish the tracked artifacts, unless the caller defers publishing
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from tierlist.cascade import CascadeEngine
from tierlist.config import TierlistConfig
from tierlist.errors import EmptyInput, NoChange
from tierlist.history import HistoryRecorder
from tierlist.models import TIER_ORDER, Item, Tier, TierLayout, TierState
from tierlist.positions import PositionResolver, SearchHit
from tierlist.publishers import (
    ChangeLog,
    GitPublisher,
    MarkdownChangeLog,
    PublishResult,
    SimulatedPublisher,
    VCSPublisher,
)
from tierlist.store import TierStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("creator", "video_url", "rank", "scale", "external_position")


@dataclass
class OperationResult:
    """What a committed operation did."""

    description: str
    item: Item
    rank: int | None = None
    changes: list[str] = field(default_factory=list)
    published: PublishResult | None = None  # None when publishing was deferred
    changelog_error: str = ""


def _external_position(value: Any) -> int:
    position = int(value or 0)
    if position < 0:
        raise ValueError(f"External position must be 0 or more, got {position}")
    return position


def _top_diff(before: list[str], after: list[str], skip: str | None = None) -> str:
    left = [n for n in before if n not in after]
    entered = [n for n in after if n not in before and n != skip]
    text = ""
    if left:
        text += f", dropping {', '.join(left)} out of Top"
    if entered:
        text += f", bringing {', '.join(entered)} into Top"
    return text


class RosterEditor:
    """Applies user-directed edits to the tiered roster."""

    def __init__(
        self,
        store: TierStore,
        changelog: ChangeLog,
        publisher: VCSPublisher,
        layout: TierLayout | None = None,
        today: Callable[[], str] | None = None,
        tracked: list[Path] | None = None,
    ) -> None:
        self.store = store
        self.changelog = changelog
        self.publisher = publisher
        self.layout = layout or TierLayout()
        self.resolver = PositionResolver(self.layout)
        self.history = HistoryRecorder(self.layout)
        self.cascade = CascadeEngine(self.layout, self.history)
        self._today = today or (lambda: datetime.now().strftime("%d/%m/%y"))
        self.tracked = tracked if tracked is not None else list(store.paths)

    @classmethod
    def from_config(cls, config: TierlistConfig, publisher: VCSPublisher | None = None) -> RosterEditor:
        root = config.data_dir
        files = config.files
        store = TierStore(root, {Tier.TOP: files.top, Tier.MID: files.mid, Tier.OVERFLOW: files.overflow})
        changelog = MarkdownChangeLog(root / files.changelog, root / files.readme)
        if publisher is None:
            publisher = SimulatedPublisher() if config.simulate_vcs else GitPublisher(root, config.vcs_push)
        fmt = config.date_format
        return cls(
            store,
            changelog,
            publisher,
            layout=config.tiers.layout,
            today=lambda: datetime.now().strftime(fmt),
            tracked=store.paths + changelog.paths,
        )

    # ── Read-only ────────────────────────────────────────────

    def load(self) -> TierState:
        return self.store.load()

    def search(self, query: str) -> list[SearchHit]:
        return self.resolver.search(self.store.load(), query)

    # ── Mutations ────────────────────────────────────────────

    def insert(
        self,
        tier: Tier,
        fields: dict[str, Any],
        position: int | None = None,
        *,
        publish: bool = True,
    ) -> OperationResult:
        """Insert a new item into `tier` at 1-based local `position` (None = end)."""
        name = str(fields.get("name", "")).strip()
        if not name:
            raise EmptyInput("Item name is required")
        date = self._today()
        state = self.store.load()
        before = state.top_names(self.layout)

        item = Item(
            name=name,
            creator=fields.get("creator", "") or "",
            video_url=fields.get("video_url", "") or "",
            rank=fields.get("rank", "") or "",
            scale=fields.get("scale", "") or "",
            external_position=_external_position(fields.get("external_position")),
        )
        index = self.resolver.clamp_local(state, tier, position)
        state.tier(tier).insert(index, item)
        if tier is Tier.TOP:
            self.history.record_insert(state.top, index, date)

        changes = self.cascade.cascade(state)
        self.history.normalize(state, date)

        final = state.where(item)
        rank = self.layout.rank(final.tier, final.index)
        desc = f"{name} added at position {rank} ({final.tier.label})"
        desc += _top_diff(before, state.top_names(self.layout), skip=name)
        if changes:
            desc += f". {'; '.join(changes)}"
        result = OperationResult(desc, item, rank, changes)
        return self._commit(state, "Added", result, date, publish)

    def move(self, query: str, new_position: int, *, publish: bool = True) -> OperationResult:
        """Move the item named or ranked by `query` to global `new_position`."""
        date = self._today()
        state = self.store.load()
        match = self.resolver.resolve(state, query)
        if new_position == match.rank:
            raise NoChange(f"{match.item.name} is already at position {new_position}")
        before = state.top_names(self.layout)
        item, old = match.item, match.location

        del state.tier(old.tier)[old.index]
        changes: list[str] = []
        target_tier = self.layout.tier_for_rank(new_position)
        if new_position > match.rank and target_tier is not old.tier:
            # Refill the tiers the item passed out of before placing it below.
            passed = tuple(
                t for t in (Tier.TOP, Tier.MID)
                if TIER_ORDER.index(old.tier) <= TIER_ORDER.index(t) < TIER_ORDER.index(target_tier)
            )
            changes += self.cascade.promote_after_delete(state, date, passed)
        dest = self.resolver.insertion_point(state, new_position)
        if dest == old:
            raise NoChange(f"{item.name} is already at position {match.rank}")
        state.tier(dest.tier).insert(dest.index, item)
        new_rank = self.layout.rank(dest.tier, dest.index)

        was_top = old.tier is Tier.TOP
        if dest.tier is Tier.TOP:
            self.history.record_move(
                state.top, dest.index, match.rank, old.index if was_top else None, date
            )
        elif was_top:
            self.history.strip(item)

        changes += self.cascade.cascade(state)
        self.history.normalize(state, date)

        desc = (
            f"{item.name} moved from #{match.rank} ({old.tier.label}) "
            f"to #{new_rank} ({dest.tier.label})"
        )
        desc += _top_diff(before, state.top_names(self.layout), skip=item.name)
        if changes:
            desc += f". {'; '.join(changes)}"
        result = OperationResult(desc, item, new_rank, changes)
        return self._commit(state, "Moved", result, date, publish)

    def delete(self, query: str, *, publish: bool = True) -> OperationResult:
        date = self._today()
        state = self.store.load()
        match = self.resolver.resolve(state, query)
        before = state.top_names(self.layout)

        del state.tier(match.location.tier)[match.location.index]
        changes = self.cascade.promote_after_delete(state, date)
        self.history.normalize(state, date)

        desc = f"{match.item.name} removed from #{match.rank} ({match.location.tier.label})"
        entered = [n for n in state.top_names(self.layout) if n not in before]
        if entered:
            desc += f", {', '.join(entered)} promoted into Top"
        if changes:
            desc += f". {'; '.join(changes)}"
        result = OperationResult(desc, match.item, match.rank, changes)
        return self._commit(state, "Removed", result, date, publish)

    def edit(self, query: str, updates: dict[str, Any], *, publish: bool = True) -> OperationResult:
        """Update descriptive fields. Rank and history are never touched."""
        unknown = set(updates) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")
        date = self._today()
        state = self.store.load()
        match = self.resolver.resolve(state, query)
        item = match.item

        diffs: list[str] = []
        for key in EDITABLE_FIELDS:
            if key not in updates or updates[key] is None:
                continue
            value = _external_position(updates[key]) if key == "external_position" else str(updates[key])
            old = getattr(item, key)
            if value == old:
                continue
            setattr(item, key, value)
            if key == "video_url":
                diffs.append("URL")
            else:
                diffs.append(f"{key.replace('_', ' ')}: {old} → {value}")

        desc = f"{item.name} updated: {', '.join(diffs)}" if diffs else f"{item.name} edited (no changes)"
        result = OperationResult(desc, item, match.rank)
        return self._commit(state, "Updated", result, date, publish)

    # ── Persistence + side effects ───────────────────────────

    def _commit(
        self, state: TierState, verb: str, result: OperationResult, date: str, publish: bool
    ) -> OperationResult:
        """Save, log and publish. A change-log failure does not undo the save."""
        self.store.save(state)
        try:
            self.changelog.append(result.description, date)
        except OSError as e:
            result.changelog_error = str(e)
            logger.error("Change log not updated: %s", e)
        logger.info("%s: %s", verb, result.description)
        if not publish:
            return result
        result.published = self.publisher.publish(self.tracked, f"{verb}: {result.description}")
        if not result.published.ok:
            logger.warning("Publish failed, changes kept locally: %s", result.published.detail)
        return result
