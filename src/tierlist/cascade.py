"""Restoring tier capacities after structural changes."""

from __future__ import annotations

import logging

from tierlist.history import HistoryRecorder
from tierlist.models import DEFAULT_LAYOUT, Tier, TierLayout, TierState

logger = logging.getLogger(__name__)


class CascadeEngine:
    def __init__(self, layout: TierLayout = DEFAULT_LAYOUT, history: HistoryRecorder | None = None) -> None:
        self.layout = layout
        self.history = history or HistoryRecorder(layout)

    def cascade(self, state: TierState) -> list[str]:
        """Push overflow down one pass: Top tail into Mid, then Mid tail into Overflow.

        Returns one description per relocated item. A valid state is left
        untouched.
        """
        changes: list[str] = []
        top_cap, mid_cap = self.layout.top_capacity, self.layout.mid_capacity

        if len(state.top) > top_cap:
            moved = state.top[top_cap:]
            del state.top[top_cap:]
            state.mid[:0] = moved
            rank = self.layout.rank(Tier.MID, 0)
            for item in moved:
                self.history.strip(item)
                changes.append(f"{item.name} dropped from Top rank {rank} to Mid rank {rank}")

        if len(state.mid) > mid_cap:
            moved = state.mid[mid_cap:]
            del state.mid[mid_cap:]
            state.overflow[:0] = moved
            rank = self.layout.rank(Tier.OVERFLOW, 0)
            for item in moved:
                changes.append(f"{item.name} dropped from Mid rank {rank} to Overflow rank {rank}")

        if changes:
            logger.info("Cascade relocated %d item(s)", len(changes))
        return changes

    def promote_after_delete(
        self, state: TierState, date: str, tiers: tuple[Tier, ...] = (Tier.TOP, Tier.MID)
    ) -> list[str]:
        """Fill at most one gap per bounded tier from the front of the tier below.

        Only the tiers in `tiers` are refilled.
        """
        changes: list[str] = []

        if Tier.TOP in tiers and state.mid and len(state.top) < self.layout.top_capacity:
            item = state.mid.pop(0)
            state.top.append(item)
            rank = self.layout.rank(Tier.TOP, len(state.top) - 1)
            self.history.record_promotion(item, rank, self.layout.rank(Tier.MID, 0), date)
            changes.append(f"{item.name} promoted from Mid to Top (#{rank})")

        if Tier.MID in tiers and state.overflow and len(state.mid) < self.layout.mid_capacity:
            item = state.overflow.pop(0)
            state.mid.append(item)
            rank = self.layout.rank(Tier.MID, len(state.mid) - 1)
            changes.append(f"{item.name} promoted from Overflow to Mid (#{rank})")

        if changes:
            logger.info("Promoted %d item(s) after removal", len(changes))
        return changes
