"""Conversion between global ranks and (tier, index) pairs, and item lookup."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass

from tierlist.errors import EmptyInput, NotFound
from tierlist.models import DEFAULT_LAYOUT, TIER_ORDER, Item, Location, Tier, TierLayout, TierState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Match:
    """A resolved item together with where it currently sits."""

    item: Item
    location: Location
    rank: int


@dataclass(frozen=True)
class SearchHit:
    rank: int
    tier: Tier
    item: Item


class PositionResolver:
    def __init__(self, layout: TierLayout = DEFAULT_LAYOUT) -> None:
        self.layout = layout

    def locate(self, state: TierState, position: int) -> Match:
        """Lookup by global position. Out-of-bounds positions are not clamped."""
        if position < 1:
            raise NotFound(f"No item at position {position}")
        tier = self.layout.tier_for_rank(position)
        index = position - self.layout.offset(tier) - 1
        items = state.tier(tier)
        if index >= len(items):
            raise NotFound(f"No item at position {position}")
        return Match(items[index], Location(tier, index), position)

    def insertion_point(self, state: TierState, position: int) -> Location:
        """Map a global position to an insertion slot, clamped into [0, len(tier)]."""
        tier = self.layout.tier_for_rank(position)
        index = position - self.layout.offset(tier) - 1
        return Location(tier, max(0, min(index, len(state.tier(tier)))))

    def clamp_local(self, state: TierState, tier: Tier, position: int | None) -> int:
        """Clamp a 1-based position inside `tier`; None means the end of the tier."""
        size = len(state.tier(tier))
        if position is None:
            return size
        return max(0, min(position - 1, size))

    def find_by_name(self, state: TierState, name: str) -> Match:
        """Exact case-insensitive match, searched Top, Mid, then Overflow."""
        wanted = name.strip().lower()
        for tier in TIER_ORDER:
            for i, item in enumerate(state.tier(tier)):
                if item.name.lower() == wanted:
                    return Match(item, Location(tier, i), self.layout.rank(tier, i))
        raise NotFound(f"No item named {name!r}")

    def resolve(self, state: TierState, query: str) -> Match:
        """Resolve free user input: digits are positions, anything else a name."""
        text = (query or "").strip()
        if not text:
            raise EmptyInput("No item given")
        if text.isdigit():
            return self.locate(state, int(text))
        dupes = self.duplicate_names(state)
        if text.lower() in dupes:
            logger.warning("Name %r appears %d times; using the highest-ranked one", text, dupes[text.lower()])
        return self.find_by_name(state, text)

    def duplicate_names(self, state: TierState) -> dict[str, int]:
        counts = Counter(item.name.lower() for _, _, item in state.items())
        return {name: n for name, n in counts.items() if n > 1}

    def search(self, state: TierState, query: str) -> list[SearchHit]:
        """Substring match on name or creator across all tiers."""
        q = query.strip().lower()
        if not q:
            return []
        return [
            SearchHit(self.layout.rank(tier, i), tier, item)
            for tier, i, item in state.items()
            if q in item.name.lower() or q in item.creator.lower()
        ]
