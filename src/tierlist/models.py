"""Roster data model: items, rank labels, tiers and the three-tier state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

# JSON keys used by the on-disk tier files
_KNOWN_KEYS = (
    "lvl_name",
    "lvl_creator",
    "video_url",
    "diff_rank",
    "diff_scale",
    "pos_aredl",
    "pos_history",
)


class RankLabel(enum.Enum):
    """Difficulty category of an item. Unrecognised labels map to OTHER."""

    EASY = "Easy Demon"
    MEDIUM = "Medium Demon"
    HARD = "Hard Demon"
    INSANE = "Insane Demon"
    EXTREME = "Extreme Demon"
    OTHER = "other"

    @classmethod
    def parse(cls, text: str | None) -> RankLabel:
        t = (text or "").strip().lower()
        for label in cls:
            if label is not cls.OTHER and label.value.lower() == t:
                return label
        return cls.OTHER

    @property
    def external_list(self) -> str:
        """Name of the external list that `external_position` refers to."""
        return _EXTERNAL_LISTS.get(self, "List")


_EXTERNAL_LISTS = {
    RankLabel.EXTREME: "AREDL",
    RankLabel.INSANE: "IDL",
    RankLabel.HARD: "HDL",
}


class Tier(enum.Enum):
    TOP = "top"
    MID = "mid"
    OVERFLOW = "overflow"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {Tier.TOP: "Top", Tier.MID: "Mid", Tier.OVERFLOW: "Overflow"}

TIER_ORDER = (Tier.TOP, Tier.MID, Tier.OVERFLOW)


@dataclass(frozen=True)
class TierLayout:
    """Capacities of the bounded tiers; Overflow is unbounded."""

    top_capacity: int = 75
    mid_capacity: int = 75

    def capacity(self, tier: Tier) -> int | None:
        if tier is Tier.TOP:
            return self.top_capacity
        if tier is Tier.MID:
            return self.mid_capacity
        return None

    def offset(self, tier: Tier) -> int:
        if tier is Tier.TOP:
            return 0
        if tier is Tier.MID:
            return self.top_capacity
        return self.top_capacity + self.mid_capacity

    def rank(self, tier: Tier, index: int) -> int:
        """Global 1-based rank of the item at `index` in `tier`."""
        return self.offset(tier) + index + 1

    def tier_for_rank(self, rank: int) -> Tier:
        if rank <= self.top_capacity:
            return Tier.TOP
        if rank <= self.top_capacity + self.mid_capacity:
            return Tier.MID
        return Tier.OVERFLOW


DEFAULT_LAYOUT = TierLayout()


@dataclass(eq=False)
class Item:
    """One ranked entry. `history` is present iff the item sits in Top."""

    name: str
    creator: str = ""
    video_url: str = ""
    rank: str = ""
    scale: str = ""
    external_position: int = 0
    history: list[str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def rank_label(self) -> RankLabel:
        return RankLabel.parse(self.rank)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        history = data.get("pos_history")
        if history is not None:
            history = [_history_text(e) for e in history] if isinstance(history, list) else []
        return cls(
            name=str(data.get("lvl_name", "")),
            creator=data.get("lvl_creator", "") or "",
            video_url=data.get("video_url", "") or "",
            rank=data.get("diff_rank", "") or "",
            scale=data.get("diff_scale", "") or "",
            external_position=_parse_position(data.get("pos_aredl")),
            history=history,
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "lvl_name": self.name,
            "lvl_creator": self.creator,
            "video_url": self.video_url,
            "diff_rank": self.rank,
            "diff_scale": self.scale,
            "pos_aredl": self.external_position,
        }
        data.update(self.extra)
        if self.history is not None:
            data["pos_history"] = [{"log1": entry} for entry in self.history]
        return data


def _history_text(entry: Any) -> str:
    """Legacy files hold either bare strings or {"log1": text} objects."""
    if isinstance(entry, dict):
        return str(entry.get("log1", ""))
    return str(entry)


def _parse_position(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class Location:
    tier: Tier
    index: int


@dataclass
class TierState:
    """The three ordered tiers; their concatenation is the global ranking."""

    top: list[Item] = field(default_factory=list)
    mid: list[Item] = field(default_factory=list)
    overflow: list[Item] = field(default_factory=list)

    def tier(self, tier: Tier) -> list[Item]:
        if tier is Tier.TOP:
            return self.top
        if tier is Tier.MID:
            return self.mid
        return self.overflow

    def where(self, item: Item) -> Location | None:
        """Find `item` by identity."""
        for t in TIER_ORDER:
            for i, candidate in enumerate(self.tier(t)):
                if candidate is item:
                    return Location(t, i)
        return None

    def items(self) -> list[tuple[Tier, int, Item]]:
        return [(t, i, item) for t in TIER_ORDER for i, item in enumerate(self.tier(t))]

    def top_names(self, layout: TierLayout = DEFAULT_LAYOUT) -> list[str]:
        return [item.name for item in self.top[: layout.top_capacity]]

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {t.value: [item.to_dict() for item in self.tier(t)] for t in TIER_ORDER}
