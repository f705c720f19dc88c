"""Position history for items in the Top tier.

An item carries a history list only while it is in Top. Entering Top
starts a history; leaving Top deletes it. Entries are plain text of the
form "<date> - <message>"; only their order and presence matter.
"""

from __future__ import annotations

from tierlist.models import DEFAULT_LAYOUT, Item, Tier, TierLayout, TierState


def _entry(date: str, message: str) -> str:
    return f"{date} - {message}"


def neighbours(items: list[Item], index: int) -> str:
    """Describe the items around `index` as ", below X and above Y"."""
    parts = []
    if index > 0:
        parts.append(f"below {items[index - 1].name}")
    if index + 1 < len(items):
        parts.append(f"above {items[index + 1].name}")
    return f", {' and '.join(parts)}" if parts else ""


class HistoryRecorder:
    def __init__(self, layout: TierLayout = DEFAULT_LAYOUT) -> None:
        self.layout = layout

    def record_insert(self, top: list[Item], index: int, date: str) -> None:
        """The item at `index` was just inserted into Top."""
        item = top[index]
        rank = self.layout.rank(Tier.TOP, index)
        item.history = [_entry(date, f"Added to the list at position {rank}{neighbours(top, index)}")]
        for other in top[index + 1 :]:
            self._append(other, _entry(date, f"{item.name} was added above (-1)"))

    def record_move(
        self,
        top: list[Item],
        new_index: int,
        old_rank: int,
        old_index: int | None,
        date: str,
    ) -> None:
        """The item at `new_index` in Top was moved there from `old_rank`.

        `old_index` is its previous index in Top, or None if it came from a
        lower tier.
        """
        item = top[new_index]
        new_rank = self.layout.rank(Tier.TOP, new_index)
        delta = abs(old_rank - new_rank)
        sign = f"+{delta}" if old_rank > new_rank else f"-{delta}"
        self._append(
            item, _entry(date, f"Moved to position {new_rank} ({sign}){neighbours(top, new_index)}")
        )

        if old_rank > new_rank:
            last = old_index if old_index is not None else len(top) - 1
            for other in top[new_index + 1 : last + 1]:
                self._append(other, _entry(date, f"{item.name} was moved above (-1)"))
        elif old_index is not None:
            for other in top[old_index:new_index]:
                self._append(other, _entry(date, f"{item.name} was moved below (+1)"))

    def record_promotion(self, item: Item, rank: int, from_rank: int, date: str) -> None:
        item.history = [_entry(date, f"Promoted to Top at position {rank} (was #{from_rank})")]

    @staticmethod
    def strip(item: Item) -> None:
        item.history = None

    def normalize(self, state: TierState, date: str) -> None:
        """Make history present exactly for Top items."""
        for i, item in enumerate(state.top):
            if not item.history:
                rank = self.layout.rank(Tier.TOP, i)
                item.history = [_entry(date, f"Listed at position {rank}")]
        for item in state.mid + state.overflow:
            item.history = None

    @staticmethod
    def _append(item: Item, entry: str) -> None:
        if item.history is None:
            item.history = []
        item.history.append(entry)
