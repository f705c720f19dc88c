"""Interactive session state, passed explicitly to every command handler."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from tierlist.config import TierlistConfig
from tierlist.operations import RosterEditor
from tierlist.publishers import VCSPublisher
from tierlist.transaction import TransactionManager


@dataclass
class Session:
    config: TierlistConfig
    editor: RosterEditor
    transaction: TransactionManager
    ask: Callable[[str], str] = input
    menu: str = "main"
    running: bool = field(default=True)

    @property
    def in_batch(self) -> bool:
        return self.transaction.is_active

    @classmethod
    def create(
        cls,
        config: TierlistConfig,
        publisher: VCSPublisher | None = None,
        ask: Callable[[str], str] = input,
    ) -> Session:
        editor = RosterEditor.from_config(config, publisher)
        transaction = TransactionManager(editor.tracked, editor.publisher)
        return cls(config=config, editor=editor, transaction=transaction, ask=ask)
