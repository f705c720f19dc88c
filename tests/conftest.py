"""Shared fixtures: a roster in a temporary data directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from tierlist.config import TierlistConfig
from tierlist.models import Item, Tier, TierState
from tierlist.operations import RosterEditor
from tierlist.publishers import SimulatedPublisher

TODAY = "18/10/26"


def make_state(top: int = 0, mid: int = 0, overflow: int = 0) -> TierState:
    return TierState(
        top=[Item(f"T{i + 1}", creator="c", history=[f"seed T{i + 1}"]) for i in range(top)],
        mid=[Item(f"M{i + 1}", creator="c") for i in range(mid)],
        overflow=[Item(f"O{i + 1}", creator="c") for i in range(overflow)],
    )


@pytest.fixture
def config(tmp_path: Path) -> TierlistConfig:
    return TierlistConfig(data_dir=tmp_path, simulate_vcs=True)


@pytest.fixture
def publisher() -> SimulatedPublisher:
    return SimulatedPublisher()


@pytest.fixture
def editor(config: TierlistConfig, publisher: SimulatedPublisher) -> RosterEditor:
    ed = RosterEditor.from_config(config, publisher)
    ed._today = lambda: TODAY
    return ed


def seed(editor: RosterEditor, top: int = 0, mid: int = 0, overflow: int = 0) -> TierState:
    state = make_state(top, mid, overflow)
    editor.store.save(state)
    return state


def names(items: list[Item]) -> list[str]:
    return [i.name for i in items]


def assert_invariants(state: TierState) -> None:
    assert len(state.top) <= 75
    assert len(state.mid) <= 75
    for tier, _, item in state.items():
        assert (item.history is not None) == (tier is Tier.TOP), item.name
