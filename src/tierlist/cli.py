"""Interactive menus for editing the roster from a terminal."""

from __future__ import annotations

import logging
from collections.abc import Callable

from tierlist.errors import EmptyInput, NoChange, NotFound, RestoreError, StoreError
from tierlist.models import TIER_ORDER, Item, Tier
from tierlist.operations import EDITABLE_FIELDS, OperationResult
from tierlist.session import Session

logger = logging.getLogger(__name__)

_TIER_CHOICES = {"1": Tier.TOP, "2": Tier.MID, "3": Tier.OVERFLOW}
_LIST_PREVIEW = {Tier.TOP: 20, Tier.MID: 10, Tier.OVERFLOW: 10}


def _describe(item: Item) -> str:
    text = f"{item.name} - {item.creator or 'unknown'}"
    if item.external_position:
        text += f" [{item.rank_label.external_list} #{item.external_position}]"
    return text


def _parse_int(text: str) -> int | None:
    text = text.strip()
    return int(text) if text.lstrip("-").isdigit() else None


def _tier_range(session: Session, tier: Tier) -> str:
    layout = session.editor.layout
    first = layout.offset(tier) + 1
    cap = layout.capacity(tier)
    return f"{first}-{first + cap - 1}" if cap else f"{first}+"


# ── Read-only commands ───────────────────────────────────────


def show_tiers(session: Session) -> None:
    state = session.editor.load()
    layout = session.editor.layout
    for tier in TIER_ORDER:
        items = state.tier(tier)
        cap = layout.capacity(tier)
        size = f"{len(items)}/{cap}" if cap else str(len(items))
        print(f"\n{tier.label.upper()} ({size} items, positions {_tier_range(session, tier)}):")
        limit = _LIST_PREVIEW[tier]
        for i, item in enumerate(items[:limit]):
            print(f"  {layout.rank(tier, i)}. {_describe(item)}")
        if len(items) > limit:
            print(f"  ... and {len(items) - limit} more")
    print()


def do_search(session: Session) -> None:
    query = session.ask("Search (name/creator): ").strip()
    if not query:
        return
    hits = session.editor.search(query)
    print(f"\n{len(hits)} result(s):")
    for hit in hits:
        print(f"  #{hit.rank} ({hit.tier.label}): {hit.item.name} by {hit.item.creator}")
    print()


# ── Mutating commands ────────────────────────────────────────


def _run(session: Session, op: Callable[[bool], OperationResult]) -> OperationResult | None:
    """Run one operation, report the outcome and track it in a batch session."""
    publish = not session.in_batch
    try:
        result = op(publish)
    except EmptyInput:
        print("Cancelled.\n")
        return None
    except (NotFound, NoChange) as e:
        print(f"{e}\n")
        return None
    except (StoreError, OSError, ValueError) as e:
        logger.error("Operation failed: %s", e)
        print(f"Error: {e}\n")
        return None

    print(f"\nDone: {result.description}")
    for change in result.changes:
        print(f"  - {change}")
    if result.changelog_error:
        print(f"Warning: change log not updated: {result.changelog_error}")
    if result.published is None:
        session.transaction.record(result.description)
        print("Saved locally (pending in batch session).\n")
    elif result.published.ok:
        print("Committed and pushed.\n")
    else:
        print(f"Publish failed, changes saved locally: {result.published.detail}\n")
    return result


def _choose_tier(session: Session) -> Tier | None:
    print("\nWhere to add?")
    for key, tier in _TIER_CHOICES.items():
        print(f"{key}. {tier.label} ({_tier_range(session, tier)})")
    return _TIER_CHOICES.get(session.ask("> ").strip())


def do_insert(session: Session) -> None:
    tier = _choose_tier(session)
    if tier is None:
        print("Invalid choice.\n")
        return
    name = session.ask("Name: ").strip()
    if not name:
        print("Cancelled.\n")
        return
    fields = {
        "name": name,
        "creator": session.ask("Creator: ").strip(),
        "video_url": session.ask("Video URL (Enter = skip): ").strip(),
        "rank": session.ask("Rank (Enter = skip): ").strip(),
        "scale": session.ask("Scale (Enter = skip): ").strip(),
    }
    answer = session.ask("External list position (Enter = skip): ").strip()
    external = _parse_int(answer) if answer else 0
    if external is None or external < 0:
        print("Invalid external list position.\n")
        return
    fields["external_position"] = external
    position = _parse_int(session.ask(f"Position in {tier.label} (Enter = end): "))
    _run(session, lambda publish: session.editor.insert(tier, fields, position, publish=publish))


def do_edit(session: Session) -> None:
    query = session.ask("Name or global position: ")
    try:
        match = session.editor.resolver.resolve(session.editor.load(), query)
    except EmptyInput:
        print("Cancelled.\n")
        return
    except NotFound as e:
        print(f"{e}\n")
        return
    item = match.item
    print(f"\nEditing: {item.name}")
    updates = {}
    for key in EDITABLE_FIELDS:
        answer = session.ask(f"{key.replace('_', ' ').capitalize()} [{getattr(item, key)}]: ").strip()
        if not answer:
            continue
        if key == "external_position":
            value = _parse_int(answer)
            if value is None or value < 0:
                print("Ignoring invalid position.")
                continue
            updates[key] = value
        else:
            updates[key] = answer
    _run(session, lambda publish: session.editor.edit(str(match.rank), updates, publish=publish))


def do_delete(session: Session) -> None:
    query = session.ask("Name or global position: ")
    _run(session, lambda publish: session.editor.delete(query, publish=publish))


def do_move(session: Session) -> None:
    query = session.ask("Name or global position: ")
    if not query.strip():
        print("Cancelled.\n")
        return
    target = _parse_int(session.ask("New global position: "))
    if target is None or target < 1:
        print("Invalid position.\n")
        return
    _run(session, lambda publish: session.editor.move(query, target, publish=publish))


# ── Batch session ────────────────────────────────────────────


def show_pending(session: Session) -> None:
    pending = session.transaction.pending
    if not pending:
        print("\nNo pending changes.\n")
        return
    print("\nPending changes:")
    for i, change in enumerate(pending, 1):
        print(f"  {i}. {change}")
    print()


def batch_commit(session: Session, message: str | None = None) -> bool:
    result = session.transaction.commit(message)
    if result is None:
        print("\nNothing to commit.\n")
        return False
    if result.ok:
        print("\nAll changes committed and pushed in one go.\n")
        return True
    print(f"\nCommit failed, changes kept locally: {result.detail}\n")
    return False


def batch_rollback(session: Session) -> None:
    if not session.transaction.pending:
        session.transaction.discard()
        print("Nothing to roll back; snapshot removed.\n")
        session.menu = "main"
        return
    confirm = session.ask("Revert ALL files to the state before this session? (y/n): ")
    if confirm.strip().lower() != "y":
        return
    try:
        session.transaction.rollback()
    except RestoreError as e:
        logger.error("%s", e)
        print(f"\nRollback failed: {e}\nRestore the *.batch_temp files by hand.\n")
        session.running = False
        return
    print("All changes discarded.\n")
    session.menu = "main"


def batch_leave(session: Session) -> None:
    if session.transaction.pending:
        answer = session.ask("You have pending changes. Commit before leaving? (y/n): ")
        if answer.strip().lower() == "y":
            if not batch_commit(session):
                return
        else:
            print("Leaving without publishing; changes stay on disk.\n")
            session.transaction.discard()
    else:
        session.transaction.discard()
    session.menu = "main"


def _batch_commit_prompt(session: Session) -> None:
    if not session.transaction.pending:
        print("\nNothing to commit.\n")
        return
    show_pending(session)
    message = session.ask("Commit message (Enter = default): ").strip()
    if batch_commit(session, message or None):
        session.menu = "main"


_BATCH_MENU: dict[str, tuple[str, Callable[[Session], None]]] = {
    "1": ("Add item", do_insert),
    "2": ("Edit item", do_edit),
    "3": ("Delete item", do_delete),
    "4": ("Move item", do_move),
    "5": ("Show pending changes", show_pending),
    "6": ("Commit everything", _batch_commit_prompt),
    "7": ("Roll back (restore files)", batch_rollback),
    "0": ("Back to main menu (keep local changes)", batch_leave),
}


def batch_menu(session: Session) -> None:
    session.transaction.begin()
    session.menu = "batch"
    print("\nBatch session started; files snapshotted.")
    while session.running and session.menu == "batch":
        print("\n== BATCH ==")
        for key, (label, _) in _BATCH_MENU.items():
            print(f"{key}. {label}")
        if session.transaction.pending:
            print(f"\n{len(session.transaction.pending)} pending change(s)")
        choice = _read(session, "> ")
        if choice is None:
            session.transaction.discard()
            break
        entry = _BATCH_MENU.get(choice)
        if entry is None:
            print("Invalid option.\n")
            continue
        entry[1](session)


# ── Main loop ────────────────────────────────────────────────


def _quit(session: Session) -> None:
    session.running = False
    print("\nBye!\n")


_MAIN_MENU: dict[str, tuple[str, Callable[[Session], None]]] = {
    "1": ("List all tiers", show_tiers),
    "2": ("Search", do_search),
    "3": ("Add item", do_insert),
    "4": ("Edit item", do_edit),
    "5": ("Delete item", do_delete),
    "6": ("Move item", do_move),
    "7": ("Batch session", batch_menu),
    "0": ("Quit", _quit),
}


def _read(session: Session, prompt: str) -> str | None:
    try:
        return session.ask(prompt).strip()
    except (EOFError, KeyboardInterrupt):
        return None


def _check_stale(session: Session) -> None:
    stale = session.transaction.stale_snapshots()
    if not stale:
        return
    print(f"Found {len(stale)} snapshot file(s) from an interrupted batch session.")
    answer = session.ask("Restore files from them? (y = restore, n = delete snapshots): ")
    try:
        session.transaction.recover(restore=answer.strip().lower() == "y")
    except RestoreError as e:
        logger.error("%s", e)
        print(f"Restore failed: {e}\nRecover the *.batch_temp files by hand.")
        session.running = False


def main_menu(session: Session) -> None:
    print("Tier list manager")
    layout = session.editor.layout
    print(
        f"Top (1-{layout.top_capacity}) -> Mid ({layout.top_capacity + 1}-"
        f"{layout.top_capacity + layout.mid_capacity}) -> Overflow"
    )
    _check_stale(session)
    while session.running:
        print("\n== MENU ==")
        for key, (label, _) in _MAIN_MENU.items():
            print(f"{key}. {label}")
        choice = _read(session, "> ")
        if choice is None:
            _quit(session)
            break
        entry = _MAIN_MENU.get(choice)
        if entry is None:
            print("Invalid option.\n")
            continue
        entry[1](session)
