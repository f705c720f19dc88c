"""Entry point: python -m tierlist [menu|list|search <query>]

- No args / "menu": Interactive menu (single edits and batch sessions)
- "list":           Print all three tiers
- "search <query>": Search names and creators
"""

from __future__ import annotations

import logging
import sys

from tierlist.config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "menu"
    config = load_config()
    _setup_logging(config.log_level)

    from tierlist.cli import main_menu, show_tiers
    from tierlist.session import Session

    session = Session.create(config)

    if cmd == "menu":
        main_menu(session)
    elif cmd == "list":
        show_tiers(session)
    elif cmd == "search" and len(sys.argv) > 2:
        query = " ".join(sys.argv[2:])
        for hit in session.editor.search(query):
            print(f"#{hit.rank} ({hit.tier.label}): {hit.item.name} by {hit.item.creator}")
    else:
        print("Usage: python -m tierlist [menu|list|search <query>]")
        print("  menu    Interactive menu (default)")
        print("  list    Print all tiers")
        print("  search  Search names and creators")
        sys.exit(1)


if __name__ == "__main__":
    main()
