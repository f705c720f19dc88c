"""Side-effect collaborators of the roster engine.

- ChangeLog:    receives one description per committed operation
- VCSPublisher: commits and pushes the changed artifacts (git, or a
                simulator when TIERLIST_SIMULATE_VCS=1)
"""

from __future__ import annotations

from tierlist.publishers.base import ChangeLog, PublishResult, VCSPublisher
from tierlist.publishers.changelog import MarkdownChangeLog
from tierlist.publishers.git import GitPublisher, SimulatedPublisher

__all__ = [
    "ChangeLog",
    "GitPublisher",
    "MarkdownChangeLog",
    "PublishResult",
    "SimulatedPublisher",
    "VCSPublisher",
]
