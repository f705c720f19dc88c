"""Markdown change log: CHANGELOG.md plus a "latest changes" block in README.md.

CHANGELOG.md carries YAML frontmatter with the entry count and the date of
the last entry; entries are appended as list items below the heading.
"""

from __future__ import annotations

import logging
from pathlib import Path

import frontmatter

from tierlist.store import atomic_write_text

logger = logging.getLogger(__name__)

README_START = "<!-- latest-changes:start -->"
README_END = "<!-- latest-changes:end -->"
_README_HEADER = "## Latest changes\n\n"
_CHANGELOG_HEADING = "# Changelog\n"


class MarkdownChangeLog:
    def __init__(self, changelog: Path, readme: Path | None = None) -> None:
        self.changelog = changelog
        self.readme = readme

    @property
    def paths(self) -> list[Path]:
        return [p for p in (self.readme, self.changelog) if p is not None]

    def append(self, description: str, date: str) -> None:
        line = f"- {date} — {description}"
        self._append_changelog(line, date)
        if self.readme is not None:
            self._update_readme(line)

    def _append_changelog(self, line: str, date: str) -> None:
        if self.changelog.exists():
            post = frontmatter.load(str(self.changelog))
        else:
            post = frontmatter.Post(_CHANGELOG_HEADING)
        body = post.content.rstrip() or _CHANGELOG_HEADING.rstrip()
        post.content = f"{body}\n{line}"
        post["entries"] = int(post.get("entries", 0)) + 1
        post["updated"] = date
        atomic_write_text(self.changelog, frontmatter.dumps(post) + "\n")
        logger.info("Changelog entry #%d: %s", post["entries"], line[:80])

    def _update_readme(self, line: str) -> None:
        """Replace the marked block, or insert one after the first line."""
        block = f"{README_START}\n{_README_HEADER}{line}\n{README_END}\n"
        content = self.readme.read_text(encoding="utf-8") if self.readme.exists() else ""

        if README_START in content and README_END in content:
            before = content.split(README_START, 1)[0]
            after = "\n" + content.split(README_END, 1)[1].lstrip("\n")
            content = before + block + after
        else:
            idx = content.find("\n")
            if idx != -1:
                content = content[: idx + 1] + "\n" + block + "\n" + content[idx + 1 :]
            else:
                content = block + "\n" + content
        atomic_write_text(self.readme, content)
