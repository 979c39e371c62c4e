"""
Commit message classification.

Release notes group commits by their Conventional Commits type
(``feat(scope)!: ...``). Messages that do not follow the convention are
classified by their first word, so ``Fix crash on startup`` still lands
under bug fixes.
"""

import re
from typing import Dict, List, Sequence, Tuple

from .models import CommitRecord

FEATURES = "✨ Features"
BUG_FIXES = "🐛 Bug Fixes"
DOCUMENTATION = "📚 Documentation"
MAINTENANCE = "🔧 Maintenance"
OTHER_CHANGES = "📝 Other Changes"

# Render order of the release notes subsections.
CATEGORIES = (FEATURES, BUG_FIXES, DOCUMENTATION, MAINTENANCE, OTHER_CHANGES)

_TYPE_CATEGORIES: Dict[str, str] = {
    "feat": FEATURES,
    "feature": FEATURES,
    "fix": BUG_FIXES,
    "fixes": BUG_FIXES,
    "fixed": BUG_FIXES,
    "bugfix": BUG_FIXES,
    "hotfix": BUG_FIXES,
    "bug": BUG_FIXES,
    "docs": DOCUMENTATION,
    "doc": DOCUMENTATION,
    "chore": MAINTENANCE,
    "ci": MAINTENANCE,
    "build": MAINTENANCE,
}


class CommitParser:
    """
    Read the type out of a commit subject line.

    Conventional subjects yield their declared type; anything else yields its
    first word, lowercased.
    """

    CONVENTIONAL_RE = re.compile(r"^(?P<type>[a-z]+)(\((?P<scope>[^)]*)\))?(!)?:\s*(?P<desc>.*)", re.I)
    FIRST_WORD_RE = re.compile(r"^(?P<word>[a-z]+)\b", re.I)

    @staticmethod
    def commit_type(message: str) -> str:
        lines = message.strip().splitlines()
        first = lines[0].strip() if lines else ""
        m = CommitParser.CONVENTIONAL_RE.match(first) or CommitParser.FIRST_WORD_RE.match(first)
        if not m:
            return ""
        return m.group(1).lower()


def categorize(message: str) -> str:
    """Return the release notes category for a commit message."""
    return _TYPE_CATEGORIES.get(CommitParser.commit_type(message), OTHER_CHANGES)


def group_commits(commits: Sequence[CommitRecord]) -> List[Tuple[str, List[CommitRecord]]]:
    """
    Group commits by category.

    Args:
        commits: Commits in display order (most recent first)

    Returns:
        (category, commits) pairs in ``CATEGORIES`` order. Empty categories
        are omitted and each group keeps the input order.
    """
    groups: Dict[str, List[CommitRecord]] = {category: [] for category in CATEGORIES}
    for commit in commits:
        groups[categorize(commit.message)].append(commit)
    return [(category, groups[category]) for category in CATEGORIES if groups[category]]
