"""Unit tests for repocard.parser."""

from __future__ import annotations

import pytest

from repocard.models import CommitRecord
from repocard.parser import (
    BUG_FIXES,
    DOCUMENTATION,
    FEATURES,
    MAINTENANCE,
    OTHER_CHANGES,
    CommitParser,
    categorize,
    group_commits,
)


def _commit(sha: str, message: str) -> CommitRecord:
    return CommitRecord(sha, message, "Ada", "ada@example.com", "2024-05-01T00:00:00Z")


# ---------------------------------------------------------------------------
# TestCommitParser
# ---------------------------------------------------------------------------


class TestCommitParser:
    """CommitParser.commit_type reads the type from the subject line."""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("feat: add themes", "feat"),
            ("fix(card): clip long names", "fix"),
            ("Feat(api)!: drop v1", "feat"),
            ("docs:no space", "docs"),
            ("Update dependencies", "update"),
            ("chore: bump\n\nbody text", "chore"),
        ],
    )
    def test_types(self, message: str, expected: str) -> None:
        assert CommitParser.commit_type(message) == expected

    @pytest.mark.parametrize("message", ["", "   ", "1.2.0 release", "🎉 initial"])
    def test_no_type(self, message: str) -> None:
        assert CommitParser.commit_type(message) == ""


# ---------------------------------------------------------------------------
# TestCategorize
# ---------------------------------------------------------------------------


class TestCategorize:
    """categorize maps commit types onto the release notes categories."""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("feat: gradient template", FEATURES),
            ("feature(card): topic pills", FEATURES),
            ("fix: escape ampersands", BUG_FIXES),
            ("Fix crash on startup", BUG_FIXES),
            ("bugfix: off-by-one in truncation", BUG_FIXES),
            ("docs: usage section", DOCUMENTATION),
            ("doc: typo", DOCUMENTATION),
            ("chore: bump PyGithub", MAINTENANCE),
            ("ci: cache pip", MAINTENANCE),
            ("build(deps): pin requests", MAINTENANCE),
            ("refactor: split renderer", OTHER_CHANGES),
            ("Add gradient theme", OTHER_CHANGES),
            ("", OTHER_CHANGES),
        ],
    )
    def test_categories(self, message: str, expected: str) -> None:
        assert categorize(message) == expected

    def test_prefix_must_be_a_whole_word(self) -> None:
        assert categorize("circular import cleanup") == OTHER_CHANGES
        assert categorize("builder cleanup") == OTHER_CHANGES


# ---------------------------------------------------------------------------
# TestGroupCommits
# ---------------------------------------------------------------------------


class TestGroupCommits:
    """group_commits keeps category order and input order within a group."""

    def test_category_order_and_stable_groups(self) -> None:
        commits = [
            _commit("1", "chore: bump"),
            _commit("2", "fix: second fix"),
            _commit("3", "feat: newest feature"),
            _commit("4", "fix: first fix"),
            _commit("5", "Random change"),
            _commit("6", "feat: older feature"),
        ]

        groups = group_commits(commits)

        assert [category for category, _ in groups] == [FEATURES, BUG_FIXES, MAINTENANCE, OTHER_CHANGES]
        assert dict(groups)[FEATURES] == [commits[2], commits[5]]
        assert dict(groups)[BUG_FIXES] == [commits[1], commits[3]]

    def test_empty_categories_are_omitted(self) -> None:
        groups = group_commits([_commit("1", "docs: readme")])
        assert [category for category, _ in groups] == [DOCUMENTATION]

    def test_no_commits(self) -> None:
        assert group_commits([]) == []
