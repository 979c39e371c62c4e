"""Shared pytest fixtures for the repocard test suite."""

from __future__ import annotations

import copy
from typing import Any, Callable

import pytest

from repocard.models import CommitRecord, RepositoryMetadata, StyleOptions

# ---------------------------------------------------------------------------
# Repository metadata
# ---------------------------------------------------------------------------

SAMPLE_REPO: dict[str, Any] = {
    "name": "vscode",
    "full_name": "microsoft/vscode",
    "description": "Visual Studio Code",
    "html_url": "https://github.com/microsoft/vscode",
    "stargazers_count": 162345,
    "forks_count": 28765,
    "watchers_count": 3321,
    "open_issues_count": 9876,
    "language": "TypeScript",
    "topics": ["editor", "electron", "typescript", "visual-studio-code"],
    "created_at": "2015-09-03T20:23:38Z",
    "updated_at": "2024-05-01T10:00:00Z",
    "pushed_at": "2024-04-30T09:00:00Z",
    "default_branch": "main",
    "license": {"key": "mit", "name": "MIT License", "spdx_id": "MIT"},
    "owner": {
        "login": "microsoft",
        "avatar_url": "https://avatars.githubusercontent.com/u/6154722",
        "html_url": "https://github.com/microsoft",
    },
}


@pytest.fixture()
def repo_data() -> dict[str, Any]:
    """Return a fresh copy of the sample GitHub ``/repos`` payload."""
    return copy.deepcopy(SAMPLE_REPO)


@pytest.fixture()
def make_metadata() -> Callable[..., RepositoryMetadata]:
    """Factory building metadata from the sample payload with field overrides."""

    def _make(**overrides: Any) -> RepositoryMetadata:
        data = copy.deepcopy(SAMPLE_REPO)
        data.update(overrides)
        return RepositoryMetadata.from_dict(data)

    return _make


@pytest.fixture()
def metadata(make_metadata: Callable[..., RepositoryMetadata]) -> RepositoryMetadata:
    return make_metadata()


# ---------------------------------------------------------------------------
# Commits
# ---------------------------------------------------------------------------


@pytest.fixture()
def commits() -> list[CommitRecord]:
    """Three commits, most recent first."""
    return [
        CommitRecord(
            sha="a1b2c3d4e5f60718293a4b5c6d7e8f9012345678",
            message="Fix crash on startup",
            author_name="Ada",
            author_email="ada@example.com",
            date="2024-05-01T08:15:00Z",
        ),
        CommitRecord(
            sha="b2c3d4e5f60718293a4b5c6d7e8f901234567890",
            message="Add gradient theme",
            author_name="Linus",
            author_email="linus@example.com",
            date="2024-04-28T17:40:00Z",
        ),
        CommitRecord(
            sha="c3d4e5f60718293a4b5c6d7e8f90123456789012",
            message="Update dependencies",
            author_name="Grace",
            author_email="grace@example.com",
            date="2024-04-20T11:00:00Z",
        ),
    ]


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------

# Colors that appear in no built-in palette, so their presence in output
# can only come from the supplied style.
PRIMARY = "#ff0066"
SECONDARY = "#00ffaa"


@pytest.fixture()
def style() -> StyleOptions:
    return StyleOptions(template="modern", primary_color=PRIMARY, secondary_color=SECONDARY)
