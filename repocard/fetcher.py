"""
Repository metadata sources.

This module provides the two metadata sources used by the studio: the live
GitHub API (through PyGithub) and previously saved JSON files. Both expose
``fetch_metadata`` and ``fetch_commits`` and report every failure as
``FetchError``.
"""

import datetime
import json
import logging
from pathlib import Path
from typing import List, Optional

import requests

from .config import DEFAULT_COMMIT_COUNT, clamp_commit_count
from .errors import FetchError
from .models import CommitRecord, LicenseInfo, OwnerInfo, RepositoryMetadata, commits_from_list
from .primitives import RepositoryIdentifier

# External libs
try:
    from github import Auth, Github, GithubException, RateLimitExceededException, UnknownObjectException
except Exception as e:
    raise RuntimeError("PyGithub is required. Install with: pip install PyGithub") from e

# Set up logging
logger = logging.getLogger("repocard.fetcher")


class GitHubFetcher:
    """
    Fetch repository metadata and recent commits from GitHub using PyGithub.

    Args:
        token: Personal access token (or None for unauthenticated, but rate-limited).
        client: Pre-built ``Github`` client; mainly for tests.
    """

    def __init__(self, token: Optional[str] = None, client=None) -> None:
        # Last repository fetched by fetch_metadata, keyed by lowercased owner/repo
        self._repo = None
        self._repo_key: Optional[str] = None
        if client is not None:
            self._g = client
            return
        try:
            self._g = Github(auth=Auth.Token(token)) if token else Github()
            logger.debug("GitHub client initialized (authenticated=%s)", bool(token))
        except Exception as e:
            logger.error("Failed to initialize GitHub client: %s", e)
            raise FetchError(f"GitHub client initialization failed: {e}") from e

    def fetch_metadata(self, identifier: RepositoryIdentifier) -> RepositoryMetadata:
        """
        Fetch repository metadata from GitHub.

        Args:
            identifier: Owner and repository name

        Returns:
            RepositoryMetadata snapshot

        Raises:
            FetchError: If the repository cannot be found or reached
        """
        try:
            repo = self._g.get_repo(str(identifier))
            self._repo, self._repo_key = repo, str(identifier).lower()
            lic = repo.license
            owner = repo.owner
            meta = RepositoryMetadata(
                name=repo.name,
                full_name=repo.full_name,
                description=repo.description,
                html_url=repo.html_url,
                stargazers_count=repo.stargazers_count,
                forks_count=repo.forks_count,
                watchers_count=repo.watchers_count,
                open_issues_count=repo.open_issues_count,
                language=repo.language,
                topics=tuple(repo.topics or ()),
                created_at=_iso(repo.created_at),
                updated_at=_iso(repo.updated_at),
                pushed_at=_iso(repo.pushed_at),
                default_branch=repo.default_branch,
                license=LicenseInfo(key=lic.key, name=lic.name, spdx_id=lic.spdx_id) if lic else None,
                owner=OwnerInfo(login=owner.login, avatar_url=owner.avatar_url, html_url=owner.html_url),
            )
        except Exception as e:
            raise self._fetch_error(e, f"Failed to fetch repository metadata for {identifier}") from e

        logger.info("Fetched metadata for %s", meta.full_name)
        return meta

    def fetch_commits(self, identifier: RepositoryIdentifier, count: int = DEFAULT_COMMIT_COUNT) -> List[CommitRecord]:
        """
        Fetch the most recent commits on the default branch.

        Args:
            identifier: Owner and repository name
            count: Number of commits to return, clamped to 1..100

        Returns:
            Commits, most recent first

        Raises:
            FetchError: If the commit list cannot be fetched
        """
        limit = clamp_commit_count(count)
        result: List[CommitRecord] = []
        try:
            repo = self._get_repo(identifier)
            logger.info("Fetching up to %d commits from %s", limit, identifier)

            for c in repo.get_commits():
                if len(result) >= limit:
                    break
                commit_obj = c.commit
                author = commit_obj.author
                message = (commit_obj.message or "").strip()
                result.append(CommitRecord(
                    sha=c.sha,
                    message=message.splitlines()[0] if message else "",
                    author_name=(author.name if author else None) or "",
                    author_email=(author.email if author else None) or "",
                    date=_iso(author.date if author else None),
                ))
        except Exception as e:
            raise self._fetch_error(e, f"Failed to fetch commits for {identifier}") from e

        logger.info("Fetched %d commits from %s", len(result), identifier)
        return result

    def _get_repo(self, identifier: RepositoryIdentifier):
        if self._repo is not None and self._repo_key == str(identifier).lower():
            logger.debug("Reusing repository object for %s", identifier)
            return self._repo
        return self._g.get_repo(str(identifier))

    @staticmethod
    def _fetch_error(e: Exception, context: str) -> FetchError:
        if isinstance(e, UnknownObjectException):
            error_msg = f"{context}: repository not found"
        elif isinstance(e, RateLimitExceededException) or _is_rate_limited(e):
            error_msg = f"{context}: GitHub API rate limit exceeded (set GITHUB_TOKEN to raise the limit)"
        elif isinstance(e, GithubException):
            error_msg = f"{context}: GitHub API error {e.status}: {_github_message(e)}"
        elif isinstance(e, requests.RequestException):
            error_msg = f"{context}: network error: {e}"
        else:
            error_msg = f"{context}: {e}"
        logger.error(error_msg)
        return FetchError(error_msg)


class JsonFileSource:
    """
    Serve metadata and commits saved as GitHub REST JSON.

    The metadata file holds one ``/repos/{owner}/{repo}`` object; the
    optional commits file holds a ``/commits`` list or a list of flat
    commit records.
    """

    def __init__(self, metadata_file: str, commits_file: Optional[str] = None) -> None:
        self.metadata_file = metadata_file
        self.commits_file = commits_file

    def fetch_metadata(self, identifier: RepositoryIdentifier) -> RepositoryMetadata:
        data = _read_json(self.metadata_file)
        try:
            meta = RepositoryMetadata.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(f"Invalid repository metadata in {self.metadata_file}: {e}") from e
        if meta.full_name.lower() != str(identifier).lower():
            raise FetchError(f"{self.metadata_file} describes {meta.full_name}, not {identifier}")
        logger.info("Loaded metadata for %s from %s", meta.full_name, self.metadata_file)
        return meta

    def fetch_commits(self, identifier: RepositoryIdentifier, count: int = DEFAULT_COMMIT_COUNT) -> List[CommitRecord]:
        if not self.commits_file:
            return []
        data = _read_json(self.commits_file)
        try:
            commits = commits_from_list(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise FetchError(f"Invalid commit list in {self.commits_file}: {e}") from e
        return list(commits[:clamp_commit_count(count)])


def _read_json(path: str):
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise FetchError(f"Could not read {path}: {e}") from e


def _iso(value: Optional[datetime.datetime]) -> str:
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _github_message(e: "GithubException") -> str:
    if isinstance(e.data, dict) and e.data.get("message"):
        return str(e.data["message"])
    return str(e.data) if e.data else "no details"


def _is_rate_limited(e: Exception) -> bool:
    return isinstance(e, GithubException) and e.status == 403 and "rate limit" in _github_message(e).lower()
