"""
Data models for RepoCard Studio.

This module contains the immutable data structures shared by the card
renderer, the document generators and the export orchestrator.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from .errors import InvalidColorError, UnknownTemplateError
from .primitives import short_sha

TemplateId = Literal["modern", "minimal", "gradient"]

TEMPLATES: Tuple[str, ...] = ("modern", "minimal", "gradient")

DEFAULT_PRIMARY_COLOR = "#0d1117"
DEFAULT_SECONDARY_COLOR = "#161b22"

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class LicenseInfo:
    """License attached to a repository."""
    key: str
    name: str
    spdx_id: Optional[str] = None


@dataclass(frozen=True)
class OwnerInfo:
    """Account that owns a repository."""
    login: str
    avatar_url: str
    html_url: str


@dataclass(frozen=True)
class RepositoryMetadata:
    """
    Snapshot of a repository as returned by the metadata source.

    ``full_name`` must always equal ``owner.login + "/" + name`` and all
    counters must be non-negative; both are checked on construction so the
    generators never see a value that breaks them.
    """
    name: str
    full_name: str
    description: Optional[str]
    html_url: str
    stargazers_count: int
    forks_count: int
    watchers_count: int
    open_issues_count: int
    language: Optional[str]
    topics: Tuple[str, ...]
    created_at: str
    updated_at: str
    pushed_at: str
    default_branch: str
    license: Optional[LicenseInfo]
    owner: OwnerInfo

    def __post_init__(self) -> None:
        expected = f"{self.owner.login}/{self.name}"
        if self.full_name != expected:
            raise ValueError(f"full_name {self.full_name!r} does not match owner/name {expected!r}")
        for counter in ("stargazers_count", "forks_count", "watchers_count", "open_issues_count"):
            if getattr(self, counter) < 0:
                raise ValueError(f"{counter} must be non-negative")
        # topics may arrive as a list
        object.__setattr__(self, "topics", tuple(self.topics))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryMetadata":
        """
        Build metadata from the GitHub REST ``/repos/{owner}/{repo}`` JSON shape.

        Args:
            data: Decoded JSON object

        Returns:
            RepositoryMetadata instance

        Raises:
            KeyError: If a required field is missing
            ValueError: If the data violates a model invariant
        """
        owner = data["owner"]
        lic = data.get("license")
        return cls(
            name=data["name"],
            full_name=data["full_name"],
            description=data.get("description"),
            html_url=data["html_url"],
            stargazers_count=int(data.get("stargazers_count", 0)),
            forks_count=int(data.get("forks_count", 0)),
            watchers_count=int(data.get("watchers_count", 0)),
            open_issues_count=int(data.get("open_issues_count", 0)),
            language=data.get("language"),
            topics=tuple(data.get("topics") or ()),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            pushed_at=data.get("pushed_at", ""),
            default_branch=data.get("default_branch", "main"),
            license=LicenseInfo(key=lic["key"], name=lic["name"], spdx_id=lic.get("spdx_id")) if lic else None,
            owner=OwnerInfo(
                login=owner["login"],
                avatar_url=owner.get("avatar_url", ""),
                html_url=owner.get("html_url", f"https://github.com/{owner['login']}"),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the snapshot in the same JSON shape accepted by ``from_dict``."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "description": self.description,
            "html_url": self.html_url,
            "stargazers_count": self.stargazers_count,
            "forks_count": self.forks_count,
            "watchers_count": self.watchers_count,
            "open_issues_count": self.open_issues_count,
            "language": self.language,
            "topics": list(self.topics),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "pushed_at": self.pushed_at,
            "default_branch": self.default_branch,
            "license": (
                {"key": self.license.key, "name": self.license.name, "spdx_id": self.license.spdx_id}
                if self.license else None
            ),
            "owner": {
                "login": self.owner.login,
                "avatar_url": self.owner.avatar_url,
                "html_url": self.owner.html_url,
            },
        }


@dataclass(frozen=True)
class CommitRecord:
    """A single commit: full hash plus the first line of its message."""
    sha: str
    message: str
    author_name: str
    author_email: str
    date: str

    @property
    def short_sha(self) -> str:
        return short_sha(self.sha)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommitRecord":
        """Accept either the flat record shape or the GitHub ``/commits`` item shape."""
        if "commit" in data:
            author = data["commit"].get("author") or {}
            message = data["commit"].get("message", "")
            return cls(
                sha=data["sha"],
                message=message.splitlines()[0] if message else "",
                author_name=author.get("name", ""),
                author_email=author.get("email", ""),
                date=author.get("date", ""),
            )
        message = data.get("message", "")
        return cls(
            sha=data["sha"],
            message=message.splitlines()[0] if message else "",
            author_name=data.get("author_name", ""),
            author_email=data.get("author_email", ""),
            date=data.get("date", ""),
        )


@dataclass(frozen=True)
class StyleOptions:
    """
    Configuration applied uniformly across one generation pass.

    The same value is handed to the card renderer and to every document
    generator. Colors are normalized to lowercase ``#rrggbb``.
    """
    template: TemplateId = "modern"
    primary_color: str = DEFAULT_PRIMARY_COLOR
    secondary_color: str = DEFAULT_SECONDARY_COLOR
    include_attribution: bool = True

    def __post_init__(self) -> None:
        if self.template not in TEMPLATES:
            raise UnknownTemplateError(
                f"Unknown template: {self.template!r} (expected one of {', '.join(TEMPLATES)})"
            )
        object.__setattr__(self, "primary_color", _normalize_color(self.primary_color, "primary_color"))
        object.__setattr__(self, "secondary_color", _normalize_color(self.secondary_color, "secondary_color"))


@dataclass(frozen=True)
class ExportRequest:
    """Everything one export needs; consumed once, never retained."""
    metadata: RepositoryMetadata
    commits: Tuple[CommitRecord, ...]
    style: StyleOptions
    output_dir: str
    version_label: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "commits", tuple(self.commits))


@dataclass(frozen=True)
class ExportResult:
    """
    Outcome of an export.

    ``files`` lists only the relative paths confirmed written, in write
    order. ``skipped`` lists optional files that were intentionally not
    produced (for example the PNG card when no rasterizer is available).
    """
    success: bool
    output_path: str
    files: Tuple[str, ...] = ()
    error: Optional[str] = None
    skipped: Tuple[str, ...] = ()

    @classmethod
    def failure(cls, error: str, output_path: str = "", files: Sequence[str] = (),
                skipped: Sequence[str] = ()) -> "ExportResult":
        return cls(success=False, output_path=output_path, files=tuple(files),
                   error=error, skipped=tuple(skipped))

    def summary(self) -> str:
        """Human readable one-liner, e.g. ``exported 3 of 6 files``."""
        if self.success:
            return f"exported {len(self.files)} files to {self.output_path}"
        return f"export failed after {len(self.files)} files: {self.error}"


def _normalize_color(value: str, field_name: str) -> str:
    m = _HEX_COLOR_RE.match(value.strip()) if isinstance(value, str) else None
    if not m:
        raise InvalidColorError(f"{field_name} must be a 6-digit hex color, got {value!r}")
    return "#" + m.group(1).lower()


def commits_from_list(items: List[Dict[str, Any]]) -> Tuple[CommitRecord, ...]:
    """Convert a decoded JSON list into commit records, preserving order."""
    return tuple(CommitRecord.from_dict(item) for item in items)
