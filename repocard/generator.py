"""
Markdown document generation.

This module builds the three text artifacts of a share kit (README snippet,
release notes draft and press kit overview) from repository metadata, the
recent commit list and the style options of the current pass.

Untrusted repository fields go through ``escape_markdown`` before they are
placed in running text, tables or link labels. URLs and fenced code blocks
are left untouched.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
from urllib.parse import quote

from .card import render_card
from .models import CommitRecord, RepositoryMetadata, StyleOptions
from .parser import group_commits
from .primitives import ATTRIBUTION_TEXT, escape_markdown, format_count, format_date

NOT_SPECIFIED = "Not specified"
NO_RECENT_CHANGES = "_No recent changes._"
UNRELEASED = "Unreleased"


@dataclass(frozen=True)
class ShareKitDocuments:
    """The four artifacts rendered together from one ``StyleOptions`` value."""
    style: StyleOptions
    card: str
    readme_snippet: str
    release_notes: str
    press_kit: str


def render_documents(
    metadata: RepositoryMetadata,
    commits: Sequence[CommitRecord],
    style: StyleOptions,
    version_label: Optional[str] = None,
) -> ShareKitDocuments:
    """Render the card and all three documents in one pass with the same style."""
    return ShareKitDocuments(
        style=style,
        card=render_card(metadata, style),
        readme_snippet=generate_readme_snippet(metadata, commits, style),
        release_notes=generate_release_notes(metadata, commits, style, version_label),
        press_kit=generate_press_kit(metadata, commits, style),
    )


def generate_readme_snippet(
    metadata: RepositoryMetadata,
    commits: Sequence[CommitRecord],
    style: StyleOptions,
) -> str:
    """
    Build a README section with badges, a stats table and quick-start steps.

    Args:
        metadata: Repository snapshot
        commits: Recent commits (unused here; accepted for a uniform signature)
        style: Options of the current pass; only the attribution flag applies

    Returns:
        Markdown text ending with a newline
    """
    name = escape_markdown(metadata.name)
    lines: List[str] = [
        f"# {name}",
        "",
        escape_markdown(metadata.description) if metadata.description else "_No description provided._",
        "",
        f"[![Stars](https://img.shields.io/github/stars/{metadata.full_name}?style=social)]"
        f"(https://github.com/{metadata.full_name})",
        f"[![Forks](https://img.shields.io/github/forks/{metadata.full_name}?style=social)]"
        f"(https://github.com/{metadata.full_name}/fork)",
    ]
    if metadata.license:
        badge = _badge_segment(metadata.license.spdx_id or metadata.license.key)
        lines.append(f"[![License](https://img.shields.io/badge/license-{badge}-blue.svg)]({metadata.html_url})")

    lines.extend([
        "",
        "## 📊 Stats",
        "",
        "| Metric | Count |",
        "|--------|-------|",
        f"| ⭐ Stars | {format_count(metadata.stargazers_count)} |",
        f"| 🍴 Forks | {format_count(metadata.forks_count)} |",
        f"| 👀 Watchers | {format_count(metadata.watchers_count)} |",
        f"| 🐛 Open issues | {format_count(metadata.open_issues_count)} |",
        "",
        "## 🔗 Links",
        "",
        f"- **Repository**: [{escape_markdown(metadata.full_name)}]({metadata.html_url})",
        f"- **Language**: {_language(metadata)}",
        f"- **License**: {_license_name(metadata)}",
        "",
        "## 🚀 Quick Start",
        "",
        "```bash",
        f"git clone {metadata.html_url}.git",
        f"cd {metadata.name}",
        "```",
    ])
    lines.extend(_attribution_block(style))
    return "\n".join(lines) + "\n"


def generate_release_notes(
    metadata: RepositoryMetadata,
    commits: Sequence[CommitRecord],
    style: StyleOptions,
    version_label: Optional[str] = None,
) -> str:
    """
    Draft release notes from the recent commit list.

    All commits go into a single section headed ``Unreleased`` (or
    ``version_label`` when given), split into one subsection per commit
    category (features, bug fixes, documentation, maintenance, other).
    Empty categories are left out and each keeps the order supplied (most
    recent first), one bullet per commit. The release date is the date of
    the newest commit, falling back to the last push, so the draft is
    reproducible.

    Args:
        metadata: Repository snapshot
        commits: Recent commits, most recent first
        style: Options of the current pass; only the attribution flag applies
        version_label: Optional label replacing the ``Unreleased`` heading

    Returns:
        Markdown text ending with a newline
    """
    label = (version_label or "").strip() or None
    release_date = format_date(commits[0].date) if commits else format_date(metadata.pushed_at)

    lines: List[str] = [
        f"# {escape_markdown(metadata.name)} Release Notes",
        "",
        f"## {escape_markdown(label) if label else UNRELEASED}",
        "",
        f"**Release Date**: {release_date}",
        "",
    ]
    groups = group_commits(commits)
    for category, grouped in groups:
        lines.extend([f"### {category}", ""])
        lines.extend(_commit_bullet(c) for c in grouped)
        lines.append("")
    if groups:
        lines.pop()
    else:
        lines.append(NO_RECENT_CHANGES)

    lines.extend([
        "",
        "## 📦 Installation",
        "",
        "```bash",
        f"git clone {metadata.html_url}.git",
        f"cd {metadata.name}",
    ])
    if label:
        lines.append(f"git checkout {label.splitlines()[0]}")
    lines.extend([
        "```",
        "",
        "## 🔗 Links",
        "",
        f"- **Full Changelog**: {metadata.html_url}/commits/{metadata.default_branch}",
        f"- **Repository**: {metadata.html_url}",
    ])
    lines.extend(_attribution_block(style))
    return "\n".join(lines) + "\n"


def generate_press_kit(
    metadata: RepositoryMetadata,
    commits: Sequence[CommitRecord],
    style: StyleOptions,
) -> str:
    """
    Build a one-page press kit overview.

    Args:
        metadata: Repository snapshot
        commits: Recent commits, used for the latest-activity line
        style: Options of the current pass; only the attribution flag applies

    Returns:
        Markdown text ending with a newline
    """
    name = escape_markdown(metadata.name)
    owner = escape_markdown(metadata.owner.login)
    description = escape_markdown(metadata.description) if metadata.description else "No description provided."
    license_name = _license_name(metadata)
    language = _language(metadata)

    lines: List[str] = [
        f"# {name} Press Kit",
        "",
        "## Overview",
        "",
        f"**{name}** by [{owner}]({metadata.owner.html_url}): {description}",
        "",
        "## Quick Facts",
        "",
        "| | |",
        "|---|---|",
        f"| **Name** | {name} |",
        f"| **Author** | [{owner}]({metadata.owner.html_url}) |",
        f"| **Repository** | [{escape_markdown(metadata.full_name)}]({metadata.html_url}) |",
        f"| **Language** | {language} |",
        f"| **License** | {license_name} |",
        f"| **Stars** | {format_count(metadata.stargazers_count)} |",
        f"| **Forks** | {format_count(metadata.forks_count)} |",
        f"| **Watchers** | {format_count(metadata.watchers_count)} |",
        "",
        "## Description",
        "",
        description,
        "",
        "## Key Facts",
        "",
        f"- Primary language: **{language}**",
        f"- Active development with **{format_count(metadata.open_issues_count)}** open issues",
        f"- Created: **{format_date(metadata.created_at)}**",
        f"- Last updated: **{format_date(metadata.updated_at)}**",
    ]
    if commits:
        lines.append(f"- Latest commit: **{format_date(commits[0].date)}** ({len(commits)} recent commits)")

    lines.extend([
        "",
        "## Topics / Tags",
        "",
        _topics(metadata.topics),
        "",
        "## Assets",
        "",
        "The following assets are included in this press kit:",
        "",
        "- `repo-card.svg`: vector social card (1200×630, editable)",
        "- `repo-card.png`: raster social card (1200×630, when available)",
        "- `README-snippet.md`: ready-to-use README section",
        "- `release-notes-draft.md`: release notes template",
        "",
        "## Screenshots",
        "",
        "Place screenshots in the `screenshots/` folder.",
        "",
        "## Contact",
        "",
        f"- **Repository**: {metadata.html_url}",
        f"- **Owner**: {metadata.owner.html_url}",
        "",
        "## License",
        "",
        f"This project is licensed under **{license_name}**." if metadata.license
        else "No license has been specified for this project.",
    ])
    lines.extend(_attribution_block(style))
    return "\n".join(lines) + "\n"


def _attribution_block(style: StyleOptions) -> List[str]:
    if not style.include_attribution:
        return []
    return ["", "---", "", f"<sub>{ATTRIBUTION_TEXT}</sub>"]


def _commit_bullet(commit: CommitRecord) -> str:
    message = escape_markdown(commit.message) or "(no message)"
    return f"- {message} (`{commit.short_sha}`)"


def _topics(topics: Sequence[str]) -> str:
    if not topics:
        return "No topics specified"
    # Backticks would close the code span early.
    return ", ".join(f"`{t.replace('`', '')}`" for t in topics)


def _language(metadata: RepositoryMetadata) -> str:
    return escape_markdown(metadata.language) if metadata.language else NOT_SPECIFIED


def _license_name(metadata: RepositoryMetadata) -> str:
    return escape_markdown(metadata.license.name) if metadata.license else NOT_SPECIFIED


def _badge_segment(text: str) -> str:
    """Escape a value for a shields.io static badge path segment."""
    return quote(text.replace("-", "--").replace("_", "__").replace(" ", "_"), safe="")
