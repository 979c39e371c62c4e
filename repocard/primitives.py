"""
Formatting primitives shared by the card renderer and document generators.

All helpers here are pure and total over their documented inputs.
"""

import datetime
import re
from typing import NamedTuple, Optional

ELLIPSIS = "..."

ATTRIBUTION_TEXT = "Generated with RepoCard Studio — LAZYFROG (creator of KZ) — kindware.dev"

_GITHUB_PREFIXES = ("https://github.com/", "http://github.com/")

_MARKUP_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}

# CommonMark treats a backslash before any ASCII punctuation as a literal.
_MARKDOWN_SPECIAL_RE = re.compile(r"([\\`*_~\[\]<>|#])")
_BLOCK_MARKER_RE = re.compile(r"^([-+=])")
_ORDERED_MARKER_RE = re.compile(r"^(\d{1,9})([.)])")
_LINE_BREAK_RE = re.compile(r"\s*[\r\n]+\s*")

LANGUAGE_COLORS = {
    "javascript": "#f1e05a",
    "typescript": "#3178c6",
    "python": "#3572a5",
    "rust": "#dea584",
    "go": "#00add8",
    "java": "#b07219",
    "c++": "#f34b7d",
    "cpp": "#f34b7d",
    "c#": "#178600",
    "csharp": "#178600",
    "ruby": "#701516",
    "php": "#4f5d95",
    "swift": "#f05138",
    "kotlin": "#a97bff",
    "dart": "#00b4ab",
    "vue": "#41b883",
    "html": "#e34c26",
    "css": "#563d7c",
    "shell": "#89e051",
    "bash": "#89e051",
    "c": "#555555",
}
DEFAULT_LANGUAGE_COLOR = "#6e7681"


class RepositoryIdentifier(NamedTuple):
    owner: str
    repo: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


def format_count(n: int) -> str:
    """
    Abbreviate a counter for display.

    Values below 1,000 are printed as-is; thousands and millions are divided
    first and then rounded to one decimal, so 999,999 becomes ``1000.0K``
    rather than jumping to ``1.0M``.

    Raises:
        ValueError: If ``n`` is negative
    """
    if n < 0:
        raise ValueError(f"count must be non-negative, got {n}")
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def parse_repository_identifier(text: str) -> Optional[RepositoryIdentifier]:
    """
    Extract owner and repository name from a GitHub URL or ``owner/repo``.

    Accepted forms:
        https://github.com/<owner>/<repo>[/...]
        http://github.com/<owner>/<repo>[/...]
        <owner>/<repo>

    Returns:
        RepositoryIdentifier, or None when no owner/repo pair can be found
    """
    value = text.strip()
    if not value:
        return None

    for prefix in _GITHUB_PREFIXES:
        if value.startswith(prefix):
            parts = value[len(prefix):].strip("/").split("/")
            if len(parts) >= 2 and parts[0] and parts[1]:
                return RepositoryIdentifier(parts[0], parts[1])
            return None

    if "/" in value and "://" not in value:
        parts = value.split("/")
        if len(parts) == 2 and parts[0] and parts[1]:
            return RepositoryIdentifier(parts[0], parts[1])

    return None


def truncate_text(text: str, max_length: int) -> str:
    """
    Shorten ``text`` to at most ``max_length`` characters.

    Text that is too long keeps its first ``max_length - 3`` characters
    followed by ``...``. Below three characters there is no room for the
    ellipsis, so the text is cut hard (and a non-positive limit gives "").
    """
    if len(text) <= max_length:
        return text
    if max_length < len(ELLIPSIS):
        return text[:max(max_length, 0)]
    return text[:max_length - len(ELLIPSIS)] + ELLIPSIS


def escape_markup(text: str) -> str:
    """Escape the five XML special characters in a single pass."""
    return "".join(_MARKUP_ENTITIES.get(ch, ch) for ch in text)


def escape_markdown(text: str) -> str:
    """
    Neutralize untrusted text for inline use in Markdown.

    Line breaks collapse to a single space so a value cannot open a new block
    or break a table row, and characters that start emphasis, strikethrough,
    links, code, raw HTML, headings or table cells are backslash-escaped.
    A leading ``-``, ``+`` or ``=`` and the ``.`` or ``)`` after leading
    digits are escaped too, so the value cannot become a list item, a
    thematic break or a setext underline. Rendered output reads exactly like
    the input.
    """
    flat = _LINE_BREAK_RE.sub(" ", text).strip()
    escaped = _MARKDOWN_SPECIAL_RE.sub(r"\\\1", flat)
    escaped = _BLOCK_MARKER_RE.sub(r"\\\1", escaped)
    return _ORDERED_MARKER_RE.sub(r"\1\\\2", escaped)


def format_date(value: str) -> str:
    """
    Format an ISO-8601 timestamp as ``YYYY-MM-DD``.

    Never raises: values that cannot be parsed fall back to their first ten
    characters, and an empty value gives ``unknown``.
    """
    value = (value or "").strip()
    if not value:
        return "unknown"
    try:
        parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value[:10]
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.timezone.utc)
    return parsed.strftime("%Y-%m-%d")


def short_sha(sha: str) -> str:
    return sha[:7]


def language_color(language: Optional[str]) -> str:
    if not language:
        return DEFAULT_LANGUAGE_COLOR
    return LANGUAGE_COLORS.get(language.lower(), DEFAULT_LANGUAGE_COLOR)
