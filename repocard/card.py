"""
Social card rendering.

Produces a self-contained SVG document on a fixed 1200x630 canvas in one of
three templates. Rendering is pure: the same metadata and style always give
byte-identical output.
"""

import textwrap
from typing import Callable, Dict, List, Sequence

from .errors import UnknownTemplateError
from .models import RepositoryMetadata, StyleOptions
from .primitives import (
    ATTRIBUTION_TEXT,
    escape_markup,
    format_count,
    format_date,
    language_color,
    truncate_text,
)

CANVAS_WIDTH = 1200
CANVAS_HEIGHT = 630

DESCRIPTION_LIMIT = 120
MINIMAL_DESCRIPTION_LIMIT = 90
DESCRIPTION_WRAP = 62
MAX_TOPIC_PILLS = 5

NO_DESCRIPTION = "No description provided"
NO_LANGUAGE = "Unknown"
NO_LICENSE = "No license"

FONT = "system-ui, -apple-system, sans-serif"

_DARK_PALETTE = {
    "headline": "#f0f6fc",
    "muted": "#8b949e",
    "body": "#c9d1d9",
    "avatar": "#30363d",
    "pill": "#30363d",
    "pill_text": "#8b949e",
    "footer": "#6e7681",
}

_LIGHT_ON_COLOR_PALETTE = {
    "headline": "#ffffff",
    "muted": "#e5e7eb",
    "body": "#f3f4f6",
    "avatar": "#1f2937",
    "pill": "#1f2937",
    "pill_text": "#f9fafb",
    "footer": "#e5e7eb",
}

# Fixed neutral palette for the minimal template; supplied colors are ignored.
_NEUTRAL = {
    "background": "#ffffff",
    "headline": "#111827",
    "owner": "#6b7280",
    "body": "#4b5563",
    "badge": "#f3f4f6",
    "badge_text": "#374151",
    "footer": "#9ca3af",
}


def render_card(metadata: RepositoryMetadata, style: StyleOptions) -> str:
    """
    Render the social card for ``metadata`` using ``style``.

    Args:
        metadata: Repository snapshot
        style: Template, colors and attribution flag for this pass

    Returns:
        SVG document as a string

    Raises:
        UnknownTemplateError: If ``style.template`` has no renderer
    """
    renderer = _RENDERERS.get(style.template)
    if renderer is None:
        raise UnknownTemplateError(f"Unknown template: {style.template!r}")
    return renderer(metadata, style)


def _render_modern(metadata: RepositoryMetadata, style: StyleOptions) -> str:
    body = [
        '  <defs>',
        '    <filter id="shadow" x="-20%" y="-20%" width="140%" height="140%">',
        '      <feDropShadow dx="0" dy="4" stdDeviation="8" flood-opacity="0.25"/>',
        '    </filter>',
        '  </defs>',
        '  <!-- Background -->',
        f'  <rect width="{CANVAS_WIDTH}" height="{CANVAS_HEIGHT}" fill="{style.primary_color}"/>',
        f'  <rect x="40" y="40" width="1120" height="550" rx="16" fill="{style.secondary_color}" filter="url(#shadow)"/>',
    ]
    body.extend(_content_layer(metadata, _DARK_PALETTE))
    if style.include_attribution:
        body.append(_attribution(x=1140, y=570, fill=_DARK_PALETTE["footer"]))
    return _document(metadata, body)


def _render_gradient(metadata: RepositoryMetadata, style: StyleOptions) -> str:
    body = [
        '  <defs>',
        '    <linearGradient id="bg-gradient" x1="0%" y1="0%" x2="100%" y2="100%">',
        f'      <stop offset="0%" stop-color="{style.primary_color}"/>',
        f'      <stop offset="100%" stop-color="{style.secondary_color}"/>',
        '    </linearGradient>',
        '  </defs>',
        '  <!-- Background -->',
        f'  <rect width="{CANVAS_WIDTH}" height="{CANVAS_HEIGHT}" fill="url(#bg-gradient)"/>',
        '  <circle cx="100" cy="100" r="200" fill="#ffffff" fill-opacity="0.05"/>',
        '  <circle cx="1100" cy="530" r="250" fill="#ffffff" fill-opacity="0.05"/>',
        '  <rect x="40" y="40" width="1120" height="550" rx="24" fill="#ffffff" fill-opacity="0.1"'
        ' stroke="#ffffff" stroke-opacity="0.2" stroke-width="1"/>',
    ]
    body.extend(_content_layer(metadata, _LIGHT_ON_COLOR_PALETTE))
    if style.include_attribution:
        body.append(_attribution(x=1140, y=570, fill=_LIGHT_ON_COLOR_PALETTE["footer"]))
    return _document(metadata, body)


def _render_minimal(metadata: RepositoryMetadata, style: StyleOptions) -> str:
    description = truncate_text(metadata.description or NO_DESCRIPTION, MINIMAL_DESCRIPTION_LIMIT)
    language = metadata.language or NO_LANGUAGE
    badge_width = 48 + 9 * len(language)
    body = [
        '  <!-- Background -->',
        f'  <rect width="{CANVAS_WIDTH}" height="{CANVAS_HEIGHT}" fill="{_NEUTRAL["background"]}"/>',
        '  <!-- Header -->',
        '  <g transform="translate(100, 180)">',
        f'    <text font-size="48" font-weight="bold" font-family="{FONT}">'
        f'<tspan fill="{_NEUTRAL["owner"]}">{escape_markup(metadata.owner.login)}</tspan>'
        f'<tspan fill="{_NEUTRAL["headline"]}"> / {escape_markup(metadata.name)}</tspan></text>',
        '    <!-- Description -->',
        f'    <text y="70" font-size="24" fill="{_NEUTRAL["body"]}" font-family="{FONT}">'
        f'{escape_markup(description)}</text>',
        '    <!-- Stats -->',
        f'    <text y="150" font-size="20" fill="{_NEUTRAL["owner"]}" font-family="{FONT}">'
        f'<tspan font-weight="bold" fill="{_NEUTRAL["headline"]}">{format_count(metadata.stargazers_count)}</tspan> stars'
        f'<tspan dx="40" font-weight="bold" fill="{_NEUTRAL["headline"]}">{format_count(metadata.forks_count)}</tspan> forks'
        f'<tspan dx="40" font-weight="bold" fill="{_NEUTRAL["headline"]}">{format_count(metadata.open_issues_count)}</tspan> issues'
        '</text>',
        '    <g transform="translate(0, 190)">',
        f'      <rect width="{badge_width}" height="32" rx="16" fill="{_NEUTRAL["badge"]}"/>',
        f'      <circle cx="20" cy="16" r="6" fill="{language_color(metadata.language)}"/>',
        f'      <text x="34" y="21" font-size="14" fill="{_NEUTRAL["badge_text"]}" font-family="{FONT}">'
        f'{escape_markup(language)}</text>',
        '    </g>',
        '    <!-- Footer -->',
        f'    <text y="300" font-size="16" fill="{_NEUTRAL["footer"]}" font-family="{FONT}">'
        f'{escape_markup(_footer_text(metadata))}</text>',
        '  </g>',
    ]
    if style.include_attribution:
        body.append(_attribution(x=1140, y=600, fill=_NEUTRAL["footer"]))
    return _document(metadata, body)


def _content_layer(metadata: RepositoryMetadata, palette: Dict[str, str]) -> List[str]:
    """Header, description, stats, topics and footer shared by modern and gradient."""
    owner = metadata.owner.login
    initial = owner[:1].upper() or "?"
    description = truncate_text(metadata.description or NO_DESCRIPTION, DESCRIPTION_LIMIT)
    lines = textwrap.wrap(description, DESCRIPTION_WRAP) or [description]

    out = [
        '  <!-- Header -->',
        '  <g transform="translate(80, 80)">',
        f'    <circle cx="40" cy="40" r="40" fill="{palette["avatar"]}"/>',
        f'    <text x="40" y="52" text-anchor="middle" font-size="32" fill="{palette["muted"]}"'
        f' font-family="{FONT}">{escape_markup(initial)}</text>',
        f'    <text x="100" y="32" font-size="32" font-weight="bold" fill="{palette["headline"]}"'
        f' font-family="{FONT}">{escape_markup(owner)}</text>',
        f'    <text x="100" y="70" font-size="28" fill="{palette["muted"]}"'
        f' font-family="{FONT}">/ {escape_markup(metadata.name)}</text>',
        '  </g>',
        '  <!-- Description -->',
        f'  <text x="80" y="220" font-size="22" fill="{palette["body"]}" font-family="{FONT}">',
    ]
    for i, line in enumerate(lines):
        dy = 0 if i == 0 else 30
        out.append(f'    <tspan x="80" dy="{dy}">{escape_markup(line)}</tspan>')
    out.extend([
        '  </text>',
        '  <!-- Stats -->',
        '  <g transform="translate(80, 330)">',
        f'    <text x="0" y="20" font-size="18" fill="{palette["headline"]}"'
        f' font-family="{FONT}">★ {format_count(metadata.stargazers_count)}</text>',
        f'    <text x="140" y="20" font-size="18" fill="{palette["headline"]}"'
        f' font-family="{FONT}">⑂ {format_count(metadata.forks_count)}</text>',
        f'    <circle cx="290" cy="14" r="7" fill="{language_color(metadata.language)}"/>',
        f'    <text x="306" y="20" font-size="18" fill="{palette["headline"]}"'
        f' font-family="{FONT}">{escape_markup(metadata.language or NO_LANGUAGE)}</text>',
        '  </g>',
        '  <!-- Topics -->',
        '  <g transform="translate(80, 390)">',
    ])
    out.extend(_topic_pills(metadata.topics, palette))
    out.extend([
        '  </g>',
        '  <!-- Footer -->',
        f'  <text x="80" y="530" font-size="16" fill="{palette["footer"]}"'
        f' font-family="{FONT}">{escape_markup(_footer_text(metadata))}</text>',
    ])
    return out


def _topic_pills(topics: Sequence[str], palette: Dict[str, str]) -> List[str]:
    pills: List[str] = []
    x = 0
    for topic in topics[:MAX_TOPIC_PILLS]:
        width = len(topic) * 8 + 24
        pills.append(
            f'    <g transform="translate({x}, 0)">'
            f'<rect width="{width}" height="28" rx="14" fill="{palette["pill"]}"/>'
            f'<text x="{width // 2}" y="19" text-anchor="middle" font-size="12" fill="{palette["pill_text"]}"'
            f' font-family="{FONT}">{escape_markup(topic)}</text></g>'
        )
        x += width + 10
    overflow = len(topics) - MAX_TOPIC_PILLS
    if overflow > 0:
        pills.append(
            f'    <g transform="translate({x}, 0)">'
            f'<text y="19" font-size="12" fill="{palette["footer"]}" font-family="{FONT}">+{overflow}</text></g>'
        )
    return pills


def _footer_text(metadata: RepositoryMetadata) -> str:
    license_name = metadata.license.name if metadata.license else NO_LICENSE
    return f"{metadata.html_url} · {license_name} · Updated {format_date(metadata.updated_at)}"


def _attribution(x: int, y: int, fill: str) -> str:
    return (
        '  <!-- Attribution -->\n'
        f'  <text x="{x}" y="{y}" text-anchor="end" font-size="11" fill="{fill}"'
        f' font-family="{FONT}">{escape_markup(ATTRIBUTION_TEXT)}</text>'
    )


def _document(metadata: RepositoryMetadata, body: List[str]) -> str:
    head = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg width="{CANVAS_WIDTH}" height="{CANVAS_HEIGHT}" viewBox="0 0 {CANVAS_WIDTH} {CANVAS_HEIGHT}"'
        ' xmlns="http://www.w3.org/2000/svg">',
        f'  <title>{escape_markup(metadata.full_name)}</title>',
    ]
    return "\n".join(head + body + ["</svg>"]) + "\n"


_RENDERERS: Dict[str, Callable[[RepositoryMetadata, StyleOptions], str]] = {
    "modern": _render_modern,
    "minimal": _render_minimal,
    "gradient": _render_gradient,
}
