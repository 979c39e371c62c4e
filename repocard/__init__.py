"""
RepoCard Studio - social cards and share kits for GitHub repositories.
"""

from .errors import FetchError, InvalidColorError, InvalidIdentifierError, RepoCardError, UnknownTemplateError
from .models import (
    CommitRecord,
    ExportRequest,
    ExportResult,
    LicenseInfo,
    OwnerInfo,
    RepositoryMetadata,
    StyleOptions,
    TEMPLATES,
)
from .primitives import (
    ATTRIBUTION_TEXT,
    RepositoryIdentifier,
    escape_markdown,
    escape_markup,
    format_count,
    parse_repository_identifier,
    truncate_text,
)
from .card import render_card
from .generator import (
    ShareKitDocuments,
    generate_press_kit,
    generate_readme_snippet,
    generate_release_notes,
    render_documents,
)
from .export import Rasterizer, export_share_kit, load_rasterizer
from .session import PreviewSession, StudioSession

__all__ = [
    'ATTRIBUTION_TEXT',
    'CommitRecord',
    'ExportRequest',
    'ExportResult',
    'FetchError',
    'InvalidColorError',
    'InvalidIdentifierError',
    'LicenseInfo',
    'OwnerInfo',
    'PreviewSession',
    'Rasterizer',
    'RepoCardError',
    'RepositoryIdentifier',
    'RepositoryMetadata',
    'ShareKitDocuments',
    'StudioSession',
    'StyleOptions',
    'TEMPLATES',
    'UnknownTemplateError',
    'escape_markdown',
    'escape_markup',
    'export_share_kit',
    'format_count',
    'generate_press_kit',
    'generate_readme_snippet',
    'generate_release_notes',
    'load_rasterizer',
    'parse_repository_identifier',
    'render_card',
    'render_documents',
    'truncate_text',
]
