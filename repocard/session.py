"""
Interactive studio session.

A ``StudioSession`` holds the repository that is currently loaded, the style
being edited and the latest preview. Preview batches are numbered so that a
batch finishing after a newer one has started is dropped instead of
overwriting fresher output, and exports through one session never overlap.
"""

import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from .config import DEFAULT_COMMIT_COUNT
from .errors import FetchError, InvalidIdentifierError
from .export import Rasterizer, export_share_kit
from .generator import ShareKitDocuments, render_documents
from .models import CommitRecord, ExportRequest, ExportResult, RepositoryMetadata, StyleOptions
from .primitives import RepositoryIdentifier, parse_repository_identifier

logger = logging.getLogger("repocard.session")

EXPORT_IN_PROGRESS = "export already in progress"


class MetadataSource(Protocol):
    def fetch_metadata(self, identifier: RepositoryIdentifier) -> RepositoryMetadata: ...

    def fetch_commits(self, identifier: RepositoryIdentifier, count: int = DEFAULT_COMMIT_COUNT) -> List[CommitRecord]: ...


@dataclass(frozen=True)
class Preview:
    """Documents of one applied preview batch."""
    generation: int
    documents: ShareKitDocuments


class PreviewSession:
    """Generation counter guarding which preview batch gets applied."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._current: Optional[Preview] = None

    @property
    def current(self) -> Optional[Preview]:
        return self._current

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        """Start a new batch and return its generation number."""
        with self._lock:
            self._generation += 1
            return self._generation

    def submit(self, generation: int, documents: ShareKitDocuments) -> bool:
        """
        Apply a finished batch if no newer batch has been started since.

        Returns:
            True if the batch became the current preview, False if discarded
        """
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale preview %d (latest is %d)", generation, self._generation)
                return False
            self._current = Preview(generation=generation, documents=documents)
            return True

    def refresh(self, metadata: RepositoryMetadata, commits: Sequence[CommitRecord],
                style: StyleOptions, version_label: Optional[str] = None) -> Optional[Preview]:
        """Render all four artifacts as one batch; returns the preview if it was applied."""
        generation = self.begin()
        documents = render_documents(metadata, commits, style, version_label)
        if self.submit(generation, documents):
            return Preview(generation=generation, documents=documents)
        return None

    def clear(self) -> None:
        """Drop the current preview and invalidate any batch still in flight."""
        with self._lock:
            self._generation += 1
            self._current = None


class StudioSession:
    """
    Load a repository, restyle it and export its share kit.

    Args:
        source: Metadata source (GitHub API or saved JSON)
        style: Initial style options
        commit_count: Number of recent commits to load
        rasterizer: Optional SVG-to-PNG converter used by exports
        version_label: Optional label for the release notes heading
    """

    def __init__(self, source: MetadataSource, style: Optional[StyleOptions] = None,
                 commit_count: int = DEFAULT_COMMIT_COUNT, rasterizer: Optional[Rasterizer] = None,
                 version_label: Optional[str] = None) -> None:
        self._source = source
        self._style = style or StyleOptions()
        self._commit_count = commit_count
        self._rasterizer = rasterizer
        self.version_label = version_label
        self._metadata: Optional[RepositoryMetadata] = None
        self._commits: Tuple[CommitRecord, ...] = ()
        self._previews = PreviewSession()
        self._export_lock = threading.Lock()

    @property
    def metadata(self) -> Optional[RepositoryMetadata]:
        return self._metadata

    @property
    def commits(self) -> Tuple[CommitRecord, ...]:
        return self._commits

    @property
    def style(self) -> StyleOptions:
        return self._style

    @property
    def current_preview(self) -> Optional[Preview]:
        return self._previews.current

    def load(self, text: str) -> RepositoryMetadata:
        """
        Resolve ``text`` to a repository, fetch it and render a first preview.

        Args:
            text: ``owner/repo`` or a GitHub URL

        Returns:
            The loaded metadata

        Raises:
            InvalidIdentifierError: If ``text`` is not a repository identifier;
                nothing is fetched and the loaded state is kept
            FetchError: If the source fails; the loaded state is cleared
        """
        identifier = parse_repository_identifier(text or "")
        if identifier is None:
            logger.info("Rejected repository identifier %r", text)
            raise InvalidIdentifierError(
                f"Invalid repository identifier {text!r}; expected owner/repo or https://github.com/owner/repo"
            )

        try:
            metadata = self._source.fetch_metadata(identifier)
            commits = tuple(self._source.fetch_commits(identifier, self._commit_count))
        except FetchError:
            self._clear()
            raise

        self._metadata = metadata
        self._commits = commits
        logger.info("Loaded %s with %d commits", metadata.full_name, len(commits))
        self.preview()
        return metadata

    def update_style(self, **changes) -> Optional[Preview]:
        """
        Replace fields of the current style and re-render the preview.

        Raises:
            UnknownTemplateError, InvalidColorError: If a new value is invalid;
                the previous style stays in effect
        """
        self._style = dataclasses.replace(self._style, **changes)
        return self.preview()

    def preview(self) -> Optional[Preview]:
        """Re-render all artifacts with the current style; None if nothing is loaded."""
        if self._metadata is None:
            return None
        return self._previews.refresh(self._metadata, self._commits, self._style, self.version_label)

    def export(self, output_dir: str) -> ExportResult:
        """
        Export the share kit for the loaded repository.

        A second export started while one is still running through this
        session is refused with a failed result.
        """
        if self._metadata is None:
            return ExportResult.failure("No repository loaded")
        if not self._export_lock.acquire(blocking=False):
            logger.warning("Export to %s refused: %s", output_dir, EXPORT_IN_PROGRESS)
            return ExportResult.failure(EXPORT_IN_PROGRESS)
        try:
            request = ExportRequest(
                metadata=self._metadata,
                commits=self._commits,
                style=self._style,
                output_dir=output_dir,
                version_label=self.version_label,
            )
            return export_share_kit(request, self._rasterizer)
        finally:
            self._export_lock.release()

    def _clear(self) -> None:
        self._metadata = None
        self._commits = ()
        self._previews.clear()
