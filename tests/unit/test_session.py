"""Unit tests for repocard.session."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from repocard.errors import FetchError, InvalidColorError, InvalidIdentifierError
from repocard.generator import render_documents
from repocard.models import CommitRecord, RepositoryMetadata, StyleOptions
from repocard.primitives import RepositoryIdentifier
from repocard.session import EXPORT_IN_PROGRESS, PreviewSession, StudioSession


class FakeSource:
    """In-memory metadata source recording its calls."""

    def __init__(self, metadata: RepositoryMetadata, commits: list[CommitRecord]) -> None:
        self.metadata = metadata
        self.commits = commits
        self.error: Exception | None = None
        self.calls: list[tuple[str, RepositoryIdentifier]] = []

    def fetch_metadata(self, identifier: RepositoryIdentifier) -> RepositoryMetadata:
        self.calls.append(("metadata", identifier))
        if self.error:
            raise self.error
        return self.metadata

    def fetch_commits(self, identifier: RepositoryIdentifier, count: int = 20) -> list[CommitRecord]:
        self.calls.append(("commits", identifier))
        return self.commits[:count]


@pytest.fixture()
def source(metadata: RepositoryMetadata, commits: list[CommitRecord]) -> FakeSource:
    return FakeSource(metadata, commits)


# ---------------------------------------------------------------------------
# TestPreviewSession
# ---------------------------------------------------------------------------


class TestPreviewSession:
    """Only the latest preview batch is applied."""

    def test_stale_batch_is_discarded(
        self, metadata: RepositoryMetadata, commits: list[CommitRecord], style: StyleOptions
    ) -> None:
        previews = PreviewSession()
        docs = render_documents(metadata, commits, style)
        first = previews.begin()
        second = previews.begin()

        assert previews.submit(first, docs) is False
        assert previews.current is None
        assert previews.submit(second, docs) is True
        assert previews.current.generation == second

    def test_generations_increase(self) -> None:
        previews = PreviewSession()
        assert [previews.begin() for _ in range(3)] == [1, 2, 3]

    def test_clear_invalidates_in_flight_batch(
        self, metadata: RepositoryMetadata, commits: list[CommitRecord], style: StyleOptions
    ) -> None:
        previews = PreviewSession()
        generation = previews.begin()
        previews.clear()

        assert previews.submit(generation, render_documents(metadata, commits, style)) is False
        assert previews.current is None

    def test_refresh_applies_batch(
        self, metadata: RepositoryMetadata, commits: list[CommitRecord], style: StyleOptions
    ) -> None:
        previews = PreviewSession()
        preview = previews.refresh(metadata, commits, style)

        assert preview is not None
        assert preview.documents.style is style
        assert previews.current == preview


# ---------------------------------------------------------------------------
# TestStudioSessionLoad
# ---------------------------------------------------------------------------


class TestStudioSessionLoad:
    """Loading validates input first and clears state on fetch failure."""

    def test_load_renders_first_preview(self, source: FakeSource, style: StyleOptions) -> None:
        session = StudioSession(source, style=style)
        meta = session.load("https://github.com/microsoft/vscode")

        assert meta.full_name == "microsoft/vscode"
        assert len(session.commits) == 3
        assert session.current_preview is not None
        assert session.current_preview.documents.readme_snippet.startswith("# vscode")
        assert source.calls[0] == ("metadata", RepositoryIdentifier("microsoft", "vscode"))

    def test_commit_count_is_passed_to_source(self, source: FakeSource) -> None:
        session = StudioSession(source, commit_count=2)
        session.load("microsoft/vscode")
        assert len(session.commits) == 2

    @pytest.mark.parametrize("text", ["", "   ", "invalid", "a/b/c"])
    def test_invalid_identifier_makes_no_call(self, source: FakeSource, text: str) -> None:
        session = StudioSession(source)
        with pytest.raises(InvalidIdentifierError):
            session.load(text)
        assert source.calls == []

    def test_invalid_identifier_keeps_loaded_state(self, source: FakeSource) -> None:
        session = StudioSession(source)
        session.load("microsoft/vscode")
        with pytest.raises(InvalidIdentifierError):
            session.load("not a repo")
        assert session.metadata is not None

    def test_fetch_failure_clears_state(self, source: FakeSource) -> None:
        session = StudioSession(source)
        session.load("microsoft/vscode")
        source.error = FetchError("Repository not found")

        with pytest.raises(FetchError, match="not found"):
            session.load("microsoft/missing")

        assert session.metadata is None
        assert session.commits == ()
        assert session.current_preview is None
        assert session.preview() is None


# ---------------------------------------------------------------------------
# TestStudioSessionStyle
# ---------------------------------------------------------------------------


class TestStudioSessionStyle:
    """Style changes re-render every artifact with the new options."""

    def test_update_style_refreshes_preview(self, source: FakeSource) -> None:
        session = StudioSession(source)
        session.load("microsoft/vscode")
        first = session.current_preview.generation

        preview = session.update_style(template="gradient", include_attribution=False)

        assert session.style.template == "gradient"
        assert preview.generation > first
        assert "linearGradient" in preview.documents.card
        assert "<sub>" not in preview.documents.press_kit

    def test_invalid_style_keeps_previous(self, source: FakeSource) -> None:
        session = StudioSession(source)
        with pytest.raises(InvalidColorError):
            session.update_style(primary_color="blue")
        assert session.style == StyleOptions()

    def test_update_style_before_load(self, source: FakeSource) -> None:
        session = StudioSession(source)
        assert session.update_style(template="minimal") is None
        assert session.style.template == "minimal"


# ---------------------------------------------------------------------------
# TestStudioSessionExport
# ---------------------------------------------------------------------------


class TestStudioSessionExport:
    """Exports go through one guarded path per session."""

    def test_export_before_load(self, source: FakeSource, tmp_path: Path) -> None:
        result = StudioSession(source).export(str(tmp_path))
        assert result.success is False
        assert "No repository loaded" in result.error

    def test_export_uses_version_label(self, source: FakeSource, tmp_path: Path) -> None:
        session = StudioSession(source, version_label="v9.9.9")
        session.load("microsoft/vscode")

        result = session.export(str(tmp_path))

        assert result.success is True
        assert "## v9.9.9" in (tmp_path / "release-notes-draft.md").read_text(encoding="utf-8")

    def test_concurrent_export_is_refused(self, source: FakeSource, tmp_path: Path) -> None:
        entered = threading.Event()
        release = threading.Event()

        def slow_rasterizer(svg: str, width: int) -> bytes:
            entered.set()
            release.wait(timeout=5)
            return b"png"

        session = StudioSession(source, rasterizer=slow_rasterizer)
        session.load("microsoft/vscode")
        results = {}
        worker = threading.Thread(target=lambda: results.setdefault("first", session.export(str(tmp_path / "a"))))
        worker.start()
        try:
            assert entered.wait(timeout=5)
            second = session.export(str(tmp_path / "b"))
        finally:
            release.set()
            worker.join(timeout=5)

        assert second.success is False
        assert second.error == EXPORT_IN_PROGRESS
        assert not (tmp_path / "b").exists()
        assert results["first"].success is True

        third = session.export(str(tmp_path / "c"))
        assert third.success is True
