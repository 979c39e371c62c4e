"""
Share kit export.

Writes the rendered card and documents into a chosen directory with a fixed
layout. Failures never raise: the outcome, including the list of files that
were actually written, is always returned as an ``ExportResult``.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from .card import CANVAS_WIDTH
from .generator import render_documents
from .models import ExportRequest, ExportResult

logger = logging.getLogger("repocard.export")

# (svg document, output width in pixels) -> PNG bytes
Rasterizer = Callable[[str, int], bytes]

SVG_FILE = "repo-card.svg"
PNG_FILE = "repo-card.png"
README_FILE = "README-snippet.md"
RELEASE_NOTES_FILE = "release-notes-draft.md"
PRESS_KIT_FILE = "press-kit/overview.md"
SCREENSHOTS_DIR = "press-kit/screenshots"
PLACEHOLDER_FILE = f"{SCREENSHOTS_DIR}/.gitkeep"


def load_rasterizer() -> Optional[Rasterizer]:
    """
    Return a CairoSVG-backed rasterizer, or None when it cannot be loaded.

    CairoSVG is an optional extra (``pip install repocard-studio[raster]``)
    and also needs the native cairo library at import time.
    """
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        logger.debug("PNG export unavailable, cairosvg could not be loaded: %s", e)
        return None

    def rasterize(svg: str, width: int) -> bytes:
        return cairosvg.svg2png(bytestring=svg.encode("utf-8"), output_width=width)

    return rasterize


def export_share_kit(request: ExportRequest, rasterizer: Optional[Rasterizer] = None) -> ExportResult:
    """
    Render every artifact from ``request`` and write the share kit.

    Layout (relative to the output directory, in write order)::

        repo-card.svg
        repo-card.png            only when a rasterizer succeeds
        README-snippet.md
        release-notes-draft.md
        press-kit/overview.md
        press-kit/screenshots/.gitkeep

    Args:
        request: Metadata, commits, style and destination for this export
        rasterizer: Optional SVG-to-PNG converter

    Returns:
        ExportResult; on an I/O error it carries the error message and the
        files written before the failure
    """
    raw_dir = (request.output_dir or "").strip()
    if not raw_dir:
        logger.warning("Export refused: no output directory given")
        return ExportResult.failure("Output directory must not be empty")

    try:
        output_path = Path(raw_dir).expanduser().resolve()
    except (OSError, ValueError, RuntimeError) as e:
        logger.warning("Export refused: invalid output directory %r: %s", raw_dir, e)
        return ExportResult.failure(f"Invalid output directory {raw_dir!r}: {e}")

    documents = render_documents(request.metadata, request.commits, request.style, request.version_label)
    written: List[str] = []
    skipped: List[str] = []

    logger.info("Exporting share kit for %s to %s", request.metadata.full_name, output_path)
    try:
        (output_path / SCREENSHOTS_DIR).mkdir(parents=True, exist_ok=True)

        _write(output_path, SVG_FILE, documents.card, written)
        png = _rasterize(documents.card, rasterizer)
        if png is None:
            skipped.append(PNG_FILE)
        else:
            _write(output_path, PNG_FILE, png, written)

        _write(output_path, README_FILE, documents.readme_snippet, written)
        _write(output_path, RELEASE_NOTES_FILE, documents.release_notes, written)
        _write(output_path, PRESS_KIT_FILE, documents.press_kit, written)
        _write(output_path, PLACEHOLDER_FILE, "", written)
    except (OSError, ValueError) as e:
        # ValueError covers paths the OS rejects outright, such as embedded NUL bytes
        logger.error("Export to %s failed after %d files: %s", output_path, len(written), e)
        return ExportResult.failure(
            f"Failed to write share kit to {output_path}: {e}",
            output_path=str(output_path),
            files=written,
            skipped=skipped,
        )

    logger.info("Exported %d files to %s", len(written), output_path)
    return ExportResult(
        success=True,
        output_path=str(output_path),
        files=tuple(written),
        skipped=tuple(skipped),
    )


def _rasterize(svg: str, rasterizer: Optional[Rasterizer]) -> Optional[bytes]:
    if rasterizer is None:
        logger.info("No rasterizer available, skipping %s", PNG_FILE)
        return None
    try:
        return rasterizer(svg, CANVAS_WIDTH)
    except Exception as e:
        logger.warning("PNG conversion failed, skipping %s: %s", PNG_FILE, e)
        return None


def _write(root: Path, relative: str, content: Union[str, bytes], written: List[str]) -> None:
    path = root / relative
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
    written.append(relative)
    logger.debug("Wrote %s", path)
