#!/usr/bin/env python3
"""
Command-line interface for RepoCard Studio.

Loads a GitHub repository, renders its social card and documents with the
chosen style, and either prints one artifact or exports the full share kit.

Usage (example):
    repocard microsoft/vscode --template gradient --primary "#1e3a8a" --secondary "#9333ea" -o ./kit
    repocard octocat/Hello-World --preview readme
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .config import clamp_commit_count, default_export_dir, load_settings
from .errors import RepoCardError
from .export import load_rasterizer
from .fetcher import GitHubFetcher, JsonFileSource
from .models import DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR, TEMPLATES, StyleOptions
from .session import StudioSession

logger = logging.getLogger("repocard")

_PREVIEW_FIELDS = {
    "card": "card",
    "readme": "readme_snippet",
    "release": "release_notes",
    "press": "press_kit",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repocard",
        description="Generate a social card, README snippet, release notes and press kit for a GitHub repository.",
    )
    parser.add_argument("repository", help="owner/repo or https://github.com/owner/repo")
    parser.add_argument("--output", "-o", help="Export directory (default: REPOCARD_OUTPUT_DIR or ~/Downloads/<repo>-share-kit)")
    parser.add_argument("--template", "-t", choices=TEMPLATES, default="modern", help="Card template")
    parser.add_argument("--primary", default=DEFAULT_PRIMARY_COLOR, help="Primary color (#rrggbb)")
    parser.add_argument("--secondary", default=DEFAULT_SECONDARY_COLOR, help="Secondary color (#rrggbb)")
    parser.add_argument("--no-attribution", action="store_true", help="Omit the attribution line")
    parser.add_argument("--version-label", help="Heading for the release notes instead of 'Unreleased'")
    parser.add_argument("--commits", type=int, help="Number of recent commits to include (1-100)")
    parser.add_argument("--token", help="GitHub token (default: GITHUB_TOKEN)")
    parser.add_argument("--preview", choices=sorted(_PREVIEW_FIELDS), help="Print one artifact instead of exporting")
    parser.add_argument("--metadata-file", help="Read repository metadata from a saved GitHub JSON response")
    parser.add_argument("--commits-file", help="Read commits from a saved JSON list (requires --metadata-file)")
    parser.add_argument("--no-png", action="store_true", help="Do not attempt PNG conversion")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main entry point for the repocard command.

    Exits with status 1 on any failure, including a partial export.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.commits_file and not args.metadata_file:
        parser.error("--commits-file requires --metadata-file")

    settings = load_settings()
    logging.basicConfig(level=logging.DEBUG if args.verbose else settings.log_level)

    try:
        style = StyleOptions(
            template=args.template,
            primary_color=args.primary,
            secondary_color=args.secondary,
            include_attribution=not args.no_attribution,
        )
        if args.metadata_file:
            source = JsonFileSource(args.metadata_file, args.commits_file)
        else:
            source = GitHubFetcher(token=args.token or settings.github_token)

        commit_count = clamp_commit_count(args.commits) if args.commits is not None else settings.commit_count
        session = StudioSession(
            source,
            style=style,
            commit_count=commit_count,
            rasterizer=None if (args.no_png or args.preview) else load_rasterizer(),
            version_label=args.version_label,
        )

        logger.info("Loading %s...", args.repository)
        metadata = session.load(args.repository)

        if args.preview:
            preview = session.current_preview
            sys.stdout.write(getattr(preview.documents, _PREVIEW_FIELDS[args.preview]))
            return

        output_dir = args.output or settings.output_dir or str(default_export_dir() / f"{metadata.name}-share-kit")
        result = session.export(output_dir)
        if not result.success:
            print(f"Error: export failed - {result.error}")
            if result.files:
                print(f"  {len(result.files)} files were written to {result.output_path} before the failure")
            sys.exit(1)

        print(f"✓ Share kit exported: {result.output_path}")
        print(f"  Repository: {metadata.full_name}")
        print(f"  Template: {style.template}")
        for name in result.files:
            print(f"  - {name}")
        for name in result.skipped:
            print(f"  (skipped {name}: PNG conversion unavailable)")

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\nOperation cancelled by user")
        sys.exit(1)
    except RepoCardError as e:
        logger.error("repocard failed: %s", e)
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
