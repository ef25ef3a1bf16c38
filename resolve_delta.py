#!/usr/bin/env python3
"""
Script to resolve the deployable delta between two revisions of a metadata repository:
- Repository path
- --from: starting revision
- --to: target revision (optional, defaults to HEAD)
- --source: directory holding the metadata tree (optional, defaults to the repository root)
- --ignore / --ignore-destructive: ignore lists for constructive / destructive changes
- --include / --include-destructive: force-include lists
- --include-only: only print the force-included lines

Resolved status lines are printed on stdout, one per line.
"""

import argparse
import logging
import subprocess
import sys
from pathlib import Path

from metadelta.common.config import DeltaConfig
from metadelta.common.errors import ConfigurationError, MetadeltaError
from metadelta.common.logging import configure_logging
from metadelta.resolution.services.resolution_service import create_resolution_service


def is_git_repository(repo_path: Path) -> bool:
    """Check if the given path is a git repository."""
    git_dir = repo_path / ".git"
    return git_dir.exists()


def revision_exists(repo_path: Path, revision: str) -> bool:
    """Check if the revision resolves to a commit in the repository."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"],
            cwd=repo_path,
            capture_output=True,
            check=False,
        )
        return result.returncode == 0
    except OSError:
        return False


def validate_parameters(config: DeltaConfig) -> tuple[bool, str]:
    """
    Validate the run configuration and return (is_valid, error_message).

    Args:
        config: Configuration built from the command line

    Returns:
        Tuple of (is_valid, error_message)
    """
    repo_path = config.repo_path
    if not repo_path.exists():
        return False, f"Repository path does not exist: {repo_path}"

    if not repo_path.is_dir():
        return False, f"Repository path is not a directory: {repo_path}"

    if not is_git_repository(repo_path):
        return False, f"Path is not a git repository: {repo_path}"

    for revision in (config.from_revision, config.to_revision):
        if not revision_exists(repo_path, revision):
            return False, f"Revision '{revision}' does not exist in the repository"

    for policy_file in (
        config.ignore,
        config.ignore_destructive,
        config.include,
        config.include_destructive,
    ):
        if policy_file is not None and not policy_file.is_file():
            return False, f"Policy file does not exist: {policy_file}"

    return True, "All parameters are valid"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Resolve the minimal set of metadata file changes between two revisions"
        )
    )
    parser.add_argument(
        "repo_path",
        type=Path,
        nargs="?",
        default=Path("."),
        help="Path to the git repository directory (default: current directory)",
    )
    parser.add_argument(
        "--from",
        dest="from_revision",
        type=str,
        default=None,
        help=(
            "Starting revision of the comparison. When omitted, the whole "
            "configuration is read from METADELTA_* environment variables"
        ),
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help=".env file to load when reading configuration from the environment",
    )
    parser.add_argument(
        "--to",
        dest="to_revision",
        type=str,
        default="HEAD",
        help="Target revision of the comparison (default: HEAD)",
    )
    parser.add_argument(
        "--source",
        type=str,
        default="",
        help="Directory holding the metadata tree, relative to the repository root",
    )
    parser.add_argument(
        "--ignore",
        type=Path,
        default=None,
        help="Ignore list for added and modified files",
    )
    parser.add_argument(
        "--ignore-destructive",
        type=Path,
        default=None,
        help="Ignore list for deleted files",
    )
    parser.add_argument(
        "--include",
        type=Path,
        default=None,
        help="Force-include list for additions",
    )
    parser.add_argument(
        "--include-destructive",
        type=Path,
        default=None,
        help="Force-include list for deletions",
    )
    parser.add_argument(
        "--ignore-whitespace",
        action="store_true",
        help="Ignore whitespace-only changes",
    )
    parser.add_argument(
        "--no-generate-delta",
        dest="generate_delta",
        action="store_false",
        help="Skip dependency expansion (parent objects of master-detail fields)",
    )
    parser.add_argument(
        "--include-only",
        action="store_true",
        help="Only print the force-included lines",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=4,
        help="Maximum concurrent file reads during dependency expansion (default: 4)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main function to parse arguments, validate parameters, and print the delta."""
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.from_revision is None:
            config = DeltaConfig.from_env(args.env_file)
        else:
            config = DeltaConfig(
                repo_path=args.repo_path,
                from_revision=args.from_revision,
                to_revision=args.to_revision,
                source=args.source,
                ignore_whitespace=args.ignore_whitespace,
                ignore=args.ignore,
                ignore_destructive=args.ignore_destructive,
                include=args.include,
                include_destructive=args.include_destructive,
                generate_delta=args.generate_delta,
                max_workers=args.max_workers,
            )
    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}", file=sys.stderr)
        print(
            "  Hint: Pass --from or set METADELTA_FROM in .env file or environment",
            file=sys.stderr,
        )
        sys.exit(1)

    is_valid, message = validate_parameters(config)
    if not is_valid:
        print(f"✗ Validation failed: {message}", file=sys.stderr)
        sys.exit(1)

    service = create_resolution_service()
    try:
        if args.include_only:
            lines = service.resolve_forced_includes(config)
        else:
            lines = service.resolve_filtered_changes(config)
    except MetadeltaError as e:
        print(f"✗ Failed to resolve delta: {e}", file=sys.stderr)
        sys.exit(1)

    for line in lines:
        print(line)
    sys.exit(0)


if __name__ == "__main__":
    main()
