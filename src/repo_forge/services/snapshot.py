"""Snapshot selection — choose a bounded set of files to show the model.

The policy is satisficing, not optimal: it is order-dependent on the tree
listing and exists only to keep the prompt small.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from repo_forge.domain.entities import FileSnapshot, TreeEntry
from repo_forge.domain.exceptions import (
    GitHubApiError,
    NotAFileError,
    NotFoundError,
)
from repo_forge.domain.ports.repo_fetcher import RepoFetcher
from repo_forge.domain.value_objects import RepoRef

logger = logging.getLogger(__name__)

MANIFEST_NAMES: tuple[str, ...] = (
    "package.json",
    "tsconfig.json",
    "jsconfig.json",
    "requirements.txt",
    "pyproject.toml",
    "setup.py",
    "Gemfile",
    "composer.json",
    "pom.xml",
    "build.gradle",
    "go.mod",
    "Cargo.toml",
    "README.md",
    "Dockerfile",
    "docker-compose.yml",
    "Makefile",
)

SOURCE_EXTENSIONS: tuple[str, ...] = (".js", ".ts", ".py", ".java", ".go", ".jsx", ".tsx")

SOURCE_DIR_PREFIX = "src/"

LAYER_KEYWORDS: tuple[str, ...] = ("controller", "model", "route")


@dataclass(frozen=True, slots=True)
class SelectionPolicy:
    """Knobs for :func:`select_snapshot_paths`."""

    manifest_names: frozenset[str] = frozenset(MANIFEST_NAMES)
    source_extensions: tuple[str, ...] = SOURCE_EXTENSIONS
    source_dir_prefix: str = SOURCE_DIR_PREFIX
    layer_keywords: tuple[str, ...] = LAYER_KEYWORDS
    source_cap: int = 8
    total_cap: int = 15


ARCHITECTURE_POLICY = SelectionPolicy()
README_POLICY = SelectionPolicy(total_cap=6)


def _is_manifest(entry: TreeEntry, policy: SelectionPolicy) -> bool:
    return entry.name in policy.manifest_names


def _is_layer_source(entry: TreeEntry, policy: SelectionPolicy) -> bool:
    path = entry.path.lower()
    in_layer = path.startswith(policy.source_dir_prefix) or any(
        kw in path for kw in policy.layer_keywords
    )
    return in_layer and path.endswith(policy.source_extensions)


def select_snapshot_paths(
    entries: Sequence[TreeEntry],
    policy: SelectionPolicy = ARCHITECTURE_POLICY,
) -> list[str]:
    """Return the ordered, de-duplicated paths whose content should be fetched.

    Manifest files come first (tree order), then up to ``policy.source_cap``
    source files from conventional locations, and the result is cut to
    ``policy.total_cap``.
    """
    files = [e for e in entries if e.is_file]

    manifests = [e.path for e in files if _is_manifest(e, policy)]
    sources = [e.path for e in files if _is_layer_source(e, policy)][: policy.source_cap]

    ordered = list(dict.fromkeys(manifests + sources))
    return ordered[: policy.total_cap]


async def fetch_snapshot(
    fetcher: RepoFetcher,
    ref: RepoRef,
    paths: Sequence[str],
    max_chars: int,
) -> FileSnapshot:
    """Fetch each selected file in turn and keep its truncated content.

    Files that are missing or cannot be decoded are skipped.  Rate-limit and
    authorization failures propagate.
    """
    snapshot: FileSnapshot = {}
    for path in paths:
        try:
            snapshot[path] = await fetcher.fetch_file_content(ref, path, max_chars=max_chars)
        except (NotFoundError, NotAFileError, GitHubApiError) as exc:
            logger.warning("Failed to fetch content for %s: %s", path, exc)
    logger.info("Fetched %d/%d snapshot files from %s", len(snapshot), len(paths), ref.full_name)
    return snapshot
