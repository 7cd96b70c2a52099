# Path helpers: normalization, joining and breadcrumbs for remote folder paths.
# Created: 2026-10-02
#
# Remote paths are "/"-delimited with no leading or trailing slash; "" is the
# root. Every component that needs a child or parent path goes through here.

from __future__ import annotations

import re
from dataclasses import dataclass

ROOT = ""
ROOT_LABEL = "Root"

_SLASHES = re.compile(r"/+")


def normalize_path(path: str | None) -> str:
    """Collapse repeated slashes and strip leading/trailing ones.

    ``None`` and ``"/"`` both normalize to the root (``""``).
    """
    if not path:
        return ROOT
    return _SLASHES.sub("/", path).strip("/")


def join_path(parent: str | None, name: str) -> str:
    """Join a parent path and a child name (or sub-path).

    >>> join_path("a/", "b")
    'a/b'
    >>> join_path("", "b")
    'b'
    """
    parent = normalize_path(parent)
    child = normalize_path(name)
    if not parent:
        return child
    if not child:
        return parent
    return f"{parent}/{child}"


def split_path(path: str | None) -> list[str]:
    normalized = normalize_path(path)
    return normalized.split("/") if normalized else []


def parent_path(path: str | None) -> str:
    """Drop the last segment. The parent of the root is the root."""
    return "/".join(split_path(path)[:-1])


def base_name(path: str | None) -> str:
    """Last segment of a path ("" for the root)."""
    parts = split_path(path)
    return parts[-1] if parts else ""


def replace_name(path: str, new_name: str) -> str:
    """Path of a sibling named ``new_name`` (what a rename produces)."""
    return join_path(parent_path(path), new_name)


@dataclass(frozen=True)
class Crumb:
    """One breadcrumb step: a display label and the cumulative path."""

    label: str
    path: str

    @property
    def is_root(self) -> bool:
        return self.path == ROOT


def breadcrumb(path: str | None) -> list[Crumb]:
    """Root sentinel followed by one crumb per segment.

    ``"a/b"`` yields ``[Root, a (a), b (a/b)]``.
    """
    crumbs = [Crumb(ROOT_LABEL, ROOT)]
    prefix = ROOT
    for segment in split_path(path):
        prefix = join_path(prefix, segment)
        crumbs.append(Crumb(segment, prefix))
    return crumbs
