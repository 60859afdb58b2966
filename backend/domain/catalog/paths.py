"""
Catalog Domain - Materialized Paths.

A category path is the chain of sanitized labels from the root down to the
category, joined by PATH_SEPARATOR:

    resistors
    resistors.smd
    resistors.smd.0402

Labels never contain the separator, so "B is below A" is a plain prefix test
on the strings. All helpers here are pure functions.
"""

import re
from typing import List, Optional

PATH_SEPARATOR = "."
MAX_LABEL_LENGTH = 255
# Paths are btree-indexed; PostgreSQL caps an index entry at about 2700 bytes.
# Labels are ASCII, so characters and bytes coincide.
MAX_PATH_LENGTH = 2048

_INVALID_LABEL_CHARS = re.compile(r"[^A-Za-z0-9_]")
_UNDERSCORE_RUNS = re.compile(r"_+")


def sanitize_label(label: str) -> str:
    """
    Turn a display name into a path segment.

    Every character outside [A-Za-z0-9_] becomes an underscore, runs of
    underscores collapse into one, the result is lower-cased and cut to
    MAX_LABEL_LENGTH. Never fails: an empty string comes back empty and the
    caller decides whether that is acceptable.
    """
    if not label:
        return ""
    segment = _INVALID_LABEL_CHARS.sub("_", label)
    segment = _UNDERSCORE_RUNS.sub("_", segment)
    return segment.lower()[:MAX_LABEL_LENGTH]


def build_path(parent_path: Optional[str], label: str) -> str:
    """Path of a node with `label` placed under `parent_path` (None for roots)."""
    if not parent_path:
        return label
    return f"{parent_path}{PATH_SEPARATOR}{label}"


def split_path(path: str) -> List[str]:
    return path.split(PATH_SEPARATOR) if path else []


def path_depth(path: str) -> int:
    """Number of segments; roots have depth 1."""
    return len(split_path(path))


def ancestor_paths(path: str) -> List[str]:
    """
    Every prefix of `path`, root first, ending with `path` itself.

    >>> ancestor_paths("a.b.c")
    ['a', 'a.b', 'a.b.c']
    """
    segments = split_path(path)
    return [PATH_SEPARATOR.join(segments[:i]) for i in range(1, len(segments) + 1)]


def descendant_prefix(path: str) -> str:
    """String every descendant path starts with."""
    return f"{path}{PATH_SEPARATOR}"


def is_strict_prefix(ancestor_path: str, path: str) -> bool:
    """True if `path` lies strictly below `ancestor_path`."""
    if not ancestor_path or not path:
        return False
    return path.startswith(descendant_prefix(ancestor_path))


def rebase_path(path: str, old_prefix: str, new_prefix: str) -> str:
    """
    Replace the `old_prefix` part of `path` with `new_prefix`, keeping the
    relative segment chain below it unchanged.
    """
    if path == old_prefix:
        return new_prefix
    if not is_strict_prefix(old_prefix, path):
        raise ValueError(f"'{path}' is not below '{old_prefix}'")
    return new_prefix + path[len(old_prefix):]
