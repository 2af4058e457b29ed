"""Canonical resource name normalization."""

from __future__ import annotations

from pathlib import Path

from classfinder.classpath.errors import InvalidResourceNameError


def normalize_resource_name(raw_path: str, entry_root: Path | str | None = None) -> str:
    """Convert a raw entry-relative or archive member path into a resource name.

    Separators become ``/``, a leading separator is dropped and ``.`` segments
    collapse. Case is preserved. An absolute ``raw_path`` under ``entry_root``
    is made relative to it; relative paths are never trimmed. Empty names and
    names with ``..`` segments raise ``InvalidResourceNameError``.
    """
    normalized = raw_path.replace("\\", "/")
    if entry_root is not None and _is_absolute(normalized):
        root = str(entry_root).replace("\\", "/").rstrip("/")
        if _is_absolute(root) and normalized.startswith(f"{root}/"):
            normalized = normalized[len(root) + 1 :]

    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if not parts:
        raise InvalidResourceNameError("Resource name is empty", raw_path)
    if any(part == ".." for part in parts):
        raise InvalidResourceNameError("Resource name escapes the entry root", raw_path)
    return "/".join(parts)


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or path[1:3] == ":/"
