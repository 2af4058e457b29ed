"""Classification of classpath entries and per-kind resource listing."""

from __future__ import annotations

import enum
import os
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from classfinder.classpath.errors import EntryNotFoundError, EntryUnreadableError


class EntryKind(enum.Enum):
    """Container kinds a classpath entry can be."""

    DIRECTORY = "directory"
    ARCHIVE = "archive"


@dataclass(slots=True, frozen=True)
class ClasspathEntry:
    """One classified physical classpath location."""

    path: Path
    kind: EntryKind

    def __str__(self) -> str:
        return str(self.path)


class EntryReader(Protocol):
    """Lists raw resource paths contained in one classpath entry."""

    kind: EntryKind

    def list_resources(self, entry: ClasspathEntry) -> Iterator[str]:
        """Yield raw relative paths; re-scans the entry on every call."""


class DirectoryEntryReader:
    """Recursive filesystem walk rooted at a directory entry."""

    kind = EntryKind.DIRECTORY

    def list_resources(self, entry: ClasspathEntry) -> Iterator[str]:
        root = entry.path
        if not root.is_dir():
            raise EntryUnreadableError("Classpath entry is not a directory", str(root))
        try:
            with os.scandir(root) as entries:
                top_level = sorted(entries, key=lambda item: item.name)
        except OSError as exc:
            raise EntryUnreadableError(f"Directory cannot be listed ({exc})", str(root)) from exc
        yield from _walk(root, top_level)


def _walk(root: Path, top_level: list[os.DirEntry[str]]) -> Iterator[str]:
    """Walk depth-first in name order without following directory symlinks."""
    stack: list[list[os.DirEntry[str]]] = [list(reversed(top_level))]
    while stack:
        pending = stack[-1]
        if not pending:
            stack.pop()
            continue
        item = pending.pop()
        if item.is_dir(follow_symlinks=False):
            try:
                with os.scandir(item.path) as children:
                    ordered = sorted(children, key=lambda child: child.name)
            except OSError:
                continue
            stack.append(list(reversed(ordered)))
            continue
        if not item.is_file():
            continue
        yield Path(item.path).relative_to(root).as_posix()


class ArchiveEntryReader:
    """Central-directory listing of a zip-format archive (jar, war, zip)."""

    kind = EntryKind.ARCHIVE

    def list_resources(self, entry: ClasspathEntry) -> Iterator[str]:
        try:
            archive = zipfile.ZipFile(entry.path)
        except (zipfile.BadZipFile, OSError, ValueError) as exc:
            raise EntryUnreadableError(f"Archive cannot be opened ({exc})", str(entry.path)) from exc
        with archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                yield info.filename


_READERS: dict[EntryKind, EntryReader] = {
    EntryKind.DIRECTORY: DirectoryEntryReader(),
    EntryKind.ARCHIVE: ArchiveEntryReader(),
}


def reader_for(entry: ClasspathEntry) -> EntryReader:
    """Return the reader registered for the entry's kind."""
    return _READERS[entry.kind]


def classify_entry(path: Path | str) -> ClasspathEntry:
    """Classify a path as a directory or archive entry.

    Directories win over archives. A missing path raises ``EntryNotFoundError``;
    anything else that is not a zip archive raises ``EntryUnreadableError``.
    """
    candidate = Path(path).absolute()
    if not candidate.exists():
        raise EntryNotFoundError(str(candidate))
    if candidate.is_dir():
        return ClasspathEntry(path=candidate, kind=EntryKind.DIRECTORY)
    if candidate.is_file() and zipfile.is_zipfile(candidate):
        return ClasspathEntry(path=candidate, kind=EntryKind.ARCHIVE)
    raise EntryUnreadableError("Not a directory or a recognized archive", str(candidate))
