"""In-memory index of resource names across an ordered classpath."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from classfinder.classpath.errors import (
    ClasspathError,
    EntryNotFoundError,
    InvalidResourceNameError,
)
from classfinder.classpath.ignore import IgnoreFilter
from classfinder.classpath.models import (
    INVALID_NAME,
    NOT_FOUND,
    UNREADABLE,
    DiagnosticSink,
    EntryDiagnostic,
    discard_diagnostic,
)
from classfinder.classpath.names import normalize_resource_name
from classfinder.classpath.readers import ClasspathEntry, classify_entry, reader_for

_CLASS_SUFFIX = ".class"


class ClasspathDescriptor:
    """Maps each resource name to the entries providing it, in classpath order."""

    def __init__(
        self,
        ignore_filter: IgnoreFilter | None = None,
        diagnostics: DiagnosticSink | None = None,
    ) -> None:
        self._ignore_filter = ignore_filter or IgnoreFilter()
        self._diagnostics = diagnostics or discard_diagnostic
        self._index: dict[str, dict[ClasspathEntry, None]] = {}
        self._entries: dict[ClasspathEntry, None] = {}

    @property
    def entries(self) -> tuple[ClasspathEntry, ...]:
        """Return successfully indexed entries in add order."""
        return tuple(self._entries)

    def add(self, entry: ClasspathEntry | Path | str) -> None:
        """Index one entry.

        Raises ``EntryNotFoundError`` when the path is missing and
        ``EntryUnreadableError`` when it cannot be listed. Names from an entry
        are merged only once its listing has completed.
        """
        if isinstance(entry, ClasspathEntry):
            resolved = ClasspathEntry(path=entry.path.absolute(), kind=entry.kind)
            if not resolved.path.exists():
                raise EntryNotFoundError(str(resolved.path))
        else:
            resolved = classify_entry(entry)

        accepted: list[str] = []
        for raw_name in reader_for(resolved).list_resources(resolved):
            try:
                name = normalize_resource_name(raw_name)
            except InvalidResourceNameError as exc:
                self._diagnostics(
                    EntryDiagnostic(
                        path=f"{resolved.path}!{raw_name}",
                        kind=INVALID_NAME,
                        reason=exc.reason,
                    )
                )
                continue
            if self._ignore_filter.should_ignore(name):
                continue
            accepted.append(name)

        for name in accepted:
            self._index.setdefault(name, {})[resolved] = None
        self._entries[resolved] = None

    def add_all(self, entries: Iterable[ClasspathEntry | Path | str]) -> tuple[EntryDiagnostic, ...]:
        """Index entries in order, collecting one diagnostic per skipped entry."""
        skipped: list[EntryDiagnostic] = []
        for entry in entries:
            try:
                self.add(entry)
            except EntryNotFoundError as exc:
                diagnostic = EntryDiagnostic(path=exc.path, kind=NOT_FOUND, reason=exc.reason)
            except ClasspathError as exc:
                diagnostic = EntryDiagnostic(path=exc.path, kind=UNREADABLE, reason=exc.reason)
            else:
                continue
            skipped.append(diagnostic)
            self._diagnostics(diagnostic)
        return tuple(skipped)

    def get_resource_names(self) -> set[str]:
        """Return every indexed resource name."""
        return set(self._index)

    def get_entries_providing(self, name: str) -> tuple[ClasspathEntry, ...]:
        """Return entries providing ``name``; the first one shadows the rest."""
        providers = self._index.get(name)
        if providers is None:
            return ()
        return tuple(providers)

    def find_by_query(self, query: str) -> dict[str, tuple[ClasspathEntry, ...]]:
        """Return names ending with ``query`` and their providing entries.

        ``Foo``, ``x.Foo``, ``com/x/Foo`` and ``com/x/Foo.class`` all match
        ``com/x/Foo.class``.
        """
        if not query:
            return {}
        return {
            name: tuple(self._index[name])
            for name in sorted(self._index)
            if _matches_query(name, query)
        }

    def find_duplicates(self) -> dict[str, tuple[ClasspathEntry, ...]]:
        """Return every name provided by more than one entry."""
        return {
            name: tuple(self._index[name])
            for name in sorted(self._index)
            if len(self._index[name]) > 1
        }


def _matches_query(name: str, query: str) -> bool:
    if name.endswith(query):
        return True
    stem = name[: -len(_CLASS_SUFFIX)] if name.endswith(_CLASS_SUFFIX) else name
    if stem.endswith(query):
        return True
    return stem.replace("/", ".").endswith(query)
