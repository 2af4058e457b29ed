"""Classpath entry reading and resource indexing."""

from .descriptor import ClasspathDescriptor
from .errors import (
    ClasspathError,
    DependencyResolutionRequiredError,
    EntryNotFoundError,
    EntryUnreadableError,
    InvalidResourceNameError,
)
from .ignore import (
    DEFAULT_IGNORED_RESOURCES,
    IgnoreFilter,
    IgnorePattern,
    any_of,
    build_ignore_filter,
    parse_ignore_pattern,
)
from .models import DiagnosticSink, EntryDiagnostic
from .names import normalize_resource_name
from .readers import (
    ArchiveEntryReader,
    ClasspathEntry,
    DirectoryEntryReader,
    EntryKind,
    classify_entry,
    reader_for,
)

__all__ = [
    "ArchiveEntryReader",
    "ClasspathDescriptor",
    "ClasspathEntry",
    "ClasspathError",
    "DEFAULT_IGNORED_RESOURCES",
    "DependencyResolutionRequiredError",
    "DiagnosticSink",
    "DirectoryEntryReader",
    "EntryDiagnostic",
    "EntryKind",
    "EntryNotFoundError",
    "EntryUnreadableError",
    "IgnoreFilter",
    "IgnorePattern",
    "InvalidResourceNameError",
    "any_of",
    "build_ignore_filter",
    "classify_entry",
    "normalize_resource_name",
    "parse_ignore_pattern",
    "reader_for",
]
