"""Typed models shared by the indexer and its callers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

NOT_FOUND = "not_found"
UNREADABLE = "unreadable"
INVALID_NAME = "invalid_name"
IGNORED_DEPENDENCY = "ignored_dependency"


@dataclass(slots=True, frozen=True)
class EntryDiagnostic:
    """Non-fatal finding about one entry or one raw resource name."""

    path: str
    kind: str
    reason: str


DiagnosticSink = Callable[[EntryDiagnostic], None]


def discard_diagnostic(diagnostic: EntryDiagnostic) -> None:
    """Default sink that drops diagnostics."""
    return None
