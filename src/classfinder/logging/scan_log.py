"""Structured JSONL scan log and diagnostic sinks."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from classfinder.classpath.models import DiagnosticSink, EntryDiagnostic
from classfinder.finder.models import Scope, ScopeReport

SCOPE_STARTED = "scope_started"
SCOPE_FINISHED = "scope_finished"
ENTRY_SKIPPED = "entry_skipped"
CLASS_FOUND = "class_found"


@dataclass(slots=True, frozen=True)
class ScanEvent:
    """Single event recorded during a finder run."""

    timestamp: str
    scope: str
    event: str
    ok: bool
    detail: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonlScanLogger:
    """Append-only JSONL scan logger."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: ScanEvent) -> None:
        """Append an event as one JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def record(self, scope: Scope, event: str, ok: bool, **detail: object) -> None:
        self.append(
            ScanEvent(
                timestamp=utc_timestamp(),
                scope=scope.value,
                event=event,
                ok=ok,
                detail=dict(detail),
            )
        )

    def record_report(self, report: ScopeReport) -> None:
        """Append one event per match followed by the scope summary."""
        for match in report.matches:
            self.record(
                report.scope,
                CLASS_FOUND,
                True,
                name=match.name,
                sources=[source.path for source in match.sources],
            )
        self.record(
            report.scope,
            SCOPE_FINISHED,
            True,
            entry_count=report.entry_count,
            resource_count=report.resource_count,
            match_count=len(report.matches),
            skipped_count=len(report.skipped),
        )


def collecting_sink() -> tuple[list[EntryDiagnostic], DiagnosticSink]:
    """Return a list and a sink appending to it."""
    collected: list[EntryDiagnostic] = []
    return collected, collected.append


def jsonl_sink(logger: JsonlScanLogger, scope: Scope) -> DiagnosticSink:
    """Return a sink recording each diagnostic as an ``entry_skipped`` event."""

    def sink(diagnostic: EntryDiagnostic) -> None:
        logger.record(scope, ENTRY_SKIPPED, False, **asdict(diagnostic))

    return sink


def fan_out(*sinks: DiagnosticSink) -> DiagnosticSink:
    """Combine sinks so each diagnostic reaches all of them in order."""

    def sink(diagnostic: EntryDiagnostic) -> None:
        for target in sinks:
            target(diagnostic)

    return sink
