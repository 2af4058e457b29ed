"""Human-readable and serializable renderings of scope reports."""

from __future__ import annotations

from dataclasses import asdict

from classfinder.finder.models import ScopeReport


def format_report(report: ScopeReport, include_skipped: bool = True) -> list[str]:
    """Render one scope report as ``FOUND:``/``source:`` lines."""
    lines = [f"Checking {report.scope.value} classpath"]
    for match in report.matches:
        lines.append(f"FOUND: {match.name}")
        for source in match.sources:
            if source.coordinates is None:
                lines.append(f"\tsource: {source.path}")
                continue
            lines.append(f"\tsource: {source.path} ({source.coordinates})")
    if not include_skipped:
        return lines
    for diagnostic in report.skipped:
        lines.append(f"SKIPPED [{diagnostic.kind}]: {diagnostic.path} ({diagnostic.reason})")
    return lines


def report_to_dict(report: ScopeReport) -> dict[str, object]:
    """Return a JSON-serializable snapshot of a scope report."""
    return {
        "scope": report.scope.value,
        "entry_count": report.entry_count,
        "resource_count": report.resource_count,
        "matches": [
            {
                "name": match.name,
                "duplicate": match.is_duplicate,
                "sources": [asdict(source) for source in match.sources],
            }
            for match in report.matches
        ],
        "skipped": [asdict(diagnostic) for diagnostic in report.skipped],
    }
