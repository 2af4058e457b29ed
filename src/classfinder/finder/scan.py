"""Per-scope duplicate scans over a project's classpaths."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from classfinder.classpath import (
    ClasspathDescriptor,
    ClasspathEntry,
    DiagnosticSink,
    EntryDiagnostic,
    build_ignore_filter,
)
from classfinder.classpath.models import IGNORED_DEPENDENCY, discard_diagnostic
from classfinder.finder.models import (
    ALL_SCOPES,
    Artifact,
    FinderSettings,
    MatchSource,
    ProjectModel,
    QueryMatch,
    Scope,
    ScopeReport,
)
from classfinder.finder.resolution import artifacts_by_file, lookup_artifact

SinkFactory = Callable[[Scope], DiagnosticSink]


def scan_scope(
    project: ProjectModel,
    scope: Scope,
    settings: FinderSettings,
    sink: DiagnosticSink | None = None,
) -> ScopeReport:
    """Index one scope's classpath and answer the configured query.

    Raises ``DependencyResolutionRequiredError`` when a dependency of the scope
    has no physical file; every other problem is reported in ``skipped``.
    """
    emit = sink or discard_diagnostic
    mapping = artifacts_by_file(project, project.artifacts_for(scope))

    entries: list[Path] = []
    ignored: list[EntryDiagnostic] = []
    for element in project.classpath(scope):
        artifact = lookup_artifact(mapping, element)
        if artifact is not None and _is_ignored_dependency(artifact, settings.ignored_dependencies):
            diagnostic = EntryDiagnostic(
                path=str(element),
                kind=IGNORED_DEPENDENCY,
                reason=f"Dependency {artifact.coordinates} is ignored",
            )
            ignored.append(diagnostic)
            emit(diagnostic)
            continue
        entries.append(element)

    descriptor = ClasspathDescriptor(
        ignore_filter=build_ignore_filter(
            use_default_ignore_list=settings.use_default_ignore_list,
            ignored_resources=settings.ignored_resources,
        ),
        diagnostics=emit,
    )
    skipped = descriptor.add_all(entries)

    if settings.report_all_duplicates:
        found = descriptor.find_duplicates()
    elif settings.class_name:
        found = descriptor.find_by_query(settings.class_name)
    else:
        found = {}

    matches = tuple(
        QueryMatch(name=name, sources=_sources(providers, mapping))
        for name, providers in found.items()
    )
    return ScopeReport(
        scope=scope,
        entry_count=len(descriptor.entries),
        resource_count=len(descriptor.get_resource_names()),
        matches=matches,
        skipped=tuple(ignored) + skipped,
    )


def run_finder(
    project: ProjectModel,
    settings: FinderSettings,
    sink_factory: SinkFactory | None = None,
) -> tuple[ScopeReport, ...]:
    """Scan every enabled scope in compile, runtime, test order."""
    if settings.skip:
        return ()
    reports: list[ScopeReport] = []
    for scope in ALL_SCOPES:
        if not settings.checks(scope):
            continue
        sink = sink_factory(scope) if sink_factory is not None else None
        reports.append(scan_scope(project, scope, settings, sink=sink))
    return tuple(reports)


def _is_ignored_dependency(artifact: Artifact, ignored_dependencies: tuple[str, ...]) -> bool:
    return any(artifact.matches_coordinates(pattern) for pattern in ignored_dependencies)


def _sources(
    providers: tuple[ClasspathEntry, ...],
    mapping: dict[Path, Artifact | None],
) -> tuple[MatchSource, ...]:
    output: list[MatchSource] = []
    for entry in providers:
        artifact = lookup_artifact(mapping, entry.path)
        output.append(
            MatchSource(
                path=str(entry.path),
                coordinates=artifact.coordinates if artifact is not None else None,
            )
        )
    return tuple(output)
