"""Typed models for project layout, dependencies and scan results."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path

from classfinder.classpath.models import EntryDiagnostic


class Scope(enum.Enum):
    """Classpath variants scanned independently."""

    COMPILE = "compile"
    RUNTIME = "runtime"
    TEST = "test"


ALL_SCOPES: tuple[Scope, ...] = (Scope.COMPILE, Scope.RUNTIME, Scope.TEST)


@dataclass(slots=True, frozen=True)
class Artifact:
    """Logical dependency and the repository file it resolved to, if any."""

    group_id: str
    artifact_id: str
    version: str
    type: str = "jar"
    file: Path | None = None
    scopes: tuple[Scope, ...] = ALL_SCOPES

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def matches_coordinates(self, pattern: str) -> bool:
        """Return True when ``pattern`` names this artifact.

        ``group:artifact`` matches any version, ``group:artifact:version`` only
        that version.
        """
        parts = pattern.strip().split(":")
        if len(parts) == 2:
            return parts == [self.group_id, self.artifact_id]
        if len(parts) == 3:
            return parts == [self.group_id, self.artifact_id, self.version]
        return False


def parse_coordinates(value: str) -> tuple[str, str, str]:
    """Split ``group:artifact:version`` coordinates."""
    parts = value.strip().split(":")
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"Coordinates must look like 'group:artifact:version', got '{value}'.")
    return parts[0], parts[1], parts[2]


@dataclass(slots=True, frozen=True)
class ProjectModel:
    """Project build layout plus per-scope ordered classpaths."""

    root: Path
    output_directory: Path | None = None
    test_output_directory: Path | None = None
    classpaths: dict[Scope, tuple[Path, ...]] = field(default_factory=dict)
    artifacts: tuple[Artifact, ...] = ()
    references: dict[str, ProjectModel] = field(default_factory=dict)

    def classpath(self, scope: Scope) -> tuple[Path, ...]:
        """Return the ordered classpath for ``scope``."""
        return self.classpaths.get(scope, ())

    def artifacts_for(self, scope: Scope) -> tuple[Artifact, ...]:
        """Return artifacts that belong to ``scope``."""
        return tuple(artifact for artifact in self.artifacts if scope in artifact.scopes)


@dataclass(slots=True, frozen=True)
class FinderSettings:
    """Behavior switches for one finder run."""

    use_default_ignore_list: bool = True
    ignored_resources: tuple[str, ...] = ()
    ignored_dependencies: tuple[str, ...] = ()
    check_compile_classpath: bool = True
    check_runtime_classpath: bool = True
    check_test_classpath: bool = True
    skip: bool = False
    class_name: str | None = None
    report_all_duplicates: bool = False

    def checks(self, scope: Scope) -> bool:
        """Return True when ``scope`` is enabled."""
        if scope is Scope.COMPILE:
            return self.check_compile_classpath
        if scope is Scope.RUNTIME:
            return self.check_runtime_classpath
        return self.check_test_classpath


@dataclass(slots=True, frozen=True)
class MatchSource:
    """One entry providing a matched resource."""

    path: str
    coordinates: str | None


@dataclass(slots=True, frozen=True)
class QueryMatch:
    """Resource name and its providers, first provider wins at runtime."""

    name: str
    sources: tuple[MatchSource, ...]

    @property
    def is_duplicate(self) -> bool:
        return len(self.sources) > 1


@dataclass(slots=True, frozen=True)
class ScopeReport:
    """Outcome of scanning one scope."""

    scope: Scope
    entry_count: int
    resource_count: int
    matches: tuple[QueryMatch, ...]
    skipped: tuple[EntryDiagnostic, ...]
