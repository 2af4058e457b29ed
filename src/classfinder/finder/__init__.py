"""Project-level duplicate scans per classpath scope."""

from .models import (
    ALL_SCOPES,
    Artifact,
    FinderSettings,
    MatchSource,
    ProjectModel,
    QueryMatch,
    Scope,
    ScopeReport,
    parse_coordinates,
)
from .report import format_report, report_to_dict
from .resolution import artifacts_by_file, local_project_path, lookup_artifact
from .scan import run_finder, scan_scope

__all__ = [
    "ALL_SCOPES",
    "Artifact",
    "FinderSettings",
    "MatchSource",
    "ProjectModel",
    "QueryMatch",
    "Scope",
    "ScopeReport",
    "artifacts_by_file",
    "format_report",
    "local_project_path",
    "lookup_artifact",
    "parse_coordinates",
    "report_to_dict",
    "run_finder",
    "scan_scope",
]
