"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from classfinder.classpath import parse_ignore_pattern
from classfinder.finder.models import (
    ALL_SCOPES,
    Artifact,
    FinderSettings,
    ProjectModel,
    Scope,
    parse_coordinates,
)

CONFIG_FILE_NAME = "classfinder.toml"
DEFAULT_OUTPUT_DIRECTORY = Path("target") / "classes"
DEFAULT_TEST_OUTPUT_DIRECTORY = Path("target") / "test-classes"

_BOOLEAN_SETTINGS = (
    "use_default_ignore_list",
    "check_compile_classpath",
    "check_runtime_classpath",
    "check_test_classpath",
    "skip",
    "report_all_duplicates",
)


@dataclass(slots=True, frozen=True)
class FinderConfig:
    """Fully merged finder configuration."""

    project: ProjectModel
    settings: FinderSettings

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "project_root": str(self.project.root),
            "output_directory": _optional_str(self.project.output_directory),
            "test_output_directory": _optional_str(self.project.test_output_directory),
            "classpath": {
                scope.value: [str(path) for path in self.project.classpath(scope)]
                for scope in ALL_SCOPES
            },
            "artifacts": [artifact.coordinates for artifact in self.project.artifacts],
            "finder": {
                "use_default_ignore_list": self.settings.use_default_ignore_list,
                "ignored_resources": list(self.settings.ignored_resources),
                "ignored_dependencies": list(self.settings.ignored_dependencies),
                "check_compile_classpath": self.settings.check_compile_classpath,
                "check_runtime_classpath": self.settings.check_runtime_classpath,
                "check_test_classpath": self.settings.check_test_classpath,
                "skip": self.settings.skip,
                "class_name": self.settings.class_name,
                "report_all_duplicates": self.settings.report_all_duplicates,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    class_name: str | None = None
    use_default_ignore_list: bool | None = None
    extra_ignored_resources: tuple[str, ...] = ()
    extra_ignored_dependencies: tuple[str, ...] = ()
    skip: bool | None = None
    report_all_duplicates: bool | None = None
    scopes: tuple[Scope, ...] | None = None
    compile_classpath: tuple[Path, ...] | None = None
    runtime_classpath: tuple[Path, ...] | None = None
    test_classpath: tuple[Path, ...] | None = None


def default_config(project_root: Path) -> FinderConfig:
    """Build default config for a given project root."""
    resolved_root = project_root.resolve()
    return FinderConfig(
        project=ProjectModel(
            root=resolved_root,
            output_directory=resolved_root / DEFAULT_OUTPUT_DIRECTORY,
            test_output_directory=resolved_root / DEFAULT_TEST_OUTPUT_DIRECTORY,
        ),
        settings=FinderSettings(),
    )


def load_config_file(config_path: Path) -> dict[str, object]:
    """Load an optional TOML classpath manifest."""
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{config_path.name} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _get_array_of_tables(payload: dict[str, object], key: str) -> list[dict[str, object]]:
    value = payload.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValueError(f"Config section '{key}' must be an array of tables.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_string(value: object, section: str, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Config field '{section}.{field}' must be a string.")
    return value


def _resolve_path(root: Path, raw: str) -> Path:
    path = Path(raw)
    if not path.is_absolute():
        path = root / path
    return path.absolute()


def merge_config(
    base: FinderConfig, payload: dict[str, object], overrides: CliOverrides
) -> FinderConfig:
    """Merge defaults, manifest file, then CLI/startup overrides."""
    finder_payload = _get_table(payload, "finder")
    project_payload = _get_table(payload, "project")
    classpath_payload = _get_table(payload, "classpath")
    artifacts_payload = _get_array_of_tables(payload, "artifacts")
    references_payload = _get_array_of_tables(payload, "references")
    root = base.project.root

    settings = base.settings
    for name in _BOOLEAN_SETTINGS:
        if name not in finder_payload:
            continue
        raw = finder_payload[name]
        if not isinstance(raw, bool):
            raise ValueError(f"Config field 'finder.{name}' must be a boolean.")
        settings = replace(settings, **{name: raw})
    if "ignored_resources" in finder_payload:
        settings = replace(
            settings,
            ignored_resources=_tuple_of_strings(
                finder_payload["ignored_resources"], "finder", "ignored_resources"
            ),
        )
    if "ignored_dependencies" in finder_payload:
        settings = replace(
            settings,
            ignored_dependencies=_tuple_of_strings(
                finder_payload["ignored_dependencies"], "finder", "ignored_dependencies"
            ),
        )
    if "class_name" in finder_payload:
        settings = replace(
            settings,
            class_name=_optional_string(finder_payload["class_name"], "finder", "class_name"),
        )

    output_directory = base.project.output_directory
    raw_output = _optional_string(
        project_payload.get("output_directory"), "project", "output_directory"
    )
    if raw_output is not None:
        output_directory = _resolve_path(root, raw_output)
    test_output_directory = base.project.test_output_directory
    raw_test_output = _optional_string(
        project_payload.get("test_output_directory"), "project", "test_output_directory"
    )
    if raw_test_output is not None:
        test_output_directory = _resolve_path(root, raw_test_output)

    classpaths = dict(base.project.classpaths)
    for scope in ALL_SCOPES:
        if scope.value not in classpath_payload:
            continue
        raw_paths = _tuple_of_strings(classpath_payload[scope.value], "classpath", scope.value)
        classpaths[scope] = tuple(_resolve_path(root, raw) for raw in raw_paths)

    artifacts = base.project.artifacts
    if artifacts_payload:
        artifacts = tuple(_parse_artifact(root, item) for item in artifacts_payload)
    references = dict(base.project.references)
    for item in references_payload:
        coordinates, reference = _parse_reference(root, item)
        references[coordinates] = reference

    merged = FinderConfig(
        project=ProjectModel(
            root=root,
            output_directory=output_directory,
            test_output_directory=test_output_directory,
            classpaths=classpaths,
            artifacts=artifacts,
            references=references,
        ),
        settings=settings,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: FinderConfig, overrides: CliOverrides) -> FinderConfig:
    """Apply startup overrides at highest precedence."""
    settings = config.settings
    if overrides.class_name is not None:
        settings = replace(settings, class_name=overrides.class_name)
    if overrides.use_default_ignore_list is not None:
        settings = replace(settings, use_default_ignore_list=overrides.use_default_ignore_list)
    if overrides.skip is not None:
        settings = replace(settings, skip=overrides.skip)
    if overrides.report_all_duplicates is not None:
        settings = replace(settings, report_all_duplicates=overrides.report_all_duplicates)
    if overrides.extra_ignored_resources:
        settings = replace(
            settings,
            ignored_resources=settings.ignored_resources + overrides.extra_ignored_resources,
        )
    if overrides.extra_ignored_dependencies:
        settings = replace(
            settings,
            ignored_dependencies=settings.ignored_dependencies
            + overrides.extra_ignored_dependencies,
        )
    if overrides.scopes is not None:
        settings = replace(
            settings,
            check_compile_classpath=Scope.COMPILE in overrides.scopes,
            check_runtime_classpath=Scope.RUNTIME in overrides.scopes,
            check_test_classpath=Scope.TEST in overrides.scopes,
        )
    _validate_ignore_patterns(settings.ignored_resources)

    classpaths = dict(config.project.classpaths)
    scope_overrides = {
        Scope.COMPILE: overrides.compile_classpath,
        Scope.RUNTIME: overrides.runtime_classpath,
        Scope.TEST: overrides.test_classpath,
    }
    for scope, paths in scope_overrides.items():
        if paths is not None:
            classpaths[scope] = tuple(_resolve_path(config.project.root, str(p)) for p in paths)

    return FinderConfig(
        project=replace(config.project, classpaths=classpaths),
        settings=settings,
    )


def load_effective_config(
    project_root: Path,
    config_path: Path | None = None,
    overrides: CliOverrides | None = None,
) -> FinderConfig:
    """Load effective config using merge order defaults -> manifest -> overrides."""
    resolved_root = project_root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(config_path or resolved_root / CONFIG_FILE_NAME)
    return merge_config(base, payload, overrides or CliOverrides())


def _parse_artifact(root: Path, item: dict[str, object]) -> Artifact:
    raw_coordinates = item.get("coordinates")
    if not isinstance(raw_coordinates, str):
        raise ValueError("Config field 'artifacts.coordinates' must be a string.")
    group_id, artifact_id, version = parse_coordinates(raw_coordinates)
    artifact_type = _optional_string(item.get("type"), "artifacts", "type") or "jar"
    raw_file = _optional_string(item.get("file"), "artifacts", "file")
    scopes = ALL_SCOPES
    if "scopes" in item:
        names = _tuple_of_strings(item["scopes"], "artifacts", "scopes")
        try:
            scopes = tuple(Scope(name) for name in names)
        except ValueError as exc:
            raise ValueError(
                "Config field 'artifacts.scopes' must only contain compile, runtime or test."
            ) from exc
    return Artifact(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        type=artifact_type,
        file=_resolve_path(root, raw_file) if raw_file is not None else None,
        scopes=scopes,
    )


def _parse_reference(root: Path, item: dict[str, object]) -> tuple[str, ProjectModel]:
    raw_coordinates = item.get("coordinates")
    if not isinstance(raw_coordinates, str):
        raise ValueError("Config field 'references.coordinates' must be a string.")
    coordinates = ":".join(parse_coordinates(raw_coordinates))
    raw_output = _optional_string(item.get("output_directory"), "references", "output_directory")
    raw_test_output = _optional_string(
        item.get("test_output_directory"), "references", "test_output_directory"
    )
    reference = ProjectModel(
        root=root,
        output_directory=_resolve_path(root, raw_output) if raw_output is not None else None,
        test_output_directory=(
            _resolve_path(root, raw_test_output) if raw_test_output is not None else None
        ),
    )
    return coordinates, reference


def _validate_ignore_patterns(patterns: tuple[str, ...]) -> None:
    for pattern in patterns:
        parse_ignore_pattern(pattern)


def _optional_str(path: Path | None) -> str | None:
    if path is None:
        return None
    return str(path)
