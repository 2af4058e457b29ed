"""Mapping of logical dependencies to physical classpath locations."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from classfinder.classpath.errors import DependencyResolutionRequiredError
from classfinder.finder.models import Artifact, ProjectModel

TEST_JAR_TYPE = "test-jar"


def local_project_path(project: ProjectModel, artifact: Artifact) -> Path | None:
    """Return the sibling module output directory backing ``artifact``, if any.

    A test-jar maps to the owning module's test output when it exists. Any
    other type maps to the owning module's output directory. It is never the
    current project's output directory, even though the reference is
    resolved from the current project.
    """
    owning = project.references.get(artifact.coordinates)
    if owning is None:
        return None
    if artifact.type == TEST_JAR_TYPE:
        test_output = owning.test_output_directory
        if test_output is not None and test_output.exists():
            return test_output
        return None
    return owning.output_directory


def artifacts_by_file(
    project: ProjectModel,
    artifacts: Iterable[Artifact],
) -> dict[Path, Artifact | None]:
    """Map every physical location of the given artifacts back to them.

    An artifact maps to zero, one or two paths: its sibling module output and
    its repository file. One with neither raises
    ``DependencyResolutionRequiredError``. The project's own output directory
    maps to ``None`` when it exists.
    """
    output: dict[Path, Artifact | None] = {}
    for artifact in artifacts:
        local_path = local_project_path(project, artifact)
        repo_path = artifact.file
        if local_path is None and repo_path is None:
            raise DependencyResolutionRequiredError(artifact.coordinates)
        if local_path is not None:
            output[_key(local_path)] = artifact
        if repo_path is not None:
            output[_key(repo_path)] = artifact

    for own_output in (project.output_directory, project.test_output_directory):
        if own_output is not None and own_output.exists():
            output.setdefault(_key(own_output), None)
    return output


def lookup_artifact(mapping: dict[Path, Artifact | None], path: Path | str) -> Artifact | None:
    """Return the artifact owning ``path``, or None for project outputs and unknowns."""
    return mapping.get(_key(Path(path)))


def _key(path: Path) -> Path:
    return path.resolve(strict=False)
