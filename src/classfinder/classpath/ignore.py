"""Ignore-list patterns for resource names."""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Final

REGEX_PREFIX: Final[str] = "re:"
_GLOB_CHARS: Final[str] = "*?["

DEFAULT_IGNORED_RESOURCES: Final[tuple[str, ...]] = (
    "META-INF/MANIFEST.MF",
    "META-INF/INDEX.LIST",
    "META-INF/*.SF",
    "META-INF/*.DSA",
    "META-INF/*.RSA",
    "META-INF/*.EC",
    "META-INF/maven/",
    "META-INF/plexus/",
    "META-INF/DEPENDENCIES*",
    "META-INF/DISCLAIMER*",
    "META-INF/README*",
    "re:(META-INF/)?[A-Za-z_.-]*(LICENSE|license|License)[^/]*",
    "re:(META-INF/)?(NOTICE|notice|Notice)[^/]*",
    "re:(META-INF/)?ASL2\\.0(\\.txt|\\.TXT)?",
    "*package.html",
    "*overview.html",
    ".git/",
    ".svn/",
    ".hg/",
    ".bzr/",
)

NamePredicate = Callable[[str], bool]


@dataclass(slots=True, frozen=True)
class IgnorePattern:
    """One ignore rule: literal, directory prefix, glob or regex."""

    kind: str
    value: str

    def matches(self, name: str) -> bool:
        """Return True when ``name`` is excluded by this rule."""
        if self.kind == "literal":
            return name == self.value
        if self.kind == "prefix":
            return name.startswith(self.value)
        if self.kind == "glob":
            return fnmatch.fnmatchcase(name, self.value)
        return re.fullmatch(self.value, name) is not None


def parse_ignore_pattern(raw: str) -> IgnorePattern:
    """Classify a configured pattern string."""
    value = raw.strip()
    if not value:
        raise ValueError("Ignore pattern must be non-empty.")
    if value.startswith(REGEX_PREFIX):
        expression = value[len(REGEX_PREFIX) :]
        try:
            re.compile(expression)
        except re.error as exc:
            raise ValueError(f"Invalid ignore regex '{expression}': {exc}") from exc
        return IgnorePattern(kind="regex", value=expression)
    value = value.replace("\\", "/")
    if any(char in value for char in _GLOB_CHARS):
        return IgnorePattern(kind="glob", value=value)
    if value.endswith("/"):
        return IgnorePattern(kind="prefix", value=value.lstrip("/"))
    return IgnorePattern(kind="literal", value=value.lstrip("/"))


def any_of(predicates: Iterable[NamePredicate]) -> NamePredicate:
    """OR-combine predicates; an empty set never matches."""
    ordered = tuple(predicates)

    def combined(name: str) -> bool:
        return any(predicate(name) for predicate in ordered)

    return combined


class IgnoreFilter:
    """Decides which resource names are left out of the index."""

    def __init__(self, patterns: Iterable[IgnorePattern] = ()) -> None:
        self._patterns = tuple(patterns)
        self._matches = any_of(pattern.matches for pattern in self._patterns)

    @property
    def patterns(self) -> tuple[IgnorePattern, ...]:
        return self._patterns

    def should_ignore(self, name: str) -> bool:
        """Return True when any enabled pattern matches ``name``."""
        return self._matches(name)


def build_ignore_filter(
    use_default_ignore_list: bool = True,
    ignored_resources: Iterable[str] = (),
) -> IgnoreFilter:
    """Build a filter from the default list flag and caller patterns."""
    raw_patterns: list[str] = []
    if use_default_ignore_list:
        raw_patterns.extend(DEFAULT_IGNORED_RESOURCES)
    raw_patterns.extend(ignored_resources)
    return IgnoreFilter(parse_ignore_pattern(raw) for raw in raw_patterns)
