from __future__ import annotations

import zipfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from classfinder.classpath import (
    ClasspathDescriptor,
    ClasspathEntry,
    EntryDiagnostic,
    EntryKind,
    EntryNotFoundError,
    EntryUnreadableError,
    build_ignore_filter,
)


def _write_jar(path: Path, members: list[str]) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for member in members:
            archive.writestr(member, b"data")
    return path


def _write_classes(root: Path, names: list[str]) -> Path:
    for name in names:
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"\xca\xfe\xba\xbe")
    return root


def _scenario(tmp_path: Path) -> tuple[Path, Path]:
    dir_a = _write_classes(tmp_path / "dirA", ["com/x/Foo.class"])
    jar_b = _write_jar(tmp_path / "jarB.jar", ["com/x/Foo.class", "com/y/Bar.class"])
    return dir_a, jar_b


def test_duplicate_and_unique_resources_across_directory_and_archive(tmp_path: Path) -> None:
    dir_a, jar_b = _scenario(tmp_path)
    descriptor = ClasspathDescriptor()

    assert descriptor.add_all([dir_a, jar_b]) == ()

    assert descriptor.get_resource_names() == {"com/x/Foo.class", "com/y/Bar.class"}
    assert descriptor.get_entries_providing("com/x/Foo.class") == (
        ClasspathEntry(path=dir_a, kind=EntryKind.DIRECTORY),
        ClasspathEntry(path=jar_b, kind=EntryKind.ARCHIVE),
    )
    assert descriptor.get_entries_providing("com/y/Bar.class") == (
        ClasspathEntry(path=jar_b, kind=EntryKind.ARCHIVE),
    )
    assert descriptor.get_entries_providing("com/z/Unknown.class") == ()


def test_provider_order_follows_add_order(tmp_path: Path) -> None:
    dir_a, jar_b = _scenario(tmp_path)

    forward = ClasspathDescriptor()
    forward.add_all([dir_a, jar_b])
    reverse = ClasspathDescriptor()
    reverse.add_all([jar_b, dir_a])

    assert [entry.path for entry in forward.get_entries_providing("com/x/Foo.class")] == [
        dir_a,
        jar_b,
    ]
    assert [entry.path for entry in reverse.get_entries_providing("com/x/Foo.class")] == [
        jar_b,
        dir_a,
    ]


def test_simple_name_query_returns_duplicate_providers(tmp_path: Path) -> None:
    dir_a, jar_b = _scenario(tmp_path)
    descriptor = ClasspathDescriptor()
    descriptor.add_all([dir_a, jar_b])

    found = descriptor.find_by_query("Foo")

    assert list(found) == ["com/x/Foo.class"]
    assert [entry.path for entry in found["com/x/Foo.class"]] == [dir_a, jar_b]
    assert descriptor.find_by_query("x.Foo") == found
    assert descriptor.find_by_query("com/x/Foo.class") == found
    assert descriptor.find_by_query("Missing") == {}
    assert descriptor.find_by_query("") == {}


def test_find_duplicates_lists_only_shared_names(tmp_path: Path) -> None:
    dir_a, jar_b = _scenario(tmp_path)
    descriptor = ClasspathDescriptor()
    descriptor.add_all([dir_a, jar_b])

    assert list(descriptor.find_duplicates()) == ["com/x/Foo.class"]


def test_adding_same_entry_twice_is_idempotent(tmp_path: Path) -> None:
    dir_a, jar_b = _scenario(tmp_path)
    once = ClasspathDescriptor()
    once.add_all([dir_a, jar_b])
    twice = ClasspathDescriptor()
    twice.add_all([dir_a, jar_b, dir_a])
    twice.add(jar_b)

    assert twice.get_resource_names() == once.get_resource_names()
    for name in once.get_resource_names():
        assert twice.get_entries_providing(name) == once.get_entries_providing(name)
    assert twice.entries == once.entries


def test_caller_ignore_pattern_removes_names(tmp_path: Path) -> None:
    dir_a, jar_b = _scenario(tmp_path)
    descriptor = ClasspathDescriptor(
        ignore_filter=build_ignore_filter(ignored_resources=("com/y/*",))
    )
    descriptor.add_all([dir_a, jar_b])

    assert descriptor.get_resource_names() == {"com/x/Foo.class"}
    assert descriptor.get_entries_providing("com/y/Bar.class") == ()


def test_disabling_default_ignore_list_yields_superset(tmp_path: Path) -> None:
    classes = _write_classes(tmp_path / "classes", ["com/x/Foo.class", "META-INF/MANIFEST.MF"])
    jar = _write_jar(
        tmp_path / "lib.jar",
        ["META-INF/MANIFEST.MF", "META-INF/LICENSE.txt", "com/y/Bar.class", "app.properties"],
    )
    with_defaults = ClasspathDescriptor(ignore_filter=build_ignore_filter(True))
    with_defaults.add_all([classes, jar])
    without_defaults = ClasspathDescriptor(ignore_filter=build_ignore_filter(False))
    without_defaults.add_all([classes, jar])

    assert with_defaults.get_resource_names() < without_defaults.get_resource_names()
    assert with_defaults.get_resource_names() == {
        "com/x/Foo.class",
        "com/y/Bar.class",
        "app.properties",
    }


def test_missing_entry_is_reported_once_and_others_indexed(tmp_path: Path) -> None:
    dir_a, jar_b = _scenario(tmp_path)
    extra = _write_jar(tmp_path / "extra.jar", ["org/acme/Util.class"])
    missing = tmp_path / "missing.jar"
    emitted: list[EntryDiagnostic] = []
    descriptor = ClasspathDescriptor(diagnostics=emitted.append)

    skipped = descriptor.add_all([dir_a, missing, jar_b, extra])

    assert [diagnostic.kind for diagnostic in skipped] == ["not_found"]
    assert skipped[0].path == str(missing)
    assert list(skipped) == emitted
    assert descriptor.get_resource_names() == {
        "com/x/Foo.class",
        "com/y/Bar.class",
        "org/acme/Util.class",
    }
    assert [entry.path for entry in descriptor.entries] == [dir_a, jar_b, extra]


def test_unreadable_entry_is_reported_and_skipped(tmp_path: Path) -> None:
    dir_a, _ = _scenario(tmp_path)
    bogus = tmp_path / "bogus.jar"
    bogus.write_text("plain text", encoding="utf-8")
    descriptor = ClasspathDescriptor()

    skipped = descriptor.add_all([bogus, dir_a])

    assert [diagnostic.kind for diagnostic in skipped] == ["unreadable"]
    assert descriptor.get_resource_names() == {"com/x/Foo.class"}


def test_add_raises_distinguishable_errors(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.jar"
    bogus.write_text("plain text", encoding="utf-8")
    descriptor = ClasspathDescriptor()

    with pytest.raises(EntryNotFoundError):
        descriptor.add(tmp_path / "missing")
    with pytest.raises(EntryNotFoundError):
        descriptor.add(ClasspathEntry(path=tmp_path / "gone.jar", kind=EntryKind.ARCHIVE))
    with pytest.raises(EntryUnreadableError):
        descriptor.add(bogus)


def test_invalid_archive_member_is_skipped_with_warning(tmp_path: Path) -> None:
    jar = _write_jar(tmp_path / "evil.jar", ["../escape.class", "com/x/Ok.class"])
    emitted: list[EntryDiagnostic] = []
    descriptor = ClasspathDescriptor(diagnostics=emitted.append)

    assert descriptor.add_all([jar]) == ()

    assert descriptor.get_resource_names() == {"com/x/Ok.class"}
    assert [diagnostic.kind for diagnostic in emitted] == ["invalid_name"]
    assert emitted[0].path.endswith("!../escape.class")


def test_backslash_archive_members_share_canonical_name(tmp_path: Path) -> None:
    classes = _write_classes(tmp_path / "classes", ["com/x/Foo.class"])
    jar = _write_jar(tmp_path / "windows.jar", ["com\\x\\Foo.class"])
    descriptor = ClasspathDescriptor()
    descriptor.add_all([classes, jar])

    assert descriptor.get_resource_names() == {"com/x/Foo.class"}
    assert len(descriptor.get_entries_providing("com/x/Foo.class")) == 2



def test_entry_failing_midway_contributes_nothing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    jar = _write_jar(tmp_path / "lib.jar", ["com/x/Foo.class"])

    class FailingReader:
        kind = EntryKind.ARCHIVE

        def list_resources(self, entry: ClasspathEntry) -> Iterator[str]:
            yield "com/x/Partial.class"
            raise EntryUnreadableError("Archive truncated", str(entry.path))

    monkeypatch.setattr(
        "classfinder.classpath.descriptor.reader_for", lambda entry: FailingReader()
    )
    descriptor = ClasspathDescriptor()

    skipped = descriptor.add_all([jar])

    assert [diagnostic.reason for diagnostic in skipped] == ["Archive truncated"]
    assert descriptor.get_resource_names() == set()
    assert descriptor.entries == ()


def test_relative_caller_built_entry_keeps_leading_segment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_classes(tmp_path / "lib", ["lib/Foo.class"])
    monkeypatch.chdir(tmp_path)
    descriptor = ClasspathDescriptor()

    descriptor.add(ClasspathEntry(path=Path("lib"), kind=EntryKind.DIRECTORY))

    assert descriptor.get_resource_names() == {"lib/Foo.class"}
    assert descriptor.entries == (
        ClasspathEntry(path=Path.cwd() / "lib", kind=EntryKind.DIRECTORY),
    )


def test_caller_built_entry_and_plain_path_share_one_index_key(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_classes(tmp_path / "classes", ["com/x/Foo.class"])
    monkeypatch.chdir(tmp_path)
    descriptor = ClasspathDescriptor()

    descriptor.add(Path("classes"))
    descriptor.add(ClasspathEntry(path=Path("classes"), kind=EntryKind.DIRECTORY))

    assert len(descriptor.entries) == 1
    assert len(descriptor.get_entries_providing("com/x/Foo.class")) == 1


def test_archive_with_undecodable_names_does_not_stop_the_scan(tmp_path: Path) -> None:
    dir_a, _ = _scenario(tmp_path)
    mangled = _write_jar(tmp_path / "mangled.jar", ["org/acme/Bad.class"])
    data = bytearray(mangled.read_bytes())
    central = data.index(b"PK\x01\x02")
    flags = int.from_bytes(data[central + 8 : central + 10], "little")
    data[central + 8 : central + 10] = (flags | 0x800).to_bytes(2, "little")
    mangled.write_bytes(bytes(data).replace(b"Bad", b"\xff\xfe\xfd"))
    descriptor = ClasspathDescriptor()

    skipped = descriptor.add_all([mangled, dir_a])

    assert [diagnostic.kind for diagnostic in skipped] == ["unreadable"]
    assert skipped[0].path == str(mangled)
    assert descriptor.get_resource_names() == {"com/x/Foo.class"}
