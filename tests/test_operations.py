# SPDX-License-Identifier: MIT
"""Tests for the vendoring operations."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from go_vend.config import BuildContext
from go_vend.errors import (
    DestinationExistsError,
    DuplicatePackageError,
    ErrorKind,
    GoParseError,
    ImportPathError,
    NotInRootError,
    PackageNotFoundError,
    StandardPackageError,
)
from go_vend.operations import (
    copy_package,
    list_imports,
    move_package,
    package_info,
    update_paths,
    vendor_init,
)
from go_vend.parser import parse_file


def imports_of(path: Path) -> list[str]:
    return parse_file(path.read_text()).import_paths


@pytest.fixture
def a1_dir(gopath: Path) -> Path:
    return gopath / "src" / "other.com" / "y" / "a1"


class TestCopyPackage:
    """Tests for copy_package."""

    def test_copy_and_rewrite(self, build_ctx: BuildContext, app_dir: Path, a1_dir: Path):
        old, new = copy_package(build_ctx, app_dir, "other.com/y/a1", "vendor/a")
        assert (old, new) == ("other.com/y/a1", "example.com/app/vendor/a")

        copy = app_dir / "vendor" / "a"
        assert (copy / "inner" / "inner.go").exists()
        # canonical import comment stripped from the copy
        assert "import \"other.com/y/a1\"" not in (copy / "a.go").read_text()
        assert (copy / "a.go").read_text().splitlines()[1] == "package a"
        # references inside the copy follow it
        assert imports_of(copy / "a.go") == ["example.com/app/vendor/a/inner"]
        assert "example.com/app/vendor/a" in imports_of(copy / "a_test.go")
        # the working package imports the copy
        assert "example.com/app/vendor/a" in imports_of(app_dir / "main.go")
        assert "other.com/y/a1" not in imports_of(app_dir / "main.go")
        # the source is untouched
        assert imports_of(a1_dir / "a.go") == ["other.com/y/a1/inner"]
        assert 'import "other.com/y/a1"' in (a1_dir / "a.go").read_text()

    def test_trailing_comment_kept(self, build_ctx: BuildContext, app_dir: Path):
        copy_package(build_ctx, app_dir, "other.com/y/a1", "vendor/a")
        assert '\t"example.com/app/vendor/a" // helpers\n' in (app_dir / "main.go").read_text()

    def test_destination_exists(self, build_ctx: BuildContext, app_dir: Path):
        (app_dir / "vendor" / "a").mkdir(parents=True)
        with pytest.raises(DestinationExistsError) as exc_info:
            copy_package(build_ctx, app_dir, "other.com/y/a1", "vendor/a")
        assert exc_info.value.kind is ErrorKind.DESTINATION_EXISTS
        assert imports_of(app_dir / "main.go")[2] == "other.com/y/a1"

    def test_force_replaces_destination(self, build_ctx: BuildContext, app_dir: Path):
        stale = app_dir / "vendor" / "a" / "stale.go"
        stale.parent.mkdir(parents=True)
        stale.write_text("package stale\n")
        copy_package(build_ctx, app_dir, "other.com/y/a1", "vendor/a", force=True)
        assert not stale.exists()
        assert (app_dir / "vendor" / "a" / "a.go").exists()

    def test_recurse_updates_subpackages(
        self, build_ctx: BuildContext, app_dir: Path
    ):
        (app_dir / "util" / "extra.go").write_text('package util\n\nimport "other.com/y/b"\n')
        copy_package(build_ctx, app_dir, "other.com/y/b", "third_party/b")
        assert imports_of(app_dir / "util" / "extra.go") == ["other.com/y/b"]

        copy_package(build_ctx, app_dir, "other.com/y/b", "third_party/b", recurse=True, force=True)
        assert imports_of(app_dir / "util" / "extra.go") == ["example.com/app/third_party/b"]

    def test_hidden_files(self, build_ctx: BuildContext, app_dir: Path, a1_dir: Path):
        (a1_dir / ".meta").write_text("x")
        copy_package(build_ctx, app_dir, "other.com/y/a1", "vendor/a")
        assert not (app_dir / "vendor" / "a" / ".meta").exists()
        copy_package(build_ctx, app_dir, "other.com/y/a1", "vendor/a2", hidden=True)
        assert (app_dir / "vendor" / "a2" / ".meta").exists()

    def test_destination_outside_roots(
        self, build_ctx: BuildContext, app_dir: Path, tmp_path: Path
    ):
        with pytest.raises(NotInRootError):
            copy_package(build_ctx, app_dir, "other.com/y/b", tmp_path / "outside" / "b")
        assert not (tmp_path / "outside").exists()

    def test_unknown_source(self, build_ctx: BuildContext, app_dir: Path):
        with pytest.raises(PackageNotFoundError):
            copy_package(build_ctx, app_dir, "nowhere.com/x", "vendor/x")

    def test_source_with_invalid_testdata(
        self, build_ctx: BuildContext, app_dir: Path, a1_dir: Path
    ):
        testdata = a1_dir / "testdata"
        testdata.mkdir()
        (testdata / "invalid.go").write_text("package invalid\n\nfunc broken( {\n")
        copy_package(build_ctx, app_dir, "other.com/y/a1", "vendor/a")
        copy = app_dir / "vendor" / "a"
        assert (copy / "testdata" / "invalid.go").read_bytes() == (
            testdata / "invalid.go"
        ).read_bytes()
        assert imports_of(copy / "a.go") == ["example.com/app/vendor/a/inner"]
        assert "example.com/app/vendor/a" in imports_of(app_dir / "main.go")

    @pytest.mark.parametrize("dst", ["b", "."])
    def test_force_onto_source_rejected(self, build_ctx: BuildContext, gopath: Path, dst: str):
        parent = gopath / "src" / "other.com" / "y"
        with pytest.raises(ImportPathError):
            copy_package(build_ctx, parent, "./b", dst, force=True)
        assert (parent / "b" / "b.go").exists()
        assert (parent / "a1" / "a.go").exists()


class TestMovePackage:
    """Tests for move_package."""

    def test_move(self, build_ctx: BuildContext, app_dir: Path, gopath: Path):
        old, new = move_package(build_ctx, app_dir, "other.com/y/b", "internal/b")
        assert new == "example.com/app/internal/b"
        assert not (gopath / "src" / "other.com" / "y" / "b").exists()
        assert (app_dir / "internal" / "b" / "b.go").exists()
        assert "example.com/app/internal/b" in imports_of(app_dir / "main.go")

    def test_standard_package_rejected(self, build_ctx: BuildContext, app_dir: Path):
        with pytest.raises(StandardPackageError) as exc_info:
            move_package(build_ctx, app_dir, "fmt", "internal/fmt")
        assert exc_info.value.kind is ErrorKind.STANDARD_PACKAGE
        assert not (app_dir / "internal").exists()

    def test_move_into_itself_rejected(self, build_ctx: BuildContext, app_dir: Path, a1_dir: Path):
        with pytest.raises(ImportPathError):
            move_package(build_ctx, app_dir, "other.com/y/a1", a1_dir / "nested")
        assert (a1_dir / "a.go").exists()


class TestVendorInit:
    """Tests for vendor_init."""

    def test_init(self, build_ctx: BuildContext, app_dir: Path):
        vendored = vendor_init(build_ctx, app_dir, "vendor")
        assert vendored == [
            ("other.com/y/a1", "example.com/app/vendor/a"),
            ("other.com/y/b", "example.com/app/vendor/b"),
        ]
        assert (app_dir / "vendor" / "a" / "a.go").exists()
        assert (app_dir / "vendor" / "b" / "b.go").exists()
        assert not (app_dir / "vendor" / "fmt").exists()
        assert not (app_dir / "vendor" / "util").exists()
        assert imports_of(app_dir / "main.go") == [
            "fmt",
            "example.com/app/util",
            "example.com/app/vendor/a",
            "example.com/app/vendor/b",
        ]

    def test_duplicate_names(self, build_ctx: BuildContext, gopath: Path):
        dupe_dir = gopath / "src" / "example.com" / "dupe"
        before = (dupe_dir / "dupe.go").read_text()
        with pytest.raises(DuplicatePackageError) as exc_info:
            vendor_init(build_ctx, dupe_dir, "vendor")
        error = exc_info.value
        assert error.kind is ErrorKind.DUPLICATE_PACKAGE_NAMES
        assert error.duplicates == {"a": ["other.com/y/a1", "other.com/y/a2"]}
        assert str(error) == (
            "duplicate package names found :\na found at other.com/y/a1, other.com/y/a2"
        )
        assert not (dupe_dir / "vendor").exists()
        assert (dupe_dir / "dupe.go").read_text() == before

    def test_existing_copy_reused(self, build_ctx: BuildContext, app_dir: Path, a1_dir: Path):
        existing = app_dir / "vendor" / "a"
        shutil.copytree(a1_dir, existing)
        (existing / "marker.txt").write_text("keep")
        vendor_init(build_ctx, app_dir, "vendor")
        assert (existing / "marker.txt").read_text() == "keep"
        # not copied again, so the copy still points at its origin
        assert imports_of(existing / "a.go") == ["other.com/y/a1/inner"]
        assert "example.com/app/vendor/a" in imports_of(app_dir / "main.go")

    def test_force_recopies(self, build_ctx: BuildContext, app_dir: Path, a1_dir: Path):
        existing = app_dir / "vendor" / "a"
        shutil.copytree(a1_dir, existing)
        (existing / "marker.txt").write_text("stale")
        vendor_init(build_ctx, app_dir, "vendor", force=True)
        assert not (existing / "marker.txt").exists()
        assert imports_of(existing / "a.go") == ["example.com/app/vendor/a/inner"]

    def test_recurse(self, build_ctx: BuildContext, app_dir: Path):
        (app_dir / "util" / "extra.go").write_text('package util\n\nimport "other.com/y/a2"\n')
        with pytest.raises(DuplicatePackageError):
            vendor_init(build_ctx, app_dir, "vendor", recurse=True)
        assert vendor_init(build_ctx, app_dir, "vendor") != []

    def test_outside_roots(self, build_ctx: BuildContext, tmp_path: Path):
        with pytest.raises(NotInRootError):
            vendor_init(build_ctx, tmp_path, "vendor")


class TestUpdatePaths:
    """Tests for update_paths."""

    def test_single_package(self, build_ctx: BuildContext, app_dir: Path):
        (app_dir / "util" / "extra.go").write_text('package util\n\nimport "other.com/y/b"\n')
        update_paths(build_ctx, app_dir, "other.com/y", "mirror.com/y")
        assert imports_of(app_dir / "main.go")[2:] == ["mirror.com/y/a1", "mirror.com/y/b"]
        assert imports_of(app_dir / "util" / "extra.go") == ["other.com/y/b"]

    def test_recursive(self, build_ctx: BuildContext, app_dir: Path):
        (app_dir / "util" / "extra.go").write_text('package util\n\nimport "other.com/y/b"\n')
        update_paths(build_ctx, app_dir, "other.com/y/b", "mirror.com/b", recurse=True)
        assert imports_of(app_dir / "util" / "extra.go") == ["mirror.com/b"]
        assert "mirror.com/b" in imports_of(app_dir / "main.go")

    def test_recursive_skips_unparsable_directory(self, build_ctx: BuildContext, app_dir: Path):
        testdata = app_dir / "testdata"
        testdata.mkdir()
        (testdata / "bad.go").write_text("package bad\n\nfunc broken( {\n")
        update_paths(build_ctx, app_dir, "other.com/y/b", "mirror.com/b", recurse=True)
        assert "mirror.com/b" in imports_of(app_dir / "main.go")

    def test_unparsable_file_blocks_needed_rewrite(self, build_ctx: BuildContext, app_dir: Path):
        (app_dir / "broken.go").write_text("package main\n\nfunc broken( {\n")
        before = (app_dir / "main.go").read_text()
        with pytest.raises(GoParseError):
            update_paths(build_ctx, app_dir, "other.com/y/b", "mirror.com/b")
        assert (app_dir / "main.go").read_text() == before
        # nothing to rewrite, so the broken file does not matter
        assert update_paths(build_ctx, app_dir, "unused.com/x", "mirror.com/x") != []

    def test_no_go_files(self, build_ctx: BuildContext, gopath: Path):
        assert update_paths(build_ctx, gopath / "src", "a", "b") == []

    def test_outside_roots(self, build_ctx: BuildContext, tmp_path: Path):
        (tmp_path / "x.go").write_text('package x\n\nimport "a"\n')
        with pytest.raises(ImportPathError):
            update_paths(build_ctx, tmp_path, "a", "b")


class TestListAndInfo:
    """Tests for list_imports and package_info."""

    def test_list(self, build_ctx: BuildContext, app_dir: Path):
        assert list_imports(build_ctx, app_dir) == [
            "example.com/app/util",
            "fmt",
            "other.com/y/a1",
            "other.com/y/b",
        ]

    def test_list_filters(self, build_ctx: BuildContext, app_dir: Path):
        assert list_imports(build_ctx, app_dir, std=True, child=True) == [
            "other.com/y/a1",
            "other.com/y/b",
        ]
        assert "testing" in list_imports(build_ctx, app_dir, tests=True)

    def test_list_recurse(self, build_ctx: BuildContext, app_dir: Path):
        assert "strings" in list_imports(build_ctx, app_dir, recurse=True)
        assert "strings" not in list_imports(build_ctx, app_dir)

    def test_info(self, build_ctx: BuildContext, app_dir: Path):
        pkg = package_info(build_ctx, app_dir, "other.com/y/b")
        assert pkg.name == "b"
        assert pkg.doc == "Package b provides things."

    def test_info_pseudo_package(self, build_ctx: BuildContext, app_dir: Path):
        assert package_info(build_ctx, app_dir, "C").import_path == "C"
