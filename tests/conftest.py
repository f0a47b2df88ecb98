# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for vend tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from go_vend.config import BuildContext


def write_go(directory: Path, filename: str, source: str) -> Path:
    """Write a Go source file, creating its directory."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(source)
    return path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def goroot(tmp_path: Path) -> Path:
    """Create a fake Go installation with a few standard packages."""
    root = tmp_path / "goroot"
    src = root / "src"
    write_go(src / "fmt", "print.go", "// Package fmt implements formatted I/O.\npackage fmt\n")
    write_go(src / "strings", "strings.go", "package strings\n")
    write_go(src / "testing", "testing.go", "package testing\n")
    write_go(src / "os", "file.go", 'package os\n\nimport "strings"\n')
    return root


@pytest.fixture
def gopath(tmp_path: Path) -> Path:
    """Create a GOPATH workspace.

    src/
      example.com/app        package main, imports fmt, util, a1 and b
      example.com/app/util   child package of app
      example.com/dupe       imports a1 and a2, both named "a"
      other.com/y/a1         package a, canonical import comment
      other.com/y/a1/inner   child package of a1
      other.com/y/a2         package a
      other.com/y/b          package b
    """
    root = tmp_path / "gopath"
    src = root / "src"

    write_go(
        src / "example.com" / "app",
        "main.go",
        """package main

import (
	"fmt"

	"example.com/app/util"
	"other.com/y/a1" // helpers
	"other.com/y/b"
)

func main() {
	fmt.Println(util.Name, a.Name, b.Name)
}
""",
    )
    write_go(
        src / "example.com" / "app",
        "main_test.go",
        """package main

import "testing"

func TestMain(t *testing.T) {}
""",
    )
    write_go(
        src / "example.com" / "app" / "util",
        "util.go",
        'package util\n\nimport "strings"\n\nvar Name = strings.ToUpper("util")\n',
    )
    write_go(
        src / "example.com" / "dupe",
        "dupe.go",
        """package dupe

import (
	a1 "other.com/y/a1"
	a2 "other.com/y/a2"
)

var _ = a1.Name + a2.Name
""",
    )
    write_go(
        src / "other.com" / "y" / "a1",
        "a.go",
        """// Package a is the first a.
package a // import "other.com/y/a1"

import "other.com/y/a1/inner"

var Name = inner.Name
""",
    )
    write_go(
        src / "other.com" / "y" / "a1",
        "a_test.go",
        """package a_test

import (
	"testing"

	"other.com/y/a1"
)

func TestName(t *testing.T) { _ = a.Name }
""",
    )
    write_go(
        src / "other.com" / "y" / "a1" / "inner",
        "inner.go",
        'package inner\n\nconst Name = "inner"\n',
    )
    write_go(src / "other.com" / "y" / "a2", "a.go", 'package a\n\nconst Name = "a2"\n')
    write_go(
        src / "other.com" / "y" / "b",
        "b.go",
        """// Package b provides things.
package b

import "fmt"

var Name = fmt.Sprint("b")
""",
    )
    return root


@pytest.fixture
def build_ctx(goroot: Path, gopath: Path) -> BuildContext:
    """Build context over the fake GOROOT and GOPATH."""
    return BuildContext(goroot=goroot, gopath=[gopath])


@pytest.fixture
def app_dir(gopath: Path) -> Path:
    """Directory of the example.com/app package."""
    return gopath / "src" / "example.com" / "app"


@pytest.fixture
def cli_args(goroot: Path, gopath: Path, app_dir: Path) -> list[str]:
    """Global CLI options pointing at the fake roots, run from the app package."""
    return ["--goroot", str(goroot), "--gopath", str(gopath), "-C", str(app_dir)]
