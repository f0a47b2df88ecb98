# SPDX-License-Identifier: MIT
"""Directory tree copying.

Copies run in two phases: the source tree is walked to produce the complete
list of :class:`CopyJob` entries, and only then are the jobs executed. The
destination may therefore live inside the source (copying a package into one
of its own subdirectories) without the walk picking up its own output.
"""

from __future__ import annotations

import os
import shutil
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional

from .errors import IrregularFileError
from .output import echo_bold, echo_info

if TYPE_CHECKING:
    from .config import BuildContext


@dataclass(frozen=True)
class CopyJob:
    """A pending copy of one file or directory.

    Attributes:
        src: Absolute source path
        dst: Absolute destination path
        mode: ``st_mode`` of the source, symlinks not followed
    """

    src: Path
    dst: Path
    mode: int

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_regular(self) -> bool:
        return stat.S_ISREG(self.mode)


def is_hidden(name: str) -> bool:
    """Check whether a file or directory name is hidden."""
    return name.startswith(".") and name not in (".", "..")


def plan_copy(src: str | Path, dst: str | Path, include_hidden: bool = False) -> Iterator[CopyJob]:
    """Walk ``src`` and yield the jobs needed to copy it to ``dst``.

    The walk is top-down in lexical order. Unless ``include_hidden`` is set,
    hidden directories are not descended into and hidden files are skipped;
    the root itself is always copied.

    Args:
        src: Source file or directory
        dst: Destination path for ``src``
        include_hidden: Copy names starting with a dot

    Yields:
        CopyJob for each entry, parents before children
    """
    src = Path(os.path.abspath(src))
    dst = Path(os.path.abspath(dst))

    root_mode = os.lstat(src).st_mode
    yield CopyJob(src, dst, root_mode)
    if not stat.S_ISDIR(root_mode):
        return

    pending = [src]
    while pending:
        directory = pending.pop()
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
        subdirs: list[Path] = []
        for entry in entries:
            if not include_hidden and is_hidden(entry.name):
                continue
            path = Path(entry.path)
            mode = entry.stat(follow_symlinks=False).st_mode
            yield CopyJob(path, dst / path.relative_to(src), mode)
            if stat.S_ISDIR(mode):
                subdirs.append(path)
        pending.extend(reversed(subdirs))


def copy_file(job: CopyJob) -> None:
    """Execute a single copy job.

    Directories are created with their parents (existing ones are fine).
    Regular files are copied, flushed to disk and given the source's
    permission bits.

    Raises:
        IrregularFileError: If the source is a link, pipe, device or socket
        OSError: If reading or writing fails
    """
    if job.is_dir:
        os.makedirs(job.dst, mode=stat.S_IMODE(job.mode), exist_ok=True)
        return
    if not job.is_regular:
        raise IrregularFileError(job.src)

    job.dst.parent.mkdir(parents=True, exist_ok=True)
    with open(job.src, "rb") as sf, open(job.dst, "wb") as df:
        shutil.copyfileobj(sf, df)
        df.flush()
        os.fsync(df.fileno())
    os.chmod(job.dst, stat.S_IMODE(job.mode))


def copy_tree(
    src: str | Path,
    dst: str | Path,
    include_hidden: bool = False,
    ctx: Optional["BuildContext"] = None,
) -> list[CopyJob]:
    """Copy the ``src`` tree to ``dst``.

    All jobs are planned before anything is written. An irregular file
    anywhere in the tree aborts the copy before the first write; any other
    failure aborts the remaining jobs.

    Args:
        src: Source directory
        dst: Destination directory (created as needed)
        include_hidden: Copy names starting with a dot
        ctx: Build context; when verbose each copied path is reported

    Returns:
        The executed jobs

    Raises:
        IrregularFileError: If the tree contains a non-regular file
        OSError: If a copy fails
    """
    jobs = list(plan_copy(src, dst, include_hidden))
    for job in jobs:
        if not job.is_dir and not job.is_regular:
            raise IrregularFileError(job.src)

    for job in jobs:
        if ctx is not None and ctx.verbose:
            echo_bold(str(job.src))
            echo_info(str(job.dst))
        copy_file(job)
    return jobs
