#!/usr/bin/env python3
"""
Repository Scanner Module for Elenchos

Walks a repository checkout, classifies every entry as a file or directory
and filters the flat entry list for empty directories and oversized files.
Emptiness and size are re-read from the live filesystem at filter time, so a
filter run long after the walk reflects the current state of the tree.
"""

import os
import pathlib
import stat
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from auxiliary import bytes_to_megabytes
from errors import InvalidPathError, NotAGitRepositoryError

ErrorCallback = Callable[[str, BaseException], None]


class EntryKind(Enum):
    """Kind of a scanned filesystem entry"""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Entry:
    """One classified filesystem node found during a walk"""

    path: str
    kind: EntryKind


@dataclass
class ScanSession:
    """Most recent successful scan, replaced wholesale by the next one"""

    root_path: Optional[str] = None
    entries: list[Entry] = field(default_factory=list)
    scan_duration: float = 0.0
    # Directories the walk could not list, already reported once
    unreadable_paths: set[str] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def directories(self) -> list[Entry]:
        return filter_by_kind(self.entries, EntryKind.DIRECTORY)

    @property
    def files(self) -> list[Entry]:
        return filter_by_kind(self.entries, EntryKind.FILE)

    @property
    def readable_entries(self) -> list[Entry]:
        return [entry for entry in self.entries if entry.path not in self.unreadable_paths]


def classify_entry(path: str) -> Entry:
    """Tag an existing path as a directory or, for anything else, a file"""
    if os.path.isdir(path):
        return Entry(path=path, kind=EntryKind.DIRECTORY)
    return Entry(path=path, kind=EntryKind.FILE)


def is_hidden(path: str) -> bool:
    """Check the filesystem hidden attribute of a path

    Windows reports FILE_ATTRIBUTE_HIDDEN, macOS and the BSDs the UF_HIDDEN
    flag. Outside Windows a leading dot in the name also marks a path hidden,
    which keeps the walk out of .git.
    """
    if sys.platform != "win32" and os.path.basename(path).startswith("."):
        return True

    try:
        st = os.stat(path)
    except OSError:
        return False

    attributes = getattr(st, "st_file_attributes", 0)
    if attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0):
        return True

    flags = getattr(st, "st_flags", 0)
    return bool(flags & getattr(stat, "UF_HIDDEN", 0))


def _list_directory(path: str) -> tuple[list[str], list[str]]:
    """Return (subdirectories, files) of a directory, each sorted by name"""
    directories = []
    files = []
    with os.scandir(path) as it:
        for dir_entry in it:
            entry = classify_entry(dir_entry.path)
            if entry.kind is EntryKind.DIRECTORY:
                directories.append(entry.path)
            else:
                files.append(entry.path)
    return sorted(directories), sorted(files)


def walk(
    root: str,
    error_callback: Optional[ErrorCallback] = None,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> list[Entry]:
    """Walk a directory tree and return every non-hidden entry

    Each directory contributes its visible subdirectories, then its files,
    followed by the complete listing of each subdirectory in turn. A
    directory that cannot be listed contributes nothing and is reported via
    ``error_callback``; the rest of the tree is still walked.

    Args:
        root: Directory to walk
        error_callback: Called as ``error_callback(path, exc)`` from inside
            the exception handler for every unreadable directory
        progress_callback: Called with the number of directories listed so far

    Returns:
        Flat list of entries in walk order, empty if root is not a directory
    """
    if not os.path.isdir(root):
        return []

    entries: list[Entry] = []
    # Each frame is the list of subdirectories still waiting to be expanded
    stack: list[list[str]] = [[root]]
    listed = 0

    while stack:
        pending = stack[-1]
        if not pending:
            stack.pop()
            continue
        directory = pending.pop(0)

        try:
            subdirectories, files = _list_directory(directory)
            subdirectories = [d for d in subdirectories if not is_hidden(d)]
        except Exception as e:
            if error_callback:
                error_callback(directory, e)
            continue

        listed += 1
        if progress_callback and listed % 200 == 0:
            progress_callback(listed)

        entries.extend(Entry(path=d, kind=EntryKind.DIRECTORY) for d in subdirectories)
        entries.extend(Entry(path=f, kind=EntryKind.FILE) for f in files)
        if subdirectories:
            stack.append(subdirectories)

    return entries


def filter_by_kind(entries: list[Entry], kind: EntryKind) -> list[Entry]:
    """Keep entries of exactly the given kind"""
    return [entry for entry in entries if entry.kind is kind]


def filter_empty_directories(entries: list[Entry], error_callback: Optional[ErrorCallback] = None) -> list[Entry]:
    """Select directories that have no immediate children right now"""
    empty = []
    for entry in filter_by_kind(entries, EntryKind.DIRECTORY):
        try:
            with os.scandir(entry.path) as it:
                has_children = next(it, None) is not None
        except OSError as e:
            if error_callback:
                error_callback(entry.path, e)
            continue
        if not has_children:
            empty.append(entry)
    return empty


def filter_oversized_files(
    entries: list[Entry], threshold_mb: float = 100, error_callback: Optional[ErrorCallback] = None
) -> list[Entry]:
    """Select files whose current size is at or above threshold_mb decimal megabytes"""
    oversized = []
    for entry in filter_by_kind(entries, EntryKind.FILE):
        try:
            size = os.stat(entry.path).st_size
        except OSError as e:
            if error_callback:
                error_callback(entry.path, e)
            continue
        if bytes_to_megabytes(size) >= threshold_mb:
            oversized.append(entry)
    return oversized


def is_git_repository(path: str, marker: str = ".git") -> bool:
    """Check for an immediate subdirectory whose name contains the marker"""
    if not os.path.isdir(path):
        return False
    try:
        subdirectories, _files = _list_directory(path)
    except OSError:
        return False
    return any(marker in pathlib.Path(d).name for d in subdirectories)


def scan_repository(
    root: str,
    marker: str = ".git",
    error_callback: Optional[ErrorCallback] = None,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> ScanSession:
    """Validate a repository root and walk it into a fresh scan session

    Raises:
        InvalidPathError: root is not an existing directory
        NotAGitRepositoryError: root has no child directory containing marker
    """
    if not root or not os.path.isdir(root):
        raise InvalidPathError(root)
    if not is_git_repository(root, marker):
        raise NotAGitRepositoryError(root, marker)

    unreadable_paths: set[str] = set()

    def on_error(path: str, error: BaseException):
        unreadable_paths.add(path)
        if error_callback:
            error_callback(path, error)

    start = time.monotonic()
    entries = walk(root, error_callback=on_error, progress_callback=progress_callback)
    return ScanSession(
        root_path=root,
        entries=entries,
        scan_duration=time.monotonic() - start,
        unreadable_paths=unreadable_paths,
    )
