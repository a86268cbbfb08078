"""Discovery of asset files by extension."""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Iterable
from dataclasses import dataclass

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileMetaData:
    name: str
    path: str
    extension: str


def _extension(name: str) -> str:
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _sorted_entries(directory: str) -> list[os.DirEntry] | None:
    try:
        with os.scandir(directory) as entries:
            return sorted(entries, key=lambda entry: entry.name)
    except OSError as err:
        _log.warning("%s", err)
        return None


def get_file_metadata(
    directory: str | os.PathLike,
    sub_directories: Iterable[str] | None,
    extensions: Collection[str],
) -> dict[str, FileMetaData]:
    """Map file names (without extension) to their metadata.

    Only the given sub directories are searched, or ``directory`` itself when
    none are given. Unreadable directories are skipped.
    """
    directory = os.fspath(directory)
    search_paths = [os.path.join(directory, sub) for sub in sub_directories or ()]
    if not search_paths:
        search_paths = [directory]

    collection: dict[str, FileMetaData] = {}
    for search_path in search_paths:
        entries = _sorted_entries(search_path)
        if entries is None:
            continue
        for entry in entries:
            extension = _extension(entry.name)
            if extension not in extensions:
                continue
            name = entry.name[: len(entry.name) - len(extension)]
            collection[name] = FileMetaData(name, os.path.join(search_path, entry.name), extension)
    return collection


def get_file_metadata_recursive(
    directory: str | os.PathLike,
    extensions: Collection[str],
    key_prefix: str = "",
    recurse: bool = True,
) -> dict[str, FileMetaData]:
    """Like :func:`get_file_metadata`, descending into sub directories.

    Directories whose names start with an underscore are not descended into.
    Files found in a sub directory are keyed by that directory's name, a slash
    and the file name without extension.
    """
    collection: dict[str, FileMetaData] = {}
    _collect(os.fspath(directory), extensions, key_prefix, recurse, collection)
    return collection


def _collect(
    directory: str,
    extensions: Collection[str],
    key_prefix: str,
    recurse: bool,
    collection: dict[str, FileMetaData],
) -> None:
    entries = _sorted_entries(directory)
    if entries is None:
        return
    for entry in entries:
        extension = _extension(entry.name)
        if entry.is_dir() and not entry.name.startswith("_"):
            if recurse:
                _collect(
                    os.path.join(directory, entry.name),
                    extensions,
                    entry.name + "/",
                    True,
                    collection,
                )
            continue
        if extension not in extensions:
            continue
        name = key_prefix + entry.name[: len(entry.name) - len(extension)]
        collection[name] = FileMetaData(name, os.path.join(directory, entry.name), extension)