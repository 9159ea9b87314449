from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o755


def file_exists(path: str | Path) -> bool:
    return os.path.lexists(path)


def file_size(path: str | Path) -> int:
    return Path(path).stat().st_size


def humanize_size(size: int) -> str:
    if size < 1_024:
        return f"{size} Bytes"
    if size < 1_048_576:
        return f"{size / 1_024:.1f} KB"
    return f"{size / 1_048_576:.1f} MB"


def humanized_file_size(path: str | Path) -> str:
    """Human readable file size in the range Bytes ... MB, e.g. '10.0 MB'."""
    return humanize_size(file_size(path))


def clean_dir(path: str | Path) -> None:
    p = Path(path)
    shutil.rmtree(p, ignore_errors=False)
    p.mkdir(parents=True, mode=DEFAULT_DIR_MODE)


def remove_tree(path: str | Path) -> None:
    p = Path(path)
    if not p.exists():
        return
    logger.debug("Removing %s", p)
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    else:
        p.unlink()


def copy_tree(src: str | Path, dst: str | Path) -> None:
    """Copy a directory tree, preserving permissions.

    An existing dst is emptied first. Symlinks are skipped.
    """

    s = Path(src).resolve()
    d = Path(dst).resolve()
    if not s.exists():
        raise FileNotFoundError(str(src))
    if not s.is_dir():
        raise NotADirectoryError(str(src))
    if s == d:
        raise ValueError(f"{src} and {dst} are the same directory")

    if d.exists():
        clean_dir(d)
    d.mkdir(parents=True, exist_ok=True)
    shutil.copymode(s, d)

    logger.debug("Copying tree %s -> %s", s, d)
    for item in list(s.rglob("*")):
        # dst may live inside src (temp dir created in the working directory)
        if item == d or d in item.parents:
            continue
        if item.is_symlink():
            continue
        rel = item.relative_to(s)
        if any(parent.is_symlink() for parent in item.parents if s in parent.parents):
            continue
        out = d / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
            shutil.copymode(item, out)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)


def library_name_to_folder_name(name: str) -> str:
    """Library name as a folder name: '@', path and path-list separators become '_'."""
    folder = name.replace("@", "_")
    folder = folder.replace("/", "_")
    folder = folder.replace(os.sep, "_")
    folder = folder.replace(os.pathsep, "_")
    return folder
