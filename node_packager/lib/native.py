from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Set

from .manifest import MANIFEST_FILE, load_manifest, save_manifest

logger = logging.getLogger(__name__)

PREBUILD_LINUX_ARM64 = "linux-arm64"
PREBUILD_LINUX_X64 = "linux-x64"
REQUIRED_PREBUILD_PLATFORMS: FrozenSet[str] = frozenset({PREBUILD_LINUX_ARM64, PREBUILD_LINUX_X64})

SKIP_DIRS = frozenset({"docs", "test", "examples"})
PREBUILDS_DIR = "prebuilds"
BINDING_GYP = "binding.gyp"
REBUILD_MARKER = "node-gyp rebuild"
REBUILD_SCRIPTS = ("prebuild", "rebuild", "preinstall", "postinstall", "install")


@dataclass
class NativeScanResult:
    has_native_modules: bool = False
    has_native_prebuilds: bool = False
    # One entry per 'prebuilds' directory: the platform folders it ships.
    prebuild_platforms: List[FrozenSet[str]] = field(default_factory=list)

    def missing_platforms(self, required: Iterable[str] = REQUIRED_PREBUILD_PLATFORMS) -> Set[str]:
        return missing_prebuild_platforms(self.prebuild_platforms, required)

    def has_all_prebuilds_for(self, platform: str) -> bool:
        return platform not in self.missing_platforms({platform})


def list_prebuild_platforms(prebuilds_dir: str | Path) -> FrozenSet[str]:
    """Platform tokens (Node.js '<os>-<arch>' folder names) inside a prebuilds directory."""
    return frozenset(e.name for e in os.scandir(prebuilds_dir) if e.is_dir())


def missing_prebuild_platforms(
    observed: Iterable[FrozenSet[str]],
    required: Iterable[str] = REQUIRED_PREBUILD_PLATFORMS,
) -> Set[str]:
    """Required platforms absent from at least one prebuilds directory."""
    req = set(required)
    missing: Set[str] = set()
    for platforms in observed:
        missing |= req - platforms
    return missing


def remove_native_binding_rebuild(package_dir: str | Path) -> bool:
    """Strip node-gyp rebuild hooks from one directory.

    Deletes binding.gyp and removes lifecycle scripts that run 'node-gyp rebuild',
    so 'npm install' on the target does not try to compile.
    Returns True if the directory holds a native module.
    """

    d = Path(package_dir)
    native = False

    binding = d / BINDING_GYP
    if binding.is_file():
        logger.debug("Removing %s", binding)
        binding.unlink()
        native = True

    manifest_path = d / MANIFEST_FILE
    if not manifest_path.is_file():
        return native

    manifest = load_manifest(manifest_path)
    scripts = manifest.get("scripts")
    if not isinstance(scripts, dict):
        return native

    removed = []
    for name in REBUILD_SCRIPTS:
        cmd = scripts.get(name)
        if not isinstance(cmd, str) or REBUILD_MARKER not in cmd:
            continue
        del scripts[name]
        removed.append(name)

    if removed:
        logger.debug("Removed rebuild scripts %s from %s", removed, manifest_path)
        save_manifest(manifest_path, manifest)
        native = True

    return native


def scan_native_modules(root: str | Path) -> NativeScanResult:
    """Walk the library tree, detect native components and neutralise their rebuilds."""

    result = NativeScanResult()

    for dirpath, dirnames, _filenames in os.walk(root, topdown=True):
        dirnames[:] = sorted(n for n in dirnames if n not in SKIP_DIRS)

        if os.path.basename(dirpath) == PREBUILDS_DIR:
            result.has_native_prebuilds = True
            platforms = list_prebuild_platforms(dirpath)
            logger.debug("Prebuilds %s: %s", dirpath, sorted(platforms))
            result.prebuild_platforms.append(platforms)

        if remove_native_binding_rebuild(dirpath):
            result.has_native_modules = True

    return result
