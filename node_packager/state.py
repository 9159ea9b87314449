from __future__ import annotations

import platform
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import PackagingRequest
from .lib.native import PREBUILD_LINUX_ARM64, PREBUILD_LINUX_X64
from .lib.progress import Spinner


def _build_on() -> str:
    machine = platform.machine().lower()
    arch = {"x86_64": "amd64", "aarch64": "arm64"}.get(machine, machine or "unknown")
    return f"{sys.platform}_{arch}"


@dataclass
class PipelineState:
    """Mutable state of one pack() call. Never shared between calls."""

    request: PackagingRequest
    spinner: Spinner
    working_dir: str = ""
    temp_dir: str = ""
    build_on: str = field(default_factory=_build_on)
    start_time: float = field(default_factory=time.monotonic)

    tarball_path: str = ""
    tarball_name: str = ""
    tarball_size: str = ""

    has_native_modules: bool = False
    has_native_prebuilds: bool = False
    has_all_prebuilds_linux_arm64: bool = True
    has_all_prebuilds_linux_x64: bool = True

    current_stage: Optional[str] = None
    completed_stages: List[str] = field(default_factory=list)

    def downgrade_prebuilds(self, missing_platforms) -> None:
        """Clear the per-platform flags for missing platforms. Flags never go back to True."""
        if PREBUILD_LINUX_ARM64 in missing_platforms:
            self.has_all_prebuilds_linux_arm64 = False
        if PREBUILD_LINUX_X64 in missing_platforms:
            self.has_all_prebuilds_linux_x64 = False

    @property
    def elapsed_s(self) -> float:
        return time.monotonic() - self.start_time

    def summary(self) -> Dict[str, Any]:
        return {
            "library": self.request.library_name,
            "tarball": self.tarball_name,
            "size": self.tarball_size,
            "native_modules": self.has_native_modules,
            "native_prebuilds": self.has_native_prebuilds,
            "all_prebuilds": {
                PREBUILD_LINUX_ARM64: self.has_all_prebuilds_linux_arm64,
                PREBUILD_LINUX_X64: self.has_all_prebuilds_linux_x64,
            },
            "completed_stages": list(self.completed_stages),
        }
