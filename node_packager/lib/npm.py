from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = "https://registry.npmjs.org"
BUNDLE_DEPS_PACKAGE = "bundle-deps"


@dataclass(frozen=True)
class NpmDriver:
    """Builds npm/node argument lists and runs them against a package directory.

    Every call takes the directory explicitly (--prefix and, where npm
    resolves package.json from the current directory, cwd).
    """

    registry: str = DEFAULT_REGISTRY
    proxy: Optional[str] = None
    audit_level: str = "high"
    verbose: bool = False
    npm: str = "npm"
    node: str = "node"

    def _common(self, argv: List[str]) -> List[str]:
        if self.proxy:
            argv.append(f"--proxy={self.proxy}")
        if self.verbose:
            argv.append("--verbose")
        return argv

    def install_args(self, prefix: str, package: Optional[str] = None) -> List[str]:
        argv = [
            self.npm,
            "install",
            f"--prefix={prefix}",
            f"--registry={self.registry}",
            "--no-fund",
            "--omit=dev",
            "--no-audit",
        ]
        self._common(argv)
        if package:
            argv.append(package)
        return argv

    def audit_args(self, prefix: str, *, fix: bool = False) -> List[str]:
        # Private registries rarely serve the audit endpoint.
        argv = [self.npm, "audit"]
        if fix:
            argv.append("fix")
        argv += [
            f"--prefix={prefix}",
            f"--registry={DEFAULT_REGISTRY}",
            f"--audit-level={self.audit_level}",
            "--only=prod",
            "--omit=dev",
        ]
        return self._common(argv)

    def install_bundle_deps_args(self, prefix: str) -> List[str]:
        argv = [
            self.npm,
            "install",
            f"--prefix={prefix}",
            f"--registry={self.registry}",
            BUNDLE_DEPS_PACKAGE,
            "--no-save",
            "--ignore-scripts",
            "--no-audit",
        ]
        return self._common(argv)

    def bundle_deps_args(self, prefix: str) -> List[str]:
        script = os.path.join(prefix, "node_modules", BUNDLE_DEPS_PACKAGE, "bundle-deps.js")
        return [self.node, script]

    def pack_args(self, prefix: str) -> List[str]:
        argv = [
            self.npm,
            "pack",
            f"--prefix={prefix}",
            f"--registry={self.registry}",
        ]
        return self._common(argv)

    def _run(self, argv: List[str], *, cwd: Optional[str] = None) -> CmdResult:
        return run_cmd(argv, cwd=cwd, forward_output=self.verbose)

    def install(self, prefix: str, package: Optional[str] = None) -> CmdResult:
        return self._run(self.install_args(prefix, package))

    def audit(self, prefix: str) -> CmdResult:
        return self._run(self.audit_args(prefix))

    def audit_fix(self, prefix: str) -> CmdResult:
        return self._run(self.audit_args(prefix, fix=True))

    def install_bundle_deps(self, prefix: str) -> CmdResult:
        return self._run(self.install_bundle_deps_args(prefix))

    def bundle_deps(self, prefix: str) -> CmdResult:
        # bundle-deps looks for package.json in the current directory.
        return self._run(self.bundle_deps_args(prefix), cwd=prefix)

    def pack(self, prefix: str) -> CmdResult:
        return self._run(self.pack_args(prefix), cwd=prefix)
