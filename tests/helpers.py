"""Shared test doubles and file helpers."""

from __future__ import annotations

import json
import tarfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from node_packager.errors import ExternalCommandFailed


def write_json(path: Path, data: Dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def read_json(path: Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


class FakeNpm:
    """Stands in for NpmDriver: records calls and lays out files like npm would."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.version = "1.2.3"
        self.module_files: Dict[str, str] = {"index.js": "module.exports = {};\n"}
        self.module_manifest: Dict[str, Any] = {}
        self.dependencies: Dict[str, Dict[str, Any]] = {"dep-a": {"name": "dep-a", "version": "0.1.0"}}
        self.root_files: Dict[str, str] = {}
        self.extra_tree: Dict[str, Any] = {}
        self.fail: Dict[str, int] = {}
        self.skip_pack_output = False

    def _maybe_fail(self, op: str) -> None:
        remaining = self.fail.get(op, 0)
        if remaining:
            self.fail[op] = remaining - 1
            raise ExternalCommandFailed(f"Command failed (1): npm {op}", argv=["npm", op], returncode=1)

    def _install_dependencies(self, root: Path) -> None:
        for name, manifest in self.dependencies.items():
            write_json(root / "node_modules" / name / "package.json", manifest)
        for rel, content in self.extra_tree.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, dict):
                write_json(p, content)
            else:
                p.write_text(content, encoding="utf-8")

    def install(self, prefix: str, package: Optional[str] = None):
        self.calls.append(("install", prefix, package))
        self._maybe_fail("install")
        root = Path(prefix)
        self._install_dependencies(root)
        if package is None:
            return None

        name = package if package.rfind("@") <= 0 else package[: package.rfind("@")]
        # npm writes a placeholder package.json/lock at the prefix.
        write_json(root / "package.json", {"dependencies": {name: f"^{self.version}"}})
        (root / "package-lock.json").write_text("{}", encoding="utf-8")
        for rel, content in self.root_files.items():
            (root / rel).write_text(content, encoding="utf-8")

        module_dir = root / "node_modules" / name
        manifest = {"name": name, "version": self.version, "files": ["index.js"]}
        manifest.update(self.module_manifest)
        write_json(module_dir / "package.json", manifest)
        for rel, content in self.module_files.items():
            p = module_dir / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(content, encoding="utf-8")
        return None

    def audit(self, prefix: str):
        self.calls.append(("audit", prefix))
        self._maybe_fail("audit")

    def audit_fix(self, prefix: str):
        self.calls.append(("audit_fix", prefix))
        self._maybe_fail("audit_fix")

    def install_bundle_deps(self, prefix: str):
        self.calls.append(("install_bundle_deps", prefix))
        self._maybe_fail("install_bundle_deps")
        p = Path(prefix) / "node_modules" / "bundle-deps" / "bundle-deps.js"
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("// bundle-deps\n", encoding="utf-8")

    def bundle_deps(self, prefix: str):
        self.calls.append(("bundle_deps", prefix))
        self._maybe_fail("bundle_deps")
        manifest_path = Path(prefix) / "package.json"
        manifest = read_json(manifest_path)
        manifest["bundledDependencies"] = sorted(
            p.name for p in (Path(prefix) / "node_modules").iterdir() if p.name != "bundle-deps"
        )
        write_json(manifest_path, manifest)

    def pack(self, prefix: str):
        self.calls.append(("pack", prefix))
        self._maybe_fail("pack")
        if self.skip_pack_output:
            return None
        root = Path(prefix)
        manifest = read_json(root / "package.json")
        tarball = root / "{}-{}.tgz".format(manifest["name"].replace("/", "-").replace("@", ""), manifest["version"])
        with tarfile.open(tarball, "w:gz") as tar:
            for p in sorted(root.rglob("*")):
                if p == tarball or not p.is_file():
                    continue
                tar.add(p, arcname="package/" + p.relative_to(root).as_posix())
        return None

    def ops(self) -> List[str]:
        return [c[0] for c in self.calls]


