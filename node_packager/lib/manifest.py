from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
INDENT = 4


def load_manifest(path: str | Path) -> Dict[str, Any]:
    """Load a package.json into an insertion-ordered dict."""
    p = Path(path)
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{p} must contain a JSON object")
    return data


def save_manifest(path: str | Path, manifest: Dict[str, Any]) -> None:
    p = Path(path)
    p.write_text(json.dumps(manifest, indent=INDENT, ensure_ascii=False) + "\n", encoding="utf-8")


def prepare_for_packing(manifest: Dict[str, Any], *, default_name: str) -> Dict[str, Any]:
    """Make the manifest pack everything and carry the mandatory fields.

    - 'files' restricts the packed content; it is dropped so node_modules ships.
    - 'version' and 'name' are mandatory for npm pack.
    """

    if manifest.pop("files", None) is not None:
        logger.debug("Removed 'files' from manifest")
    manifest.setdefault("version", "0.0.0")
    manifest.setdefault("name", default_name)
    return manifest


def modify_package_json(package_dir: str | Path, *, default_name: str) -> Dict[str, Any]:
    p = Path(package_dir) / MANIFEST_FILE
    manifest = prepare_for_packing(load_manifest(p), default_name=default_name)
    save_manifest(p, manifest)
    return manifest
