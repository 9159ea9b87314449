from __future__ import annotations

import logging
import os
from pathlib import Path

from ..lib.fsutil import copy_tree, file_exists, remove_tree
from ..lib.manifest import MANIFEST_FILE
from ..lib.npm import NpmDriver
from ..state import PipelineState

logger = logging.getLogger(__name__)


def lift_library_module(temp_dir: str, library: str) -> None:
    """Move node_modules/<library> one level up into temp_dir and remove it.

    Entries already present at temp_dir win (installed dependencies over the
    module's own copies), except package.json which always comes from the module.
    """

    module_dir = Path(temp_dir) / "node_modules" / library
    for entry in sorted(os.scandir(module_dir), key=lambda e: e.name):
        dst = Path(temp_dir) / entry.name
        if entry.name != MANIFEST_FILE and file_exists(dst):
            logger.debug("Keeping existing %s", dst)
            continue
        logger.debug("Moving %s -> %s", entry.path, dst)
        os.replace(entry.path, dst)

    remove_tree(module_dir)
    # Scoped packages leave an empty node_modules/@scope behind.
    scope_dir = module_dir.parent
    if scope_dir.name.startswith("@") and scope_dir.exists() and not any(scope_dir.iterdir()):
        scope_dir.rmdir()


class AcquireStage:
    stage_id = "10_acquire"
    description = "downloading ..."

    def __init__(self, driver: NpmDriver) -> None:
        self.driver = driver

    def run(self, state: PipelineState) -> PipelineState:
        req = state.request

        if req.has_src_dir:
            state.spinner.describe("copying ...")
            copy_tree(req.src_dir, state.temp_dir)
            state.spinner.describe(self.description)
            # Materialise the dependencies of the copied package.json.
            self.driver.install(state.temp_dir)
            return state

        self.driver.install(state.temp_dir, req.library_name)

        state.spinner.describe("preparing library ...")
        lift_library_module(state.temp_dir, req.library_name_without_version)
        return state
