from __future__ import annotations

import logging

from ..lib.npm import NpmDriver
from ..state import PipelineState

logger = logging.getLogger(__name__)


class BundleDependenciesStage:
    """Mark node_modules for embedding via the 'bundle-deps' helper.

    Without bundledDependencies in package.json, npm pack omits node_modules.
    """

    stage_id = "60_bundle"
    description = "prepare bundling ..."

    def __init__(self, driver: NpmDriver) -> None:
        self.driver = driver

    def run(self, state: PipelineState) -> PipelineState:
        self.driver.install_bundle_deps(state.temp_dir)
        state.spinner.describe("bundling ...")
        self.driver.bundle_deps(state.temp_dir)
        return state
