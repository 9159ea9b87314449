from __future__ import annotations

import logging

from ..lib.native import scan_native_modules
from ..state import PipelineState

logger = logging.getLogger(__name__)


class ScanNativeModulesStage:
    """Detect native components and strip their node-gyp rebuild hooks.

    A rebuild on the target (no compiler, no registry) would break the import.
    """

    stage_id = "40_scan_native"
    description = "scanning native components ..."

    def run(self, state: PipelineState) -> PipelineState:
        result = scan_native_modules(state.temp_dir)

        if result.has_native_modules:
            state.has_native_modules = True
        if result.has_native_prebuilds:
            state.has_native_prebuilds = True
        state.downgrade_prebuilds(result.missing_platforms())
        return state
