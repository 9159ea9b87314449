from __future__ import annotations

import logging

from ..lib.native import PREBUILD_LINUX_ARM64, PREBUILD_LINUX_X64
from ..state import PipelineState

logger = logging.getLogger(__name__)


class ValidateNativeModulesStage:
    stage_id = "50_validate_native"
    description = "validating native modules ..."

    def run(self, state: PipelineState) -> PipelineState:
        # The per-platform flags only carry meaning for native libraries.
        if not state.has_native_modules:
            state.has_all_prebuilds_linux_arm64 = False
            state.has_all_prebuilds_linux_x64 = False
            return state

        logger.debug("Native modules: %s", state.has_native_modules)
        logger.debug("Native prebuilds: %s", state.has_native_prebuilds)
        logger.debug("All prebuilds available (%r): %s", PREBUILD_LINUX_ARM64, state.has_all_prebuilds_linux_arm64)
        logger.debug("All prebuilds available (%r): %s", PREBUILD_LINUX_X64, state.has_all_prebuilds_linux_x64)

        if state.has_native_prebuilds:
            for platform, ok in (
                (PREBUILD_LINUX_ARM64, state.has_all_prebuilds_linux_arm64),
                (PREBUILD_LINUX_X64, state.has_all_prebuilds_linux_x64),
            ):
                if not ok:
                    logger.warning(
                        "this native library contains not all prebuilds for '%s' "
                        "and therefore must be packed on a OS with same architecture",
                        platform,
                    )
        else:
            logger.warning(
                "this native library was compiled for '%s' and therefore can only be installed on same architecture",
                state.build_on,
            )
        return state
