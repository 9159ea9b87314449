from __future__ import annotations

import logging

from ..lib.manifest import modify_package_json
from ..state import PipelineState

logger = logging.getLogger(__name__)


class ModifyManifestStage:
    stage_id = "30_modify_manifest"
    description = "modifying ..."

    def run(self, state: PipelineState) -> PipelineState:
        manifest = modify_package_json(state.temp_dir, default_name=state.request.library_name_without_version)
        logger.debug("Manifest prepared: %s@%s", manifest.get("name"), manifest.get("version"))
        return state
