from __future__ import annotations

from ..lib.npm import NpmDriver
from ..state import PipelineState


class ArchiveStage:
    stage_id = "70_archive"
    description = "packing ..."

    def __init__(self, driver: NpmDriver) -> None:
        self.driver = driver

    def run(self, state: PipelineState) -> PipelineState:
        self.driver.pack(state.temp_dir)
        return state
