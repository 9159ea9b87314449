from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence

from .state import PipelineState

logger = logging.getLogger(__name__)


class Stage(Protocol):
    """A single packaging stage."""

    stage_id: str
    description: str

    def run(self, state: PipelineState) -> PipelineState:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: PipelineState
    ran_stages: List[str]


def run_pipeline(*, state: PipelineState, stages: Sequence[Stage]) -> PipelineResult:
    """Run stages strictly in order; the first error stops the pipeline."""

    ran: List[str] = []

    for stage in stages:
        state.current_stage = stage.stage_id
        state.spinner.describe(stage.description)
        logger.debug("Running stage %s", stage.stage_id)
        state = stage.run(state)
        state.completed_stages.append(stage.stage_id)
        ran.append(stage.stage_id)

    state.current_stage = None
    return PipelineResult(state=state, ran_stages=ran)
