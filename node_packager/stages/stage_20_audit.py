from __future__ import annotations

import logging

from ..errors import AuditFailed, AuditFixFailed, ExternalCommandFailed
from ..lib.npm import NpmDriver
from ..state import PipelineState

logger = logging.getLogger(__name__)


class AuditStage:
    stage_id = "20_audit"
    description = "vulnerability audit ..."

    def __init__(self, driver: NpmDriver) -> None:
        self.driver = driver

    def _audit_fix(self, state: PipelineState) -> None:
        req = state.request
        if not req.audit_fix:
            logger.info("vulnerability fix disabled: enable with option '--audit-fix'")
            return

        state.spinner.describe(f"vulnerability fix (level: {req.audit_level}) ...")
        try:
            self.driver.audit_fix(state.temp_dir)
        except ExternalCommandFailed as e:
            raise AuditFixFailed(
                f"vulnerability fix (level: {req.audit_level}) failed: "
                "try again with a decreased 'audit-level'",
                argv=e.argv,
                returncode=e.returncode,
                stderr=e.stderr,
            ) from e

    def _audit(self, state: PipelineState) -> None:
        req = state.request
        if req.no_audit:
            logger.warning("vulnerability audit disabled")
            return

        state.spinner.describe(f"vulnerability audit (level: {req.audit_level}) ...")
        attempts = req.audit_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self.driver.audit(state.temp_dir)
                return
            except ExternalCommandFailed as e:
                if attempt < attempts:
                    logger.info("vulnerability audit failed (attempt %d/%d), retrying", attempt, attempts)
                    continue
                raise AuditFailed(
                    f"vulnerability audit (level: {req.audit_level}) failed: "
                    "try again with '--no-audit' or increased 'audit-level'",
                    argv=e.argv,
                    returncode=e.returncode,
                    stderr=e.stderr,
                ) from e

    def run(self, state: PipelineState) -> PipelineState:
        self._audit_fix(state)
        self._audit(state)
        return state
