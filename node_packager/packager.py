from __future__ import annotations

import logging
import os
import tempfile
from typing import List, Optional

from tqdm.contrib.logging import logging_redirect_tqdm

from .config import PackagingRequest
from .lib.fsutil import file_exists, library_name_to_folder_name, remove_tree
from .lib.npm import NpmDriver
from .lib.progress import Spinner
from .pipeline import Stage, run_pipeline
from .stages import (
    AcquireStage,
    ArchiveStage,
    AuditStage,
    BundleDependenciesStage,
    ModifyManifestStage,
    RelocateArchiveStage,
    ScanNativeModulesStage,
    ValidateNativeModulesStage,
)
from .state import PipelineState

logger = logging.getLogger(__name__)


def driver_for(request: PackagingRequest) -> NpmDriver:
    return NpmDriver(
        registry=request.registry,
        proxy=request.proxy,
        audit_level=request.audit_level,
        verbose=request.verbose,
    )


def build_stages(driver: NpmDriver) -> List[Stage]:
    return [
        AcquireStage(driver),
        AuditStage(driver),
        ModifyManifestStage(),
        ScanNativeModulesStage(),
        ValidateNativeModulesStage(),
        BundleDependenciesStage(driver),
        ArchiveStage(driver),
        RelocateArchiveStage(),
    ]


class NodePackager:
    """Packs a Node-RED library into a tarball for offline palette import.

    One instance may be reused for several sequential pack() calls; each call
    gets a fresh PipelineState and its own temp directory. The state of the
    last call stays available as `state`.
    """

    def __init__(self, driver: Optional[NpmDriver] = None) -> None:
        self._driver = driver
        self.state: Optional[PipelineState] = None

    def pack(self, request: PackagingRequest) -> str:
        """Run the whole pipeline and return the path of the moved tarball."""

        state = PipelineState(request=request, spinner=Spinner(disable=request.verbose))
        self.state = state
        ok = False
        # Console log lines go through tqdm.write so they do not draw over the spinner.
        with logging_redirect_tqdm():
            try:
                request.validate()
                print(f"Packing: {request.library_name} ...")
                state.spinner.start()

                state.working_dir = os.getcwd()
                logger.debug("working directory: %s", state.working_dir)

                state.temp_dir = tempfile.mkdtemp(
                    prefix=library_name_to_folder_name(request.library_name_without_version) + "-",
                    dir=state.working_dir,
                )
                logger.debug("temp directory: %s", state.temp_dir)

                driver = self._driver or driver_for(request)
                run_pipeline(state=state, stages=build_stages(driver))
                ok = True
            except Exception:
                logger.debug("Packing failed in stage %s", state.current_stage, exc_info=True)
                raise
            finally:
                self._finish(state, ok=ok)

        return state.tarball_path

    def _finish(self, state: PipelineState, *, ok: bool) -> None:
        try:
            self._clean(state)
        except OSError as e:
            logger.error("failed to cleanup: %s", e)

        state.spinner.close()

        if not ok:
            return

        prefix = "Native " if state.has_native_modules else ""
        summary = (
            f"{prefix}Library '{state.tarball_name}' [{state.tarball_size}] "
            f"successfully packed in {state.elapsed_s:.1f}s."
        )
        logger.debug("Result: %s", state.summary())
        print(summary)

    def _clean(self, state: PipelineState) -> None:
        if not state.temp_dir or not file_exists(state.temp_dir):
            return
        if state.request.keep_tmp:
            logger.info("Keeping temp directory %s", state.temp_dir)
            return
        state.spinner.describe("cleaning ...")
        remove_tree(state.temp_dir)