from __future__ import annotations

import logging
import os
import shutil
from typing import Tuple

from ..config import ARCHIVE_EXTENSION
from ..errors import ArchiveNotFound
from ..lib.fsutil import humanized_file_size
from ..state import PipelineState

logger = logging.getLogger(__name__)


def find_tarball(temp_dir: str, prefix: str, extension: str = ARCHIVE_EXTENSION) -> Tuple[str, str]:
    """Locate the packed tarball. npm pack writes it at the top level only."""
    for entry in sorted(os.scandir(temp_dir), key=lambda e: e.name):
        if not entry.is_file():
            continue
        if entry.name.startswith(prefix) and os.path.splitext(entry.name)[1] == extension:
            return entry.path, entry.name
    raise ArchiveNotFound(f"tarball not found: expected '{prefix}*{extension}' in {temp_dir}")


class RelocateArchiveStage:
    stage_id = "80_relocate"
    description = "copying ..."

    def run(self, state: PipelineState) -> PipelineState:
        path, name = find_tarball(state.temp_dir, state.request.tarball_prefix)

        dst = os.path.join(state.working_dir, name)
        logger.debug("Moving %s -> %s", path, dst)
        shutil.move(path, dst)

        state.tarball_path = dst
        state.tarball_name = name
        state.tarball_size = humanized_file_size(dst)
        return state
