from __future__ import annotations

import itertools
import logging
import sys
import threading
from typing import Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL_S = 0.3
FRAMES = "⣾⣽⣻⢿⡿⣟⣯⣷" if sys.platform.startswith("linux") else "|/-\\"


class Spinner:
    """Indeterminate console spinner advanced by a background ticker.

    The ticker only redraws; it shares nothing with the pipeline except the
    description text.
    """

    def __init__(self, *, disable: bool = False, interval_s: float = PROGRESS_INTERVAL_S) -> None:
        self.disable = disable
        self.interval_s = interval_s
        self._description = ""
        self._bar: Optional[tqdm] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "Spinner":
        if self.disable or self._bar is not None:
            return self
        self._bar = tqdm(total=None, bar_format="{desc}", leave=False, file=sys.stderr, dynamic_ncols=True)
        self._thread = threading.Thread(target=self._tick, name="progress-spinner", daemon=True)
        self._thread.start()
        return self

    def _tick(self) -> None:
        frames = itertools.cycle(FRAMES)
        while not self._stop.wait(self.interval_s):
            bar = self._bar
            if bar is None:
                return
            bar.set_description_str(f"{next(frames)} {self._description}", refresh=False)
            bar.update(1)

    def describe(self, text: str) -> None:
        self._description = text
        logger.debug("%s", text)

    @property
    def description(self) -> str:
        return self._description

    def close(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval_s * 2)
            self._thread = None
        if self._bar is not None:
            self._bar.close()
            self._bar = None
        self._description = ""
