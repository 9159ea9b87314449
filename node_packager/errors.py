from __future__ import annotations

from typing import Sequence


class PackagerError(RuntimeError):
    """Base class for all packaging failures."""


class InvalidInput(PackagerError, ValueError):
    pass


class ExternalCommandFailed(PackagerError):
    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr


class AuditFailed(ExternalCommandFailed):
    pass


class AuditFixFailed(ExternalCommandFailed):
    pass


class ArchiveNotFound(PackagerError, FileNotFoundError):
    pass
