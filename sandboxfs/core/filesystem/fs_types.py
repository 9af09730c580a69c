"""
sandboxfs Filesystem Types

This module defines the entry types, rejection reasons and result structures
used by the host-backed guest filesystem.
"""

import errno
import os
from enum import Enum
from dataclasses import dataclass
from typing import Any, Optional


# Reserved guest names for the standard streams
STDIN = "stdin"
STDOUT = "stdout"
STDERR = "stderr"

STDIO_SUFFIX = ".txt"
TMP_DIR_NAME = "tmp"
DEFAULT_WORK_DIR_NAME = "sandboxfs_work"


class FileType(Enum):
    """Host entry types"""
    REGULAR = "regular"      # Regular file
    DIRECTORY = "directory"  # Directory
    MISSING = "missing"      # Nothing at that path
    OTHER = "other"          # Device, socket, pipe...

    @staticmethod
    def from_host(path) -> 'FileType':
        """Classify the host entry at path, following symlinks"""
        if os.path.isdir(path):
            return FileType.DIRECTORY
        if os.path.isfile(path):
            return FileType.REGULAR
        if os.path.lexists(path):
            return FileType.OTHER
        return FileType.MISSING


class OpenRejection(Enum):
    """Reasons an open request is refused without touching the host"""
    NO_SANDBOX = "no_sandbox"            # Rootless mode
    NOT_FOUND = "not_found"              # Missing entry, create not requested
    MISSING_PARENT = "missing_parent"    # Missing entry, parent is not a directory
    TYPE_MISMATCH = "type_mismatch"      # File vs directory conflict
    OUTSIDE_SANDBOX = "outside_sandbox"  # Path escapes the sandbox root

    @property
    def errno(self) -> int:
        """Default guest errno for this reason"""
        return _REJECTION_ERRNO[self]


_REJECTION_ERRNO = {
    OpenRejection.NO_SANDBOX: errno.ENOENT,
    OpenRejection.NOT_FOUND: errno.ENOENT,
    OpenRejection.MISSING_PARENT: errno.ENOENT,
    OpenRejection.TYPE_MISMATCH: errno.ENOTDIR,
    OpenRejection.OUTSIDE_SANDBOX: errno.EACCES,
}


@dataclass(frozen=True)
class OpenResult:
    """Outcome of an open request: a handle, or the reason there is none"""
    handle: Any = None
    rejection: Optional[OpenRejection] = None
    detail: str = ""
    error_code: int = 0  # overrides rejection.errno when set

    def __post_init__(self):
        if (self.handle is None) == (self.rejection is None):
            raise ValueError("OpenResult needs exactly one of handle or rejection")

    def __bool__(self):
        return self.handle is not None

    @property
    def ok(self) -> bool:
        return self.handle is not None

    @property
    def errno(self) -> int:
        """0 on success, otherwise the guest errno for the rejection"""
        if self.rejection is None:
            return 0
        return self.error_code or self.rejection.errno

    @staticmethod
    def opened(handle) -> 'OpenResult':
        return OpenResult(handle=handle)

    @staticmethod
    def rejected(reason: OpenRejection, detail: str = "", error_code: int = 0) -> 'OpenResult':
        return OpenResult(rejection=reason, detail=detail, error_code=error_code)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'ok': self.ok,
            'handle': repr(self.handle) if self.handle is not None else None,
            'rejection': self.rejection.value if self.rejection else None,
            'errno': self.errno,
            'detail': self.detail,
        }
