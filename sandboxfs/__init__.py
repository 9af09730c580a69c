"""
sandboxfs: a sandboxed host filesystem for emulated guest processes
"""

__version__ = "1.0.0"

from .exceptions import (
    SandboxFSError, FileSystemError, FatalFileSystemError,
    FileSystemInitError, HostCreateError, InvalidFlagsProvider, ConfigError
)
from .flags import FlagPredicates, LINUX_FLAGS, DARWIN_FLAGS, provider_for_abi
from .handles import (
    HandleFactory, DefaultHandleFactory,
    FileHandle, DirectoryHandle, StdinHandle, StdoutHandle
)
from .core.filesystem import HostFileSystem, OpenRejection, OpenResult, FileType
from .config import SandboxConfig, load_config

__all__ = [
    'SandboxFSError', 'FileSystemError', 'FatalFileSystemError',
    'FileSystemInitError', 'HostCreateError', 'InvalidFlagsProvider', 'ConfigError',
    'FlagPredicates', 'LINUX_FLAGS', 'DARWIN_FLAGS', 'provider_for_abi',
    'HandleFactory', 'DefaultHandleFactory',
    'FileHandle', 'DirectoryHandle', 'StdinHandle', 'StdoutHandle',
    'HostFileSystem', 'OpenRejection', 'OpenResult', 'FileType',
    'SandboxConfig', 'load_config',
]
