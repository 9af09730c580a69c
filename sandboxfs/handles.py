"""
Open-file handles handed back to the emulation layer

Handles here are descriptors: they record what was opened and how. Byte
level I/O belongs to the emulation layer that owns them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .flags import FlagPredicates


@dataclass
class FileHandle:
    """A regular host file opened by the guest"""
    host_path: Path
    flags: int
    guest_path: str
    append: bool = False


@dataclass
class DirectoryHandle:
    """A host directory opened by the guest"""
    host_path: Path
    flags: int
    guest_path: str


@dataclass
class StdinHandle:
    """The guest's standard input"""
    flags: int


@dataclass
class StdoutHandle:
    """The guest's standard output or error, mirrored into a host file"""
    host_path: Path
    flags: int
    guest_path: str
    is_error: bool = False
    append: bool = False
    callback: Optional[Callable[[bytes], None]] = None


class HandleFactory(ABC):
    """Builds handles for entries the filesystem core has resolved"""

    @abstractmethod
    def for_file(self, host_path: Path, flags: int, guest_path: str):
        pass

    @abstractmethod
    def for_directory(self, host_path: Path, flags: int, guest_path: str):
        pass

    @abstractmethod
    def for_stdin(self, flags: int):
        pass

    @abstractmethod
    def for_standard_stream(self, host_path: Path, flags: int, guest_path: str, is_error: bool):
        pass


class DefaultHandleFactory(HandleFactory):
    """Handle factory producing the descriptor types in this module

    Args:
        flags: Predicates used to record append mode on file and stream handles
        stdio_callback: Optional sink that stream handles expose to the
            emulation layer for mirrored output
    """

    def __init__(self, flags: Optional[FlagPredicates] = None,
                 stdio_callback: Optional[Callable[[bytes], None]] = None):
        self.flags = flags
        self.stdio_callback = stdio_callback

    def _append(self, flags: int) -> bool:
        return self.flags is not None and self.flags.wants_append(flags)

    def for_file(self, host_path, flags, guest_path):
        return FileHandle(host_path, flags, guest_path, append=self._append(flags))

    def for_directory(self, host_path, flags, guest_path):
        return DirectoryHandle(host_path, flags, guest_path)

    def for_stdin(self, flags):
        return StdinHandle(flags)

    def for_standard_stream(self, host_path, flags, guest_path, is_error):
        return StdoutHandle(host_path, flags, guest_path, is_error=is_error,
                            append=self._append(flags), callback=self.stdio_callback)
