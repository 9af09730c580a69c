"""
sandboxfs Host Filesystem

This module maps the guest's path-based file operations onto a sandboxed
host directory tree. It decides what a guest path resolves to, when a create
is allowed, and how the standard streams are mirrored into host files.
"""

import os
import errno
import shutil
import logging
import threading
from pathlib import Path
from typing import Any, Optional

from ...exceptions import FileSystemInitError, HostCreateError
from ...flags import FlagPredicates, LINUX_FLAGS, provider_for_abi
from ...handles import DefaultHandleFactory, HandleFactory
from .fs_types import (
    FileType, OpenRejection, OpenResult,
    STDIN, STDOUT, STDERR, STDIO_SUFFIX, TMP_DIR_NAME, DEFAULT_WORK_DIR_NAME
)
from .path_utils import resolve_host_entry, resolve_host_path

# Set up logging
default_logger = logging.getLogger('sandboxfs.core.filesystem.host_fs')


class HostFileSystem:
    """
    Guest filesystem backed by a host directory

    Args:
        context: Emulation context the filesystem belongs to (opaque)
        root_dir: Sandbox root; None runs rootless, where only stdin opens
        flags: Open-flag predicates for the guest ABI
        factory: Handle factory; defaults to DefaultHandleFactory
        logger: Diagnostics sink; defaults to this module's logger
        work_dir_name: Name of the scratch directory under the root

    Raises:
        FileSystemInitError: If the sandbox root cannot be initialized
    """

    def __init__(self, context: Any = None, root_dir=None,
                 flags: FlagPredicates = LINUX_FLAGS,
                 factory: Optional[HandleFactory] = None,
                 logger: Optional[logging.Logger] = None,
                 work_dir_name: str = DEFAULT_WORK_DIR_NAME):
        self.context = context
        self.flags = flags
        self.factory = factory if factory is not None else DefaultHandleFactory(flags)
        self.logger = logger if logger is not None else default_logger
        self.work_dir_name = work_dir_name
        self.lock = threading.RLock()
        self._root_dir = Path(os.path.abspath(root_dir)) if root_dir is not None else None

        if self._root_dir is not None:
            try:
                self.initialize(self._root_dir)
            except OSError as e:
                self.logger.error(f"Failed to initialize sandbox root {self._root_dir}: {e}")
                raise FileSystemInitError(f"initialize file system failed: {self._root_dir}") from e
            self.logger.debug(f"Sandbox filesystem initialized at {self._root_dir}")
        else:
            self.logger.debug("Sandbox filesystem running rootless")

    @classmethod
    def from_config(cls, config, context: Any = None, factory: Optional[HandleFactory] = None,
                    logger: Optional[logging.Logger] = None) -> 'HostFileSystem':
        """Build a filesystem from a SandboxConfig"""
        return cls(
            context=context,
            root_dir=config.root_dir,
            flags=provider_for_abi(config.abi),
            factory=factory,
            logger=logger,
            work_dir_name=config.work_dir_name,
        )

    def initialize(self, root_dir: Path) -> None:
        """Lay out the sandbox root; subclasses may extend it"""
        os.makedirs(root_dir / TMP_DIR_NAME, exist_ok=True)

    @property
    def root_dir(self) -> Optional[Path]:
        return self._root_dir

    def get_root_dir(self) -> Optional[Path]:
        return self._root_dir

    def _resolve(self, path: str) -> Optional[Path]:
        return resolve_host_path(self._root_dir, path)

    def open(self, path: str, flags: int) -> OpenResult:
        """
        Open a guest path

        Args:
            path: Guest path or one of the stdio names
            flags: Raw guest open flags

        Returns:
            OpenResult holding the handle, or the rejection reason

        Raises:
            HostCreateError: If a permitted host create fails
        """
        if path == STDIN:
            return OpenResult.opened(self.factory.for_stdin(flags))

        if self._root_dir is None:
            self.logger.debug(f"open rejected, no sandbox root: {path}")
            return OpenResult.rejected(OpenRejection.NO_SANDBOX, "no sandbox root")

        if path in (STDOUT, STDERR):
            return OpenResult.opened(self._open_stdio(path, flags))

        host_path = self._resolve(path)
        if host_path is None:
            self.logger.debug(f"open rejected, path escapes sandbox: {path}")
            return OpenResult.rejected(OpenRejection.OUTSIDE_SANDBOX, f"{path} escapes the sandbox")

        with self.lock:
            return self._open_entry(host_path, flags, path)

    def _open_stdio(self, path: str, flags: int):
        stdio = self._root_dir / (path + STDIO_SUFFIX)
        with self.lock:
            if not stdio.exists():
                try:
                    stdio.touch(exist_ok=True)
                except OSError as e:
                    self.logger.error(f"Failed to create {stdio}: {e}")
                    raise HostCreateError(f"create new file failed: {stdio}") from e
        return self.factory.for_standard_stream(stdio, flags, path, path == STDERR)

    def _open_entry(self, host_path: Path, flags: int, path: str) -> OpenResult:
        want_dir = self.flags.wants_directory(flags)
        file_type = FileType.from_host(host_path)

        if file_type == FileType.DIRECTORY and not want_dir:
            self.logger.debug(f"open rejected, {path} is a directory")
            return OpenResult.rejected(OpenRejection.TYPE_MISMATCH, f"{path} is a directory",
                                       error_code=errno.EISDIR)
        if file_type == FileType.REGULAR and want_dir:
            self.logger.debug(f"open rejected, {path} is not a directory")
            return OpenResult.rejected(OpenRejection.TYPE_MISMATCH, f"{path} is not a directory")

        if file_type == FileType.DIRECTORY:
            return OpenResult.opened(self.factory.for_directory(host_path, flags, path))
        if file_type != FileType.MISSING:
            return OpenResult.opened(self.factory.for_file(host_path, flags, path))

        if not self.flags.wants_create(flags):
            self.logger.debug(f"open rejected, {path} does not exist")
            return OpenResult.rejected(OpenRejection.NOT_FOUND, f"{path} does not exist")
        if not os.path.isdir(host_path.parent):
            self.logger.debug(f"open rejected, parent of {path} does not exist")
            return OpenResult.rejected(OpenRejection.MISSING_PARENT, f"parent of {path} does not exist")

        if want_dir:
            try:
                os.mkdir(host_path)
            except OSError as e:
                self.logger.error(f"mkdir failed: {host_path}: {e}")
                raise HostCreateError(f"mkdir failed: {host_path}") from e
            self.logger.debug(f"Created directory {host_path} for {path}")
            return OpenResult.opened(self.factory.for_directory(host_path, flags, path))

        try:
            # 'x' fails if something appeared since the existence check
            with open(host_path, 'x'):
                pass
        except OSError as e:
            self.logger.error(f"create file failed: {host_path}: {e}")
            raise HostCreateError(f"create new file failed: {host_path}") from e
        self.logger.debug(f"Created file {host_path} for {path}")
        return OpenResult.opened(self.factory.for_file(host_path, flags, path))

    def unlink(self, path: str) -> None:
        """Delete a guest path, recursively for directories; never raises"""
        if self._root_dir is None:
            self.logger.info(f"unlink path={path}")
            return

        # Symlinks are removed as links, so only the parent must stay inside
        host_path = resolve_host_entry(self._root_dir, path)
        if host_path is None:
            self.logger.info(f"unlink ignored, path escapes sandbox: {path}")
            return
        if host_path == self._root_dir:
            self.logger.info(f"unlink ignored, refusing to delete the sandbox root: {path}")
            return

        if os.path.isdir(host_path) and not os.path.islink(host_path):
            shutil.rmtree(host_path, ignore_errors=True)
        else:
            try:
                os.unlink(host_path)
            except OSError as e:
                self.logger.debug(f"unlink of {host_path} failed quietly: {e}")
        self.logger.debug(f"unlink path={path}, file={host_path}")

    def create_work_dir(self) -> Optional[Path]:
        """
        Get the scratch directory under the root, creating it if needed

        Returns:
            The work directory, or None when rootless

        Raises:
            HostCreateError: If the directory cannot be created
        """
        if self._root_dir is None:
            return None

        work_dir = self._root_dir / self.work_dir_name
        with self.lock:
            try:
                os.makedirs(work_dir, exist_ok=True)
            except OSError as e:
                self.logger.error(f"makedirs failed: {work_dir}: {e}")
                raise HostCreateError(f"makedirs failed: {work_dir}") from e
        return work_dir

    def mkdir(self, path: str) -> bool:
        """
        Create a guest directory and any missing parents

        Returns:
            True if the directory exists afterwards, False if the path is
            unavailable (rootless, outside the sandbox, or not a directory)

        Raises:
            HostCreateError: If the host refuses a permitted mkdir
        """
        if self._root_dir is None:
            self.logger.info(f"mkdir path={path}")
            return False

        host_path = self._resolve(path)
        if host_path is None:
            self.logger.debug(f"mkdir rejected, path escapes sandbox: {path}")
            return False

        with self.lock:
            file_type = FileType.from_host(host_path)
            if file_type == FileType.DIRECTORY:
                return True
            if file_type != FileType.MISSING:
                self.logger.debug(f"mkdir rejected, {path} exists and is not a directory")
                return False
            try:
                os.makedirs(host_path)
            except (FileExistsError, NotADirectoryError):
                # Some ancestor is a regular file
                self.logger.debug(f"mkdir rejected, an ancestor of {path} is not a directory")
                return False
            except OSError as e:
                self.logger.error(f"makedirs failed: {host_path}: {e}")
                raise HostCreateError(f"makedirs failed: {host_path}") from e
        self.logger.debug(f"mkdir path={path}, dir={host_path}")
        return True

    def rename(self, old_path: str, new_path: str) -> bool:
        """Move a guest entry; returns False when the move is not possible"""
        if self._root_dir is None:
            self.logger.info(f"rename {old_path} -> {new_path}")
            return False
        if {old_path, new_path} & {STDIN, STDOUT, STDERR}:
            return False

        source = self._resolve(old_path)
        target = self._resolve(new_path)
        if source is None or target is None:
            self.logger.debug(f"rename rejected, path escapes sandbox: {old_path} -> {new_path}")
            return False
        if self._root_dir in (source, target):
            return False

        with self.lock:
            if FileType.from_host(source) == FileType.MISSING:
                return False
            try:
                os.replace(source, target)
            except OSError as e:
                self.logger.warning(f"rename {source} -> {target} failed: {e}")
                return False
        self.logger.debug(f"rename {old_path} -> {new_path}")
        return True

    def exists(self, path: str) -> bool:
        """Check if a guest path resolves to an existing host entry"""
        if self._root_dir is None:
            return False
        host_path = self._resolve(path)
        return host_path is not None and os.path.lexists(host_path)
