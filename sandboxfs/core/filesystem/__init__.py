"""
sandboxfs Filesystem

This package maps guest file operations onto a sandboxed host directory,
offering the filesystem core, its result types and path handling.
"""

from .fs_types import FileType, OpenRejection, OpenResult
from .fs_types import STDIN, STDOUT, STDERR, TMP_DIR_NAME, DEFAULT_WORK_DIR_NAME

from .path_utils import (
    get_path_components, normalize_path, is_subpath, resolve_host_path,
    resolve_host_entry
)

from .host_fs import HostFileSystem

# Module exports
__all__ = [
    # Types
    'FileType', 'OpenRejection', 'OpenResult',
    'STDIN', 'STDOUT', 'STDERR', 'TMP_DIR_NAME', 'DEFAULT_WORK_DIR_NAME',

    # Path utilities
    'get_path_components', 'normalize_path', 'is_subpath', 'resolve_host_path', 'resolve_host_entry',

    # Filesystem
    'HostFileSystem',
]
