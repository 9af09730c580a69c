"""
sandboxfs Path Utilities

This module maps untrusted guest paths onto the host sandbox tree. Guest
paths are always interpreted relative to the sandbox root, whether or not
they start with a separator.
"""

import os
import logging
from pathlib import Path
from typing import List, Optional

# Set up logging
logger = logging.getLogger('sandboxfs.core.filesystem.path_utils')

# Constants
PATH_SEPARATOR = '/'
CURRENT_DIR = '.'
PARENT_DIR = '..'


def get_path_components(path: str) -> Optional[List[str]]:
    """
    Split a guest path into normalized components

    Args:
        path: Guest path

    Returns:
        List of components, or None if a '..' climbs above the root or the
        path holds a NUL byte
    """
    if "\x00" in path:
        return None

    # Replace Windows-style path separators with Unix-style
    path = path.replace('\\', PATH_SEPARATOR)

    result = []
    for component in path.split(PATH_SEPARATOR):
        if not component or component == CURRENT_DIR:
            continue
        if component == PARENT_DIR:
            if not result:
                return None
            result.pop()
        else:
            result.append(component)
    return result


def normalize_path(path: str) -> Optional[str]:
    """
    Normalize a guest path to its root-anchored form

    Args:
        path: Guest path

    Returns:
        Normalized path such as '/etc/hosts', or None if it escapes the root
    """
    components = get_path_components(path)
    if components is None:
        return None
    return PATH_SEPARATOR + PATH_SEPARATOR.join(components)


def is_subpath(parent: Path, child: Path) -> bool:
    """
    Check if a host path lies at or below another host path

    Args:
        parent: Parent path
        child: Child path

    Returns:
        True if child equals parent or is below it
    """
    try:
        child.relative_to(parent)
    except ValueError:
        return False
    return True


def resolve_host_path(root: Path, path: str) -> Optional[Path]:
    """
    Resolve a guest path to the host path under root

    The lexical result must stay under root, and so must its real path once
    symlinks are followed.

    Args:
        root: Absolute sandbox root
        path: Guest path

    Returns:
        Host path, or None if the guest path escapes the sandbox
    """
    components = get_path_components(path)
    if components is None:
        logger.debug(f"Guest path climbs above the sandbox root: {path!r}")
        return None

    host_path = root.joinpath(*components)
    real_root = Path(os.path.realpath(root))
    real_path = Path(os.path.realpath(host_path))
    if not is_subpath(real_root, real_path):
        logger.debug(f"Guest path {path!r} resolves outside the sandbox: {real_path}")
        return None
    return host_path


def resolve_host_entry(root: Path, path: str) -> Optional[Path]:
    """
    Resolve a guest path to the host entry under root without following it

    Only the parent directory is checked through its real path, so a symlink
    inside the sandbox maps to the link itself wherever it points.

    Args:
        root: Absolute sandbox root
        path: Guest path

    Returns:
        Host path of the entry, or None if its parent escapes the sandbox
    """
    components = get_path_components(path)
    if components is None:
        logger.debug(f"Guest path climbs above the sandbox root: {path!r}")
        return None
    if not components:
        return root

    parent = root.joinpath(*components[:-1])
    real_root = Path(os.path.realpath(root))
    real_parent = Path(os.path.realpath(parent))
    if not is_subpath(real_root, real_parent):
        logger.debug(f"Parent of guest path {path!r} resolves outside the sandbox: {real_parent}")
        return None
    return parent / components[-1]
