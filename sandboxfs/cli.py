#!/usr/bin/env python
"""
sandboxfs Command Line Interface

Inspect and exercise a sandbox root the way a guest process would: open
paths with guest flags, unlink, mkdir, and show the sandbox layout.
"""

import sys
import argparse
import logging
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import load_config
from .core.filesystem import HostFileSystem, TMP_DIR_NAME
from .exceptions import ConfigError, FatalFileSystemError
from .flags import bits_for_abi

logger = logging.getLogger('sandboxfs.cli')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = 'INFO') -> None:
    """Configure root logging for command-line use"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='sandboxfs',
        description='sandboxfs - sandboxed host filesystem for emulated guests'
    )

    parser.add_argument('--config', help='YAML config file', type=str)
    parser.add_argument('--root', help='Sandbox root directory (overrides config)', type=str)
    parser.add_argument('--abi', help='Guest ABI for open flags (overrides config)',
                        choices=['linux', 'android', 'darwin', 'ios'])
    parser.add_argument('--format', help='Output format', choices=['table', 'yaml'], default='table')
    parser.add_argument('-d', '--debug', help='Enable debug logging', action='store_true')
    parser.add_argument('--version', action='version', version=f'sandboxfs {__version__}')

    subparsers = parser.add_subparsers(dest='command', required=True)

    open_parser = subparsers.add_parser('open', help='Open a guest path')
    open_parser.add_argument('path')
    open_parser.add_argument('--create', action='store_true', help='Request O_CREAT')
    open_parser.add_argument('--directory', action='store_true', help='Request O_DIRECTORY')
    open_parser.add_argument('--append', action='store_true', help='Request O_APPEND')
    open_parser.add_argument('--write', action='store_true', help='Open read/write')

    unlink_parser = subparsers.add_parser('unlink', help='Delete a guest path')
    unlink_parser.add_argument('path')

    mkdir_parser = subparsers.add_parser('mkdir', help='Create a guest directory')
    mkdir_parser.add_argument('path')

    subparsers.add_parser('workdir', help='Create and show the work directory')
    subparsers.add_parser('info', help='Show the sandbox layout')

    return parser.parse_args(args)


def _print(console: Console, output_format: str, title: str, data: Dict[str, Any]) -> None:
    if output_format == 'yaml':
        console.print(yaml.safe_dump(data, sort_keys=False), end='', markup=False, highlight=False,
                      soft_wrap=True)
        return

    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="yellow")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)


def run_command(fs: HostFileSystem, parsed_args: argparse.Namespace, abi: str,
                console: Console) -> int:
    """Run one subcommand against fs and return the exit code"""
    root = fs.get_root_dir()
    fmt = parsed_args.format

    if parsed_args.command == 'open':
        flags = bits_for_abi(abi).compose(
            write=parsed_args.write,
            create=parsed_args.create,
            directory=parsed_args.directory,
            append=parsed_args.append
        )
        result = fs.open(parsed_args.path, flags)
        data = result.to_dict()
        data['flags'] = hex(flags)
        _print(console, fmt, f"open {parsed_args.path}", data)
        return 0 if result else 1

    if parsed_args.command == 'unlink':
        fs.unlink(parsed_args.path)
        _print(console, fmt, f"unlink {parsed_args.path}",
               {'path': parsed_args.path, 'exists': fs.exists(parsed_args.path)})
        return 0

    if parsed_args.command == 'mkdir':
        created = fs.mkdir(parsed_args.path)
        _print(console, fmt, f"mkdir {parsed_args.path}", {'path': parsed_args.path, 'ok': created})
        return 0 if created else 1

    if parsed_args.command == 'workdir':
        work_dir = fs.create_work_dir()
        _print(console, fmt, "work directory", {'work_dir': str(work_dir) if work_dir else None})
        return 0 if work_dir else 1

    # info
    _print(console, fmt, "sandbox", {
        'root_dir': str(root) if root else None,
        'tmp_dir': str(root / TMP_DIR_NAME) if root else None,
        'work_dir': str(root / fs.work_dir_name) if root else None,
        'abi': abi,
        'rootless': root is None,
    })
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the sandboxfs CLI"""
    parsed_args = parse_args(args)
    console = Console()

    try:
        config = load_config(parsed_args.config, root_dir=parsed_args.root, abi=parsed_args.abi)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 2

    setup_logging('DEBUG' if parsed_args.debug else config.log_level)

    try:
        fs = HostFileSystem.from_config(config)
        return run_command(fs, parsed_args, config.abi, console)
    except FatalFileSystemError as e:
        logger.error(f"Fatal filesystem error: {e}")
        console.print(f"[red]Fatal:[/red] {e}")
        return 2


if __name__ == '__main__':
    sys.exit(main())
