"""
Guest open-flag predicates

The filesystem core never looks at open-flag bits itself. It asks a
FlagPredicates instance, one per guest ABI, whether a create, a directory
open or an append was requested.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict

from .exceptions import InvalidFlagsProvider

logger = logging.getLogger('sandboxfs.flags')


@dataclass(frozen=True)
class OpenFlagBits:
    """Bit values of the open flags a guest ABI uses"""
    abi: str
    O_RDONLY: int
    O_WRONLY: int
    O_RDWR: int
    O_CREAT: int
    O_APPEND: int
    O_DIRECTORY: int

    def compose(self, write: bool = False, create: bool = False,
                directory: bool = False, append: bool = False) -> int:
        """Build a raw flags value for this ABI"""
        value = self.O_RDWR if write else self.O_RDONLY
        if create:
            value |= self.O_CREAT
        if directory:
            value |= self.O_DIRECTORY
        if append:
            value |= self.O_APPEND
        return value


LINUX_BITS = OpenFlagBits(
    abi='linux',
    O_RDONLY=0,
    O_WRONLY=0o1,
    O_RDWR=0o2,
    O_CREAT=0o100,
    O_APPEND=0o2000,
    O_DIRECTORY=0o200000,
)

DARWIN_BITS = OpenFlagBits(
    abi='darwin',
    O_RDONLY=0,
    O_WRONLY=0x1,
    O_RDWR=0x2,
    O_CREAT=0x200,
    O_APPEND=0x8,
    O_DIRECTORY=0x100000,
)


@dataclass(frozen=True)
class FlagPredicates:
    """The three questions the core asks about a raw flags value"""
    wants_create: Callable[[int], bool]
    wants_directory: Callable[[int], bool]
    wants_append: Callable[[int], bool]

    @classmethod
    def from_bits(cls, bits: OpenFlagBits) -> 'FlagPredicates':
        return cls(
            wants_create=lambda flags: (flags & bits.O_CREAT) != 0,
            wants_directory=lambda flags: (flags & bits.O_DIRECTORY) != 0,
            wants_append=lambda flags: (flags & bits.O_APPEND) != 0,
        )


LINUX_FLAGS = FlagPredicates.from_bits(LINUX_BITS)
DARWIN_FLAGS = FlagPredicates.from_bits(DARWIN_BITS)

_ABI_BITS: Dict[str, OpenFlagBits] = {
    'linux': LINUX_BITS,
    'android': LINUX_BITS,
    'darwin': DARWIN_BITS,
    'ios': DARWIN_BITS,
}

_ABI_FLAGS: Dict[str, FlagPredicates] = {
    'linux': LINUX_FLAGS,
    'android': LINUX_FLAGS,
    'darwin': DARWIN_FLAGS,
    'ios': DARWIN_FLAGS,
}


def bits_for_abi(abi: str) -> OpenFlagBits:
    """Get the open-flag bit layout for a guest ABI name"""
    try:
        return _ABI_BITS[abi.lower()]
    except KeyError:
        raise InvalidFlagsProvider(f"Unknown guest ABI: {abi}") from None


def provider_for_abi(abi: str) -> FlagPredicates:
    """Get the flag predicates for a guest ABI name"""
    try:
        provider = _ABI_FLAGS[abi.lower()]
    except KeyError:
        raise InvalidFlagsProvider(f"Unknown guest ABI: {abi}") from None
    logger.debug(f"Using {abi.lower()} open-flag predicates")
    return provider
