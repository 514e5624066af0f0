# nbprefix/errors.py

from __future__ import annotations

from typing import Optional


class PrefixError(ValueError):
    """Base class for every validation or generation failure."""


class FormatError(PrefixError):
    """Input string does not have the expected shape."""


class RangeError(PrefixError):
    """
    A value is out of bounds, or an address is not aligned to its subnet.

    When a corrected value can be derived (e.g. the network address an
    unaligned host address belongs to) it is kept in ``correction``.
    """

    def __init__(self, message: str, correction: Optional[str] = None) -> None:
        super().__init__(message)
        self.correction = correction


class CountError(PrefixError):
    """Requested number of subnets is outside [1, 254]."""


class AddressOverflowError(PrefixError, OverflowError):
    """A generated subnet would fall past 255.255.255.255."""

    def __init__(self, index: int, start: str, prefix_len: int, count: int) -> None:
        super().__init__(
            f"IP address overflow - cannot create {count} /{prefix_len} subnets "
            f"from {start}: subnet {index + 1} (index {index}) is past 255.255.255.255"
        )
        self.index = index
        self.start = start
        self.prefix_len = prefix_len
        self.count = count


class DocumentError(Exception):
    """The prefix variables file is missing, unreadable or malformed."""
