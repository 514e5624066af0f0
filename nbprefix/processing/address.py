# nbprefix/processing/address.py

from __future__ import annotations
import ipaddress
import re

from nbprefix.errors import FormatError, RangeError
from nbprefix.models import MAX_ADDRESS, Subnet

MIN_PREFIX_LEN = 8
MAX_PREFIX_LEN = 30

# ASCII digits only, no leading zeros; values above 255 pass the shape check
# so they can be reported as out of range.
_OCTET = r"(0|[1-9][0-9]{0,2})"
_DOTTED_RE = re.compile(rf"{_OCTET}\.{_OCTET}\.{_OCTET}\.{_OCTET}")
_PREFIX_RE = re.compile(r"/?([0-9]{1,2})")


def parse_network_address(ip: str) -> int:
    """
    Parse "a.b.c.d" into a 32-bit integer.

    Raises FormatError when the string is not four dot-separated decimal
    groups (ASCII digits, no leading zeros, no surrounding whitespace) and
    RangeError when an octet is above 255.
    """
    match = _DOTTED_RE.fullmatch(ip)
    if match is None:
        raise FormatError(f"Invalid IP address format: {ip!r}")

    for position, group in enumerate(match.groups(), start=1):
        octet = int(group)
        if octet > 255:
            raise RangeError(f"Invalid IP address {ip!r} - octet {position} ({octet}) out of range 0-255")

    try:
        return int(ipaddress.IPv4Address(ip))
    except ipaddress.AddressValueError as e:
        raise FormatError(f"Invalid IP address format: {ip!r} ({e})") from e


def format_address(value: int) -> str:
    """Render a 32-bit integer as dotted decimal."""
    if not 0 <= value <= MAX_ADDRESS:
        raise RangeError(f"Address value {value} is outside the IPv4 space")
    return str(ipaddress.IPv4Address(value))


def validate_prefix_length(prefix_len: int) -> int:
    if not MIN_PREFIX_LEN <= prefix_len <= MAX_PREFIX_LEN:
        raise RangeError(
            f"CIDR prefix length must be between {MIN_PREFIX_LEN} and {MAX_PREFIX_LEN}, got {prefix_len}"
        )
    return prefix_len


def parse_prefix_length(text: str) -> int:
    """Accept "/24" or "24"."""
    match = _PREFIX_RE.fullmatch(text.strip())
    if match is None:
        raise FormatError(f"CIDR must be in format /XX (e.g. /24, /26, /17), got {text!r}")
    return validate_prefix_length(int(match.group(1)))


def parse_cidr(text: str) -> Subnet:
    """
    Parse a single prefix such as "192.168.1.0/24" (any length /0 to /32).

    The address must be the network address of the block; the RangeError
    otherwise carries the corrected prefix.
    """
    address_part, sep, length_part = text.partition("/")
    if not sep or not re.fullmatch(r"[0-9]{1,2}", length_part):
        raise FormatError(f"Invalid CIDR format: {text!r} (example: 192.168.1.0/24)")

    address = parse_network_address(address_part)
    prefix_len = int(length_part)
    if prefix_len > 32:
        raise RangeError(f"Invalid prefix length in {text!r}: must be 0-32")

    size = 1 << (32 - prefix_len)
    if address % size:
        correct = f"{format_address(address - address % size)}/{prefix_len}"
        raise RangeError(
            f"{text} has host bits set; correct prefix would be: {correct}",
            correction=correct,
        )
    return Subnet(address=address, prefix_len=prefix_len)


def subnet_size(prefix_len: int) -> int:
    return 2 ** (32 - prefix_len)


def is_network_address(address: int, prefix_len: int) -> bool:
    validate_prefix_length(prefix_len)
    return address % subnet_size(prefix_len) == 0


def nearest_network_address(address: int, prefix_len: int) -> int:
    """Network address of the /prefix_len block that contains ``address``."""
    validate_prefix_length(prefix_len)
    return address - (address % subnet_size(prefix_len))


def validate_network_address(address: int, prefix_len: int) -> int:
    """
    Ensure ``address`` is the network address for /prefix_len.

    On failure the RangeError names the network address the caller probably
    meant and carries it in ``correction``.
    """
    if not is_network_address(address, prefix_len):
        correct = format_address(nearest_network_address(address, prefix_len))
        raise RangeError(
            f"IP address {format_address(address)} must be a network address for /{prefix_len} subnet; "
            f"correct network address would be: {correct}",
            correction=correct,
        )
    return address
