# nbprefix/processing/sequence.py

from __future__ import annotations
from typing import Optional

from nbprefix.errors import AddressOverflowError, CountError
from nbprefix.models import MAX_ADDRESS, NamedSubnet, Subnet
from nbprefix.processing.address import (
    format_address,
    subnet_size,
    validate_network_address,
    validate_prefix_length,
)
from nbprefix.utils.logging import get_logger

log = get_logger(__name__)

MIN_COUNT = 1
MAX_COUNT = 254


def validate_count(count: int) -> int:
    if not MIN_COUNT <= count <= MAX_COUNT:
        raise CountError(f"Number of subnets must be between {MIN_COUNT} and {MAX_COUNT}, got {count}")
    return count


def subnet_name(address: int, index: int, base_name: Optional[str] = None) -> str:
    """
    Name for the subnet at ``index`` (0-based).

    With a base name: "network_01", "network_02", ...
    Without: "subnet_10_0_1_0" from the dotted address.
    """
    if base_name:
        return f"{base_name}_{index + 1:02d}"
    return "subnet_" + format_address(address).replace(".", "_")


def generate_sequence(
        start: int,
        prefix_len: int,
        count: int,
        base_name: Optional[str] = None,
) -> list[NamedSubnet]:
    """
    Build ``count`` consecutive /prefix_len subnets beginning at ``start``.

    Subnet i sits at start + i * 2^(32 - prefix_len). The whole batch is
    rejected if any subnet would fall past 255.255.255.255; nothing partial
    is returned.

    Raises CountError, RangeError (bad prefix length or unaligned start) or
    AddressOverflowError.
    """
    validate_count(count)
    validate_prefix_length(prefix_len)
    validate_network_address(start, prefix_len)

    size = subnet_size(prefix_len)
    sequence: list[NamedSubnet] = []

    for i in range(count):
        address = start + i * size
        if address > MAX_ADDRESS:
            raise AddressOverflowError(
                index=i,
                start=format_address(start),
                prefix_len=prefix_len,
                count=count,
            )
        sequence.append(
            NamedSubnet(
                name=subnet_name(address, i, base_name),
                subnet=Subnet(address=address, prefix_len=prefix_len),
            )
        )

    log.debug(
        "Generated %d /%d subnets from %s to %s",
        count, prefix_len, sequence[0].subnet.network, sequence[-1].subnet.network,
    )
    return sequence
