"""
nbprefix: consecutive IPv4 prefix generation for NetBox Terraform configs.
"""

from nbprefix.errors import (
    AddressOverflowError,
    CountError,
    DocumentError,
    FormatError,
    PrefixError,
    RangeError,
)
from nbprefix.models import NamedSubnet, PrefixRecord, Subnet
from nbprefix.processing.address import (
    format_address,
    is_network_address,
    nearest_network_address,
    parse_cidr,
    parse_network_address,
    parse_prefix_length,
    validate_network_address,
    validate_prefix_length,
)
from nbprefix.processing.sequence import generate_sequence, subnet_name

__all__ = [
    "AddressOverflowError",
    "CountError",
    "DocumentError",
    "FormatError",
    "PrefixError",
    "RangeError",
    "NamedSubnet",
    "PrefixRecord",
    "Subnet",
    "format_address",
    "is_network_address",
    "nearest_network_address",
    "parse_cidr",
    "parse_network_address",
    "parse_prefix_length",
    "validate_network_address",
    "validate_prefix_length",
    "generate_sequence",
    "subnet_name",
]

__version__ = "0.1.0"
