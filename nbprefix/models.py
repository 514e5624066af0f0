# nbprefix/models.py
from dataclasses import dataclass
from typing import Optional

MAX_ADDRESS = 2 ** 32 - 1


def _dotted(value: int) -> str:
    return ".".join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


@dataclass(frozen=True)
class Subnet:
    address: int            # network address as a 32-bit integer
    prefix_len: int         # 8..30 when generated, 0..32 for single prefixes

    @property
    def size(self) -> int:
        return 2 ** (32 - self.prefix_len)

    @property
    def network(self) -> str:
        return _dotted(self.address)

    @property
    def broadcast(self) -> str:
        return _dotted(self.address + self.size - 1)

    @property
    def first_host(self) -> str:
        return _dotted(self.address + 1)

    @property
    def last_host(self) -> str:
        return _dotted(self.address + self.size - 2)

    @property
    def cidr(self) -> str:
        return f"{self.network}/{self.prefix_len}"

    def __str__(self) -> str:
        return self.cidr


@dataclass(frozen=True)
class NamedSubnet:
    name: str
    subnet: Subnet

    @property
    def cidr(self) -> str:
        return self.subnet.cidr


@dataclass
class PrefixRecord:
    prefix: str             # "a.b.c.d/len"
    description: str
    status: str = "active"  # NetBox prefix status
    is_pool: bool = False
    tenant_id: Optional[int] = None  # NetBox tenant, omitted from the file when unset

    def to_dict(self) -> dict:
        data = {
            "prefix": self.prefix,
            "description": self.description,
            "status": self.status,
            "is_pool": self.is_pool,
        }
        if self.tenant_id is not None:
            data["tenant_id"] = self.tenant_id
        return data
