"""
DNS Resource Record Model

The canonical, immutable record value shared by the codec, the field parsers
and the record stores.
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Optional

MAX_TTL = 0xFFFFFFFF


class DNSRecordType(IntEnum):
    """DNS Record Types"""

    A = 1
    NS = 2
    CNAME = 5
    SOA = 6
    PTR = 12
    MX = 15
    TXT = 16
    AAAA = 28
    SRV = 33
    ANY = 255


class DNSClass(IntEnum):
    """DNS Classes"""

    IN = 1
    CS = 2
    CH = 3
    HS = 4
    ANY = 255


def type_name(rtype: int) -> str:
    """Mnemonic for a type code, or TYPEnnn for codes we don't know"""
    try:
        return DNSRecordType(rtype).name
    except ValueError:
        return f"TYPE{rtype}"


def class_name(dclass: int) -> str:
    """Mnemonic for a class code, or CLASSnnn for codes we don't know"""
    try:
        return DNSClass(dclass).name
    except ValueError:
        return f"CLASS{dclass}"


def to_absolute(name: str) -> str:
    """Return name in absolute form (trailing dot present)"""
    name = name.strip()
    body = name[:-1]
    # an odd run of backslashes before the final dot escapes it
    escapes = len(body) - len(body.rstrip("\\"))
    if not name.endswith(".") or escapes % 2:
        name += "."
    return name


@dataclass(frozen=True)
class ResourceRecord:
    """Canonical DNS resource record.

    ``data`` holds the canonical wire encoding of the type-specific rdata,
    so byte comparison between two records is meaningful. ``id`` is assigned
    by the record store and is ignored by equality.
    """

    name: str
    rtype: int
    dclass: int
    ttl: int
    data: bytes
    id: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "name", to_absolute(self.name))
        object.__setattr__(self, "data", bytes(self.data))

        if not 0 <= self.rtype <= 0xFFFF:
            raise ValueError(f"Invalid record type: {self.rtype}")
        if not 0 <= self.dclass <= 0xFFFF:
            raise ValueError(f"Invalid record class: {self.dclass}")
        if not 0 <= self.ttl <= MAX_TTL:
            raise ValueError(f"Invalid TTL: {self.ttl}")
        if len(self.data) > 0xFFFF:
            raise ValueError("Record data exceeds 65535 bytes")

    @property
    def type_name(self) -> str:
        return type_name(self.rtype)

    @property
    def class_name(self) -> str:
        return class_name(self.dclass)

    def with_id(self, record_id: int) -> "ResourceRecord":
        """Copy of this record carrying a store-assigned id"""
        return replace(self, id=record_id)
