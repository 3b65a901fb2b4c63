"""
DNS Wire Codec

This module implements RFC 1035 resource record handling for the manager:
- Domain name label encoding and decoding with compression support
- Answer-section record framing (owner, type, class, ttl, rdlength, rdata)
- Canonical rdata encoding for A, AAAA, NS, CNAME, PTR, MX, TXT and SOA

Field parsers build rdata with the same pack_* helpers that decode() uses to
canonicalize imported bytes, so both paths produce identical record data.
"""

import ipaddress
import logging
import struct
from dataclasses import dataclass
from typing import List, Tuple

from .errors import MalformedRecordError
from .record import DNSRecordType, ResourceRecord, to_absolute, type_name

logger = logging.getLogger(__name__)

MAX_LABEL_LENGTH = 63
MAX_NAME_LENGTH = 255
MAX_TXT_STRING = 255
MAX_POINTER_HOPS = 128
MAX_UINT16 = 0xFFFF
MAX_UINT32 = 0xFFFFFFFF

RR_HEADER = struct.Struct("!HHIH")
SOA_TAIL = struct.Struct("!IIIII")

# Types whose rdata is a single domain name
NAME_RDATA_TYPES = (DNSRecordType.NS, DNSRecordType.CNAME, DNSRecordType.PTR)

# Label bytes written with a backslash in presentation form
ESCAPED_BYTES = b".\\"


@dataclass(frozen=True)
class SOAData:
    """Decoded SOA rdata"""

    mname: str
    rname: str
    serial: int
    refresh: int
    retry: int
    expire: int
    minimum: int


def escape_label(label: bytes) -> str:
    """Presentation form of a label; dots, backslashes and bytes outside
    printable ASCII are escaped as \\. \\\\ and \\DDD"""
    text = []
    for byte in label:
        if byte in ESCAPED_BYTES:
            text.append("\\" + chr(byte))
        elif 0x20 < byte < 0x7F:
            text.append(chr(byte))
        else:
            text.append(f"\\{byte:03d}")
    return "".join(text)


def split_labels(name: str) -> List[bytes]:
    """Split a presentation-format name into raw labels, resolving escapes"""
    labels = []
    current = bytearray()
    i = 0
    while i < len(name):
        char = name[i]
        if char == "\\":
            digits = name[i + 1 : i + 4]
            if len(digits) == 3 and all(d in "0123456789" for d in digits):
                value = int(digits)
                if value > 0xFF:
                    raise ValueError(f"Invalid escape \\{digits} in name: {name}")
                current.append(value)
                i += 4
                continue
            if i + 1 >= len(name):
                raise ValueError(f"Trailing backslash in name: {name}")
            char = name[i + 1]
            i += 1
        elif char == ".":
            if not current:
                raise ValueError(f"Empty label in name: {name}")
            labels.append(bytes(current))
            current = bytearray()
            i += 1
            continue

        try:
            current.extend(char.encode("ascii"))
        except UnicodeEncodeError:
            raise ValueError(f"Non-ASCII character in name: {name}")
        i += 1

    if current:
        labels.append(bytes(current))
    return labels


def encode_name(name: str) -> bytes:
    """Encode domain name using DNS label encoding (no compression)"""
    if name in ("", "."):
        return b"\x00"

    result = b""
    for label in split_labels(name):
        if len(label) > MAX_LABEL_LENGTH:
            raise ValueError(f"Label too long: {escape_label(label)}")
        result += struct.pack("!B", len(label)) + label
    result += b"\x00"  # Root label

    if len(result) > MAX_NAME_LENGTH:
        raise ValueError(f"Name too long: {name}")
    return result


def decode_name(data: bytes, offset: int) -> Tuple[str, int]:
    """Decode DNS name with compression support.

    Returns the absolute name and the offset just past the name as it
    appears at ``offset`` (a compression pointer counts as two bytes).
    """
    labels = []
    end_offset = None
    hops = 0
    wire_length = 1

    while True:
        if offset >= len(data):
            raise MalformedRecordError("Invalid name: offset out of bounds")

        length = data[offset]

        if length == 0:
            offset += 1
            break
        elif (length & 0xC0) == 0xC0:
            if offset + 1 >= len(data):
                raise MalformedRecordError("Invalid compression pointer")
            hops += 1
            if hops > MAX_POINTER_HOPS:
                raise MalformedRecordError("Invalid name: compression loop")
            pointer = ((length & 0x3F) << 8) | data[offset + 1]
            if end_offset is None:
                end_offset = offset + 2
            offset = pointer
        elif length & 0xC0:
            raise MalformedRecordError(f"Invalid label type: 0x{length:02x}")
        else:
            if offset + length + 1 > len(data):
                raise MalformedRecordError("Invalid label: length exceeds data")
            label = escape_label(data[offset + 1 : offset + 1 + length])
            wire_length += length + 1
            if wire_length > MAX_NAME_LENGTH:
                raise MalformedRecordError("Invalid name: longer than 255 bytes")
            labels.append(label)
            offset += length + 1

    name = ".".join(labels) + "." if labels else "."
    return name, end_offset if end_offset is not None else offset


def _check_uint(value: int, maximum: int, what: str) -> int:
    if not 0 <= value <= maximum:
        raise ValueError(f"{what} out of range: {value}")
    return value


def pack_a(address: str) -> bytes:
    """A rdata for a dotted-quad IPv4 address"""
    return ipaddress.IPv4Address(address.strip()).packed


def pack_name(name: str) -> bytes:
    """Canonical single-name rdata (NS, CNAME, PTR)"""
    return encode_name(to_absolute(name).lower())


def pack_mx(priority: int, exchange: str) -> bytes:
    """Canonical MX rdata"""
    _check_uint(priority, MAX_UINT16, "MX priority")
    return struct.pack("!H", priority) + pack_name(exchange)


def pack_txt(text: str) -> bytes:
    """TXT rdata, splitting text into 255-byte character strings"""
    text_bytes = text.encode("utf-8")
    if not text_bytes:
        return b"\x00"

    rdata = b""
    offset = 0
    while offset < len(text_bytes):
        chunk = text_bytes[offset : offset + MAX_TXT_STRING]
        rdata += struct.pack("!B", len(chunk)) + chunk
        offset += MAX_TXT_STRING
    return rdata


def pack_soa(
    mname: str,
    rname: str,
    serial: int,
    refresh: int,
    retry: int,
    expire: int,
    minimum: int,
) -> bytes:
    """Canonical SOA rdata"""
    for what, value in (
        ("SOA serial", serial),
        ("SOA refresh", refresh),
        ("SOA retry", retry),
        ("SOA expire", expire),
        ("SOA minimum", minimum),
    ):
        _check_uint(value, MAX_UINT32, what)

    return (
        pack_name(mname)
        + pack_name(rname)
        + SOA_TAIL.pack(serial, refresh, retry, expire, minimum)
    )


def unpack_txt(data: bytes) -> List[bytes]:
    """Split TXT rdata into its character strings"""
    strings = []
    offset = 0
    while offset < len(data):
        length = data[offset]
        if offset + length + 1 > len(data):
            raise MalformedRecordError("Invalid TXT rdata: string exceeds data")
        strings.append(data[offset + 1 : offset + 1 + length])
        offset += length + 1
    if not strings:
        raise MalformedRecordError("Invalid TXT rdata: no character strings")
    return strings


def unpack_soa(data: bytes) -> SOAData:
    """Decode canonical SOA rdata"""
    mname, offset = decode_name(data, 0)
    rname, offset = decode_name(data, offset)
    if len(data) - offset != SOA_TAIL.size:
        raise MalformedRecordError(
            f"Invalid SOA rdata: expected {SOA_TAIL.size} bytes after names, "
            f"got {len(data) - offset}"
        )
    serial, refresh, retry, expire, minimum = SOA_TAIL.unpack(data[offset:])
    return SOAData(mname, rname, serial, refresh, retry, expire, minimum)


def _expect_end(position: int, end: int, rtype: int) -> None:
    if position != end:
        raise MalformedRecordError(
            f"Invalid {type_name(rtype)} rdata: length mismatch"
        )


def canonical_rdata(rtype: int, wire: bytes, offset: int, length: int) -> bytes:
    """Canonical form of the rdata found at wire[offset:offset + length].

    Names are resolved against the whole buffer (they may be compressed),
    then re-encoded uncompressed and lowercased.
    """
    end = offset + length
    rdata = wire[offset:end]

    if rtype == DNSRecordType.A:
        if length != 4:
            raise MalformedRecordError(f"Invalid A rdata: {length} bytes")
        return rdata

    if rtype == DNSRecordType.AAAA:
        if length != 16:
            raise MalformedRecordError(f"Invalid AAAA rdata: {length} bytes")
        return rdata

    if rtype in NAME_RDATA_TYPES:
        name, position = decode_name(wire, offset)
        _expect_end(position, end, rtype)
        return pack_name(name)

    if rtype == DNSRecordType.MX:
        if length < 3:
            raise MalformedRecordError(f"Invalid MX rdata: {length} bytes")
        (priority,) = struct.unpack("!H", rdata[:2])
        exchange, position = decode_name(wire, offset + 2)
        _expect_end(position, end, rtype)
        return pack_mx(priority, exchange)

    if rtype == DNSRecordType.SOA:
        mname, position = decode_name(wire, offset)
        rname, position = decode_name(wire, position)
        if end - position != SOA_TAIL.size:
            raise MalformedRecordError("Invalid SOA rdata: length mismatch")
        return pack_soa(mname, rname, *SOA_TAIL.unpack(wire[position:end]))

    if rtype == DNSRecordType.TXT:
        unpack_txt(rdata)
        return rdata

    return rdata


def decode(wire: bytes) -> ResourceRecord:
    """Parse a single answer-section resource record from wire bytes.

    Raises:
        MalformedRecordError: If the bytes are not exactly one record
    """
    if not wire:
        raise MalformedRecordError("Invalid resource record: no data")

    name, offset = decode_name(wire, 0)

    if offset + RR_HEADER.size > len(wire):
        raise MalformedRecordError(
            "Invalid resource record: not enough data for header"
        )

    rtype, rclass, ttl, rdlength = RR_HEADER.unpack(
        wire[offset : offset + RR_HEADER.size]
    )
    offset += RR_HEADER.size

    if offset + rdlength > len(wire):
        raise MalformedRecordError("Invalid resource record: not enough data for rdata")

    try:
        data = canonical_rdata(rtype, wire, offset, rdlength)
    except ValueError as e:
        raise MalformedRecordError(f"Invalid {type_name(rtype)} rdata: {e}") from e
    offset += rdlength

    if offset != len(wire):
        raise MalformedRecordError(
            f"Invalid resource record: {len(wire) - offset} trailing bytes"
        )

    logger.debug(f"Decoded {type_name(rtype)} record for {name}")
    return ResourceRecord(name=name, rtype=rtype, dclass=rclass, ttl=ttl, data=data)


def encode(record: ResourceRecord) -> bytes:
    """Convert a record to uncompressed answer-section wire bytes"""
    header = RR_HEADER.pack(record.rtype, record.dclass, record.ttl, len(record.data))
    return encode_name(record.name) + header + record.data
