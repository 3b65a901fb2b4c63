"""
Field parsers

Builds canonical ResourceRecords from positional command arguments, one
parser per record type. Rdata is produced with the codec's pack_* helpers,
so a parsed record carries the same data as its imported wire equivalent.
"""

import ipaddress
from typing import Callable, Dict, Optional, Sequence

from . import codec
from .errors import UsageError
from .record import DNSClass, DNSRecordType, ResourceRecord, to_absolute

DEFAULT_TTL = 86400
DEFAULT_SOA_REFRESH = 3600
DEFAULT_SOA_RETRY = 600
DEFAULT_SOA_EXPIRE = 604800
DEFAULT_SOA_MINIMUM = 3600

PARSE_ANAME_USAGE = (
    "  hostname ipaddress [ttl]\n"
    "\t hostname: name of the host\n"
    "\t ipaddress: IPv4 address of the host\n"
    "\t ttl: time to live in seconds (optional)"
)

PARSE_MX_USAGE = (
    "  domainname priority exchange [ttl]\n"
    "\t domainname: domain the mail exchanger serves\n"
    "\t priority: preference value, lower is preferred (0-65535)\n"
    "\t exchange: host name of the mail exchanger\n"
    "\t ttl: time to live in seconds (optional)"
)

PARSE_NS_USAGE = (
    "  domainname nameserver [ttl]\n"
    "\t domainname: delegated domain\n"
    "\t nameserver: host name of the name server\n"
    "\t ttl: time to live in seconds (optional)"
)

PARSE_CNAME_USAGE = (
    "  alias target [ttl]\n"
    "\t alias: alias host name\n"
    "\t target: canonical host name the alias points to\n"
    "\t ttl: time to live in seconds (optional)"
)

PARSE_TXT_USAGE = (
    "  domainname text [ttl]\n"
    "\t domainname: owner name of the record\n"
    "\t text: record text, quote it if it contains spaces\n"
    "\t ttl: time to live in seconds (optional)"
)

PARSE_SOA_USAGE = (
    "  domainname primarynameserver admincontact serial [ttl] [refresh] [retry] "
    "[expire] [minimum]\n"
    "\t domainname: zone name\n"
    "\t primarynameserver: primary name server of the zone\n"
    "\t admincontact: responsible mailbox, e.g. hostmaster.example.com or "
    "hostmaster@example.com\n"
    "\t serial: zone serial number\n"
    "\t ttl, refresh, retry, expire, minimum: timers in seconds (optional)"
)


def _required(args: Sequence[str], index: int, what: str, usage: str) -> str:
    if len(args) <= index or not args[index].strip():
        raise UsageError(f"Missing required argument: {what}", usage)
    return args[index].strip()


def _optional(args: Sequence[str], index: int) -> Optional[str]:
    if len(args) <= index or not args[index].strip():
        return None
    return args[index].strip()


def _check_arity(args: Sequence[str], maximum: int, usage: str) -> None:
    if len(args) > maximum:
        raise UsageError(
            f"Too many arguments: expected at most {maximum}, got {len(args)}",
            usage,
        )


def _to_uint(value: str, maximum: int, what: str, usage: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise UsageError(f"Invalid {what}: {value!r} is not a number", usage)
    if not 0 <= number <= maximum:
        raise UsageError(f"Invalid {what}: {number} out of range 0-{maximum}", usage)
    return number


def _to_name(value: str, what: str, usage: str) -> str:
    name = to_absolute(value)
    try:
        codec.encode_name(name)
    except ValueError as e:
        raise UsageError(f"Invalid {what}: {e}", usage)
    return name


def mailbox_to_name(contact: str) -> str:
    """Turn hostmaster@example.com into hostmaster.example.com

    Dots in the local part are escaped so it stays a single label:
    john.doe@example.com becomes john\\.doe.example.com.
    """
    local, at, domain = contact.partition("@")
    if not at:
        return contact
    return local.replace(".", "\\.") + "." + domain


class DNSRecordParser:
    """Parses positional arguments into records, one method per type"""

    def __init__(
        self,
        default_ttl: int = DEFAULT_TTL,
        soa_refresh: int = DEFAULT_SOA_REFRESH,
        soa_retry: int = DEFAULT_SOA_RETRY,
        soa_expire: int = DEFAULT_SOA_EXPIRE,
        soa_minimum: int = DEFAULT_SOA_MINIMUM,
    ):
        self.default_ttl = default_ttl
        self.soa_refresh = soa_refresh
        self.soa_retry = soa_retry
        self.soa_expire = soa_expire
        self.soa_minimum = soa_minimum

        self._parsers: Dict[int, Callable[[Sequence[str]], ResourceRecord]] = {
            DNSRecordType.A: self.parse_aname,
            DNSRecordType.MX: self.parse_mx,
            DNSRecordType.NS: self.parse_ns,
            DNSRecordType.CNAME: self.parse_cname,
            DNSRecordType.TXT: self.parse_txt,
            DNSRecordType.SOA: self.parse_soa,
        }

    def parse(self, rtype: int, args: Sequence[str]) -> ResourceRecord:
        """Parse args with the parser registered for rtype"""
        try:
            parser = self._parsers[rtype]
        except KeyError:
            raise UsageError(f"No field parser for record type {rtype}")
        return parser(args)

    def _ttl(self, args: Sequence[str], index: int, usage: str) -> int:
        value = _optional(args, index)
        if value is None:
            return self.default_ttl
        return _to_uint(value, codec.MAX_UINT32, "ttl", usage)

    def _record(self, name: str, rtype: int, ttl: int, data: bytes) -> ResourceRecord:
        return ResourceRecord(
            name=name, rtype=rtype, dclass=DNSClass.IN, ttl=ttl, data=data
        )

    def parse_aname(self, args: Sequence[str]) -> ResourceRecord:
        usage = PARSE_ANAME_USAGE
        _check_arity(args, 3, usage)
        name = _to_name(_required(args, 0, "hostname", usage), "hostname", usage)
        address = _required(args, 1, "ipaddress", usage)
        ttl = self._ttl(args, 2, usage)

        try:
            data = codec.pack_a(address)
        except ipaddress.AddressValueError:
            raise UsageError(f"Invalid IPv4 address: {address}", usage)

        return self._record(name, DNSRecordType.A, ttl, data)

    def parse_mx(self, args: Sequence[str]) -> ResourceRecord:
        usage = PARSE_MX_USAGE
        _check_arity(args, 4, usage)
        name = _to_name(_required(args, 0, "domainname", usage), "domainname", usage)
        priority = _to_uint(
            _required(args, 1, "priority", usage), codec.MAX_UINT16, "priority", usage
        )
        exchange = _to_name(_required(args, 2, "exchange", usage), "exchange", usage)
        ttl = self._ttl(args, 3, usage)

        return self._record(
            name, DNSRecordType.MX, ttl, codec.pack_mx(priority, exchange)
        )

    def parse_ns(self, args: Sequence[str]) -> ResourceRecord:
        usage = PARSE_NS_USAGE
        _check_arity(args, 3, usage)
        name = _to_name(_required(args, 0, "domainname", usage), "domainname", usage)
        server = _to_name(
            _required(args, 1, "nameserver", usage), "nameserver", usage
        )
        ttl = self._ttl(args, 2, usage)

        return self._record(name, DNSRecordType.NS, ttl, codec.pack_name(server))

    def parse_cname(self, args: Sequence[str]) -> ResourceRecord:
        usage = PARSE_CNAME_USAGE
        _check_arity(args, 3, usage)
        alias = _to_name(_required(args, 0, "alias", usage), "alias", usage)
        target = _to_name(_required(args, 1, "target", usage), "target", usage)
        ttl = self._ttl(args, 2, usage)

        return self._record(alias, DNSRecordType.CNAME, ttl, codec.pack_name(target))

    def parse_txt(self, args: Sequence[str]) -> ResourceRecord:
        usage = PARSE_TXT_USAGE
        _check_arity(args, 3, usage)
        name = _to_name(_required(args, 0, "domainname", usage), "domainname", usage)
        if len(args) < 2:
            raise UsageError("Missing required argument: text", usage)
        ttl = self._ttl(args, 2, usage)

        data = codec.pack_txt(args[1])
        if len(data) > codec.MAX_UINT16:
            raise UsageError(
                f"Text too long: {len(data)} bytes of record data, "
                f"at most {codec.MAX_UINT16}",
                usage,
            )

        return self._record(name, DNSRecordType.TXT, ttl, data)

    def parse_soa(self, args: Sequence[str]) -> ResourceRecord:
        usage = PARSE_SOA_USAGE
        _check_arity(args, 9, usage)
        name = _to_name(_required(args, 0, "domainname", usage), "domainname", usage)
        primary = _to_name(
            _required(args, 1, "primarynameserver", usage), "primarynameserver", usage
        )
        contact = _to_name(
            mailbox_to_name(_required(args, 2, "admincontact", usage)),
            "admincontact",
            usage,
        )
        serial = _to_uint(
            _required(args, 3, "serial", usage), codec.MAX_UINT32, "serial", usage
        )
        ttl = self._ttl(args, 4, usage)

        timers = []
        for index, what, default in (
            (5, "refresh", self.soa_refresh),
            (6, "retry", self.soa_retry),
            (7, "expire", self.soa_expire),
            (8, "minimum", self.soa_minimum),
        ):
            value = _optional(args, index)
            timers.append(
                default
                if value is None
                else _to_uint(value, codec.MAX_UINT32, what, usage)
            )

        data = codec.pack_soa(primary, contact, serial, *timers)
        return self._record(name, DNSRecordType.SOA, ttl, data)
