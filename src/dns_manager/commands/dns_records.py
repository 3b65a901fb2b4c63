"""
DNS record commands

Command definitions and logic for managing DNS records. Command names are
case-insensitive. Each command runs to completion against the record store
and reports exactly one outcome: success, no records found, or failure.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from ..core import codec
from ..core.ensure import ensure_unique
from ..core.errors import (
    DNSManagerError,
    MalformedRecordError,
    ServiceError,
    TypeMismatchError,
    UsageError,
)
from ..core.matcher import lookup_by_domain, match_by_type_and_domain
from ..core.parsers import (
    PARSE_ANAME_USAGE,
    PARSE_CNAME_USAGE,
    PARSE_MX_USAGE,
    PARSE_NS_USAGE,
    PARSE_SOA_USAGE,
    PARSE_TXT_USAGE,
    DNSRecordParser,
)
from ..core.record import DNSRecordType, ResourceRecord, type_name
from ..core.result import (
    Duplicate,
    Empty,
    Failure,
    Found,
    QueryResult,
    from_records,
)
from ..core.soa import extract_soa_contacts
from .printer import RecordPrinter

logger = structlog.get_logger(__name__)

SERVICE_ERROR_PREFIX = "Error accessing configuration service"

# Record types whose add/ensure commands exist, with the name used in the
# command and the field grammar
FIELD_TYPES = [
    ("MX", DNSRecordType.MX, PARSE_MX_USAGE),
    ("NS", DNSRecordType.NS, PARSE_NS_USAGE),
    ("TXT", DNSRecordType.TXT, PARSE_TXT_USAGE),
    ("CNAME", DNSRecordType.CNAME, PARSE_CNAME_USAGE),
    ("SOA", DNSRecordType.SOA, PARSE_SOA_USAGE),
    ("ANAME", DNSRecordType.A, PARSE_ANAME_USAGE),
]

IMPORT_TYPES = [
    ("MX", DNSRecordType.MX),
    ("SOA", DNSRecordType.SOA),
    ("ANAME", DNSRecordType.A),
]

IMPORT_USAGE = (
    "Import a new {label} dns record from a binary file.\n"
    "\tfilepath\n"
    "\t filepath: path to the {label} record binary file. "
    "Can have any (or no) extension"
)

REMOVE_USAGE = (
    "Remove an existing {label} record by ID.\n"
    "\trecordid\n"
    "\t recordid: record id to be removed from the store"
)

MATCH_USAGE = (
    "Resolve {label} records for the given domain.\n"
    "\tdomain\n"
    "\t domain: exact domain name, a trailing dot is optional"
)


class OutcomeStatus(Enum):
    """Terminal state of a command"""

    SUCCESS = "success"
    EMPTY = "empty"
    FAILURE = "failure"


@dataclass
class CommandOutcome:
    """Result reported by a command"""

    status: OutcomeStatus
    message: str
    records: List[ResourceRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILURE

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


@dataclass
class Command:
    """A named command with its usage text"""

    name: str
    usage: str
    handler: Callable[[Sequence[str]], CommandOutcome]


def _single_argument(args: Sequence[str], what: str) -> str:
    if not args or not args[0].strip():
        raise UsageError(f"Missing required argument: {what}")
    if len(args) > 1:
        raise UsageError(f"Too many arguments: expected only {what}")
    return args[0].strip()


def _no_arguments(args: Sequence[str]) -> None:
    if args:
        raise UsageError("This command takes no arguments")


class DNSRecordCommands:
    """DNS record management commands bound to one record store"""

    def __init__(
        self,
        store,
        parser: Optional[DNSRecordParser] = None,
        printer: Optional[RecordPrinter] = None,
    ):
        self.store = store
        self.parser = parser or DNSRecordParser()
        self.printer = printer or RecordPrinter()
        self._commands: Dict[str, Command] = {}
        self._register_commands()

    def _register(self, name: str, usage: str, handler) -> None:
        self._commands[name.lower()] = Command(name, usage, handler)

    def _register_commands(self) -> None:
        for label, rtype in IMPORT_TYPES:
            self._register(
                f"Dns_{label}_Import",
                IMPORT_USAGE.format(label=label),
                partial(self.import_record, rtype=rtype),
            )

        for label, rtype, field_usage in FIELD_TYPES:
            self._register(
                f"Dns_{label}_Add",
                f"Add a new {label} dns record.\n{field_usage}",
                partial(self.add, rtype),
            )
            self._register(
                f"Dns_{label}_Ensure",
                f"Adds a new {label} dns record if an identical one doesn't "
                f"already exist.\n{field_usage}",
                partial(self.ensure, rtype),
            )

        for label, _ in IMPORT_TYPES:
            self._register(
                f"Dns_{label}_Remove",
                REMOVE_USAGE.format(label=label),
                self.remove,
            )

        self._register(
            "Dns_Get_All", "Gets all records in the DNS store.", self.get_all
        )
        self._register(
            "Dns_Get_SOA_Contacts",
            "Gets a list of all the different SOA contacts.",
            self.get_soa_contacts,
        )
        self._register(
            "Dns_Match",
            "Resolve all records whose name matches the given pattern.\n"
            "\tpattern\n"
            "\t pattern: regular expression searched for in record names",
            self.match,
        )

        for label, rtype in (
            ("SOA", DNSRecordType.SOA),
            ("ANAME", DNSRecordType.A),
            ("MX", DNSRecordType.MX),
        ):
            self._register(
                f"Dns_{label}_Match",
                MATCH_USAGE.format(label=label),
                partial(self.match_type, rtype),
            )

    def command_names(self) -> List[str]:
        return [command.name for command in self._commands.values()]

    def get_command(self, name: str) -> Optional[Command]:
        return self._commands.get(name.lower())

    def run(self, name: str, args: Sequence[str]) -> CommandOutcome:
        """Run a command by name, converting every error into a failure outcome"""
        command = self.get_command(name)
        if command is None:
            return CommandOutcome(OutcomeStatus.FAILURE, f"Unknown command: {name}")

        log = logger.bind(command=command.name)
        try:
            outcome = command.handler(list(args))
        except UsageError as e:
            log.warning("Invalid command arguments", error=str(e))
            return CommandOutcome(
                OutcomeStatus.FAILURE, f"{e}\nUsage: {command.name}\n{command.usage}"
            )
        except DNSManagerError as e:
            log.error(
                "Command failed", error=str(e), error_type=type(e).__name__
            )
            return CommandOutcome(OutcomeStatus.FAILURE, str(e))

        log.info("Command completed", status=outcome.status.value)
        return outcome

    # Store access

    def _persist(self, record: ResourceRecord) -> CommandOutcome:
        try:
            stored = self.store.add_record(record)
        except ServiceError as e:
            raise ServiceError(f"Error adding DNS record: {e}") from e

        logger.info(
            "Record added",
            record_id=stored.id,
            name=stored.name,
            type=type_name(stored.rtype),
        )
        return CommandOutcome(
            OutcomeStatus.SUCCESS, "Record added successfully.", [stored]
        )

    def _report(self, result: QueryResult) -> CommandOutcome:
        if isinstance(result, Failure):
            cause = result.cause
            raise ServiceError(f"{SERVICE_ERROR_PREFIX}: {cause}") from cause
        if isinstance(result, Empty):
            return CommandOutcome(OutcomeStatus.EMPTY, "No records found")
        return CommandOutcome(
            OutcomeStatus.SUCCESS,
            self.printer.format_all(result.records),
            list(result.records),
        )

    # Import / add / ensure / remove

    def load_record_file(self, path: str) -> ResourceRecord:
        """Read and decode a record stored in raw wire format"""
        record_file = Path(path)
        if not record_file.is_file():
            raise UsageError(f"Record file {record_file.resolve()} not found")

        try:
            wire = record_file.read_bytes()
        except OSError as e:
            raise DNSManagerError(
                f"Error reading file {record_file.resolve()}: {e}"
            ) from e

        try:
            return codec.decode(wire)
        except MalformedRecordError as e:
            raise MalformedRecordError(
                f"Error reading file {record_file.resolve()}: {e}"
            ) from e

    def import_record(self, args: Sequence[str], rtype: int) -> CommandOutcome:
        """Import a record of the expected type from a wire-format file"""
        path = _single_argument(args, "filepath")

        record = self.load_record_file(path)
        if record.rtype != rtype:
            raise TypeMismatchError(
                f"File {path} does not contain the requested record type "
                f"(expected {type_name(rtype)}, found {record.type_name})",
                expected=rtype,
                actual=record.rtype,
            )

        return self._persist(record)

    def add(self, rtype: int, args: Sequence[str]) -> CommandOutcome:
        """Add a record parsed from fields"""
        return self._persist(self.parser.parse(rtype, args))

    def ensure(self, rtype: int, args: Sequence[str]) -> CommandOutcome:
        """Add a record parsed from fields unless an identical one exists"""
        record = self.parser.parse(rtype, args)

        try:
            verdict = ensure_unique(self.store, record)
        except ServiceError as e:
            raise ServiceError(f"{SERVICE_ERROR_PREFIX}: {e}") from e

        if isinstance(verdict, Duplicate):
            return CommandOutcome(
                OutcomeStatus.SUCCESS,
                f"Record already exists\n{self.printer.format(verdict.existing)}",
                [verdict.existing],
            )

        return self._persist(record)

    def remove(self, args: Sequence[str]) -> CommandOutcome:
        """Remove a single record by its store id"""
        value = _single_argument(args, "recordid")
        try:
            record_id = int(value)
        except ValueError:
            raise UsageError(f"Invalid record id: {value}")

        try:
            self.store.delete_records_by_ids([record_id])
        except ServiceError as e:
            raise ServiceError(f"{SERVICE_ERROR_PREFIX}: {e}") from e

        logger.info("Record removed", record_id=record_id)
        return CommandOutcome(OutcomeStatus.SUCCESS, "Record removed successfully.")

    # Queries

    def _query(self, rtype: int, name: str = "") -> QueryResult:
        try:
            records = self.store.query_records(rtype, name)
        except ServiceError as e:
            return Failure(e)
        return from_records(records)

    def get_all(self, args: Sequence[str]) -> CommandOutcome:
        """List every record in the store"""
        _no_arguments(args)
        return self._report(self._query(DNSRecordType.ANY))

    def get_soa_contacts(self, args: Sequence[str]) -> CommandOutcome:
        """List the distinct admin contacts of all SOA records"""
        _no_arguments(args)
        result = self._query(DNSRecordType.SOA)
        if not isinstance(result, Found):
            return self._report(result)

        contacts = extract_soa_contacts(result.records)
        return CommandOutcome(
            OutcomeStatus.SUCCESS,
            "\n".join(f"Contact: {contact}" for contact in contacts),
            list(result.records),
        )

    def match(self, args: Sequence[str]) -> CommandOutcome:
        """Records whose name matches a regular expression"""
        pattern = _single_argument(args, "pattern")
        return self._report(lookup_by_domain(self.store, pattern))

    def match_type(self, rtype: int, args: Sequence[str]) -> CommandOutcome:
        """Records of one type for an exact domain name"""
        domain = _single_argument(args, "domain")
        return self._report(match_by_type_and_domain(self.store, rtype, domain))
