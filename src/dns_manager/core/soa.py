"""
SOA administrative contacts
"""

from typing import Iterable, List

from .codec import unpack_soa
from .errors import MalformedRecordError
from .record import DNSRecordType, ResourceRecord


def extract_soa_contacts(records: Iterable[ResourceRecord]) -> List[str]:
    """Distinct admin contact names of the given SOA records, first seen first.

    Contact lists are used for auditing, so a record that cannot be read
    fails the whole extraction instead of being skipped.

    Raises:
        MalformedRecordError: If a record is not SOA or its data is invalid
    """
    contacts: List[str] = []
    seen = set()

    for record in records:
        if record.rtype != DNSRecordType.SOA:
            raise MalformedRecordError(
                f"Record {record.id} ({record.name}) is not an SOA record"
            )
        try:
            contact = unpack_soa(record.data).rname
        except MalformedRecordError as e:
            raise MalformedRecordError(
                f"Unreadable SOA data in record {record.id} ({record.name}): {e}"
            ) from e

        if contact not in seen:
            seen.add(contact)
            contacts.append(contact)

    return contacts
