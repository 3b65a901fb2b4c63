"""
Record store interface

The record store is the remote source of truth for DNS records. Every
operation in the manager receives it as an explicit collaborator.
"""

from typing import Iterable, List, Protocol

from ..core.record import ResourceRecord


class RecordStore(Protocol):
    """Record CRUD operations offered by the configuration service"""

    def add_record(self, record: ResourceRecord) -> ResourceRecord:
        """Persist record and return it with its assigned id.

        Raises:
            ServiceError: On transport or validation failure
        """
        ...

    def delete_records_by_ids(self, ids: Iterable[int]) -> None:
        """Delete records by id.

        Raises:
            ServiceError: On transport failure or unknown id
        """
        ...

    def query_records(self, rtype: int, name_pattern: str = "") -> List[ResourceRecord]:
        """Records of rtype named name_pattern.

        ``DNSRecordType.ANY`` matches every type and an empty name matches
        every name; an absolute name is an exact, case-insensitive match.

        Raises:
            ServiceError: On transport failure
        """
        ...
