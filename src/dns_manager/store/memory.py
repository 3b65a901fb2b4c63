"""
In-memory record store

Holds records in a dict keyed by id, in insertion order. Used for tests,
interactive sessions and as the base of the file-backed store.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..core.errors import ServiceError
from ..core.record import DNSRecordType, ResourceRecord, to_absolute, type_name

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """Record store kept entirely in process memory"""

    def __init__(self, records: Optional[Iterable[ResourceRecord]] = None):
        self._records: Dict[int, ResourceRecord] = {}
        self._next_id = 1

        for record in records or []:
            self._insert(record)

    def __len__(self) -> int:
        return len(self._records)

    def _insert(self, record: ResourceRecord) -> ResourceRecord:
        if record.id is not None and record.id >= self._next_id:
            self._next_id = record.id + 1
        if record.id is None or record.id in self._records:
            record = record.with_id(self._next_id)
            self._next_id += 1

        self._records[record.id] = record
        return record

    def _changed(self) -> None:
        """Hook called after every mutation"""

    def add_record(self, record: ResourceRecord) -> ResourceRecord:
        snapshot = (dict(self._records), self._next_id)
        stored = self._insert(record.with_id(None))
        self._commit(snapshot)
        logger.debug(
            f"Stored {type_name(stored.rtype)} record {stored.name} as id {stored.id}"
        )
        return stored

    def delete_records_by_ids(self, ids: Iterable[int]) -> None:
        ids = list(dict.fromkeys(ids))
        missing = [record_id for record_id in ids if record_id not in self._records]
        if missing:
            raise ServiceError(
                f"DNS record(s) not found: {', '.join(str(i) for i in missing)}"
            )

        snapshot = (dict(self._records), self._next_id)
        for record_id in ids:
            del self._records[record_id]
        self._commit(snapshot)
        logger.debug(f"Deleted records {ids}")

    def _commit(self, snapshot) -> None:
        """Run the change hook, restoring snapshot if it fails"""
        try:
            self._changed()
        except ServiceError:
            self._records, self._next_id = snapshot
            raise

    def query_records(self, rtype: int, name_pattern: str = "") -> List[ResourceRecord]:
        name = to_absolute(name_pattern).lower() if name_pattern else ""
        return [
            record
            for record in self._records.values()
            if (rtype == DNSRecordType.ANY or record.rtype == rtype)
            and (not name or record.name.lower() == name)
        ]
