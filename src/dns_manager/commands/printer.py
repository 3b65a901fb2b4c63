"""
Record printer

Renders records as short text blocks for console output. Rdata is shown in
presentation format using dnspython.
"""

import logging
from typing import Iterable

import dns.rdata

from ..core.record import ResourceRecord

logger = logging.getLogger(__name__)

SEPARATOR = "-------------------------------------------"


def render_rdata(record: ResourceRecord) -> str:
    """Get human-readable representation of rdata"""
    try:
        rdata = dns.rdata.from_wire(
            record.dclass, record.rtype, record.data, 0, len(record.data)
        )
        return rdata.to_text()
    except Exception as e:
        logger.warning(f"Failed to render rdata for type {record.rtype}: {e}")
        return record.data.hex()


class RecordPrinter:
    """Formats records for the console"""

    def format(self, record: ResourceRecord) -> str:
        record_id = record.id if record.id is not None else "-"
        return "\n".join(
            [
                f"RecordID: {record_id}",
                f"  Name:  {record.name}",
                f"  Type:  {record.type_name}",
                f"  Class: {record.class_name}",
                f"  TTL:   {record.ttl}",
                f"  Data:  {render_rdata(record)}",
            ]
        )

    def format_all(self, records: Iterable[ResourceRecord]) -> str:
        return "\n".join(f"{self.format(record)}\n{SEPARATOR}" for record in records)
