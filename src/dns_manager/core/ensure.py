"""
Record uniqueness check

A record is a duplicate when the store already holds one with the same
name, type and canonical data. Several records may share name and type
(multiple MX hosts, for instance) as long as their data differs.

The check and the following add are separate store calls; a concurrent
writer can insert the same record in between.
"""

import logging
from typing import Optional

from .record import ResourceRecord, type_name
from .result import Duplicate, EnsureVerdict, Proceed

logger = logging.getLogger(__name__)


def find_identical(store, candidate: ResourceRecord) -> Optional[ResourceRecord]:
    """Existing record with the candidate's name, type and data, if any.

    Raises:
        ServiceError: If the store query fails
    """
    existing_records = store.query_records(candidate.rtype, candidate.name)
    for existing in existing_records or []:
        if existing.data == candidate.data:
            return existing
    return None


def ensure_unique(store, candidate: ResourceRecord) -> EnsureVerdict:
    """Decide whether candidate can be added without creating a duplicate"""
    existing = find_identical(store, candidate)
    if existing is None:
        return Proceed()

    logger.info(
        f"{type_name(candidate.rtype)} record for {candidate.name} already "
        f"exists with id {existing.id}"
    )
    return Duplicate(existing)
