"""
Record name matching

Two distinct lookup modes:
- match_by_domain: regex search over record names, applied client side
- match_by_type_and_domain: exact type and absolute name, filtered by the store
"""

import logging
import re
from typing import Iterable, List, Tuple

from .errors import ServiceError, UsageError
from .record import DNSRecordType, ResourceRecord, to_absolute, type_name
from .result import Failure, QueryResult, from_records

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> "re.Pattern[str]":
    """Compile a user supplied name pattern"""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise UsageError(f"Invalid name pattern {pattern!r}: {e}")


def match_by_domain(
    records: Iterable[ResourceRecord], pattern: str
) -> List[ResourceRecord]:
    """Records whose name contains a match for pattern, in original order"""
    return _search(records, compile_pattern(pattern))


def _search(records, regex) -> List[ResourceRecord]:
    return [record for record in records if regex.search(record.name)]


def canonical_query_key(rtype: int, domain: str) -> Tuple[int, str]:
    """Key used for exact lookups; the domain is made absolute"""
    return int(rtype), to_absolute(domain)


def match_by_type_and_domain(store, rtype: int, domain: str) -> QueryResult:
    """Exact lookup of records of one type for one absolute name"""
    rtype, name = canonical_query_key(rtype, domain)
    try:
        records = store.query_records(rtype, name)
    except ServiceError as e:
        logger.warning(f"Lookup of {type_name(rtype)} records for {name} failed: {e}")
        return Failure(e)

    return from_records(records)


def lookup_by_domain(store, pattern: str) -> QueryResult:
    """Regex lookup across every record in the store"""
    regex = compile_pattern(pattern)
    try:
        records = store.query_records(DNSRecordType.ANY, "")
    except ServiceError as e:
        logger.warning(f"Fetching all records failed: {e}")
        return Failure(e)

    logger.debug(f"Matching {len(records)} records against {pattern!r}")
    return from_records(_search(records, regex))
