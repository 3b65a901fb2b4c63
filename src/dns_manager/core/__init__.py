"""
DNS Manager Core Module

This module exports the record model, wire codec and record management logic.
"""

from .codec import SOAData, decode, encode, unpack_soa
from .ensure import ensure_unique, find_identical
from .errors import (
    DNSManagerError,
    MalformedRecordError,
    ServiceError,
    TypeMismatchError,
    UsageError,
)
from .matcher import (
    canonical_query_key,
    lookup_by_domain,
    match_by_domain,
    match_by_type_and_domain,
)
from .parsers import DNSRecordParser
from .record import DNSClass, DNSRecordType, ResourceRecord, to_absolute
from .result import Duplicate, Empty, Failure, Found, Proceed
from .soa import extract_soa_contacts

__all__ = [
    # Record model
    "ResourceRecord",
    "DNSRecordType",
    "DNSClass",
    "to_absolute",
    # Wire codec
    "decode",
    "encode",
    "unpack_soa",
    "SOAData",
    # Parsing
    "DNSRecordParser",
    # Matching
    "match_by_domain",
    "match_by_type_and_domain",
    "lookup_by_domain",
    "canonical_query_key",
    # Uniqueness
    "ensure_unique",
    "find_identical",
    # SOA contacts
    "extract_soa_contacts",
    # Results
    "Found",
    "Empty",
    "Failure",
    "Proceed",
    "Duplicate",
    # Errors
    "DNSManagerError",
    "MalformedRecordError",
    "TypeMismatchError",
    "UsageError",
    "ServiceError",
]
