"""
DNS Manager Errors

Every failure a command can report derives from DNSManagerError so the
command layer can turn it into a single terminal outcome.
"""

from typing import Optional


class DNSManagerError(Exception):
    """Base class for DNS manager errors"""


class MalformedRecordError(DNSManagerError):
    """Bytes or rdata do not parse as a DNS resource record"""


class TypeMismatchError(DNSManagerError):
    """Decoded record type differs from the type the command expects"""

    def __init__(self, message: str, expected: int, actual: int):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class UsageError(DNSManagerError):
    """Missing or invalid positional arguments"""

    def __init__(self, message: str, usage: Optional[str] = None):
        super().__init__(message)
        self.usage = usage


class ServiceError(DNSManagerError):
    """The record store failed (transport, validation or not found)"""
