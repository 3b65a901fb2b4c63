"""
Query and ensure outcomes

A query either finds records, finds none, or fails; callers react to the
three differently (print, inform, abort), so they are separate types rather
than exceptions.
"""

from dataclasses import dataclass, field
from typing import List, Union

from .record import ResourceRecord


@dataclass(frozen=True)
class Found:
    """Query returned one or more records"""

    records: List[ResourceRecord] = field(default_factory=list)


@dataclass(frozen=True)
class Empty:
    """Query succeeded with no records"""


@dataclass(frozen=True)
class Failure:
    """Query could not be completed"""

    cause: Exception


QueryResult = Union[Found, Empty, Failure]


@dataclass(frozen=True)
class Proceed:
    """No identical record exists; the candidate may be added"""


@dataclass(frozen=True)
class Duplicate:
    """An identical record already exists"""

    existing: ResourceRecord


EnsureVerdict = Union[Proceed, Duplicate]


def from_records(records: List[ResourceRecord]) -> QueryResult:
    """Wrap a record list as Found, or Empty when there are none"""
    if not records:
        return Empty()
    return Found(list(records))
