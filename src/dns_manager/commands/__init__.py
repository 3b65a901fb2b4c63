"""
DNS Manager Commands Module
"""

from .dns_records import Command, CommandOutcome, DNSRecordCommands, OutcomeStatus
from .printer import RecordPrinter, render_rdata

__all__ = [
    "DNSRecordCommands",
    "Command",
    "CommandOutcome",
    "OutcomeStatus",
    "RecordPrinter",
    "render_rdata",
]
