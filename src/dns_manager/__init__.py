"""
DNS Manager

Administrative console for DNS resource records held by a configuration
service: wire-format import, field-based add, ensure (idempotent add),
removal and name/type lookups.
"""

__version__ = "1.0.0"
