"""
DNS Record Store Module

The record store interface and the local implementations selected by the
``store.backend`` configuration setting.
"""

from .base import RecordStore
from .file import FileRecordStore, record_from_dict, record_to_dict
from .memory import InMemoryRecordStore

__all__ = [
    "RecordStore",
    "InMemoryRecordStore",
    "FileRecordStore",
    "record_from_dict",
    "record_to_dict",
    "create_store",
]


def create_store(store_config) -> RecordStore:
    """Create the record store described by a StoreConfig section"""
    if store_config.backend == "memory":
        return InMemoryRecordStore()
    return FileRecordStore(store_config.path)
