"""
YAML file record store

Persists records to a YAML document so the console can be used without a
running configuration service. Record data is stored hex-encoded and the
whole file is rewritten after every change.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..core.errors import ServiceError
from ..core.record import DNSClass, DNSRecordType, ResourceRecord, class_name, type_name
from .memory import InMemoryRecordStore

logger = logging.getLogger(__name__)


def _parse_code(value: Any, enum, what: str) -> int:
    if isinstance(value, int):
        return value
    text = str(value).strip().upper()
    if text in enum.__members__:
        return int(enum[text])
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"unknown {what} {value!r}")


def record_from_dict(item: Dict[str, Any]) -> ResourceRecord:
    """Build a record from its YAML mapping"""
    return ResourceRecord(
        name=str(item["name"]),
        rtype=_parse_code(item["type"], DNSRecordType, "type"),
        dclass=_parse_code(item.get("class", "IN"), DNSClass, "class"),
        ttl=int(item["ttl"]),
        data=bytes.fromhex(str(item.get("data", ""))),
        id=int(item["id"]) if item.get("id") is not None else None,
    )


def record_to_dict(record: ResourceRecord) -> Dict[str, Any]:
    """YAML mapping for a record"""
    return {
        "id": record.id,
        "name": record.name,
        "type": type_name(record.rtype),
        "class": class_name(record.dclass),
        "ttl": record.ttl,
        "data": record.data.hex(),
    }


class FileRecordStore(InMemoryRecordStore):
    """Record store backed by a YAML file"""

    def __init__(self, path: str):
        self.path = Path(path)
        super().__init__(self._load())
        logger.debug(f"Loaded {len(self)} records from {self.path}")

    def _load(self) -> List[ResourceRecord]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ServiceError(f"Cannot read record store {self.path}: {e}") from e

        raw = content.get("records", []) if isinstance(content, dict) else None
        if not isinstance(raw, list):
            raise ServiceError(f"Record store {self.path}: 'records' must be a list")

        records = []
        for i, item in enumerate(raw, 1):
            if not isinstance(item, dict):
                raise ServiceError(
                    f"Record store {self.path}: record #{i} must be a mapping"
                )
            try:
                records.append(record_from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                raise ServiceError(
                    f"Record store {self.path}: malformed record #{i}: {e}"
                ) from e
        return records

    def _changed(self) -> None:
        document = {"records": [record_to_dict(r) for r in self._records.values()]}
        temp_path = self.path.with_name(self.path.name + ".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(document, f, sort_keys=False)
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path.is_file():
                temp_path.unlink()
            raise ServiceError(f"Cannot write record store {self.path}: {e}") from e
