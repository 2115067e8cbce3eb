from __future__ import annotations

from threading import Lock
from typing import Dict, List, Optional

from application.exceptions import DuplicateDescriptorError
from application.ports.descriptor_registry import DescriptorRegistryPort
from domain.descriptor import DescriptorRecord
from domain.unique_id import UniqueId


class InMemoryDescriptorRegistry(DescriptorRegistryPort):
    def __init__(self) -> None:
        self._records: Dict[UniqueId, DescriptorRecord] = {}
        self._lock = Lock()

    def add(self, record: DescriptorRecord) -> None:
        with self._lock:
            if record.unique_id in self._records:
                raise DuplicateDescriptorError(f"Descriptor already registered: {record.unique_id}")
            self._records[record.unique_id] = record

    def get(self, unique_id: UniqueId) -> Optional[DescriptorRecord]:
        with self._lock:
            return self._records.get(unique_id)

    def list_children(self, unique_id: UniqueId) -> List[DescriptorRecord]:
        depth = len(unique_id.segments) + 1
        with self._lock:
            return [
                record
                for key, record in self._records.items()
                if len(key.segments) == depth and key.has_prefix(unique_id)
            ]

    def list_all(self) -> List[DescriptorRecord]:
        with self._lock:
            return list(self._records.values())
