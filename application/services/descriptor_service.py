from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from application.exceptions import DescriptorNotFoundError
from application.ports.descriptor_registry import DescriptorRegistryPort
from application.ports.logger import LoggerPort
from domain.descriptor import DescriptorKind, DescriptorRecord
from domain.unique_id import UniqueId


@dataclass(frozen=True)
class DescriptorService:
    registry: DescriptorRegistryPort
    logger: LoggerPort

    def register_engine(self, engine_id: str, display_name: Optional[str] = None) -> DescriptorRecord:
        unique_id = UniqueId.for_engine(engine_id)
        return self._register(unique_id, display_name, DescriptorKind.ENGINE)

    def register_child(
        self,
        parent_id: UniqueId,
        segment_type: str,
        value: str,
        display_name: Optional[str] = None,
        kind: DescriptorKind = DescriptorKind.TEST,
    ) -> DescriptorRecord:
        self.get(parent_id)
        unique_id = parent_id.append(segment_type, value)
        return self._register(unique_id, display_name, kind)

    def get(self, unique_id: UniqueId) -> DescriptorRecord:
        record = self.registry.get(unique_id)
        if record is None:
            raise DescriptorNotFoundError(f"Descriptor not found: {unique_id}")
        return record

    def resolve(self, text: str) -> DescriptorRecord:
        """Look up a descriptor by the string form an engine reported."""
        return self.get(UniqueId.parse(text))

    def children(self, unique_id: UniqueId) -> List[DescriptorRecord]:
        self.get(unique_id)
        return self.registry.list_children(unique_id)

    def _register(
        self,
        unique_id: UniqueId,
        display_name: Optional[str],
        kind: DescriptorKind,
    ) -> DescriptorRecord:
        record = DescriptorRecord(
            unique_id=unique_id,
            display_name=display_name or unique_id.last_segment.value,
            kind=kind,
            registered_at=datetime.now(timezone.utc),
        )
        self.registry.add(record)
        self.logger.info(
            "descriptor.registered",
            unique_id=str(unique_id),
            kind=kind.value,
            engine_id=unique_id.engine_id,
        )
        return record
