from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from domain.descriptor import DescriptorRecord
from domain.unique_id import UniqueId


class DescriptorRegistryPort(ABC):
    @abstractmethod
    def add(self, record: DescriptorRecord) -> None:
        """Raise DuplicateDescriptorError if the UniqueId is already registered."""
        ...

    @abstractmethod
    def get(self, unique_id: UniqueId) -> Optional[DescriptorRecord]:
        ...

    @abstractmethod
    def list_children(self, unique_id: UniqueId) -> List[DescriptorRecord]:
        ...

    @abstractmethod
    def list_all(self) -> List[DescriptorRecord]:
        ...
