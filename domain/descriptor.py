from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from domain.unique_id import UniqueId


class DescriptorKind(str, Enum):
    ENGINE = "engine"
    CONTAINER = "container"
    TEST = "test"


@dataclass(frozen=True)
class DescriptorRecord:
    """A test artifact reported by an engine, keyed by its UniqueId."""
    unique_id: UniqueId
    display_name: str
    kind: DescriptorKind
    registered_at: datetime
