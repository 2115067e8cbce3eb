"""
Hierarchical unique IDs for test descriptors.

A UniqueId is an ordered, non-empty sequence of (type, value) segments, root
first. Values are immutable: `append` returns a new UniqueId and leaves the
receiver untouched.

    uid = UniqueId.for_engine("demo-engine").append("class", "com.example.Foo")
    str(uid)  # "engine:[demo-engine]/class:[com.example.Foo]"
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from domain.exceptions import FormatError, ValidationError

if TYPE_CHECKING:
    from domain.unique_id_format import UniqueIdFormat


ENGINE_SEGMENT_TYPE = "engine"


def _require_not_blank(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


def _resolve_format(unique_id_format: Optional["UniqueIdFormat"]) -> "UniqueIdFormat":
    if unique_id_format is not None:
        return unique_id_format
    from domain.unique_id_format import get_default

    return get_default()


@dataclass(frozen=True)
class Segment:
    """One level of a UniqueId. Stores type and value verbatim."""
    type: str
    value: str


@dataclass(frozen=True)
class UniqueId:
    _segments: Tuple[Segment, ...]
    _format: Optional["UniqueIdFormat"] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        segments = tuple(self._segments)
        if not segments:
            raise ValidationError("UniqueId must contain at least one segment")
        for segment in segments:
            if not isinstance(segment, Segment):
                raise ValidationError(f"Not a Segment: {segment!r}")
            _require_not_blank(segment.type, "segment_type must not be null or blank")
            _require_not_blank(segment.value, "value must not be null or blank")
        object.__setattr__(self, "_segments", segments)
        object.__setattr__(self, "_format", _resolve_format(self._format))

    @classmethod
    def parse(cls, text: str, unique_id_format: Optional["UniqueIdFormat"] = None) -> "UniqueId":
        """
        Parse a UniqueId from its string form.

        Raises FormatError if `text` is None, blank or malformed.
        """
        if not isinstance(text, str) or not text.strip():
            raise FormatError("Unique ID string must not be null or blank", text)
        return _resolve_format(unique_id_format).parse(text)

    @classmethod
    def for_engine(cls, engine_id: str, unique_id_format: Optional["UniqueIdFormat"] = None) -> "UniqueId":
        _require_not_blank(engine_id, "engine_id must not be null or blank")
        return cls.root(ENGINE_SEGMENT_TYPE, engine_id, unique_id_format)

    @classmethod
    def root(
        cls,
        segment_type: str,
        value: str,
        unique_id_format: Optional["UniqueIdFormat"] = None,
    ) -> "UniqueId":
        _require_not_blank(segment_type, "segment_type must not be null or blank")
        _require_not_blank(value, "value must not be null or blank")
        return cls((Segment(segment_type, value),), unique_id_format)

    @property
    def segments(self) -> List[Segment]:
        """A copy of the segments; callers may modify the returned list."""
        return list(self._segments)

    @property
    def root_segment(self) -> Segment:
        return self._segments[0]

    @property
    def last_segment(self) -> Segment:
        return self._segments[-1]

    @property
    def engine_id(self) -> Optional[str]:
        root = self.root_segment
        if root.type == ENGINE_SEGMENT_TYPE:
            return root.value
        return None

    def append(self, segment_type: str, value: str) -> "UniqueId":
        return self.append_segment(Segment(segment_type, value))

    def append_segment(self, segment: Segment) -> "UniqueId":
        if not isinstance(segment, Segment):
            raise ValidationError(f"Not a Segment: {segment!r}")
        return UniqueId(self._segments + (segment,), self._format)

    def has_prefix(self, prefix: "UniqueId") -> bool:
        size = len(prefix._segments)
        return size <= len(self._segments) and self._segments[:size] == prefix._segments

    def __str__(self) -> str:
        return self._format.format(self)

    def __repr__(self) -> str:
        return f"UniqueId({str(self)!r})"
