"""
Canonical string form of UniqueId.

    unique-id := segment ("/" segment)*
    segment   := escape(type) ":[" escape(value) "]"

Every structural character, and the escape character itself, is written as
a backslash followed by the character when it occurs inside a type or value.
Parsing accepts exactly the strings `format` can produce, so each UniqueId
has a single spelling.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from domain.exceptions import FormatError, ValidationError
from domain.unique_id import Segment, UniqueId


class _Expect(Enum):
    TYPE = "type"
    PREFIX = "prefix"
    VALUE = "value"
    DELIMITER = "delimiter"


@dataclass(frozen=True)
class UniqueIdFormat:
    segment_delimiter: str = "/"
    type_value_separator: str = ":"
    value_prefix: str = "["
    value_suffix: str = "]"
    escape_char: str = "\\"

    def __post_init__(self) -> None:
        chars = self.reserved_chars
        for ch in chars:
            if not isinstance(ch, str) or len(ch) != 1:
                raise ValidationError(f"Format characters must be single characters: {ch!r}")
        if len(set(chars)) != len(chars):
            raise ValidationError(f"Format characters must be distinct: {chars!r}")

    @property
    def reserved_chars(self) -> Tuple[str, ...]:
        return (
            self.segment_delimiter,
            self.type_value_separator,
            self.value_prefix,
            self.value_suffix,
            self.escape_char,
        )

    def format(self, unique_id: UniqueId) -> str:
        return self.segment_delimiter.join(self._format_segment(s) for s in unique_id.segments)

    def _format_segment(self, segment: Segment) -> str:
        return (
            f"{self.escape(segment.type)}{self.type_value_separator}"
            f"{self.value_prefix}{self.escape(segment.value)}{self.value_suffix}"
        )

    def escape(self, text: str) -> str:
        reserved = self.reserved_chars
        return "".join(self.escape_char + ch if ch in reserved else ch for ch in text)

    def parse(self, text: Optional[str]) -> UniqueId:
        if not isinstance(text, str) or not text.strip():
            raise FormatError("Unique ID string must not be null or blank", text)

        segments: List[Segment] = []
        expect = _Expect.TYPE
        type_chars: List[str] = []
        value_chars: List[str] = []
        type_start = 0

        for pos, ch, escaped in self._scan(text):
            structural = not escaped and ch in self.reserved_chars

            if expect is _Expect.TYPE:
                if not structural:
                    type_chars.append(ch)
                elif ch == self.type_value_separator:
                    self._require_field(type_chars, "Segment type", text, type_start)
                    expect = _Expect.PREFIX
                elif ch == self.value_prefix:
                    raise FormatError(
                        f"Missing {self.type_value_separator!r} between segment type and value", text, pos
                    )
                else:
                    raise FormatError(f"Unescaped {ch!r} in segment type", text, pos)

            elif expect is _Expect.PREFIX:
                if not structural or ch != self.value_prefix:
                    raise FormatError(
                        f"Expected {self.value_prefix!r} after {self.type_value_separator!r}", text, pos
                    )
                expect = _Expect.VALUE

            elif expect is _Expect.VALUE:
                if not structural:
                    value_chars.append(ch)
                elif ch == self.value_suffix:
                    self._require_field(value_chars, "Segment value", text, pos)
                    segments.append(Segment("".join(type_chars), "".join(value_chars)))
                    type_chars, value_chars = [], []
                    expect = _Expect.DELIMITER
                else:
                    raise FormatError(f"Unescaped {ch!r} in segment value", text, pos)

            else:
                if not structural or ch != self.segment_delimiter:
                    raise FormatError(f"Expected {self.segment_delimiter!r} between segments", text, pos)
                type_start = pos + 1
                expect = _Expect.TYPE

        if expect is _Expect.TYPE:
            if type_chars:
                raise FormatError(
                    f"Missing {self.type_value_separator!r} between segment type and value", text, len(text)
                )
            raise FormatError("Empty segment", text, len(text))
        if expect is _Expect.PREFIX:
            raise FormatError(f"Missing {self.value_prefix!r} after {self.type_value_separator!r}", text, len(text))
        if expect is _Expect.VALUE:
            raise FormatError(f"Missing closing {self.value_suffix!r}", text, len(text))

        return UniqueId(tuple(segments), self)

    def _scan(self, text: str) -> Iterator[Tuple[int, str, bool]]:
        """Yield (position, character, escaped) with escape sequences resolved."""
        reserved = self.reserved_chars
        pos = 0
        while pos < len(text):
            ch = text[pos]
            if ch != self.escape_char:
                yield pos, ch, False
                pos += 1
                continue
            if pos + 1 == len(text):
                raise FormatError("Dangling escape character", text, pos)
            nxt = text[pos + 1]
            if nxt not in reserved:
                raise FormatError(f"Invalid escape sequence {ch + nxt!r}", text, pos)
            yield pos, nxt, True
            pos += 2

    @staticmethod
    def _require_field(chars: List[str], label: str, text: str, pos: int) -> None:
        if not "".join(chars).strip():
            raise FormatError(f"{label} must not be blank", text, pos)


_DEFAULT = UniqueIdFormat()


def get_default() -> UniqueIdFormat:
    return _DEFAULT
