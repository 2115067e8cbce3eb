from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    pass


class ValidationError(DomainError):
    pass


class FormatError(DomainError):
    """
    Raised when a string cannot be parsed into a UniqueId.

    `text` is the input that was being parsed and `position` the index of the
    offending character, when one can be pointed at.
    """

    def __init__(
        self,
        message: str,
        text: Optional[str] = None,
        position: Optional[int] = None,
    ) -> None:
        self.message = message
        self.text = text
        self.position = position
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} at position {self.position} in {self.text!r}"
