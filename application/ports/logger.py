from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """
    Structured logger: an event name plus keyword fields per call.
    """

    @abstractmethod
    def debug(self, event: str, **fields: Any) -> None:
        ...

    @abstractmethod
    def info(self, event: str, **fields: Any) -> None:
        ...

    @abstractmethod
    def warning(self, event: str, **fields: Any) -> None:
        ...

    @abstractmethod
    def error(self, event: str, **fields: Any) -> None:
        ...

    @abstractmethod
    def bind(self, **fields: Any) -> "LoggerPort":
        """
        Return a logger that attaches the given fields to every event.
        """
        ...
