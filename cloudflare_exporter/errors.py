"""Errors raised by stats sources."""

from typing import Optional


class SourceError(Exception):
    """Base class for failures talking to the analytics source."""

    def __init__(self, message: str, zone_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.zone_id = zone_id

    def __str__(self) -> str:
        if self.zone_id:
            return f"{self.message} [zone={self.zone_id}]"
        return self.message


class SourceUnavailable(SourceError):
    """Network, auth or protocol failure reaching the source."""


class NotFound(SourceError):
    """The zone id is not known to the source."""
