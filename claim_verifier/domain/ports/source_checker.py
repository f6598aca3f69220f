"""Port for periodic source re-verification."""

from typing import Protocol

from ..models.source import Source


class SourceChecker(Protocol):
    """Checks whether a source is still reachable and trustworthy."""

    async def check(self, source: Source) -> bool:
        """Return True if the source passes verification."""
        ...
