"""Evidence provider interface."""

from typing import Dict, List, Protocol

from ..models.evidence import Evidence


class EvidenceProvider(Protocol):
    """Protocol for external evidence sources.

    ``provide`` never raises: a provider that cannot reach its backend or
    cannot parse the response returns an empty list and logs the reason.
    """

    async def initialize(self) -> None:
        """Initialize the provider and verify configuration."""
        ...

    async def provide(self, claim_text: str) -> List[Evidence]:
        """Return evidence items relevant to a claim."""
        ...

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        ...
