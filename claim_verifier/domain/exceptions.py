"""Exceptions raised inside the verification pipeline."""


class VerificationError(Exception):
    """Base class for verification pipeline errors."""


class ProviderUnavailableError(VerificationError, ConnectionError):
    """An evidence provider or judge could not be reached or timed out."""

    def __init__(self, provider: str, reason: str = ""):
        self.provider = provider
        self.reason = reason
        message = f"Provider {provider} unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ParseFailureError(VerificationError, ValueError):
    """A collaborator returned a response that could not be parsed."""