"""Error taxonomy for the lunch picker pipeline."""
from __future__ import annotations

from typing import Optional


class LunchPickerError(RuntimeError):
    pass


class ConfigurationError(LunchPickerError):
    pass


class ProviderError(LunchPickerError):
    """A provider call failed; carries the provider status and message when known."""

    def __init__(
        self,
        message: str,
        status: Optional[str] = None,
        provider_message: Optional[str] = None,
    ) -> None:
        self.status = status
        self.provider_message = provider_message
        details = [part for part in (status, provider_message) if part]
        if details:
            message = f"{message} ({': '.join(details)})"
        super().__init__(message)


class GeocodingFailure(ProviderError):
    pass


class PaginationFailure(ProviderError):
    pass


class DetailFetchFailure(ProviderError):
    pass


class DistanceFetchFailure(ProviderError):
    pass
