"""
Base Service Interface

All services inherit from this base class.
Provider errors used by the data ingestion layer live here too.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all services.

    Each service:
    - Has a defined input type
    - Has a defined output type
    - Can validate its inputs
    - Can check its health
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the service's main function.

        Args:
            input_data: Validated input conforming to InputT schema

        Returns:
            Output conforming to OutputT schema
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        pass

    async def validate_input(self, input_data: InputT) -> InputT:
        """
        Validate input data.
        Default implementation returns input as-is (Pydantic handles validation).
        Override for custom validation logic.
        """
        return input_data


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ProviderError(ServiceError):
    """
    A market data provider could not supply a usable result.

    Never leaves the data ingestion layer: the provider chain turns it into
    a failed outcome and moves on to the next provider.
    """

    reason = "provider_error"


class NetworkError(ProviderError):
    """Transport failure or non-success HTTP status."""

    reason = "network_error"


class RateLimitError(ProviderError):
    """Provider signalled a rate limit or quota message."""

    reason = "rate_limited"


class MalformedResponseError(ProviderError):
    """Payload could not be parsed into the expected shape."""

    reason = "malformed_response"


class NoDataError(ProviderError):
    """Payload parsed but held no usable price data."""

    reason = "no_data"
