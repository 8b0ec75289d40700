from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union


class ExternalServiceError(Exception):
    """Raised when a call to an external service fails (transport, status or payload)."""
    def __init__(
        self,
        message: str,
        service_name: str,
        status_code: Optional[Union[int, str]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.service_name = service_name
        self.status_code = status_code
        self.original_exception = original_exception
        full_message = f"[{service_name}] {message}"
        if status_code:
            full_message += f" (Status: {status_code})"
        if original_exception:
            full_message += f" | Original Error: {type(original_exception).__name__}"
        super().__init__(full_message)


class BaseClient(ABC):
    """Abstract Base Class for external service clients."""

    @abstractmethod
    async def call(
        self,
        method: str,
        endpoint: str,
        data: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None
    ) -> Any:
        raise NotImplementedError("Subclasses must implement the 'call' method.")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Releases connections held by the client, if any."""
        pass
