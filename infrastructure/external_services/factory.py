from functools import lru_cache
from typing import Literal, Dict, Type

from infrastructure.utils.logging_config import logger
from .clients.base_client import BaseClient
from .clients.catalog_client import CatalogClient
from .clients.http_client import close_shared_http_client


ServiceName = Literal["catalog"]

_client_map: Dict[str, Type[BaseClient]] = {
    "catalog": CatalogClient,
}


@lru_cache(maxsize=None)
def get_external_client(service_name: ServiceName) -> BaseClient:
    """
    Returns the (process-wide) client instance for ``service_name``.

    Raises:
        ValueError: If an unsupported service type is requested.
    """
    client_class = _client_map.get(service_name)
    if client_class is None:
        logger.error(f"Unsupported external service type requested: {service_name}")
        raise ValueError(f"Unsupported external service type: '{service_name}'. Available: {list(_client_map.keys())}")
    logger.info(f"Returning instance of {client_class.__name__} for service '{service_name}'")
    return client_class()


async def close_all_external_clients():
    """Closes the shared HTTP connection pool and forgets cached client instances."""
    await close_shared_http_client()
    get_external_client.cache_clear()
