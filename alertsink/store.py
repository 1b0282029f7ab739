"""Elasticsearch document store with date-partitioned index names."""

import asyncio
import logging
from datetime import datetime
from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from alertsink.config import Settings
from alertsink.errors import DocumentIndexError, StoreConnectionError

logger = logging.getLogger(__name__)


def build_index_name(template: str, created_at: datetime) -> str:
    """Substitute %y (4-digit year), %m and %d (2-digit) in an index template."""
    name = template.replace("%y", f"{created_at.year:04d}")
    name = name.replace("%m", f"{created_at.month:02d}")
    name = name.replace("%d", f"{created_at.day:02d}")
    return name


def create_client(settings: Settings) -> AsyncElasticsearch:
    """Create the Elasticsearch client from settings."""
    options: dict[str, Any] = {"verify_certs": settings.elasticsearch_verify_certs}
    if settings.elasticsearch_api_key:
        options["api_key"] = settings.elasticsearch_api_key
    elif settings.elasticsearch_username:
        options["basic_auth"] = (
            settings.elasticsearch_username,
            settings.elasticsearch_password,
        )
    return AsyncElasticsearch(settings.elasticsearch_addresses, **options)


class ElasticsearchStore:
    """Writes notification documents into date-derived indices."""

    def __init__(self, client: AsyncElasticsearch, index_template: str):
        self._client = client
        self._index_template = index_template

    @property
    def index_template(self) -> str:
        return self._index_template

    @classmethod
    async def connect(cls, settings: Settings) -> "ElasticsearchStore":
        """Create the client and wait until the cluster answers.

        Raises StoreConnectionError when the client cannot be built or the
        cluster stays unreachable after the configured number of attempts.
        """
        try:
            client = create_client(settings)
        except Exception as e:
            raise StoreConnectionError(f"invalid elasticsearch config: {e}") from e

        attempts = settings.elasticsearch_connect_attempts
        for attempt in range(1, attempts + 1):
            try:
                await client.info()
                break
            except (ApiError, TransportError) as e:
                if attempt >= attempts:
                    await client.close()
                    raise StoreConnectionError(
                        f"elasticsearch unreachable after {attempts} attempt(s): {e}"
                    ) from e
                logger.info("Failed to connect to Elasticsearch, retry...")
                await asyncio.sleep(settings.elasticsearch_connect_delay)

        logger.info(
            f"Connected to Elasticsearch {settings.elasticsearch_addresses}, "
            f"index template '{settings.elasticsearch_index}'"
        )
        return cls(client, settings.elasticsearch_index)

    def index_name(self, created_at: datetime) -> str:
        return build_index_name(self._index_template, created_at)

    async def index(self, index_name: str, document: dict[str, Any]) -> None:
        """Write one document. Failures are not retried."""
        try:
            await self._client.index(index=index_name, document=document)
        except (ApiError, TransportError) as e:
            raise DocumentIndexError(str(e)) from e

    async def close(self) -> None:
        await self._client.close()
