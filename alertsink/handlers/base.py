"""Base class for remediation handlers."""

import logging
from abc import ABC, abstractmethod
from enum import Enum

import httpx

from alertsink.errors import RemediationError
from alertsink.models.notification import AlertEntry, Notification

logger = logging.getLogger(__name__)


class HandlerKind(str, Enum):
    """Supported remediation handler variants."""

    POD_RESTART = "pod_restart"
    NAMESPACE_HEALTH = "namespace_health"


class BaseHandler(ABC):
    """Posts one remediation request per alert entry of a notification.

    handle_event returns False as soon as an entry lacks a required label and
    raises RemediationError as soon as a post fails; in both cases the
    remaining entries are skipped.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @property
    @abstractmethod
    def kind(self) -> HandlerKind:
        """Handler variant."""
        ...

    @abstractmethod
    def build_body(self, alert: AlertEntry) -> dict[str, str] | None:
        """Request body for an alert entry, or None if a required label is empty."""
        ...

    async def handle_event(self, notification: Notification, url: str) -> bool:
        for alert in notification.alerts:
            body = self.build_body(alert)
            if body is None:
                return False
            await self.post(url, body)
        return True

    async def post(self, url: str, body: dict[str, str]) -> None:
        if not url:
            raise RemediationError(url, f"no URL configured for {self.kind.value}")
        try:
            response = await self._client.post(url, json=body)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.info(f"post to k8s admin error : {e}")
            raise RemediationError(url, str(e)) from e
