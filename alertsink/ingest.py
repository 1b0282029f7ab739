"""Webhook ingestion: validate, timestamp, index, dispatch."""

import logging
from datetime import datetime

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from alertsink.dispatcher import RemediationDispatcher
from alertsink.errors import DocumentIndexError
from alertsink.metrics import IngestMetrics
from alertsink.models.notification import Notification
from alertsink.store import ElasticsearchStore

logger = logging.getLogger(__name__)

SUPPORTED_WEBHOOK_VERSION = "4"


class WebhookIngestionService:
    """Stores Alertmanager notifications and triggers remediation."""

    def __init__(
        self,
        store: ElasticsearchStore,
        dispatcher: RemediationDispatcher,
        metrics: IngestMetrics,
    ):
        self._store = store
        self._dispatcher = dispatcher
        self.metrics = metrics

    def _reject(
        self, status_code: int, detail: str, cause: Exception | None = None
    ) -> HTTPException:
        self.metrics.invalid.inc()
        logger.error(f"{detail}: {cause}" if cause else detail)
        return HTTPException(status_code=status_code, detail=detail)

    def parse(self, body: bytes) -> Notification:
        """Validate a raw request body, raising HTTPException on rejection."""
        if not body:
            raise self._reject(status.HTTP_400_BAD_REQUEST, "got empty request body")

        try:
            notification = Notification.model_validate_json(body)
        except ValidationError as e:
            raise self._reject(status.HTTP_400_BAD_REQUEST, f"invalid webhook payload: {e}")

        if notification.version != SUPPORTED_WEBHOOK_VERSION:
            raise self._reject(
                status.HTTP_400_BAD_REQUEST,
                f'do not understand webhook version "{notification.version}", '
                f'only version "{SUPPORTED_WEBHOOK_VERSION}" is supported',
            )
        return notification

    async def handle(self, request: Request) -> JSONResponse:
        self.metrics.received.inc()

        try:
            body = await request.body()
        except Exception as e:
            raise self._reject(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                f"unable to read request body: {e}",
            )

        notification = self.parse(body)

        now = datetime.now().astimezone()
        notification = notification.stamped(now)
        index_name = self._store.index_name(now)

        try:
            await self._store.index(index_name, notification.to_document())
        except DocumentIndexError as e:
            raise self._reject(
                status.HTTP_400_BAD_REQUEST,
                "unable to insert document in elasticsearch",
                cause=e,
            )

        logger.debug(f"received and stored alert: {notification.common_labels}")
        self.metrics.successful.inc()

        await self._dispatcher.dispatch(notification)

        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"status": "ok", "index": index_name},
        )
