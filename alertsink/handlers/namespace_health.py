"""Namespace health remediation."""

import logging

from alertsink.handlers.base import BaseHandler, HandlerKind
from alertsink.models.notification import AlertEntry

logger = logging.getLogger(__name__)


class NamespaceHealthHandler(BaseHandler):

    @property
    def kind(self) -> HandlerKind:
        return HandlerKind.NAMESPACE_HEALTH

    def build_body(self, alert: AlertEntry) -> dict[str, str] | None:
        namespace_name = alert.labels.get("namespace", "")
        if not namespace_name:
            logger.error("namespaceName is empty, please check the alert labels")
            return None

        return {"namespaceName": namespace_name}
