"""Pod restart remediation: asks k8s-admin to deal with a restarting pod."""

import logging

from alertsink.handlers.base import BaseHandler, HandlerKind
from alertsink.models.notification import AlertEntry

logger = logging.getLogger(__name__)


class PodRestartHandler(BaseHandler):
    """Posts podName and namespaceName for each alert entry."""

    @property
    def kind(self) -> HandlerKind:
        return HandlerKind.POD_RESTART

    def build_body(self, alert: AlertEntry) -> dict[str, str] | None:
        namespace_name = alert.labels.get("namespace", "")
        pod_name = alert.labels.get("pod", "")
        if not pod_name or not namespace_name:
            logger.error("podName or namespaceName is empty, skipping remediation")
            return None

        return {
            "podName": pod_name,
            "namespaceName": namespace_name,
        }
