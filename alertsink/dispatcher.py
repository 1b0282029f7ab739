"""Remediation dispatch based on the notification's alert name."""

import logging
from pathlib import Path

import httpx
import yaml
from pydantic import ValidationError

from alertsink.errors import RemediationConfigError, RemediationError
from alertsink.handlers.base import BaseHandler, HandlerKind
from alertsink.handlers.namespace_health import NamespaceHealthHandler
from alertsink.handlers.pod_restart import PodRestartHandler
from alertsink.models.notification import Notification
from alertsink.models.remediation import RemediationConfig

logger = logging.getLogger(__name__)

# commonLabels["alertname"] -> handler variant
ALERT_HANDLERS: dict[str, HandlerKind] = {
    "PodRestartTooMany>20": HandlerKind.POD_RESTART,
    "NamespaceLowHealthLevel": HandlerKind.NAMESPACE_HEALTH,
}


def load_remediation_config(config_path: str | Path) -> RemediationConfig:
    """Load remediation URLs from a YAML file.

    A missing file gives an empty configuration (every URL is ""). A file
    that cannot be read or parsed raises RemediationConfigError.
    """
    path = Path(config_path)
    if not path.exists():
        logger.warning(f"Remediation config not found: {path}, remediation URLs are empty")
        return RemediationConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return RemediationConfig.model_validate(data)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        raise RemediationConfigError(f"cannot load {path}: {e}") from e


def remediation_url(config: RemediationConfig, kind: HandlerKind) -> str:
    if kind is HandlerKind.POD_RESTART:
        return config.k8s_admin.pod_restart_url
    if kind is HandlerKind.NAMESPACE_HEALTH:
        return config.k8s_admin.namespace_low_health_url
    raise ValueError(f"Unknown handler kind: {kind}")


def create_handler(kind: HandlerKind, client: httpx.AsyncClient) -> BaseHandler:
    """Create a handler instance for a handler variant."""
    if kind is HandlerKind.POD_RESTART:
        return PodRestartHandler(client)
    elif kind is HandlerKind.NAMESPACE_HEALTH:
        return NamespaceHealthHandler(client)
    else:
        raise ValueError(f"Unknown handler kind: {kind}")


class RemediationDispatcher:
    """Hands a stored notification to at most one remediation handler."""

    def __init__(
        self,
        config: RemediationConfig,
        client: httpx.AsyncClient,
        alert_handlers: dict[str, HandlerKind] | None = None,
    ):
        self._config = config
        self._alert_handlers = dict(ALERT_HANDLERS if alert_handlers is None else alert_handlers)
        self._handlers: dict[HandlerKind, BaseHandler] = {
            kind: create_handler(kind, client)
            for kind in set(self._alert_handlers.values())
        }

        logger.info(f"Dispatcher initialized with {len(self._alert_handlers)} remediation route(s)")

    def routes(self) -> list[dict[str, str]]:
        return [
            {
                "alertname": alert_name,
                "handler": kind.value,
                "url": remediation_url(self._config, kind),
            }
            for alert_name, kind in self._alert_handlers.items()
        ]

    def find_handler(self, notification: Notification) -> tuple[BaseHandler | None, str]:
        """Find the handler and target URL for a notification."""
        kind = self._alert_handlers.get(notification.alert_name)
        if kind is None:
            return None, ""
        return self._handlers[kind], remediation_url(self._config, kind)

    async def dispatch(self, notification: Notification) -> None:
        """Run the matching handler. Handler errors are logged, never raised."""
        handler, url = self.find_handler(notification)
        if handler is None:
            logger.debug(f"No remediation for alert '{notification.alert_name}'")
            return

        logger.info(f"Dispatching alert '{notification.alert_name}' to {handler.kind.value}")
        try:
            ok = await handler.handle_event(notification, url)
        except RemediationError as e:
            logger.error(f"Remediation {handler.kind.value} failed: {e}")
            return
        except Exception as e:
            logger.exception(f"Remediation {handler.kind.value} crashed: {e}")
            return

        if ok:
            logger.info(f"Remediation {handler.kind.value} done for {len(notification.alerts)} alert(s)")
        else:
            logger.warning(f"Remediation {handler.kind.value} skipped, alert labels incomplete")
