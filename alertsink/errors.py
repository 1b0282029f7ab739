"""Exceptions raised inside alertsink."""


class AlertSinkError(Exception):
    """Base class for alertsink errors."""


class StoreConnectionError(AlertSinkError):
    """Elasticsearch could not be set up or reached at startup."""


class DocumentIndexError(AlertSinkError):
    """A notification could not be written to Elasticsearch."""


class RemediationConfigError(AlertSinkError):
    """The remediation configuration file exists but cannot be used."""


class RemediationError(AlertSinkError):
    """A remediation endpoint could not be notified."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"post to {url or '<empty url>'} failed: {reason}")
