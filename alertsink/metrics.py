"""Prometheus counters for webhook ingestion."""

from prometheus_client import CollectorRegistry, Counter, generate_latest


class IngestMetrics:
    """Received/invalid/successful counters on a dedicated registry."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()
        self.received = Counter(
            "alertsink_alerts_received",
            "alertsink received alerts",
            registry=self.registry,
        )
        self.invalid = Counter(
            "alertsink_alerts_invalid",
            "alertsink invalid alerts",
            registry=self.registry,
        )
        self.successful = Counter(
            "alertsink_alerts_successful",
            "alertsink successful stored alerts",
            registry=self.registry,
        )

    def render(self) -> bytes:
        return generate_latest(self.registry)
