from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from alertsink.dispatcher import RemediationDispatcher
from alertsink.errors import DocumentIndexError
from alertsink.ingest import WebhookIngestionService
from alertsink.main import create_app
from alertsink.metrics import IngestMetrics
from alertsink.models.remediation import K8sAdminTargets, RemediationConfig
from alertsink.store import build_index_name

POD_RESTART_URL = "http://k8s-admin.test/pod-restart"
NAMESPACE_HEALTH_URL = "http://k8s-admin.test/namespace-health"


def counter(metrics: IngestMetrics, name: str) -> float:
    """Current value of a received/invalid/successful counter."""
    return metrics.registry.get_sample_value(f"alertsink_alerts_{name}_total") or 0.0


class FakeStore:
    """In-memory stand-in for ElasticsearchStore."""

    def __init__(self, index_template: str = "alertmanager-%y.%m.%d"):
        self.index_template = index_template
        self.documents: list[tuple[str, dict[str, Any]]] = []
        self.fail = False

    def index_name(self, created_at: datetime) -> str:
        return build_index_name(self.index_template, created_at)

    async def index(self, index_name: str, document: dict[str, Any]) -> None:
        if self.fail:
            raise DocumentIndexError("cluster_block_exception")
        self.documents.append((index_name, document))

    async def close(self) -> None:
        pass


class RemediationRecorder:
    """Collects outbound remediation requests made through a MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"code": 0})

    @property
    def posts(self) -> list[tuple[str, dict[str, Any]]]:
        return [(str(r.url), json.loads(r.content)) for r in self.requests]


@pytest.fixture
def remediation_config() -> RemediationConfig:
    return RemediationConfig(
        k8s_admin=K8sAdminTargets(
            pod_restart_url=POD_RESTART_URL,
            namespace_low_health_url=NAMESPACE_HEALTH_URL,
        )
    )


@pytest.fixture
def recorder() -> RemediationRecorder:
    return RemediationRecorder()


@pytest.fixture
def http_client(recorder: RemediationRecorder) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(recorder))


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def dispatcher(remediation_config, http_client) -> RemediationDispatcher:
    return RemediationDispatcher(remediation_config, http_client)


@pytest.fixture
def metrics() -> IngestMetrics:
    return IngestMetrics()


@pytest.fixture
def client(store, dispatcher, metrics) -> TestClient:
    app = create_app(with_lifespan=False)
    app.state.ingestion = WebhookIngestionService(store, dispatcher, metrics)
    app.state.dispatcher = dispatcher
    return TestClient(app)


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    def _make(
        alertname: str = "NamespaceLowHealthLevel",
        alerts: list[dict[str, Any]] | None = None,
        version: str = "4",
    ) -> dict[str, Any]:
        if alerts is None:
            alerts = [
                {
                    "status": "firing",
                    "labels": {"alertname": alertname, "namespace": "ns1"},
                    "annotations": {"summary": "namespace health is low"},
                    "startsAt": "2026-10-19T08:00:00Z",
                    "endsAt": "0001-01-01T00:00:00Z",
                    "generatorURL": "http://prometheus/graph?g0.expr=up",
                }
            ]
        return {
            "version": version,
            "groupKey": '{}:{alertname="%s"}' % alertname,
            "status": "firing",
            "receiver": "alertsink",
            "groupLabels": {"alertname": alertname},
            "commonLabels": {"alertname": alertname},
            "commonAnnotations": {},
            "externalURL": "http://alertmanager:9093",
            "alerts": alerts,
        }

    return _make


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
