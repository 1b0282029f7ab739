"""Alertmanager webhook notification models.

Every field is optional on input: a missing or null field takes its zero
value, the same way a lenient JSON decode would. Version checking is left to
the ingestion service.
"""

import re
from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


def _check_rfc3339(value: str) -> str:
    if value and not RFC3339_PATTERN.match(value):
        raise ValueError(f"{value!r} is not an RFC3339 timestamp")
    return value


# Kept as sent: Alertmanager emits nanosecond precision
Timestamp = Annotated[str, AfterValidator(_check_rfc3339)]


def _drop_nulls(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


class AlertEntry(BaseModel):
    """A single alert inside a notification."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    status: str = ""
    starts_at: Timestamp = Field(default="", alias="startsAt")
    ends_at: Timestamp = Field(default="", alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")

    @model_validator(mode="before")
    @classmethod
    def null_as_zero(cls, data: Any) -> Any:
        return _drop_nulls(data)


class Notification(BaseModel):
    """One webhook payload: a group of related alerts at a point in time."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    version: str = ""
    status: str = ""
    receiver: str = ""
    external_url: str = Field(default="", alias="externalURL")
    group_key: str = Field(default="", alias="groupKey")
    common_labels: dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: dict[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    group_labels: dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    alerts: list[AlertEntry] = Field(default_factory=list)

    # Receipt time, assigned by the service
    timestamp: str = Field(default="", alias="@timestamp")

    @model_validator(mode="before")
    @classmethod
    def null_as_zero(cls, data: Any) -> Any:
        data = _drop_nulls(data)
        if isinstance(data, dict) and isinstance(data.get("alerts"), list):
            data["alerts"] = [{} if alert is None else alert for alert in data["alerts"]]
        return data

    @property
    def alert_name(self) -> str:
        return self.common_labels.get("alertname", "")

    def stamped(self, received_at: datetime) -> "Notification":
        """Return a copy carrying the RFC3339 receipt time."""
        return self.model_copy(
            update={"timestamp": received_at.isoformat(timespec="seconds")}
        )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
