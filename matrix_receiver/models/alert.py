"""Alertmanager webhook payload models.

See: https://prometheus.io/docs/alerting/latest/configuration/#webhook_config
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Alert(BaseModel):
    """Single alert within a webhook payload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    status: str = Field(default="", description="firing, resolved or any other status string")
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    starts_at: str = Field(default="", alias="startsAt")
    ends_at: str = Field(default="", alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: str = ""

    @property
    def is_firing(self) -> bool:
        return self.status == "firing"

    @property
    def is_resolved(self) -> bool:
        return self.status == "resolved"

    @property
    def name(self) -> str:
        return self.labels.get("name", "")

    @property
    def summary(self) -> str:
        return self.annotations.get("summary", "")


class AlertBatch(BaseModel):
    """Decoded webhook payload: one notification group from Alertmanager."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    status: str = ""
    alerts: list[Alert] = Field(default_factory=list)
    receiver: str = ""
    group_labels: dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    common_labels: dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: dict[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    external_url: str = Field(default="", alias="externalURL")
    version: str = ""
    group_key: str = Field(default="", alias="groupKey")
    truncated_alerts: int = Field(default=0, alias="truncatedAlerts")

    @property
    def firing_alerts(self) -> list[Alert]:
        return [a for a in self.alerts if a.is_firing]

    @property
    def resolved_alerts(self) -> list[Alert]:
        return [a for a in self.alerts if a.is_resolved]

    def template_context(self) -> dict[str, Any]:
        """Wire-named view of the batch handed to message templates."""
        data = self.model_dump(by_alias=True)
        return {
            **data,
            "firingAlerts": [a.model_dump(by_alias=True) for a in self.firing_alerts],
            "resolvedAlerts": [a.model_dump(by_alias=True) for a in self.resolved_alerts],
            "data": data,
        }
