"""Remediation target configuration models."""

from pydantic import BaseModel, ConfigDict, Field


class K8sAdminTargets(BaseModel):
    """URLs of the k8s-admin remediation endpoints."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    pod_restart_url: str = Field(default="", alias="PodRestartUrl")
    namespace_low_health_url: str = Field(default="", alias="NamespaceLowHealthUrl")


class RemediationConfig(BaseModel):
    """Complete remediation configuration, one section per target system."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    k8s_admin: K8sAdminTargets = Field(default_factory=K8sAdminTargets, alias="k8s-admin")
