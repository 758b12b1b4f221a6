from __future__ import annotations

from enum import StrEnum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


class Status(StrEnum):
    """Lifecycle states understood by the orchestrator."""

    activating = "activating"
    running = "running"
    finished = "finished"
    failed = "failed"


class ResourceConf(BaseModel):
    """What the orchestrator hands over when it asks for a resource adapter."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    workflow_id: str = Field(alias="workflowId")
    resource_id: str = Field(alias="resourceId")
    instance_id: int | str = Field(alias="instanceId")
    resource_type: str = Field(alias="resourceType")
    resource_spec: Mapping[str, Any] = Field(alias="resourceSpec")

    @property
    def resource_name(self) -> str:
        return f"{self.workflow_id}_rsc-{self.resource_id}_{self.instance_id}"
