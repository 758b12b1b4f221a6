"""
EMR cluster resource.

Launches an EMR cluster from a resource spec, reports its lifecycle status and
terminates it. The adapter keeps no state between calls apart from the spec it
was decoded with; the launched cluster is identified solely by the instance
spec returned from :meth:`EmrResource.create`.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from orchard.clients.emr import EmrClient
from orchard.config import ProviderSettings, get_settings
from orchard.core.errors import ProtocolDriftError, SpecDecodeError
from orchard.domain.models import ResourceConf, Status
from orchard.logging import bind_context
from orchard.resources import instance_spec
from orchard.resources.registry import register_resource

RESOURCE_TYPE = "aws.resource.EmrResource"


class _SpecModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AwsTag(_SpecModel):
    key: str
    value: str


class BootstrapAction(_SpecModel):
    path: str
    args: tuple[str, ...] = ()
    name: str | None = None


class ConfigurationSpec(_SpecModel):
    """One node of the EMR configuration tree."""

    classification: str
    properties: dict[str, str] | None = None
    configurations: tuple["ConfigurationSpec", ...] | None = None


ConfigurationSpec.model_rebuild()


class InstancesConfig(_SpecModel):
    subnet_id: str = Field(alias="subnetId")
    ec2_key_name: str = Field(alias="ec2KeyName")
    instance_count: int = Field(alias="instanceCount", ge=1)
    master_instance_type: str = Field(alias="masterInstanceType")
    slave_instance_type: str = Field(alias="slaveInstanceType")
    additional_master_security_groups: tuple[str, ...] | None = Field(
        default=None, alias="additionalMasterSecurityGroups"
    )
    additional_slave_security_groups: tuple[str, ...] | None = Field(
        default=None, alias="additionalSlaveSecurityGroups"
    )


class EmrSpec(_SpecModel):
    """Everything needed to launch a cluster. Only used by create()."""

    release_label: str = Field(alias="releaseLabel")
    applications: tuple[str, ...]
    service_role: str = Field(alias="serviceRole")
    resource_role: str = Field(alias="resourceRole")
    tags: tuple[AwsTag, ...] | None = None
    bootstrap_actions: tuple[BootstrapAction, ...] | None = Field(
        default=None, alias="bootstrapActions"
    )
    configurations: tuple[ConfigurationSpec, ...] | None = None
    instances_config: InstancesConfig = Field(alias="instancesConfig")


# Native EMR cluster states collapsed onto the orchestrator's Status.
# WAITING (idle) counts as running; TERMINATING counts as finished.
CLUSTER_STATE_STATUS: Mapping[str, Status] = MappingProxyType(
    {
        "STARTING": Status.activating,
        "BOOTSTRAPPING": Status.activating,
        "RUNNING": Status.running,
        "WAITING": Status.running,
        "TERMINATING": Status.finished,
        "TERMINATED": Status.finished,
        "TERMINATED_WITH_ERRORS": Status.failed,
    }
)


def map_cluster_state(state: str) -> Status:
    """Translate a native cluster state, raising ProtocolDriftError for unknown ones."""
    try:
        return CLUSTER_STATE_STATUS[state]
    except KeyError:
        raise ProtocolDriftError(state) from None


def as_configurations(
    configurations: Sequence[ConfigurationSpec] | None,
) -> list[dict[str, Any]]:
    """Translate the configuration tree into EMR ``Configurations`` entries."""

    def translate(node: ConfigurationSpec) -> dict[str, Any]:
        entry: dict[str, Any] = {"Classification": node.classification}
        if node.properties is not None:
            entry["Properties"] = dict(node.properties)
        if node.configurations is not None:
            entry["Configurations"] = [translate(child) for child in node.configurations]
        return entry

    return [translate(node) for node in configurations or ()]


def as_bootstrap_actions(actions: Sequence[BootstrapAction] | None) -> list[dict[str, Any]]:
    return [
        {
            "Name": action.name or action.path,
            "ScriptBootstrapAction": {"Path": action.path, "Args": list(action.args)},
        }
        for action in actions or ()
    ]


def as_tags(tags: Sequence[AwsTag] | None) -> list[dict[str, str]]:
    return [{"Key": tag.key, "Value": tag.value} for tag in tags or ()]


def as_instances(config: InstancesConfig) -> dict[str, Any]:
    instances: dict[str, Any] = {
        "Ec2SubnetId": config.subnet_id,
        "Ec2KeyName": config.ec2_key_name,
        "InstanceCount": config.instance_count,
        "MasterInstanceType": config.master_instance_type,
        "SlaveInstanceType": config.slave_instance_type,
        # Lifecycle ends only through terminate(), never because no steps are queued.
        "KeepJobFlowAliveWhenNoSteps": True,
    }
    if config.additional_master_security_groups is not None:
        instances["AdditionalMasterSecurityGroups"] = list(
            config.additional_master_security_groups
        )
    if config.additional_slave_security_groups is not None:
        instances["AdditionalSlaveSecurityGroups"] = list(config.additional_slave_security_groups)
    return instances


def build_run_job_flow_request(
    name: str, spec: EmrSpec, log_uri: str | None = None
) -> dict[str, Any]:
    """Build the ``run_job_flow`` keyword arguments for a cluster launch."""
    request: dict[str, Any] = {
        "Name": name,
        "ReleaseLabel": spec.release_label,
        "Applications": [{"Name": app} for app in spec.applications],
        "ServiceRole": spec.service_role,
        "JobFlowRole": spec.resource_role,
        "BootstrapActions": as_bootstrap_actions(spec.bootstrap_actions),
        "Tags": as_tags(spec.tags),
        "Configurations": as_configurations(spec.configurations),
        "Instances": as_instances(spec.instances_config),
    }
    if log_uri is not None:
        request["LogUri"] = log_uri
    return request


class EmrResource:
    """Resource adapter for a single EMR cluster."""

    resource_type = RESOURCE_TYPE

    def __init__(
        self,
        name: str,
        spec: EmrSpec,
        *,
        settings: ProviderSettings | None = None,
        client: EmrClient | None = None,
    ) -> None:
        self.name = name
        self.spec = spec
        self._settings = settings or get_settings()
        self.log_uri = self._settings.log_uri_for(name)
        self._client = client
        self._log = bind_context(self.resource_type, name)

    @classmethod
    def decode(
        cls,
        conf: ResourceConf,
        *,
        settings: ProviderSettings | None = None,
        client: EmrClient | None = None,
    ) -> "EmrResource":
        """Validate ``conf.resource_spec`` and bind an adapter to the derived resource name."""
        try:
            spec = EmrSpec.model_validate(conf.resource_spec)
        except ValidationError as exc:
            raise SpecDecodeError.from_validation_error("EMR resource spec", exc) from exc
        return cls(conf.resource_name, spec, settings=settings, client=client)

    def _emr(self) -> EmrClient:
        if self._client is None:
            self._client = EmrClient.from_settings(self._settings)
        return self._client

    def build_request(self) -> dict[str, Any]:
        if self.spec.tags is None:
            self._log.debug("emr_no_tags_given")
        return build_run_job_flow_request(self.name, self.spec, self.log_uri)

    def create(self) -> dict[str, Any]:
        """Launch the cluster and return its instance spec.

        A failure here does not prove that no cluster was launched.
        """
        request = self.build_request()
        cluster_id = self._emr().run_job_flow(request)
        self._log.info("emr_cluster_launched", cluster_id=cluster_id)
        return instance_spec.encode(cluster_id)

    def get_status(self, inst_spec: Any) -> Status:
        spec = instance_spec.decode(inst_spec)
        state, reason = self._emr().describe_cluster_state(spec.cluster_id)
        try:
            status = map_cluster_state(state)
        except ProtocolDriftError:
            self._log.error("emr_unknown_cluster_state", cluster_id=spec.cluster_id, state=state)
            raise
        if status is Status.failed:
            self._log.warning(
                "emr_cluster_failed", cluster_id=spec.cluster_id, state=state, reason=reason
            )
        else:
            self._log.debug(
                "emr_cluster_status", cluster_id=spec.cluster_id, state=state, status=status
            )
        return status

    def terminate(self, inst_spec: Any) -> Status:
        """Request termination without waiting for the cluster to stop."""
        spec = instance_spec.decode(inst_spec)
        self._emr().terminate_job_flows(spec.cluster_id)
        self._log.info("emr_cluster_terminate_requested", cluster_id=spec.cluster_id)
        return Status.finished


register_resource(RESOURCE_TYPE, EmrResource.decode, description="Amazon EMR cluster")
