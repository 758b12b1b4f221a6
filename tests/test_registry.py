"""Tests for the resource registry and polymorphic decode."""

from unittest.mock import MagicMock

import pytest
from orchard.core.errors import ConfigurationError
from orchard.domain.models import ResourceConf
from orchard.resources import EmrResource, ResourceIO, decode_resource, list_resources
from orchard.resources.emr import RESOURCE_TYPE
from orchard.resources.registry import ResourceRegistry


class TestResourceRegistry:
    def test_register_and_decode(self, resource_conf):
        registry = ResourceRegistry()
        adapter = MagicMock()
        decoder = MagicMock(return_value=adapter)
        registry.register(RESOURCE_TYPE, decoder, description="test")

        assert registry.decode(resource_conf, settings="s") is adapter
        decoder.assert_called_once_with(resource_conf, settings="s")

    def test_unknown_type_is_configuration_error(self, resource_conf):
        registry = ResourceRegistry()
        conf = resource_conf.model_copy(update={"resource_type": "gcp.resource.Dataproc"})

        with pytest.raises(ConfigurationError) as exc_info:
            registry.decode(conf)

        assert "gcp.resource.Dataproc" in exc_info.value.message

    def test_empty_type_rejected(self):
        with pytest.raises(ValueError):
            ResourceRegistry().register("", MagicMock())

    def test_list(self):
        registry = ResourceRegistry()
        registry.register("a", MagicMock())
        registry.register("b", MagicMock())

        assert [kind.resource_type for kind in registry.list()] == ["a", "b"]


class TestBuiltinRegistrations:
    def test_emr_registered(self):
        assert RESOURCE_TYPE in {kind.resource_type for kind in list_resources()}

    def test_decode_emr_resource(self, resource_conf, settings):
        resource = decode_resource(resource_conf, settings=settings)

        assert isinstance(resource, EmrResource)
        assert isinstance(resource, ResourceIO)
        assert resource.name == "wf-42_rsc-emr-main_1"


class TestResourceConf:
    def test_resource_name(self, emr_spec):
        conf = ResourceConf.model_validate(
            {
                "workflowId": "wf-7",
                "resourceId": "cluster",
                "instanceId": 3,
                "resourceType": RESOURCE_TYPE,
                "resourceSpec": emr_spec,
            }
        )

        assert conf.resource_name == "wf-7_rsc-cluster_3"
