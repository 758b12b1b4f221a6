"""Root test configuration."""

import copy
import logging
from unittest.mock import MagicMock

import pytest
import structlog
from orchard.clients.emr import EmrClient, is_transient_aws_error
from orchard.clients.retry import RetryPolicy
from orchard.config import ProviderSettings
from orchard.domain.models import ResourceConf
from orchard.resources.emr import RESOURCE_TYPE

EMR_SPEC = {
    "releaseLabel": "emr-6.10.0",
    "applications": ["Hadoop", "Spark"],
    "serviceRole": "EMR_DefaultRole",
    "resourceRole": "EMR_EC2_DefaultRole",
    "instancesConfig": {
        "subnetId": "subnet-0abc123",
        "ec2KeyName": "orchard-key",
        "instanceCount": 3,
        "masterInstanceType": "m5.xlarge",
        "slaveInstanceType": "m5.2xlarge",
    },
}


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def emr_spec():
    """A minimal valid EMR resource spec (fresh copy per test)."""
    return copy.deepcopy(EMR_SPEC)


@pytest.fixture
def resource_conf(emr_spec):
    return ResourceConf(
        workflowId="wf-42",
        resourceId="emr-main",
        instanceId=1,
        resourceType=RESOURCE_TYPE,
        resourceSpec=emr_spec,
    )


@pytest.fixture
def settings(monkeypatch):
    """Provider settings isolated from the host environment."""
    for var in ("ORCHARD_AWS_LOGGING_URI", "ORCHARD_AWS_AWS_REGION", "ORCHARD_AWS_ASSUME_ROLE_ARN"):
        monkeypatch.delenv(var, raising=False)
    return ProviderSettings(_env_file=None)


@pytest.fixture
def fast_retry():
    """Retry policy with no backoff sleeps."""
    return RetryPolicy(
        max_attempts=3,
        wait_multiplier=0,
        wait_min=0,
        wait_max=0,
        classifier=is_transient_aws_error,
    )


@pytest.fixture
def boto_emr():
    """Mock boto3 EMR client with successful default responses."""
    client = MagicMock()
    client.run_job_flow.return_value = {"JobFlowId": "j-2AXXXXXXGAPLF"}
    client.describe_cluster.return_value = {
        "Cluster": {"Id": "j-2AXXXXXXGAPLF", "Status": {"State": "RUNNING"}}
    }
    client.terminate_job_flows.return_value = {}
    return client


@pytest.fixture
def emr_client(boto_emr, fast_retry):
    return EmrClient(boto_emr, fast_retry)
