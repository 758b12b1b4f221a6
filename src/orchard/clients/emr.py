"""
EMR control-plane client.

Thin wrapper over a boto3 ``emr`` client exposing the three calls a cluster
resource needs. Every call goes through the uniform retry policy with the same
request, and botocore failures are translated into the Orchard error taxonomy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

import boto3
import structlog
from botocore.config import Config
from botocore.credentials import RefreshableCredentials
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    HTTPClientError,
)
from botocore.session import get_session as get_botocore_session
from tenacity import RetryError

from orchard.clients.retry import RetryPolicy
from orchard.core.errors import BackendPermanentError, BackendTransientError

if TYPE_CHECKING:
    from orchard.config import ProviderSettings

logger = structlog.get_logger()

TRANSIENT_ERROR_CODES = frozenset(
    {
        "InternalFailure",
        "InternalServerError",
        "InternalServerException",
        "RequestLimitExceeded",
        "RequestThrottled",
        "RequestThrottledException",
        "RequestTimeout",
        "RequestTimeoutException",
        "ServiceUnavailable",
        "ServiceUnavailableException",
        "SlowDown",
        "Throttling",
        "ThrottlingException",
        "TooManyRequestsException",
    }
)


def is_retryable_status(status_code: int) -> bool:
    """Determine if HTTP status code is retryable."""
    return status_code in (408, 429, 500, 502, 503, 504)


def is_transient_aws_error(exc: BaseException) -> bool:
    """Classify a botocore failure as transient (retry) or permanent (surface now)."""
    if isinstance(exc, (BotoConnectionError, HTTPClientError)):
        return True
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        if error.get("Code") in TRANSIENT_ERROR_CODES:
            return True
        status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        return status is not None and is_retryable_status(status)
    return False


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "Unknown")
    return type(exc).__name__


def call_with_retry(
    policy: RetryPolicy, operation: str, func: Callable[..., Any], **request: Any
) -> Any:
    """Run one AWS call under ``policy`` and translate botocore failures."""
    try:
        return policy.call(lambda: func(**request), description=operation)
    except RetryError as exc:
        last = exc.last_attempt
        cause = last.exception()
        raise BackendTransientError(
            f"{operation} failed after {last.attempt_number} attempt(s): {_error_code(cause)}",
            operation,
            {"attempts": last.attempt_number},
        ) from cause
    except (BotoCoreError, ClientError) as exc:
        logger.error("backend_call_rejected", operation=operation, error=_error_code(exc))
        raise BackendPermanentError(
            f"{operation} rejected: {_error_code(exc)}", operation
        ) from exc


def assume_role_credentials(
    sts: Any, settings: "ProviderSettings", retry_policy: RetryPolicy
) -> RefreshableCredentials:
    """Temporary credentials for the configured role, re-assumed before they expire."""

    def refresh() -> dict[str, str]:
        credentials = call_with_retry(
            retry_policy,
            "assume_role",
            sts.assume_role,
            RoleArn=settings.assume_role_arn,
            RoleSessionName=settings.assume_role_session_name,
        )["Credentials"]
        logger.debug(
            "emr_role_assumed",
            role_arn=settings.assume_role_arn,
            expires=credentials["Expiration"].isoformat(),
        )
        return {
            "access_key": credentials["AccessKeyId"],
            "secret_key": credentials["SecretAccessKey"],
            "token": credentials["SessionToken"],
            "expiry_time": credentials["Expiration"].isoformat(),
        }

    return RefreshableCredentials.create_from_metadata(
        metadata=refresh(), refresh_using=refresh, method="sts-assume-role"
    )


def _build_session(
    settings: "ProviderSettings", retry_policy: RetryPolicy, boto_config: Config
) -> boto3.Session:
    session = boto3.Session(region_name=settings.aws_region)
    if not settings.assume_role_arn:
        return session

    botocore_session = get_botocore_session()
    botocore_session._credentials = assume_role_credentials(
        session.client("sts", config=boto_config), settings, retry_policy
    )
    return boto3.Session(botocore_session=botocore_session, region_name=settings.aws_region)


class EmrClient:
    """Launch, describe and terminate EMR clusters with uniform retry."""

    def __init__(self, client: Any, retry_policy: RetryPolicy | None = None) -> None:
        self._client = client
        self._retry_policy = retry_policy or RetryPolicy(classifier=is_transient_aws_error)

    @classmethod
    def from_settings(cls, settings: "ProviderSettings") -> "EmrClient":
        """Build a boto3-backed client from provider settings.

        botocore's own retry loop is limited to one attempt so that the
        retry policy is the only place requests are repeated. With an assumed
        role the client signs with refreshable credentials, so it outlives a
        single STS session.
        """
        retry_policy = RetryPolicy.from_settings(settings, is_transient_aws_error)
        boto_config = Config(
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
        )
        session = _build_session(settings, retry_policy, boto_config)
        client = session.client("emr", endpoint_url=settings.endpoint_url, config=boto_config)
        return cls(client, retry_policy)

    def _call(self, operation: str, func: Callable[..., Any], **request: Any) -> Any:
        return call_with_retry(self._retry_policy, operation, func, **request)

    def run_job_flow(self, request: dict[str, Any]) -> str:
        """Launch a cluster and return its identifier."""
        response = self._call("run_job_flow", self._client.run_job_flow, **request)
        return response["JobFlowId"]

    def describe_cluster_state(self, cluster_id: str) -> tuple[str, str | None]:
        """Return the cluster's native state and its state-change message, if any."""
        response = self._call(
            "describe_cluster", self._client.describe_cluster, ClusterId=cluster_id
        )
        status = response["Cluster"]["Status"]
        reason = status.get("StateChangeReason", {}).get("Message")
        return status["State"], reason

    def terminate_job_flows(self, cluster_id: str) -> None:
        self._call(
            "terminate_job_flows", self._client.terminate_job_flows, JobFlowIds=[cluster_id]
        )
