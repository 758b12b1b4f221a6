from orchard.clients.emr import EmrClient, is_transient_aws_error
from orchard.clients.retry import RetryPolicy

__all__ = ["EmrClient", "RetryPolicy", "is_transient_aws_error"]
