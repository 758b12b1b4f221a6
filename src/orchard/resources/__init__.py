"""Resource adapters and built-in registrations."""

# Import built-in resources for side effects (registration)
from orchard.resources import emr as _emr  # noqa: F401
from orchard.resources.base import ResourceIO
from orchard.resources.emr import EmrResource
from orchard.resources.registry import (
    decode_resource,
    list_resources,
    register_resource,
)

__all__ = [
    "EmrResource",
    "ResourceIO",
    "decode_resource",
    "list_resources",
    "register_resource",
]
