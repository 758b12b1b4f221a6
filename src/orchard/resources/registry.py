from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from orchard.core.errors import ConfigurationError
from orchard.domain.models import ResourceConf
from orchard.resources.base import ResourceIO

ResourceDecoder = Callable[..., ResourceIO]


@dataclass(frozen=True)
class ResourceKind:
    """Metadata describing a registered resource type."""

    resource_type: str
    decoder: ResourceDecoder
    description: str | None = None


class ResourceRegistry:
    """Simple in-memory registry of resource decoders keyed by resource type."""

    def __init__(self) -> None:
        self._kinds: Dict[str, ResourceKind] = {}

    def register(
        self,
        resource_type: str,
        decoder: ResourceDecoder,
        *,
        description: str | None = None,
    ) -> None:
        if not resource_type:
            raise ValueError("Resource type is required")
        self._kinds[resource_type] = ResourceKind(
            resource_type=resource_type,
            decoder=decoder,
            description=description,
        )

    def decode(self, conf: ResourceConf, **kwargs: Any) -> ResourceIO:
        kind = self._kinds.get(conf.resource_type)
        if kind is None:
            raise ConfigurationError(
                f"Resource type '{conf.resource_type}' is not registered",
                {"available": sorted(self._kinds)},
            )
        return kind.decoder(conf, **kwargs)

    def list(self) -> List[ResourceKind]:
        return list(self._kinds.values())


resource_registry = ResourceRegistry()


def register_resource(
    resource_type: str,
    decoder: ResourceDecoder,
    *,
    description: str | None = None,
) -> None:
    resource_registry.register(resource_type, decoder, description=description)


def decode_resource(conf: ResourceConf, **kwargs: Any) -> ResourceIO:
    return resource_registry.decode(conf, **kwargs)


def list_resources() -> List[ResourceKind]:
    return resource_registry.list()
