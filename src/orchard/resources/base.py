from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from orchard.domain.models import Status


@runtime_checkable
class ResourceIO(Protocol):
    """Contract every resource kind exposes to the orchestrator.

    ``create`` returns an instance spec the orchestrator persists verbatim and
    hands back to ``get_status`` and ``terminate``.
    """

    name: str

    def create(self) -> dict[str, Any]:
        ...

    def get_status(self, inst_spec: Any) -> Status:
        ...

    def terminate(self, inst_spec: Any) -> Status:
        ...
