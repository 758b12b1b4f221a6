from orchard.domain.models import ResourceConf, Status

__all__ = ["ResourceConf", "Status"]
