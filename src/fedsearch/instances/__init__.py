from .health import HealthTracker
from .registry import DEFAULT_INSTANCES, Instance, load_registry

__all__ = ["HealthTracker", "Instance", "DEFAULT_INSTANCES", "load_registry"]
