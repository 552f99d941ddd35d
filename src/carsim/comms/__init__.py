"""Internal messaging between the tick thread and the transport layer."""
from .event_bus import EventBus

__all__ = ["EventBus"]
