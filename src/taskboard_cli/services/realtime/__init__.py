"""Realtime channels pushing task changes to connected boards."""

from .channel import EventHandler, RealtimeChannel
from .local import LocalRealtimeChannel, LocalRealtimeHub, get_local_hub
from .sse import SseRealtimeChannel, decode_frame, parse_sse

__all__ = [
    "EventHandler",
    "RealtimeChannel",
    "LocalRealtimeChannel",
    "LocalRealtimeHub",
    "get_local_hub",
    "SseRealtimeChannel",
    "parse_sse",
    "decode_frame",
]
