"""
Streaming Update Service

Applies real-time ticks to the base series and triggers indicator recompute.
"""

from chartengine.services.streaming.handler import StreamingUpdateHandler

__all__ = ["StreamingUpdateHandler"]
