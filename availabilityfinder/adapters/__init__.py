"""
Adapters layer - Calendar gateway implementations.
"""

from .memory_gateway import CalendarAccount, InMemoryCalendarGateway

__all__ = ["CalendarAccount", "InMemoryCalendarGateway"]
