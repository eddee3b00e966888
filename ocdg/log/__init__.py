"""
Event log interface consumed by the graph builder.
"""

from ocdg.log.event_log import EventLog

__all__ = [
    "EventLog",
]
