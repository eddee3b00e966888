"""
Errors raised by the graph construction core.
"""

from __future__ import annotations

from typing import Optional


class IntegrityError(Exception):
    """
    Raised when lifeline, adjacency or log state is missing for an
    identifier that must exist.

    This is never recoverable: construction aborts and no partial graph
    is returned.

    Attributes:
        identifier: The offending object or event id
        kind: "object" or "event"
    """

    def __init__(self, identifier: int, kind: str = "object", message: Optional[str] = None):
        super().__init__(message or f"Unknown {kind} id: {identifier}")
        self.identifier = identifier
        self.kind = kind
