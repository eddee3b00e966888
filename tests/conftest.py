"""
Pytest configuration and shared fixtures for OCDG tests.

Each fixture is a small event log whose expected graph can be worked out
by hand.
"""

import pytest

from ocdg.log.event_log import EventLog


# =============================================================================
# Event Log Fixtures
# =============================================================================

@pytest.fixture
def chain_log():
    """
    Three objects of one type handing over to each other.

    o1=[e1], o2=[e1, e2], o3=[e2]
    """
    return EventLog.from_records(
        objects=[(1, "A"), (2, "A"), (3, "A")],
        events=[(1, {1, 2}), (2, {2, 3})],
    )


@pytest.fixture
def split_log():
    """Object 1 ends in the event that starts objects 2 and 3 (same type)."""
    return EventLog.from_records(
        objects=[(1, "batch"), (2, "batch"), (3, "batch")],
        events=[(10, {1}), (11, {1, 2, 3}), (12, {2}), (13, {3})],
    )


@pytest.fixture
def engaged_log():
    """
    Two objects that meet once, in the middle of both their lives.

    o1=[e1, e3, e5], o2=[e2, e3, e4]
    """
    return EventLog.from_records(
        objects=[(1, "order"), (2, "truck")],
        events=[(1, {1}), (2, {2}), (3, {1, 2}), (4, {2}), (5, {1})],
    )


@pytest.fixture
def consume_log():
    """An order whose last event creates an item."""
    return EventLog.from_records(
        objects=[(1, "order"), (2, "item")],
        events=[(1, {1}), (2, {1, 2}), (3, {2})],
    )


@pytest.fixture
def crowded_log():
    """Objects 1 and 2 meet once alone and once with a third object."""
    return EventLog.from_records(
        objects=[(1, "A"), (2, "A"), (3, "B")],
        events=[(1, {1, 2}), (2, {1, 2, 3})],
    )
