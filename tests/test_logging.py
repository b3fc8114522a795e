"""
Tests for structured logging helpers.
"""

import threading

from nano_metrics.logging import add_reporter_context, clear_context, set_reporter_context


def test_reporter_context_added():
    """Test game and serverType are added to events."""
    set_reporter_context("mygame", "frontend")

    event = add_reporter_context(None, "info", {"event": "hello"})

    assert event == {"event": "hello", "game": "mygame", "serverType": "frontend"}


def test_reporter_context_visible_from_other_threads():
    """Test events logged on other threads carry the reporter identity."""
    set_reporter_context("mygame", "frontend")
    events = []

    thread = threading.Thread(target=lambda: events.append(add_reporter_context(None, "info", {})))
    thread.start()
    thread.join()

    assert events == [{"game": "mygame", "serverType": "frontend"}]


def test_event_values_not_overwritten():
    """Test values bound on the event win over the reporter identity."""
    set_reporter_context("mygame", "frontend")

    event = add_reporter_context(None, "info", {"game": "other"})

    assert event["game"] == "other"


def test_clear_context():
    """Test clearing removes the reporter identity."""
    set_reporter_context("mygame", "frontend")
    clear_context()

    assert add_reporter_context(None, "info", {}) == {}
