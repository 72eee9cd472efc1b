import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from geojot_ui.inflight import InFlightRequests


@pytest.fixture
def tracker():
    t = InFlightRequests(max_workers=4)
    yield t
    t.shutdown()


def test_identical_request_reuses_pending_future(tracker):
    release = threading.Event()
    calls = []

    def search(query):
        calls.append(query)
        release.wait(5)
        return query.upper()

    first = tracker.submit("users", search, "test")
    second = tracker.submit("users", search, "test")
    assert first is second
    release.set()
    assert first.result(5) == "TEST"
    assert calls == ["test"]


def test_latest_request_wins_even_if_older_finishes_last(tracker):
    slow_started = threading.Event()
    release_slow = threading.Event()
    applied = []

    def search(query):
        if query == "te":
            slow_started.set()
            release_slow.wait(5)
        return query

    old = tracker.submit("users", search, "te", on_result=applied.append)
    assert slow_started.wait(5)
    new = tracker.submit("users", search, "test", on_result=applied.append)
    assert new.result(5) == "test"
    release_slow.set()
    old.result(5)
    assert applied == ["test"]


def test_queued_request_is_cancelled_when_superseded():
    executor = ThreadPoolExecutor(max_workers=1)
    tracker = InFlightRequests(executor=executor)
    blocker = threading.Event()
    try:
        tracker.submit("other", blocker.wait, 5)
        queued = tracker.submit("music", str.upper, "so")
        latest = tracker.submit("music", str.upper, "song")
        assert queued.cancelled()
        blocker.set()
        assert latest.result(5) == "SONG"
    finally:
        blocker.set()
        tracker.shutdown()
        executor.shutdown()


def test_keys_are_independent(tracker):
    applied = {}
    users = tracker.submit("users", str.upper, "a", on_result=lambda r: applied.update(users=r))
    places = tracker.submit("places", str.upper, "b", on_result=lambda r: applied.update(places=r))
    users.result(5)
    places.result(5)
    assert applied == {"users": "A", "places": "B"}


def test_cancel_discards_running_result(tracker):
    release = threading.Event()
    applied = []

    def search(query):
        release.wait(5)
        return query

    future = tracker.submit("users", search, "x", on_result=applied.append)
    tracker.cancel("users")
    release.set()
    if not future.cancelled():
        future.result(5)
    assert applied == []
    assert not tracker.pending("users")
