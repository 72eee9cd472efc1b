import threading
from concurrent.futures import wait
from unittest.mock import MagicMock

import pytest

from geojot_ui.providers import PlacesProvider
from geojot_ui.search import SearchView

PLACE = {"place_id": "1", "display_name": "Place 1", "lat": "53.4", "lon": "-2.9"}


@pytest.fixture
def places():
    provider = MagicMock(spec=PlacesProvider)
    provider.search.return_value = ([PLACE], None)
    return provider


def test_search_issues_both_requests(state, api, places):
    api.search_users.return_value = ([{"_id": "1", "username": "testuser"}], None)
    view = SearchView(state, places=places)
    futures = view.search("test")
    assert len(futures) == 2
    wait(futures, timeout=5)
    api.search_users.assert_called_once_with("test")
    places.search.assert_called_once_with("test")
    assert view.users == [{"_id": "1", "username": "testuser"}]
    assert view.places == [PLACE]
    assert view.status is None


def test_loading_then_error(state, api, places):
    release = threading.Event()

    def slow_failure(query):
        release.wait(5)
        return [], {"status_code": None, "message": "Failed to fetch", "body": None}

    api.search_users.side_effect = slow_failure
    view = SearchView(state, places=places)
    futures = view.search("error")
    assert view.loading
    assert view.status == "Loading..."
    release.set()
    wait(futures, timeout=5)
    assert view.status == "Error: Failed to fetch"


def test_empty_query_clears_results(state, api, places):
    view = SearchView(state, places=places)
    view.users = [{"username": "old"}]
    assert view.search("") == []
    assert view.users == []
    api.search_users.assert_not_called()


def test_tabs(state, places):
    view = SearchView(state, places=places)
    assert view.active_tab == "users"
    view.show_tab("places")
    assert view.active_tab == "places"
    with pytest.raises(ValueError):
        view.show_tab("pins")


def test_select_user_calls_back_and_closes(state, places):
    selected = []
    view = SearchView(state, places=places, on_select_user=selected.append)
    view.open = True
    view.select_user({"_id": "1", "username": "testuser"})
    assert selected == [{"_id": "1", "username": "testuser"}]
    assert not view.open


def test_select_location_publishes_to_map(state, places):
    selected = []
    seen = []
    state.selection.subscribe(lambda channel: seen.append(channel.location))
    view = SearchView(state, places=places, on_select_location=selected.append)
    view.select_location(PLACE)
    assert seen == [{"lat": 53.4, "lng": -2.9}]
    assert selected == [PLACE]
