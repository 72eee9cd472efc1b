from unittest.mock import MagicMock

import requests

from geojot_ui.providers import PlacesProvider, WeatherProvider, format_address

from tests.utils import make_response


def _session(*responses):
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return session


def test_weather_request_parameters():
    session = _session(make_response(200, {"name": "Liverpool"}))
    provider = WeatherProvider(api_key="key", url="http://weather/api", session=session)
    data, error = provider.current(53.4, -2.9)
    assert data == {"name": "Liverpool"}
    kwargs = session.request.call_args.kwargs
    assert kwargs["url"] == "http://weather/api"
    assert kwargs["params"] == {"lat": 53.4, "lon": -2.9, "units": "metric", "appid": "key"}


def test_place_search_sends_user_agent():
    session = _session(make_response(200, [{"display_name": "Place 1", "lat": "1", "lon": "2"}]))
    provider = PlacesProvider(base_url="http://nominatim/", session=session, user_agent="tests")
    places, error = provider.search("Place")
    assert error is None
    assert places[0]["display_name"] == "Place 1"
    kwargs = session.request.call_args.kwargs
    assert kwargs["url"] == "http://nominatim/search"
    assert kwargs["headers"] == {"User-Agent": "tests"}


def test_reverse_geocoding():
    session = _session(make_response(200, {"address": {"road": "Lime Street", "city": "Liverpool"}}))
    provider = PlacesProvider(base_url="http://nominatim", session=session)
    assert provider.reverse(53.4, -2.9) == ("Lime Street, Liverpool", None)


def test_reverse_geocoding_failure():
    session = _session(requests.ConnectionError("offline"))
    address, error = PlacesProvider(base_url="http://nominatim", session=session).reverse(0, 0)
    assert address is None
    assert error["message"] == "offline"


def test_format_address_fallbacks():
    assert format_address({"road": "High St", "town": "Ormskirk"}) == "High St, Ormskirk"
    assert format_address({"village": "Hale"}) == "Hale"
