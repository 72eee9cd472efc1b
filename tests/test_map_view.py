from geojot_ui.config import settings
from geojot_ui.map_view import FOCUS_ZOOM, MapView
from geojot_ui.pin_form import PinForm

PIN = {"_id": "123", "position": {"lat": 10, "lng": 10}, "username": "testuser", "name": "Pin"}


def _loaded(state, api, pins=None, **kwargs):
    api.list_pins.return_value = ([dict(p) for p in (pins or [PIN])], None)
    view = MapView(state, **kwargs)
    view.load_pins()
    return view


def test_load_pins_for_viewed_user(state, api):
    view = _loaded(state, api)
    api.list_pins.assert_called_once_with("testuser")
    assert [p["_id"] for p in view.pins] == ["123"]


def test_load_failure_message(state, api):
    api.list_pins.return_value = ([], {"status_code": None, "message": "Failed to fetch", "body": None})
    view = MapView(state)
    assert view.load_pins() is False
    assert view.error == "Failed to load pins"


def test_owner_can_place_pin(state, api):
    view = _loaded(state, api)
    form = view.place_pin(53.4, -2.9)
    assert isinstance(form, PinForm)
    assert form.position == {"lat": 53.4, "lng": -2.9}


def test_cannot_place_pin_on_another_users_map(state, api):
    view = _loaded(state, api, viewed_username="otherUser")
    assert view.can_place_pins is False
    assert view.place_pin(1, 1) is None


def test_open_pin_permissions(state, api):
    other = dict(PIN, _id="456", username="ownerUser")
    view = _loaded(state, api, pins=[PIN, other])
    assert view.open_pin("123").can_edit is True
    assert view.open_pin("456").can_edit is False
    assert view.open_pin("missing") is None


def test_delete_pin_drops_marker(state, api):
    api.delete_pin.return_value = (True, None)
    view = _loaded(state, api)
    assert view.delete_pin("123") is True
    api.delete_pin.assert_called_once_with("123")
    assert view.pins == []
    api.recent_pins.assert_called_with("testuser")


def test_saved_pin_is_added_to_map(state, api):
    api.create_pin.return_value = ({"_id": "new-pin", "position": {"lat": 10, "lng": 10}}, None)
    view = _loaded(state, api)
    form = view.place_pin(10, 10)
    form.name = "New place"
    assert form.submit() is not None
    assert [p["_id"] for p in view.pins] == ["123", "new-pin"]


def test_selected_location_moves_map_and_clears(state, api):
    view = _loaded(state, api)
    state.selection.select_location(20, 20)
    assert view.center == (20.0, 20.0)
    assert view.zoom == FOCUS_ZOOM
    assert state.selection.location is None


def test_selected_pin_moves_map(state, api):
    view = _loaded(state, api)
    state.selection.select_pin({"_id": "pin1", "position": {"lat": 20, "lng": 20}})
    assert view.center == (20.0, 20.0)
    assert state.selection.pin is None


def test_center_from_geolocation(state, api):
    assert MapView(state, geolocate=lambda: (53.41173, -2.982645)).center == (53.41173, -2.982645)
    assert MapView(state).center == (settings.default_lat, settings.default_lng)


def test_closed_map_ignores_selection(state, api):
    view = _loaded(state, api)
    view.close()
    state.selection.select_location(20, 20)
    assert view.center != (20.0, 20.0)
