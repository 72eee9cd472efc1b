from unittest.mock import MagicMock

import requests

from geojot_client import GeoJotAPI, request_json

from tests.utils import make_response

BASE = "https://geojotbackend.onrender.com"


def _api(*responses):
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return GeoJotAPI(base_url=BASE, session=session), session


def test_login_stores_token_for_later_calls():
    api, session = _api(
        make_response(200, {"user": {"username": "john_doe"}, "token": "tok"}),
        make_response(201, {"_id": "1"}),
    )
    data, error = api.login("john_doe", "s3cr3t")
    assert error is None
    assert data["user"]["username"] == "john_doe"

    api.create_pin({"name": "Lime Street"})
    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["url"] == f"{BASE}/api/pins"
    assert kwargs["headers"]["Authorization"] == "Bearer tok"


def test_error_body_message_is_extracted():
    api, _ = _api(make_response(400, {"error": "Email already exists."}))
    data, error = api.register("John", "john@example.com", "Passw0rdX")
    assert data is None
    assert error["status_code"] == 400
    assert error["message"] == "Email already exists."
    assert error["body"] == {"error": "Email already exists."}


def test_error_without_json_body(caplog):
    api, _ = _api(make_response(500, reason="Internal Server Error"))
    _, error = api.update_pin("1", {"name": "x"})
    assert error["status_code"] == 500
    assert error["message"] == "Internal Server Error"
    assert "failed (500)" in caplog.text


def test_network_failure_is_returned_not_raised():
    api, _ = _api(requests.ConnectionError("Failed to fetch"))
    pins, error = api.list_pins("testuser")
    assert pins == []
    assert error == {"status_code": None, "message": "Failed to fetch", "body": None}


def test_list_pins_query():
    api, session = _api(make_response(200, [{"_id": "123"}]))
    pins, error = api.list_pins("testuser")
    assert pins == [{"_id": "123"}]
    kwargs = session.request.call_args.kwargs
    assert kwargs["url"] == f"{BASE}/api/pins"
    assert kwargs["params"] == {"username": "testuser"}


def test_delete_pin_with_empty_body():
    api, session = _api(make_response(204))
    assert api.delete_pin("123") == (True, None)
    assert session.request.call_args.kwargs["method"] == "DELETE"


def test_follow_posts_follower():
    api, session = _api(make_response(200, {"followers": ["testuser2"]}))
    api.follow("testuser", "testuser2")
    kwargs = session.request.call_args.kwargs
    assert kwargs["url"] == f"{BASE}/api/users/testuser/follow"
    assert kwargs["json"] == {"follower": "testuser2"}


def test_search_music_returns_track_items():
    api, _ = _api(make_response(200, {"tracks": {"items": [{"name": "Song One"}]}}))
    tracks, error = api.search_music("Song")
    assert error is None
    assert tracks == [{"name": "Song One"}]


def test_profile_picture_is_sent_as_multipart():
    api, session = _api(make_response(200, {"profilePic": "http://x/api/media/1"}))
    data, _ = api.upload_profile_pic("alice", "me.png", b"png", "image/png")
    assert data == {"profilePic": "http://x/api/media/1"}
    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "PUT"
    assert kwargs["files"] == {"profilePic": ("me.png", b"png", "image/png")}


def test_request_json_rejects_invalid_json():
    session = MagicMock(spec=requests.Session)
    response = make_response(200)
    response._content = b"<html>"
    session.request.return_value = response
    data, error = request_json(session, "GET", "http://test/x")
    assert data is None
    assert error["message"] == "Invalid response from server"
