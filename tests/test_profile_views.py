import logging

from geojot_ui.pin_form import MediaAttachment
from geojot_ui.profile import DEFAULT_PROFILE_PIC, ProfilePictureUpload, UserProfileView


def _profile(state, followers=()):
    state.users.login("testuser2")
    return UserProfileView(state, {"username": "testuser", "followers": list(followers)})


def test_follow_increments_followers(state, api):
    api.follow.return_value = ({}, None)
    view = _profile(state)
    assert view.follow_label == "Follow"
    assert view.toggle_follow()
    assert view.followers_text == "1 followers"
    assert view.follow_label == "Unfollow"
    api.follow.assert_called_once_with("testuser", "testuser2")


def test_unfollow_decrements_followers(state, api):
    api.unfollow.return_value = ({}, None)
    view = _profile(state, followers=["testuser2"])
    assert view.followers_text == "1 followers"
    assert view.follow_label == "Unfollow"
    assert view.toggle_follow()
    assert view.followers_text == "0 followers"
    assert view.follow_label == "Follow"
    api.unfollow.assert_called_once_with("testuser", "testuser2")


def test_failed_follow_is_rolled_back(state, api):
    api.follow.return_value = (None, {"status_code": 500, "message": "boom", "body": None})
    view = _profile(state)
    assert not view.toggle_follow()
    assert view.followers_text == "0 followers"
    assert view.error == "Failed to update follow status"


def test_cannot_follow_own_profile(state, api):
    view = UserProfileView(state, {"username": "testuser", "followers": []})
    assert not view.can_follow
    assert not view.toggle_follow()
    api.follow.assert_not_called()


def test_default_profile_picture(state, api):
    api.search_users.return_value = ([{"username": "testuser", "profilePic": None}], None)
    view = _profile(state)
    assert view.load_profile_pic() == DEFAULT_PROFILE_PIC == "default-profile-pic.jpg"


def test_loaded_profile_picture(state, api):
    api.search_users.return_value = (
        [{"username": "testuser1", "profilePic": "x.jpg"}, {"username": "testuser", "profilePic": "new-pic.jpg"}],
        None,
    )
    assert _profile(state).load_profile_pic() == "new-pic.jpg"


def test_close(state):
    closed = []
    view = UserProfileView(state, {"username": "testuser"}, on_close=lambda: closed.append(1))
    view.close()
    assert closed == [1]


def test_upload_requires_a_file(state, api):
    dialog = ProfilePictureUpload(state)
    assert not dialog.submit()
    assert dialog.error == "Please select a file before submitting."
    api.upload_profile_pic.assert_not_called()


def test_upload_success(state, api):
    api.upload_profile_pic.return_value = ({"profilePic": "http://x/api/media/3"}, None)
    updated, closed = [], []
    dialog = ProfilePictureUpload(
        state, current_pic="old.jpg", on_update=updated.append, on_close=lambda: closed.append(1)
    )
    dialog.select(MediaAttachment(filename="me.png", content_type="image/png", content=b"png"))
    assert dialog.submit()
    api.upload_profile_pic.assert_called_once_with("testuser", "me.png", b"png", "image/png")
    assert updated == ["http://x/api/media/3"]
    assert closed == [1]
    assert dialog.current_pic == "http://x/api/media/3"


def test_upload_failure(state, api, caplog):
    api.upload_profile_pic.return_value = (None, {"status_code": None, "message": "Network error", "body": None})
    dialog = ProfilePictureUpload(state)
    dialog.select(MediaAttachment(filename="me.png", content_type="image/png", content=b"png"))
    with caplog.at_level(logging.ERROR):
        assert not dialog.submit()
    assert dialog.error == "Error uploading profile picture."
    assert "Network error" in caplog.text
