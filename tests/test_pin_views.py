import pytest

from geojot_ui.collaborators import CollaboratorInvite
from geojot_ui.pin_detail import PinDetailView
from geojot_ui.pin_form import MediaAttachment, PinForm, song_from_track

TRACK = {
    "id": "track1",
    "name": "Song One",
    "artists": [{"name": "Artist1"}, {"name": "Artist2"}],
    "album": {"images": [{"url": "http://example.com/cover.jpg"}]},
    "preview_url": "http://example.com/preview.mp3",
}


def _image(i=0):
    return MediaAttachment(filename=f"image{i}.png", content_type="image/png", content=b"png")


def _pin(**extra):
    pin = {
        "_id": "1",
        "username": "testuser",
        "name": "Sample Pin",
        "notes": "Sample notes",
        "position": {"lat": 1.0, "lng": 2.0},
        "mediaFiles": [],
        "songDetails": {"previewUrl": "", "albumArtUrl": "", "title": "", "artists": ""},
        "likes": [],
    }
    pin.update(extra)
    return pin


# ----------------------------------------------------------------------
# PinDetailView
# ----------------------------------------------------------------------
def test_toggle_like_updates_count(state, api):
    api.toggle_like.return_value = (["testuser"], None)
    view = PinDetailView(state, _pin())
    assert view.like_count == 0
    assert view.toggle_like()
    assert view.like_count == 1
    assert view.liked


def test_toggle_like_failure_keeps_count(state, api):
    api.toggle_like.return_value = (None, {"status_code": None, "message": "Failed to fetch", "body": None})
    view = PinDetailView(state, _pin(likes=["someone"]))
    assert not view.toggle_like()
    assert view.like_count == 1
    assert view.error == "Failed to fetch"


def test_song_presence(state):
    assert not PinDetailView(state, _pin()).has_song
    song = {"previewUrl": "http://sampleaudio.com/audio.mp3", "title": "Sample Song"}
    assert PinDetailView(state, _pin(songDetails=song)).has_song


def test_non_owner_cannot_edit_or_invite(state):
    view = PinDetailView(state, _pin(username="ownerUser"))
    assert not view.can_edit and not view.can_invite
    assert view.edit() is None
    assert view.invite() is None
    assert view.delete() is False


def test_owner_edit_and_invite(state):
    view = PinDetailView(state, _pin(mediaFiles=[{"url": "http://example.com/image1.jpg", "title": "Image 1"}]))
    form = view.edit()
    assert isinstance(form, PinForm)
    assert form.name == "Sample Pin"
    assert form.media[0].uploaded
    assert isinstance(view.invite(), CollaboratorInvite)


def test_owner_delete_uses_handler(state):
    deleted = []
    view = PinDetailView(state, _pin(), on_delete=lambda pin_id: deleted.append(pin_id) or True)
    assert view.delete()
    assert deleted == ["1"]


# ----------------------------------------------------------------------
# PinForm
# ----------------------------------------------------------------------
def _new_form(state, **kwargs):
    return PinForm(state, position={"lat": 1.0, "lng": 2.0}, **kwargs)


def test_form_needs_a_position(state):
    with pytest.raises(ValueError):
        PinForm(state)


def test_name_length_validation(state, api):
    form = _new_form(state)
    form.name = "Yo"
    assert form.submit() is None
    assert form.error == "Name must be between 3 and 21 characters"
    api.create_pin.assert_not_called()


def test_non_image_is_rejected(state):
    form = _new_form(state)
    added = form.add_media(
        [_image(), MediaAttachment(filename="test-file.txt", content_type="text/plain", content=b"x")]
    )
    assert added == 1
    assert form.error == "Only image files are allowed"
    assert len(form.media) == 1


def test_at_most_nine_images(state):
    form = _new_form(state)
    assert form.add_media([_image(i) for i in range(9)]) == 9
    assert form.error is None
    assert form.add_media([_image(10)]) == 0
    assert form.error == "Maximum images reached"
    assert len(form.media) == 9


def test_remove_media(state):
    form = _new_form(state)
    form.add_media([_image(0), _image(1)])
    form.remove_media(0)
    assert [m.filename for m in form.media] == ["image1.png"]


def test_submit_uploads_images_then_creates_pin(state, api):
    api.upload_media.return_value = ({"url": "http://x/api/media/7", "title": "image0.png"}, None)
    api.create_pin.return_value = ({"_id": "9", "name": "Valid Name"}, None)
    saved = []
    form = _new_form(state, on_saved=saved.append)
    form.name = "Valid Name"
    form.notes = "Some valid notes"
    form.add_media([_image()])
    form.select_song(TRACK)

    assert form.submit() == {"_id": "9", "name": "Valid Name"}

    api.upload_media.assert_called_once_with("image0.png", b"png", "image/png")
    payload = api.create_pin.call_args.args[0]
    assert payload["mediaFiles"] == [{"url": "http://x/api/media/7", "title": "image0.png"}]
    assert payload["songDetails"]["title"] == "Song One"
    assert payload["notes"] == "Some valid notes"
    assert saved == [{"_id": "9", "name": "Valid Name"}]
    assert form.pin_id == "9"
    api.recent_pins.assert_called_once_with("testuser")


def test_submit_existing_pin_updates(state, api):
    api.update_pin.return_value = (_pin(name="Renamed"), None)
    form = PinForm(state, pin=_pin())
    form.name = "Renamed"
    assert form.submit()["name"] == "Renamed"
    assert api.update_pin.call_args.args[0] == "1"
    api.upload_media.assert_not_called()


def test_submit_failure_message(state, api):
    api.create_pin.return_value = (
        None, {"status_code": 500, "message": "Internal Server Error", "body": None}
    )
    form = _new_form(state)
    form.name = "Valid Name"
    assert form.submit() is None
    assert form.error == "Failed to submit form: Internal Server Error"


def test_music_search_results(state, api):
    api.search_music.return_value = ([TRACK], None)
    form = _new_form(state)
    form.search_music("Song").result(5)
    assert [t["name"] for t in form.music_results] == ["Song One"]
    api.search_music.assert_called_once_with("Song")


def test_empty_music_query_clears_results(state, api):
    form = _new_form(state)
    form.music_results = [TRACK]
    assert form.search_music("  ") is None
    assert form.music_results == []
    api.search_music.assert_not_called()


def test_song_from_track():
    assert song_from_track(TRACK) == {
        "title": "Song One",
        "artists": "Artist1, Artist2",
        "albumArtUrl": "http://example.com/cover.jpg",
        "previewUrl": "http://example.com/preview.mp3",
    }


def test_form_delete(state, api):
    api.delete_pin.return_value = (True, None)
    removed = []
    form = PinForm(state, pin=_pin(), on_deleted=removed.append)
    assert form.delete()
    assert removed == ["1"]
    assert not _new_form(state).delete()


# ----------------------------------------------------------------------
# CollaboratorInvite
# ----------------------------------------------------------------------
def test_invite_success_closes(state, api):
    api.invite_collaborator.return_value = ({"message": "Success"}, None)
    closed = []
    dialog = CollaboratorInvite(state, "123", on_close=lambda: closed.append(True))
    assert dialog.invite("testuser")
    assert dialog.message == "Collaborator invited successfully"
    assert closed == [True]
    api.invite_collaborator.assert_called_once_with("123", "testuser")


def test_invite_failure_stays_open(state, api):
    api.invite_collaborator.return_value = (None, {"status_code": 400, "message": "Failed", "body": None})
    closed = []
    dialog = CollaboratorInvite(state, "123", on_close=lambda: closed.append(True))
    assert not dialog.invite("testuser")
    assert dialog.message == "Failed to invite collaborator"
    assert closed == []


def test_invite_cancel(state):
    closed = []
    CollaboratorInvite(state, "123", on_close=lambda: closed.append(True)).cancel()
    assert closed == [True]
