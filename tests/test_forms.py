"""Tests for the request schemas."""

from __future__ import annotations

from memory_album.forms import (
    AddCardToAlbumForm,
    AlbumPasscodeForm,
    CreateAlbumForm,
    CreateCardForm,
    SendMessageForm,
    json_formdata,
)


def test_json_formdata_keeps_scalars_only():
    data = json_formdata(
        {"name": "Family", "year": 2024, "flag": True, "nested": {"a": 1}, "none": None}
    )
    assert data.get("name") == "Family"
    assert data.get("year") == "2024"
    assert "flag" not in data
    assert "nested" not in data
    assert "none" not in data


def test_create_card_form_accepts_empty_payload(app):
    with app.test_request_context("/api/cards/new", method="POST"):
        form = CreateCardForm(formdata=json_formdata({}))
        assert form.validate() is True
        assert not form.recipient.data


def test_create_card_form_rejects_bad_code(app):
    with app.test_request_context("/api/cards/new", method="POST"):
        form = CreateCardForm(formdata=json_formdata({"code": "no spaces!"}))
        assert form.validate() is False
        assert "Code may only contain" in form.code.errors[0]


def test_send_message_form_strips_and_requires_message(app):
    with app.test_request_context("/api/cards/x/messages/send", method="POST"):
        form = SendMessageForm(formdata=json_formdata({"message": "   "}))
        assert form.validate() is False
        assert form.first_error() == "Message text is required"


def test_send_message_form_rejects_oversized_message(app):
    with app.test_request_context("/api/cards/x/messages/send", method="POST"):
        form = SendMessageForm(formdata=json_formdata({"message": "x" * 5001}))
        assert form.validate() is False
        assert form.message.errors


def test_send_message_form_validates_gif_url(app):
    with app.test_request_context("/api/cards/x/messages/send", method="POST"):
        bad = SendMessageForm(formdata=json_formdata({"message": "hi", "gif": "not a url"}))
        assert bad.validate() is False
        assert bad.gif.errors == ["GIF must be a valid URL"]

        good = SendMessageForm(
            formdata=json_formdata(
                {"message": "hi", "gif": "https://media.giphy.com/media/abc/giphy.gif"}
            )
        )
        assert good.validate() is True


def test_create_album_form_enforces_passcode_length(app):
    with app.test_request_context("/api/albums/create", method="POST"):
        form = CreateAlbumForm(formdata=json_formdata({"name": "Family", "passcode": "abc"}))
        assert form.validate() is False
        assert form.passcode.errors == ["Passcode must be at least 4 chars"]


def test_create_album_form_requires_name(app):
    with app.test_request_context("/api/albums/create", method="POST"):
        form = CreateAlbumForm(formdata=json_formdata({"name": " ", "passcode": "abcd"}))
        assert form.validate() is False
        assert form.first_error() == "Name is required"


def test_add_card_form_parses_optional_year(app):
    with app.test_request_context("/api/albums/add-card", method="POST"):
        form = AddCardToAlbumForm(
            formdata=json_formdata(
                {"albumId": "a", "passcode": "abcd", "cardCode": "c", "year": 2023}
            )
        )
        assert form.validate() is True
        assert form.year.data == 2023

        missing = AddCardToAlbumForm(formdata=json_formdata({"albumId": "a"}))
        assert missing.validate() is False
        assert missing.first_error() == "albumId, passcode, and cardCode are required"


def test_album_passcode_form_requires_passcode(app):
    with app.test_request_context("/api/albums/x/cards"):
        form = AlbumPasscodeForm(formdata=json_formdata({}))
        assert form.validate() is False
        assert form.first_error() == "Passcode required"


def test_json_formdata_accepts_integral_floats():
    data = json_formdata({"year": 2024.0, "ratio": 1.5})
    assert data.get("year") == "2024"
    assert data.get("ratio") == "1.5"


def test_add_card_form_reports_single_year_error(app):
    with app.test_request_context("/api/albums/add-card", method="POST"):
        form = AddCardToAlbumForm(
            formdata=json_formdata(
                {"albumId": "a", "passcode": "abcd", "cardCode": "c", "year": 2024.5}
            )
        )
        assert form.validate() is False
        assert len(form.year.errors) == 1

        blank = AddCardToAlbumForm(
            formdata=json_formdata(
                {"albumId": "a", "passcode": "abcd", "cardCode": "c", "year": ""}
            )
        )
        assert blank.validate() is True
        assert blank.year.data is None
