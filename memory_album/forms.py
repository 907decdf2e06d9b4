"""WTForms definitions used as JSON request schemas."""

from __future__ import annotations

from typing import Any, Mapping

from flask import current_app
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import IntegerField, StringField, TextAreaField
from wtforms.validators import (
    URL,
    DataRequired,
    Length,
    NumberRange,
    Optional,
    Regexp,
    StopValidation,
    ValidationError,
)


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def json_formdata(payload: Mapping[str, Any]) -> MultiDict:
    """Flatten a decoded JSON object into form data.

    Only scalar strings and numbers survive; anything else is dropped so a
    required field sent with the wrong type fails validation.
    """
    data: MultiDict = MultiDict()
    for key, value in payload.items():
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, (str, int, float)):
            data.add(key, str(value))
    return data


class WholeNumberField(IntegerField):
    """Integer field that reports a parse failure without running range checks."""

    def pre_validate(self, form: FlaskForm) -> None:
        if self.process_errors and self.raw_data and str(self.raw_data[0]).strip():
            raise StopValidation()


class ApiForm(FlaskForm):
    """Base form for JSON endpoints; requests carry no session cookie."""

    class Meta:
        csrf = False

    def first_error(self) -> str:
        for errors in self.errors.values():
            if errors:
                return str(errors[0])
        return "Invalid request"


class CreateCardForm(ApiForm):
    recipient = StringField(
        "Recipient",
        filters=[_strip],
        validators=[Optional(), Length(max=120)],
    )
    occasion = StringField(
        "Occasion",
        filters=[_strip],
        validators=[Optional(), Length(max=120)],
    )
    custom_message = TextAreaField(
        "Custom message",
        filters=[_strip],
        validators=[Optional(), Length(max=500)],
    )
    code = StringField(
        "Code",
        filters=[_strip],
        validators=[
            Optional(),
            Length(max=32),
            Regexp(
                r"^[A-Za-z0-9_-]+$",
                message="Code may only contain letters, digits, '-' and '_'",
            ),
        ],
    )


class SendMessageForm(ApiForm):
    author = StringField(
        "Author",
        filters=[_strip],
        validators=[Optional(), Length(max=80)],
    )
    message = TextAreaField(
        "Message",
        filters=[_strip],
        validators=[
            DataRequired(message="Message text is required"),
            Length(max=5000),
        ],
    )
    gif = StringField(
        "GIF",
        filters=[_strip],
        validators=[
            Optional(),
            Length(max=2048),
            URL(message="GIF must be a valid URL"),
        ],
    )


class CreateAlbumForm(ApiForm):
    name = StringField(
        "Album name",
        filters=[_strip],
        validators=[DataRequired(message="Name is required"), Length(max=120)],
    )
    passcode = StringField(
        "Passcode",
        filters=[_strip],
        validators=[DataRequired(message="Passcode is required"), Length(max=128)],
    )
    code = StringField(
        "Code",
        filters=[_strip],
        validators=[
            Optional(),
            Length(max=32),
            Regexp(r"^[A-Za-z0-9]+$", message="Code may only contain letters and digits"),
        ],
    )

    def validate_passcode(self, field: StringField) -> None:
        minimum = int(current_app.config.get("PASSCODE_MIN_LENGTH", 4))
        if len(field.data or "") < minimum:
            raise ValidationError(f"Passcode must be at least {minimum} chars")


class AddCardToAlbumForm(ApiForm):
    albumId = StringField(
        "Album",
        filters=[_strip],
        validators=[DataRequired(message="albumId, passcode, and cardCode are required")],
    )
    passcode = StringField(
        "Passcode",
        filters=[_strip],
        validators=[DataRequired(message="albumId, passcode, and cardCode are required")],
    )
    cardCode = StringField(
        "Card code",
        filters=[_strip],
        validators=[DataRequired(message="albumId, passcode, and cardCode are required")],
    )
    year = WholeNumberField(
        "Year",
        validators=[Optional(), NumberRange(min=1900, max=2200)],
    )


class ViewAlbumForm(ApiForm):
    albumCode = StringField(
        "Album code",
        filters=[_strip],
        validators=[DataRequired(message="albumCode and passcode are required")],
    )
    passcode = StringField(
        "Passcode",
        filters=[_strip],
        validators=[DataRequired(message="albumCode and passcode are required")],
    )


class AlbumPasscodeForm(ApiForm):
    passcode = StringField(
        "Passcode",
        filters=[_strip],
        validators=[DataRequired(message="Passcode required")],
    )
