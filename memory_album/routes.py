"""JSON API routes for cards, messages and albums."""

from __future__ import annotations

from typing import Any, Mapping

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from .extensions import db
from .forms import (
    AddCardToAlbumForm,
    AlbumPasscodeForm,
    ApiForm,
    CreateAlbumForm,
    CreateCardForm,
    SendMessageForm,
    ViewAlbumForm,
    json_formdata,
)
from .services import albums, cards
from .services.albums import AlbumAccessError

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _error(message: str, status: int, **extra: Any):
    return jsonify({"error": message, **extra}), status


def _json_object() -> Mapping[str, Any] | None:
    payload = request.get_json(silent=True, force=True)
    if isinstance(payload, dict):
        return payload
    return None


def _invalid(form: ApiForm):
    return _error(form.first_error(), 400, errors=form.errors)


def _code_settings() -> dict[str, int]:
    config = current_app.config
    return {
        "code_length": int(config.get("CODE_LENGTH", 6)),
        "max_attempts": int(config.get("CODE_MAX_ATTEMPTS", 5)),
    }


def _album_payload(album, links) -> dict[str, Any]:
    return {
        "album": album.to_dict(),
        "cards": [link.to_dict() for link in links],
    }


@api_bp.errorhandler(AlbumAccessError)
def _album_access_denied(exc: AlbumAccessError):
    return _error(exc.message, exc.status_code)


# Routing errors (unknown URL, wrong method) never reach blueprint handlers.
@api_bp.app_errorhandler(HTTPException)
@api_bp.errorhandler(HTTPException)
def _http_error(exc: HTTPException):
    return _error(exc.description or exc.name, exc.code or 500)


@api_bp.errorhandler(Exception)
def _unexpected_error(exc: Exception):
    db.session.rollback()
    current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
    return _error("Server error", 500)


@api_bp.route("/cards/new", methods=["POST"])
def create_card():
    payload = _json_object()
    if payload is None:
        return _error("Invalid JSON", 400)

    form = CreateCardForm(formdata=json_formdata(payload))
    if not form.validate():
        return _invalid(form)

    card = cards.create_card(
        db.session,
        recipient=form.recipient.data,
        occasion=form.occasion.data,
        custom_message=form.custom_message.data,
        code=form.code.data,
        logger=current_app.logger,
        **_code_settings(),
    )
    return jsonify({"card": card.to_dict()}), 201


@api_bp.route("/cards/<code>/exists", methods=["GET"])
def card_exists(code: str):
    card = cards.find_card(db.session, code)
    if card is None:
        return jsonify({"exists": False}), 404
    return jsonify({"exists": True, "code": card.code})


@api_bp.route("/cards/<code>/messages", methods=["GET"])
def card_messages(code: str):
    card = cards.find_card(db.session, code)
    if card is None:
        return _error("Card not found", 404)

    messages = cards.card_messages(db.session, card)
    return jsonify(
        {
            "card": card.to_dict(),
            "messages": [message.to_dict() for message in messages],
        }
    )


@api_bp.route("/cards/<code>/messages/send", methods=["POST"])
def send_message(code: str):
    payload = _json_object()
    if payload is None:
        return _error("Invalid JSON", 400)

    form = SendMessageForm(formdata=json_formdata(payload))
    if not form.validate():
        return _invalid(form)

    card = cards.find_card(db.session, code)
    if card is None:
        return _error("Card not found", 404)

    message = cards.add_message(
        db.session,
        card,
        message=form.message.data,
        author=form.author.data,
        gif=form.gif.data,
        logger=current_app.logger,
    )
    return jsonify({"message": message.to_dict()}), 201


@api_bp.route("/albums/create", methods=["POST"])
def create_album():
    payload = _json_object()
    if payload is None:
        return _error("Invalid JSON", 400)

    form = CreateAlbumForm(formdata=json_formdata(payload))
    if not form.validate():
        return _invalid(form)

    album = albums.create_album(
        db.session,
        name=form.name.data,
        passcode=form.passcode.data,
        code=form.code.data,
        hash_method=current_app.config.get("PASSCODE_HASH_METHOD"),
        logger=current_app.logger,
        **_code_settings(),
    )
    return jsonify({"album": album.to_dict()}), 201


@api_bp.route("/albums/add-card", methods=["POST"])
def add_card_to_album():
    payload = _json_object()
    if payload is None:
        return _error("Invalid JSON", 400)

    form = AddCardToAlbumForm(formdata=json_formdata(payload))
    if not form.validate():
        return _invalid(form)

    album = albums.authorize_album(db.session, form.albumId.data, form.passcode.data)

    card = cards.find_card(db.session, form.cardCode.data)
    if card is None:
        return _error("Card not found", 404)

    link = albums.add_card(
        db.session,
        album,
        card,
        year=form.year.data,
        logger=current_app.logger,
    )
    return (
        jsonify(
            {
                "added": {
                    "albumId": album.id,
                    "cardCode": card.code,
                    "year": link.year,
                }
            }
        ),
        201,
    )


@api_bp.route("/album", methods=["POST"])
def view_album():
    payload = _json_object()
    if payload is None:
        return _error("Invalid JSON", 400)

    form = ViewAlbumForm(formdata=json_formdata(payload))
    if not form.validate():
        return _invalid(form)

    album = albums.authorize_album(
        db.session,
        form.albumCode.data,
        form.passcode.data,
        finder=albums.find_album_by_code,
    )
    return jsonify(_album_payload(album, albums.album_cards(db.session, album)))


@api_bp.route("/albums/<id_or_code>/cards", methods=["GET", "POST"])
def album_cards(id_or_code: str):
    if request.method == "POST":
        formdata = json_formdata(_json_object() or {})
    else:
        formdata = request.args

    form = AlbumPasscodeForm(formdata=formdata)
    if not form.validate():
        return _invalid(form)

    album = albums.authorize_album(db.session, id_or_code, form.passcode.data)
    return jsonify(_album_payload(album, albums.album_cards(db.session, album)))


@api_bp.route("/stats", methods=["GET"])
def stats():
    try:
        usage = cards.usage_stats(db.session)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to load stats")
        return _error("Failed to load stats", 500)
    return jsonify(usage.to_dict())
