"""Tests for the ORM models and their serialisers."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

from memory_album.models import Album, AlbumCard, Card, Message


def test_card_to_dict_serialises_timestamps_as_utc(app, db_session):
    with app.app_context():
        card = Card(code="abc123", recipient="Sam", occasion="Birthday")
        db_session.add(card)
        db_session.commit()

        payload = card.to_dict()
        assert payload["code"] == "abc123"
        assert payload["custom_message"] is None
        assert payload["created_at"].endswith("+00:00")


def test_card_code_is_unique(app, db_session):
    with app.app_context():
        db_session.add(Card(code="dup001", recipient="A", occasion="B"))
        db_session.commit()
        db_session.add(Card(code="dup001", recipient="C", occasion="D"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


def test_card_code_is_case_sensitive(app, db_session):
    with app.app_context():
        db_session.add_all(
            [
                Card(code="abcdef", recipient="A", occasion="B"),
                Card(code="ABCDEF", recipient="C", occasion="D"),
            ]
        )
        db_session.commit()
        assert Card.query.count() == 2


def test_message_defaults_author_to_anon(app, db_session):
    with app.app_context():
        card = Card(code="msg001", recipient="Sam", occasion="Birthday")
        db_session.add(card)
        db_session.commit()

        message = Message(card_id=card.id, message="Hi")
        db_session.add(message)
        db_session.commit()

        assert message.author == "Anon"
        assert message.to_dict()["gif"] is None


def test_album_to_dict_hides_passcode_hash(app, db_session):
    with app.app_context():
        album = Album(code="ABC123", name="Family", passcode_hash="hash")
        db_session.add(album)
        db_session.commit()

        payload = album.to_dict()
        assert len(payload["id"]) == 36
        assert "passcode_hash" not in payload
        assert payload["code"] == "ABC123"


def test_album_card_to_dict_includes_card_fields(app, db_session):
    with app.app_context():
        card = Card(code="lnk001", recipient="Sam", occasion="Birthday")
        album = Album(code="LNK001", name="Family", passcode_hash="hash")
        db_session.add_all([card, album])
        db_session.commit()

        link = AlbumCard(
            album_id=album.id,
            card_id=card.id,
            added_at=datetime(2024, 5, 1, tzinfo=UTC),
            year=2024,
        )
        db_session.add(link)
        db_session.commit()

        payload = link.to_dict()
        assert payload["cardId"] == card.id
        assert payload["code"] == "lnk001"
        assert payload["recipient"] == "Sam"
        assert payload["added_at"] == "2024-05-01T00:00:00+00:00"
        assert payload["year"] == 2024


def test_card_loads_without_eager_relationships():
    assert set(inspect(Card).relationships.keys()) == set()
    assert set(inspect(AlbumCard).relationships.keys()) == {"card"}
