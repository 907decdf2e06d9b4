"""Database models for the memory album service."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from .extensions import db


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    else:
        value = value.astimezone(UTC)
    return value.isoformat()


class Card(db.Model):
    __tablename__ = "cards"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(32), unique=True, nullable=False, index=True)
    recipient = db.Column(db.String(120), nullable=False)
    occasion = db.Column(db.String(120), nullable=False)
    custom_message = db.Column(db.String(500))
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "recipient": self.recipient,
            "occasion": self.occasion,
            "custom_message": self.custom_message,
            "created_at": _isoformat(self.created_at),
        }


class Message(db.Model):
    __tablename__ = "messages"

    id = db.Column(db.Integer, primary_key=True)
    card_id = db.Column(
        db.Integer,
        db.ForeignKey("cards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author = db.Column(db.String(80), nullable=False, default="Anon")
    message = db.Column(db.Text, nullable=False)
    gif = db.Column(db.String(2048))
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "author": self.author,
            "message": self.message,
            "gif": self.gif,
            "created_at": _isoformat(self.created_at),
        }


class Album(db.Model):
    __tablename__ = "albums"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid4()))
    code = db.Column(db.String(32), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    passcode_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "created_at": _isoformat(self.created_at),
        }


class AlbumCard(db.Model):
    __tablename__ = "album_cards"

    album_id = db.Column(
        db.String(36),
        db.ForeignKey("albums.id", ondelete="CASCADE"),
        primary_key=True,
    )
    card_id = db.Column(
        db.Integer,
        db.ForeignKey("cards.id", ondelete="CASCADE"),
        primary_key=True,
    )
    added_at = db.Column(
        db.DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    year = db.Column(db.Integer)

    card = db.relationship("Card", lazy="joined")

    def to_dict(self) -> dict[str, Any]:
        return {
            "cardId": self.card_id,
            "code": self.card.code,
            "recipient": self.card.recipient,
            "occasion": self.card.occasion,
            "created_at": _isoformat(self.card.created_at),
            "added_at": _isoformat(self.added_at),
            "year": self.year,
        }
