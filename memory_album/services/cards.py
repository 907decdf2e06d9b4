"""Service helpers for cards and the messages left on them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import Card, Message
from . import codes

LOGGER = logging.getLogger(__name__)

DEFAULT_RECIPIENT = "Someone special"
DEFAULT_OCCASION = "Other"
DEFAULT_AUTHOR = "Anon"


@dataclass(slots=True)
class UsageStats:
    """Aggregate counters shown on the landing page."""

    cards: int
    messages: int

    def to_dict(self) -> dict[str, int]:
        return {"cards": self.cards, "messages": self.messages}


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def create_card(
    session: Session,
    *,
    recipient: Optional[str] = None,
    occasion: Optional[str] = None,
    custom_message: Optional[str] = None,
    code: Optional[str] = None,
    code_length: int = codes.DEFAULT_CODE_LENGTH,
    max_attempts: int = codes.DEFAULT_MAX_ATTEMPTS,
    logger: Optional[logging.Logger] = None,
) -> Card:
    """Persist a new card, preferring ``code`` when it is still free."""
    log = logger or LOGGER
    recipient_value = _clean(recipient) or DEFAULT_RECIPIENT
    occasion_value = _clean(occasion) or DEFAULT_OCCASION
    message_value = _clean(custom_message) or None

    def build(resolved: str) -> Card:
        return Card(
            code=resolved,
            recipient=recipient_value,
            occasion=occasion_value,
            custom_message=message_value,
        )

    card = codes.create_with_unique_code(
        session,
        Card,
        build,
        requested=_clean(code) or None,
        attempts=max_attempts,
        generator=lambda: codes.generate_code(code_length),
        logger=log,
    )
    log.info("Created card %s with code %s", card.id, card.code)
    return card


def find_card(session: Session, code: Optional[str]) -> Card | None:
    """Look a card up by its exact, case-sensitive code."""
    lookup = _clean(code)
    if not lookup:
        return None
    return session.query(Card).filter(Card.code == lookup).one_or_none()


def card_messages(session: Session, card: Card) -> list[Message]:
    """Return the messages on ``card``, newest first."""
    return (
        session.query(Message)
        .filter(Message.card_id == card.id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )


def add_message(
    session: Session,
    card: Card,
    *,
    message: str,
    author: Optional[str] = None,
    gif: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> Message:
    """Append a message to ``card``. Messages are never edited afterwards."""
    log = logger or LOGGER
    body = _clean(message)
    if not body:
        raise ValueError("message text is required")

    entry = Message(
        card_id=card.id,
        author=_clean(author) or DEFAULT_AUTHOR,
        message=body,
        gif=_clean(gif) or None,
    )
    session.add(entry)
    session.commit()
    log.info("Added message %s to card %s", entry.id, card.code)
    return entry


def usage_stats(session: Session) -> UsageStats:
    return UsageStats(
        cards=session.query(func.count(Card.id)).scalar() or 0,
        messages=session.query(func.count(Message.id)).scalar() or 0,
    )
