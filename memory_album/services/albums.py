"""Service helpers for passcode-protected albums."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session, joinedload

from ..models import Album, AlbumCard, Card
from . import codes, passcodes

LOGGER = logging.getLogger(__name__)


class AlbumAccessError(Exception):
    """Raised when an album cannot be handed to the caller."""

    status_code = 403
    message = "Album access denied"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class AlbumNotFound(AlbumAccessError):
    status_code = 404
    message = "Album not found"


class InvalidPasscode(AlbumAccessError):
    status_code = 401
    message = "Invalid passcode"


def create_album(
    session: Session,
    *,
    name: str,
    passcode: str,
    code: Optional[str] = None,
    hash_method: Optional[str] = None,
    code_length: int = codes.DEFAULT_CODE_LENGTH,
    max_attempts: int = codes.DEFAULT_MAX_ATTEMPTS,
    logger: Optional[logging.Logger] = None,
) -> Album:
    """Persist a new album. Only a salted hash of ``passcode`` is stored."""
    log = logger or LOGGER
    album_name = (name or "").strip()
    if not album_name:
        raise ValueError("album name is required")
    passcode_hash = passcodes.hash_passcode(passcode.strip(), method=hash_method)

    def build(resolved: str) -> Album:
        return Album(name=album_name, passcode_hash=passcode_hash, code=resolved)

    requested = (code or "").strip().upper() or None
    album = codes.create_with_unique_code(
        session,
        Album,
        build,
        requested=requested,
        attempts=max_attempts,
        generator=lambda: codes.generate_album_code(code_length),
        logger=log,
    )
    log.info("Created album %s with code %s", album.id, album.code)
    return album


def find_album_by_code(session: Session, code: Optional[str]) -> Album | None:
    lookup = (code or "").strip().upper()
    if not lookup:
        return None
    return session.query(Album).filter(Album.code == lookup).one_or_none()


def find_album(session: Session, id_or_code: Optional[str]) -> Album | None:
    """Resolve an album by its opaque id, falling back to its share code.

    The id interpretation always wins when both would match.
    """
    lookup = (id_or_code or "").strip()
    if not lookup:
        return None
    album = session.get(Album, lookup)
    if album is not None:
        return album
    return find_album_by_code(session, lookup)


def authorize_album(
    session: Session,
    id_or_code: Optional[str],
    passcode: Optional[str],
    *,
    finder: Callable[[Session, Optional[str]], Album | None] = find_album,
) -> Album:
    """Return the album when ``passcode`` unlocks it.

    Existence is checked before the passcode.
    """
    album = finder(session, id_or_code)
    if album is None:
        raise AlbumNotFound()
    if not passcodes.verify_passcode((passcode or "").strip(), album.passcode_hash):
        raise InvalidPasscode()
    return album


def _dialect_insert(session: Session) -> Callable[..., Any] | None:
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert

        return insert
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert

        return insert
    return None


def add_card(
    session: Session,
    album: Album,
    card: Card,
    *,
    year: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> AlbumCard:
    """Link ``card`` to ``album``, updating the existing link if present.

    Re-adding a card keeps its original ``added_at`` and only replaces the
    year label when one is supplied.
    """
    log = logger or LOGGER
    values = {
        "album_id": album.id,
        "card_id": card.id,
        "added_at": datetime.now(UTC),
        "year": year,
    }
    key_columns = [AlbumCard.album_id, AlbumCard.card_id]

    insert = _dialect_insert(session)
    if insert is not None:
        statement = insert(AlbumCard).values(**values)
        if year is None:
            statement = statement.on_conflict_do_nothing(index_elements=key_columns)
        else:
            statement = statement.on_conflict_do_update(
                index_elements=key_columns,
                set_={"year": statement.excluded.year},
            )
        session.execute(statement)
    else:
        link = session.get(AlbumCard, (album.id, card.id))
        if link is None:
            session.add(AlbumCard(**values))
        elif year is not None:
            link.year = year
    session.commit()

    link = session.get(AlbumCard, (album.id, card.id), populate_existing=True)
    log.info("Linked card %s to album %s", card.code, album.id)
    return link


def album_cards(session: Session, album: Album) -> list[AlbumCard]:
    """Return the album's card links, most recently added first."""
    return (
        session.query(AlbumCard)
        .options(joinedload(AlbumCard.card))
        .filter(AlbumCard.album_id == album.id)
        .order_by(AlbumCard.added_at.desc())
        .all()
    )
