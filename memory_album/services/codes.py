"""Short shareable codes for cards and albums."""

from __future__ import annotations

import logging
import secrets
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

LOGGER = logging.getLogger(__name__)

DEFAULT_CODE_LENGTH = 6
DEFAULT_MAX_ATTEMPTS = 5

ModelT = TypeVar("ModelT")


def generate_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """Return a random lower-case hexadecimal token of ``length`` characters."""
    return secrets.token_hex((length + 1) // 2)[:length]


def generate_album_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    return generate_code(length).upper()


def resolve_unique_code(
    is_taken: Callable[[str], bool],
    *,
    requested: Optional[str] = None,
    attempts: int = DEFAULT_MAX_ATTEMPTS,
    generator: Callable[[], str] = generate_code,
) -> str:
    """Pick a code that ``is_taken`` reports as free.

    The requested code is tried first. At most ``attempts`` lookups are made;
    when every candidate collides the last one is returned anyway and the
    store's unique constraint has the final word.
    """
    code = requested or generator()
    for _ in range(max(attempts, 1)):
        if not is_taken(code):
            return code
        code = generator()
    LOGGER.warning("Exhausted %s code attempts; using last candidate", attempts)
    return code


def code_taken(session: Session, model: type, code: str) -> bool:
    return session.query(model.code).filter(model.code == code).first() is not None


def create_with_unique_code(
    session: Session,
    model: type[ModelT],
    build: Callable[[str], ModelT],
    *,
    requested: Optional[str] = None,
    attempts: int = DEFAULT_MAX_ATTEMPTS,
    generator: Callable[[], str] = generate_code,
    logger: Optional[logging.Logger] = None,
) -> ModelT:
    """Insert the row returned by ``build(code)`` under a fresh unique code.

    A unique violation at commit time (a concurrent insert won the race after
    our lookup) is retried once with a newly generated code; a second
    violation propagates to the caller.
    """
    log = logger or LOGGER

    def is_taken(candidate: str) -> bool:
        return code_taken(session, model, candidate)

    def insert(candidate_request: Optional[str]) -> ModelT:
        code = resolve_unique_code(
            is_taken,
            requested=candidate_request,
            attempts=attempts,
            generator=generator,
        )
        instance = build(code)
        session.add(instance)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            log.warning(
                "Code %s collided on insert into %s",
                code,
                getattr(model, "__tablename__", model),
            )
            raise
        return instance

    try:
        return insert(requested)
    except IntegrityError:
        log.info("Retrying insert with a newly generated code")
    return insert(None)
