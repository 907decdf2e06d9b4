"""Album passcode hashing and verification."""

from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

LOGGER = logging.getLogger(__name__)

DEFAULT_HASH_METHOD = "scrypt"


def hash_passcode(passcode: str, *, method: Optional[str] = None) -> str:
    """Return a salted one-way hash suitable for ``Album.passcode_hash``."""
    if not passcode:
        raise ValueError("passcode must not be empty")
    return generate_password_hash(passcode, method=method or DEFAULT_HASH_METHOD)


def verify_passcode(
    candidate: Optional[str],
    stored_hash: Optional[str],
    *,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """Check ``candidate`` against ``stored_hash``.

    Malformed hashes and any other failure during comparison count as a
    mismatch rather than an error.
    """
    log = logger or LOGGER
    if not candidate or not stored_hash:
        return False
    try:
        return check_password_hash(stored_hash, candidate)
    except Exception:  # noqa: BLE001
        log.debug("Passcode comparison failed against a malformed hash", exc_info=True)
        return False
