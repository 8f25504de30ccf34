from __future__ import annotations

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password: str) -> str:
    return generate_password_hash(password or "")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password or "")
    except ValueError:
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False
